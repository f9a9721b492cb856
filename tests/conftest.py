import random

import pytest

from raffle.config.settings import DrawSettings
from raffle.core.scheduler import ManualScheduler
from raffle.draw.session import DrawSession


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_session(scheduler):
    def factory(**overrides):
        overrides.setdefault("seed", 7)
        return DrawSession(scheduler, DrawSettings(**overrides))

    return factory


@pytest.fixture
def session(make_session):
    return make_session()
