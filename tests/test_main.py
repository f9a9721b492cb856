import asyncio

import pytest

from raffle.config.settings import DrawSettings, Settings
from raffle.draw.pool import DrawPool, PoolDesyncError
from raffle.main import apply_overrides, main, parse_args, run_draw


@pytest.fixture
def small_settings():
    return Settings(draw=DrawSettings(universe_size=4, wheel_capacity=3, seed=1))


def test_run_draw_draws_every_number(small_settings, capsys):
    drawn = asyncio.run(run_draw(small_settings, time_scale=0.0001))

    assert sorted(drawn) == [1, 2, 3, 4]
    out = capsys.readouterr().out
    assert "Winner #4" in out


def test_run_draw_is_reproducible_with_a_seed(small_settings):
    first = asyncio.run(run_draw(small_settings, time_scale=0.0001))
    second = asyncio.run(run_draw(small_settings, time_scale=0.0001))

    assert first == second


def test_run_draw_writes_a_frame_per_spin(small_settings, tmp_path):
    asyncio.run(run_draw(small_settings, time_scale=0.0001, frames_dir=tmp_path))

    frames = sorted(tmp_path.glob("*.png"))
    assert len(frames) == 4
    assert frames[0].name.startswith("spin_001_")


def test_parse_args_defaults():
    args = parse_args([])

    assert args.universe is None
    assert args.wheel is None
    assert args.seed is None
    assert args.speed == 1.0
    assert args.frames is None
    assert args.debug is False


def test_apply_overrides_only_touches_given_values():
    settings = Settings(draw=DrawSettings(universe_size=20, wheel_capacity=8))
    args = parse_args(["--universe", "10", "--seed", "3", "--debug"])

    updated = apply_overrides(settings, args)

    assert updated.draw.universe_size == 10
    assert updated.draw.wheel_capacity == 8
    assert updated.draw.seed == 3
    assert updated.debug is True
    assert settings.draw.universe_size == 20


def test_main_runs_a_full_draw(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("raffle.main.get_settings", lambda: Settings())

    main(["--universe", "3", "--wheel", "2", "--seed", "5", "--speed", "0.0001"])

    out = capsys.readouterr().out
    assert "All numbers drawn:" in out
    assert out.count("Winner #") == 3


def broken_record_winner(self, identifier):
    raise PoolDesyncError(f"lost track of {identifier}")


def test_run_draw_fails_when_a_timer_raises(small_settings, monkeypatch):
    monkeypatch.setattr(DrawPool, "record_winner", broken_record_winner)

    with pytest.raises(PoolDesyncError, match="lost track"):
        asyncio.run(asyncio.wait_for(run_draw(small_settings, time_scale=0.0001), timeout=5))


def test_main_exits_on_fatal_error(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("raffle.main.get_settings", lambda: Settings())
    monkeypatch.setattr(DrawPool, "record_winner", broken_record_winner)

    with pytest.raises(SystemExit) as excinfo:
        main(["--universe", "3", "--seed", "5", "--speed", "0.0001"])

    assert excinfo.value.code == 1
