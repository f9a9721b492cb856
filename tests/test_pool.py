import random
from collections import Counter

import pytest

from raffle.draw.pool import DrawPool, PoolDesyncError


@pytest.mark.parametrize(
    "universe_size, wheel_capacity",
    [(20, 8), (5, 8), (8, 8), (1, 1), (50, 3)],
)
def test_initialize_fills_wheel_from_full_universe(universe_size, wheel_capacity):
    pool = DrawPool(universe_size, wheel_capacity, rng=random.Random(0))

    assert pool.universe == tuple(range(1, universe_size + 1))
    assert pool.remaining == pool.universe
    assert pool.drawn == ()
    assert len(pool.visible) == min(wheel_capacity, universe_size)
    assert len(set(pool.visible)) == len(pool.visible)
    assert set(pool.visible) <= set(pool.remaining)


def test_initialize_rejects_empty_sizes():
    with pytest.raises(ValueError):
        DrawPool(0, 8)
    with pytest.raises(ValueError):
        DrawPool(20, 0)


def test_record_winner_moves_identifier_to_drawn(rng):
    pool = DrawPool(20, 8, rng=rng)
    winner = pool.visible[3]

    pool.record_winner(winner)

    assert pool.remaining_count == 19
    assert pool.drawn == (winner,)
    assert winner not in pool.remaining
    assert winner not in pool.visible
    assert len(pool.visible) == 7
    pool.check_invariants()


def test_record_winner_twice_is_a_desync(rng):
    pool = DrawPool(20, 8, rng=rng)
    winner = pool.visible[0]
    pool.record_winner(winner)

    with pytest.raises(PoolDesyncError):
        pool.record_winner(winner)


def test_record_unknown_identifier_fails_as_assertion(rng):
    pool = DrawPool(20, 8, rng=rng)

    with pytest.raises(AssertionError):
        pool.record_winner(21)
    assert pool.remaining_count == 20
    assert pool.drawn == ()


def test_drawing_everything_conserves_identifiers(rng):
    pool = DrawPool(20, 8, rng=rng)

    while not pool.is_exhausted:
        pool.record_winner(pool.visible[0])
        assert len(pool.drawn) + pool.remaining_count == 20
        assert not set(pool.drawn) & set(pool.remaining)
        pool.populate_visible()
        assert len(pool.visible) == min(8, pool.remaining_count)
        pool.check_invariants()

    assert sorted(pool.drawn) == list(range(1, 21))
    assert len(set(pool.drawn)) == 20
    assert pool.visible == ()


def test_wheel_shrinks_once_fewer_than_capacity_remain(rng):
    pool = DrawPool(10, 8, rng=rng)
    for _ in range(5):
        pool.record_winner(pool.visible[0])
        pool.populate_visible()

    assert pool.remaining_count == 5
    assert len(pool.visible) == 5
    assert set(pool.visible) == set(pool.remaining)


def test_repopulating_varies_the_wheel():
    pool = DrawPool(20, 8, rng=random.Random(123))
    wheels = [pool.populate_visible() for _ in range(200)]

    assert len(set(wheels)) > 1
    # Same members, different order also counts as a new wheel
    assert len({tuple(sorted(w)) for w in wheels}) > 1

    appearances = Counter(n for wheel in wheels for n in wheel)
    assert set(appearances) == set(range(1, 21))
    # Each number is expected on 200 * 8 / 20 = 80 wheels
    for count in appearances.values():
        assert 40 < count < 120


def test_reset_restores_full_pool(rng):
    pool = DrawPool(20, 8, rng=rng)
    for _ in range(3):
        pool.record_winner(pool.visible[0])

    pool.reset()

    assert pool.remaining == tuple(range(1, 21))
    assert pool.drawn == ()
    assert len(pool.visible) == 8
    pool.check_invariants()


def test_check_invariants_detects_corruption(rng):
    pool = DrawPool(5, 3, rng=rng)
    pool._drawn.append(pool.remaining[0])

    with pytest.raises(PoolDesyncError):
        pool.check_invariants()
