"""Draw pool: the identifiers still in play and the subset shown on the wheel."""

from typing import Optional
import logging
import random

logger = logging.getLogger(__name__)


class PoolDesyncError(AssertionError):
    """Raised when the pool is asked to record an identifier it does not hold.

    This only happens when the caller and the pool disagree about what is on
    the wheel, which is a programming error rather than a recoverable state.
    """


class DrawPool:
    """Selection-without-replacement pool.

    Every identifier of the universe is either remaining or drawn, never both.
    The visible subset (the wheel) is a random sample of the remaining pool,
    at most ``wheel_capacity`` long, drawn afresh on every population.

    Args:
        universe_size: Number of identifiers, numbered ``1..universe_size``
        wheel_capacity: Maximum number of segments on the wheel
        rng: Random source; a private unseeded generator when omitted
    """

    def __init__(
        self,
        universe_size: int = 20,
        wheel_capacity: int = 8,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._universe: tuple[int, ...] = ()
        self._remaining: list[int] = []
        self._visible: list[int] = []
        self._drawn: list[int] = []
        self._wheel_capacity = 0
        self.initialize(universe_size, wheel_capacity)

    def initialize(self, universe_size: int, wheel_capacity: int) -> None:
        """Build a fresh universe ``1..universe_size`` and populate the wheel."""
        if universe_size < 1:
            raise ValueError("universe_size must be at least 1")
        if wheel_capacity < 1:
            raise ValueError("wheel_capacity must be at least 1")

        self._universe = tuple(range(1, universe_size + 1))
        self._wheel_capacity = wheel_capacity
        self._remaining = list(self._universe)
        self._drawn = []
        self.populate_visible()
        logger.info(
            f"Draw pool initialized: {universe_size} identifiers, "
            f"wheel of {wheel_capacity}"
        )

    # Read-only views

    @property
    def universe(self) -> tuple[int, ...]:
        return self._universe

    @property
    def wheel_capacity(self) -> int:
        return self._wheel_capacity

    @property
    def remaining(self) -> tuple[int, ...]:
        """Identifiers not yet drawn, in universe order."""
        return tuple(self._remaining)

    @property
    def visible(self) -> tuple[int, ...]:
        """Identifiers currently on the wheel, in segment order."""
        return tuple(self._visible)

    @property
    def drawn(self) -> tuple[int, ...]:
        """Winners in the order they were drawn."""
        return tuple(self._drawn)

    @property
    def remaining_count(self) -> int:
        return len(self._remaining)

    @property
    def is_exhausted(self) -> bool:
        return not self._remaining

    # Operations

    def populate_visible(self) -> tuple[int, ...]:
        """Resample the wheel from the remaining pool.

        ``random.sample`` returns a uniformly random ordered selection, the same
        distribution as shuffling the pool and keeping the head.
        """
        if not self._remaining:
            self._visible = []
            logger.debug("Pool exhausted, wheel emptied")
        else:
            size = min(self._wheel_capacity, len(self._remaining))
            self._visible = self._rng.sample(self._remaining, size)
            logger.debug(f"Wheel populated: {self._visible}")
        return self.visible

    def record_winner(self, identifier: int) -> None:
        """Move ``identifier`` from the remaining pool to the drawn list.

        The winner also leaves the visible subset straight away; the wheel is
        only resampled when :meth:`populate_visible` is called.

        Raises:
            PoolDesyncError: If ``identifier`` is not in the remaining pool
        """
        if identifier not in self._remaining:
            raise PoolDesyncError(
                f"Identifier {identifier} is not in the remaining pool"
            )

        self._remaining.remove(identifier)
        if identifier in self._visible:
            self._visible.remove(identifier)
        self._drawn.append(identifier)
        logger.info(
            f"Winner recorded: {identifier} ({len(self._remaining)} remaining)"
        )

    def reset(self) -> None:
        """Return every identifier to the pool and repopulate the wheel."""
        self._remaining = list(self._universe)
        self._drawn = []
        self.populate_visible()
        logger.info("Draw pool reset")

    def check_invariants(self) -> None:
        """Assert the pool bookkeeping is consistent.

        Raises:
            PoolDesyncError: If any identifier is lost, duplicated or misplaced
        """
        remaining = set(self._remaining)
        drawn = set(self._drawn)
        if len(remaining) != len(self._remaining) or len(drawn) != len(self._drawn):
            raise PoolDesyncError("Duplicate identifiers in pool")
        if remaining & drawn:
            raise PoolDesyncError(f"Identifiers both remaining and drawn: {remaining & drawn}")
        if remaining | drawn != set(self._universe):
            raise PoolDesyncError("Remaining and drawn do not cover the universe")
        if not set(self._visible) <= remaining:
            raise PoolDesyncError("Wheel shows identifiers that are not remaining")
