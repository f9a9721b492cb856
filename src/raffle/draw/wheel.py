"""Winner selection and rotation targets for the prize wheel.

Geometry (screen coordinates, angles in degrees, clockwise positive):

* Segment ``i`` of ``n`` spans ``[i*s - 90, (i+1)*s - 90)`` with ``s = 360/n``,
  so segment 0 starts at the top of the dial.
* Rotating the dial by ``R`` moves a point at angle ``A`` to ``A + R``.
* The pointer sits at 270 degrees (the top).

A spin picks a segment, computes the rotation that brings its centre under
the pointer, then adds whole turns and a little jitter. The result is an
absolute angle: it keeps growing from spin to spin and is never wrapped back
into ``[0, 360)``, otherwise an animated dial would jump backwards.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import math
import random

logger = logging.getLogger(__name__)

FULL_TURN = 360.0
SEGMENT_ORIGIN = -90.0
POINTER_ANGLE = 270.0


def segment_angle(count: int) -> float:
    """Angular width of one of ``count`` equal segments."""
    if count < 1:
        raise ValueError("count must be at least 1")
    return FULL_TURN / count


def segment_span(index: int, count: int) -> tuple[float, float]:
    """Start and end angle of segment ``index`` on an unrotated dial."""
    width = segment_angle(count)
    return index * width + SEGMENT_ORIGIN, (index + 1) * width + SEGMENT_ORIGIN


def segment_center_angle(index: int, count: int) -> float:
    """Angle of the middle of segment ``index`` on an unrotated dial."""
    width = segment_angle(count)
    return index * width + width / 2 + SEGMENT_ORIGIN


def target_rotation(index: int, count: int, pointer_angle: float = POINTER_ANGLE) -> float:
    """Rotation in ``[0, 360)`` that puts the centre of ``index`` under the pointer."""
    return (pointer_angle - segment_center_angle(index, count)) % FULL_TURN


def segment_at_pointer(rotation: float, count: int, pointer_angle: float = POINTER_ANGLE) -> int:
    """Index of the segment under the pointer once the dial is rotated by ``rotation``."""
    width = segment_angle(count)
    dial_angle = (pointer_angle - rotation - SEGMENT_ORIGIN) % FULL_TURN
    return int(math.floor(dial_angle / width)) % count


@dataclass(frozen=True)
class SpinPlan:
    """Everything decided when a spin starts.

    Attributes:
        segments: Identifiers on the wheel, in segment order, when the spin began
        winner_index: Segment chosen
        winner: Identifier in that segment
        start_rotation: Absolute rotation before the spin
        full_spins: Whole turns added for effect, in degrees
        target_rotation: Rotation in [0, 360) past ``start_rotation`` that centres
            the winner under the pointer
        offset: Jitter added so the dial does not always stop dead centre
        duration_ms: How long the animation to ``final_rotation`` lasts
    """

    segments: tuple[int, ...]
    winner_index: int
    winner: int
    start_rotation: float
    full_spins: float
    target_rotation: float
    offset: float
    duration_ms: float

    @property
    def final_rotation(self) -> float:
        """Absolute rotation the dial ends on."""
        return self.start_rotation + self.full_spins + self.target_rotation + self.offset

    @property
    def landing_angle(self) -> float:
        """Final rotation folded into ``[0, 360)``."""
        return self.final_rotation % FULL_TURN

    @property
    def segment_angle(self) -> float:
        return segment_angle(len(self.segments))


class WheelSpinner:
    """Picks winners and plans the rotation that reveals them.

    Args:
        rng: Random source; inject a seeded ``random.Random`` for replayable draws
        min_full_spins: Whole turns every spin makes at least
        extra_full_spins: Up to this many further turns, chosen uniformly
        jitter_fraction: Width of the jitter window as a fraction of a segment
        pointer_angle: Where the pointer sits on the dial
        duration_ms: Animation length reported on each plan
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        min_full_spins: int = 5,
        extra_full_spins: int = 2,
        jitter_fraction: float = 0.3,
        pointer_angle: float = POINTER_ANGLE,
        duration_ms: float = 5000.0,
    ) -> None:
        if min_full_spins < 1:
            raise ValueError("min_full_spins must be at least 1")
        if extra_full_spins < 0:
            raise ValueError("extra_full_spins must not be negative")
        if not 0.0 <= jitter_fraction < 1.0:
            raise ValueError("jitter_fraction must be in [0, 1)")

        self._rng = rng or random.Random()
        self.min_full_spins = min_full_spins
        self.extra_full_spins = extra_full_spins
        self.jitter_fraction = jitter_fraction
        self.pointer_angle = pointer_angle
        self.duration_ms = duration_ms

    def plan(self, segments: Sequence[int], current_rotation: float = 0.0) -> Optional[SpinPlan]:
        """Choose a winner among ``segments`` and compute where the dial stops.

        Args:
            segments: Identifiers on the wheel, in segment order
            current_rotation: Absolute rotation the dial is at now

        Returns:
            The spin plan, or None when there is nothing on the wheel
        """
        if not segments:
            logger.debug("Spin requested on an empty wheel")
            return None

        count = len(segments)
        width = segment_angle(count)

        winner_index = self._rng.randrange(count)
        # Measured from where the dial already is, so any start lands on the winner
        target = (
            target_rotation(winner_index, count, self.pointer_angle) - current_rotation
        ) % FULL_TURN

        turns = self.min_full_spins + self._rng.randint(0, self.extra_full_spins)
        full_spins = turns * FULL_TURN

        max_offset = width * self.jitter_fraction
        offset = self._rng.uniform(-max_offset / 2, max_offset / 2)

        plan = SpinPlan(
            segments=tuple(segments),
            winner_index=winner_index,
            winner=segments[winner_index],
            start_rotation=current_rotation,
            full_spins=full_spins,
            target_rotation=target,
            offset=offset,
            duration_ms=self.duration_ms,
        )
        logger.debug(
            f"Spin planned: segment {winner_index}/{count} -> {plan.winner}, "
            f"{turns} turns, final {plan.final_rotation:.2f}"
        )
        return plan
