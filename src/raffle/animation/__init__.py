"""Animation module for the raffle wheel."""

from raffle.animation.easing import Easing, cubic_bezier, get_easing, interpolate
from raffle.animation.tween import PlayState, RotationTween

__all__ = [
    # Easing
    "Easing",
    "cubic_bezier",
    "get_easing",
    "interpolate",
    # Tween
    "PlayState",
    "RotationTween",
]
