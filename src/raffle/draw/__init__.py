"""Raffle draw: pool bookkeeping, winner selection and the session cycle."""

from .pool import DrawPool, PoolDesyncError
from .wheel import (
    POINTER_ANGLE,
    SpinPlan,
    WheelSpinner,
    segment_angle,
    segment_at_pointer,
    segment_center_angle,
    segment_span,
    target_rotation,
)
from .session import DrawSession, DrawSnapshot

__all__ = [
    "DrawPool",
    "PoolDesyncError",
    "POINTER_ANGLE",
    "SpinPlan",
    "WheelSpinner",
    "segment_angle",
    "segment_at_pointer",
    "segment_center_angle",
    "segment_span",
    "target_rotation",
    "DrawSession",
    "DrawSnapshot",
]
