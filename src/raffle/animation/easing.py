"""Easing functions for the wheel animation.

All functions take a normalized time t (0.0 to 1.0) and return a normalized
progress value.
"""

from enum import Enum, auto
from typing import Callable


class Easing(Enum):
    """Available easing function types."""

    LINEAR = auto()
    EASE_OUT_CUBIC = auto()

    # Long coast, hard brake: CSS cubic-bezier(0.17, 0.67, 0.12, 0.99)
    WHEEL_SPIN = auto()


EasingFunc = Callable[[float], float]


def linear(t: float) -> float:
    """Linear interpolation (no easing)."""
    return t


def ease_out_cubic(t: float) -> float:
    """Decelerate to zero velocity (cubic)."""
    return 1 - pow(1 - t, 3)


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> EasingFunc:
    """Build an easing function equivalent to CSS ``cubic-bezier(x1, y1, x2, y2)``.

    The curve runs from (0, 0) to (1, 1). For a time ``t`` the curve
    parameter ``u`` with ``x(u) == t`` is found by Newton iteration, falling
    back to bisection where the slope is too flat, and ``y(u)`` is returned.

    Args:
        x1, y1: First control point (x must be in [0, 1])
        x2, y2: Second control point (x must be in [0, 1])

    Raises:
        ValueError: If an x coordinate is outside [0, 1]
    """
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError("cubic-bezier x coordinates must be in [0, 1]")

    # Polynomial coefficients of B(u) = a*u^3 + b*u^2 + c*u
    cx = 3 * x1
    bx = 3 * (x2 - x1) - cx
    ax = 1 - cx - bx
    cy = 3 * y1
    by = 3 * (y2 - y1) - cy
    ay = 1 - cy - by

    def sample_x(u: float) -> float:
        return ((ax * u + bx) * u + cx) * u

    def sample_y(u: float) -> float:
        return ((ay * u + by) * u + cy) * u

    def slope_x(u: float) -> float:
        return (3 * ax * u + 2 * bx) * u + cx

    def solve_u(t: float) -> float:
        u = t
        for _ in range(8):
            error = sample_x(u) - t
            if abs(error) < 1e-7:
                return u
            slope = slope_x(u)
            if abs(slope) < 1e-6:
                break
            u -= error / slope

        lo, hi = 0.0, 1.0
        u = t
        for _ in range(50):
            x = sample_x(u)
            if abs(x - t) < 1e-7:
                break
            if x < t:
                lo = u
            else:
                hi = u
            u = (lo + hi) / 2
        return u

    def ease(t: float) -> float:
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0
        return sample_y(solve_u(t))

    return ease


wheel_spin = cubic_bezier(0.17, 0.67, 0.12, 0.99)


_EASING_FUNCTIONS: dict[Easing, EasingFunc] = {
    Easing.LINEAR: linear,
    Easing.EASE_OUT_CUBIC: ease_out_cubic,
    Easing.WHEEL_SPIN: wheel_spin,
}


def get_easing(easing: Easing | str) -> EasingFunc:
    """Get an easing function by enum or name.

    Args:
        easing: Easing enum value or string name (e.g., "ease_out_cubic")

    Returns:
        The easing function

    Raises:
        ValueError: If easing name is not recognized
    """
    if isinstance(easing, str):
        try:
            easing = Easing[easing.upper()]
        except KeyError:
            raise ValueError(f"Unknown easing function: {easing}") from None

    func = _EASING_FUNCTIONS.get(easing)
    if func is None:
        raise ValueError(f"No function registered for: {easing}")

    return func


def interpolate(start: float, end: float, t: float, easing: Easing | str = Easing.LINEAR) -> float:
    """Interpolate between two values using an easing function.

    Args:
        start: Starting value
        end: Ending value
        t: Progress (0.0 to 1.0)
        easing: Easing function to use

    Returns:
        Interpolated value
    """
    easing_func = get_easing(easing)
    eased_t = easing_func(max(0.0, min(1.0, t)))
    return start + (end - start) * eased_t
