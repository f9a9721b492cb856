"""Basic drawing primitives on numpy RGB buffers."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Allocate a (height, width, 3) buffer filled with ``color``."""
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def clear(buffer: Buffer, color: Color = (0, 0, 0)) -> None:
    """Clear buffer to a solid color."""
    buffer[:, :] = color


def polar_grid(buffer: Buffer, cx: float, cy: float) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Distance and angle of every pixel relative to (cx, cy).

    Angles are in degrees in [-180, 180], measured clockwise from the +x
    axis because screen y grows downwards.
    """
    h, w = buffer.shape[:2]
    y_indices, x_indices = np.mgrid[:h, :w]
    dx = x_indices - cx
    dy = y_indices - cy
    return np.hypot(dx, dy), np.degrees(np.arctan2(dy, dx))


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    filled: bool = True,
    thickness: float = 1.0,
) -> None:
    """Draw a circle on the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        cx: Center x coordinate
        cy: Center y coordinate
        radius: Circle radius in pixels
        color: RGB color tuple
        filled: If True, fill circle; if False, draw a ring of ``thickness``
    """
    h, w = buffer.shape[:2]
    y_indices, x_indices = np.ogrid[:h, :w]
    dist_sq = (x_indices - cx) ** 2 + (y_indices - cy) ** 2

    if filled:
        mask = dist_sq <= radius ** 2
    else:
        inner = max(0.0, radius - thickness)
        mask = (dist_sq <= radius ** 2) & (dist_sq > inner ** 2)
    buffer[mask] = color


def draw_triangle_down(
    buffer: Buffer,
    cx: float,
    top: float,
    width: float,
    height: float,
    color: Color,
) -> None:
    """Draw an isosceles triangle with a flat top edge and the apex below it.

    Args:
        buffer: Target numpy array (height, width, 3)
        cx: Horizontal center of the triangle
        top: y coordinate of the flat edge
        width: Length of the flat edge
        height: Distance from the flat edge to the apex
        color: RGB color tuple
    """
    if height <= 0 or width <= 0:
        return

    h, w = buffer.shape[:2]
    y_indices, x_indices = np.ogrid[:h, :w]
    depth = (y_indices - top) / height
    half_width = (width / 2) * (1 - depth)
    mask = (depth >= 0) & (depth <= 1) & (np.abs(x_indices - cx) <= half_width)
    buffer[mask] = color
