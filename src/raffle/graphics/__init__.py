"""Graphics for the raffle wheel."""

from raffle.graphics.primitives import clear, draw_circle, draw_triangle_down, new_buffer
from raffle.graphics.wheel import render_wheel, save_wheel_image, wheel_image

__all__ = [
    # Primitives
    "clear",
    "draw_circle",
    "draw_triangle_down",
    "new_buffer",
    # Wheel
    "render_wheel",
    "save_wheel_image",
    "wheel_image",
]
