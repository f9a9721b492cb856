"""Wheel rendering: the dial, its rim, the hub and the pointer.

The dial is painted per pixel with numpy: each pixel's angle is mapped back
through the current rotation to find which segment covers it, using the same
geometry as :mod:`raffle.draw.wheel`.
"""

from pathlib import Path
from typing import Optional, Sequence
import logging
import math

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from raffle.config.settings import RenderSettings
from raffle.draw.wheel import FULL_TURN, SEGMENT_ORIGIN, segment_angle, segment_center_angle
from raffle.graphics.primitives import (
    Buffer,
    clear,
    draw_circle,
    draw_triangle_down,
    new_buffer,
    polar_grid,
)

logger = logging.getLogger(__name__)

RIM_FRACTION = 0.06
HUB_FRACTION = 0.18
LABEL_RADIUS_FRACTION = 0.64


def _geometry(buffer: Buffer) -> tuple[float, float, float]:
    h, w = buffer.shape[:2]
    cx = (w - 1) / 2
    cy = (h - 1) / 2
    # Leave room above the dial for the pointer
    radius = min(w, h) / 2 - max(2.0, min(w, h) * 0.04)
    return cx, cy, radius


def segment_colors(count: int, palette: Sequence[tuple[int, int, int]]) -> np.ndarray:
    """Color of each segment, cycling through ``palette``."""
    return np.array([palette[i % len(palette)] for i in range(count)], dtype=np.uint8)


def render_wheel(
    buffer: Buffer,
    segments: Sequence[int],
    rotation: float,
    settings: Optional[RenderSettings] = None,
) -> None:
    """Draw the wheel into ``buffer``.

    Args:
        buffer: Target numpy array (height, width, 3)
        segments: Identifiers on the wheel in segment order; empty draws a blank dial
        rotation: Absolute dial rotation in degrees
        settings: Colors; defaults when omitted
    """
    settings = settings or RenderSettings()
    cx, cy, radius = _geometry(buffer)
    rim = radius * RIM_FRACTION
    dial_radius = radius - rim

    clear(buffer, settings.background)
    dist, angle = polar_grid(buffer, cx, cy)

    draw_circle(buffer, cx, cy, radius, settings.rim_color)

    dial = dist <= dial_radius
    if segments:
        count = len(segments)
        dial_angle = (angle - rotation - SEGMENT_ORIGIN) % FULL_TURN
        index = np.floor(dial_angle / segment_angle(count)).astype(np.int64) % count
        colors = segment_colors(count, settings.segment_colors)
        buffer[dial] = colors[index[dial]]
    else:
        buffer[dial] = settings.empty_color

    draw_circle(buffer, cx, cy, radius * HUB_FRACTION, settings.rim_color)
    draw_circle(buffer, cx, cy, radius * HUB_FRACTION * 0.75, settings.hub_color)

    pointer_width = max(4.0, radius * 0.2)
    draw_triangle_down(
        buffer,
        cx,
        0.0,
        pointer_width,
        pointer_width * 1.4,
        settings.pointer_color,
    )


def label_positions(
    segments: Sequence[int],
    rotation: float,
    cx: float,
    cy: float,
    radius: float,
) -> list[tuple[int, float, float]]:
    """Screen position of each segment's label as (identifier, x, y)."""
    positions = []
    for i, identifier in enumerate(segments):
        theta = math.radians(segment_center_angle(i, len(segments)) + rotation)
        positions.append((
            identifier,
            cx + radius * math.cos(theta),
            cy + radius * math.sin(theta),
        ))
    return positions


def wheel_image(
    segments: Sequence[int],
    rotation: float,
    settings: Optional[RenderSettings] = None,
) -> Image.Image:
    """Render the wheel with number labels as a Pillow image."""
    settings = settings or RenderSettings()
    buffer = new_buffer(settings.size, settings.size, settings.background)
    render_wheel(buffer, segments, rotation, settings)

    image = Image.fromarray(buffer)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()
    cx, cy, radius = _geometry(buffer)

    if not segments:
        text = "Empty"
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        draw.text(
            (cx - (right - left) / 2, cy + radius * 0.45),
            text,
            fill=(255, 255, 255),
            font=font,
        )
        return image

    for identifier, x, y in label_positions(
        segments, rotation, cx, cy, radius * LABEL_RADIUS_FRACTION
    ):
        text = str(identifier)
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        draw.text(
            (x - (right - left) / 2, y - (bottom - top) / 2),
            text,
            fill=(255, 255, 255),
            font=font,
        )
    return image


def save_wheel_image(
    path: str | Path,
    segments: Sequence[int],
    rotation: float,
    settings: Optional[RenderSettings] = None,
) -> Path:
    """Render the wheel and write it as a PNG. Returns the written path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wheel_image(segments, rotation, settings).save(path, format="PNG")
    logger.debug(f"Wheel image saved to {path}")
    return path
