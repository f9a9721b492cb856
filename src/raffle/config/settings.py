"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support, e.g.
``RAFFLE_DRAW__UNIVERSE_SIZE=50`` or ``RAFFLE_DEBUG=1``.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

RGB = tuple[int, int, int]


class DrawSettings(BaseModel):
    """Draw pool and wheel timing settings."""

    universe_size: int = Field(default=20, ge=1)
    wheel_capacity: int = Field(default=8, ge=1)

    # Timing (milliseconds)
    spin_duration_ms: float = Field(default=5000.0, gt=0)
    refill_delay_ms: float = Field(default=2000.0, ge=0)
    announce_delay_ms: float = Field(default=500.0, ge=0)

    # Spin tuning
    min_full_spins: int = Field(default=5, ge=1)
    extra_full_spins: int = Field(default=2, ge=0)
    jitter_fraction: float = Field(default=0.3, ge=0.0, lt=1.0)
    pointer_angle: float = 270.0

    # Fixed seed for reproducible draws
    seed: Optional[int] = None


class RenderSettings(BaseModel):
    """Wheel image settings."""

    size: int = Field(default=256, ge=32)
    segment_colors: list[RGB] = Field(
        default_factory=lambda: [(220, 38, 38), (22, 163, 74)]  # red, green
    )
    rim_color: RGB = (251, 191, 36)
    pointer_color: RGB = (251, 191, 36)
    hub_color: RGB = (239, 68, 68)
    background: RGB = (12, 26, 12)
    empty_color: RGB = (55, 65, 81)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="RAFFLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    draw: DrawSettings = Field(default_factory=DrawSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()
