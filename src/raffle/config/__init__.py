"""Configuration for the raffle draw."""

from .settings import DrawSettings, RenderSettings, Settings, get_settings, reload_settings

__all__ = ["DrawSettings", "RenderSettings", "Settings", "get_settings", "reload_settings"]
