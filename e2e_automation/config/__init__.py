"""Run configuration."""

from .settings import AutomationSettings, load_settings

__all__ = ["AutomationSettings", "load_settings"]
