"""Configuration management for bpm."""

from bpm.core.config.loader import ConfigLoader
from bpm.core.config.settings import (
    GitSettings,
    LoggingSettings,
    ProjectSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ConfigLoader",
    "GitSettings",
    "LoggingSettings",
    "ProjectSettings",
    "Settings",
    "get_settings",
]
