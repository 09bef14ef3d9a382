"""
Core module - configuration, paths, exceptions and validation

Provides foundational components used across the updater:
- Base exception hierarchy
- Configuration management
- Sanitization helpers
"""

from plugin_updater.core.config import Settings, get_settings, reset_settings
from plugin_updater.core.exceptions import (
    ConfigurationError,
    PackageRelocationError,
    ReleaseFetchError,
    UpdaterError,
)

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "UpdaterError",
    "ConfigurationError",
    "ReleaseFetchError",
    "PackageRelocationError",
]
