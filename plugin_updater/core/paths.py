"""
Path resolution for the plugin updater.

Writable locations (the release cache) are resolved from the environment
so the updater never writes next to the installed package.
"""

import os
from pathlib import Path

from .exceptions import ConfigurationError


def get_package_root() -> Path:
    """
    Get the directory containing the plugin_updater package.

    Returns:
        Path: Absolute path to the project root
    """
    # This file is at: plugin_updater/core/paths.py
    return Path(__file__).parent.parent.parent.resolve()


def get_user_data_dir() -> Path:
    """
    Get the user's data directory for cached release metadata.

    Priority order:
    1. PLUGIN_UPDATER_DATA environment variable
    2. XDG_DATA_HOME/plugin-updater (if XDG_DATA_HOME is set)
    3. ~/.plugin-updater/ (fallback)

    Returns:
        Path: Absolute path to user data directory

    Raises:
        ConfigurationError: If the directory cannot be created
    """
    env_data = os.environ.get("PLUGIN_UPDATER_DATA")
    if env_data:
        user_dir = Path(env_data).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME")
        if xdg_data_home:
            user_dir = Path(xdg_data_home) / "plugin-updater"
        else:
            user_dir = Path.home() / ".plugin-updater"

    try:
        user_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot create data directory {user_dir}: {e}",
            recovery_hint="Set PLUGIN_UPDATER_DATA to a writable directory",
        ) from e
    return user_dir


def get_cache_file() -> Path:
    """
    Get the default release cache file.

    Returns:
        Path: <user data dir>/release-cache.json
    """
    return get_user_data_dir() / "release-cache.json"
