"""
Configuration management

Centralized settings using Pydantic BaseSettings for type-safe configuration
with environment variable support.

Settings are resolved once and handed to the engine at construction time;
nothing in the update core reads configuration from global state.
"""

import logging
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .paths import get_cache_file, get_package_root

logger = logging.getLogger(__name__)

SIX_HOURS = 6 * 60 * 60


class Settings(BaseSettings):
    """
    Updater settings with environment variable support

    Settings can be overridden via environment variables:
    - PLUGIN_UPDATER_AUTH_TOKEN=ghp_xxx
    - PLUGIN_UPDATER_REPOSITORY=acme/widget
    - PLUGIN_UPDATER_RELEASE_MODE=latest_only
    """

    # Credential (absent disables authenticated requests)
    auth_token: str | None = None
    auth_scheme: Literal["token", "Bearer"] = "token"
    strict_token_validation: bool = True

    # Repository ("owner/repo" or a project URL); falls back to the Plugin URI header
    repository: str | None = None

    # GitHub API
    api_host: str = "api.github.com"
    release_mode: Literal["first_of_list", "latest_only"] = "first_of_list"
    request_timeout: float = 10.0
    cache_ttl_seconds: int = SIX_HOURS
    cache_file: Path | None = None

    # Output and filesystem behaviour
    sanitize_output_fields: bool = True
    replace_mode: Literal["remove_then_move", "atomic_replace"] = "remove_then_move"

    # Host identity (User-Agent and "tested up to" fallback)
    host_name: str = "WordPress"
    host_version: str = "6.5"
    host_url: str = ""

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_UPDATER_",
        env_file=str(get_package_root() / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("auth_token", "repository", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        """Treat empty strings from the environment as unset"""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def api_base_url(self) -> str:
        """Base URL of the trusted API host"""
        return f"https://{self.api_host}"

    @property
    def user_agent(self) -> str:
        """User-Agent sent with release requests"""
        return f"{self.host_name}/{self.host_version}; {self.host_url}".rstrip("; ")

    def resolved_cache_file(self) -> Path:
        """Cache file path, defaulting to the user data directory"""
        return self.cache_file or get_cache_file()


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get updater settings (singleton)

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.debug(
            f"Loaded settings: release_mode={_settings.release_mode}, "
            f"api_host={_settings.api_host}, token={'set' if _settings.auth_token else 'unset'}"
        )
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment"""
    global _settings
    _settings = None
