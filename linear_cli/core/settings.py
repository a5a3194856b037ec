"""CLI configuration loaded from LINEAR_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import click
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from linear_cli.core.models.cache import DEFAULT_TTL_SECONDS

APP_NAME = "linear-cli"
DEFAULT_API_URL = "https://api.linear.app/graphql"


def _default_config_dir() -> Path:
    return Path(click.get_app_dir(APP_NAME))


class LinearSettings(BaseSettings):
    """Linear CLI settings.

    All fields are read from environment variables with the ``LINEAR_``
    prefix.  For example, ``LINEAR_LOG_LEVEL=DEBUG`` maps to ``log_level``.

    ``LINEAR_API_KEY`` is the credential override: when set and non-empty it
    is used instead of the current workspace, and the workspace registry is
    not consulted at all.
    """

    model_config = SettingsConfigDict(
        env_prefix="LINEAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"

    # -- Credentials -----------------------------------------------------------
    api_key: SecretStr | None = None

    # -- API -------------------------------------------------------------------
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0
    """Seconds before an API request is abandoned."""

    # -- Local state -----------------------------------------------------------
    config_dir: Path = Field(default_factory=_default_config_dir)
    """Directory holding ``config.json`` (the workspace registry)."""

    cache_dir: Path | None = None
    """Cache directory.  Defaults to ``{config_dir}/cache``."""

    cache_ttl: int = Field(default=DEFAULT_TTL_SECONDS, ge=0)
    """TTL in seconds applied to newly written cache entries."""

    # -- Helpers ---------------------------------------------------------------

    def resolve_cache_dir(self) -> Path:
        return self.cache_dir or self.config_dir / "cache"

    def env_api_key(self) -> str | None:
        """Return the override key, or ``None`` when unset or empty."""
        if self.api_key is None:
            return None
        return self.api_key.get_secret_value() or None


@lru_cache(maxsize=1)
def get_settings() -> LinearSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return LinearSettings()
