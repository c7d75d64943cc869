"""Resolver settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration. Every
field can be set through an environment variable prefixed with
``SNAPSHOT_RESOLVER_`` or through an optional ``.env`` file.

Usage::

    from snapshot_resolver.config.settings import get_settings

    settings = get_settings()
    timeout = settings.request_timeout
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from snapshot_resolver.wayback._fetcher import validate_endpoint_url
from snapshot_resolver.wayback.config import (
    WB_AVAILABILITY_URL,
    WB_DEFAULT_TIMEOUT,
    WB_DEFAULT_USER_AGENT,
)


class Settings(BaseSettings):
    """Resolver configuration backed by environment variables and an optional .env file.

    All fields have defaults, so the resolver works with no configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="SNAPSHOT_RESOLVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    availability_url: str = WB_AVAILABILITY_URL
    """Availability endpoint queried for the closest snapshot.  Must be ``https``;
    redirects are not followed."""

    request_timeout: float = Field(default=WB_DEFAULT_TIMEOUT, gt=0, allow_inf_nan=False)
    """Upper bound, in seconds, on each availability request."""

    user_agent: str = WB_DEFAULT_USER_AGENT
    """``User-Agent`` header sent with every request."""

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    @field_validator("availability_url")
    @classmethod
    def _require_https(cls, value: str) -> str:
        return validate_endpoint_url(value)


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Call ``get_settings.cache_clear()`` in tests after patching the
    environment.
    """
    return Settings()
