"""Service configuration loaded from RELAY_* environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class RelaySettings(BaseSettings):
    """Chat relay settings.

    All fields are read from environment variables with the ``RELAY_`` prefix.
    For example, ``RELAY_LOG_LEVEL=DEBUG`` maps to ``log_level``.

    LLM provider keys (GOOGLE_API_KEY, OPENAI_API_KEY, ...) are **not**
    managed here -- they are read directly by pydantic-ai's providers.
    """

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"
    log_json: bool = False

    # -- Agents ----------------------------------------------------------------
    default_model: str = "google-gla:gemini-2.5-flash"
    """Provider-qualified model used by every built-in agent."""

    tool_timeout: float = 10.0
    """Seconds before an outbound skill request (book / price lookup) gives up."""

    # -- Server ----------------------------------------------------------------
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    cors_origins: list[str] = ["*"]

    sse_ping_interval: int = 15
    """Seconds between SSE keep-alive comments on an idle stream."""


def get_settings() -> RelaySettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> RelaySettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return RelaySettings()


# Apply lru_cache at runtime so the function is only called once.
from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
