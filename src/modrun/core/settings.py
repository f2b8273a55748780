"""Settings for the modrun entry point.

The engine starts the entry point with the session coordinates in the
environment. Everything else has a default that works for a module laid out
as ``<root>/src/main/...``.

Fields
──────
session_host     : Engine session host
session_port     : Engine session port (also ``DAGGER_SESSION_PORT``)
session_token    : Engine session token (also ``DAGGER_SESSION_TOKEN``)
request_timeout  : Per-request timeout in seconds, ``None`` waits forever
source_dirname   : Name of the module source directory
module_namespace : Package prefix stripped from object names
log_level        : Structlog log level
log_format       : ``console`` or ``json``

Tags:
    settings, configuration, pydantic, environment, modrun

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from modrun.core.errors import ConfigError

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["console", "json"]


class ModrunSettings(BaseSettings):
    """Entry point configuration, read from ``MODRUN_*`` variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="MODRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Engine session ───────────────────────────────────────────
    session_host: str = Field(default="127.0.0.1")
    session_port: int | None = Field(
        default=None,
        validation_alias=AliasChoices("MODRUN_SESSION_PORT", "DAGGER_SESSION_PORT"),
    )
    session_token: str = Field(
        default="",
        validation_alias=AliasChoices("MODRUN_SESSION_TOKEN", "DAGGER_SESSION_TOKEN"),
    )
    request_timeout: float | None = Field(default=None, description="Seconds; unset waits forever")

    # ── Module layout ────────────────────────────────────────────
    source_dirname: str = Field(default="src")
    module_namespace: str = Field(default="main")

    # ── Logging ──────────────────────────────────────────────────
    # The engine shows the process stderr to the caller, keep it quiet by default.
    log_level: LogLevel = Field(default="WARNING")
    log_format: LogFormat = Field(default="console")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def session_url(self) -> str:
        return f"http://{self.session_host}:{self.session_port}/query"


_settings_cache: dict[str, ModrunSettings] = {}


def get_settings(*, _force_reload: bool = False) -> ModrunSettings:
    """Load, validate, and cache a :class:`ModrunSettings` instance."""
    if _force_reload or "default" not in _settings_cache:
        try:
            _settings_cache["default"] = ModrunSettings()
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}", cause=e) from e
    return _settings_cache["default"]


def clear_settings_cache() -> None:
    """Drop the cached settings (for testing)."""
    _settings_cache.clear()
