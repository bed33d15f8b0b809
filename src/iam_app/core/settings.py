"""
Centralized settings for iam-app.

All fields can be set via ``IAM_*`` environment variables (e.g.
``IAM_ADDRESS=typedb.internal:1729``) or through a ``.env`` file in the
working directory.  :func:`get_settings` returns one cached, validated
instance.

Examples:
    >>> from iam_app.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.database
    'sample_app_db'
"""

from __future__ import annotations

from enum import Enum
from importlib import resources
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Edition(str, Enum):
    """TypeDB server edition to connect to."""

    CORE = "core"
    CLOUD = "cloud"


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _bundled(name: str) -> Path:
    """Path of a ``.tql`` file shipped in ``iam_app/data``."""
    return Path(str(resources.files("iam_app") / "data" / name))


class IamAppSettings(BaseSettings):
    """iam-app configuration."""

    model_config = SettingsConfigDict(
        env_prefix="IAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Server ───────────────────────────────────────────────────
    address: str = Field(default="127.0.0.1:1729", description="host:port of the TypeDB server")
    edition: Edition = Field(default=Edition.CORE)
    database: str = Field(default="sample_app_db")

    # ── Cloud credentials ────────────────────────────────────────
    username: str = Field(default="admin")
    password: str = Field(default="password")
    tls_enabled: bool = Field(default=True)
    tls_root_ca_path: Path | None = Field(default=None)

    # ── Dataset ──────────────────────────────────────────────────
    schema_file: Path = Field(default_factory=lambda: _bundled("iam-schema.tql"))
    data_file: Path = Field(default_factory=lambda: _bundled("iam-data-single-query.tql"))
    expected_user_count: int = Field(default=3, ge=0)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="console", description="console or json")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    @model_validator(mode="after")
    def _validate_credentials(self) -> IamAppSettings:
        if self.edition == Edition.CLOUD and not (self.username and self.password):
            raise ValueError("cloud edition requires IAM_USERNAME and IAM_PASSWORD")
        if self.log_format not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got {self.log_format!r}")
        return self

    @property
    def is_cloud(self) -> bool:
        return self.edition == Edition.CLOUD


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, IamAppSettings] = {}


def get_settings() -> IamAppSettings:
    """Load, validate, and cache an :class:`IamAppSettings` instance.

    Raises :class:`~iam_app.core.errors.ConfigError` when validation fails.
    """
    from pydantic import ValidationError

    from iam_app.core.errors import ConfigError

    if "default" in _settings_cache:
        return _settings_cache["default"]

    try:
        settings = IamAppSettings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}", cause=exc) from exc

    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
