# src/config/settings.py — v1
"""Typed cacher configuration loaded from .env via pydantic-settings.

Every field maps to an ``ACTIONCACHE_``-prefixed environment variable,
e.g. ``ACTIONCACHE_MAX_KEY_LENGTH=120``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from actioncache.cache.models import CacherOptions
from actioncache.logging.logger import setup_logging


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class CacherSettings(BaseSettings):
    """Deployment settings for the cacher and its logging."""

    model_config = SettingsConfigDict(
        env_prefix="ACTIONCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Backend ===
    backend: str | None = None

    # === Keys ===
    ttl: float | None = None
    max_key_length: int = 44
    prefix: str | None = None
    namespace: str | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("max_key_length")
    @classmethod
    def validate_max_key_length(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_key_length must be >= 0")
        return v

    @field_validator("ttl")
    @classmethod
    def validate_ttl(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("ttl must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> CacherSettings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.prefix is not None and not self.prefix.strip():
            errors.append("PREFIX must not be blank when set")

        if self.log_retention < 0:
            errors.append("LOG_RETENTION must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    def to_options(self, **overrides: Any) -> CacherOptions:
        """Build CacherOptions from these settings.

        Args:
            **overrides: Option fields (e.g. ``keygen``) that win over settings.
        """
        values: dict[str, Any] = {
            "ttl": self.ttl,
            "max_key_length": self.max_key_length,
            "prefix": self.prefix,
            "namespace": self.namespace,
        }
        values.update(overrides)
        return CacherOptions(**values)

    def configure_logging(self) -> None:
        """Apply the log_* settings to the actioncache root logger."""
        setup_logging(
            level=self.log_level,
            log_format=self.log_format,
            log_file=str(self.log_file) if self.log_file else None,
            rotation=self.log_rotation,
            retention=self.log_retention,
        )


def load_settings(**overrides: object) -> CacherSettings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding).

    Returns:
        Validated CacherSettings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return CacherSettings(**overrides)  # type: ignore[arg-type]
