"""Environment-driven settings for retrykit.

All fields can be set via ``RETRYKIT_*`` environment variables (e.g.
``RETRYKIT_RETRY_COUNT=3``) or a ``.env`` file in the working directory.

Fields
──────
retry_count       : Retries after the first attempt (unset = no retry loop)
backoff_seconds   : Fixed delay between attempts
retryable_errors  : Exception names to retry on (empty = every Exception)
log_level         : Structlog log level
log_format        : ``json`` or ``console``

Examples:
    >>> import os
    >>> os.environ["RETRYKIT_RETRY_COUNT"] = "2"
    >>> get_settings(_force_reload=True).retry_count
    2
    >>> os.environ["RETRYKIT_RETRYABLE_ERRORS"] = '["ConnectionError", "myapp.errors:Throttled"]'
"""

from __future__ import annotations

import builtins
import importlib

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from retrykit.core.errors import ConfigError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RetrySettings(BaseSettings):
    """Retry and logging configuration read from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Retry ────────────────────────────────────────────────────
    retry_count: int | None = Field(
        default=None,
        description="Retries after the first attempt; negative means a single attempt",
    )
    backoff_seconds: float = Field(default=1.0, ge=0.0)
    retryable_errors: list[str] = Field(default_factory=list)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return value

    def resolve_retryable(self) -> tuple[type[BaseException], ...]:
        """Import the exception classes named in ``retryable_errors``."""
        return tuple(resolve_exception_ref(ref) for ref in self.retryable_errors)


def resolve_exception_ref(ref: str) -> type[BaseException]:
    """Return the exception class named by ``ref``.

    ``ref`` is either a builtin name (``"TimeoutError"``) or a
    ``'module:QualName'`` path.

    Raises:
        ConfigError: If the name cannot be imported or is not an exception class.
    """
    module_path, sep, attr_path = ref.partition(":")
    try:
        if sep:
            obj: object = importlib.import_module(module_path)
            for part in attr_path.split("."):
                obj = getattr(obj, part)
        else:
            obj = getattr(builtins, ref)
    except (ImportError, AttributeError) as exc:
        raise ConfigError(f"Cannot resolve exception {ref!r}", cause=exc) from exc

    if not (isinstance(obj, type) and issubclass(obj, BaseException)):
        raise ConfigError(f"{ref!r} is not an exception class")
    return obj


_settings_cache: RetrySettings | None = None


def get_settings(*, _force_reload: bool = False) -> RetrySettings:
    """Load, validate, and cache a :class:`RetrySettings` instance."""
    global _settings_cache
    if _force_reload or _settings_cache is None:
        _settings_cache = RetrySettings()
    return _settings_cache


__all__ = ["RetrySettings", "get_settings", "resolve_exception_ref"]
