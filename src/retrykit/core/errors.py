"""
Structured error types for retrykit.

Every error raised by retrykit itself derives from :class:`RetryKitError`.
Errors carry a category, a retryable flag and an optional chained cause so
that callers can log them as structured events instead of bare strings.

Architecture:
    ::

        ┌────────────────────────────────────────────────────────┐
        │                     RetryKitError                       │
        │        (category, retryable, cause, to_dict())          │
        ├────────────────────────────────────────────────────────┤
        │  TransientError     ConfigError      RetryFailedError   │
        │  (retryable=True)   (CONFIG)         (terminal outcome) │
        │                                                         │
        │  CommandFailedError                                     │
        │  (non-zero exit of a CLI unit of work)                  │
        └────────────────────────────────────────────────────────┘

Examples:
    >>> error = TransientError("Connection reset")
    >>> error.retryable
    True
    >>> ConfigError("bad delay").category
    <ErrorCategory.CONFIG: 'CONFIG'>

Guardrails:
    ❌ DON'T: Re-raise a raw attempt failure once the retry loop has ended
    ✅ DO: Raise RetryFailedError and chain the last failure as its cause
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for logging and routing."""

    NETWORK = "NETWORK"
    CONFIG = "CONFIG"
    COMMAND = "COMMAND"
    RETRY = "RETRY"
    INTERNAL = "INTERNAL"


class TerminalReason(str, Enum):
    """Why a retry loop stopped without a success."""

    EXHAUSTED = "exhausted"  # retryable failure, no attempts left
    NON_RETRYABLE = "non_retryable"  # failure kind outside the retryable set


class RetryKitError(Exception):
    """
    Base exception for all retrykit errors.

    Subclasses set ``default_category`` and ``default_retryable``; both can
    be overridden per instance.

    Attributes:
        message: Human-readable message
        category: ErrorCategory for routing
        retryable: Whether the failing operation may be retried
        cause: Underlying exception, also chained as ``__cause__``
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class TransientError(RetryKitError):
    """Temporary failure that may succeed when the operation runs again."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class ConfigError(RetryKitError):
    """Invalid retry configuration. Never retryable."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class CommandFailedError(RetryKitError):
    """A shell command used as a unit of work exited with a non-zero status."""

    default_category = ErrorCategory.COMMAND
    default_retryable = True

    def __init__(self, command: list[str], returncode: int, **kwargs: Any):
        self.command = list(command)
        self.returncode = returncode
        super().__init__(
            f"Command {' '.join(self.command)!r} exited with status {returncode}",
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["command"] = self.command
        result["returncode"] = self.returncode
        return result


class RetryFailedError(RetryKitError):
    """
    Terminal failure of a retry loop.

    Raised once the loop ends without a success, either because the budget
    of attempts ran out or because a failure fell outside the retryable set.
    The last observed failure is kept on ``last_error`` and chained as the
    cause; the raw failure itself is never re-raised.

    Example:
        >>> try:
        ...     executor.execute(fetch)
        ... except RetryFailedError as e:
        ...     logger.error("fetch.failed", **e.to_dict())
    """

    default_category = ErrorCategory.RETRY
    default_retryable = False

    def __init__(
        self,
        last_error: BaseException,
        *,
        attempts: int,
        reason: TerminalReason,
    ):
        self.last_error = last_error
        self.attempts = attempts
        self.reason = reason
        category = (
            last_error.category if isinstance(last_error, RetryKitError) else None
        )
        super().__init__(
            f"Retry loop ended ({reason.value}) after {attempts} attempt(s): "
            f"{type(last_error).__name__}: {last_error}",
            category=category,
            cause=last_error,
        )

    @property
    def last_message(self) -> str:
        """Message text of the last failure."""
        return str(self.last_error)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["attempts"] = self.attempts
        result["reason"] = self.reason.value
        if isinstance(self.last_error, RetryKitError):
            result["last_error"] = self.last_error.to_dict()
        else:
            result["last_error"] = {
                "error_type": type(self.last_error).__name__,
                "message": str(self.last_error),
            }
        return result


__all__ = [
    "ErrorCategory",
    "TerminalReason",
    "RetryKitError",
    "TransientError",
    "ConfigError",
    "CommandFailedError",
    "RetryFailedError",
]
