"""
Core primitives: errors, results, logging, and settings.

Modules
───────
  errors      RetryKitError hierarchy and the terminal RetryFailedError
  result      Ok / Err envelope returned by RetryExecutor.execute_result
  logging     structlog configuration and context helpers
  settings    RETRYKIT_* environment settings (pydantic-settings)
"""

from retrykit.core.errors import (
    CommandFailedError,
    ConfigError,
    ErrorCategory,
    RetryFailedError,
    RetryKitError,
    TerminalReason,
    TransientError,
)
from retrykit.core.result import Err, Ok, Result, try_result

__all__ = [
    "CommandFailedError",
    "ConfigError",
    "ErrorCategory",
    "RetryFailedError",
    "RetryKitError",
    "TerminalReason",
    "TransientError",
    "Err",
    "Ok",
    "Result",
    "try_result",
]
