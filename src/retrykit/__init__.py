"""
retrykit - Bounded retry execution for fallible units of work.

Quick start::

    from retrykit import RetryConfig, RetryExecutor, RetryFailedError

    executor = RetryExecutor.from_config(
        RetryConfig(retry_count=2, retryable=(ConnectionError,), backoff_seconds=0.5)
    )
    try:
        rows = executor.execute(lambda: source.fetch())
    except RetryFailedError as e:
        logger.error("fetch.failed", **e.to_dict())
"""

__version__ = "0.1.0"

from retrykit.core.errors import (
    ConfigError,
    RetryFailedError,
    RetryKitError,
    TerminalReason,
    TransientError,
)
from retrykit.core.result import Err, Ok, Result
from retrykit.execution.retry import (
    AttemptState,
    FixedBackoff,
    RetryConfig,
    RetryExecutor,
    RetryPolicy,
    with_retry,
)
from retrykit.execution.step import ExitStatus, RetryStep, StepResult

__all__ = [
    "__version__",
    "ConfigError",
    "RetryFailedError",
    "RetryKitError",
    "TerminalReason",
    "TransientError",
    "Ok",
    "Err",
    "Result",
    "AttemptState",
    "FixedBackoff",
    "RetryConfig",
    "RetryExecutor",
    "RetryPolicy",
    "with_retry",
    "ExitStatus",
    "RetryStep",
    "StepResult",
]
