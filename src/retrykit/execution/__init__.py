"""Retry execution: policy, backoff, executor, and the step wrapper."""

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
