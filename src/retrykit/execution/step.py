"""
Step wrapper that turns a retry outcome into a step status.

A batch step that owns a retry loop must never crash its runner: when the
loop ends in failure the step logs the last failure and reports itself as
FAILED, so that the surrounding job can decide what to do next.

Example::

    step = RetryStep(load_prices, RetryConfig(retry_count=3), name="load_prices")
    result = step.run()
    if result.exit_status is ExitStatus.FAILED:
        job.mark_failed(result.error)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from retrykit.core.errors import RetryFailedError, RetryKitError
from retrykit.core.logging import LogContext, get_logger
from retrykit.execution.retry import RetryConfig, RetryExecutor

logger = get_logger(__name__)


class ExitStatus(str, Enum):
    """Terminal status of a step."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass
class StepResult:
    """
    Result from running a step.

    Attributes:
        success: Whether the step completed successfully
        output: Data produced by the unit of work
        error: Error message if success=False
        error_type: Class name of the last failure
        error_category: Category for alerting decisions
        attempts: Attempts made before the loop ended in failure
        details: Full failure detail for diagnostics
    """

    success: bool
    output: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    error_type: str | None = None
    error_category: str | None = None
    attempts: int | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.success and not self.error:
            self.error = "Step failed without error message"

    @property
    def exit_status(self) -> ExitStatus:
        return ExitStatus.COMPLETED if self.success else ExitStatus.FAILED

    @classmethod
    def ok(cls, output: dict[str, Any] | None = None) -> StepResult:
        """Create a successful result."""
        return cls(success=True, output=output or {})

    @classmethod
    def fail(
        cls,
        error: str,
        *,
        error_type: str | None = None,
        category: str | None = None,
        attempts: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> StepResult:
        """Create a failed result."""
        return cls(
            success=False,
            error=error,
            error_type=error_type,
            error_category=category,
            attempts=attempts,
            details=details or {},
        )

    @classmethod
    def from_error(cls, error: Exception) -> StepResult:
        """Build a failed result from a terminal retry failure or a raw exception."""
        if isinstance(error, RetryFailedError):
            return cls.fail(
                error.last_message,
                error_type=type(error.last_error).__name__,
                category=error.category.value,
                attempts=error.attempts,
                details=error.to_dict(),
            )
        if isinstance(error, RetryKitError):
            return cls.fail(
                error.message,
                error_type=type(error).__name__,
                category=error.category.value,
                attempts=1,
                details=error.to_dict(),
            )
        return cls.fail(str(error), error_type=type(error).__name__, attempts=1)

    @classmethod
    def from_value(cls, value: Any) -> StepResult:
        """Coerce an arbitrary return value into a StepResult.

        ========== ===========================================================
        Type       Behaviour
        ========== ===========================================================
        StepResult Returned as-is (no wrapping).
        dict       ``StepResult.ok(output=value)``
        None       ``ok()`` with empty output.
        other      ``ok(output={"result": value})``
        ========== ===========================================================
        """
        if isinstance(value, StepResult):
            return value
        if value is None:
            return cls.ok()
        if isinstance(value, dict):
            return cls.ok(output=value)
        return cls.ok(output={"result": value})

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        result: dict[str, Any] = {
            "success": self.success,
            "exit_status": self.exit_status.value,
            "output": self.output,
        }
        if self.error:
            result["error"] = self.error
        if self.error_type:
            result["error_type"] = self.error_type
        if self.error_category:
            result["error_category"] = self.error_category
        if self.attempts is not None:
            result["attempts"] = self.attempts
        return result

    def __repr__(self) -> str:
        status = "OK" if self.success else f"FAIL({self.error_type})"
        return f"StepResult({status}, output_keys={list(self.output.keys())})"


class RetryStep:
    """Runs a unit of work with retries and reports a step status.

    ``config=None`` (or a config whose ``retry_count`` is ``None``) runs the
    work exactly once. Either way an ``Exception`` from the work never
    escapes :meth:`run`; it becomes a FAILED :class:`StepResult`.
    """

    def __init__(
        self,
        work: Callable[[], Any],
        config: RetryConfig | None = None,
        *,
        name: str = "step",
        sleep: Callable[[float], None] | None = None,
    ):
        self.work = work
        self.config = config or RetryConfig()
        self.name = name
        self.executor = RetryExecutor.from_config(self.config, sleep=sleep, name=name)

    def run(self) -> StepResult:
        with LogContext(step=self.name):
            try:
                value = self.executor.execute(self.work)
            except Exception as e:
                result = StepResult.from_error(e)
                logger.error(
                    "step.failed",
                    error=result.error,
                    error_type=result.error_type,
                    attempts=result.attempts,
                )
                return result

            result = StepResult.from_value(value)
            if result.success:
                logger.info("step.completed", output_keys=list(result.output.keys()))
            else:
                logger.error("step.failed", error=result.error, error_type=result.error_type)
            return result

    def __repr__(self) -> str:
        return f"RetryStep({self.name!r}, retry_count={self.config.retry_count})"


__all__ = ["ExitStatus", "StepResult", "RetryStep"]
