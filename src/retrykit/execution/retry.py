"""Retry policy, fixed backoff, and the attempt loop that drives them.

A :class:`RetryExecutor` runs a zero-argument unit of work. After each
failure it asks its :class:`RetryPolicy` whether another attempt is
permitted, waits per :class:`FixedBackoff`, and runs the work again. The
loop ends with the work's result or a :class:`RetryFailedError`.

Example:
    >>> from retrykit.execution.retry import RetryConfig, RetryExecutor
    >>>
    >>> config = RetryConfig(retry_count=2, retryable=(ConnectionError,), backoff_seconds=0.5)
    >>> executor = RetryExecutor.from_config(config)
    >>> prices = executor.execute(lambda: client.fetch_prices("AAPL"))

States per ``execute`` call::

    Idle ──> Running ──success──> Succeeded
               │  ^
               │  └── retryable failure, budget left (after backoff)
               └───── otherwise ───────────────────> Failed
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

from retrykit.core.errors import ConfigError, RetryFailedError, TerminalReason
from retrykit.core.logging import get_logger
from retrykit.core.result import Err, Ok, Result

T = TypeVar("T")

OnRetry = Callable[[int, Exception, float], None]

logger = get_logger(__name__)


def _check_retryable(retryable: Any) -> tuple[type[BaseException], ...]:
    kinds = tuple(retryable)
    for kind in kinds:
        if not (isinstance(kind, type) and issubclass(kind, BaseException)):
            raise ConfigError(f"retryable entries must be exception classes, got {kind!r}")
    return kinds


@dataclass(frozen=True)
class RetryPolicy:
    """
    Decides whether a failed attempt may be followed by another one.

    Attributes:
        max_attempts: Total executions allowed, including the first
        retryable: Exception classes eligible for retry (empty = every Exception)
    """

    max_attempts: int
    retryable: tuple[type[BaseException], ...] = ()

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigError(f"max_attempts must be >= 1, got {self.max_attempts}")
        object.__setattr__(self, "retryable", _check_retryable(self.retryable))

    @classmethod
    def from_retry_count(
        cls,
        retry_count: int,
        retryable: tuple[type[BaseException], ...] | list[type[BaseException]] = (),
    ) -> RetryPolicy:
        """Build a policy from a retry count.

        ``retry_count`` retries follow the first attempt. A negative count
        allows the first attempt only.
        """
        max_attempts = 1 if retry_count < 0 else retry_count + 1
        return cls(max_attempts=max_attempts, retryable=tuple(retryable))

    def is_retryable(self, error: BaseException) -> bool:
        """Check whether the failure's kind is in the retryable set."""
        if not self.retryable:
            return isinstance(error, Exception)
        return isinstance(error, self.retryable)

    def should_retry(self, attempts_used: int, error: BaseException) -> bool:
        """Check if another attempt is permitted after ``attempts_used`` attempts."""
        return attempts_used < self.max_attempts and self.is_retryable(error)


@dataclass(frozen=True)
class FixedBackoff:
    """Constant delay between attempts."""

    delay: float = 1.0
    sleep: Callable[[float], None] | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise ConfigError(f"backoff delay must be >= 0, got {self.delay}")

    def next_delay(self, attempt: int) -> float:
        """Return constant delay."""
        return self.delay

    def wait(self) -> None:
        if self.delay > 0:
            (self.sleep or time.sleep)(self.delay)

    async def wait_async(self) -> None:
        if self.delay > 0:
            await asyncio.sleep(self.delay)


@dataclass(frozen=True)
class RetryConfig:
    """
    Immutable retry configuration, built once and handed to an executor.

    Attributes:
        retry_count: Retries after the first attempt. ``None`` disables the
            retry loop entirely; a negative value means one attempt.
        retryable: Exception classes to retry on (empty = every Exception)
        backoff_seconds: Fixed delay between attempts
    """

    retry_count: int | None = None
    retryable: tuple[type[BaseException], ...] = ()
    backoff_seconds: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "retryable", _check_retryable(self.retryable))
        if self.backoff_seconds < 0:
            raise ConfigError(f"backoff_seconds must be >= 0, got {self.backoff_seconds}")

    @classmethod
    def from_settings(cls, settings: Any) -> RetryConfig:
        """Build a config from :class:`retrykit.core.settings.RetrySettings`."""
        return cls(
            retry_count=settings.retry_count,
            retryable=settings.resolve_retryable(),
            backoff_seconds=settings.backoff_seconds,
        )

    def build_policy(self) -> RetryPolicy | None:
        if self.retry_count is None:
            return None
        return RetryPolicy.from_retry_count(self.retry_count, self.retryable)

    def build_backoff(self, sleep: Callable[[float], None] | None = None) -> FixedBackoff:
        return FixedBackoff(delay=self.backoff_seconds, sleep=sleep)


@dataclass
class AttemptState:
    """Per-call attempt accounting. Never shared between calls."""

    attempts_used: int = 0
    last_failure: Exception | None = None

    def record_failure(self, error: Exception) -> None:
        """Record a failed attempt."""
        self.attempts_used += 1
        self.last_failure = error


class RetryExecutor:
    """
    Drives the attempt loop for a unit of work.

    Without a policy the executor is a plain call: the work runs once and any
    failure propagates unchanged. With a policy, every ``Exception`` raised
    by the work is classified first, and only the terminal failure reaches
    the caller, wrapped in :class:`RetryFailedError`.

    The executor keeps no per-call state, so one instance can serve many
    concurrent callers.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        backoff: FixedBackoff | None = None,
        *,
        on_retry: OnRetry | None = None,
        name: str | None = None,
    ):
        self.policy = policy
        self.backoff = backoff or FixedBackoff()
        self.on_retry = on_retry
        self.name = name

    @classmethod
    def from_config(
        cls,
        config: RetryConfig,
        *,
        sleep: Callable[[float], None] | None = None,
        on_retry: OnRetry | None = None,
        name: str | None = None,
    ) -> RetryExecutor:
        return cls(
            config.build_policy(),
            config.build_backoff(sleep),
            on_retry=on_retry,
            name=name,
        )

    def execute(self, work: Callable[[], T]) -> T:
        """Run ``work`` until it succeeds or the policy stops the loop.

        Raises:
            RetryFailedError: The loop ended without a success (policy configured)
            Exception: Whatever ``work`` raised (no policy configured)
        """
        if self.policy is None:
            return work()

        state = AttemptState()
        while True:
            try:
                result = work()
            except Exception as e:
                state.record_failure(e)
                self._after_failure(self.policy, state, e)
                self.backoff.wait()
                continue
            self._log_success(state)
            return result

    async def execute_async(self, work: Callable[[], Awaitable[T]]) -> T:
        """Async variant of :meth:`execute` for a zero-argument coroutine function."""
        if self.policy is None:
            return await work()

        state = AttemptState()
        while True:
            try:
                result = await work()
            except Exception as e:
                state.record_failure(e)
                self._after_failure(self.policy, state, e)
                await self.backoff.wait_async()
                continue
            self._log_success(state)
            return result

    def execute_result(self, work: Callable[[], T]) -> Result[T]:
        """Run ``work`` and return ``Ok(value)`` or ``Err(RetryFailedError)``."""
        try:
            return Ok(self.execute(work))
        except RetryFailedError as e:
            return Err(e)

    def _after_failure(
        self, policy: RetryPolicy, state: AttemptState, error: Exception
    ) -> None:
        """Classify a failure; raise the terminal error or announce the retry."""
        attempt = state.attempts_used

        if not policy.is_retryable(error):
            logger.warning(
                "retry.non_retryable",
                executor=self.name,
                attempt=attempt,
                error_type=type(error).__name__,
                error=str(error),
            )
            raise RetryFailedError(
                error, attempts=attempt, reason=TerminalReason.NON_RETRYABLE
            ) from error

        if not policy.should_retry(attempt, error):
            logger.warning(
                "retry.exhausted",
                executor=self.name,
                attempts=attempt,
                max_attempts=policy.max_attempts,
                error_type=type(error).__name__,
                error=str(error),
            )
            raise RetryFailedError(
                error, attempts=attempt, reason=TerminalReason.EXHAUSTED
            ) from error

        delay = self.backoff.next_delay(attempt)
        logger.debug(
            "retry.attempt_failed",
            executor=self.name,
            attempt=attempt,
            max_attempts=policy.max_attempts,
            delay=delay,
            error_type=type(error).__name__,
            error=str(error),
        )
        if self.on_retry:
            self.on_retry(attempt, error, delay)

    def _log_success(self, state: AttemptState) -> None:
        if state.attempts_used:
            logger.info(
                "retry.succeeded",
                executor=self.name,
                attempt=state.attempts_used + 1,
            )


def with_retry(
    config: RetryConfig | None = None,
    *,
    on_retry: OnRetry | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator factory that runs each call of a function through a retry loop.

    Args:
        config: Retry configuration (default: 3 retries, any Exception, 1s backoff)
        on_retry: Callback called before each backoff wait (attempt, error, delay)

    Example:
        >>> @with_retry(RetryConfig(retry_count=3, retryable=(TimeoutError,)))
        ... def load_quotes(symbol):
        ...     return client.quotes(symbol)
    """
    if config is None:
        config = RetryConfig(retry_count=3)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        executor = RetryExecutor.from_config(
            config, on_retry=on_retry, name=func.__qualname__
        )

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                return await executor.execute_async(lambda: func(*args, **kwargs))
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> T:
            return executor.execute(lambda: func(*args, **kwargs))
        return sync_wrapper

    return decorator


__all__ = [
    "RetryPolicy",
    "FixedBackoff",
    "RetryConfig",
    "AttemptState",
    "RetryExecutor",
    "with_retry",
]
