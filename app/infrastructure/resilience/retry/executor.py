"""Retry and backoff engine.

Wraps an awaitable operation, classifies its failures and replays the
recoverable ones (RATE_LIMITED, TRANSIENT) with capped exponential backoff.
A Retry-After hint carried by the failure replaces the computed delay.
"""

import asyncio
from dataclasses import replace
from typing import Any, Awaitable, Callable, Optional

import structlog

from infrastructure.operations.classifiers import classify
from infrastructure.operations.errors import FailureRecord
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import ErrorKind
from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.models import RetryState


Operation = Callable[[], Awaitable[Any]]
Sleep = Callable[[float], Awaitable[Any]]

# Exponent cap; keeps the float product finite.
_MAX_EXPONENT = 62


def compute_backoff_delay(
    retry_index: int, base_delay: float, max_delay: float
) -> float:
    """Exponential backoff delay: min(base * 2**retry_index, max).

    Args:
        retry_index: 0 for the first retry, 1 for the second, ...
        base_delay: Delay before the first retry (seconds)
        max_delay: Upper bound (seconds)

    Returns:
        Delay in seconds
    """
    if retry_index < 0:
        raise ValueError("retry_index must not be negative")
    exponent = min(retry_index, _MAX_EXPONENT)
    return min(base_delay * (2**exponent), max_delay)


class RetryExecutor:
    """Run operations with bounded retries.

    Args:
        config: RetryConfig; defaults are used if omitted
        sleep: Awaitable sleep used between attempts (asyncio.sleep by default)

    Example:
        executor = RetryExecutor(RetryConfig(max_attempts=5))
        result = await executor.execute(
            lambda: connection.call("conversations.info", channel="C0123456789"),
            name="conversations.info",
        )
        print(result.data, result.attempts)
    """

    def __init__(self, config: Optional[RetryConfig] = None, sleep: Optional[Sleep] = None):
        self.config = config or RetryConfig()
        self._sleep = sleep or asyncio.sleep
        self._log = structlog.get_logger(component="retry_executor")

    def compute_delay(self, retry_index: int, failure: FailureRecord) -> float:
        """Wait before retry ``retry_index`` after ``failure``."""
        if failure.retry_after is not None:
            return failure.retry_after
        return compute_backoff_delay(
            retry_index,
            self.config.base_delay_seconds,
            self.config.max_delay_seconds,
        )

    async def execute(
        self, operation: Operation, name: Optional[str] = None
    ) -> OperationResult:
        """Execute ``operation`` until it succeeds or retrying stops making sense.

        The operation may return a plain value or an OperationResult; a failed
        OperationResult is treated exactly like a raised failure.

        Args:
            operation: Zero-argument callable returning an awaitable
            name: Operation name for logs

        Returns:
            OperationResult.success with the payload and the attempt count

        Raises:
            FailureRecord: The failure that stopped the loop, with ``attempts``
                set. Non-recoverable failures stop it immediately; recoverable
                ones once ``max_attempts`` is reached.
        """
        state = RetryState(max_attempts=self.config.max_attempts)
        log = self._log.bind(
            operation=name or getattr(operation, "__name__", "operation"),
            max_attempts=state.max_attempts,
        )

        while True:
            state.attempts += 1
            try:
                outcome = await operation()
                if isinstance(outcome, OperationResult):
                    outcome.unwrap()
                    result = replace(outcome, attempts=state.attempts)
                else:
                    result = OperationResult.success(
                        data=outcome, attempts=state.attempts
                    )
                if state.attempts > 1:
                    log.info("retry_succeeded", attempts=state.attempts)
                return result
            except Exception as exc:
                failure = classify(
                    exc,
                    default_rate_limit_seconds=self.config.default_rate_limit_seconds,
                )
                state.last_error = failure

                if not failure.recoverable:
                    failure.attempts = state.attempts
                    if failure.kind == ErrorKind.UNKNOWN:
                        log.error(
                            "operation_failed_unknown_error",
                            attempts=state.attempts,
                            error=failure.message,
                            exc_info=failure.cause or failure,
                        )
                    else:
                        log.warning(
                            "operation_failed",
                            kind=failure.kind.value,
                            error_code=failure.error_code,
                            attempts=state.attempts,
                        )
                    raise failure

                if state.exhausted:
                    failure.attempts = state.attempts
                    log.warning(
                        "retry_attempts_exhausted",
                        kind=failure.kind.value,
                        error_code=failure.error_code,
                        attempts=state.attempts,
                    )
                    raise failure

                state.next_delay = self.compute_delay(state.attempts - 1, failure)
                log.info(
                    "retry_attempt_failed",
                    kind=failure.kind.value,
                    error_code=failure.error_code,
                    attempt=state.attempts,
                    delay_seconds=state.next_delay,
                )

            await self._sleep(state.next_delay)
