"""Circuit breaker for Slack Web API operations.

The circuit breaker stops hammering Slack once it keeps failing:
1. CLOSED state: Normal operation, calls pass through
2. OPEN state: Fast-fail calls without reaching Slack
3. HALF_OPEN state: Let a limited number of probes through to test recovery

State transitions:
- CLOSED -> OPEN: After failure_threshold consecutive recoverable failures
- OPEN -> HALF_OPEN: After timeout_seconds
- HALF_OPEN -> CLOSED: After a successful probe
- HALF_OPEN -> OPEN: If a probe fails

Only recoverable failures (rate limiting, transient errors) count. A
NOT_FOUND or AUTHENTICATION failure says nothing about Slack's health.
"""

import threading
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import structlog

from infrastructure.operations.classifiers import classify
from infrastructure.operations.errors import FailureRecord
from infrastructure.operations.status import ErrorKind

logger = structlog.get_logger()


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject calls immediately
    HALF_OPEN = "half_open"  # Testing recovery


class CircuitBreakerOpenError(FailureRecord):
    """Raised when the circuit is open and the call is rejected."""

    def __init__(self, name: str, retry_after: float, message: Optional[str] = None):
        super().__init__(
            ErrorKind.TRANSIENT,
            message
            or f"Circuit breaker '{name}' is OPEN. Retry in {int(retry_after)} seconds.",
            error_code="CIRCUIT_OPEN",
            retry_after=retry_after,
        )
        self.name = name


class CircuitBreaker:
    """Circuit breaker for async operations.

    Args:
        name: Name of the circuit (e.g. "slack")
        failure_threshold: Consecutive recoverable failures before opening
        timeout_seconds: Seconds to wait before attempting recovery (HALF_OPEN)
        half_open_max_calls: Max concurrent probes in HALF_OPEN state
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        timeout_seconds: float = 30.0,
        half_open_max_calls: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.half_open_max_calls = half_open_max_calls
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time: Optional[float] = None
        self._half_open_calls = 0

        # Never held across an await.
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        """Get current circuit state."""
        with self._lock:
            return self._state

    async def call(self, func: Callable[[], Awaitable[Any]]) -> Any:
        """Await ``func()`` through the circuit breaker.

        Args:
            func: Zero-argument callable returning an awaitable

        Returns:
            Result from func

        Raises:
            CircuitBreakerOpenError: If the circuit rejects the call
            Exception: Any exception raised by func
        """
        self._before_call()
        probing = self.state == CircuitState.HALF_OPEN
        try:
            result = await func()
        except Exception as exc:
            if classify(exc).recoverable:
                self._on_failure(exc)
            else:
                self._on_neutral()
            raise
        else:
            self._on_success()
            return result
        finally:
            if probing:
                with self._lock:
                    if self._half_open_calls > 0:
                        self._half_open_calls -= 1

    def _before_call(self) -> None:
        with self._lock:
            if self._state == CircuitState.OPEN:
                remaining = self._remaining_open_seconds()
                if remaining <= 0:
                    self._transition_to_half_open()
                else:
                    logger.warning(
                        "circuit_breaker_open",
                        name=self.name,
                        failure_count=self._failure_count,
                        retry_in_seconds=int(remaining),
                    )
                    raise CircuitBreakerOpenError(self.name, remaining)

            if self._state == CircuitState.HALF_OPEN:
                if self._half_open_calls >= self.half_open_max_calls:
                    logger.debug(
                        "circuit_breaker_half_open_limit",
                        name=self.name,
                        calls=self._half_open_calls,
                    )
                    raise CircuitBreakerOpenError(
                        self.name,
                        self.timeout_seconds,
                        message=f"Circuit breaker '{self.name}' is HALF_OPEN "
                        f"(max concurrent calls reached).",
                    )
                self._half_open_calls += 1

    def _remaining_open_seconds(self) -> float:
        if self._last_failure_time is None:
            return 0.0
        elapsed = self._clock() - self._last_failure_time
        return self.timeout_seconds - elapsed

    def _on_success(self) -> None:
        with self._lock:
            self._success_count += 1
            if self._state == CircuitState.HALF_OPEN:
                logger.info("circuit_breaker_recovered", name=self.name)
                self._transition_to_closed()
            elif self._failure_count > 0:
                self._failure_count = 0

    def _on_neutral(self) -> None:
        # Non-recoverable failures prove Slack answered.
        with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._transition_to_closed()
            else:
                self._failure_count = 0

    def _on_failure(self, exception: Exception) -> None:
        with self._lock:
            self._failure_count += 1
            self._last_failure_time = self._clock()

            if self._state == CircuitState.HALF_OPEN:
                logger.warning(
                    "circuit_breaker_recovery_failed",
                    name=self.name,
                    error=str(exception),
                )
                self._transition_to_open()
            elif self._failure_count >= self.failure_threshold:
                logger.error(
                    "circuit_breaker_threshold_exceeded",
                    name=self.name,
                    failure_count=self._failure_count,
                    threshold=self.failure_threshold,
                    error=str(exception),
                )
                self._transition_to_open()
            else:
                logger.warning(
                    "circuit_breaker_failure",
                    name=self.name,
                    failure_count=self._failure_count,
                    threshold=self.failure_threshold,
                )

    def _transition_to_closed(self) -> None:
        logger.info("circuit_breaker_closed", name=self.name)
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._half_open_calls = 0

    def _transition_to_open(self) -> None:
        logger.error(
            "circuit_breaker_opened",
            name=self.name,
            timeout_seconds=self.timeout_seconds,
        )
        self._state = CircuitState.OPEN
        self._half_open_calls = 0

    def _transition_to_half_open(self) -> None:
        logger.info("circuit_breaker_half_open", name=self.name)
        self._state = CircuitState.HALF_OPEN
        self._half_open_calls = 0

    def get_stats(self) -> dict:
        """Get circuit breaker statistics."""
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failure_count,
                "success_count": self._success_count,
                "half_open_calls": self._half_open_calls,
            }

    def reset(self) -> None:
        """Manually reset circuit breaker (for testing/admin operations)."""
        with self._lock:
            logger.info("circuit_breaker_manual_reset", name=self.name)
            self._transition_to_closed()
