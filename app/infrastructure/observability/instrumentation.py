"""Operation instrumentation.

``instrument`` takes an async operation and returns an instrumented one that
runs inside an operation logging context and records duration and outcome.
Tool handlers wrap their calls explicitly instead of decorating methods.

Usage:
    from infrastructure.observability import instrument

    send = instrument("chat.postMessage", lambda: connection.call(
        "chat.postMessage", channel=channel_id, text=text
    ))
    result = await access.execute(send, name="chat.postMessage")
"""

import time
from typing import Any, Awaitable, Callable, Optional

import structlog

from infrastructure.logging.context import bind_operation_context
from infrastructure.operations.classifiers import classify
from infrastructure.operations.result import OperationResult

logger = structlog.get_logger()


def instrument(
    name: str,
    operation: Callable[[], Awaitable[Any]],
    token_class: Optional[str] = None,
    slow_threshold_ms: float = 5000.0,
) -> Callable[[], Awaitable[Any]]:
    """Wrap ``operation`` with timing and outcome logging.

    Args:
        name: Operation name bound to every log entry
        operation: Zero-argument callable returning an awaitable
        token_class: Token class value bound to the log context
        slow_threshold_ms: Calls slower than this log a warning

    Returns:
        A zero-argument callable with the same result and exceptions as
        ``operation``.
    """

    async def instrumented() -> Any:
        with bind_operation_context(operation=name, token_class=token_class):
            started = time.perf_counter()
            try:
                result = await operation()
            except Exception as exc:
                duration_ms = (time.perf_counter() - started) * 1000
                failure = classify(exc)
                logger.warning(
                    "operation_failed",
                    duration_ms=round(duration_ms, 2),
                    kind=failure.kind.value,
                    error_code=failure.error_code,
                )
                raise

            duration_ms = (time.perf_counter() - started) * 1000
            if isinstance(result, OperationResult) and not result.is_success:
                logger.warning(
                    "operation_failed",
                    duration_ms=round(duration_ms, 2),
                    kind=result.error.kind.value if result.error else None,
                    error_code=result.error.error_code if result.error else None,
                )
            elif duration_ms > slow_threshold_ms:
                logger.warning(
                    "operation_slow",
                    duration_ms=round(duration_ms, 2),
                    threshold_ms=slow_threshold_ms,
                )
            else:
                logger.debug("operation_completed", duration_ms=round(duration_ms, 2))
            return result

    instrumented.__name__ = name
    return instrumented
