"""Operation context binding for structured logging.

Binds operation-scoped metadata (correlation ID, Slack API method, token
class) to every log entry emitted while a tool handler runs, so that a
resolve-then-call sequence and all of its retries can be followed in the logs.

Usage:
    from infrastructure.logging import bind_operation_context

    with bind_operation_context(operation="chat.postMessage", token_class="service"):
        logger.info("sending_message")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_operation_context(
    correlation_id: Optional[str] = None,
    operation: Optional[str] = None,
    token_class: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind operation-scoped context to all logs within the block.

    Args:
        correlation_id: Unique identifier for the operation. Reuses the
            correlation ID already bound in the current context when omitted,
            otherwise generates one.
        operation: Name of the operation or Slack API method.
        token_class: Token class the operation runs with.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation ID in effect inside the block.
    """
    context: dict[str, Any] = {
        "correlation_id": correlation_id or get_correlation_id() or str(uuid.uuid4())
    }
    if operation is not None:
        context["operation"] = operation
    if token_class is not None:
        context["token_class"] = token_class
    context.update(extra_context)

    previous = structlog.contextvars.get_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())
        restored = {key: previous[key] for key in context if key in previous}
        if restored:
            structlog.contextvars.bind_contextvars(**restored)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    return structlog.contextvars.get_contextvars().get("correlation_id")


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current logging context.

    Args:
        correlation_id: The correlation ID to set.
    """
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_operation_context() -> None:
    """Clear all operation-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
