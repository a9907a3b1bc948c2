"""Structured logging infrastructure.

Centralized logging configuration and utilities for the Slack access layer
using structlog.

Public API:
    - configure_logging(): Initialize logging for the host process
    - get_module_logger(): Get a logger for the calling module
    - bind_operation_context(): Context manager for operation-scoped logging
    - get_correlation_id() / set_correlation_id(): Correlation ID helpers
    - clear_operation_context(): Clear all operation context

Processors:
    - add_app_info(), add_environment_info(), mask_sensitive_data(),
      redact_slack_tokens(), truncate_large_values()
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)
from infrastructure.logging.context import (
    bind_operation_context,
    get_correlation_id,
    set_correlation_id,
    clear_operation_context,
)
from infrastructure.logging.formatters import (
    add_app_info,
    add_environment_info,
    mask_sensitive_data,
    redact_slack_tokens,
    truncate_large_values,
    SENSITIVE_PATTERNS,
    SLACK_TOKEN_PATTERN,
)

__all__ = [
    # Setup
    "configure_logging",
    "get_module_logger",
    # Context
    "bind_operation_context",
    "get_correlation_id",
    "set_correlation_id",
    "clear_operation_context",
    # Processors
    "add_app_info",
    "add_environment_info",
    "mask_sensitive_data",
    "redact_slack_tokens",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
    "SLACK_TOKEN_PATTERN",
]
