"""Structlog configuration and logger setup.

Configures structlog for the access layer: context variable merging for
correlation IDs, call-site parameters, exception formatting, secret redaction,
and environment-aware rendering (console in development, JSON in production).

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    # Configure logging once at host startup
    configure_logging()

    # Get a logger for your module
    logger = get_module_logger()
    logger.info("event_name", key="value")
"""

import inspect
import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.logging.formatters import (
    add_app_info,
    add_environment_info,
    mask_sensitive_data,
    redact_slack_tokens,
    truncate_large_values,
)

APP_NAME = "slack-access"


def _is_test_environment() -> bool:
    """Detect if running in a test environment.

    Returns:
        True if pytest is in sys.modules, False otherwise
    """
    return "pytest" in sys.modules


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
    extra_processors: Optional[List[Any]] = None,
) -> BoundLogger:
    """Configure structured logging for the access layer.

    Args:
        log_level: Optional override for log level (DEBUG, INFO, WARNING, etc).
            Defaults to Settings.LOG_LEVEL if not provided.
        is_production: Optional override for production mode. Defaults to
            Settings.is_production. Controls JSON vs console output.
        extra_processors: Additional structlog processors inserted before the
            renderer.

    Returns:
        Configured logger instance
    """
    if _is_test_environment():
        logging.root.setLevel(logging.CRITICAL + 1)
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            level=logging.CRITICAL + 1,
            force=True,
        )
        return structlog.stdlib.get_logger()

    if log_level is None or is_production is None:
        # Imported lazily so that importing the logging package never requires
        # a fully populated environment.
        from infrastructure.configuration import Settings

        settings = Settings()
        log_level = log_level or settings.LOG_LEVEL
        if is_production is None:
            is_production = settings.is_production
        app_version = settings.GIT_SHA
        environment = settings.ENVIRONMENT
    else:
        app_version = "unknown"
        environment = "production" if is_production else "development"

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        add_app_info(APP_NAME, app_version),
        add_environment_info(environment),
        mask_sensitive_data(),
        redact_slack_tokens(),
        truncate_large_values(),
    ]
    processors.extend(extra_processors or [])

    if is_production:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    return structlog.stdlib.get_logger()


def get_module_logger(**initial_values: Any) -> BoundLogger:
    """Get a logger for the calling module with full path context.

    Automatically detects the calling module and passes component and
    module_path as initial values. The returned logger stays lazy, so it picks
    up whatever configuration is active when it first logs, even when it was
    created at import time before ``configure_logging()`` ran.

    Args:
        **initial_values: Extra context, overriding the detected values

    Returns:
        Logger instance with module context

    Example:
        # In integrations/slack/resolver.py
        logger = get_module_logger()
        # logger has context: {"component": "resolver",
        #                      "module_path": "integrations.slack.resolver"}
    """
    context: dict = {"component": "unknown"}

    current_frame = inspect.currentframe()
    caller = current_frame.f_back if current_frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None
    if module:
        context = {
            "component": module.__name__.split(".")[-1],
            "module_path": module.__name__,
        }

    context.update(initial_values)
    return structlog.stdlib.get_logger(**context)
