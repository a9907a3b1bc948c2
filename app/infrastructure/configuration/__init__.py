"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the Slack
access layer using Pydantic BaseSettings with domain-based organization.

Exports:
    Settings: Main settings class (aggregates every section)
    SlackSettings: Slack credentials, timeout and resolution cache settings
    RetrySettings: Retry/backoff settings
    CircuitBreakerSettings: Circuit breaker settings

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    bot_token = settings.slack.SLACK_BOT_TOKEN
    max_attempts = settings.retry.max_attempts

    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.integrations import SlackSettings
from infrastructure.configuration.infrastructure import (
    CircuitBreakerSettings,
    RetrySettings,
)

__all__ = [
    "Settings",
    "SlackSettings",
    "RetrySettings",
    "CircuitBreakerSettings",
]
