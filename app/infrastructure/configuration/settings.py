"""Slack access layer configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import SlackSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import (
    CircuitBreakerSettings,
    RetrySettings,
)


class Settings(BaseSettings):
    """Slack access layer configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: Slack credentials, timeouts and resolution cache
    - **Infrastructure**: Retry/backoff and circuit breaker behavior

    Environment Variables:
        ENVIRONMENT: Deployment environment name (production renders JSON logs)
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.configuration import Settings
        from infrastructure.configuration.integrations import SlackSettings

        # Loaded from the environment / .env
        settings = Settings()

        # Explicit overrides, typically in tests
        settings = Settings(slack=SlackSettings(SLACK_BOT_TOKEN="xoxb-123-456"))
        ```
    """

    # Application-level settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    slack: SlackSettings

    # Infrastructure settings
    retry: RetrySettings
    circuit_breaker: CircuitBreakerSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if ENVIRONMENT is "production", False otherwise.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "slack": SlackSettings,
            # Infrastructure
            "retry": RetrySettings,
            "circuit_breaker": CircuitBreakerSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
