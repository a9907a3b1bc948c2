"""Retry and backoff infrastructure settings."""

from pydantic import Field, model_validator

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Retry configuration for Slack Web API calls.

    Environment Variables:
        RETRY_MAX_ATTEMPTS: Maximum attempts per operation, first try included
            (default: 3)
        RETRY_BASE_DELAY_SECONDS: Base exponential backoff delay (default: 1s)
        RETRY_MAX_DELAY_SECONDS: Maximum backoff delay (default: 30s)
        RETRY_DEFAULT_RATE_LIMIT_SECONDS: Wait used when Slack rate limits a
            call without sending a Retry-After header (default: 30s)

    Exponential Backoff:
        Delay calculation: min(base_delay * (2 ^ retry_index), max_delay)

        Example with defaults (base=1s, max=30s):
            Retry 0: 1s
            Retry 1: 2s
            Retry 2: 4s
            Retry 3: 8s
            Retry 4: 16s
            Retry 5+: 30s

        A Retry-After hint from Slack replaces the computed delay for that wait.

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        max_attempts = settings.retry.max_attempts
        ```
    """

    max_attempts: int = Field(
        default=3,
        ge=1,
        alias="RETRY_MAX_ATTEMPTS",
        description="Maximum attempts per operation, including the first one",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        gt=0,
        alias="RETRY_BASE_DELAY_SECONDS",
        description="Base delay for exponential backoff (seconds)",
    )
    max_delay_seconds: float = Field(
        default=30.0,
        gt=0,
        alias="RETRY_MAX_DELAY_SECONDS",
        description="Maximum delay for exponential backoff (seconds)",
    )
    default_rate_limit_seconds: float = Field(
        default=30.0,
        gt=0,
        alias="RETRY_DEFAULT_RATE_LIMIT_SECONDS",
        description="Wait applied to rate limited calls without a Retry-After hint",
    )

    @model_validator(mode="after")
    def validate_delay_bounds(self):
        """Ensure the backoff cap is not below the base delay."""
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError(
                "RETRY_MAX_DELAY_SECONDS must be greater than or equal to "
                "RETRY_BASE_DELAY_SECONDS"
            )
        return self
