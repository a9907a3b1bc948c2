"""Retry engine configuration."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.configuration import RetrySettings


@dataclass
class RetryConfig:
    """Configuration for retry engine behavior.

    Attributes:
        max_attempts: Maximum attempts per operation, the first one included
        base_delay_seconds: Delay before the first retry
        max_delay_seconds: Cap applied to the exponential delay
        default_rate_limit_seconds: Wait hint used when a rate limited
            response carries no Retry-After

    Example:
        # Default configuration
        config = RetryConfig()

        # Custom configuration
        config = RetryConfig(max_attempts=5, base_delay_seconds=0.5)
    """

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0
    default_rate_limit_seconds: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_seconds <= 0:
            raise ValueError("base_delay_seconds must be positive")
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError("max_delay_seconds must be >= base_delay_seconds")
        if self.default_rate_limit_seconds < 0:
            raise ValueError("default_rate_limit_seconds must not be negative")

    @classmethod
    def from_settings(cls, settings: "RetrySettings") -> "RetryConfig":
        """Build a RetryConfig from the RETRY_* environment settings."""
        return cls(
            max_attempts=settings.max_attempts,
            base_delay_seconds=settings.base_delay_seconds,
            max_delay_seconds=settings.max_delay_seconds,
            default_rate_limit_seconds=settings.default_rate_limit_seconds,
        )
