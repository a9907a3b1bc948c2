"""Circuit breaker infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class CircuitBreakerSettings(InfrastructureSettings):
    """Circuit breaker wrapped around retried Slack operations.

    Environment Variables:
        CIRCUIT_BREAKER_ENABLED: Enable the breaker (default: True)
        CIRCUIT_BREAKER_FAILURE_THRESHOLD: Consecutive recoverable failures
            before the circuit opens (default: 5)
        CIRCUIT_BREAKER_TIMEOUT_SECONDS: Seconds the circuit stays open before
            a recovery probe is allowed (default: 30)
        CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS: Concurrent probes allowed while
            half-open (default: 1)
    """

    enabled: bool = Field(default=True, alias="CIRCUIT_BREAKER_ENABLED")
    failure_threshold: int = Field(
        default=5, ge=1, alias="CIRCUIT_BREAKER_FAILURE_THRESHOLD"
    )
    timeout_seconds: float = Field(
        default=30.0, gt=0, alias="CIRCUIT_BREAKER_TIMEOUT_SECONDS"
    )
    half_open_max_calls: int = Field(
        default=1, ge=1, alias="CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS"
    )
