"""Resilience patterns and implementations.

This module contains the retry/backoff engine and the circuit breaker that
guard every Slack Web API call made through the access layer.
"""

from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    CircuitState,
)
from infrastructure.resilience.retry import (
    RetryConfig,
    RetryExecutor,
    RetryState,
    compute_backoff_delay,
)

__all__ = [
    # Circuit Breaker
    "CircuitBreaker",
    "CircuitBreakerOpenError",
    "CircuitState",
    # Retry System
    "RetryConfig",
    "RetryExecutor",
    "RetryState",
    "compute_backoff_delay",
]
