"""Retry and backoff engine.

Architecture:
- RetryConfig: attempt bound and backoff timing
- RetryState: per-call attempt bookkeeping
- RetryExecutor: runs an awaitable operation with classification-driven retries
- compute_backoff_delay: min(base * 2**retry_index, max)

Usage:
    from infrastructure.resilience.retry import RetryConfig, RetryExecutor

    executor = RetryExecutor(RetryConfig(max_attempts=5, base_delay_seconds=1))
    result = await executor.execute(lambda: connection.call("auth.test"))
"""

from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.executor import (
    RetryExecutor,
    compute_backoff_delay,
)
from infrastructure.resilience.retry.models import RetryState

__all__ = [
    # Configuration
    "RetryConfig",
    # Models
    "RetryState",
    # Engine
    "RetryExecutor",
    "compute_backoff_delay",
]
