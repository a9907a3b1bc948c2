"""Retry engine models."""

from dataclasses import dataclass
from typing import Optional

from infrastructure.operations.errors import FailureRecord


@dataclass
class RetryState:
    """Attempt bookkeeping for a single ``execute`` call.

    Never shared between calls.

    Fields:
        max_attempts: Attempt bound for this call
        attempts: Attempts started so far
        next_delay: Wait computed before the upcoming retry, if any
        last_error: Most recent classified failure
    """

    max_attempts: int
    attempts: int = 0
    next_delay: Optional[float] = None
    last_error: Optional[FailureRecord] = None

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts
