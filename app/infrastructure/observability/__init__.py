"""Infrastructure observability module - operation monitoring.

Exports:
    instrument: Wrap an async operation with timing and outcome logging
"""

from infrastructure.observability.instrumentation import instrument

__all__ = [
    "instrument",
]
