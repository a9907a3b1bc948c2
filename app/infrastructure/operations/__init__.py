"""Operation result types, failure taxonomy and classifiers.

This module contains the result union returned from Slack calls, the closed
ErrorKind taxonomy, the FailureRecord exception family and the classifiers
that map raw failures onto them.
"""

from infrastructure.operations.classifiers import (
    classify,
    classify_slack_payload,
)
from infrastructure.operations.errors import (
    FailureRecord,
    MissingCredential,
    ValidationFailure,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import ErrorKind, OperationStatus

__all__ = [
    "ErrorKind",
    "FailureRecord",
    "MissingCredential",
    "OperationResult",
    "OperationStatus",
    "ValidationFailure",
    "classify",
    "classify_slack_payload",
]
