"""Operation status and error kind enumerations.

Status codes for operation results and the closed taxonomy of failure kinds
that drives retry decisions across the access layer.
"""

from enum import Enum


class OperationStatus(Enum):
    """Discriminant of an OperationResult.

    Attributes:
        SUCCESS: Operation completed successfully, ``data`` holds the payload
        FAILURE: Operation failed, ``error`` holds the FailureRecord
    """

    SUCCESS = "success"
    FAILURE = "failure"


class ErrorKind(Enum):
    """Closed set of failure kinds.

    Attributes:
        AUTHENTICATION: Credential rejected by Slack at call time
        NOT_FOUND: Target channel/user/message does not exist or is not visible
        RATE_LIMITED: Request throttled by Slack
        TRANSIENT: Network failure, timeout, or Slack-side internal error
        VALIDATION: Caller input rejected locally before any network call
        UNKNOWN: Anything else
    """

    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    TRANSIENT = "transient"
    VALIDATION = "validation"
    UNKNOWN = "unknown"

    @property
    def recoverable(self) -> bool:
        """Whether failures of this kind may succeed when retried."""
        return self in (ErrorKind.RATE_LIMITED, ErrorKind.TRANSIENT)
