"""Failure records raised across the access layer boundary.

Every failure that leaves the access layer is a FailureRecord (or a subclass)
carrying a stable ``kind`` that callers branch on, a human-readable message,
and the data the retry engine needs (``retry_after``, ``recoverable``).
"""

from typing import Any, Dict, Optional, TYPE_CHECKING

from infrastructure.operations.status import ErrorKind

if TYPE_CHECKING:
    from integrations.slack.credentials import TokenClass


class FailureRecord(Exception):
    """A classified failure.

    Attributes:
        kind: ErrorKind of the failure
        message: Human-friendly message, safe to show to an end user
        error_code: Machine error code (Slack error string or local marker)
        retry_after: Server-supplied (or default) wait hint in seconds
        cause: Underlying exception, when the failure wraps one
        attempts: Number of attempts made, set by the retry engine
        suggested_action: Hint on how to fix the failure, when known
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[float] = None,
        cause: Optional[BaseException] = None,
        attempts: Optional[int] = None,
        suggested_action: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.error_code = error_code
        self.retry_after = retry_after
        self.cause = cause
        self.attempts = attempts
        self.suggested_action = suggested_action
        if cause is not None:
            self.__cause__ = cause

    @property
    def recoverable(self) -> bool:
        """Whether the failure may succeed on retry. Depends on kind only."""
        return self.kind.recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Render the failure for the host/tool layer."""
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
            "recoverable": self.recoverable,
        }
        if self.error_code is not None:
            data["error_code"] = self.error_code
        if self.retry_after is not None:
            data["retry_after"] = self.retry_after
        if self.attempts is not None:
            data["attempts"] = self.attempts
        if self.suggested_action is not None:
            data["suggested_action"] = self.suggested_action
        return data

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"message={self.message!r}, error_code={self.error_code!r}, "
            f"attempts={self.attempts!r})"
        )


class ValidationFailure(FailureRecord):
    """A credential failed its token class format check."""

    def __init__(self, token_class: "TokenClass", reason: str):
        super().__init__(
            ErrorKind.VALIDATION,
            f"Invalid {token_class.value} token: {reason}",
            error_code="INVALID_TOKEN_FORMAT",
        )
        self.token_class = token_class
        self.reason = reason


class MissingCredential(FailureRecord):
    """No credential is configured for the requested token class."""

    def __init__(self, token_class: "TokenClass"):
        super().__init__(
            ErrorKind.VALIDATION,
            f"No {token_class.value} token configured. "
            f"Set {token_class.env_var} in the environment.",
            error_code="MISSING_CREDENTIAL",
        )
        self.token_class = token_class
