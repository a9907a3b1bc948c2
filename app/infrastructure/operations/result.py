"""Operation result dataclass.

Tagged union returned from Slack calls: responses are decoded once at the
access layer boundary into either a success carrying the payload or a failure
carrying a classified FailureRecord. Nothing downstream re-inspects raw
payloads to find out whether a call worked.
"""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.errors import FailureRecord
from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Uniform result returned from operations.

    Attributes:
        status: OperationStatus -- SUCCESS or FAILURE
        message: str -- human-friendly message for logs/troubleshooting
        data: Optional[Any] -- decoded payload on success
        error: Optional[FailureRecord] -- classified failure on FAILURE
        attempts: int -- attempts it took to produce this result
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error: Optional[FailureRecord] = None
    attempts: int = 1

    @property
    def is_success(self) -> bool:
        """Helper property to check if operation was successful.

        Returns:
            True if status is SUCCESS, False otherwise
        """
        return self.status == OperationStatus.SUCCESS

    def unwrap(self) -> Any:
        """Return the payload, or raise the failure.

        Returns:
            ``data`` of a successful result

        Raises:
            FailureRecord: The classified failure of a failed result
        """
        if self.is_success:
            return self.data
        assert self.error is not None
        raise self.error

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok", attempts: int = 1
    ) -> "OperationResult":
        """Create a SUCCESS OperationResult with optional data.

        Args:
            data: Optional payload to include with the result
            message: Human-friendly success message
            attempts: Attempts it took to succeed

        Returns:
            OperationResult with SUCCESS status
        """
        return cls(
            status=OperationStatus.SUCCESS,
            message=message,
            data=data,
            attempts=attempts,
        )

    @classmethod
    def failure(cls, error: FailureRecord) -> "OperationResult":
        """Create a FAILURE OperationResult from a classified failure.

        Args:
            error: The FailureRecord describing the failure

        Returns:
            OperationResult with FAILURE status
        """
        return cls(
            status=OperationStatus.FAILURE,
            message=error.message,
            error=error,
            attempts=error.attempts or 1,
        )
