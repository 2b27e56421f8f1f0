"""Base exception classes for the Lambda runtime.

Uses the Template Method pattern for structured error handling.
"""

from typing import Any, ClassVar


class LambdaRuntimeError(Exception):
    """Base exception for all runtime errors.

    All custom exceptions inherit from this class, enabling:
    - Single catch block for all runtime errors
    - Consistent error payloads for the Runtime API

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        error_type: Value reported as ``errorType`` to the Runtime API.
        context: Additional debugging information.
    """

    error_code: ClassVar[str] = "RUNTIME_ERROR"
    error_type: ClassVar[str] = "runtime.Error"

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            context: Additional key-value pairs for debugging.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_error_payload(self) -> dict[str, Any]:
        """Convert exception to the Runtime API error document.

        Returns:
            Dictionary with ``errorMessage`` and ``errorType`` keys.
        """
        return {
            "errorMessage": self.message,
            "errorType": self.error_type,
        }

    def to_log_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging.

        Returns:
            Dictionary with full error details for logging.
        """
        return {
            "error_code": self.error_code,
            "error_type": self.error_type,
            "message": self.message,
            "context": self.context,
            "exception_type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        """Return string representation."""
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"context={self.context!r})"
        )
