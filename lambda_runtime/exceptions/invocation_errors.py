"""Invocation errors, recovered at the loop boundary and reported to the platform."""

from typing import Any, ClassVar

from lambda_runtime.exceptions.base import LambdaRuntimeError


class InvocationError(LambdaRuntimeError):
    """Base class for failures confined to a single invocation.

    These never terminate the process. The runtime turns them into an error
    report addressed to the invocation's request id.
    """

    error_code: ClassVar[str] = "INVOCATION_ERROR"
    error_type: ClassVar[str] = "InvocationError"

    def __init__(
        self,
        message: str,
        *,
        error_type: str | None = None,
        stack_trace: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the invocation error.

        Args:
            message: Description of the failure, reported verbatim.
            error_type: Overrides the class level ``errorType`` reported.
            stack_trace: Optional frames reported as ``stackTrace``.
            context: Additional context information.
        """
        super().__init__(message, context=context)
        self.failure_type = error_type or self.error_type
        self.stack_trace = stack_trace

    def to_error_payload(self) -> dict[str, Any]:
        """Convert exception to the Runtime API error document."""
        payload: dict[str, Any] = {
            "errorMessage": self.message,
            "errorType": self.failure_type,
        }
        if self.stack_trace is not None:
            payload["stackTrace"] = self.stack_trace
        return payload


class HandlerError(InvocationError):
    """Business logic failure raised by handler code.

    Raise from a handler to report a failure without a stack trace.
    """

    error_code: ClassVar[str] = "HANDLER_ERROR"
    error_type: ClassVar[str] = "HandlerError"


class PanicError(InvocationError):
    """Abrupt, unstructured termination of a handler caught by the runtime."""

    error_code: ClassVar[str] = "PANIC"
    error_type: ClassVar[str] = "runtime.Panic"


class SerializationError(InvocationError):
    """Handler result could not be encoded into a response payload."""

    error_code: ClassVar[str] = "SERIALIZATION_ERROR"
    error_type: ClassVar[str] = "runtime.SerializationError"


class StreamError(InvocationError):
    """Chunk producer failed after the response stream had started."""

    error_code: ClassVar[str] = "STREAM_ERROR"
    error_type: ClassVar[str] = "runtime.StreamError"
