"""Control plane errors. These end the conversation with the Runtime API."""

from typing import Any, ClassVar

from lambda_runtime.exceptions.base import LambdaRuntimeError


class ControlPlaneError(LambdaRuntimeError):
    """Base class for failures that must restart the execution environment."""

    error_code: ClassVar[str] = "CONTROL_PLANE_ERROR"
    error_type: ClassVar[str] = "runtime.ControlPlaneError"


class TransportError(ControlPlaneError):
    """A Runtime API call failed at the HTTP level."""

    error_code: ClassVar[str] = "TRANSPORT_ERROR"
    error_type: ClassVar[str] = "runtime.TransportError"

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
        operation: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize transport error.

        Args:
            message: Description of the failure.
            retryable: Whether repeating the call may succeed.
            status_code: HTTP status returned by the endpoint, if any.
            operation: Name of the Runtime API operation that failed.
            context: Additional context information.
        """
        context_dict = context or {}
        if status_code is not None:
            context_dict["status_code"] = status_code
        if operation is not None:
            context_dict["operation"] = operation
        super().__init__(message, context=context_dict)
        self.retryable = retryable
        self.status_code = status_code
        self.operation = operation


class ProtocolError(ControlPlaneError):
    """The Runtime API returned malformed control plane data."""

    error_code: ClassVar[str] = "PROTOCOL_ERROR"
    error_type: ClassVar[str] = "runtime.ProtocolError"

    def __init__(
        self,
        message: str,
        *,
        header: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize protocol error with optional header info.

        Args:
            message: Description of the malformed data.
            header: Name of the offending response header.
            value: The malformed value.
            context: Additional context information.
        """
        context_dict = context or {}
        if header is not None:
            context_dict["header"] = header
        if value is not None:
            context_dict["value"] = value
        super().__init__(message, context=context_dict)


class ConfigurationError(ControlPlaneError):
    """Runtime configuration is invalid or missing."""

    error_code: ClassVar[str] = "CONFIGURATION_ERROR"
    error_type: ClassVar[str] = "runtime.ConfigurationError"


class RuntimeStateError(ControlPlaneError):
    """An outcome was routed through a channel in an illegal state."""

    error_code: ClassVar[str] = "RUNTIME_STATE_ERROR"
    error_type: ClassVar[str] = "runtime.StateError"


class FatalRuntimeError(LambdaRuntimeError):
    """The runtime loop ended on a fatal disposition.

    Wraps the control plane error that caused termination.
    """

    error_code: ClassVar[str] = "FATAL"
    error_type: ClassVar[str] = "runtime.Fatal"

    def __init__(
        self,
        message: str,
        *,
        cause: LambdaRuntimeError | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize fatal error.

        Args:
            message: Diagnostic written before the process exits.
            cause: The error that triggered termination.
            context: Additional context information.
        """
        context_dict = context or {}
        if cause is not None:
            context_dict["cause"] = cause.error_code
        super().__init__(message, context=context_dict)
        self.cause = cause
