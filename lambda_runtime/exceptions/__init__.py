"""Lambda runtime exception hierarchy.

Architecture:
    LambdaRuntimeError (base)
    ├── InvocationError (recovered, reported per invocation)
    │   ├── HandlerError        errorType "HandlerError"
    │   ├── PanicError          errorType "runtime.Panic"
    │   ├── SerializationError  errorType "runtime.SerializationError"
    │   └── StreamError         errorType "runtime.StreamError"
    ├── ControlPlaneError (fatal, environment is discarded)
    │   ├── TransportError(retryable)
    │   ├── ProtocolError
    │   ├── ConfigurationError
    │   └── RuntimeStateError
    └── FatalRuntimeError (raised when the loop terminates)

Usage:
    from lambda_runtime.exceptions import HandlerError

    async def invoke(self, event, context):
        if not event:
            raise HandlerError("event body is empty")
"""

from lambda_runtime.exceptions.base import LambdaRuntimeError
from lambda_runtime.exceptions.control_plane_errors import (
    ConfigurationError,
    ControlPlaneError,
    FatalRuntimeError,
    ProtocolError,
    RuntimeStateError,
    TransportError,
)
from lambda_runtime.exceptions.handlers import (
    create_error_payload,
    error_payload_from_exception,
    format_stack_trace,
)
from lambda_runtime.exceptions.invocation_errors import (
    HandlerError,
    InvocationError,
    PanicError,
    SerializationError,
    StreamError,
)

__all__ = [
    "ConfigurationError",
    "ControlPlaneError",
    "FatalRuntimeError",
    "HandlerError",
    "InvocationError",
    "LambdaRuntimeError",
    "PanicError",
    "ProtocolError",
    "RuntimeStateError",
    "SerializationError",
    "StreamError",
    "TransportError",
    "create_error_payload",
    "error_payload_from_exception",
    "format_stack_trace",
]
