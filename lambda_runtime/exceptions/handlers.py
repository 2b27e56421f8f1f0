"""Error document utilities for the Runtime API error endpoints."""

import traceback
from typing import Any

from lambda_runtime.exceptions.base import LambdaRuntimeError
from lambda_runtime.exceptions.invocation_errors import InvocationError

ErrorPayload = dict[str, Any]

_MAX_STACK_FRAMES = 50


def create_error_payload(
    error_type: str,
    error_message: str,
    stack_trace: list[str] | None = None,
) -> ErrorPayload:
    """Create the JSON document posted to an error endpoint.

    Args:
        error_type: Value for ``errorType``.
        error_message: Value for ``errorMessage``.
        stack_trace: Optional frames for ``stackTrace``.

    Returns:
        Runtime API error document.
    """
    payload: ErrorPayload = {
        "errorMessage": error_message,
        "errorType": error_type,
    }
    if stack_trace is not None:
        payload["stackTrace"] = stack_trace
    return payload


def format_stack_trace(error: BaseException) -> list[str]:
    """Format the traceback of an exception as a list of frame strings.

    Args:
        error: The exception whose traceback to format.

    Returns:
        One entry per frame, innermost last.
    """
    frames = traceback.format_tb(error.__traceback__)
    return [frame.rstrip("\n") for frame in frames[-_MAX_STACK_FRAMES:]]


def error_payload_from_exception(
    error: BaseException,
    *,
    include_stack_trace: bool = True,
) -> ErrorPayload:
    """Create an error document from any exception.

    Runtime errors report their own ``errorType``; other exceptions report
    their class name.

    Args:
        error: The exception to convert.
        include_stack_trace: Whether to attach the formatted traceback.

    Returns:
        Runtime API error document.
    """
    if isinstance(error, InvocationError):
        return error.to_error_payload()

    if isinstance(error, LambdaRuntimeError):
        error_type = error.error_type
        message = error.message
    else:
        error_type = type(error).__name__
        message = str(error)

    stack_trace = format_stack_trace(error) if include_stack_trace else None
    return create_error_payload(error_type, message, stack_trace)

