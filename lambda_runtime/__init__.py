"""Python runtime for AWS Lambda custom runtimes.

Fetches invocations from the Lambda Runtime API, runs a handler for each one
and reports buffered, streamed or failed outcomes back.

Usage:
    from lambda_runtime import handler_fn, start

    @handler_fn
    async def handler(event, context):
        return event

    start(handler)
"""

from lambda_runtime.config import RuntimeSettings, get_settings
from lambda_runtime.context.models import InvocationContext
from lambda_runtime.exceptions import HandlerError, InvocationError
from lambda_runtime.handler import (
    Buffered,
    Failure,
    Handler,
    Outcome,
    Streamed,
    handler_fn,
    streaming_handler_fn,
)
from lambda_runtime.main import run, start
from lambda_runtime.runtime import Runtime
from lambda_runtime.version import __version__

__all__ = [
    "Buffered",
    "Failure",
    "Handler",
    "HandlerError",
    "InvocationContext",
    "InvocationError",
    "Outcome",
    "Runtime",
    "RuntimeSettings",
    "Streamed",
    "__version__",
    "get_settings",
    "handler_fn",
    "run",
    "start",
    "streaming_handler_fn",
]
