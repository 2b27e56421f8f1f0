"""Handler abstraction driven by the runtime loop."""

from lambda_runtime.handler.base import (
    FunctionHandler,
    Handler,
    StreamingFunctionHandler,
    decode_event,
    encode_payload,
    handler_fn,
    streaming_handler_fn,
)
from lambda_runtime.handler.isolation import invoke_isolated
from lambda_runtime.handler.outcome import Buffered, Failure, Outcome, Streamed

__all__ = [
    "Buffered",
    "Failure",
    "FunctionHandler",
    "Handler",
    "Outcome",
    "Streamed",
    "StreamingFunctionHandler",
    "decode_event",
    "encode_payload",
    "handler_fn",
    "invoke_isolated",
    "streaming_handler_fn",
]
