"""Handler abstraction and adapters for plain functions.

A handler turns ``(raw event bytes, InvocationContext)`` into exactly one
Outcome. Decoding the event into a richer value is the handler's own
business; the runtime only transports bytes.

Usage:
    from lambda_runtime.handler import handler_fn

    @handler_fn
    async def double(event, context):
        return event * 2
"""

import inspect
import json
from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, Callable
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_json

from lambda_runtime.context.models import InvocationContext
from lambda_runtime.exceptions.invocation_errors import HandlerError, SerializationError
from lambda_runtime.handler.outcome import Buffered, Outcome, Streamed
from lambda_runtime.types import ChunkProducer, JSONValue, RawEvent

EventFunction = Callable[[Any, InvocationContext], Any]


class Handler(ABC):
    """Capability a function implements to be driven by the runtime loop.

    Subclasses may keep state across invocations; the runtime calls
    ``invoke`` strictly sequentially.
    """

    @abstractmethod
    async def invoke(self, event: RawEvent, context: InvocationContext) -> Outcome:
        """Produce the outcome of one invocation.

        Args:
            event: Raw event bytes, owned by the runtime for this invocation.
            context: Metadata of the invocation.

        Returns:
            A Buffered, Streamed or Failure outcome.
        """


def decode_event(event: RawEvent) -> JSONValue:
    """Decode a JSON event.

    Args:
        event: Raw event bytes.

    Returns:
        The decoded value, or None for an empty body.

    Raises:
        HandlerError: If the body is not valid JSON.
    """
    if not event.strip():
        return None
    try:
        return json.loads(event)
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise HandlerError(f"Failed to decode event as JSON: {error}") from error


def encode_payload(value: Any) -> bytes:
    """Encode a handler result as a JSON response payload.

    Bytes pass through untouched; everything else is serialized as JSON.

    Args:
        value: The handler's return value.

    Returns:
        Payload bytes.

    Raises:
        SerializationError: If the value cannot be represented as JSON.
    """
    if isinstance(value, bytes | bytearray):
        return bytes(value)
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True).encode()
    try:
        return to_json(value)
    except PydanticSerializationError as error:
        raise SerializationError(
            f"Failed to serialize response of type {type(value).__name__}: {error}"
        ) from error


async def resolve_result(result: Any) -> Any:
    """Await the result of a handler function if it is awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result


class FunctionHandler(Handler):
    """Adapts a function returning one value into a buffered handler."""

    def __init__(self, func: EventFunction, *, decode_json: bool = True) -> None:
        """Initialize the adapter.

        Args:
            func: Sync or async function of ``(event, context)``.
            decode_json: Decode the event as JSON before calling ``func``;
                when False the raw bytes are passed through.
        """
        self._func = func
        self._decode_json = decode_json
        self.__name__ = getattr(func, "__name__", type(func).__name__)

    async def invoke(self, event: RawEvent, context: InvocationContext) -> Outcome:
        """Decode, call the function and encode its result."""
        payload = decode_event(event) if self._decode_json else event
        result = await resolve_result(self._func(payload, context))
        return Buffered(encode_payload(result))


class StreamingFunctionHandler(Handler):
    """Adapts a function returning an async chunk iterable into a streaming handler."""

    def __init__(self, func: EventFunction, *, decode_json: bool = True) -> None:
        """Initialize the adapter.

        Args:
            func: Async generator function, or a function returning an async
                iterable of ``bytes``/``str`` chunks.
            decode_json: Decode the event as JSON before calling ``func``.
        """
        self._func = func
        self._decode_json = decode_json
        self.__name__ = getattr(func, "__name__", type(func).__name__)

    async def invoke(self, event: RawEvent, context: InvocationContext) -> Outcome:
        """Decode, call the function and wrap its chunk producer."""
        payload = decode_event(event) if self._decode_json else event
        result = await resolve_result(self._func(payload, context))
        if not isinstance(result, AsyncIterable):
            error_message = (
                f"Streaming handler returned {type(result).__name__}, expected an async iterable"
            )
            raise TypeError(error_message)
        chunks: ChunkProducer = result
        return Streamed(chunks)


def handler_fn(
    func: EventFunction | None = None,
    *,
    decode_json: bool = True,
) -> Any:
    """Adapt a plain function into a buffered Handler.

    Usable bare (``@handler_fn``) or with options (``@handler_fn(decode_json=False)``).

    Args:
        func: The function to adapt.
        decode_json: Whether the event is JSON-decoded before the call.

    Returns:
        A FunctionHandler, or a decorator producing one.
    """

    def wrap(target: EventFunction) -> FunctionHandler:
        return FunctionHandler(target, decode_json=decode_json)

    if func is None:
        return wrap
    return wrap(func)


def streaming_handler_fn(
    func: EventFunction | None = None,
    *,
    decode_json: bool = True,
) -> Any:
    """Adapt a chunk-producing function into a streaming Handler.

    Args:
        func: The function to adapt.
        decode_json: Whether the event is JSON-decoded before the call.

    Returns:
        A StreamingFunctionHandler, or a decorator producing one.
    """

    def wrap(target: EventFunction) -> StreamingFunctionHandler:
        return StreamingFunctionHandler(target, decode_json=decode_json)

    if func is None:
        return wrap
    return wrap(func)
