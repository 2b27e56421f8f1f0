"""Per-invocation response channel.

Routes exactly one Outcome to the Runtime API while tracking whether any
response bytes were committed, which decides the legal error mechanism:
the error endpoint before the first chunk, the in-band trailer after it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from lambda_runtime.classifier import Disposition, route_failure
from lambda_runtime.exceptions.control_plane_errors import RuntimeStateError
from lambda_runtime.exceptions.handlers import format_stack_trace
from lambda_runtime.exceptions.invocation_errors import InvocationError, StreamError
from lambda_runtime.handler.outcome import Buffered, Failure, Streamed
from lambda_runtime.response.state import StreamState
from lambda_runtime.response.trailer import encode_trailer

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from lambda_runtime.client.runtime_api import RuntimeApiClient
    from lambda_runtime.handler.outcome import Outcome
    from lambda_runtime.types import Chunk, ChunkProducer

logger = logging.getLogger(__name__)

_PROPAGATED_EXCEPTIONS = (asyncio.CancelledError, KeyboardInterrupt, SystemExit)


def _encode_chunk(chunk: Chunk) -> bytes:
    """Convert a produced chunk to bytes.

    Raises:
        TypeError: If the producer yielded something other than bytes or text.
    """
    if isinstance(chunk, bytes | bytearray | memoryview):
        return bytes(chunk)
    if isinstance(chunk, str):
        return chunk.encode()
    error_message = f"Stream producer yielded {type(chunk).__name__}, expected bytes or str"
    raise TypeError(error_message)


def _failure_from_producer_error(error: BaseException, *, mid_stream: bool) -> Failure:
    """Convert a producer exception into a failure description."""
    if isinstance(error, InvocationError):
        return Failure.from_error(error)
    if not mid_stream:
        return Failure.from_panic(error)
    return Failure(
        error_type=StreamError.error_type,
        error_message=f"{type(error).__name__}: {error}",
        stack_trace=format_stack_trace(error),
    )


async def _pull_first_chunk(iterator: AsyncIterator[Chunk]) -> bytes:
    """Pull until the producer yields a non-empty chunk.

    Returns:
        The first non-empty chunk, or ``b""`` if the producer is exhausted.
    """
    while True:
        try:
            chunk = _encode_chunk(await anext(iterator))
        except StopAsyncIteration:
            return b""
        if chunk:
            return chunk


async def _close_producer(iterator: AsyncIterator[Chunk]) -> BaseException | None:
    """Close an async generator producer that was abandoned early.

    Returns:
        The exception raised by the producer's cleanup, if any.
    """
    close = getattr(iterator, "aclose", None)
    if close is None:
        return None
    try:
        await close()
    except _PROPAGATED_EXCEPTIONS:
        raise
    except BaseException as error:
        logger.warning("Stream producer failed while closing", exc_info=True)
        return error
    return None


class ResponseChannel:
    """Delivers the outcome of one invocation.

    A channel is created per invocation and accepts exactly one outcome.
    """

    def __init__(self, client: RuntimeApiClient, request_id: str) -> None:
        """Initialize the channel.

        Args:
            client: Runtime API client used for the report calls.
            request_id: Request id every report is addressed to.
        """
        self._client = client
        self._request_id = request_id
        self._state = StreamState.NOT_STARTED
        self._outcome_accepted = False
        self._pending_trailer: Failure | None = None
        self._chunks_sent = 0

    @property
    def state(self) -> StreamState:
        """Current state of the response."""
        return self._state

    @property
    def chunks_sent(self) -> int:
        """Number of non-empty chunks handed to the transport."""
        return self._chunks_sent

    @property
    def trailer_failure(self) -> Failure | None:
        """Failure emitted in the trailer, if the stream errored."""
        return self._pending_trailer

    async def send(self, outcome: Outcome) -> StreamState:
        """Route an outcome to the matching report operation.

        Args:
            outcome: The invocation's single outcome.

        Returns:
            Final state of the response.

        Raises:
            RuntimeStateError: If an outcome was already sent on this channel.
            TransportError: If a report call fails.
        """
        if isinstance(outcome, Buffered):
            return await self.send_buffered(outcome.payload)
        if isinstance(outcome, Streamed):
            return await self.send_stream(outcome.chunks)
        return await self.send_failure(outcome)

    async def send_buffered(self, payload: bytes) -> StreamState:
        """Send a whole payload as the one and only chunk.

        NOT_STARTED moves straight to COMPLETED in this single call.
        """
        self._accept_outcome()
        self._state = StreamState.STREAMING
        await self._client.report_success(self._request_id, payload)
        self._chunks_sent = 1 if payload else 0
        self._state = StreamState.COMPLETED
        return self._state

    async def send_failure(self, failure: Failure) -> StreamState:
        """Report a failure through the mechanism legal for the current state.

        Before any bytes: the error endpoint. While streaming: the trailer,
        emitted by the stream body once the current chunk is written.
        """
        disposition = route_failure(self._state)

        if disposition == Disposition.TRAILER_AND_CONTINUE:
            logger.warning(
                "Failure raised after streaming began, routing to trailer",
                extra={"error_type": failure.error_type},
            )
            self._pending_trailer = failure
            return self._state

        if disposition == Disposition.TERMINATE:
            error_message = f"Cannot report failure, response already {self._state}"
            raise RuntimeStateError(error_message, context={"request_id": self._request_id})

        self._accept_outcome()
        await self._report_failure(failure)
        return self._state

    async def send_stream(self, producer: ChunkProducer) -> StreamState:
        """Stream chunks from a producer as they are produced.

        The first non-empty chunk is pulled before any request is opened, so a
        producer that fails before yielding bytes is still reported through the
        error endpoint.
        """
        self._accept_outcome()

        try:
            iterator = aiter(producer)
        except TypeError as error:
            logger.warning("Stream producer is not an async iterable")
            await self._report_failure(Failure.from_panic(error))
            return self._state

        try:
            first_chunk = await _pull_first_chunk(iterator)
        except _PROPAGATED_EXCEPTIONS:
            raise
        except BaseException as error:
            logger.warning("Stream producer failed before the first chunk")
            await _close_producer(iterator)
            await self._report_failure(_failure_from_producer_error(error, mid_stream=False))
            return self._state

        self._state = StreamState.STREAMING
        await self._client.report_stream(self._request_id, self._body(first_chunk, iterator))

        if self._state == StreamState.STREAMING:
            self._state = StreamState.COMPLETED
        return self._state

    async def _body(
        self,
        first_chunk: bytes,
        iterator: AsyncIterator[Chunk],
    ) -> AsyncIterator[bytes]:
        """Request body: produced chunks, then the trailer if the producer failed."""
        try:
            if first_chunk:
                self._chunks_sent += 1
                yield first_chunk

            while self._pending_trailer is None:
                try:
                    chunk = _encode_chunk(await anext(iterator))
                except StopAsyncIteration:
                    break
                except _PROPAGATED_EXCEPTIONS:
                    raise
                except BaseException as error:
                    logger.warning(
                        "Stream producer failed after %d chunks",
                        self._chunks_sent,
                        exc_info=True,
                    )
                    self._pending_trailer = _failure_from_producer_error(error, mid_stream=True)
                    break

                if self._pending_trailer is not None:
                    break
                if chunk:
                    self._chunks_sent += 1
                    yield chunk
        finally:
            close_error = await _close_producer(iterator)
            if close_error is not None and self._pending_trailer is None:
                self._pending_trailer = _failure_from_producer_error(close_error, mid_stream=True)

        if self._pending_trailer is not None:
            self._state = StreamState.ERRORED_MID_STREAM
            yield encode_trailer(self._pending_trailer.to_error_payload())

    async def _report_failure(self, failure: Failure) -> None:
        """Post a failure to the error endpoint."""
        await self._client.report_failure(
            self._request_id,
            failure.error_type,
            failure.error_message,
            failure.stack_trace,
        )

    def _accept_outcome(self) -> None:
        """Enforce exactly one outcome per channel."""
        if self._outcome_accepted:
            error_message = "An outcome was already sent for this invocation"
            raise RuntimeStateError(error_message, context={"request_id": self._request_id})
        self._outcome_accepted = True

