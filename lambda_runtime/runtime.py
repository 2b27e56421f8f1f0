"""Runtime loop: fetch, invoke, report, repeat.

State machine per iteration: IDLE -> FETCHING -> INVOKING -> REPORTING -> IDLE,
with TERMINATED reachable from any state. Exactly one invocation is in flight
at a time; the only state surviving an iteration is the read-only settings
and the diagnostic counters.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, NoReturn

from lambda_runtime.backoff import BackoffPolicy
from lambda_runtime.classifier import Disposition, FailureSource, classify
from lambda_runtime.exceptions.base import LambdaRuntimeError
from lambda_runtime.exceptions.control_plane_errors import (
    FatalRuntimeError,
    ProtocolError,
    RuntimeStateError,
    TransportError,
)
from lambda_runtime.exceptions.invocation_errors import PanicError, StreamError
from lambda_runtime.handler.isolation import invoke_isolated
from lambda_runtime.handler.outcome import Failure
from lambda_runtime.logging.adapters.invocation_adapter import (
    clear_invocation_context,
    set_invocation_context,
)
from lambda_runtime.response.channel import ResponseChannel
from lambda_runtime.response.state import StreamState

if TYPE_CHECKING:
    from lambda_runtime.client.runtime_api import RuntimeApiClient
    from lambda_runtime.config import RuntimeSettings
    from lambda_runtime.context.models import InvocationContext
    from lambda_runtime.handler.base import Handler
    from lambda_runtime.handler.outcome import Outcome

logger = logging.getLogger(__name__)

TRACE_ID_ENV_VAR = "_X_AMZN_TRACE_ID"

SleepFunction = Callable[[float], Awaitable[None]]


class LoopState(StrEnum):
    """Runtime loop states."""

    IDLE = "idle"
    FETCHING = "fetching"
    INVOKING = "invoking"
    REPORTING = "reporting"
    TERMINATED = "terminated"


@dataclass
class RuntimeCounters:
    """Diagnostic counters kept across iterations."""

    invocations: int = field(default=0)
    successes: int = field(default=0)
    failures: int = field(default=0)
    panics: int = field(default=0)
    stream_errors: int = field(default=0)
    fetch_retries: int = field(default=0)


class Runtime:
    """Drives a handler against the Runtime API until terminated or stopped."""

    def __init__(
        self,
        handler: Handler,
        client: RuntimeApiClient,
        settings: RuntimeSettings,
        *,
        backoff: BackoffPolicy | None = None,
        sleep: SleepFunction = asyncio.sleep,
    ) -> None:
        """Initialize the runtime loop.

        Args:
            handler: Handler invoked once per invocation.
            client: Runtime API client.
            settings: Read-only runtime settings.
            backoff: Retry policy for retryable fetch errors.
            sleep: Coroutine used to wait between fetch attempts.
        """
        self._handler = handler
        self._client = client
        self._settings = settings
        self._backoff = backoff or BackoffPolicy.from_settings(settings)
        self._sleep = sleep
        self._state = LoopState.IDLE
        self._counters = RuntimeCounters()
        self._stopping = False
        self._fetch_task: asyncio.Future[tuple[InvocationContext, bytes]] | None = None

    @property
    def state(self) -> LoopState:
        """Current loop state."""
        return self._state

    @property
    def counters(self) -> RuntimeCounters:
        """Diagnostic counters."""
        return self._counters

    def stop(self) -> None:
        """Request a graceful stop.

        An idle wait for the next invocation is abandoned immediately; an
        invocation in progress is finished and reported first.
        """
        logger.info("Stop requested", extra={"loop_state": self._state})
        self._stopping = True
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()

    async def run(self) -> None:
        """Loop over invocations until stopped.

        Raises:
            FatalRuntimeError: On any fatal disposition. The caller must end
                the process with a non-zero status.
        """
        logger.info(
            "Runtime loop started",
            extra={"endpoint": self._settings.runtime_api_base_url},
        )
        while not self._stopping:
            await self.run_once()

        self._state = LoopState.TERMINATED
        logger.info("Runtime loop stopped", extra={"invocations": self._counters.invocations})

    async def run_once(self) -> StreamState | None:
        """Run a single fetch/invoke/report iteration.

        Returns:
            Final response state of the invocation, or None if a stop request
            interrupted the fetch.

        Raises:
            FatalRuntimeError: On any fatal disposition.
        """
        fetched = await self._fetch()
        if fetched is None:
            return None

        context, event = fetched
        self._counters.invocations += 1
        self._enter_invocation(context)
        try:
            self._state = LoopState.INVOKING
            outcome = await invoke_isolated(self._handler, event, context)
            del event

            self._state = LoopState.REPORTING
            final_state = await self._report(context, outcome)
        finally:
            self._leave_invocation()

        self._state = LoopState.IDLE
        return final_state

    async def _fetch(self) -> tuple[InvocationContext, bytes] | None:
        """Fetch the next invocation, retrying retryable failures with backoff."""
        attempt = 0
        while True:
            attempt += 1
            self._state = LoopState.FETCHING
            self._fetch_task = asyncio.ensure_future(self._client.fetch_next())
            try:
                return await self._fetch_task
            except asyncio.CancelledError:
                if self._stopping:
                    logger.info("Fetch abandoned for shutdown")
                    self._state = LoopState.IDLE
                    return None
                raise
            except (TransportError, ProtocolError) as error:
                disposition = classify(error, FailureSource.FETCH)
                if disposition == Disposition.RETRY_FETCH and self._backoff.should_retry(attempt):
                    delay_ms = self._backoff.delay_ms(attempt)
                    self._counters.fetch_retries += 1
                    logger.warning(
                        "Fetch failed, retrying in %d ms",
                        delay_ms,
                        extra={"attempt": attempt, "error": error.message},
                    )
                    await self._sleep(delay_ms / 1000)
                    if self._stopping:
                        self._state = LoopState.IDLE
                        return None
                    continue
                self._terminate(error, f"Cannot fetch next invocation: {error.message}")
            finally:
                self._fetch_task = None

    async def _report(self, context: InvocationContext, outcome: Outcome) -> StreamState:
        """Route an outcome through a fresh response channel."""
        channel = ResponseChannel(self._client, context.request_id)
        try:
            final_state = await channel.send(outcome)
        except (TransportError, RuntimeStateError) as error:
            disposition = classify(error, FailureSource.REPORT)
            if disposition.is_fatal:
                self._terminate(
                    error,
                    f"Cannot report outcome of {context.request_id}: {error.message}",
                )
            raise

        self._record(outcome, channel)
        return final_state

    def _record(self, outcome: Outcome, channel: ResponseChannel) -> None:
        """Update diagnostic counters for a reported outcome."""
        if channel.state == StreamState.ERRORED_MID_STREAM:
            self._counters.stream_errors += 1
            failure = channel.trailer_failure
            logger.warning(
                "Response stream ended with trailer",
                extra={
                    "chunks_sent": channel.chunks_sent,
                    "error_type": failure.error_type if failure else StreamError.error_type,
                },
            )
            return

        if isinstance(outcome, Failure) or channel.state == StreamState.NOT_STARTED:
            self._counters.failures += 1
            if isinstance(outcome, Failure) and outcome.error_type == PanicError.error_type:
                self._counters.panics += 1
            logger.info("Invocation failed")
            return

        self._counters.successes += 1
        logger.debug("Invocation succeeded", extra={"chunks_sent": channel.chunks_sent})

    def _enter_invocation(self, context: InvocationContext) -> None:
        """Expose the invocation to logging and tracing."""
        set_invocation_context(context)
        if context.trace_id:
            os.environ[TRACE_ID_ENV_VAR] = context.trace_id
        else:
            os.environ.pop(TRACE_ID_ENV_VAR, None)
        logger.debug("Invoking handler", extra={"deadline_ms": context.deadline_ms})

    def _leave_invocation(self) -> None:
        """Drop all invocation-scoped state."""
        clear_invocation_context()

    def _terminate(self, error: LambdaRuntimeError, message: str) -> NoReturn:
        """Enter TERMINATED and raise the fatal error for the caller."""
        self._state = LoopState.TERMINATED
        logger.critical(message, extra={"counters": self._counters.__dict__})
        raise FatalRuntimeError(message, cause=error) from error

