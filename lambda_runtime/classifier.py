"""Error classifier: maps every observed failure to one disposition.

Anything that breaks the conversation with the control endpoint must restart
the execution environment. Anything confined to one invocation's business
logic must not cost the environment its warm state.

| Failure source                               | Disposition               |
|----------------------------------------------|---------------------------|
| handler failure or caught panic              | REPORT_AND_CONTINUE       |
| fetch transport error, retryable             | RETRY_FETCH               |
| fetch transport error, not retryable         | TERMINATE                 |
| malformed invocation headers                 | TERMINATE                 |
| transport error while reporting              | TERMINATE                 |
| producer failure after streaming began       | TRAILER_AND_CONTINUE      |
| handler construction error                   | REPORT_INIT_AND_TERMINATE |
"""

from enum import StrEnum

from lambda_runtime.exceptions.control_plane_errors import ProtocolError, TransportError
from lambda_runtime.exceptions.invocation_errors import InvocationError, StreamError
from lambda_runtime.response.state import StreamState


class FailureSource(StrEnum):
    """Where in the lifecycle a failure was observed."""

    INIT = "init"
    FETCH = "fetch"
    HANDLER = "handler"
    STREAM = "stream"
    REPORT = "report"


class Disposition(StrEnum):
    """What the runtime does about a failure."""

    REPORT_AND_CONTINUE = "report_and_continue"
    TRAILER_AND_CONTINUE = "trailer_and_continue"
    RETRY_FETCH = "retry_fetch"
    TERMINATE = "terminate"
    REPORT_INIT_AND_TERMINATE = "report_init_and_terminate"

    @property
    def is_fatal(self) -> bool:
        """Whether the disposition ends the process."""
        return self in {Disposition.TERMINATE, Disposition.REPORT_INIT_AND_TERMINATE}


def classify(error: BaseException, source: FailureSource) -> Disposition:
    """Classify a failure.

    Args:
        error: The observed exception.
        source: Lifecycle step that observed it.

    Returns:
        The disposition to apply.
    """
    if source == FailureSource.INIT:
        return Disposition.REPORT_INIT_AND_TERMINATE

    if isinstance(error, ProtocolError):
        return Disposition.TERMINATE

    if isinstance(error, TransportError):
        if source == FailureSource.FETCH and error.retryable:
            return Disposition.RETRY_FETCH
        return Disposition.TERMINATE

    if isinstance(error, StreamError) or source == FailureSource.STREAM:
        return Disposition.TRAILER_AND_CONTINUE

    if isinstance(error, InvocationError) or source == FailureSource.HANDLER:
        return Disposition.REPORT_AND_CONTINUE

    return Disposition.TERMINATE


def route_failure(state: StreamState) -> Disposition:
    """Choose how a failure outcome reaches the platform for a stream state.

    The error endpoint is only legal before any bytes were sent; once the
    stream has begun the failure must travel in the trailer.

    Args:
        state: Current state of the invocation's response.

    Returns:
        REPORT_AND_CONTINUE, TRAILER_AND_CONTINUE, or TERMINATE when the
        response is already finished.
    """
    if state == StreamState.NOT_STARTED:
        return Disposition.REPORT_AND_CONTINUE
    if state == StreamState.STREAMING:
        return Disposition.TRAILER_AND_CONTINUE
    return Disposition.TERMINATE
