"""Response stream lifecycle."""

from enum import StrEnum


class StreamState(StrEnum):
    """Lifecycle of one invocation's response.

    NOT_STARTED -> STREAMING -> COMPLETED | ERRORED_MID_STREAM. Which error
    reporting mechanism is legal depends on whether bytes were committed.
    """

    NOT_STARTED = "not_started"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ERRORED_MID_STREAM = "errored_mid_stream"

    @property
    def is_terminal(self) -> bool:
        """Whether the response is finished."""
        return self in {StreamState.COMPLETED, StreamState.ERRORED_MID_STREAM}
