"""Invocation outcomes: the single result a handler produces per invocation."""

from dataclasses import dataclass
from typing import Any

from lambda_runtime.exceptions.handlers import create_error_payload, format_stack_trace
from lambda_runtime.exceptions.invocation_errors import InvocationError, PanicError
from lambda_runtime.types import ChunkProducer


@dataclass(frozen=True)
class Buffered:
    """Success with one complete payload."""

    payload: bytes


@dataclass(frozen=True)
class Streamed:
    """Success delivered as a lazy, finite, non-restartable chunk sequence.

    The producer is consumed exactly once and may fail mid-production.
    """

    chunks: ChunkProducer


@dataclass(frozen=True)
class Failure:
    """Structured error reported to the invocation's error endpoint."""

    error_type: str
    error_message: str
    stack_trace: list[str] | None = None

    @classmethod
    def from_error(cls, error: InvocationError) -> "Failure":
        """Build a failure from a recovered invocation error."""
        return cls(
            error_type=error.failure_type,
            error_message=error.message,
            stack_trace=error.stack_trace,
        )

    @classmethod
    def from_panic(cls, error: BaseException) -> "Failure":
        """Build a ``runtime.Panic`` failure from an unexpected exception."""
        return cls(
            error_type=PanicError.error_type,
            error_message=f"{type(error).__name__}: {error}",
            stack_trace=format_stack_trace(error),
        )

    def to_error_payload(self) -> dict[str, Any]:
        """Convert to the Runtime API error document."""
        return create_error_payload(self.error_type, self.error_message, self.stack_trace)


Outcome = Buffered | Streamed | Failure
