"""Adapter for setting logging context from the invocation being processed."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lambda_runtime.logging.context import clear_context, set_extra_context, set_request_id

if TYPE_CHECKING:
    from lambda_runtime.context.models import InvocationContext


def set_invocation_context(context: InvocationContext) -> None:
    """Set logging context from an invocation context.

    Args:
        context: Metadata of the invocation about to be handled.
    """
    set_request_id(context.request_id)
    set_extra_context(
        function_name=context.function_name,
        function_version=context.function_version,
    )

    if context.trace_id:
        set_extra_context(xray_trace_id=context.trace_id)


def clear_invocation_context() -> None:
    """Drop all invocation-scoped logging fields."""
    clear_context()
