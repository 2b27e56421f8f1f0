"""Panic isolation boundary around a single handler invocation.

Whatever a handler does, the boundary hands exactly one Outcome back to the
runtime loop. Failures confined to the invocation never unwind past it.
"""

import asyncio
import logging

from lambda_runtime.context.models import InvocationContext
from lambda_runtime.exceptions.invocation_errors import InvocationError, PanicError
from lambda_runtime.handler.base import Handler
from lambda_runtime.handler.outcome import Buffered, Failure, Outcome, Streamed
from lambda_runtime.types import RawEvent

logger = logging.getLogger(__name__)

# Shutdown signals, not handler defects
_PROPAGATED_EXCEPTIONS = (asyncio.CancelledError, KeyboardInterrupt, SystemExit)


async def invoke_isolated(
    handler: Handler,
    event: RawEvent,
    context: InvocationContext,
) -> Outcome:
    """Run one handler invocation under the isolation boundary.

    - A raised InvocationError becomes a Failure with its own error type.
    - Any other exception becomes a ``runtime.Panic`` Failure with a stack trace.
    - A return value that is not an Outcome is treated as a panic as well.

    Args:
        handler: The handler to invoke.
        event: Raw event bytes.
        context: Metadata of the invocation.

    Returns:
        The single outcome of the invocation.
    """
    try:
        outcome = await handler.invoke(event, context)
    except _PROPAGATED_EXCEPTIONS:
        raise
    except InvocationError as error:
        logger.info(
            "Handler reported failure",
            extra={"error_type": error.failure_type},
        )
        return Failure.from_error(error)
    except BaseException as error:
        logger.exception("Handler terminated abruptly")
        return Failure.from_panic(error)

    if not isinstance(outcome, Buffered | Streamed | Failure):
        logger.error("Handler returned %s instead of an outcome", type(outcome).__name__)
        return Failure(
            error_type=PanicError.error_type,
            error_message=f"Handler returned {type(outcome).__name__}, expected an Outcome",
        )

    return outcome
