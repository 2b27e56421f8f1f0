"""Process entry point for the Lambda runtime.

Builds the handler, reports initialization errors, runs the loop and maps
its end onto a process exit status: 0 for a requested shutdown, 1 for any
fatal disposition.

Usage:
    from lambda_runtime import handler_fn, start

    @handler_fn
    async def handler(event, context):
        return {"message": f"Hello, {event['firstName']}!"}

    if __name__ == "__main__":
        start(handler)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import signal
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn

from pydantic import ValidationError

from lambda_runtime.classifier import FailureSource, classify
from lambda_runtime.client.runtime_api import RuntimeApiClient
from lambda_runtime.config import validate_startup_config
from lambda_runtime.exceptions.control_plane_errors import (
    ConfigurationError,
    FatalRuntimeError,
    TransportError,
)
from lambda_runtime.exceptions.handlers import error_payload_from_exception
from lambda_runtime.handler.base import Handler
from lambda_runtime.logging.logger import setup_logging, write_fatal_diagnostic
from lambda_runtime.runtime import Runtime

if TYPE_CHECKING:
    from lambda_runtime.config import RuntimeSettings

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FATAL = 1

HandlerFactory = Callable[[], Any]

_PROPAGATED_EXCEPTIONS = (asyncio.CancelledError, KeyboardInterrupt, SystemExit)


async def build_handler(handler: Handler | HandlerFactory) -> Handler:
    """Resolve a handler or a (sync or async) factory producing one.

    Args:
        handler: A Handler, or a zero-argument callable returning one.

    Returns:
        The constructed handler.

    Raises:
        ConfigurationError: If the factory produced something other than a Handler.
    """
    if isinstance(handler, Handler):
        return handler

    built = handler()
    if inspect.isawaitable(built):
        built = await built
    if not isinstance(built, Handler):
        error_message = f"Handler factory returned {type(built).__name__}, expected a Handler"
        raise ConfigurationError(error_message)
    return built


async def report_init_failure(client: RuntimeApiClient, error: BaseException) -> None:
    """Report a handler construction failure once. Never raises transport errors."""
    disposition = classify(error, FailureSource.INIT)
    payload = error_payload_from_exception(error)
    logger.critical(
        "Handler initialization failed",
        extra={"error_type": payload["errorType"], "disposition": disposition},
    )
    try:
        await client.report_init_error(
            payload["errorType"],
            payload["errorMessage"],
            payload.get("stackTrace"),
        )
    except TransportError as transport_error:
        logger.critical("Init error could not be reported: %s", transport_error.message)


def _install_signal_handlers(runtime: Runtime) -> None:
    """Stop the runtime gracefully on SIGTERM and SIGINT."""
    loop = asyncio.get_running_loop()
    for signal_number in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signal_number, runtime.stop)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handlers unavailable for %s", signal_number)


async def run(
    handler: Handler | HandlerFactory,
    *,
    settings: RuntimeSettings | None = None,
    client: RuntimeApiClient | None = None,
    install_signal_handlers: bool = True,
) -> int:
    """Build the handler and run the invocation loop.

    Args:
        handler: A Handler, or a zero-argument factory returning one.
        settings: Runtime settings. Loaded from the environment if omitted.
        client: Runtime API client. Built from ``settings`` if omitted.
        install_signal_handlers: Whether SIGTERM/SIGINT request a graceful stop.

    Returns:
        Process exit status.
    """
    setup_logging()

    if settings is None:
        try:
            settings = validate_startup_config()
        except ValidationError as error:
            write_fatal_diagnostic(f"invalid runtime configuration: {error}")
            return EXIT_FATAL

    api_client = client if client is not None else RuntimeApiClient(settings)
    async with api_client:
        try:
            resolved = await build_handler(handler)
        except _PROPAGATED_EXCEPTIONS:
            raise
        except BaseException as error:
            await report_init_failure(api_client, error)
            write_fatal_diagnostic(f"handler initialization failed: {error}")
            return EXIT_FATAL

        runtime = Runtime(resolved, api_client, settings)
        if install_signal_handlers:
            _install_signal_handlers(runtime)

        try:
            await runtime.run()
        except FatalRuntimeError as error:
            write_fatal_diagnostic(error.message)
            return EXIT_FATAL

    return EXIT_SUCCESS


def start(
    handler: Handler | HandlerFactory,
    settings: RuntimeSettings | None = None,
) -> NoReturn:
    """Run the runtime in a fresh event loop and exit the process.

    Args:
        handler: A Handler, or a zero-argument factory returning one.
        settings: Runtime settings. Loaded from the environment if omitted.
    """
    exit_code = asyncio.run(run(handler, settings=settings))
    logger.info("Exiting", extra={"exit_code": exit_code})
    sys.exit(exit_code)
