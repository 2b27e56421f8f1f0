"""Structured logging for the Lambda runtime.

Usage:
    from lambda_runtime.logging import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info("Invocation received", extra={"event_bytes": 42})
"""

from lambda_runtime.logging.adapters.invocation_adapter import (
    clear_invocation_context,
    set_invocation_context,
)
from lambda_runtime.logging.config import LoggingConfig
from lambda_runtime.logging.context import (
    clear_context,
    get_extra_context,
    get_request_id,
    request_id,
    set_extra_context,
    set_request_id,
)
from lambda_runtime.logging.formatters import JSONFormatter, TextFormatter
from lambda_runtime.logging.logger import get_logger, setup_logging, write_fatal_diagnostic

__all__ = [
    "JSONFormatter",
    "LoggingConfig",
    "TextFormatter",
    "clear_context",
    "clear_invocation_context",
    "get_extra_context",
    "get_logger",
    "get_request_id",
    "request_id",
    "set_extra_context",
    "set_invocation_context",
    "set_request_id",
    "setup_logging",
    "write_fatal_diagnostic",
]
