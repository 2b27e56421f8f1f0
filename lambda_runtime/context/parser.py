"""Builds an InvocationContext from next-invocation response headers."""

import json
import logging
from collections.abc import Mapping
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from lambda_runtime.config import RuntimeSettings
from lambda_runtime.context.models import ClientContext, CognitoIdentity, InvocationContext
from lambda_runtime.exceptions.control_plane_errors import ProtocolError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

REQUEST_ID_HEADER = "lambda-runtime-aws-request-id"
DEADLINE_HEADER = "lambda-runtime-deadline-ms"
FUNCTION_ARN_HEADER = "lambda-runtime-invoked-function-arn"
TRACE_ID_HEADER = "lambda-runtime-trace-id"
CLIENT_CONTEXT_HEADER = "lambda-runtime-client-context"
COGNITO_IDENTITY_HEADER = "lambda-runtime-cognito-identity"


def _lookup(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup for plain dict headers."""
    value = headers.get(name)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


def _parse_request_id(headers: Mapping[str, str]) -> str:
    """Extract the mandatory request id.

    Raises:
        ProtocolError: If the header is missing or blank.
    """
    value = _lookup(headers, REQUEST_ID_HEADER)
    if value is None or not value.strip():
        raise ProtocolError("Missing request id header", header=REQUEST_ID_HEADER)
    return value.strip()


def _parse_deadline(headers: Mapping[str, str]) -> int:
    """Extract the mandatory deadline in epoch milliseconds.

    Raises:
        ProtocolError: If the header is missing or not a non-negative integer.
    """
    value = _lookup(headers, DEADLINE_HEADER)
    if value is None:
        raise ProtocolError("Missing deadline header", header=DEADLINE_HEADER)
    try:
        deadline_ms = int(value.strip())
    except ValueError as error:
        raise ProtocolError(
            f"Malformed deadline header: {value!r}",
            header=DEADLINE_HEADER,
            value=value,
        ) from error
    if deadline_ms < 0:
        raise ProtocolError("Negative deadline header", header=DEADLINE_HEADER, value=value)
    return deadline_ms


def _parse_optional_json(
    headers: Mapping[str, str],
    name: str,
    model: type[ModelT],
) -> ModelT | None:
    """Decode an optional JSON header, degrading to None when malformed."""
    raw_value = _lookup(headers, name)
    if raw_value is None or not raw_value.strip():
        return None
    try:
        return model.model_validate(json.loads(raw_value))
    except (json.JSONDecodeError, ValidationError):
        logger.warning("Ignoring malformed %s header", name)
        return None


def parse_invocation_context(
    headers: Mapping[str, str],
    settings: RuntimeSettings,
) -> InvocationContext:
    """Construct an InvocationContext from next-invocation response headers.

    Required fields fail the parse; optional structured fields degrade to
    absent so the invocation stays processable with partial metadata.

    Args:
        headers: Response headers of the next-invocation call.
        settings: Read-only runtime settings supplying function metadata.

    Returns:
        The parsed invocation context.

    Raises:
        ProtocolError: If the request id or deadline is missing or malformed.
    """
    trace_id = _lookup(headers, TRACE_ID_HEADER)

    return InvocationContext(
        request_id=_parse_request_id(headers),
        deadline_ms=_parse_deadline(headers),
        invoked_function_arn=_lookup(headers, FUNCTION_ARN_HEADER) or "",
        trace_id=trace_id or None,
        client_context=_parse_optional_json(headers, CLIENT_CONTEXT_HEADER, ClientContext),
        identity=_parse_optional_json(headers, COGNITO_IDENTITY_HEADER, CognitoIdentity),
        function_name=settings.aws_lambda_function_name,
        function_version=settings.aws_lambda_function_version,
        memory_limit_in_mb=settings.aws_lambda_function_memory_size,
        log_group_name=settings.aws_lambda_log_group_name,
        log_stream_name=settings.aws_lambda_log_stream_name,
    )
