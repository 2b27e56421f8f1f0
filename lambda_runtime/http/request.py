"""Normalized HTTP requests built from proxy integration events.

API Gateway REST (v1), API Gateway HTTP (v2) and Application Load Balancer
events all describe an HTTP request, each in its own shape. This module
folds them into one ``HttpRequest``.
"""

import base64
import binascii
import json
from enum import StrEnum
from typing import Any, TypeGuard
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field

from lambda_runtime.exceptions.invocation_errors import HandlerError
from lambda_runtime.types import JSONValue, LambdaEvent

FORWARDED_PROTO_HEADER = "x-forwarded-proto"
HOST_HEADER = "host"
COOKIE_HEADER = "cookie"
DEFAULT_SCHEME = "https"
DEFAULT_HOST = "localhost"

HeaderMap = dict[str, list[str]]


class RequestOrigin(StrEnum):
    """Integration that produced the event."""

    API_GATEWAY_V1 = "api_gateway_v1"
    API_GATEWAY_V2 = "api_gateway_v2"
    ALB = "alb"


class HttpRequest(BaseModel):
    """An HTTP request delivered through a proxy integration.

    Attributes:
        origin: Integration the event came from; responses are shaped for it.
        method: HTTP method, uppercase.
        url: Absolute URL rebuilt from the forwarded scheme and host.
        path: Request path.
        headers: Header values by lowercase name.
        query: Query string values by name.
        path_parameters: Route parameters matched by API Gateway.
        stage_variables: API Gateway stage variables.
        request_context: Integration-specific request context, untouched.
        body: Decoded body bytes.
    """

    model_config = ConfigDict(frozen=True)

    origin: RequestOrigin
    method: str
    url: str
    path: str = ""
    headers: HeaderMap = Field(default_factory=dict)
    query: dict[str, list[str]] = Field(default_factory=dict)
    path_parameters: dict[str, str] = Field(default_factory=dict)
    stage_variables: dict[str, str] = Field(default_factory=dict)
    request_context: dict[str, Any] = Field(default_factory=dict)
    body: bytes = b""

    def header(self, name: str) -> str | None:
        """First value of a header, looked up case-insensitively."""
        values = self.headers.get(name.lower())
        return values[0] if values else None

    def query_value(self, name: str) -> str | None:
        """First value of a query string parameter."""
        values = self.query.get(name)
        return values[0] if values else None

    def body_text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode()

    def body_json(self) -> JSONValue:
        """Body decoded as JSON.

        Raises:
            HandlerError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.body)
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise HandlerError(f"Failed to decode request body as JSON: {error}") from error


def _is_string_dict(value: object) -> TypeGuard[dict[str, Any]]:
    """Type guard to check if value is a dict with string keys."""
    return isinstance(value, dict)


def _mapping(event: LambdaEvent, key: str) -> dict[str, Any]:
    """Return a mapping field of the event, treating null as empty."""
    value = event.get(key)
    return value if _is_string_dict(value) else {}


def detect_origin(event: LambdaEvent) -> RequestOrigin:
    """Work out which integration produced an event.

    Args:
        event: The decoded event.

    Returns:
        The request origin.

    Raises:
        HandlerError: If the event is not an HTTP proxy event.
    """
    request_context = _mapping(event, "requestContext")
    if event.get("version") == "2.0" and _is_string_dict(request_context.get("http")):
        return RequestOrigin.API_GATEWAY_V2
    if "elb" in request_context:
        return RequestOrigin.ALB
    if "httpMethod" in event:
        return RequestOrigin.API_GATEWAY_V1
    raise HandlerError("Event is not an API Gateway or ALB proxy event")


def _merge_headers(event: LambdaEvent) -> HeaderMap:
    """Fold single and multi-value headers, preferring the multi-value ones."""
    headers: HeaderMap = {}
    for name, value in _mapping(event, "headers").items():
        if value is not None:
            headers[name.lower()] = [str(value)]
    for name, values in _mapping(event, "multiValueHeaders").items():
        if values:
            headers[name.lower()] = [str(value) for value in values]
    return headers


def _merge_query(event: LambdaEvent, *, decode: bool = False) -> dict[str, list[str]]:
    """Fold query parameters, preferring the multi-value ones when present."""
    multi_value = _mapping(event, "multiValueQueryStringParameters")
    if multi_value:
        query = {
            name: [str(value) for value in values or []]
            for name, values in multi_value.items()
        }
    else:
        query = {
            name: [str(value)]
            for name, value in _mapping(event, "queryStringParameters").items()
            if value is not None
        }
    if decode:
        return {
            unquote(name): [unquote(value) for value in values]
            for name, values in query.items()
        }
    return query


def _split_v2_query(event: LambdaEvent) -> dict[str, list[str]]:
    """HTTP API joins repeated query values with commas."""
    return {
        name: str(value).split(",")
        for name, value in _mapping(event, "queryStringParameters").items()
        if value is not None
    }


def _decode_body(event: LambdaEvent) -> bytes:
    """Decode the event body, honouring ``isBase64Encoded``.

    Raises:
        HandlerError: If a base64 body is malformed.
    """
    body = event.get("body")
    if body is None:
        return b""
    text = str(body)
    if not event.get("isBase64Encoded"):
        return text.encode()
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as error:
        raise HandlerError(f"Failed to decode base64 request body: {error}") from error


def _build_url(headers: HeaderMap, path: str, fallback_host: str | None = None) -> str:
    """Rebuild the absolute request URL from the forwarded headers."""
    scheme = (headers.get(FORWARDED_PROTO_HEADER) or [DEFAULT_SCHEME])[0]
    host_values = headers.get(HOST_HEADER)
    host = host_values[0] if host_values else fallback_host or DEFAULT_HOST
    return f"{scheme}://{host}{path}"


def _string_map(event: LambdaEvent, key: str) -> dict[str, str]:
    return {name: str(value) for name, value in _mapping(event, key).items()}


def _parse_v2(event: LambdaEvent) -> HttpRequest:
    request_context = _mapping(event, "requestContext")
    http = request_context.get("http") or {}
    headers = {name.lower(): [str(value)] for name, value in _mapping(event, "headers").items()}
    cookies = event.get("cookies")
    if isinstance(cookies, list) and cookies:
        headers.setdefault(COOKIE_HEADER, []).append(";".join(str(cookie) for cookie in cookies))

    path = str(event.get("rawPath") or http.get("path") or "")
    url = _build_url(headers, path, request_context.get("domainName"))
    raw_query = event.get("rawQueryString")
    if raw_query:
        url = f"{url}?{raw_query}"

    return HttpRequest(
        origin=RequestOrigin.API_GATEWAY_V2,
        method=str(http.get("method", "GET")).upper(),
        url=url,
        path=path,
        headers=headers,
        query=_split_v2_query(event),
        path_parameters=_string_map(event, "pathParameters"),
        stage_variables=_string_map(event, "stageVariables"),
        request_context=request_context,
        body=_decode_body(event),
    )


def _parse_v1(event: LambdaEvent, origin: RequestOrigin) -> HttpRequest:
    headers = _merge_headers(event)
    path = str(event.get("path") or "")
    return HttpRequest(
        origin=origin,
        method=str(event.get("httpMethod", "GET")).upper(),
        url=_build_url(headers, path),
        path=path,
        headers=headers,
        query=_merge_query(event, decode=origin is RequestOrigin.ALB),
        path_parameters=_string_map(event, "pathParameters"),
        stage_variables=_string_map(event, "stageVariables"),
        request_context=_mapping(event, "requestContext"),
        body=_decode_body(event),
    )


def parse_http_event(event: object) -> HttpRequest:
    """Build an HttpRequest from a decoded proxy integration event.

    Args:
        event: The decoded event.

    Returns:
        The normalized request.

    Raises:
        HandlerError: If the event is not an HTTP proxy event or its body is malformed.
    """
    if not _is_string_dict(event):
        raise HandlerError(f"Expected an HTTP event object, got {type(event).__name__}")
    origin = detect_origin(event)
    if origin is RequestOrigin.API_GATEWAY_V2:
        return _parse_v2(event)
    return _parse_v1(event, origin)
