"""HTTP responses and their proxy integration encodings."""

import base64
from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from lambda_runtime.handler.base import encode_payload
from lambda_runtime.http.request import RequestOrigin

CONTENT_TYPE_HEADER = "content-type"
SET_COOKIE_HEADER = "set-cookie"
JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

LambdaResponse = dict[str, Any]


class HttpResponse(BaseModel):
    """An HTTP response produced by an HTTP handler.

    Attributes:
        status_code: HTTP status code.
        headers: Header values by lowercase name.
        body: Response body; None means no body.
        binary: Whether the body must be sent base64-encoded.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(default=HTTPStatus.OK, ge=100, le=599)
    headers: dict[str, list[str]] = Field(default_factory=dict)
    body: bytes | None = None
    binary: bool = False

    @classmethod
    def text(cls, body: str, status_code: int = HTTPStatus.OK) -> "HttpResponse":
        """Plain text response."""
        return cls(
            status_code=status_code,
            headers={CONTENT_TYPE_HEADER: [TEXT_CONTENT_TYPE]},
            body=body.encode(),
        )

    @classmethod
    def json_body(cls, value: Any, status_code: int = HTTPStatus.OK) -> "HttpResponse":
        """JSON response with ``content-type: application/json``."""
        return cls(
            status_code=status_code,
            headers={CONTENT_TYPE_HEADER: [JSON_CONTENT_TYPE]},
            body=encode_payload(value),
        )

    def with_header(self, name: str, value: str) -> "HttpResponse":
        """Copy of the response with one more header value appended."""
        headers = {key: list(values) for key, values in self.headers.items()}
        headers.setdefault(name.lower(), []).append(value)
        return self.model_copy(update={"headers": headers})


def into_response(value: Any) -> HttpResponse:
    """Convert a handler return value into an HttpResponse.

    ``HttpResponse`` passes through, ``str`` becomes text, ``bytes`` a binary
    body, ``None`` an empty 200, and anything else is serialized as JSON.

    Raises:
        SerializationError: If the value cannot be represented as JSON.
    """
    if isinstance(value, HttpResponse):
        return value
    if value is None:
        return HttpResponse()
    if isinstance(value, str):
        return HttpResponse.text(value)
    if isinstance(value, bytes | bytearray):
        return HttpResponse(body=bytes(value), binary=True)
    return HttpResponse.json_body(value)


def _encode_body(response: HttpResponse) -> tuple[str | None, bool]:
    """Body as the integration expects it, plus its base64 flag."""
    if response.body is None:
        return None, False
    if not response.binary:
        try:
            return response.body.decode(), False
        except UnicodeDecodeError:
            pass
    return base64.b64encode(response.body).decode(), True


def _status_description(status_code: int) -> str:
    """ALB status line, e.g. ``200 OK``."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = ""
    return f"{status_code} {reason}".rstrip()


def to_lambda_response(origin: RequestOrigin, response: HttpResponse) -> LambdaResponse:
    """Encode a response in the JSON shape the given integration expects.

    Args:
        origin: Integration the request came from.
        response: The response to encode.

    Returns:
        Lambda-compatible response dictionary.
    """
    multi_value_headers = {name: list(values) for name, values in response.headers.items()}
    cookies: list[str] = []
    if origin is RequestOrigin.API_GATEWAY_V2:
        cookies = multi_value_headers.pop(SET_COOKIE_HEADER, [])

    body, is_base64_encoded = _encode_body(response)
    encoded: LambdaResponse = {
        "statusCode": response.status_code,
        "headers": {name: values[0] for name, values in multi_value_headers.items() if values},
        "multiValueHeaders": multi_value_headers,
        "isBase64Encoded": is_base64_encoded,
    }
    if body is not None:
        encoded["body"] = body
    if origin is RequestOrigin.API_GATEWAY_V2:
        encoded["cookies"] = cookies
    elif origin is RequestOrigin.ALB:
        encoded["statusDescription"] = _status_description(response.status_code)
    return encoded
