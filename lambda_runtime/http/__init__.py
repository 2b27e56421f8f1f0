"""HTTP event adaptation for API Gateway (REST and HTTP APIs) and ALB."""

from lambda_runtime.http.adapter import HttpHandler, http_handler
from lambda_runtime.http.request import (
    HttpRequest,
    RequestOrigin,
    detect_origin,
    parse_http_event,
)
from lambda_runtime.http.response import HttpResponse, into_response, to_lambda_response

__all__ = [
    "HttpHandler",
    "HttpRequest",
    "HttpResponse",
    "RequestOrigin",
    "detect_origin",
    "http_handler",
    "into_response",
    "parse_http_event",
    "to_lambda_response",
]
