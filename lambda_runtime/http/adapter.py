"""Handler adapter for HTTP proxy integrations."""

import logging
from collections.abc import Callable
from typing import Any

from lambda_runtime.context.models import InvocationContext
from lambda_runtime.handler.base import Handler, decode_event, encode_payload, resolve_result
from lambda_runtime.handler.outcome import Buffered, Outcome
from lambda_runtime.http.request import HttpRequest, parse_http_event
from lambda_runtime.http.response import into_response, to_lambda_response
from lambda_runtime.types import RawEvent

logger = logging.getLogger(__name__)

HttpFunction = Callable[[HttpRequest, InvocationContext], Any]


class HttpHandler(Handler):
    """Adapts a function of ``(HttpRequest, context)`` into a Handler.

    The response is encoded for the integration the request came from.
    """

    def __init__(self, func: HttpFunction) -> None:
        self._func = func
        self.__name__ = getattr(func, "__name__", type(func).__name__)

    async def invoke(self, event: RawEvent, context: InvocationContext) -> Outcome:
        """Parse the proxy event, call the function and encode its response."""
        request = parse_http_event(decode_event(event))
        logger.debug(
            "HTTP request",
            extra={"method": request.method, "path": request.path, "origin": request.origin},
        )
        response = into_response(await resolve_result(self._func(request, context)))
        return Buffered(encode_payload(to_lambda_response(request.origin, response)))


def http_handler(func: HttpFunction) -> HttpHandler:
    """Adapt an HTTP function into a Handler.

    Usage:
        @http_handler
        async def hello(request, context):
            return {"path": request.path}
    """
    return HttpHandler(func)
