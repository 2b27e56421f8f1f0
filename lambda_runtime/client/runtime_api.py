"""Async client for the Lambda Runtime API control endpoint.

Encodes the four control operations: fetch the next invocation, post a
success payload (whole or streamed), post an invocation error and post an
initialization error. The client never retries; retry policy belongs to the
runtime loop.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Self

import httpx

from lambda_runtime.context.parser import parse_invocation_context
from lambda_runtime.exceptions.control_plane_errors import TransportError
from lambda_runtime.exceptions.handlers import create_error_payload
from lambda_runtime.version import __version__

if TYPE_CHECKING:
    from collections.abc import AsyncIterable
    from types import TracebackType

    from lambda_runtime.config import RuntimeSettings
    from lambda_runtime.context.models import InvocationContext

logger = logging.getLogger(__name__)

USER_AGENT = f"lambda-runtime-python/{__version__}"

ERROR_TYPE_HEADER = "Lambda-Runtime-Function-Error-Type"
RESPONSE_MODE_HEADER = "Lambda-Runtime-Function-Response-Mode"
STREAMING_RESPONSE_MODE = "streaming"

_NON_RETRYABLE_HTTPX_ERRORS = (httpx.ConnectError, httpx.UnsupportedProtocol, httpx.InvalidURL)


def _is_retryable_status(status_code: int) -> bool:
    """Server errors and throttling are transient; other statuses are not."""
    return (
        status_code == HTTPStatus.TOO_MANY_REQUESTS
        or status_code >= HTTPStatus.INTERNAL_SERVER_ERROR
    )


class RuntimeApiClient:
    """Client of the Runtime API, addressed purely through configuration.

    Pointing ``AWS_LAMBDA_RUNTIME_API`` at a protocol-compatible emulator
    needs no code change.
    """

    def __init__(
        self,
        settings: RuntimeSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Read-only runtime settings holding the endpoint.
            http_client: Optional pre-built httpx client. When omitted the
                client creates and owns one without any timeout.
        """
        self._settings = settings
        self._base_url = settings.runtime_api_base_url
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(None),
            headers={"User-Agent": USER_AGENT},
        )

    async def __aenter__(self) -> Self:
        """Enter the async context."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Close the underlying connection pool."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch_next(self) -> tuple[InvocationContext, bytes]:
        """Wait for the next invocation.

        Suspends until the platform delivers an invocation; no timeout is
        imposed by the client.

        Returns:
            The parsed invocation context and the raw event bytes.

        Raises:
            TransportError: If the call fails or returns an error status.
            ProtocolError: If the invocation headers are malformed.
        """
        url = f"{self._base_url}/runtime/invocation/next"
        response = await self._send("next", "GET", url)
        context = parse_invocation_context(response.headers, self._settings)
        logger.debug("Received invocation", extra={"event_bytes": len(response.content)})
        return context, response.content

    async def report_success(self, request_id: str, payload: bytes) -> None:
        """Post a complete success payload for an invocation.

        Args:
            request_id: Request id of the invocation.
            payload: Response bytes.

        Raises:
            TransportError: If the call fails or returns an error status.
        """
        url = f"{self._base_url}/runtime/invocation/{request_id}/response"
        await self._send("response", "POST", url, content=payload)

    async def report_stream(self, request_id: str, body: AsyncIterable[bytes]) -> None:
        """Post a success payload incrementally using a chunked request body.

        Returns once the body iterable is exhausted and the platform has
        acknowledged the response.

        Args:
            request_id: Request id of the invocation.
            body: Chunks written to the wire as they are produced.

        Raises:
            TransportError: If the call fails or returns an error status.
        """
        url = f"{self._base_url}/runtime/invocation/{request_id}/response"
        await self._send(
            "response",
            "POST",
            url,
            content=body,
            headers={RESPONSE_MODE_HEADER: STREAMING_RESPONSE_MODE},
        )

    async def report_failure(
        self,
        request_id: str,
        error_type: str,
        error_message: str,
        stack_trace: list[str] | None = None,
    ) -> None:
        """Post a structured error for an invocation.

        Args:
            request_id: Request id of the invocation.
            error_type: Value for ``errorType``.
            error_message: Value for ``errorMessage``.
            stack_trace: Optional frames for ``stackTrace``.

        Raises:
            TransportError: If the call fails or returns an error status.
        """
        url = f"{self._base_url}/runtime/invocation/{request_id}/error"
        await self._post_error("error", url, error_type, error_message, stack_trace)

    async def report_init_error(
        self,
        error_type: str,
        error_message: str,
        stack_trace: list[str] | None = None,
    ) -> None:
        """Post an initialization error. Not addressed to any invocation.

        Args:
            error_type: Value for ``errorType``.
            error_message: Value for ``errorMessage``.
            stack_trace: Optional frames for ``stackTrace``.

        Raises:
            TransportError: If the call fails or returns an error status.
        """
        url = f"{self._base_url}/runtime/init/error"
        await self._post_error("init_error", url, error_type, error_message, stack_trace)

    async def _post_error(
        self,
        operation: str,
        url: str,
        error_type: str,
        error_message: str,
        stack_trace: list[str] | None,
    ) -> None:
        """Post a Runtime API error document."""
        await self._send(
            operation,
            "POST",
            url,
            json=create_error_payload(error_type, error_message, stack_trace),
            headers={ERROR_TYPE_HEADER: error_type},
        )

    async def _send(
        self,
        operation: str,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and map every failure onto TransportError.

        Connection refusal and an unusable endpoint address are not retryable:
        the environment must be restarted. Other transport failures are.
        """
        try:
            response = await self._client.request(method, url, **kwargs)
        except _NON_RETRYABLE_HTTPX_ERRORS as error:
            raise TransportError(
                f"Runtime API unreachable during {operation}: {error}",
                retryable=False,
                operation=operation,
            ) from error
        except httpx.HTTPError as error:
            raise TransportError(
                f"Runtime API {operation} call failed: {error}",
                retryable=True,
                operation=operation,
            ) from error

        if not response.is_success:
            raise TransportError(
                f"Runtime API {operation} call returned {response.status_code}: "
                f"{response.text[:200]}",
                retryable=_is_retryable_status(response.status_code),
                status_code=response.status_code,
                operation=operation,
            )

        return response
