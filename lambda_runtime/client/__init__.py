"""Protocol client for the Lambda Runtime API."""

from lambda_runtime.client.runtime_api import (
    ERROR_TYPE_HEADER,
    RESPONSE_MODE_HEADER,
    STREAMING_RESPONSE_MODE,
    USER_AGENT,
    RuntimeApiClient,
)

__all__ = [
    "ERROR_TYPE_HEADER",
    "RESPONSE_MODE_HEADER",
    "STREAMING_RESPONSE_MODE",
    "USER_AGENT",
    "RuntimeApiClient",
]
