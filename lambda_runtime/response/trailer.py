"""In-band trailer marker for failures after a response stream has begun.

Once body bytes are committed the error endpoint can no longer be used, so
the failure is appended to the stream as a reserved JSON object on its own
line. Consumers must treat a stream ending with the marker as failed,
whatever the transport status said.
"""

import json
from typing import Any

TRAILER_KEY = "lambdaRuntimeError"
TRAILER_SEPARATOR = b"\n"


def encode_trailer(error_payload: dict[str, Any]) -> bytes:
    """Encode an error document as the trailer marker.

    Args:
        error_payload: Runtime API error document.

    Returns:
        Bytes appended to the stream, separator included.
    """
    return TRAILER_SEPARATOR + json.dumps({TRAILER_KEY: error_payload}).encode()


def extract_trailer(body: bytes) -> dict[str, Any] | None:
    """Find the trailer marker at the end of a received stream.

    Args:
        body: Complete response body as received.

    Returns:
        The embedded error document, or None for a normally completed stream.
    """
    _, separator, last_line = body.rpartition(TRAILER_SEPARATOR)
    if not separator:
        return None
    try:
        document = json.loads(last_line)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(document, dict) or set(document) != {TRAILER_KEY}:
        return None
    error_payload = document[TRAILER_KEY]
    if not isinstance(error_payload, dict):
        return None
    return error_payload
