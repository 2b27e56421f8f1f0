"""Type definitions shared by handlers and the runtime loop."""

from collections.abc import AsyncIterable
from typing import Any

# Opaque invocation payload as received from the Runtime API
RawEvent = bytes

# One piece of a streamed response; text is sent UTF-8 encoded
Chunk = bytes | str

ChunkProducer = AsyncIterable[Chunk]

# For truly dynamic JSON data
JSONValue = Any

LambdaEvent = dict[str, object]
