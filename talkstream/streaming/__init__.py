"""Event-stream decoding and routing: frames in, typed callbacks and answer text out."""

from __future__ import annotations

from talkstream.streaming.decoder import FrameDecoder
from talkstream.streaming.events import (
    DEBUG_MARKER,
    EventKind,
    EventRouter,
    ParsedEvent,
    StreamSinks,
    dispatch,
    route,
)
from talkstream.streaming.pipeline import consume, run
from talkstream.streaming.transport import (
    ByteChunkSource,
    HttpxTransport,
    IterableSource,
    StreamRequest,
    StreamTransport,
    build_client,
)

__all__ = [
    "DEBUG_MARKER",
    "ByteChunkSource",
    "EventKind",
    "EventRouter",
    "FrameDecoder",
    "HttpxTransport",
    "IterableSource",
    "ParsedEvent",
    "StreamRequest",
    "StreamSinks",
    "StreamTransport",
    "build_client",
    "consume",
    "dispatch",
    "route",
    "run",
]
