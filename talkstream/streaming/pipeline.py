"""Byte source -> frame decoder -> event router, one fresh pipeline per call."""

from __future__ import annotations

import asyncio
import time

from talkstream.streaming.decoder import FrameDecoder
from talkstream.streaming.events import EventRouter, StreamSinks
from talkstream.streaming.transport import ByteChunkSource, StreamRequest, StreamTransport
from talkstream.utils.logging import get_logger

logger = get_logger(__name__)


async def consume(source: ByteChunkSource, router: EventRouter) -> str:
    """Pump ``source`` to end-of-stream through a new decoder into ``router``.

    The only suspension point is the wait for the next chunk; decoding and
    dispatch of everything already received happen before the next await.
    Any exception from the source propagates and no result is returned.
    """
    decoder = FrameDecoder()
    while True:
        chunk = await source.next_chunk()
        if chunk is None:
            break
        decoder.feed(chunk)
        for frame in decoder.drain():
            router.handle(frame)

    # flushes the text decoder and drops any undelimited tail
    decoder.finish()
    return router.result


async def run(
    transport: StreamTransport,
    request: StreamRequest,
    sinks: StreamSinks | None = None,
) -> str:
    """Open ``request`` on ``transport`` and return the concatenated answer text.

    Callbacks fired before a failure stay fired; the failure itself always
    propagates, so callers never see a truncated result.
    """
    router = EventRouter(sinks)
    log = logger.bind(path=request.path)
    started = time.monotonic()
    log.info("stream_started")

    try:
        async with transport.open(request) as source:
            result = await consume(source, router)
    except asyncio.CancelledError:
        log.info("stream_cancelled", frames=router.frames_seen)
        raise
    except Exception as exc:
        log.warning(
            "stream_failed",
            error_type=type(exc).__name__,
            error=str(exc),
            frames=router.frames_seen,
        )
        raise

    log.info(
        "stream_completed",
        frames=router.frames_seen,
        dropped=router.frames_dropped,
        answer_chunks=router.answer_chunks,
        answer_chars=len(result),
        elapsed_s=round(time.monotonic() - started, 3),
    )
    return result
