"""Incremental frame decoder for text/event-stream bodies.

Bytes arrive in whatever chunks the transport hands over. The decoder keeps a
single text buffer, turns every blank-line-delimited block into a frame as soon
as its closing boundary is seen, and keeps the rest until more bytes arrive.
"""

from __future__ import annotations

import codecs

from talkstream.utils.exceptions import DecoderClosedError
from talkstream.utils.logging import get_logger

logger = get_logger(__name__)

FRAME_DELIMITER = "\n\n"


class FrameDecoder:
    """Explicit feed/drain/finish state machine over one byte stream.

    Invariant: ``buffered`` is exactly the normalized text received so far that
    has not been emitted as part of a frame.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        # errors="replace": a corrupt byte costs one U+FFFD, not the whole stream
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._pending_cr = False
        self._ready: list[str] = []
        self._finished = False

    @property
    def buffered(self) -> str:
        return self._buffer + ("\r" if self._pending_cr else "")

    @property
    def finished(self) -> bool:
        return self._finished

    def feed(self, chunk: bytes) -> None:
        """Append one chunk and cut every frame it completes."""
        if self._finished:
            raise DecoderClosedError("feed() called after finish()")
        if not chunk:
            return
        self._append(self._decoder.decode(chunk))

    def drain(self) -> list[str]:
        """Return frames completed since the previous drain, in stream order."""
        frames, self._ready = self._ready, []
        return frames

    def finish(self) -> None:
        """Mark end-of-stream.

        A trailing block without its closing blank line is discarded, not
        promoted to a frame: a message only counts once it is delimited.
        """
        if self._finished:
            return
        self._finished = True
        self._append(self._decoder.decode(b"", final=True))
        if self._buffer:
            logger.debug("partial_frame_discarded", length=len(self._buffer))
            self._buffer = ""

    def _append(self, text: str) -> None:
        if self._pending_cr:
            text = "\r" + text
            self._pending_cr = False
        # a trailing "\r" may be the first half of a "\r\n" split across chunks
        if text.endswith("\r") and not self._finished:
            text = text[:-1]
            self._pending_cr = True
        if not text:
            return

        # only new text is normalized; a boundary can start at the old last char
        start = max(len(self._buffer) - 1, 0)
        self._buffer += text.replace("\r\n", "\n")
        idx = self._buffer.find(FRAME_DELIMITER, start)
        while idx >= 0:
            self._ready.append(self._buffer[:idx])
            self._buffer = self._buffer[idx + len(FRAME_DELIMITER):]
            idx = self._buffer.find(FRAME_DELIMITER)
