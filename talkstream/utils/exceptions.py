"""Custom exception hierarchy for the streaming client."""

from __future__ import annotations


class TalkstreamError(Exception):
    """Base exception for all talkstream errors."""


class TransportFailure(TalkstreamError):
    """The byte source could not be established or broke before end-of-stream."""


class UpstreamStatusError(TransportFailure):
    """Backend answered the stream request with a non-success status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"upstream returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class EmptyBodyError(TransportFailure):
    """Response carried no body to stream."""


class StreamTimeoutError(TransportFailure):
    """Byte source stopped delivering chunks within the read timeout."""


class DecoderClosedError(TalkstreamError):
    """Bytes were fed to a frame decoder after finish()."""


class SpeechError(TalkstreamError):
    """Speech-to-text or text-to-speech endpoint failure."""

    def __init__(self, operation: str, status_code: int | None = None, detail: str = "") -> None:
        self.operation = operation
        self.status_code = status_code
        self.detail = detail
        message = f"{operation} failed"
        if status_code is not None:
            message = f"{message}: {status_code}"
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
