"""Shared test fixtures."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest

from talkstream.streaming.events import StreamSinks
from talkstream.streaming.transport import IterableSource, StreamRequest


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Point settings at a fake backend and keep a local .env out of the way."""
    monkeypatch.setenv("TALKSTREAM_BACKEND_URL", "http://backend.test/")
    monkeypatch.setenv("TTS_VOICE", "alloy")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FORMAT", "console")


@pytest.fixture
def settings():
    from talkstream.config import Settings

    return Settings(_env_file=None)


class RecordingSinks:
    """Collects every callback in call order."""

    def __init__(self) -> None:
        self.answers: list[str] = []
        self.progress: list[str] = []
        self.calls: list[tuple[str, str]] = []

    def on_answer(self, delta: str) -> None:
        self.answers.append(delta)
        self.calls.append(("answer", delta))

    def on_progress(self, message: str) -> None:
        self.progress.append(message)
        self.calls.append(("progress", message))

    @property
    def sinks(self) -> StreamSinks:
        return StreamSinks(on_answer=self.on_answer, on_progress=self.on_progress)


@pytest.fixture
def recorder() -> RecordingSinks:
    return RecordingSinks()


class StaticTransport:
    """Transport double: every open() replays the same chunk source."""

    def __init__(self, chunks) -> None:
        self._chunks = chunks
        self.requests: list[StreamRequest] = []
        self.closed = 0

    @asynccontextmanager
    async def open(self, request: StreamRequest):
        self.requests.append(request)
        source = IterableSource(self._chunks)
        try:
            yield source
        finally:
            self.closed += 1
            await source.aclose()


@pytest.fixture
def make_transport():
    return StaticTransport


def _encode_frames(*frames: str) -> bytes:
    return "".join(f"{frame}\n\n" for frame in frames).encode("utf-8")


@pytest.fixture
def encode_frames():
    """Wire bytes for frames given without their closing blank line."""
    return _encode_frames
