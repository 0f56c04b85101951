"""Byte-source boundary between the stream decoder and whatever moves the bytes.

The decoder only needs ``next_chunk()`` and ``aclose()``. ``HttpxTransport`` is
the one production implementation: a streamed POST against the backend.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterable, AsyncIterator, Iterable, Protocol

import httpx

from talkstream.config import Settings
from talkstream.utils.exceptions import (
    EmptyBodyError,
    StreamTimeoutError,
    TransportFailure,
    UpstreamStatusError,
)
from talkstream.utils.logging import get_logger

logger = get_logger(__name__)

_NO_BODY_STATUSES = (204, 205)


@dataclass(frozen=True)
class StreamRequest:
    """Target resource plus JSON body of one streamed call."""

    path: str
    body: dict[str, Any] = field(default_factory=dict)


class ByteChunkSource(Protocol):
    async def next_chunk(self) -> bytes | None:
        """Next chunk of raw bytes, or None once the stream has ended."""
        ...

    async def aclose(self) -> None: ...


class StreamTransport(Protocol):
    def open(self, request: StreamRequest) -> AbstractAsyncContextManager[ByteChunkSource]: ...


async def _as_async(chunks: Iterable[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


class IterableSource:
    """ByteChunkSource over a plain or async iterable of byte chunks."""

    def __init__(self, chunks: AsyncIterable[bytes] | Iterable[bytes]) -> None:
        if hasattr(chunks, "__aiter__"):
            self._iterator = chunks.__aiter__()
        else:
            self._iterator = _as_async(chunks).__aiter__()

    async def next_chunk(self) -> bytes | None:
        try:
            return await self._iterator.__anext__()
        except StopAsyncIteration:
            return None

    async def aclose(self) -> None:
        aclose = getattr(self._iterator, "aclose", None)
        if aclose is not None:
            await aclose()


class HttpxChunkSource:
    """Reads an open httpx streaming response, mapping httpx errors to ours."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._iterator = response.aiter_bytes().__aiter__()

    async def next_chunk(self) -> bytes | None:
        try:
            return await self._iterator.__anext__()
        except StopAsyncIteration:
            return None
        except httpx.TimeoutException as exc:
            raise StreamTimeoutError(f"no data within read timeout: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportFailure(f"stream interrupted: {exc}") from exc

    async def aclose(self) -> None:
        await self._response.aclose()


class HttpxTransport:
    """Opens streamed POST requests on a shared ``httpx.AsyncClient``.

    Relative request paths resolve against the client's ``base_url``.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @asynccontextmanager
    async def open(self, request: StreamRequest) -> AsyncIterator[ByteChunkSource]:
        http_request = self._client.build_request(
            "POST",
            request.path,
            json=request.body,
            headers={"Accept": "text/event-stream"},
        )
        try:
            response = await self._client.send(http_request, stream=True)
        except httpx.TimeoutException as exc:
            raise StreamTimeoutError(f"connect timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportFailure(f"request failed: {exc}") from exc

        try:
            if not response.is_success:
                try:
                    body = await response.aread()
                except httpx.HTTPError:
                    body = b""
                detail = body.decode("utf-8", errors="replace")[:200]
                logger.warning("upstream_status", path=request.path, status=response.status_code)
                raise UpstreamStatusError(response.status_code, detail)
            if response.status_code in _NO_BODY_STATUSES or response.headers.get("content-length") == "0":
                raise EmptyBodyError(f"no stream body (HTTP {response.status_code})")
            yield HttpxChunkSource(response)
        finally:
            await response.aclose()


def build_client(settings: Settings) -> httpx.AsyncClient:
    """AsyncClient pointed at the backend with the stream read timeout applied."""
    timeout = httpx.Timeout(settings.REQUEST_TIMEOUT, read=settings.STREAM_TIMEOUT)
    return httpx.AsyncClient(base_url=settings.backend_url, timeout=timeout)
