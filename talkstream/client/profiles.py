"""Chat and search invocation profiles over the one streaming pipeline."""

from __future__ import annotations

from talkstream.client.intent import is_web_search_intent
from talkstream.streaming.events import StreamSinks
from talkstream.streaming.pipeline import run
from talkstream.streaming.transport import StreamRequest, StreamTransport
from talkstream.utils.logging import get_logger

logger = get_logger(__name__)

CHAT_PATH = "/api/ask"
SEARCH_PATH = "/api/search"


def chat_request(prompt: str) -> StreamRequest:
    """Chat completion without web search."""
    return StreamRequest(path=CHAT_PATH, body={"prompt": prompt})


def search_request(query: str) -> StreamRequest:
    """Answer backed by the backend's web_search tool."""
    return StreamRequest(path=SEARCH_PATH, body={"query": query})


async def ask_stream(
    prompt: str,
    transport: StreamTransport,
    sinks: StreamSinks | None = None,
) -> str:
    return await run(transport, chat_request(prompt), sinks)


async def search_stream(
    query: str,
    transport: StreamTransport,
    sinks: StreamSinks | None = None,
) -> str:
    return await run(transport, search_request(query), sinks)


async def converse(
    text: str,
    transport: StreamTransport,
    sinks: StreamSinks | None = None,
    *,
    use_search: bool | None = None,
) -> str:
    """Stream an answer to ``text``, picking the profile from its intent.

    ``use_search`` overrides the keyword check. The choice is reported to the
    progress sink before the request goes out.
    """
    sinks = sinks or StreamSinks()
    if use_search is None:
        use_search = is_web_search_intent(text)

    logger.info("profile_selected", profile="search" if use_search else "chat")
    if use_search:
        sinks.on_progress(f"[router] using {SEARCH_PATH} (web_search)")
        return await search_stream(text, transport, sinks)

    sinks.on_progress(f"[router] using {CHAT_PATH} (chat only)")
    return await ask_stream(text, transport, sinks)
