"""Frame parsing and typed dispatch for the answer/progress/debug event stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from talkstream.utils.logging import get_logger

logger = get_logger(__name__)

EVENT_PREFIX = "event:"
DATA_PREFIX = "data:"
DEBUG_MARKER = "[DEBUG] "


class EventKind(str, Enum):
    ANSWER = "answer"
    PROGRESS = "progress"
    DEBUG = "debug"
    MESSAGE = "message"

    @classmethod
    def from_tag(cls, tag: str) -> EventKind:
        """Exact, case-sensitive lookup; anything unknown is MESSAGE."""
        try:
            return cls(tag)
        except ValueError:
            return cls.MESSAGE


@dataclass(frozen=True)
class ParsedEvent:
    event_type: EventKind
    payload: str


def _noop(_: str) -> None:
    return None


@dataclass(frozen=True)
class StreamSinks:
    """Upward callbacks: answer deltas and progress lines."""

    on_answer: Callable[[str], None] = field(default=_noop)
    on_progress: Callable[[str], None] = field(default=_noop)


def route(frame: str) -> ParsedEvent:
    """Parse one frame into its event kind and payload.

    Only ``event:`` and ``data:`` lines count. A single space after ``data:``
    is wire convention and dropped; every other character of the payload,
    leading or trailing whitespace included, is kept verbatim.
    """
    kind = EventKind.MESSAGE
    data_lines: list[str] = []

    for line in frame.split("\n"):
        if line.startswith(EVENT_PREFIX):
            kind = EventKind.from_tag(line[len(EVENT_PREFIX):].strip())
        elif line.startswith(DATA_PREFIX):
            raw = line[len(DATA_PREFIX):]
            data_lines.append(raw[1:] if raw.startswith(" ") else raw)

    return ParsedEvent(event_type=kind, payload="\n".join(data_lines))


def dispatch(event: ParsedEvent, sinks: StreamSinks) -> None:
    """Forward one event to the sink its kind maps to.

    Empty payloads and MESSAGE events reach no sink.
    """
    if not event.payload:
        return

    if event.event_type is EventKind.ANSWER:
        sinks.on_answer(event.payload)
    elif event.event_type is EventKind.PROGRESS:
        sinks.on_progress(event.payload)
    elif event.event_type is EventKind.DEBUG:
        sinks.on_progress(f"{DEBUG_MARKER}{event.payload}")
    else:
        # Unknown event types are ignored until something needs them
        return


class EventRouter:
    """Per-stream routing state: owns the accumulated answer text.

    Create one per stream; instances are never shared between invocations.
    """

    def __init__(self, sinks: StreamSinks | None = None) -> None:
        self._sinks = sinks or StreamSinks()
        self._answer_parts: list[str] = []
        self.frames_seen = 0
        self.frames_dropped = 0

    @property
    def result(self) -> str:
        return "".join(self._answer_parts)

    @property
    def answer_chunks(self) -> int:
        return len(self._answer_parts)

    def handle(self, frame: str) -> ParsedEvent | None:
        """Route and dispatch one frame; returns the event if it was delivered."""
        self.frames_seen += 1
        event = route(frame)

        if not event.payload or event.event_type is EventKind.MESSAGE:
            self.frames_dropped += 1
            logger.debug(
                "frame_dropped",
                event_type=event.event_type.value,
                empty=not event.payload,
            )
            return None

        if event.event_type is EventKind.ANSWER:
            self._answer_parts.append(event.payload)
        dispatch(event, self._sinks)
        return event
