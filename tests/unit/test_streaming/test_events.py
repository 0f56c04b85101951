"""Unit tests for frame parsing, classification and dispatch."""

from __future__ import annotations

import pytest

from talkstream.streaming.events import (
    DEBUG_MARKER,
    EventKind,
    EventRouter,
    ParsedEvent,
    dispatch,
    route,
)


# ── route() ──────────────────────────────────────────────────────────


def test_single_space_after_data_is_stripped_rest_preserved():
    event = route("event:answer\ndata: \thello")
    assert event == ParsedEvent(EventKind.ANSWER, "\thello")


def test_only_one_leading_space_is_stripped():
    assert route("event: answer\ndata:   two more").payload == "  two more"


def test_trailing_whitespace_is_preserved():
    assert route("event: answer\ndata: word  ").payload == "word  "


def test_no_space_after_colon():
    assert route("event:answer\ndata:tight").payload == "tight"


def test_multiple_data_lines_join_with_newline():
    event = route("event: answer\ndata:foo\ndata:bar")
    assert event.payload == "foo\nbar"


def test_empty_data_line_contributes_empty_line():
    assert route("event: answer\ndata:foo\ndata:\ndata:bar").payload == "foo\n\nbar"


def test_missing_event_line_defaults_to_message():
    event = route("data:hi")
    assert event.event_type is EventKind.MESSAGE
    assert event.payload == "hi"


@pytest.mark.parametrize(
    "tag, kind",
    [
        ("answer", EventKind.ANSWER),
        ("progress", EventKind.PROGRESS),
        ("debug", EventKind.DEBUG),
        ("  answer  ", EventKind.ANSWER),
        ("Answer", EventKind.MESSAGE),
        ("ANSWER", EventKind.MESSAGE),
        ("error", EventKind.MESSAGE),
        ("", EventKind.MESSAGE),
    ],
)
def test_event_tag_is_exact_case_sensitive(tag, kind):
    assert route(f"event:{tag}\ndata: x").event_type is kind


def test_unrecognized_lines_are_ignored():
    frame = ": keep-alive comment\nid: 7\nretry: 1000\nevent: progress\nDATA: nope\ndata: yes"
    assert route(frame) == ParsedEvent(EventKind.PROGRESS, "yes")


def test_prefix_needs_colon_directly_after_name():
    assert route("event : answer\ndata : x").payload == ""


def test_frame_without_data_has_empty_payload():
    assert route("event: answer") == ParsedEvent(EventKind.ANSWER, "")


# ── dispatch() ───────────────────────────────────────────────────────


def test_dispatch_answer_goes_to_answer_sink(recorder):
    dispatch(ParsedEvent(EventKind.ANSWER, "A"), recorder.sinks)
    assert recorder.answers == ["A"]
    assert recorder.progress == []


def test_dispatch_progress_is_unmodified(recorder):
    dispatch(ParsedEvent(EventKind.PROGRESS, " upstream: connected "), recorder.sinks)
    assert recorder.progress == [" upstream: connected "]


def test_dispatch_debug_is_marked_progress(recorder):
    dispatch(ParsedEvent(EventKind.DEBUG, "x"), recorder.sinks)
    assert recorder.answers == []
    assert recorder.progress == [f"{DEBUG_MARKER}x"]
    assert recorder.progress[0] == "[DEBUG] x"


def test_dispatch_message_reaches_no_sink(recorder):
    dispatch(ParsedEvent(EventKind.MESSAGE, "hi"), recorder.sinks)
    assert recorder.calls == []


def test_dispatch_empty_payload_reaches_no_sink(recorder):
    dispatch(ParsedEvent(EventKind.ANSWER, ""), recorder.sinks)
    dispatch(ParsedEvent(EventKind.PROGRESS, ""), recorder.sinks)
    assert recorder.calls == []


# ── EventRouter ──────────────────────────────────────────────────────


def test_router_accumulates_answers_in_order(recorder):
    router = EventRouter(recorder.sinks)
    router.handle("event: answer\ndata: A")
    router.handle("event: progress\ndata: p1")
    router.handle("event: answer\ndata: B")

    assert router.result == "AB"
    assert recorder.answers == ["A", "B"]
    assert recorder.progress == ["p1"]
    assert recorder.calls == [("answer", "A"), ("progress", "p1"), ("answer", "B")]


def test_router_drops_message_and_empty_frames(recorder):
    router = EventRouter(recorder.sinks)
    assert router.handle("data:hi") is None
    assert router.handle("event: answer") is None
    assert router.handle("") is None

    assert router.result == ""
    assert recorder.calls == []
    assert router.frames_seen == 3
    assert router.frames_dropped == 3


def test_router_debug_does_not_touch_result(recorder):
    router = EventRouter(recorder.sinks)
    event = router.handle("event: debug\ndata: {\"model\": \"gpt\"}")
    assert event == ParsedEvent(EventKind.DEBUG, "{\"model\": \"gpt\"}")
    assert router.result == ""
    assert recorder.progress == ["[DEBUG] {\"model\": \"gpt\"}"]


def test_router_without_sinks_still_accumulates():
    router = EventRouter()
    router.handle("event: answer\ndata:  leading space kept")
    assert router.result == " leading space kept"
    assert router.answer_chunks == 1


def test_routers_do_not_share_state():
    first, second = EventRouter(), EventRouter()
    first.handle("event: answer\ndata: one")
    assert second.result == ""
