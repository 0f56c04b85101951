"""Spacing repair for speech-to-text transcripts."""

from __future__ import annotations

import re

_LONG_RUN = 100
_WRAP_AT = 80


def repair_spacing(text: str) -> str:
    """Re-insert spaces that transcription tends to swallow.

    Handles heading hashes, punctuation followed by a word, lower/upper case
    joins and digit/letter joins, then collapses blank runs and breaks very
    long unbroken tokens.
    """
    if not text:
        return text
    s = re.sub(r"\r\n?", "\n", text)
    s = re.sub(r"(^|\n)(#{1,6})([^\s#])", r"\1\2 \3", s)
    s = re.sub(r"([,.!?;:])(\S)", r"\1 \2", s)
    s = re.sub(r"([a-zà-ÿ])([A-ZÀ-ß])", r"\1 \2", s)
    s = re.sub(r"([0-9])([A-Za-zÀ-ÿ])", r"\1 \2", s)
    s = re.sub(r"([A-Za-zÀ-ÿ])([0-9])", r"\1 \2", s)
    s = re.sub(r"[ \t]+", " ", s)
    s = "\n".join(_break_long_run(line) for line in s.split("\n"))
    return s.strip()


def _break_long_run(line: str) -> str:
    if len(line) <= _LONG_RUN or re.search(r"\s", line):
        return line
    return re.sub(rf"(\S{{{_WRAP_AT}}})(?=\S)", r"\1 ", line)
