"""Keyword intent check deciding between plain chat and web search."""

from __future__ import annotations

import re

# news / recency words, search verbs, requests for sources
# re.ASCII: word boundaries are ASCII-only, so "trendé" still matches "trend"
_WEB_SEARCH_PATTERNS = [
    re.compile(r"\b(berita|kabar|terbaru|hari ini|minggu ini|bulan ini|tren|trend|trending|update)\b", re.ASCII),
    re.compile(r"\b(cari|carikan|telusuri|search)\b", re.ASCII),
    re.compile(r"\b(sumber|link|tautan|referensi)\b", re.ASCII),
]


def is_web_search_intent(text: str) -> bool:
    """True when the utterance asks for fresh or sourced information."""
    q = text.lower()
    return any(pattern.search(q) for pattern in _WEB_SEARCH_PATTERNS)
