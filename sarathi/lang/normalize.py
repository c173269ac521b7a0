from __future__ import annotations

import re
from typing import Any, Mapping

from sarathi.errors import EmptyTranscript

MAX_TRANSCRIPT_CHARS = 1600

_WHITESPACE = re.compile(r"\s+")


def tidy(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def clamp(value: str, max_len: int | None = None) -> str:
    tidied = tidy(value)
    if not max_len or len(tidied) <= max_len:
        return tidied
    return tidied[:max_len].strip()


def extract_transcript_text(payload: Mapping[str, Any] | None) -> str:
    """Prefer the provider's ``text`` field; fall back to joining segment texts."""
    if not payload:
        return ""
    text = payload.get("text")
    if isinstance(text, str) and text:
        return text
    segments = payload.get("segments")
    if not isinstance(segments, list):
        return ""
    parts: list[str] = []
    for segment in segments:
        if isinstance(segment, Mapping):
            parts.append(str(segment.get("text") or ""))
    return " ".join(parts)


def normalize_transcript(raw: str) -> str:
    transcript = tidy(raw or "")[:MAX_TRANSCRIPT_CHARS]
    if not transcript:
        raise EmptyTranscript("transcript empty after normalization")
    return transcript


__all__ = ["MAX_TRANSCRIPT_CHARS", "tidy", "clamp", "extract_transcript_text", "normalize_transcript"]
