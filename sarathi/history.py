from __future__ import annotations

import json
from typing import Any

from sarathi.lang.classifier import resolve_language, resolve_tone
from sarathi.lang.normalize import clamp
from sarathi.models import HistoryTurn
from sarathi.telemetry.logging import get_logger

MAX_HISTORY_TURNS = 4
MAX_TURN_CHARS = 480

logger = get_logger(__name__)


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def parse_turn(record: Any) -> HistoryTurn | None:
    if not isinstance(record, dict):
        return None
    user = clamp(_coerce_text(record.get("user")), MAX_TURN_CHARS)
    assistant = clamp(_coerce_text(record.get("assistant")), MAX_TURN_CHARS)
    if not user or not assistant:
        return None
    return HistoryTurn(
        user=user,
        assistant=assistant,
        tone=resolve_tone(record.get("tone")),
        language=resolve_language(record.get("language")),
    )


def parse_history(raw: Any, max_turns: int = MAX_HISTORY_TURNS) -> list[HistoryTurn]:
    """Decode the caller's JSON history into at most ``max_turns`` recent turns, oldest first.

    History is best-effort context: anything malformed yields an empty window rather than an error.
    """
    if not isinstance(raw, str):
        return []
    trimmed = raw.strip()
    if not trimmed:
        return []
    try:
        parsed = json.loads(trimmed)
    except json.JSONDecodeError as exc:
        logger.info("voice.history.unparseable", error=str(exc))
        return []
    if not isinstance(parsed, list):
        return []

    turns = [turn for turn in (parse_turn(record) for record in parsed) if turn is not None]
    if max_turns <= 0:
        return []
    return turns[-max_turns:]


__all__ = ["MAX_HISTORY_TURNS", "MAX_TURN_CHARS", "parse_turn", "parse_history"]
