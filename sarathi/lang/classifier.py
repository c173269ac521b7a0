from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from sarathi.lang.script_detect import is_indic_script
from sarathi.models import DEFAULT_LANGUAGE, DEFAULT_TONE, LANGUAGES, TONES, HistoryTurn, Language, Tone

HINDI_SIGNALS: tuple[str, ...] = (
    "hai",
    "nahi",
    "nahin",
    "tum",
    "kya",
    "krishna",
    "shanti",
    "achha",
    "ghar",
    "man",
    "dil",
    "mera",
    "meri",
    "mere",
    "kyun",
    "kyon",
    "kabhi",
    "batao",
    "sun",
    "bhagwan",
    "kripa",
    "sach",
    "chahiye",
    "karu",
    "karo",
    "hona",
    "zindagi",
)
ENGLISH_SIGNALS: tuple[str, ...] = ("the", "and", "but", "is", "are", "feel", "help")


@dataclass(frozen=True)
class LanguagePolicy:
    hindi_signals: tuple[str, ...] = HINDI_SIGNALS
    english_signals: tuple[str, ...] = ENGLISH_SIGNALS
    hindi_promotion_threshold: int = 2
    hinglish_promotion_threshold: int = 2


DEFAULT_POLICY = LanguagePolicy()


def _signal_score(lowered: str, signals: Iterable[str]) -> int:
    # Substring hits, so "man" also counts inside "many".
    return sum(1 for signal in signals if signal in lowered)


def detect_transcript_language(text: str, policy: LanguagePolicy = DEFAULT_POLICY) -> Language:
    if is_indic_script(text):
        return "hindi"

    lowered = text.lower()
    hindi_score = _signal_score(lowered, policy.hindi_signals)
    english_score = _signal_score(lowered, policy.english_signals)
    if hindi_score > english_score:
        return "hinglish"
    return "english"


def language_tally(turns: Iterable[HistoryTurn]) -> Counter[str]:
    return Counter(turn.language for turn in turns)


def smooth_language(
    initial: Language,
    history: Iterable[HistoryTurn],
    policy: LanguagePolicy = DEFAULT_POLICY,
) -> Language:
    tally = language_tally(history)
    if initial != "hindi" and tally["hindi"] >= policy.hindi_promotion_threshold:
        return "hindi"
    if initial == "english" and tally["hinglish"] >= policy.hinglish_promotion_threshold:
        return "hinglish"
    return initial


def classify_language(
    transcript: str,
    history: Iterable[HistoryTurn],
    policy: LanguagePolicy = DEFAULT_POLICY,
) -> Language:
    return smooth_language(detect_transcript_language(transcript, policy), history, policy)


def resolve_tone(raw: object) -> Tone:
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        for tone in TONES:
            if lowered == tone:
                return tone
    return DEFAULT_TONE


def resolve_language(raw: object) -> Language:
    lowered = str(raw if raw is not None else "").strip().lower()
    for language in LANGUAGES:
        if lowered == language:
            return language
    return DEFAULT_LANGUAGE


__all__ = [
    "HINDI_SIGNALS",
    "ENGLISH_SIGNALS",
    "LanguagePolicy",
    "DEFAULT_POLICY",
    "detect_transcript_language",
    "language_tally",
    "smooth_language",
    "classify_language",
    "resolve_tone",
    "resolve_language",
]
