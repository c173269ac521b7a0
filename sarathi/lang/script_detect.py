from __future__ import annotations

import regex as re

DEVANAGARI = re.compile(r"\p{Script=Devanagari}")
NON_ASCII = re.compile(r"[^\x00-\x7F]")


def has_devanagari(text: str | None) -> bool:
    if not text or not isinstance(text, str):
        return False
    return DEVANAGARI.search(text) is not None


def has_non_ascii(text: str | None) -> bool:
    if not text or not isinstance(text, str):
        return False
    return NON_ASCII.search(text) is not None


def is_indic_script(text: str | None) -> bool:
    """True when *text* carries Devanagari or any other non-ASCII characters."""
    return has_devanagari(text) or has_non_ascii(text)


__all__ = ["has_devanagari", "has_non_ascii", "is_indic_script"]
