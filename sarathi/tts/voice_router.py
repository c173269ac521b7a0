from __future__ import annotations

import functools
from typing import Any

import yaml

from sarathi.config import package_root
from sarathi.models import TONES, VoiceHint


class VoiceRouter:
    def __init__(self, raw_config: dict[str, Any]) -> None:
        self._config = raw_config
        self._providers: dict[str, dict[str, Any]] = raw_config.get("providers", {}) or {}
        for provider, tones in self._providers.items():
            if not isinstance(tones, dict):
                raise ValueError(f"Provider '{provider}' must map tones to voice slots")
            for tone in TONES:
                slots = tones.get(tone)
                if not isinstance(slots, dict) or not slots.get("default"):
                    raise ValueError(f"Provider '{provider}' has no default voice for tone '{tone}'")

    def slot_for(self, hint: VoiceHint) -> str:
        return "hindi" if hint.hindi_register else "default"

    def resolve(self, provider: str, hint: VoiceHint) -> str:
        tones = self._providers.get(provider)
        if not tones:
            raise ValueError(f"Unknown provider '{provider}'")
        slots = tones[hint.tone]
        # Fall back to the default slot when a tone has no register-specific voice.
        voice = slots.get(self.slot_for(hint)) or slots["default"]
        return str(voice)


@functools.lru_cache(maxsize=1)
def load_router() -> VoiceRouter:
    config_path = package_root() / "tts" / "voices.yml"
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("voices.yml must define a mapping")
    return VoiceRouter(raw)


__all__ = ["VoiceRouter", "load_router"]
