from __future__ import annotations

from typing import Sequence

import httpx

from sarathi.config import AppSettings
from sarathi.models import SynthesisResult, VoiceHint
from sarathi.telemetry.logging import get_logger
from sarathi.tts.base import SynthesisAttempt
from sarathi.tts.elevenlabs import ElevenLabsAttempt
from sarathi.tts.google import GoogleTranslateAttempt
from sarathi.tts.kokoro import KokoroAttempt
from sarathi.tts.voice_router import VoiceRouter, load_router


class SynthesisChain:
    """Try each attempt in order; the first success wins, otherwise report every failure."""

    def __init__(self, attempts: Sequence[SynthesisAttempt]) -> None:
        self._attempts = list(attempts)
        self._logger = get_logger(__name__)

    @property
    def attempts(self) -> list[SynthesisAttempt]:
        return list(self._attempts)

    async def synthesize(self, text: str, hint: VoiceHint) -> SynthesisResult:
        errors: list[str] = []
        for position, attempt in enumerate(self._attempts):
            result = await attempt.synthesize(text, hint)
            if result.success:
                self._logger.info(
                    "tts.chain.success",
                    provider=attempt.name,
                    position=position,
                    audio_bytes=len(result.audio),
                    skipped=errors,
                )
                return result
            errors.append(f"{attempt.name}: {result.error}")

        self._logger.warning("tts.chain.exhausted", errors=errors)
        return SynthesisResult.failed("; ".join(errors) or "no synthesis providers")


def build_chain(settings: AppSettings, client: httpx.AsyncClient, router: VoiceRouter | None = None) -> SynthesisChain:
    voice_router = router or load_router()
    return SynthesisChain(
        [
            ElevenLabsAttempt(settings.elevenlabs, client, voice_router),
            KokoroAttempt(settings.kokoro, client, voice_router),
            GoogleTranslateAttempt(settings.google_tts, client, voice_router),
        ]
    )


__all__ = ["SynthesisChain", "build_chain"]
