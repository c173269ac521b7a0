from __future__ import annotations

import httpx

from sarathi.config import ElevenLabsSettings
from sarathi.models import VoiceHint
from sarathi.tts.base import SynthesisAttempt
from sarathi.tts.voice_router import VoiceRouter

VOICE_SETTINGS = {
    "stability": 0.46,
    "similarity_boost": 0.72,
    "style": 0.2,
    "use_speaker_boost": True,
}


class ElevenLabsAttempt(SynthesisAttempt):
    name = "elevenlabs"

    def __init__(self, settings: ElevenLabsSettings, client: httpx.AsyncClient, router: VoiceRouter) -> None:
        super().__init__()
        self._settings = settings
        self._client = client
        self._router = router
        self.mime_type = settings.mime_type

    def configured(self) -> bool:
        return bool(self._settings.api_key)

    def voice_for(self, hint: VoiceHint) -> str:
        overrides = self._settings.voice_overrides
        if hint.hindi_register and overrides.get("hindi"):
            return overrides["hindi"]
        return overrides.get(hint.tone) or self._router.resolve(self.name, hint)

    async def _request(self, text: str, hint: VoiceHint) -> bytes:
        voice_id = self.voice_for(hint)
        self._logger.info("tts.elevenlabs.request", voice=voice_id, chars=len(text), language=hint.language)
        resp = await self._client.post(
            f"{self._settings.base_url}/text-to-speech/{voice_id}",
            headers={
                "xi-api-key": self._settings.api_key or "",
                "Content-Type": "application/json",
                "Accept": self.mime_type,
            },
            json={
                "text": text,
                "model_id": self._settings.model_id,
                "output_format": self._settings.output_format,
                "voice_settings": VOICE_SETTINGS,
            },
        )
        resp.raise_for_status()
        return resp.content


__all__ = ["ElevenLabsAttempt", "VOICE_SETTINGS"]
