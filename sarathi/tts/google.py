from __future__ import annotations

import httpx

from sarathi.config import GoogleTTSSettings
from sarathi.models import VoiceHint
from sarathi.tts.base import SynthesisAttempt
from sarathi.tts.voice_router import VoiceRouter


def language_for_voice(voice_id: str) -> str:
    return "hi" if voice_id.lower().startswith("hi") else "en"


class GoogleTranslateAttempt(SynthesisAttempt):
    """Keyless translate_tts endpoint; last resort, short inputs only."""

    name = "google"
    mime_type = "audio/mpeg"

    def __init__(self, settings: GoogleTTSSettings, client: httpx.AsyncClient, router: VoiceRouter) -> None:
        super().__init__()
        self._settings = settings
        self._client = client
        self._router = router

    def configured(self) -> bool:
        return bool(self._settings.base_url)

    async def _request(self, text: str, hint: VoiceHint) -> bytes:
        voice_id = self._router.resolve(self.name, hint)
        params = {
            "ie": "UTF-8",
            "client": "tw-ob",
            "tl": language_for_voice(voice_id),
            "q": text[: self._settings.max_chars],
        }
        self._logger.info("tts.google.request", voice=voice_id, chars=len(params["q"]), tl=params["tl"])
        resp = await self._client.get(str(self._settings.base_url), params=params)
        resp.raise_for_status()
        return resp.content


__all__ = ["GoogleTranslateAttempt", "language_for_voice"]
