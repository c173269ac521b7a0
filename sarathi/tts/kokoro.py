from __future__ import annotations

import httpx

from sarathi.config import KokoroSettings
from sarathi.models import VoiceHint
from sarathi.tts.base import SynthesisAttempt, coerce_audio_bytes
from sarathi.tts.voice_router import VoiceRouter


class KokoroAttempt(SynthesisAttempt):
    """OpenAI-style ``/audio/speech`` endpoint served by a Kokoro deployment."""

    name = "kokoro"
    mime_type = "audio/mpeg"

    def __init__(self, settings: KokoroSettings, client: httpx.AsyncClient, router: VoiceRouter) -> None:
        super().__init__()
        self._settings = settings
        self._client = client
        self._router = router

    def configured(self) -> bool:
        return bool(self._settings.base_url)

    def _build_request(self, text: str, hint: VoiceHint) -> tuple[dict[str, object], dict[str, str]]:
        payload: dict[str, object] = {
            "model": "kokoro",
            "voice": self._router.resolve(self.name, hint),
            "input": text,
            "response_format": "mp3",
            "language": "hi" if hint.hindi_register else "en",
        }
        headers = {"Content-Type": "application/json"}
        if self._settings.api_key:
            headers["Authorization"] = f"Bearer {self._settings.api_key}"
        return payload, headers

    async def _request(self, text: str, hint: VoiceHint) -> bytes:
        payload, headers = self._build_request(text, hint)
        self._logger.info("tts.kokoro.request", voice=payload["voice"], chars=len(text), language=payload["language"])
        async with self._client.stream("POST", str(self._settings.base_url), headers=headers, json=payload) as resp:
            resp.raise_for_status()
            return await coerce_audio_bytes(resp.aiter_bytes())


__all__ = ["KokoroAttempt"]
