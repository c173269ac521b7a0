from __future__ import annotations

import json
from typing import Any

import httpx

from sarathi.config import AppSettings


def make_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {
        "GROQ_API_KEY": "groq-test-key",
        "GROQ_API_BASE": "https://api.groq.com/openai/v1",
        "ELEVENLABS_API_KEY": "eleven-test-key",
        "ELEVENLABS_WARM_VOICE_ID": None,
        "ELEVENLABS_SPIRITUAL_VOICE_ID": None,
        "ELEVENLABS_COACH_VOICE_ID": None,
        "ELEVENLABS_VOICE_ID": None,
        "ELEVENLABS_HINDI_VOICE_ID": None,
        "ELEVENLABS_OUTPUT_FORMAT": "mp3_44100_128",
        "KOKORO_API_URL": "http://kokoro.test/v1/audio/speech",
        "KOKORO_API_KEY": None,
        "GOOGLE_TTS_URL": "https://translate.google.com/translate_tts",
        "SARATHI_TALK_MODE": "long",
        "SARATHI_REQUEST_TIMEOUT": 30.0,
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


class FakeUpstream:
    """Scriptable stand-in for every hosted provider, served through httpx.MockTransport."""

    def __init__(
        self,
        transcription: dict[str, Any] | None = None,
        reply: str | None = "Breathe slowly. You are not alone in this.",
        transcription_status: int = 200,
        completion_status: int = 200,
        tts_status: dict[str, int] | None = None,
    ) -> None:
        self.transcription = transcription if transcription is not None else {"text": "I feel lost and need help"}
        self.reply = reply
        self.transcription_status = transcription_status
        self.completion_status = completion_status
        self.tts_status = {"elevenlabs": 200, "kokoro": 200, "google": 200, **(tts_status or {})}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        host = request.url.host
        if path.endswith("/audio/transcriptions"):
            if self.transcription_status != 200:
                return httpx.Response(self.transcription_status, text="upstream exploded")
            return httpx.Response(200, json=self.transcription)
        if path.endswith("/chat/completions"):
            if self.completion_status != 200:
                return httpx.Response(self.completion_status, text="rate limited")
            message: dict[str, str] = {"role": "assistant"}
            if self.reply is not None:
                message["content"] = self.reply
            return httpx.Response(200, json={"choices": [{"message": message}]})
        if host == "api.elevenlabs.io":
            return self._audio("elevenlabs", b"eleven-audio")
        if host == "kokoro.test":
            return self._audio("kokoro", b"kokoro-audio")
        if host == "translate.google.com":
            return self._audio("google", b"google-audio")
        return httpx.Response(404)

    def _audio(self, provider: str, body: bytes) -> httpx.Response:
        status = self.tts_status[provider]
        if status != 200:
            return httpx.Response(status, text=f"{provider} unavailable")
        return httpx.Response(200, content=body, headers={"Content-Type": "audio/mpeg"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def hits(self, fragment: str) -> list[httpx.Request]:
        return [request for request in self.requests if fragment in str(request.url)]

    def json_body(self, fragment: str) -> dict[str, Any]:
        return json.loads(self.hits(fragment)[-1].content)
