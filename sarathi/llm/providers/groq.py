from __future__ import annotations

from typing import Any

import httpx

from sarathi.config import GroqSettings
from sarathi.errors import CompletionFailed, PipelineTimeout, TranscriptionFailed
from sarathi.llm.types import ChatMessage, ChatProvider, SamplingParams
from sarathi.models import Utterance
from sarathi.telemetry.logging import get_logger
from sarathi.telemetry.tracing import span

ERROR_BODY_PREVIEW = 500


class GroqProvider(ChatProvider):
    """Transcription and chat completion against Groq's OpenAI-compatible API."""

    def __init__(self, settings: GroqSettings, client: httpx.AsyncClient) -> None:
        if not settings.api_key:
            raise ValueError("Groq API key is required")
        self._settings = settings
        self._client = client
        self._headers = {"Authorization": f"Bearer {settings.api_key}"}
        self._logger = get_logger(__name__)
        self.name = "groq"

    async def transcribe(self, utterance: Utterance) -> dict[str, Any]:
        files = {
            "file": (
                utterance.filename or "audio.webm",
                utterance.content,
                utterance.content_type or "application/octet-stream",
            )
        }
        data = {
            "model": self._settings.whisper_model,
            "temperature": "0",
            "response_format": "json",
        }
        with span("groq.transcribe", model=self._settings.whisper_model, audio_bytes=len(utterance.content)):
            try:
                resp = await self._client.post(
                    f"{self._settings.base_url}/audio/transcriptions",
                    headers=self._headers,
                    data=data,
                    files=files,
                )
            except httpx.TimeoutException as exc:
                self._logger.error("voice.transcription.timeout", error=str(exc))
                raise PipelineTimeout(f"transcription timed out: {exc}") from exc
            except httpx.HTTPError as exc:
                self._logger.error("voice.transcription.transport_error", error=str(exc))
                raise TranscriptionFailed(str(exc)) from exc

        if resp.is_error:
            self._logger.error(
                "voice.transcription.failed",
                status=resp.status_code,
                body=resp.text[:ERROR_BODY_PREVIEW],
            )
            raise TranscriptionFailed(f"transcription returned {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise TranscriptionFailed("transcription returned invalid JSON") from exc
        return payload if isinstance(payload, dict) else {}

    async def chat(self, messages: list[ChatMessage], sampling: SamplingParams) -> str | None:
        payload = {
            "model": self._settings.chat_model,
            **sampling.to_dict(),
            "messages": [message.to_dict() for message in messages],
        }
        with span("groq.chat", model=self._settings.chat_model, messages=len(messages)):
            try:
                resp = await self._client.post(
                    f"{self._settings.base_url}/chat/completions",
                    headers={**self._headers, "Content-Type": "application/json"},
                    json=payload,
                )
            except httpx.TimeoutException as exc:
                self._logger.error("voice.completion.timeout", error=str(exc))
                raise PipelineTimeout(f"completion timed out: {exc}") from exc
            except httpx.HTTPError as exc:
                self._logger.error("voice.completion.transport_error", error=str(exc))
                raise CompletionFailed(str(exc)) from exc

        if resp.is_error:
            self._logger.error(
                "voice.completion.failed",
                status=resp.status_code,
                body=resp.text[:ERROR_BODY_PREVIEW],
            )
            raise CompletionFailed(f"completion returned {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise CompletionFailed("completion returned invalid JSON") from exc
        return self._extract_content(data)

    @staticmethod
    def _extract_content(data: Any) -> str | None:
        if not isinstance(data, dict):
            return None
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") if isinstance(first.get("message"), dict) else {}
        content = message.get("content")
        return content if isinstance(content, str) else None


__all__ = ["GroqProvider"]
