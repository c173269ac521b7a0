from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, Iterable
from typing import Any

import httpx

from sarathi.errors import SynthesisError
from sarathi.models import SynthesisResult, VoiceHint
from sarathi.telemetry.logging import get_logger
from sarathi.telemetry.tracing import span

ERROR_BODY_PREVIEW = 300


async def coerce_audio_bytes(data: Any) -> bytes:
    """Collapse any provider response shape into one contiguous byte buffer."""
    if data is None:
        return b""
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, httpx.Response):
        return data.content
    if isinstance(data, str):
        raise SynthesisError("expected audio bytes, got text")
    if isinstance(data, AsyncIterable):
        chunks: list[bytes] = []
        async for chunk in data:
            chunks.append(await coerce_audio_bytes(chunk))
        return b"".join(chunks)
    if isinstance(data, Iterable):
        items = list(data)
        if all(isinstance(item, int) for item in items):
            try:
                return bytes(items)
            except ValueError as exc:
                raise SynthesisError("byte values out of range") from exc
        return b"".join([await coerce_audio_bytes(item) for item in items])
    if isinstance(data, int):
        raise SynthesisError("expected audio bytes, got a bare integer")
    raise SynthesisError(f"unsupported audio payload type: {type(data).__name__}")


def describe_http_error(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"status {exc.response.status_code}"
    return f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__


class SynthesisAttempt(ABC):
    """One provider in the fallback chain: ``(text, hint) -> SynthesisResult``, never raising."""

    name: str = "unknown"
    mime_type: str = "audio/mpeg"

    def __init__(self) -> None:
        self._logger = get_logger(__name__)

    def configured(self) -> bool:
        return True

    @abstractmethod
    async def _request(self, text: str, hint: VoiceHint) -> Any:
        """Perform the provider call and return raw audio in any supported shape."""

    async def synthesize(self, text: str, hint: VoiceHint) -> SynthesisResult:
        if not self.configured():
            return SynthesisResult.failed("not configured", provider=self.name)

        with span("tts.attempt", provider=self.name, tone=hint.tone, language=hint.language):
            try:
                raw = await self._request(text, hint)
                audio = await coerce_audio_bytes(raw)
            except httpx.HTTPStatusError as exc:
                self._logger.warning(
                    "tts.attempt.failed",
                    provider=self.name,
                    status=exc.response.status_code,
                    body=_preview(exc.response),
                )
                return SynthesisResult.failed(describe_http_error(exc), provider=self.name)
            except httpx.HTTPError as exc:
                self._logger.warning("tts.attempt.failed", provider=self.name, error=describe_http_error(exc))
                return SynthesisResult.failed(describe_http_error(exc), provider=self.name)
            except SynthesisError as exc:
                self._logger.warning("tts.attempt.failed", provider=self.name, error=str(exc))
                return SynthesisResult.failed(str(exc), provider=self.name)
            except Exception as exc:
                self._logger.exception("tts.attempt.crashed", provider=self.name)
                return SynthesisResult.failed(f"{type(exc).__name__}: {exc}", provider=self.name)

        if not audio:
            self._logger.warning("tts.attempt.empty", provider=self.name)
            return SynthesisResult.failed("empty audio", provider=self.name)
        return SynthesisResult.ok(audio, provider=self.name, mime_type=self.mime_type)


def _preview(response: httpx.Response) -> str:
    try:
        return response.text[:ERROR_BODY_PREVIEW]
    except httpx.ResponseNotRead:
        return ""


__all__ = ["SynthesisAttempt", "coerce_audio_bytes", "describe_http_error"]
