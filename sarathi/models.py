from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from sarathi.config import TalkMode

Tone = Literal["warm", "spiritual", "coach"]
Language = Literal["english", "hinglish", "hindi"]

TONES: tuple[Tone, ...] = ("warm", "spiritual", "coach")
LANGUAGES: tuple[Language, ...] = ("english", "hinglish", "hindi")
DEFAULT_TONE: Tone = "warm"
DEFAULT_LANGUAGE: Language = "english"


@dataclass(slots=True)
class Utterance:
    content: bytes
    filename: str = "audio.webm"
    content_type: str | None = None


@dataclass(slots=True)
class HistoryTurn:
    user: str
    assistant: str
    tone: Tone = DEFAULT_TONE
    language: Language = DEFAULT_LANGUAGE


@dataclass(slots=True, frozen=True)
class VoiceHint:
    tone: Tone
    language: Language

    @property
    def hindi_register(self) -> bool:
        return self.language in ("hindi", "hinglish")


@dataclass(slots=True)
class SynthesisResult:
    success: bool
    audio: bytes = b""
    error: str | None = None
    provider: str | None = None
    mime_type: str = "audio/mpeg"

    @classmethod
    def ok(cls, audio: bytes, provider: str, mime_type: str) -> "SynthesisResult":
        return cls(success=True, audio=audio, provider=provider, mime_type=mime_type)

    @classmethod
    def failed(cls, error: str, provider: str | None = None) -> "SynthesisResult":
        return cls(success=False, error=error, provider=provider)


class VoiceTurnResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transcript: str
    reply: str
    audio_base64: str | None = Field(default=None, alias="audioBase64")
    audio_mime_type: str | None = Field(default=None, alias="audioMimeType")
    mode: TalkMode
    tone: Tone
    language: Language
    voice_provider: str | None = Field(default=None, alias="voiceProvider")
    error: str | None = None

    @classmethod
    def assemble(
        cls,
        transcript: str,
        reply: str,
        synthesis: SynthesisResult,
        mode: TalkMode,
        tone: Tone,
        language: Language,
        failure_code: str,
    ) -> "VoiceTurnResult":
        if synthesis.success:
            return cls(
                transcript=transcript,
                reply=reply,
                audio_base64=base64.b64encode(synthesis.audio).decode("ascii"),
                audio_mime_type=synthesis.mime_type,
                mode=mode,
                tone=tone,
                language=language,
                voice_provider=synthesis.provider,
            )
        return cls(
            transcript=transcript,
            reply=reply,
            mode=mode,
            tone=tone,
            language=language,
            error=failure_code,
        )

    def to_response(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


__all__ = [
    "Tone",
    "Language",
    "TONES",
    "LANGUAGES",
    "DEFAULT_TONE",
    "DEFAULT_LANGUAGE",
    "Utterance",
    "HistoryTurn",
    "VoiceHint",
    "SynthesisResult",
    "VoiceTurnResult",
]
