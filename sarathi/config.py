from __future__ import annotations

import functools
from pathlib import Path
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

TalkMode = Literal["long", "short"]


class GroqSettings(BaseModel):
    api_key: str | None = None
    base_url: str = "https://api.groq.com/openai/v1"
    chat_model: str = "llama-3.1-8b-instant"
    whisper_model: str = "whisper-large-v3-turbo"


class ElevenLabsSettings(BaseModel):
    api_key: str | None = None
    base_url: str = "https://api.elevenlabs.io/v1"
    model_id: str = "eleven_multilingual_v2"
    output_format: str = "mp3_44100_128"
    voice_overrides: dict[str, str] = {}

    @property
    def mime_type(self) -> str:
        return "audio/mpeg" if "mp3" in self.output_format else "audio/wav"


class KokoroSettings(BaseModel):
    base_url: str | None = None
    api_key: str | None = None


class GoogleTTSSettings(BaseModel):
    base_url: str | None = "https://translate.google.com/translate_tts"
    max_chars: int = 200


class TelemetrySettings(BaseModel):
    log_level: str = "INFO"
    otlp_endpoint: str | None = None


class UISettings(BaseModel):
    cors_origins: list[str] = ["http://localhost:3000"]


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env", ".env.local"), env_file_encoding="utf-8", extra="ignore")

    GROQ_API_KEY: str | None = None
    GROQ_API_BASE: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama-3.1-8b-instant"
    GROQ_WHISPER_MODEL: str = "whisper-large-v3-turbo"
    ELEVENLABS_API_KEY: str | None = None
    ELEVENLABS_OUTPUT_FORMAT: str = "mp3_44100_128"
    ELEVENLABS_MODEL_ID: str = "eleven_multilingual_v2"
    ELEVENLABS_WARM_VOICE_ID: str | None = None
    ELEVENLABS_SPIRITUAL_VOICE_ID: str | None = None
    ELEVENLABS_COACH_VOICE_ID: str | None = None
    ELEVENLABS_VOICE_ID: str | None = None
    ELEVENLABS_HINDI_VOICE_ID: str | None = None
    KOKORO_API_URL: str | None = None
    KOKORO_API_KEY: str | None = None
    GOOGLE_TTS_URL: str | None = "https://translate.google.com/translate_tts"
    SARATHI_TALK_MODE: str = "long"
    SARATHI_REQUEST_TIMEOUT: float = 55.0
    LOG_LEVEL: str = "INFO"
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None
    CORS_ORIGINS: str = "http://localhost:3000"

    @staticmethod
    def _clean(value: str | None) -> str | None:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None

    @property
    def talk_mode(self) -> TalkMode:
        normalized = (self.SARATHI_TALK_MODE or "").strip().lower()
        return "short" if normalized == "short" else "long"

    @property
    def request_timeout_seconds(self) -> float:
        return max(float(self.SARATHI_REQUEST_TIMEOUT), 0.1)

    @property
    def groq(self) -> GroqSettings:
        return GroqSettings(
            api_key=self._clean(self.GROQ_API_KEY),
            base_url=(self._clean(self.GROQ_API_BASE) or GroqSettings().base_url).rstrip("/"),
            chat_model=self._clean(self.GROQ_MODEL) or GroqSettings().chat_model,
            whisper_model=self._clean(self.GROQ_WHISPER_MODEL) or GroqSettings().whisper_model,
        )

    @property
    def elevenlabs(self) -> ElevenLabsSettings:
        overrides: dict[str, str] = {}
        candidates = {
            "warm": self.ELEVENLABS_WARM_VOICE_ID,
            "spiritual": self.ELEVENLABS_SPIRITUAL_VOICE_ID or self.ELEVENLABS_VOICE_ID,
            "coach": self.ELEVENLABS_COACH_VOICE_ID,
            "hindi": self.ELEVENLABS_HINDI_VOICE_ID,
        }
        for slot, value in candidates.items():
            cleaned = self._clean(value)
            if cleaned:
                overrides[slot] = cleaned
        return ElevenLabsSettings(
            api_key=self._clean(self.ELEVENLABS_API_KEY),
            model_id=self._clean(self.ELEVENLABS_MODEL_ID) or ElevenLabsSettings().model_id,
            output_format=self._clean(self.ELEVENLABS_OUTPUT_FORMAT) or ElevenLabsSettings().output_format,
            voice_overrides=overrides,
        )

    @property
    def kokoro(self) -> KokoroSettings:
        return KokoroSettings(base_url=self._clean(self.KOKORO_API_URL), api_key=self._clean(self.KOKORO_API_KEY))

    @property
    def google_tts(self) -> GoogleTTSSettings:
        return GoogleTTSSettings(base_url=self._clean(self.GOOGLE_TTS_URL))

    @property
    def telemetry(self) -> TelemetrySettings:
        return TelemetrySettings(log_level=self.LOG_LEVEL, otlp_endpoint=self._clean(self.OTEL_EXPORTER_OTLP_ENDPOINT))

    @property
    def ui(self) -> UISettings:
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        expanded = list(origins)
        for origin in origins:
            if "localhost" in origin:
                alias = origin.replace("localhost", "127.0.0.1")
                if alias not in expanded:
                    expanded.append(alias)
        return UISettings(cors_origins=expanded)


@functools.lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    return AppSettings()


def package_root() -> Path:
    return Path(__file__).resolve().parent


__all__ = ["AppSettings", "TalkMode", "load_settings", "package_root"]
