from __future__ import annotations

import asyncio
import base64
import json
from typing import Any

import pytest

from sarathi.errors import CompletionFailed, EmptyTranscript, MissingAudio, PipelineTimeout
from sarathi.llm.types import FALLBACK_REPLY, ChatMessage, ChatProvider, SamplingParams
from sarathi.models import SynthesisResult, Utterance, VoiceHint
from sarathi.pipeline import VoiceTurnPipeline, VoiceTurnRequest
from sarathi.tts.chain import SynthesisChain
from tests.helpers import make_settings


class StubProvider(ChatProvider):
    name = "stub"

    def __init__(
        self,
        transcription: dict[str, Any] | None = None,
        reply: str | None = "Stay steady, one breath at a time.",
        chat_error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.transcription = transcription if transcription is not None else {"text": "I feel lost and need help"}
        self.reply = reply
        self.chat_error = chat_error
        self.delay = delay
        self.transcribe_calls: list[Utterance] = []
        self.chat_calls: list[tuple[list[ChatMessage], SamplingParams]] = []

    async def transcribe(self, utterance: Utterance) -> dict[str, Any]:
        self.transcribe_calls.append(utterance)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.transcription

    async def chat(self, messages: list[ChatMessage], sampling: SamplingParams) -> str | None:
        self.chat_calls.append((messages, sampling))
        if self.chat_error:
            raise self.chat_error
        return self.reply


class RecordingChain(SynthesisChain):
    def __init__(self, result: SynthesisResult) -> None:
        super().__init__([])
        self.result = result
        self.calls: list[tuple[str, VoiceHint]] = []

    async def synthesize(self, text: str, hint: VoiceHint) -> SynthesisResult:
        self.calls.append((text, hint))
        return self.result


AUDIO_OK = SynthesisResult.ok(b"spoken", provider="google", mime_type="audio/mpeg")
AUDIO_FAILED = SynthesisResult.failed("elevenlabs: status 401; kokoro: not configured; google: status 503")


def request(**overrides: Any) -> VoiceTurnRequest:
    values: dict[str, Any] = {"utterance": Utterance(content=b"voice-bytes", filename="turn.webm")}
    values.update(overrides)
    return VoiceTurnRequest(**values)


def pipeline(provider: StubProvider, chain: SynthesisChain, **settings: Any) -> VoiceTurnPipeline:
    return VoiceTurnPipeline(make_settings(**settings), provider, chain)


@pytest.mark.anyio("asyncio")
async def test_full_turn_produces_audio() -> None:
    provider = StubProvider()
    chain = RecordingChain(AUDIO_OK)
    result = await pipeline(provider, chain).run(request(tone="SPIRITUAL", name="Meera"))

    assert result.transcript == "I feel lost and need help"
    assert result.reply == "Stay steady, one breath at a time."
    assert base64.b64decode(result.audio_base64 or "") == b"spoken"
    assert result.audio_mime_type == "audio/mpeg"
    assert result.voice_provider == "google"
    assert (result.mode, result.tone, result.language) == ("long", "spiritual", "english")
    assert result.error is None

    messages, sampling = provider.chat_calls[0]
    assert "soulful guide" in messages[0].content
    assert "Meera" in messages[0].content
    assert messages[-1].content == "I feel lost and need help"
    assert sampling == SamplingParams.for_mode("long")
    assert chain.calls == [(result.reply, VoiceHint(tone="spiritual", language="english"))]


@pytest.mark.anyio("asyncio")
async def test_synthesis_failure_still_returns_text() -> None:
    result = await pipeline(StubProvider(), RecordingChain(AUDIO_FAILED)).run(request())
    payload = result.to_response()

    assert payload["error"] == "synthesis_failed"
    assert payload["audioBase64"] is None
    assert payload["audioMimeType"] is None
    assert payload["reply"] == "Stay steady, one breath at a time."
    assert payload["transcript"] == "I feel lost and need help"


@pytest.mark.anyio("asyncio")
async def test_empty_transcript_never_reaches_completion() -> None:
    provider = StubProvider(transcription={"text": "   ", "segments": []})
    chain = RecordingChain(AUDIO_OK)
    with pytest.raises(EmptyTranscript) as excinfo:
        await pipeline(provider, chain).run(request())

    assert excinfo.value.status_code == 422
    assert provider.chat_calls == []
    assert chain.calls == []


@pytest.mark.anyio("asyncio")
async def test_segments_used_when_text_missing() -> None:
    provider = StubProvider(transcription={"segments": [{"text": "mera  dil"}, {"text": "nahi lagta"}]})
    result = await pipeline(provider, RecordingChain(AUDIO_OK)).run(request())
    assert result.transcript == "mera dil nahi lagta"
    assert result.language == "hinglish"


@pytest.mark.anyio("asyncio")
async def test_missing_audio_is_rejected_before_upstream() -> None:
    provider = StubProvider()
    with pytest.raises(MissingAudio):
        await pipeline(provider, RecordingChain(AUDIO_OK)).run(request(utterance=None))
    with pytest.raises(MissingAudio):
        await pipeline(provider, RecordingChain(AUDIO_OK)).run(request(utterance=Utterance(content=b"")))
    assert provider.transcribe_calls == []


@pytest.mark.anyio("asyncio")
async def test_history_shapes_messages_and_language() -> None:
    history = json.dumps(
        [
            {"user": "kuch accha nahi lag raha", "assistant": "Main yahan hoon.", "language": "hinglish"},
            {"user": "dil bhaari hai", "assistant": "Saans lo, dheere dheere.", "language": "hinglish"},
        ]
    )
    provider = StubProvider()
    chain = RecordingChain(AUDIO_OK)
    result = await pipeline(provider, chain).run(request(history=history))

    assert result.language == "hinglish"
    messages, _ = provider.chat_calls[0]
    assert [m.role for m in messages] == ["system", "user", "assistant", "user", "assistant", "user"]
    assert "Latin script" in messages[0].content
    assert chain.calls[0][1] == VoiceHint(tone="warm", language="hinglish")


@pytest.mark.anyio("asyncio")
async def test_malformed_history_is_ignored() -> None:
    provider = StubProvider()
    result = await pipeline(provider, RecordingChain(AUDIO_OK)).run(request(history="[{broken"))
    assert result.reply
    messages, _ = provider.chat_calls[0]
    assert len(messages) == 2


@pytest.mark.anyio("asyncio")
async def test_empty_completion_uses_fallback_reply() -> None:
    chain = RecordingChain(AUDIO_OK)
    result = await pipeline(StubProvider(reply=""), chain).run(request())
    assert result.reply == FALLBACK_REPLY
    assert chain.calls[0][0] == FALLBACK_REPLY


@pytest.mark.anyio("asyncio")
async def test_short_mode_changes_sampling_and_clamp() -> None:
    provider = StubProvider(reply="x" * 500)
    result = await pipeline(provider, RecordingChain(AUDIO_OK), SARATHI_TALK_MODE="SHORT").run(request())
    assert result.mode == "short"
    assert len(result.reply) == 160
    assert provider.chat_calls[0][1] == SamplingParams.for_mode("short")


@pytest.mark.anyio("asyncio")
async def test_completion_failure_propagates() -> None:
    chain = RecordingChain(AUDIO_OK)
    with pytest.raises(CompletionFailed):
        await pipeline(StubProvider(chat_error=CompletionFailed("503")), chain).run(request())
    assert chain.calls == []


@pytest.mark.anyio("asyncio")
async def test_deadline_abandons_slow_upstream() -> None:
    provider = StubProvider(delay=5.0)
    with pytest.raises(PipelineTimeout) as excinfo:
        await pipeline(provider, RecordingChain(AUDIO_OK), SARATHI_REQUEST_TIMEOUT=0.1).run(request())
    assert excinfo.value.status_code == 504
    assert provider.chat_calls == []


class SlowChain(RecordingChain):
    def __init__(self, delay: float) -> None:
        super().__init__(AUDIO_OK)
        self.delay = delay

    async def synthesize(self, text: str, hint: VoiceHint) -> SynthesisResult:
        self.calls.append((text, hint))
        await asyncio.sleep(self.delay)
        return self.result


@pytest.mark.anyio("asyncio")
async def test_slow_synthesis_keeps_reply_text() -> None:
    chain = SlowChain(delay=5.0)
    result = await pipeline(StubProvider(), chain, SARATHI_REQUEST_TIMEOUT=0.2).run(request())
    payload = result.to_response()

    assert len(chain.calls) == 1
    assert payload["error"] == "synthesis_failed"
    assert payload["audioBase64"] is None
    assert payload["reply"] == "Stay steady, one breath at a time."
    assert payload["transcript"] == "I feel lost and need help"
