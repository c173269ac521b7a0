from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx

from sarathi.config import AppSettings, TalkMode
from sarathi.errors import SYNTHESIS_FAILED_CODE, MissingAudio, MissingConfiguration, PipelineTimeout
from sarathi.history import parse_history
from sarathi.lang.classifier import (
    DEFAULT_POLICY,
    LanguagePolicy,
    classify_language,
    resolve_tone,
)
from sarathi.lang.normalize import extract_transcript_text, normalize_transcript
from sarathi.llm.providers.groq import GroqProvider
from sarathi.llm.types import ChatProvider, SamplingParams, build_messages, finalize_reply
from sarathi.models import Language, SynthesisResult, Tone, Utterance, VoiceHint, VoiceTurnResult
from sarathi.persona import build_system_prompt, sanitize_name
from sarathi.telemetry.logging import get_logger
from sarathi.telemetry.tracing import span
from sarathi.tts.chain import SynthesisChain, build_chain

UPSTREAM_TIMEOUT = httpx.Timeout(20.0, connect=5.0)


@dataclass(slots=True)
class VoiceTurnRequest:
    utterance: Utterance | None
    tone: str | None = None
    name: str | None = None
    history: str | None = None


@dataclass(slots=True)
class _ConversedTurn:
    transcript: str
    reply: str
    mode: TalkMode
    tone: Tone
    language: Language


class VoiceTurnPipeline:
    """Transcribe, reply and speak a single voice turn.

    Transcription and completion failures abort the turn. Synthesis is best effort: when every
    provider fails the result still carries the transcript and reply, flagged with
    ``error="synthesis_failed"``. The request deadline bounds transcription and completion;
    synthesis gets whatever time is left and degrades to a synthesis failure when it runs out.
    """

    def __init__(
        self,
        settings: AppSettings,
        provider: ChatProvider,
        chain: SynthesisChain,
        policy: LanguagePolicy = DEFAULT_POLICY,
    ) -> None:
        self._settings = settings
        self._provider = provider
        self._chain = chain
        self._policy = policy
        self._logger = get_logger(__name__)

    async def run(self, request: VoiceTurnRequest) -> VoiceTurnResult:
        timeout = self._settings.request_timeout_seconds
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        try:
            turn = await asyncio.wait_for(self._converse(request), timeout=timeout)
        except asyncio.TimeoutError as exc:
            self._logger.error("voice.turn.timeout", timeout_seconds=timeout)
            raise PipelineTimeout(f"voice turn exceeded {timeout}s") from exc

        synthesis = await self._synthesize(turn, deadline - loop.time())
        return VoiceTurnResult.assemble(
            transcript=turn.transcript,
            reply=turn.reply,
            synthesis=synthesis,
            mode=turn.mode,
            tone=turn.tone,
            language=turn.language,
            failure_code=SYNTHESIS_FAILED_CODE,
        )

    async def _converse(self, request: VoiceTurnRequest) -> _ConversedTurn:
        utterance = request.utterance
        if utterance is None or not utterance.content:
            raise MissingAudio("no audio payload")

        tone = resolve_tone(request.tone)
        name = sanitize_name(request.name)
        history = parse_history(request.history)
        mode = self._settings.talk_mode

        with span("voice.transcribe"):
            transcription = await self._provider.transcribe(utterance)
        transcript = normalize_transcript(extract_transcript_text(transcription))

        language = classify_language(transcript, history, self._policy)
        self._logger.info(
            "voice.turn.classified",
            tone=tone,
            language=language,
            history_turns=len(history),
            transcript_chars=len(transcript),
        )

        system_prompt = build_system_prompt(tone, language, mode, name or None)
        messages = build_messages(system_prompt, history, transcript)
        with span("voice.complete", mode=mode):
            raw_reply = await self._provider.chat(messages, SamplingParams.for_mode(mode))
        if not raw_reply:
            self._logger.info("voice.completion.empty", fallback=True)
        reply = finalize_reply(raw_reply, mode)
        return _ConversedTurn(transcript=transcript, reply=reply, mode=mode, tone=tone, language=language)

    async def _synthesize(self, turn: _ConversedTurn, remaining: float) -> SynthesisResult:
        hint = VoiceHint(tone=turn.tone, language=turn.language)
        if remaining <= 0:
            synthesis = SynthesisResult.failed("synthesis timed out")
        else:
            with span("voice.synthesize", tone=turn.tone, language=turn.language):
                try:
                    synthesis = await asyncio.wait_for(self._chain.synthesize(turn.reply, hint), timeout=remaining)
                except asyncio.TimeoutError:
                    synthesis = SynthesisResult.failed("synthesis timed out")
        if not synthesis.success:
            self._logger.warning("voice.synthesis.failed", error=synthesis.error)
        return synthesis


def ensure_configured(settings: AppSettings) -> None:
    if not settings.groq.api_key:
        raise MissingConfiguration("GROQ_API_KEY is not set")


@asynccontextmanager
async def open_pipeline(
    settings: AppSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[VoiceTurnPipeline]:
    """Build a pipeline whose upstream client lives exactly as long as one request."""
    ensure_configured(settings)
    async with httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT, transport=transport) as client:
        provider = GroqProvider(settings.groq, client)
        yield VoiceTurnPipeline(settings, provider, build_chain(settings, client))


__all__ = ["VoiceTurnRequest", "VoiceTurnPipeline", "ensure_configured", "open_pipeline"]
