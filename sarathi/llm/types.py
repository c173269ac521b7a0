from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal

from sarathi.config import TalkMode
from sarathi.lang.normalize import clamp
from sarathi.models import HistoryTurn, Utterance

Role = Literal["system", "user", "assistant"]

MAX_HISTORY_MESSAGE_CHARS = 520
REPLY_LIMITS: dict[str, int] = {"long": 420, "short": 160}
FALLBACK_REPLY = "Shanti rakho. Jo ho raha hai, wo bhi tumhe kuch sikhane aaya hai."


@dataclass(slots=True)
class ChatMessage:
    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(slots=True, frozen=True)
class SamplingParams:
    temperature: float
    top_p: float
    max_tokens: int

    @classmethod
    def for_mode(cls, mode: TalkMode) -> "SamplingParams":
        if mode == "short":
            return cls(temperature=0.4, top_p=0.9, max_tokens=120)
        return cls(temperature=0.55, top_p=0.9, max_tokens=260)

    def to_dict(self) -> dict[str, Any]:
        return {"temperature": self.temperature, "top_p": self.top_p, "max_tokens": self.max_tokens}


def build_messages(system_prompt: str, history: Iterable[HistoryTurn], transcript: str) -> list[ChatMessage]:
    messages = [ChatMessage(role="system", content=system_prompt)]
    for turn in history:
        if turn.user:
            messages.append(ChatMessage(role="user", content=clamp(turn.user, MAX_HISTORY_MESSAGE_CHARS)))
        if turn.assistant:
            messages.append(ChatMessage(role="assistant", content=clamp(turn.assistant, MAX_HISTORY_MESSAGE_CHARS)))
    messages.append(ChatMessage(role="user", content=transcript))
    return messages


def finalize_reply(raw: str | None, mode: TalkMode) -> str:
    limit = REPLY_LIMITS["short" if mode == "short" else "long"]
    reply = clamp(raw, limit) if raw else ""
    return reply or FALLBACK_REPLY


class ChatProvider:
    name: str

    async def transcribe(self, utterance: Utterance) -> dict[str, Any]:
        raise NotImplementedError

    async def chat(self, messages: list[ChatMessage], sampling: SamplingParams) -> str | None:
        raise NotImplementedError


__all__ = [
    "ChatMessage",
    "SamplingParams",
    "ChatProvider",
    "MAX_HISTORY_MESSAGE_CHARS",
    "REPLY_LIMITS",
    "FALLBACK_REPLY",
    "build_messages",
    "finalize_reply",
]
