from sarathi.tts.base import SynthesisAttempt, coerce_audio_bytes
from sarathi.tts.chain import SynthesisChain, build_chain
from sarathi.tts.elevenlabs import ElevenLabsAttempt
from sarathi.tts.google import GoogleTranslateAttempt
from sarathi.tts.kokoro import KokoroAttempt

__all__ = [
    "SynthesisAttempt",
    "SynthesisChain",
    "ElevenLabsAttempt",
    "KokoroAttempt",
    "GoogleTranslateAttempt",
    "build_chain",
    "coerce_audio_bytes",
]
