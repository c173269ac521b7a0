from __future__ import annotations


class VoicePipelineError(Exception):
    """Fatal failure of a voice turn, carrying the HTTP status and the user-facing message."""

    status_code: int = 500
    code: str = "internal_error"
    public_message: str = "Voice processing failed. Please try again."

    def __init__(self, detail: str | None = None, *, public_message: str | None = None) -> None:
        super().__init__(detail or self.public_message)
        self.detail = detail
        if public_message is not None:
            self.public_message = public_message

    def to_payload(self) -> dict[str, str]:
        return {"error": self.public_message, "code": self.code}


class MissingConfiguration(VoicePipelineError):
    status_code = 500
    code = "missing_configuration"
    public_message = "Voice service is missing required API keys."


class MissingAudio(VoicePipelineError):
    status_code = 400
    code = "missing_audio"
    public_message = "Audio file not found in request."


class EmptyTranscript(VoicePipelineError):
    status_code = 422
    code = "empty_transcript"
    public_message = "I could not hear any words, try again."


class TranscriptionFailed(VoicePipelineError):
    status_code = 422
    code = "transcription_failed"
    public_message = "Unable to transcribe audio."


class CompletionFailed(VoicePipelineError):
    status_code = 502
    code = "completion_failed"
    public_message = "Unable to craft a reply. Try again."


class PipelineTimeout(VoicePipelineError):
    status_code = 504
    code = "timeout"
    public_message = "Voice processing took too long. Please try again."


class SynthesisError(Exception):
    """Raised inside a synthesis attempt; always absorbed into a failed SynthesisResult."""


SYNTHESIS_FAILED_CODE = "synthesis_failed"


__all__ = [
    "VoicePipelineError",
    "MissingConfiguration",
    "MissingAudio",
    "EmptyTranscript",
    "TranscriptionFailed",
    "CompletionFailed",
    "PipelineTimeout",
    "SynthesisError",
    "SYNTHESIS_FAILED_CODE",
]
