from __future__ import annotations

from uuid import uuid4

import httpx
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sarathi.config import AppSettings, load_settings
from sarathi.errors import VoicePipelineError
from sarathi.models import Utterance
from sarathi.pipeline import VoiceTurnRequest, ensure_configured, open_pipeline
from sarathi.telemetry.logging import bind_request, clear_request, configure_logging, get_logger
from sarathi.telemetry.tracing import configure_tracing

GENERIC_FAILURE = "Voice processing failed. Please try again."

settings = load_settings()
configure_logging(settings.telemetry.log_level)
configure_tracing("sarathi-voice", settings.telemetry.otlp_endpoint)
logger = get_logger(__name__)

app = FastAPI(title="Sarathi Voice")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ui.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


def get_settings() -> AppSettings:
    return load_settings()


def get_transport() -> httpx.AsyncBaseTransport | None:
    return None


@app.exception_handler(VoicePipelineError)
async def pipeline_error_handler(_: Request, exc: VoicePipelineError) -> JSONResponse:
    logger.warning("voice.turn.failed", code=exc.code, status=exc.status_code, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/healthz")
async def healthz(current: AppSettings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "mode": current.talk_mode}


@app.post("/api/voice")
async def voice_turn(
    audio: UploadFile | str | None = File(None),
    tone: str | None = Form(None),
    name: str | None = Form(None),
    history: str | None = Form(None),
    current: AppSettings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_transport),
) -> JSONResponse:
    bind_request(uuid4().hex, route="voice")
    try:
        ensure_configured(current)
        utterance: Utterance | None = None
        # A plain text "audio" field carries no upload and counts as missing audio.
        if audio is not None and not isinstance(audio, str):
            content = await audio.read()
            if content:
                utterance = Utterance(
                    content=content,
                    filename=audio.filename or "audio.webm",
                    content_type=audio.content_type,
                )
        async with open_pipeline(current, transport=transport) as pipeline:
            result = await pipeline.run(VoiceTurnRequest(utterance=utterance, tone=tone, name=name, history=history))
        logger.info("voice.turn.complete", provider=result.voice_provider, synthesis_error=result.error)
        return JSONResponse(content=result.to_response())
    except VoicePipelineError:
        raise
    except Exception:
        logger.exception("voice.turn.unexpected")
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE, "code": "internal_error"})
    finally:
        if audio is not None and not isinstance(audio, str):
            await audio.close()
        clear_request()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=settings.telemetry.log_level.lower())


if __name__ == "__main__":
    run()
