"""
api.py — FastAPI app exposing the download and transcription operations.

Endpoints:
    POST /download    — Video metadata and muxed formats for a YouTube URL.
    GET  /download    — The video (or audio) file itself, or a redirect to a
                        third-party downloader when extraction is not possible.
    POST /transcribe  — Timed transcript via Whisper or YouTube captions.
    GET  /transcribe  — Static description of the two transcription modes.
    GET  /health      — Health check plus which capabilities are active.

Run with:
    uv run uvicorn ytflow.api:app

Route handlers are plain functions, so FastAPI runs them in its thread pool
and a slow provider call never blocks other requests.  Services are built
per request through dependencies; tests swap them with
app.dependency_overrides.
"""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel

from ytflow.config import Settings, get_settings
from ytflow.errors import YtflowError
from ytflow.orchestrator import DownloadService, FallbackRedirect, TranscriptionService
from ytflow.responses import error_payload

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="ytflow API",
    description="YouTube video metadata, downloads and transcripts. "
                "Transcribes with OpenAI Whisper when OPENAI_API_KEY is set, "
                "and with YouTube captions otherwise.",
    version="0.1.0",
)

TRANSCRIBE_MODES = {
    "message": "ytflow Transcription API — POST { url, language }",
    "modes": {
        "withOpenAI": "Set OPENAI_API_KEY → uses Whisper AI for any video",
        "withoutOpenAI": "Falls back to YouTube auto-captions (works for most public videos)",
    },
}


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class DownloadRequest(BaseModel):
    url: str | None = None


class TranscribeRequest(BaseModel):
    url: str | None = None
    language: str | None = "auto"


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_download_service(settings: Settings = Depends(get_settings)) -> DownloadService:
    return DownloadService.from_settings(settings)


def get_transcription_service(settings: Settings = Depends(get_settings)) -> TranscriptionService:
    return TranscriptionService.from_settings(settings)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------

@app.exception_handler(YtflowError)
async def ytflow_error_handler(request: Request, exc: YtflowError) -> JSONResponse:
    """
    Translate any YtflowError into {"error": message} with its http_status.

    Endpoint code only raises; this handler owns the HTTP mapping.
    """
    if exc.http_status >= 500:
        logger.error("[%s %s] %s", request.method, request.url.path, exc.message)
    else:
        logger.info("[%s %s] %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content=error_payload(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or wrongly typed fields are invalid input: 400, not 422."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content=error_payload(message))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: anything not mapped above still answers with {"error": ...}."""
    logger.exception("[%s %s] Unhandled error", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_payload(str(exc)))


# ---------------------------------------------------------------------------
# Endpoints — download
# ---------------------------------------------------------------------------

@app.post("/download")
def describe_video(
    body: DownloadRequest,
    service: DownloadService = Depends(get_download_service),
) -> dict:
    """
    Return metadata for a YouTube video.

    When media extraction is disabled the response comes from a lightweight
    lookup: title and channel only, an empty `formats` list and a `note`.
    """
    return service.describe(body.url)


# response_model=None because the endpoint returns either raw bytes or a
# redirect, and FastAPI can't build a model from a Union of Response types.
@app.get("/download", response_model=None)
def download_video(
    url: str | None = Query(default=None, description="YouTube URL to download."),
    format: str = Query(default="mp4", description="Output container: mp4, mp3 or webm."),
    quality: str = Query(default="1080p", description="Quality tier: 4K, 2K, 1080p, 720p, 480p, 360p."),
    service: DownloadService = Depends(get_download_service),
) -> Response:
    """
    Send the requested rendition as an attachment.

    If the file can't be produced (extraction disabled or failing, download
    error) the caller is redirected to a third-party downloader with the URL
    pre-filled.
    """
    result = service.fetch_file(url, fmt=format, quality=quality)

    if isinstance(result, FallbackRedirect):
        return RedirectResponse(url=result.location)

    return Response(
        content=result.content,
        media_type=result.content_type,
        headers={
            "Content-Disposition": result.content_disposition,
            "Content-Length": str(len(result.content)),
            "Cache-Control": "no-store",
        },
    )


# ---------------------------------------------------------------------------
# Endpoints — transcription
# ---------------------------------------------------------------------------

@app.post("/transcribe")
def transcribe_video(
    body: TranscribeRequest,
    service: TranscriptionService = Depends(get_transcription_service),
) -> dict:
    """
    Transcribe a YouTube video.

    `language="auto"` lets the provider detect the language; any other value
    is a hint.  The `source` field says which path produced the transcript.
    """
    return service.transcribe(body.url, language=body.language)


@app.get("/transcribe")
def describe_transcription() -> dict:
    """Describe the transcription modes.  No side effects."""
    return TRANSCRIBE_MODES


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------

@app.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict:
    """
    Minimal health check.

    Also reports which optional capabilities are switched on, which makes
    degraded mode visible to monitoring.
    """
    return {
        "status": "ok",
        "whisper": settings.whisper_enabled,
        "extraction": settings.extraction_enabled,
    }
