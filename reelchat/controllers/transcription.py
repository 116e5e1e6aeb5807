"""Standalone Whisper transcription endpoints used for voice bookmarks."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from reelchat.controllers.composite import to_response
from reelchat.controllers.dependencies import PipelineDep
from reelchat.pipelines.composite import MAX_AUDIO_BYTES, SUPPORTED_FORMATS
from reelchat.views import FailureResponse, TranscriptionResponse, TranscriptionServiceStatus

router = APIRouter(prefix="/transcribe", tags=["transcription"])


@router.get("", response_model=TranscriptionServiceStatus)
async def transcription_status() -> TranscriptionServiceStatus:
    """Describe what the transcription endpoint accepts."""

    return TranscriptionServiceStatus(
        supported_formats=list(SUPPORTED_FORMATS),
        max_file_size=f"{MAX_AUDIO_BYTES // (1024 * 1024)}MB",
        endpoints={"transcribe": "POST /transcribe"},
    )


@router.post(
    "",
    response_model=TranscriptionResponse,
    responses={400: {"model": FailureResponse}, 500: {"model": FailureResponse}},
)
async def transcribe_audio(request: Request, pipeline: PipelineDep) -> Response:
    """Transcribe a base64 clip and return bookmark-ready text."""

    raw_body = await request.body()
    return to_response(await pipeline.transcribe(raw_body))
