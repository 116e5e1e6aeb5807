"""Transcription stage (Stage 02) of the composite pipeline.

Decodes the base64 clip, rejects oversized or unsupported uploads, writes the
bytes to a temporary file owned by this invocation, and streams that file to
the speech-to-text provider. The file is removed on every exit path.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
import tempfile
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Final

from fastapi.concurrency import run_in_threadpool

from reelchat.services.providers import SpeechToTextProvider

from .types import AudioClip, ErrorType, PipelineError, TranscriptionResult

logger = logging.getLogger("reelchat.pipelines.composite")

MAX_AUDIO_BYTES: Final[int] = 25 * 1024 * 1024
SUPPORTED_FORMATS: Final[tuple[str, ...]] = ("mp3", "mp4", "mpeg", "mpga", "m4a", "wav", "webm")
TEMP_FILE_PREFIX: Final[str] = "whisper_"
NO_SPEECH_MESSAGE: Final[str] = "No speech detected or audio unclear"


def file_extension(file_name: str) -> str:
    """Lower-cased text after the last dot (the whole name when there is none)."""

    return file_name.rsplit(".", 1)[-1].lower()


def safe_file_name(file_name: str) -> str:
    """Drop any directory components a client may have sent."""

    return os.path.basename(file_name.replace("\\", "/"))


def _write_temp_file(audio_bytes: bytes, file_name: str, base_dir: Path) -> Path:
    """Create a fresh ``whisper_<ns>_<random>_<base name>`` file and fill it."""

    with tempfile.NamedTemporaryFile(
        delete=False,
        dir=base_dir,
        prefix=f"{TEMP_FILE_PREFIX}{time.time_ns()}_",
        suffix=f"_{safe_file_name(file_name)}",
    ) as tmp_file:
        tmp_file.write(audio_bytes)
        return Path(tmp_file.name)


def decode_audio(clip: AudioClip) -> bytes:
    """Validate the clip and return its raw bytes; nothing touches disk here."""

    if not (clip.audio_data and clip.file_name and clip.mime_type):
        raise PipelineError(ErrorType.VALIDATION, "Missing required audio fields")

    try:
        audio_bytes = base64.b64decode(clip.audio_data)
    except (binascii.Error, ValueError) as exc:
        raise PipelineError(ErrorType.VALIDATION, "Audio data is not valid base64") from exc

    if not audio_bytes:
        raise PipelineError(ErrorType.VALIDATION, "Audio data is empty")

    if len(audio_bytes) > MAX_AUDIO_BYTES:
        logger.warning("File size %s exceeds limit of %s", len(audio_bytes), MAX_AUDIO_BYTES)
        raise PipelineError(ErrorType.VALIDATION, "File too large (max 25MB)")

    extension = file_extension(clip.file_name)
    if extension not in SUPPORTED_FORMATS:
        logger.warning("Unsupported file format: %s", extension)
        raise PipelineError(
            ErrorType.VALIDATION,
            f"Unsupported format. Supported: {', '.join(SUPPORTED_FORMATS)}",
        )

    return audio_bytes


@asynccontextmanager
async def temporary_audio_file(
    audio_bytes: bytes,
    file_name: str,
    directory: str | os.PathLike[str] | None = None,
) -> AsyncIterator[Path]:
    """Write ``audio_bytes`` to a uniquely named file and always delete it afterwards.

    A failed delete is logged and swallowed so it never masks the outcome.
    """

    base_dir = Path(directory) if directory else Path(tempfile.gettempdir())
    temp_path = await run_in_threadpool(_write_temp_file, audio_bytes, file_name, base_dir)
    try:
        logger.info("Audio file saved: %s", temp_path)
        yield temp_path
    finally:
        try:
            await run_in_threadpool(temp_path.unlink, missing_ok=True)
            logger.info("Temporary file cleaned up: %s", temp_path)
        except OSError:
            logger.exception("Cleanup error for %s", temp_path)


class TranscriptionStage:
    """Turn one base64 clip into text through the speech provider."""

    def __init__(
        self,
        provider: SpeechToTextProvider,
        *,
        temp_dir: str | os.PathLike[str] | None = None,
    ) -> None:
        self._provider = provider
        self._temp_dir = temp_dir

    async def run(self, clip: AudioClip) -> TranscriptionResult:
        audio_bytes = decode_audio(clip)

        async with temporary_audio_file(audio_bytes, clip.file_name, self._temp_dir) as temp_path:
            text = await self._transcribe(temp_path, clip)

        logger.info("Transcription completed text_length=%s", len(text))
        return TranscriptionResult(text=text, model=self._provider.model)

    async def _transcribe(self, temp_path: Path, clip: AudioClip) -> str:
        try:
            audio_file = await run_in_threadpool(temp_path.open, "rb")
        except OSError as exc:
            raise PipelineError(ErrorType.TRANSCRIPTION, "Failed to read audio file") from exc

        with audio_file:
            try:
                text = await self._provider.transcribe(
                    audio_file,
                    file_name=safe_file_name(clip.file_name),
                    mime_type=clip.mime_type,
                )
            except Exception as exc:
                logger.exception("Transcription error")
                raise PipelineError(ErrorType.TRANSCRIPTION, str(exc) or type(exc).__name__) from exc

        if not text or not text.strip():
            raise PipelineError(ErrorType.TRANSCRIPTION, NO_SPEECH_MESSAGE)
        return text.strip()


__all__ = [
    "MAX_AUDIO_BYTES",
    "SUPPORTED_FORMATS",
    "TranscriptionStage",
    "decode_audio",
    "file_extension",
    "temporary_audio_file",
]
