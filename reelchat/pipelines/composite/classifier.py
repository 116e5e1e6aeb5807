"""Request classification stage (Stage 01) of the composite pipeline."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from pydantic import ValidationError

from reelchat.views import ChatPayload, TranscriptionPayload

from .types import (
    AudioClip,
    AudioRequest,
    ClassifiedRequest,
    ErrorType,
    PingRequest,
    PipelineError,
    TextRequest,
)

logger = logging.getLogger("reelchat.pipelines.composite")

PING_PATH = "/ping"
MISSING_FIELDS_MESSAGE = "Missing required fields: videoDescription or question/audio"
MISSING_AUDIO_MESSAGE = "Missing required audio fields"
INVALID_JSON_MESSAGE = "Request body must be valid JSON"


def _present(value: str | None) -> bool:
    return value is not None and value != ""


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"Invalid {location}: {first.get('msg', 'invalid value')}"


def parse_body(body: Any) -> Mapping[str, Any]:
    """Accept raw bytes, a JSON string, or an already-parsed mapping."""

    if isinstance(body, Mapping):
        return body

    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PipelineError(ErrorType.VALIDATION, INVALID_JSON_MESSAGE) from exc

    if not isinstance(body, str):
        raise PipelineError(ErrorType.VALIDATION, INVALID_JSON_MESSAGE)

    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as exc:
        raise PipelineError(ErrorType.VALIDATION, INVALID_JSON_MESSAGE) from exc

    if not isinstance(parsed, dict):
        raise PipelineError(ErrorType.VALIDATION, "Request body must be a JSON object")
    return parsed


def classify(body: Any, path: str | None = None) -> ClassifiedRequest:
    """Resolve the inbound request into exactly one of ping, text or audio."""

    if path == PING_PATH:
        return PingRequest()

    data = parse_body(body)
    try:
        payload = ChatPayload.model_validate(data)
    except ValidationError as exc:
        raise PipelineError(ErrorType.VALIDATION, _describe_validation_error(exc)) from exc

    audio_fields = (payload.audio_data, payload.file_name, payload.mime_type)
    has_audio = all(_present(value) for value in audio_fields)
    if not has_audio and any(_present(value) for value in audio_fields):
        raise PipelineError(ErrorType.VALIDATION, MISSING_AUDIO_MESSAGE)

    logger.info(
        "Processing request has_audio=%s question_length=%s video_description_length=%s history=%s",
        has_audio,
        len(payload.question) if payload.question else None,
        len(payload.video_description) if payload.video_description else None,
        len(payload.chat_history),
    )

    if not _present(payload.video_description):
        raise PipelineError(ErrorType.VALIDATION, MISSING_FIELDS_MESSAGE)

    if has_audio:
        return AudioRequest(
            video_description=payload.video_description,
            audio=AudioClip(
                audio_data=payload.audio_data,
                file_name=payload.file_name,
                mime_type=payload.mime_type,
            ),
            chat_history=tuple(payload.chat_history),
            additional_context=payload.additional_context,
        )

    if not _present(payload.question):
        raise PipelineError(ErrorType.VALIDATION, MISSING_FIELDS_MESSAGE)

    return TextRequest(
        video_description=payload.video_description,
        question=payload.question,
        chat_history=tuple(payload.chat_history),
        additional_context=payload.additional_context,
    )


def classify_transcription(body: Any) -> AudioClip:
    """Validate the body of a transcription-only request."""

    data = parse_body(body)
    try:
        payload = TranscriptionPayload.model_validate(data)
    except ValidationError as exc:
        raise PipelineError(ErrorType.VALIDATION, _describe_validation_error(exc)) from exc

    if not all(_present(value) for value in (payload.audio_data, payload.file_name, payload.mime_type)):
        raise PipelineError(ErrorType.VALIDATION, MISSING_AUDIO_MESSAGE)

    return AudioClip(
        audio_data=payload.audio_data,
        file_name=payload.file_name,
        mime_type=payload.mime_type,
    )


__all__ = [
    "MISSING_AUDIO_MESSAGE",
    "MISSING_FIELDS_MESSAGE",
    "PING_PATH",
    "classify",
    "classify_transcription",
    "parse_body",
]
