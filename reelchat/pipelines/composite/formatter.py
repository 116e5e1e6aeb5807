"""Response formatting stage (Stage 04): wrap stage outcomes for the caller."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from reelchat.views import (
    BookmarkData,
    ChatResponse,
    FailureResponse,
    TranscriptionMetadata,
    TranscriptionResponse,
)

from .types import PipelineError, ResponseSource, TranscriptionResult

PONG = "Pong"


@dataclass(frozen=True)
class PipelineOutcome:
    """What the HTTP layer should send: a JSON ``body`` or plain ``text``."""

    status_code: int
    body: Optional[dict[str, Any]] = field(default=None)
    text: Optional[str] = None

    @property
    def success(self) -> bool:
        if self.body is None:
            return self.status_code < 400
        return bool(self.body.get("success"))


def format_pong() -> PipelineOutcome:
    return PipelineOutcome(status_code=200, text=PONG)


def format_success(answer: str, source: ResponseSource) -> PipelineOutcome:
    response = ChatResponse(success=True, answer=answer, source=source)
    return PipelineOutcome(status_code=200, body=response.to_body())


def format_failure(error: PipelineError) -> PipelineOutcome:
    response = FailureResponse(error=error.message, error_type=error.kind)
    return PipelineOutcome(
        status_code=error.status_code,
        body=response.model_dump(mode="json", by_alias=True),
    )


def format_transcription(result: TranscriptionResult) -> PipelineOutcome:
    response = TranscriptionResponse(
        transcription=result.text,
        metadata=TranscriptionMetadata(
            timestamp=datetime.now(timezone.utc),
            model=result.model,
        ),
        bookmark_data=BookmarkData(description=result.text, context=result.text),
    )
    return PipelineOutcome(status_code=200, body=response.to_body())


__all__ = [
    "PONG",
    "PipelineOutcome",
    "format_failure",
    "format_pong",
    "format_success",
    "format_transcription",
]
