"""Typed containers shared across the composite chat pipeline.

These live in their own module so the stages (`classifier`, `transcription`,
`chat`, `formatter`, `flow`) can import them without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from reelchat.views import ChatTurn, ErrorType, ResponseSource


class PipelineState(str, Enum):
    """Lifecycle of a single invocation."""

    RECEIVED = "received"
    CLASSIFIED = "classified"
    TRANSCRIBING = "transcribing"
    COMPOSING = "composing"
    COMPLETED = "completed"
    FAILED = "failed"


class PipelineError(Exception):
    """Typed failure raised by a stage and converted by the formatter."""

    def __init__(self, kind: ErrorType, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return 400 if self.kind is ErrorType.VALIDATION else 500

    def __repr__(self) -> str:
        return f"PipelineError(kind={self.kind.value!r}, message={self.message!r})"


class PingRequest(BaseModel):
    kind: Literal["ping"] = "ping"


class AudioClip(BaseModel):
    """Base64 audio exactly as received, before any decoding."""

    audio_data: str = Field(repr=False)
    file_name: str
    mime_type: str

    model_config = ConfigDict(frozen=True)


class TextRequest(BaseModel):
    """Question typed by the user."""

    kind: Literal["text"] = "text"
    video_description: str
    question: str
    chat_history: tuple[ChatTurn, ...] = ()
    additional_context: str = ""

    model_config = ConfigDict(frozen=True)


class AudioRequest(BaseModel):
    """Question recorded by the user; the transcript becomes the question."""

    kind: Literal["audio"] = "audio"
    video_description: str
    audio: AudioClip
    chat_history: tuple[ChatTurn, ...] = ()
    additional_context: str = ""

    model_config = ConfigDict(frozen=True)


ClassifiedRequest = Union[PingRequest, TextRequest, AudioRequest]


@dataclass(frozen=True)
class TranscriptionResult:
    """Text produced by the speech provider for one clip."""

    text: str
    model: str


__all__ = [
    "AudioClip",
    "AudioRequest",
    "ChatTurn",
    "ClassifiedRequest",
    "ErrorType",
    "PingRequest",
    "PipelineError",
    "PipelineState",
    "ResponseSource",
    "TextRequest",
    "TranscriptionResult",
]
