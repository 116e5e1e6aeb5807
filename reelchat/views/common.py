"""Common response schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    """Failure taxonomy reported back to callers as ``errorType``."""

    TRANSCRIPTION = "transcription_error"
    AI_CHAT = "ai_chat_error"
    VALIDATION = "validation_error"
    # Reserved: connectivity faults surface as the kind of the failing stage.
    NETWORK = "network_error"


class ResponseSource(str, Enum):
    AUDIO_TRANSCRIPTION = "audio_transcription"
    TEXT_INPUT = "text_input"


class FailureResponse(BaseModel):
    success: bool = False
    error: str
    error_type: ErrorType = Field(alias="errorType")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None
