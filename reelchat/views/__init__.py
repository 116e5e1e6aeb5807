"""Pydantic schemas used as views in the MVC architecture."""

from .chat import ChatPayload, ChatResponse, ChatTurn
from .common import ErrorResponse, ErrorType, FailureResponse, ResponseSource
from .transcription import (
    BookmarkData,
    TranscriptionMetadata,
    TranscriptionPayload,
    TranscriptionResponse,
    TranscriptionServiceStatus,
)

__all__ = [
    "ChatPayload",
    "ChatResponse",
    "ChatTurn",
    "ErrorResponse",
    "ErrorType",
    "FailureResponse",
    "ResponseSource",
    "BookmarkData",
    "TranscriptionMetadata",
    "TranscriptionPayload",
    "TranscriptionResponse",
    "TranscriptionServiceStatus",
]
