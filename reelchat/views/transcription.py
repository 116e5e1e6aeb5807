"""Schemas for the standalone transcription endpoint."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TranscriptionPayload(BaseModel):
    audio_data: Optional[str] = Field(default=None, alias="audioData", repr=False)
    file_name: Optional[str] = Field(default=None, alias="fileName")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TranscriptionMetadata(BaseModel):
    timestamp: datetime
    model: str
    type: Literal["audio_transcription"] = "audio_transcription"


class BookmarkData(BaseModel):
    """Fields the client stores alongside a voice bookmark."""

    description: str
    context: str
    source: Literal["whisper_transcription"] = "whisper_transcription"


class TranscriptionResponse(BaseModel):
    success: bool = True
    transcription: str
    metadata: TranscriptionMetadata
    bookmark_data: BookmarkData

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class TranscriptionServiceStatus(BaseModel):
    status: Literal["ready"] = "ready"
    supported_formats: List[str]
    max_file_size: str
    endpoints: Dict[str, str]
