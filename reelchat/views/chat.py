"""Schemas for the composite chat endpoint."""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import ErrorType, ResponseSource


class ChatTurn(BaseModel):
    """One prior message of the conversation."""

    role: Literal["User", "AI"]
    content: str

    model_config = ConfigDict(frozen=True)


class ChatPayload(BaseModel):
    """Inbound JSON body, before the classifier decides text vs audio."""

    video_description: Optional[str] = Field(default=None, alias="videoDescription")
    question: Optional[str] = None
    chat_history: List[ChatTurn] = Field(default_factory=list, alias="chatHistory")
    additional_context: str = Field(default="", alias="additionalContext")
    audio_data: Optional[str] = Field(default=None, alias="audioData", repr=False)
    file_name: Optional[str] = Field(default=None, alias="fileName")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("chat_history", mode="before")
    @classmethod
    def default_history(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("additional_context", mode="before")
    @classmethod
    def default_context(cls, value: Any) -> Any:
        return "" if value is None else value


class ChatResponse(BaseModel):
    """Outcome of one composite invocation.

    ``answer``/``source`` are set on success, ``error``/``errorType`` on failure.
    """

    success: bool
    answer: Optional[str] = None
    source: Optional[ResponseSource] = None
    error: Optional[str] = None
    error_type: Optional[ErrorType] = Field(default=None, alias="errorType")

    model_config = ConfigDict(populate_by_name=True)

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
