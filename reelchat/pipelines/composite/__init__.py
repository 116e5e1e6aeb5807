"""Composite chat pipeline package.

Modules are organised by the order in which a chat request executes:

1. `classifier` – ping short-circuit and text/audio resolution.
2. `transcription` – optional Whisper transcription of a base64 clip.
3. `chat` – prompt assembly and the LLM call.
4. `formatter` – success/failure bodies and HTTP status.
5. `flow` – the orchestrator tying the stages together.
"""

from .chat import ChatCompletionStage, build_prompt, format_chat_history
from .classifier import classify, classify_transcription
from .flow import CompositeChatPipeline, PipelineStage, describe_stages
from .formatter import PipelineOutcome
from .transcription import (
    MAX_AUDIO_BYTES,
    SUPPORTED_FORMATS,
    TranscriptionStage,
    temporary_audio_file,
)
from .types import (
    AudioClip,
    AudioRequest,
    ErrorType,
    PingRequest,
    PipelineError,
    ResponseSource,
    TextRequest,
    TranscriptionResult,
)

__all__ = [
    "AudioClip",
    "AudioRequest",
    "ChatCompletionStage",
    "CompositeChatPipeline",
    "ErrorType",
    "MAX_AUDIO_BYTES",
    "PingRequest",
    "PipelineError",
    "PipelineOutcome",
    "PipelineStage",
    "ResponseSource",
    "SUPPORTED_FORMATS",
    "TextRequest",
    "TranscriptionResult",
    "TranscriptionStage",
    "build_prompt",
    "classify",
    "classify_transcription",
    "describe_stages",
    "format_chat_history",
    "temporary_audio_file",
]
