"""Provider contracts and the explicit client bundle handed to the pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from reelchat.config.settings import Settings, settings

from .llm_client import BedrockChatClient
from .openai_client import LazyOpenAIClient, OpenAIChatClient, WhisperTranscriber

logger = logging.getLogger(__name__)


class SpeechToTextProvider(Protocol):
    model: str

    async def transcribe(self, audio_file: BinaryIO, *, file_name: str, mime_type: str) -> str:
        """Return the transcript text for an open binary audio stream."""


class ChatCompletionProvider(Protocol):
    model: str

    async def complete(self, prompt: str, *, temperature: float) -> str:
        """Return the model's plain-text answer to ``prompt``."""


@dataclass(frozen=True)
class PipelineProviders:
    speech: SpeechToTextProvider
    chat: ChatCompletionProvider


def build_providers(config: Settings | None = None) -> PipelineProviders:
    """Construct the speech and chat providers described by ``config``."""

    config = config or settings
    openai_client = LazyOpenAIClient(config.openai)
    speech = WhisperTranscriber(openai_client, model=config.openai.transcription_model)

    chat: ChatCompletionProvider
    if config.chat.provider == "bedrock":
        chat = BedrockChatClient(config.bedrock)
    else:
        chat = OpenAIChatClient(openai_client, model=config.openai.chat_model)

    logger.info(
        "Providers ready speech=%s chat=%s:%s",
        speech.model,
        config.chat.provider,
        chat.model,
    )
    return PipelineProviders(speech=speech, chat=chat)


__all__ = [
    "ChatCompletionProvider",
    "PipelineProviders",
    "SpeechToTextProvider",
    "build_providers",
]
