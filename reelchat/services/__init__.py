"""Service layer helpers for external integrations."""

from .llm_client import BedrockChatClient, LlmInvocationError
from .openai_client import LazyOpenAIClient, OpenAIChatClient, WhisperTranscriber
from .providers import (
    ChatCompletionProvider,
    PipelineProviders,
    SpeechToTextProvider,
    build_providers,
)

__all__ = [
    "BedrockChatClient",
    "LlmInvocationError",
    "LazyOpenAIClient",
    "OpenAIChatClient",
    "WhisperTranscriber",
    "ChatCompletionProvider",
    "PipelineProviders",
    "SpeechToTextProvider",
    "build_providers",
]
