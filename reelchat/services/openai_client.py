"""OpenAI integrations: Whisper transcription and chat completions."""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

from openai import AsyncOpenAI

from reelchat.config.settings import OpenAIConfig

logger = logging.getLogger(__name__)


class LazyOpenAIClient:
    """Build the SDK client on first use so a missing key fails the call, not startup."""

    def __init__(self, config: OpenAIConfig) -> None:
        self._config = config
        self._client: AsyncOpenAI | None = None

    def get(self) -> AsyncOpenAI:
        if self._client is None:
            # If api_key is None the SDK falls back to the OPENAI_API_KEY env var.
            kwargs: dict[str, Any] = {"timeout": self._config.timeout_seconds}
            if self._config.api_key:
                kwargs["api_key"] = self._config.api_key.get_secret_value()
            if self._config.base_url:
                kwargs["base_url"] = self._config.base_url
            self._client = AsyncOpenAI(**kwargs)
        return self._client


class WhisperTranscriber:
    """Speech-to-text through the OpenAI audio transcription endpoint."""

    def __init__(self, client: LazyOpenAIClient, model: str = "whisper-1") -> None:
        self._client = client
        self.model = model

    async def transcribe(self, audio_file: BinaryIO, *, file_name: str, mime_type: str) -> str:
        transcription = await self._client.get().audio.transcriptions.create(
            model=self.model,
            file=(file_name, audio_file, mime_type),
            response_format="json",
        )
        logger.debug("Whisper returned %s characters", len(transcription.text or ""))
        return transcription.text or ""


class OpenAIChatClient:
    """Single-turn chat completion: the rendered prompt goes in as one user message."""

    def __init__(self, client: LazyOpenAIClient, model: str = "gpt-4o-mini") -> None:
        self._client = client
        self.model = model

    async def complete(self, prompt: str, *, temperature: float) -> str:
        response = await self._client.get().chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )
        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()


__all__ = ["LazyOpenAIClient", "OpenAIChatClient", "WhisperTranscriber"]
