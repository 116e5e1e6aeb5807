"""Shared fakes for the composite pipeline tests."""

from __future__ import annotations

import base64
from pathlib import Path
import sys
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from reelchat.pipelines.composite import CompositeChatPipeline  # noqa: E402
from reelchat.services import PipelineProviders  # noqa: E402

VIDEO_DESCRIPTION = (
    "A chef demonstrates pasta carbonara: pasta cooked al dente and a creamy "
    "sauce made with eggs, pecorino cheese, and guanciale."
)
AUDIO_BYTES = b"ID3fake-mp3-frames"


class FakeSpeechProvider:
    """Records what it was handed and whether the temp file existed at the time."""

    model = "whisper-test"

    def __init__(self, events: list[str], text: str = "What cheese goes in the sauce?") -> None:
        self.events = events
        self.text = text
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    async def transcribe(self, audio_file, *, file_name: str, mime_type: str) -> str:
        self.events.append("transcribe")
        temp_path = Path(audio_file.name)
        self.calls.append(
            {
                "file_name": file_name,
                "mime_type": mime_type,
                "content": audio_file.read(),
                "temp_path": temp_path,
                "existed": temp_path.exists(),
            }
        )
        if self.error is not None:
            raise self.error
        return self.text


class FakeChatProvider:
    model = "chat-test"

    def __init__(self, events: list[str], answer: str = "Pecorino, according to the video.") -> None:
        self.events = events
        self.answer = answer
        self.error: Exception | None = None
        self.prompts: list[str] = []
        self.temperatures: list[float] = []

    async def complete(self, prompt: str, *, temperature: float) -> str:
        self.events.append("complete")
        self.prompts.append(prompt)
        self.temperatures.append(temperature)
        if self.error is not None:
            raise self.error
        return self.answer


def encode_audio(data: bytes = AUDIO_BYTES) -> str:
    return base64.b64encode(data).decode("ascii")


def text_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "videoDescription": VIDEO_DESCRIPTION,
        "question": "What ingredients are needed for the carbonara sauce?",
        "chatHistory": [],
    }
    body.update(overrides)
    return body


def audio_body(file_name: str = "question.m4a", data: bytes = AUDIO_BYTES, **overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "videoDescription": VIDEO_DESCRIPTION,
        "audioData": encode_audio(data),
        "fileName": file_name,
        "mimeType": "audio/m4a",
    }
    body.update(overrides)
    return body


@pytest.fixture
def events() -> list[str]:
    return []


@pytest.fixture
def speech(events: list[str]) -> FakeSpeechProvider:
    return FakeSpeechProvider(events)


@pytest.fixture
def chat(events: list[str]) -> FakeChatProvider:
    return FakeChatProvider(events)


@pytest.fixture
def audio_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "audio"
    directory.mkdir()
    return directory


@pytest.fixture
def pipeline(speech: FakeSpeechProvider, chat: FakeChatProvider, audio_dir: Path) -> CompositeChatPipeline:
    return CompositeChatPipeline(PipelineProviders(speech=speech, chat=chat), temp_dir=audio_dir)
