"""End-to-end behaviour of the composite pipeline with fake providers."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from reelchat.pipelines.composite import describe_stages
from reelchat.pipelines.composite.flow import redact_body

from conftest import audio_body, text_body


def test_text_question_is_answered(pipeline, speech, chat):
    outcome = asyncio.run(pipeline.run(json.dumps(text_body())))

    assert outcome.status_code == 200
    assert outcome.body == {
        "success": True,
        "answer": chat.answer,
        "source": "text_input",
    }
    assert speech.calls == []
    assert "Current Question: What ingredients are needed for the carbonara sauce?" in chat.prompts[0]


def test_audio_question_is_transcribed_before_chat(pipeline, speech, chat, events, audio_dir: Path):
    body = audio_body(
        chatHistory=[{"role": "User", "content": "hi"}, {"role": "AI", "content": "hello"}],
        additionalContext="Allergic to eggs.",
    )

    outcome = asyncio.run(pipeline.run(body))

    assert outcome.status_code == 200
    assert outcome.body["source"] == "audio_transcription"
    assert outcome.body["answer"] == chat.answer
    assert events == ["transcribe", "complete"]
    prompt = chat.prompts[0]
    assert f"Current Question: {speech.text}" in prompt
    assert "User Context: Allergic to eggs." in prompt
    assert "User: hi\nAI: hello" in prompt
    assert list(audio_dir.iterdir()) == []


def test_chat_failure_after_transcription_cleans_up(pipeline, chat, audio_dir: Path):
    chat.error = TimeoutError("upstream timed out")

    outcome = asyncio.run(pipeline.run(audio_body()))

    assert outcome.status_code == 500
    assert outcome.body == {
        "success": False,
        "error": "upstream timed out",
        "errorType": "ai_chat_error",
    }
    assert list(audio_dir.iterdir()) == []


def test_transcription_failure_skips_chat(pipeline, speech, chat, audio_dir: Path):
    speech.error = RuntimeError("invalid audio")

    outcome = asyncio.run(pipeline.run(audio_body()))

    assert outcome.status_code == 500
    assert outcome.body["errorType"] == "transcription_error"
    assert outcome.body["error"] == "invalid audio"
    assert chat.prompts == []
    assert list(audio_dir.iterdir()) == []


def test_missing_fields_is_reported(pipeline, chat):
    outcome = asyncio.run(pipeline.run({"videoDescription": "A video"}))

    assert outcome.status_code == 400
    assert outcome.body == {
        "success": False,
        "error": "Missing required fields: videoDescription or question/audio",
        "errorType": "validation_error",
    }
    assert chat.prompts == []


def test_malformed_json_is_a_validation_error(pipeline):
    outcome = asyncio.run(pipeline.run(b"{not json"))

    assert outcome.status_code == 400
    assert outcome.body["errorType"] == "validation_error"


def test_ping_short_circuits(pipeline, speech, chat):
    outcome = asyncio.run(pipeline.run("{{ garbage", path="/ping"))

    assert outcome.status_code == 200
    assert outcome.text == "Pong"
    assert outcome.body is None
    assert speech.calls == [] and chat.prompts == []


def test_unexpected_error_is_attributed_to_active_stage(pipeline, monkeypatch):
    async def explode(**kwargs):
        raise KeyError("choices")

    monkeypatch.setattr(pipeline._chat, "run", explode)

    outcome = asyncio.run(pipeline.run(text_body()))

    assert outcome.status_code == 500
    assert outcome.body["errorType"] == "ai_chat_error"
    assert outcome.body["success"] is False


def test_standalone_transcription_returns_bookmark_data(pipeline, speech, chat):
    outcome = asyncio.run(pipeline.transcribe(audio_body()))

    assert outcome.status_code == 200
    body = outcome.body
    assert body["success"] is True
    assert body["transcription"] == speech.text
    assert body["metadata"]["model"] == "whisper-test"
    assert body["metadata"]["type"] == "audio_transcription"
    assert body["bookmark_data"] == {
        "description": speech.text,
        "context": speech.text,
        "source": "whisper_transcription",
    }
    assert chat.prompts == []


def test_standalone_transcription_rejects_unsupported_format(pipeline, speech):
    outcome = asyncio.run(pipeline.transcribe(audio_body(file_name="memo.aac")))

    assert outcome.status_code == 400
    assert outcome.body["errorType"] == "validation_error"
    assert speech.calls == []


def test_redacted_body_elides_audio():
    redacted = redact_body(json.dumps(audio_body()))

    assert redacted["audioData"].startswith("<elided ")
    assert redacted["fileName"] == "question.m4a"
    assert redact_body("not json") == "<unparsed body, 8 chars>"


@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_stage_map_is_ordered(index):
    stages = tuple(describe_stages())

    assert stages[index].order == index + 1
    assert stages[index].module.startswith("reelchat.pipelines.composite.")


def test_standalone_transcription_of_silence_is_a_server_error(pipeline, speech):
    speech.text = "   "

    outcome = asyncio.run(pipeline.transcribe(audio_body()))

    assert outcome.status_code == 500
    assert outcome.body == {
        "success": False,
        "error": "No speech detected or audio unclear",
        "errorType": "transcription_error",
    }
