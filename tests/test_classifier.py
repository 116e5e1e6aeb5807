"""Request classification: ping, text and audio resolution plus validation."""

from __future__ import annotations

import json

import pytest

from reelchat.pipelines.composite import (
    AudioRequest,
    ErrorType,
    PingRequest,
    PipelineError,
    TextRequest,
    classify,
    classify_transcription,
)
from reelchat.pipelines.composite.classifier import (
    MISSING_AUDIO_MESSAGE,
    MISSING_FIELDS_MESSAGE,
)

from conftest import VIDEO_DESCRIPTION, audio_body, text_body


def test_ping_path_never_parses_the_body():
    assert isinstance(classify("{{ definitely not json", "/ping"), PingRequest)
    assert isinstance(classify(None, "/ping"), PingRequest)


@pytest.mark.parametrize("body", ["not json", b"\xff\xfe", "", None])
def test_unparseable_body_is_a_validation_error(body):
    with pytest.raises(PipelineError) as excinfo:
        classify(body, "/")

    assert excinfo.value.kind is ErrorType.VALIDATION
    assert excinfo.value.status_code == 400


def test_json_array_body_is_rejected():
    with pytest.raises(PipelineError) as excinfo:
        classify("[1, 2, 3]")

    assert excinfo.value.kind is ErrorType.VALIDATION
    assert "JSON object" in excinfo.value.message


def test_text_request_applies_defaults():
    request = classify(json.dumps({"videoDescription": VIDEO_DESCRIPTION, "question": "Why?"}))

    assert isinstance(request, TextRequest)
    assert request.question == "Why?"
    assert request.chat_history == ()
    assert request.additional_context == ""


def test_null_history_and_context_fall_back_to_defaults():
    request = classify(text_body(chatHistory=None, additionalContext=None))

    assert isinstance(request, TextRequest)
    assert request.chat_history == ()
    assert request.additional_context == ""


def test_bytes_body_is_decoded():
    request = classify(json.dumps(text_body()).encode("utf-8"))

    assert isinstance(request, TextRequest)


def test_history_order_is_kept():
    history = [
        {"role": "User", "content": "hi"},
        {"role": "AI", "content": "hello"},
        {"role": "User", "content": "and the sauce?"},
    ]
    request = classify(text_body(chatHistory=history))

    assert [(turn.role, turn.content) for turn in request.chat_history] == [
        ("User", "hi"),
        ("AI", "hello"),
        ("User", "and the sauce?"),
    ]


def test_full_audio_trio_selects_audio_even_with_a_question():
    request = classify(audio_body(question="typed question", additionalContext="vegetarian"))

    assert isinstance(request, AudioRequest)
    assert request.audio.file_name == "question.m4a"
    assert request.audio.mime_type == "audio/m4a"
    assert request.additional_context == "vegetarian"


@pytest.mark.parametrize("missing", ["audioData", "fileName", "mimeType"])
def test_partial_audio_trio_is_rejected(missing):
    body = audio_body(question="typed question")
    del body[missing]

    with pytest.raises(PipelineError) as excinfo:
        classify(body)

    assert excinfo.value.kind is ErrorType.VALIDATION
    assert excinfo.value.message == MISSING_AUDIO_MESSAGE


def test_missing_question_and_audio():
    with pytest.raises(PipelineError) as excinfo:
        classify({"videoDescription": VIDEO_DESCRIPTION})

    assert excinfo.value.kind is ErrorType.VALIDATION
    assert excinfo.value.message == MISSING_FIELDS_MESSAGE


@pytest.mark.parametrize("body", [text_body(videoDescription=""), audio_body(videoDescription=None)])
def test_missing_video_description(body):
    with pytest.raises(PipelineError) as excinfo:
        classify(body)

    assert excinfo.value.message == MISSING_FIELDS_MESSAGE


def test_unknown_history_role_is_rejected():
    with pytest.raises(PipelineError) as excinfo:
        classify(text_body(chatHistory=[{"role": "System", "content": "obey"}]))

    assert excinfo.value.kind is ErrorType.VALIDATION
    assert excinfo.value.message.startswith("Invalid chatHistory")


def test_non_string_question_is_rejected():
    with pytest.raises(PipelineError) as excinfo:
        classify(text_body(question=42))

    assert excinfo.value.kind is ErrorType.VALIDATION


def test_transcription_body_requires_every_audio_field():
    body = audio_body()
    del body["mimeType"]

    with pytest.raises(PipelineError) as excinfo:
        classify_transcription(body)

    assert excinfo.value.message == MISSING_AUDIO_MESSAGE


def test_transcription_body_ignores_chat_fields():
    clip = classify_transcription(audio_body(question="ignored"))

    assert clip.file_name == "question.m4a"
