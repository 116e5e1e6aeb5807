"""Orchestration of the composite chat pipeline.

Canonical execution order for one invocation:

1. ``classifier`` – ping short-circuit, JSON parsing, text vs audio decision.
2. ``transcription`` – only for audio: decode, validate, temp file, Whisper.
3. ``chat`` – render the prompt and call the configured LLM.
4. ``formatter`` – success or failure body plus HTTP status.

``CompositeChatPipeline.run`` is the catch-all boundary: whatever happens in a
stage, the caller gets a ``PipelineOutcome`` back.
"""

from __future__ import annotations

import json
import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping, Optional

from reelchat.services.providers import PipelineProviders
from reelchat.telemetry import observe_stage, record_pipeline_result

from .chat import ChatCompletionStage
from .classifier import classify, classify_transcription
from .formatter import (
    PipelineOutcome,
    format_failure,
    format_pong,
    format_success,
    format_transcription,
)
from .transcription import TranscriptionStage
from .types import (
    AudioRequest,
    ErrorType,
    PingRequest,
    PipelineError,
    PipelineState,
    ResponseSource,
)

logger = logging.getLogger("reelchat.pipelines.composite")

_AUDIO_FIELD = "audioData"

# Kind reported for an unexpected exception, by the state it interrupted.
_FAILURE_KIND = {
    PipelineState.RECEIVED: ErrorType.VALIDATION,
    PipelineState.CLASSIFIED: ErrorType.VALIDATION,
    PipelineState.TRANSCRIBING: ErrorType.TRANSCRIPTION,
    PipelineState.COMPOSING: ErrorType.AI_CHAT,
    PipelineState.COMPLETED: ErrorType.AI_CHAT,
}


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the composite pipeline."""

    order: int
    name: str
    module: str
    summary: str


STAGES: List[PipelineStage] = [
    PipelineStage(
        1,
        "Classification",
        "reelchat.pipelines.composite.classifier",
        "Answer /ping, parse the JSON body, resolve a text or audio request.",
    ),
    PipelineStage(
        2,
        "Transcription",
        "reelchat.pipelines.composite.transcription",
        "Validate the base64 clip, write a temp file, transcribe it with Whisper.",
    ),
    PipelineStage(
        3,
        "Chat Completion",
        "reelchat.pipelines.composite.chat",
        "Render the video/context/history prompt and call the LLM.",
    ),
    PipelineStage(
        4,
        "Formatting",
        "reelchat.pipelines.composite.formatter",
        "Wrap the answer or the typed error into the response body.",
    ),
]


def describe_stages() -> Iterable[PipelineStage]:
    """Expose the ordered list of stages for debugging and documentation."""

    return tuple(STAGES)


def redact_body(body: Any) -> Any:
    """Echo of the inbound body that is safe to log: audio payload elided."""

    data: Any = body
    if isinstance(body, (bytes, bytearray)):
        data = bytes(body).decode("utf-8", errors="replace")
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError:
            return f"<unparsed body, {len(data)} chars>"
    if not isinstance(data, Mapping):
        return repr(data)[:200]

    redacted = dict(data)
    audio = redacted.get(_AUDIO_FIELD)
    if audio:
        redacted[_AUDIO_FIELD] = f"<elided {len(str(audio))} chars>"
    return redacted


@dataclass
class _Invocation:
    state: PipelineState = PipelineState.RECEIVED
    source: Optional[ResponseSource] = None

    def advance(self, state: PipelineState) -> None:
        logger.debug("Pipeline state %s -> %s", self.state.value, state.value)
        self.state = state


@contextmanager
def _timed(stage: str) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    finally:
        observe_stage(stage, time.perf_counter() - started)


class CompositeChatPipeline:
    """Classifier → (Transcription →) Chat Completion → Formatter."""

    def __init__(
        self,
        providers: PipelineProviders,
        *,
        temp_dir: str | os.PathLike[str] | None = None,
    ) -> None:
        self.providers = providers
        self._transcription = TranscriptionStage(providers.speech, temp_dir=temp_dir)
        self._chat = ChatCompletionStage(providers.chat)

    async def run(self, body: Any, path: str | None = None) -> PipelineOutcome:
        """Answer one chat request; never raises."""

        invocation = _Invocation()
        try:
            outcome = await self._execute(body, path, invocation)
        except Exception as exc:
            error = self._as_pipeline_error(exc, invocation.state)
            invocation.advance(PipelineState.FAILED)
            self._log_failure(error, exc, body)
            record_pipeline_result(
                invocation.source.value if invocation.source else None,
                error.kind.value,
            )
            return format_failure(error)

        if invocation.source is not None:
            record_pipeline_result(invocation.source.value, "success")
        return outcome

    async def transcribe(self, body: Any) -> PipelineOutcome:
        """Run only the transcription stage, for voice bookmarks."""

        try:
            clip = classify_transcription(body)
            with _timed("transcription"):
                result = await self._transcription.run(clip)
        except Exception as exc:
            error = self._as_pipeline_error(exc, PipelineState.TRANSCRIBING)
            self._log_failure(error, exc, body)
            record_pipeline_result(ResponseSource.AUDIO_TRANSCRIPTION.value, error.kind.value)
            return format_failure(error)

        record_pipeline_result(ResponseSource.AUDIO_TRANSCRIPTION.value, "success")
        return format_transcription(result)

    async def _execute(
        self,
        body: Any,
        path: str | None,
        invocation: _Invocation,
    ) -> PipelineOutcome:
        with _timed("classification"):
            request = classify(body, path)
        invocation.advance(PipelineState.CLASSIFIED)

        if isinstance(request, PingRequest):
            return format_pong()

        if isinstance(request, AudioRequest):
            invocation.source = ResponseSource.AUDIO_TRANSCRIPTION
            invocation.advance(PipelineState.TRANSCRIBING)
            with _timed("transcription"):
                transcription = await self._transcription.run(request.audio)
            question = transcription.text
        else:
            invocation.source = ResponseSource.TEXT_INPUT
            question = request.question

        invocation.advance(PipelineState.COMPOSING)
        with _timed("chat_completion"):
            answer = await self._chat.run(
                video_description=request.video_description,
                additional_context=request.additional_context,
                chat_history=request.chat_history,
                question=question,
            )

        invocation.advance(PipelineState.COMPLETED)
        return format_success(answer, invocation.source)

    @staticmethod
    def _as_pipeline_error(exc: Exception, state: PipelineState) -> PipelineError:
        if isinstance(exc, PipelineError):
            return exc
        return PipelineError(_FAILURE_KIND.get(state, ErrorType.AI_CHAT), str(exc) or type(exc).__name__)

    @staticmethod
    def _log_failure(error: PipelineError, exc: Exception, body: Any) -> None:
        logger.error(
            "Error details type=%s message=%s body=%s",
            error.kind.value,
            error.message,
            redact_body(body),
            exc_info=exc,
        )


__all__ = [
    "CompositeChatPipeline",
    "PipelineStage",
    "STAGES",
    "describe_stages",
    "redact_body",
]
