"""Chat completion stage (Stage 03) of the composite pipeline."""

from __future__ import annotations

import logging
from typing import Final, Sequence

from reelchat.services.providers import ChatCompletionProvider

from .types import ChatTurn, ErrorType, PipelineError

logger = logging.getLogger("reelchat.pipelines.composite")

CHAT_TEMPERATURE: Final[float] = 0.7
EMPTY_ANSWER_MESSAGE: Final[str] = "AI returned an empty response"

PROMPT_TEMPLATE: Final[str] = """You are a helpful AI assistant that answers questions about videos and takes into account any additional context provided about the user.

Important Instructions:
1. First, check if the question can be answered using the additional context about the user
2. Then, consider the video description for relevant information
3. Combine both sources of information when relevant
4. If you find relevant information in the additional context, explicitly mention it in your response

Video Description: {video_description}
User Context: {additional_context}

Chat History:
{chat_history}

Current Question: {question}

Answer:"""


def _truncate(value: str, max_length: int = 240) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def format_chat_history(chat_history: Sequence[ChatTurn]) -> str:
    """One ``role: content`` line per turn, oldest first."""

    return "\n".join(f"{turn.role}: {turn.content}" for turn in chat_history)


def build_prompt(
    video_description: str,
    additional_context: str,
    chat_history: Sequence[ChatTurn],
    question: str,
) -> str:
    return PROMPT_TEMPLATE.format(
        video_description=video_description,
        additional_context=additional_context,
        chat_history=format_chat_history(chat_history),
        question=question,
    )


class ChatCompletionStage:
    """Render the prompt and ask the LLM for a single answer."""

    def __init__(self, provider: ChatCompletionProvider) -> None:
        self._provider = provider

    async def run(
        self,
        *,
        video_description: str,
        additional_context: str,
        chat_history: Sequence[ChatTurn],
        question: str,
    ) -> str:
        prompt = build_prompt(video_description, additional_context, chat_history, question)
        logger.info(
            "Prompt generated model=%s history_turns=%s\nUSER> %s",
            self._provider.model,
            len(chat_history),
            _truncate(prompt, 500),
        )
        return await self.invoke(prompt)

    async def invoke(self, prompt: str) -> str:
        try:
            answer = await self._provider.complete(prompt, temperature=CHAT_TEMPERATURE)
        except Exception as exc:
            logger.exception("AI chat error")
            raise PipelineError(ErrorType.AI_CHAT, str(exc) or type(exc).__name__) from exc

        if not answer or not answer.strip():
            raise PipelineError(ErrorType.AI_CHAT, EMPTY_ANSWER_MESSAGE)

        logger.info("AI answer received length=%s: %s", len(answer), _truncate(answer))
        return answer


__all__ = [
    "CHAT_TEMPERATURE",
    "ChatCompletionStage",
    "PROMPT_TEMPLATE",
    "build_prompt",
    "format_chat_history",
]
