"""Thin Bedrock client wrapper used as an alternate chat provider."""

from __future__ import annotations

import base64
import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from reelchat.config.settings import BedrockConfig
from reelchat.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class LlmInvocationError(RuntimeError):
    """Raised when the Bedrock invocation fails."""


def _decode_bedrock_api_key(secret_value: Optional[str]) -> tuple[str, str] | None:
    """Decode the BEDROCK_API_KEY secret into access/secret key components."""

    if not secret_value:
        return None

    try:
        decoded_bytes = base64.b64decode(secret_value.strip())
    except ValueError:
        decoded_bytes = secret_value.encode("utf-8", "ignore")

    filtered = "".join(chr(b) for b in decoded_bytes if 31 < b < 127)
    if ":" not in filtered:
        return None
    access_key, secret_key = filtered.split(":", 1)
    return access_key, secret_key


class BedrockChatClient:
    """Answer prompts with an Amazon Bedrock model through ``converse``."""

    def __init__(self, config: BedrockConfig) -> None:
        self._config = config
        self.model = config.model_id

        api_key_tuple = None
        if config.api_key:
            api_key_tuple = _decode_bedrock_api_key(config.api_key.get_secret_value())

        try:
            self._client = create_boto3_client(
                "bedrock-runtime",
                region_name=config.region,
                aws_access_key_id=api_key_tuple[0] if api_key_tuple else None,
                aws_secret_access_key=api_key_tuple[1] if api_key_tuple else None,
            )
        except Exception as exc:  # pragma: no cover - configuration issue
            logger.warning("Could not initialise Bedrock: %s", exc)
            self._client = None

    async def complete(self, prompt: str, *, temperature: float) -> str:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        if self._client is None:
            raise LlmInvocationError("Bedrock client is not configured")

        inference_cfg = {
            "maxTokens": self._config.max_tokens,
            "temperature": temperature,
            "topP": self._config.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=self.model,
                messages=[{"role": "user", "content": [{"text": prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            return await run_in_threadpool(_call)
        except Exception as exc:  # pragma: no cover - external dependency
            raise LlmInvocationError(str(exc)) from exc


__all__ = ["BedrockChatClient", "LlmInvocationError"]
