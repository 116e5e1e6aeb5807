"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from reelchat.config.settings import settings
from reelchat.pipelines.composite import CompositeChatPipeline
from reelchat.services import build_providers


def get_pipeline(request: Request) -> CompositeChatPipeline:
    """Return the app's pipeline, wiring the configured providers on first use."""

    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = CompositeChatPipeline(
            build_providers(settings),
            temp_dir=settings.temp_dir,
        )
        request.app.state.pipeline = pipeline
    return pipeline


PipelineDep = Annotated[CompositeChatPipeline, Depends(get_pipeline)]
