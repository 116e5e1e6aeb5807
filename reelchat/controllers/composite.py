"""Composite AI chat endpoints.

``POST /`` answers a question about a video, transcribing a recorded question
first when the body carries audio. ``/ping`` is the hosting platform's
liveness probe and never reads the body. For the stage-by-stage map see
``reelchat.pipelines.composite.flow``.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from reelchat.controllers.dependencies import PipelineDep
from reelchat.pipelines.composite import PipelineOutcome
from reelchat.pipelines.composite.classifier import PING_PATH
from reelchat.views import ChatResponse, FailureResponse

router = APIRouter(tags=["chat"])


def to_response(outcome: PipelineOutcome) -> Response:
    if outcome.text is not None:
        return PlainTextResponse(outcome.text, status_code=outcome.status_code)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.api_route(PING_PATH, methods=["GET", "POST"], response_class=PlainTextResponse)
async def ping(pipeline: PipelineDep) -> Response:
    """Liveness probe: always the literal text ``Pong``."""

    return to_response(await pipeline.run(None, path=PING_PATH))


@router.post(
    "/",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={400: {"model": FailureResponse}, 500: {"model": FailureResponse}},
)
async def composite_chat(request: Request, pipeline: PipelineDep) -> Response:
    """Answer a text or recorded question using the video description and chat history."""

    raw_body = await request.body()
    outcome = await pipeline.run(raw_body, path=request.url.path)
    return to_response(outcome)
