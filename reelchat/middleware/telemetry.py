"""Request metrics for the chat and transcription routes."""

from __future__ import annotations

import time
from typing import Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from reelchat.pipelines.composite.classifier import PING_PATH
from reelchat.telemetry import observe_request

# Platform liveness checks and scrapes would drown out real traffic.
UNMETERED_ROUTES: tuple[str, ...] = (PING_PATH, "/health", "/metrics")


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Count and time every metered request by its route template."""

    def __init__(self, app: ASGIApp, unmetered: Iterable[str] = UNMETERED_ROUTES) -> None:
        super().__init__(app)
        self._unmetered = frozenset(unmetered)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in self._unmetered:
            return await call_next(request)

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # Routing has run by now, so the matched template is in scope.
            observe_request(
                request.method,
                _route_label(request),
                status_code,
                time.perf_counter() - started,
            )


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path
