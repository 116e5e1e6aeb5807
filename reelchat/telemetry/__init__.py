"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    PIPELINE_INVOCATIONS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_LATENCY,
    observe_request,
    observe_stage,
    record_pipeline_result,
)

__all__ = [
    "ERROR_COUNTER",
    "PIPELINE_INVOCATIONS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_LATENCY",
    "observe_request",
    "observe_stage",
    "record_pipeline_result",
]
