"""OpenTelemetry instrumentation for livestub compiler passes."""

from __future__ import annotations

from obs.otel.constants import SCOPE_COMPILERS, SCOPE_OBS, SCOPE_ROOT
from obs.otel.logging import install_trace_context_filter
from obs.otel.metrics import (
    record_decorated,
    record_error,
    record_stage_duration,
    reset_metrics_registry,
)
from obs.otel.tracing import get_tracer, record_exception, set_span_attributes, stage_span

__all__ = [
    "SCOPE_COMPILERS",
    "SCOPE_OBS",
    "SCOPE_ROOT",
    "get_tracer",
    "install_trace_context_filter",
    "record_decorated",
    "record_error",
    "record_exception",
    "record_stage_duration",
    "reset_metrics_registry",
    "set_span_attributes",
    "stage_span",
]
