"""Spans around livestub stages."""

from __future__ import annotations

import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from obs.otel.attributes import normalize_attributes
from obs.otel.constants import AttributeName
from obs.otel.metrics import record_stage_duration
from obs.otel.scope_metadata import instrumentation_schema_url, instrumentation_version


def get_tracer(scope_name: str) -> trace.Tracer:
    """Return the tracer for ``scope_name``, tagged with the livestub version."""
    return trace.get_tracer(
        scope_name,
        instrumenting_library_version=instrumentation_version(),
        schema_url=instrumentation_schema_url(),
    )


def set_span_attributes(span: Span, attrs: Mapping[str, object] | None) -> None:
    span.set_attributes(normalize_attributes(attrs))


def record_exception(span: Span, exc: Exception) -> None:
    """Attach ``exc`` to ``span`` as an event and mark the span failed."""
    span.record_exception(exc)
    span.set_status(Status(StatusCode.ERROR, f"{type(exc).__name__}: {exc}"))


@contextmanager
def stage_span(
    name: str,
    *,
    stage: str,
    scope_name: str,
    attributes: Mapping[str, object] | None = None,
) -> Iterator[Span]:
    """Run the body inside span ``name`` and record the stage duration.

    An exception escaping the body is recorded on the span, counted in the
    stage status as ``"error"`` and re-raised.

    Parameters
    ----------
    name
        Span name.
    stage
        Stage label for the span and the duration metric.
    scope_name
        Instrumentation scope of the tracer.
    attributes
        Extra span attributes.

    Yields
    ------
    Span
        The active span.
    """
    initial = normalize_attributes({**(attributes or {}), AttributeName.STAGE_NAME: stage})
    started = time.monotonic()
    status = "ok"
    with get_tracer(scope_name).start_as_current_span(
        name,
        attributes=initial,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as exc:
            status = "error"
            record_exception(span, exc)
            raise
        finally:
            elapsed = time.monotonic() - started
            record_stage_duration(stage, elapsed, status=status)
            set_span_attributes(
                span,
                {AttributeName.DURATION_S: elapsed, AttributeName.STATUS: status},
            )


__all__ = ["get_tracer", "record_exception", "set_span_attributes", "stage_span"]
