"""Tests for stage spans, error metrics and attribute normalization."""

from __future__ import annotations

import logging

import pytest
from opentelemetry.trace import StatusCode

from compilers import Compiler, CompilerRegistry, run_compilers
from obs.otel import SCOPE_COMPILERS, install_trace_context_filter, stage_span
from obs.otel.attributes import normalize_attributes
from obs.otel.constants import AttributeName, MetricName
from obs.otel.logging import TraceContextFilter
from reflection import HeapScanner
from scope_tree import ScopeTree
from tests.obs._support.otel_harness import OtelHarness


class Traced:
    pass


class TracedChild(Traced):
    pass


class FailingCompiler(Compiler[type[Traced]]):
    name = "failing"
    constant_type = Traced

    @classmethod
    def gather_constants(cls, scanner: HeapScanner) -> list[type[Traced]]:
        return scanner.descendants_of(Traced)

    def decorate(self) -> None:
        msg = "cannot decorate"
        raise ValueError(msg)


def test_stage_span_records_ok_status(otel: OtelHarness) -> None:
    """Ensure successful stages end with an ok status attribute."""
    with stage_span("livestub.test", stage="unit", scope_name=SCOPE_COMPILERS):
        pass
    (span,) = otel.span_exporter.get_finished_spans()
    assert span.name == "livestub.test"
    assert span.attributes is not None
    assert span.attributes[AttributeName.STAGE_NAME] == "unit"
    assert span.attributes["status"] == "ok"
    assert otel.metric_points(MetricName.STAGE_DURATION)


def test_stage_span_reraises_and_marks_error(otel: OtelHarness) -> None:
    """Ensure failing stages propagate and mark the span as error."""
    with (
        pytest.raises(RuntimeError, match="boom"),
        stage_span("livestub.failing", stage="unit", scope_name=SCOPE_COMPILERS),
    ):
        msg = "boom"
        raise RuntimeError(msg)
    (span,) = otel.span_exporter.get_finished_spans()
    assert span.status.status_code is StatusCode.ERROR
    assert span.attributes is not None
    assert span.attributes["status"] == "error"
    assert any(event.name == "exception" for event in span.events)


def test_dispatch_spans_and_error_metrics(otel: OtelHarness) -> None:
    """Ensure compiler passes emit nested spans and count isolated errors."""
    report = run_compilers(ScopeTree(), registry=CompilerRegistry([FailingCompiler]))
    assert report.failures_for("failing")

    spans = {span.name: span for span in otel.span_exporter.get_finished_spans()}
    root = spans["livestub.run_compilers"]
    child = spans["livestub.compiler.failing"]
    assert child.parent is not None
    assert child.parent.span_id == root.context.span_id
    assert child.status.status_code is StatusCode.ERROR
    assert child.attributes is not None
    assert child.attributes[AttributeName.COMPILER] == "failing"

    points = otel.metric_points(MetricName.ERROR_COUNT)
    assert any(
        point.attributes.get(AttributeName.COMPILER) == "failing"  # type: ignore[attr-defined]
        for point in points
    )


def test_normalize_attributes() -> None:
    """Ensure attribute values are coerced to OpenTelemetry-safe types."""
    normalized = normalize_attributes(
        {
            "dropped": None,
            "flag": True,
            "names": ("a", None, "b"),
            "counts": [1, 2],
            "mapping": {"b": 1, "a": 2},
            "other": ScopeTree,
        }
    )
    assert "dropped" not in normalized
    assert normalized["flag"] is True
    assert normalized["names"] == ["a", "b"]
    assert normalized["counts"] == [1, 2]
    assert normalized["mapping"] == '{"a": 2, "b": 1}'
    assert isinstance(normalized["other"], str)
    assert normalize_attributes(None) == {}


def test_trace_context_filter(otel: OtelHarness) -> None:
    """Ensure log records carry trace identifiers inside a span."""
    logger = logging.getLogger("livestub.test.trace_context")
    install_trace_context_filter(logger)
    handler = logger.handlers[0]
    assert any(isinstance(item, TraceContextFilter) for item in handler.filters)

    outside = logging.LogRecord(logger.name, logging.INFO, __file__, 1, "outside", None, None)
    TraceContextFilter.filter(outside)
    assert outside.trace_id is None  # type: ignore[attr-defined]

    with stage_span("livestub.logged", stage="unit", scope_name=SCOPE_COMPILERS) as span:
        inside = logging.LogRecord(logger.name, logging.INFO, __file__, 1, "inside", None, None)
        TraceContextFilter.filter(inside)
    assert inside.trace_id == f"{span.get_span_context().trace_id:032x}"  # type: ignore[attr-defined]
    logger.removeHandler(handler)
