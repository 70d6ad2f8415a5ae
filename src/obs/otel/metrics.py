"""Metric instruments for compiler passes.

Instruments are created on first use from the global meter provider and
cached; :func:`reset_metrics_registry` drops the cache after the provider is
replaced (tests install an in-memory provider this way).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache

from opentelemetry import metrics

from obs.otel.attributes import normalize_attributes
from obs.otel.constants import SCOPE_OBS, AttributeName, MetricName
from obs.otel.scope_metadata import instrumentation_schema_url, instrumentation_version


@dataclass(frozen=True)
class MetricsRegistry:
    """Instruments recorded by dispatch and stage spans."""

    stage_duration: metrics.Histogram
    error_count: metrics.Counter
    decorated_count: metrics.Counter


@cache
def _registry() -> MetricsRegistry:
    meter = metrics.get_meter(
        SCOPE_OBS,
        instrumentation_version(),
        schema_url=instrumentation_schema_url(),
    )
    return MetricsRegistry(
        stage_duration=meter.create_histogram(
            MetricName.STAGE_DURATION,
            unit="s",
            description="Wall time of a livestub stage.",
        ),
        error_count=meter.create_counter(
            MetricName.ERROR_COUNT,
            unit="1",
            description="Compiler failures isolated by dispatch.",
        ),
        decorated_count=meter.create_counter(
            MetricName.DECORATED_COUNT,
            unit="1",
            description="Constants a compiler decorated without error.",
        ),
    )


def reset_metrics_registry() -> None:
    _registry.cache_clear()


def record_stage_duration(stage: str, duration_s: float, *, status: str) -> None:
    _registry().stage_duration.record(
        duration_s,
        normalize_attributes({AttributeName.STAGE: stage, AttributeName.STATUS: status}),
    )


def record_error(
    stage: str,
    error_type: str,
    *,
    attributes: Mapping[str, object] | None = None,
) -> None:
    """Count one isolated failure of ``stage``, tagged with the exception type."""
    payload: dict[str, object] = {**(attributes or {})}
    payload[AttributeName.STAGE] = stage
    payload[AttributeName.ERROR_TYPE] = error_type
    _registry().error_count.add(1, normalize_attributes(payload))


def record_decorated(compiler: str, count: int) -> None:
    """Add ``count`` decorated constants for ``compiler``; zero is not recorded."""
    if count > 0:
        _registry().decorated_count.add(
            count,
            normalize_attributes({AttributeName.COMPILER: compiler}),
        )


__all__ = [
    "MetricsRegistry",
    "record_decorated",
    "record_error",
    "record_stage_duration",
    "reset_metrics_registry",
]
