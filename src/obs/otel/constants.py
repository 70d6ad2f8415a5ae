"""Names of livestub spans, metrics, attributes and instrumentation scopes."""

from __future__ import annotations

from enum import StrEnum


class ScopeName(StrEnum):
    """Instrumentation scopes; one per layer that opens spans or meters."""

    ROOT = "livestub"
    COMPILERS = "livestub.compilers"
    OBS = "livestub.obs"


class MetricName(StrEnum):
    STAGE_DURATION = "livestub.stage.duration"
    ERROR_COUNT = "livestub.error.count"
    DECORATED_COUNT = "livestub.decorated.count"


class AttributeName(StrEnum):
    """Span and metric attribute keys."""

    STAGE = "stage"
    STATUS = "status"
    ERROR_TYPE = "error_type"
    DURATION_S = "duration_s"
    STAGE_NAME = "livestub.stage"
    COMPILER = "livestub.compiler"
    COMPILERS = "livestub.compilers"
    CONSTANT = "livestub.constant"


SCOPE_ROOT = ScopeName.ROOT
SCOPE_COMPILERS = ScopeName.COMPILERS
SCOPE_OBS = ScopeName.OBS

__all__ = [
    "SCOPE_COMPILERS",
    "SCOPE_OBS",
    "SCOPE_ROOT",
    "AttributeName",
    "MetricName",
    "ScopeName",
]
