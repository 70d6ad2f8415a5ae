"""Version and schema URL reported with every livestub tracer and meter."""

from __future__ import annotations

from functools import cache
from importlib.metadata import PackageNotFoundError, version

from utils.env_utils import env_value

_DISTRIBUTION = "livestub"


@cache
def instrumentation_version() -> str:
    """Return ``LIVESTUB_SERVICE_VERSION``, else the installed version, else ``"unknown"``."""
    override = env_value("LIVESTUB_SERVICE_VERSION")
    if override is not None:
        return override
    try:
        return version(_DISTRIBUTION)
    except PackageNotFoundError:
        return "unknown"


@cache
def instrumentation_schema_url() -> str | None:
    return env_value("LIVESTUB_OTEL_SCHEMA_URL") or env_value("OTEL_SCHEMA_URL")


__all__ = ["instrumentation_schema_url", "instrumentation_version"]
