"""Trace correlation for log records emitted inside livestub spans."""

from __future__ import annotations

import logging

from opentelemetry import trace

TRACE_LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s [trace=%(trace_id)s span=%(span_id)s] %(message)s"
)


class TraceContextFilter(logging.Filter):
    """Stamp ``trace_id`` and ``span_id`` onto every record; ``None`` outside a span."""

    @staticmethod
    def filter(record: logging.LogRecord) -> bool:
        context = trace.get_current_span().get_span_context()
        valid = context.is_valid
        record.trace_id = format(context.trace_id, "032x") if valid else None
        record.span_id = format(context.span_id, "016x") if valid else None
        return True


class TraceContextFormatter(logging.Formatter):
    """Formatter tolerating records that bypassed :class:`TraceContextFilter`."""

    def format(self, record: logging.LogRecord) -> str:
        for field in ("trace_id", "span_id"):
            if not hasattr(record, field):
                setattr(record, field, None)
        return super().format(record)


def install_trace_context_filter(
    logger: logging.Logger | None = None,
    *,
    fmt: str = TRACE_LOG_FORMAT,
) -> None:
    """Add trace correlation to every handler of ``logger`` (the root by default).

    A stream handler is created first when the logger has none. Installing
    twice does not duplicate the filter.
    """
    target = logger if logger is not None else logging.getLogger()
    if not target.handlers:
        target.addHandler(logging.StreamHandler())
    for handler in target.handlers:
        handler.setFormatter(TraceContextFormatter(fmt))
        if not any(isinstance(existing, TraceContextFilter) for existing in handler.filters):
            handler.addFilter(TraceContextFilter())


__all__ = [
    "TRACE_LOG_FORMAT",
    "TraceContextFilter",
    "TraceContextFormatter",
    "install_trace_context_filter",
]
