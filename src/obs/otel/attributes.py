"""Coerce arbitrary attribute values into OpenTelemetry attribute types."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

from opentelemetry.util.types import AttributeValue

from utils.env_utils import env_value

_SCALARS = (bool, str, int, float)


def _length_limit() -> int | None:
    raw = env_value("OTEL_ATTRIBUTE_VALUE_LENGTH_LIMIT")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


_VALUE_LENGTH_LIMIT = _length_limit()


def _clip(text: str) -> str:
    if _VALUE_LENGTH_LIMIT is None:
        return text
    return text[:_VALUE_LENGTH_LIMIT]


def _homogeneous(items: list[object]) -> AttributeValue:
    # OTel arrays must hold one primitive type; mixed arrays become strings.
    for kind in _SCALARS:
        if all(type(item) is kind for item in items):
            return [_clip(item) if isinstance(item, str) else item for item in items]  # type: ignore[return-value]
    return [_clip(str(item)) for item in items]


def _coerce(value: object) -> AttributeValue:
    if isinstance(value, str):
        return _clip(value)
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, Mapping):
        return _clip(json.dumps(value, sort_keys=True, default=str))
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return _homogeneous([item for item in value if item is not None])
    return _clip(str(value))


def normalize_attributes(attrs: Mapping[str, object] | None) -> dict[str, AttributeValue]:
    """Return ``attrs`` with ``None`` values dropped and the rest coerced.

    Strings are clipped to ``OTEL_ATTRIBUTE_VALUE_LENGTH_LIMIT`` when it is
    set, mappings are rendered as sorted JSON and sequences become homogeneous
    arrays.
    """
    if not attrs:
        return {}
    return {str(key): _coerce(value) for key, value in attrs.items() if value is not None}


__all__ = ["normalize_attributes"]
