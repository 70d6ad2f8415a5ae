"""Process-wide current state with runtime-generated accessors."""

from __future__ import annotations

from current_state.attributes import (
    ASSIGNMENT_MARKER,
    GENERATED_ACCESSORS_ATTR,
    RESTRICTED_ATTRIBUTE_NAMES,
    CurrentAttributes,
    CurrentAttributesMeta,
    generated_readers,
)

__all__ = [
    "ASSIGNMENT_MARKER",
    "GENERATED_ACCESSORS_ATTR",
    "RESTRICTED_ATTRIBUTE_NAMES",
    "CurrentAttributes",
    "CurrentAttributesMeta",
    "generated_readers",
]
