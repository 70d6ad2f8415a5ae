"""Recorded signature retrieval for live methods.

A method's recorded signature is its annotations, resolved in the method's own
globals. Absence is the common case and is not an error.
"""

from __future__ import annotations

import inspect
import logging
import types
import typing
from collections.abc import Callable
from typing import Any

import msgspec

from reflection.primitives import PRIMITIVES
from serde_msgspec import StructBaseStrict

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)


class RecordedSignature(StructBaseStrict):
    """Annotation-derived types for one callable."""

    parameter_types: dict[str, str] = msgspec.field(default_factory=dict)
    return_type: str | None = None

    def type_of(self, parameter: str) -> str | None:
        """Return the recorded type of ``parameter``, if any."""
        return self.parameter_types.get(parameter)


def name_of_type(annotation: object) -> str:
    """Return the source-like string form of a type annotation.

    Returns
    -------
    str
        ``"None"`` for ``None``, the module-qualified name for classes
        (bare for builtins), the forward reference text for string
        annotations and ``repr`` for typing constructs.
    """
    if annotation is None or annotation is _NONE_TYPE:
        return "None"
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    if isinstance(annotation, type) and typing.get_origin(annotation) is None:
        module = PRIMITIVES.module_name_of(annotation)
        qualname = PRIMITIVES.qualname_of(annotation)
        if module == "builtins":
            return qualname
        return f"{module}.{qualname}"
    if isinstance(annotation, types.UnionType):
        return " | ".join(name_of_type(arg) for arg in typing.get_args(annotation))
    return repr(annotation)


def recorded_signature(method: Callable[..., Any]) -> RecordedSignature | None:
    """Return the recorded signature of ``method``.

    Any failure while resolving annotations (unresolvable forward references,
    malformed annotations, objects without annotations) is suppressed and
    logged at DEBUG.

    Returns
    -------
    RecordedSignature | None
        Recorded types, or ``None`` when nothing is recorded or retrieval fails.
    """
    try:
        hints = typing.get_type_hints(inspect.unwrap(method))
        if not hints:
            return None
        return_type = name_of_type(hints.pop("return")) if "return" in hints else None
        return RecordedSignature(
            parameter_types={name: name_of_type(hint) for name, hint in hints.items()},
            return_type=return_type,
        )
    except Exception as exc:  # noqa: BLE001 - retrieval fails soft to untyped
        logger.debug(
            "Suppressed signature retrieval failure for %r: %s: %s",
            method,
            type(exc).__name__,
            exc,
        )
        return None


__all__ = ["RecordedSignature", "name_of_type", "recorded_signature"]
