"""Typed readers for ``LIVESTUB_*`` and OpenTelemetry environment variables."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import overload

_LOGGER = logging.getLogger(__name__)


def env_value(name: str) -> str | None:
    """Return the stripped value of ``name``; blank and unset both read as ``None``."""
    value = os.environ.get(name, "").strip()
    return value or None


def env_list(name: str, *, separator: str = ",") -> list[str]:
    """Split ``name`` on ``separator``, dropping blank items.

    Returns
    -------
    list[str]
        Stripped items in their original order; empty when unset.
    """
    raw = env_value(name)
    if raw is None:
        return []
    items = (item.strip() for item in raw.split(separator))
    return [item for item in items if item]


@overload
def env_enum[E: Enum](name: str, enum_type: type[E]) -> E | None: ...


@overload
def env_enum[E: Enum](name: str, enum_type: type[E], *, default: E) -> E: ...


def env_enum[E: Enum](name: str, enum_type: type[E], *, default: E | None = None) -> E | None:
    """Read ``name`` as a member of ``enum_type``.

    Member names and string values both match, case-insensitively. Anything
    else is logged at WARNING and resolves to ``default``.

    Returns
    -------
    E | None
        Matching member, or ``default``.
    """
    raw = env_value(name)
    if raw is None:
        return default
    lookup: dict[str, E] = {}
    for member in enum_type:
        lookup[member.name.lower()] = member
        if isinstance(member.value, str):
            lookup[member.value.lower()] = member
    member = lookup.get(raw.lower())
    if member is None:
        _LOGGER.warning(
            "Ignoring %s=%r; expected one of %s",
            name,
            raw,
            ", ".join(sorted(lookup)),
        )
        return default
    return member


__all__ = ["env_enum", "env_list", "env_value"]
