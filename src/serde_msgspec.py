"""msgspec struct bases and encoders for livestub value types.

Declarations and reports are frozen msgspec structs so that they hash, compare
by value and serialize without bespoke ``to_dict`` code.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

import msgspec


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Frozen, keyword-only base for reports, snapshots and configuration."""


class StructBaseHotPath(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    gc=False,
    cache_hash=True,
):
    """Untracked base for the many small declaration records a pass creates."""


def _enc_hook(obj: object) -> object:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, type):
        return f"{obj.__module__}.{obj.__qualname__}"
    msg = f"Cannot encode {type(obj).__qualname__} values."
    raise NotImplementedError(msg)


JSON_ENCODER: Final = msgspec.json.Encoder(enc_hook=_enc_hook, order="deterministic")
JSON_ENCODER_SORTED: Final = msgspec.json.Encoder(enc_hook=_enc_hook, order="sorted")


def to_builtins(obj: object, *, str_keys: bool = False) -> object:
    """Convert structs, enums and containers into plain builtin values.

    Returns
    -------
    object
        Lists, dicts, strings and numbers only.
    """
    return msgspec.to_builtins(obj, order="deterministic", str_keys=str_keys, enc_hook=_enc_hook)


def dumps_json(obj: object, *, pretty: bool = False) -> bytes:
    """Encode ``obj`` as JSON, indented by two spaces when ``pretty``."""
    encoded = JSON_ENCODER.encode(obj)
    return msgspec.json.format(encoded, indent=2) if pretty else encoded


__all__ = [
    "JSON_ENCODER",
    "JSON_ENCODER_SORTED",
    "StructBaseHotPath",
    "StructBaseStrict",
    "dumps_json",
    "to_builtins",
]
