"""Stable fingerprints over msgspec-encodable payloads."""

from __future__ import annotations

import hashlib

from serde_msgspec import JSON_ENCODER_SORTED, to_builtins


def hash_json_canonical(payload: object) -> str:
    """Return the SHA-256 hex digest of ``payload`` as sorted-key JSON.

    Mapping keys are coerced to strings first, so payloads that differ only in
    key order or key type hash identically.
    """
    encoded = JSON_ENCODER_SORTED.encode(to_builtins(payload, str_keys=True))
    return hashlib.sha256(encoded).hexdigest()


__all__ = ["hash_json_canonical"]
