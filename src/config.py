"""Configuration for a compiler pass.

Keep this intentionally small: which compilers run and how the heap is
scanned. Declaration semantics live in the compilers, not here.
"""

from __future__ import annotations

from collections.abc import Mapping

from reflection.heap import HeapScanStrategy
from serde_msgspec import StructBaseStrict
from utils.env_utils import env_enum, env_list
from utils.hashing import hash_json_canonical

ENV_COMPILERS = "LIVESTUB_COMPILERS"
ENV_EXCLUDE_COMPILERS = "LIVESTUB_EXCLUDE_COMPILERS"
ENV_HEAP_SCAN = "LIVESTUB_HEAP_SCAN"

_CONFIG_VERSION = 1


class StubgenConfig(StructBaseStrict):
    """Settings for one compiler pass."""

    only_compilers: tuple[str, ...] = ()
    exclude_compilers: tuple[str, ...] = ()
    heap_scan: HeapScanStrategy = HeapScanStrategy.SUBCLASSES

    def fingerprint_payload(self) -> Mapping[str, object]:
        """Return a canonical payload for fingerprinting.

        Returns
        -------
        Mapping[str, object]
            Versioned payload with selection lists sorted.
        """
        return {
            "version": _CONFIG_VERSION,
            "only_compilers": sorted(self.only_compilers),
            "exclude_compilers": sorted(self.exclude_compilers),
            "heap_scan": self.heap_scan.value,
        }

    def fingerprint(self) -> str:
        """Return a deterministic SHA-256 fingerprint of the configuration."""
        return hash_json_canonical(self.fingerprint_payload())


def config_from_env() -> StubgenConfig:
    """Resolve the pass configuration from ``LIVESTUB_*`` environment variables.

    Invalid values are logged and fall back to defaults.

    Returns
    -------
    StubgenConfig
        Resolved configuration.
    """
    return StubgenConfig(
        only_compilers=tuple(env_list(ENV_COMPILERS)),
        exclude_compilers=tuple(env_list(ENV_EXCLUDE_COMPILERS)),
        heap_scan=env_enum(ENV_HEAP_SCAN, HeapScanStrategy, default=HeapScanStrategy.SUBCLASSES),
    )


__all__ = [
    "ENV_COMPILERS",
    "ENV_EXCLUDE_COMPILERS",
    "ENV_HEAP_SCAN",
    "StubgenConfig",
    "config_from_env",
]
