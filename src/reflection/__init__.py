"""Override-resistant runtime reflection and heap queries."""

from __future__ import annotations

from reflection.facade import Reflection
from reflection.heap import HeapScanner, HeapScanStrategy
from reflection.primitives import PRIMITIVES, CapturedPrimitives, capture_primitives
from reflection.signatures import RecordedSignature, name_of_type, recorded_signature

__all__ = [
    "PRIMITIVES",
    "CapturedPrimitives",
    "HeapScanStrategy",
    "HeapScanner",
    "RecordedSignature",
    "Reflection",
    "capture_primitives",
    "name_of_type",
    "recorded_signature",
]
