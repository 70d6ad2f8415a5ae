"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from current_state import CurrentAttributes
from reflection import HeapScanner, Reflection
from scope_tree import ScopeTree
from tests.obs._support.otel_harness import OtelHarness, get_otel_harness


@pytest.fixture
def reflection() -> Reflection:
    return Reflection()


@pytest.fixture
def scanner(reflection: Reflection) -> HeapScanner:
    return HeapScanner(reflection)


@pytest.fixture
def tree() -> ScopeTree:
    return ScopeTree()


@pytest.fixture
def otel() -> OtelHarness:
    harness = get_otel_harness()
    harness.reset()
    return harness


@pytest.fixture(autouse=True)
def _reset_current_attributes() -> None:
    CurrentAttributes.reset_all()
