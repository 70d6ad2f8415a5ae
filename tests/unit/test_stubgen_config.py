"""Tests for pass configuration resolved from the environment."""

from __future__ import annotations

import logging

import pytest

from config import (
    ENV_COMPILERS,
    ENV_EXCLUDE_COMPILERS,
    ENV_HEAP_SCAN,
    StubgenConfig,
    config_from_env,
)
from reflection import HeapScanStrategy


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (ENV_COMPILERS, ENV_EXCLUDE_COMPILERS, ENV_HEAP_SCAN):
        monkeypatch.delenv(name, raising=False)


def test_config_defaults() -> None:
    """Ensure an empty environment yields the default configuration."""
    assert config_from_env() == StubgenConfig()


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure compiler lists and heap strategy are parsed."""
    monkeypatch.setenv(ENV_COMPILERS, " current_attributes , extra ,")
    monkeypatch.setenv(ENV_EXCLUDE_COMPILERS, "extra")
    monkeypatch.setenv(ENV_HEAP_SCAN, "GC")
    config = config_from_env()
    assert config.only_compilers == ("current_attributes", "extra")
    assert config.exclude_compilers == ("extra",)
    assert config.heap_scan is HeapScanStrategy.GC


def test_invalid_heap_scan_falls_back(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Ensure an invalid strategy is logged and replaced by the default."""
    caplog.set_level(logging.WARNING, logger="utils.env_utils")
    monkeypatch.setenv(ENV_HEAP_SCAN, "everything")
    assert config_from_env().heap_scan is HeapScanStrategy.SUBCLASSES
    assert any(ENV_HEAP_SCAN in record.getMessage() for record in caplog.records)


def test_fingerprint_is_order_insensitive() -> None:
    """Ensure fingerprints ignore selection order but track content."""
    first = StubgenConfig(only_compilers=("a", "b"))
    second = StubgenConfig(only_compilers=("b", "a"))
    third = StubgenConfig(only_compilers=("a",), heap_scan=HeapScanStrategy.GC)
    assert first.fingerprint() == second.fingerprint()
    assert first.fingerprint() != third.fingerprint()
    assert len(first.fingerprint()) == 64
    assert first.fingerprint_payload()["version"] == 1
