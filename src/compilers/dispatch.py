"""Run registered compilers over the live process."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

import msgspec

from compilers.registry import CompilerRegistry, default_compiler_registry
from config import StubgenConfig
from obs.otel import (
    SCOPE_COMPILERS,
    SCOPE_ROOT,
    record_decorated,
    record_error,
    record_exception,
    stage_span,
)
from obs.otel.constants import AttributeName
from reflection import HeapScanner, Reflection
from serde_msgspec import StructBaseStrict

if TYPE_CHECKING:
    from opentelemetry.trace import Span

    from compilers.registry import CompilerClass
    from scope_tree import ScopeTree

logger = logging.getLogger(__name__)

FailureStage = Literal["gather", "decorate"]


class CompilerFailure(StructBaseStrict):
    """One isolated compiler failure."""

    compiler: str
    stage: FailureStage
    error_type: str
    message: str
    constant: str | None = None


class DispatchReport(StructBaseStrict):
    """Outcome of a compiler pass."""

    compilers: tuple[str, ...] = ()
    decorated: dict[str, int] = msgspec.field(default_factory=dict)
    failures: tuple[CompilerFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    def failures_for(self, compiler: str) -> tuple[CompilerFailure, ...]:
        return tuple(failure for failure in self.failures if failure.compiler == compiler)


@dataclass
class _DispatchState:
    decorated: dict[str, int] = field(default_factory=dict)
    failures: list[CompilerFailure] = field(default_factory=list)


def run_compilers(
    tree: ScopeTree,
    *,
    registry: CompilerRegistry | None = None,
    reflection: Reflection | None = None,
    scanner: HeapScanner | None = None,
    config: StubgenConfig | None = None,
) -> DispatchReport:
    """Gather and decorate constants for every selected compiler.

    A failure in one compiler's ``gather_constants`` or ``decorate`` is
    recorded and the pass moves on to the next constant and compiler.

    Parameters
    ----------
    tree
        Scope tree receiving declarations.
    registry
        Compilers to choose from; the built-in registry by default.
    reflection
        Reflection facade; one over the import-time primitives by default.
    scanner
        Heap scanner; built from ``reflection`` and ``config`` by default.
    config
        Pass configuration; defaults when omitted.

    Returns
    -------
    DispatchReport
        Compilers run, per-compiler decorated counts and isolated failures.
    """
    resolved_config = StubgenConfig() if config is None else config
    resolved_reflection = Reflection() if reflection is None else reflection
    if scanner is None:
        scanner = HeapScanner(resolved_reflection, strategy=resolved_config.heap_scan)
    if registry is None:
        registry = default_compiler_registry()
    compilers = registry.select(
        only=resolved_config.only_compilers,
        exclude=resolved_config.exclude_compilers,
    )
    state = _DispatchState()
    with stage_span(
        "livestub.run_compilers",
        stage="dispatch",
        scope_name=SCOPE_ROOT,
        attributes={AttributeName.COMPILERS: [compiler.name for compiler in compilers]},
    ):
        for compiler in compilers:
            with stage_span(
                f"livestub.compiler.{compiler.name}",
                stage="compile",
                scope_name=SCOPE_COMPILERS,
                attributes={AttributeName.COMPILER: compiler.name},
            ) as span:
                _run_compiler(
                    compiler,
                    tree,
                    reflection=resolved_reflection,
                    scanner=scanner,
                    state=state,
                    span=span,
                )
    return DispatchReport(
        compilers=tuple(compiler.name for compiler in compilers),
        decorated=state.decorated,
        failures=tuple(state.failures),
    )


def _run_compiler(
    compiler: CompilerClass,
    tree: ScopeTree,
    *,
    reflection: Reflection,
    scanner: HeapScanner,
    state: _DispatchState,
    span: Span,
) -> None:
    state.decorated[compiler.name] = 0
    try:
        constants: list[Any] = compiler.processable_constants(scanner)
    except Exception as exc:  # noqa: BLE001 - isolate plugin failures
        _record_failure(compiler, "gather", exc, constant=None, state=state, span=span)
        return
    for constant in constants:
        try:
            compiler(tree, constant, reflection=reflection).decorate()
        except Exception as exc:  # noqa: BLE001 - isolate plugin failures
            _record_failure(
                compiler,
                "decorate",
                exc,
                constant=reflection.qualified_name_of(constant),
                state=state,
                span=span,
            )
            continue
        state.decorated[compiler.name] += 1
    record_decorated(compiler.name, state.decorated[compiler.name])
    logger.debug(
        "Compiler %s decorated %d of %d constant(s)",
        compiler.name,
        state.decorated[compiler.name],
        len(constants),
    )


def _record_failure(
    compiler: CompilerClass,
    stage: FailureStage,
    exc: Exception,
    *,
    constant: str | None,
    state: _DispatchState,
    span: Span,
) -> None:
    state.failures.append(
        CompilerFailure(
            compiler=compiler.name,
            stage=stage,
            error_type=type(exc).__name__,
            message=str(exc),
            constant=constant,
        )
    )
    record_exception(span, exc)
    record_error(
        stage,
        type(exc).__name__,
        attributes={AttributeName.COMPILER: compiler.name, AttributeName.CONSTANT: constant},
    )
    logger.warning(
        "Compiler %s failed to %s %s: %s",
        compiler.name,
        stage,
        constant or "constants",
        exc,
    )


__all__ = ["CompilerFailure", "DispatchReport", "run_compilers"]
