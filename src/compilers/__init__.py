"""Pluggable compilers synthesizing declarations for runtime-generated members."""

from __future__ import annotations

from compilers.base import Compiler
from compilers.current_attributes import CurrentAttributesCompiler
from compilers.dispatch import CompilerFailure, DispatchReport, run_compilers
from compilers.errors import CompilerDefinitionError, CompilerNotFoundError, LivestubError
from compilers.registry import CompilerClass, CompilerRegistry, default_compiler_registry

__all__ = [
    "Compiler",
    "CompilerClass",
    "CompilerDefinitionError",
    "CompilerFailure",
    "CompilerNotFoundError",
    "CompilerRegistry",
    "CurrentAttributesCompiler",
    "DispatchReport",
    "LivestubError",
    "default_compiler_registry",
    "run_compilers",
]
