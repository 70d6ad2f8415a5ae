"""Registry of compiler classes keyed by name."""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from compilers.base import Compiler
from compilers.current_attributes import CurrentAttributesCompiler
from compilers.errors import CompilerDefinitionError, CompilerNotFoundError
from utils.registry_protocol import MutableRegistry

type CompilerClass = type[Compiler[Any]]


class CompilerRegistry:
    """Ordered set of registered compilers.

    Registration order is kept for reporting only; compilers are independent
    and dispatch correctness does not depend on their order.
    """

    def __init__(self, compilers: Iterable[CompilerClass] = ()) -> None:
        self._entries: MutableRegistry[str, CompilerClass] = MutableRegistry()
        for compiler in compilers:
            self.register(compiler)

    def register(self, compiler: CompilerClass, *, overwrite: bool = False) -> CompilerClass:
        """Register a compiler class; usable as a class decorator.

        Raises:
            CompilerDefinitionError: If the class is abstract or lacks a name
                or constant type.
        """
        name = getattr(compiler, "name", None)
        if not isinstance(name, str) or not name:
            msg = f"Compiler {compiler.__qualname__} must define a non-empty 'name'."
            raise CompilerDefinitionError(msg)
        if not isinstance(getattr(compiler, "constant_type", None), type):
            msg = f"Compiler {name} must define a 'constant_type' class."
            raise CompilerDefinitionError(msg)
        if inspect.isabstract(compiler):
            missing = ", ".join(sorted(compiler.__abstractmethods__))
            msg = f"Compiler {name} is abstract; implement {missing}."
            raise CompilerDefinitionError(msg)
        self._entries.register(name, compiler, overwrite=overwrite)
        return compiler

    def get(self, name: str) -> CompilerClass | None:
        return self._entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[CompilerClass]:
        return (compiler for _, compiler in self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def for_constant_type(self, constant_type: type) -> list[CompilerClass]:
        """Return compilers whose constant type is exactly ``constant_type``."""
        return [compiler for compiler in self if compiler.constant_type is constant_type]

    def select(
        self,
        *,
        only: Sequence[str] = (),
        exclude: Sequence[str] = (),
    ) -> list[CompilerClass]:
        """Return the compilers to run.

        Parameters
        ----------
        only
            When non-empty, run only these compilers.
        exclude
            Compilers to skip.

        Returns
        -------
        list[CompilerClass]
            Selected compilers in registration order.

        Raises
        ------
        CompilerNotFoundError
            If a name in ``only`` or ``exclude`` is not registered.
        """
        unknown = tuple(name for name in (*only, *exclude) if name not in self._entries)
        if unknown:
            raise CompilerNotFoundError(unknown, available=self.names())
        requested = frozenset(only)
        excluded = frozenset(exclude)
        return [
            compiler
            for name, compiler in self._entries.items()
            if (not requested or name in requested) and name not in excluded
        ]


def default_compiler_registry() -> CompilerRegistry:
    """Return a registry holding the built-in compilers."""
    return CompilerRegistry([CurrentAttributesCompiler])


__all__ = ["CompilerClass", "CompilerRegistry", "default_compiler_registry"]
