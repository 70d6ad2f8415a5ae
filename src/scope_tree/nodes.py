"""Scope tree accumulating synthesized method declarations per constant."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from serde_msgspec import StructBaseHotPath, StructBaseStrict, dumps_json

logger = logging.getLogger(__name__)

UNTYPED: Final = "typing.Any"


class MethodLevel(StrEnum):
    """Whether a declaration lives on the class or on its instances."""

    CLASS = "class"
    INSTANCE = "instance"


class ParameterKind(StrEnum):
    """Parameter kinds of a declared method."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    REST = "rest"
    KEYWORD = "keyword"
    KEYWORD_REST = "keyword_rest"


class ParamDecl(StructBaseHotPath):
    """One declared parameter."""

    name: str
    kind: ParameterKind = ParameterKind.REQUIRED
    has_default: bool = False
    type_name: str = UNTYPED


class MethodDecl(StructBaseHotPath):
    """One declared method on a scope."""

    name: str
    level: MethodLevel
    parameters: tuple[ParamDecl, ...] = ()
    return_type: str = UNTYPED


class ScopeSnapshot(StructBaseStrict):
    """Immutable view of one scope node."""

    path: str
    methods: tuple[MethodDecl, ...] = ()


@dataclass
class ScopeNode:
    """Declarations accumulated for one constant."""

    path: str
    _methods: dict[tuple[str, MethodLevel], MethodDecl] = field(default_factory=dict, repr=False)

    @property
    def methods(self) -> tuple[MethodDecl, ...]:
        """Return declarations in insertion order."""
        return tuple(self._methods.values())

    def method(self, name: str, level: MethodLevel) -> MethodDecl | None:
        return self._methods.get((name, MethodLevel(level)))

    def append_method(
        self,
        name: str,
        level: MethodLevel,
        parameters: Sequence[ParamDecl] = (),
        return_type: str = UNTYPED,
    ) -> MethodDecl:
        """Declare a method on this scope.

        Appends are idempotent per ``(name, level)``: when a declaration already
        exists it is kept and returned unchanged.

        Returns
        -------
        MethodDecl
            The declaration stored for ``(name, level)``.
        """
        decl = MethodDecl(
            name=name,
            level=MethodLevel(level),
            parameters=tuple(parameters),
            return_type=return_type,
        )
        existing = self._methods.setdefault((decl.name, decl.level), decl)
        if existing is not decl and existing != decl:
            logger.debug("Keeping first declaration of %s (%s) on %s", name, level, self.path)
        return existing

    def snapshot(self) -> ScopeSnapshot:
        return ScopeSnapshot(path=self.path, methods=self.methods)


@dataclass
class ScopeTree:
    """Output accumulator keyed by absolute constant name."""

    _nodes: dict[str, ScopeNode] = field(default_factory=dict, repr=False)

    def get_or_create(self, path: str) -> ScopeNode:
        """Return the node for ``path``, creating it on first request.

        Raises:
            ValueError: If ``path`` is empty.
        """
        if not path:
            msg = "Scope path must be a non-empty absolute name."
            raise ValueError(msg)
        node = self._nodes.get(path)
        if node is None:
            node = ScopeNode(path=path)
            self._nodes[path] = node
        return node

    def get(self, path: str) -> ScopeNode | None:
        return self._nodes.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __iter__(self) -> Iterator[ScopeNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def paths(self) -> list[str]:
        return list(self._nodes)

    def snapshot(self) -> tuple[ScopeSnapshot, ...]:
        """Return immutable snapshots of every node, sorted by path."""
        return tuple(self._nodes[path].snapshot() for path in sorted(self._nodes))

    def to_json(self, *, pretty: bool = False) -> bytes:
        """Return the sorted snapshot encoded as JSON."""
        return dumps_json(self.snapshot(), pretty=pretty)


__all__ = [
    "UNTYPED",
    "MethodDecl",
    "MethodLevel",
    "ParamDecl",
    "ParameterKind",
    "ScopeNode",
    "ScopeSnapshot",
    "ScopeTree",
]
