"""Scope tree of synthesized declarations."""

from __future__ import annotations

from scope_tree.nodes import (
    UNTYPED,
    MethodDecl,
    MethodLevel,
    ParamDecl,
    ParameterKind,
    ScopeNode,
    ScopeSnapshot,
    ScopeTree,
)

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
