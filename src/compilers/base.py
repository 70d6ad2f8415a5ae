"""Base class for declaration compilers."""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, ClassVar

from scope_tree import UNTYPED, MethodDecl, MethodLevel, ParamDecl, ParameterKind

if TYPE_CHECKING:
    from reflection import HeapScanner, RecordedSignature, Reflection
    from scope_tree import ScopeNode, ScopeTree

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class Compiler[ConstantT](ABC):
    """Gathers target constants and writes declarations for one of them.

    A compiler class declares the ``constant_type`` it targets and gathers the
    live constants of that type. Dispatch then instantiates the compiler once
    per gathered constant and calls :meth:`decorate`, which writes into the
    scope tree under the constant's qualified name and nowhere else.
    """

    name: ClassVar[str]
    constant_type: ClassVar[type]

    def __init__(
        self,
        root: ScopeTree,
        constant: ConstantT,
        *,
        reflection: Reflection,
    ) -> None:
        self.root = root
        self.constant = constant
        self.reflection = reflection

    @classmethod
    @abstractmethod
    def gather_constants(cls, scanner: HeapScanner) -> Iterable[ConstantT]:
        """Return the constants this compiler is interested in right now."""

    @classmethod
    def handles(cls, constant: object, reflection: Reflection) -> bool:
        """Return whether ``constant`` is of this compiler's constant type."""
        target = constant if reflection.is_class(constant) else reflection.class_of(constant)
        return any(
            reflection.are_equal(ancestor, cls.constant_type)
            for ancestor in reflection.ancestors_of(target)
        )

    @classmethod
    def processable_constants(cls, scanner: HeapScanner) -> list[ConstantT]:
        """Return gathered constants that are named, handled and unique."""
        reflection = scanner.reflection
        seen: set[int] = set()
        constants: list[ConstantT] = []
        for constant in cls.gather_constants(scanner):
            key = reflection.object_id_of(constant)
            if key in seen:
                continue
            seen.add(key)
            if reflection.qualified_name_of(constant) is None:
                logger.debug("Compiler %s skips anonymous constant %r", cls.name, constant)
                continue
            if cls.handles(constant, reflection):
                constants.append(constant)
        return constants

    @abstractmethod
    def decorate(self) -> None:
        """Write declarations for ``self.constant`` into ``self.root``."""

    @property
    def qualified_name(self) -> str:
        """Return the absolute name of the bound constant.

        Raises:
            ValueError: If the bound constant is anonymous.
        """
        name = self.reflection.qualified_name_of(self.constant)
        if name is None:
            msg = f"Compiler {self.name} is bound to an anonymous constant {self.constant!r}."
            raise ValueError(msg)
        return name

    @staticmethod
    def create_param(
        name: str,
        *,
        type_name: str = UNTYPED,
        kind: ParameterKind = ParameterKind.REQUIRED,
        has_default: bool = False,
    ) -> ParamDecl:
        return ParamDecl(name=name, kind=kind, has_default=has_default, type_name=type_name)

    def create_method_from_def(
        self,
        scope: ScopeNode,
        method: Callable[..., Any],
        *,
        name: str,
        level: MethodLevel = MethodLevel.INSTANCE,
        drop_receiver: bool = True,
    ) -> MethodDecl:
        """Declare ``method`` on ``scope`` using its own parameters.

        Parameter names, kinds and defaults come from the method. Types come
        from its recorded signature when there is one and default to
        ``typing.Any`` otherwise.

        Parameters
        ----------
        scope
            Scope to declare on.
        method
            Function (or wrapper of one) as stored on the class.
        name
            Declared method name.
        level
            Declaration level.
        drop_receiver
            Whether the first positional parameter is the receiver (``self``).

        Returns
        -------
        MethodDecl
            The stored declaration.
        """
        recorded = self.reflection.signature_of(method)
        shape = self.reflection.parameters_of(method)
        if shape is None:
            parameters = [
                self.create_param("args", kind=ParameterKind.REST),
                self.create_param("kwargs", kind=ParameterKind.KEYWORD_REST),
            ]
        else:
            parameters = _parameters_from_shape(shape, recorded)
            if drop_receiver and shape.parameters:
                first = next(iter(shape.parameters.values()))
                if first.kind in _POSITIONAL:
                    parameters = parameters[1:]
        return_type = UNTYPED
        if recorded is not None and recorded.return_type is not None:
            return_type = recorded.return_type
        return scope.append_method(name, level, parameters, return_type)


def _parameters_from_shape(
    shape: inspect.Signature,
    recorded: RecordedSignature | None,
) -> list[ParamDecl]:
    parameters: list[ParamDecl] = []
    for param in shape.parameters.values():
        has_default = param.default is not inspect.Parameter.empty
        if param.kind in _POSITIONAL:
            kind = ParameterKind.OPTIONAL if has_default else ParameterKind.REQUIRED
        elif param.kind is inspect.Parameter.VAR_POSITIONAL:
            kind = ParameterKind.REST
        elif param.kind is inspect.Parameter.KEYWORD_ONLY:
            kind = ParameterKind.KEYWORD
        else:
            kind = ParameterKind.KEYWORD_REST
        type_name = recorded.type_of(param.name) if recorded is not None else None
        parameters.append(
            ParamDecl(
                name=param.name,
                kind=kind,
                has_default=has_default,
                type_name=type_name or UNTYPED,
            )
        )
    return parameters


__all__ = ["Compiler"]
