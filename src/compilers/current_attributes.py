"""Declarations for subclasses of ``current_state.CurrentAttributes``.

For example, with the following class::

    class Current(CurrentAttributes, attributes=("account",)):
        def helper(self):
            ...

        def authenticate(self, user_id: int) -> None:
            ...

this compiler declares on scope ``app.Current``:

- ``account`` at class and instance level, no parameters, ``typing.Any``;
- ``account=`` at class and instance level, one ``value: typing.Any``
  parameter, ``typing.Any``;
- ``authenticate(user_id: int) -> None`` at class level only;
- ``helper() -> typing.Any`` at class level only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from compilers.base import Compiler
from current_state import ASSIGNMENT_MARKER, GENERATED_ACCESSORS_ATTR, CurrentAttributes
from scope_tree import UNTYPED, MethodLevel

if TYPE_CHECKING:
    from reflection import HeapScanner
    from scope_tree import ScopeNode


class CurrentAttributesCompiler(Compiler[type[CurrentAttributes]]):
    """Declare generated accessors and class-level proxies of authored methods."""

    name = "current_attributes"
    constant_type = CurrentAttributes

    @classmethod
    def gather_constants(cls, scanner: HeapScanner) -> list[type[CurrentAttributes]]:
        return scanner.descendants_of(CurrentAttributes)

    def decorate(self) -> None:
        dynamic_methods = self._dynamic_methods_of_constant()
        generated = frozenset(dynamic_methods)
        instance_methods = [
            method for method in self._instance_methods_of_constant() if method not in generated
        ]
        if not dynamic_methods and not instance_methods:
            return

        scope = self.root.get_or_create(self.qualified_name)
        for method in dynamic_methods:
            # Instance calls reach the same singleton state, so declare both levels.
            self._generate_method(scope, method, level=MethodLevel.CLASS)
            self._generate_method(scope, method, level=MethodLevel.INSTANCE)

        for method in instance_methods:
            # Authored methods are only elevated to class methods.
            definition = self.reflection.instance_method_of(self.constant, method)
            if definition is not None:
                self.create_method_from_def(
                    scope,
                    definition,
                    name=method,
                    level=MethodLevel.CLASS,
                )

    def _dynamic_methods_of_constant(self) -> list[str]:
        names = self.reflection.own_attribute_of(self.constant, GENERATED_ACCESSORS_ATTR, ())
        if not isinstance(names, (tuple, list)):
            return []
        return [name for name in names if isinstance(name, str)]

    def _instance_methods_of_constant(self) -> list[str]:
        return self.reflection.instance_methods_of(self.constant)

    def _generate_method(self, scope: ScopeNode, method: str, *, level: MethodLevel) -> None:
        if method.endswith(ASSIGNMENT_MARKER):
            scope.append_method(
                method,
                level,
                parameters=[self.create_param("value", type_name=UNTYPED)],
                return_type=UNTYPED,
            )
        else:
            scope.append_method(method, level, return_type=UNTYPED)


__all__ = ["CurrentAttributesCompiler"]
