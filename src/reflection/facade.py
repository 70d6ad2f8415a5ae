"""Override-resistant reflection over live classes, modules and methods."""

from __future__ import annotations

import inspect
import logging
import pkgutil
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from reflection.primitives import PRIMITIVES, CapturedPrimitives
from reflection.signatures import RecordedSignature, name_of_type, recorded_signature

if TYPE_CHECKING:
    from types import ModuleType

logger = logging.getLogger(__name__)

_MISSING = object()
_NOT_INSTANCE_METHODS = (staticmethod, classmethod, property)


class Reflection:
    """Pure reflection operations over explicitly supplied subjects.

    All lookups go through the bindings held by ``primitives`` so that the
    inspected program cannot influence the answers by redefining equality,
    class lookup, naming or attribute access on its own objects.
    """

    __slots__ = ("_p",)

    def __init__(self, primitives: CapturedPrimitives = PRIMITIVES) -> None:
        self._p = primitives

    @property
    def primitives(self) -> CapturedPrimitives:
        """Return the captured bindings backing this facade."""
        return self._p

    # ------------------------------------------------------------------
    # Kinds and identity
    # ------------------------------------------------------------------

    def class_of(self, obj: object) -> type:
        """Return the dynamic class of ``obj``, ignoring ``__class__`` overrides."""
        return self._p.class_of(obj)

    def is_class(self, obj: object) -> bool:
        return self._descends_from(self._p.class_of(obj), type)

    def is_module(self, obj: object) -> bool:
        return self._descends_from(self._p.class_of(obj), self._p.module_type)

    def is_constant(self, obj: object) -> bool:
        """Return whether ``obj`` is a class or a module."""
        return self.is_class(obj) or self.is_module(obj)

    def meta_form_of(self, constant: type) -> type:
        """Return the class of a class, which holds its class-level methods."""
        return self._p.class_of(constant)

    def is_meta_form(self, obj: object) -> bool:
        """Return whether ``obj`` is itself a class of classes (a metaclass)."""
        return self.is_class(obj) and self._descends_from(obj, type)

    def are_equal(self, obj: object, other: object) -> bool:
        """Return identity equality, ignoring any ``__eq__`` override."""
        return self._p.identical(obj, other)

    def _descends_from(self, cls: type, ancestor: type) -> bool:
        # Membership by identity; `in` would consult an overridden __eq__.
        return any(self._p.identical(candidate, ancestor) for candidate in self._p.mro_of(cls))

    def object_id_of(self, obj: object) -> int:
        return self._p.identity_of(obj)

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def name_of(self, constant: type | ModuleType) -> str | None:
        """Return the qualname of a class or the name of a module.

        Returns
        -------
        str | None
            Name, or ``None`` when the constant is anonymous: local classes,
            lambdas and other ``<...>`` shaped names are not addressable.
        """
        if self.is_module(constant):
            name = self._p.object_dict_of(constant).get("__name__")
        elif self.is_class(constant):
            name = self._p.qualname_of(constant)
        else:
            return None
        if not isinstance(name, str) or not name or "<" in name:
            return None
        return name

    def qualified_name_of(self, constant: type | ModuleType) -> str | None:
        """Return the absolute, module-anchored name of a constant.

        Returns
        -------
        str | None
            ``"package.module.Qual.Name"`` for classes, the full dotted name for
            modules, or ``None`` when the constant is anonymous.
        """
        name = self.name_of(constant)
        if name is None or self.is_module(constant):
            return name
        module = self._p.module_name_of(constant)
        if not isinstance(module, str) or not module or "<" in module:
            return None
        return f"{module}.{name}"

    def constantize(self, symbol: str, *, namespace: object | None = None) -> Any | None:
        """Resolve a dotted name to a live object.

        Parameters
        ----------
        symbol
            Dotted name, absolute unless ``namespace`` is given.
        namespace
            Optional class or module to resolve relative to.

        Returns
        -------
        Any | None
            Resolved object, or ``None`` on any lookup failure.
        """
        if namespace is None:
            try:
                return pkgutil.resolve_name(symbol)
            except (ImportError, AttributeError, ValueError, TypeError):
                return None
        current: object = namespace
        for part in symbol.split("."):
            value = self.own_attribute_of(current, part, _MISSING)
            if value is _MISSING:
                return None
            current = value
        return current

    # ------------------------------------------------------------------
    # Ancestry and namespaces
    # ------------------------------------------------------------------

    def ancestors_of(self, constant: type | ModuleType) -> list[Any]:
        """Return the linearized ancestry, most-derived first."""
        if self.is_class(constant):
            return list(self._p.mro_of(constant))
        return [constant]

    def superclass_of(self, constant: type) -> type | None:
        """Return the first declared base of ``constant``, or ``None`` for ``object``."""
        bases = self._p.bases_of(constant)
        return bases[0] if bases else None

    def inherited_ancestors_of(self, constant: type | ModuleType) -> list[Any]:
        """Return ancestry starting one level above ``constant``.

        Classes yield their MRO without themselves, so every base of a
        multiply inherited class is kept (``[object]`` for ``object``);
        modules inherit from ``types.ModuleType``.
        """
        if self.is_class(constant):
            return list(self._p.mro_of(constant)[1:]) or [object]
        return self.ancestors_of(self._p.module_type)

    def namespace_of(self, constant: object) -> dict[str, Any]:
        """Return a copy of the namespace dict of a class, module or object."""
        if self.is_class(constant):
            return dict(self._p.class_dict_of(constant))
        try:
            return dict(self._p.object_dict_of(constant))
        except (AttributeError, TypeError):
            return {}

    def own_attribute_of(self, constant: object, name: str, default: Any = None) -> Any:
        """Look ``name`` up in the namespace of ``constant`` only.

        No descriptors are invoked and ancestors are not consulted.
        """
        return self.namespace_of(constant).get(name, default)

    def constants_of(self, constant: type | ModuleType) -> list[str]:
        """Return names of classes and modules defined directly in ``constant``."""
        return [
            name
            for name, value in self.namespace_of(constant).items()
            if not name.startswith("__") and self.is_constant(value)
        ]

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def method_of(self, obj: object, name: str) -> Any | None:
        """Return the bound attribute ``name`` of ``obj``.

        Lookup uses the default attribute protocol, bypassing ``__getattr__``
        fallbacks and ``__getattribute__`` overrides on ``obj`` or its
        metaclass.

        Returns
        -------
        Any | None
            Bound attribute, or ``None`` when not found.
        """
        getter = self._p.class_getattribute if self.is_class(obj) else self._p.object_getattribute
        try:
            return getter(obj, name)
        except AttributeError:
            return None

    def instance_method_of(self, constant: type, name: str) -> Callable[..., Any] | None:
        """Return the raw instance method ``name`` found along the MRO."""
        for ancestor in self._p.mro_of(constant):
            value = self._p.class_dict_of(ancestor).get(name, _MISSING)
            if value is _MISSING:
                continue
            return value if self._is_instance_method(value) else None
        return None

    def _is_instance_method(self, value: object) -> bool:
        if isinstance(value, _NOT_INSTANCE_METHODS) or self.is_class(value):
            return False
        if inspect.isfunction(value):
            return True
        wrapped = inspect.getattr_static(value, "__wrapped__", None)
        return inspect.isfunction(wrapped)

    def _instance_method_names(self, constant: type, *, inherit: bool) -> list[str]:
        ancestors = self._p.mro_of(constant) if inherit else (constant,)
        seen: dict[str, None] = {}
        for ancestor in ancestors:
            for name, value in self._p.class_dict_of(ancestor).items():
                if name not in seen and self._is_instance_method(value):
                    seen[name] = None
        return list(seen)

    def _private_names(self, constant: type) -> frozenset[str]:
        # Mangling uses the short class name with leading underscores stripped.
        prefixes = tuple(
            f"_{self._p.qualname_of(ancestor).rpartition('.')[2].lstrip('_')}__"
            for ancestor in self._p.mro_of(constant)
        )
        return frozenset(
            name
            for name in self._instance_method_names(constant, inherit=True)
            if name.startswith(prefixes) and not name.endswith("__")
        )

    def public_instance_methods_of(self, constant: type) -> list[str]:
        """Return instance method names without a leading underscore, MRO included."""
        return [
            name
            for name in self._instance_method_names(constant, inherit=True)
            if not name.startswith("_")
        ]

    def protected_instance_methods_of(self, constant: type) -> list[str]:
        """Return single-underscore instance method names, MRO included."""
        private = self._private_names(constant)
        return [
            name
            for name in self._instance_method_names(constant, inherit=True)
            if _is_protected(name) and name not in private
        ]

    def private_instance_methods_of(self, constant: type) -> list[str]:
        """Return name-mangled (``__name``) instance method names, MRO included."""
        private = self._private_names(constant)
        return [
            name for name in self._instance_method_names(constant, inherit=True) if name in private
        ]

    def instance_methods_of(self, constant: type) -> list[str]:
        """Return public and protected instance methods defined directly on ``constant``."""
        private = self._private_names(constant)
        return [
            name
            for name in self._instance_method_names(constant, inherit=False)
            if (not name.startswith("_") or _is_protected(name)) and name not in private
        ]

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    @staticmethod
    def parameters_of(method: Callable[..., Any]) -> inspect.Signature | None:
        """Return the parameter shape of the unwrapped callable, or ``None``."""
        try:
            return inspect.signature(inspect.unwrap(method), follow_wrapped=False)
        except (TypeError, ValueError):
            logger.debug("No parameter shape available for %r", method)
            return None

    @staticmethod
    def signature_of(method: Callable[..., Any]) -> RecordedSignature | None:
        """Return the recorded signature of ``method``; never raises."""
        return recorded_signature(method)

    @staticmethod
    def name_of_type(annotation: object) -> str:
        return name_of_type(annotation)


def _is_protected(name: str) -> bool:
    return name.startswith("_") and not name.startswith("__")


__all__ = ["Reflection"]
