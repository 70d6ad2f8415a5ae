"""Tests for the override-resistant reflection facade."""

from __future__ import annotations

import json
import json.decoder
import types
from typing import Any

import pytest

from reflection import Reflection, capture_primitives

_SPOOFED_NAMES = frozenset({"__name__", "__qualname__", "__module__", "__mro__", "__bases__"})


class HostileMeta(type):
    """Metaclass lying about naming, ancestry, equality and attribute lookup."""

    def __getattribute__(cls, name: str) -> Any:
        if name in _SPOOFED_NAMES:
            return "spoofed"
        return super().__getattribute__(name)

    def __getattr__(cls, name: str) -> Any:
        if name == "missing":
            return "ghost"
        raise AttributeError(name)

    def __eq__(cls, other: object) -> bool:
        return True

    __hash__ = type.__hash__


class Hostile(metaclass=HostileMeta):
    def real(self) -> str:
        return "real"


class Impostor:
    @property  # type: ignore[misc]
    def __class__(self) -> type:  # type: ignore[override]
        return int


class AlwaysEqual:
    def __eq__(self, other: object) -> bool:
        return True

    __hash__ = object.__hash__


class Base:
    def inherited(self) -> None: ...


class Child(Base):
    def own(self) -> None: ...


class Mixin:
    def mixed(self) -> None: ...


class Both(Base, Mixin):
    pass


class SlotBase:
    __slots__ = ("slot",)


class Solid(Base, SlotBase):
    pass


class Visibility:
    def public(self) -> None: ...

    def _protected(self) -> None: ...

    def __private(self) -> None: ...

    def __dunder__(self) -> None: ...

    @staticmethod
    def static() -> None: ...

    @classmethod
    def klass(cls) -> None: ...

    @property
    def prop(self) -> int:
        return 1


class VisibilityChild(Visibility):
    def child(self) -> None: ...


class _Underscored:
    def __hidden(self) -> None: ...


class Outer:
    class Inner:
        pass


Dynamic = type("Dynamic", (), {})


def _local_class() -> type:
    class Local:
        pass

    return Local


def test_class_of_ignores_class_override(reflection: Reflection) -> None:
    """Ensure class_of reports the real class of an impostor."""
    impostor = Impostor()
    assert impostor.__class__ is int
    assert reflection.class_of(impostor) is Impostor
    assert not reflection.is_class(impostor)


def test_kind_queries(reflection: Reflection) -> None:
    """Ensure class, module and meta-form predicates agree with the object model."""
    assert reflection.is_class(Base)
    assert reflection.is_class(HostileMeta)
    assert not reflection.is_class(Base())
    assert reflection.is_module(json)
    assert not reflection.is_module(Base)
    assert reflection.is_constant(json)
    assert reflection.is_constant(Base)
    assert not reflection.is_constant(3)
    assert reflection.is_meta_form(type)
    assert reflection.is_meta_form(HostileMeta)
    assert not reflection.is_meta_form(Base)
    assert not reflection.is_meta_form(Hostile)
    assert reflection.meta_form_of(Hostile) is HostileMeta
    assert reflection.meta_form_of(Base) is type


def test_are_equal_ignores_eq_override(reflection: Reflection) -> None:
    """Ensure identity equality is unaffected by __eq__ overrides."""
    first = AlwaysEqual()
    second = AlwaysEqual()
    assert first == second
    assert not reflection.are_equal(first, second)
    assert reflection.are_equal(first, first)
    assert Hostile == Base
    assert not reflection.are_equal(Hostile, Base)


def test_naming_ignores_metaclass_overrides(reflection: Reflection) -> None:
    """Ensure naming reads the interpreter's slots, not spoofed attributes."""
    assert Hostile.__qualname__ == "spoofed"
    assert reflection.name_of(Hostile) == "Hostile"
    assert reflection.qualified_name_of(Hostile) == f"{__name__}.Hostile"
    assert reflection.ancestors_of(Hostile) == [Hostile, object]
    assert reflection.superclass_of(Hostile) is object


def test_qualified_names(reflection: Reflection) -> None:
    """Ensure absolute names are module anchored and nested names are kept."""
    assert reflection.qualified_name_of(Base) == f"{__name__}.Base"
    assert reflection.qualified_name_of(Outer.Inner) == f"{__name__}.Outer.Inner"
    assert reflection.qualified_name_of(Dynamic) == f"{__name__}.Dynamic"
    assert reflection.qualified_name_of(json.decoder) == "json.decoder"
    assert reflection.qualified_name_of(int) == "builtins.int"
    assert reflection.name_of(json.decoder) == "json.decoder"


def test_anonymous_constants_have_no_name(reflection: Reflection) -> None:
    """Ensure local classes and odd module names are reported as anonymous."""
    local = _local_class()
    assert reflection.name_of(local) is None
    assert reflection.qualified_name_of(local) is None
    assert reflection.qualified_name_of(types.ModuleType("<generated>")) is None
    assert reflection.name_of(Base()) is None


def test_constantize(reflection: Reflection) -> None:
    """Ensure dotted names resolve absolutely and relative to a namespace."""
    assert reflection.constantize("json.decoder.JSONDecoder") is json.decoder.JSONDecoder
    assert reflection.constantize(f"{__name__}:Outer.Inner") is Outer.Inner
    assert reflection.constantize("definitely_missing_module.Thing") is None
    assert reflection.constantize("JSONDecoder", namespace=json.decoder) is json.decoder.JSONDecoder
    assert reflection.constantize("Inner", namespace=Outer) is Outer.Inner
    assert reflection.constantize("Missing", namespace=Outer) is None


def test_ancestry(reflection: Reflection) -> None:
    """Ensure ancestry is linearized and inherited ancestry starts one level up."""
    assert reflection.ancestors_of(Child) == [Child, Base, object]
    assert reflection.inherited_ancestors_of(Child) == [Base, object]
    assert reflection.inherited_ancestors_of(Base) == [object]
    assert reflection.ancestors_of(json) == [json]
    assert reflection.inherited_ancestors_of(json) == [types.ModuleType, object]


def test_inherited_ancestry_keeps_every_base(reflection: Reflection) -> None:
    """Ensure multiple inheritance keeps all bases and the first declared base wins."""
    assert Solid.__base__ is SlotBase
    assert reflection.inherited_ancestors_of(Both) == [Base, Mixin, object]
    assert reflection.inherited_ancestors_of(Solid) == [Base, SlotBase, object]
    assert reflection.inherited_ancestors_of(object) == [object]
    assert reflection.superclass_of(Both) is Base
    assert reflection.superclass_of(Solid) is Base
    assert reflection.superclass_of(object) is None


def test_namespaces_are_own_only(reflection: Reflection) -> None:
    """Ensure namespace lookups skip ancestors and do not invoke descriptors."""
    assert "own" in reflection.namespace_of(Child)
    assert "inherited" not in reflection.namespace_of(Child)
    assert isinstance(reflection.own_attribute_of(Visibility, "prop"), property)
    assert reflection.own_attribute_of(Child, "inherited", "fallback") == "fallback"
    assert reflection.namespace_of(3) == {}


def test_constants_of(reflection: Reflection) -> None:
    """Ensure only classes and modules directly in a namespace are listed."""
    module = types.ModuleType("fake")
    module.Thing = Base  # type: ignore[attr-defined]
    module.value = 3  # type: ignore[attr-defined]
    module.sub = json  # type: ignore[attr-defined]
    assert reflection.constants_of(module) == ["Thing", "sub"]
    assert reflection.constants_of(Outer) == ["Inner"]


def test_method_of_bypasses_fallbacks(reflection: Reflection) -> None:
    """Ensure method lookup ignores metaclass __getattr__ fallbacks."""
    assert Hostile.missing == "ghost"
    assert reflection.method_of(Hostile, "missing") is None
    bound = reflection.method_of(Hostile(), "real")
    assert bound is not None
    assert bound() == "real"
    klass = reflection.method_of(Visibility, "klass")
    assert klass is not None
    assert klass.__self__ is Visibility


def test_instance_method_of(reflection: Reflection) -> None:
    """Ensure instance methods are found along the MRO and non-methods are not."""
    assert reflection.instance_method_of(Visibility, "public") is Visibility.__dict__["public"]
    assert reflection.instance_method_of(VisibilityChild, "public") is Visibility.__dict__["public"]
    assert reflection.instance_method_of(Visibility, "static") is None
    assert reflection.instance_method_of(Visibility, "klass") is None
    assert reflection.instance_method_of(Visibility, "prop") is None
    assert reflection.instance_method_of(Visibility, "missing") is None


def test_visibility_partitions(reflection: Reflection) -> None:
    """Ensure instance methods are split into public, protected and private names."""
    public = reflection.public_instance_methods_of(VisibilityChild)
    assert public == ["child", "public"]
    assert reflection.protected_instance_methods_of(VisibilityChild) == ["_protected"]
    assert reflection.private_instance_methods_of(VisibilityChild) == ["_Visibility__private"]
    assert reflection.private_instance_methods_of(_Underscored) == ["_Underscored__hidden"]


def test_instance_methods_of_is_own_public_and_protected(reflection: Reflection) -> None:
    """Ensure instance_methods_of excludes inherited, private and dunder names."""
    assert reflection.instance_methods_of(Visibility) == ["public", "_protected"]
    assert reflection.instance_methods_of(VisibilityChild) == ["child"]
    assert reflection.instance_methods_of(_Underscored) == []


def test_parameters_of(reflection: Reflection) -> None:
    """Ensure parameter shapes come from the unwrapped callable."""
    shape = reflection.parameters_of(Visibility.__dict__["public"])
    assert shape is not None
    assert list(shape.parameters) == ["self"]


def test_captured_primitives_are_independent() -> None:
    """Ensure a facade can be built over freshly captured primitives."""
    primitives = capture_primitives()
    facade = Reflection(primitives)
    assert facade.primitives is primitives
    assert facade.qualified_name_of(Base) == f"{__name__}.Base"
    with pytest.raises(AttributeError):
        primitives.identical = lambda left, right: True  # type: ignore[misc]
