"""Detached bindings of core object-model operations.

The bindings are captured when this module is first imported, before inspected
code has a chance to monkey-patch builtins or define overriding metaclass
properties. Each binding takes its subject as an explicit argument and reads
the interpreter's own slots, so ``__class__``, ``__eq__``, ``__getattr__`` or
metaclass-level ``__name__`` overrides on the subject do not affect it.
"""

from __future__ import annotations

import builtins
import gc
import operator
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import ModuleType
from typing import Any


@dataclass(frozen=True)
class CapturedPrimitives:
    """Immutable set of detached reflection bindings."""

    class_of: Callable[[object], type]
    qualname_of: Callable[[type], str]
    module_name_of: Callable[[type], object]
    mro_of: Callable[[type], tuple[type, ...]]
    bases_of: Callable[[type], tuple[type, ...]]
    subclasses_of: Callable[[type], list[type]]
    class_dict_of: Callable[[type], Mapping[str, Any]]
    object_dict_of: Callable[[object], dict[str, Any]]
    class_getattribute: Callable[[type, str], Any]
    object_getattribute: Callable[[object, str], Any]
    identical: Callable[[object, object], bool]
    identity_of: Callable[[object], int]
    heap_objects: Callable[[], list[object]]
    module_type: type[ModuleType]


def capture_primitives() -> CapturedPrimitives:
    """Capture the original implementations of the object-model operations.

    Returns
    -------
    CapturedPrimitives
        Frozen bindings for use by the reflection facade.
    """
    type_slots = type.__dict__
    return CapturedPrimitives(
        class_of=builtins.type,
        qualname_of=type_slots["__qualname__"].__get__,
        module_name_of=type_slots["__module__"].__get__,
        mro_of=type_slots["__mro__"].__get__,
        bases_of=type_slots["__bases__"].__get__,
        subclasses_of=type_slots["__subclasses__"],
        class_dict_of=type_slots["__dict__"].__get__,
        object_dict_of=lambda obj, _get=object.__getattribute__: _get(obj, "__dict__"),
        class_getattribute=type.__getattribute__,
        object_getattribute=object.__getattribute__,
        identical=operator.is_,
        identity_of=builtins.id,
        heap_objects=gc.get_objects,
        module_type=ModuleType,
    )


PRIMITIVES = capture_primitives()

__all__ = ["PRIMITIVES", "CapturedPrimitives", "capture_primitives"]
