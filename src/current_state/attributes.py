"""Process-wide current state with runtime-generated accessors.

Subclasses of :class:`CurrentAttributes` declare attributes at runtime, either
with the ``attributes=`` class keyword or by calling
:meth:`CurrentAttributes.attribute`. Each declared attribute gets a generated
reader and mutator, and the generated method names are recorded in the
class's own ``__generated_accessors__`` field (``"name"`` and ``"name="``).

Reads and writes on the class are proxied to a lazily created singleton
instance, as are calls to public and protected methods authored on the
subclass (dunder and name-mangled methods stay ordinary)::

    class Current(CurrentAttributes, attributes=("account",)):
        def greeting(self) -> str:
            return f"hello {self.account}"

    Current.account = "acme"
    Current.greeting()  # "hello acme"
"""

from __future__ import annotations

import functools
import inspect
import types
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, Final, Self

GENERATED_ACCESSORS_ATTR: Final = "__generated_accessors__"
ASSIGNMENT_MARKER: Final = "="
RESTRICTED_ATTRIBUTE_NAMES: Final = frozenset(
    {"attribute", "clear_all", "instance", "reset", "reset_all", "set"},
)

_UNSET: Final = object()
_VALUES_ATTR: Final = "_attribute_values"
_INSTANCES: dict[type, CurrentAttributes] = {}


def _values_of(obj: CurrentAttributes) -> dict[str, object]:
    # Created on first use so subclasses may skip super().__init__().
    return vars(obj).setdefault(_VALUES_ATTR, {})


class _AttributeAccessor:
    """Data descriptor backing one generated attribute."""

    def __init__(self, name: str, default: object) -> None:
        self.name = name
        self.default = default

    def __get__(self, obj: CurrentAttributes | None, owner: type[CurrentAttributes]) -> Any:
        target = owner.instance() if obj is None else obj
        values = _values_of(target)
        if self.name not in values:
            if self.default is None:
                return None
            # Callable defaults are factories evaluated once per instance.
            values[self.name] = self.default() if callable(self.default) else self.default
        return values[self.name]

    def __set__(self, obj: CurrentAttributes, value: object) -> None:
        _values_of(obj)[self.name] = value


class _SingletonMethod:
    """Authored method callable on instances and, via the singleton, on the class."""

    def __init__(self, func: Callable[..., Any]) -> None:
        functools.update_wrapper(self, func)

    def __get__(self, obj: object | None, owner: type[CurrentAttributes]) -> Any:
        target = owner.instance() if obj is None else obj
        return types.MethodType(self.__wrapped__, target)


def generated_readers(cls: type) -> frozenset[str]:
    """Return reader names generated on ``cls`` or any of its ancestors."""
    readers: set[str] = set()
    for ancestor in cls.__mro__:
        for name in ancestor.__dict__.get(GENERATED_ACCESSORS_ATTR, ()):
            if not name.endswith(ASSIGNMENT_MARKER):
                readers.add(name)
    return frozenset(readers)


class CurrentAttributesMeta(type):
    """Routes class-level writes of generated attributes to the singleton."""

    def __setattr__(cls, name: str, value: object) -> None:
        if name in generated_readers(cls):
            setattr(cls.instance(), name, value)
            return
        super().__setattr__(name, value)


class CurrentAttributes(metaclass=CurrentAttributesMeta):
    """Base class for process-wide current state."""

    __generated_accessors__: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, *, attributes: tuple[str, ...] = (), **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        type.__setattr__(cls, GENERATED_ACCESSORS_ATTR, ())
        mangled_prefix = f"_{cls.__name__.lstrip('_')}__"
        for name, value in list(cls.__dict__.items()):
            if inspect.isfunction(value) and not name.startswith(("__", mangled_prefix)):
                type.__setattr__(cls, name, _SingletonMethod(value))
        if attributes:
            cls.attribute(*attributes)

    @classmethod
    def attribute(cls, *names: str, default: object = None) -> None:
        """Generate a reader and a mutator for each name.

        Raises:
            ValueError: If a name is not a public identifier or is reserved.
        """
        for name in names:
            if not name.isidentifier() or name.startswith("_"):
                msg = f"Attribute name {name!r} must be a public identifier."
                raise ValueError(msg)
            if name in RESTRICTED_ATTRIBUTE_NAMES:
                msg = f"Restricted attribute names: {', '.join(sorted(RESTRICTED_ATTRIBUTE_NAMES))}"
                raise ValueError(msg)
        generated = list(cls.__dict__.get(GENERATED_ACCESSORS_ATTR, ()))
        for name in names:
            type.__setattr__(cls, name, _AttributeAccessor(name, default))
            for method in (name, f"{name}{ASSIGNMENT_MARKER}"):
                if method not in generated:
                    generated.append(method)
        type.__setattr__(cls, GENERATED_ACCESSORS_ATTR, tuple(generated))

    @classmethod
    def instance(cls) -> Self:
        """Return the singleton instance, creating it on first use."""
        current = _INSTANCES.get(cls)
        if current is None:
            current = cls()
            _INSTANCES[cls] = current
        return current  # type: ignore[return-value]

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next access starts from defaults."""
        _INSTANCES.pop(cls, None)

    @staticmethod
    def reset_all() -> None:
        """Drop the singletons of every subclass."""
        _INSTANCES.clear()

    @classmethod
    @contextmanager
    def set(cls, **values: object) -> Iterator[Self]:
        """Temporarily assign attributes, restoring previous values on exit.

        Raises:
            AttributeError: If a keyword is not a generated attribute.
        """
        readers = generated_readers(cls)
        unknown = sorted(name for name in values if name not in readers)
        if unknown:
            msg = f"{cls.__qualname__} has no attributes {unknown}"
            raise AttributeError(msg)
        current = cls.instance()
        state = _values_of(current)
        previous = {name: state.get(name, _UNSET) for name in values}
        state.update(values)
        try:
            yield current
        finally:
            for name, value in previous.items():
                if value is _UNSET:
                    state.pop(name, None)
                else:
                    state[name] = value


__all__ = [
    "ASSIGNMENT_MARKER",
    "GENERATED_ACCESSORS_ATTR",
    "RESTRICTED_ATTRIBUTE_NAMES",
    "CurrentAttributes",
    "CurrentAttributesMeta",
    "generated_readers",
]
