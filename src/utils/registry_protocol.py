"""Keyed registry primitives shared by livestub registries.

Domain registries (compilers today) wrap :class:`MutableRegistry` rather than
subclass it, and add their own validation on top of the plain key/value store.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class MutableRegistry[K, V]:
    """Insertion-ordered key/value store with guarded rebinding."""

    _entries: dict[K, V] = field(default_factory=dict)

    def register(self, key: K, value: V, *, overwrite: bool = False) -> None:
        """Bind ``value`` to ``key``.

        Raises:
            ValueError: If ``key`` is bound already and ``overwrite`` is false.
        """
        if not overwrite and key in self._entries:
            msg = f"{key!r} is already registered; pass overwrite=True to replace it."
            raise ValueError(msg)
        self._entries[key] = value

    def get(self, key: K) -> V | None:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> Iterator[tuple[K, V]]:
        """Yield ``(key, value)`` pairs in registration order."""
        yield from self._entries.items()


__all__ = ["MutableRegistry"]
