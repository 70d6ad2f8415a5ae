"""Whole-process queries over live classes, modules and instances.

Scans run against the current interpreter state, so classes created at any
point before the scan, including ones built with ``type(...)`` at runtime, are
found. Costs are proportional to the live heap (``gc`` strategy) or to the
size of the subclass graph (``subclasses`` strategy); both are meant to run
once per compiler pass over a quiescent process, never on a hot path.
"""

from __future__ import annotations

import logging
import sys
from collections import deque
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from types import ModuleType

    from reflection.facade import Reflection

logger = logging.getLogger(__name__)


class HeapScanStrategy(StrEnum):
    """How descendants of a class are discovered."""

    SUBCLASSES = "subclasses"
    GC = "gc"


class HeapScanner:
    """Live-object queries bound to one reflection facade."""

    def __init__(
        self,
        reflection: Reflection,
        *,
        strategy: HeapScanStrategy = HeapScanStrategy.SUBCLASSES,
    ) -> None:
        self._reflection = reflection
        self._strategy = HeapScanStrategy(strategy)

    @property
    def reflection(self) -> Reflection:
        return self._reflection

    @property
    def strategy(self) -> HeapScanStrategy:
        return self._strategy

    def descendants_of[T](self, root: type[T]) -> list[type[T]]:
        """Return every live subclass of ``root``, transitively.

        The result never contains ``root`` itself or any metaclass.

        Parameters
        ----------
        root
            Class whose descendants to find.

        Returns
        -------
        list[type[T]]
            Live descendants, deduplicated by identity.
        """
        if self._strategy is HeapScanStrategy.GC:
            found = self._descendants_from_heap(root)
        else:
            found = self._descendants_from_subclasses(root)
        reflection = self._reflection
        return [
            cls
            for cls in found
            if not reflection.are_equal(cls, root) and not reflection.is_meta_form(cls)
        ]

    def _descendants_from_subclasses(self, root: type) -> list[type]:
        subclasses_of = self._reflection.primitives.subclasses_of
        seen: set[int] = set()
        ordered: list[type] = []
        queue: deque[type] = deque([root])
        while queue:
            current = queue.popleft()
            for child in subclasses_of(current):
                key = self._reflection.object_id_of(child)
                if key in seen:
                    continue
                seen.add(key)
                ordered.append(child)
                queue.append(child)
        return ordered

    def _descendants_from_heap(self, root: type) -> list[type]:
        reflection = self._reflection
        return [
            obj
            for obj in reflection.primitives.heap_objects()
            if reflection.is_class(obj)
            and any(reflection.are_equal(ancestor, root) for ancestor in reflection.ancestors_of(obj))
        ]

    def attached_class_of(self, meta: type) -> type | None:
        """Return the unique live class whose meta-form is ``meta``.

        Returns
        -------
        type | None
            Owning class, or ``None`` when no live class uses ``meta`` or when
            several classes share it.
        """
        reflection = self._reflection
        owners = [
            obj
            for obj in reflection.primitives.heap_objects()
            if reflection.is_class(obj) and reflection.are_equal(reflection.meta_form_of(obj), meta)
        ]
        if len(owners) == 1:
            return owners[0]
        if owners:
            logger.debug(
                "Meta-form %r is shared by %d classes; no unique owner",
                meta,
                len(owners),
            )
        return None

    def instances_of[T](self, cls: type[T]) -> list[T]:
        """Return live objects whose dynamic class is ``cls`` or a descendant."""
        reflection = self._reflection
        wanted = {reflection.object_id_of(cls)}
        wanted.update(reflection.object_id_of(sub) for sub in self.descendants_of(cls))
        return [
            obj
            for obj in reflection.primitives.heap_objects()
            if reflection.object_id_of(reflection.class_of(obj)) in wanted
        ]

    def all_classes(self) -> list[type]:
        """Return every live class except metaclasses."""
        return [object, *self.descendants_of(object)]

    def all_modules(self) -> list[ModuleType]:
        """Return every imported module."""
        reflection = self._reflection
        modules: list[Any] = list(sys.modules.values())
        return [module for module in modules if module is not None and reflection.is_module(module)]


__all__ = ["HeapScanStrategy", "HeapScanner"]
