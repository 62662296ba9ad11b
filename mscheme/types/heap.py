"""Heap: owner of every mscheme value, with a mark-and-sweep collector."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypeVar

from mscheme.types.nil import Nil
from mscheme.types.values import Value

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=Value)


@dataclass
class HeapStats:
    allocations: int = 0
    collections: int = 0
    reclaimed: int = 0


class Heap:
    """Arena of live values keyed by a stable handle (the value's id).

    Values refer to each other directly; those references do not keep a value
    registered. Only `collect` removes values, and only when they are not
    reachable from the root it is given.
    """

    def __init__(self):
        self._objects: dict[int, Value] = {}
        self.stats = HeapStats()

    def make(self, kind: type[V], *payload) -> V:
        obj = kind(*payload)
        self._objects[id(obj)] = obj
        self.stats.allocations += 1
        return obj

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, obj) -> bool:
        return self._objects.get(id(obj)) is obj

    def mark(self, root: Value) -> None:
        """Mark every value reachable from `root` (explicit work stack)."""
        stack = [root]
        while stack:
            obj = stack.pop()
            if obj is Nil or obj.marked:
                continue
            obj.marked = True
            stack.extend(obj.children())

    def collect(self, root: Value) -> int:
        """Run one full mark-and-sweep pass rooted at `root`.

        Returns the number of values reclaimed.
        """
        for obj in self._objects.values():
            obj.marked = False
        self.mark(root)
        dead = [key for key, obj in self._objects.items() if not obj.marked]
        for key in dead:
            del self._objects[key]
        self.stats.collections += 1
        self.stats.reclaimed += len(dead)
        logger.debug("collected %d values, %d live", len(dead), len(self._objects))
        return len(dead)

    def clear(self) -> None:
        self._objects.clear()
