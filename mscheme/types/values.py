"""Heap value variants for mscheme.

Every runtime value (and every node of a parsed expression tree) is an
instance of a Value subclass allocated through a Heap. Fields that refer to
other values are non-owning handles: the collector, not the referrer, decides
when a value dies.

This module also hosts the duplication protocol. `duplicate` deep-copies a
value graph into fresh heap allocations. A reference back to a value that is
still being copied resolves to that value's new copy, which is what lets
self-referencing pairs (and larger cycles) duplicate in finite time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from mscheme.types.nil import Nil, NilType

if TYPE_CHECKING:
    from mscheme.types.heap import Heap

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def wrap_i64(n: int) -> int:
    """Reduce `n` into the signed 64-bit range (two's complement wrap)."""
    return ((n - INT64_MIN) % 2**64) + INT64_MIN


class Value:
    __slots__ = ("marked",)

    def __init__(self):
        self.marked = False

    def children(self) -> Iterator[Value | NilType]:
        """Values directly reachable from this one (used by the collector)."""
        return iter(())

    def _duplicate(self, heap: Heap, active: dict[int, Value]) -> Value:
        raise NotImplementedError


class Integer(Value):
    __slots__ = ("value",)

    def __init__(self, value: int):
        super().__init__()
        self.value = value

    def _duplicate(self, heap, active):
        return heap.make(Integer, self.value)

    def __repr__(self):
        return f"Integer({self.value})"


class Boolean(Value):
    __slots__ = ("value",)

    def __init__(self, value: bool):
        super().__init__()
        self.value = value

    def _duplicate(self, heap, active):
        return heap.make(Boolean, self.value)

    def __repr__(self):
        return f"Boolean({self.value})"


class Pair(Value):
    __slots__ = ("first", "second")

    def __init__(self, first: Value | NilType = Nil, second: Value | NilType = Nil):
        super().__init__()
        self.first = first
        self.second = second

    def children(self):
        yield self.first
        yield self.second

    def _duplicate(self, heap, active):
        # Walk the `second` chain iteratively; every pair on the chain stays
        # in `active` until the whole chain is copied.
        head = heap.make(Pair)
        chain: list[int] = []
        src, dst = self, head
        while True:
            active[id(src)] = dst
            chain.append(id(src))
            dst.first = duplicate(src.first, heap, active)
            nxt = src.second
            if isinstance(nxt, Pair) and id(nxt) not in active:
                dst.second = heap.make(Pair)
                src, dst = nxt, dst.second
                continue
            dst.second = duplicate(nxt, heap, active)
            break
        for key in chain:
            del active[key]
        return head

    def __repr__(self):
        return f"Pair(<{type(self.first).__name__}>, <{type(self.second).__name__}>)"


def duplicate(value, heap: Heap, active: dict[int, Value] | None = None):
    """Return an independent copy of `value` allocated on `heap`.

    `active` maps id(original) -> copy for values whose duplication is in
    progress further up the current traversal.
    """
    if value is Nil:
        return value
    if active is None:
        active = {}
    else:
        copy = active.get(id(value))
        if copy is not None:
            return copy
    return value._duplicate(heap, active)


def is_truthy(value) -> bool:
    """Only the boolean #f is false; everything else, 0 and () included, is true."""
    return not (isinstance(value, Boolean) and value.value is False)


def iter_chain(value) -> Iterator[Pair]:
    """Yield the pairs of a `second` chain, stopping before a repeated pair."""
    seen: set[int] = set()
    while isinstance(value, Pair) and id(value) not in seen:
        seen.add(id(value))
        yield value
        value = value.second


def chain_end(value):
    """Return whatever terminates the `second` chain starting at `value`.

    For a cyclic chain the first repeated pair is returned.
    """
    last = value
    for pair in iter_chain(value):
        last = pair.second
    return last


def is_proper_list(value) -> bool:
    return chain_end(value) is Nil
