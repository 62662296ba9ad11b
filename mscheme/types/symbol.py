from __future__ import annotations
import sys

from mscheme.types.values import Value


class Symbol(Value):
    __slots__ = ("name",)

    def __init__(self, name: str):
        super().__init__()
        # Intern so environment lookups hash and compare quickly
        self.name = sys.intern(name)

    def _duplicate(self, heap, active):
        return heap.make(Symbol, self.name)

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name
