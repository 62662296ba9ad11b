from __future__ import annotations


class NilType:
    """The empty list. A singleton that lives outside the heap."""

    __slots__ = ()

    def __repr__(self): return "()"
    def __bool__(self): return False

    def children(self):
        return iter(())


Nil = NilType()
