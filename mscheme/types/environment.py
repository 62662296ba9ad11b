"""Runtime environment for mscheme.

The Environment stores bindings of symbol names to heap values and supports
nested scopes via an `outer` link. Environments are themselves heap values:
closures capture them, the collector traces through them, and the global
environment is the collector's root.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from mscheme import SchemeValue
from mscheme.errors import SchemeNameError
from mscheme.types.values import Value, duplicate


class Environment(Value):
    """Hierarchical mapping from names to values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        super().__init__()
        self.vars: dict[str, SchemeValue] = {}
        self.outer: Environment | None = outer

    def children(self):
        if self.outer is not None:
            yield self.outer
        yield from self.vars.values()

    def define(self, name: str, value: SchemeValue) -> None:
        """Bind `name` to `value` in this frame, shadowing any outer binding."""
        self.vars[name] = value

    def find(self, name: str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def set(self, name: str, value: SchemeValue) -> SchemeValue:
        """Overwrite the existing binding for `name` wherever it lives in the chain.

        Returns the previous value. Raises SchemeNameError if `name` is unbound.
        """
        env = self.find(name)
        if env is None:
            raise SchemeNameError(f"{name} not found")
        previous = env.vars[name]
        env.vars[name] = value
        return previous

    def lookup(self, name: str) -> SchemeValue:
        env = self.find(name)
        if env is None:
            raise SchemeNameError(f"{name} not found")
        return env.vars[name]

    def update(self, mapping: dict[str, SchemeValue]) -> None:
        """Bulk-define a mapping of name -> value in the current frame."""
        for k, v in mapping.items():
            self.vars[k] = v

    def _duplicate(self, heap, active):
        # A copy shares the parent; only local bindings are duplicated.
        copy = heap.make(Environment, self.outer)
        active[id(self)] = copy
        for k, v in self.vars.items():
            copy.vars[k] = duplicate(v, heap, active)
        del active[id(self)]
        return copy

    def _write_vars(self, buffer: StringIO) -> None:
        buffer.write("{")
        buffer.write(", ".join(self.vars))
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Chain representation (names only; values may be cyclic)."""
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            env = self
            chain = []
            while env is not None:
                env_buf = StringIO()
                env._write_vars(env_buf)
                chain.append(env_buf.getvalue())
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
