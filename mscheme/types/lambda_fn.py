"""Procedure values: builtin operators and user closures."""

from __future__ import annotations

from enum import Enum
from io import StringIO

from mscheme.types.environment import Environment
from mscheme.types.symbol import Symbol
from mscheme.types.values import Value, duplicate


class Op(Enum):
    """The closed set of builtin operator identities."""

    # Special forms
    QUOTE = "quote"
    IF = "if"
    DEFINE = "define"
    LAMBDA = "lambda"
    SET = "set!"
    SET_CAR = "set-car!"
    SET_CDR = "set-cdr!"
    AND = "and"
    OR = "or"
    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MAX = "max"
    MIN = "min"
    ABS = "abs"
    # Comparison
    EQ = "="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    # Predicates
    IS_PAIR = "pair?"
    IS_NULL = "null?"
    IS_LIST = "list?"
    IS_NUMBER = "number?"
    IS_BOOLEAN = "boolean?"
    IS_SYMBOL = "symbol?"
    NOT = "not"
    # Lists
    LIST = "list"
    CONS = "cons"
    CAR = "car"
    CDR = "cdr"
    LIST_REF = "list-ref"
    LIST_TAIL = "list-tail"

    @property
    def tag(self) -> str:
        if self is Op.LAMBDA:
            return CLOSURE_TAG
        return f"[{self.value}]"


CLOSURE_TAG = "[create-lambda]"


class Procedure(Value):
    """Anything that may appear at the head of an application."""

    __slots__ = ()

    @property
    def tag(self) -> str:
        raise NotImplementedError


class Builtin(Procedure):
    __slots__ = ("op",)

    def __init__(self, op: Op):
        super().__init__()
        self.op = op

    @property
    def tag(self) -> str:
        return self.op.tag

    def _duplicate(self, heap, active):
        return heap.make(Builtin, self.op)

    def __repr__(self):
        return f"Builtin({self.op.value!r})"


class Closure(Procedure):
    """A user procedure with formal parameters, body forms and captured env."""

    __slots__ = ("params", "body", "env")

    def __init__(self, params: list[Symbol], body: list[Value], env: Environment | None):
        super().__init__()
        self.params: list[Symbol] = params
        self.body: list[Value] = body
        self.env: Environment | None = env

    @property
    def tag(self) -> str:
        return CLOSURE_TAG

    def children(self):
        yield from self.params
        yield from self.body
        if self.env is not None:
            yield self.env

    def _duplicate(self, heap, active):
        copy = heap.make(Closure, [], [], None)
        active[id(self)] = copy
        copy.params = [duplicate(p, heap, active) for p in self.params]
        copy.body = [duplicate(e, heap, active) for e in self.body]
        copy.env = duplicate(self.env, heap, active) if self.env is not None else None
        del active[id(self)]
        return copy

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(lambda (")
            buffer.write(" ".join(str(p) for p in self.params))
            buffer.write(") ...)")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)
