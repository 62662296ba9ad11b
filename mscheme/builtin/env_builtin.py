"""Built-in procedures for the mscheme runtime environment.

This module defines arithmetic, comparison, predicates and list processing,
the operator table that dispatches every Op, and the registration helper
that seeds a global environment.

Every procedure here is an ordinary (eager) one: it evaluates all of its
operands left to right before acting on them. Special forms live in
mscheme.evaluation.special_forms.
"""
from __future__ import annotations

import operator
from functools import wraps
from typing import Callable

from mscheme import EvaluatorFn, SExpression, SchemeValue
from mscheme.errors import SchemeRuntimeError
from mscheme.evaluation.apply import evaluate_all, from_list, require_arity, require_at_least, to_list
from mscheme.evaluation.special_forms import SPECIAL_FORMS
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap
from mscheme.types.lambda_fn import Builtin, Op
from mscheme.types.nil import Nil
from mscheme.types.symbol import Symbol
from mscheme.types.values import (
    INT64_MAX,
    INT64_MIN,
    Boolean,
    Integer,
    Pair,
    is_proper_list,
    is_truthy,
    wrap_i64,
)

Handler = Callable[[SExpression, Environment, Heap, EvaluatorFn], SchemeValue]
EagerFn = Callable[[list[SchemeValue], Heap], SchemeValue]


def eager(fn: EagerFn) -> Handler:
    """Adapt a procedure over evaluated values into an operator handler."""

    @wraps(fn)
    def handler(tail, env, heap, evaluate_fn):
        return fn(evaluate_all(to_list(tail), env, heap, evaluate_fn), heap)

    return handler


def integers(args: list[SchemeValue], name: str) -> list[int]:
    for a in args:
        if not isinstance(a, Integer):
            raise SchemeRuntimeError(f"All arguments to {name} must be numbers")
    return [a.value for a in args]


def condition(heap: Heap, value: bool) -> Boolean:
    return heap.make(Boolean, value)


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    if b == 0:
        raise SchemeRuntimeError("Division by zero")
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


# -------------------------------
# Arithmetic
# -------------------------------
def fold(name: str, fn: Callable[[int, int], int], neutral: int, min_args: int = 0) -> EagerFn:
    """Left fold starting from `neutral` (+, *, max, min)."""

    def proc(args, heap):
        require_at_least(args, min_args, name)
        result = neutral
        for x in integers(args, name):
            result = wrap_i64(fn(result, x))
        return heap.make(Integer, result)

    proc.__name__ = f"fold_{name}"
    return proc


def fold_without_neutral(name: str, fn: Callable[[int, int], int], neutral: int) -> EagerFn:
    """One operand: (neutral op a); more: left fold from the first operand (-, /)."""

    def proc(args, heap):
        require_at_least(args, 1, name)
        values = integers(args, name)
        if len(values) == 1:
            return heap.make(Integer, wrap_i64(fn(neutral, values[0])))
        result = values[0]
        for x in values[1:]:
            result = wrap_i64(fn(result, x))
        return heap.make(Integer, result)

    proc.__name__ = f"fold_{name}"
    return proc


def abs_(args: list[SchemeValue], heap: Heap) -> SchemeValue:
    """(abs n) for exactly one integer."""
    require_arity(args, 1, "abs")
    (n,) = integers(args, "abs")
    return heap.make(Integer, wrap_i64(abs(n)))


# -------------------------------
# Comparison
# -------------------------------
def chain(name: str, test: Callable[[int, int], bool]) -> EagerFn:
    """Chainable comparison: #t if `test` holds for every adjacent pair of operands."""

    def proc(args, heap):
        values = integers(args, name)
        return condition(heap, all(test(a, b) for a, b in zip(values, values[1:])))

    proc.__name__ = f"chain_{name}"
    return proc


# -------------------------------
# Predicates
# -------------------------------
def predicate(name: str, test: Callable[[SchemeValue], bool]) -> EagerFn:
    def proc(args, heap):
        require_arity(args, 1, name)
        return condition(heap, test(args[0]))

    proc.__name__ = f"is_{name.rstrip('?')}"
    return proc


def logical_not(args: list[SchemeValue], heap: Heap) -> SchemeValue:
    """Logical NOT for a single value; only #f is false."""
    require_arity(args, 1, "not")
    return condition(heap, not is_truthy(args[0]))


# -------------------------------
# List operations
# -------------------------------
def list_builtin(args: list[SchemeValue], heap: Heap) -> SchemeValue:
    return from_list(args, heap)


def cons(args: list[SchemeValue], heap: Heap) -> SchemeValue:
    require_arity(args, 2, "cons")
    return heap.make(Pair, args[0], args[1])


def _require_pair(value: SchemeValue, name: str) -> Pair:
    if not isinstance(value, Pair):
        raise SchemeRuntimeError(f"{name} requires a pair")
    return value


def car(args: list[SchemeValue], heap: Heap) -> SchemeValue:
    require_arity(args, 1, "car")
    return _require_pair(args[0], "car").first


def cdr(args: list[SchemeValue], heap: Heap) -> SchemeValue:
    require_arity(args, 1, "cdr")
    return _require_pair(args[0], "cdr").second


def _index(value: SchemeValue, name: str) -> int:
    if not isinstance(value, Integer):
        raise SchemeRuntimeError(f"{name} requires an integer index")
    return value.value


def list_ref(args: list[SchemeValue], heap: Heap) -> SchemeValue:
    """(list-ref lst k) => k-th element of the proper list lst."""
    require_arity(args, 2, "list-ref")
    items = to_list(args[0])
    k = _index(args[1], "list-ref")
    if not 0 <= k < len(items):
        raise SchemeRuntimeError(f"list-ref index {k} out of range")
    return items[k]


def list_tail(args: list[SchemeValue], heap: Heap) -> SchemeValue:
    """(list-tail lst k) => lst with its first k pairs dropped."""
    require_arity(args, 2, "list-tail")
    current = args[0]
    for _ in range(_index(args[1], "list-tail")):
        current = _require_pair(current, "list-tail").second
    return current


# -------------------------------
# Operator table and registration
# -------------------------------
PROCEDURES: dict[Op, EagerFn] = {
    Op.ADD: fold("+", operator.add, 0),
    Op.MUL: fold("*", operator.mul, 1),
    Op.SUB: fold_without_neutral("-", operator.sub, 0),
    Op.DIV: fold_without_neutral("/", truncating_div, 1),
    Op.MAX: fold("max", max, INT64_MIN, min_args=1),
    Op.MIN: fold("min", min, INT64_MAX, min_args=1),
    Op.ABS: abs_,
    Op.EQ: chain("=", operator.eq),
    Op.LT: chain("<", operator.lt),
    Op.GT: chain(">", operator.gt),
    Op.LE: chain("<=", operator.le),
    Op.GE: chain(">=", operator.ge),
    Op.IS_PAIR: predicate("pair?", lambda v: isinstance(v, Pair)),
    Op.IS_NULL: predicate("null?", lambda v: v is Nil),
    Op.IS_LIST: predicate("list?", is_proper_list),
    Op.IS_NUMBER: predicate("number?", lambda v: isinstance(v, Integer)),
    Op.IS_BOOLEAN: predicate("boolean?", lambda v: isinstance(v, Boolean)),
    Op.IS_SYMBOL: predicate("symbol?", lambda v: isinstance(v, Symbol)),
    Op.NOT: logical_not,
    Op.LIST: list_builtin,
    Op.CONS: cons,
    Op.CAR: car,
    Op.CDR: cdr,
    Op.LIST_REF: list_ref,
    Op.LIST_TAIL: list_tail,
}

OPERATORS: dict[Op, Handler] = {
    **SPECIAL_FORMS,
    **{op: eager(fn) for op, fn in PROCEDURES.items()},
}

_missing = set(Op) - OPERATORS.keys()
if _missing:
    raise ImportError(f"No handler for operators: {sorted(op.value for op in _missing)}")


def register(env: Environment, heap: Heap) -> None:
    """Bind every operator name in `env` to its Builtin value."""
    env.update({op.value: heap.make(Builtin, op) for op in Op})
