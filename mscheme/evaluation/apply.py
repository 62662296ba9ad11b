"""Application engine for mscheme.

This module centralizes procedure application for the interpreter:
- Dispatch of Builtin values through the operator table.
- Closure creation and invocation with the copy-on-call contract: every
  evaluated argument and the whole body are duplicated before use, so a call
  can never alias structures owned by its caller.
- Operand list helpers shared by special forms and builtins.

Keeping this logic in one place prevents duplication between the evaluator,
special forms, and builtin helpers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mscheme import EvaluatorFn, SExpression, SchemeValue
from mscheme.errors import SchemeRuntimeError, SchemeSyntaxError
from mscheme.types.environment import Environment
from mscheme.types.lambda_fn import Builtin, Closure, Procedure
from mscheme.types.nil import Nil
from mscheme.types.symbol import Symbol
from mscheme.types.values import Pair, duplicate, iter_chain

if TYPE_CHECKING:
    from mscheme.types.heap import Heap


def to_list(tail: SExpression, error=SchemeRuntimeError) -> list[SExpression]:
    """Unpack a proper list into a Python list; `error` if it is improper or cyclic."""
    items = []
    end = tail
    for pair in iter_chain(tail):
        items.append(pair.first)
        end = pair.second
    if end is not Nil:
        raise error("Must be proper list")
    return items


def from_list(items: list[SchemeValue], heap: Heap, tail: SchemeValue = Nil) -> SchemeValue:
    """Build a list of `items` ending in `tail` (a proper list by default)."""
    result = tail
    for item in reversed(items):
        result = heap.make(Pair, item, result)
    return result


def require_arity(args: list, count: int, name: str, error=SchemeRuntimeError) -> None:
    if len(args) != count:
        raise error(f"{name} requires {count} argument(s), but got {len(args)}")


def require_at_least(args: list, count: int, name: str, error=SchemeRuntimeError) -> None:
    if len(args) < count:
        raise error(f"{name} requires at least {count} argument(s), but got {len(args)}")


def evaluate_all(
    exprs: list[SExpression], env: Environment, heap: Heap, evaluate_fn: EvaluatorFn
) -> list[SchemeValue]:
    """Evaluate operands left to right."""
    return [evaluate_fn(e, env, heap) for e in exprs]


def make_closure(
    params: list[SExpression], body: list[SExpression], env: Environment, heap: Heap
) -> Closure:
    """Create a Closure over `params`/`body` defined in `env`.

    The closure captures a private empty frame whose parent is `env`, so a
    duplicated closure copies only that frame and keeps sharing the defining
    scope.
    """
    for p in params:
        if not isinstance(p, Symbol):
            raise SchemeSyntaxError("Symbols expected in parameter list")
    captured = heap.make(Environment, env)
    return heap.make(Closure, list(params), list(body), captured)


def apply_closure(
    fn: Closure,
    tail: SExpression,
    env: Environment,
    heap: Heap,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue:
    """Invoke a closure on the unevaluated operand list `tail`.

    Operands are evaluated in the caller's `env`, duplicated, and bound in a
    fresh child of the closure's captured environment. The body sequence is
    duplicated as a whole and then evaluated in order; the last value is the
    result.
    """
    exprs = to_list(tail)
    require_arity(exprs, len(fn.params), "lambda")
    values = [duplicate(v, heap) for v in evaluate_all(exprs, env, heap, evaluate_fn)]
    frame = heap.make(Environment, fn.env)
    for param, value in zip(fn.params, values):
        frame.define(param.name, value)
    body = [duplicate(e, heap) for e in fn.body]
    result: SchemeValue = Nil
    for expr in body:
        result = evaluate_fn(expr, frame, heap)
    return result


def apply(
    head: Procedure,
    tail: SExpression,
    env: Environment,
    heap: Heap,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue:
    """Apply either a Builtin or a Closure to an unevaluated operand list.

    - For Builtin, dispatch through the operator table; each operator decides
      how (and whether) to evaluate its operands.
    - For Closure, defer to apply_closure.
    - Otherwise, raise a runtime error.
    """
    if isinstance(head, Builtin):
        # Imported here: the operator table itself imports this module.
        from mscheme.builtin.env_builtin import OPERATORS
        return OPERATORS[head.op](tail, env, heap, evaluate_fn)
    elif isinstance(head, Closure):
        return apply_closure(head, tail, env, heap, evaluate_fn)
    else:
        raise SchemeRuntimeError(f"Cannot apply non-procedure {head!r}")
