"""Core evaluator for the mscheme interpreter.

Dispatches an expression to itself, an environment lookup, or an
application. Applications evaluate only the head; the duplicated procedure
receives the raw operand list and decides how to evaluate it, which is what
makes special forms ordinary values in the global environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mscheme import SExpression, SchemeValue
from mscheme.errors import SchemeRuntimeError
from mscheme.evaluation.apply import apply
from mscheme.types.environment import Environment
from mscheme.types.lambda_fn import Procedure
from mscheme.types.symbol import Symbol
from mscheme.types.values import Boolean, Integer, Pair, duplicate

if TYPE_CHECKING:
    from mscheme.types.heap import Heap


def evaluate(expr: SExpression, env: Environment, heap: Heap) -> SchemeValue:
    match expr:
        case Integer() | Boolean():
            return expr
        case Symbol():
            return env.lookup(expr.name)
        case Pair(first=head_expr, second=tail):
            head = evaluate(head_expr, env, heap)
            if not isinstance(head, Procedure):
                raise SchemeRuntimeError("Head of application is not callable")
            # A fresh copy keeps a call from sharing captured state with
            # any other live reference to the same procedure.
            head = duplicate(head, heap)
            return apply(head, tail, env, heap, evaluate)
    raise SchemeRuntimeError(f"Cannot evaluate {expr!r}")
