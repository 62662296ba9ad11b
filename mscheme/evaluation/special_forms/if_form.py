from mscheme import EvaluatorFn
from mscheme import SExpression, SchemeValue
from mscheme.errors import SchemeSyntaxError
from mscheme.evaluation.apply import to_list
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap
from mscheme.types.nil import Nil
from mscheme.types.values import is_truthy


def if_form(
    tail: SExpression,
    env: Environment,
    heap: Heap,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue:
    args = to_list(tail, SchemeSyntaxError)
    if not 2 <= len(args) <= 3:
        raise SchemeSyntaxError(
            f"if requires a condition, a then-branch and an optional else-branch, got {len(args)} operands"
        )

    cond = evaluate_fn(args[0], env, heap)
    # Only #f is false; 0 and () are true
    if is_truthy(cond):
        return evaluate_fn(args[1], env, heap)
    elif len(args) == 3:
        return evaluate_fn(args[2], env, heap)
    else:
        return Nil
