from mscheme import EvaluatorFn
from mscheme import SExpression, SchemeValue
from mscheme.errors import SchemeSyntaxError
from mscheme.evaluation.apply import require_arity, to_list
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap


def quote_form(
    tail: SExpression,
    env: Environment,
    heap: Heap,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue:
    """(quote datum) returns datum unevaluated."""
    args = to_list(tail, SchemeSyntaxError)
    require_arity(args, 1, "quote", SchemeSyntaxError)
    return args[0]
