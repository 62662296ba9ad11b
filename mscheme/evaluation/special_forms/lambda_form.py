from mscheme import EvaluatorFn
from mscheme import SExpression, SchemeValue
from mscheme.errors import SchemeSyntaxError
from mscheme.evaluation.apply import make_closure, require_at_least, to_list
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap


def lambda_form(
    tail: SExpression,
    env: Environment,
    heap: Heap,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue:
    # (lambda (params) body...) needs at least one body form; the body is
    # not evaluated until the closure is called.
    args = to_list(tail, SchemeSyntaxError)
    require_at_least(args, 2, "lambda", SchemeSyntaxError)
    params = to_list(args[0], SchemeSyntaxError)
    return make_closure(params, args[1:], env, heap)
