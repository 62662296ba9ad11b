from mscheme import EvaluatorFn
from mscheme import SExpression, SchemeValue
from mscheme.errors import SchemeSyntaxError
from mscheme.evaluation.apply import make_closure, require_arity, require_at_least, to_list
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap
from mscheme.types.symbol import Symbol
from mscheme.types.values import Pair, duplicate, is_proper_list


def define_form(
    tail: SExpression,
    env: Environment,
    heap: Heap,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue:
    """
    (define name expr)             binds a duplicate of expr's value
    (define (name p ...) body ...) binds a new closure

    Both forms bind in the current frame and return the name symbol.
    """
    args = to_list(tail, SchemeSyntaxError)
    require_at_least(args, 2, "define", SchemeSyntaxError)
    target = args[0]

    if isinstance(target, Symbol):
        require_arity(args, 2, "define", SchemeSyntaxError)
        value = evaluate_fn(args[1], env, heap)
        env.define(target.name, duplicate(value, heap))
        return target

    if isinstance(target, Pair) and is_proper_list(target):
        name, *params = to_list(target)
        if not isinstance(name, Symbol):
            raise SchemeSyntaxError("define requires a symbol as procedure name")
        env.define(name.name, make_closure(params, args[1:], env, heap))
        return name

    raise SchemeSyntaxError("Invalid arguments for define")
