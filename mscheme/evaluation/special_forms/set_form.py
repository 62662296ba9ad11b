from mscheme import EvaluatorFn
from mscheme import SExpression, SchemeValue
from mscheme.errors import SchemeRuntimeError, SchemeSyntaxError
from mscheme.evaluation.apply import require_arity, to_list
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap
from mscheme.types.symbol import Symbol
from mscheme.types.values import Pair, duplicate


def set_form(
    tail: SExpression,
    env: Environment,
    heap: Heap,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue:
    """(set! var expr) rebinds an existing variable and returns its previous value."""
    args = to_list(tail, SchemeSyntaxError)
    require_arity(args, 2, "set!", SchemeSyntaxError)
    var_sym, val_expr = args
    if not isinstance(var_sym, Symbol):
        raise SchemeSyntaxError("set! first argument must be a symbol")
    env.lookup(var_sym.name)  # unbound names fail before the value is computed
    value = evaluate_fn(val_expr, env, heap)
    return env.set(var_sym.name, duplicate(value, heap))


def _set_field(
    field: str,
    name: str,
    tail: SExpression,
    env: Environment,
    heap: Heap,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue:
    args = to_list(tail, SchemeSyntaxError)
    require_arity(args, 2, name, SchemeSyntaxError)
    pair, replacement = (evaluate_fn(a, env, heap) for a in args)
    if not isinstance(pair, Pair):
        raise SchemeRuntimeError(f"{name} requires a pair")
    previous = getattr(pair, field)
    # Storing the pair itself builds a deliberate self-reference
    if replacement is not pair:
        replacement = duplicate(replacement, heap)
    setattr(pair, field, replacement)
    return previous


def set_car_form(tail, env, heap, evaluate_fn):
    return _set_field("first", "set-car!", tail, env, heap, evaluate_fn)


def set_cdr_form(tail, env, heap, evaluate_fn):
    return _set_field("second", "set-cdr!", tail, env, heap, evaluate_fn)
