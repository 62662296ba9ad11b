from mscheme import SExpression
from mscheme.evaluation.apply import to_list
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap
from mscheme.types.values import Boolean, is_truthy


def and_form(tail: SExpression, env: Environment, heap: Heap, evaluate_fn) -> SExpression:
    """Short-circuiting logical AND special form.

    (and a b c ...) evaluates each operand left-to-right until a false value
    is found, in which case #f is returned immediately. If all operands are
    true, returns the value of the last operand. With zero operands, returns #t.
    """
    args = to_list(tail)
    if not args:
        return heap.make(Boolean, True)

    result = None
    for expr in args:
        result = evaluate_fn(expr, env, heap)
        if not is_truthy(result):
            return heap.make(Boolean, False)
    return result


def or_form(tail: SExpression, env: Environment, heap: Heap, evaluate_fn) -> SExpression:
    """Short-circuiting logical OR special form.

    (or a b c ...) evaluates operands left-to-right. A true value that is not
    the last operand yields #t rather than the value itself; a true last
    operand yields its own value. If none are true, returns #f.
    """
    args = to_list(tail)
    last_index = len(args) - 1
    for i, expr in enumerate(args):
        val = evaluate_fn(expr, env, heap)
        if is_truthy(val):
            return val if i == last_index else heap.make(Boolean, True)
    return heap.make(Boolean, False)
