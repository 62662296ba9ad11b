# Core type aliases for mscheme's data model.
# Every runtime value is an instance of mscheme.types.values.Value, allocated on
# a Heap and referenced by plain Python references which act as non-owning
# handles: a value's lifetime is decided by the collector, not by its referrers.
#
# Naming guidance:
# - SExpression: Use in reader/special-form code to denote unevaluated forms.
# - SchemeValue: Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to the same Value base class; the reader and the
# evaluator share one representation (code is data).

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from mscheme.types.values import Value

    SchemeValue = Value
else:
    SchemeValue = Any

SExpression = SchemeValue

# Evaluator function type threaded into special forms and closure application
EvaluatorFn = Callable[..., SchemeValue]
