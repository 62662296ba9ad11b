"""Registry of special forms for the mscheme evaluator.

Maps operator identities to handler functions that implement non-standard
evaluation rules. Every handler receives the raw operand list, the current
environment, the heap and the evaluator function.
"""

from mscheme.types.lambda_fn import Op
from mscheme.evaluation.special_forms.quote_forms import quote_form
from mscheme.evaluation.special_forms.if_form import if_form
from mscheme.evaluation.special_forms.define_form import define_form
from mscheme.evaluation.special_forms.lambda_form import lambda_form
from mscheme.evaluation.special_forms.set_form import set_form, set_car_form, set_cdr_form
from mscheme.evaluation.special_forms.logic_forms import and_form, or_form

SPECIAL_FORMS = {
    Op.QUOTE: quote_form,
    Op.IF: if_form,
    Op.DEFINE: define_form,
    Op.LAMBDA: lambda_form,
    Op.SET: set_form,
    Op.SET_CAR: set_car_form,
    Op.SET_CDR: set_cdr_form,
    Op.AND: and_form,
    Op.OR: or_form,
}
