"""
    Normalizing the constraints given to an amlpy model.
"""
import numpy as np

from ..expressions.core import Expression
from ..expressions.variables import NDVarArray
from ..exceptions import NotSupportedError


def toplevel_list(cpm_expr):
    """
    unravels nested lists and ensures every element returned is an amlpy Expression with `.is_bool()` true,
    or the constant `False` (a trivially infeasible constraint).

    - cpm_expr: Expression or list of Expressions
    """

    def unravel(lst, append):
        for e in lst:
            if isinstance(e, Expression):
                if isinstance(e, NDVarArray):  # sometimes does not have .name
                    unravel(e.flat, append)
                else:
                    assert (e.is_bool()), f"Only boolean expressions allowed at toplevel, got {e}"
                    append(e) # presumably the most frequent case
            elif isinstance(e, (list, tuple, np.flatiter, np.ndarray)):
                unravel(e, append)
            elif e is False or e is np.False_:
                append(False)
            elif e is not True and e is not np.True_:  # if True: pass
                raise NotSupportedError(f"Expression {e} is not a valid amlpy constraint")

    newlist = []
    append = newlist.append
    unravel((cpm_expr,), append)

    return newlist
