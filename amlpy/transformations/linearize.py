"""
Transform constraints and objectives to a canonical linear form.

This transformation is necessary for the Linear and (Mixed) Integer Linear Programming
solvers: every numerical expression is collapsed into a weighted sum of variables plus a
constant, and every comparison into a bounded row ``lb <= sum(w*x) <= ub``.

For example ``6*x + 8*y >= 100`` becomes the row ``100 <= 6*x + 8*y <= inf`` and
``x - 2*(y - 3) == z`` becomes ``-6 <= x - 2*y - z <= -6``.

Strict inequalities are only linear over integers: ``sum(X) < 5`` is rewritten as
``sum(X) <= 4`` when all variables and weights are integral, and rejected otherwise.

Module functions
----------------

Main transformations:
- :func:`linearize_constraint`: Transforms a list of constraints to :class:`LinearRow` objects.
- :func:`linear_form`: Collapses a numerical expression into ``({var: weight}, constant)``.
"""
import math
from collections import namedtuple

from ..exceptions import NotSupportedError
from ..expressions.core import Comparison, Operator
from ..expressions.variables import _NumVarImpl, _BoolVarImpl
from ..expressions.utils import is_num, is_int
from .normalize import toplevel_list


LinearRow = namedtuple("LinearRow", ["coefs", "lb", "ub", "expr"])
LinearRow.__doc__ = """
    A linear constraint ``lb <= sum(coefs[v] * v) <= ub``

    - coefs: dict mapping variables to their (non-zero) weight
    - lb, ub: bounds, possibly infinite
    - expr: the amlpy expression the row was created from
"""


def linearize_constraint(lst_of_expr):
    """
        Transforms all constraints to :class:`LinearRow`.

        Raises :class:`~amlpy.exceptions.NotSupportedError` when a constraint is not linear.
    """
    newlist = []
    for cpm_expr in toplevel_list(lst_of_expr):

        if cpm_expr is False:
            # trivially unsatisfiable, an empty row with empty range
            newlist.append(LinearRow({}, 1, 0, cpm_expr))

        elif isinstance(cpm_expr, _BoolVarImpl):
            # Boolean variable as constraint: it has to be true
            newlist.append(LinearRow({cpm_expr: 1}, 1, 1, cpm_expr))

        elif isinstance(cpm_expr, Comparison):
            lhs, rhs = cpm_expr.args
            # move everything to the left-hand side
            coefs, const = linear_form(lhs)
            rcoefs, rconst = linear_form(rhs)
            coefs = _add_forms(coefs, rcoefs, -1)
            bound = rconst - const

            name = cpm_expr.name
            if name in ('<', '>'):
                if not _is_integral(coefs):
                    raise NotSupportedError(f"Strict inequality over continuous variables is not linear: {cpm_expr}")
                if name == '<':
                    name, bound = '<=', math.ceil(bound) - 1
                else:
                    name, bound = '>=', math.floor(bound) + 1

            if name == '==':
                newlist.append(LinearRow(coefs, bound, bound, cpm_expr))
            elif name == '<=':
                newlist.append(LinearRow(coefs, -math.inf, bound, cpm_expr))
            elif name == '>=':
                newlist.append(LinearRow(coefs, bound, math.inf, cpm_expr))
            else:
                raise NotSupportedError(f"Not a known comparison '{name}' in {cpm_expr}")

        else:
            raise NotSupportedError(f"Not a linear constraint: {cpm_expr}")

    return newlist


def linear_form(expr):
    """
        Collapse a numerical expression into a weighted sum and a constant

        :return: tuple ({variable: weight}, constant), weights that cancel out are dropped
    """
    if is_num(expr):
        return dict(), expr

    if isinstance(expr, _NumVarImpl):
        return {expr: 1}, 0

    if not isinstance(expr, Operator):
        raise NotSupportedError(f"Not a linear expression: {expr}")

    if expr.name == "sum":
        coefs, const = dict(), 0
        for arg in expr.args:
            acoefs, aconst = linear_form(arg)
            coefs = _add_forms(coefs, acoefs)
            const += aconst
        return coefs, const

    if expr.name == "wsum":
        coefs, const = dict(), 0
        for w, arg in zip(*expr.args):
            acoefs, aconst = linear_form(arg)
            coefs = _add_forms(coefs, acoefs, w)
            const += w * aconst
        return coefs, const

    if expr.name == "-":
        coefs, const = linear_form(expr.args[0])
        return _add_forms(dict(), coefs, -1), -const

    if expr.name == "mul":
        (acoefs, aconst), (bcoefs, bconst) = [linear_form(a) for a in expr.args]
        if len(acoefs) == 0:
            return _add_forms(dict(), bcoefs, aconst), aconst * bconst
        if len(bcoefs) == 0:
            return _add_forms(dict(), acoefs, bconst), aconst * bconst
        raise NotSupportedError(f"Product of variables is not linear: {expr}")

    if expr.name == "div":
        (acoefs, aconst), (bcoefs, bconst) = [linear_form(a) for a in expr.args]
        if len(bcoefs) != 0:
            raise NotSupportedError(f"Division by a variable is not linear: {expr}")
        if bconst == 0:
            raise ZeroDivisionError(f"Division by zero in {expr}")
        return _add_forms(dict(), acoefs, 1 / bconst), aconst / bconst

    if expr.name == "pow":
        (acoefs, aconst), (bcoefs, bconst) = [linear_form(a) for a in expr.args]
        if len(bcoefs) == 0:
            if len(acoefs) == 0:
                return dict(), aconst ** bconst
            if bconst == 1:
                return acoefs, aconst
            if bconst == 0:
                return dict(), 1
        raise NotSupportedError(f"Power is not linear: {expr}")

    raise NotSupportedError(f"Not a known linear operator '{expr.name}': {expr}")


def is_linear(expr):
    """ can the numerical expression be written as a weighted sum plus constant? """
    try:
        linear_form(expr)
        return True
    except NotSupportedError:
        return False


def _add_forms(coefs, other, weight=1):
    """ coefs + weight*other, returns a new dict without zero weights """
    out = dict(coefs)
    for var, w in other.items():
        out[var] = out.get(var, 0) + weight * w
        if out[var] == 0:
            del out[var]
    return out


def _is_integral(coefs):
    return all(is_int(w) and isinstance(v, _NumVarImpl) and v.is_integer() for v, w in coefs.items())
