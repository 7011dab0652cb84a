#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## nlp.py
##
"""
    A nonlinear model with a user-defined function

    .. code-block:: text

        max  x1 + x2
        s.t. my_sqrt(x1^2 + x2^2) <= 1

    where `my_sqrt` is a plain Python square root computed with Newton's method and
    registered with the modeling layer. The feasible region is the unit disc, the optimum
    is at x1 = x2 = 1/sqrt(2) with objective sqrt(2).

    The solver (SciPy's trust-constr, an interior point method) only evaluates `my_sqrt`,
    its derivatives are estimated by finite differences.

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        newton_sqrt
        build_circle_model
        solve_circle
"""
import math
from collections import namedtuple

from ..expressions.functions import register
from ..expressions.variables import floatvar
from ..model import Model
from ..solvers.utils import SolverLookup

START_RANGE = (-2.0, 2.0)

NLPReport = namedtuple("NLPReport", ["status", "runtime", "objective", "solution"])


def newton_sqrt(x, tol=1e-13, max_iter=100):
    """
        Square root of `x` with Newton's method, starting from `x` itself

        Iterates until `|z*z - x| <= tol`, or at most `max_iter` times: rounding
        can keep the residual of large numbers above `tol`.
    """
    if x < 0:
        raise ValueError(f"Square root of negative number {x}")
    z = float(x)
    for _ in range(max_iter):
        if abs(z*z - x) <= tol:
            break
        z = z - (z*z - x) / (2*z)
    return z


my_sqrt = register("my_sqrt", newton_sqrt)


def build_circle_model(start=0.5):
    """
        Build the circle model, both coordinates start at `start`

        :return: tuple (model, x) with x the 2 coordinates
    """
    lo, hi = START_RANGE
    if not (lo <= start <= hi):
        raise ValueError(f"Starting point {start} outside of {lo}..{hi}")

    x = floatvar(-math.inf, math.inf, shape=2, name="x", start=start)
    model = Model(my_sqrt(x[0]**2 + x[1]**2) <= 1, maximize=x[0] + x[1])
    return model, x


def solve_circle(start=0.5, solver="scipy", time_limit=None, **kwargs):
    """
        Build and solve the circle model

        :param solver: a nonlinear solver, 'scipy' (trust-constr) or 'scipy:slsqp'
        :return: NLPReport
    """
    model, x = build_circle_model(start)

    s = SolverLookup.get(solver, model)
    if not s.solve(time_limit=time_limit, **kwargs):
        return NLPReport(s.status().exitstatus, s.status().runtime, None, {})

    return NLPReport(
        status=s.status().exitstatus,
        runtime=s.status().runtime,
        objective=s.objective_value(),
        solution={str(v): v.value() for v in x},
    )
