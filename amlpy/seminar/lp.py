#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## lp.py
##
"""
    A two-variable production-planning linear program

    .. code-block:: text

        min  12x + 20y
        s.t. c1: 6x +  8y >= 100
             c2: 7x + 12y >= 120
             x >= 0
             0 <= y <= 3

    Its optimum is 205, at x = 15 and y = 1.25. Besides the solution, a linear solver
    also reports the dual value of each constraint: how much the optimal cost changes
    per unit increase of the constraint's right-hand side (0.25 for c1, 1.5 for c2).
    The shadow price is the change for a relaxation of the constraint, for a `>=`
    constraint that is the opposite of its dual value.

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        build_production_lp
        solve_production_lp
"""
from collections import namedtuple

from ..expressions.variables import floatvar
from ..model import Model
from ..solvers.utils import SolverLookup

LPReport = namedtuple("LPReport", ["status", "runtime", "objective", "solution",
                                   "duals", "shadow_prices", "reduced_costs"])
LPReport.__doc__ = """
    Outcome of solving the production LP

    - status: ExitStatus of the solver
    - runtime: solve time in seconds
    - objective: optimal cost (None if not solved)
    - solution: dict variable name -> value
    - duals, shadow_prices: dict constraint name -> value
    - reduced_costs: dict variable name -> value
"""


def build_production_lp(c1_rhs=100, c2_rhs=120):
    """
        Build the production LP, the right-hand sides of c1 and c2 can be changed

        :return: tuple (model, (x, y), (c1, c2))
    """
    x = floatvar(lb=0, name="x")
    y = floatvar(lb=0, ub=3, name="y")

    c1 = (6*x + 8*y >= c1_rhs).set_description("c1")
    c2 = (7*x + 12*y >= c2_rhs).set_description("c2")

    model = Model([c1, c2], minimize=12*x + 20*y)
    return model, (x, y), (c1, c2)


def solve_production_lp(c1_rhs=100, c2_rhs=120, solver="ortools:glop", time_limit=None):
    """
        Build and solve the production LP and collect primal and dual results

        Dual values need an LP solver, e.g. 'ortools:glop'.

        :return: LPReport
    """
    model, (x, y), cons = build_production_lp(c1_rhs, c2_rhs)

    s = SolverLookup.get(solver, model)
    if not s.solve(time_limit=time_limit):
        return LPReport(s.status().exitstatus, s.status().runtime, None, {}, {}, {}, {})

    return LPReport(
        status=s.status().exitstatus,
        runtime=s.status().runtime,
        objective=s.objective_value(),
        solution={str(v): v.value() for v in (x, y)},
        duals={str(c): s.dual_value(c) for c in cons},
        shadow_prices={str(c): s.shadow_price(c) for c in cons},
        reduced_costs={str(v): s.reduced_cost(v) for v in (x, y)},
    )
