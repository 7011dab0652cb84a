#!/usr/bin/env python
"""
    Interface to SciPy's nonlinear optimizers (`scipy.optimize.minimize`)

    Solves continuous, possibly nonlinear models: the objective and every constraint
    are evaluated numerically through the expressions' `value()` functions, so any
    expression built from variables, arithmetic operators and registered user
    functions (see :mod:`amlpy.expressions.functions`) can be used.

    Two subsolvers are available:

    - ``trust-constr``: interior point (barrier) method for inequality constrained
      problems, the default
    - ``slsqp``: sequential least squares quadratic programming

    Gradients are computed symbolically (:mod:`amlpy.transformations.differentiate`)
    when every function in the expression has a registered derivative, and by finite
    differences otherwise.

    The solutions are local optima: for non-convex models, the starting point
    (`floatvar(..., start=...)`) matters.

    ===============
    List of classes
    ===============

    .. autosummary::
        :nosignatures:

        AML_scipy

    ==============
    Module details
    ==============
"""
import math
import time
import warnings

import numpy as np

from .solver_interface import SolverInterface, SolverStatus, ExitStatus
from ..exceptions import NotSupportedError, SolverNotAvailableError
from ..expressions.core import Comparison
from ..expressions.utils import is_num
from ..expressions.variables import _NumVarImpl
from ..transformations.differentiate import is_differentiable, gradient
from ..transformations.get_variables import get_variables
from ..transformations.normalize import toplevel_list


class AML_scipy(SolverInterface):
    """
    Interface to SciPy's `minimize()` for continuous nonlinear models

    Requires that the 'scipy' python package is installed:
    $ pip install scipy

    Creates the following attributes (see parent constructor for more):
    - method: the `scipy.optimize.minimize` method in use
    - scipy_result: the OptimizeResult of the last solve (or None)

    Integer and Boolean variables are not supported.
    """

    # subsolver name -> method name of scipy.optimize.minimize
    _methods = {"trust-constr": "trust-constr", "slsqp": "SLSQP"}
    # with scipy's initial barrier parameter (0.1), trust-constr stops on `gtol` with the barrier still active
    _default_options = {"trust-constr": {"initial_barrier_parameter": 1e-4}}

    @staticmethod
    def supported():
        # try to import the package
        try:
            import scipy.optimize
            return True
        except ImportError:
            return False

    @staticmethod
    def version():
        """
        Returns the installed version of the solver's Python API.
        """
        try:
            import scipy
            return scipy.__version__
        except ImportError:
            return None

    @staticmethod
    def solvernames(installed=False):
        """
            Returns the names of the `minimize()` methods this interface can use
        """
        if installed and not AML_scipy.supported():
            return []
        return list(AML_scipy._methods)

    @staticmethod
    def solverversion(subsolver):
        return AML_scipy.version()

    def __init__(self, cpm_model=None, subsolver=None, tolerance=1e-6):
        """
        Constructor of the solver object

        Arguments:
        - cpm_model: Model(), an amlpy Model() (optional)
        - subsolver: str, 'trust-constr' (default) or 'slsqp'
        - tolerance: float, maximal constraint violation for a point to count as feasible
        """
        if not self.supported():
            raise SolverNotAvailableError("AML_scipy: Install the python package 'scipy' to use this solver interface.")

        if subsolver is None:
            subsolver = "trust-constr"
        if subsolver not in self._methods:
            raise ValueError(f"Unknown SciPy subsolver '{subsolver}', choose from {list(self._methods)}")
        self.method = self._methods[subsolver]
        self.tolerance = tolerance
        self.scipy_result = None

        self._vars = []  # ordered variables, position = index in the solution vector
        self._cons = []  # constraints as (function expression, lb, ub, original constraint)
        self._obj = None
        self._obj_is_min = True

        # initialise everything else and post the constraints/objective
        super().__init__(name="scipy:"+subsolver, cpm_model=cpm_model)

    def solve(self, time_limit=None, **kwargs):
        """
            Call `scipy.optimize.minimize`

            Arguments:
            - time_limit:  maximum solve time in seconds (float, optional),
                           only honored by 'trust-constr'
            - kwargs:      options of the method, e.g. `maxiter=500` or `gtol=1e-10`
                           (trust-constr starts with `initial_barrier_parameter=1e-4` unless given)

            The starting point is the `start` value of each variable, or the point of
            its domain closest to 0 when it has none.
        """
        from scipy.optimize import minimize, Bounds, NonlinearConstraint, BFGS

        if len(self._vars) == 0:
            raise NotSupportedError(f"{self.name}: model has no variables")
        index = {var: i for i, var in enumerate(self._vars)}

        x0 = np.array([self._start(var) for var in self._vars], dtype=float)
        lbs = np.array([var.lb for var in self._vars], dtype=float)
        ubs = np.array([var.ub for var in self._vars], dtype=float)
        bounds = None
        if np.isfinite(lbs).any() or np.isfinite(ubs).any():
            bounds = Bounds(lbs, ubs)

        # objective, as minimization
        sign = 1.0 if self._obj_is_min else -1.0
        obj_expr = self._obj if self._obj is not None else 0
        fun = self._make_fun(obj_expr, sign)
        jac = self._make_jac(obj_expr, index, sign)

        # constraints
        constraints = []
        for g_expr, lb, ub, _ in self._cons:
            g_fun = self._make_fun(g_expr)
            g_jac = self._make_jac(g_expr, index)
            if self.method == "trust-constr":
                constraints.append(NonlinearConstraint(g_fun, lb, ub,
                                                       jac=g_jac if g_jac is not None else '3-point',
                                                       hess=BFGS()))
            else:
                constraints.extend(self._slsqp_constraints(g_fun, g_jac, lb, ub))

        options = dict(self._default_options.get(self.method, {}))
        options.update(kwargs)
        callback = None
        start_time = time.time()
        if self.method == "trust-constr":
            if jac is None:
                jac = '3-point'
            if time_limit is not None:
                # returning True stops trust-constr
                callback = lambda xk, state: time.time() - start_time > time_limit
            extra = dict(hess=BFGS())
        else:
            if time_limit is not None:
                warnings.warn(f"{self.name} does not support a time limit, it is ignored")
            extra = dict()

        with warnings.catch_warnings():
            # equal lower and upper bounds, delta_grad == 0, ... are reported by scipy as warnings
            warnings.simplefilter("ignore", UserWarning)
            res = minimize(fun, x0, method=self.method, jac=jac, bounds=bounds,
                           constraints=constraints, callback=callback, options=options, **extra)
        self.scipy_result = res

        # new status, translate runtime
        self.cpm_status = SolverStatus(self.name)
        self.cpm_status.runtime = time.time() - start_time
        self.cpm_status.message = str(res.message)

        feasible = np.all(np.isfinite(res.x)) and self._violation(res.x) <= self.tolerance
        if feasible and res.success:
            if self.has_objective():
                self.cpm_status.exitstatus = ExitStatus.OPTIMAL  # locally optimal
            else:
                self.cpm_status.exitstatus = ExitStatus.FEASIBLE
        elif feasible:  # e.g. iteration or time limit reached
            self.cpm_status.exitstatus = ExitStatus.FEASIBLE
        else:
            self.cpm_status.exitstatus = ExitStatus.UNKNOWN

        # True/False depending on self.cpm_status
        has_sol = self._solve_return(self.cpm_status)

        # translate solution values (of user specified variables only)
        self.objective_value_ = None
        self._assign(res.x if has_sol else None)
        if has_sol and self.has_objective():
            self.objective_value_ = self._obj.value()

        return has_sol

    def _start(self, var):
        if var.start is not None:
            return min(max(var.start, var.lb), var.ub)
        return min(max(0.0, var.lb), var.ub)

    def _assign(self, x):
        """ put the point `x` in the variables' values, or clear them when None """
        for i, var in enumerate(self._vars):
            var._value = None if x is None else float(x[i])

    def _make_fun(self, expr, sign=1.0):
        if is_num(expr):
            return lambda x: sign * expr
        def fun(x):
            self._assign(x)
            return sign * float(expr.value())
        return fun

    def _make_jac(self, expr, index, sign=1.0):
        """ symbolic gradient function, or None if the expression is not differentiable """
        if is_num(expr):
            return lambda x: np.zeros(len(index))
        if not is_differentiable(expr):
            return None
        def jac(x):
            self._assign(x)
            return sign * gradient(expr, index)
        return jac

    @staticmethod
    def _slsqp_constraints(g_fun, g_jac, lb, ub):
        """ lb <= g(x) <= ub as SLSQP dicts, where 'ineq' means fun(x) >= 0 """
        cons = []
        if lb == ub:
            con = {'type': 'eq', 'fun': lambda x: g_fun(x) - lb}
            if g_jac is not None:
                con['jac'] = g_jac
            return [con]
        if lb > -math.inf:
            con = {'type': 'ineq', 'fun': lambda x: g_fun(x) - lb}
            if g_jac is not None:
                con['jac'] = g_jac
            cons.append(con)
        if ub < math.inf:
            con = {'type': 'ineq', 'fun': lambda x: ub - g_fun(x)}
            if g_jac is not None:
                con['jac'] = lambda x: -g_jac(x)
            cons.append(con)
        return cons

    def _violation(self, x):
        """ largest violation of a constraint or bound in point `x` """
        self._assign(x)
        worst = 0.0
        for var in self._vars:
            worst = max(worst, var.lb - var._value, var._value - var.ub)
        for g_expr, lb, ub, _ in self._cons:
            val = g_expr.value() if not is_num(g_expr) else g_expr
            worst = max(worst, lb - val, val - ub)
        return worst

    def solver_var(self, cpm_var):
        """
            SciPy has no variable objects, the 'solver variable' is the position
            of the variable in the solution vector
        """
        if is_num(cpm_var):  # shortcut, eases posting constraints
            return cpm_var

        if cpm_var not in self._varmap:
            if not isinstance(cpm_var, _NumVarImpl):
                raise NotImplementedError("Not a known var {}".format(cpm_var))
            if cpm_var.is_integer():
                raise NotSupportedError(f"{self.name} only supports continuous variables, not {cpm_var}")
            self._varmap[cpm_var] = len(self._vars)
            self._vars.append(cpm_var)

        return self._varmap[cpm_var]

    def has_objective(self):
        return self._obj is not None

    def objective(self, expr, minimize=True):
        """
            Post the given expression to the solver as objective to minimize/maximize

            'objective()' can be called multiple times, only the last one is stored
        """
        for var in get_variables(expr):
            self.user_vars.add(var)
            self.solver_var(var)
        self._obj = expr
        self._obj_is_min = minimize

    def transform(self, cpm_expr):
        """
            Transform arbitrary amlpy expressions to constraints the solver supports

            Comparisons ``lhs <op> rhs`` become bounded functions ``lb <= lhs - rhs <= ub``

        :return: list of (function expression, lb, ub, original constraint)
        """
        cons = []
        for cpm_cons in toplevel_list(cpm_expr):
            if cpm_cons is False:
                raise NotSupportedError(f"{self.name}: model contains a trivially false constraint")
            if not isinstance(cpm_cons, Comparison):
                raise NotSupportedError(f"{self.name}: not a numerical comparison {cpm_cons}")

            lhs, rhs = cpm_cons.args
            g_expr = lhs - rhs if not (is_num(rhs) and rhs == 0) else lhs
            if cpm_cons.name in ('<', '>'):
                warnings.warn(f"{self.name}: strict inequality {cpm_cons} is treated as non-strict")
            if cpm_cons.name in ('<=', '<'):
                cons.append((g_expr, -math.inf, 0.0, cpm_cons))
            elif cpm_cons.name in ('>=', '>'):
                cons.append((g_expr, 0.0, math.inf, cpm_cons))
            else:  # '=='
                cons.append((g_expr, 0.0, 0.0, cpm_cons))
        return cons

    def __add__(self, cpm_expr):
        """
            Eagerly add a constraint to the solver.

            Constraints are stored as functions, they are evaluated during `solve()`

        :param cpm_expr: amlpy expression, or list thereof
        :type cpm_expr: Expression or list of Expression

        :return: self
        """
        # add new user vars to the set
        for var in get_variables(cpm_expr):
            self.user_vars.add(var)
            self.solver_var(var)

        self._cons.extend(self.transform(cpm_expr))
        return self
