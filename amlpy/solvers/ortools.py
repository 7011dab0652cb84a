#!/usr/bin/env python
"""
    Interface to OR-Tools' linear solver wrapper (`pywraplp`)

    OR-Tools bundles several linear and mixed-integer solvers behind one Python API.
    This interface exposes them as subsolvers:

    - ``glop``: Google's primal/dual simplex LP solver, provides duals and reduced costs
    - ``scip``: SCIP branch-and-bound MIP solver (bundled with the `ortools` wheel)
    - ``cbc``: COIN-OR's CBC MIP solver
    - ``sat``: CP-SAT, for pure integer models

    When no subsolver is given, ``glop`` is used for models with only continuous
    variables and ``scip`` otherwise.

    Install the 'ortools' python package:

    .. code-block:: console

        $ pip install ortools

    ===============
    List of classes
    ===============

    .. autosummary::
        :nosignatures:

        AML_ortools

    ==============
    Module details
    ==============
"""
import math
import warnings

from .solver_interface import SolverInterface, SolverStatus, ExitStatus
from ..exceptions import NotSupportedError, SolverNotAvailableError
from ..expressions.utils import is_num
from ..expressions.variables import _NumVarImpl, _IntVarImpl
from ..transformations.get_variables import get_variables, get_variables_model
from ..transformations.linearize import linearize_constraint, linear_form


class AML_ortools(SolverInterface):
    """
    Interface to OR-Tools' `pywraplp` linear solver API

    Requires that the 'ortools' python package is installed:
    $ pip install ortools

    Creates the following attributes (see parent constructor for more):
    - ort_solver: the pywraplp.Solver object
    - subsolver: name of the native backend in use (glop, scip, cbc or sat)

    Detailed documentation of the wrapper:
    https://developers.google.com/optimization/reference/python/linear_solver/pywraplp
    """

    # subsolver name -> name of the backend in pywraplp.Solver.CreateSolver()
    _backends = {"glop": "GLOP", "scip": "SCIP", "cbc": "CBC", "sat": "SAT"}
    # backends that only solve continuous problems, and hence have duals
    _lp_backends = ("glop",)

    @staticmethod
    def supported():
        # try to import the package
        try:
            from ortools.linear_solver import pywraplp
            return True
        except ImportError:
            return False

    @staticmethod
    def version():
        """
        Returns the installed version of the solver's Python API.
        """
        try:
            import ortools
            return ortools.__version__
        except ImportError:
            return None

    @staticmethod
    def solvernames(installed=False):
        """
            Returns the names of the subsolvers; when `installed`, only those this
            build of OR-Tools can instantiate
        """
        names = list(AML_ortools._backends)
        if installed:
            if not AML_ortools.supported():
                return []
            from ortools.linear_solver import pywraplp
            names = [n for n in names
                     if pywraplp.Solver.CreateSolver(AML_ortools._backends[n]) is not None]
        return names

    @staticmethod
    def solverversion(subsolver):
        """ the subsolvers ship with the ortools wheel, they share its version """
        return AML_ortools.version()

    def __init__(self, cpm_model=None, subsolver=None):
        """
        Constructor of the native solver object

        Arguments:
        - cpm_model: Model(), an amlpy Model() (optional)
        - subsolver: str, name of the backend (glop, scip, cbc or sat), optional
        """
        if not self.supported():
            raise SolverNotAvailableError("AML_ortools: Install the python package 'ortools' to use this solver interface.")
        from ortools.linear_solver import pywraplp

        if subsolver is None:
            subsolver = "scip"
            if cpm_model is not None:
                allvars = get_variables_model(cpm_model)
                if len(allvars) > 0 and not any(v.is_integer() for v in allvars):
                    subsolver = "glop"
        if subsolver not in self._backends:
            raise ValueError(f"Unknown OR-Tools subsolver '{subsolver}', choose from {list(self._backends)}")

        self.subsolver = subsolver
        self.ort_solver = pywraplp.Solver.CreateSolver(self._backends[subsolver])
        if self.ort_solver is None:
            raise SolverNotAvailableError(f"AML_ortools: backend '{subsolver}' is not available in this build of ortools")

        self._conslist = []  # (amlpy constraint, native row) pairs
        self._namemap = dict()  # constraint description -> native row
        self._has_objective = False
        self._trivially_unsat = False

        # initialise everything else and post the constraints/objective
        super().__init__(name="ortools:"+subsolver, cpm_model=cpm_model)

    def solve(self, time_limit=None, verbose=False, **kwargs):
        """
            Call the OR-Tools backend

            Arguments:
            - time_limit:  maximum solve time in seconds (float, optional)
            - verbose:     let the backend print its log
            - kwargs:      any keyword argument, sets a parameter of the native backend

            The keyword arguments are handed to the backend in its own parameter format,
            e.g. `solve(num_search_workers=4)` for the ``sat`` backend or
            `solve(**{"limits/gap": 0.01})` for ``scip``.
        """
        from ortools.linear_solver import pywraplp

        if time_limit is not None:
            if time_limit <= 0:
                raise ValueError("Time limit must be positive")
            self.ort_solver.SetTimeLimit(int(time_limit * 1000))  # in milliseconds
        else:
            self.ort_solver.SetTimeLimit(0)  # no limit

        if verbose:
            self.ort_solver.EnableOutput()
        else:
            self.ort_solver.SuppressOutput()

        if len(kwargs) > 0:
            sep = " = " if self.subsolver == "scip" else ": "
            params = "\n".join(f"{key}{sep}{val}" for key, val in kwargs.items())
            if not self.ort_solver.SetSolverSpecificParametersAsString(params):
                raise ValueError(f"Backend {self.subsolver} rejected the parameters {kwargs}")

        # new status, translate runtime
        self.cpm_status = SolverStatus(self.name)
        self.objective_value_ = None

        if self._trivially_unsat:
            self.cpm_status.runtime = 0
            self.cpm_status.exitstatus = ExitStatus.UNSATISFIABLE
            self._clear_values()
            return False

        ort_status = self.ort_solver.Solve()
        self.cpm_status.runtime = self.ort_solver.wall_time() / 1000  # wall_time() in milliseconds

        # translate exit status
        if ort_status == pywraplp.Solver.OPTIMAL:
            if self.has_objective():
                self.cpm_status.exitstatus = ExitStatus.OPTIMAL
            else:
                self.cpm_status.exitstatus = ExitStatus.FEASIBLE
        elif ort_status == pywraplp.Solver.FEASIBLE:
            self.cpm_status.exitstatus = ExitStatus.FEASIBLE
        elif ort_status == pywraplp.Solver.INFEASIBLE:
            self.cpm_status.exitstatus = ExitStatus.UNSATISFIABLE
        elif ort_status == pywraplp.Solver.UNBOUNDED:
            self.cpm_status.exitstatus = ExitStatus.UNBOUNDED
        elif ort_status == pywraplp.Solver.NOT_SOLVED:
            self.cpm_status.exitstatus = ExitStatus.UNKNOWN
        elif ort_status in (pywraplp.Solver.ABNORMAL, pywraplp.Solver.MODEL_INVALID):
            self.cpm_status.exitstatus = ExitStatus.ERROR
        else:  # a non-mapped status type
            raise NotImplementedError(f"Translation of ortools status {ort_status} to amlpy status not implemented")
        self.cpm_status.message = {
            pywraplp.Solver.OPTIMAL: "OPTIMAL", pywraplp.Solver.FEASIBLE: "FEASIBLE",
            pywraplp.Solver.INFEASIBLE: "INFEASIBLE", pywraplp.Solver.UNBOUNDED: "UNBOUNDED",
            pywraplp.Solver.ABNORMAL: "ABNORMAL", pywraplp.Solver.MODEL_INVALID: "MODEL_INVALID",
            pywraplp.Solver.NOT_SOLVED: "NOT_SOLVED",
        }.get(ort_status)

        # True/False depending on self.cpm_status
        has_sol = self._solve_return(self.cpm_status)

        # translate solution values (of user specified variables only)
        if has_sol:
            for cpm_var in self.user_vars:
                solver_val = self.solver_var(cpm_var).solution_value()
                if cpm_var.is_integer():
                    cpm_var._value = int(round(solver_val))
                else:
                    cpm_var._value = solver_val
            if self.has_objective():
                self.objective_value_ = self.ort_solver.Objective().Value()
        else:
            self._clear_values()

        return has_sol

    def _clear_values(self):
        for cpm_var in self.user_vars:
            cpm_var.clear()

    def solver_var(self, cpm_var):
        """
            Creates solver variable for amlpy variable
            or returns from cache if previously created
        """
        if is_num(cpm_var):  # shortcut, eases posting constraints
            return cpm_var

        # create if it does not exist
        if cpm_var not in self._varmap:
            if not isinstance(cpm_var, _NumVarImpl):
                raise NotImplementedError("Not a known var {}".format(cpm_var))
            lb, ub = self._bound(cpm_var.lb), self._bound(cpm_var.ub)
            if isinstance(cpm_var, _IntVarImpl):
                if self.subsolver in self._lp_backends:
                    raise NotSupportedError(f"{self.name} is an LP solver, it does not support integer variable {cpm_var}")
                # also Boolean variables, whose bounds may have been fixed
                revar = self.ort_solver.IntVar(lb, ub, cpm_var.name)
            else:
                if self.subsolver == "sat":
                    raise NotSupportedError(f"{self.name} does not support continuous variable {cpm_var}")
                revar = self.ort_solver.NumVar(lb, ub, cpm_var.name)
            self._varmap[cpm_var] = revar

        # return from cache
        return self._varmap[cpm_var]

    def _bound(self, val):
        if val == math.inf:
            return self.ort_solver.infinity()
        if val == -math.inf:
            return -self.ort_solver.infinity()
        return val

    def has_objective(self):
        return self._has_objective

    def objective(self, expr, minimize=True):
        """
            Post the given expression to the solver as objective to minimize/maximize

            'objective()' can be called multiple times, only the last one is stored
        """
        get_variables(expr, collect=self.user_vars)
        coefs, const = linear_form(expr)

        ort_obj = self.ort_solver.Objective()
        ort_obj.Clear()
        for cpm_var, w in coefs.items():
            ort_obj.SetCoefficient(self.solver_var(cpm_var), float(w))
        ort_obj.SetOffset(float(const))
        if minimize:
            ort_obj.SetMinimization()
        else:
            ort_obj.SetMaximization()
        self._has_objective = True

    def transform(self, cpm_expr):
        """
            Transform arbitrary amlpy expressions to constraints the solver supports

            Linear solvers take bounded rows ``lb <= sum(w*x) <= ub``, see
            :func:`~amlpy.transformations.linearize.linearize_constraint`.

        :return: list of LinearRow
        """
        return linearize_constraint(cpm_expr)

    def __add__(self, cpm_expr):
        """
            Eagerly add a constraint to the underlying solver.

            Any amlpy expression given is immediately transformed (through `transform()`)
            and then posted to the solver in this function.

            Raises NotSupportedError for any constraint that is not linear.

        :param cpm_expr: amlpy expression, or list thereof
        :type cpm_expr: Expression or list of Expression

        :return: self
        """
        # add new user vars to the set
        get_variables(cpm_expr, collect=self.user_vars)

        for row in self.transform(cpm_expr):
            if len(row.coefs) == 0:
                # constant row, no need to post it
                if not (row.lb <= 0 <= row.ub):
                    self._trivially_unsat = True
                continue

            name = getattr(row.expr, "desc", "")
            ort_row = self.ort_solver.RowConstraint(self._bound(row.lb), self._bound(row.ub), str(name))
            for cpm_var, w in row.coefs.items():
                ort_row.SetCoefficient(self.solver_var(cpm_var), float(w))

            self._conslist.append((row.expr, ort_row))
            if name in self._namemap:
                warnings.warn(f"Constraint description '{name}' is used more than once, it can no longer be used to look up a constraint")
                self._namemap[name] = None  # ambiguous
            elif name:
                self._namemap[name] = ort_row

        # create native variables for unconstrained user vars too
        for cpm_var in self.user_vars:
            self.solver_var(cpm_var)

        return self

    def _native_row(self, cpm_cons):
        if isinstance(cpm_cons, str):
            if cpm_cons not in self._namemap:
                raise KeyError(f"No constraint with description '{cpm_cons}' in {self.name}")
            if self._namemap[cpm_cons] is None:
                raise ValueError(f"Description '{cpm_cons}' is shared by several constraints in {self.name}, pass the constraint itself")
            return self._namemap[cpm_cons]
        for expr, ort_row in self._conslist:
            if expr is cpm_cons:
                return ort_row
        raise KeyError(f"Constraint {cpm_cons} was not posted to {self.name}")

    def _check_duals(self):
        if self.subsolver not in self._lp_backends:
            raise NotSupportedError(f"{self.name} is a MIP solver, use 'ortools:glop' for dual values")
        if self.cpm_status.exitstatus != ExitStatus.OPTIMAL:
            raise NotSupportedError(f"Dual values need an optimal solution, solver status is {self.cpm_status}")

    def dual_value(self, cpm_cons):
        """
            Dual value of constraint `cpm_cons`, given as the amlpy constraint
            that was posted or as its description.

            It is the rate of change of the objective per unit increase of the
            constraint's right-hand side.
        """
        self._check_duals()
        return self._native_row(cpm_cons).dual_value()

    def shadow_price(self, cpm_cons):
        if isinstance(cpm_cons, str):
            # look up the original expression, needed for the direction
            ort_row = self._native_row(cpm_cons)
            cpm_cons = next(expr for expr, row in self._conslist if row is ort_row)
        return super().shadow_price(cpm_cons)

    def reduced_cost(self, cpm_var):
        """
            Reduced cost of variable `cpm_var` in the optimal LP solution
        """
        self._check_duals()
        if cpm_var not in self._varmap:
            raise KeyError(f"Variable {cpm_var} is not known to {self.name}")
        return self._varmap[cpm_var].reduced_cost()
