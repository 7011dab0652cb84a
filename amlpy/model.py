#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## model.py
##
"""
    The `Model` class is a lazy container for constraints and an objective function.

    It is lazy in that it only stores the constraints and objective that are added
    to it. Processing only starts when solve() is called, and this does not modify
    the constraints or objective stored in the model.

    A model can be solved multiple times, and constraints can be added to it inbetween
    solve calls.

    See the examples for basic usage, which involves:

    - creation, e.g. m = Model(cons, minimize=obj)
    - solving, e.g. m.solve()
    - optionally, checking status/runtime, e.g. m.status()

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        Model
"""
import pickle
import warnings

from .expressions.utils import is_any_list
from .solvers.utils import SolverLookup
from .solvers.solver_interface import SolverInterface, SolverStatus


class Model(object):
    """
    amlpy Model object, contains the constraint and objective expressions
    """

    def __init__(self, *args, minimize=None, maximize=None):
        """
            Arguments of constructor:

            - `*args`: Expression object(s) or list(s) of Expression objects
            - `minimize`: Expression object representing the objective to minimize
            - `maximize`: Expression object representing the objective to maximize

            At most one of minimize/maximize can be set, if none are set, it is assumed to be a feasibility problem
        """
        assert ((minimize is None) or (maximize is None)), "can not set both minimize and maximize"
        self.cpm_status = SolverStatus("Model") # status of solving this model, will be replaced

        # list of constraints
        if len(args) == 0:
            self.constraints = []
        elif len(args) == 1 and is_any_list(args[0]):
            # top level list of constraints
            self.constraints = list(args[0]) # make sure it is a Python list
        else:
            self.constraints = list(args) # instead of tuple

        # objective: an expresion or None
        self.objective_ = None
        self.objective_is_min = None
        if maximize is not None:
            self.maximize(maximize)
        if minimize is not None:
            self.minimize(minimize)

    def __add__(self, con):
        """
            Add one or more constraints to the model

            m = Model()
            m += [x >= 0]
        """
        # ignore empty list
        if is_any_list(con) and len(con)==0:
            return self

        if is_any_list(con) and len(con) == 1 and is_any_list(con[0]):
            # top level list of constraints
            con = con[0]
        self.constraints.append(con)
        return self

    def objective(self, expr, minimize):
        """
            Post the given expression to the solver as objective to minimize/maximize

            - expr: Expression, the amlpy expression that represents the objective function
            - minimize: Bool, whether it is a minimization problem (True) or maximization problem (False)

            'objective()' can be called multiple times, only the last one is stored
        """
        self.objective_ = expr
        self.objective_is_min = minimize

    def minimize(self, expr):
        """
            Minimize the given objective function

            `minimize()` can be called multiple times, only the last one is stored
        """
        self.objective(expr, minimize=True)

    def maximize(self, expr):
        """
            Maximize the given objective function

            `maximize()` can be called multiple times, only the last one is stored
        """
        self.objective(expr, minimize=False)

    def has_objective(self):
        return self.objective_ is not None

    # solver: name of supported solver or any SolverInterface class
    def solve(self, solver=None, time_limit=None, **kwargs):
        """ Send the model to a solver and get the result

        :param solver: name of a solver to use. Run SolverLookup.supported() to find out the valid solver names on your system.
            (default: None = 'ortools' for linear models, 'scipy' for nonlinear ones)
        :type string: None (default) or a name in SolverLookup.supported() or a SolverInterface class (Class, not object!)

        :param time_limit: optional, time limit in seconds
        :type time_limit: int or float

        :param kwargs: parameters of the native solver, see the `solve()` of the solver interface

        :return: Bool: the computed output:
            - True      if a solution is found (not necessarily optimal, e.g. could be after timeout)
            - False     if no solution is found
        """
        if isinstance(solver, type) and issubclass(solver, SolverInterface):
            # for advanced use, call its constructor with this model
            s = solver(self)
        else:
            if solver is None:
                solver = SolverLookup.default_for(self)
            s = SolverLookup.get(solver, self)

        # call solver
        ret = s.solve(time_limit=time_limit, **kwargs)
        # store amlpy status (s object has no further use)
        self.cpm_status = s.status()
        return ret

    def status(self):
        """
            Returns the status of the latest solver run on this model

            Status information includes exit status (optimality) and runtime.

        :return: an object of :class:`SolverStatus`
        """
        return self.cpm_status

    def objective_value(self):
        """
            Returns the value of the objective function of the latest solver run on this model

        :return: a number or 'None' if it is not run, or a feasibility problem
        """
        if self.objective_ is None:
            return None
        return self.objective_.value()

    def __repr__(self):
        cons_str = ""
        for c in self.constraints:
            cons_str += "    {}\n".format(c)

        obj_str = ""
        if not self.objective_ is None:
            if self.objective_is_min:
                obj_str = "minimize "
            else:
                obj_str = "maximize "
        obj_str += str(self.objective_)

        return "Constraints:\n{}Objective: {}".format(cons_str, obj_str)

    def to_file(self, fname):
        """
            Serializes this model to a .pickle format

            :param: fname: Filename of the resulting serialized model
        """
        with open(fname,"wb") as f:
            pickle.dump(self, file=f)

    @staticmethod
    def from_file(fname):
        """
            Reads a Model instance from a binary pickled file

            :return: an object of :class: `Model`
        """
        with open(fname, "rb") as f:
            m = pickle.load(f)

        # increase the counters of unnamed variables, to avoid duplicate names
        from .transformations.get_variables import get_variables_model  # avoid circular import
        from .expressions.variables import _BoolVarImpl, _IntVarImpl, _FloatVarImpl
        counters = {"BV": 0, "IV": 0, "FV": 0}
        for v in get_variables_model(m):
            prefix, num = v.name[:2], v.name[2:]
            if prefix in counters and num.isdigit():
                counters[prefix] = max(counters[prefix], int(num)+1)

        for prefix, cls in (("BV", _BoolVarImpl), ("IV", _IntVarImpl), ("FV", _FloatVarImpl)):
            if cls.counter > 0 and counters[prefix] > 0:
                warnings.warn(f"from_file '{fname}': contains unnamed {prefix}* variables with the same name as already created. "
                              "Only add expressions created AFTER loading this model to avoid issues with duplicate variables.")
            cls.counter = max(cls.counter, counters[prefix])
        return m

    def copy(self):
        """
            Makes a shallow copy of the model.
            Constraints and variables are shared among the original and copied model.
        """
        if self.objective_is_min:
            return Model(self.constraints, minimize=self.objective_)
        else:
            return Model(self.constraints, maximize=self.objective_)
