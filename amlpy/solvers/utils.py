#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## utils.py
##
"""
    Utilities for handling solvers

    ===============
    List of classes
    ===============

    .. autosummary::
        :nosignatures:

        SolverLookup
"""
import logging

from .ortools import AML_ortools
from .scipy import AML_scipy

logger = logging.getLogger(__name__)


class SolverLookup():
    @classmethod
    def base_solvers(cls):
        """
            Return ordered list of (name, class) of base amlpy
            solvers

            First one is default
        """
        return [
                ("ortools", AML_ortools),
                ("scipy", AML_scipy),
               ]

    @classmethod
    def print_status(cls):
        """
            Print all amlpy solvers and their installation status on this system.
        """
        for (basename, AML_slv) in cls.base_solvers():
            if AML_slv.supported():
                print(f"{basename}: Supported, ready to use.")
            else:
                print(f"{basename}: Not supported (missing Python package).")

    @classmethod
    def supported(cls):
        """
            Return the list of names of all solvers (and subsolvers) supported on this system.

            Typical use case is to use these names in `SolverLookup.get(name)`.
        """
        names = []
        for (basename, AML_slv) in cls.base_solvers():
            if AML_slv.supported():
                names.append(basename)
                for subn in AML_slv.solvernames(installed=True):
                    names.append(basename+":"+subn)
        return names

    @classmethod
    def get(cls, name=None, model=None, **init_kwargs):
        """
            get a specific solver (by name), with 'model' passed to its constructor

            This is the preferred way to initialise a solver from its name

            :param name: name of the solver to use, e.g. "ortools", "ortools:glop" or "scipy:slsqp"
            :param model: model to pass to the solver constructor
            :param init_kwargs: additional keyword arguments to pass to the solver constructor
        """
        solver_cls = cls.lookup(name=name)

        # check for a 'solver:subsolver' name
        subname = None
        if name is not None and ':' in name:
            _,subname = name.split(':',maxsplit=1)
        logger.debug("Creating solver %s (subsolver %s)", solver_cls.__name__, subname)
        return solver_cls(model, subsolver=subname, **init_kwargs)

    @classmethod
    def lookup(cls, name=None):
        """
            lookup a solver _class_ by its name

            warning: returns a 'class', not an object!
            see get() for normal uses
        """
        if name is None:
            # first solver class
            return cls.base_solvers()[0][1]

        # split name if relevant
        solvername = name
        if ':' in solvername:
            solvername,_ = solvername.split(':',maxsplit=1)

        for (basename, AML_slv) in cls.base_solvers():
            if basename == solvername:
                # found the right solver
                return AML_slv
        raise ValueError(f"Unknown solver '{name}', choose from {cls.supported()}")

    @classmethod
    def default_for(cls, model):
        """
            Name of the solver to use for `model` when the user did not pick one:
            the linear solver when the model is linear, the nonlinear one otherwise
        """
        from ..transformations.linearize import linearize_constraint, is_linear
        from ..exceptions import NotSupportedError
        try:
            linearize_constraint(model.constraints)
        except NotSupportedError:
            logger.info("Model has nonlinear constraints, using the scipy solver")
            return "scipy"
        if model.objective_ is not None and not is_linear(model.objective_):
            logger.info("Model has a nonlinear objective, using the scipy solver")
            return "scipy"
        return "ortools"

    @classmethod
    def version(cls):
        """
        Returns an overview of all solvers supported by amlpy as a list of dicts.

        Each dict consists of:

        - "name": <base_solver> or <base_solver>:<subsolver>
        - "installed": install status (True/False)
        - "version": version of solver's Python library (or one of its subsolvers if applicable)
        """
        result = []
        for (basename, AML_slv) in cls.base_solvers():
            installed = AML_slv.supported()
            version = AML_slv.version() if installed else None

            # Collect main solver status
            result.append({
                    "name": basename,
                    "installed": installed,
                    "version": version,
                })

            # Handle subsolvers
            if installed:
                installed_subnames = AML_slv.solvernames(installed=True)
                for subn in AML_slv.solvernames():
                    result.append({
                        "name": basename + ":" + subn,
                        "installed": subn in installed_subnames,
                        "version": AML_slv.solverversion(subn),
                    })
        return result

    @classmethod
    def print_version(cls):
        """
        Prints a tabulated report on the different solvers supported by amlpy,
        i.e. whether they are installed on the current system and if so which version.
        """
        # Print the header
        print(f"{'Solver':<25} {'Installed':<10} {'Version':<15}")
        print("-" * 50)

        for solver_version in cls.version():
            basename, installed, version = solver_version["name"], solver_version["installed"], solver_version["version"]

            # subsolvers are indented
            if ':' in basename:
                print(f" - {basename.split(':')[-1]:<22} {'Yes' if installed else 'No':<10} {(version if version else ' '):<15}")
            else:
                version = version if version else "Not found" if installed else "-"
                print(f"{basename:<25} {'Yes' if installed else 'No':<10} {version:<15}")
