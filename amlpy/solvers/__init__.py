"""
    amlpy interfaces to (the Python API interface of) solvers

    Solvers use some of the generic transformations in
    :mod:`amlpy.transformations` to map the amlpy expressions to the solver's Python API.

    =========================
    List of helper submodules
    =========================
    .. autosummary::
        :nosignatures:

        solver_interface
        utils

    =========================
    List of solver submodules
    =========================
    .. autosummary::
        :nosignatures:

        ortools
        scipy
"""

from .utils import SolverLookup
from .ortools import AML_ortools
from .scipy import AML_scipy
