"""
    amlpy is a small numpy-based algebraic modeling library for linear, mixed-integer and
    nonlinear optimization problems in Python, with a set of seminar demonstrations built on it.

    The package consists of 5 modules:
    - `model`: a generic container for expressions (constraints and an objective), it can also pick a solver and call it
    - `expressions`: all forms of expression objects that allow you to specify constraints and objectives over variables
    - `solvers`: amlpy classes that translate a model into appropriate calls of a solver's API (OR-Tools, SciPy)
    - `transformations`: common methods for transforming expressions into other expressions or solver-ready data, used by `solvers` modules
    - `seminar`: the demonstrations, a production-planning LP, a nonlinear circle problem and a Sudoku solver
"""

__version__ = "0.3.0"


from .expressions import *
from .model import Model
from .solvers.utils import SolverLookup
