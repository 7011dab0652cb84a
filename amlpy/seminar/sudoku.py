#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## sudoku.py
##
"""
    Sudoku as a binary integer program

    A Sudoku is not an optimization problem, it is a feasibility problem: find an assignment
    of the digits 1..9 to the 81 cells such that every row, column and 3x3 box contains every
    digit exactly once, and that agrees with the given clues.

    The encoding uses one Boolean indicator `x[i,j,k]` per row i, column j and digit k,
    which is 1 iff cell (i,j) holds digit k. Every Sudoku rule is then an "exactly one"
    equality over nine indicators:

    - cell[i,j]:   every cell holds exactly one digit
    - row[i,k]:    every digit appears once in every row
    - col[j,k]:    every digit appears once in every column
    - box[i,j,k]:  every digit appears once in every 3x3 box (with top-left cell i,j)

    Indices in the constraint descriptions are 1-based, as on paper.

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        SudokuBoard

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        build_sudoku_model
        extract_solution
        solve_sudoku
        is_valid_solution
        respects_clues
"""
import numpy as np

from ..exceptions import InvalidBoardError, UnsatisfiableError, SolverError
from ..expressions.utils import is_int
from ..expressions.variables import boolvar
from ..model import Model
from ..solvers.utils import SolverLookup
from ..solvers.solver_interface import ExitStatus

N = 9  # digits, rows and columns
B = 3  # box size


class SudokuBoard(object):
    """
        A validated 9x9 Sudoku puzzle, 0 for blank cells and 1..9 for clues

        The board is immutable: `.grid` is a read-only numpy array.
    """
    def __init__(self, grid):
        try:
            arr = np.array(grid, dtype=object)
        except ValueError as e:  # irregular nesting
            raise InvalidBoardError(f"A Sudoku board is a 9x9 grid of digits: {e}") from e
        if arr.shape != (N, N):
            raise InvalidBoardError(f"A Sudoku board has shape {(N, N)}, got {arr.shape}")
        for val in arr.flat:
            if isinstance(val, (bool, np.bool_)) or not is_int(val) or not (0 <= val <= N):
                raise InvalidBoardError(f"Sudoku cells hold a digit 0..{N}, got {val!r}")

        self.grid = arr.astype(int)
        self.grid.setflags(write=False)

    @property
    def clues(self):
        """ list of (row, col, digit) of the filled-in cells, 0-based """
        return [(i, j, int(self.grid[i, j])) for i, j in zip(*np.nonzero(self.grid))]

    def tolist(self):
        return self.grid.tolist()

    def __eq__(self, other):
        if not isinstance(other, SudokuBoard):
            return NotImplemented
        return np.array_equal(self.grid, other.grid)

    def __hash__(self):
        return hash(self.grid.tobytes())

    def __repr__(self):
        return f"SudokuBoard({self.tolist()})"


def build_sudoku_model(board):
    """
        Build the binary integer program of `board`

        :param board: SudokuBoard (or anything its constructor accepts)

        :return: tuple (model, x) with x the (9,9,9) indicator variables,
                 x[i,j,k] is 1 iff cell (i,j) holds digit k+1
    """
    if not isinstance(board, SudokuBoard):
        board = SudokuBoard(board)

    x = boolvar(shape=(N, N, N), name="x")

    # the clues
    for i, j, digit in board.clues:
        x[i, j, digit-1].fix(1)

    model = Model()
    # every cell holds one digit
    model += [(x[i, j, :].sum() == 1).set_description(f"cell[{i+1},{j+1}]")
              for i in range(N) for j in range(N)]
    # every digit once per row
    model += [(x[i, :, k].sum() == 1).set_description(f"row[{i+1},{k+1}]")
              for i in range(N) for k in range(N)]
    # every digit once per column
    model += [(x[:, j, k].sum() == 1).set_description(f"col[{j+1},{k+1}]")
              for j in range(N) for k in range(N)]
    # every digit once per box
    model += [(x[i:i+B, j:j+B, k].sum() == 1).set_description(f"box[{i+1},{j+1},{k+1}]")
              for i in range(0, N, B) for j in range(0, N, B) for k in range(N)]

    return model, x


def extract_solution(values):
    """
        Read the digits from the indicator values

        The values are rounded to the nearest integer first, solvers return e.g. 0.9999997 for 1.
        A cell without an indicator at 1 is left 0.

        :param values: (9,9,9) array-like of indicator values, None for unknown
        :return: 9x9 numpy array of ints
    """
    vals = np.array(values, dtype=object)
    vals[vals == None] = 0  # noqa: E711, elementwise comparison
    rounded = np.rint(vals.astype(float)).astype(int)

    grid = np.zeros((N, N), dtype=int)
    for i in range(N):
        for j in range(N):
            digits = np.flatnonzero(rounded[i, j] == 1)
            if len(digits) > 0:
                grid[i, j] = digits[0] + 1
    return grid


def solve_sudoku(board, solver="ortools:scip", time_limit=None, **kwargs):
    """
        Solve the Sudoku puzzle `board` with a mixed-integer solver

        :param solver: name of a MIP solver, e.g. 'ortools:scip', 'ortools:cbc' or 'ortools:sat'
        :param time_limit: optional, time limit in seconds

        :return: 9x9 numpy array of the filled-in digits
        :raises UnsatisfiableError: when the clues admit no solution
        :raises SolverError: when the solver ends without a solution for any other reason
    """
    model, x = build_sudoku_model(board)

    s = SolverLookup.get(solver, model)
    if s.solve(time_limit=time_limit, **kwargs):
        return extract_solution(x.value())

    if s.status().exitstatus == ExitStatus.UNSATISFIABLE:
        raise UnsatisfiableError("The Sudoku clues admit no solution")
    raise SolverError(f"Solver ended without a solution: {s.status()}")


def is_valid_solution(grid):
    """ does every row, column and 3x3 box of `grid` contain the digits 1..9 exactly once? """
    arr = np.asarray(grid)
    if arr.shape != (N, N):
        return False
    digits = set(range(1, N+1))
    for i in range(N):
        if set(arr[i, :].tolist()) != digits or set(arr[:, i].tolist()) != digits:
            return False
    for i in range(0, N, B):
        for j in range(0, N, B):
            if set(arr[i:i+B, j:j+B].flat) != digits:
                return False
    return True


def respects_clues(board, grid):
    """ does `grid` hold the digit of every clue of `board`? """
    if not isinstance(board, SudokuBoard):
        board = SudokuBoard(board)
    arr = np.asarray(grid)
    return all(arr[i, j] == digit for i, j, digit in board.clues)
