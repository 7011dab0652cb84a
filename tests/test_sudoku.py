import unittest

import numpy as np
import pytest

from amlpy import SolverLookup
from amlpy.exceptions import InvalidBoardError, UnsatisfiableError
from amlpy.seminar.puzzles import BOARDS, LEVELS
from amlpy.transformations.normalize import toplevel_list
from amlpy.seminar.sudoku import SudokuBoard, build_sudoku_model, extract_solution, solve_sudoku, \
                                 is_valid_solution, respects_clues

EMPTY = [[0] * 9 for _ in range(9)]

SOLVED = [[5, 3, 4, 6, 7, 8, 9, 1, 2],
          [6, 7, 2, 1, 9, 5, 3, 4, 8],
          [1, 9, 8, 3, 4, 2, 5, 6, 7],
          [8, 5, 9, 7, 6, 1, 4, 2, 3],
          [4, 2, 6, 8, 5, 3, 7, 9, 1],
          [7, 1, 3, 9, 2, 4, 8, 5, 6],
          [9, 6, 1, 5, 3, 7, 2, 8, 4],
          [2, 8, 7, 4, 1, 9, 6, 3, 5],
          [3, 4, 5, 2, 8, 6, 1, 7, 9]]


class TestSudokuBoard(unittest.TestCase):
    def test_valid(self):
        board = SudokuBoard(BOARDS["easy"][0])
        self.assertEqual(board.grid.shape, (9, 9))
        self.assertEqual(board.tolist(), BOARDS["easy"][0])
        self.assertIn((0, 5, 8), board.clues)
        self.assertEqual(len(board.clues), np.count_nonzero(BOARDS["easy"][0]))

    def test_read_only(self):
        board = SudokuBoard(EMPTY)
        with self.assertRaises(ValueError):
            board.grid[0, 0] = 5

    def test_equality(self):
        self.assertEqual(SudokuBoard(SOLVED), SudokuBoard(np.array(SOLVED)))
        self.assertNotEqual(SudokuBoard(SOLVED), SudokuBoard(EMPTY))
        self.assertEqual(len({SudokuBoard(SOLVED), SudokuBoard(SOLVED)}), 1)

    def test_bad_shape(self):
        with self.assertRaises(InvalidBoardError):
            SudokuBoard([[0] * 9 for _ in range(8)])
        with self.assertRaises(InvalidBoardError):
            SudokuBoard([[0] * 8 for _ in range(9)])
        with self.assertRaises(InvalidBoardError):
            SudokuBoard([[0] * 9] * 8 + [[0] * 10])

    def test_bad_digits(self):
        for bad in [10, -1, 2.5, "3", None, True]:
            grid = [row[:] for row in EMPTY]
            grid[4][4] = bad
            with self.assertRaises(InvalidBoardError):
                SudokuBoard(grid)


class TestSudokuModel(unittest.TestCase):
    def test_constraints(self):
        model, x = build_sudoku_model(EMPTY)
        self.assertEqual(x.shape, (9, 9, 9))
        constraints = toplevel_list(model.constraints)
        self.assertEqual(len(constraints), 324)
        descriptions = [c.desc for c in constraints]
        self.assertEqual(len(set(descriptions)), 324)
        for d in ["cell[1,1]", "row[9,9]", "col[3,7]", "box[4,7,2]"]:
            self.assertIn(d, descriptions)

    def test_clues_fixed(self):
        model, x = build_sudoku_model(BOARDS["easy"][0])
        self.assertTrue(x[0, 5, 7].is_fixed())
        self.assertEqual(x[0, 5, 7].get_bounds(), (1, 1))
        self.assertFalse(x[0, 0, 0].is_fixed())


class TestExtractSolution(unittest.TestCase):
    def _indicators(self, grid):
        vals = np.zeros((9, 9, 9))
        for i in range(9):
            for j in range(9):
                if grid[i][j] > 0:
                    vals[i, j, grid[i][j]-1] = 1
        return vals

    def test_exact(self):
        grid = extract_solution(self._indicators(SOLVED))
        self.assertEqual(grid.tolist(), SOLVED)

    def test_rounding(self):
        vals = self._indicators(SOLVED)
        vals[0, 0, 4] = 0.999999
        vals[0, 0, 2] = 1e-7
        grid = extract_solution(vals)
        self.assertEqual(grid[0, 0], 5)

    def test_missing_indicator(self):
        vals = self._indicators(SOLVED)
        vals[2, 3, :] = 0
        grid = extract_solution(vals)
        self.assertEqual(grid[2, 3], 0)
        self.assertFalse(is_valid_solution(grid))

    def test_none(self):
        vals = np.full((9, 9, 9), None, dtype=object)
        self.assertEqual(extract_solution(vals).tolist(), EMPTY)


class TestChecks(unittest.TestCase):
    def test_valid_solution(self):
        self.assertTrue(is_valid_solution(SOLVED))
        self.assertFalse(is_valid_solution(EMPTY))
        swapped = [row[:] for row in SOLVED]
        swapped[0][0], swapped[0][1] = swapped[0][1], swapped[0][0]
        self.assertFalse(is_valid_solution(swapped))
        self.assertFalse(is_valid_solution(SOLVED[:8]))

    def test_respects_clues(self):
        board = [row[:] for row in EMPTY]
        board[0][0] = 5
        self.assertTrue(respects_clues(board, SOLVED))
        board[0][0] = 3
        self.assertFalse(respects_clues(board, SOLVED))


@pytest.mark.usefixtures("solver")
@pytest.mark.requires_solver("ortools")
class TestSolveSudoku(unittest.TestCase):
    def test_configured_solver(self):
        grid = solve_sudoku(SudokuBoard(BOARDS["easy"][1]), solver=self.solver)
        self.assertIn(self.solver, SolverLookup.supported())
        self.assertTrue(is_valid_solution(grid))

    def test_empty(self):
        grid = solve_sudoku(SudokuBoard(EMPTY), solver=self.solver)
        self.assertTrue(is_valid_solution(grid))

    def test_builtin_boards(self):
        for level in LEVELS:
            board = SudokuBoard(BOARDS[level][0])
            grid = solve_sudoku(board, solver=self.solver)
            self.assertTrue(is_valid_solution(grid))
            self.assertTrue(respects_clues(board, grid))

    def test_solved_board(self):
        grid = solve_sudoku(SOLVED, solver=self.solver)
        self.assertEqual(grid.tolist(), SOLVED)

    def test_duplicate_in_row(self):
        board = [row[:] for row in EMPTY]
        board[0][0] = board[0][8] = 7
        with self.assertRaises(UnsatisfiableError):
            solve_sudoku(board, solver=self.solver)

    def test_duplicate_in_box(self):
        board = [row[:] for row in EMPTY]
        board[0][0] = board[1][1] = 4
        with self.assertRaises(UnsatisfiableError):
            solve_sudoku(board, solver=self.solver)

    @pytest.mark.requires_solver("ortools:cbc")
    def test_cbc(self):
        board = SudokuBoard(BOARDS["medium"][1])
        grid = solve_sudoku(board, solver="ortools:cbc")
        self.assertTrue(is_valid_solution(grid))
        self.assertTrue(respects_clues(board, grid))

    @pytest.mark.requires_solver("ortools:sat")
    def test_sat(self):
        board = SudokuBoard(BOARDS["hard"][2])
        grid = solve_sudoku(board, solver="ortools:sat")
        self.assertTrue(is_valid_solution(grid))
        self.assertTrue(respects_clues(board, grid))
