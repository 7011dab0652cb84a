import unittest

from amlpy.seminar.puzzles import BOARDS
from amlpy.seminar.render import board_to_html, board_to_text, ROW_BORDER, CELL_BORDER
from amlpy.seminar.sudoku import SudokuBoard

from test_sudoku import SOLVED, EMPTY


class TestHtml(unittest.TestCase):
    def test_unsolved(self):
        html = board_to_html(EMPTY)
        self.assertTrue(html.startswith("<table>"))
        self.assertTrue(html.endswith("</table>"))
        self.assertEqual(html.count("<tr"), 9)
        self.assertEqual(html.count(ROW_BORDER), 3)
        self.assertEqual(html.count(CELL_BORDER), 27)
        self.assertEqual(html.count(">0</td>"), 81)
        self.assertNotIn("<b>", html)

    def test_clues_bold(self):
        board = SudokuBoard(BOARDS["easy"][0])
        html = board_to_html(board)
        self.assertEqual(html.count("<b>"), len(board.clues))
        self.assertIn("<b>8</b>", html)

    def test_solution_red(self):
        board = [row[:] for row in SOLVED]
        board[0][0] = 0
        html = board_to_html(board, SOLVED)
        self.assertEqual(html.count("color:red"), 1)
        self.assertIn("<span style='color:red;'>5</span>", html)
        self.assertEqual(html.count("<b>"), 80)


class TestText(unittest.TestCase):
    def test_layout(self):
        text = board_to_text(EMPTY)
        lines = text.split("\n")
        self.assertEqual(len(lines), 11)
        self.assertEqual(lines[0], ". . . | . . . | . . .")
        self.assertEqual(lines[3], "------+-------+------")
        self.assertEqual(len(lines[3]), len(lines[0]))

    def test_filled(self):
        text = board_to_text(EMPTY, SOLVED)
        self.assertEqual(text.split("\n")[0], "5 3 4 | 6 7 8 | 9 1 2")
        self.assertNotIn(".", text)
