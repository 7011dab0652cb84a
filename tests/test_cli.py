import unittest
from unittest import mock

import pytest

from amlpy import __version__
from amlpy.cli import main
from amlpy.exceptions import UnsatisfiableError


@pytest.fixture
def capsys_cls(request, capsys):
    request.cls.capsys = capsys


@pytest.mark.usefixtures("capsys_cls")
class TestCli(unittest.TestCase):
    def test_version(self):
        main(["version"])
        out = self.capsys.readouterr().out
        self.assertIn(f"amlpy version: {__version__}", out)
        self.assertIn("ortools", out)
        self.assertIn("scipy", out)

    def test_no_command(self):
        with self.assertRaises(SystemExit):
            main([])

    @pytest.mark.requires_solver("ortools:glop")
    def test_lp(self):
        self.assertEqual(main(["lp"]), 0)
        out = self.capsys.readouterr().out
        self.assertIn("Status: OPTIMAL", out)
        self.assertIn("Objective: 205", out)
        self.assertIn("c2: dual value", out)

    @pytest.mark.requires_solver("ortools:glop")
    def test_lp_rhs(self):
        # c1 dominates, met by x alone at a cost of 2 per unit
        self.assertEqual(main(["lp", "--c1", "1000"]), 0)
        self.assertIn("Objective: 2000", self.capsys.readouterr().out)

    @pytest.mark.requires_solver("scipy")
    def test_nlp(self):
        self.assertEqual(main(["nlp", "--start", "0.2"]), 0)
        self.assertIn("Objective: 1.414", self.capsys.readouterr().out)

    @pytest.mark.requires_solver("ortools:scip")
    def test_sudoku(self):
        self.assertEqual(main(["sudoku", "--level", "medium", "--seed", "3"]), 0)
        out = self.capsys.readouterr().out
        self.assertEqual(out.count("------+-------+------"), 4)
        self.assertNotIn(".", out.split("\n\n")[1])

    @pytest.mark.requires_solver("ortools:scip")
    def test_sudoku_html(self):
        self.assertEqual(main(["sudoku", "--html"]), 0)
        self.assertIn("<table>", self.capsys.readouterr().out)

    def test_sudoku_error(self):
        with mock.patch("amlpy.cli.solve_sudoku", side_effect=UnsatisfiableError("no solution")):
            with self.assertLogs("amlpy", level="ERROR") as logs:
                self.assertEqual(main(["sudoku"]), 1)
        self.assertIn("UnsatisfiableError", logs.output[0])

    @pytest.mark.requires_solver("ortools:scip")
    def test_sudoku_live_offline(self):
        import requests
        with mock.patch("amlpy.seminar.puzzles.requests.get", side_effect=requests.ConnectionError("offline")):
            with pytest.warns(UserWarning):
                self.assertEqual(main(["sudoku", "--live"]), 0)
