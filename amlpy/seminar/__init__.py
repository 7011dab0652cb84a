"""
    Seminar demonstrations built on amlpy

    ==================
    List of submodules
    ==================
    .. autosummary::
        :nosignatures:

        lp
        nlp
        sudoku
        puzzles
        render
"""
from .sudoku import SudokuBoard, solve_sudoku
from .puzzles import get_provider
from .lp import solve_production_lp
from .nlp import solve_circle, newton_sqrt
from .render import board_to_html, board_to_text
