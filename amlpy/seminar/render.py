#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## render.py
##
"""
    Rendering of Sudoku boards, as an HTML table (for notebooks) or as plain text

    Clues are printed in bold, digits filled in by the solver in red.
    Every third row and column gets a thick border, to mark the 3x3 boxes.
"""
import numpy as np

from .sudoku import SudokuBoard, N, B

ROW_BORDER = "<tr style='border-bottom: 3px solid #ddd;'>"
CELL_BORDER = "<td style='border-right: 3px solid #ddd;'>"


def board_to_html(board, solution=None):
    """
        HTML table of `board`, with the blanks filled in from `solution` when given

        :param board: SudokuBoard or 9x9 grid of clues (0 = blank)
        :param solution: optional 9x9 grid of digits
    """
    grid = _as_grid(board)
    sol = None if solution is None else np.asarray(solution)

    rows = []
    for i in range(N):
        cells = []
        for j in range(N):
            if grid[i, j] != 0:
                v = f"<b>{grid[i, j]}</b>"
            elif sol is not None:
                v = f"<span style='color:red;'>{sol[i, j]}</span>"
            else:
                v = "0"
            # 1-based: border after columns 3, 6 and 9
            td = CELL_BORDER if (j+1) % B == 0 else "<td>"
            cells.append(f"{td}{v}</td>")
        tr = ROW_BORDER if (i+1) % B == 0 else "<tr>"
        rows.append(tr + "".join(cells) + "</tr>")
    return "<table>" + "".join(rows) + "</table>"


def board_to_text(board, solution=None):
    """
        Plain text rendering of `board`, blanks as '.' unless filled in from `solution`

        Filled-in digits are not marked, use `board_to_html()` for that.
    """
    grid = _as_grid(board)
    sol = None if solution is None else np.asarray(solution)

    lines = []
    for i in range(N):
        if i > 0 and i % B == 0:
            lines.append("------+-------+------")
        cells = []
        for j in range(N):
            if j > 0 and j % B == 0:
                cells.append("|")
            if grid[i, j] != 0:
                cells.append(str(grid[i, j]))
            elif sol is not None and sol[i, j] != 0:
                cells.append(str(sol[i, j]))
            else:
                cells.append(".")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def _as_grid(board):
    if not isinstance(board, SudokuBoard):
        board = SudokuBoard(board)
    return board.grid
