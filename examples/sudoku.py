#!/usr/bin/python3
"""
Sudoku as a binary integer program in amlpy

One Boolean x[i,j,k] per cell (i,j) and digit k, every Sudoku rule is an
"exactly one" constraint over nine of them.
"""

# load the libraries
import numpy as np
from amlpy import *

e = 0 # value for empty cells
given = np.array([
    [e, e, e,  2, e, 5,  e, e, e],
    [e, 9, e,  e, e, e,  7, 3, e],
    [e, e, 2,  e, e, 9,  e, 6, e],

    [2, e, e,  e, e, e,  4, e, 9],
    [e, e, e,  e, 7, e,  e, e, e],
    [6, e, 9,  e, e, e,  e, e, 1],

    [e, 8, e,  4, e, e,  1, e, e],
    [e, 6, 3,  e, e, e,  e, 8, e],
    [e, e, e,  6, e, 8,  e, e, e]])


# Variables
x = boolvar(shape=(9,9,9), name="x")

# the clues
for i, j in zip(*np.nonzero(given)):
    x[i, j, given[i,j]-1].fix(1)

model = Model(
    # one digit per cell
    [x[i,j,:].sum() == 1 for i in range(9) for j in range(9)],
    # every digit once in every row, and once in every column
    [x[i,:,k].sum() == 1 for i in range(9) for k in range(9)],
    [x[:,j,k].sum() == 1 for j in range(9) for k in range(9)],
)

# every digit once in every block
for i in range(0,9, 3):
    for j in range(0,9, 3):
        model += [x[i:i+3, j:j+3, k].sum() == 1 for k in range(9)] # python's indexing


# Solve and print
if model.solve("ortools:scip"):
    puzzle = np.argmax(np.rint(x.value().astype(float)), axis=2) + 1
    # pretty print, mark givens with *
    out = ""
    for r in range(0,9):
        for c in range(0,9):
            out += str(puzzle[r,c])
            out += '* ' if given[r,c] else '  '
            if (c+1) % 3 == 0 and c != 8: # end of block
                out += '| '
        out += '\n'
        if (r+1) % 3 == 0 and r != 8: # end of block
            out += ('-'*9)+'+-'+('-'*9)+'+'+('-'*9)+'\n'
    print(out)
else:
    print("No solution found")
