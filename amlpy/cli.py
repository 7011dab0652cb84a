"""
Command-line interface for amlpy.

This module provides a simple CLI to interact with amlpy: display version
information about amlpy and the available solver backends, and run the
seminar demonstrations.

Usage:
    amlpy <COMMAND> [options]

Commands:
    version   Show the amlpy library version and the versions of installed solver backends.
    lp        Solve the production-planning LP and report primal and dual results.
    nlp       Solve the circle model with a user-defined square root.
    sudoku    Fetch a Sudoku puzzle and solve it as a binary integer program.
"""

import argparse
import logging
import sys

from amlpy import __version__
import amlpy as ap
from amlpy.exceptions import AmlpyException
from amlpy.seminar.lp import solve_production_lp
from amlpy.seminar.nlp import solve_circle
from amlpy.seminar.puzzles import get_provider, LEVELS
from amlpy.seminar.render import board_to_html, board_to_text
from amlpy.seminar.sudoku import solve_sudoku

logger = logging.getLogger("amlpy")


def command_version(args):
    print(f"amlpy version: {__version__}")
    ap.SolverLookup().print_version()

def command_lp(args):
    report = solve_production_lp(c1_rhs=args.c1, c2_rhs=args.c2, solver=args.solver)
    print(f"Status: {report.status.name} ({report.runtime} seconds)")
    if report.objective is None:
        return 1
    print(f"Objective: {report.objective:g}")
    for name, val in report.solution.items():
        print(f"  {name} = {val:g}   (reduced cost {report.reduced_costs[name]:g})")
    for name in report.duals:
        print(f"  {name}: dual value {report.duals[name]:g}, shadow price {report.shadow_prices[name]:g}")
    return 0

def command_nlp(args):
    report = solve_circle(start=args.start, solver=args.solver)
    print(f"Status: {report.status.name} ({report.runtime:.3f} seconds)")
    if report.objective is None:
        return 1
    print(f"Objective: {report.objective:.6f}")
    for name, val in report.solution.items():
        print(f"  {name} = {val:.6f}")
    return 0

def command_sudoku(args):
    board = get_provider(live=args.live, seed=args.seed).get_board(args.level)
    solution = solve_sudoku(board, solver=args.solver)
    if args.html:
        print(board_to_html(board, solution))
    else:
        print(board_to_text(board))
        print()
        print(board_to_text(board, solution))
    return 0

def main(argv=None):
    parser = argparse.ArgumentParser(description="amlpy command line interface")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug information")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # amlpy version
    version_parser = subparsers.add_parser("version", help="Show version information on amlpy and its solver backends")
    version_parser.set_defaults(func=command_version)

    # amlpy lp
    lp_parser = subparsers.add_parser("lp", help="Solve the production-planning linear program")
    lp_parser.add_argument("--c1", type=float, default=100, help="Right-hand side of constraint c1 (default: 100)")
    lp_parser.add_argument("--c2", type=float, default=120, help="Right-hand side of constraint c2 (default: 120)")
    lp_parser.add_argument("--solver", default="ortools:glop", help="LP solver (default: ortools:glop)")
    lp_parser.set_defaults(func=command_lp)

    # amlpy nlp
    nlp_parser = subparsers.add_parser("nlp", help="Solve the nonlinear circle model")
    nlp_parser.add_argument("--start", type=float, default=0.5, help="Starting point of both coordinates, in -2..2 (default: 0.5)")
    nlp_parser.add_argument("--solver", default="scipy", help="Nonlinear solver (default: scipy, i.e. trust-constr)")
    nlp_parser.set_defaults(func=command_nlp)

    # amlpy sudoku
    sudoku_parser = subparsers.add_parser("sudoku", help="Solve a Sudoku puzzle")
    sudoku_parser.add_argument("--level", choices=LEVELS, default="easy", help="Difficulty level (default: easy)")
    sudoku_parser.add_argument("--live", action="store_true", help="Fetch a fresh puzzle from the web service")
    sudoku_parser.add_argument("--seed", type=int, default=None, help="Seed for picking a built-in puzzle")
    sudoku_parser.add_argument("--solver", default="ortools:scip", help="MIP solver (default: ortools:scip)")
    sudoku_parser.add_argument("--html", action="store_true", help="Print the board as an HTML table")
    sudoku_parser.set_defaults(func=command_sudoku)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s')

    try:
        return args.func(args)
    except AmlpyException as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
