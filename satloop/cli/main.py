"""satloop CLI - Command-line interface for the reference puzzle solvers.

This module provides the main CLI entrypoint for satloop, running the
sample puzzles through the refinement loop or solving a sudoku given on
the command line.
"""

import argparse
import logging
import sys

from satloop.core.config import get_config_value
from satloop.core.refine.loop import RefineConfig
from satloop.core.solver import DEFAULT_SOLVER_NAME
from satloop.puzzles.demo import PUZZLES, demo_puzzle
from satloop.puzzles.examples import parse_sudoku
from satloop.puzzles.sudoku import render, solve_sudoku

logger = logging.getLogger(__name__)


def _add_solver_options(parser):
    parser.add_argument(
        "--solver",
        default=None,
        help=f"python-sat backend (default: from config.json or {DEFAULT_SOLVER_NAME})"
    )
    parser.add_argument(
        "--max-trials",
        type=int,
        default=None,
        help="Maximum solve calls per refinement run (default: from config.json or 1000)"
    )
    parser.add_argument(
        "--conflict-budget",
        type=int,
        default=None,
        help="Conflict limit per solve call; exceeding it reports 'unknown'"
    )
    parser.add_argument(
        "--no-unique",
        action="store_true",
        help="Skip the uniqueness check"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )


def main(argv=None):
    """Main CLI entrypoint for satloop."""
    parser = argparse.ArgumentParser(
        prog="satloop",
        description="satloop - incremental SAT solving with refinement loops",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve the sample slitherlink
  satloop demo slitherlink

  # Use another backend and a trial limit
  satloop demo numberlink --solver glucose4 --max-trials 50

  # Solve a sudoku given as 81 characters ('.' for blanks)
  satloop sudoku 53..7....6..195....98....6.8...6...34..8.3..17...2...6.6....28....419..5....8..79

Note:
  Defaults are read from config.json, e.g.
  {"solver": {"name": "cadical195"}, "refine": {"max_trials": 500}}
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo",
        help="Solve one of the sample puzzles"
    )
    demo_parser.add_argument(
        "puzzle",
        choices=PUZZLES,
        help="Sample puzzle to solve"
    )
    demo_parser.add_argument(
        "--blank",
        action="store_true",
        help="Numberlink: allow cells without a line"
    )
    _add_solver_options(demo_parser)

    # Sudoku command
    sudoku_parser = subparsers.add_parser(
        "sudoku",
        help="Solve a 9x9 sudoku given as an 81-character string"
    )
    sudoku_parser.add_argument(
        "grid",
        help="Cells row by row, '.' or '0' for blanks"
    )
    _add_solver_options(sudoku_parser)

    args = parser.parse_args(argv)

    # Setup logging
    if hasattr(args, 'verbose') and args.verbose:
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')

    # Handle commands
    if args.command == "demo":
        return cmd_demo(args)
    elif args.command == "sudoku":
        return cmd_sudoku(args)
    else:
        parser.print_help()
        return 1


def _solver_settings(args):
    """Solver name, conflict budget and refine config with CLI args as overrides."""
    solver_name = args.solver
    if solver_name is None:
        solver_name = get_config_value(["solver", "name"], default=DEFAULT_SOLVER_NAME)

    conflict_budget = args.conflict_budget
    if conflict_budget is None:
        conflict_budget = get_config_value(["solver", "conflict_budget"], default=None)
        if conflict_budget is not None:
            conflict_budget = int(conflict_budget)

    max_trials = args.max_trials
    if max_trials is None:
        max_trials = get_config_value(["refine", "max_trials"], default=1000)

    return solver_name, conflict_budget, RefineConfig(max_trials=max_trials)


def cmd_demo(args):
    """Handle demo command."""
    try:
        solver_name, conflict_budget, config = _solver_settings(args)
        solution, metadata = demo_puzzle(
            args.puzzle,
            solver_name=solver_name,
            conflict_budget=conflict_budget,
            max_trials=config.max_trials,
            check_unique=not args.no_unique,
            filled=not args.blank,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.exception("Demo failed")
        return 1

    return 0 if metadata["status"] == "solved" else 1


def cmd_sudoku(args):
    """Handle sudoku command."""
    try:
        solver_name, conflict_budget, config = _solver_settings(args)
        grid = parse_sudoku(args.grid)
        solution, metadata = solve_sudoku(
            grid,
            check_unique=not args.no_unique,
            solver_name=solver_name,
            conflict_budget=conflict_budget,
            config=config,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.exception("Sudoku failed")
        return 1

    print(f"Status: {metadata['status']}")
    if solution is None:
        return 1

    print()
    print(render(solution))
    if metadata["unique"] is not None:
        print(f"\nUnique: {'yes' if metadata['unique'] else 'no'}")
    if metadata["alternative"] is not None:
        print("\nAnother solution:")
        print(render(metadata["alternative"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
