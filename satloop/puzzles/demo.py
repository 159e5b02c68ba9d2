"""Puzzle demo - end-to-end runs of the reference encodings.

Each demo encodes a sample puzzle, runs the refinement loop, checks
uniqueness and prints the rendered solution.
"""

import logging
from functools import partial
from typing import Any, Dict, Optional, Tuple

from satloop.core.refine.loop import RefineConfig
from satloop.core.solver import DEFAULT_SOLVER_NAME
from satloop.puzzles import numberlink, slitherlink, sudoku
from satloop.puzzles.examples import NUMBERLINK, SLITHERLINK, SUDOKU, parse_sudoku

logger = logging.getLogger(__name__)

PUZZLES = ("sudoku", "slitherlink", "numberlink")


def demo_puzzle(
    puzzle: str,
    solver_name: str = DEFAULT_SOLVER_NAME,
    conflict_budget: Optional[int] = None,
    max_trials: Optional[int] = 1000,
    check_unique: bool = True,
    filled: bool = True,
    verbose: bool = True,
) -> Tuple[Any, Dict[str, Any]]:
    """Solve one sample puzzle and print the outcome.

    Args:
        puzzle: One of PUZZLES
        solver_name: python-sat backend name
        conflict_budget: Conflict limit per solve call
        max_trials: Trial limit for each refinement run
        check_unique: Also search for a second solution
        filled: Numberlink only: every blank cell must carry a line
        verbose: Print the field and the result

    Returns:
        Tuple of (solution, metadata) from the puzzle's solver
    """
    config = RefineConfig(max_trials=max_trials)
    options = dict(
        check_unique=check_unique,
        solver_name=solver_name,
        conflict_budget=conflict_budget,
        config=config,
    )

    logger.info(f"Running {puzzle} demo with {solver_name}")

    if puzzle == "sudoku":
        grid = parse_sudoku(SUDOKU)
        show = sudoku.render
        solution, metadata = sudoku.solve_sudoku(grid, **options)
    elif puzzle == "slitherlink":
        field = SLITHERLINK
        show = partial(slitherlink.render, field)
        solution, metadata = slitherlink.solve_slitherlink(field, **options)
    elif puzzle == "numberlink":
        field = NUMBERLINK
        show = partial(numberlink.render, field)
        solution, metadata = numberlink.solve_numberlink(field, filled=filled, **options)
    else:
        raise ValueError(f"Unknown puzzle: {puzzle} (expected one of {', '.join(PUZZLES)})")

    if verbose:
        print("=" * 40)
        print(f"satloop {puzzle} demo ({solver_name})")
        print("=" * 40)
        print(f"\nStatus: {metadata['status']}")
        print(f"Trials: {metadata['trials']}")
        if "blocked_loops" in metadata:
            print(f"Blocked loops: {metadata['blocked_loops']}")
        if solution is not None:
            print()
            print(show(solution))
            if metadata["unique"] is not None:
                print(f"\nUnique: {'yes' if metadata['unique'] else 'no'}")
            if metadata["alternative"] is not None:
                print("\nAnother solution:")
                print(show(metadata["alternative"]))

    return solution, metadata
