"""Sudoku encoding.

Variables: one per (row, column, digit). Clauses: every cell holds exactly
one digit, and every row, column and box holds each digit exactly once.
Givens are not clauses; they are passed as solve-time assumptions, so the
same encoded solver can be reused for several puzzles of the same size.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from satloop.core.builder import ClauseBuilder
from satloop.core.literal import Literal, Variable
from satloop.core.model import Model
from satloop.core.refine.loop import RefineConfig, refine
from satloop.core.refine.uniqueness import check_uniqueness
from satloop.core.solver import DEFAULT_SOLVER_NAME, BaseSolver

logger = logging.getLogger(__name__)

Grid = List[List[int]]
SudokuVars = List[List[List[Variable]]]


def check_grid(grid: Sequence[Sequence[Optional[int]]], box: int) -> None:
    """Validate grid shape and cell values.

    Raises:
        ValueError: If the grid is not side x side or holds out-of-range values
    """
    side = box * box
    if len(grid) != side:
        raise ValueError(f"Sudoku grid must have {side} rows, got {len(grid)}")
    for y, row in enumerate(grid):
        if len(row) != side:
            raise ValueError(f"Row {y + 1} must have {side} cells, got {len(row)}")
        for value in row:
            if value and not 1 <= value <= side:
                raise ValueError(f"Row {y + 1}: value {value} outside 1..{side}")


def define_sudoku(builder: ClauseBuilder, box: int = 3) -> SudokuVars:
    """Allocate variables and add the sudoku rules.

    Args:
        builder: Clause builder over the target solver
        box: Box size (3 for the classic 9x9 grid)

    Returns:
        ``digit_vars[row][col][digit]`` with digits indexed from 0
    """
    side = box * box
    digits = range(side)
    cells = [(y, x) for y in range(side) for x in range(side)]
    digit_vars: SudokuVars = [
        [[builder.new_variable() for _ in digits] for _ in range(side)] for _ in range(side)
    ]

    for y, x in cells:
        builder.exactly_one([+v for v in digit_vars[y][x]])

    groups: List[List[Tuple[int, int]]] = []
    groups += [[(y, x) for x in range(side)] for y in range(side)]
    groups += [[(y, x) for y in range(side)] for x in range(side)]
    for by in range(box):
        for bx in range(box):
            groups.append([
                (by * box + dy, bx * box + dx) for dy in range(box) for dx in range(box)
            ])

    for group in groups:
        for d in digits:
            builder.exactly_one([+digit_vars[y][x][d] for y, x in group])

    logger.info(f"Defined {side}x{side} sudoku with {builder.solver.clause_size} clauses")
    return digit_vars


def given_assumptions(digit_vars: SudokuVars, grid: Sequence[Sequence[Optional[int]]]) -> List[Literal]:
    """Assumptions fixing every given cell to its digit."""
    assumptions = []
    for y, row in enumerate(grid):
        for x, value in enumerate(row):
            if not value:
                continue
            for d, v in enumerate(digit_vars[y][x]):
                assumptions.append(+v if d == value - 1 else -v)
    return assumptions


def decode(model: Model, digit_vars: SudokuVars) -> Grid:
    """Read the digit grid out of a model."""
    return [
        [next(d + 1 for d, v in enumerate(cell) if model.get(v)) for cell in row]
        for row in digit_vars
    ]


def render(grid: Sequence[Sequence[Optional[int]]], box: int = 3) -> str:
    """Text rendering with box separators; blanks shown as '.'."""
    side = box * box
    width = len(str(side))
    lines = []
    for y, row in enumerate(grid):
        if y and y % box == 0:
            lines.append("-+-".join("-" * ((width + 1) * box - 1) for _ in range(box)))
        chunks = []
        for bx in range(box):
            cells = row[bx * box:(bx + 1) * box]
            chunks.append(" ".join(str(v).rjust(width) if v else ".".rjust(width) for v in cells))
        lines.append(" | ".join(chunks))
    return "\n".join(lines)


def solve_sudoku(
    grid: Sequence[Sequence[Optional[int]]],
    box: int = 3,
    check_unique: bool = True,
    solver_name: str = DEFAULT_SOLVER_NAME,
    conflict_budget: Optional[int] = None,
    config: Optional[RefineConfig] = None,
) -> Tuple[Optional[Grid], Dict[str, Any]]:
    """Solve a sudoku and optionally check that the solution is unique.

    Args:
        grid: Rows of digits, 0 or None for blanks
        box: Box size
        check_unique: Run the second solve looking for a different solution
        solver_name: python-sat backend name
        conflict_budget: Conflict limit per solve call (None for no limit)
        config: Refinement configuration (trial limit)

    Returns:
        Tuple of (solution, metadata)

        metadata contains:
        - status: "solved" | "unsolvable" | "unknown"
        - trials: Solve calls spent finding the solution
        - unique: True/False/None (None when not checked)
        - alternative: A different solution grid if one exists

    Example:
        >>> solution, meta = solve_sudoku(PUZZLE)
        >>> meta["status"], meta["unique"]
        ('solved', True)
    """
    check_grid(grid, box)

    with BaseSolver(solver_name, conflict_budget=conflict_budget) as solver:
        builder = ClauseBuilder(solver)
        digit_vars = define_sudoku(builder, box)
        assumptions = given_assumptions(digit_vars, grid)

        result = refine(solver, assumptions=assumptions, config=config)
        metadata: Dict[str, Any] = {
            "status": "solved",
            "trials": result.trials,
            "unique": None,
            "alternative": None,
        }
        if result.status != "accepted":
            metadata["status"] = "unsolvable" if result.status == "rejected" else "unknown"
            return None, metadata

        solution = decode(result.model, digit_vars)
        if check_unique:
            relevant = [v for row in digit_vars for cell in row for v in cell]
            uniqueness = check_uniqueness(
                solver, result.model, relevant, assumptions=assumptions, config=config
            )
            metadata["unique"] = uniqueness.unique
            if uniqueness.witness is not None:
                metadata["alternative"] = decode(uniqueness.witness, digit_vars)

    return solution, metadata
