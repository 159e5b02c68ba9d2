"""Integration tests for the sudoku encoding.

Tests cover:
- Solving a published puzzle and checking uniqueness
- Puzzles with several solutions
- Contradictory givens reported as unsolvable
- Grid validation and rendering
"""

import pytest

from satloop.core.builder import ClauseBuilder
from satloop.core.solver import BaseSolver
from satloop.puzzles.examples import SUDOKU, SUDOKU_SOLUTION, parse_sudoku
from satloop.puzzles.sudoku import decode, define_sudoku, given_assumptions, render, solve_sudoku


def is_valid_solution(grid, box=3):
    side = box * box
    digits = set(range(1, side + 1))
    rows = [set(row) for row in grid]
    cols = [set(grid[y][x] for y in range(side)) for x in range(side)]
    boxes = [
        set(grid[by * box + dy][bx * box + dx] for dy in range(box) for dx in range(box))
        for by in range(box) for bx in range(box)
    ]
    return all(group == digits for group in rows + cols + boxes)


def test_published_puzzle():
    """The sample puzzle has exactly one solution."""
    solution, metadata = solve_sudoku(parse_sudoku(SUDOKU))

    assert metadata["status"] == "solved"
    assert metadata["trials"] == 1
    assert solution == parse_sudoku(SUDOKU_SOLUTION)
    assert metadata["unique"] is True
    assert metadata["alternative"] is None


def test_givens_kept():
    grid = parse_sudoku(SUDOKU)
    solution, _ = solve_sudoku(grid, check_unique=False)
    for y in range(9):
        for x in range(9):
            if grid[y][x]:
                assert solution[y][x] == grid[y][x]


def test_skip_uniqueness():
    _, metadata = solve_sudoku(parse_sudoku(SUDOKU), check_unique=False)
    assert metadata["unique"] is None


def test_empty_grid_not_unique():
    grid = [[0] * 9 for _ in range(9)]

    solution, metadata = solve_sudoku(grid)

    assert metadata["status"] == "solved"
    assert is_valid_solution(solution)
    assert metadata["unique"] is False
    assert is_valid_solution(metadata["alternative"])
    assert metadata["alternative"] != solution


def test_contradictory_givens():
    grid = [[0] * 9 for _ in range(9)]
    grid[0][0] = 5
    grid[0][8] = 5

    solution, metadata = solve_sudoku(grid)

    assert solution is None
    assert metadata["status"] == "unsolvable"


def test_four_by_four():
    grid = [
        [1, 0, 0, 0],
        [0, 0, 3, 0],
        [0, 4, 0, 0],
        [0, 0, 0, 2],
    ]
    solution, metadata = solve_sudoku(grid, box=2)
    assert metadata["status"] == "solved"
    assert is_valid_solution(solution, box=2)


def test_encoding_reused_for_two_puzzles():
    """Givens are assumptions, so one encoded solver serves several puzzles."""
    with BaseSolver() as solver:
        digit_vars = define_sudoku(ClauseBuilder(solver), box=3)
        clauses = solver.clause_size

        first = solver.solve(given_assumptions(digit_vars, parse_sudoku(SUDOKU)))
        assert decode(first.model, digit_vars) == parse_sudoku(SUDOKU_SOLUTION)

        empty = solver.solve(given_assumptions(digit_vars, [[0] * 9 for _ in range(9)]))
        assert empty.satisfiable
        assert solver.clause_size == clauses


def test_bad_grid_shape():
    with pytest.raises(ValueError):
        solve_sudoku([[0] * 9 for _ in range(8)])
    with pytest.raises(ValueError):
        solve_sudoku([[0] * 8 for _ in range(9)])


def test_bad_value():
    grid = [[0] * 9 for _ in range(9)]
    grid[4][4] = 10
    with pytest.raises(ValueError):
        solve_sudoku(grid)


def test_render():
    text = render(parse_sudoku(SUDOKU))
    lines = text.splitlines()
    assert len(lines) == 11
    assert lines[0].startswith("5 3 . | . 7 .")
