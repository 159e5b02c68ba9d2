"""Integration tests for the numberlink encoding.

Tests cover:
- Paths joining equal numbers, checked cell by cell
- Filled and blank-allowed variants
- Free loops rejected by the refinement loop
- Unsolvable fields and field validation
"""

import pytest

from satloop.puzzles.examples import NUMBERLINK
from satloop.puzzles.numberlink import PATTERN_SIDES, render, solve_numberlink

OFFSETS = {"up": (0, -1), "down": (0, 1), "left": (-1, 0), "right": (1, 0)}
OPPOSITE = {"up": "down", "down": "up", "left": "right", "right": "left"}


def cell_sides(field, solution, x, y):
    if field[y][x] is not None:
        return {solution[y][x]}
    return set(PATTERN_SIDES[int(solution[y][x])])


def check_solution(field, solution, filled=True):
    """Assert the solution joins every pair of equal numbers without loops."""
    height, width = len(field), len(field[0])
    for y in range(height):
        for x in range(width):
            for side in cell_sides(field, solution, x, y):
                dx, dy = OFFSETS[side]
                nx, ny = x + dx, y + dy
                assert 0 <= nx < width and 0 <= ny < height
                assert OPPOSITE[side] in cell_sides(field, solution, nx, ny)

    visited = set()
    for y in range(height):
        for x in range(width):
            number = field[y][x]
            if number is None or (x, y) in visited:
                continue
            prev, cur = None, (x, y)
            visited.add(cur)
            while True:
                nxt = [
                    (cur[0] + OFFSETS[s][0], cur[1] + OFFSETS[s][1])
                    for s in cell_sides(field, solution, *cur)
                ]
                nxt = [n for n in nxt if n != prev]
                assert len(nxt) == 1
                prev, cur = cur, nxt[0]
                visited.add(cur)
                if field[cur[1]][cur[0]] is not None:
                    assert field[cur[1]][cur[0]] == number
                    break

    for y in range(height):
        for x in range(width):
            has_line = bool(cell_sides(field, solution, x, y))
            if has_line:
                # every drawn cell lies on a number-to-number path
                assert (x, y) in visited
            elif filled:
                pytest.fail(f"cell ({x}, {y}) left empty")


def test_adjacent_pair():
    solution, metadata = solve_numberlink([[1, 1]])

    assert metadata["status"] == "solved"
    assert solution == [["right", "left"]]
    assert metadata["unique"] is True


def test_sample_field():
    solution, metadata = solve_numberlink(NUMBERLINK)

    assert metadata["status"] == "solved"
    check_solution(NUMBERLINK, solution)
    if metadata["alternative"] is not None:
        check_solution(NUMBERLINK, metadata["alternative"])


def test_two_solutions():
    field = [
        [1, None, 2],
        [1, None, 2],
    ]
    solution, metadata = solve_numberlink(field)

    assert metadata["status"] == "solved"
    check_solution(field, solution)
    assert metadata["unique"] is False
    check_solution(field, metadata["alternative"])
    assert metadata["alternative"] != solution


def test_corner_pairs():
    field = [
        [1, None, None, 1],
        [None, None, None, None],
        [None, None, None, None],
        [2, None, None, 2],
    ]
    solution, metadata = solve_numberlink(field, check_unique=False)

    assert metadata["status"] == "solved"
    check_solution(field, solution)


def test_free_loop_excluded():
    """Joining the 1s directly would leave a 2x2 free loop below."""
    field = [
        [1, 1],
        [None, None],
        [None, None],
    ]
    solution, metadata = solve_numberlink(field)

    assert metadata["status"] == "solved"
    check_solution(field, solution)
    assert solution[0] == ["down", "down"]
    assert metadata["unique"] is True


def test_blank_cells_allowed():
    field = [
        [1, 1],
        [None, None],
        [None, None],
    ]
    solution, metadata = solve_numberlink(field, filled=False)

    assert metadata["status"] == "solved"
    check_solution(field, solution, filled=False)
    assert metadata["unique"] is False


def test_crossing_pairs_unsolvable():
    solution, metadata = solve_numberlink([[1, 2], [2, 1]])

    assert solution is None
    assert metadata["status"] == "unsolvable"


def test_unpaired_number():
    with pytest.raises(ValueError):
        solve_numberlink([[1, None, 2]])


def test_ragged_field():
    with pytest.raises(ValueError):
        solve_numberlink([[1, 1], [None]])


def test_render():
    field = [[1, None, 1]]
    solution, _ = solve_numberlink(field)
    assert render(field, solution) == "1 ─ 1"
    assert render(field) == "1 . 1"
