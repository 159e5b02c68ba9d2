"""Sample puzzles for tests and demos."""

# Sudoku from the Wikipedia article; unique solution
SUDOKU = (
    "53..7...."
    "6..195..."
    ".98....6."
    "8...6...3"
    "4..8.3..1"
    "7...2...6"
    ".6....28."
    "...419..5"
    "....8..79"
)

SUDOKU_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)

SLITHERLINK = [
    [3, 2, 2],
    [1, 3, 2],
    [1, 3, 2],
]

NUMBERLINK = [
    [1, 2, None, None, None],
    [None, 3, 4, None, None],
    [None, None, 4, None, None],
    [None, None, None, 3, None],
    [None, 1, 2, None, None],
]


def parse_sudoku(text: str, side: int = 9):
    """Digit grid from an 81-character string ('.' or '0' for blanks)."""
    cells = [c for c in text if not c.isspace()]
    if len(cells) != side * side:
        raise ValueError(f"Expected {side * side} cells, got {len(cells)}")
    return [
        [0 if c in ".0" else int(c) for c in cells[y * side:(y + 1) * side]]
        for y in range(side)
    ]
