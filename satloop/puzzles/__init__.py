"""Reference puzzle encodings for satloop.

Each module encodes one puzzle family on top of the core solver, clause
builder and refinement loop:
- sudoku: plain clauses, givens as assumptions, uniqueness check
- slitherlink: edge variables, single-loop connectivity refinement
- numberlink: cell patterns with labels, free-loop refinement
"""
