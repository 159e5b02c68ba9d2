"""Numberlink encoding.

Every pair of equal numbers is joined by a line through orthogonally
adjacent cells; lines never cross or branch. With ``filled=True`` every blank
cell must carry a line.

Variables:
- number cell: 4 direction variables (up, down, left, right), exactly one true
- blank cell: 7 pattern variables (see PATTERN_SIDES), exactly one true, and
  one label variable per number; a cell with a line carries exactly one label

Clauses keep neighbouring cells consistent (a cell connects to its neighbour
iff the neighbour connects back), keep labels equal along a line, and keep
lines inside the field. Labels alone cannot rule out a free loop of blank
cells detached from any number, so the refinement loop rejects models whose
drawn lines contain trails not anchored at a number.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from satloop.core.builder import ClauseBuilder
from satloop.core.literal import Literal, Variable
from satloop.core.model import Model
from satloop.core.refine.connectivity import SIDE_OFFSETS, ConnectivityValidator, Piece
from satloop.core.refine.loop import RefineConfig, refine
from satloop.core.refine.uniqueness import check_uniqueness
from satloop.core.solver import DEFAULT_SOLVER_NAME, BaseSolver

logger = logging.getLogger(__name__)

Field = Sequence[Sequence[Optional[int]]]

DIRECTIONS = ("up", "down", "left", "right")

# Cell patterns: connected sides of a blank cell
PATTERN_SIDES: Tuple[Tuple[str, ...], ...] = (
    ("up", "down"),
    ("up", "left"),
    ("up", "right"),
    ("down", "left"),
    ("down", "right"),
    ("left", "right"),
    (),
)
BLANK = 6

PATTERN_GLYPHS = ("│", "┘", "└", "┐", "┌", "─", " ")

OPPOSITE = {"up": "down", "down": "up", "left": "right", "right": "left"}


@dataclass
class CellVars:
    """Variables of one cell.

    Attributes:
        number: The clue for number cells, None for blank cells
        dirs: Direction variables (number cells only)
        pats: Pattern variables (blank cells only)
        labels: Label variables indexed like NumberlinkVars.numbers (blank cells only)
    """
    number: Optional[int]
    dirs: List[Variable]
    pats: List[Variable]
    labels: List[Variable]

    def connectors(self, side: str) -> List[Literal]:
        """Literals under which this cell connects through ``side``."""
        if self.number is not None:
            return [+self.dirs[DIRECTIONS.index(side)]]
        return [+p for p, sides in zip(self.pats, PATTERN_SIDES) if side in sides]


@dataclass
class NumberlinkVars:
    cells: List[List[CellVars]]
    numbers: List[int]

    def relevant(self) -> List[Variable]:
        """Line-shape variables (labels follow from them)."""
        return [v for row in self.cells for c in row for v in c.dirs + c.pats]


def check_field(field: Field) -> None:
    """Validate field shape and that every number appears exactly twice.

    Raises:
        ValueError: If the field is ragged or the numbers do not pair up
    """
    if not field or not field[0]:
        raise ValueError("Numberlink field must not be empty")
    width = len(field[0])
    counts: Dict[int, int] = {}
    for y, row in enumerate(field):
        if len(row) != width:
            raise ValueError(f"illegal width: row {y + 1}")
        for value in row:
            if value is not None:
                if value <= 0:
                    raise ValueError(f"Row {y + 1}: numbers must be positive, got {value}")
                counts[value] = counts.get(value, 0) + 1
    unpaired = sorted(n for n, c in counts.items() if c != 2)
    if unpaired:
        raise ValueError(f"bad field: numbers {unpaired} do not appear exactly twice")


def _neighbour(field: Field, x: int, y: int, side: str) -> Optional[Tuple[int, int]]:
    dx, dy = SIDE_OFFSETS[side]
    nx, ny = x + dx, y + dy
    if 0 <= ny < len(field) and 0 <= nx < len(field[0]):
        return nx, ny
    return None


def define_numberlink(builder: ClauseBuilder, field: Field, filled: bool = True) -> NumberlinkVars:
    """Allocate variables and add the local numberlink rules."""
    numbers = sorted({n for row in field for n in row if n is not None})
    cells: List[List[CellVars]] = []

    for row in field:
        cell_row = []
        for number in row:
            if number is not None:
                dirs = builder.new_variables(4)
                builder.exactly_one([+d for d in dirs])
                cell_row.append(CellVars(number, dirs, [], []))
            else:
                pats = builder.new_variables(len(PATTERN_SIDES))
                labels = builder.new_variables(len(numbers))
                builder.exactly_one([+p for p in pats])
                # blank pattern xor exactly one label
                builder.exactly_one([+pats[BLANK]] + [+n for n in labels])
                if filled:
                    builder.add(-pats[BLANK])
                cell_row.append(CellVars(None, [], pats, labels))
        cells.append(cell_row)

    for y, row in enumerate(cells):
        for x, cell in enumerate(row):
            for side in DIRECTIONS:
                pos = _neighbour(field, x, y, side)
                if pos is None:
                    for lit in cell.connectors(side):
                        builder.add(-lit)
                elif side in ("right", "down"):
                    _link(builder, numbers, cell, cells[pos[1]][pos[0]], side)

    logger.info(f"Defined {len(field[0])}x{len(field)} numberlink ({len(numbers)} numbers): "
                f"{builder.solver.var_size} variables, {builder.solver.clause_size} clauses")
    return NumberlinkVars(cells, numbers)


def _link(builder: ClauseBuilder, numbers: List[int], a: CellVars, b: CellVars, side: str) -> None:
    """Consistency between cell ``a`` and its neighbour ``b`` on ``side``."""
    out_lits = a.connectors(side)
    in_lits = b.connectors(OPPOSITE[side])

    if a.number is not None and b.number is not None and a.number != b.number:
        for lit in out_lits + in_lits:
            builder.add(-lit)
        return

    # a connects to b iff b connects to a
    for lit in out_lits:
        builder.push(-lit)
        for other in in_lits:
            builder.push(other)
        builder.end()
    for lit in in_lits:
        builder.push(-lit)
        for other in out_lits:
            builder.push(other)
        builder.end()

    # connected cells carry the same label
    if a.number is None and b.number is None:
        for la, lb in zip(a.labels, b.labels):
            for lit in out_lits:
                builder.add(-lit, -la, +lb)
                builder.add(-lit, +la, -lb)
    elif a.number is None:
        label = a.labels[numbers.index(b.number)]
        for lit in out_lits:
            builder.add(-lit, +label)
    elif b.number is None:
        label = b.labels[numbers.index(a.number)]
        for lit in in_lits:
            builder.add(-lit, +label)


def line_pieces(nvars: NumberlinkVars) -> Tuple[List[Piece], List[Tuple[int, int]]]:
    """Connectivity vocabulary and terminal nodes (the number cells)."""
    pieces = []
    terminals = []
    for y, row in enumerate(nvars.cells):
        for x, cell in enumerate(row):
            if cell.number is not None:
                terminals.append((x, y))
                for d, side in zip(cell.dirs, DIRECTIONS):
                    pieces.append(Piece.cell(+d, (x, y), [side]))
            else:
                for p, sides in zip(cell.pats, PATTERN_SIDES):
                    if sides:
                        pieces.append(Piece.cell(+p, (x, y), sides))
    return pieces, terminals


def decode(model: Model, nvars: NumberlinkVars) -> List[List[str]]:
    """Solution grid: direction names for number cells, pattern indices as strings for blanks."""
    grid = []
    for row in nvars.cells:
        out = []
        for cell in row:
            if cell.number is not None:
                out.append(next(s for d, s in zip(cell.dirs, DIRECTIONS) if model.get(d)))
            else:
                out.append(str(next(i for i, p in enumerate(cell.pats) if model.get(p))))
        grid.append(out)
    return grid


def render(field: Field, solution: Optional[List[List[str]]] = None) -> str:
    """Text rendering: numbers as given, blank cells as line glyphs."""
    width = max(len(str(n)) for row in field for n in row if n is not None) if any(
        n is not None for row in field for n in row) else 1
    lines = []
    for y, row in enumerate(field):
        cells = []
        for x, number in enumerate(row):
            if number is not None:
                cells.append(str(number).rjust(width))
            elif solution is None:
                cells.append(".".rjust(width))
            else:
                cells.append(PATTERN_GLYPHS[int(solution[y][x])].rjust(width))
        lines.append(" ".join(cells))
    return "\n".join(lines)


def solve_numberlink(
    field: Field,
    filled: bool = True,
    check_unique: bool = True,
    solver_name: str = DEFAULT_SOLVER_NAME,
    conflict_budget: Optional[int] = None,
    config: Optional[RefineConfig] = None,
) -> Tuple[Optional[List[List[str]]], Dict[str, Any]]:
    """Solve a numberlink and optionally look for a different solution.

    Args:
        field: Rows of numbers, None for blank cells
        filled: Require every blank cell to carry a line
        check_unique: Search for a second valid solution afterwards
        solver_name: python-sat backend name
        conflict_budget: Conflict limit per solve call (None for no limit)
        config: Refinement configuration (trial limit)

    Returns:
        Tuple of (solution grid, metadata)

        metadata contains:
        - status: "solved" | "unsolvable" | "unknown"
        - trials: Solve calls spent finding the solution
        - blocked_loops: Free loops excluded on the way
        - unique: True/False/None (None when not checked)
        - alternative: A different solution if one exists
    """
    check_field(field)

    with BaseSolver(solver_name, conflict_budget=conflict_budget) as solver:
        builder = ClauseBuilder(solver)
        nvars = define_numberlink(builder, field, filled)
        pieces, terminals = line_pieces(nvars)
        validator = ConnectivityValidator(pieces, terminals=terminals, required_loops=0)

        result = refine(solver, validator, validator.block, config=config)
        metadata: Dict[str, Any] = {
            "status": "solved",
            "trials": result.trials,
            "blocked_loops": len(result.blocking_clauses),
            "unique": None,
            "alternative": None,
        }
        if result.status != "accepted":
            metadata["status"] = "unsolvable" if result.status == "rejected" else "unknown"
            return None, metadata

        solution = decode(result.model, nvars)
        if check_unique:
            uniqueness = check_uniqueness(
                solver, result.model, nvars.relevant(), validate=validator, config=config
            )
            metadata["unique"] = uniqueness.unique
            if uniqueness.witness is not None:
                metadata["alternative"] = decode(uniqueness.witness, nvars)

    return solution, metadata
