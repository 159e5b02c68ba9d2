"""Slitherlink encoding.

Variables: one per grid edge. ``h[y][x]`` joins vertex (x, y) to
(x + 1, y); ``v[y][x]`` joins vertex (x, y) to (x, y + 1).

Rules:
- every vertex has zero or two drawn edges (clauses)
- every numbered cell has exactly that many drawn sides (clauses)
- the drawn edges form exactly one loop (refinement loop with a
  ConnectivityValidator, since a single CNF cannot state it)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from satloop.core.builder import ClauseBuilder
from satloop.core.literal import Variable
from satloop.core.model import Model
from satloop.core.refine.connectivity import ConnectivityValidator, Piece
from satloop.core.refine.loop import RefineConfig, refine
from satloop.core.refine.uniqueness import check_uniqueness
from satloop.core.solver import DEFAULT_SOLVER_NAME, BaseSolver

logger = logging.getLogger(__name__)

Field = Sequence[Sequence[Optional[int]]]


@dataclass
class SlitherlinkEdges:
    """Edge variables of a width x height field."""
    h: List[List[Variable]]
    v: List[List[Variable]]

    @property
    def width(self) -> int:
        return len(self.h[0])

    @property
    def height(self) -> int:
        return len(self.v)

    def all(self) -> List[Variable]:
        return [e for row in self.h for e in row] + [e for row in self.v for e in row]

    def cell_sides(self, x: int, y: int) -> List[Variable]:
        return [self.h[y][x], self.h[y + 1][x], self.v[y][x], self.v[y][x + 1]]

    def vertex_edges(self, x: int, y: int) -> List[Variable]:
        edges = []
        if x > 0:
            edges.append(self.h[y][x - 1])
        if x < self.width:
            edges.append(self.h[y][x])
        if y > 0:
            edges.append(self.v[y - 1][x])
        if y < self.height:
            edges.append(self.v[y][x])
        return edges


def check_field(field: Field) -> None:
    if not field or not field[0]:
        raise ValueError("Slitherlink field must not be empty")
    width = len(field[0])
    for y, row in enumerate(field):
        if len(row) != width:
            raise ValueError(f"illegal width: row {y + 1}")
        for clue in row:
            if clue is not None and not 0 <= clue <= 4:
                raise ValueError(f"Row {y + 1}: clue {clue} outside 0..4")


def define_slitherlink(builder: ClauseBuilder, field: Field) -> SlitherlinkEdges:
    """Allocate edge variables and add the local rules."""
    w, h = len(field[0]), len(field)
    edges = SlitherlinkEdges(
        h=[[builder.new_variable() for _ in range(w)] for _ in range(h + 1)],
        v=[[builder.new_variable() for _ in range(w + 1)] for _ in range(h)],
    )

    for y in range(h + 1):
        for x in range(w + 1):
            builder.zero_or_two([+e for e in edges.vertex_edges(x, y)])

    for y, row in enumerate(field):
        for x, clue in enumerate(row):
            if clue is not None:
                builder.exactly_k([+e for e in edges.cell_sides(x, y)], clue)

    logger.info(f"Defined {w}x{h} slitherlink: {builder.solver.var_size} variables, "
                f"{builder.solver.clause_size} clauses")
    return edges


def edge_pieces(edges: SlitherlinkEdges) -> List[Piece]:
    """Connectivity vocabulary: each edge variable draws one vertex-to-vertex edge."""
    pieces = []
    for y, row in enumerate(edges.h):
        for x, e in enumerate(row):
            pieces.append(Piece.edge(+e, (x, y), (x + 1, y)))
    for y, row in enumerate(edges.v):
        for x, e in enumerate(row):
            pieces.append(Piece.edge(+e, (x, y), (x, y + 1)))
    return pieces


def decode(model: Model, edges: SlitherlinkEdges) -> Tuple[List[List[bool]], List[List[bool]]]:
    """Drawn flags for horizontal and vertical edges."""
    return (
        [[model.get(e) for e in row] for row in edges.h],
        [[model.get(e) for e in row] for row in edges.v],
    )


def render(field: Field, drawn: Optional[Tuple[List[List[bool]], List[List[bool]]]] = None) -> str:
    """Text rendering of the field, with the loop if ``drawn`` is given."""
    w, h = len(field[0]), len(field)
    h_drawn, v_drawn = drawn if drawn else ([[False] * w] * (h + 1), [[False] * (w + 1)] * h)
    lines = []
    for y in range(h + 1):
        line = "+"
        for x in range(w):
            line += ("---" if h_drawn[y][x] else "   ") + "+"
        lines.append(line)
        if y == h:
            break
        line = ""
        for x in range(w + 1):
            line += "|" if v_drawn[y][x] else " "
            if x < w:
                clue = field[y][x]
                line += f" {clue} " if clue is not None else "   "
        lines.append(line)
    return "\n".join(lines)


def solve_slitherlink(
    field: Field,
    check_unique: bool = True,
    solver_name: str = DEFAULT_SOLVER_NAME,
    conflict_budget: Optional[int] = None,
    config: Optional[RefineConfig] = None,
) -> Tuple[Optional[Tuple[List[List[bool]], List[List[bool]]]], Dict[str, Any]]:
    """Solve a slitherlink and optionally look for a different single-loop solution.

    Args:
        field: Rows of clues (0..4), None for unnumbered cells
        check_unique: Search for a second valid solution afterwards
        solver_name: python-sat backend name
        conflict_budget: Conflict limit per solve call (None for no limit)
        config: Refinement configuration (trial limit)

    Returns:
        Tuple of (drawn edges as (horizontal, vertical) flag grids, metadata)

        metadata contains:
        - status: "solved" | "unsolvable" | "unknown"
        - trials: Solve calls spent finding the solution
        - blocked_loops: Loops excluded on the way
        - unique: True/False/None (None when not checked)
        - alternative: A different solution if one exists
    """
    check_field(field)

    with BaseSolver(solver_name, conflict_budget=conflict_budget) as solver:
        builder = ClauseBuilder(solver)
        edges = define_slitherlink(builder, field)
        validator = ConnectivityValidator(edge_pieces(edges), required_loops=1)

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

        solution = decode(result.model, edges)
        if check_unique:
            uniqueness = check_uniqueness(
                solver, result.model, edges.all(), validate=validator, config=config
            )
            metadata["unique"] = uniqueness.unique
            if uniqueness.witness is not None:
                metadata["alternative"] = decode(uniqueness.witness, edges)

    return solution, metadata
