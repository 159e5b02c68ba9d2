"""Connectivity check: do the drawn lines form the required loops?

Puzzles such as Slitherlink and Numberlink draw lines through a grid. The
per-cell rules (vertex degree, pattern continuity) are plain clauses, but
"the lines form exactly one loop" is global and is checked on each model.

The caller describes its line vocabulary with :class:`Piece` objects: a
literal that, when true, draws one or more edges between graph nodes. A
Slitherlink edge variable is one piece with one edge; a Numberlink cell
pattern is one piece whose edges join the cell to the neighbours on its
connected sides (see :data:`SIDE_OFFSETS`). Each puzzle family brings its
own table of pieces; no single table covers them all.

Given a model, the drawn edges are partitioned into trails by walking from
endpoints first, consuming every edge exactly once. Trails touching a
terminal node (e.g. a Numberlink number) are anchored paths; the others are
free. The validator accepts when the number of free trails equals the
required loop count and each of them is a simple closed loop. On rejection
each free trail gets its own blocking clause over the literals that drew it,
which rules out that local loop rather than the whole assignment.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Set, Tuple

from satloop.core.literal import Clause, Literal
from satloop.core.model import Model
from satloop.core.schema.validator import ValidationOutcome

logger = logging.getLogger(__name__)

Node = Hashable
EdgeKey = frozenset

# Grid directions as (dx, dy) with y growing downwards
SIDE_OFFSETS: Dict[str, Tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


@dataclass(frozen=True)
class Piece:
    """A literal and the edges it draws when true.

    Attributes:
        literal: Selection literal (an edge variable, a cell pattern, ...)
        edges: Node pairs joined when the literal holds
    """
    literal: Literal
    edges: Tuple[Tuple[Node, Node], ...]

    @classmethod
    def edge(cls, literal: Literal, a: Node, b: Node) -> "Piece":
        """Piece drawing a single edge between two nodes."""
        return cls(literal, ((a, b),))

    @classmethod
    def cell(cls, literal: Literal, cell: Tuple[int, int], sides: Iterable[str]) -> "Piece":
        """Piece joining a grid cell to its neighbours on the given sides."""
        x, y = cell
        edges = []
        for side in sides:
            dx, dy = SIDE_OFFSETS[side]
            edges.append(((x, y), (x + dx, y + dy)))
        return cls(literal, tuple(edges))


@dataclass
class Trail:
    """One maximal walk over drawn edges.

    Attributes:
        nodes: Visited nodes in order (closed trails repeat the start at the end)
        literals: Literals that drew the trail's edges, without duplicates
        anchored: True if the trail touches a terminal node
    """
    nodes: List[Node] = field(default_factory=list)
    literals: List[Literal] = field(default_factory=list)
    anchored: bool = False

    @property
    def closed(self) -> bool:
        return len(self.nodes) > 2 and self.nodes[0] == self.nodes[-1]

    @property
    def is_simple_loop(self) -> bool:
        """Closed trail that visits no node twice."""
        return self.closed and len(set(self.nodes[:-1])) == len(self.nodes) - 1

    @property
    def length(self) -> int:
        return max(len(self.nodes) - 1, 0)


def _turn(prev: Node, node: Node, nxt: Node) -> Optional[int]:
    """Turn sign at ``node`` for 2-D integer coordinates, None otherwise."""
    try:
        (px, py), (x, y), (nx, ny) = prev, node, nxt
        cross = (x - px) * (ny - y) - (y - py) * (nx - x)
    except (TypeError, ValueError):
        return None
    return (cross > 0) - (cross < 0)


class _DrawnGraph:
    """Adjacency over the edges drawn by a model."""

    def __init__(self, model: Model, pieces: Sequence[Piece]):
        self.adjacency: Dict[Node, List[Tuple[Node, EdgeKey]]] = {}
        self.provenance: Dict[EdgeKey, List[Literal]] = {}
        for piece in pieces:
            if not model.evaluate(piece.literal):
                continue
            for a, b in piece.edges:
                if a == b:
                    continue
                key = frozenset((a, b))
                if key not in self.provenance:
                    self.provenance[key] = []
                    self.adjacency.setdefault(a, []).append((b, key))
                    self.adjacency.setdefault(b, []).append((a, key))
                if piece.literal not in self.provenance[key]:
                    self.provenance[key].append(piece.literal)
        self.visited: Set[EdgeKey] = set()

    def degree(self, node: Node) -> int:
        return len(self.adjacency.get(node, ()))

    def open_edges(self, node: Node) -> List[Tuple[Node, EdgeKey]]:
        return [(n, k) for n, k in self.adjacency.get(node, ()) if k not in self.visited]

    def walk(self, start: Node, terminals: Set[Node]) -> Trail:
        trail = Trail(nodes=[start], anchored=start in terminals)
        node = start
        prev: Optional[Node] = None
        last_turn: Optional[int] = None
        while True:
            candidates = self.open_edges(node)
            if not candidates:
                break
            nxt, key = candidates[0]
            if len(candidates) > 1 and prev is not None and last_turn:
                # at a crossing keep turning the same way, so touching loops stay apart
                for cand, cand_key in candidates:
                    if _turn(prev, node, cand) == last_turn:
                        nxt, key = cand, cand_key
                        break
            if prev is not None:
                turn = _turn(prev, node, nxt)
                if turn:
                    last_turn = turn
            self.visited.add(key)
            for lit in self.provenance[key]:
                if lit not in trail.literals:
                    trail.literals.append(lit)
            prev, node = node, nxt
            trail.nodes.append(node)
            if node in terminals:
                trail.anchored = True
        return trail


def find_trails(model: Model, pieces: Sequence[Piece], terminals: Iterable[Node] = ()) -> List[Trail]:
    """Partition the edges drawn by ``model`` into trails.

    Walks start at terminals, then at odd-degree nodes (open path ends),
    then at degree-2 nodes, then anywhere edges remain, so every drawn edge
    lands in exactly one trail.

    Args:
        model: Model to read piece literals from
        pieces: Line vocabulary of the puzzle
        terminals: Nodes that anchor paths (e.g. numbered cells)

    Returns:
        Trails in discovery order
    """
    graph = _DrawnGraph(model, pieces)
    terminal_set = set(terminals)
    nodes = list(graph.adjacency)
    starts = (
        [t for t in terminals if t in graph.adjacency]
        + [n for n in nodes if graph.degree(n) % 2 == 1]
        + [n for n in nodes if graph.degree(n) == 2]
        + nodes
    )
    trails = []
    for start in starts:
        while graph.open_edges(start):
            trails.append(graph.walk(start, terminal_set))
    return trails


class ConnectivityValidator:
    """Accepts models whose free trails are exactly the required loops.

    Example:
        >>> pieces = [Piece.edge(+e, a, b) for e, (a, b) in edges.items()]
        >>> validator = ConnectivityValidator(pieces)  # exactly one loop
        >>> result = refine(solver, validator)
    """

    def __init__(
        self,
        pieces: Sequence[Piece],
        terminals: Iterable[Node] = (),
        required_loops: int = 1,
    ):
        """Initialize the validator.

        Args:
            pieces: Line vocabulary of the puzzle
            terminals: Nodes that anchor paths; trails touching them are
                       never blocked
            required_loops: Number of free closed loops a valid model has
                            (1 for Slitherlink, 0 for Numberlink)
        """
        self.pieces = list(pieces)
        self.terminals = list(terminals)
        self.required_loops = required_loops

    def free_trails(self, model: Model) -> List[Trail]:
        return [t for t in find_trails(model, self.pieces, self.terminals) if not t.anchored]

    def __call__(self, model: Model) -> ValidationOutcome:
        free = self.free_trails(model)
        loops = sum(1 for t in free if t.is_simple_loop)
        if len(free) == self.required_loops and loops == len(free):
            return ValidationOutcome.accept(f"{loops} loops")
        logger.info(f"Found {len(free)} free trails ({loops} simple loops), need {self.required_loops} loops")
        return ValidationOutcome.reject(
            witness=free, reason=f"{len(free)} free trails, {self.required_loops} loops required"
        )

    def block(self, model: Model, witness: Optional[List[Trail]] = None) -> List[Clause]:
        """One blocking clause per free trail.

        When nothing is drawn but a loop is required, the block instead asks
        for at least one piece to be drawn.
        """
        if witness is None:
            witness = self.free_trails(model)
        if not witness:
            return [Clause(tuple(p.literal for p in self.pieces if not model.evaluate(p.literal)))]
        return [Clause(tuple(-lit for lit in trail.literals)) for trail in witness]
