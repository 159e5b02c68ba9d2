"""Clause-building facade.

ClauseBuilder lets encoders state constraints compactly. It accepts either a
single Literal, which opens or extends a clause in progress, or a whole
Clause, which is submitted at once. The clause in progress is flushed when a
whole clause arrives, when ``end()`` is called, or when the builder is used as
a context manager and the block exits.

Example::

    builder = ClauseBuilder(solver)
    builder << +a << -b          # clause in progress: (a | -b)
    builder.end()                # submitted
    builder << Clause.of(-a, +c) # submitted immediately
    builder.exactly_one([+a, +b, +c])
"""

import logging
from itertools import combinations
from typing import List, Sequence, Union

from pysat.card import CardEnc, EncType

from satloop.core.literal import Clause, Literal, Variable
from satloop.core.solver import BaseSolver

logger = logging.getLogger(__name__)

ClauseItem = Union[Literal, Clause]


class ClauseBuilder:
    """Ergonomic clause accumulation on top of a BaseSolver.

    The builder holds no state besides the clause currently being assembled;
    every clause goes through :meth:`BaseSolver.add_clause`, so permanence
    and model invalidation are exactly those of the solver.
    """

    def __init__(self, solver: BaseSolver):
        self.solver = solver
        self._pending: List[Literal] = []

    @property
    def pending(self) -> Clause:
        """Clause currently being assembled (not yet submitted)."""
        return Clause(tuple(self._pending))

    def new_variable(self) -> Variable:
        return self.solver.new_variable()

    def new_variables(self, count: int) -> List[Variable]:
        return self.solver.new_variables(count)

    def push(self, item: ClauseItem) -> "ClauseBuilder":
        """Push a literal onto the clause in progress, or submit a whole clause.

        Args:
            item: A Literal (extends the pending clause) or a Clause
                  (flushes any pending clause, then submits this one)

        Returns:
            The builder, for chaining

        Raises:
            TypeError: If ``item`` is neither a Literal nor a Clause
            EmptyClauseError: If a submitted Clause is empty
        """
        if isinstance(item, Literal):
            self._pending.append(item)
        elif isinstance(item, Clause):
            self.end()
            self.solver.add_clause(item)
        else:
            raise TypeError(f"push() takes a Literal or a Clause, got {type(item).__name__}")
        return self

    __lshift__ = push

    def end(self) -> "ClauseBuilder":
        """Submit the clause in progress, if any."""
        if self._pending:
            clause = Clause(tuple(self._pending))
            self._pending = []
            self.solver.add_clause(clause)
        return self

    def add(self, *literals: Literal) -> "ClauseBuilder":
        """Submit the disjunction of the given literals as one clause."""
        return self.push(Clause(literals))

    def add_all(self, clauses: Sequence[Clause]) -> "ClauseBuilder":
        for clause in clauses:
            self.push(clause)
        return self

    def __enter__(self) -> "ClauseBuilder":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.end()
        else:
            self._pending = []

    # Cardinality helpers: pairwise for "one", python-sat CardEnc for general k

    def at_least_one(self, literals: Sequence[Literal]) -> "ClauseBuilder":
        return self.push(Clause(tuple(literals)))

    def at_most_one(self, literals: Sequence[Literal]) -> "ClauseBuilder":
        for a, b in combinations(literals, 2):
            self.add(-a, -b)
        return self

    def exactly_one(self, literals: Sequence[Literal]) -> "ClauseBuilder":
        return self.at_least_one(literals).at_most_one(literals)

    def _cardinality(self, encode, literals: Sequence[Literal], k: int) -> "ClauseBuilder":
        """Add a CardEnc constraint, allocating its auxiliary variables in the solver."""
        self.end()
        top = self.solver.var_size
        cnf = encode(
            lits=[lit.to_dimacs() for lit in literals],
            bound=k,
            top_id=top,
            encoding=EncType.seqcounter,
        )
        if cnf.nv > top:
            self.solver.new_variables(cnf.nv - top)
        for clause in cnf.clauses:
            self.solver.add_clause(Clause(tuple(Literal.from_dimacs(v) for v in clause)))
        logger.debug(f"Cardinality bound {k} over {len(literals)} literals: "
                     f"{len(cnf.clauses)} clauses, {max(cnf.nv - top, 0)} auxiliary variables")
        return self

    def at_most_k(self, literals: Sequence[Literal], k: int) -> "ClauseBuilder":
        """At most k of the literals hold."""
        if k < 0:
            raise ValueError("k must be non-negative")
        if k >= len(literals):
            return self
        if k == 0:
            for lit in literals:
                self.add(-lit)
            return self
        return self._cardinality(CardEnc.atmost, literals, k)

    def at_least_k(self, literals: Sequence[Literal], k: int) -> "ClauseBuilder":
        """At least k of the literals hold."""
        n = len(literals)
        if k > n:
            raise ValueError(f"cannot require {k} of {n} literals")
        if k <= 0:
            return self
        if k == n:
            for lit in literals:
                self.add(lit)
            return self
        return self._cardinality(CardEnc.atleast, literals, k)

    def exactly_k(self, literals: Sequence[Literal], k: int) -> "ClauseBuilder":
        """Exactly k of the literals hold."""
        n = len(literals)
        if not 0 <= k <= n:
            raise ValueError(f"cannot require exactly {k} of {n} literals")
        if k == 0 or k == n:
            return self.at_most_k(literals, k).at_least_k(literals, k)
        return self._cardinality(CardEnc.equals, literals, k)

    def zero_or_two(self, literals: Sequence[Literal]) -> "ClauseBuilder":
        """Exactly zero or exactly two of the literals hold."""
        for i, lit in enumerate(literals):
            others = tuple(literals[:i]) + tuple(literals[i + 1:])
            self.push(Clause((-lit,) + others))
        return self.at_most_k(literals, 2)
