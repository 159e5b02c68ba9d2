"""Value types for boolean variables, literals and clauses.

Variables are created by a solver (see :class:`satloop.core.solver.BaseSolver`)
and are never constructed directly by callers. Literals are signed references
to variables, and clauses are disjunctions of literals.

Example::

    a = solver.new_variable()
    b = solver.new_variable()
    clause = Clause.of(+a, -b)   # (a or not b)
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, List, Tuple


@dataclass(frozen=True, order=True)
class Variable:
    """Opaque boolean variable identifier.

    Attributes:
        index: Positive integer, unique within the owning solver. Indices
               start at 1 and grow monotonically, matching DIMACS numbering.
    """

    index: int

    def __pos__(self) -> "Literal":
        return Literal(self, True)

    def __neg__(self) -> "Literal":
        return Literal(self, False)

    @property
    def pos(self) -> "Literal":
        """Positive literal of this variable."""
        return Literal(self, True)

    @property
    def neg(self) -> "Literal":
        """Negative literal of this variable."""
        return Literal(self, False)

    def __repr__(self) -> str:
        return f"x{self.index}"


@dataclass(frozen=True)
class Literal:
    """A variable together with a polarity.

    Attributes:
        variable: The referenced variable
        polarity: True for the variable itself, False for its negation
    """

    variable: Variable
    polarity: bool = True

    def __neg__(self) -> "Literal":
        return Literal(self.variable, not self.polarity)

    def __pos__(self) -> "Literal":
        return self

    def is_complement_of(self, other: "Literal") -> bool:
        """Check whether two literals are complementary.

        Args:
            other: Literal to compare against

        Returns:
            True iff both reference the same variable with opposite polarity
        """
        return self.variable == other.variable and self.polarity != other.polarity

    def to_dimacs(self) -> int:
        """Signed DIMACS integer for this literal."""
        return self.variable.index if self.polarity else -self.variable.index

    @classmethod
    def from_dimacs(cls, value: int) -> "Literal":
        """Build a literal from a signed non-zero DIMACS integer."""
        if value == 0:
            raise ValueError("DIMACS literal must be non-zero")
        return cls(Variable(abs(value)), value > 0)

    def __repr__(self) -> str:
        return f"{'' if self.polarity else '-'}x{self.variable.index}"


@dataclass(frozen=True, eq=False)
class Clause:
    """Disjunction of literals.

    Duplicate literals are dropped on construction and literal order carries
    no meaning: two clauses with the same literal set compare equal. An empty
    clause can be built but is rejected by the solver with
    :class:`~satloop.core.errors.EmptyClauseError`.

    Attributes:
        literals: Literals in first-seen order, without duplicates
    """

    literals: Tuple[Literal, ...] = ()

    def __post_init__(self):
        for lit in self.literals:
            if not isinstance(lit, Literal):
                raise TypeError(
                    f"Clause members must be Literal, got {type(lit).__name__}"
                )
        object.__setattr__(self, "literals", tuple(dict.fromkeys(self.literals)))

    @classmethod
    def of(cls, *literals: Literal) -> "Clause":
        """Build a clause from literal arguments."""
        return cls(tuple(literals))

    @classmethod
    def from_iterable(cls, literals: Iterable[Literal]) -> "Clause":
        """Build a clause from any iterable of literals."""
        return cls(tuple(literals))

    def __iter__(self) -> Iterator[Literal]:
        return iter(self.literals)

    def __len__(self) -> int:
        return len(self.literals)

    def __contains__(self, literal: object) -> bool:
        return literal in self.literals

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Clause):
            return NotImplemented
        return frozenset(self.literals) == frozenset(other.literals)

    def __hash__(self) -> int:
        return hash(frozenset(self.literals))

    @property
    def is_empty(self) -> bool:
        return not self.literals

    @property
    def variables(self) -> FrozenSet[Variable]:
        return frozenset(lit.variable for lit in self.literals)

    def is_tautology(self) -> bool:
        """True if the clause contains a literal and its complement."""
        return any(-lit in self.literals for lit in self.literals)

    def to_dimacs(self) -> List[int]:
        return [lit.to_dimacs() for lit in self.literals]

    def __repr__(self) -> str:
        return "(" + " | ".join(repr(lit) for lit in self.literals) + ")"
