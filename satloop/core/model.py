"""Immutable model snapshots produced by satisfiable solves."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from satloop.core.errors import NoModelError, StaleModelError
from satloop.core.literal import Clause, Literal, Variable


class Model:
    """Snapshot of a satisfying assignment.

    A model is captured atomically when a solve succeeds and never changes
    afterwards. It stays readable only while its source solver is at the same
    generation: any clause added to the solver, or any new solve call, makes
    every earlier snapshot stale and reads raise :class:`StaleModelError`.

    Models built without a source (``source=None``) never go stale; they are
    useful for validators and tests working on hand-built assignments.

    Example:
        >>> result = solver.solve()
        >>> model = result.model
        >>> model.get(a)
        True
        >>> model.evaluate(-a)
        False
    """

    def __init__(
        self,
        values: Mapping[int, bool],
        source: Optional[Any] = None,
        generation: int = 0,
    ) -> None:
        """Initialize a model snapshot.

        Args:
            values: Mapping from variable index to truth value
            source: Solver the model was drawn from (optional)
            generation: Solver generation at capture time
        """
        self._values: Dict[int, bool] = dict(values)
        self._source = source
        self._generation = generation

    @classmethod
    def from_dimacs(cls, assignment: Iterable[int], source: Optional[Any] = None, generation: int = 0) -> "Model":
        """Build a model from signed DIMACS integers (e.g. ``[1, -2, 3]``)."""
        return cls({abs(v): v > 0 for v in assignment if v != 0}, source, generation)

    @property
    def is_stale(self) -> bool:
        if self._source is None:
            return False
        return self._source.generation != self._generation

    def _check_fresh(self, variable: Variable) -> None:
        if self.is_stale:
            raise StaleModelError(
                f"Model for {variable!r} is stale: the solver changed after this snapshot",
                variable=variable,
            )

    def get(self, variable: Variable) -> bool:
        """Truth value of a variable in this model.

        Raises:
            StaleModelError: If the source solver changed since the snapshot
            NoModelError: If the variable is not covered by the snapshot
        """
        self._check_fresh(variable)
        try:
            return self._values[variable.index]
        except KeyError:
            raise NoModelError(
                f"Variable {variable!r} is not covered by this model", variable=variable
            ) from None

    def evaluate(self, literal: Literal) -> bool:
        """Truth value of a literal, taking its polarity into account."""
        return self.get(literal.variable) == literal.polarity

    def __getitem__(self, key: Union[Variable, Literal]) -> bool:
        if isinstance(key, Literal):
            return self.evaluate(key)
        return self.get(key)

    def satisfies(self, clause: Clause) -> bool:
        """True if at least one literal of the clause holds."""
        return any(self.evaluate(lit) for lit in clause)

    def literal_of(self, variable: Variable) -> Literal:
        """The literal of ``variable`` that holds in this model."""
        return Literal(variable, self.get(variable))

    def true_literals(self, variables: Iterable[Variable]) -> List[Literal]:
        """Literals that hold in this model, one per given variable."""
        return [self.literal_of(v) for v in variables]

    def values_of(self, variables: Iterable[Variable]) -> Dict[Variable, bool]:
        return {v: self.get(v) for v in variables}

    def to_dimacs(self) -> List[int]:
        if self._source is not None and self.is_stale:
            raise StaleModelError("Model is stale: the solver changed after this snapshot")
        return [i if val else -i for i, val in sorted(self._values.items())]

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        state = "stale" if self.is_stale else "fresh"
        return f"<Model {len(self._values)} vars, {state}>"
