"""Base solver adapter over the python-sat search backends.

This module wraps an incremental CDCL solver from python-sat behind the small
contract the rest of satloop depends on:

- new_variable: monotonic variable allocation
- add_clause: permanent clause storage (never retracted)
- solve: assumption-scoped satisfiability check returning a model snapshot
- value_of: per-variable lookup in the current model

Each BaseSolver owns its backend instance; nothing is shared between solvers.
A single solver must not be used from several threads at once.
"""

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from pysat.solvers import Solver

from satloop.core.errors import EmptyClauseError, NoModelError, SolverClosedError
from satloop.core.literal import Clause, Literal, Variable
from satloop.core.model import Model

logger = logging.getLogger(__name__)

DEFAULT_SOLVER_NAME = "minisat22"


class SolveStatus(enum.Enum):
    """Outcome of a single solve call."""

    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


class SolverState(enum.Enum):
    """Lifecycle state of a BaseSolver."""

    EMPTY = "empty"
    HAS_CLAUSES = "has-clauses"
    SOLVED_SAT = "solved-sat"
    SOLVED_UNSAT = "solved-unsat"
    UNKNOWN = "unknown"


@dataclass
class SolveResult:
    """Result of a solve call.

    Attributes:
        status: SAT, UNSAT or UNKNOWN (budget exhausted)
        model: Snapshot of the assignment when status is SAT, None otherwise
        assumptions: Assumptions the solve ran under
        core: Subset of the assumptions responsible for UNSAT, if reported
        elapsed: Wall-clock seconds spent in the backend
    """

    status: SolveStatus
    model: Optional[Model] = None
    assumptions: List[Literal] = field(default_factory=list)
    core: Optional[List[Literal]] = None
    elapsed: float = 0.0

    @property
    def satisfiable(self) -> bool:
        return self.status is SolveStatus.SAT

    @property
    def under_assumptions(self) -> bool:
        """True when an UNSAT verdict may depend on the assumptions."""
        return self.status is SolveStatus.UNSAT and bool(self.assumptions)

    def __bool__(self) -> bool:
        return self.satisfiable


class BaseSolver:
    """Incremental SAT solver with explicit model lifetime.

    Example:
        >>> with BaseSolver() as solver:
        ...     a = solver.new_variable()
        ...     b = solver.new_variable()
        ...     solver.add_clause(Clause.of(+a, +b))
        ...     solver.add_clause(Clause.of(-a))
        ...     result = solver.solve()
        ...     solver.value_of(b)
        True
    """

    def __init__(self, name: str = DEFAULT_SOLVER_NAME, conflict_budget: Optional[int] = None) -> None:
        """Initialize the solver.

        Args:
            name: python-sat backend name (e.g. "minisat22", "glucose4", "cadical153")
            conflict_budget: Optional per-solve conflict limit. When set, a solve
                may stop early and return UNKNOWN.
        """
        self.name = name
        self.conflict_budget = conflict_budget
        self._backend = Solver(name=name)
        self._num_vars = 0
        self._num_clauses = 0
        self._generation = 0
        self._state = SolverState.EMPTY
        self._last_result: Optional[SolveResult] = None

    @property
    def generation(self) -> int:
        """Counter bumped on every clause addition and solve call."""
        return self._generation

    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def var_size(self) -> int:
        """Number of variables allocated so far."""
        return self._num_vars

    @property
    def clause_size(self) -> int:
        """Number of clauses added so far."""
        return self._num_clauses

    @property
    def solved(self) -> bool:
        """True if a solve has completed since the last clause was added."""
        return self._state in (SolverState.SOLVED_SAT, SolverState.SOLVED_UNSAT, SolverState.UNKNOWN)

    @property
    def satisfied(self) -> bool:
        """True if the most recent solve returned SAT and no clause was added since."""
        return self._state is SolverState.SOLVED_SAT

    @property
    def model(self) -> Optional[Model]:
        """Current model, or None if there is no valid one."""
        if self._state is not SolverState.SOLVED_SAT or self._last_result is None:
            return None
        return self._last_result.model

    def new_variable(self) -> Variable:
        """Allocate a fresh variable."""
        self._num_vars += 1
        return Variable(self._num_vars)

    def new_variables(self, count: int) -> List[Variable]:
        return [self.new_variable() for _ in range(count)]

    def _check_open(self) -> None:
        if self._backend is None:
            raise SolverClosedError(f"Solver {self.name} is closed", solver_name=self.name)

    def _check_literal(self, literal: Literal) -> None:
        if not isinstance(literal, Literal):
            raise TypeError(f"Expected Literal, got {type(literal).__name__}")
        if not 1 <= literal.variable.index <= self._num_vars:
            raise ValueError(f"{literal!r} references a variable not allocated by this solver")

    def add_clause(self, clause: Clause) -> None:
        """Add a permanent clause.

        Invalidates the current model, if any.

        Args:
            clause: Clause to store

        Raises:
            EmptyClauseError: If the clause has no literals
            TypeError: If ``clause`` is not a Clause
            SolverClosedError: If the solver was closed
            ValueError: If a literal references a foreign variable
        """
        self._check_open()
        if not isinstance(clause, Clause):
            raise TypeError(f"Expected Clause, got {type(clause).__name__}")
        if clause.is_empty:
            raise EmptyClauseError(clause=clause)
        for lit in clause:
            self._check_literal(lit)

        self._backend.add_clause(clause.to_dimacs())
        self._num_clauses += 1
        self._generation += 1
        self._state = SolverState.HAS_CLAUSES
        logger.debug(f"Added clause #{self._num_clauses}: {clause}")

    def solve(self, assumptions: Sequence[Literal] = ()) -> SolveResult:
        """Check satisfiability of the clause set under transient assumptions.

        Assumptions hold for this call only and never enter the clause
        database. Any earlier model becomes stale as soon as this is called.

        Args:
            assumptions: Literals forced true for this solve only

        Returns:
            SolveResult with a Model when SAT

        Raises:
            SolverClosedError: If the solver was closed
        """
        self._check_open()
        assumptions = list(assumptions)
        for lit in assumptions:
            self._check_literal(lit)
        dimacs_assumptions = [lit.to_dimacs() for lit in assumptions]

        self._generation += 1
        start = time.perf_counter()
        if self.conflict_budget is not None:
            self._backend.conf_budget(self.conflict_budget)
            outcome = self._backend.solve_limited(assumptions=dimacs_assumptions)
        else:
            outcome = self._backend.solve(assumptions=dimacs_assumptions)
        elapsed = time.perf_counter() - start

        if outcome is None:
            result = SolveResult(SolveStatus.UNKNOWN, assumptions=assumptions, elapsed=elapsed)
            self._state = SolverState.UNKNOWN
        elif outcome:
            raw = self._backend.get_model() or []
            values = {i: False for i in range(1, self._num_vars + 1)}
            values.update({abs(v): v > 0 for v in raw if abs(v) <= self._num_vars})
            model = Model(values, source=self, generation=self._generation)
            result = SolveResult(SolveStatus.SAT, model=model, assumptions=assumptions, elapsed=elapsed)
            self._state = SolverState.SOLVED_SAT
        else:
            core = None
            if assumptions:
                raw_core = self._backend.get_core()
                if raw_core is not None:
                    core = [Literal.from_dimacs(v) for v in raw_core]
            result = SolveResult(
                SolveStatus.UNSAT, assumptions=assumptions, core=core, elapsed=elapsed
            )
            self._state = SolverState.SOLVED_UNSAT

        self._last_result = result
        logger.debug(
            f"Solve finished: {result.status.value} in {elapsed:.6f} sec "
            f"({self._num_vars} vars, {self._num_clauses} clauses, {len(assumptions)} assumptions)"
        )
        return result

    def value_of(self, variable: Variable) -> bool:
        """Value of a variable in the current model.

        Raises:
            NoModelError: If no satisfiable solve has happened since the
                last clause was added
        """
        model = self.model
        if model is None or model.is_stale:
            raise NoModelError(f"No current model for {variable!r} ({self.describe()})", variable=variable)
        return model.get(variable)

    def __getitem__(self, key: Union[Variable, Literal]) -> bool:
        if isinstance(key, Literal):
            return self.value_of(key.variable) == key.polarity
        return self.value_of(key)

    def describe(self) -> str:
        """Human-readable solve state."""
        if self._state is SolverState.SOLVED_SAT:
            return "satisfied"
        if self._state is SolverState.SOLVED_UNSAT:
            if self._last_result is not None and self._last_result.under_assumptions:
                return "unsatisfiable under assumptions"
            return "unsatisfiable"
        if self._state is SolverState.UNKNOWN:
            return "unknown"
        if self._last_result is not None:
            return "clauses added since last solve"
        return "not solved yet"

    def close(self) -> None:
        """Release the backend solver."""
        if self._backend is not None:
            self._backend.delete()
            self._backend = None

    def __enter__(self) -> "BaseSolver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"<BaseSolver {self.name} {self.describe()} "
            f"vars={self._num_vars} clauses={self._num_clauses}>"
        )
