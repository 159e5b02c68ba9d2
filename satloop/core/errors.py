"""Solver-level exceptions."""

from typing import Any, Optional


class EmptyClauseError(Exception):
    """Raised when a clause without literals is submitted to a solver.

    An empty clause can never be satisfied, so reaching one usually means the
    encoding has already proven the instance unsatisfiable. Callers may catch
    this and report "unsolvable" instead of crashing.

    Attributes:
        message: Description of the failure
        clause: The offending clause (optional)
    """

    def __init__(self, message: str = "empty clause submitted", clause: Optional[Any] = None) -> None:
        """Initialize EmptyClauseError exception.

        Args:
            message: Error message describing the failure
            clause: The empty clause that was rejected (optional)
        """
        super().__init__(message)
        self.clause = clause


class NoModelError(Exception):
    """Raised when a variable value is requested without a current model.

    This covers:
    - Querying before any solve
    - Querying after an unsatisfiable or interrupted solve
    - Querying after a clause was added since the last satisfiable solve

    Attributes:
        message: Description of the failure
        variable: The variable that was queried (optional)
    """

    def __init__(self, message: str, variable: Optional[Any] = None) -> None:
        """Initialize NoModelError exception.

        Args:
            message: Error message describing the failure
            variable: The queried variable (optional)
        """
        super().__init__(message)
        self.variable = variable


class StaleModelError(NoModelError):
    """Raised when a model snapshot is read after its solver moved on.

    A snapshot is stale once its solver has accepted a new clause or started
    another solve.
    """


class SolverClosedError(Exception):
    """Raised when a closed solver is asked to store clauses or solve.

    Attributes:
        message: Description of the failure
        solver_name: Backend name of the closed solver
    """

    def __init__(self, message: str, solver_name: Optional[str] = None) -> None:
        """Initialize SolverClosedError exception.

        Args:
            message: Error message describing the failure
            solver_name: Backend name of the closed solver (optional)
        """
        super().__init__(message)
        self.solver_name = solver_name
