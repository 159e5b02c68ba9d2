"""
Core domain-agnostic components for satloop.

This package contains the literal value types, the base solver adapter,
the clause-building facade, model snapshots and the refinement loop.
"""

from satloop.core.builder import ClauseBuilder
from satloop.core.errors import EmptyClauseError, NoModelError, SolverClosedError, StaleModelError
from satloop.core.literal import Clause, Literal, Variable
from satloop.core.model import Model
from satloop.core.solver import BaseSolver, SolveResult, SolverState, SolveStatus

__all__ = [
    "BaseSolver",
    "Clause",
    "ClauseBuilder",
    "EmptyClauseError",
    "Literal",
    "Model",
    "NoModelError",
    "SolveResult",
    "SolveStatus",
    "SolverClosedError",
    "SolverState",
    "StaleModelError",
    "Variable",
]
