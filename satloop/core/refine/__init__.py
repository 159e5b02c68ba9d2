"""Refinement loop implementation.

This package contains the solve/validate/block loop and its validators:
- Generic refinement loop and blocking-clause helper
- Uniqueness check (is there a different solution?)
- Connectivity check (do the drawn lines form the required loops?)
- Refinement errors

The base solver and clause facade live in satloop.core.
"""

from satloop.core.refine.connectivity import (
    ConnectivityValidator,
    Piece,
    Trail,
    find_trails,
)
from satloop.core.refine.errors import (
    MalformedValidatorError,
    TrialLimitExceededError,
)
from satloop.core.refine.loop import (
    RefineConfig,
    RefinementResult,
    accept_all,
    blocking_clause,
    refine,
)
from satloop.core.refine.uniqueness import (
    UniquenessResult,
    UniquenessValidator,
    check_uniqueness,
)

__all__ = [
    "refine",
    "accept_all",
    "blocking_clause",
    "check_uniqueness",
    "find_trails",
    "ConnectivityValidator",
    "Piece",
    "RefineConfig",
    "RefinementResult",
    "Trail",
    "UniquenessResult",
    "UniquenessValidator",
    "MalformedValidatorError",
    "TrialLimitExceededError",
]
