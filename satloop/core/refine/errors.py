"""Refinement-loop exceptions for error handling."""

from typing import Any, List, Optional


class MalformedValidatorError(Exception):
    """Raised when a rejected model is not excluded by its blocking clauses.

    This covers:
    - The block synthesizer returned no clauses
    - A returned clause is empty
    - Every returned clause is already satisfied by the rejected model

    Each case would let the loop return the same model forever, so it is
    fatal and never retried.

    Attributes:
        message: Description of the failure
        model: The rejected model (optional)
        witness: Witness reported by the validator (optional)
    """

    def __init__(
        self, message: str, model: Optional[Any] = None, witness: Optional[Any] = None
    ) -> None:
        """Initialize MalformedValidatorError exception.

        Args:
            message: Error message describing the failure
            model: The rejected model (optional)
            witness: Witness reported by the validator (optional)
        """
        super().__init__(message)
        self.model = model
        self.witness = witness


class TrialLimitExceededError(Exception):
    """Raised when the refinement loop hits its trial limit.

    The limit is a safety fuse against encoding bugs; correct encodings are
    not expected to reach it.

    Attributes:
        message: Description of the failure
        trials: Number of trials performed
        blocking_clauses: Clauses added before giving up
    """

    def __init__(
        self, message: str, trials: int = 0, blocking_clauses: Optional[List[Any]] = None
    ) -> None:
        """Initialize TrialLimitExceededError exception.

        Args:
            message: Error message describing the failure
            trials: Number of trials performed
            blocking_clauses: Clauses added before giving up (optional)
        """
        super().__init__(message)
        self.trials = trials
        self.blocking_clauses = blocking_clauses or []
