"""Validator and block synthesizer protocols for the refinement loop."""

from dataclasses import dataclass
from typing import Any, Protocol, Sequence, Union

from satloop.core.literal import Clause
from satloop.core.model import Model


@dataclass(frozen=True)
class ValidationOutcome:
    """Verdict of a structural validator on one model.

    Attributes:
        accepted: True if the model has the required structural property
        witness: Validator-specific evidence of the violation (e.g. the
                 list of loops found). Handed to the block synthesizer.
        reason: Short human-readable explanation, used in logs
    """

    accepted: bool
    witness: Any = None
    reason: str = ""

    @classmethod
    def accept(cls, reason: str = "") -> "ValidationOutcome":
        return cls(True, None, reason)

    @classmethod
    def reject(cls, witness: Any = None, reason: str = "") -> "ValidationOutcome":
        return cls(False, witness, reason)


class Validator(Protocol):
    """Structural check over a model.

    A validator is a pure function: it inspects the model and never touches
    the solver. Properties that plain clauses cannot express directly
    (solution uniqueness, single-loop connectivity) are checked here.

    Example:
        def no_x1(model: Model) -> ValidationOutcome:
            if model.get(x1):
                return ValidationOutcome.reject(witness=[x1], reason="x1 set")
            return ValidationOutcome.accept()
    """

    def __call__(self, model: Model) -> ValidationOutcome:
        """Check model and return the verdict."""
        ...


class BlockSynthesizer(Protocol):
    """Builds blocking clauses for a rejected model.

    Returned clauses must exclude the rejected model (at least one of them
    must be falsified by it); the refinement loop refuses no-op blocks.
    A single Clause or a sequence of clauses may be returned.
    """

    def __call__(self, model: Model, witness: Any) -> Union[Clause, Sequence[Clause]]:
        """Return the clause(s) to add before the next solve."""
        ...
