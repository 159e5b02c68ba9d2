"""Uniqueness check: is there a second, different solution?

After a first model M0 has been accepted and reported, the caller asks
whether any other model exists that differs from M0 on the relevant
variables (e.g. the digit variables of a sudoku, not auxiliary ones). One
blocking clause over the relevant variables excludes M0; a further
refinement run then either finds a distinct model (the witness) or proves
none exists.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from satloop.core.literal import Clause, Literal, Variable
from satloop.core.model import Model
from satloop.core.refine.loop import RefineConfig, blocking_clause, refine
from satloop.core.schema.validator import BlockSynthesizer, ValidationOutcome, Validator
from satloop.core.solver import BaseSolver

logger = logging.getLogger(__name__)


class UniquenessValidator:
    """Accepts models that differ from a recorded reference model.

    The reference values are copied when the validator is built, so the
    reference snapshot may go stale afterwards.
    """

    def __init__(self, reference: Model, variables: Sequence[Variable]):
        """Record the reference assignment.

        Args:
            reference: Previously accepted model
            variables: Relevant variables the comparison is restricted to
        """
        if not variables:
            raise ValueError("Uniqueness check needs at least one relevant variable")
        self.variables = list(variables)
        self.reference: Dict[Variable, bool] = reference.values_of(self.variables)

    def differs(self, model: Model) -> bool:
        return any(model.get(v) != val for v, val in self.reference.items())

    def __call__(self, model: Model) -> ValidationOutcome:
        if self.differs(model):
            return ValidationOutcome.accept("differs from reference model")
        return ValidationOutcome.reject(reason="same assignment as reference model")

    def block(self, model: Model, witness: Any = None) -> Clause:
        return blocking_clause(model, self.variables)

    def exclusion_clause(self) -> Clause:
        """Clause forbidding the reference assignment itself."""
        return Clause(tuple(Literal(v, not val) for v, val in self.reference.items()))


@dataclass
class UniquenessResult:
    """Outcome of a uniqueness check.

    Attributes:
        unique: True if no different model exists, False if one was found,
                None if the solver stopped on its budget
        witness: A distinct accepted model when ``unique`` is False
        trials: Solve calls spent in the check
    """
    unique: Optional[bool]
    witness: Optional[Model]
    trials: int


def check_uniqueness(
    solver: BaseSolver,
    model: Model,
    variables: Sequence[Variable],
    assumptions: Sequence[Literal] = (),
    validate: Optional[Validator] = None,
    synthesize_block: Optional[BlockSynthesizer] = None,
    max_trials: Optional[int] = None,
    config: Optional[RefineConfig] = None,
) -> UniquenessResult:
    """Search for a model that differs from ``model`` on ``variables``.

    The exclusion clause for ``model`` is added permanently to ``solver``.
    Without a structural validator this is a single extra solve. With one
    (e.g. a connectivity check) the candidate must also pass it, so the loop
    may block further structurally invalid models along the way.

    Args:
        solver: Solver that produced ``model``
        model: Accepted model to compare against
        variables: Relevant variables
        assumptions: Assumptions used for the first solve
        validate: Optional structural validator the witness must also pass
        synthesize_block: Block synthesizer for ``validate`` rejections
            (defaults to ``validate.block``)
        max_trials: Trial limit for the search
        config: Refinement configuration

    Returns:
        UniquenessResult
    """
    checker = UniquenessValidator(model, variables)
    solver.add_clause(checker.exclusion_clause())
    logger.info(f"Searching for a solution different on {len(checker.variables)} variables")

    structural_block = synthesize_block
    if structural_block is None and validate is not None:
        structural_block = getattr(validate, "block", None)

    def combined_validate(candidate: Model) -> ValidationOutcome:
        outcome = checker(candidate)
        if not outcome.accepted or validate is None:
            return outcome
        return validate(candidate)

    def combined_block(candidate: Model, witness: Any):
        if not checker.differs(candidate) or structural_block is None:
            return checker.block(candidate, witness)
        return structural_block(candidate, witness)

    result = refine(
        solver,
        combined_validate,
        combined_block,
        assumptions=assumptions,
        max_trials=max_trials,
        config=config,
    )

    if result.status == "accepted":
        logger.info("Different solution found")
        return UniquenessResult(False, result.model, result.trials)
    if result.status == "rejected":
        logger.info("Different solution not found: solution is unique")
        return UniquenessResult(True, None, result.trials)
    logger.warning("Uniqueness check stopped without a verdict")
    return UniquenessResult(None, None, result.trials)
