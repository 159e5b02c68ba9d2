"""Refinement loop: solve, validate, block, repeat.

This module implements the counterexample-guided iteration used whenever a
property cannot be written as plain clauses. The SAT solver acts as an
oracle: each model it returns is checked by a validator, and a rejected
model is permanently excluded by blocking clauses before solving again.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

from satloop.core.literal import Clause, Literal, Variable
from satloop.core.model import Model
from satloop.core.refine.errors import MalformedValidatorError, TrialLimitExceededError
from satloop.core.schema.validator import BlockSynthesizer, ValidationOutcome, Validator
from satloop.core.solver import BaseSolver, SolveStatus

logger = logging.getLogger(__name__)


@dataclass
class RefineConfig:
    """Configuration for refinement runs.

    Attributes:
        max_trials: Maximum number of solve calls before raising
                    TrialLimitExceededError (None for no limit)
    """
    max_trials: Optional[int] = 1000


@dataclass
class RefinementResult:
    """Result of a refinement run.

    Attributes:
        status: "accepted" (a model passed validation), "rejected" (the
                clause set became unsatisfiable) or "unknown" (the solver
                stopped on its conflict budget)
        model: The accepted model, None otherwise
        trials: Number of solve calls performed
        blocking_clauses: Every blocking clause added during the run
    """
    status: str
    model: Optional[Model]
    trials: int
    blocking_clauses: List[Clause] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.status == "accepted"


def accept_all(model: Model) -> ValidationOutcome:
    """Validator that accepts every model."""
    return ValidationOutcome.accept("no structural check")


def blocking_clause(model: Model, variables: Iterable[Variable]) -> Clause:
    """Clause excluding the model's assignment on the given variables.

    Each literal is the complement of the variable's value in the model, so
    any model satisfying the clause differs from ``model`` on at least one
    of the variables.

    Args:
        model: Model to exclude
        variables: Relevant variables to block on

    Returns:
        The blocking clause (empty if no variables were given)
    """
    return Clause(tuple(-lit for lit in model.true_literals(variables)))


def _normalize_block(block: Any) -> List[Clause]:
    if block is None:
        return []
    if isinstance(block, Clause):
        return [block]
    return list(block)


def _check_block(model: Model, clauses: List[Clause], outcome: ValidationOutcome) -> None:
    if not clauses:
        raise MalformedValidatorError(
            "Validator rejected a model but produced no blocking clause",
            model=model, witness=outcome.witness,
        )
    for clause in clauses:
        if not isinstance(clause, Clause):
            raise MalformedValidatorError(
                f"Block synthesizer returned {type(clause).__name__}, expected Clause",
                model=model, witness=outcome.witness,
            )
        if clause.is_empty:
            raise MalformedValidatorError(
                "Block synthesizer returned an empty clause",
                model=model, witness=outcome.witness,
            )
    if all(model.satisfies(clause) for clause in clauses):
        raise MalformedValidatorError(
            "Blocking clauses do not exclude the rejected model",
            model=model, witness=outcome.witness,
        )


def refine(
    solver: BaseSolver,
    validate: Validator = accept_all,
    synthesize_block: Optional[BlockSynthesizer] = None,
    assumptions: Sequence[Literal] = (),
    max_trials: Optional[int] = None,
    config: Optional[RefineConfig] = None,
) -> RefinementResult:
    """Run the solve/validate/block loop to a fixed point.

    Algorithm:
    1. Solve under the current clauses and assumptions
    2. If UNSAT → "rejected"
    3. Validate the model; if accepted → "accepted"
    4. Else → add the synthesized blocking clauses and repeat

    Every iteration excludes at least the rejected model, so on a finite
    variable set the loop ends after at most 2^N trials.

    Args:
        solver: Solver holding the base encoding
        validate: Structural validator (defaults to accepting every model)
        synthesize_block: Builds blocking clauses for a rejected model.
            Defaults to ``validate.block`` when the validator provides one.
        assumptions: Literals assumed for every solve of the run
        max_trials: Maximum solve calls (overrides config.max_trials)
        config: Refinement configuration

    Returns:
        RefinementResult describing the terminal state

    Raises:
        MalformedValidatorError: If a rejection is not backed by a real block
        TrialLimitExceededError: If max_trials solves did not reach a verdict

    Example:
        >>> validator = ConnectivityValidator(pieces)
        >>> result = refine(solver, validator, validator.block)
        >>> result.status
        'accepted'
    """
    if config is None:
        config = RefineConfig()
    if max_trials is None:
        max_trials = config.max_trials
    if synthesize_block is None:
        synthesize_block = getattr(validate, "block", None)

    assumptions = list(assumptions)
    added: List[Clause] = []
    trial = 0

    logger.info(f"Starting refinement loop (max trials: {max_trials})")

    while True:
        trial += 1
        logger.info(f"=== Refinement trial {trial} ===")
        logger.info(f"Clauses: {solver.clause_size}")

        result = solver.solve(assumptions)
        logger.info(f"Solve time: {result.elapsed:.6f} sec ({result.status.value})")

        if result.status is SolveStatus.UNSAT:
            logger.info(f"No model left after {trial} trials")
            return RefinementResult("rejected", None, trial, added)

        if result.status is SolveStatus.UNKNOWN:
            logger.warning(f"Solver stopped without a verdict on trial {trial}")
            return RefinementResult("unknown", None, trial, added)

        model = result.model
        outcome = validate(model)
        if outcome.accepted:
            logger.info(f"✓ Model accepted after {trial} trials")
            return RefinementResult("accepted", model, trial, added)

        logger.info(f"Model rejected: {outcome.reason or 'validator rejected model'}")
        if synthesize_block is None:
            raise MalformedValidatorError(
                "Validator rejected a model but no block synthesizer was given",
                model=model, witness=outcome.witness,
            )

        clauses = _normalize_block(synthesize_block(model, outcome.witness))
        _check_block(model, clauses, outcome)

        for clause in clauses:
            solver.add_clause(clause)
            logger.debug(f"Blocking clause: {clause}")
        added.extend(clauses)
        logger.info(f"Added {len(clauses)} blocking clauses ({len(added)} total)")

        if max_trials is not None and trial >= max_trials:
            logger.warning(f"Max trials ({max_trials}) exceeded without a verdict")
            raise TrialLimitExceededError(
                f"Refinement did not converge within {max_trials} trials",
                trials=trial,
                blocking_clauses=added,
            )
