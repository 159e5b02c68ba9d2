"""Unit tests for the base solver adapter.

Tests cover:
- Variable allocation and size counters
- Satisfiable and unsatisfiable clause sets
- Assumption-scoped solves and unsat cores
- Model invalidation after clause additions
- Input validation (empty clauses, foreign variables, wrong types)
- Conflict budget and solver state reporting
"""

import pytest

from satloop.core.errors import EmptyClauseError, NoModelError, SolverClosedError
from satloop.core.literal import Clause, Variable
from satloop.core.solver import BaseSolver, SolverState, SolveStatus


@pytest.fixture
def solver():
    with BaseSolver() as s:
        yield s


# ============================================================================
# Tests for allocation and clause storage
# ============================================================================


class TestAllocation:
    """Tests for variables and counters."""

    def test_indices_are_monotonic(self, solver):
        a = solver.new_variable()
        b = solver.new_variable()
        rest = solver.new_variables(3)
        assert [a.index, b.index] == [1, 2]
        assert [v.index for v in rest] == [3, 4, 5]
        assert solver.var_size == 5

    def test_clause_size(self, solver):
        a, b = solver.new_variables(2)
        assert solver.clause_size == 0
        solver.add_clause(Clause.of(+a, +b))
        solver.add_clause(Clause.of(-a))
        assert solver.clause_size == 2

    def test_initial_state(self, solver):
        assert solver.state is SolverState.EMPTY
        assert not solver.solved
        assert not solver.satisfied
        assert solver.model is None
        assert solver.describe() == "not solved yet"

    def test_empty_clause_rejected(self, solver):
        with pytest.raises(EmptyClauseError):
            solver.add_clause(Clause())
        assert solver.clause_size == 0

    def test_foreign_variable_rejected(self, solver):
        solver.new_variable()
        with pytest.raises(ValueError):
            solver.add_clause(Clause.of(+Variable(5)))

    def test_non_clause_rejected(self, solver):
        a = solver.new_variable()
        with pytest.raises(TypeError):
            solver.add_clause([+a])


# ============================================================================
# Tests for solving
# ============================================================================


class TestSolve:
    """Tests for satisfiability checks."""

    def test_sat_and_values(self, solver):
        a, b = solver.new_variables(2)
        solver.add_clause(Clause.of(+a, +b))
        solver.add_clause(Clause.of(-a, +b))
        solver.add_clause(Clause.of(+a, -b))

        result = solver.solve()

        assert result.status is SolveStatus.SAT
        assert result
        assert solver.value_of(a) is True
        assert solver.value_of(b) is True
        assert solver[a] is True
        assert solver[-b] is False
        assert solver.solved and solver.satisfied
        assert solver.state is SolverState.SOLVED_SAT

    def test_unsat(self, solver):
        a, b = solver.new_variables(2)
        for clause in (
            Clause.of(+a, +b),
            Clause.of(-a, +b),
            Clause.of(+a, -b),
            Clause.of(-a, -b),
        ):
            solver.add_clause(clause)

        result = solver.solve()

        assert result.status is SolveStatus.UNSAT
        assert not result
        assert result.model is None
        assert not result.under_assumptions
        assert solver.solved and not solver.satisfied
        assert solver.describe() == "unsatisfiable"
        with pytest.raises(NoModelError):
            solver.value_of(a)

    def test_solve_without_clauses(self, solver):
        a = solver.new_variable()
        result = solver.solve()
        assert result.satisfiable
        # unconstrained variables still get a value
        assert result.model.get(a) in (True, False)

    def test_model_satisfies_clauses(self, solver):
        a, b, c = solver.new_variables(3)
        clauses = [Clause.of(+a, +b), Clause.of(-a, +c), Clause.of(-b, -c)]
        for clause in clauses:
            solver.add_clause(clause)
        result = solver.solve()
        assert all(result.model.satisfies(clause) for clause in clauses)

    def test_value_of_is_stable_between_solves(self, solver):
        a, b = solver.new_variables(2)
        solver.add_clause(Clause.of(+a, +b))
        solver.solve()
        first = (solver.value_of(a), solver.value_of(b))
        assert (solver.value_of(a), solver.value_of(b)) == first
        assert any(first)

    def test_value_before_solve(self, solver):
        a = solver.new_variable()
        with pytest.raises(NoModelError):
            solver.value_of(a)

    def test_add_clause_invalidates_model(self, solver):
        a, b = solver.new_variables(2)
        solver.add_clause(Clause.of(+a, +b))
        result = solver.solve()
        assert result.satisfiable

        solver.add_clause(Clause.of(-a))

        assert not solver.solved
        assert not solver.satisfied
        assert solver.state is SolverState.HAS_CLAUSES
        assert solver.model is None
        assert solver.describe() == "clauses added since last solve"
        with pytest.raises(NoModelError):
            solver.value_of(b)

    def test_unsat_is_monotonic(self, solver):
        a = solver.new_variable()
        solver.add_clause(Clause.of(+a))
        solver.add_clause(Clause.of(-a))
        assert not solver.solve()

        c = solver.new_variable()
        solver.add_clause(Clause.of(+c))
        result = solver.solve()

        assert result.status is SolveStatus.UNSAT
        assert not result.under_assumptions
        assert solver.solved and not solver.satisfied

    def test_generation_advances(self, solver):
        a = solver.new_variable()
        g0 = solver.generation
        solver.add_clause(Clause.of(+a))
        g1 = solver.generation
        solver.solve()
        assert g0 < g1 < solver.generation


# ============================================================================
# Tests for assumptions
# ============================================================================


class TestAssumptions:
    """Tests for assumption-scoped solves."""

    def test_unsat_under_assumptions(self, solver):
        a, b = solver.new_variables(2)
        solver.add_clause(Clause.of(+a, +b))

        result = solver.solve([-a, -b])

        assert result.status is SolveStatus.UNSAT
        assert result.under_assumptions
        assert solver.describe() == "unsatisfiable under assumptions"
        assert result.core is not None
        assert set(result.core) <= {-a, -b}

    def test_assumptions_are_transient(self, solver):
        a, b = solver.new_variables(2)
        solver.add_clause(Clause.of(+a, +b))

        assert not solver.solve([-a, -b])
        result = solver.solve([-a])

        assert result.satisfiable
        assert solver.value_of(a) is False
        assert solver.value_of(b) is True
        assert solver.clause_size == 1

    def test_result_records_assumptions(self, solver):
        a = solver.new_variable()
        result = solver.solve([+a])
        assert result.assumptions == [+a]
        assert result.model.get(a) is True

    def test_foreign_assumption_rejected(self, solver):
        solver.new_variable()
        with pytest.raises(ValueError):
            solver.solve([+Variable(9)])


# ============================================================================
# Tests for budget and lifecycle
# ============================================================================


class TestLifecycle:
    """Tests for conflict budget, repr and closing."""

    def test_budget_on_easy_instance(self):
        with BaseSolver(conflict_budget=1000) as solver:
            a, b = solver.new_variables(2)
            solver.add_clause(Clause.of(+a, +b))
            result = solver.solve()
        assert result.status in (SolveStatus.SAT, SolveStatus.UNKNOWN)

    def test_repr_mentions_state(self, solver):
        solver.new_variable()
        text = repr(solver)
        assert "minisat22" in text
        assert "not solved yet" in text
        assert "vars=1" in text

    def test_other_backend(self):
        with BaseSolver("glucose4") as solver:
            a = solver.new_variable()
            solver.add_clause(Clause.of(-a))
            assert solver.solve().satisfiable
            assert solver.value_of(a) is False

    def test_close_is_idempotent(self):
        solver = BaseSolver()
        solver.close()
        solver.close()

    def test_add_clause_after_close(self):
        solver = BaseSolver()
        a = solver.new_variable()
        solver.close()
        with pytest.raises(SolverClosedError) as exc_info:
            solver.add_clause(Clause.of(+a))
        assert exc_info.value.solver_name == "minisat22"
        assert "closed" in str(exc_info.value)

    def test_solve_after_close(self):
        with BaseSolver() as solver:
            a = solver.new_variable()
            solver.add_clause(Clause.of(+a))
        with pytest.raises(SolverClosedError):
            solver.solve()
