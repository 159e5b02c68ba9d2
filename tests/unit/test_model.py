"""Unit tests for model snapshots.

Tests cover:
- Reading values and literals from a snapshot
- Staleness after clause additions and new solves
- Hand-built models without a source solver
"""

import pytest

from satloop.core.errors import NoModelError, StaleModelError
from satloop.core.literal import Clause, Variable
from satloop.core.model import Model
from satloop.core.solver import BaseSolver


class TestDetachedModel:
    """Tests for models built from plain assignments."""

    def test_get_and_evaluate(self):
        a, b = Variable(1), Variable(2)
        model = Model({1: True, 2: False})
        assert model.get(a) is True
        assert model.get(b) is False
        assert model.evaluate(-b) is True
        assert model[+a] is True
        assert model[b] is False

    def test_from_dimacs(self):
        model = Model.from_dimacs([1, -2, 3])
        assert model.to_dimacs() == [1, -2, 3]
        assert len(model) == 3

    def test_uncovered_variable(self):
        model = Model({1: True})
        with pytest.raises(NoModelError) as exc_info:
            model.get(Variable(4))
        assert exc_info.value.variable == Variable(4)

    def test_never_stale(self):
        assert not Model({1: True}).is_stale

    def test_satisfies(self):
        a, b = Variable(1), Variable(2)
        model = Model({1: False, 2: True})
        assert model.satisfies(Clause.of(+a, +b))
        assert not model.satisfies(Clause.of(+a, -b))

    def test_true_literals(self):
        a, b = Variable(1), Variable(2)
        model = Model({1: False, 2: True})
        assert model.true_literals([a, b]) == [-a, +b]
        assert model.values_of([a, b]) == {a: False, b: True}


class TestStaleness:
    """Tests for snapshot lifetime against the source solver."""

    def test_fresh_after_solve(self):
        with BaseSolver() as solver:
            a = solver.new_variable()
            solver.add_clause(Clause.of(+a))
            model = solver.solve().model
            assert not model.is_stale
            assert model.get(a) is True
            assert "fresh" in repr(model)

    def test_stale_after_add_clause(self):
        with BaseSolver() as solver:
            a, b = solver.new_variables(2)
            solver.add_clause(Clause.of(+a))
            model = solver.solve().model

            solver.add_clause(Clause.of(+b))

            assert model.is_stale
            with pytest.raises(StaleModelError):
                model.get(a)
            assert "stale" in repr(model)

    def test_stale_after_new_solve(self):
        with BaseSolver() as solver:
            a = solver.new_variable()
            first = solver.solve([+a]).model
            second = solver.solve([-a]).model
            assert first.is_stale
            assert second.get(a) is False

    def test_stale_error_is_no_model_error(self):
        with BaseSolver() as solver:
            a = solver.new_variable()
            model = solver.solve().model
            solver.solve()
            with pytest.raises(NoModelError):
                model.get(a)
