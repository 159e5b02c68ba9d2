"""End-to-end tests for the satloop CLI.

Tests cover:
- demo command for every sample puzzle
- sudoku command with a grid argument
- config.json defaults and command-line overrides
- Error reporting and exit codes
"""

import json

import pytest

from satloop.cli.main import main
from satloop.puzzles.examples import SUDOKU


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every test in an empty directory without config env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("SOLVER_NAME", "SOLVER_CONFLICT_BUDGET", "REFINE_MAX_TRIALS"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.mark.parametrize("puzzle", ["sudoku", "slitherlink", "numberlink"])
def test_demo(puzzle, capsys):
    assert main(["demo", puzzle]) == 0
    out = capsys.readouterr().out
    assert f"satloop {puzzle} demo" in out
    assert "Status: solved" in out


def test_demo_no_unique(capsys):
    assert main(["demo", "sudoku", "--no-unique"]) == 0
    assert "Unique:" not in capsys.readouterr().out


def test_demo_blank_numberlink(capsys):
    assert main(["demo", "numberlink", "--blank", "--no-unique"]) == 0


def test_sudoku_command(capsys):
    assert main(["sudoku", SUDOKU]) == 0
    out = capsys.readouterr().out
    assert "Status: solved" in out
    assert "Unique: yes" in out
    assert "5 3 4 | 6 7 8 | 9 1 2" in out


def test_sudoku_unsolvable(capsys):
    grid = "55" + "." * 79
    assert main(["sudoku", grid]) == 1
    assert "Status: unsolvable" in capsys.readouterr().out


def test_sudoku_bad_grid(capsys):
    assert main(["sudoku", "123"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_solver_from_config(isolated_config, capsys):
    (isolated_config / "config.json").write_text(json.dumps({"solver": {"name": "glucose4"}}))
    assert main(["demo", "slitherlink", "--no-unique"]) == 0
    assert "(glucose4)" in capsys.readouterr().out


def test_cli_overrides_config(isolated_config, capsys):
    (isolated_config / "config.json").write_text(json.dumps({"solver": {"name": "glucose4"}}))
    assert main(["demo", "slitherlink", "--no-unique", "--solver", "minisat22"]) == 0
    assert "(minisat22)" in capsys.readouterr().out


def test_bad_conflict_budget_in_environment(monkeypatch, capsys):
    monkeypatch.setenv("SOLVER_CONFLICT_BUDGET", "lots")
    assert main(["demo", "sudoku", "--no-unique"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_bad_conflict_budget_in_config(isolated_config, capsys):
    (isolated_config / "config.json").write_text(json.dumps({"solver": {"conflict_budget": "lots"}}))
    assert main(["sudoku", SUDOKU]) == 1
    assert "Error:" in capsys.readouterr().err


def test_no_command(capsys):
    assert main([]) == 1
