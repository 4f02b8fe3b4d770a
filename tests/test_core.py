from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

from plots.metrics import generate_plots
from problem import LinearProgrammingProblem, VariableSplit
from rational import Fraction
from runner.pipeline import solve_problem
from simplex import RandomPivotChooser, SolveStatus, first_pivot
from solver.lp_solver import agrees_with, solve_reference
from telemetry.writer import read_history, write_history


def _problem(objective, rows, nonnegative=None, maximize=True):
    if nonnegative is None:
        nonnegative = range(len(objective))
    return LinearProgrammingProblem.from_coefficients(objective, rows, nonnegative, maximize=maximize)


def _fractions(*values):
    return tuple(Fraction(v) for v in values)


SCENARIOS = {
    "phase_two_only": _problem([3, 2], [([1, 1], "<=", 4), ([1, 3], "<=", 6)]),
    "two_phase": _problem([2, 3], [([1, 1], ">=", 2), ([1, 0], "<=", 3), ([0, 1], "<=", 3)]),
    "unbounded": _problem([1, 0], [([1, -1], "<=", 1)]),
    "infeasible": _problem([1, 1], [([1, 1], "<=", -1)]),
    "free_variable": _problem(
        [1, -1], [([1, 0], ">=", -3), ([1, 1], "<=", 4)], nonnegative=[1], maximize=False
    ),
}


def test_pipeline_statuses_and_optima():
    expected = {
        "phase_two_only": (SolveStatus.OPTIMAL, _fractions(4, 0), Fraction(12)),
        "two_phase": (SolveStatus.OPTIMAL, _fractions(3, 3), Fraction(15)),
        "unbounded": (SolveStatus.UNBOUNDED, None, None),
        "infeasible": (SolveStatus.INFEASIBLE, None, None),
        "free_variable": (SolveStatus.OPTIMAL, _fractions(-3, 7), Fraction(-10)),
    }
    for name, (status, plan, value) in expected.items():
        report = solve_problem(SCENARIOS[name], first_pivot)
        assert report.status is status, name
        assert report.plan == plan, name
        assert report.value == value, name


def test_phase_one_only_when_a_row_has_negative_rhs():
    assert not solve_problem(SCENARIOS["phase_two_only"], first_pivot).needs_phase_one
    assert solve_problem(SCENARIOS["two_phase"], first_pivot).needs_phase_one


def test_free_variable_is_split_and_recovered():
    problem = SCENARIOS["free_variable"]
    report = solve_problem(problem, first_pivot)
    assert report.splits == (VariableSplit(original=0, positive=0, negative=2),)
    assert report.canonical.num_variables == 3
    assert problem.objective.value_at(report.plan) == report.value
    assert problem.polytope.has_point(report.plan)
    assert report.plan_path[-1] == report.plan


def test_random_chooser_reaches_same_value():
    for seed in (0, 1, 2, 3):
        report = solve_problem(SCENARIOS["free_variable"], RandomPivotChooser(seed))
        assert report.value == Fraction(-10)


def test_history_follows_each_pivot():
    report = solve_problem(SCENARIOS["phase_two_only"], first_pivot)
    assert [rec.phase for rec in report.history] == [1, 2, 2]
    assert [rec.pivot for rec in report.history] == [None, (0, 0), None]
    assert report.history[1].candidates == 2
    assert report.history[-1].value == Fraction(12)
    assert report.history[-1].plan == _fractions(4, 0)
    assert report.history[-1].iteration == 1


def test_history_round_trips_through_jsonl(tmp_path: Path):
    report = solve_problem(SCENARIOS["phase_two_only"], first_pivot)
    path = tmp_path / "trace" / "history.jsonl"
    written = write_history(path, (rec.to_dict() for rec in report.history))
    assert written == len(report.history)
    rows = read_history(path)
    assert len(rows) == written
    assert rows[0]["pivot"] is None
    assert rows[1]["pivot"] == [0, 0]
    assert rows[-1]["value"] == "12"
    assert rows[-1]["plan"] == ["4", "0"]


def test_writer_rejects_unknown_objects(tmp_path: Path):
    with pytest.raises(TypeError):
        write_history(tmp_path / "bad.jsonl", [{"value": object()}])


@pytest.mark.parametrize("name", ["phase_two_only", "two_phase", "infeasible", "free_variable"])
def test_exact_result_matches_floating_point_reference(name):
    problem = SCENARIOS[name]
    report = solve_problem(problem, first_pivot)
    reference = solve_reference(problem)
    assert reference.status == report.status.value
    assert agrees_with(reference, report.status.value, report.value)


def test_reference_disagreement_is_reported():
    reference = solve_reference(SCENARIOS["phase_two_only"])
    assert not agrees_with(reference, "optimal", Fraction(11))
    assert not agrees_with(reference, "infeasible", None)


def test_plots_are_written(tmp_path: Path):
    report = solve_problem(SCENARIOS["two_phase"], first_pivot)
    written = generate_plots(report.history, tmp_path)
    assert [path.name for path in written] == ["objective.png", "pivot_candidates.png"]
    for path in written:
        assert path.exists()
    assert generate_plots([], tmp_path / "empty") == []
