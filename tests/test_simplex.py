import pytest

from problem import LinearProgrammingProblem
from rational import Fraction
from simplex import (
    RandomPivotChooser,
    SimplexError,
    SimplexSolver,
    SolveStatus,
    first_pivot,
)
from tableau import build_simplex_table


def _table(objective, rows, nonnegative=None):
    if nonnegative is None:
        nonnegative = range(len(objective))
    problem = LinearProgrammingProblem.from_coefficients(objective, rows, nonnegative)
    canonical, _ = problem.canonical_form()
    return build_simplex_table(canonical)


def _fractions(*values):
    return tuple(Fraction(v) for v in values)


def scenario_one():
    return _table([3, 2], [([1, 1], "<=", 4), ([1, 3], "<=", 6)])


def scenario_two():
    return _table([2, 3], [([1, 1], ">=", 2), ([1, 0], "<=", 3), ([0, 1], "<=", 3)])


def test_tableau_layout_with_artificial_variable():
    table = scenario_two()
    assert (table.table.rows, table.table.cols) == (4, 7)
    assert table.basic_variables == [5, 3, 4]
    assert table.artificial_variables == [5]
    assert table.start_variables == (0, 1)
    assert table.table.row(0) == _fractions(1, 1, -1, 0, 0, 1, 2)
    assert table.table.row(1) == _fractions(1, 0, 0, 1, 0, 0, 3)
    assert table.table.row(3) == _fractions(0, 0, 0, 0, 0, 1, 0)


def test_tableau_without_artificial_variables():
    table = scenario_one()
    assert (table.table.rows, table.table.cols) == (3, 5)
    assert table.basic_variables == [2, 3]
    assert table.artificial_variables == []
    assert table.rhs(1) == Fraction(6)
    assert table.value() == Fraction(0)


def test_simplex_solver_finds_optimum():
    result = SimplexSolver(chooser=first_pivot).solve(scenario_one())
    assert result.status is SolveStatus.OPTIMAL
    assert result.plan == _fractions(4, 0)
    assert result.value == Fraction(12)
    assert result.phase_one.pivots == []
    assert result.phase_two.pivots == [(0, 0)]
    assert result.phase_two.candidates == [2]


def test_phase_one_runs_before_phase_two():
    result = SimplexSolver(chooser=first_pivot).solve(scenario_two())
    assert result.status is SolveStatus.OPTIMAL
    assert result.phase_one.success
    assert result.phase_one.rows_subtracted == [(0, Fraction(1))]
    assert result.phase_one.snapshots[0].value == Fraction(-2)
    assert result.phase_one.snapshots[-1].value == Fraction(0)
    assert result.phase_two.removed_columns == [5]
    assert result.plan == _fractions(3, 3)
    assert result.value == Fraction(15)


def test_unbounded_problem_is_a_status():
    result = SimplexSolver(chooser=first_pivot).solve(_table([1, 0], [([1, -1], "<=", 1)]))
    assert result.status is SolveStatus.UNBOUNDED
    assert result.plan is None
    assert result.phase_two.success is False


def test_infeasible_problem_is_a_status():
    result = SimplexSolver(chooser=first_pivot).solve(_table([1, 1], [([1, 1], "<=", -1)]))
    assert result.status is SolveStatus.INFEASIBLE
    assert result.phase_one.success is False
    assert result.phase_two is None
    assert result.table.value() == Fraction(-1)


def test_optimum_does_not_depend_on_tie_break():
    for seed in range(10):
        solver = SimplexSolver(chooser=RandomPivotChooser(seed))
        assert solver.solve(scenario_one()).value == Fraction(12)
        assert solver.solve(scenario_two()).value == Fraction(15)


def test_zero_level_artificial_is_driven_out():
    # x1 + x2 = 2 splits into two rows; phase 1 ends with the artificial basic at zero
    table = _table([1, 1], [([1, 1], "=", 2), ([1, 0], "<=", 1)])
    result = SimplexSolver(chooser=first_pivot).solve(table)
    assert result.status is SolveStatus.OPTIMAL
    assert result.phase_one.pivots == [(0, 1)]
    assert result.phase_one.drive_out_pivots == [(1, 2)]
    assert result.phase_two.rows_subtracted == [(0, Fraction(-1))]
    assert result.value == Fraction(2)
    assert result.plan == _fractions(0, 2)


def test_solve_does_not_mutate_input_table():
    table = scenario_two()
    before = table.snapshot()
    SimplexSolver(chooser=first_pivot).solve(table)
    assert table.snapshot() == before


def test_pivot_step_updates_basis_and_iteration():
    table = scenario_one()
    last = table.table.rows - 1
    for col, value in enumerate(_fractions(-3, -2, 0, 0, 0)):
        table.table[last, col] = value
    assert table.columns_with_negative_reduced_cost() == [0, 1]
    assert table.all_possible_pivots() == [(0, 0), (1, 1)]
    assert not table.is_possible_pivot(1, 0)
    table.move_to_next_iteration(1, 1)
    assert table.basic_variables == [2, 1]
    assert table.iteration == 1
    assert table.table.row(1) == (Fraction(1, 3), Fraction(1), Fraction(0), Fraction(1, 3), Fraction(2))
    assert table.plan() == _fractions(0, 2)
    assert table.value() == Fraction(4)


def test_chooser_must_return_a_candidate():
    solver = SimplexSolver(chooser=lambda pivots: (99, 99))
    with pytest.raises(SimplexError):
        solver.solve(scenario_one())
