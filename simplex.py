"""Two-phase primal simplex method over exact fractions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from rational import ONE, ZERO, Fraction
from tableau import Pivot, SimplexTable, TableSnapshot

PivotChooser = Callable[[Sequence[Pivot]], Pivot]


class SimplexError(RuntimeError):
    """Raised when the simplex engine is driven into an invalid state."""


class SolveStatus(str, Enum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"


def first_pivot(pivots: Sequence[Pivot]) -> Pivot:
    """Deterministic choice: the first candidate in row-major order."""
    return pivots[0]


class RandomPivotChooser:
    """Uniform choice among the valid pivots of an iteration."""

    def __init__(self, seed: Optional[int] = None, *, rng: Optional[np.random.Generator] = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def __call__(self, pivots: Sequence[Pivot]) -> Pivot:
        return pivots[int(self._rng.integers(len(pivots)))]


@dataclass
class PhaseReport:
    """What one phase did, in the order it happened."""

    pivots: List[Pivot] = field(default_factory=list)
    candidates: List[int] = field(default_factory=list)
    snapshots: List[TableSnapshot] = field(default_factory=list)
    plans: List[Tuple[Fraction, ...]] = field(default_factory=list)
    rows_subtracted: List[Tuple[int, Fraction]] = field(default_factory=list)
    removed_columns: List[int] = field(default_factory=list)
    drive_out_pivots: List[Pivot] = field(default_factory=list)
    removed_rows: List[int] = field(default_factory=list)
    success: Optional[bool] = None

    def record(self, table: SimplexTable) -> None:
        self.snapshots.append(table.snapshot())
        self.plans.append(table.plan())


@dataclass(frozen=True)
class SimplexSolution:
    status: SolveStatus
    plan: Optional[Tuple[Fraction, ...]]
    value: Optional[Fraction]
    phase_one: PhaseReport
    phase_two: Optional[PhaseReport]
    table: SimplexTable
    iterations: int

    @property
    def is_optimal(self) -> bool:
        return self.status is SolveStatus.OPTIMAL


class SimplexSolver:
    def __init__(self, *, chooser: Optional[PivotChooser] = None) -> None:
        self._chooser = chooser if chooser is not None else RandomPivotChooser()

    def solve(self, table: SimplexTable) -> SimplexSolution:
        """Run both phases on a copy of ``table``; the argument is left untouched."""
        work = table.copy()

        phase_one = PhaseReport()
        self._prepare_phase_one(work, phase_one)
        self._iterate(work, phase_one)
        if not work.value().is_zero():
            phase_one.success = False
            return SimplexSolution(
                status=SolveStatus.INFEASIBLE,
                plan=None,
                value=None,
                phase_one=phase_one,
                phase_two=None,
                table=work,
                iterations=len(phase_one.pivots),
            )
        phase_one.success = True
        self._drive_out_artificials(work, phase_one)

        phase_two = PhaseReport()
        self._prepare_phase_two(work, phase_two)
        self._iterate(work, phase_two)
        iterations = len(phase_one.pivots) + len(phase_one.drive_out_pivots) + len(phase_two.pivots)
        if work.columns_with_negative_reduced_cost():
            phase_two.success = False
            return SimplexSolution(
                status=SolveStatus.UNBOUNDED,
                plan=None,
                value=None,
                phase_one=phase_one,
                phase_two=phase_two,
                table=work,
                iterations=iterations,
            )
        phase_two.success = True
        return SimplexSolution(
            status=SolveStatus.OPTIMAL,
            plan=work.plan(),
            value=work.value(),
            phase_one=phase_one,
            phase_two=phase_two,
            table=work,
            iterations=iterations,
        )

    def _iterate(self, table: SimplexTable, report: PhaseReport) -> None:
        report.record(table)
        while True:
            pivots = table.all_possible_pivots()
            if not pivots:
                return
            pivot = self._choose(pivots)
            report.pivots.append(pivot)
            report.candidates.append(len(pivots))
            table.move_to_next_iteration(*pivot)
            report.record(table)

    def _choose(self, pivots: List[Pivot]) -> Pivot:
        pivot = tuple(self._chooser(pivots))
        if pivot not in pivots:
            raise SimplexError(f"pivot chooser returned {pivot}, which is not a valid pivot")
        return pivot

    def _prepare_phase_one(self, table: SimplexTable, report: PhaseReport) -> None:
        # Basic artificial columns must start with zero reduced cost.
        last = table.table.rows - 1
        for artificial in table.artificial_variables:
            row = table.basic_row(artificial)
            if row is not None:
                table.table.subtract_multiplied_row(last, row, ONE)
                report.rows_subtracted.append((row, ONE))

    def _drive_out_artificials(self, table: SimplexTable, report: PhaseReport) -> None:
        """Pivot zero-level artificials out of the basis, dropping redundant rows."""
        artificial = set(table.artificial_variables)
        for row in reversed(range(table.constraint_rows)):
            if table.basic_variables[row] not in artificial:
                continue
            if not table.rhs(row).is_zero():
                raise SimplexError(f"artificial variable in row {row} is basic at a nonzero level")
            col = next(
                (
                    j
                    for j in range(table.variable_cols)
                    if j not in artificial and not table.table[row, j].is_zero()
                ),
                None,
            )
            if col is None:
                table.remove_constraint_row(row)
                report.removed_rows.append(row)
            else:
                table.move_to_next_iteration(row, col)
                report.drive_out_pivots.append((row, col))

    def _prepare_phase_two(self, table: SimplexTable, report: PhaseReport) -> None:
        for col in sorted(table.artificial_variables, reverse=True):
            table.remove_column(col)
            report.removed_columns.insert(0, col)

        last = table.table.rows - 1
        coefficients = table.objective.expression.coefficients
        for col in range(table.table.cols):
            table.table[last, col] = -coefficients[col] if col < len(coefficients) else ZERO

        for col in range(table.variable_cols):
            row = table.basic_row(col)
            if row is None:
                continue
            k = table.reduced_cost(col)
            if not k.is_zero():
                table.table.subtract_multiplied_row(last, row, k)
                report.rows_subtracted.append((row, k))
        table.iteration = 0
