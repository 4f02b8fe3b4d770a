"""Simplex tableau state and its construction from a canonical-form problem."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from linear import LinearObjective
from matrix import Matrix
from problem import LinearProgrammingProblem
from rational import ONE, ZERO, Fraction

Pivot = Tuple[int, int]


@dataclass(frozen=True)
class TableSnapshot:
    """Read-only copy of a tableau handed to rendering and telemetry code."""

    rows: Tuple[Tuple[Fraction, ...], ...]
    basic_variables: Tuple[int, ...]
    artificial_variables: Tuple[int, ...]
    iteration: int

    @property
    def value(self) -> Fraction:
        return self.rows[-1][-1]

    def to_dict(self) -> dict:
        return {
            "iteration": self.iteration,
            "rows": [[str(value) for value in row] for row in self.rows],
            "basic_variables": list(self.basic_variables),
            "artificial_variables": list(self.artificial_variables),
        }


class SimplexTable:
    """Augmented tableau: constraint rows, then the objective row; RHS is the last column."""

    def __init__(
        self,
        table: Matrix,
        objective: LinearObjective,
        basic_variables: Sequence[int],
        start_variables: Sequence[int],
        artificial_variables: Sequence[int] = (),
        iteration: int = 0,
    ) -> None:
        if len(basic_variables) != table.rows - 1:
            raise ValueError(
                f"{len(basic_variables)} basic variables for {table.rows - 1} constraint rows"
            )
        self.table = table
        self.objective = objective
        self.basic_variables: List[int] = list(basic_variables)
        self.start_variables: Tuple[int, ...] = tuple(start_variables)
        self.artificial_variables: List[int] = list(artificial_variables)
        self.iteration = iteration

    @property
    def constraint_rows(self) -> int:
        return self.table.rows - 1

    @property
    def variable_cols(self) -> int:
        return self.table.cols - 1

    def rhs(self, row: int) -> Fraction:
        return self.table[row, self.table.cols - 1]

    def reduced_cost(self, col: int) -> Fraction:
        return self.table[self.table.rows - 1, col]

    def value(self) -> Fraction:
        return self.table[self.table.rows - 1, self.table.cols - 1]

    def copy(self) -> SimplexTable:
        return SimplexTable(
            self.table.copy(),
            self.objective,
            self.basic_variables,
            self.start_variables,
            self.artificial_variables,
            self.iteration,
        )

    def is_possible_pivot(self, row: int, col: int) -> bool:
        """Negative reduced cost, positive entry, and minimal ratio ``B(row) / A(row, col)``."""
        if not self.reduced_cost(col) < ZERO:
            return False
        entry = self.table[row, col]
        if not entry > ZERO:
            return False
        ratio = self.rhs(row) / entry
        for other in range(self.constraint_rows):
            candidate = self.table[other, col]
            if candidate > ZERO and self.rhs(other) / candidate < ratio:
                return False
        return True

    def columns_with_negative_reduced_cost(self) -> List[int]:
        return [col for col in range(self.variable_cols) if self.reduced_cost(col) < ZERO]

    def all_possible_pivots(self) -> List[Pivot]:
        cols = self.columns_with_negative_reduced_cost()
        return [
            (row, col)
            for row in range(self.constraint_rows)
            for col in cols
            if self.is_possible_pivot(row, col)
        ]

    def move_to_next_iteration(self, row: int, col: int) -> None:
        """Gauss-Jordan pivot on ``(row, col)``; ``col`` enters the basis at ``row``."""
        self.table.multiply_row(row, self.table[row, col].invert())
        for other in range(self.table.rows):
            if other != row:
                self.table.subtract_multiplied_row(other, row, self.table[other, col])
        self.basic_variables[row] = col
        self.iteration += 1

    def basic_row(self, variable: int) -> Optional[int]:
        try:
            return self.basic_variables.index(variable)
        except ValueError:
            return None

    def plan(self) -> Tuple[Fraction, ...]:
        values = []
        for variable in self.start_variables:
            row = self.basic_row(variable)
            values.append(self.rhs(row) if row is not None else ZERO)
        return tuple(values)

    def remove_column(self, col: int) -> None:
        self.table.remove_column(col)
        self.basic_variables = [v - 1 if v > col else v for v in self.basic_variables]
        self.artificial_variables = [
            v - 1 if v > col else v for v in self.artificial_variables if v != col
        ]

    def remove_constraint_row(self, row: int) -> None:
        self.table.remove_row(row)
        del self.basic_variables[row]

    def snapshot(self) -> TableSnapshot:
        return TableSnapshot(
            rows=tuple(self.table.row(i) for i in range(self.table.rows)),
            basic_variables=tuple(self.basic_variables),
            artificial_variables=tuple(self.artificial_variables),
            iteration=self.iteration,
        )


def build_simplex_table(canonical: LinearProgrammingProblem) -> SimplexTable:
    """Initial tableau with slacks, plus artificials for rows with a negative RHS.

    Columns are laid out as ``[variables | slacks | artificials | RHS]``. The
    objective row holds the Phase 1 auxiliary objective: ``+1`` under each
    artificial column, zero elsewhere.
    """
    if not canonical.already_in_canonical_form():
        raise ValueError("the simplex table is built from a canonical-form problem")
    constraints = canonical.constraints
    n = canonical.num_variables
    m = len(constraints)
    needs_artificial = [c.rhs < ZERO for c in constraints]
    k = sum(needs_artificial)
    width = n + m + k + 1

    rows: List[List[Fraction]] = []
    basic_variables: List[int] = []
    artificial_variables: List[int] = []
    for i, constraint in enumerate(constraints):
        row = [ZERO] * width
        if needs_artificial[i]:
            artificial = n + m + len(artificial_variables)
            row[:n] = constraint.expression.opposite().coefficients
            row[n + i] = -ONE
            row[artificial] = ONE
            row[-1] = -constraint.rhs
            artificial_variables.append(artificial)
            basic_variables.append(artificial)
        else:
            row[:n] = constraint.expression.coefficients
            row[n + i] = ONE
            row[-1] = constraint.rhs
            basic_variables.append(n + i)
        rows.append(row)

    objective_row = [ZERO] * width
    for artificial in artificial_variables:
        objective_row[artificial] = ONE
    rows.append(objective_row)

    return SimplexTable(
        Matrix(rows),
        canonical.objective,
        basic_variables,
        range(n),
        artificial_variables,
    )
