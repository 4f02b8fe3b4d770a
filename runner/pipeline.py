"""End-to-end solve: canonical form, tableau, two phases, back-substitution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from problem import LinearProgrammingProblem, VariableSplit, recover_plan, recover_value
from rational import Fraction
from simplex import PhaseReport, PivotChooser, SimplexSolution, SimplexSolver, SolveStatus
from tableau import Pivot, SimplexTable, build_simplex_table


@dataclass
class StepRecord:
    phase: int
    iteration: int
    pivot: Optional[Pivot]
    candidates: int
    value: Fraction
    plan: Tuple[Fraction, ...]
    basic_variables: Tuple[int, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "iteration": self.iteration,
            "pivot": list(self.pivot) if self.pivot is not None else None,
            "candidates": self.candidates,
            "value": self.value,
            "plan": list(self.plan),
            "basic_variables": list(self.basic_variables),
        }


@dataclass(frozen=True)
class SolveReport:
    problem: LinearProgrammingProblem
    canonical: LinearProgrammingProblem
    splits: Tuple[VariableSplit, ...]
    initial_table: SimplexTable
    solution: SimplexSolution
    plan: Optional[Tuple[Fraction, ...]]
    value: Optional[Fraction]
    plan_path: Tuple[Tuple[Fraction, ...], ...]
    history: Tuple[StepRecord, ...]

    @property
    def status(self) -> SolveStatus:
        return self.solution.status

    @property
    def needs_phase_one(self) -> bool:
        return bool(self.initial_table.artificial_variables)


def solve_problem(
    problem: LinearProgrammingProblem,
    chooser: Optional[PivotChooser] = None,
) -> SolveReport:
    canonical, splits = problem.canonical_form()
    table = build_simplex_table(canonical)
    solution = SimplexSolver(chooser=chooser).solve(table)

    plan = value = None
    if solution.is_optimal:
        plan = recover_plan(solution.plan, splits, problem.num_variables)
        value = recover_value(solution.value, problem)

    plan_path: Tuple[Tuple[Fraction, ...], ...] = ()
    if solution.phase_two is not None:
        plan_path = tuple(
            recover_plan(step, splits, problem.num_variables) for step in solution.phase_two.plans
        )

    history = _history(solution, plan_path)
    return SolveReport(
        problem=problem,
        canonical=canonical,
        splits=splits,
        initial_table=table,
        solution=solution,
        plan=plan,
        value=value,
        plan_path=plan_path,
        history=history,
    )


def _history(solution: SimplexSolution, plan_path: Tuple[Tuple[Fraction, ...], ...]) -> Tuple[StepRecord, ...]:
    records: List[StepRecord] = _phase_records(1, solution.phase_one, solution.phase_one.plans)
    if solution.phase_two is not None:
        records.extend(_phase_records(2, solution.phase_two, plan_path))
    return tuple(records)


def _phase_records(phase: int, report: PhaseReport, plans) -> List[StepRecord]:
    records: List[StepRecord] = []
    for step, snapshot in enumerate(report.snapshots):
        has_pivot = step < len(report.pivots)
        records.append(
            StepRecord(
                phase=phase,
                iteration=snapshot.iteration,
                pivot=report.pivots[step] if has_pivot else None,
                candidates=report.candidates[step] if has_pivot else 0,
                value=snapshot.value,
                plan=tuple(plans[step]),
                basic_variables=snapshot.basic_variables,
            )
        )
    return records
