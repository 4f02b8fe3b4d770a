"""Floating-point reference solve built on SciPy, used to cross-check exact results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from scipy.optimize import linprog

from linear import Relation
from problem import LinearProgrammingProblem

_STATUSES = {0: "optimal", 2: "infeasible", 3: "unbounded"}


@dataclass
class ReferenceSolution:
    x: Optional[np.ndarray]
    status: str
    objective: Optional[float]


class LPSolverError(RuntimeError):
    pass


def _as_arrays(
    problem: LinearProgrammingProblem,
) -> Tuple[np.ndarray, Optional[np.ndarray], Optional[np.ndarray], Optional[np.ndarray], Optional[np.ndarray]]:
    n = problem.num_variables
    ub_rows: List[List[float]] = []
    ub_rhs: List[float] = []
    eq_rows: List[List[float]] = []
    eq_rhs: List[float] = []
    for constraint in problem.constraints:
        row = [float(c) for c in constraint.expression.coefficients]
        rhs = float(constraint.rhs)
        if constraint.relation is Relation.LE:
            ub_rows.append(row)
            ub_rhs.append(rhs)
        elif constraint.relation is Relation.GE:
            ub_rows.append([-value for value in row])
            ub_rhs.append(-rhs)
        else:
            eq_rows.append(row)
            eq_rhs.append(rhs)

    A_ub = np.array(ub_rows, dtype=float).reshape(-1, n) if ub_rows else None
    b_ub = np.array(ub_rhs, dtype=float) if ub_rhs else None
    A_eq = np.array(eq_rows, dtype=float).reshape(-1, n) if eq_rows else None
    b_eq = np.array(eq_rhs, dtype=float) if eq_rhs else None
    return np.array([float(c) for c in problem.objective.expression.coefficients]), A_ub, b_ub, A_eq, b_eq


def solve_reference(problem: LinearProgrammingProblem) -> ReferenceSolution:
    """Solve ``problem`` with HiGHS in double precision."""
    c, A_ub, b_ub, A_eq, b_eq = _as_arrays(problem)
    sense = -1.0 if problem.objective.maximize else 1.0
    bounds = [
        (0, None) if i in problem.polytope.nonnegative_variables else (None, None)
        for i in range(problem.num_variables)
    ]
    res = linprog(
        sense * c,
        A_ub=A_ub,
        b_ub=b_ub,
        A_eq=A_eq,
        b_eq=b_eq,
        bounds=bounds,
        method="highs",
    )
    status = _STATUSES.get(res.status)
    if status is None:
        raise LPSolverError(res.message)
    if status != "optimal":
        return ReferenceSolution(x=None, status=status, objective=None)
    return ReferenceSolution(x=res.x, status=status, objective=float(c @ res.x))


def agrees_with(
    reference: ReferenceSolution,
    status: str,
    value: Optional[float],
    *,
    tol: float = 1e-7,
) -> bool:
    if reference.status != status:
        return False
    if status != "optimal":
        return True
    return abs(reference.objective - float(value)) <= tol * max(1.0, abs(reference.objective))
