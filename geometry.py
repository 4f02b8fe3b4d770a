"""Vertices and coordinate bounds of polytopes, computed exactly."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from itertools import combinations
from typing import List, Optional, Tuple

from linear import LinearConstraint, LinearExpression, LinearObjective, Polytope, Relation
from problem import LinearProgrammingProblem
from rational import ONE, ZERO, Fraction
from runner.pipeline import solve_problem
from simplex import PivotChooser, SolveStatus

Point = Tuple[Fraction, Fraction]


@dataclass(frozen=True)
class PolytopeInfo:
    nonempty: bool
    bounded: bool = False
    boundaries: Tuple[Tuple[Optional[Fraction], Optional[Fraction]], ...] = ()
    vertices: Tuple[Point, ...] = field(default_factory=tuple)


def unit_vector(dimension: int, i: int) -> Tuple[Fraction, ...]:
    return tuple(ONE if j == i else ZERO for j in range(dimension))


def _compare_around(origin: Point):
    def compare(p: Point, q: Point) -> int:
        v1 = (p[0] - origin[0], p[1] - origin[1])
        v2 = (q[0] - origin[0], q[1] - origin[1])
        det = v1[0] * v2[1] - v1[1] * v2[0]
        if det < ZERO:
            return 1
        if det > ZERO:
            return -1
        s1 = v1[0] * v1[0] + v1[1] * v1[1]
        s2 = v2[0] * v2[0] + v2[1] * v2[1]
        if s1 > s2:
            return 1
        if s1 < s2:
            return -1
        return 0

    return compare


def sort_points(points: List[Point]) -> List[Point]:
    """Order points counter-clockwise around the first one."""
    if not points:
        return []
    return sorted(points, key=cmp_to_key(_compare_around(points[0])))


def all_vertices(polytope: Polytope) -> Tuple[Point, ...]:
    """Vertices of a 2-D polytope, counter-clockwise, without repetitions."""
    if polytope.dimension != 2:
        raise ValueError("vertex enumeration is implemented for two variables only")
    constraints = list(polytope.constraints)
    for i in sorted(polytope.nonnegative_variables):
        constraints.append(LinearConstraint(LinearExpression(unit_vector(2, i)), ZERO, Relation.GE))

    seen = set()
    vertices: List[Point] = []
    for first, second in combinations(constraints, 2):
        point = first.intersection(second)
        if point is None or point in seen:
            continue
        if polytope.has_point(point):
            seen.add(point)
            vertices.append(point)
    if not vertices:
        return ()
    # the lowest-leftmost vertex sees all others within a half-plane
    start = min(vertices, key=lambda p: (p[1], p[0]))
    vertices.remove(start)
    return tuple(sort_points([start] + vertices))


def polytope_information(polytope: Polytope, chooser: Optional[PivotChooser] = None) -> PolytopeInfo:
    """Check nonemptiness, then minimize and maximize every coordinate."""
    dimension = polytope.dimension
    feasibility = LinearProgrammingProblem(
        LinearObjective(LinearExpression((ZERO,) * dimension)), polytope
    )
    if solve_problem(feasibility, chooser).status is SolveStatus.INFEASIBLE:
        return PolytopeInfo(nonempty=False)

    bounded = True
    boundaries = []
    for i in range(dimension):
        direction = LinearExpression(unit_vector(dimension, i))
        sides: List[Optional[Fraction]] = []
        for maximize in (False, True):
            report = solve_problem(
                LinearProgrammingProblem(LinearObjective(direction, maximize), polytope), chooser
            )
            if report.status is SolveStatus.OPTIMAL:
                sides.append(report.value)
            else:
                sides.append(None)
                bounded = False
        boundaries.append((sides[0], sides[1]))

    vertices = all_vertices(polytope) if dimension == 2 else ()
    return PolytopeInfo(
        nonempty=True,
        bounded=bounded,
        boundaries=tuple(boundaries),
        vertices=vertices,
    )
