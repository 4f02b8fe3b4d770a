"""Linear programming problems and their reduction to canonical form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from linear import LinearConstraint, LinearExpression, LinearObjective, Polytope, Relation
from rational import Fraction, to_fraction


class ProblemError(ValueError):
    """Raised when a problem is structurally invalid."""


@dataclass(frozen=True)
class VariableSplit:
    """Records that ``x_original = x_positive - x_negative`` in canonical form."""

    original: int
    positive: int
    negative: int


@dataclass(frozen=True)
class LinearProgrammingProblem:
    objective: LinearObjective
    polytope: Polytope
    integer_variables: Tuple[int, ...] = ()
    artificial_variables: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        width = len(self.objective.expression)
        if self.polytope.dimension != width:
            raise ProblemError(
                f"objective has {width} coefficients but constraints have {self.polytope.dimension}"
            )
        integers = tuple(sorted(set(self.integer_variables)))
        for index in integers:
            if not 0 <= index < width:
                raise ProblemError(f"integer variable index {index} out of range")
        object.__setattr__(self, "integer_variables", integers)
        object.__setattr__(self, "artificial_variables", tuple(self.artificial_variables))

    @classmethod
    def from_coefficients(
        cls,
        objective: Sequence[Union[int, Fraction, str]],
        constraints: Iterable[Tuple[Sequence[Union[int, Fraction, str]], Union[Relation, str], Union[int, Fraction, str]]],
        nonnegative: Iterable[int],
        *,
        maximize: bool = True,
        integer_variables: Iterable[int] = (),
    ) -> LinearProgrammingProblem:
        """Build a problem from raw rows of ``(coefficients, relation, rhs)``."""
        built: List[LinearConstraint] = []
        for coefficients, relation, rhs in constraints:
            if not isinstance(relation, Relation):
                relation = Relation.parse(relation)
            built.append(LinearConstraint(LinearExpression(coefficients), to_fraction(rhs), relation))
        if not built:
            raise ProblemError("a problem needs at least one constraint")
        try:
            polytope = Polytope(tuple(built), frozenset(nonnegative))
        except ValueError as exc:
            raise ProblemError(str(exc)) from exc
        return cls(
            LinearObjective(LinearExpression(objective), maximize),
            polytope,
            tuple(integer_variables),
        )

    @property
    def constraints(self) -> Tuple[LinearConstraint, ...]:
        return self.polytope.constraints

    @property
    def num_variables(self) -> int:
        return len(self.objective.expression)

    def copy(self) -> LinearProgrammingProblem:
        return LinearProgrammingProblem(
            self.objective, self.polytope, self.integer_variables, self.artificial_variables
        )

    def already_in_canonical_form(self) -> bool:
        if not self.objective.maximize:
            return False
        if any(i not in self.polytope.nonnegative_variables for i in range(self.num_variables)):
            return False
        return all(c.relation is Relation.LE for c in self.constraints)

    def canonical_form(self) -> Tuple[LinearProgrammingProblem, Tuple[VariableSplit, ...]]:
        """Return an equivalent max / all-``<=`` / all-nonnegative problem and its split log."""
        if self.already_in_canonical_form():
            return self, ()

        objective = self.objective if self.objective.maximize else self.objective.opposite()
        constraints: List[LinearConstraint] = []
        for constraint in self.constraints:
            if constraint.relation is Relation.LE:
                constraints.append(constraint)
            elif constraint.relation is Relation.GE:
                constraints.append(constraint.revert_sign())
            else:
                constraints.extend(constraint.split_equality())

        integers = list(self.integer_variables)
        splits: List[VariableSplit] = []
        for i in range(self.num_variables):
            if i in self.polytope.nonnegative_variables:
                continue
            objective = objective.replace_variable_with_difference(i)
            constraints = [c.replace_variable_with_difference(i) for c in constraints]
            negative = len(objective.expression) - 1
            splits.append(VariableSplit(original=i, positive=i, negative=negative))
            if i in self.integer_variables:
                integers.append(negative)

        width = len(objective.expression)
        canonical = LinearProgrammingProblem(
            objective,
            Polytope(tuple(constraints), frozenset(range(width))),
            tuple(integers),
            self.artificial_variables,
        )
        return canonical, tuple(splits)


def recover_plan(
    plan: Sequence[Fraction],
    splits: Sequence[VariableSplit],
    num_original: Optional[int] = None,
) -> Tuple[Fraction, ...]:
    """Map a canonical-form plan back onto the original variables."""
    if num_original is None:
        num_original = len(plan) - len(splits)
    values = list(plan[:num_original])
    for split in splits:
        values[split.original] = plan[split.positive] - plan[split.negative]
    return tuple(values)


def recover_value(value: Fraction, original: LinearProgrammingProblem) -> Fraction:
    """Undo the max/min flip applied by ``canonical_form``."""
    return value if original.objective.maximize else -value
