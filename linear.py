"""Linear expressions, objectives, constraints and polytopes over exact fractions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple, Union

from rational import ZERO, Fraction, MalformedArgument, to_fraction


class EmptyExpression(ValueError):
    """Raised when a nonzero term is required but every coefficient is zero."""


def _fractions(values: Iterable[object]) -> Tuple[Fraction, ...]:
    return tuple(to_fraction(value) for value in values)


@dataclass(frozen=True)
class LinearExpression:
    """Sum of ``coefficients[i] * x_i`` over 0-based variable indices."""

    coefficients: Tuple[Fraction, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "coefficients", _fractions(self.coefficients))

    def __len__(self) -> int:
        return len(self.coefficients)

    def __getitem__(self, index: int) -> Fraction:
        return self.coefficients[index]

    def copy(self) -> LinearExpression:
        return LinearExpression(self.coefficients)

    def opposite(self) -> LinearExpression:
        return LinearExpression(tuple(-c for c in self.coefficients))

    def replace_variable_with_difference(self, n: int) -> LinearExpression:
        """Append a column for ``-x_n`` so that ``x_n`` becomes ``x_n - x_new``."""
        return LinearExpression(self.coefficients + (-self.coefficients[n],))

    def evaluate(self, point: Sequence[Union[int, Fraction]]) -> Fraction:
        if len(point) < len(self.coefficients):
            raise ValueError(
                f"point has {len(point)} coordinates, expression needs {len(self.coefficients)}"
            )
        total = ZERO
        for coefficient, coordinate in zip(self.coefficients, point):
            total = total + coefficient * coordinate
        return total

    def is_zero(self) -> bool:
        return all(c.is_zero() for c in self.coefficients)

    def leading_index(self) -> int:
        for index, coefficient in enumerate(self.coefficients):
            if not coefficient.is_zero():
                return index
        raise EmptyExpression("expression has no nonzero coefficient")

    def __str__(self) -> str:
        terms = []
        for index, coefficient in enumerate(self.coefficients):
            if coefficient.is_zero():
                continue
            sign = "-" if coefficient < 0 else "+"
            magnitude = abs(coefficient)
            body = f"x{index + 1}" if magnitude == 1 else f"{magnitude}*x{index + 1}"
            terms.append((sign, body))
        if not terms:
            return "0"
        first_sign, first_body = terms[0]
        text = first_body if first_sign == "+" else f"-{first_body}"
        for sign, body in terms[1:]:
            text += f" {sign} {body}"
        return text


@dataclass(frozen=True)
class LinearObjective:
    expression: LinearExpression
    maximize: bool = True

    def copy(self) -> LinearObjective:
        return LinearObjective(self.expression, self.maximize)

    def opposite(self) -> LinearObjective:
        """Negate the expression and flip max/min; the optimum set is unchanged."""
        return LinearObjective(self.expression.opposite(), not self.maximize)

    def replace_variable_with_difference(self, n: int) -> LinearObjective:
        return LinearObjective(self.expression.replace_variable_with_difference(n), self.maximize)

    def value_at(self, point: Sequence[Union[int, Fraction]]) -> Fraction:
        return self.expression.evaluate(point)

    def __str__(self) -> str:
        return f"{self.expression} -> {'max' if self.maximize else 'min'}"


class Relation(Enum):
    LE = "<="
    EQ = "="
    GE = ">="

    @classmethod
    def parse(cls, text: str) -> Relation:
        aliases = {
            "<=": cls.LE,
            "le": cls.LE,
            "≤": cls.LE,
            "=": cls.EQ,
            "==": cls.EQ,
            "eq": cls.EQ,
            ">=": cls.GE,
            "ge": cls.GE,
            "≥": cls.GE,
        }
        try:
            return aliases[str(text).strip().lower()]
        except KeyError:
            raise ValueError(f"unknown relation: {text!r}") from None

    def flipped(self) -> Relation:
        if self is Relation.LE:
            return Relation.GE
        if self is Relation.GE:
            return Relation.LE
        return self

    def holds(self, lhs: Fraction, rhs: Fraction) -> bool:
        if self is Relation.LE:
            return lhs <= rhs
        if self is Relation.GE:
            return lhs >= rhs
        return lhs == rhs


@dataclass(frozen=True)
class LinearConstraint:
    expression: LinearExpression
    rhs: Fraction
    relation: Relation = Relation.LE

    def __post_init__(self) -> None:
        object.__setattr__(self, "rhs", to_fraction(self.rhs))
        if not isinstance(self.relation, Relation):
            raise MalformedArgument(f"relation must be a Relation, got {self.relation!r}")

    def copy(self) -> LinearConstraint:
        return LinearConstraint(self.expression, self.rhs, self.relation)

    def revert_sign(self) -> LinearConstraint:
        """Multiply both sides by -1; equalities are returned unchanged."""
        if self.relation is Relation.EQ:
            return self
        return LinearConstraint(self.expression.opposite(), -self.rhs, self.relation.flipped())

    def split_equality(self) -> Tuple[LinearConstraint, LinearConstraint]:
        if self.relation is not Relation.EQ:
            raise ValueError("only equality constraints can be split")
        return (
            LinearConstraint(self.expression, self.rhs, Relation.LE),
            LinearConstraint(self.expression.opposite(), -self.rhs, Relation.LE),
        )

    def replace_variable_with_difference(self, n: int) -> LinearConstraint:
        return LinearConstraint(
            self.expression.replace_variable_with_difference(n), self.rhs, self.relation
        )

    def point_satisfies(self, coords: Sequence[Union[int, Fraction]]) -> bool:
        return self.relation.holds(self.expression.evaluate(coords), self.rhs)

    def intersection(self, other: LinearConstraint) -> Optional[Tuple[Fraction, Fraction]]:
        """Crossing point of two boundary lines in the plane, or None if parallel."""
        if len(self.expression) != 2 or len(other.expression) != 2:
            raise ValueError("intersection is defined for two-variable constraints only")
        a11, a12 = self.expression.coefficients
        a21, a22 = other.expression.coefficients
        b1, b2 = self.rhs, other.rhs
        delta = a11 * a22 - a12 * a21
        if delta.is_zero():
            return None
        delta_x = b1 * a22 - a12 * b2
        delta_y = a11 * b2 - b1 * a21
        return delta_x / delta, delta_y / delta

    def __str__(self) -> str:
        return f"{self.expression} {self.relation.value} {self.rhs}"


@dataclass(frozen=True)
class Polytope:
    """Intersection of half-spaces plus ``x_i >= 0`` for each listed index."""

    constraints: Tuple[LinearConstraint, ...]
    nonnegative_variables: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        constraints = tuple(self.constraints)
        if not constraints:
            raise ValueError("a polytope needs at least one constraint")
        width = len(constraints[0].expression)
        for index, constraint in enumerate(constraints):
            if len(constraint.expression) != width:
                raise ValueError(
                    f"constraint {index + 1} has {len(constraint.expression)} coefficients, expected {width}"
                )
        nonnegative = frozenset(self.nonnegative_variables)
        for index in nonnegative:
            if not 0 <= index < width:
                raise ValueError(f"nonnegative variable index {index} out of range")
        object.__setattr__(self, "constraints", constraints)
        object.__setattr__(self, "nonnegative_variables", nonnegative)

    @property
    def dimension(self) -> int:
        return len(self.constraints[0].expression)

    def copy(self) -> Polytope:
        return Polytope(self.constraints, self.nonnegative_variables)

    def has_point(self, coords: Sequence[Union[int, Fraction]]) -> bool:
        if not all(constraint.point_satisfies(coords) for constraint in self.constraints):
            return False
        return all(Fraction.of(coords[i]) >= 0 for i in self.nonnegative_variables)
