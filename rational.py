"""Exact rational arithmetic used by every numeric step of the solver."""

from __future__ import annotations

import fractions
import math
from typing import Union


class DivideByZero(ZeroDivisionError):
    """Raised when a fraction would end up with a zero denominator."""


class MalformedArgument(TypeError):
    """Raised when an operand is neither an int nor a Fraction."""


class FractionParseError(ValueError):
    """Raised when text cannot be read as a fraction."""


def _as_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedArgument(f"{name} must be an int, got {type(value).__name__}")
    return value


class Fraction:
    """Immutable fraction backed by :class:`fractions.Fraction`.

    Operands are restricted to ints and other ``Fraction`` instances, so no
    float can enter a computation. Values are always in lowest terms with a
    positive denominator.
    """

    __slots__ = ("_value",)

    def __init__(self, numerator: int, denominator: int = 1) -> None:
        numerator = _as_int(numerator, "numerator")
        denominator = _as_int(denominator, "denominator")
        try:
            self._value = fractions.Fraction(numerator, denominator)
        except ZeroDivisionError as exc:
            raise DivideByZero(f"fraction {numerator}/0 has a zero denominator") from exc

    @classmethod
    def _wrap(cls, value: fractions.Fraction) -> "Fraction":
        result = cls.__new__(cls)
        result._value = value
        return result

    @property
    def numerator(self) -> int:
        return self._value.numerator

    @property
    def denominator(self) -> int:
        return self._value.denominator

    @classmethod
    def of(cls, value: Union[int, "Fraction"]) -> "Fraction":
        """Promote an int to a Fraction; Fractions are returned unchanged."""
        if isinstance(value, Fraction):
            return value
        return cls(_as_int(value, "value"))

    # named operations

    def reduce(self) -> "Fraction":
        # instances are reduced on construction
        return self

    def copy(self) -> "Fraction":
        return self

    def add(self, other: Union[int, "Fraction"]) -> "Fraction":
        return Fraction._wrap(self._value + Fraction.of(other)._value)

    def subtract(self, other: Union[int, "Fraction"]) -> "Fraction":
        return Fraction._wrap(self._value - Fraction.of(other)._value)

    def multiply(self, other: Union[int, "Fraction"]) -> "Fraction":
        return Fraction._wrap(self._value * Fraction.of(other)._value)

    def divide(self, other: Union[int, "Fraction"]) -> "Fraction":
        other = Fraction.of(other)
        if other.is_zero():
            raise DivideByZero(f"cannot divide {self} by zero")
        return Fraction._wrap(self._value / other._value)

    def invert(self) -> "Fraction":
        if self.is_zero():
            raise DivideByZero("zero has no inverse")
        return Fraction._wrap(1 / self._value)

    def negate(self) -> "Fraction":
        return Fraction._wrap(-self._value)

    def abs(self) -> "Fraction":
        return Fraction._wrap(abs(self._value))

    def pow(self, exponent: int) -> "Fraction":
        exponent = _as_int(exponent, "exponent")
        if exponent < 0 and self.is_zero():
            raise DivideByZero("zero has no inverse")
        return Fraction._wrap(self._value ** exponent)

    def equal_to(self, other: Union[int, "Fraction"]) -> bool:
        return self._value == Fraction.of(other)._value

    def less_than(self, other: Union[int, "Fraction"]) -> bool:
        return self._value < Fraction.of(other)._value

    def less_or_equal(self, other: Union[int, "Fraction"]) -> bool:
        return self._value <= Fraction.of(other)._value

    def is_zero(self) -> bool:
        return self._value == 0

    def sign(self) -> int:
        return (self._value > 0) - (self._value < 0)

    # Python protocol. Unknown operand kinds return NotImplemented so that
    # NumPy object arrays can take over broadcasting.

    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Fraction.of(other).add(self)

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Fraction.of(other).subtract(self)

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Fraction.of(other).multiply(self)

    def __truediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Fraction.of(other).divide(self)

    def __pow__(self, exponent):
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            return NotImplemented
        return self.pow(exponent)

    def __neg__(self) -> "Fraction":
        return self.negate()

    def __pos__(self) -> "Fraction":
        return self

    def __abs__(self) -> "Fraction":
        return self.abs()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __eq__(self, other) -> bool:
        if not _is_operand(other):
            return NotImplemented
        return self.equal_to(other)

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.less_than(other)

    def __le__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.less_or_equal(other)

    def __gt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Fraction.of(other).less_than(self)

    def __ge__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Fraction.of(other).less_or_equal(self)

    def __float__(self) -> float:
        return float(self._value)

    def __repr__(self) -> str:
        return f"Fraction({self.numerator}, {self.denominator})"

    def __str__(self) -> str:
        return str(self._value)


def _is_operand(value: object) -> bool:
    return isinstance(value, Fraction) or (
        isinstance(value, int) and not isinstance(value, bool)
    )


ZERO = Fraction(0)
ONE = Fraction(1)


def parse_fraction(text: str) -> Fraction:
    """Read ``"a"``, ``"a/b"``, ``"-a/b"`` or a decimal such as ``"1.25"``."""
    if not isinstance(text, str):
        raise MalformedArgument(f"expected a string, got {type(text).__name__}")
    try:
        value = fractions.Fraction(text)
    except ZeroDivisionError as exc:
        raise FractionParseError(f"zero denominator in {text!r}") from DivideByZero(str(exc))
    except ValueError as exc:
        raise FractionParseError(f"not a fraction: {text!r}") from exc
    return Fraction._wrap(value)


def to_fraction(value: object) -> Fraction:
    """Coerce config-style values (int, Fraction, numeric string, float) exactly."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise MalformedArgument("booleans are not numbers here")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise FractionParseError(f"not a finite number: {value!r}")
        # repr gives the shortest decimal that round-trips, which is what the user typed
        return parse_fraction(repr(value))
    if isinstance(value, str):
        return parse_fraction(value)
    raise MalformedArgument(f"cannot read {type(value).__name__} as a fraction")
