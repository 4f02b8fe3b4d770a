"""Dense matrix of exact fractions with the row operations the simplex needs."""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union

import numpy as np

from rational import Fraction, to_fraction


class Matrix:
    """Fractions stored in a NumPy object array; rows are updated in place."""

    def __init__(self, rows: Sequence[Sequence[Union[int, Fraction]]]) -> None:
        data = [[to_fraction(value) for value in row] for row in rows]
        if not data or not data[0]:
            raise ValueError("matrix must have at least one row and one column")
        width = len(data[0])
        if any(len(row) != width for row in data):
            raise ValueError("all matrix rows must have the same length")
        self._data = np.empty((len(data), width), dtype=object)
        for i, row in enumerate(data):
            for j, value in enumerate(row):
                self._data[i, j] = value

    @classmethod
    def _wrap(cls, data: np.ndarray) -> Matrix:
        matrix = cls.__new__(cls)
        matrix._data = data
        return matrix

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    def __getitem__(self, key: Tuple[int, int]) -> Fraction:
        return self._data[key]

    def __setitem__(self, key: Tuple[int, int], value: Union[int, Fraction]) -> None:
        self._data[key] = to_fraction(value)

    def row(self, index: int) -> Tuple[Fraction, ...]:
        return tuple(self._data[index, :])

    def to_lists(self) -> List[List[Fraction]]:
        return [list(row) for row in self._data]

    def copy(self) -> Matrix:
        # Fractions are immutable, so a shallow copy of the object array is enough.
        return Matrix._wrap(self._data.copy())

    def multiply_row(self, row: int, k: Fraction) -> None:
        self._data[row, :] = self._data[row, :] * k

    def subtract_multiplied_row(self, target: int, source: int, k: Fraction = Fraction(1)) -> None:
        """``row[target] -= k * row[source]``."""
        if k.is_zero():
            return
        self._data[target, :] = self._data[target, :] - self._data[source, :] * k

    def swap_rows(self, first: int, second: int) -> None:
        self._data[[first, second], :] = self._data[[second, first], :]

    def remove_column(self, col: int) -> None:
        self._data = np.delete(self._data, col, axis=1)

    def remove_row(self, row: int) -> None:
        self._data = np.delete(self._data, row, axis=0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._data.shape == other._data.shape and self.to_lists() == other.to_lists()

    def __repr__(self) -> str:
        body = "; ".join(" ".join(str(value) for value in row) for row in self._data)
        return f"Matrix([{body}])"
