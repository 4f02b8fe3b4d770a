import pytest

from matrix import Matrix
from rational import Fraction


def _rows(*rows):
    return [[Fraction(v) if isinstance(v, int) else v for v in row] for row in rows]


def test_construction_reads_mixed_input():
    m = Matrix([[1, "1/2"], [0.25, Fraction(3)]])
    assert (m.rows, m.cols) == (2, 2)
    assert m.to_lists() == [[Fraction(1), Fraction(1, 2)], [Fraction(1, 4), Fraction(3)]]
    m[0, 0] = "2/3"
    assert m[0, 0] == Fraction(2, 3)


def test_construction_rejects_ragged_or_empty_rows():
    with pytest.raises(ValueError):
        Matrix([])
    with pytest.raises(ValueError):
        Matrix([[1, 2], [3]])


def test_multiply_row_scales_in_place():
    m = Matrix([[2, 4, 6], [1, 1, 1]])
    m.multiply_row(0, Fraction(1, 2))
    assert m.row(0) == (Fraction(1), Fraction(2), Fraction(3))
    assert m.row(1) == (Fraction(1), Fraction(1), Fraction(1))


def test_subtract_multiplied_row_eliminates():
    m = Matrix([[1, 2, 3], [3, 4, 5]])
    m.subtract_multiplied_row(1, 0, Fraction(3))
    assert m.row(1) == (Fraction(0), Fraction(-2), Fraction(-4))
    assert m.row(0) == (Fraction(1), Fraction(2), Fraction(3))


def test_subtract_with_zero_factor_leaves_row_alone():
    m = Matrix([[1, 2], [5, 7]])
    before = m.copy()
    m.subtract_multiplied_row(1, 0, Fraction(0))
    assert m == before


def test_swap_rows():
    m = Matrix([[1, 2], [3, 4], [5, 6]])
    m.swap_rows(0, 2)
    assert m.to_lists() == _rows([5, 6], [3, 4], [1, 2])
    m.swap_rows(1, 1)
    assert m.row(1) == (Fraction(3), Fraction(4))


def test_remove_row_and_column():
    m = Matrix([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    m.remove_column(1)
    assert (m.rows, m.cols) == (3, 2)
    assert m.to_lists() == _rows([1, 3], [4, 6], [7, 9])
    m.remove_row(0)
    assert m.to_lists() == _rows([4, 6], [7, 9])


def test_copy_is_independent():
    m = Matrix([[1, 2], [3, 4]])
    clone = m.copy()
    clone.multiply_row(0, Fraction(10))
    clone.remove_column(1)
    assert m.to_lists() == _rows([1, 2], [3, 4])
    assert clone.to_lists() == _rows([10], [3])
    assert m != clone


def test_repr_lists_rows():
    assert repr(Matrix([[1, "1/2"], [-3, 0]])) == "Matrix([1 1/2; -3 0])"
