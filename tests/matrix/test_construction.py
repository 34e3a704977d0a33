"""
Tests for Matrix construction, factories, element access and display.
"""

import numpy as np
import pytest

from pymatrix import (
    Matrix,
    MatrixIndexError,
    ShapeError,
    ValidationError,
    create,
    diagonal,
    fill,
    identity,
    ones,
    zeros,
)


class TestCreate:

    def test_nested_lists(self):
        m = create([[1, 2, 3], [4, 5, 6]])
        assert m.rows == 2
        assert m.cols == 3
        assert m.shape == (2, 3)
        assert m.elements == [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]

    def test_from_ndarray(self):
        a = np.arange(6.0).reshape(3, 2)
        m = create(a)
        np.testing.assert_array_equal(m.to_numpy(), a)

    def test_deep_copy_of_lists(self):
        """Mutating the source data after construction has no effect."""
        data = [[1.0, 2.0], [3.0, 4.0]]
        m = create(data)
        data[0][0] = 99.0
        assert m.get(0, 0) == 1.0

    def test_deep_copy_of_ndarray(self):
        a = np.eye(2)
        m = create(a)
        a[0, 0] = 5.0
        assert m.get(0, 0) == 1.0

    def test_storage_is_read_only(self):
        m = create([[1.0, 2.0]])
        out = m.to_numpy()
        out[0, 0] = 7.0
        assert m.get(0, 0) == 1.0
        with pytest.raises(ValueError):
            m._data[0, 0] = 7.0

    def test_from_matrix(self):
        m = create([[1.0, 2.0]])
        assert create(m) == m

    def test_empty_rejected(self):
        with pytest.raises(ShapeError):
            create([])

    def test_empty_rows_rejected(self):
        with pytest.raises(ShapeError):
            create([[]])

    def test_ragged_rejected(self):
        with pytest.raises(ShapeError):
            create([[1, 2], [3]])

    def test_nested_too_deep_rejected(self):
        with pytest.raises(ShapeError, match=r"expected 2D array, got 3D with shape \(2, 1, 2\)"):
            create([[[1, 2]], [[3, 4]]])

    def test_ndarray_wrong_ndim_rejected(self):
        with pytest.raises(ShapeError, match="expected 2D array, got 1D"):
            create(np.array([1.0, 2.0]))

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            create([["a", "b"]])

    def test_bool_entries_promoted(self):
        m = create([[True, False]])
        assert m.elements == [[1.0, 0.0]]


class TestFactories:

    def test_identity(self):
        m = identity(3)
        np.testing.assert_array_equal(m.to_numpy(), np.eye(3))

    def test_identity_one(self):
        assert identity(1).elements == [[1.0]]

    def test_identity_zero_rejected(self):
        with pytest.raises(ShapeError):
            identity(0)

    def test_zeros(self):
        m = zeros(2, 3)
        assert m.shape == (2, 3)
        assert m.elements == [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]

    def test_ones(self):
        np.testing.assert_array_equal(ones(2, 2).to_numpy(), np.ones((2, 2)))

    def test_fill(self):
        m = fill(2, 3, 7)
        assert m.elements == [[7.0, 7.0, 7.0], [7.0, 7.0, 7.0]]

    def test_fill_rejects_sequence_value(self):
        with pytest.raises(ValidationError, match="scalar"):
            fill(2, 2, [1, 2])

    @pytest.mark.parametrize("rows,cols", [(0, 2), (2, 0), (-1, 1)])
    def test_nonpositive_dimensions(self, rows, cols):
        with pytest.raises(ShapeError):
            zeros(rows, cols)

    def test_non_integer_dimension(self):
        with pytest.raises(ValidationError):
            ones(2.5, 2)

    def test_diagonal(self):
        m = diagonal([1, 2, 3])
        np.testing.assert_array_equal(m.to_numpy(), np.diag([1.0, 2.0, 3.0]))

    def test_diagonal_rejects_empty(self):
        with pytest.raises(ShapeError):
            diagonal([])

    def test_diagonal_rejects_2d(self):
        with pytest.raises(ShapeError):
            diagonal([[1, 2]])


class TestElementAccess:

    def test_get(self):
        m = create([[1, 2], [3, 4]])
        assert m.get(1, 0) == 3.0
        assert m[0, 1] == 2.0

    def test_get_out_of_range(self):
        m = create([[1, 2], [3, 4]])
        with pytest.raises(MatrixIndexError):
            m.get(2, 0)

    def test_get_negative_index(self):
        m = create([[1, 2], [3, 4]])
        with pytest.raises(IndexError):
            m.get(-1, 0)

    def test_getitem_requires_pair(self):
        m = create([[1, 2], [3, 4]])
        with pytest.raises(ValidationError):
            m[0]

    def test_set_returns_new_matrix(self):
        m = create([[1, 2], [3, 4]])
        updated = m.set(0, 1, 9)
        assert updated.elements == [[1.0, 9.0], [3.0, 4.0]]
        assert m.elements == [[1.0, 2.0], [3.0, 4.0]]

    def test_set_out_of_range(self):
        with pytest.raises(MatrixIndexError):
            create([[1, 2]]).set(0, 2, 5.0)

    def test_iteration_yields_rows(self):
        m = create([[1, 2], [3, 4]])
        assert list(m) == [(1.0, 2.0), (3.0, 4.0)]
        assert len(m) == 2

    def test_is_square(self):
        assert identity(2).is_square
        assert not zeros(2, 3).is_square


class TestDisplay:

    def test_str(self):
        m = create([[1, 2], [3, 4]])
        assert str(m) == "1 2\n3 4"

    def test_str_fractional(self):
        m = create([[0.5, -1.25]])
        assert str(m) == "0.5 -1.25"

    def test_repr_round_trip(self):
        m = create([[1.5, 2.0], [3.0, 4.0]])
        assert repr(m) == "Matrix([[1.5, 2.0], [3.0, 4.0]])"


class TestEquality:

    def test_equal(self):
        assert create([[1, 2]]) == create([[1.0, 2.0]])

    def test_not_equal_values(self):
        assert create([[1, 2]]) != create([[1, 3]])

    def test_not_equal_shapes(self):
        assert create([[1, 2]]) != create([[1], [2]])

    def test_not_equal_other_types(self):
        assert create([[1]]) != [[1]]

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(create([[1]]))

    def test_allclose(self):
        a = create([[1.0, 2.0]])
        b = create([[1.0 + 1e-13, 2.0]])
        assert a.allclose(b)
        assert not a.allclose([[1.1, 2.0]])
        assert not a.allclose([[1.0], [2.0]])
