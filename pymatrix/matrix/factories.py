"""
Matrix factories.

Pure constructors for common matrices. Dimension arguments must be
integers >= 1.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from pymatrix.core.exceptions import ShapeError, ValidationError
from pymatrix.core.validation import check_array, check_dimension
from pymatrix.matrix.matrix import Matrix


def create(data: ArrayLike | Matrix) -> Matrix:
    """
    Build a Matrix from a rectangular 2D array-like.

    The data is deep-copied; later changes to `data` do not affect the
    result.

    Raises:
        ShapeError: If data is empty or rows differ in length
        ValidationError: If entries are non-numeric
    """
    return Matrix(data)


def identity(n: int) -> Matrix:
    """n x n identity matrix."""
    n = check_dimension(n, 'n')
    return Matrix._from_array(np.eye(n))


def zeros(rows: int, cols: int) -> Matrix:
    rows = check_dimension(rows, 'rows')
    cols = check_dimension(cols, 'cols')
    return Matrix._from_array(np.zeros((rows, cols)))


def ones(rows: int, cols: int) -> Matrix:
    rows = check_dimension(rows, 'rows')
    cols = check_dimension(cols, 'cols')
    return Matrix._from_array(np.ones((rows, cols)))


def fill(rows: int, cols: int, value: float) -> Matrix:
    """rows x cols matrix with every element equal to `value`."""
    rows = check_dimension(rows, 'rows')
    cols = check_dimension(cols, 'cols')
    scalar = check_array(value, 'value')
    if scalar.ndim != 0:
        raise ValidationError(f"value: expected a scalar, got shape {scalar.shape}")
    return Matrix._from_array(np.full((rows, cols), float(scalar)))


def diagonal(values: ArrayLike) -> Matrix:
    """
    Square matrix with `values` on the diagonal and zeros elsewhere.

    Raises:
        ShapeError: If values is empty or not one-dimensional
    """
    array = check_array(values, 'values')
    if array.ndim != 1:
        raise ShapeError(
            f"values: expected a 1D sequence, got {array.ndim}D with shape {array.shape}"
        )
    if array.size == 0:
        raise ShapeError("values: diagonal requires at least one value")
    return Matrix._from_array(np.diag(array))
