"""
Input validation utilities for PyMatrix.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from collections.abc import Sequence
import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pymatrix.core.exceptions import (
    ValidationError,
    ShapeError,
    ShapeMismatchError,
    NotSquareError,
    MatrixIndexError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data)
    and complex input, since matrices hold real doubles.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to a real numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) and result.dtype != np.bool_:
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: complex dtype {result.dtype}, expected real numeric data"
        )

    if result.dtype != np.float64:
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        ShapeError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise ShapeError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 2-dimensional.

    Raises:
        ShapeError: If array is not 2D
    """
    check_ndim(array, 2, name)


def check_rectangular(data: Any, name: str) -> None:
    """
    Verify nested sequence data forms a non-empty rectangle.

    Every row must be a sequence and have the same non-zero length as the
    first row. NumPy arrays are checked by shape.

    Args:
        data: Sequence of row sequences, or a numpy array
        name: Parameter name for error messages

    Raises:
        ShapeError: If data is empty, not nested, or ragged
    """
    if isinstance(data, np.ndarray):
        check_2d(data, name)
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ShapeError(f"{name}: matrix must be non-empty, got shape {data.shape}")
        return

    if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
        raise ShapeError(
            f"{name}: expected a sequence of rows, got {type(data).__name__}"
        )
    if len(data) == 0:
        raise ShapeError(f"{name}: matrix must have at least one row")

    width = None
    for i, row in enumerate(data):
        if isinstance(row, (str, bytes)) or not isinstance(row, (Sequence, np.ndarray)):
            raise ShapeError(
                f"{name}: row {i} is {type(row).__name__}, expected a sequence of numbers"
            )
        if width is None:
            width = len(row)
            if width == 0:
                raise ShapeError(f"{name}: matrix must have at least one column")
        elif len(row) != width:
            raise ShapeError(
                f"{name}: row {i} has {len(row)} elements, expected {width} (from row 0)"
            )


def check_dimension(value: Any, name: str) -> int:
    """
    Verify a matrix dimension argument is an integer >= 1.

    Returns:
        The dimension as a plain int

    Raises:
        ValidationError: If value is not an integer
        ShapeError: If value is less than 1
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer dimension, got {type(value).__name__}"
        )
    if value < 1:
        raise ShapeError(f"{name}: dimension must be >= 1, got {value}")
    return int(value)


def check_square(shape: tuple[int, int], name: str, operation: str) -> None:
    """
    Verify a shape is square.

    Raises:
        NotSquareError: If rows != cols
    """
    if shape[0] != shape[1]:
        raise NotSquareError(
            f"{name}: {operation} requires a square matrix, got shape {shape}",
            shape=shape,
        )


def check_same_shape(
    left: tuple[int, int],
    right: tuple[int, int],
    operation: str,
) -> None:
    """
    Verify two shapes are identical.

    Raises:
        ShapeMismatchError: If shapes differ
    """
    if left != right:
        raise ShapeMismatchError(
            f"{operation}: operand shapes must match, got {left} and {right}",
            left_shape=left,
            right_shape=right,
        )


def check_inner_dimensions(
    left: tuple[int, int],
    right: tuple[int, int],
    operation: str,
) -> None:
    """
    Verify left.cols == right.rows for a matrix product.

    Raises:
        ShapeMismatchError: If inner dimensions differ
    """
    if left[1] != right[0]:
        raise ShapeMismatchError(
            f"{operation}: left has {left[1]} columns but right has {right[0]} rows "
            f"(shapes {left} and {right})",
            left_shape=left,
            right_shape=right,
        )


def is_symmetric(array: NDArray[np.floating[Any]], rtol: float) -> bool:
    """Whether a square array equals its transpose up to rtol * max|a_ij|."""
    scale = float(np.max(np.abs(array))) if array.size else 0.0
    if scale == 0.0:
        return True
    return float(np.max(np.abs(array - array.T))) <= rtol * scale


def check_symmetric(array: NDArray[np.floating[Any]], rtol: float, name: str) -> None:
    """
    Verify a square array is symmetric within tolerance.

    Raises:
        ValidationError: If the array is not symmetric
    """
    if not is_symmetric(array, rtol):
        asymmetry = float(np.max(np.abs(array - array.T)))
        raise ValidationError(
            f"{name}: matrix is not symmetric (max |a_ij - a_ji| = {asymmetry:.3e})"
        )


def check_index(row: Any, col: Any, shape: tuple[int, int]) -> tuple[int, int]:
    """
    Verify (row, col) addresses an element of a matrix with the given shape.

    Negative indices are out of range.

    Returns:
        (row, col) as plain ints

    Raises:
        MatrixIndexError: If either index is not an integer or out of range
    """
    for label, value, bound in (('row', row, shape[0]), ('col', col, shape[1])):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise MatrixIndexError(
                f"{label} index must be an integer, got {type(value).__name__}",
                index=(row, col),
                shape=shape,
            )
        if not 0 <= value < bound:
            raise MatrixIndexError(
                f"{label} index {value} out of range [0, {bound}) for shape {shape}",
                index=(row, col),
                shape=shape,
            )
    return int(row), int(col)
