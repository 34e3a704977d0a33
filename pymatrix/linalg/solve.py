"""
Linear system solver.

Solves A x = b by Gaussian elimination with partial pivoting, then
forward and back substitution. No explicit inverse is formed.
"""

from __future__ import annotations

from collections.abc import Sequence
import numbers

import numpy as np
from numpy.typing import ArrayLike

from pymatrix.core.exceptions import ShapeError, ShapeMismatchError, SingularMatrixError
from pymatrix.core.tolerances import SINGULAR_TOL
from pymatrix.core.validation import check_array, check_finite, check_square
from pymatrix.linalg.lu import lu_factor_array, lu_solve_array
from pymatrix.matrix.matrix import Matrix, as_matrix


def _is_flat_vector(b: object) -> bool:
    if isinstance(b, np.ndarray):
        return b.ndim == 1
    if isinstance(b, (str, bytes)) or not isinstance(b, Sequence) or len(b) == 0:
        return False
    return all(isinstance(x, numbers.Number) for x in b)


def _as_right_hand_side(b: ArrayLike | Matrix) -> Matrix:
    """Coerce b to a Matrix; flat sequences of scalars become n x 1 columns."""
    if isinstance(b, Matrix):
        return b
    if _is_flat_vector(b):
        vector = check_array(b, 'b')
        if vector.size == 0:
            raise ShapeError("b: right-hand side must be non-empty")
        return Matrix._from_array(vector.reshape(-1, 1))
    return as_matrix(b, 'b')


def solve(
    A: ArrayLike | Matrix,
    b: ArrayLike | Matrix,
    *,
    tol: float = SINGULAR_TOL,
) -> Matrix:
    """
    Solve A x = b.

    Args:
        A: Square coefficient matrix (n x n)
        b: Right-hand side. A flat sequence of n scalars, or an n x k
            matrix of k right-hand sides.
        tol: Pivot magnitude at or below which A is treated as singular

    Returns:
        Solution x as an n x k Matrix (n x 1 for a vector b)

    Raises:
        NotSquareError: If A is not square
        ShapeMismatchError: If b does not have A.rows rows
        SingularMatrixError: If some column has no pivot exceeding tol
        ValidationError: If A or b contain NaN/Inf
    """
    A = as_matrix(A, 'A')
    check_square(A.shape, 'A', 'solve')
    B = _as_right_hand_side(b)

    if B.rows != A.rows:
        raise ShapeMismatchError(
            f"solve: A has {A.rows} rows but b has {B.rows} rows",
            left_shape=A.shape,
            right_shape=B.shape,
        )

    a = A.to_numpy()
    rhs = B.to_numpy()
    check_finite(a, 'A')
    check_finite(rhs, 'b')

    L, U, perm, _, zero_pivots = lu_factor_array(a, partial=True, tol=tol)
    if zero_pivots:
        column = zero_pivots[0]
        raise SingularMatrixError(
            f"Matrix is singular: no pivot in column {column} exceeds {tol:g}",
            matrix_name='A',
            rank=A.rows - len(zero_pivots),
            expected_rank=A.rows,
            column=column,
        )

    return Matrix._from_array(lu_solve_array(L, U, perm, rhs))
