"""
LU decomposition by Gaussian elimination (Doolittle form).

This is the single elimination kernel in PyMatrix. solve(),
Matrix.inverse(method='lu'), Matrix.determinant(method='lu') and the
inverse iteration inside eigen() all factor through lu_factor_array().

Two pivoting policies are offered:
    'as_needed': keep the natural row order and swap only when the
                 diagonal pivot is numerically zero. Reproduces the
                 textbook factorization A = L U whenever it exists.
    'partial':   always bring the largest-magnitude candidate to the
                 diagonal. Numerically stable; used by solve().

In both cases the factors satisfy P A = L U.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import ValidationError
from pymatrix.core.tolerances import SINGULAR_TOL
from pymatrix.core.validation import check_finite, check_square
from pymatrix.matrix.matrix import Matrix, as_matrix


Pivoting = Literal['as_needed', 'partial']


@dataclass(frozen=True)
class LUResult:
    """
    Result of LU decomposition.

    Attributes:
        L: Unit lower triangular factor (n x n)
        U: Upper triangular factor (n x n)
        P: Permutation matrix with P @ A == L @ U
        permutation: Row order of A, i.e. P @ A == A[permutation]
        sign: Determinant of P (+1 or -1)
        zero_pivots: Columns in which no pivot exceeded the tolerance.
            Elimination is skipped for those columns.
    """
    L: Matrix
    U: Matrix
    P: Matrix
    permutation: tuple[int, ...]
    sign: int
    zero_pivots: tuple[int, ...]

    @property
    def singular(self) -> bool:
        return len(self.zero_pivots) > 0

    @property
    def determinant(self) -> float:
        """det(A) = sign(P) * prod(diag(U))."""
        return self.sign * float(np.prod(np.diag(self.U.to_numpy())))


def lu_factor_array(
    a: NDArray[Any],
    partial: bool,
    tol: float,
) -> tuple[NDArray[Any], NDArray[Any], NDArray[np.intp], int, tuple[int, ...]]:
    """
    Factor a square real or complex array in place of a copy.

    Args:
        a: Square array (n x n)
        partial: If True, always pivot on the largest magnitude in the
            column. If False, pivot only when the diagonal entry is <= tol.
        tol: Pivot magnitude at or below which a column counts as singular

    Returns:
        (L, U, permutation, n_swaps, zero_pivots)
    """
    n = a.shape[0]
    U = np.array(a, copy=True)
    L = np.eye(n, dtype=U.dtype)
    perm = np.arange(n)
    n_swaps = 0
    zero_pivots = []

    for k in range(n):
        column = np.abs(U[k:, k])
        if partial or column[0] <= tol:
            p = k + int(np.argmax(column))
        else:
            p = k

        if p != k:
            U[[k, p], k:] = U[[p, k], k:]
            L[[k, p], :k] = L[[p, k], :k]
            perm[[k, p]] = perm[[p, k]]
            n_swaps += 1

        pivot = U[k, k]
        if abs(pivot) <= tol:
            # Everything left in this column is below tolerance
            zero_pivots.append(k)
            U[k + 1:, k] = 0.0
            continue

        L[k + 1:, k] = U[k + 1:, k] / pivot
        U[k + 1:, k:] -= np.outer(L[k + 1:, k], U[k, k:])
        U[k + 1:, k] = 0.0

    return L, U, perm, n_swaps, tuple(zero_pivots)


def lu_solve_array(
    L: NDArray[Any],
    U: NDArray[Any],
    perm: NDArray[np.intp],
    b: NDArray[Any],
) -> NDArray[Any]:
    """
    Solve A x = b given P A = L U.

    Forward substitution on L y = P b, then back substitution on U x = y.
    """
    from scipy.linalg import solve_triangular

    y = solve_triangular(L, b[perm], lower=True, unit_diagonal=True)
    return solve_triangular(U, y, lower=False)


def lu(
    A: ArrayLike | Matrix,
    *,
    pivoting: Pivoting = 'as_needed',
    tol: float = SINGULAR_TOL,
) -> LUResult:
    """
    LU decomposition P A = L U.

    Args:
        A: Square matrix to factor
        pivoting: 'as_needed' (default) or 'partial', see module docstring
        tol: Pivot magnitude at or below which a column is singular

    Returns:
        LUResult with L, U, P and diagnostics

    Raises:
        NotSquareError: If A is not square
        ValidationError: If A contains NaN/Inf or pivoting is unknown

    Example:
        >>> lu([[4, 3], [6, 3]]).L.elements
        [[1.0, 0.0], [1.5, 1.0]]
    """
    if pivoting not in ('as_needed', 'partial'):
        raise ValidationError(
            f"Unknown pivoting: {pivoting!r}. Must be 'as_needed' or 'partial'."
        )

    A = as_matrix(A, 'A')
    check_square(A.shape, 'A', 'LU decomposition')
    a = A.to_numpy()
    check_finite(a, 'A')

    L, U, perm, n_swaps, zero_pivots = lu_factor_array(
        a, partial=(pivoting == 'partial'), tol=tol
    )

    return LUResult(
        L=Matrix._from_array(L),
        U=Matrix._from_array(U),
        P=Matrix._from_array(np.eye(A.rows)[perm]),
        permutation=tuple(int(i) for i in perm),
        sign=-1 if n_swaps % 2 else 1,
        zero_pivots=zero_pivots,
    )
