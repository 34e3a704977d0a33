"""
QR decomposition by Householder reflections.

Computes A = QR for any m x n matrix. Used directly for least squares
(qr_solve) and, through householder_vector(), by the Hessenberg reduction
that precedes the shifted QR eigenvalue iteration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import ShapeMismatchError, SingularMatrixError, ValidationError
from pymatrix.core.validation import check_finite
from pymatrix.matrix.matrix import Matrix, as_matrix


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthogonal matrix (m x k where k = min(m, n) for reduced mode)
        R: Upper triangular matrix (k x n)
        rank: Numerical rank determined from R diagonal
    """
    Q: Matrix
    R: Matrix
    rank: int


def householder_vector(x: NDArray[Any]) -> NDArray[Any] | None:
    """
    Unit vector v such that (I - 2 v v^H) x is a multiple of e_1.

    The reflection sends x to -phase(x[0]) * ||x|| * e_1, which avoids
    cancellation in v[0]. Returns None when x is zero.
    """
    norm_x = np.linalg.norm(x)
    if norm_x == 0.0:
        return None

    v = np.array(x, copy=True)
    first = v[0]
    phase = first / abs(first) if first != 0 else 1.0
    v[0] = first + phase * norm_x
    return v / np.linalg.norm(v)


def _numerical_rank(R: NDArray[np.float64], shape: tuple[int, int]) -> int:
    diag_R = np.abs(np.diag(R))
    if len(diag_R) == 0 or diag_R.max() == 0:
        return 0
    # Tolerance based on matrix size and machine epsilon
    tol = max(shape) * np.finfo(np.float64).eps * diag_R.max()
    return int(np.sum(diag_R > tol))


def qr(
    A: ArrayLike | Matrix,
    *,
    mode: Literal['reduced', 'complete'] = 'reduced',
) -> QRResult:
    """
    Householder QR decomposition.

    Computes A = QR where Q is orthogonal and R is upper triangular.

    Args:
        A: Matrix to decompose (m x n)
        mode: 'reduced' for economy QR (Q is m x k, R is k x n where k = min(m,n))
              'complete' for full QR (Q is m x m, R is m x n)

    Returns:
        QRResult with Q, R, and numerical rank

    Raises:
        ValidationError: If A contains NaN/Inf or mode is unknown
    """
    if mode not in ('reduced', 'complete'):
        raise ValidationError(f"Unknown mode: {mode!r}. Must be 'reduced' or 'complete'.")

    A = as_matrix(A, 'A')
    R = A.to_numpy()
    check_finite(R, 'A')
    m, n = R.shape
    Q = np.eye(m)

    for k in range(min(m - 1, n)):
        v = householder_vector(R[k:, k])
        if v is None:
            continue
        R[k:, k:] -= 2.0 * np.outer(v, v @ R[k:, k:])
        Q[:, k:] -= 2.0 * np.outer(Q[:, k:] @ v, v)
        R[k + 1:, k] = 0.0

    if mode == 'reduced':
        k = min(m, n)
        Q = Q[:, :k]
        R = R[:k, :]

    return QRResult(
        Q=Matrix._from_array(Q),
        R=Matrix._from_array(R),
        rank=_numerical_rank(R, (m, n)),
    )


def qr_solve(
    A: ArrayLike | Matrix,
    b: ArrayLike | Matrix,
    *,
    check_rank: bool = True,
) -> Matrix:
    """
    Solve least squares via QR decomposition.

    Solves: min_x ||b - Ax||² via QR decomposition of A.

    The solution is computed as:
        A = QR
        x = R⁻¹ Q'b

    Args:
        A: Coefficient matrix (m x n), must have m >= n
        b: Right-hand side, flat vector of length m or m x k matrix
        check_rank: If True, raise SingularMatrixError on rank-deficient A

    Returns:
        Solution x (n x k Matrix)

    Raises:
        ShapeMismatchError: If b does not have m rows, or m < n
        SingularMatrixError: If A is rank-deficient and check_rank=True
    """
    from scipy.linalg import solve_triangular
    from pymatrix.linalg.solve import _as_right_hand_side

    A = as_matrix(A, 'A')
    B = _as_right_hand_side(b)
    m, n = A.shape

    if m < n:
        raise ShapeMismatchError(
            f"qr_solve: A must have at least as many rows as columns, got shape {A.shape}",
            left_shape=A.shape,
        )
    if B.rows != m:
        raise ShapeMismatchError(
            f"qr_solve: A has {m} rows but b has {B.rows} rows",
            left_shape=A.shape,
            right_shape=B.shape,
        )

    qr_result = qr(A, mode='reduced')

    if check_rank and qr_result.rank < n:
        raise SingularMatrixError(
            f"Matrix is rank-deficient: rank={qr_result.rank}, expected={n}.",
            matrix_name='A',
            rank=qr_result.rank,
            expected_rank=n
        )

    rhs = B.to_numpy()
    check_finite(rhs, 'b')

    # Compute Q'b first, then solve the triangular system R x = Q'b
    Qtb = qr_result.Q.to_numpy().T @ rhs
    try:
        x = solve_triangular(qr_result.R.to_numpy()[:n, :n], Qtb[:n], lower=False)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            f"Matrix is rank-deficient: R has a zero diagonal entry "
            f"(rank={qr_result.rank}, expected={n}).",
            matrix_name='A',
            rank=qr_result.rank,
            expected_rank=n
        ) from e

    return Matrix._from_array(x)
