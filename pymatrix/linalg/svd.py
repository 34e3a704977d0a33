"""
Singular value decomposition by one-sided Jacobi rotations.

Rotates pairs of columns of A until they are mutually orthogonal; the
column norms are then the singular values and the accumulated rotations
form V. Also provides the SVD-based quantities rank, condition number and
Moore-Penrose pseudo-inverse.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import ConvergenceError
from pymatrix.core.tolerances import JACOBI_MAX_SWEEPS, RANK_RTOL
from pymatrix.core.validation import check_finite
from pymatrix.matrix.matrix import Matrix, as_matrix


_EPS = np.finfo(np.float64).eps


@dataclass(frozen=True)
class SVDResult:
    """
    Result of singular value decomposition, A = U S V^T.

    Attributes:
        U: Left singular vectors (m x k), orthonormal columns
        S: Diagonal matrix of singular values (k x k)
        V: Right singular vectors (n x k), orthonormal columns
        singular_values: Diagonal of S, non-negative and descending

    k = min(m, n).
    """
    U: Matrix
    S: Matrix
    V: Matrix
    singular_values: tuple[float, ...]


def _one_sided_jacobi(
    a: NDArray[np.float64],
    max_sweeps: int,
    cutoff: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Orthogonalise the columns of a (m >= n).

    Columns whose norm falls to `cutoff` or below are numerically zero and
    are no longer rotated.

    Returns (W, V) with a @ V == W and the columns of W above the cutoff
    mutually orthogonal.
    """
    W = a.copy()
    m, n = W.shape
    V = np.eye(n)
    tol = m * _EPS
    floor = cutoff * cutoff

    for sweep in range(max_sweeps):
        rotated = False
        for p in range(n - 1):
            for q in range(p + 1, n):
                alpha = W[:, p] @ W[:, p]
                beta = W[:, q] @ W[:, q]
                gamma = W[:, p] @ W[:, q]
                if alpha <= floor or beta <= floor:
                    continue
                if abs(gamma) <= tol * math.sqrt(alpha * beta):
                    continue

                rotated = True
                zeta = (beta - alpha) / (2.0 * gamma)
                t = math.copysign(1.0, zeta) / (abs(zeta) + math.hypot(zeta, 1.0))
                c = 1.0 / math.sqrt(1.0 + t * t)
                s = c * t

                col_p = W[:, p].copy()
                col_q = W[:, q].copy()
                W[:, p] = c * col_p - s * col_q
                W[:, q] = s * col_p + c * col_q

                vec_p = V[:, p].copy()
                vec_q = V[:, q].copy()
                V[:, p] = c * vec_p - s * vec_q
                V[:, q] = s * vec_p + c * vec_q

        if not rotated:
            return W, V

    raise ConvergenceError(
        f"One-sided Jacobi SVD did not converge after {max_sweeps} sweeps",
        iterations=max_sweeps,
        reason='max_iterations',
        threshold=tol,
    )


def _complete_orthonormal(U: NDArray[np.float64], keep: NDArray[np.bool_]) -> NDArray[np.float64]:
    """Replace columns not in `keep` with unit vectors orthogonal to the rest."""
    m = U.shape[0]
    out = U.copy()
    basis = [out[:, j] for j in np.flatnonzero(keep)]

    for j in np.flatnonzero(~keep):
        for i in range(m):
            candidate = np.zeros(m)
            candidate[i] = 1.0
            for _ in range(2):
                for b in basis:
                    candidate -= (b @ candidate) * b
            norm = np.linalg.norm(candidate)
            if norm > 0.5:
                out[:, j] = candidate / norm
                basis.append(out[:, j])
                break

    return out


def _svd_tall(
    a: NDArray[np.float64],
    max_sweeps: int,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """SVD of an m x n array with m >= n. Returns (U, sigma, V)."""
    m, n = a.shape
    cutoff = max(m, n) * _EPS * float(np.linalg.norm(a))
    W, V = _one_sided_jacobi(a, max_sweeps, cutoff)

    sigma = np.linalg.norm(W, axis=0)
    order = np.argsort(-sigma, kind='stable')
    sigma = sigma[order]
    W = W[:, order]
    V = V[:, order]

    keep = sigma > cutoff
    U = np.zeros((m, n))
    U[:, keep] = W[:, keep] / sigma[keep]
    if not np.all(keep):
        U = _complete_orthonormal(U, keep)
        sigma[~keep] = 0.0

    return U, sigma, V


def svd(
    A: ArrayLike | Matrix,
    *,
    max_sweeps: int = JACOBI_MAX_SWEEPS,
) -> SVDResult:
    """
    Reduced singular value decomposition A = U S V^T.

    Args:
        A: Matrix to decompose (m x n)
        max_sweeps: Jacobi sweep budget

    Returns:
        SVDResult with singular values in descending order

    Raises:
        ValidationError: If A contains NaN/Inf
        ConvergenceError: If the sweep budget is exhausted
    """
    A = as_matrix(A, 'A')
    a = A.to_numpy()
    check_finite(a, 'A')

    if A.rows >= A.cols:
        U, sigma, V = _svd_tall(a, max_sweeps)
    else:
        # A^T = U' S V'^T  =>  A = V' S U'^T
        V, sigma, U = _svd_tall(a.T, max_sweeps)

    return SVDResult(
        U=Matrix._from_array(U),
        S=Matrix._from_array(np.diag(sigma)),
        V=Matrix._from_array(V),
        singular_values=tuple(float(s) for s in sigma),
    )


def rank(A: ArrayLike | Matrix, *, rtol: float = RANK_RTOL) -> int:
    """
    Numerical rank: singular values with sigma_i / sigma_max > rtol.

    The zero matrix has rank 0.
    """
    sigma = np.array(svd(A).singular_values)
    if sigma[0] == 0.0:
        return 0
    return int(np.sum(sigma / sigma[0] > rtol))


def cond(A: ArrayLike | Matrix) -> float:
    """
    2-norm condition number sigma_max / sigma_min.

    Returns math.inf when sigma_min is numerically zero, i.e. at or below
    max(m, n) * eps * sigma_max.
    """
    A = as_matrix(A, 'A')
    sigma = svd(A).singular_values
    s_max, s_min = sigma[0], sigma[-1]
    if s_max == 0.0 or s_min <= max(A.shape) * _EPS * s_max:
        return math.inf
    return s_max / s_min


def pinv(A: ArrayLike | Matrix, *, rtol: float = RANK_RTOL) -> Matrix:
    """
    Moore-Penrose pseudo-inverse V S^+ U^T.

    Singular values with sigma_i / sigma_max <= rtol are treated as zero.

    Returns:
        n x m Matrix
    """
    result = svd(A)
    sigma = np.array(result.singular_values)
    inv_sigma = np.zeros_like(sigma)
    if sigma[0] > 0.0:
        nonzero = sigma / sigma[0] > rtol
        inv_sigma[nonzero] = 1.0 / sigma[nonzero]

    V = result.V.to_numpy()
    U = result.U.to_numpy()
    return Matrix._from_array((V * inv_sigma) @ U.T)
