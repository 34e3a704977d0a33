"""
Eigen-decomposition.

Symmetric input:
    Cyclic Jacobi rotations. Real eigenvalues, orthonormal eigenvectors,
    unconditionally convergent.

General input:
    1. Householder reduction to upper Hessenberg form.
    2. Shifted QR iteration on the Hessenberg matrix in complex arithmetic
       (Wilkinson shifts, deflation on negligible subdiagonals, closed-form
       2x2 blocks, exceptional shifts to break cycles).
    3. Eigenvectors by inverse iteration on (A - lambda I), factored with
       the shared LU kernel. A vector that comes out collinear with one
       already found for a nearby eigenvalue is recomputed orthogonal to
       those, so a repeated eigenvalue with a full eigenspace yields
       independent vectors while close but distinct eigenvalues keep
       their own. A defective eigenvalue leaves a vector with a large
       residual and raises NonDiagonalizableError.

Real eigenvalues are returned as float, complex ones as complex. Values are
sorted in descending order of (real part, imaginary part).
"""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import ConvergenceError, NonDiagonalizableError
from pymatrix.core.tolerances import (
    EIGEN_CLUSTER_RTOL,
    EIGEN_IMAG_RTOL,
    EIGEN_INDEPENDENCE_TOL,
    EIGEN_RESIDUAL_TOL,
    INVERSE_ITERATION_STEPS,
    JACOBI_MAX_SWEEPS,
    QR_EXCEPTIONAL_SHIFTS,
    QR_MAX_ITERATIONS,
    SYMMETRY_RTOL,
)
from pymatrix.core.validation import check_finite, check_square, is_symmetric
from pymatrix.linalg.lu import lu_factor_array, lu_solve_array
from pymatrix.linalg.qr import householder_vector
from pymatrix.matrix.matrix import Matrix, as_matrix


_EPS = np.finfo(np.float64).eps


@dataclass(frozen=True)
class EigenResult:
    """
    Result of eigen-decomposition.

    Attributes:
        values: Eigenvalues, float when real and complex otherwise
        vectors: Eigenvectors as columns, in the order of `values`. A Matrix
            when every eigenvalue is real, otherwise a complex NumPy array.
        symmetric: Whether the symmetric (Jacobi) path was taken
        iterations: Jacobi sweeps or QR iterations performed
    """
    values: tuple[float | complex, ...]
    vectors: Matrix | NDArray[np.complexfloating[Any, Any]]
    symmetric: bool
    iterations: int

    @property
    def is_real(self) -> bool:
        return all(isinstance(v, float) for v in self.values)


# ---------------------------------------------------------------------
# Symmetric path
# ---------------------------------------------------------------------

def _jacobi_eigen(
    a: NDArray[np.float64],
    max_sweeps: int,
) -> tuple[NDArray[np.float64], NDArray[np.float64], int]:
    """Cyclic Jacobi. Returns (eigenvalues, eigenvectors, sweeps)."""
    a = a.copy()
    n = a.shape[0]
    V = np.eye(n)
    threshold = n * _EPS * np.linalg.norm(a)

    for sweep in range(max_sweeps):
        if _off_diagonal_norm(a) <= threshold:
            return np.diag(a).copy(), V, sweep

        for p in range(n - 1):
            for q in range(p + 1, n):
                apq = a[p, q]
                if apq == 0.0:
                    continue
                theta = (a[q, q] - a[p, p]) / (2.0 * apq)
                t = math.copysign(1.0, theta) / (abs(theta) + math.hypot(theta, 1.0))
                c = 1.0 / math.sqrt(t * t + 1.0)
                s = t * c

                col_p = a[:, p].copy()
                col_q = a[:, q].copy()
                a[:, p] = c * col_p - s * col_q
                a[:, q] = s * col_p + c * col_q
                row_p = a[p, :].copy()
                row_q = a[q, :].copy()
                a[p, :] = c * row_p - s * row_q
                a[q, :] = s * row_p + c * row_q
                a[p, q] = a[q, p] = 0.0

                vec_p = V[:, p].copy()
                vec_q = V[:, q].copy()
                V[:, p] = c * vec_p - s * vec_q
                V[:, q] = s * vec_p + c * vec_q

    off = _off_diagonal_norm(a)
    if off <= threshold:
        return np.diag(a).copy(), V, max_sweeps

    raise ConvergenceError(
        f"Jacobi eigenvalue iteration did not converge after {max_sweeps} sweeps",
        iterations=max_sweeps,
        final_change=off,
        reason='max_iterations',
        threshold=float(threshold),
    )


def _off_diagonal_norm(a: NDArray[np.float64]) -> float:
    return float(np.linalg.norm(a - np.diag(np.diag(a))))


def _fix_phase(vectors: NDArray[Any]) -> NDArray[Any]:
    """Scale each column so its largest-magnitude entry is real and positive."""
    out = vectors.copy()
    for j in range(out.shape[1]):
        k = int(np.argmax(np.abs(out[:, j])))
        pivot = out[k, j]
        if pivot != 0:
            out[:, j] *= np.conj(pivot) / abs(pivot)
    return out


# ---------------------------------------------------------------------
# General path
# ---------------------------------------------------------------------

def _hessenberg(a: NDArray[np.float64]) -> NDArray[np.float64]:
    """Orthogonally similar upper Hessenberg matrix."""
    H = a.copy()
    n = H.shape[0]
    for k in range(n - 2):
        v = householder_vector(H[k + 1:, k])
        if v is None:
            continue
        H[k + 1:, :] -= 2.0 * np.outer(v, v @ H[k + 1:, :])
        H[:, k + 1:] -= 2.0 * np.outer(H[:, k + 1:] @ v, v)
        H[k + 2:, k] = 0.0
    return H


def _eig2x2(block: NDArray[np.complex128]) -> tuple[complex, complex]:
    """Both eigenvalues of a 2x2 block, larger magnitude first."""
    a, b = complex(block[0, 0]), complex(block[0, 1])
    c, d = complex(block[1, 0]), complex(block[1, 1])
    half_trace = 0.5 * (a + d)
    det = a * d - b * c
    disc = cmath.sqrt(half_trace * half_trace - det)
    if abs(half_trace - disc) > abs(half_trace + disc):
        disc = -disc
    first = half_trace + disc
    second = det / first if first != 0 else half_trace - disc
    return first, second


def _wilkinson_shift(block: NDArray[np.complex128]) -> complex:
    """Eigenvalue of the trailing 2x2 block closest to its last diagonal entry."""
    first, second = _eig2x2(block)
    d = complex(block[1, 1])
    return first if abs(first - d) <= abs(second - d) else second


def _qr_step(H: NDArray[np.complex128], lo: int, hi: int, shift: complex) -> None:
    """One shifted QR step on the active block H[lo:hi+1, lo:hi+1], via Givens rotations."""
    size = hi - lo + 1
    identity = np.eye(size, dtype=np.complex128)
    B = H[lo:hi + 1, lo:hi + 1] - shift * identity

    rotations = []
    for k in range(size - 1):
        x, y = B[k, k], B[k + 1, k]
        r = math.hypot(abs(x), abs(y))
        if r == 0.0:
            rotations.append(None)
            continue
        c, s = x / r, y / r
        G = np.array([[np.conj(c), np.conj(s)], [-s, c]])
        B[k:k + 2, k:] = G @ B[k:k + 2, k:]
        rotations.append(G)

    for k, G in enumerate(rotations):
        if G is None:
            continue
        B[:k + 2, k:k + 2] = B[:k + 2, k:k + 2] @ G.conj().T

    H[lo:hi + 1, lo:hi + 1] = B + shift * identity


def _hessenberg_eigenvalues(
    H: NDArray[np.float64],
    max_iterations: int,
) -> tuple[list[complex], int]:
    """Eigenvalues of an upper Hessenberg matrix by shifted QR iteration."""
    H = H.astype(np.complex128)
    n = H.shape[0]
    h_norm = float(np.linalg.norm(H)) or 1.0
    values: list[complex] = [0j] * n

    hi = n - 1
    total = 0
    since_deflation = 0

    while hi >= 0:
        if hi == 0:
            values[0] = complex(H[0, 0])
            break

        # Start of the unreduced block that ends at hi
        lo = hi
        while lo > 0:
            scale = abs(H[lo - 1, lo - 1]) + abs(H[lo, lo])
            if scale == 0.0:
                scale = h_norm
            if abs(H[lo, lo - 1]) <= _EPS * scale:
                H[lo, lo - 1] = 0.0
                break
            lo -= 1

        if lo == hi:
            values[hi] = complex(H[hi, hi])
            hi -= 1
            since_deflation = 0
            continue

        if lo == hi - 1:
            values[hi - 1], values[hi] = _eig2x2(H[hi - 1:hi + 1, hi - 1:hi + 1])
            hi -= 2
            since_deflation = 0
            continue

        if since_deflation >= max_iterations:
            raise ConvergenceError(
                f"Shifted QR iteration did not converge after {since_deflation} "
                f"iterations on eigenvalue {hi}",
                iterations=total,
                final_change=float(abs(H[hi, hi - 1])),
                reason='max_iterations',
                threshold=float(_EPS * h_norm),
            )

        if since_deflation in QR_EXCEPTIONAL_SHIFTS:
            shift = H[hi, hi] + 0.75 * (abs(H[hi, hi - 1]) + abs(H[hi - 1, hi - 2]))
        else:
            shift = _wilkinson_shift(H[hi - 1:hi + 1, hi - 1:hi + 1])

        _qr_step(H, lo, hi, shift)
        total += 1
        since_deflation += 1

    return values, total


def _clean_values(raw: list[complex], scale: float) -> list[float | complex]:
    """Drop negligible imaginary parts and sort descending."""
    threshold = EIGEN_IMAG_RTOL * scale
    values: list[float | complex] = []
    for value in raw:
        if abs(value.imag) <= threshold:
            values.append(float(value.real))
        else:
            values.append(complex(value))
    return sorted(values, key=lambda v: (v.real, v.imag), reverse=True)


def _orthogonalize(x: NDArray[Any], basis: NDArray[Any]) -> NDArray[Any]:
    if basis.shape[1] == 0:
        return x
    for _ in range(2):
        x = x - basis @ (basis.conj().T @ x)
    return x


def _iterate(
    factors: tuple[NDArray[Any], NDArray[Any], NDArray[np.intp]],
    start: NDArray[Any],
    basis: NDArray[Any],
    steps: int,
) -> NDArray[Any]:
    """Inverse iteration from `start`, kept orthogonal to the columns of `basis`."""
    L, U, perm = factors
    x = _orthogonalize(start, basis)
    x = x / np.linalg.norm(x)
    for _ in range(steps):
        x = _orthogonalize(lu_solve_array(L, U, perm, x), basis)
        norm = np.linalg.norm(x)
        if norm == 0.0 or not np.isfinite(norm):
            break
        x = x / norm
    return x


def _inverse_iteration(
    a: NDArray[np.float64],
    values: list[float | complex],
    scale: float,
    steps: int,
    residual_tol: float,
) -> NDArray[Any]:
    """
    Eigenvectors for known eigenvalues, one column per value.

    Each vector is first computed without constraints. Only when it fails
    the residual check or lies in the span of vectors already found for a
    cluster of nearby eigenvalues is it recomputed orthogonal to that span.
    Close but distinct eigenvalues keep their nearly parallel vectors;
    a repeated eigenvalue with a full eigenspace gets independent ones.
    """
    n = a.shape[0]
    is_complex = any(isinstance(v, complex) for v in values)
    dtype = np.complex128 if is_complex else np.float64
    V = np.zeros((n, n), dtype=dtype)
    rng = np.random.default_rng(0)
    pivot_floor = _EPS * scale
    cluster_tol = EIGEN_CLUSTER_RTOL * scale

    for idx, lam in enumerate(values):
        cluster = [j for j in range(idx) if abs(values[j] - lam) <= cluster_tol]
        if cluster:
            basis = np.linalg.qr(V[:, cluster])[0]
        else:
            basis = V[:, :0]

        shifted = a.astype(dtype) - lam * np.eye(n, dtype=dtype)
        L, U, perm, _, _ = lu_factor_array(shifted, partial=True, tol=0.0)
        diag = np.abs(np.diagonal(U))
        for k in np.flatnonzero(diag < pivot_floor):
            U[k, k] = pivot_floor

        start = rng.standard_normal(n).astype(dtype)
        if is_complex:
            start = start + 1j * rng.standard_normal(n)

        x = _iterate((L, U, perm), start, V[:, :0], steps)
        residual = float(np.linalg.norm(a @ x - lam * x)) / scale
        if cluster:
            independent = np.linalg.norm(_orthogonalize(x, basis)) > EIGEN_INDEPENDENCE_TOL
            if not (np.isfinite(residual) and residual <= residual_tol and independent):
                x = _iterate((L, U, perm), start, basis, steps)
                residual = float(np.linalg.norm(a @ x - lam * x)) / scale

        if not np.isfinite(residual) or residual > residual_tol:
            raise NonDiagonalizableError(
                f"Matrix is not diagonalizable: no independent eigenvector for "
                f"eigenvalue {lam!r} (relative residual {residual:.3e} > {residual_tol:g})",
                eigenvalue=lam,
                residual=residual,
            )
        V[:, idx] = x

    return _fix_phase(V)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def _prepare(A: ArrayLike | Matrix, symmetric: bool | None) -> tuple[NDArray[np.float64], bool]:
    A = as_matrix(A, 'A')
    check_square(A.shape, 'A', 'eigen-decomposition')
    a = A.to_numpy()
    check_finite(a, 'A')
    if symmetric is None:
        symmetric = is_symmetric(a, SYMMETRY_RTOL)
    if symmetric:
        a = 0.5 * (a + a.T)
    return a, symmetric


def _symmetric_eigen(
    a: NDArray[np.float64],
    max_sweeps: int,
) -> tuple[list[float], NDArray[np.float64], int]:
    values, V, sweeps = _jacobi_eigen(a, max_sweeps)
    order = np.argsort(-values, kind='stable')
    return [float(v) for v in values[order]], _fix_phase(V[:, order]), sweeps


def _general_eigenvalues(
    a: NDArray[np.float64],
    max_iterations: int,
) -> tuple[list[float | complex], int]:
    raw, iterations = _hessenberg_eigenvalues(_hessenberg(a), max_iterations)
    return _clean_values(raw, float(np.linalg.norm(a))), iterations


def eigen(
    A: ArrayLike | Matrix,
    *,
    symmetric: bool | None = None,
    max_sweeps: int = JACOBI_MAX_SWEEPS,
    max_iterations: int = QR_MAX_ITERATIONS,
    residual_tol: float = EIGEN_RESIDUAL_TOL,
) -> EigenResult:
    """
    Eigenvalues and eigenvectors of a square matrix.

    Args:
        A: Square matrix (n x n)
        symmetric: Force (True) or forbid (False) the symmetric Jacobi path.
            None detects symmetry within SYMMETRY_RTOL. Forcing True uses
            the symmetric part (A + A^T) / 2.
        max_sweeps: Jacobi sweep budget
        max_iterations: QR iteration budget per deflated eigenvalue
        residual_tol: Largest acceptable ||A v - lambda v|| / ||A||

    Returns:
        EigenResult with values sorted descending

    Raises:
        NotSquareError: If A is not square
        NonDiagonalizableError: If A is defective
        ConvergenceError: If the iteration budget is exhausted

    Example:
        >>> [round(v, 12) for v in eigen([[2, 1], [1, 2]]).values]
        [3.0, 1.0]
    """
    a, symmetric = _prepare(A, symmetric)

    if symmetric:
        values, V, sweeps = _symmetric_eigen(a, max_sweeps)
        return EigenResult(
            values=tuple(values),
            vectors=Matrix._from_array(V),
            symmetric=True,
            iterations=sweeps,
        )

    values, iterations = _general_eigenvalues(a, max_iterations)
    scale = float(np.linalg.norm(a)) or 1.0
    V = _inverse_iteration(a, values, scale, INVERSE_ITERATION_STEPS, residual_tol)

    if np.iscomplexobj(V):
        vectors: Matrix | NDArray[Any] = V
        vectors.setflags(write=False)
    else:
        vectors = Matrix._from_array(V)

    return EigenResult(
        values=tuple(values),
        vectors=vectors,
        symmetric=False,
        iterations=iterations,
    )


def eigenvalues(
    A: ArrayLike | Matrix,
    *,
    symmetric: bool | None = None,
    max_sweeps: int = JACOBI_MAX_SWEEPS,
    max_iterations: int = QR_MAX_ITERATIONS,
) -> tuple[float | complex, ...]:
    """
    Eigenvalues only, sorted descending.

    Unlike eigen(), this succeeds for defective matrices since no
    eigenvector basis is required.
    """
    a, symmetric = _prepare(A, symmetric)
    if symmetric:
        values, _, _ = _symmetric_eigen(a, max_sweeps)
        return tuple(values)
    values, _ = _general_eigenvalues(a, max_iterations)
    return tuple(values)
