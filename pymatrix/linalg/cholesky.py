"""
Cholesky decomposition A = L L^T for symmetric positive definite A.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike

from pymatrix.core.exceptions import NotPositiveDefiniteError
from pymatrix.core.tolerances import SYMMETRY_RTOL
from pymatrix.core.validation import check_finite, check_square, check_symmetric
from pymatrix.matrix.matrix import Matrix, as_matrix


@dataclass(frozen=True)
class CholeskyResult:
    """
    Result of Cholesky decomposition.

    Attributes:
        L: Lower triangular factor with positive diagonal, A == L @ L.T
    """
    L: Matrix

    @property
    def log_determinant(self) -> float:
        """log det(A) = 2 * sum(log(diag(L)))."""
        return 2.0 * float(np.sum(np.log(np.diag(self.L.to_numpy()))))


def cholesky(A: ArrayLike | Matrix) -> CholeskyResult:
    """
    Cholesky factorization of a symmetric positive definite matrix.

    Uses LAPACK via numpy.linalg.cholesky. On failure the smallest
    eigenvalue is attached to the error for diagnosis.

    Raises:
        NotSquareError: If A is not square
        ValidationError: If A is not symmetric or contains NaN/Inf
        NotPositiveDefiniteError: If A is not positive definite
    """
    A = as_matrix(A, 'A')
    check_square(A.shape, 'A', 'Cholesky decomposition')
    a = A.to_numpy()
    check_finite(a, 'A')
    check_symmetric(a, SYMMETRY_RTOL, 'A')

    try:
        L = np.linalg.cholesky(a)
    except np.linalg.LinAlgError as e:
        min_eig = float(np.linalg.eigvalsh(a)[0])
        raise NotPositiveDefiniteError(
            f"Matrix is not positive definite (min eigenvalue: {min_eig:.3e})",
            matrix_name='A',
            min_eigenvalue=min_eig,
        ) from e

    return CholeskyResult(L=Matrix._from_array(L))
