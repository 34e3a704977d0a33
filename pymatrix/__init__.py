"""
PyMatrix: dense linear algebra kernel for Python.

An immutable real Matrix type with textbook determinant/inverse semantics
and a fully implemented decomposition suite, shared by numerical code that
needs to invert, solve, or factor small-to-medium dense matrices.

Submodules:
    matrix: Matrix value type and factories
    linalg: LU, solve, QR, eigen, SVD, rank, cond, pinv, Cholesky
    core: Exceptions, validation, tolerances
"""

__version__ = "0.1.0"

from pymatrix.matrix import (
    Matrix,
    create,
    identity,
    zeros,
    ones,
    fill,
    diagonal,
)
from pymatrix.linalg import (
    LUResult,
    QRResult,
    EigenResult,
    SVDResult,
    CholeskyResult,
    lu,
    solve,
    qr,
    qr_solve,
    eigen,
    eigenvalues,
    svd,
    rank,
    cond,
    pinv,
    cholesky,
)
from pymatrix.core.exceptions import (
    PyMatrixError,
    ValidationError,
    DimensionError,
    ShapeError,
    ShapeMismatchError,
    NotSquareError,
    MatrixIndexError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    NonDiagonalizableError,
    ConvergenceError,
)

__all__ = [
    "__version__",
    # Matrix
    "Matrix",
    "create",
    "identity",
    "zeros",
    "ones",
    "fill",
    "diagonal",
    # Decompositions and solvers
    "LUResult",
    "QRResult",
    "EigenResult",
    "SVDResult",
    "CholeskyResult",
    "lu",
    "solve",
    "qr",
    "qr_solve",
    "eigen",
    "eigenvalues",
    "svd",
    "rank",
    "cond",
    "pinv",
    "cholesky",
    # Exceptions
    "PyMatrixError",
    "ValidationError",
    "DimensionError",
    "ShapeError",
    "ShapeMismatchError",
    "NotSquareError",
    "MatrixIndexError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "NonDiagonalizableError",
    "ConvergenceError",
]
