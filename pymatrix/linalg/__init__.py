"""
Linear algebra kernels for PyMatrix.

All functions follow these conventions:
    - Accept a Matrix or any rectangular array-like
    - Return Matrix objects or a structured result dataclass
    - Errors are raised immediately with clear messages; no placeholder
      results are ever returned

Submodules:
    lu: LU decomposition (shared elimination kernel)
    solve: Linear systems by Gaussian elimination
    qr: Householder QR decomposition and least squares
    eigen: Jacobi / shifted-QR eigen-decomposition
    svd: One-sided Jacobi SVD, rank, condition number, pseudo-inverse
    cholesky: Cholesky decomposition
"""

from pymatrix.linalg.lu import LUResult, lu
from pymatrix.linalg.solve import solve
from pymatrix.linalg.qr import QRResult, qr, qr_solve
from pymatrix.linalg.eigen import EigenResult, eigen, eigenvalues
from pymatrix.linalg.svd import SVDResult, svd, rank, cond, pinv
from pymatrix.linalg.cholesky import CholeskyResult, cholesky

__all__ = [
    # LU decomposition
    "LUResult",
    "lu",
    # Linear systems
    "solve",
    # QR decomposition
    "QRResult",
    "qr",
    "qr_solve",
    # Eigen-decomposition
    "EigenResult",
    "eigen",
    "eigenvalues",
    # SVD
    "SVDResult",
    "svd",
    "rank",
    "cond",
    "pinv",
    # Cholesky
    "CholeskyResult",
    "cholesky",
]
