"""
Exception hierarchy for PyMatrix.

All exceptions inherit from PyMatrixError to allow catching any
library-specific error. Shape and index violations are programmer errors
and derive from ValidationError; numerical failures (singularity,
indefiniteness, defective spectra) derive from NumericalError so callers
can regularize and retry.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyMatrixError(Exception):
    """Base exception for all PyMatrix errors."""
    pass


class ValidationError(PyMatrixError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Matrix dimensions are incorrect or inconsistent.
    """
    pass


class ShapeError(DimensionError):
    """
    Malformed matrix data.

    Raised when constructor input is empty or not rectangular, or when an
    operation would produce a matrix with a zero dimension.
    """
    pass


class ShapeMismatchError(DimensionError):
    """
    Binary operation between matrices of incompatible dimensions.

    Attributes:
        left_shape: (rows, cols) of the left operand, if known
        right_shape: (rows, cols) of the right operand, if known
    """

    def __init__(
        self,
        message: str,
        left_shape: tuple[int, int] | None = None,
        right_shape: tuple[int, int] | None = None
    ):
        super().__init__(message)
        self.left_shape = left_shape
        self.right_shape = right_shape


class NotSquareError(DimensionError):
    """
    Square-only operation invoked on a non-square matrix.

    Attributes:
        shape: (rows, cols) of the offending matrix, if known
    """

    def __init__(self, message: str, shape: tuple[int, int] | None = None):
        super().__init__(message)
        self.shape = shape


class MatrixIndexError(ValidationError, IndexError):
    """
    Element access outside the matrix bounds.

    Also an IndexError, so code written against plain sequences keeps
    working.

    Attributes:
        index: The (row, col) that was requested
        shape: (rows, cols) of the matrix
    """

    def __init__(
        self,
        message: str,
        index: tuple[int, int] | None = None,
        shape: tuple[int, int] | None = None
    ):
        super().__init__(message)
        self.index = index
        self.shape = shape


class NumericalError(PyMatrixError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a matrix operation requires invertibility but the matrix
    is singular or numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically min(n, p))
        determinant: Determinant that fell below tolerance, if computed
        column: Elimination column without a usable pivot, if applicable
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
        determinant: float | None = None,
        column: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank
        self.determinant = determinant
        self.column = column


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised when an operation requires a positive definite matrix
    (e.g., Cholesky decomposition) but the matrix fails this requirement.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        min_eigenvalue: Minimum eigenvalue, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue


class NonDiagonalizableError(NumericalError):
    """
    Eigen-decomposition cannot produce a full eigenvector basis.

    Raised for defective matrices, where an eigenvalue's geometric
    multiplicity is smaller than its algebraic multiplicity.

    Attributes:
        eigenvalue: Eigenvalue whose eigenvector could not be completed
        residual: Relative residual ||A v - lambda v|| / ||A|| of the best
            candidate vector
    """

    def __init__(
        self,
        message: str,
        eigenvalue: complex | float | None = None,
        residual: float | None = None
    ):
        super().__init__(message)
        self.eigenvalue = eigenvalue
        self.residual = residual


class ConvergenceError(PyMatrixError):
    """
    Iterative algorithm failed to converge.

    Raised when an iterative method (Jacobi sweeps, shifted QR iteration)
    fails to meet convergence criteria within the maximum number of
    iterations.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final off-diagonal mass or subdiagonal magnitude
        reason: Why convergence failed (e.g., 'max_iterations')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
