"""
Matrix: dense, immutable, real-valued matrix type.

Storage is a read-only float64 NumPy array owned by the instance. Every
operation returns a new Matrix; nothing mutates an existing one, so
instances can be shared freely between threads.

Determinant, cofactor, adjugate and the default inverse follow the
textbook definitions (cofactor expansion along row 0, adjugate divided by
the determinant). These are exact-semantics, O(n!) algorithms intended for
small matrices; LU-based alternatives are available through the method=
arguments. Decompositions live in pymatrix.linalg and are exposed here as
convenience methods.
"""

from __future__ import annotations

import numbers
import warnings
from typing import Any, Iterator, TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import ShapeError, SingularMatrixError, ValidationError
from pymatrix.core.tolerances import (
    COFACTOR_WARNING_SIZE,
    DECOMPOSITION,
    SINGULAR_TOL,
)
from pymatrix.core.validation import (
    check_2d,
    check_array,
    check_index,
    check_inner_dimensions,
    check_rectangular,
    check_same_shape,
    check_square,
)

if TYPE_CHECKING:
    from pymatrix.linalg.cholesky import CholeskyResult
    from pymatrix.linalg.eigen import EigenResult
    from pymatrix.linalg.lu import LUResult
    from pymatrix.linalg.qr import QRResult
    from pymatrix.linalg.svd import SVDResult


def _freeze(array: NDArray) -> NDArray[np.float64]:
    """Private float64 copy with writes disabled."""
    out = np.array(array, dtype=np.float64, copy=True)
    out.setflags(write=False)
    return out


def _format_element(value: float) -> str:
    return format(value, '.15g')


def _cofactor_determinant(a: NDArray[np.float64]) -> float:
    """Determinant by recursive cofactor expansion along the first row."""
    n = a.shape[0]
    if n == 1:
        return float(a[0, 0])
    if n == 2:
        return float(a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0])

    rest = a[1:]
    det = 0.0
    for j in range(n):
        sign = 1.0 if j % 2 == 0 else -1.0
        det += sign * a[0, j] * _cofactor_determinant(np.delete(rest, j, axis=1))
    return det


def _warn_cofactor_cost(n: int, operation: str) -> None:
    if n > COFACTOR_WARNING_SIZE:
        warnings.warn(
            f"{operation} by cofactor expansion on a {n}x{n} matrix is O(n!). "
            f"Pass method='lu' for an O(n^3) computation.",
            RuntimeWarning,
            stacklevel=3,
        )


class Matrix:
    """
    Dense real matrix with shape invariants rows >= 1, cols >= 1.

    Construction:
        Matrix([[1, 2], [3, 4]])
        Matrix(np.eye(3))
        pymatrix.identity(3), pymatrix.zeros(2, 3), ...

    Raises:
        ShapeError: If data is empty or not rectangular
        ValidationError: If entries are non-numeric or complex
    """

    __slots__ = ('_data',)

    # Make NumPy defer to our reflected operators instead of broadcasting.
    __array_ufunc__ = None

    def __init__(self, data: ArrayLike | Matrix):
        if isinstance(data, Matrix):
            self._data = data._data
            return

        check_rectangular(data, 'data')
        array = check_array(data, 'data')
        check_2d(array, 'data')
        self._data = _freeze(array)

    @classmethod
    def _from_array(cls, array: NDArray) -> Matrix:
        """Wrap a trusted 2D array without re-validating it."""
        obj = cls.__new__(cls)
        obj._data = _freeze(array)
        return obj

    # ------------------------------------------------------------------
    # Shape and element access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return (self._data.shape[0], self._data.shape[1])

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    @property
    def elements(self) -> list[list[float]]:
        """Elements as a fresh list of row lists."""
        return self._data.tolist()

    def to_numpy(self) -> NDArray[np.float64]:
        """Writable copy of the underlying array."""
        return self._data.copy()

    def __array__(self, dtype=None, copy=None) -> NDArray:
        if dtype is None:
            return self._data.copy()
        return self._data.astype(dtype)

    def get(self, row: int, col: int) -> float:
        """Element at (row, col)."""
        i, j = check_index(row, col, self.shape)
        return float(self._data[i, j])

    def set(self, row: int, col: int, value: float) -> Matrix:
        """
        Copy of this matrix with element (row, col) replaced.

        The receiver is left unchanged.
        """
        i, j = check_index(row, col, self.shape)
        scalar = check_array(value, 'value')
        if scalar.ndim != 0:
            raise ValidationError(f"value: expected a scalar, got shape {scalar.shape}")
        data = self._data.copy()
        data[i, j] = scalar
        return Matrix._from_array(data)

    def __getitem__(self, key: tuple[int, int]) -> float:
        if not isinstance(key, tuple) or len(key) != 2:
            raise ValidationError(f"Matrix index must be a (row, col) pair, got {key!r}")
        return self.get(*key)

    def __iter__(self) -> Iterator[tuple[float, ...]]:
        for row in self._data.tolist():
            yield tuple(row)

    def __len__(self) -> int:
        return self.rows

    # ------------------------------------------------------------------
    # Elementary arithmetic
    # ------------------------------------------------------------------

    def add(self, other: ArrayLike | Matrix) -> Matrix:
        """Elementwise sum. Shapes must match."""
        other = as_matrix(other, 'other')
        check_same_shape(self.shape, other.shape, 'add')
        return Matrix._from_array(self._data + other._data)

    def subtract(self, other: ArrayLike | Matrix) -> Matrix:
        """Elementwise difference. Shapes must match."""
        other = as_matrix(other, 'other')
        check_same_shape(self.shape, other.shape, 'subtract')
        return Matrix._from_array(self._data - other._data)

    def multiply(self, other: float | ArrayLike | Matrix) -> Matrix:
        """
        Scalar or matrix product.

        A real scalar scales every element. Anything else is treated as a
        matrix and must satisfy self.cols == other.rows; the result has
        shape (self.rows, other.cols).
        """
        if isinstance(other, numbers.Number):
            if not isinstance(other, numbers.Real):
                raise ValidationError(
                    f"scalar: expected a real number, got {type(other).__name__}"
                )
            return Matrix._from_array(self._data * float(other))

        other = as_matrix(other, 'other')
        check_inner_dimensions(self.shape, other.shape, 'multiply')
        return Matrix._from_array(self._data @ other._data)

    def transpose(self) -> Matrix:
        return Matrix._from_array(self._data.T)

    @property
    def T(self) -> Matrix:
        return self.transpose()

    def __add__(self, other: Any) -> Matrix:
        return self.add(other)

    def __radd__(self, other: Any) -> Matrix:
        return as_matrix(other, 'other').add(self)

    def __sub__(self, other: Any) -> Matrix:
        return self.subtract(other)

    def __rsub__(self, other: Any) -> Matrix:
        return as_matrix(other, 'other').subtract(self)

    def __mul__(self, other: Any) -> Matrix:
        return self.multiply(other)

    def __rmul__(self, other: Any) -> Matrix:
        if isinstance(other, numbers.Number):
            return self.multiply(other)
        return as_matrix(other, 'other').multiply(self)

    def __matmul__(self, other: Any) -> Matrix:
        if isinstance(other, numbers.Number):
            raise ValidationError("matmul: scalar operands are not allowed, use '*'")
        return self.multiply(other)

    def __rmatmul__(self, other: Any) -> Matrix:
        if isinstance(other, numbers.Number):
            raise ValidationError("matmul: scalar operands are not allowed, use '*'")
        return as_matrix(other, 'other').multiply(self)

    def __neg__(self) -> Matrix:
        return Matrix._from_array(-self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def allclose(
        self,
        other: ArrayLike | Matrix,
        rtol: float = DECOMPOSITION.rtol,
        atol: float = DECOMPOSITION.atol,
    ) -> bool:
        """Shapes match and every element agrees within tolerance."""
        other = as_matrix(other, 'other')
        if self.shape != other.shape:
            return False
        return bool(np.allclose(self._data, other._data, rtol=rtol, atol=atol))

    # ------------------------------------------------------------------
    # Determinant, minors, cofactors, trace
    # ------------------------------------------------------------------

    def determinant(self, method: str = 'cofactor') -> float:
        """
        Determinant of a square matrix.

        Args:
            method: 'cofactor' (default) expands along row 0 recursively,
                O(n!). 'lu' uses sign(P) * prod(diag(U)), O(n^3).

        Raises:
            NotSquareError: If the matrix is not square
        """
        check_square(self.shape, 'matrix', 'determinant')

        if method == 'cofactor':
            _warn_cofactor_cost(self.rows, 'determinant')
            return _cofactor_determinant(self._data)
        if method == 'lu':
            from pymatrix.linalg.lu import lu
            return lu(self).determinant

        raise ValidationError(
            f"Unknown determinant method: {method!r}. Must be 'cofactor' or 'lu'."
        )

    def minor(self, row: int, col: int) -> Matrix:
        """Submatrix with row `row` and column `col` removed."""
        i, j = check_index(row, col, self.shape)
        if self.rows == 1 or self.cols == 1:
            raise ShapeError(
                f"minor({i}, {j}) of a {self.rows}x{self.cols} matrix would be empty"
            )
        data = np.delete(np.delete(self._data, i, axis=0), j, axis=1)
        return Matrix._from_array(data)

    def cofactor(self, row: int, col: int) -> float:
        """(-1)^(row+col) * det(minor(row, col))."""
        check_square(self.shape, 'matrix', 'cofactor')
        sub = self.minor(row, col)
        sign = 1.0 if (row + col) % 2 == 0 else -1.0
        return sign * _cofactor_determinant(sub._data)

    def trace(self) -> float:
        check_square(self.shape, 'matrix', 'trace')
        return float(np.trace(self._data))

    def adjugate(self) -> Matrix:
        """Transpose of the cofactor matrix."""
        check_square(self.shape, 'matrix', 'adjugate')
        n = self.rows
        if n == 1:
            return Matrix._from_array(np.ones((1, 1)))

        _warn_cofactor_cost(n - 1, 'adjugate')
        cofactors = np.empty((n, n))
        for i in range(n):
            for j in range(n):
                cofactors[i, j] = self.cofactor(i, j)
        return Matrix._from_array(cofactors.T)

    def inverse(self, method: str = 'adjugate', tol: float = SINGULAR_TOL) -> Matrix:
        """
        Inverse of a square matrix.

        Args:
            method: 'adjugate' (default) computes adj(A) / det(A).
                'lu' solves A X = I by Gaussian elimination.
            tol: |det(A)| (or pivot magnitude for 'lu') below which A is
                treated as singular.

        Raises:
            NotSquareError: If the matrix is not square
            SingularMatrixError: If the matrix is numerically singular
        """
        check_square(self.shape, 'matrix', 'inverse')

        if method == 'lu':
            from pymatrix.linalg.solve import solve
            return solve(self, np.eye(self.rows), tol=tol)
        if method != 'adjugate':
            raise ValidationError(
                f"Unknown inverse method: {method!r}. Must be 'adjugate' or 'lu'."
            )

        det = self.determinant()
        if abs(det) < tol:
            raise SingularMatrixError(
                f"Matrix is singular: |det| = {abs(det):.3e} is below {tol:g}",
                matrix_name='A',
                determinant=det,
            )

        if self.rows == 1:
            return Matrix._from_array(np.array([[1.0 / self._data[0, 0]]]))

        return Matrix._from_array(self.adjugate()._data / det)

    # ------------------------------------------------------------------
    # Linear algebra delegates
    # ------------------------------------------------------------------

    def solve(self, b: ArrayLike | Matrix, tol: float = SINGULAR_TOL) -> Matrix:
        """Solve self @ x = b. See pymatrix.linalg.solve."""
        from pymatrix.linalg.solve import solve
        return solve(self, b, tol=tol)

    def lu(self, **kwargs: Any) -> LUResult:
        from pymatrix.linalg.lu import lu
        return lu(self, **kwargs)

    def qr(self, **kwargs: Any) -> QRResult:
        from pymatrix.linalg.qr import qr
        return qr(self, **kwargs)

    def eigen(self, **kwargs: Any) -> EigenResult:
        from pymatrix.linalg.eigen import eigen
        return eigen(self, **kwargs)

    def eigenvalues(self, **kwargs: Any) -> tuple[float | complex, ...]:
        from pymatrix.linalg.eigen import eigenvalues
        return eigenvalues(self, **kwargs)

    def svd(self, **kwargs: Any) -> SVDResult:
        from pymatrix.linalg.svd import svd
        return svd(self, **kwargs)

    def rank(self, **kwargs: Any) -> int:
        from pymatrix.linalg.svd import rank
        return rank(self, **kwargs)

    def cond(self) -> float:
        from pymatrix.linalg.svd import cond
        return cond(self)

    def pinv(self, **kwargs: Any) -> Matrix:
        from pymatrix.linalg.svd import pinv
        return pinv(self, **kwargs)

    def cholesky(self) -> CholeskyResult:
        from pymatrix.linalg.cholesky import cholesky
        return cholesky(self)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return '\n'.join(
            ' '.join(_format_element(value) for value in row)
            for row in self._data.tolist()
        )

    def __repr__(self) -> str:
        return f"Matrix({self._data.tolist()!r})"


def as_matrix(value: ArrayLike | Matrix, name: str) -> Matrix:
    """Return value unchanged if it is a Matrix, otherwise validate and wrap it."""
    if isinstance(value, Matrix):
        return value
    if isinstance(value, numbers.Number):
        raise ValidationError(f"{name}: expected a matrix, got scalar {value!r}")
    try:
        return Matrix(value)
    except ShapeError as e:
        raise ShapeError(f"{name}: {e}") from e
