"""
Core infrastructure for PyMatrix.

This module provides shared abstractions used by the matrix value type and
the decomposition suite.

Key components:
    exceptions: Exception hierarchy
    validation: Input validators
    tolerances: Numeric thresholds and iteration limits
"""

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
