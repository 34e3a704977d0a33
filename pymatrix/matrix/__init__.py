"""
Matrix value type and factories.

Public API:
    Matrix                          - Immutable dense real matrix
    create(data)                    - Validated construction from nested data
    identity(n), zeros(r, c), ones(r, c), fill(r, c, v), diagonal(values)
"""

from pymatrix.matrix.matrix import Matrix, as_matrix
from pymatrix.matrix.factories import (
    create,
    identity,
    zeros,
    ones,
    fill,
    diagonal,
)

__all__ = [
    "Matrix",
    "as_matrix",
    "create",
    "identity",
    "zeros",
    "ones",
    "fill",
    "diagonal",
]
