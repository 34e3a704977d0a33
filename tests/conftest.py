"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pymatrix import Matrix


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def well_conditioned(rng):
    """Factory for diagonally dominant (hence invertible) n x n matrices."""
    def make(n):
        a = rng.standard_normal((n, n))
        a += np.diag(np.sum(np.abs(a), axis=1) + 1.0)
        return Matrix(a)
    return make


@pytest.fixture
def symmetric(rng):
    """Factory for random symmetric n x n matrices."""
    def make(n):
        a = rng.standard_normal((n, n))
        return Matrix(a + a.T)
    return make


@pytest.fixture
def singular_3x3():
    """Two identical rows."""
    return Matrix([[1.0, 2.0, 3.0], [1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
