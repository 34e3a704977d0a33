"""
Tests for eigen-decomposition.

Validates:
    - Symmetric path (Jacobi): real values, orthonormal vectors
    - General path (Hessenberg + shifted QR + inverse iteration)
    - Complex conjugate eigenvalues and complex eigenvectors
    - Repeated eigenvalues with a full eigenspace
    - Defective matrices raise NonDiagonalizableError
    - Results checked against numpy.linalg.eigvalsh / eigvals
"""

import numpy as np
import pytest

from pymatrix import (
    ConvergenceError,
    Matrix,
    NonDiagonalizableError,
    NotSquareError,
    ValidationError,
    create,
    eigen,
    eigenvalues,
    identity,
)


def _canonical(values):
    """Order eigenvalues so that results from different solvers compare."""
    return np.array(
        sorted((complex(v) for v in values), key=lambda v: (round(v.real, 6), round(v.imag, 6))),
        dtype=np.complex128,
    )


def _assert_eigenpairs(a, result, atol=1e-8):
    V = np.asarray(result.vectors)
    lam = np.array(result.values, dtype=np.complex128)
    np.testing.assert_allclose(a @ V, V * lam, atol=atol)
    np.testing.assert_allclose(np.linalg.norm(V, axis=0), 1.0, rtol=1e-10)


class TestSymmetric:

    def test_two_by_two(self):
        result = eigen([[2, 1], [1, 2]])
        assert result.symmetric
        np.testing.assert_allclose(result.values, [3.0, 1.0], rtol=1e-12)
        assert all(isinstance(v, float) for v in result.values)

    def test_two_by_two_vectors(self):
        result = eigen([[2, 1], [1, 2]])
        s = 1.0 / np.sqrt(2.0)
        np.testing.assert_allclose(np.abs(result.vectors.to_numpy()), [[s, s], [s, s]], rtol=1e-12)

    def test_diagonal(self):
        result = eigen(create([[1, 0, 0], [0, 5, 0], [0, 0, 3]]))
        assert result.values == (5.0, 3.0, 1.0)
        assert result.iterations == 0

    @pytest.mark.parametrize("n", [3, 5, 8])
    def test_matches_eigvalsh(self, symmetric, n):
        m = symmetric(n)
        result = eigen(m)
        expected = np.sort(np.linalg.eigvalsh(m.to_numpy()))[::-1]
        np.testing.assert_allclose(result.values, expected, rtol=1e-10, atol=1e-12)

    def test_orthonormal_vectors(self, symmetric):
        V = eigen(symmetric(6)).vectors.to_numpy()
        np.testing.assert_allclose(V.T @ V, np.eye(6), atol=1e-12)

    def test_eigenpairs(self, symmetric):
        m = symmetric(5)
        _assert_eigenpairs(m.to_numpy(), eigen(m), atol=1e-10)

    def test_repeated_eigenvalue(self):
        result = eigen(identity(3) * 2)
        assert result.values == (2.0, 2.0, 2.0)
        np.testing.assert_allclose(result.vectors.to_numpy(), np.eye(3))

    def test_phase_convention(self, symmetric):
        V = eigen(symmetric(4)).vectors.to_numpy()
        for j in range(4):
            assert V[np.argmax(np.abs(V[:, j])), j] > 0

    def test_forced_symmetric_uses_symmetric_part(self):
        a = np.array([[2.0, 3.0], [-1.0, 2.0]])
        result = eigen(a, symmetric=True)
        expected = np.sort(np.linalg.eigvalsh(0.5 * (a + a.T)))[::-1]
        np.testing.assert_allclose(result.values, expected, rtol=1e-12)

    def test_sweep_budget(self, symmetric):
        with pytest.raises(ConvergenceError) as exc_info:
            eigen(symmetric(4), max_sweeps=0)
        assert exc_info.value.reason == 'max_iterations'


class TestGeneralReal:

    def test_two_by_two(self):
        result = eigen([[4, 1], [2, 3]])
        assert not result.symmetric
        assert result.is_real
        np.testing.assert_allclose(result.values, [5.0, 2.0], rtol=1e-12)
        V = result.vectors.to_numpy()
        np.testing.assert_allclose(V[:, 0], [1.0, 1.0] / np.sqrt(2.0), rtol=1e-8)
        np.testing.assert_allclose(V[:, 1], [-1.0, 2.0] / np.sqrt(5.0), rtol=1e-8)

    def test_upper_triangular(self):
        a = np.array([[3.0, 1.0, 2.0], [0.0, 1.0, 4.0], [0.0, 0.0, 2.0]])
        result = eigen(a)
        assert result.values == (3.0, 2.0, 1.0)
        _assert_eigenpairs(a, result)

    def test_vectors_are_matrix(self):
        assert isinstance(eigen([[4, 1], [2, 3]]).vectors, Matrix)

    def test_repeated_with_full_eigenspace(self):
        S = np.array([[1.0, 1.0, 0.0], [0.0, 1.0, 1.0], [1.0, 0.0, 1.0]])
        a = S @ np.diag([2.0, 2.0, 1.0]) @ np.linalg.inv(S)
        result = eigen(a)
        np.testing.assert_allclose(result.values, [2.0, 2.0, 1.0], atol=1e-8)
        _assert_eigenpairs(a, result)
        assert np.linalg.matrix_rank(result.vectors.to_numpy()) == 3

    @pytest.mark.parametrize("a", [
        [[1.0, 100.0], [0.0, 1.00001]],
        [[1.0, 1.0], [0.0, 1.0 + 1e-7]],
    ])
    def test_close_distinct_eigenvalues(self, a):
        a = np.array(a)
        result = eigen(a)
        expected = np.sort(np.linalg.eigvals(a).real)[::-1]
        np.testing.assert_allclose(result.values, expected, rtol=1e-12)
        _assert_eigenpairs(a, result)
        # Eigenvectors are nearly parallel but must not coincide
        assert abs(np.linalg.det(result.vectors.to_numpy())) > 1e-8

    def test_forced_general_on_symmetric(self, symmetric):
        m = symmetric(4)
        result = eigen(m, symmetric=False)
        expected = np.sort(np.linalg.eigvalsh(m.to_numpy()))[::-1]
        np.testing.assert_allclose(result.values, expected, rtol=1e-8, atol=1e-10)


class TestGeneralComplex:

    def test_rotation(self):
        result = eigen([[0, -1], [1, 0]])
        assert not result.is_real
        np.testing.assert_allclose(
            np.array(result.values), [1j, -1j], atol=1e-12
        )
        assert isinstance(result.vectors, np.ndarray)
        assert np.iscomplexobj(result.vectors)
        _assert_eigenpairs(np.array([[0.0, -1.0], [1.0, 0.0]]), result)

    def test_vectors_read_only(self):
        result = eigen([[0, -1], [1, 0]])
        with pytest.raises(ValueError):
            result.vectors[0, 0] = 0.0

    @pytest.mark.parametrize("n", [4, 6, 9])
    def test_random_matches_eigvals(self, rng, n):
        a = rng.standard_normal((n, n))
        result = eigen(a)
        np.testing.assert_allclose(
            _canonical(result.values), _canonical(np.linalg.eigvals(a)), atol=1e-8
        )
        _assert_eigenpairs(a, result)

    def test_conjugate_pairs(self, rng):
        a = rng.standard_normal((6, 6))
        values = eigenvalues(a)
        complex_values = [v for v in values if isinstance(v, complex)]
        assert len(complex_values) % 2 == 0
        for v in complex_values:
            assert min(abs(np.conj(v) - w) for w in complex_values) < 1e-8

    def test_sorted_descending(self, rng):
        values = eigenvalues(rng.standard_normal((5, 5)))
        keys = [(v.real, v.imag) for v in values]
        assert keys == sorted(keys, reverse=True)


class TestDefective:

    def test_jordan_block_raises(self):
        with pytest.raises(NonDiagonalizableError) as exc_info:
            eigen([[1, 1], [0, 1]])
        assert exc_info.value.eigenvalue == pytest.approx(1.0)
        assert exc_info.value.residual > 1e-6

    def test_eigenvalues_still_available(self):
        assert eigenvalues([[1, 1], [0, 1]]) == (1.0, 1.0)


class TestEigenValidation:

    def test_not_square(self):
        with pytest.raises(NotSquareError):
            eigen([[1, 2, 3], [4, 5, 6]])

    def test_nan_rejected(self):
        with pytest.raises(ValidationError):
            eigen([[1.0, np.nan], [np.nan, 1.0]])

    def test_one_by_one(self):
        result = eigen([[7]])
        assert result.values == (7.0,)
        assert result.vectors.elements == [[1.0]]

    def test_zero_matrix_general(self):
        assert eigenvalues(np.zeros((3, 3)), symmetric=False) == (0.0, 0.0, 0.0)

    def test_qr_budget(self, rng):
        with pytest.raises(ConvergenceError):
            eigen(rng.standard_normal((4, 4)), max_iterations=0)

    def test_matrix_methods(self):
        m = create([[2, 1], [1, 2]])
        assert m.eigen().values == eigen(m).values
        assert m.eigenvalues() == eigenvalues(m)
