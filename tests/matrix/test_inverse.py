"""
Tests for Matrix.inverse() with both the adjugate and LU methods.
"""

import numpy as np
import pytest

from pymatrix import (
    NotSquareError,
    SingularMatrixError,
    ValidationError,
    create,
    identity,
)
from pymatrix.core.tolerances import select_tolerance


TOL = select_tolerance('inverse')


class TestInverseAdjugate:

    def test_two_by_two(self):
        inv = create([[4, 7], [2, 6]]).inverse()
        np.testing.assert_allclose(inv.to_numpy(), [[0.6, -0.7], [-0.2, 0.4]], rtol=1e-12)

    def test_one_by_one(self):
        assert create([[4]]).inverse().elements == [[0.25]]

    def test_identity(self):
        assert identity(3).inverse() == identity(3)

    @pytest.mark.parametrize("n", [2, 3, 4, 5])
    def test_product_is_identity(self, well_conditioned, n):
        m = well_conditioned(n)
        np.testing.assert_allclose(
            (m @ m.inverse()).to_numpy(), np.eye(n), rtol=TOL.rtol, atol=TOL.atol
        )
        np.testing.assert_allclose(
            (m.inverse() @ m).to_numpy(), np.eye(n), rtol=TOL.rtol, atol=TOL.atol
        )

    def test_matches_numpy(self, well_conditioned):
        m = well_conditioned(4)
        np.testing.assert_allclose(
            m.inverse().to_numpy(), np.linalg.inv(m.to_numpy()), rtol=1e-10, atol=1e-12
        )

    def test_double_inverse(self, well_conditioned):
        m = well_conditioned(3)
        np.testing.assert_allclose(
            m.inverse().inverse().to_numpy(), m.to_numpy(), rtol=TOL.rtol, atol=TOL.atol
        )

    def test_singular_raises(self, singular_3x3):
        with pytest.raises(SingularMatrixError) as exc_info:
            singular_3x3.inverse()
        assert exc_info.value.matrix_name == 'A'
        assert exc_info.value.determinant == pytest.approx(0.0, abs=1e-12)

    def test_zero_one_by_one_raises(self):
        with pytest.raises(SingularMatrixError):
            create([[0]]).inverse()

    def test_nearly_singular_raises(self):
        with pytest.raises(SingularMatrixError):
            create([[1.0, 1.0], [1.0, 1.0 + 1e-12]]).inverse()

    def test_custom_tolerance(self):
        m = create([[1e-6, 0.0], [0.0, 1e-6]])
        with pytest.raises(SingularMatrixError):
            m.inverse()
        inv = m.inverse(tol=1e-14)
        np.testing.assert_allclose(inv.to_numpy(), 1e6 * np.eye(2), rtol=1e-12)

    def test_not_square(self):
        with pytest.raises(NotSquareError):
            create([[1, 2, 3], [4, 5, 6]]).inverse()

    def test_receiver_unchanged(self):
        m = create([[4, 7], [2, 6]])
        m.inverse()
        assert m.elements == [[4.0, 7.0], [2.0, 6.0]]


class TestInverseLU:

    def test_matches_adjugate(self, well_conditioned):
        m = well_conditioned(5)
        np.testing.assert_allclose(
            m.inverse(method='lu').to_numpy(), m.inverse().to_numpy(),
            rtol=1e-10, atol=1e-12,
        )

    def test_large_matrix(self, well_conditioned):
        m = well_conditioned(20)
        np.testing.assert_allclose(
            (m @ m.inverse(method='lu')).to_numpy(), np.eye(20), rtol=TOL.rtol, atol=TOL.atol
        )

    def test_singular_raises(self, singular_3x3):
        with pytest.raises(SingularMatrixError):
            singular_3x3.inverse(method='lu')

    def test_unknown_method(self):
        with pytest.raises(ValidationError, match="Unknown inverse method"):
            identity(2).inverse(method='gauss')
