"""Tests for regression basis systems."""

import numpy as np
import pytest

from mc_lsm.pricers.basis import BasisSystem, basis_functions, total_degree_indices

x = np.array([-0.5, 0.0, 0.3, 1.2])


class TestBasisFunctions:
    """One-dimensional basis families."""

    def test_count(self):
        for family in ("monomial", "laguerre", "hermite", "legendre", "chebyshev"):
            assert len(basis_functions(3, family)) == 4

    def test_monomial(self):
        f = basis_functions(2, "monomial")
        np.testing.assert_allclose(f[0](x), 1.0)
        np.testing.assert_allclose(f[1](x), x)
        np.testing.assert_allclose(f[2](x), x**2)

    def test_laguerre_is_weighted(self):
        f = basis_functions(1, "laguerre")
        np.testing.assert_allclose(f[0](x), np.exp(-0.5 * x))
        np.testing.assert_allclose(f[1](x), np.exp(-0.5 * x) * (1.0 - x))

    def test_hermite_is_weighted(self):
        f = basis_functions(2, "hermite")
        w = np.exp(-0.5 * x * x)
        np.testing.assert_allclose(f[1](x), w * 2.0 * x)
        np.testing.assert_allclose(f[2](x), w * (4.0 * x * x - 2.0))

    def test_legendre(self):
        f = basis_functions(2, "legendre")
        np.testing.assert_allclose(f[2](x), 0.5 * (3.0 * x * x - 1.0))

    def test_chebyshev(self):
        f = basis_functions(2, "chebyshev")
        np.testing.assert_allclose(f[2](x), 2.0 * x * x - 1.0)

    def test_invalid(self):
        with pytest.raises(ValueError, match="Unknown basis family"):
            basis_functions(2, "hyperbolic")
        with pytest.raises(ValueError, match="order must be non-negative"):
            basis_functions(-1)


class TestBasisSystem:
    """Single- and multi-factor design matrices."""

    def test_total_degree_indices(self):
        assert total_degree_indices(2, 2) == [(0, 0), (1, 0), (0, 1), (2, 0), (1, 1), (0, 2)]
        assert len(total_degree_indices(3, 2)) == 10

    def test_single_factor(self):
        basis = BasisSystem(1, 2)
        assert basis.size == 3
        design = basis(x)
        assert design.shape == (4, 3)
        np.testing.assert_allclose(design[:, 2], x**2)
        np.testing.assert_allclose(basis(x[:, np.newaxis]), design)

    def test_two_factors(self):
        basis = BasisSystem(2, 2)
        state = np.array([[2.0, 3.0], [0.5, -1.0]])
        design = basis(state)
        assert design.shape == (2, 6)
        np.testing.assert_allclose(design[0], [1.0, 2.0, 3.0, 4.0, 6.0, 9.0])

    def test_factor_mismatch(self):
        with pytest.raises(ValueError, match="state must have 2 factors"):
            BasisSystem(2, 2)(np.ones((5, 3)))

    def test_order_zero(self):
        basis = BasisSystem(3, 0)
        np.testing.assert_allclose(basis(np.ones((4, 3))), np.ones((4, 1)))

    def test_repr(self):
        assert repr(BasisSystem(1, 3, "laguerre")) == "BasisSystem(factors=1, order=3, family='laguerre')"
