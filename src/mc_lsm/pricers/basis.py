"""
Regression basis systems for the Longstaff-Schwartz pricer.

One-dimensional families are evaluated with numpy.polynomial. Laguerre and
Hermite functions are multiplied by the square root of their Gaussian
quadrature weight, exp(-x/2) and exp(-x**2/2) respectively, which keeps them
bounded for large states. Legendre and Chebyshev functions are used
unweighted: their weights are singular or constant outside [-1, 1].
"""

from collections.abc import Callable
from itertools import product

import numpy as np
from numpy.polynomial import chebyshev, hermite, laguerre, legendre

from mc_lsm.config import BASIS_FAMILIES

BasisFunction = Callable[[np.ndarray], np.ndarray]


def _unit(k: int) -> np.ndarray:
    c = np.zeros(k + 1)
    c[k] = 1.0
    return c


def _basis_function(k: int, family: str) -> BasisFunction:
    coeffs = _unit(k)
    if family == "monomial":
        return lambda x: np.power(x, k)
    elif family == "laguerre":
        return lambda x: np.exp(-0.5 * x) * laguerre.lagval(x, coeffs)
    elif family == "hermite":
        return lambda x: np.exp(-0.5 * x * x) * hermite.hermval(x, coeffs)
    elif family == "legendre":
        return lambda x: legendre.legval(x, coeffs)
    elif family == "chebyshev":
        return lambda x: chebyshev.chebval(x, coeffs)
    raise ValueError(f"Unknown basis family: {family}. Use one of {', '.join(BASIS_FAMILIES)}.")


def basis_functions(order: int, family: str = "monomial") -> list[BasisFunction]:
    """
    One-dimensional basis functions of degree 0..order.

    Parameters
    ----------
    order : int
        Highest polynomial degree (>= 0)
    family : str, optional
        One of 'monomial', 'laguerre', 'hermite', 'legendre', 'chebyshev'

    Returns
    -------
    list of callable
        order + 1 vectorised functions
    """
    if order < 0:
        raise ValueError("order must be non-negative")
    if family not in BASIS_FAMILIES:
        raise ValueError(
            f"Unknown basis family: {family}. Use one of {', '.join(BASIS_FAMILIES)}."
        )
    return [_basis_function(k, family) for k in range(order + 1)]


def total_degree_indices(factors: int, order: int) -> list[tuple[int, ...]]:
    """Multi-indices with total degree <= order, sorted by degree."""
    indices = [idx for idx in product(range(order + 1), repeat=factors) if sum(idx) <= order]
    return sorted(indices, key=lambda idx: (sum(idx), tuple(-i for i in idx)))


class BasisSystem:
    """
    Design matrix builder for single- and multi-factor states.

    Single-factor systems are [b_0(x), ..., b_order(x)]. Multi-factor
    systems use the products prod_j b_{k_j}(x_j) over all multi-indices k
    of total degree <= order.

    Parameters
    ----------
    factors : int
        Number of state variables
    order : int
        Highest total degree
    family : str, optional
        Polynomial family (default: 'monomial')
    """

    def __init__(self, factors: int, order: int, family: str = "monomial"):
        if factors <= 0:
            raise ValueError("factors must be positive")
        self.factors = factors
        self.order = order
        self.family = family
        self._functions = basis_functions(order, family)
        self.multi_indices = total_degree_indices(factors, order)

    @property
    def size(self) -> int:
        return len(self.multi_indices)

    def __call__(self, state: np.ndarray) -> np.ndarray:
        """
        Evaluate the basis.

        Parameters
        ----------
        state : np.ndarray
            States, shape (n,) for one factor or (n, factors)

        Returns
        -------
        np.ndarray
            Design matrix, shape (n, size)
        """
        x = np.asarray(state, dtype=np.float64)
        if x.ndim == 1:
            x = x[:, np.newaxis]
        if x.shape[1] != self.factors:
            raise ValueError(f"state must have {self.factors} factors, got {x.shape[1]}")

        # values[j][k] = b_k(x_j)
        values = [[f(x[:, j]) for f in self._functions] for j in range(self.factors)]
        columns = []
        for idx in self.multi_indices:
            col = np.ones(x.shape[0])
            for j, k in enumerate(idx):
                col = col * values[j][k]
            columns.append(col)
        return np.column_stack(columns)

    def __repr__(self) -> str:
        return f"BasisSystem(factors={self.factors}, order={self.order}, family='{self.family}')"
