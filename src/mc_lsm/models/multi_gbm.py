"""
Multi-Asset Geometric Brownian Motion process with correlated dynamics.

Implements risk-neutral simulation of multiple assets under correlated GBM:
    dS_i/S_i = (r - q_i) dt + sigma_i dW_i
where W = (W_1, ..., W_d) is a correlated Brownian motion with correlation matrix rho.
"""

import datetime
from dataclasses import dataclass, field

import numpy as np

from mc_lsm.models.discount import FlatForward
from mc_lsm.models.process import year_fraction


@dataclass
class MultiAssetGeometricBrownianMotion:
    """
    Multi-factor GBM process with correlated dynamics.

    Parameters
    ----------
    S0 : np.ndarray
        Initial asset prices, shape (d,) where d >= 2
    r : float
        Risk-free rate
    sigma : np.ndarray
        Volatilities for each asset, shape (d,)
    corr : np.ndarray
        Correlation matrix, shape (d, d). Must be symmetric, positive semidefinite,
        with diagonal elements equal to 1.
    q : np.ndarray | None
        Continuous dividend yields, shape (d,) (default: zeros)
    reference_date : date | None
        Valuation date used to convert dates into year fractions

    Attributes
    ----------
    chol : np.ndarray
        Cholesky factor L of correlation matrix (computed at init)
    """

    S0: np.ndarray
    r: float
    sigma: np.ndarray
    corr: np.ndarray
    q: np.ndarray | None = None
    reference_date: datetime.date | None = None
    chol: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate parameters and compute Cholesky decomposition."""
        self.S0 = np.asarray(self.S0, dtype=np.float64)
        self.sigma = np.asarray(self.sigma, dtype=np.float64)
        self.corr = np.asarray(self.corr, dtype=np.float64)

        if self.S0.ndim != 1 or len(self.S0) < 2:
            raise ValueError("S0 must be 1D array with at least 2 assets")

        d = len(self.S0)
        self.q = (
            np.zeros(d) if self.q is None else np.asarray(self.q, dtype=np.float64)
        )

        if self.sigma.shape != (d,):
            raise ValueError(f"sigma must have shape ({d},), got {self.sigma.shape}")
        if self.q.shape != (d,):
            raise ValueError(f"q must have shape ({d},), got {self.q.shape}")
        if self.corr.shape != (d, d):
            raise ValueError(f"corr must have shape ({d}, {d}), got {self.corr.shape}")

        if np.any(self.S0 <= 0):
            raise ValueError("All S0 must be positive")
        if np.any(self.sigma < 0):
            raise ValueError("All sigma must be non-negative")

        if not np.allclose(self.corr, self.corr.T):
            raise ValueError("Correlation matrix must be symmetric")
        if not np.allclose(np.diag(self.corr), 1.0):
            raise ValueError("Correlation matrix diagonal must be 1")
        if np.any(self.corr < -1) or np.any(self.corr > 1):
            raise ValueError("All correlation entries must be in [-1, 1]")

        try:
            self.chol = np.linalg.cholesky(self.corr)
        except np.linalg.LinAlgError as e:
            raise ValueError("Correlation matrix must be positive semidefinite") from e

    @property
    def factors(self) -> int:
        """Number of correlated assets."""
        return len(self.S0)

    @property
    def risk_free_rate(self) -> FlatForward:
        return FlatForward(self.r)

    def initial_values(self) -> np.ndarray:
        return self.S0.copy()

    def time(self, date: "float | datetime.date") -> float:
        return year_fraction(date, self.reference_date)

    def evolve(self, t0: float, x0: np.ndarray, dt: float, dw: np.ndarray) -> np.ndarray:
        """
        Advance all assets by one step.

        Independent draws `dw` of shape (n_paths, d) are correlated as
        Z = dw @ L.T before the log-normal transition is applied.
        """
        z = dw @ self.chol.T
        drift = (self.r - self.q - 0.5 * self.sigma**2) * dt
        diffusion = self.sigma * np.sqrt(dt) * z
        return x0 * np.exp(drift + diffusion)
