"""
Geometric Brownian Motion (GBM) process for asset price simulation.
"""

import datetime

import numpy as np

from mc_lsm.models.discount import FlatForward
from mc_lsm.models.process import year_fraction


class GeometricBrownianMotion:
    """
    Single-factor Black-Scholes process.

    The model follows:
        dS_t = (r - q) * S_t * dt + σ * S_t * dW_t

    where:
        S_t: asset price at time t
        r: risk-free rate
        q: continuous dividend yield
        σ: volatility
        W_t: Wiener process (Brownian motion)

    Steps are taken with the exact log-normal transition, so non-uniform
    time grids introduce no discretisation bias.
    """

    factors = 1

    def __init__(
        self,
        S0: float,
        r: float,
        sigma: float,
        q: float = 0.0,
        reference_date: datetime.date | None = None
    ):
        """
        Initialize GBM parameters.

        Parameters
        ----------
        S0 : float
            Initial asset price (must be > 0)
        r : float
            Risk-free interest rate (annualized, continuous compounding)
        sigma : float
            Volatility (annualized, must be >= 0)
        q : float, optional
            Continuous dividend yield (default: 0)
        reference_date : date, optional
            Valuation date used to convert dates into year fractions
        """
        if S0 <= 0:
            raise ValueError("Initial price S0 must be positive")
        if sigma < 0:
            raise ValueError("Volatility sigma must be non-negative")

        self.S0 = float(S0)
        self.r = float(r)
        self.sigma = float(sigma)
        self.q = float(q)
        self.reference_date = reference_date
        self.risk_free_rate = FlatForward(self.r)

    def initial_values(self) -> np.ndarray:
        return np.array([self.S0])

    def time(self, date: "float | datetime.date") -> float:
        return year_fraction(date, self.reference_date)

    def evolve(self, t0: float, x0: np.ndarray, dt: float, dw: np.ndarray) -> np.ndarray:
        """
        Advance states by one step.

        Parameters
        ----------
        t0 : float
            Start of the step
        x0 : np.ndarray
            States at t0, shape (n_paths, 1)
        dt : float
            Step length (> 0)
        dw : np.ndarray
            Standard normal draws, shape (n_paths, 1)

        Returns
        -------
        np.ndarray
            States at t0 + dt
        """
        drift = (self.r - self.q - 0.5 * self.sigma**2) * dt
        diffusion = self.sigma * np.sqrt(dt)
        return x0 * np.exp(drift + diffusion * dw)

    def forward(self, T: float) -> float:
        """Forward price for delivery at T."""
        return self.S0 * np.exp((self.r - self.q) * T)

    def std_dev(self, T: float) -> float:
        """Terminal log-price standard deviation σ√T."""
        return self.sigma * np.sqrt(T)

    def __repr__(self) -> str:
        return (
            f"GeometricBrownianMotion(S0={self.S0}, r={self.r}, "
            f"sigma={self.sigma}, q={self.q})"
        )
