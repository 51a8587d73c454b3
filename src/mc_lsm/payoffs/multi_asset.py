"""
Multi-asset basket payoffs.

Basket options pay on the arithmetic average of the asset prices at the
exercise date; they can be exercised early like single-asset options.
"""

from typing import Protocol

import numpy as np


class MultiAssetPayoff(Protocol):
    """Protocol for multi-asset payoff functions."""

    strike: float
    option_type: str

    def __call__(self, prices: np.ndarray) -> np.ndarray:
        """
        Compute payoff for the asset prices at one date.

        Parameters
        ----------
        prices : np.ndarray
            Prices, shape (n_paths, n_assets)

        Returns
        -------
        np.ndarray
            Payoffs, shape (n_paths,)
        """
        ...


class BasketArithmeticCallPayoff:
    """
    Basket call option payoff: max(mean(S) - K, 0).
    """

    option_type = "call"

    def __init__(self, strike: float) -> None:
        """
        Initialize basket call payoff.

        Parameters
        ----------
        strike : float
            Strike price (must be positive)
        """
        if strike <= 0:
            raise ValueError("Strike must be positive")
        self.strike = strike

    def __call__(self, prices: np.ndarray) -> np.ndarray:
        if prices.ndim != 2:
            raise ValueError(f"prices must be 2D, got shape {prices.shape}")
        return np.maximum(np.mean(prices, axis=1) - self.strike, 0.0)

    def __repr__(self) -> str:
        return f"BasketArithmeticCallPayoff(strike={self.strike})"


class BasketArithmeticPutPayoff:
    """
    Basket put option payoff: max(K - mean(S), 0).
    """

    option_type = "put"

    def __init__(self, strike: float) -> None:
        if strike <= 0:
            raise ValueError("Strike must be positive")
        self.strike = strike

    def __call__(self, prices: np.ndarray) -> np.ndarray:
        if prices.ndim != 2:
            raise ValueError(f"prices must be 2D, got shape {prices.shape}")
        return np.maximum(self.strike - np.mean(prices, axis=1), 0.0)

    def __repr__(self) -> str:
        return f"BasketArithmeticPutPayoff(strike={self.strike})"
