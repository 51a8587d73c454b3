"""
Discount curves used to bring simulated cashflows back to the valuation date.
"""

from typing import Protocol

import numpy as np


class DiscountCurve(Protocol):
    """Maps a time (in years) to a discount factor."""

    def discount(self, t: float | np.ndarray) -> float | np.ndarray:
        ...


class FlatForward:
    """
    Flat continuously-compounded discount curve: D(t) = exp(-r t).

    Parameters
    ----------
    rate : float
        Continuously-compounded zero rate
    """

    def __init__(self, rate: float):
        self.rate = float(rate)

    def discount(self, t: float | np.ndarray) -> float | np.ndarray:
        return np.exp(-self.rate * np.asarray(t, dtype=np.float64))

    def __repr__(self) -> str:
        return f"FlatForward(rate={self.rate})"
