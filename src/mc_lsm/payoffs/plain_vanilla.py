"""
Plain vanilla option payoffs (call and put on a single underlying).

The same payoff serves European, Bermudan and American contracts: the
exercise schedule is described separately.
"""

from typing import Literal

import numpy as np


class PlainVanillaPayoff:
    """
    Plain vanilla payoff: max(S - K, 0) for calls, max(K - S, 0) for puts.

    Parameters
    ----------
    option_type : {"call", "put"}
        Option type
    strike : float
        Strike price K (must be > 0)
    """

    def __init__(self, option_type: Literal["call", "put"], strike: float):
        if option_type not in ["call", "put"]:
            raise ValueError("option_type must be 'call' or 'put'")
        if strike <= 0:
            raise ValueError("Strike price must be positive")
        self.option_type = option_type
        self.strike = strike

    def __call__(self, spot_prices: np.ndarray) -> np.ndarray:
        """
        Compute option payoff.

        Parameters
        ----------
        spot_prices : np.ndarray
            Spot prices S at the exercise date

        Returns
        -------
        np.ndarray
            Payoffs, same shape as spot_prices
        """
        if self.option_type == "call":
            return np.maximum(spot_prices - self.strike, 0.0)
        return np.maximum(self.strike - spot_prices, 0.0)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(strike={self.strike})"


class VanillaCallPayoff(PlainVanillaPayoff):
    """Call option payoff: max(S - K, 0)"""

    def __init__(self, strike: float):
        super().__init__("call", strike)


class VanillaPutPayoff(PlainVanillaPayoff):
    """Put option payoff: max(K - S, 0)"""

    def __init__(self, strike: float):
        super().__init__("put", strike)
