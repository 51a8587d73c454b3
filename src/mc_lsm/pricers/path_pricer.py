"""
Path pricers: map simulated paths to discounted cash values.

Pricers are vectorised over a PathSet; `price(path)` prices a single Path.
"""

from typing import Protocol

import numpy as np

from mc_lsm.paths.path import Path, PathSet


class PathPricer(Protocol):
    """A pure function from paths to discounted values, shape (n_paths,)."""

    def __call__(self, paths: PathSet) -> np.ndarray:
        ...


def underlying(state: np.ndarray) -> np.ndarray:
    """
    Payoff argument for a state of shape (n_paths, factors).

    Single-factor states are flattened to spots (n_paths,); multi-factor
    states are passed through for basket-style payoffs.
    """
    if state.shape[1] == 1:
        return state[:, 0]
    return state


class BasePathPricer:
    """Adds single-path pricing on top of the vectorised `__call__`."""

    def __call__(self, paths: PathSet) -> np.ndarray:
        raise NotImplementedError

    def price(self, path: Path) -> float:
        single = PathSet(path.time_grid, path.values[np.newaxis, :, :])
        return float(self(single)[0])


class EuropeanPathPricer(BasePathPricer):
    """
    Terminal payoff times the discount factor to the last grid node.

    Parameters
    ----------
    payoff : callable
        Payoff on the state at maturity
    discount : float
        Discount factor from maturity to the valuation date
    """

    def __init__(self, payoff, discount: float):
        if discount <= 0:
            raise ValueError("discount factor must be positive")
        self.payoff = payoff
        self.discount = float(discount)

    def __call__(self, paths: PathSet) -> np.ndarray:
        return self.payoff(underlying(paths.state(-1))) * self.discount


class PathDependentPathPricer(BasePathPricer):
    """
    Payoff on the full trajectory of one factor, discounted from maturity.

    Parameters
    ----------
    payoff : callable
        Payoff on trajectories of shape (n_paths, n_times)
    discount : float
        Discount factor from maturity to the valuation date
    factor : int, optional
        Factor whose trajectory is observed (default: 0)
    """

    def __init__(self, payoff, discount: float, factor: int = 0):
        if discount <= 0:
            raise ValueError("discount factor must be positive")
        self.payoff = payoff
        self.discount = float(discount)
        self.factor = factor

    def __call__(self, paths: PathSet) -> np.ndarray:
        return self.payoff(paths.spots(self.factor)) * self.discount
