"""
Path-dependent option payoffs (Asian and Barrier options).

All payoffs take a full set of spot trajectories of shape
(n_paths, n_times), node 0 being the valuation date. By default every grid
node is observed; a `monitoring` subset of node indices restricts averaging
and barrier checks to fixing dates, which lets a payoff be priced on a grid
that is finer than its fixing schedule.
"""

from collections.abc import Iterable, Sequence

import numpy as np

from mc_lsm.paths.time_grid import TimeGrid


def monitoring_indices(grid: TimeGrid, times: Iterable[float]) -> tuple[int, ...]:
    """
    Map fixing times onto node indices of a simulation grid.

    Parameters
    ----------
    grid : TimeGrid
        Simulation grid; every fixing time must be one of its nodes
    times : iterable of float
        Fixing times in years

    Returns
    -------
    tuple of int
        Sorted node indices, suitable as the `monitoring` argument of a payoff

    Raises
    ------
    ValueError
        If a fixing time is not on the grid
    """
    return tuple(sorted({grid.index(float(t)) for t in times}))


class PathDependentPayoff:
    """
    Base class for payoffs observed on a subset of the grid nodes.

    Parameters
    ----------
    strike : float
        Strike price K (must be > 0)
    monitoring : sequence of int, optional
        Grid node indices at which the path is observed. None observes
        every node, the valuation date included.
    """

    option_type: str

    def __init__(self, strike: float, monitoring: Sequence[int] | None = None):
        if strike <= 0:
            raise ValueError("Strike price must be positive")
        self.strike = strike
        if monitoring is None:
            self.monitoring = None
        else:
            indices = np.asarray(sorted(set(monitoring)), dtype=int)
            if indices.size == 0:
                raise ValueError("monitoring must contain at least one node")
            if indices[0] < 0:
                raise ValueError("monitoring indices must be non-negative")
            self.monitoring = indices

    def observed(self, paths: np.ndarray) -> np.ndarray:
        """Columns of `paths` at the monitored nodes."""
        if self.monitoring is None:
            return paths
        if self.monitoring[-1] >= paths.shape[1]:
            raise ValueError(
                f"monitoring node {self.monitoring[-1]} is outside a path "
                f"of {paths.shape[1]} nodes"
            )
        return paths[:, self.monitoring]

    def _repr_extra(self) -> str:
        if self.monitoring is None:
            return ""
        return f", monitoring={tuple(int(i) for i in self.monitoring)}"


class AsianArithmeticCallPayoff(PathDependentPayoff):
    """
    Asian arithmetic call option payoff: max(mean(S_path) - K, 0)

    The payoff is based on the arithmetic average of the monitored prices.
    """

    option_type = "call"

    def __call__(self, paths: np.ndarray) -> np.ndarray:
        """
        Compute Asian arithmetic call payoff.

        Parameters
        ----------
        paths : np.ndarray
            Asset price paths of shape (n_paths, n_times)

        Returns
        -------
        np.ndarray
            Payoffs max(mean(S_fixings) - K, 0) for each path
        """
        avg_prices = np.mean(self.observed(paths), axis=1)
        return np.maximum(avg_prices - self.strike, 0.0)

    def __repr__(self) -> str:
        return f"AsianArithmeticCallPayoff(strike={self.strike}{self._repr_extra()})"


class AsianArithmeticPutPayoff(PathDependentPayoff):
    """
    Asian arithmetic put option payoff: max(K - mean(S_path), 0)
    """

    option_type = "put"

    def __call__(self, paths: np.ndarray) -> np.ndarray:
        """Payoffs max(K - mean(S_fixings), 0) for each path."""
        avg_prices = np.mean(self.observed(paths), axis=1)
        return np.maximum(self.strike - avg_prices, 0.0)

    def __repr__(self) -> str:
        return f"AsianArithmeticPutPayoff(strike={self.strike}{self._repr_extra()})"


class BarrierPayoff(PathDependentPayoff):
    """
    Knock-out payoff on the terminal price.

    The barrier is checked on the monitored nodes only; the terminal price
    is always the last node of the path.

    Parameters
    ----------
    strike : float
        Strike price K (must be > 0)
    barrier : float
        Barrier level (must be > 0)
    monitoring : sequence of int, optional
        Grid node indices at which the barrier is observed
    """

    def __init__(self, strike: float, barrier: float, monitoring: Sequence[int] | None = None):
        super().__init__(strike, monitoring)
        if barrier <= 0:
            raise ValueError("Barrier must be positive")
        self.barrier = barrier

    def knocked_out(self, paths: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def vanilla(self, terminal: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, paths: np.ndarray) -> np.ndarray:
        """
        Compute the knock-out payoff.

        Parameters
        ----------
        paths : np.ndarray
            Asset price paths of shape (n_paths, n_times)

        Returns
        -------
        np.ndarray
            Vanilla payoff on S_T where the barrier was not breached, else 0
        """
        return np.where(self.knocked_out(paths), 0.0, self.vanilla(paths[:, -1]))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(strike={self.strike}, barrier={self.barrier}"
            f"{self._repr_extra()})"
        )


class UpAndOutCallPayoff(BarrierPayoff):
    """
    Up-and-out barrier call option payoff.

    Knocked out if a monitored price reaches or exceeds the barrier;
    otherwise pays max(S_T - K, 0).
    """

    option_type = "call"

    def knocked_out(self, paths: np.ndarray) -> np.ndarray:
        return np.max(self.observed(paths), axis=1) >= self.barrier

    def vanilla(self, terminal: np.ndarray) -> np.ndarray:
        return np.maximum(terminal - self.strike, 0.0)


class DownAndOutPutPayoff(BarrierPayoff):
    """
    Down-and-out barrier put option payoff.

    Knocked out if a monitored price reaches or falls below the barrier;
    otherwise pays max(K - S_T, 0).
    """

    option_type = "put"

    def knocked_out(self, paths: np.ndarray) -> np.ndarray:
        return np.min(self.observed(paths), axis=1) <= self.barrier

    def vanilla(self, terminal: np.ndarray) -> np.ndarray:
        return np.maximum(self.strike - terminal, 0.0)
