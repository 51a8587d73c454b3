"""
Exercise schedules: the dates at which a contract may be exercised.

Times are year fractions from the valuation date. Exercise at time zero is
never considered by the simulation engines.
"""

from collections.abc import Iterable

import numpy as np

from mc_lsm.paths.time_grid import TimeGrid


class Exercise:
    """Base class holding the sorted exercise times."""

    kind = "generic"

    def __init__(self, times: Iterable[float]):
        t = sorted(float(x) for x in times)
        if not t:
            raise ValueError("exercise schedule needs at least one date")
        if t[0] < 0:
            raise ValueError("exercise times must be non-negative")
        if t[-1] <= 0:
            raise ValueError("last exercise time must be positive")
        self.times = tuple(t)

    @property
    def last_date(self) -> float:
        return self.times[-1]

    def mandatory_times(self) -> list[float]:
        """Times that must be nodes of the simulation grid."""
        return [t for t in self.times if t > 0]

    def exercise_indices(self, grid: TimeGrid) -> np.ndarray:
        """Grid indices (> 0, increasing) at which exercise is admissible."""
        indices = sorted({grid.index(t) for t in self.times if t > 0})
        return np.array(indices, dtype=np.int64)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(times={list(self.times)})"


class EuropeanExercise(Exercise):
    """Exercise at expiry only."""

    kind = "european"

    def __init__(self, expiry: float):
        super().__init__([expiry])


class BermudanExercise(Exercise):
    """Exercise on a discrete set of dates."""

    kind = "bermudan"


class AmericanExercise(Exercise):
    """
    Exercise at any time in [earliest, expiry].

    On a simulation grid this means every node from `earliest` to expiry.
    """

    kind = "american"

    def __init__(self, expiry: float, earliest: float = 0.0):
        if earliest < 0 or earliest >= expiry:
            raise ValueError("earliest exercise time must be in [0, expiry)")
        super().__init__([earliest, expiry])
        self.earliest = float(earliest)

    def exercise_indices(self, grid: TimeGrid) -> np.ndarray:
        last = grid.index(self.last_date)
        times = grid.times
        return np.array(
            [i for i in range(1, last + 1) if times[i] >= self.earliest - 1e-12],
            dtype=np.int64,
        )
