"""
Stochastic process capability consumed by the path generators.
"""

import datetime
from typing import Protocol

import numpy as np

DAYS_PER_YEAR = 365.0


class StochasticProcess(Protocol):
    """
    Minimal interface the simulation core needs from a process.

    States are arrays of shape (n_paths, factors); `evolve` advances all
    paths by one grid step given standard normal draws of the same shape.
    """

    @property
    def factors(self) -> int:
        ...

    def initial_values(self) -> np.ndarray:
        ...

    def time(self, date: "float | datetime.date") -> float:
        ...

    def evolve(
        self, t0: float, x0: np.ndarray, dt: float, dw: np.ndarray
    ) -> np.ndarray:
        ...


def year_fraction(date: "float | datetime.date", reference_date: datetime.date | None) -> float:
    """
    Convert a date into a year fraction from the reference date (Actual/365).

    Plain numbers are taken to be year fractions already.
    """
    if isinstance(date, (int, float, np.floating, np.integer)):
        return float(date)
    if reference_date is None:
        raise ValueError("a reference date is required to convert dates into times")
    return (date - reference_date).days / DAYS_PER_YEAR
