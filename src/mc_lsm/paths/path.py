"""
Simulated paths and the (value, weight) samples returned by path generators.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

import numpy as np

from mc_lsm.paths.time_grid import TimeGrid

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class Path:
    """
    One simulated trajectory on a time grid.

    Attributes
    ----------
    time_grid : TimeGrid
        Grid the path lives on
    values : np.ndarray
        States, shape (factors, len(time_grid))
    """

    time_grid: TimeGrid
    values: np.ndarray

    def __post_init__(self) -> None:
        if self.values.ndim != 2 or self.values.shape[1] != len(self.time_grid):
            raise ValueError(
                f"path values must have shape (factors, {len(self.time_grid)}), "
                f"got {self.values.shape}"
            )

    @property
    def factors(self) -> int:
        return self.values.shape[0]

    def __len__(self) -> int:
        return self.values.shape[1]

    def state(self, i: int) -> np.ndarray:
        """State vector at node i, shape (factors,)."""
        return self.values[:, i]

    def front(self) -> np.ndarray:
        return self.values[:, 0]

    def back(self) -> np.ndarray:
        return self.values[:, -1]


@dataclass(frozen=True, eq=False)
class PathSet:
    """
    A batch of paths on a common grid.

    Attributes
    ----------
    time_grid : TimeGrid
        Grid shared by all paths
    values : np.ndarray
        States, shape (n_paths, factors, len(time_grid))
    """

    time_grid: TimeGrid
    values: np.ndarray

    def __post_init__(self) -> None:
        if self.values.ndim != 3 or self.values.shape[2] != len(self.time_grid):
            raise ValueError(
                f"path set values must have shape (n_paths, factors, {len(self.time_grid)}), "
                f"got {self.values.shape}"
            )

    @property
    def n_paths(self) -> int:
        return self.values.shape[0]

    @property
    def factors(self) -> int:
        return self.values.shape[1]

    def __len__(self) -> int:
        return self.values.shape[0]

    def __getitem__(self, i: int) -> Path:
        return Path(self.time_grid, self.values[i])

    def state(self, i: int) -> np.ndarray:
        """States of all paths at node i, shape (n_paths, factors)."""
        return self.values[:, :, i]

    def spots(self, factor: int = 0) -> np.ndarray:
        """Trajectories of one factor, shape (n_paths, len(time_grid))."""
        return self.values[:, factor, :]

    def with_values(self, values: np.ndarray) -> "PathSet":
        return PathSet(self.time_grid, values)


@dataclass(frozen=True, eq=False)
class Sample(Generic[T]):
    """A generated value with its weight (an array of weights for a batch)."""

    value: T
    weight: float | np.ndarray = 1.0
