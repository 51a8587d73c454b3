"""
Simulation time grids.

A grid is an ordered, strictly increasing sequence of non-negative times
(year fractions from the valuation date). Time zero is always node 0.
"""

from collections.abc import Iterable

import numpy as np

_CLOSE_RTOL = 1e-10
_CLOSE_ATOL = 1e-14


def _close(a: float, b: float) -> bool:
    return abs(a - b) <= _CLOSE_ATOL + _CLOSE_RTOL * max(abs(a), abs(b))


class TimeGrid:
    """
    Immutable simulation time grid.

    Parameters
    ----------
    times : iterable of float
        Grid times; 0.0 is prepended when missing
    mandatory_times : iterable of float, optional
        Times that were required to be on the grid (default: all nodes
        after time zero)

    Raises
    ------
    ValueError
        If the times are empty, negative or not strictly increasing
    """

    def __init__(
        self,
        times: Iterable[float],
        mandatory_times: Iterable[float] | None = None
    ):
        grid = np.asarray(list(times), dtype=np.float64).ravel()
        if grid.size == 0:
            raise ValueError("time grid needs at least one time")
        if np.any(~np.isfinite(grid)):
            raise ValueError("time grid times must be finite")
        if np.any(grid < 0):
            raise ValueError("time grid times must be non-negative")
        if grid[0] != 0.0:
            grid = np.concatenate([[0.0], grid])
        if np.any(np.diff(grid) <= 0):
            raise ValueError("time grid times must be strictly increasing")

        grid.flags.writeable = False
        self._times = grid

        if mandatory_times is None:
            mandatory = grid[1:].copy()
        else:
            mandatory = np.asarray(list(mandatory_times), dtype=np.float64)
        mandatory.flags.writeable = False
        self._mandatory = mandatory

    @classmethod
    def uniform(cls, end: float, steps: int) -> "TimeGrid":
        """Grid of `steps` equal steps from 0 to `end`."""
        if end <= 0:
            raise ValueError("end time must be positive")
        if steps <= 0:
            raise ValueError("steps must be positive")
        times = np.linspace(0.0, end, steps + 1)
        return cls(times, mandatory_times=[end])

    @classmethod
    def from_mandatory(
        cls, mandatory_times: Iterable[float], steps: int | None = None
    ) -> "TimeGrid":
        """
        Grid containing every mandatory time, refined to roughly `steps` steps.

        The largest step is last/steps; each interval between consecutive
        mandatory times gets round(length / largest step) equal sub-steps,
        at least one. Mandatory times closer than rounding noise are merged.
        With `steps=None` the grid holds only the mandatory times.
        """
        raw = sorted(float(t) for t in mandatory_times)
        if not raw:
            raise ValueError("empty mandatory time list")
        if raw[0] < 0:
            raise ValueError("negative mandatory times not allowed")

        mandatory: list[float] = []
        for t in raw:
            if not mandatory or not _close(t, mandatory[-1]):
                mandatory.append(t)

        last = mandatory[-1]
        if last <= 0:
            raise ValueError("last mandatory time must be positive")
        if steps is None:
            return cls(mandatory, mandatory_times=mandatory)
        if steps <= 0:
            raise ValueError("steps must be positive")

        dt_max = last / steps
        times = [0.0]
        period_begin = 0.0
        for period_end in mandatory:
            if period_end == 0.0:
                continue
            n_sub = max(int((period_end - period_begin) / dt_max + 0.5), 1)
            dt = (period_end - period_begin) / n_sub
            times.extend(period_begin + k * dt for k in range(1, n_sub))
            times.append(period_end)
            period_begin = period_end

        return cls(times, mandatory_times=mandatory)

    @property
    def times(self) -> np.ndarray:
        """Read-only array of grid times, times[0] == 0."""
        return self._times

    @property
    def mandatory_times(self) -> np.ndarray:
        return self._mandatory

    @property
    def first(self) -> float:
        return float(self._times[0])

    @property
    def last(self) -> float:
        return float(self._times[-1])

    @property
    def steps(self) -> int:
        return len(self._times) - 1

    def dt(self, i: int) -> float:
        """Length of step i, from node i to node i + 1."""
        if i < 0 or i >= self.steps:
            raise IndexError(f"step {i} out of range [0, {self.steps})")
        return float(self._times[i + 1] - self._times[i])

    def index(self, t: float) -> int:
        """
        Index of the node equal to `t`.

        Raises
        ------
        ValueError
            If `t` is not (up to rounding) a grid node
        """
        i = self.closest_index(t)
        if _close(float(self._times[i]), t):
            return i

        if t < self._times[0]:
            raise ValueError(
                f"using inadequate time grid: all nodes are later than the "
                f"required time t = {t:.12g} (earliest node is t1 = {self._times[0]:.12g})"
            )
        if t > self._times[-1]:
            raise ValueError(
                f"using inadequate time grid: all nodes are earlier than the "
                f"required time t = {t:.12g} (latest node is t1 = {self._times[-1]:.12g})"
            )
        j = int(np.searchsorted(self._times, t))
        raise ValueError(
            f"using inadequate time grid: the nodes closest to the required "
            f"time t = {t:.12g} are t1 = {self._times[j - 1]:.12g} and "
            f"t2 = {self._times[j]:.12g}"
        )

    def closest_index(self, t: float) -> int:
        return int(np.argmin(np.abs(self._times - t)))

    def closest_time(self, t: float) -> float:
        return float(self._times[self.closest_index(t)])

    def __len__(self) -> int:
        return len(self._times)

    def __getitem__(self, i):
        return self._times[i]

    def __iter__(self):
        return iter(self._times.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeGrid):
            return NotImplemented
        return np.array_equal(self._times, other._times)

    def __hash__(self) -> int:
        return hash(self._times.tobytes())

    def __repr__(self) -> str:
        return f"TimeGrid(steps={self.steps}, last={self.last})"
