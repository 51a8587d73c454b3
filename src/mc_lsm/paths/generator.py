"""
Path generation: evolve a stochastic process across a time grid.
"""

import numpy as np

from mc_lsm.models.process import StochasticProcess
from mc_lsm.paths.brownian_bridge import BrownianBridge
from mc_lsm.paths.path import Path, PathSet, Sample
from mc_lsm.paths.time_grid import TimeGrid
from mc_lsm.rng.sequence import SequenceGenerator


class PathGenerator:
    """
    Generates paths of a (possibly multi-factor) process on a fixed grid.

    Each path consumes exactly ``factors * (len(time_grid) - 1)`` Gaussian
    variates, laid out step-major: variates ``[k * factors : (k + 1) * factors]``
    drive step k. With a Brownian bridge the same variates are instead
    assigned to the bridge construction order of every factor.

    Parameters
    ----------
    process : StochasticProcess
        Process to simulate
    time_grid : TimeGrid
        Simulation grid (time zero is node 0)
    generator : SequenceGenerator
        Source of Gaussian sequences; its dimension must match the grid
    brownian_bridge : bool, optional
        Build the increments with a Brownian bridge (default: False)

    Raises
    ------
    ValueError
        If the generator dimension does not match factors * steps
    """

    def __init__(
        self,
        process: StochasticProcess,
        time_grid: TimeGrid,
        generator: SequenceGenerator,
        brownian_bridge: bool = False
    ):
        steps = len(time_grid) - 1
        if steps < 1:
            raise ValueError("time grid must contain at least one step")

        factors = process.factors
        if generator.dimension != factors * steps:
            raise ValueError(
                f"sequence generator dimension ({generator.dimension}) is not equal to "
                f"factors ({factors}) times time steps ({steps})"
            )

        self.process = process
        self.time_grid = time_grid
        self.generator = generator
        self.factors = factors
        self.steps = steps
        self._bridge = BrownianBridge(time_grid.times[1:]) if brownian_bridge else None
        self._dts = np.diff(time_grid.times)
        self._last_variates: np.ndarray | None = None

    @property
    def dimension(self) -> int:
        return self.factors * self.steps

    @property
    def allows_error_estimate(self) -> bool:
        return self.generator.allows_error_estimate

    def _build(self, variates: np.ndarray) -> np.ndarray:
        """Turn variates of shape (n, dimension) into states (n, factors, len(grid))."""
        n = variates.shape[0]
        z = variates.reshape(n, self.steps, self.factors)
        if self._bridge is not None:
            z = self._bridge.transform(z.transpose(0, 2, 1)).transpose(0, 2, 1)

        times = self.time_grid.times
        states = np.empty((n, self.factors, self.steps + 1))
        x = np.broadcast_to(self.process.initial_values(), (n, self.factors)).astype(np.float64)
        states[:, :, 0] = x
        for i in range(self.steps):
            x = self.process.evolve(times[i], x, self._dts[i], z[:, i, :])
            states[:, :, i + 1] = x
        return states

    def next_batch(self, n: int) -> Sample[PathSet]:
        """Draw fresh randomness for n paths."""
        if n < 0:
            raise ValueError("n must be non-negative")
        variates = self.generator.next_sequences(n)
        self._last_variates = variates
        return Sample(PathSet(self.time_grid, self._build(variates)), np.ones(n))

    def antithetic_batch(self) -> Sample[PathSet]:
        """Paths from the negated variates of the last batch; draws nothing."""
        if self._last_variates is None:
            raise RuntimeError("antithetic paths requested before any path was drawn")
        variates = -self._last_variates
        n = variates.shape[0]
        return Sample(PathSet(self.time_grid, self._build(variates)), np.ones(n))

    def next(self) -> Sample[Path]:
        sample = self.next_batch(1)
        return Sample(sample.value[0], 1.0)

    def antithetic(self) -> Sample[Path]:
        sample = self.antithetic_batch()
        return Sample(sample.value[0], 1.0)
