"""
Monte Carlo model: couples a path generator, a path pricer and a running
statistics accumulator, with optional antithetic and control variates.
"""

from dataclasses import dataclass

import numpy as np

from mc_lsm.errors import ConfigurationError, NumericalInvariantError
from mc_lsm.paths.generator import PathGenerator
from mc_lsm.pricers.path_pricer import PathPricer
from mc_lsm.stats.running import RunningStatistics

Z_95 = 1.96
DEFAULT_BATCH_SIZE = 8192


@dataclass(frozen=True)
class PricingResult:
    """
    Container for Monte Carlo pricing results.

    Attributes
    ----------
    value : float
        Estimated value
    error_estimate : float | None
        Standard error of the estimate (None when the random sequence does
        not allow an error estimate)
    sample_count : int
        Number of samples drawn
    """

    value: float
    error_estimate: float | None
    sample_count: int

    @property
    def ci_lower(self) -> float | None:
        """Lower bound of the 95% confidence interval."""
        if self.error_estimate is None:
            return None
        return self.value - Z_95 * self.error_estimate

    @property
    def ci_upper(self) -> float | None:
        """Upper bound of the 95% confidence interval."""
        if self.error_estimate is None:
            return None
        return self.value + Z_95 * self.error_estimate

    def _fields(self) -> list[str]:
        lines = [f"  value={self.value:.6f}"]
        if self.error_estimate is not None:
            lines.append(f"  error_estimate={self.error_estimate:.6f}")
            lines.append(f"  CI95=[{self.ci_lower:.6f}, {self.ci_upper:.6f}]")
        else:
            lines.append("  error_estimate=None")
        lines.append(f"  sample_count={self.sample_count}")
        return lines

    def __repr__(self) -> str:
        return f"{type(self).__name__}(\n" + ",\n".join(self._fields()) + "\n)"


class MonteCarloModel:
    """
    Draws samples and folds their priced values into a statistics accumulator.

    Parameters
    ----------
    path_generator : PathGenerator
        Generator of the paths to price
    path_pricer : PathPricer
        Maps paths to discounted values
    statistics : RunningStatistics, optional
        Accumulator to fill (default: a fresh one, owned by this model)
    antithetic_variate : bool, optional
        Average every path with the path built from its negated variates
    control_pricer : PathPricer, optional
        Pricer of the control variate
    control_value : float, optional
        Known expectation of the control variate (required with control_pricer)
    control_generator : PathGenerator, optional
        Separate generator for the control paths (default: reuse the priced paths)
    batch_size : int, optional
        Largest number of paths simulated at once
    """

    def __init__(
        self,
        path_generator: PathGenerator,
        path_pricer: PathPricer,
        statistics: RunningStatistics | None = None,
        antithetic_variate: bool = False,
        control_pricer: PathPricer | None = None,
        control_value: float | None = None,
        control_generator: PathGenerator | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE
    ):
        if control_pricer is not None and control_value is None:
            raise ConfigurationError("control variate pricer given without its known value")
        if control_pricer is None and control_generator is not None:
            raise ConfigurationError("control variate generator given without a control pricer")
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        self.path_generator = path_generator
        self.path_pricer = path_pricer
        self.statistics = RunningStatistics() if statistics is None else statistics
        self.antithetic_variate = antithetic_variate
        self.control_pricer = control_pricer
        self.control_value = control_value
        self.control_generator = control_generator
        self.batch_size = batch_size

    @property
    def is_control_variate(self) -> bool:
        return self.control_pricer is not None

    @property
    def allows_error_estimate(self) -> bool:
        return self.path_generator.allows_error_estimate

    @property
    def sample_count(self) -> int:
        return self.statistics.sample_count

    def _corrected(self, paths, control_paths) -> np.ndarray:
        values = self.path_pricer(paths)
        if self.control_pricer is not None:
            control = self.control_pricer(paths if control_paths is None else control_paths)
            values = values - (control - self.control_value)
        return values

    def add_samples(self, n: int) -> None:
        """
        Draw `n` samples and add them to the statistics.

        Raises
        ------
        NumericalInvariantError
            If n is negative
        """
        if n < 0:
            raise NumericalInvariantError(f"negative sample count ({n}) requested")

        remaining = n
        while remaining > 0:
            size = min(remaining, self.batch_size)
            sample = self.path_generator.next_batch(size)
            control_paths = None
            if self.control_generator is not None:
                control_paths = self.control_generator.next_batch(size).value
            values = self._corrected(sample.value, control_paths)

            if self.antithetic_variate:
                twin = self.path_generator.antithetic_batch()
                twin_control = None
                if self.control_generator is not None:
                    twin_control = self.control_generator.antithetic_batch().value
                values = 0.5 * (values + self._corrected(twin.value, twin_control))

            self.statistics.add_batch(values, sample.weight)
            remaining -= size
