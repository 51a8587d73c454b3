"""
Adaptive Monte Carlo driver.

Grows the number of samples until the error estimate reaches a tolerance,
or draws an exact number of samples for reproducible benchmarking.

The growth rule uses the 1/sqrt(n) scaling of the standard error: with
current error e after n samples and tolerance tol, roughly
n * (e / tol)**2 samples are needed, so the next batch is
max(int(0.8 * n * (e / tol)**2 - n), min_samples).
"""

import logging
import threading
from enum import Enum

from mc_lsm.config import DEFAULT_MIN_SAMPLES, SimulationConfig
from mc_lsm.errors import ConfigurationError, ConvergenceError, SimulationCancelledError
from mc_lsm.pricers.monte_carlo import MonteCarloModel, PricingResult

logger = logging.getLogger(__name__)

GROWTH_DAMPING = 0.8


class SimulationState(Enum):
    """Phases of the adaptive driver."""

    IDLE = "idle"
    SEEDING = "seeding"
    GROWING = "growing"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


class AdaptiveSimulationDriver:
    """
    Convergence control loop around a MonteCarloModel.

    Parameters
    ----------
    model : MonteCarloModel
        Model whose accumulator the driver fills; owned by this driver
    min_samples : int, optional
        Seeding floor and smallest growth batch (default: 1023)
    cancel_event : threading.Event, optional
        Cooperative cancellation token, checked between batches
    """

    def __init__(
        self,
        model: MonteCarloModel,
        min_samples: int = DEFAULT_MIN_SAMPLES,
        cancel_event: threading.Event | None = None
    ):
        if min_samples < 2:
            raise ConfigurationError("min_samples must be at least 2")
        self.model = model
        self.min_samples = min_samples
        self.cancel_event = cancel_event
        self.state = SimulationState.IDLE

    @property
    def sample_count(self) -> int:
        return self.model.sample_count

    def _draw(self, n: int) -> None:
        remaining = n
        while remaining > 0:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise SimulationCancelledError(
                    f"simulation cancelled after {self.sample_count} samples"
                )
            size = min(remaining, self.model.batch_size)
            self.model.add_samples(size)
            remaining -= size

    def value(self, tolerance: float, max_samples: int | None = None) -> float:
        """
        Simulate until the error estimate is at or below `tolerance`.

        Parameters
        ----------
        tolerance : float
            Absolute tolerance on the error estimate (> 0)
        max_samples : int, optional
            Sample budget (default: unbounded)

        Returns
        -------
        float
            Mean of the accumulated samples

        Raises
        ------
        ConfigurationError
            If the tolerance is not positive, the generator gives no error
            estimate, or max_samples is below the seeding floor
        ConvergenceError
            If max_samples is reached while the error is above tolerance
        """
        if tolerance <= 0:
            raise ConfigurationError(f"tolerance must be positive, got {tolerance}")
        if not self.model.allows_error_estimate:
            raise ConfigurationError(
                "chosen random generator policy does not allow an error estimate"
            )
        if max_samples is not None and max_samples < self.min_samples:
            raise ConfigurationError(
                f"max_samples ({max_samples}) is below the seeding floor ({self.min_samples})"
            )

        statistics = self.model.statistics

        self.state = SimulationState.SEEDING
        n = self.sample_count
        if n < self.min_samples:
            self._draw(self.min_samples - n)

        self.state = SimulationState.GROWING
        error = statistics.error_estimate()
        while error > tolerance:
            n = self.sample_count
            if max_samples is not None and n >= max_samples:
                self.state = SimulationState.EXHAUSTED
                raise ConvergenceError(error, tolerance, n, max_samples)

            order = error * error / (tolerance * tolerance)
            next_batch = max(int(GROWTH_DAMPING * n * order - n), self.min_samples)
            if max_samples is not None:
                next_batch = min(next_batch, max_samples - n)

            logger.debug(f"error {error:.6g} > tolerance {tolerance:.6g} after {n} samples, "
                         f"drawing {next_batch} more")
            self._draw(next_batch)
            error = statistics.error_estimate()

        self.state = SimulationState.CONVERGED
        logger.info(f"converged to error {error:.6g} after {self.sample_count} samples")
        return statistics.mean()

    def value_with_samples(self, samples: int) -> float:
        """
        Draw exactly `samples` samples in total and return the mean.

        Raises
        ------
        ConfigurationError
            If more than `samples` samples were already drawn
        """
        n = self.sample_count
        if samples < n:
            raise ConfigurationError(
                f"number of already simulated samples ({n}) "
                f"greater than requested samples ({samples})"
            )
        self._draw(samples - n)
        self.state = SimulationState.CONVERGED
        return self.model.statistics.mean()

    def result(self) -> PricingResult:
        """Snapshot of the current estimate."""
        statistics = self.model.statistics
        error = None
        if self.model.allows_error_estimate and statistics.sample_count >= 2:
            error = statistics.error_estimate()
        return PricingResult(
            value=statistics.mean(),
            error_estimate=error,
            sample_count=statistics.sample_count,
        )

    def run(self, config: SimulationConfig) -> PricingResult:
        """Run in tolerance or fixed-sample mode, as configured."""
        if config.required_tolerance is not None:
            self.value(config.required_tolerance, config.max_samples)
        else:
            self.value_with_samples(config.required_samples)
        return self.result()
