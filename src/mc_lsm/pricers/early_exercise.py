"""
Early-exercise Monte Carlo engine (Longstaff-Schwartz).

Every `calculate()` call runs one calibration pass on its own stream
partition, freezes the regression coefficients, then prices fresh paths
with the adaptive driver.
"""

import logging
import threading
from dataclasses import dataclass, field

import numpy as np

from mc_lsm.analytics.black import black_formula
from mc_lsm.config import SimulationConfig
from mc_lsm.errors import ConfigurationError
from mc_lsm.models.discount import DiscountCurve
from mc_lsm.models.process import StochasticProcess
from mc_lsm.paths.path import PathSet
from mc_lsm.paths.time_grid import TimeGrid
from mc_lsm.payoffs.exercise import Exercise
from mc_lsm.payoffs.plain_vanilla import PlainVanillaPayoff
from mc_lsm.pricers.basis import BasisSystem
from mc_lsm.pricers.engine import CALIBRATION_STREAM, PRICING_STREAM, build_path_generator
from mc_lsm.pricers.lsm import EarlyExerciseValue, LongstaffSchwartzPathPricer
from mc_lsm.pricers.monte_carlo import MonteCarloModel, PricingResult
from mc_lsm.pricers.path_pricer import EuropeanPathPricer
from mc_lsm.pricers.simulation import AdaptiveSimulationDriver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, repr=False)
class EarlyExercisePricingResult(PricingResult):
    """
    Pricing result of the early-exercise engine.

    Extends PricingResult with the simulation and calibration settings.
    """

    n_steps: int = 0
    n_calibration_samples: int = 0
    basis: str = "monomial"
    n_exercise_dates: int = 0
    skipped_dates: tuple[float, ...] = field(default_factory=tuple)

    def _fields(self) -> list[str]:
        return super()._fields() + [
            f"  n_steps={self.n_steps}",
            f"  n_calibration_samples={self.n_calibration_samples}",
            f"  basis='{self.basis}'",
            f"  n_exercise_dates={self.n_exercise_dates}",
            f"  skipped_dates={list(self.skipped_dates)}",
        ]


class EarlyExerciseEngine:
    """
    Longstaff-Schwartz engine for American, Bermudan and European exercise.

    Parameters
    ----------
    process : StochasticProcess
        Process of the underlying(s)
    payoff : callable
        Payoff on the state at an exercise date
    exercise : Exercise
        Exercise schedule
    config : SimulationConfig
        Simulation settings
    discount : DiscountCurve, optional
        Discount curve (default: the process's risk-free curve)
    min_itm_paths : int, optional
        Fewest in-the-money calibration paths needed to regress at a date
    cancel_event : threading.Event, optional
        Cooperative cancellation token for the pricing phase
    """

    def __init__(
        self,
        process: StochasticProcess,
        payoff,
        exercise: Exercise,
        config: SimulationConfig,
        discount: DiscountCurve | None = None,
        min_itm_paths: int | None = None,
        cancel_event: threading.Event | None = None
    ):
        if discount is None:
            discount = getattr(process, "risk_free_rate", None)
            if discount is None:
                raise ConfigurationError("no discount curve given and process has none")
        if config.control_variate and not (
            hasattr(process, "forward") and isinstance(payoff, PlainVanillaPayoff)
        ):
            raise ConfigurationError(
                "control variate needs a plain vanilla payoff on a single-factor process"
            )

        self.process = process
        self.payoff = payoff
        self.exercise = exercise
        self.config = config
        self.discount = discount
        self.min_itm_paths = min_itm_paths
        self.cancel_event = cancel_event

    def time_grid(self) -> TimeGrid:
        """Grid with every exercise date as a node."""
        steps = self.config.n_steps(self.exercise.last_date)
        return TimeGrid.from_mandatory(self.exercise.mandatory_times(), steps)

    def _calibration_paths(self, grid: TimeGrid) -> PathSet:
        config = self.config
        generator = build_path_generator(self.process, grid, config, CALIBRATION_STREAM)
        paths = generator.next_batch(config.n_calibration_samples).value
        if config.antithetic_variate:
            twins = generator.antithetic_batch().value
            paths = paths.with_values(np.concatenate([paths.values, twins.values]))
        return paths

    def _control_variate(self, maturity: float) -> tuple[EuropeanPathPricer, float]:
        discount = float(self.discount.discount(maturity))
        pricer = EuropeanPathPricer(self.payoff, discount)
        value = black_formula(
            self.payoff.option_type,
            self.payoff.strike,
            self.process.forward(maturity),
            self.process.std_dev(maturity),
            discount,
        )
        return pricer, value

    def calculate(self) -> EarlyExercisePricingResult:
        """
        Calibrate, then price.

        Returns
        -------
        EarlyExercisePricingResult
            Value, error estimate and sample count with the run settings

        Raises
        ------
        ConfigurationError
            On inconsistent settings
        ConvergenceError
            If max_samples is reached before the tolerance
        """
        config = self.config
        grid = self.time_grid()
        exercise_indices = self.exercise.exercise_indices(grid)

        basis = BasisSystem(self.process.factors, config.polynom_order, config.basis)
        exercise_value = EarlyExerciseValue(self.payoff, basis)
        raw_pricer = LongstaffSchwartzPathPricer(
            exercise_value, grid, exercise_indices, self.discount,
            min_itm_paths=self.min_itm_paths,
        )

        calibration_paths = self._calibration_paths(grid)
        pricer = raw_pricer.calibrate(calibration_paths)
        del calibration_paths

        control_pricer, control_value = None, None
        if config.control_variate:
            control_pricer, control_value = self._control_variate(grid.last)

        model = MonteCarloModel(
            build_path_generator(self.process, grid, config, PRICING_STREAM),
            pricer,
            antithetic_variate=config.antithetic_variate,
            control_pricer=control_pricer,
            control_value=control_value,
        )
        driver = AdaptiveSimulationDriver(
            model, min_samples=config.min_samples, cancel_event=self.cancel_event
        )
        result = driver.run(config)

        value = result.value
        if config.control_variate:
            value = max(value, 0.0)

        skipped = tuple(float(grid[i]) for i in pricer.coefficients.skipped_indices)
        logger.info(
            f"early-exercise value {value:.6f} from {result.sample_count} samples "
            f"({len(exercise_indices)} exercise dates, {len(skipped)} skipped)"
        )
        return EarlyExercisePricingResult(
            value=value,
            error_estimate=result.error_estimate,
            sample_count=result.sample_count,
            n_steps=grid.steps,
            n_calibration_samples=config.n_calibration_samples,
            basis=config.basis,
            n_exercise_dates=len(exercise_indices),
            skipped_dates=skipped,
        )
