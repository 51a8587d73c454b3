"""
Monte Carlo engine for contracts without early exercise.
"""

import logging

from mc_lsm.config import SimulationConfig
from mc_lsm.errors import ConfigurationError
from mc_lsm.models.process import StochasticProcess
from mc_lsm.paths.generator import PathGenerator
from mc_lsm.paths.time_grid import TimeGrid
from mc_lsm.pricers.monte_carlo import MonteCarloModel, PricingResult
from mc_lsm.pricers.path_pricer import PathPricer
from mc_lsm.pricers.simulation import AdaptiveSimulationDriver
from mc_lsm.rng.sequence import make_sequence_generator

logger = logging.getLogger(__name__)

CALIBRATION_STREAM = 0
PRICING_STREAM = 1


def build_path_generator(
    process: StochasticProcess,
    grid: TimeGrid,
    config: SimulationConfig,
    stream: int
) -> PathGenerator:
    """Path generator on stream partition `stream` of the configured seed."""
    generator = make_sequence_generator(
        config.rng_type,
        dimension=process.factors * grid.steps,
        seed=config.seed,
        stream=stream,
        scramble=config.scramble,
    )
    return PathGenerator(process, grid, generator, brownian_bridge=config.brownian_bridge)


class MonteCarloEngine:
    """
    Prices a path pricer with the adaptive driver on a uniform grid.

    Parameters
    ----------
    process : StochasticProcess
        Process of the underlying(s)
    path_pricer : PathPricer
        Maps paths to discounted values
    expiry : float
        Maturity in years
    config : SimulationConfig
        Simulation settings
    control_pricer : PathPricer, optional
        Control variate pricer (used when config.control_variate is set)
    control_value : float, optional
        Known value of the control variate
    """

    def __init__(
        self,
        process: StochasticProcess,
        path_pricer: PathPricer,
        expiry: float,
        config: SimulationConfig,
        control_pricer: PathPricer | None = None,
        control_value: float | None = None
    ):
        if expiry <= 0:
            raise ValueError("expiry must be positive")
        if config.control_variate and (control_pricer is None or control_value is None):
            raise ConfigurationError(
                "control variate requested but no control pricer and value given"
            )

        self.process = process
        self.path_pricer = path_pricer
        self.expiry = expiry
        self.config = config
        self.control_pricer = control_pricer
        self.control_value = control_value

    def time_grid(self) -> TimeGrid:
        return TimeGrid.uniform(self.expiry, self.config.n_steps(self.expiry))

    def calculate(self) -> PricingResult:
        config = self.config
        path_generator = build_path_generator(
            self.process, self.time_grid(), config, PRICING_STREAM
        )
        use_control = config.control_variate
        model = MonteCarloModel(
            path_generator,
            self.path_pricer,
            antithetic_variate=config.antithetic_variate,
            control_pricer=self.control_pricer if use_control else None,
            control_value=self.control_value if use_control else None,
        )
        driver = AdaptiveSimulationDriver(model, min_samples=config.min_samples)
        result = driver.run(config)
        logger.info(f"Monte Carlo value {result.value:.6f} from {result.sample_count} samples")
        return result
