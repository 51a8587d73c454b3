"""
Adaptive Monte Carlo and Longstaff-Schwartz Early-Exercise Pricing

Simulation engines that grow the sample count until a target accuracy is
reached, and price American and Bermudan contracts by least-squares
regression of continuation values.
"""

from mc_lsm._version import __version__

# Configuration and errors
from mc_lsm.config import SimulationConfig
from mc_lsm.errors import (
    ConfigurationError,
    ConvergenceError,
    InsufficientSamplesError,
    MCPricingError,
    NumericalInvariantError,
    SimulationCancelledError,
)

# Models and paths
from mc_lsm.models.gbm import GeometricBrownianMotion
from mc_lsm.models.multi_gbm import MultiAssetGeometricBrownianMotion
from mc_lsm.paths.generator import PathGenerator
from mc_lsm.paths.time_grid import TimeGrid
from mc_lsm.stats.running import RunningStatistics

# Payoffs
from mc_lsm.payoffs.exercise import AmericanExercise, BermudanExercise, EuropeanExercise
from mc_lsm.payoffs.plain_vanilla import VanillaCallPayoff, VanillaPutPayoff

# Pricers
from mc_lsm.pricers.early_exercise import EarlyExerciseEngine, EarlyExercisePricingResult
from mc_lsm.pricers.engine import MonteCarloEngine
from mc_lsm.pricers.monte_carlo import MonteCarloModel, PricingResult
from mc_lsm.pricers.simulation import AdaptiveSimulationDriver

# Analytics
from mc_lsm.analytics.black import black_formula, bs_price

__all__ = [
    # Version
    "__version__",
    # Configuration
    "SimulationConfig",
    # Errors
    "ConfigurationError",
    "ConvergenceError",
    "InsufficientSamplesError",
    "MCPricingError",
    "NumericalInvariantError",
    "SimulationCancelledError",
    # Models
    "GeometricBrownianMotion",
    "MultiAssetGeometricBrownianMotion",
    "PathGenerator",
    "TimeGrid",
    "RunningStatistics",
    # Payoffs
    "VanillaCallPayoff",
    "VanillaPutPayoff",
    "EuropeanExercise",
    "AmericanExercise",
    "BermudanExercise",
    # Pricers
    "AdaptiveSimulationDriver",
    "EarlyExerciseEngine",
    "EarlyExercisePricingResult",
    "MonteCarloEngine",
    "MonteCarloModel",
    "PricingResult",
    # Analytics
    "black_formula",
    "bs_price",
]
