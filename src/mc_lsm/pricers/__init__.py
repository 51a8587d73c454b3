"""
Pricers package initialization.
"""

from mc_lsm.pricers.basis import BasisSystem, basis_functions
from mc_lsm.pricers.early_exercise import EarlyExerciseEngine, EarlyExercisePricingResult
from mc_lsm.pricers.engine import MonteCarloEngine
from mc_lsm.pricers.lsm import (
    CalibratedLongstaffSchwartzPathPricer,
    EarlyExerciseValue,
    LongstaffSchwartzPathPricer,
    RegressionCalibrator,
    RegressionCoefficients,
)
from mc_lsm.pricers.monte_carlo import MonteCarloModel, PricingResult
from mc_lsm.pricers.parallel import add_samples_sharded
from mc_lsm.pricers.path_pricer import (
    EuropeanPathPricer,
    PathDependentPathPricer,
    PathPricer,
)
from mc_lsm.pricers.simulation import AdaptiveSimulationDriver, SimulationState

__all__ = [
    "AdaptiveSimulationDriver",
    "BasisSystem",
    "CalibratedLongstaffSchwartzPathPricer",
    "EarlyExerciseEngine",
    "EarlyExercisePricingResult",
    "EarlyExerciseValue",
    "EuropeanPathPricer",
    "LongstaffSchwartzPathPricer",
    "MonteCarloEngine",
    "MonteCarloModel",
    "PathDependentPathPricer",
    "PathPricer",
    "PricingResult",
    "RegressionCalibrator",
    "RegressionCoefficients",
    "SimulationState",
    "add_samples_sharded",
    "basis_functions",
]
