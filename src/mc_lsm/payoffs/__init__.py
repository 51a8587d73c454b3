"""
Payoffs package initialization.
"""

from mc_lsm.payoffs.exercise import (
    AmericanExercise,
    BermudanExercise,
    EuropeanExercise,
    Exercise,
)
from mc_lsm.payoffs.multi_asset import BasketArithmeticCallPayoff, BasketArithmeticPutPayoff
from mc_lsm.payoffs.path_dependent import (
    AsianArithmeticCallPayoff,
    AsianArithmeticPutPayoff,
    BarrierPayoff,
    DownAndOutPutPayoff,
    PathDependentPayoff,
    UpAndOutCallPayoff,
    monitoring_indices,
)
from mc_lsm.payoffs.plain_vanilla import PlainVanillaPayoff, VanillaCallPayoff, VanillaPutPayoff

__all__ = [
    "PlainVanillaPayoff",
    "VanillaCallPayoff",
    "VanillaPutPayoff",
    "AsianArithmeticCallPayoff",
    "AsianArithmeticPutPayoff",
    "UpAndOutCallPayoff",
    "DownAndOutPutPayoff",
    "PathDependentPayoff",
    "BarrierPayoff",
    "monitoring_indices",
    "BasketArithmeticCallPayoff",
    "BasketArithmeticPutPayoff",
    "Exercise",
    "EuropeanExercise",
    "BermudanExercise",
    "AmericanExercise",
]
