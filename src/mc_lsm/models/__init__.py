"""
Models package initialization.
"""

from mc_lsm.models.discount import DiscountCurve, FlatForward
from mc_lsm.models.gbm import GeometricBrownianMotion
from mc_lsm.models.multi_gbm import MultiAssetGeometricBrownianMotion
from mc_lsm.models.process import StochasticProcess

__all__ = [
    "DiscountCurve",
    "FlatForward",
    "GeometricBrownianMotion",
    "MultiAssetGeometricBrownianMotion",
    "StochasticProcess",
]
