"""
Random sequence generation for Monte Carlo and quasi-Monte Carlo paths.
"""

from mc_lsm.rng.sequence import (
    PseudoRandomSequenceGenerator,
    SequenceGenerator,
    SobolSequenceGenerator,
    make_sequence_generator,
)
from mc_lsm.rng.sobol import SobolGenerator, inverse_normal_cdf

__all__ = [
    "PseudoRandomSequenceGenerator",
    "SequenceGenerator",
    "SobolGenerator",
    "SobolSequenceGenerator",
    "inverse_normal_cdf",
    "make_sequence_generator",
]
