"""
Time grids, paths and path generation.
"""

from mc_lsm.paths.brownian_bridge import BrownianBridge
from mc_lsm.paths.generator import PathGenerator
from mc_lsm.paths.path import Path, PathSet, Sample
from mc_lsm.paths.time_grid import TimeGrid

__all__ = [
    "BrownianBridge",
    "Path",
    "PathGenerator",
    "PathSet",
    "Sample",
    "TimeGrid",
]
