"""
Sample statistics.
"""

from mc_lsm.stats.running import RunningStatistics

__all__ = ["RunningStatistics"]
