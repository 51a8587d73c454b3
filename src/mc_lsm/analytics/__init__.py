"""
Analytical pricing formulas.
"""

from mc_lsm.analytics.black import black_formula, bs_price, norm_cdf

__all__ = ["black_formula", "bs_price", "norm_cdf"]
