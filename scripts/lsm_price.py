#!/usr/bin/env python
"""
Command-line interface for adaptive Monte Carlo and Longstaff-Schwartz pricing.

This is a thin wrapper around mc_lsm.cli for running from a checkout.
Prefer using the installed 'mc-lsm' command or 'python -m mc_lsm.cli'.

Example usage:
    mc-lsm --S0 36 --K 40 --r 0.06 --sigma 0.2 --T 1.0 --option_type put --style american
    python scripts/lsm_price.py --S0 100 --K 100 --r 0.05 --sigma 0.2 --T 1.0 \
        --tolerance 0.01 --antithetic --option_type put
"""

import sys
from pathlib import Path

# Add parent directory to path to allow running without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mc_lsm.cli import main

if __name__ == "__main__":
    sys.exit(main())
