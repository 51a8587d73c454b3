#!/usr/bin/env python
"""
Command-line interface for adaptive Monte Carlo and early-exercise pricing.

This module provides the main CLI entrypoint for the mc-lsm command.

Example usage:
    mc-lsm --S0 36 --K 40 --r 0.06 --sigma 0.2 --T 1.0 --option_type put --style american
    mc-lsm --S0 100 --K 100 --r 0.05 --sigma 0.2 --T 1.0 --tolerance 0.02 --antithetic
    mc-lsm --S0 100 --K 100 --r 0.05 --sigma 0.2 --T 1.0 --style bermudan \
        --exercise_times 0.25 0.5 0.75 1.0
"""

import argparse
import logging
import sys

from mc_lsm.analytics.black import bs_price
from mc_lsm.config import BASIS_FAMILIES, SimulationConfig
from mc_lsm.errors import MCPricingError
from mc_lsm.models.gbm import GeometricBrownianMotion
from mc_lsm.payoffs.exercise import AmericanExercise, BermudanExercise, EuropeanExercise
from mc_lsm.payoffs.plain_vanilla import PlainVanillaPayoff
from mc_lsm.pricers.early_exercise import EarlyExerciseEngine

DEFAULT_SAMPLES = 100000
DEFAULT_TIME_STEPS = 50


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Adaptive Monte Carlo and Longstaff-Schwartz option pricing",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Market parameters
    parser.add_argument("--S0", type=float, required=True, help="Initial spot price")
    parser.add_argument("--K", type=float, required=True, help="Strike price")
    parser.add_argument("--r", type=float, required=True, help="Risk-free rate")
    parser.add_argument("--q", type=float, default=0.0, help="Continuous dividend yield")
    parser.add_argument("--sigma", type=float, required=True, help="Volatility")
    parser.add_argument("--T", type=float, required=True, help="Time to maturity (years)")

    # Option parameters
    parser.add_argument(
        "--option_type",
        type=str,
        choices=["call", "put"],
        default="call",
        help="Option type: call or put",
    )
    parser.add_argument(
        "--style",
        type=str,
        choices=["european", "american", "bermudan"],
        default="european",
        help="Exercise style",
    )
    parser.add_argument(
        "--exercise_times",
        type=float,
        nargs="+",
        default=None,
        help="Exercise times in years (required for bermudan style)",
    )

    # Time grid
    steps = parser.add_mutually_exclusive_group()
    steps.add_argument(
        "--time_steps",
        type=int,
        default=None,
        help=f"Number of time steps (default: {DEFAULT_TIME_STEPS})",
    )
    steps.add_argument(
        "--time_steps_per_year",
        type=int,
        default=None,
        help="Number of time steps per year of maturity",
    )

    # Sampling
    sampling = parser.add_mutually_exclusive_group()
    sampling.add_argument(
        "--samples",
        type=int,
        default=None,
        help=f"Exact number of samples (default: {DEFAULT_SAMPLES})",
    )
    sampling.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Target error estimate; samples grow until it is reached",
    )
    parser.add_argument(
        "--max_samples",
        type=int,
        default=None,
        help="Sample budget in tolerance mode",
    )
    parser.add_argument(
        "--calibration_samples",
        type=int,
        default=2048,
        help="Paths used for the regression calibration",
    )

    # Regression
    parser.add_argument(
        "--basis",
        type=str,
        choices=list(BASIS_FAMILIES),
        default="monomial",
        help="Regression basis family",
    )
    parser.add_argument("--order", type=int, default=2, help="Regression polynomial order")

    # Variance reduction and random numbers
    parser.add_argument(
        "--antithetic",
        action="store_true",
        help="Use antithetic variates for variance reduction",
    )
    parser.add_argument(
        "--control_variate",
        action="store_true",
        help="Use the European option as control variate",
    )
    parser.add_argument(
        "--brownian_bridge",
        action="store_true",
        help="Build paths with a Brownian bridge",
    )
    parser.add_argument(
        "--rng",
        type=str,
        choices=["pseudo", "sobol"],
        default="pseudo",
        help="RNG type: pseudo (pseudo-random) or sobol (Quasi-Monte Carlo)",
    )
    parser.add_argument(
        "--scramble",
        action="store_true",
        help="Use digital shift scrambling for Sobol sequences (QMC only)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed")

    # Output
    parser.add_argument(
        "--bs",
        action="store_true",
        help="Display the Black-Scholes European reference price",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level",
    )

    return parser.parse_args(args)


def _exercise(parsed: argparse.Namespace):
    if parsed.style == "american":
        return AmericanExercise(parsed.T)
    if parsed.style == "bermudan":
        return BermudanExercise(parsed.exercise_times)
    return EuropeanExercise(parsed.T)


def main(args: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    int
        Exit code (0 for success, 1 for configuration or convergence errors).
    """
    parsed = parse_args(args)
    logging.basicConfig(
        level=getattr(logging, parsed.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if parsed.style == "bermudan" and not parsed.exercise_times:
        print("Error: --exercise_times is required for bermudan options")
        return 1

    samples = parsed.samples
    if samples is None and parsed.tolerance is None:
        samples = DEFAULT_SAMPLES
    time_steps = parsed.time_steps
    if time_steps is None and parsed.time_steps_per_year is None:
        time_steps = DEFAULT_TIME_STEPS

    try:
        config = SimulationConfig(
            time_steps=time_steps,
            time_steps_per_year=parsed.time_steps_per_year,
            required_samples=samples,
            required_tolerance=parsed.tolerance,
            max_samples=parsed.max_samples,
            antithetic_variate=parsed.antithetic,
            control_variate=parsed.control_variate,
            seed=parsed.seed,
            n_calibration_samples=parsed.calibration_samples,
            polynom_order=parsed.order,
            basis=parsed.basis,
            brownian_bridge=parsed.brownian_bridge,
            rng_type=parsed.rng,
            scramble=parsed.scramble,
        )
        process = GeometricBrownianMotion(
            S0=parsed.S0, r=parsed.r, sigma=parsed.sigma, q=parsed.q
        )
        payoff = PlainVanillaPayoff(parsed.option_type, parsed.K)
        exercise = _exercise(parsed)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    # Print input parameters
    print("=" * 70)
    print("Adaptive Monte Carlo / Longstaff-Schwartz Pricing")
    print("=" * 70)
    print("\nInput Parameters:")
    print(f"  Spot Price (S0):        {parsed.S0:,.2f}")
    print(f"  Strike Price (K):       {parsed.K:,.2f}")
    print(f"  Risk-free Rate (r):     {parsed.r:.4f}")
    print(f"  Dividend Yield (q):     {parsed.q:.4f}")
    print(f"  Volatility (σ):         {parsed.sigma:.4f}")
    print(f"  Time to Maturity (T):   {parsed.T:.4f} years")
    print(f"  Option Type:            {parsed.option_type.upper()}")
    print(f"  Option Style:           {parsed.style.upper()}")
    if parsed.style == "bermudan":
        print(f"  Exercise Times:         {parsed.exercise_times}")
    print("\nSimulation Parameters:")
    if config.required_tolerance is not None:
        print(f"  Tolerance:              {config.required_tolerance:g}")
        if config.max_samples is not None:
            print(f"  Max Samples:            {config.max_samples:,}")
    else:
        print(f"  Samples:                {config.required_samples:,}")
    print(f"  Time Steps:             {config.n_steps(exercise.last_date)}")
    print(f"  Calibration Samples:    {config.n_calibration_samples:,}")
    print(f"  Regression Basis:       {config.basis} (order {config.polynom_order})")
    print(f"  Antithetic Variates:    {config.antithetic_variate}")
    print(f"  Control Variate:        {config.control_variate}")
    print(f"  Brownian Bridge:        {config.brownian_bridge}")
    print(f"  Random Seed:            {config.seed}")
    print(f"  RNG Type:               {config.rng_type.upper()}")
    if config.rng_type == "sobol":
        print(f"  Scrambling:             {config.scramble}")

    print("\n" + "=" * 70)
    print("Pricing...")
    print("=" * 70)

    try:
        engine = EarlyExerciseEngine(process, payoff, exercise, config)
        result = engine.calculate()
    except (MCPricingError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print("\nResults:")
    print(f"  Option Price:           {result.value:.6f}")
    if result.error_estimate is not None:
        print(f"  Error Estimate:         {result.error_estimate:.6f}")
        print(f"  95% Confidence Interval: [{result.ci_lower:.6f}, {result.ci_upper:.6f}]")
    else:
        print("  Error Estimate:         n/a (quasi-random sequence)")
    print(f"  Samples Used:           {result.sample_count:,}")
    print(f"  Exercise Dates:         {result.n_exercise_dates}")
    if result.skipped_dates:
        print(f"  Skipped Dates:          {len(result.skipped_dates)}")

    if parsed.bs:
        bs_value = bs_price(
            parsed.S0, parsed.K, parsed.r, parsed.T, parsed.sigma, parsed.option_type, q=parsed.q
        )
        print("\nBlack-Scholes European Reference:")
        print(f"  Price:                  {bs_value:.6f}")
        print(f"  Difference:             {result.value - bs_value:.6f}")
        if parsed.style != "european":
            print(f"  Early Exercise Premium: {result.value - bs_value:.6f}")

    print("\n" + "=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
