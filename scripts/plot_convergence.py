#!/usr/bin/env python
"""
Convergence analysis visualization.

Plots the error estimate against the number of samples on log-log axes for
different variance reduction methods, demonstrating O(1/√n) convergence.
Requires the 'plot' extra (matplotlib).
"""

import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mc_lsm.config import SimulationConfig
from mc_lsm.models.gbm import GeometricBrownianMotion
from mc_lsm.payoffs.exercise import AmericanExercise
from mc_lsm.payoffs.plain_vanilla import VanillaPutPayoff
from mc_lsm.pricers.early_exercise import EarlyExerciseEngine


def main():
    """Generate convergence plot for variance reduction methods."""
    # Fixed parameters
    S0 = 36.0
    K = 40.0
    r = 0.06
    sigma = 0.2
    T = 1.0

    # Convergence study parameters
    samples_grid = [1000, 2000, 5000, 10000, 20000, 50000]
    seeds = range(5)  # Use seeds 0-4 for averaging

    # Methods to compare
    methods = [
        ("Plain MC", False, False, "o-"),
        ("Antithetic", True, False, "s-"),
        ("Control Variate", False, True, "^-"),
        ("Antithetic + Control Variate", True, True, "d-"),
    ]

    process = GeometricBrownianMotion(S0=S0, r=r, sigma=sigma)
    payoff = VanillaPutPayoff(strike=K)
    exercise = AmericanExercise(T)

    print("=" * 80)
    print("Longstaff-Schwartz Convergence Analysis")
    print("=" * 80)
    print(f"\nParameters: S0={S0}, K={K}, r={r}, sigma={sigma}, T={T}")
    print(f"Seeds: {min(seeds)} to {max(seeds)}")
    print(f"samples grid: {samples_grid}\n")
    print("Running simulations...")

    # Store results for plotting
    results = {}

    for method_name, antithetic, control_variate, _ in methods:
        print(f"  {method_name}...")
        mean_errors = []

        for samples in samples_grid:
            errors = []

            for seed in seeds:
                config = SimulationConfig(
                    time_steps=50,
                    required_samples=samples,
                    antithetic_variate=antithetic,
                    control_variate=control_variate,
                    seed=seed,
                )
                result = EarlyExerciseEngine(process, payoff, exercise, config).calculate()
                errors.append(result.error_estimate)

            mean_errors.append(np.mean(errors))

        results[method_name] = mean_errors

    print("\nGenerating plot...")

    plt.figure(figsize=(10, 7))

    for method_name, _, _, marker in methods:
        plt.loglog(samples_grid, results[method_name], marker, label=method_name,
                   linewidth=2, markersize=8)

    # Add theoretical O(1/√n) reference line
    n_ref = np.array([samples_grid[0], samples_grid[-1]])
    error_ref = results["Plain MC"][0] * np.sqrt(samples_grid[0] / n_ref)
    plt.loglog(n_ref, error_ref, "k--", alpha=0.5, linewidth=1.5, label="O(1/√n) reference")

    plt.xlabel("Number of Samples", fontsize=12)
    plt.ylabel("Error Estimate", fontsize=12)
    plt.title("American Put Convergence (Error Estimate vs Samples)", fontsize=14,
              fontweight="bold")
    plt.legend(fontsize=10, loc="upper right")
    plt.grid(True, alpha=0.3, which="both", linestyle=":")
    plt.tight_layout()

    # Create plots directory if it doesn't exist
    plots_dir = Path(__file__).parent.parent / "plots"
    plots_dir.mkdir(exist_ok=True)

    output_path = plots_dir / "convergence_error.png"
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    print(f"\nPlot saved to: {output_path}")

    plt.show()

    print("\n" + "=" * 80)
    print("Observations:")
    print("  • All methods follow O(1/√n) convergence rate (parallel to reference line)")
    print("  • The European control variate gives the lowest error estimates")
    print("=" * 80)


if __name__ == "__main__":
    main()
