"""
Frozen configuration for Monte Carlo engines.

A configuration is validated once, before any path is simulated, and is
immutable afterwards so that repeated calculate() calls are reproducible.
"""

from dataclasses import dataclass
from typing import Literal

from mc_lsm.errors import ConfigurationError

DEFAULT_CALIBRATION_SAMPLES = 2048
DEFAULT_MIN_SAMPLES = 1023

BASIS_FAMILIES = ("monomial", "laguerre", "hermite", "legendre", "chebyshev")


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable simulation settings shared by the Monte Carlo engines.

    Attributes
    ----------
    time_steps : int | None
        Number of time steps on the simulation grid
    time_steps_per_year : int | None
        Steps per year of maturity (mutually exclusive with time_steps)
    required_samples : int | None
        Exact number of samples to draw
    required_tolerance : float | None
        Absolute tolerance on the error estimate (mutually exclusive with
        required_samples)
    max_samples : int | None
        Sample budget in tolerance mode (None means unbounded)
    antithetic_variate : bool
        Pair every path with the path built from negated variates
    control_variate : bool
        Correct samples with the European option on the same path
    seed : int
        Seed of the random sequence; stream partitions are derived from it
    n_calibration_samples : int
        Paths used once for the regression calibration
    min_samples : int
        Seeding floor of the adaptive driver
    polynom_order : int
        Order of the regression basis
    basis : str
        Regression basis family
    brownian_bridge : bool
        Build paths with a Brownian bridge
    rng_type : {"pseudo", "sobol"}
        Random sequence family
    scramble : bool
        Digital shift scrambling (Sobol only)
    """

    time_steps: int | None = None
    time_steps_per_year: int | None = None
    required_samples: int | None = None
    required_tolerance: float | None = None
    max_samples: int | None = None
    antithetic_variate: bool = False
    control_variate: bool = False
    seed: int = 42
    n_calibration_samples: int = DEFAULT_CALIBRATION_SAMPLES
    min_samples: int = DEFAULT_MIN_SAMPLES
    polynom_order: int = 2
    basis: str = "monomial"
    brownian_bridge: bool = False
    rng_type: Literal["pseudo", "sobol"] = "pseudo"
    scramble: bool = False

    def __post_init__(self) -> None:
        """Validate the configuration; raise ConfigurationError on conflicts."""
        if self.time_steps is None and self.time_steps_per_year is None:
            raise ConfigurationError("no time steps provided")
        if self.time_steps is not None and self.time_steps_per_year is not None:
            raise ConfigurationError("both time steps and time steps per year were provided")
        if self.time_steps is not None and self.time_steps <= 0:
            raise ConfigurationError(
                f"timeSteps must be positive, {self.time_steps} not allowed"
            )
        if self.time_steps_per_year is not None and self.time_steps_per_year <= 0:
            raise ConfigurationError(
                f"timeStepsPerYear must be positive, {self.time_steps_per_year} not allowed"
            )

        if self.required_samples is None and self.required_tolerance is None:
            raise ConfigurationError("neither tolerance nor number of samples set")
        if self.required_samples is not None and self.required_tolerance is not None:
            raise ConfigurationError("both tolerance and number of samples set")
        if self.required_samples is not None and self.required_samples <= 0:
            raise ConfigurationError("required_samples must be positive")
        if self.required_tolerance is not None and self.required_tolerance <= 0:
            raise ConfigurationError("required_tolerance must be positive")

        if self.max_samples is not None and self.max_samples <= 0:
            raise ConfigurationError("max_samples must be positive")
        if self.n_calibration_samples <= 0:
            raise ConfigurationError("n_calibration_samples must be positive")
        if self.min_samples < 2:
            raise ConfigurationError("min_samples must be at least 2")
        if (
            self.required_tolerance is not None
            and self.max_samples is not None
            and self.max_samples < self.min_samples
        ):
            raise ConfigurationError(
                f"max_samples ({self.max_samples}) is below the seeding floor ({self.min_samples})"
            )
        if self.polynom_order < 0:
            raise ConfigurationError("polynom_order must be non-negative")
        if self.basis not in BASIS_FAMILIES:
            raise ConfigurationError(
                f"basis must be one of {', '.join(BASIS_FAMILIES)}, got {self.basis!r}"
            )
        if self.rng_type not in ("pseudo", "sobol"):
            raise ConfigurationError("rng_type must be 'pseudo' or 'sobol'")
        if self.rng_type == "sobol" and self.required_tolerance is not None:
            raise ConfigurationError(
                "chosen random generator policy does not allow an error estimate"
            )

    def n_steps(self, maturity: float) -> int:
        """Number of grid steps for a contract maturing at `maturity` years."""
        if self.time_steps is not None:
            return self.time_steps
        return max(int(self.time_steps_per_year * maturity), 1)
