"""Tests for simulation configuration validation."""

import dataclasses

import pytest

from mc_lsm.config import DEFAULT_MIN_SAMPLES, SimulationConfig
from mc_lsm.errors import ConfigurationError


class TestSimulationConfig:
    """Validation of SimulationConfig."""

    def test_defaults(self):
        config = SimulationConfig(time_steps=50, required_samples=10000)
        assert config.seed == 42
        assert config.min_samples == DEFAULT_MIN_SAMPLES
        assert config.basis == "monomial"
        assert config.rng_type == "pseudo"
        assert not config.antithetic_variate
        assert config.n_steps(3.0) == 50

    def test_frozen(self):
        config = SimulationConfig(time_steps=50, required_samples=10000)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.seed = 1

    def test_steps_per_year(self):
        config = SimulationConfig(time_steps_per_year=12, required_samples=100)
        assert config.n_steps(2.0) == 24
        assert config.n_steps(0.01) == 1

    def test_no_time_steps(self):
        with pytest.raises(ConfigurationError, match="no time steps provided"):
            SimulationConfig(required_samples=100)

    def test_both_time_step_settings(self):
        with pytest.raises(ConfigurationError, match="both time steps and time steps per year"):
            SimulationConfig(time_steps=10, time_steps_per_year=10, required_samples=100)

    def test_non_positive_time_steps(self):
        with pytest.raises(ConfigurationError, match="timeSteps must be positive, 0 not allowed"):
            SimulationConfig(time_steps=0, required_samples=100)

    def test_neither_samples_nor_tolerance(self):
        with pytest.raises(ConfigurationError, match="neither tolerance nor number of samples"):
            SimulationConfig(time_steps=10)

    def test_both_samples_and_tolerance(self):
        with pytest.raises(ConfigurationError, match="both tolerance and number of samples"):
            SimulationConfig(time_steps=10, required_samples=100, required_tolerance=0.01)

    def test_sobol_with_tolerance(self):
        with pytest.raises(ConfigurationError, match="does not allow an error estimate"):
            SimulationConfig(time_steps=10, required_tolerance=0.01, rng_type="sobol")

    def test_unknown_basis(self):
        with pytest.raises(ConfigurationError, match="basis must be one of"):
            SimulationConfig(time_steps=10, required_samples=100, basis="hyperbolic")

    def test_min_samples_floor(self):
        with pytest.raises(ConfigurationError, match="min_samples must be at least 2"):
            SimulationConfig(time_steps=10, required_samples=100, min_samples=1)

    def test_budget_below_seeding_floor(self):
        with pytest.raises(ConfigurationError, match="below the seeding floor"):
            SimulationConfig(time_steps=10, required_tolerance=0.01, max_samples=500)

    def test_budget_at_seeding_floor(self):
        config = SimulationConfig(time_steps=10, required_tolerance=0.01, max_samples=1023)
        assert config.max_samples == config.min_samples

    def test_budget_ignored_in_fixed_mode(self):
        config = SimulationConfig(time_steps=10, required_samples=100, max_samples=500)
        assert config.max_samples == 500

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            SimulationConfig(time_steps=10, required_samples=-5)
