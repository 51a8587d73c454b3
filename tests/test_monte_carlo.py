"""
Tests for the Monte Carlo model and the European Monte Carlo engine.
"""

import numpy as np
import pytest

from mc_lsm.config import SimulationConfig
from mc_lsm.errors import ConfigurationError, NumericalInvariantError
from mc_lsm.models.gbm import GeometricBrownianMotion
from mc_lsm.paths.generator import PathGenerator
from mc_lsm.paths.time_grid import TimeGrid
from mc_lsm.payoffs.path_dependent import AsianArithmeticCallPayoff
from mc_lsm.payoffs.plain_vanilla import VanillaCallPayoff
from mc_lsm.pricers.engine import MonteCarloEngine
from mc_lsm.pricers.monte_carlo import MonteCarloModel, PricingResult
from mc_lsm.pricers.path_pricer import EuropeanPathPricer, PathDependentPathPricer
from mc_lsm.rng.sequence import PseudoRandomSequenceGenerator

from .utils.black_scholes import black_scholes_call

S0, K, R, SIGMA, T = 100.0, 100.0, 0.05, 0.2, 1.0


def make_model(steps=1, seed=42, **kwargs):
    process = GeometricBrownianMotion(S0=S0, r=R, sigma=SIGMA)
    grid = TimeGrid.uniform(T, steps)
    generator = PathGenerator(process, grid, PseudoRandomSequenceGenerator(steps, seed=seed))
    pricer = EuropeanPathPricer(VanillaCallPayoff(K), np.exp(-R * T))
    return MonteCarloModel(generator, pricer, **kwargs)


class TestPricingResult:
    """Tests for the result container."""

    def test_confidence_interval(self):
        result = PricingResult(value=10.0, error_estimate=0.5, sample_count=1000)
        assert result.ci_lower == pytest.approx(10.0 - 1.96 * 0.5)
        assert result.ci_upper == pytest.approx(10.0 + 1.96 * 0.5)

    def test_without_error_estimate(self):
        result = PricingResult(value=10.0, error_estimate=None, sample_count=1000)
        assert result.ci_lower is None
        assert result.ci_upper is None
        assert "error_estimate=None" in repr(result)

    def test_repr(self):
        text = repr(PricingResult(value=10.0, error_estimate=0.5, sample_count=1000))
        assert text.startswith("PricingResult(")
        assert "value=10.000000" in text
        assert "sample_count=1000" in text


class TestMonteCarloModel:
    """Tests for sampling, antithetic and control variates."""

    def test_sample_count(self):
        model = make_model()
        model.add_samples(500)
        model.add_samples(0)
        assert model.sample_count == 500
        assert model.statistics.sample_count == 500

    def test_split_and_joint_runs_agree(self):
        joint = make_model()
        joint.add_samples(3000)
        split = make_model()
        split.add_samples(1000)
        split.add_samples(2000)
        assert split.statistics.mean() == pytest.approx(joint.statistics.mean(), rel=1e-12)

    def test_batch_size_does_not_change_draws(self):
        a = make_model()
        a.add_samples(2500)
        b = make_model(batch_size=300)
        b.add_samples(2500)
        assert a.statistics.mean() == pytest.approx(b.statistics.mean(), rel=1e-12)
        assert a.statistics.variance() == pytest.approx(b.statistics.variance(), rel=1e-9)

    def test_negative_samples(self):
        with pytest.raises(NumericalInvariantError, match="negative sample count"):
            make_model().add_samples(-1)

    def test_converges_to_black_scholes(self):
        model = make_model()
        model.add_samples(200000)
        bs = black_scholes_call(S0, K, R, SIGMA, T)
        assert abs(model.statistics.mean() - bs) < 4 * model.statistics.error_estimate()

    def test_antithetic_reduces_error(self):
        plain = make_model()
        plain.add_samples(20000)
        antithetic = make_model(antithetic_variate=True)
        antithetic.add_samples(20000)
        assert antithetic.sample_count == 20000
        assert antithetic.statistics.error_estimate() < plain.statistics.error_estimate()

    def test_perfect_control_variate(self):
        """Using the priced payoff as its own control leaves only the known value."""
        bs = black_scholes_call(S0, K, R, SIGMA, T)
        control = EuropeanPathPricer(VanillaCallPayoff(K), np.exp(-R * T))
        model = make_model(control_pricer=control, control_value=bs)
        model.add_samples(1000)
        assert model.is_control_variate
        assert model.statistics.mean() == pytest.approx(bs, rel=1e-12)
        assert model.statistics.error_estimate() < 1e-10

    def test_control_pricer_without_value(self):
        control = EuropeanPathPricer(VanillaCallPayoff(K), 1.0)
        with pytest.raises(ConfigurationError, match="without its known value"):
            make_model(control_pricer=control)

    def test_control_generator_without_pricer(self):
        grid = TimeGrid.uniform(T, 1)
        process = GeometricBrownianMotion(S0=S0, r=R, sigma=SIGMA)
        other = PathGenerator(process, grid, PseudoRandomSequenceGenerator(1, seed=1))
        with pytest.raises(ConfigurationError, match="without a control pricer"):
            make_model(control_generator=other)

    def test_allows_error_estimate(self):
        assert make_model().allows_error_estimate


class TestMonteCarloEngine:
    """Tests for the European engine on a uniform grid."""

    def test_european_call(self):
        process = GeometricBrownianMotion(S0=S0, r=R, sigma=SIGMA)
        pricer = EuropeanPathPricer(VanillaCallPayoff(K), np.exp(-R * T))
        config = SimulationConfig(time_steps=1, required_samples=100000)
        result = MonteCarloEngine(process, pricer, T, config).calculate()
        bs = black_scholes_call(S0, K, R, SIGMA, T)
        assert result.sample_count == 100000
        assert abs(result.value - bs) < 4 * result.error_estimate

    def test_tolerance_mode(self):
        process = GeometricBrownianMotion(S0=S0, r=R, sigma=SIGMA)
        pricer = EuropeanPathPricer(VanillaCallPayoff(K), np.exp(-R * T))
        config = SimulationConfig(time_steps=1, required_tolerance=0.05)
        result = MonteCarloEngine(process, pricer, T, config).calculate()
        assert result.error_estimate <= 0.05

    def test_asian_below_european(self):
        process = GeometricBrownianMotion(S0=S0, r=R, sigma=SIGMA)
        config = SimulationConfig(time_steps=50, required_samples=20000)
        asian = MonteCarloEngine(
            process, PathDependentPathPricer(AsianArithmeticCallPayoff(K), np.exp(-R * T)), T, config
        ).calculate()
        european = MonteCarloEngine(
            process, EuropeanPathPricer(VanillaCallPayoff(K), np.exp(-R * T)), T, config
        ).calculate()
        assert asian.value < european.value

    def test_reproducible(self):
        process = GeometricBrownianMotion(S0=S0, r=R, sigma=SIGMA)
        pricer = EuropeanPathPricer(VanillaCallPayoff(K), np.exp(-R * T))
        config = SimulationConfig(time_steps=4, required_samples=5000, seed=7)
        a = MonteCarloEngine(process, pricer, T, config).calculate()
        b = MonteCarloEngine(process, pricer, T, config).calculate()
        assert a.value == b.value

    def test_control_variate_requires_pricer(self):
        process = GeometricBrownianMotion(S0=S0, r=R, sigma=SIGMA)
        pricer = EuropeanPathPricer(VanillaCallPayoff(K), np.exp(-R * T))
        config = SimulationConfig(time_steps=1, required_samples=100, control_variate=True)
        with pytest.raises(ConfigurationError, match="no control pricer"):
            MonteCarloEngine(process, pricer, T, config)
