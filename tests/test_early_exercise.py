"""
Tests for the early-exercise engine.

Reference values: European put S0=36, K=40, r=6%, sigma=20%, T=1 is 3.844
(Black-Scholes); the corresponding American put is about 4.48
(Longstaff and Schwartz, 2001, table 1).
"""

import threading

import numpy as np
import pytest

from mc_lsm.config import SimulationConfig
from mc_lsm.errors import ConfigurationError, ConvergenceError, SimulationCancelledError
from mc_lsm.models.gbm import GeometricBrownianMotion
from mc_lsm.models.multi_gbm import MultiAssetGeometricBrownianMotion
from mc_lsm.payoffs.exercise import AmericanExercise, BermudanExercise, EuropeanExercise
from mc_lsm.payoffs.multi_asset import BasketArithmeticPutPayoff
from mc_lsm.payoffs.plain_vanilla import VanillaCallPayoff, VanillaPutPayoff
from mc_lsm.pricers.early_exercise import EarlyExerciseEngine, EarlyExercisePricingResult

from .utils.black_scholes import black_scholes_put

AMERICAN_PUT = 4.478
EUROPEAN_PUT = black_scholes_put(36.0, 40.0, 0.06, 0.2, 1.0)


@pytest.fixture
def process():
    return GeometricBrownianMotion(S0=36.0, r=0.06, sigma=0.2)


def config(**kwargs):
    settings = dict(time_steps=50, required_samples=20000, n_calibration_samples=4096)
    settings.update(kwargs)
    return SimulationConfig(**settings)


class TestEuropeanExercise:
    """With a single exercise date the engine prices a European option."""

    def test_matches_black(self):
        process = GeometricBrownianMotion(S0=100.0, r=0.0, sigma=0.2)
        engine = EarlyExerciseEngine(
            process,
            VanillaCallPayoff(100.0),
            EuropeanExercise(1.0),
            config(time_steps=1, required_samples=100000),
        )
        result = engine.calculate()
        assert result.n_exercise_dates == 1
        assert result.n_steps == 1
        assert abs(result.value - 7.9656) < 4 * result.error_estimate

    def test_control_variate_is_exact(self):
        """The European control cancels the whole payoff for European exercise."""
        process = GeometricBrownianMotion(S0=100.0, r=0.0, sigma=0.2)
        engine = EarlyExerciseEngine(
            process,
            VanillaCallPayoff(100.0),
            EuropeanExercise(1.0),
            config(time_steps=1, required_samples=2000, control_variate=True),
        )
        result = engine.calculate()
        assert result.value == pytest.approx(7.9656, abs=1e-4)
        assert result.error_estimate < 1e-8


class TestAmericanPut:
    """The Longstaff-Schwartz benchmark put."""

    def test_benchmark_value(self, process):
        result = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(required_samples=50000)
        ).calculate()
        assert isinstance(result, EarlyExercisePricingResult)
        assert result.value == pytest.approx(AMERICAN_PUT, abs=0.1)
        assert result.sample_count == 50000
        assert result.n_exercise_dates == 50
        assert result.skipped_dates == ()

    def test_above_european(self, process):
        result = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config()
        ).calculate()
        assert result.value > EUROPEAN_PUT

    def test_exact_sample_count(self, process):
        result = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(required_samples=5000)
        ).calculate()
        assert result.sample_count == 5000

    def test_deterministic(self, process):
        engine = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(required_samples=5000)
        )
        first = engine.calculate()
        second = engine.calculate()
        assert first.value == second.value
        assert first.error_estimate == second.error_estimate
        assert first.sample_count == second.sample_count

    def test_seed_changes_value(self, process):
        a = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(seed=1)
        ).calculate()
        b = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(seed=2)
        ).calculate()
        assert a.value != b.value

    def test_control_variate_keeps_value(self, process):
        """The European control leaves the American estimate unbiased."""
        plain = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config()
        ).calculate()
        controlled = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(control_variate=True)
        ).calculate()
        assert controlled.value == pytest.approx(AMERICAN_PUT, abs=0.1)
        spread = 4 * np.hypot(plain.error_estimate, controlled.error_estimate)
        assert abs(controlled.value - plain.value) < spread

    def test_control_variate_lowers_error_for_american_call(self):
        """Without dividends an American call is never exercised early."""
        process = GeometricBrownianMotion(S0=100.0, r=0.05, sigma=0.2)
        settings = dict(time_steps=10, required_samples=10000)
        plain = EarlyExerciseEngine(
            process, VanillaCallPayoff(100.0), AmericanExercise(1.0), config(**settings)
        ).calculate()
        controlled = EarlyExerciseEngine(
            process,
            VanillaCallPayoff(100.0),
            AmericanExercise(1.0),
            config(control_variate=True, **settings),
        ).calculate()
        assert controlled.error_estimate < plain.error_estimate

    def test_antithetic(self, process):
        result = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(antithetic_variate=True)
        ).calculate()
        assert result.sample_count == 20000
        assert result.value == pytest.approx(AMERICAN_PUT, abs=0.1)

    def test_brownian_bridge(self, process):
        result = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(brownian_bridge=True)
        ).calculate()
        assert result.value == pytest.approx(AMERICAN_PUT, abs=0.1)

    @pytest.mark.parametrize("basis", ["laguerre", "hermite", "legendre", "chebyshev"])
    def test_basis_families(self, process, basis):
        result = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(basis=basis)
        ).calculate()
        assert result.basis == basis
        assert result.value == pytest.approx(AMERICAN_PUT, abs=0.15)

    def test_tolerance_mode(self, process):
        result = EarlyExerciseEngine(
            process,
            VanillaPutPayoff(40.0),
            AmericanExercise(1.0),
            config(required_samples=None, required_tolerance=0.05),
        ).calculate()
        assert result.error_estimate <= 0.05

    def test_budget_exhausted(self, process):
        engine = EarlyExerciseEngine(
            process,
            VanillaPutPayoff(40.0),
            AmericanExercise(1.0),
            config(required_samples=None, required_tolerance=0.001, max_samples=2000),
        )
        with pytest.raises(ConvergenceError):
            engine.calculate()

    def test_time_steps_per_year(self, process):
        result = EarlyExerciseEngine(
            process,
            VanillaPutPayoff(40.0),
            AmericanExercise(1.0),
            config(time_steps=None, time_steps_per_year=25, required_samples=5000),
        ).calculate()
        assert result.n_steps == 25
        assert result.n_exercise_dates == 25

    def test_quasi_random(self, process):
        result = EarlyExerciseEngine(
            process,
            VanillaPutPayoff(40.0),
            AmericanExercise(1.0),
            config(time_steps=10, rng_type="sobol", required_samples=4096),
        ).calculate()
        assert result.error_estimate is None
        assert result.ci_lower is None
        assert result.value > EUROPEAN_PUT

    def test_cancellation(self, process):
        event = threading.Event()
        event.set()
        engine = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(), cancel_event=event
        )
        with pytest.raises(SimulationCancelledError):
            engine.calculate()

    def test_repr(self, process):
        result = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), AmericanExercise(1.0), config(required_samples=2000)
        ).calculate()
        text = repr(result)
        assert text.startswith("EarlyExercisePricingResult(")
        assert "n_exercise_dates=50" in text
        assert "basis='monomial'" in text


class TestBermudan:
    """Exercise on a discrete schedule."""

    def test_between_european_and_american(self, process):
        exercise = BermudanExercise([0.25, 0.5, 0.75, 1.0])
        result = EarlyExerciseEngine(
            process, VanillaPutPayoff(40.0), exercise, config(required_samples=50000)
        ).calculate()
        assert result.n_exercise_dates == 4
        assert EUROPEAN_PUT < result.value < AMERICAN_PUT + 0.05

    def test_dates_off_uniform_grid(self, process):
        exercise = BermudanExercise([0.1, 0.37, 1.0])
        engine = EarlyExerciseEngine(process, VanillaPutPayoff(40.0), exercise, config(time_steps=7))
        grid = engine.time_grid()
        for t in exercise.times:
            grid.index(t)
        assert engine.calculate().n_exercise_dates == 3


class TestMultiAsset:
    """Basket options on correlated assets."""

    def make_process(self):
        return MultiAssetGeometricBrownianMotion(
            S0=np.array([36.0, 36.0]),
            r=0.06,
            sigma=np.array([0.2, 0.3]),
            corr=np.array([[1.0, 0.5], [0.5, 1.0]]),
        )

    def test_basket_put(self):
        result = EarlyExerciseEngine(
            self.make_process(),
            BasketArithmeticPutPayoff(40.0),
            AmericanExercise(1.0),
            config(time_steps=20, required_samples=10000),
        ).calculate()
        assert result.value > 4.0
        assert result.value < 40.0

    def test_control_variate_rejected(self):
        with pytest.raises(ConfigurationError, match="control variate needs"):
            EarlyExerciseEngine(
                self.make_process(),
                BasketArithmeticPutPayoff(40.0),
                AmericanExercise(1.0),
                config(control_variate=True),
            )
