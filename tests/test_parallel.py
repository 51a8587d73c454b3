"""Tests for sharded sampling over worker threads."""

import numpy as np
import pytest

from mc_lsm.models.gbm import GeometricBrownianMotion
from mc_lsm.paths.generator import PathGenerator
from mc_lsm.paths.time_grid import TimeGrid
from mc_lsm.payoffs.plain_vanilla import VanillaCallPayoff
from mc_lsm.pricers.monte_carlo import MonteCarloModel
from mc_lsm.pricers.parallel import add_samples_sharded, shard_sizes
from mc_lsm.pricers.path_pricer import EuropeanPathPricer
from mc_lsm.rng.sequence import PseudoRandomSequenceGenerator

from .utils.black_scholes import black_scholes_call


def model_factory(seed, stream):
    process = GeometricBrownianMotion(S0=100.0, r=0.05, sigma=0.2)
    grid = TimeGrid.uniform(1.0, 1)
    sequence = PseudoRandomSequenceGenerator(1, seed=seed, stream=stream)
    pricer = EuropeanPathPricer(VanillaCallPayoff(100.0), np.exp(-0.05))
    return MonteCarloModel(PathGenerator(process, grid, sequence), pricer)


def test_shard_sizes():
    assert shard_sizes(10, 3) == [4, 3, 3]
    assert shard_sizes(2, 4) == [1, 1, 0, 0]
    assert sum(shard_sizes(100001, 8)) == 100001


def test_total_sample_count():
    stats = add_samples_sharded(model_factory, 10001, n_workers=4, seed=42)
    assert stats.sample_count == 10001


def test_deterministic_for_fixed_workers():
    a = add_samples_sharded(model_factory, 20000, n_workers=4, seed=42)
    b = add_samples_sharded(model_factory, 20000, n_workers=4, seed=42)
    assert a.mean() == b.mean()
    assert a.variance() == b.variance()


def test_single_worker_matches_serial_model():
    serial = model_factory(42, 0)
    serial.add_samples(5000)
    sharded = add_samples_sharded(model_factory, 5000, n_workers=1, seed=42)
    assert sharded.mean() == pytest.approx(serial.statistics.mean(), rel=1e-12)


def test_first_stream_offset():
    serial = model_factory(42, 3)
    serial.add_samples(1000)
    sharded = add_samples_sharded(model_factory, 1000, n_workers=1, seed=42, first_stream=3)
    assert sharded.mean() == pytest.approx(serial.statistics.mean(), rel=1e-12)


def test_converges_to_black_scholes():
    stats = add_samples_sharded(model_factory, 200000, n_workers=4, seed=7)
    bs = black_scholes_call(100.0, 100.0, 0.05, 0.2, 1.0)
    assert abs(stats.mean() - bs) < 4 * stats.error_estimate()


def test_invalid_arguments():
    with pytest.raises(ValueError, match="n_workers must be positive"):
        add_samples_sharded(model_factory, 100, n_workers=0, seed=1)
    with pytest.raises(ValueError, match="n_samples must be non-negative"):
        add_samples_sharded(model_factory, -1, n_workers=2, seed=1)
