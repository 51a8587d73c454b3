"""Tests for simulation time grids."""

import numpy as np
import pytest

from mc_lsm.paths.time_grid import TimeGrid


class TestTimeGridConstruction:
    """Construction and validation."""

    def test_zero_is_prepended(self):
        grid = TimeGrid([0.5, 1.0])
        np.testing.assert_array_equal(grid.times, [0.0, 0.5, 1.0])
        assert grid.steps == 2
        assert len(grid) == 3

    def test_explicit_zero_not_duplicated(self):
        grid = TimeGrid([0.0, 0.5, 1.0])
        assert len(grid) == 3

    def test_uniform(self):
        grid = TimeGrid.uniform(1.0, 4)
        np.testing.assert_allclose(grid.times, [0.0, 0.25, 0.5, 0.75, 1.0])
        assert grid.first == 0.0
        assert grid.last == 1.0
        np.testing.assert_array_equal(grid.mandatory_times, [1.0])

    def test_empty_rejected(self):
        with pytest.raises(ValueError, match="at least one time"):
            TimeGrid([])

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            TimeGrid([-0.1, 1.0])

    def test_non_increasing_rejected(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            TimeGrid([0.5, 0.5, 1.0])
        with pytest.raises(ValueError, match="strictly increasing"):
            TimeGrid([1.0, 0.5])

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError, match="finite"):
            TimeGrid([0.5, np.inf])

    def test_times_are_read_only(self):
        grid = TimeGrid.uniform(1.0, 4)
        with pytest.raises(ValueError):
            grid.times[1] = 0.3


class TestFromMandatory:
    """Grids built around mandatory (exercise) times."""

    def test_mandatory_times_are_nodes(self):
        grid = TimeGrid.from_mandatory([0.25, 1.0], 4)
        np.testing.assert_allclose(grid.times, [0.0, 0.25, 0.5, 0.75, 1.0])
        np.testing.assert_array_equal(grid.mandatory_times, [0.25, 1.0])

    def test_every_mandatory_time_is_found(self):
        mandatory = [0.1, 0.37, 0.5, 0.92, 1.5]
        grid = TimeGrid.from_mandatory(mandatory, 12)
        for t in mandatory:
            assert grid[grid.index(t)] == pytest.approx(t)

    def test_without_steps_holds_only_mandatory(self):
        grid = TimeGrid.from_mandatory([1.0, 0.5])
        np.testing.assert_array_equal(grid.times, [0.0, 0.5, 1.0])

    def test_close_times_are_merged(self):
        grid = TimeGrid.from_mandatory([0.5, 0.5 + 1e-15, 1.0])
        assert grid.steps == 2

    def test_interval_gets_at_least_one_step(self):
        grid = TimeGrid.from_mandatory([0.01, 1.0], 2)
        assert grid.index(0.01) == 1
        assert grid.last == 1.0

    def test_invalid_input(self):
        with pytest.raises(ValueError, match="empty"):
            TimeGrid.from_mandatory([])
        with pytest.raises(ValueError, match="negative"):
            TimeGrid.from_mandatory([-1.0, 1.0])
        with pytest.raises(ValueError, match="positive"):
            TimeGrid.from_mandatory([1.0], 0)


class TestTimeGridLookup:
    """Index lookups and step lengths."""

    def test_index_of_node(self):
        grid = TimeGrid.uniform(1.0, 4)
        assert grid.index(0.5) == 2
        assert grid.index(0.75 + 1e-15) == 3

    def test_index_of_missing_time(self):
        grid = TimeGrid.uniform(1.0, 4)
        with pytest.raises(ValueError, match="inadequate time grid"):
            grid.index(0.3)
        with pytest.raises(ValueError, match="all nodes are earlier"):
            grid.index(2.0)

    def test_closest(self):
        grid = TimeGrid.uniform(1.0, 4)
        assert grid.closest_index(0.3) == 1
        assert grid.closest_time(0.7) == 0.75

    def test_dt(self):
        grid = TimeGrid([0.25, 1.0])
        assert grid.dt(0) == pytest.approx(0.25)
        assert grid.dt(1) == pytest.approx(0.75)
        with pytest.raises(IndexError):
            grid.dt(2)

    def test_equality_and_hash(self):
        a = TimeGrid.uniform(1.0, 4)
        b = TimeGrid([0.25, 0.5, 0.75, 1.0])
        assert a == b
        assert hash(a) == hash(b)
        assert a != TimeGrid.uniform(1.0, 5)

    def test_iteration(self):
        assert list(TimeGrid([0.5, 1.0])) == [0.0, 0.5, 1.0]
