"""
Longstaff-Schwartz (LSM) regression pricer for early-exercise contracts.

Pricing is split in two phases:

1. Calibration: on a fixed batch of paths, walk the exercise dates from
   latest to earliest and regress the realised (discounted) cashflow of the
   in-the-money paths on a basis of the state. Paths whose immediate payoff
   is at least the fitted continuation value exercise there.
2. Pricing: on fresh paths, walk the exercise dates forward with the frozen
   coefficients and stop at the first date where exercise is optimal.

`LongstaffSchwartzPathPricer` cannot price; `calibrate()` returns a
`CalibratedLongstaffSchwartzPathPricer` that can.
"""

import logging
from dataclasses import dataclass

import numpy as np

from mc_lsm.models.discount import DiscountCurve
from mc_lsm.paths.path import PathSet
from mc_lsm.paths.time_grid import TimeGrid
from mc_lsm.pricers.basis import BasisSystem
from mc_lsm.pricers.path_pricer import BasePathPricer, underlying

logger = logging.getLogger(__name__)


class EarlyExerciseValue:
    """
    Payoff and regressors of an early-exercise contract at one date.

    States are scaled by `scaling` (1 / strike by default) before the basis
    is evaluated; the intrinsic value itself is appended as an extra
    regressor.

    Parameters
    ----------
    payoff : callable
        Payoff on the state at an exercise date
    basis_system : BasisSystem
        Basis of functions of the scaled state
    scaling : float, optional
        State scaling factor (default: 1 / payoff.strike, or 1.0)
    """

    def __init__(self, payoff, basis_system: BasisSystem, scaling: float | None = None):
        if scaling is None:
            strike = getattr(payoff, "strike", None)
            scaling = 1.0 / strike if strike else 1.0
        if scaling <= 0:
            raise ValueError("scaling must be positive")
        self.payoff = payoff
        self.basis_system = basis_system
        self.scaling = float(scaling)

    @property
    def n_regressors(self) -> int:
        return self.basis_system.size + 1

    def intrinsic(self, state: np.ndarray) -> np.ndarray:
        """Immediate exercise value for states of shape (n, factors)."""
        return self.payoff(underlying(state))

    def regressors(self, state: np.ndarray, intrinsic: np.ndarray) -> np.ndarray:
        """Design matrix, shape (n, n_regressors)."""
        design = self.basis_system(state * self.scaling)
        return np.column_stack([design, intrinsic * self.scaling])


@dataclass(frozen=True)
class RegressionCoefficients:
    """
    Frozen regression coefficients, latest exercise date first.

    Attributes
    ----------
    exercise_indices : tuple of int
        Grid indices of the regressed exercise dates, latest to earliest
    coefficients : tuple
        Read-only coefficient vectors aligned with exercise_indices; None
        where the date was skipped for lack of in-the-money paths
    """

    exercise_indices: tuple[int, ...]
    coefficients: tuple[np.ndarray | None, ...]

    def __post_init__(self) -> None:
        if len(self.exercise_indices) != len(self.coefficients):
            raise ValueError("one coefficient entry per exercise date required")
        for beta in self.coefficients:
            if beta is not None:
                beta.flags.writeable = False

    def for_index(self, index: int) -> np.ndarray | None:
        for i, beta in zip(self.exercise_indices, self.coefficients):
            if i == index:
                return beta
        raise KeyError(f"no regression at grid index {index}")

    @property
    def skipped_indices(self) -> tuple[int, ...]:
        return tuple(i for i, beta in zip(self.exercise_indices, self.coefficients) if beta is None)

    def __len__(self) -> int:
        return len(self.exercise_indices)


def _check_exercise_indices(time_grid: TimeGrid, exercise_indices) -> np.ndarray:
    indices = np.asarray(exercise_indices, dtype=np.int64)
    if indices.size == 0:
        raise ValueError("at least one exercise date required")
    if np.any(np.diff(indices) <= 0):
        raise ValueError("exercise indices must be strictly increasing")
    if indices[0] <= 0:
        raise ValueError("exercise at time zero is not allowed")
    if indices[-1] >= len(time_grid):
        raise ValueError("exercise index beyond the time grid")
    return indices


class RegressionCalibrator:
    """
    Backward least-squares calibration of the exercise boundary.

    Parameters
    ----------
    exercise_value : EarlyExerciseValue
        Payoff and regressors
    time_grid : TimeGrid
        Simulation grid
    exercise_indices : array-like of int
        Increasing grid indices (> 0) at which exercise is admissible; the
        last one is the final exercise date
    discount : DiscountCurve
        Curve used to move cashflows between dates
    min_itm_paths : int, optional
        Fewest in-the-money paths needed to regress at a date; never less
        than the number of regressors (default: the number of regressors)
    """

    def __init__(
        self,
        exercise_value: EarlyExerciseValue,
        time_grid: TimeGrid,
        exercise_indices,
        discount: DiscountCurve,
        min_itm_paths: int | None = None
    ):
        self.exercise_value = exercise_value
        self.time_grid = time_grid
        self.exercise_indices = _check_exercise_indices(time_grid, exercise_indices)
        self.discount = discount
        self.min_itm_paths = max(min_itm_paths or 0, exercise_value.n_regressors)
        self._discounts = np.asarray(discount.discount(time_grid.times), dtype=np.float64)

    def calibrate(self, paths: PathSet) -> RegressionCoefficients:
        """
        Fit one regression per exercise date before the last.

        A date's fit uses only the states at that date and the cashflows
        already decided at later dates.
        """
        if paths.time_grid != self.time_grid:
            raise ValueError("calibration paths live on a different time grid")

        ev = self.exercise_value
        df = self._discounts
        last = int(self.exercise_indices[-1])

        cashflow = ev.intrinsic(paths.state(last)).astype(np.float64)
        cashflow_index = np.full(len(paths), last, dtype=np.int64)

        indices: list[int] = []
        coefficients: list[np.ndarray | None] = []
        for i in self.exercise_indices[-2::-1]:
            i = int(i)
            state = paths.state(i)
            intrinsic = ev.intrinsic(state)
            itm = intrinsic > 0.0
            n_itm = int(np.count_nonzero(itm))
            indices.append(i)

            if n_itm < self.min_itm_paths:
                logger.warning(
                    f"only {n_itm} in-the-money paths at t={self.time_grid[i]:.6g} "
                    f"(need {self.min_itm_paths}); exercise skipped at this date"
                )
                coefficients.append(None)
                continue

            rows = np.flatnonzero(itm)
            y = cashflow[rows] * df[cashflow_index[rows]] / df[i]
            X = ev.regressors(state[rows], intrinsic[rows])
            beta, _, _, _ = np.linalg.lstsq(X, y, rcond=None)
            continuation = X @ beta

            exercise = intrinsic[rows] >= continuation
            exercised = rows[exercise]
            cashflow[exercised] = intrinsic[exercised]
            cashflow_index[exercised] = i
            coefficients.append(beta)

            logger.debug(
                f"t={self.time_grid[i]:.6g}: {n_itm} in-the-money paths, "
                f"{exercised.size} exercised"
            )

        result = RegressionCoefficients(tuple(indices), tuple(coefficients))
        logger.info(
            f"calibrated {len(result)} exercise dates on {len(paths)} paths, "
            f"{len(result.skipped_indices)} skipped"
        )
        return result


class LongstaffSchwartzPathPricer:
    """
    Uncalibrated regression pricer.

    Holds everything needed to price except the regression coefficients;
    `calibrate()` fits them and returns a pricer that can be evaluated.

    Parameters
    ----------
    exercise_value : EarlyExerciseValue
        Payoff and regressors
    time_grid : TimeGrid
        Simulation grid
    exercise_indices : array-like of int
        Increasing grid indices (> 0) of the exercise dates
    discount : DiscountCurve
        Discount curve
    min_itm_paths : int, optional
        Passed to RegressionCalibrator
    """

    def __init__(
        self,
        exercise_value: EarlyExerciseValue,
        time_grid: TimeGrid,
        exercise_indices,
        discount: DiscountCurve,
        min_itm_paths: int | None = None
    ):
        self.exercise_value = exercise_value
        self.time_grid = time_grid
        self.exercise_indices = _check_exercise_indices(time_grid, exercise_indices)
        self.discount = discount
        self.min_itm_paths = min_itm_paths

    def calibrate(self, paths: PathSet) -> "CalibratedLongstaffSchwartzPathPricer":
        calibrator = RegressionCalibrator(
            self.exercise_value,
            self.time_grid,
            self.exercise_indices,
            self.discount,
            min_itm_paths=self.min_itm_paths,
        )
        coefficients = calibrator.calibrate(paths)
        return CalibratedLongstaffSchwartzPathPricer(
            self.exercise_value,
            self.time_grid,
            self.exercise_indices,
            self.discount,
            coefficients,
        )


class CalibratedLongstaffSchwartzPathPricer(BasePathPricer):
    """
    Regression pricer with frozen coefficients.

    Each path is exercised at the first in-the-money date whose immediate
    payoff is at least the regression continuation value, or at the final
    date otherwise; the payoff is discounted to time zero. No fitting
    happens here.
    """

    def __init__(
        self,
        exercise_value: EarlyExerciseValue,
        time_grid: TimeGrid,
        exercise_indices,
        discount: DiscountCurve,
        coefficients: RegressionCoefficients
    ):
        self.exercise_value = exercise_value
        self.time_grid = time_grid
        self.exercise_indices = _check_exercise_indices(time_grid, exercise_indices)
        self.discount = discount
        self.coefficients = coefficients
        self._discounts = np.asarray(discount.discount(time_grid.times), dtype=np.float64)

    def __call__(self, paths: PathSet) -> np.ndarray:
        ev = self.exercise_value
        df = self._discounts
        n = len(paths)
        values = np.zeros(n)
        alive = np.ones(n, dtype=bool)

        for i in self.exercise_indices[:-1]:
            i = int(i)
            beta = self.coefficients.for_index(i)
            if beta is None:
                continue
            state = paths.state(i)
            intrinsic = ev.intrinsic(state)
            rows = np.flatnonzero(alive & (intrinsic > 0.0))
            if rows.size == 0:
                continue
            continuation = ev.regressors(state[rows], intrinsic[rows]) @ beta
            exercised = rows[intrinsic[rows] >= continuation]
            values[exercised] = intrinsic[exercised] * df[i]
            alive[exercised] = False

        last = int(self.exercise_indices[-1])
        terminal = ev.intrinsic(paths.state(last))
        values[alive] = terminal[alive] * df[last]
        return values
