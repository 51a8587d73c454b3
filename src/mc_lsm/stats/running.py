"""
Online weighted sample statistics.

Samples are folded in with a weighted Welford/Chan update, so the mean and
variance stay accurate over millions of samples without retaining them.
"""

import math

import numpy as np

from mc_lsm.errors import InsufficientSamplesError, NumericalInvariantError


class RunningStatistics:
    """
    Accumulator of count, weight sum, weighted mean and variance, min and max.

    Instances are mutated only by `add` / `add_batch`; `merge` returns a new
    accumulator and leaves both operands untouched.
    """

    def __init__(self) -> None:
        self._n = 0
        self._weight_sum = 0.0
        self._mean = 0.0
        self._m2 = 0.0
        self._min = math.inf
        self._max = -math.inf

    def add(self, value: float, weight: float = 1.0) -> None:
        """Fold in one sample."""
        self.add_batch(np.array([value], dtype=np.float64), np.array([weight], dtype=np.float64))

    def add_batch(self, values: np.ndarray, weights: np.ndarray | None = None) -> None:
        """
        Fold in a batch of samples.

        Parameters
        ----------
        values : np.ndarray
            Sample values, shape (n,)
        weights : np.ndarray, optional
            Non-negative weights, shape (n,) (default: ones)

        Raises
        ------
        NumericalInvariantError
            On NaN or infinite values, or negative or non-finite weights
        """
        x = np.asarray(values, dtype=np.float64).ravel()
        if x.size == 0:
            return
        w = np.ones_like(x) if weights is None else np.asarray(weights, dtype=np.float64).ravel()
        if w.shape != x.shape:
            raise ValueError(f"weights shape {w.shape} does not match values shape {x.shape}")

        if not np.all(np.isfinite(x)):
            raise NumericalInvariantError("non-finite sample value added to statistics")
        if not np.all(np.isfinite(w)) or np.any(w < 0):
            raise NumericalInvariantError("negative or non-finite weight not allowed")

        batch_weight = float(w.sum())
        if batch_weight > 0:
            batch_mean = float(np.dot(w, x) / batch_weight)
            batch_m2 = float(np.dot(w, (x - batch_mean) ** 2))
            self._combine(batch_weight, batch_mean, batch_m2)

        self._n += x.size
        self._min = min(self._min, float(x.min()))
        self._max = max(self._max, float(x.max()))

    def _combine(self, weight: float, mean: float, m2: float) -> None:
        total = self._weight_sum + weight
        delta = mean - self._mean
        self._mean += delta * weight / total
        self._m2 += m2 + delta * delta * self._weight_sum * weight / total
        self._weight_sum = total

    @property
    def sample_count(self) -> int:
        return self._n

    @property
    def weight_sum(self) -> float:
        return self._weight_sum

    def mean(self) -> float:
        if self._weight_sum <= 0:
            raise InsufficientSamplesError("sampleWeight = 0, insufficient")
        return self._mean

    def variance(self) -> float:
        """Weighted variance with the n / (n - 1) bias correction."""
        if self._n < 2:
            raise InsufficientSamplesError(f"sample number {self._n} insufficient")
        if self._weight_sum <= 0:
            raise InsufficientSamplesError("sampleWeight = 0, insufficient")
        var = self._m2 / self._weight_sum * self._n / (self._n - 1)
        if var < 0 or math.isnan(var):
            raise NumericalInvariantError(f"negative variance ({var})")
        return var

    def standard_deviation(self) -> float:
        return math.sqrt(self.variance())

    def error_estimate(self) -> float:
        """Standard error of the mean: sqrt(variance / n)."""
        return math.sqrt(self.variance() / self._n)

    def min(self) -> float:
        if self._n == 0:
            raise InsufficientSamplesError("empty sample set")
        return self._min

    def max(self) -> float:
        if self._n == 0:
            raise InsufficientSamplesError("empty sample set")
        return self._max

    def merge(self, other: "RunningStatistics") -> "RunningStatistics":
        """Combined statistics of both sample sets; operands are not modified."""
        merged = RunningStatistics()
        for part in (self, other):
            if part._weight_sum > 0:
                merged._combine(part._weight_sum, part._mean, part._m2)
            merged._n += part._n
            merged._min = min(merged._min, part._min)
            merged._max = max(merged._max, part._max)
        return merged

    def __repr__(self) -> str:
        if self._n < 2 or self._weight_sum <= 0:
            return f"RunningStatistics(n={self._n})"
        return (
            f"RunningStatistics(n={self._n}, mean={self._mean:.6f}, "
            f"error_estimate={self.error_estimate():.6f})"
        )
