"""
Brownian bridge construction of Gaussian increments.

The bridge maps a vector of independent standard normals to normalized
Brownian increments on a time grid such that the first variate fixes the
terminal value, the second the midpoint, and so on. With low-discrepancy
sequences this concentrates the best-distributed dimensions on the coarse
structure of the path.
"""

from collections.abc import Sequence

import numpy as np


class BrownianBridge:
    """
    Brownian bridge on the given positive, strictly increasing times.

    Parameters
    ----------
    times : sequence of float
        Observation times t_1 < ... < t_n, all > 0 (time zero excluded)
    """

    def __init__(self, times: Sequence[float]):
        t = np.asarray(times, dtype=np.float64).ravel()
        if t.size == 0:
            raise ValueError("Brownian bridge needs at least one time")
        if t[0] <= 0 or np.any(np.diff(t) <= 0):
            raise ValueError("Brownian bridge times must be positive and strictly increasing")

        size = t.size
        self.size = size
        self._times = t
        self._sqrt_dt = np.sqrt(np.diff(t, prepend=0.0))

        self.bridge_index = np.zeros(size, dtype=np.int64)
        self.left_index = np.zeros(size, dtype=np.int64)
        self.right_index = np.zeros(size, dtype=np.int64)
        self.left_weight = np.zeros(size)
        self.right_weight = np.zeros(size)
        self.std_dev = np.zeros(size)

        # populated[k] holds the construction step that fixed node k, 0 if none yet
        populated = np.zeros(size, dtype=np.int64)
        populated[size - 1] = 1
        self.bridge_index[0] = size - 1
        self.std_dev[0] = np.sqrt(t[size - 1])

        j = 0
        for i in range(1, size):
            while populated[j]:
                j += 1
            k = j
            while not populated[k]:
                k += 1
            # nodes j..k-1 are free, node k is fixed
            l = j + ((k - 1 - j) >> 1)
            populated[l] = i
            self.bridge_index[i] = l
            self.left_index[i] = j
            self.right_index[i] = k
            if j != 0:
                span = t[k] - t[j - 1]
                self.left_weight[i] = (t[k] - t[l]) / span
                self.right_weight[i] = (t[l] - t[j - 1]) / span
                self.std_dev[i] = np.sqrt((t[l] - t[j - 1]) * (t[k] - t[l]) / span)
            else:
                self.left_weight[i] = (t[k] - t[l]) / t[k]
                self.right_weight[i] = t[l] / t[k]
                self.std_dev[i] = np.sqrt(t[l] * (t[k] - t[l]) / t[k])
            j = k + 1
            if j >= size:
                j = 0

    @property
    def times(self) -> np.ndarray:
        return self._times

    def transform(self, variates: np.ndarray) -> np.ndarray:
        """
        Map independent normals to normalized increments.

        Parameters
        ----------
        variates : np.ndarray
            Standard normal draws, shape (..., size)

        Returns
        -------
        np.ndarray
            Increments divided by sqrt(dt), same shape; each entry is again
            standard normal and entries are independent
        """
        z = np.asarray(variates, dtype=np.float64)
        if z.shape[-1] != self.size:
            raise ValueError(
                f"variates must have last dimension {self.size}, got {z.shape[-1]}"
            )

        w = np.empty_like(z)
        w[..., self.size - 1] = self.std_dev[0] * z[..., 0]
        for i in range(1, self.size):
            j = self.left_index[i]
            k = self.right_index[i]
            l = self.bridge_index[i]
            if j != 0:
                w[..., l] = (
                    self.left_weight[i] * w[..., j - 1]
                    + self.right_weight[i] * w[..., k]
                    + self.std_dev[i] * z[..., i]
                )
            else:
                w[..., l] = self.right_weight[i] * w[..., k] + self.std_dev[i] * z[..., i]

        increments = np.diff(w, axis=-1, prepend=0.0)
        return increments / self._sqrt_dt
