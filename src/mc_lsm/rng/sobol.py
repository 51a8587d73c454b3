"""
Sobol low-discrepancy sequences for quasi-Monte Carlo path generation.

Pure NumPy Gray-code construction with optional digital shift scrambling. The
generator keeps its position, so consecutive calls continue the sequence
instead of restarting it.
"""

import numpy as np

# Degree, polynomial coefficients and initial direction numbers per dimension,
# taken from the Joe & Kuo (2008) tables. Dimension 1 is the van der Corput sequence.
SOBOL_DIRECTION_NUMBERS = {
    2: (1, 0, [1]),
    3: (2, 1, [1, 3]),
    4: (3, 1, [1, 3, 1]),
    5: (3, 2, [1, 1, 1]),
    6: (4, 1, [1, 1, 3, 3]),
    7: (4, 4, [1, 3, 5, 13]),
    8: (5, 2, [1, 1, 5, 5, 17]),
    9: (5, 4, [1, 1, 5, 5, 5]),
    10: (5, 7, [1, 1, 7, 11, 19]),
    11: (5, 11, [1, 1, 5, 1, 1]),
    12: (5, 13, [1, 1, 1, 3, 11]),
    13: (5, 14, [1, 3, 5, 5, 31]),
    14: (6, 1, [1, 3, 3, 9, 7, 49]),
    15: (6, 13, [1, 1, 1, 15, 21, 21]),
    16: (6, 16, [1, 3, 1, 13, 27, 49]),
    17: (6, 19, [1, 1, 1, 15, 7, 5]),
    18: (6, 22, [1, 3, 1, 15, 13, 25]),
    19: (6, 25, [1, 1, 5, 5, 19, 61]),
    20: (7, 1, [1, 3, 7, 11, 23, 15, 103]),
    21: (7, 4, [1, 3, 7, 13, 13, 15, 69]),
}

MAX_SOBOL_DIMENSION = 21

# Acklam rational approximation coefficients
_A = (-3.969683028665376e01, 2.209460984245205e02, -2.759285104469687e02,
      1.383577518672690e02, -3.066479806614716e01, 2.506628277459239e00)
_B = (-5.447609879822406e01, 1.615858368580409e02, -1.556989798598866e02,
      6.680131188771972e01, -1.328068155288572e01)
_C = (-7.784894002430293e-03, -3.223964580411365e-01, -2.400758277161838e00,
      -2.549732539343734e00, 4.374664141464968e00, 2.938163982698783e00)
_D = (7.784695709041462e-03, 3.224671290700398e-01, 2.445134137142996e00,
      3.754408661907416e00)

_U_LOW = 0.02425


def _horner(coeffs: tuple, x: np.ndarray) -> np.ndarray:
    result = np.zeros_like(x)
    for c in coeffs:
        result = result * x + c
    return result


def inverse_normal_cdf(u: np.ndarray) -> np.ndarray:
    """
    Map uniform (0, 1) variates to standard normal variates.

    Peter Acklam's rational approximation (relative error below 1.15e-9),
    used so that Sobol points can drive Gaussian path increments without scipy.

    Parameters
    ----------
    u : np.ndarray
        Uniform variates in [0, 1]; the boundaries are clipped

    Returns
    -------
    np.ndarray
        Standard normal variates of the same shape
    """
    u = np.asarray(u, dtype=np.float64)
    if np.any(u < 0) or np.any(u > 1):
        raise ValueError("probabilities must be in [0, 1]")

    u = np.clip(u, 1e-10, 1 - 1e-10)
    z = np.empty_like(u)

    low = u < _U_LOW
    high = u > 1 - _U_LOW
    central = ~(low | high)

    if np.any(low):
        q = np.sqrt(-2.0 * np.log(u[low]))
        z[low] = _horner(_C, q) / (_horner(_D, q) * q + 1.0)
    if np.any(central):
        q = u[central] - 0.5
        r = q * q
        z[central] = _horner(_A, r) * q / (_horner(_B, r) * r + 1.0)
    if np.any(high):
        q = np.sqrt(-2.0 * np.log(1.0 - u[high]))
        z[high] = -_horner(_C, q) / (_horner(_D, q) * q + 1.0)

    return z


class SobolGenerator:
    """
    Sobol quasi-random sequence generator.

    Parameters
    ----------
    dimension : int
        Dimension of each point (1-21)
    seed : int, optional
        Seed of the digital shift (only used when scramble is True)
    scramble : bool, optional
        Apply a random digital shift to every coordinate

    Notes
    -----
    The generator is stateful: `generate(n)` returns the next n points and
    advances the position; `reset()` rewinds to the first point.
    """

    def __init__(self, dimension: int, seed: int | None = None, scramble: bool = False):
        if dimension < 1 or dimension > MAX_SOBOL_DIMENSION:
            raise ValueError(f"dimension must be between 1 and {MAX_SOBOL_DIMENSION}")

        self.dimension = dimension
        self.seed = seed
        self.scramble = scramble
        self._directions = self._direction_matrix()

        if scramble:
            rng = np.random.default_rng(seed)
            self._shift = rng.integers(0, 2**32, size=dimension, dtype=np.uint64).astype(np.uint32)
        else:
            self._shift = np.zeros(dimension, dtype=np.uint32)

        self._x = np.zeros(dimension, dtype=np.uint32)
        self._index = 0

    @property
    def index(self) -> int:
        """Number of points generated so far."""
        return self._index

    def _direction_matrix(self) -> np.ndarray:
        """Direction numbers, shape (32, dimension)."""
        directions = np.zeros((32, self.dimension), dtype=np.uint32)
        directions[:, 0] = [1 << (31 - i) for i in range(32)]

        for dim in range(2, self.dimension + 1):
            degree, poly, m_init = SOBOL_DIRECTION_NUMBERS[dim]
            v = [0] * 32
            for i in range(degree):
                v[i] = m_init[i] << (31 - i)
            for i in range(degree, 32):
                v[i] = v[i - degree] ^ (v[i - degree] >> degree)
                for k in range(1, degree):
                    if (poly >> (degree - 1 - k)) & 1:
                        v[i] ^= v[i - k]
            directions[:, dim - 1] = np.array(v, dtype=np.uint64).astype(np.uint32)

        return directions

    @staticmethod
    def _rightmost_zero_bit(n: int) -> int:
        c = 0
        while n & 1:
            n >>= 1
            c += 1
        return c

    def generate(self, n_points: int) -> np.ndarray:
        """
        Return the next `n_points` points, shape (n_points, dimension), in (0, 1).
        """
        if n_points <= 0:
            raise ValueError("n_points must be positive")

        points = np.empty((n_points, self.dimension), dtype=np.uint32)
        x = self._x
        for i in range(n_points):
            x = x ^ self._directions[self._rightmost_zero_bit(self._index)]
            self._index += 1
            points[i] = x
        self._x = x

        points = (points ^ self._shift).astype(np.float64) / 2.0**32
        return np.clip(points, 1e-10, 1 - 1e-10)

    def generate_normal(self, n_points: int) -> np.ndarray:
        """Next `n_points` points mapped to standard normal variates."""
        return inverse_normal_cdf(self.generate(n_points))

    def reset(self) -> None:
        """Rewind to the beginning of the sequence."""
        self._x = np.zeros(self.dimension, dtype=np.uint32)
        self._index = 0
