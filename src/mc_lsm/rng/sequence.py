"""
Random sequence generators feeding the path generators.

Each generator produces Gaussian sequences of a fixed dimension (one sequence
per simulated path). Seeds and stream partitions are passed explicitly so that
calibration, pricing and parallel workers never share a stream by accident.
"""

from typing import Literal, Protocol

import numpy as np

from mc_lsm.rng.sobol import SobolGenerator


class SequenceGenerator(Protocol):
    """Capability consumed by PathGenerator."""

    dimension: int
    allows_error_estimate: bool

    def next_sequences(self, n: int) -> np.ndarray:
        """Return the next n Gaussian sequences, shape (n, dimension)."""
        ...


class PseudoRandomSequenceGenerator:
    """
    Gaussian pseudo-random sequences on an independent stream partition.

    Parameters
    ----------
    dimension : int
        Variates per sequence
    seed : int, optional
        Root seed
    stream : int, optional
        Stream partition index; different indices give statistically
        independent streams for the same seed
    """

    allows_error_estimate = True

    def __init__(self, dimension: int, seed: int | None = None, stream: int = 0):
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        if stream < 0:
            raise ValueError("stream must be non-negative")

        self.dimension = dimension
        self.seed = seed
        self.stream = stream
        self._seed_sequence = np.random.SeedSequence(seed, spawn_key=(stream,))
        self._rng = np.random.default_rng(self._seed_sequence)

    def next_sequences(self, n: int) -> np.ndarray:
        if n < 0:
            raise ValueError("n must be non-negative")
        return self._rng.standard_normal((n, self.dimension))

    def spawn(self, n_streams: int) -> list["PseudoRandomSequenceGenerator"]:
        """
        Independent child generators, one per worker.

        Children are derived from this generator's stream partition, so
        spawning from equally seeded parents yields identical children.
        """
        if n_streams <= 0:
            raise ValueError("n_streams must be positive")
        parent = np.random.SeedSequence(self.seed, spawn_key=(self.stream,))
        children = []
        for child_seq in parent.spawn(n_streams):
            child = PseudoRandomSequenceGenerator(self.dimension, self.seed, self.stream)
            child._seed_sequence = child_seq
            child._rng = np.random.default_rng(child_seq)
            children.append(child)
        return children

    def __repr__(self) -> str:
        return (
            f"PseudoRandomSequenceGenerator(dimension={self.dimension}, "
            f"seed={self.seed}, stream={self.stream})"
        )


class SobolSequenceGenerator:
    """
    Gaussian quasi-random sequences from a continuing Sobol sequence.

    Low-discrepancy points are not independent, so the sample variance is not
    a valid error estimate: `allows_error_estimate` is False.
    """

    allows_error_estimate = False

    def __init__(
        self,
        dimension: int,
        seed: int | None = None,
        stream: int = 0,
        scramble: bool = False
    ):
        self.dimension = dimension
        self.seed = seed
        self.stream = stream
        self._sobol = SobolGenerator(dimension=dimension, seed=seed, scramble=scramble)
        if stream > 0:
            # Partition by skipping a block of 2**16 points per stream
            self._sobol.generate(stream * 2**16)

    def next_sequences(self, n: int) -> np.ndarray:
        if n < 0:
            raise ValueError("n must be non-negative")
        if n == 0:
            return np.empty((0, self.dimension))
        return self._sobol.generate_normal(n)

    def __repr__(self) -> str:
        return (
            f"SobolSequenceGenerator(dimension={self.dimension}, "
            f"seed={self.seed}, stream={self.stream})"
        )


def make_sequence_generator(
    rng_type: Literal["pseudo", "sobol"],
    dimension: int,
    seed: int | None = None,
    stream: int = 0,
    scramble: bool = False
) -> SequenceGenerator:
    """
    Build a sequence generator of the requested family.

    Raises
    ------
    ValueError
        If rng_type is unknown
    """
    if rng_type == "pseudo":
        return PseudoRandomSequenceGenerator(dimension=dimension, seed=seed, stream=stream)
    elif rng_type == "sobol":
        return SobolSequenceGenerator(
            dimension=dimension, seed=seed, stream=stream, scramble=scramble
        )
    else:
        raise ValueError(f"Unknown rng_type: {rng_type}. Use 'pseudo' or 'sobol'.")
