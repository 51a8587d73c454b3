"""
Sharded sampling over worker threads.

Every worker owns a model with its own generator on a distinct stream
partition and its own RunningStatistics; the shard statistics are merged
once all workers are done. Nothing mutable is shared between workers, so
the same scheme works with processes or remote workers.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from mc_lsm.pricers.monte_carlo import MonteCarloModel
from mc_lsm.stats.running import RunningStatistics

logger = logging.getLogger(__name__)


def shard_sizes(n_samples: int, n_workers: int) -> list[int]:
    """Split n_samples as evenly as possible, earlier shards taking the remainder."""
    base, extra = divmod(n_samples, n_workers)
    return [base + (1 if i < extra else 0) for i in range(n_workers)]


def _run_shard(model: MonteCarloModel, n: int) -> RunningStatistics:
    model.add_samples(n)
    return model.statistics


def add_samples_sharded(
    model_factory: Callable[[int, int], MonteCarloModel],
    n_samples: int,
    n_workers: int,
    seed: int,
    first_stream: int = 0
) -> RunningStatistics:
    """
    Draw `n_samples` samples split across `n_workers` threads.

    Parameters
    ----------
    model_factory : callable
        ``model_factory(seed, stream)`` returns a fresh MonteCarloModel whose
        generator runs on stream partition `stream`
    n_samples : int
        Total number of samples
    n_workers : int
        Number of shards (and threads)
    seed : int
        Root seed passed to every shard
    first_stream : int, optional
        Stream partition of the first shard; shard i uses first_stream + i

    Returns
    -------
    RunningStatistics
        Merged statistics; deterministic for a fixed (seed, n_workers)
    """
    if n_samples < 0:
        raise ValueError("n_samples must be non-negative")
    if n_workers <= 0:
        raise ValueError("n_workers must be positive")

    sizes = shard_sizes(n_samples, n_workers)
    models = [model_factory(seed, first_stream + i) for i in range(n_workers)]

    logger.debug(f"sampling {n_samples} paths over {n_workers} shards: {sizes}")
    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        futures = [executor.submit(_run_shard, model, n) for model, n in zip(models, sizes)]
        # shard order, not completion order
        shards = [future.result() for future in futures]

    merged = RunningStatistics()
    for shard in shards:
        merged = merged.merge(shard)
    return merged
