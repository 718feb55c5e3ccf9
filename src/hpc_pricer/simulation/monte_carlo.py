"""
Parallel Monte Carlo engine for European call pricing.

Data-parallel fan-out:
- The N paths are split into contiguous partitions, one per worker
- Each worker owns its own Generator, seeded from a spawned SeedSequence
- Each worker reduces its partition to a local PathAccumulator, chunk by chunk
- The caller merges the k accumulators once all workers finish

No worker touches shared mutable state while simulating, so no locks or
atomics are involved.

[T1] MC converges to the analytical price at rate 1/√N

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
See: NumPy "Parallel random number generation" (SeedSequence.spawn)
"""

import logging
import threading
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from numbers import Integral
from typing import Optional

import numpy as np

from hpc_pricer.config.settings import SETTINGS, detect_workers
from hpc_pricer.errors import InvalidParameterError, SimulationCancelledError
from hpc_pricer.simulation.accumulators import PathAccumulator, merge_accumulators
from hpc_pricer.simulation.gbm import TerminalPriceKernel
from hpc_pricer.simulation.params import SimulationParameters, SimulationResult

logger = logging.getLogger(__name__)

BACKENDS = ("thread", "process")


def _is_integer(value: object) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def partition_paths(n_paths: int, n_workers: int) -> list[int]:
    """
    Split ``n_paths`` into ``n_workers`` contiguous partition sizes.

    Sizes differ by at most one; the first ``n_paths % n_workers``
    partitions take the extra path. Partitions may be empty when there are
    more workers than paths.

    Examples
    --------
    >>> partition_paths(10, 3)
    [4, 3, 3]
    """
    if n_paths < 0:
        raise ValueError(f"CRITICAL: n_paths must be >= 0, got {n_paths}")
    if n_workers <= 0:
        raise ValueError(f"CRITICAL: n_workers must be > 0, got {n_workers}")

    base, extra = divmod(n_paths, n_workers)
    return [base + 1 if i < extra else base for i in range(n_workers)]


def spawn_worker_seeds(seed: Optional[int], n_workers: int) -> list[np.random.SeedSequence]:
    """
    Derive one independent seed sequence per worker.

    The root sequence mixes ``seed`` (or fresh OS entropy when None) and each
    child adds its worker index as spawn key, so streams never overlap or
    correlate across workers.
    """
    root = np.random.SeedSequence(seed)
    logger.debug(f"Root seed entropy: {root.entropy}")
    return root.spawn(n_workers)


def simulate_partition(
    params: SimulationParameters,
    n_paths: int,
    seed_sequence: np.random.SeedSequence,
    chunk_size: int,
    cancel_event: Optional[threading.Event] = None,
) -> PathAccumulator:
    """
    Simulate one worker's partition and return its local sums.

    The generator is created here and never leaves this call. Cancellation
    is checked once per chunk, never per path.

    Parameters
    ----------
    params : SimulationParameters
        Validated run parameters
    n_paths : int
        Size of this worker's partition
    seed_sequence : np.random.SeedSequence
        Seed exclusively owned by this worker
    chunk_size : int
        Paths per vectorized step
    cancel_event : threading.Event, optional
        Set by the caller to stop the run

    Returns
    -------
    PathAccumulator
        Local sums over the partition

    Raises
    ------
    SimulationCancelledError
        If ``cancel_event`` is set between chunks
    """
    rng = np.random.Generator(np.random.PCG64(seed_sequence))
    kernel = TerminalPriceKernel.from_params(params)
    strike = params.strike_price

    accumulator = PathAccumulator.empty()
    remaining = n_paths
    while remaining > 0:
        if cancel_event is not None and cancel_event.is_set():
            raise SimulationCancelledError(
                f"Simulation cancelled with {remaining:,} of {n_paths:,} paths left in partition"
            )
        size = min(chunk_size, remaining)
        terminal = kernel.terminal_prices(rng.standard_normal(size))
        accumulator = accumulator.merge(PathAccumulator.from_terminal_prices(terminal, strike))
        remaining -= size

    return accumulator


class MonteCarloEngine:
    """
    Parallel Monte Carlo pricing engine for a European call.

    Parameters
    ----------
    n_workers : int, optional
        Number of parallel workers (None = auto-detect)
    seed : int, optional
        Root seed for reproducibility. With a fixed seed and a fixed worker
        count, results are bit-for-bit reproducible.
    chunk_size : int, optional
        Paths per vectorized step inside each worker
    backend : str, default "thread"
        "thread" (NumPy releases the GIL in the generator and ufuncs) or
        "process"

    Examples
    --------
    >>> engine = MonteCarloEngine(n_workers=4, seed=42)
    >>> params = SimulationParameters(
    ...     spot_price=100, strike_price=100, risk_free_rate=0.05,
    ...     volatility=0.20, time_to_maturity=1.0, n_paths=1_000_000,
    ... )
    >>> result = engine.price_option(params)
    >>> print(f"Price: {result.fair_value:.4f} ± {result.standard_error:.4f}")
    """

    def __init__(
        self,
        n_workers: Optional[int] = None,
        seed: Optional[int] = None,
        chunk_size: Optional[int] = None,
        backend: str = "thread",
    ):
        if n_workers is not None and not (_is_integer(n_workers) and n_workers > 0):
            raise InvalidParameterError("n_workers", n_workers, "None or an integer > 0")
        if seed is not None and not (_is_integer(seed) and seed >= 0):
            raise InvalidParameterError("seed", seed, "None or a non-negative integer")
        if chunk_size is None:
            chunk_size = SETTINGS.simulation.chunk_size
        if not (_is_integer(chunk_size) and chunk_size > 0):
            raise InvalidParameterError("chunk_size", chunk_size, "an integer > 0")
        if backend not in BACKENDS:
            raise InvalidParameterError("backend", backend, f"one of {BACKENDS}")

        self.n_workers = n_workers
        self.seed = seed
        self.chunk_size = chunk_size
        self.backend = backend

    def resolve_workers(self, n_paths: int) -> int:
        """Effective worker count: configured or detected, never more than paths."""
        requested = self.n_workers if self.n_workers is not None else detect_workers()
        return max(1, min(requested, n_paths))

    def price_option(
        self,
        params: SimulationParameters,
        cancel_event: Optional[threading.Event] = None,
    ) -> SimulationResult:
        """
        Price a European call by simulating ``params.n_paths`` terminal prices.

        [T1] Call payoff: max(S(T) - K, 0)

        Parameters
        ----------
        params : SimulationParameters
            Validated run parameters
        cancel_event : threading.Event, optional
            Cancellation flag, checked once per chunk (thread backend only)

        Returns
        -------
        SimulationResult
            Discounted price, standard error and average terminal price

        Raises
        ------
        InvalidParameterError
            If ``params`` is not a SimulationParameters, or cancellation is
            requested with the process backend
        SimulationCancelledError
            If ``cancel_event`` is set during the run
        """
        if not isinstance(params, SimulationParameters):
            raise InvalidParameterError("params", type(params).__name__, "a SimulationParameters")
        if cancel_event is not None and self.backend != "thread":
            raise InvalidParameterError("cancel_event", cancel_event, "None with the process backend")

        n_workers = self.resolve_workers(params.n_paths)
        sizes = partition_paths(params.n_paths, n_workers)
        seeds = spawn_worker_seeds(self.seed, n_workers)

        logger.info(
            f"Simulating {params.n_paths:,} paths on {n_workers} {self.backend} worker(s)"
        )
        start_time = time.perf_counter()

        if n_workers == 1:
            partials = [
                simulate_partition(params, sizes[0], seeds[0], self.chunk_size, cancel_event)
            ]
        else:
            with self._make_executor(n_workers) as executor:
                futures = [
                    executor.submit(
                        simulate_partition,
                        params,
                        size,
                        seed_sequence,
                        self.chunk_size,
                        cancel_event,
                    )
                    for size, seed_sequence in zip(sizes, seeds)
                    if size > 0
                ]
                # Worker order, so a fixed seed reproduces the same float sums
                partials = [future.result() for future in futures]

        total = merge_accumulators(partials)
        result = total.to_result(params.discount_factor)

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Completed {total.n_paths:,} paths in {elapsed:.3f}s: "
            f"price={result.fair_value:.6f} se={result.standard_error:.6f}"
        )
        return result

    def _make_executor(self, n_workers: int) -> Executor:
        if self.backend == "process":
            return ProcessPoolExecutor(max_workers=n_workers)
        return ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="mc-worker")


def price_option(
    params: SimulationParameters,
    n_workers: Optional[int] = None,
    seed: Optional[int] = None,
    chunk_size: Optional[int] = None,
    backend: str = "thread",
) -> SimulationResult:
    """
    Convenience function to price a European call via parallel MC.

    Parameters
    ----------
    params : SimulationParameters
        Spot, strike, rate, volatility, maturity and path count
    n_workers : int, optional
        Number of parallel workers (None = auto-detect)
    seed : int, optional
        Root seed for reproducibility
    chunk_size : int, optional
        Paths per vectorized step
    backend : str, default "thread"
        "thread" or "process"

    Returns
    -------
    SimulationResult
        Monte Carlo pricing result
    """
    engine = MonteCarloEngine(
        n_workers=n_workers, seed=seed, chunk_size=chunk_size, backend=backend
    )
    return engine.price_option(params)
