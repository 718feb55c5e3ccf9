"""
Monte Carlo simulation for European call pricing.

Provides:
- Run parameters and result value objects
- Exact log-normal terminal price kernel
- Per-worker accumulators with an associative merge
- Parallel Monte Carlo engine
"""

from hpc_pricer.simulation.accumulators import PathAccumulator, merge_accumulators
from hpc_pricer.simulation.gbm import TerminalPriceKernel, generate_terminal_values
from hpc_pricer.simulation.monte_carlo import (
    MonteCarloEngine,
    partition_paths,
    price_option,
    simulate_partition,
    spawn_worker_seeds,
)
from hpc_pricer.simulation.params import SimulationParameters, SimulationResult

__all__ = [
    # Parameters / results
    "SimulationParameters",
    "SimulationResult",
    # GBM
    "TerminalPriceKernel",
    "generate_terminal_values",
    # Accumulation
    "PathAccumulator",
    "merge_accumulators",
    # Engine
    "MonteCarloEngine",
    "partition_paths",
    "price_option",
    "simulate_partition",
    "spawn_worker_seeds",
]
