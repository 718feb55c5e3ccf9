#!/usr/bin/env python3
"""
At-the-Money Call Pricing Demo.

This example prices a one-year at-the-money European call by parallel
Monte Carlo and compares it to the closed-form Black-Scholes price.

Key Concepts:
- Risk-neutral GBM: S(T) = S0 * exp((r - σ²/2)T + σ√T·Z)
- Each worker simulates its own partition with its own generator
- Partial sums merge into one price with a standard error

Usage:
    python examples/01_atm_call.py          # 10M paths
    python examples/01_atm_call.py --ci     # CI mode (fewer paths)
"""

import argparse
import sys
import time
from dataclasses import dataclass

# Add src to path if running as script
sys.path.insert(0, "src")

from hpc_pricer import MonteCarloEngine, SimulationParameters, confidence_interval
from hpc_pricer.analytics.black_scholes import black_scholes_reference


@dataclass
class WorkerScalingResult:
    """Price and timing for one worker count."""

    n_workers: int
    fair_value: float
    standard_error: float
    elapsed_sec: float


def price_atm_call(n_paths: int, n_workers: int, seed: int) -> WorkerScalingResult:
    """
    Price the reference ATM call (S0 = K = 100, r = 5%, σ = 20%, T = 1).

    Parameters
    ----------
    n_paths : int
        Number of simulated paths
    n_workers : int
        Parallel workers
    seed : int
        Root seed

    Returns
    -------
    WorkerScalingResult
        Price, standard error and wall-clock time
    """
    params = SimulationParameters(
        spot_price=100.0,
        strike_price=100.0,
        risk_free_rate=0.05,
        volatility=0.20,
        time_to_maturity=1.0,
        n_paths=n_paths,
    )
    engine = MonteCarloEngine(n_workers=n_workers, seed=seed)

    start = time.perf_counter()
    result = engine.price_option(params)
    elapsed = time.perf_counter() - start

    return WorkerScalingResult(
        n_workers=n_workers,
        fair_value=result.fair_value,
        standard_error=result.standard_error,
        elapsed_sec=elapsed,
    )


def print_scaling_table(results: list[WorkerScalingResult], n_paths: int, bs_price: float) -> None:
    """Print price and throughput for each worker count."""
    print("\n" + "=" * 60)
    print("WORKER SCALING")
    print("=" * 60)
    print(f"\nPaths: {n_paths:,}    Black-Scholes: {bs_price:.4f}")
    print("\n  Workers   Price      SE        Time (s)   M paths/s")
    print("  " + "-" * 52)

    for r in results:
        throughput = n_paths / r.elapsed_sec / 1e6 if r.elapsed_sec > 0 else float("inf")
        print(
            f"  {r.n_workers:>5}    {r.fair_value:8.4f}  {r.standard_error:.5f}  "
            f"{r.elapsed_sec:8.3f}   {throughput:8.2f}"
        )


def main() -> None:
    """Run the ATM call demo."""
    parser = argparse.ArgumentParser(description="ATM Call Monte Carlo Demo")
    parser.add_argument("--ci", action="store_true", help="CI mode (fewer paths)")
    parser.add_argument("--seed", type=int, default=42, help="Root seed (default: 42)")
    args = parser.parse_args()

    n_paths = 200_000 if args.ci else 10_000_000
    worker_counts = [1, 2] if args.ci else [1, 2, 4, 8]

    params = SimulationParameters(
        spot_price=100.0,
        strike_price=100.0,
        risk_free_rate=0.05,
        volatility=0.20,
        time_to_maturity=1.0,
        n_paths=n_paths,
    )
    bs_price = black_scholes_reference(params)

    results = [price_atm_call(n_paths, n, args.seed) for n in worker_counts]
    print_scaling_table(results, n_paths, bs_price)

    best = results[-1]
    result = MonteCarloEngine(n_workers=best.n_workers, seed=args.seed).price_option(params)
    lower, upper = confidence_interval(result)
    print(f"\n95% CI: [{lower:.4f}, {upper:.4f}]  contains BS: {lower <= bs_price <= upper}")

    print("\n" + "=" * 60)
    print("Demo complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
