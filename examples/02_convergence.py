#!/usr/bin/env python3
"""
Monte Carlo Convergence Demo.

Shows the standard error shrinking like 1/√N as the path count grows, and
the simulated price closing in on Black-Scholes.

Usage:
    python examples/02_convergence.py          # up to 10M paths
    python examples/02_convergence.py --ci     # CI mode (up to 100k paths)
"""

import argparse
import sys

# Add src to path if running as script
sys.path.insert(0, "src")

from hpc_pricer import SimulationParameters, price_option
from hpc_pricer.analytics.black_scholes import black_scholes_reference


def main() -> None:
    """Run the convergence demo."""
    parser = argparse.ArgumentParser(description="MC Convergence Demo")
    parser.add_argument("--ci", action="store_true", help="CI mode (fewer paths)")
    args = parser.parse_args()

    path_counts = [1_000, 10_000, 100_000] if args.ci else [1_000, 10_000, 100_000, 1_000_000, 10_000_000]

    print("\n" + "=" * 60)
    print("MONTE CARLO CONVERGENCE")
    print("=" * 60)
    print("\n     Paths      Price     SE        |Error| / SE   SE·√N")
    print("  " + "-" * 56)

    for n_paths in path_counts:
        params = SimulationParameters(
            spot_price=100.0,
            strike_price=100.0,
            risk_free_rate=0.05,
            volatility=0.20,
            time_to_maturity=1.0,
            n_paths=n_paths,
        )
        bs_price = black_scholes_reference(params)
        result = price_option(params, seed=2024)
        z_score = abs(result.fair_value - bs_price) / result.standard_error

        print(
            f"  {n_paths:>10,}  {result.fair_value:8.4f}  {result.standard_error:.5f}  "
            f"{z_score:10.2f}   {result.standard_error * n_paths ** 0.5:7.3f}"
        )

    print("\n★ Insight: SE·√N stays flat, so each 100x more paths buys one more digit")


if __name__ == "__main__":
    main()
