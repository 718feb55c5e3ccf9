"""
Command-line entry point: price an at-the-money European call from a CSV.

Usage:
    hpc-pricer                                # market_data.csv, defaults
    hpc-pricer prices.csv --paths 10_000_000 --workers 8
    hpc-pricer prices.csv --strike 105 --seed 42 --json

If the price file is missing or holds no prices, default market
parameters are used (S0 = K = 100, σ = 20%).
"""

import argparse
import logging
import sys
import time
from typing import Optional, Sequence

import numpy as np

from hpc_pricer.analytics.black_scholes import black_scholes_reference
from hpc_pricer.analytics.volatility import estimate_from_history
from hpc_pricer.config.settings import SETTINGS, detect_workers
from hpc_pricer.data.loader import DataLoadError, read_prices_from_csv
from hpc_pricer.errors import PricingError
from hpc_pricer.reporting import PricingReport, format_report
from hpc_pricer.simulation.monte_carlo import BACKENDS, MonteCarloEngine
from hpc_pricer.simulation.params import SimulationParameters

logger = logging.getLogger(__name__)


def _int_arg(value: str) -> int:
    """Parse integers allowing underscores and scientific notation (1e8)."""
    cleaned = value.replace("_", "")
    try:
        return int(cleaned)
    except ValueError:
        try:
            as_float = float(cleaned)
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from e
        if not as_float.is_integer():
            raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
        return int(as_float)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the ``hpc-pricer`` command."""
    sim = SETTINGS.simulation
    market = SETTINGS.market

    parser = argparse.ArgumentParser(
        prog="hpc-pricer",
        description="Monte Carlo pricing of a European call under GBM with historical volatility.",
    )
    parser.add_argument(
        "csv", nargs="?", default="market_data.csv",
        help="Price history, one price per line in the last field (default: market_data.csv)",
    )
    parser.add_argument("--paths", type=_int_arg, default=sim.n_paths,
                        help=f"Number of simulated paths (default: {sim.n_paths:,})")
    parser.add_argument("--workers", type=_int_arg, default=sim.n_workers,
                        help="Parallel workers (default: auto-detect)")
    parser.add_argument("--rate", type=float, default=market.risk_free_rate,
                        help=f"Risk-free rate, decimal (default: {market.risk_free_rate})")
    parser.add_argument("--maturity", type=float, default=market.time_to_maturity,
                        help=f"Time to maturity in years (default: {market.time_to_maturity})")
    parser.add_argument("--strike", type=float, default=None,
                        help="Strike price (default: spot, i.e. at-the-money)")
    parser.add_argument("--volatility", type=float, default=None,
                        help="Override the estimated volatility, decimal")
    parser.add_argument("--seed", type=int, default=sim.seed,
                        help="Root random seed (default: fresh entropy)")
    parser.add_argument("--chunk-size", type=_int_arg, default=sim.chunk_size,
                        help=f"Paths per vectorized step (default: {sim.chunk_size:,})")
    parser.add_argument("--backend", choices=BACKENDS, default=sim.backend,
                        help=f"Parallel backend (default: {sim.backend})")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    return parser


def _load_history(path: str) -> np.ndarray:
    try:
        return read_prices_from_csv(path)
    except DataLoadError as e:
        logger.warning(f"{e}. Using default parameters.")
        return np.empty(0)


def build_parameters(args: argparse.Namespace, prices: np.ndarray) -> tuple[SimulationParameters, Optional[str], bool]:
    """
    Combine price history, defaults and overrides into run parameters.

    Returns
    -------
    tuple[SimulationParameters, Optional[str], bool]
        (params, data source or None, whether fallback volatility applied)
    """
    market = SETTINGS.market

    if prices.size:
        estimate = estimate_from_history(prices)
        spot = estimate.spot_price
        volatility = estimate.volatility
        strike = args.strike if args.strike is not None else spot
        source: Optional[str] = args.csv
        used_fallback = estimate.used_fallback
    else:
        spot = market.default_spot
        volatility = SETTINGS.volatility.fallback_volatility
        strike = args.strike if args.strike is not None else market.default_strike
        source = None
        used_fallback = True

    if args.volatility is not None:
        volatility = args.volatility
        used_fallback = False

    params = SimulationParameters(
        spot_price=spot,
        strike_price=strike,
        risk_free_rate=args.rate,
        volatility=volatility,
        time_to_maturity=args.maturity,
        n_paths=args.paths,
    )
    return params, source, used_fallback


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the pricer. Returns a process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    prices = _load_history(args.csv)

    try:
        params, source, used_fallback = build_parameters(args, prices)
        engine = MonteCarloEngine(
            n_workers=args.workers,
            seed=args.seed,
            chunk_size=args.chunk_size,
            backend=args.backend,
        )
        n_workers = engine.resolve_workers(params.n_paths)

        start_time = time.perf_counter()
        result = engine.price_option(params)
        elapsed = time.perf_counter() - start_time
    except PricingError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    report = PricingReport(
        params=params,
        result=result,
        elapsed_sec=elapsed,
        n_workers=n_workers,
        cpu_count=detect_workers(),
        data_source=source,
        n_prices=int(prices.size),
        used_fallback_volatility=used_fallback,
        reference_price=black_scholes_reference(params),
    )

    if args.json:
        print(report.to_json())
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
