"""
hpc-pricer: Parallel Monte Carlo pricing of European calls under GBM.

Quick Start
-----------
>>> from hpc_pricer import SimulationParameters, estimate_volatility, price_option
>>> sigma = estimate_volatility([100.0, 101.2, 99.8, 100.5])
>>> params = SimulationParameters(
...     spot_price=100.5, strike_price=100.5, risk_free_rate=0.05,
...     volatility=sigma, time_to_maturity=1.0, n_paths=1_000_000,
... )
>>> result = price_option(params, seed=42)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Simulation - Primary API
# =============================================================================
from hpc_pricer.simulation import (
    MonteCarloEngine,
    PathAccumulator,
    SimulationParameters,
    SimulationResult,
    merge_accumulators,
    price_option,
)

# =============================================================================
# Analytics
# =============================================================================
from hpc_pricer.analytics import (
    HistoricalEstimate,
    black_scholes_call,
    estimate_from_history,
    estimate_volatility,
)

# =============================================================================
# Data / Reporting
# =============================================================================
from hpc_pricer.data import DataLoadError, read_prices_from_csv
from hpc_pricer.reporting import PricingReport, confidence_interval, format_report

# =============================================================================
# Configuration / Errors
# =============================================================================
from hpc_pricer.config.settings import SETTINGS
from hpc_pricer.errors import InvalidParameterError, PricingError, SimulationCancelledError

__all__ = [
    # Version
    "__version__",
    # Simulation
    "MonteCarloEngine",
    "PathAccumulator",
    "SimulationParameters",
    "SimulationResult",
    "merge_accumulators",
    "price_option",
    # Analytics
    "HistoricalEstimate",
    "black_scholes_call",
    "estimate_from_history",
    "estimate_volatility",
    # Data / Reporting
    "DataLoadError",
    "read_prices_from_csv",
    "PricingReport",
    "confidence_interval",
    "format_report",
    # Config / Errors
    "SETTINGS",
    "InvalidParameterError",
    "PricingError",
    "SimulationCancelledError",
]
