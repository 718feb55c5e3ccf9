"""
Analytics: historical volatility and the closed-form reference price.
"""

from hpc_pricer.analytics.black_scholes import black_scholes_call, black_scholes_reference
from hpc_pricer.analytics.volatility import (
    HistoricalEstimate,
    estimate_from_history,
    estimate_volatility,
    log_returns,
)

__all__ = [
    "HistoricalEstimate",
    "black_scholes_call",
    "black_scholes_reference",
    "estimate_from_history",
    "estimate_volatility",
    "log_returns",
]
