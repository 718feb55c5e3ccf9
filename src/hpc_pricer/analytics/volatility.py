"""
Historical volatility estimation from a chronological price series.

[T1] u_i = ln(p_i / p_{i-1})
[T1] σ_annual = stdev(u, ddof=1) * √252

Fewer than three prices cannot give two log-returns, and a single
log-return says nothing about dispersion, so short histories map to a fixed
fallback volatility instead of an undefined estimate.

See: Hull (2021) "Options, Futures, and Other Derivatives", Ch. 15.4
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
import pandas as pd

from hpc_pricer.config.settings import SETTINGS
from hpc_pricer.errors import InvalidParameterError

logger = logging.getLogger(__name__)

PriceSeries = Union[Sequence[float], np.ndarray, pd.Series]

FALLBACK_VOLATILITY = SETTINGS.volatility.fallback_volatility
TRADING_DAYS_PER_YEAR = SETTINGS.volatility.trading_days_per_year


@dataclass(frozen=True)
class HistoricalEstimate:
    """
    Market inputs derived from a price history.

    Attributes
    ----------
    spot_price : float
        Most recent price
    volatility : float
        Annualized volatility (or the fallback)
    n_prices : int
        Length of the history
    used_fallback : bool
        True when the history was too short to estimate volatility
    """

    spot_price: float
    volatility: float
    n_prices: int
    used_fallback: bool


def _as_price_array(prices: PriceSeries) -> np.ndarray:
    try:
        values = np.asarray(prices, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError("prices", prices, "a sequence of numbers") from e
    if values.size and (not np.all(np.isfinite(values)) or np.any(values <= 0)):
        bad = values[~(np.isfinite(values) & (values > 0))][0]
        raise InvalidParameterError("prices", float(bad), "finite and > 0")
    return values


def log_returns(prices: PriceSeries) -> np.ndarray:
    """
    Daily log-returns of a chronological price series.

    Parameters
    ----------
    prices : PriceSeries
        Positive prices, oldest first

    Returns
    -------
    np.ndarray
        ln(p_i / p_{i-1}), shape (len(prices) - 1,), empty for fewer than 2 prices
    """
    values = _as_price_array(prices)
    if values.size < 2:
        return np.empty(0)
    return np.diff(np.log(values))


def estimate_volatility(
    prices: PriceSeries,
    trading_days: int = TRADING_DAYS_PER_YEAR,
    fallback: float = FALLBACK_VOLATILITY,
) -> float:
    """
    Annualized historical volatility of a price series.

    Parameters
    ----------
    prices : PriceSeries
        Positive prices, oldest first. May be empty.
    trading_days : int, default 252
        Trading days per year used for annualization
    fallback : float, default 0.20
        Returned when fewer than three prices are available

    Returns
    -------
    float
        Annualized volatility (>= 0)

    Raises
    ------
    InvalidParameterError
        If any price is non-finite or non-positive

    Examples
    --------
    >>> estimate_volatility([100.0])
    0.2
    >>> estimate_volatility([100.0, 100.0, 100.0])
    0.0
    """
    values = _as_price_array(prices)

    if values.size < SETTINGS.volatility.min_prices:
        logger.info(
            f"Insufficient history ({values.size} prices), "
            f"using fallback volatility {fallback:.2%}"
        )
        return float(fallback)

    returns = np.diff(np.log(values))
    return float(np.std(returns, ddof=1) * np.sqrt(trading_days))


def estimate_from_history(
    prices: PriceSeries,
    trading_days: int = TRADING_DAYS_PER_YEAR,
    fallback: float = FALLBACK_VOLATILITY,
) -> HistoricalEstimate:
    """
    Derive spot price and volatility from a price history.

    Parameters
    ----------
    prices : PriceSeries
        Positive prices, oldest first, at least one element

    Returns
    -------
    HistoricalEstimate
        Spot (last price), volatility and whether the fallback applied

    Raises
    ------
    InvalidParameterError
        If the history is empty or holds invalid prices
    """
    values = _as_price_array(prices)
    if values.size == 0:
        raise InvalidParameterError("prices", "[]", "non-empty to derive a spot price")

    used_fallback = values.size < SETTINGS.volatility.min_prices
    volatility = estimate_volatility(values, trading_days=trading_days, fallback=fallback)

    return HistoricalEstimate(
        spot_price=float(values[-1]),
        volatility=volatility,
        n_prices=int(values.size),
        used_fallback=used_fallback,
    )
