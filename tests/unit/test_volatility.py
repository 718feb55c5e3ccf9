"""
Tests for historical volatility estimation.

[T1] σ = stdev(ln(p_i / p_{i-1}), ddof=1) * √252
"""

import logging
import math
import statistics

import numpy as np
import pandas as pd
import pytest

from hpc_pricer.analytics.volatility import (
    FALLBACK_VOLATILITY,
    HistoricalEstimate,
    estimate_from_history,
    estimate_volatility,
    log_returns,
)
from hpc_pricer.errors import InvalidParameterError


def _reference_volatility(prices: list[float], trading_days: int = 252) -> float:
    returns = [math.log(b / a) for a, b in zip(prices, prices[1:])]
    return statistics.stdev(returns) * math.sqrt(trading_days)


class TestLogReturns:
    """Tests for log_returns."""

    def test_values(self) -> None:
        returns = log_returns([100.0, 110.0, 99.0])
        np.testing.assert_allclose(returns, [math.log(1.1), math.log(0.9)])

    @pytest.mark.parametrize("prices", [[], [100.0]])
    def test_short_series_empty(self, prices: list[float]) -> None:
        assert log_returns(prices).size == 0


class TestEstimateVolatility:
    """Tests for estimate_volatility."""

    def test_matches_reference(self, sample_prices: list[float]) -> None:
        """Bessel-corrected sample stdev, annualized by √252."""
        assert estimate_volatility(sample_prices) == pytest.approx(
            _reference_volatility(sample_prices), rel=1e-12
        )

    def test_three_prices_minimum(self) -> None:
        """Three prices (two log-returns) is the smallest estimable history."""
        prices = [100.0, 110.0, 99.0]
        assert estimate_volatility(prices) == pytest.approx(_reference_volatility(prices))

    @pytest.mark.parametrize("prices", [[], [100.0], [100.0, 105.0]])
    def test_fallback_for_short_history(self, prices: list[float]) -> None:
        """Fewer than three prices returns exactly 0.20."""
        assert estimate_volatility(prices) == 0.20
        assert FALLBACK_VOLATILITY == 0.20

    def test_two_prices_is_not_nan(self) -> None:
        """One log-return would divide by zero; the fallback applies instead."""
        vol = estimate_volatility([100.0, 250.0])
        assert math.isfinite(vol)

    def test_fallback_logged(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="hpc_pricer.analytics.volatility"):
            estimate_volatility([100.0])
        assert "Insufficient history" in caplog.text

    def test_custom_fallback_and_annualization(self) -> None:
        assert estimate_volatility([1.0], fallback=0.35) == 0.35

        prices = [100.0, 101.0, 99.5, 100.2]
        weekly = estimate_volatility(prices, trading_days=52)
        assert weekly == pytest.approx(_reference_volatility(prices, trading_days=52))

    def test_constant_prices_zero_volatility(self) -> None:
        assert estimate_volatility([50.0] * 10) == 0.0

    def test_scale_invariant(self, sample_prices: list[float]) -> None:
        """Rescaling all prices leaves log-returns unchanged."""
        scaled = [p * 37.5 for p in sample_prices]
        assert estimate_volatility(scaled) == pytest.approx(estimate_volatility(sample_prices))

    def test_accepts_numpy_and_pandas(self, sample_prices: list[float]) -> None:
        expected = estimate_volatility(sample_prices)

        assert estimate_volatility(np.array(sample_prices)) == pytest.approx(expected)
        assert estimate_volatility(pd.Series(sample_prices)) == pytest.approx(expected)

    @pytest.mark.parametrize("bad", [0.0, -5.0, float("nan"), float("inf")])
    def test_invalid_prices_rejected(self, bad: float) -> None:
        """Non-positive or non-finite prices never produce NaN/Inf silently."""
        with pytest.raises(InvalidParameterError, match="prices"):
            estimate_volatility([100.0, bad, 101.0])

    def test_non_numeric_prices_rejected(self) -> None:
        with pytest.raises(InvalidParameterError, match="prices must be a sequence of numbers"):
            estimate_volatility([100.0, "abc", 101.0])

    def test_returns_python_float(self, sample_prices: list[float]) -> None:
        assert type(estimate_volatility(sample_prices)) is float


class TestEstimateFromHistory:
    """Tests for estimate_from_history."""

    def test_full_history(self, sample_prices: list[float]) -> None:
        estimate = estimate_from_history(sample_prices)

        assert isinstance(estimate, HistoricalEstimate)
        assert estimate.spot_price == sample_prices[-1]
        assert estimate.volatility == pytest.approx(estimate_volatility(sample_prices))
        assert estimate.n_prices == len(sample_prices)
        assert estimate.used_fallback is False

    def test_single_price_uses_fallback(self) -> None:
        estimate = estimate_from_history([123.4])

        assert estimate.spot_price == 123.4
        assert estimate.volatility == 0.20
        assert estimate.used_fallback is True

    def test_empty_history_rejected(self) -> None:
        """No spot price can be derived from nothing."""
        with pytest.raises(InvalidParameterError, match="prices"):
            estimate_from_history([])
