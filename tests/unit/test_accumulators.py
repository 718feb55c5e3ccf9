"""
Tests for per-worker accumulators and the final merge.

The merge must be a plain sum: splitting the paths differently or merging
partials in another order may only change floating-point rounding.
"""

import logging
import math

import numpy as np
import pytest

from hpc_pricer.simulation.accumulators import PathAccumulator, merge_accumulators
from hpc_pricer.simulation.gbm import TerminalPriceKernel
from hpc_pricer.simulation.params import SimulationParameters


@pytest.fixture
def fixed_terminal(atm_params: SimulationParameters) -> np.ndarray:
    """A fixed, deterministic sequence of 100k terminal prices."""
    z = np.random.default_rng(2024).standard_normal(100_000)
    return TerminalPriceKernel.from_params(atm_params).terminal_prices(z)


class TestFromTerminalPrices:
    """Tests for PathAccumulator.from_terminal_prices."""

    def test_sums(self) -> None:
        """[T1] Call payoff sums against hand-computed values."""
        terminal = np.array([90.0, 100.0, 110.0, 125.0])
        acc = PathAccumulator.from_terminal_prices(terminal, strike=100.0)

        # payoffs: 0, 0, 10, 25
        assert acc.sum_payoff == pytest.approx(35.0)
        assert acc.sum_payoff_sq == pytest.approx(100.0 + 625.0)
        assert acc.sum_terminal == pytest.approx(425.0)
        assert acc.n_paths == 4

    def test_all_out_of_the_money(self) -> None:
        """No positive payoff gives zero sums but counts every path."""
        acc = PathAccumulator.from_terminal_prices(np.array([50.0, 60.0]), strike=100.0)

        assert acc.sum_payoff == 0.0
        assert acc.sum_payoff_sq == 0.0
        assert acc.n_paths == 2


class TestMerge:
    """Tests for merge / merge_accumulators."""

    def test_empty_is_identity(self) -> None:
        acc = PathAccumulator(sum_payoff=1.0, sum_payoff_sq=2.0, sum_terminal=3.0, n_paths=4)

        assert acc.merge(PathAccumulator.empty()) == acc
        assert PathAccumulator.empty().merge(acc) == acc

    def test_add_operator(self) -> None:
        a = PathAccumulator(1.0, 1.0, 10.0, 1)
        b = PathAccumulator(2.0, 4.0, 20.0, 1)

        assert a + b == PathAccumulator(3.0, 5.0, 30.0, 2)

    def test_merge_empty_iterable(self) -> None:
        assert merge_accumulators([]) == PathAccumulator.empty()

    @pytest.mark.parametrize("n_chunks", [1, 2, 3, 7, 16, 101])
    def test_partition_independent(
        self, fixed_terminal: np.ndarray, atm_params: SimulationParameters, n_chunks: int, tolerances
    ) -> None:
        """Chunked sums match a single pass up to rounding."""
        strike = atm_params.strike_price
        df = atm_params.discount_factor

        whole = PathAccumulator.from_terminal_prices(fixed_terminal, strike).to_result(df)

        partials = [
            PathAccumulator.from_terminal_prices(chunk, strike)
            for chunk in np.array_split(fixed_terminal, n_chunks)
        ]
        forward = merge_accumulators(partials).to_result(df)
        backward = merge_accumulators(reversed(partials)).to_result(df)

        for merged in (forward, backward):
            assert merged.n_paths == whole.n_paths
            assert merged.fair_value == pytest.approx(whole.fair_value, rel=tolerances.reduction)
            assert merged.standard_error == pytest.approx(
                whole.standard_error, rel=tolerances.reduction
            )
            assert merged.average_terminal_price == pytest.approx(
                whole.average_terminal_price, rel=tolerances.reduction
            )

    def test_merge_associative(self) -> None:
        a = PathAccumulator(1.5, 2.25, 101.5, 1)
        b = PathAccumulator(0.0, 0.0, 98.0, 1)
        c = PathAccumulator(4.0, 16.0, 104.0, 1)

        left = (a + b) + c
        right = a + (b + c)

        assert left.n_paths == right.n_paths == 3
        assert left.sum_payoff == pytest.approx(right.sum_payoff)
        assert left.sum_terminal == pytest.approx(right.sum_terminal)


class TestToResult:
    """[T1] Post-loop derivation of price, SE and average terminal price."""

    def test_hand_computed(self) -> None:
        """Payoffs 0, 10, 20 with df = 0.9."""
        acc = PathAccumulator(
            sum_payoff=30.0, sum_payoff_sq=500.0, sum_terminal=330.0, n_paths=3
        )
        result = acc.to_result(discount_factor=0.9)

        mean = 10.0
        variance = 500.0 / 3 - mean**2  # population variance
        assert result.fair_value == pytest.approx(mean * 0.9)
        assert result.standard_error == pytest.approx(math.sqrt(variance / 3) * 0.9)
        assert result.average_terminal_price == pytest.approx(110.0)
        assert result.n_paths == 3

    def test_single_path_zero_error(self) -> None:
        """N = 1: population variance of one sample is zero."""
        acc = PathAccumulator.from_terminal_prices(np.array([112.345]), strike=100.0)
        result = acc.to_result(discount_factor=0.95)

        assert result.standard_error == 0.0
        assert result.fair_value == pytest.approx(12.345 * 0.95)

    def test_negative_variance_clamped(self, caplog) -> None:
        """Cancellation leaving var < 0 is clamped, not propagated as NaN."""
        acc = PathAccumulator(sum_payoff=3.0, sum_payoff_sq=8.9999999, sum_terminal=3.0, n_paths=1)

        with caplog.at_level(logging.DEBUG, logger="hpc_pricer.simulation.accumulators"):
            result = acc.to_result(discount_factor=1.0)

        assert result.standard_error == 0.0
        assert not math.isnan(result.standard_error)
        assert "Clamping negative payoff variance" in caplog.text

    def test_no_paths_rejected(self) -> None:
        with pytest.raises(ValueError, match="cannot derive a result"):
            PathAccumulator.empty().to_result(discount_factor=1.0)
