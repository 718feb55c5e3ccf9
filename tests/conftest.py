"""
Centralized pytest fixtures for the hpc-pricer test suite.

Fixture Categories:
1. Tolerances - Tiered tolerance settings
2. Market Parameters - Standard run parameters for option pricing
3. Price Files - Small CSV price histories written to tmp_path
4. Randomness - Reproducible generators
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pytest

from hpc_pricer.simulation.params import SimulationParameters

# =============================================================================
# TOLERANCE TIERS
# =============================================================================


@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    See: hpc_pricer.config.tolerances for derivations.
    """

    # Deterministic arithmetic: zero volatility, closed forms
    deterministic: float = 1e-9

    # Reordered floating-point sums
    reduction: float = 1e-9

    # Monte Carlo vs analytical at 1M paths (relative)
    mc_1m_paths: float = 0.005


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MARKET PARAMETERS
# =============================================================================


@pytest.fixture
def atm_params() -> SimulationParameters:
    """
    At-the-money reference case.

    [T1] Black-Scholes price: 10.4506
    """
    return SimulationParameters(
        spot_price=100.0,
        strike_price=100.0,
        risk_free_rate=0.05,
        volatility=0.20,
        time_to_maturity=1.0,
        n_paths=100_000,
    )


@pytest.fixture
def zero_vol_params() -> SimulationParameters:
    """Zero volatility: every path lands on the forward price."""
    return SimulationParameters(
        spot_price=100.0,
        strike_price=95.0,
        risk_free_rate=0.05,
        volatility=0.0,
        time_to_maturity=1.0,
        n_paths=10_000,
    )


# =============================================================================
# PRICE FILES
# =============================================================================

SAMPLE_PRICES = [100.0, 101.5, 100.8, 102.3, 101.9, 103.4, 102.7, 104.1]


@pytest.fixture
def sample_prices() -> list[float]:
    """Short synthetic daily close series, oldest first."""
    return list(SAMPLE_PRICES)


@pytest.fixture
def price_csv(tmp_path: Path) -> Path:
    """Date,Close CSV with a header row."""
    lines = ["Date,Close"] + [
        f"2024-01-{day + 2:02d},{price}" for day, price in enumerate(SAMPLE_PRICES)
    ]
    path = tmp_path / "market_data.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


# =============================================================================
# RANDOMNESS
# =============================================================================


@pytest.fixture
def reproducible_rng() -> np.random.Generator:
    """Provide a reproducible numpy random generator."""
    return np.random.default_rng(seed=42)
