"""
Frozen configuration settings for Monte Carlo option pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Path count and worker count can be overridden from the environment.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from hpc_pricer.config.tolerances import Z_95

# =============================================================================
# Environment Resolution
# =============================================================================


def _resolve_int_env(name: str, default: Optional[int]) -> Optional[int]:
    """
    Read a positive integer from the environment.

    Returns ``default`` when the variable is unset or empty. A value that is
    set but not a positive integer is an error, never silently ignored.
    """
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw.replace("_", ""))
    except ValueError as e:
        raise ValueError(f"CRITICAL: {name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"CRITICAL: {name} must be > 0, got {value}")
    return value


def _resolve_n_paths() -> int:
    """
    Resolve the default path count.

    Priority:
    1. HPC_PRICER_PATHS environment variable (if set)
    2. Default: 100,000,000 paths
    """
    return _resolve_int_env("HPC_PRICER_PATHS", 100_000_000)


def _resolve_n_workers() -> Optional[int]:
    """
    Resolve the worker count.

    Priority:
    1. HPC_PRICER_WORKERS environment variable (if set)
    2. None: auto-detect with os.cpu_count() at run time
    """
    return _resolve_int_env("HPC_PRICER_WORKERS", None)


def detect_workers() -> int:
    """Number of parallel workers available on this machine (at least 1)."""
    return os.cpu_count() or 1


# =============================================================================
# Simulation Configuration
# =============================================================================


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo engine configuration.

    Attributes
    ----------
    n_paths : int
        Number of simulated terminal prices. Override with HPC_PRICER_PATHS.
    n_workers : Optional[int]
        Number of parallel workers (None = auto). Override with HPC_PRICER_WORKERS.
    chunk_size : int
        Paths simulated per vectorized step inside a worker. Bounds memory
        at roughly 3 * 8 * chunk_size bytes per worker.
    backend : str
        "thread" or "process"
    seed : Optional[int]
        Root seed (None = fresh OS entropy per run)
    """

    n_paths: int = field(default_factory=_resolve_n_paths)
    n_workers: Optional[int] = field(default_factory=_resolve_n_workers)
    chunk_size: int = 1_000_000
    backend: str = "thread"
    seed: Optional[int] = None


# =============================================================================
# Market Configuration
# =============================================================================


@dataclass(frozen=True)
class MarketConfig:
    """
    Immutable market defaults.

    Spot and strike are only used when no price history is available.

    Attributes
    ----------
    risk_free_rate : float
        Continuously compounded risk-free rate (decimal)
    time_to_maturity : float
        Option maturity in years
    default_spot : float
        Spot price used without price history
    default_strike : float
        Strike used without price history
    """

    risk_free_rate: float = 0.05  # 5%
    time_to_maturity: float = 1.0  # 1 year
    default_spot: float = 100.0
    default_strike: float = 100.0


# =============================================================================
# Volatility Configuration
# =============================================================================


@dataclass(frozen=True)
class VolatilityConfig:
    """
    Immutable historical volatility configuration. [T1: Hull Ch. 15]

    Attributes
    ----------
    trading_days_per_year : int
        Annualization factor for daily log-returns
    fallback_volatility : float
        Volatility used when the history is too short to estimate dispersion
    min_prices : int
        Minimum number of prices for an estimate (two log-returns)
    """

    trading_days_per_year: int = 252  # [T1]
    fallback_volatility: float = 0.20  # 20%
    min_prices: int = 3


# =============================================================================
# Report Configuration
# =============================================================================


@dataclass(frozen=True)
class ReportConfig:
    """
    Immutable console report configuration.

    Attributes
    ----------
    confidence_z : float
        Normal quantile for the confidence interval (1.96 = 95%)
    currency : str
        Currency label printed next to prices
    width : int
        Width of separator lines
    """

    confidence_z: float = Z_95
    currency: str = "EUR"
    width: int = 44


# =============================================================================
# Master Configuration
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from hpc_pricer.config.settings import SETTINGS
    >>> SETTINGS.market.risk_free_rate
    0.05
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    market: MarketConfig = field(default_factory=MarketConfig)
    volatility: VolatilityConfig = field(default_factory=VolatilityConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


# Singleton instance - import this
SETTINGS = Settings()
