"""
Value objects for a single Monte Carlo pricing run.

[T1] Risk-neutral GBM: dS = rS dt + σS dW
[T1] Exact terminal distribution: S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering", Ch. 3.2
"""

import math
from dataclasses import dataclass
from numbers import Integral

from hpc_pricer.errors import InvalidParameterError


@dataclass(frozen=True)
class SimulationParameters:
    """
    Parameters for pricing a European call by simulation.

    Created once per run and never mutated. Validation happens here, at the
    boundary, so the simulation loop itself carries no per-path checks.

    Attributes
    ----------
    spot_price : float
        Initial spot price S0 (> 0)
    strike_price : float
        Strike price K (> 0)
    risk_free_rate : float
        Risk-free rate r (annualized, decimal)
    volatility : float
        Annualized volatility σ (>= 0)
    time_to_maturity : float
        Time to maturity T in years (> 0)
    n_paths : int
        Number of simulated terminal prices N (> 0)

    Raises
    ------
    InvalidParameterError
        Naming the first parameter that violates its constraint
    """

    spot_price: float
    strike_price: float
    risk_free_rate: float
    volatility: float
    time_to_maturity: float
    n_paths: int

    def __post_init__(self) -> None:
        """Validate parameters."""
        if not _is_finite(self.spot_price) or self.spot_price <= 0:
            raise InvalidParameterError("spot_price", self.spot_price, "> 0")
        if not _is_finite(self.strike_price) or self.strike_price <= 0:
            raise InvalidParameterError("strike_price", self.strike_price, "> 0")
        if not _is_finite(self.risk_free_rate):
            raise InvalidParameterError("risk_free_rate", self.risk_free_rate, "finite")
        if not _is_finite(self.volatility) or self.volatility < 0:
            raise InvalidParameterError("volatility", self.volatility, ">= 0")
        if not _is_finite(self.time_to_maturity) or self.time_to_maturity <= 0:
            raise InvalidParameterError("time_to_maturity", self.time_to_maturity, "> 0")
        if isinstance(self.n_paths, bool) or not isinstance(self.n_paths, Integral):
            raise InvalidParameterError("n_paths", self.n_paths, "an integer")
        if self.n_paths <= 0:
            raise InvalidParameterError("n_paths", self.n_paths, "> 0")

    @property
    def drift(self) -> float:
        """Total log drift over the horizon: (r - σ²/2)T."""
        return (self.risk_free_rate - 0.5 * self.volatility**2) * self.time_to_maturity

    @property
    def vol_term(self) -> float:
        """Total diffusion scale over the horizon: σ√T."""
        return self.volatility * math.sqrt(self.time_to_maturity)

    @property
    def discount_factor(self) -> float:
        """Present-value multiplier e^(-rT)."""
        return math.exp(-self.risk_free_rate * self.time_to_maturity)

    @property
    def forward_price(self) -> float:
        """Risk-neutral expected terminal price: S0 * e^(rT)."""
        return self.spot_price * math.exp(self.risk_free_rate * self.time_to_maturity)


@dataclass(frozen=True)
class SimulationResult:
    """
    Monte Carlo pricing result.

    Produced once per engine invocation. The confidence interval is left to
    the caller (see ``hpc_pricer.reporting.confidence_interval``).

    Attributes
    ----------
    fair_value : float
        Discounted mean payoff
    standard_error : float
        Standard error of the discounted mean (>= 0)
    average_terminal_price : float
        Mean simulated S(T); converges to the forward price
    n_paths : int
        Number of paths behind the estimate
    """

    fair_value: float
    standard_error: float
    average_terminal_price: float
    n_paths: int

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.fair_value) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.fair_value)


def _is_finite(value: float) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False
