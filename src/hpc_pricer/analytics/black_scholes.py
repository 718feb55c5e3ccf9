"""
Closed-form Black-Scholes price for a European call.

Used as the reference the simulation is checked against, never as a
substitute for it.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2021). Options, Futures, and Other Derivatives (11th ed.).
"""

import numpy as np
from scipy import stats

from hpc_pricer.errors import InvalidParameterError
from hpc_pricer.simulation.params import SimulationParameters


def _calculate_d1_d2(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
) -> tuple[float, float]:
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T
    """
    vol_sqrt_t = volatility * np.sqrt(time_to_expiry)

    d1 = (np.log(spot / strike) + (rate + 0.5 * volatility**2) * time_to_expiry) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t

    return d1, d2


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    Price European call option using Black-Scholes.

    [T1] C = S*N(d1) - K*e^(-rT)*N(d2)

    With zero volatility the terminal price is the forward S*e^(rT), so the
    price collapses to the discounted intrinsic value of the forward.

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal, >= 0)
    time_to_expiry : float
        Time to expiry (years)

    Returns
    -------
    float
        Call option price

    Examples
    --------
    >>> round(black_scholes_call(100, 100, 0.05, 0.20, 1.0), 4)
    10.4506
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    discount = np.exp(-rate * time_to_expiry)

    if time_to_expiry == 0:
        return max(spot - strike, 0.0)
    if volatility == 0:
        forward = spot * np.exp(rate * time_to_expiry)
        return float(max(forward - strike, 0.0) * discount)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, volatility, time_to_expiry)

    call_price = spot * stats.norm.cdf(d1) - strike * discount * stats.norm.cdf(d2)

    return float(call_price)


def black_scholes_reference(params: SimulationParameters) -> float:
    """Closed-form call price for the same inputs as a simulation run."""
    return black_scholes_call(
        params.spot_price,
        params.strike_price,
        params.risk_free_rate,
        params.volatility,
        params.time_to_maturity,
    )


def _validate_inputs(
    spot: float,
    strike: float,
    volatility: float,
    time_to_expiry: float,
) -> None:
    """Validate Black-Scholes inputs."""
    if spot <= 0:
        raise InvalidParameterError("spot", spot, "> 0")
    if strike <= 0:
        raise InvalidParameterError("strike", strike, "> 0")
    if volatility < 0:
        raise InvalidParameterError("volatility", volatility, ">= 0")
    if time_to_expiry < 0:
        raise InvalidParameterError("time_to_expiry", time_to_expiry, ">= 0")
