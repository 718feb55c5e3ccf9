"""
Centralized tolerance framework for the Monte Carlo pricer.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 2 (Reduction): Floating-point reassociation of partial sums
    Tier 3 (Stochastic): CLT-derived, sampling error of the MC estimator

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 1-2 - Monte Carlo error bounds
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: Zero-volatility runs collapse every path to the forward price.
#: Only rounding in exp() and the N-term sums remains.
DETERMINISTIC_RELATIVE_TOLERANCE: Final[float] = 1e-9

#: Closed-form Black-Scholes vs reference values quoted to 4 decimals
HULL_EXAMPLE_TOLERANCE: Final[float] = 1e-3


# =============================================================================
# Tier 2: Reduction Tolerances
# =============================================================================

#: Merging per-partition sums in a different order only reassociates
#: floating-point additions; error grows ~ N * machine_epsilon
REDUCTION_RELATIVE_TOLERANCE: Final[float] = 1e-9


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_paths: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo paths
    sigma : float
        Estimated relative dispersion of the payoff (default 0.20)
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Tolerance for MC vs analytical comparison

    Examples
    --------
    >>> round(mc_tolerance(1_000_000), 4)
    0.0006
    """
    return float(confidence * sigma / np.sqrt(n_paths))


#: MC vs Black-Scholes sanity bound at 1,000,000 paths: 0.5% relative
BS_MC_RELATIVE_TOLERANCE: Final[float] = 0.005

#: Average terminal price vs forward at 1,000,000 paths (σ=0.2): ~10 SE
FORWARD_RELATIVE_TOLERANCE: Final[float] = 0.002

#: 95% two-sided normal quantile used for confidence intervals
Z_95: Final[float] = 1.96


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    "deterministic_relative": DETERMINISTIC_RELATIVE_TOLERANCE,
    "hull_example": HULL_EXAMPLE_TOLERANCE,
    "reduction_relative": REDUCTION_RELATIVE_TOLERANCE,
    "bs_mc_relative": BS_MC_RELATIVE_TOLERANCE,
    "forward_relative": FORWARD_RELATIVE_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
