"""
Geometric Brownian Motion terminal price generation.

Only the terminal value matters for a European payoff, so no time grid is
built: each path is one exact log-normal draw.

[T1] Direct simulation: S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

from dataclasses import dataclass

import numpy as np

from hpc_pricer.simulation.params import SimulationParameters


@dataclass(frozen=True)
class TerminalPriceKernel:
    """
    Precomputed constants for mapping standard normals to terminal prices.

    Built once per worker, outside the per-path loop.

    Attributes
    ----------
    spot : float
        Initial spot price S0
    drift : float
        (r - σ²/2)T
    vol_term : float
        σ√T
    """

    spot: float
    drift: float
    vol_term: float

    @classmethod
    def from_params(cls, params: SimulationParameters) -> "TerminalPriceKernel":
        """Precompute the kernel constants for a parameter set."""
        return cls(spot=params.spot_price, drift=params.drift, vol_term=params.vol_term)

    def terminal_prices(self, z: np.ndarray) -> np.ndarray:
        """
        Map standard normal draws to terminal prices.

        Parameters
        ----------
        z : np.ndarray
            Standard normal samples, shape (n,)

        Returns
        -------
        np.ndarray
            Terminal prices S(T), shape (n,)
        """
        log_returns = self.drift + self.vol_term * z
        return self.spot * np.exp(log_returns)


def generate_terminal_values(
    params: SimulationParameters,
    n_paths: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Draw ``n_paths`` terminal prices from ``rng``.

    The generator is consumed, not shared: callers own one generator per
    worker.

    Parameters
    ----------
    params : SimulationParameters
        GBM parameters
    n_paths : int
        Number of terminal prices to draw
    rng : np.random.Generator
        Generator owned by the caller

    Returns
    -------
    np.ndarray
        Terminal values, shape (n_paths,)
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")

    kernel = TerminalPriceKernel.from_params(params)
    return kernel.terminal_prices(rng.standard_normal(n_paths))
