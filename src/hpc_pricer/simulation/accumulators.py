"""
Per-worker payoff accumulators and their merge.

Each worker reduces its partition to three sums plus a path count. The
merge is a plain sum, so partial results combine in any order and grouping;
only floating-point reassociation can differ between orders.
"""

import logging
import math
from dataclasses import dataclass
from functools import reduce
from typing import Iterable

import numpy as np

from hpc_pricer.simulation.params import SimulationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathAccumulator:
    """
    Running sums over a set of simulated paths.

    Attributes
    ----------
    sum_payoff : float
        Σ max(S_T - K, 0)
    sum_payoff_sq : float
        Σ max(S_T - K, 0)²
    sum_terminal : float
        Σ S_T
    n_paths : int
        Number of paths summed
    """

    sum_payoff: float = 0.0
    sum_payoff_sq: float = 0.0
    sum_terminal: float = 0.0
    n_paths: int = 0

    @classmethod
    def empty(cls) -> "PathAccumulator":
        """Identity element of ``merge``."""
        return cls()

    @classmethod
    def from_terminal_prices(cls, terminal: np.ndarray, strike: float) -> "PathAccumulator":
        """
        Reduce a batch of terminal prices to call payoff sums.

        [T1] Call payoff: max(S(T) - K, 0)
        """
        payoffs = np.maximum(terminal - strike, 0.0)
        return cls(
            sum_payoff=float(payoffs.sum()),
            sum_payoff_sq=float(np.dot(payoffs, payoffs)),
            sum_terminal=float(terminal.sum()),
            n_paths=int(terminal.shape[0]),
        )

    def merge(self, other: "PathAccumulator") -> "PathAccumulator":
        """Combine two disjoint sets of paths."""
        return PathAccumulator(
            sum_payoff=self.sum_payoff + other.sum_payoff,
            sum_payoff_sq=self.sum_payoff_sq + other.sum_payoff_sq,
            sum_terminal=self.sum_terminal + other.sum_terminal,
            n_paths=self.n_paths + other.n_paths,
        )

    def __add__(self, other: "PathAccumulator") -> "PathAccumulator":
        if not isinstance(other, PathAccumulator):
            return NotImplemented
        return self.merge(other)

    def to_result(self, discount_factor: float) -> SimulationResult:
        """
        Derive price, standard error and average terminal price.

        [T1] mean = Σpayoff / N
        [T1] var = Σpayoff² / N - mean²   (population variance)
        [T1] SE = sqrt(var / N) * e^(-rT)

        Parameters
        ----------
        discount_factor : float
            e^(-rT)

        Returns
        -------
        SimulationResult
            Discounted estimate with its standard error

        Raises
        ------
        ValueError
            If no paths were accumulated
        """
        if self.n_paths <= 0:
            raise ValueError(f"CRITICAL: cannot derive a result from {self.n_paths} paths")

        n = self.n_paths
        mean_payoff = self.sum_payoff / n
        variance = self.sum_payoff_sq / n - mean_payoff * mean_payoff

        # Cancellation can leave a tiny negative value
        if variance < 0.0:
            logger.debug(f"Clamping negative payoff variance {variance:.3e} to zero")
            variance = 0.0

        return SimulationResult(
            fair_value=mean_payoff * discount_factor,
            standard_error=math.sqrt(variance / n) * discount_factor,
            average_terminal_price=self.sum_terminal / n,
            n_paths=n,
        )


def merge_accumulators(partials: Iterable[PathAccumulator]) -> PathAccumulator:
    """Sum any number of partial accumulators (empty input gives the identity)."""
    return reduce(PathAccumulator.merge, partials, PathAccumulator.empty())
