"""
Console and JSON reporting for a pricing run.

The engine only returns a standard error; interval construction and the
choice of confidence level live here, on the caller's side.
"""

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from hpc_pricer.config.settings import SETTINGS, ReportConfig
from hpc_pricer.config.tolerances import Z_95
from hpc_pricer.simulation.params import SimulationParameters, SimulationResult


def confidence_interval(result: SimulationResult, z: float = Z_95) -> tuple[float, float]:
    """
    Normal-approximation confidence interval around the MC price.

    [T1] CI = price ± z * SE  (z = 1.96 for 95%)

    Parameters
    ----------
    result : SimulationResult
        Engine output
    z : float, default 1.96
        Normal quantile

    Returns
    -------
    tuple[float, float]
        (lower, upper)
    """
    if z < 0:
        raise ValueError(f"CRITICAL: z must be >= 0, got {z}")
    half_width = z * result.standard_error
    return (result.fair_value - half_width, result.fair_value + half_width)


@dataclass(frozen=True)
class PricingReport:
    """
    Everything the console report shows about one run.

    Attributes
    ----------
    params : SimulationParameters
        Inputs of the run
    result : SimulationResult
        Engine output
    elapsed_sec : float
        Wall-clock time of the simulation
    n_workers : int
        Workers used
    cpu_count : int
        Cores detected on the machine
    data_source : Optional[str]
        Price file the inputs came from (None = default parameters)
    n_prices : int
        Length of the price history
    used_fallback_volatility : bool
        Whether the history was too short for a volatility estimate
    reference_price : Optional[float]
        Closed-form Black-Scholes price for comparison
    """

    params: SimulationParameters
    result: SimulationResult
    elapsed_sec: float
    n_workers: int
    cpu_count: int
    data_source: Optional[str] = None
    n_prices: int = 0
    used_fallback_volatility: bool = False
    reference_price: Optional[float] = None

    @property
    def throughput(self) -> float:
        """Simulated paths per second."""
        if self.elapsed_sec <= 0:
            return float("inf")
        return self.result.n_paths / self.elapsed_sec

    def to_dict(self, z: float = Z_95) -> Dict[str, Any]:
        """Machine-readable form of the report."""
        lower, upper = confidence_interval(self.result, z)
        payload = asdict(self)
        payload["confidence_interval"] = {"z": z, "lower": lower, "upper": upper}
        payload["throughput_paths_per_sec"] = self.throughput
        return payload

    def to_json(self, z: float = Z_95, indent: int = 2) -> str:
        """JSON form of ``to_dict``."""
        return json.dumps(self.to_dict(z), indent=indent)


def format_report(report: PricingReport, config: Optional[ReportConfig] = None) -> str:
    """
    Render the console report.

    Parameters
    ----------
    report : PricingReport
        Run to describe
    config : Optional[ReportConfig]
        Report configuration. If None, uses SETTINGS.report.

    Returns
    -------
    str
        Multi-line report
    """
    config = config or SETTINGS.report
    heavy = "=" * config.width
    light = "-" * config.width
    ccy = config.currency
    params = report.params
    result = report.result
    lower, upper = confidence_interval(result, config.confidence_z)

    lines = [heavy, "HPC MONTE CARLO PRICER".center(config.width), heavy]
    lines.append(f"[SYSTEM]   CPU Cores: {report.cpu_count}")
    lines.append(f"[SYSTEM]   Workers:   {report.n_workers}")

    if report.data_source is not None:
        lines.append(f"[DATA]     Source: {report.data_source} ({report.n_prices} points)")
        label = "Fallback Volatility" if report.used_fallback_volatility else "Historical Volatility"
        lines.append(f"[DATA]     {label}: {params.volatility * 100:.2f}%")
    else:
        lines.append("[WARNING]  No price history. Using default parameters.")

    lines.append(f"[RUN]      Simulated {params.n_paths:.2e} paths")
    lines.append(light)
    lines.append("Simulation Parameters:")
    lines.append(f"  > Asset Start Price (S0): {params.spot_price:.4f} {ccy}")
    lines.append(f"  > Option Strike Price (K):{params.strike_price:.4f} {ccy}")
    lines.append(f"  > Time to Maturity (T):   {params.time_to_maturity:.4f} Years")
    lines.append(f"  > Risk-Free Rate (r):     {params.risk_free_rate * 100:.4f} %")
    lines.append(f"  > Volatility (sigma):     {params.volatility * 100:.4f} %")
    lines.append(light)
    lines.append("Asset Projection (Drift Check):")
    lines.append(f"  > Avg Final Price (ST):   {result.average_terminal_price:.4f} {ccy}")
    lines.append(f"  > Forward S0*e^(rT):      {params.forward_price:.4f} {ccy}")
    lines.append(light)
    lines.append(f"Option Valuation ({_confidence_label(config.confidence_z)} Confidence):")
    lines.append(f"  > FAIR VALUE:             {result.fair_value:.4f} {ccy}")
    lines.append(f"  > Standard Error:         {result.standard_error:.4f}")
    lines.append(f"  > Conf. Interval:         [{lower:.4f}, {upper:.4f}]")
    if report.reference_price is not None:
        lines.append(f"  > Black-Scholes:          {report.reference_price:.4f} {ccy}")
    lines.append(light)
    lines.append("Performance Metrics:")
    lines.append(f"  > Time:                   {report.elapsed_sec:.5f} sec")
    lines.append(f"  > Throughput:             {report.throughput / 1e6:.2f} M sims/sec")
    lines.append(heavy)

    return "\n".join(lines)


def _confidence_label(z: float) -> str:
    if abs(z - Z_95) < 1e-12:
        return "95%"
    return f"z={z:g}"
