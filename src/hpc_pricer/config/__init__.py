"""
Configuration: frozen settings and centralized tolerances.
"""

from hpc_pricer.config.settings import (
    SETTINGS,
    MarketConfig,
    ReportConfig,
    Settings,
    SimulationConfig,
    VolatilityConfig,
    detect_workers,
)

__all__ = [
    "SETTINGS",
    "MarketConfig",
    "ReportConfig",
    "Settings",
    "SimulationConfig",
    "VolatilityConfig",
    "detect_workers",
]
