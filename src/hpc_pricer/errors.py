"""
Error taxonomy for the option pricer.

Only precondition violations and explicit cancellation are raised.
Insufficient price history and negative variance from floating-point
cancellation are recovered where they occur (fallback volatility,
clamping) and logged instead.
"""

from typing import Any


class PricingError(Exception):
    """Base class for all pricer errors."""

    pass


class InvalidParameterError(PricingError, ValueError):
    """
    Raised when a caller-supplied parameter violates its constraint.

    Raised before any simulation work starts, so no partial result exists.

    Attributes
    ----------
    parameter : str
        Name of the offending parameter
    value : Any
        Value that was rejected
    constraint : str
        Human-readable constraint, e.g. "> 0"
    """

    def __init__(self, parameter: str, value: Any, constraint: str):
        self.parameter = parameter
        self.value = value
        self.constraint = constraint
        super().__init__(f"CRITICAL: {parameter} must be {constraint}, got {value}")


class SimulationCancelledError(PricingError):
    """Raised when a running simulation observes a cancellation request."""

    pass
