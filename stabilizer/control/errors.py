"""
Stabilizer Exceptions

Errors raised by the control law and its configuration layer.
"""

import math


class StabilizerError(Exception):
    """Base class for all stabilizer errors."""


class InvalidTimestep(StabilizerError, ValueError):
    """Raised when an update is requested with a non-positive or non-finite timestep."""

    def __init__(self, dt: float):
        self.dt = dt
        super().__init__(f"Timestep must be positive and finite, got {dt!r}")


class InvalidConfiguration(StabilizerError, ValueError):
    """Raised when gains, limits or a configuration file are not usable."""


def check_timestep(dt: float) -> float:
    """Return dt as a float, raising InvalidTimestep if it cannot be used."""
    try:
        value = float(dt)
    except (TypeError, ValueError):
        raise InvalidTimestep(dt) from None
    if not value > 0 or value == float("inf"):
        raise InvalidTimestep(dt)
    return value


class InvalidMeasurement(StabilizerError, ValueError):
    """Raised when a sampled command or state value is NaN or infinite."""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"{name} must be finite, got {value!r}")


def check_finite(name: str, value: float) -> float:
    """Return value as a float, raising InvalidMeasurement if it is not finite."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise InvalidMeasurement(name, value) from None
    if not math.isfinite(result):
        raise InvalidMeasurement(name, value)
    return result
