"""
Stabilizer Configuration Validator

Checks a StabilizerConfig for values the control law cannot run with
(errors) and for values that are legal but unusual (warnings).
"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING
import math

import numpy as np

from stabilizer.control.errors import InvalidConfiguration

if TYPE_CHECKING:
    from stabilizer.platforms.stabilizer_configs import StabilizerConfig


@dataclass
class ValidationError:
    """A validation error that must be fixed."""
    field: str
    message: str
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        s = f"ERROR [{self.field}]: {self.message}"
        if self.suggestion:
            s += f" (Suggestion: {self.suggestion})"
        return s


@dataclass
class ValidationWarning:
    """A validation warning (unusual but allowed)."""
    field: str
    message: str
    typical_range: Optional[str] = None

    def __str__(self) -> str:
        s = f"WARNING [{self.field}]: {self.message}"
        if self.typical_range:
            s += f" (Typical: {self.typical_range})"
        return s


@dataclass
class ValidationResult:
    """Complete validation result."""
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)

    def __str__(self) -> str:
        lines = ["Validation PASSED" if self.is_valid else "Validation FAILED"]

        if self.errors:
            lines.append(f"\n{len(self.errors)} Error(s):")
            for e in self.errors:
                lines.append(f"  - {e}")

        if self.warnings:
            lines.append(f"\n{len(self.warnings)} Warning(s):")
            for w in self.warnings:
                lines.append(f"  - {w}")

        return "\n".join(lines)


def _validate_gains(prefix: str, gains, errors: List[ValidationError]):
    try:
        gains.validate()
    except InvalidConfiguration as e:
        errors.append(ValidationError(
            prefix, str(e),
            suggestion="keep gains >= 0 and integral_min < 0 < integral_max",
        ))


def _require_positive(name: str, value: float, errors: List[ValidationError]):
    if not (math.isfinite(value) and value > 0):
        errors.append(ValidationError(name, f"must be positive and finite, got {value!r}"))


def validate_config(config: "StabilizerConfig") -> ValidationResult:
    """
    Validate a stabilizer configuration.

    Args:
        config: Configuration to check

    Returns:
        ValidationResult with every error and warning found
    """
    errors: List[ValidationError] = []
    warnings: List[ValidationWarning] = []

    _validate_gains("altitude_gains", config.altitude_gains, errors)
    _validate_gains("roll_gains", config.roll_gains, errors)

    if not (math.isfinite(config.max_tilt_angle) and 0 < config.max_tilt_angle < np.pi / 2):
        errors.append(ValidationError(
            "max_tilt_angle",
            f"must be in (0, 90) degrees, got {np.degrees(config.max_tilt_angle):.1f}",
            suggestion="use 10-35 degrees",
        ))
    elif config.max_tilt_angle > np.radians(45.0):
        warnings.append(ValidationWarning(
            "max_tilt_angle",
            f"{np.degrees(config.max_tilt_angle):.1f} degrees loses much of the hover thrust",
            typical_range="10-35 degrees",
        ))

    for name in ("gravity", "vehicle_mass", "rise_rate", "telemetry_interval",
                 "arm_length", "roll_inertia"):
        _require_positive(name, getattr(config, name), errors)

    if not math.isfinite(config.initial_target_altitude):
        errors.append(ValidationError(
            "initial_target_altitude",
            f"must be finite, got {config.initial_target_altitude!r}",
        ))
    elif config.initial_target_altitude < 0:
        warnings.append(ValidationWarning(
            "initial_target_altitude",
            "setpoint is below the ground plane",
        ))

    if not errors and config.altitude_gains.kd == 0:
        warnings.append(ValidationWarning(
            "altitude_gains.kd",
            "no damping on the altitude loop, expect sustained oscillation",
        ))

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
