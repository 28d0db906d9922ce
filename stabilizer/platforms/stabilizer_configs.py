"""
Stabilizer Configurations

Defines the configuration consumed by ControlLoop.from_config and a
registry of named presets for common airframes.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Any, List
import copy

import numpy as np

from stabilizer.control.errors import InvalidConfiguration
from stabilizer.control.pid_controller import PIDGains


@dataclass
class StabilizerConfig:
    """
    Configuration for one stabilized vehicle.

    Attributes:
        altitude_gains: Altitude loop gains and integral clamp
        roll_gains: Roll loop gains and integral clamp
        max_tilt_angle: Roll setpoint at full stick (radians)
        initial_target_altitude: Altitude setpoint at start
        gravity: Gravitational acceleration (m/s^2)
        vehicle_mass: Vehicle mass (kg)
        rise_rate: Setpoint climb rate at full stick (m/s)
        telemetry_interval: Simulated seconds between telemetry reports
        arm_length: Motor mount offset from the centre along each body axis (m)
        roll_inertia: Moment of inertia about the longitudinal axis (kg*m^2)
    """
    altitude_gains: PIDGains = field(default_factory=lambda: PIDGains(
        kp=40.0, ki=3.0, kd=25.0, integral_min=-10.0, integral_max=10.0
    ))
    roll_gains: PIDGains = field(default_factory=lambda: PIDGains(
        kp=2.0, ki=0.1, kd=0.5, integral_min=-5.0, integral_max=5.0
    ))
    max_tilt_angle: float = np.radians(15.0)
    initial_target_altitude: float = 5.0
    gravity: float = 9.81
    vehicle_mass: float = 1.0
    rise_rate: float = 2.0
    telemetry_interval: float = 0.5

    # Airframe, used by the planar plant
    arm_length: float = 0.25
    roll_inertia: float = 0.02

    @property
    def gravity_compensation(self) -> float:
        """Hover thrust."""
        return self.vehicle_mass * self.gravity

    def validate(self) -> "StabilizerConfig":
        """
        Raise InvalidConfiguration listing every error found.

        Returns:
            self
        """
        from stabilizer.specs.validator import validate_config

        result = validate_config(self)
        if not result.is_valid:
            raise InvalidConfiguration(
                "; ".join(str(e) for e in result.errors)
            )
        return self

    def copy_with(self, **changes) -> "StabilizerConfig":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the nested dictionary layout used by YAML files."""
        return {
            "altitude": _gains_to_dict(self.altitude_gains),
            "roll": _gains_to_dict(self.roll_gains),
            "targets": {
                "initial_altitude": self.initial_target_altitude,
                "rise_rate": self.rise_rate,
                "max_tilt_deg": float(np.degrees(self.max_tilt_angle)),
            },
            "vehicle": {
                "mass": self.vehicle_mass,
                "gravity": self.gravity,
                "arm_length": self.arm_length,
                "roll_inertia": self.roll_inertia,
            },
            "telemetry": {
                "interval": self.telemetry_interval,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StabilizerConfig":
        """
        Create from the nested dictionary layout.

        Missing sections and keys keep their default values.

        Raises:
            InvalidConfiguration: on unknown sections/keys or non-numeric values
        """
        defaults = cls()
        data = data or {}
        _check_keys("config", data, _SECTION_KEYS.keys())
        for section, keys in _SECTION_KEYS.items():
            if section in data:
                if not isinstance(data[section], dict):
                    raise InvalidConfiguration(f"Section '{section}' must be a mapping")
                _check_keys(section, data[section], keys)

        targets = data.get("targets", {})
        vehicle = data.get("vehicle", {})
        telemetry = data.get("telemetry", {})

        try:
            return cls(
                altitude_gains=_gains_from_dict(data.get("altitude", {}), defaults.altitude_gains),
                roll_gains=_gains_from_dict(data.get("roll", {}), defaults.roll_gains),
                max_tilt_angle=float(np.radians(float(
                    targets.get("max_tilt_deg", np.degrees(defaults.max_tilt_angle))
                ))),
                initial_target_altitude=float(targets.get("initial_altitude", defaults.initial_target_altitude)),
                rise_rate=float(targets.get("rise_rate", defaults.rise_rate)),
                gravity=float(vehicle.get("gravity", defaults.gravity)),
                vehicle_mass=float(vehicle.get("mass", defaults.vehicle_mass)),
                arm_length=float(vehicle.get("arm_length", defaults.arm_length)),
                roll_inertia=float(vehicle.get("roll_inertia", defaults.roll_inertia)),
                telemetry_interval=float(telemetry.get("interval", defaults.telemetry_interval)),
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"Invalid configuration value: {e}") from e


_GAIN_KEYS = ("kp", "ki", "kd", "integral_min", "integral_max")

_SECTION_KEYS = {
    "altitude": _GAIN_KEYS,
    "roll": _GAIN_KEYS,
    "targets": ("initial_altitude", "rise_rate", "max_tilt_deg"),
    "vehicle": ("mass", "gravity", "arm_length", "roll_inertia"),
    "telemetry": ("interval",),
}


def _check_keys(section: str, data: Dict[str, Any], allowed):
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise InvalidConfiguration(
            f"Unknown key(s) in '{section}': {', '.join(map(str, unknown))}"
        )


def _gains_to_dict(gains: PIDGains) -> Dict[str, float]:
    return {name: getattr(gains, name) for name in _GAIN_KEYS}


def _gains_from_dict(data: Dict[str, Any], default: PIDGains) -> PIDGains:
    return PIDGains(**{
        name: float(data.get(name, getattr(default, name))) for name in _GAIN_KEYS
    })


# Registry of available presets
_CONFIG_REGISTRY: Dict[str, StabilizerConfig] = {}


def register_config(config_id: str, config: StabilizerConfig):
    """Register a named preset."""
    _CONFIG_REGISTRY[config_id] = config


def get_config(config_id: str) -> StabilizerConfig:
    """
    Get a preset by ID.

    Args:
        config_id: Identifier for the preset

    Returns:
        An independent copy of the preset

    Raises:
        ValueError: If config_id not found
    """
    if config_id not in _CONFIG_REGISTRY:
        available = ", ".join(_CONFIG_REGISTRY.keys())
        raise ValueError(
            f"Unknown stabilizer config '{config_id}'. Available: {available}"
        )
    return copy.deepcopy(_CONFIG_REGISTRY[config_id])


def list_configs() -> List[str]:
    """List all available preset IDs."""
    return list(_CONFIG_REGISTRY.keys())


# =============================================================================
# PRESETS
# =============================================================================

register_config("reference", StabilizerConfig())

register_config(
    "heavy_lift",
    StabilizerConfig(
        altitude_gains=PIDGains(kp=200.0, ki=15.0, kd=125.0),
        roll_gains=PIDGains(kp=8.0, ki=0.4, kd=2.0, integral_min=-5.0, integral_max=5.0),
        max_tilt_angle=np.radians(10.0),
        vehicle_mass=5.0,
        rise_rate=1.0,
        arm_length=0.4,
        roll_inertia=0.15,
    )
)

register_config(
    "agile",
    StabilizerConfig(
        altitude_gains=PIDGains(kp=20.0, ki=1.5, kd=10.0),
        roll_gains=PIDGains(kp=1.0, ki=0.05, kd=0.15, integral_min=-5.0, integral_max=5.0),
        max_tilt_angle=np.radians(30.0),
        vehicle_mass=0.5,
        rise_rate=4.0,
        arm_length=0.1,
        roll_inertia=0.004,
    )
)
