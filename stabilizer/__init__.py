"""
Quadrotor Stabilizer

Altitude and roll hold for a quadrotor: two PID loops, setpoint tracking
from pilot rate commands, and four-motor force mixing.

Submodules:
- control: PID controllers, target tracking, motor mixing, control loop
- platforms: Stabilizer configurations and presets
- specs: YAML configuration loading and validation
- physics: Planar rigid-body plant for closed-loop runs
- telemetry: Periodic telemetry reporting
"""

__version__ = "0.1.0"

from stabilizer.control import (
    PIDGains,
    PIDState,
    PIDController,
    DerivativeSource,
    AltitudeController,
    RollController,
    TargetTracker,
    TargetState,
    MotorId,
    MotorForces,
    MotorMixer,
    CommandSource,
    StateSource,
    ActuatorSink,
    ControlLoop,
    ControlTelemetry,
    StabilizerError,
    InvalidTimestep,
    InvalidConfiguration,
    InvalidMeasurement,
)
from stabilizer.platforms import StabilizerConfig, get_config, list_configs, register_config

__all__ = [
    # Control
    "PIDGains",
    "PIDState",
    "PIDController",
    "DerivativeSource",
    "AltitudeController",
    "RollController",
    "TargetTracker",
    "TargetState",
    "MotorId",
    "MotorForces",
    "MotorMixer",
    "CommandSource",
    "StateSource",
    "ActuatorSink",
    "ControlLoop",
    "ControlTelemetry",
    # Errors
    "StabilizerError",
    "InvalidTimestep",
    "InvalidConfiguration",
    "InvalidMeasurement",
    # Configuration
    "StabilizerConfig",
    "get_config",
    "list_configs",
    "register_config",
]
