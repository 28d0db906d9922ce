"""
Control Module

Implements the stabilizer control law:
- PID controllers (altitude, roll)
- Setpoint tracking from pilot rate commands
- Motor mixing for an X quadrotor
- The per-tick control loop and its collaborator interfaces
"""

from stabilizer.control.errors import (
    StabilizerError,
    InvalidTimestep,
    InvalidConfiguration,
    InvalidMeasurement,
)
from stabilizer.control.pid_controller import (
    PIDGains,
    PIDState,
    PIDController,
    DerivativeSource,
    AltitudeController,
    RollController,
)
from stabilizer.control.target_tracker import TargetTracker, TargetState
from stabilizer.control.motor_mixer import MotorId, MotorForces, MotorMixer
from stabilizer.control.control_loop import (
    CommandSource,
    StateSource,
    ActuatorSink,
    ControlLoop,
    ControlTelemetry,
)
from stabilizer.control.command_sources import (
    ConstantCommandSource,
    CommandSegment,
    ScriptedCommandSource,
)

__all__ = [
    "StabilizerError",
    "InvalidTimestep",
    "InvalidConfiguration",
    "InvalidMeasurement",
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
    "ConstantCommandSource",
    "CommandSegment",
    "ScriptedCommandSource",
]
