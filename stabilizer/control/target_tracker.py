"""
Target Tracker

Turns pilot stick commands into controller setpoints:
- vertical stick is a climb-rate command, integrated into the altitude setpoint
- roll stick maps directly onto a bounded roll angle
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from stabilizer.control.errors import InvalidConfiguration, check_timestep


@dataclass(frozen=True)
class TargetState:
    """Setpoints produced for one tick."""
    target_altitude: float
    target_roll_angle: float  # radians


class TargetTracker:
    """Altitude setpoint integrator and roll setpoint mapping."""

    def __init__(
        self,
        initial_altitude: float = 0.0,
        rise_rate: float = 2.0,
        max_tilt_angle: float = np.radians(15.0),
    ):
        """
        Args:
            initial_altitude: Altitude setpoint before any climb command
            rise_rate: Setpoint climb rate at full stick (units/s)
            max_tilt_angle: Roll setpoint at full stick (radians)
        """
        if not rise_rate > 0:
            raise InvalidConfiguration(f"rise_rate must be positive, got {rise_rate!r}")
        if not 0 < max_tilt_angle < np.pi / 2:
            raise InvalidConfiguration(
                f"max_tilt_angle must be in (0, pi/2) radians, got {max_tilt_angle!r}"
            )

        self.initial_altitude = float(initial_altitude)
        self.rise_rate = float(rise_rate)
        self.max_tilt_angle = float(max_tilt_angle)

        self.target_altitude = self.initial_altitude
        self.target_roll_angle = 0.0

    def reset(self, initial_altitude: Optional[float] = None):
        if initial_altitude is not None:
            self.initial_altitude = float(initial_altitude)
        self.target_altitude = self.initial_altitude
        self.target_roll_angle = 0.0

    def advance(self, dt: float, vertical_command: float, roll_command: float) -> TargetState:
        """
        Advance setpoints by one tick.

        Both commands are clipped to [-1, 1], the stick range. The altitude
        setpoint has no floor or ceiling; the roll setpoint never exceeds
        max_tilt_angle.
        """
        dt = check_timestep(dt)

        vertical_command = float(np.clip(vertical_command, -1.0, 1.0))
        self.target_altitude += vertical_command * self.rise_rate * dt
        self.target_roll_angle = float(np.clip(roll_command, -1.0, 1.0)) * self.max_tilt_angle

        return TargetState(self.target_altitude, self.target_roll_angle)

    @property
    def targets(self) -> TargetState:
        return TargetState(self.target_altitude, self.target_roll_angle)
