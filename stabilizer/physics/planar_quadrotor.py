"""
Planar Quadrotor Plant

Rigid-body stand-in for the engine-side vehicle: one body moving in the
world lateral/vertical plane and rotating about its longitudinal axis.

# Frames:
# body: x-forward, y-left, z-up, origin at the centre of mass
# world: Y-lateral, Z-up; the body x axis stays aligned with world X
#
# Roll angle is measured as the tilt of the body y (lateral) axis against
# world up, roll rate as angular velocity about body x (longitudinal).

Implements both StateSource and ActuatorSink: motor forces are collected
during a control tick and applied on the next step() along body up at each
motor's mount.
"""

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

import numpy as np

from stabilizer.control.control_loop import ActuatorSink, StateSource
from stabilizer.control.errors import InvalidConfiguration, check_timestep
from stabilizer.control.motor_mixer import MotorForces, MotorId

if TYPE_CHECKING:
    from stabilizer.platforms.stabilizer_configs import StabilizerConfig


@dataclass(frozen=True)
class MotorMount:
    """Motor position in body coordinates (m)."""
    x: float  # forward
    y: float  # left


def quad_x_mounts(arm_length: float) -> Dict[MotorId, MotorMount]:
    """Mount offsets of an X quadrotor with the given per-axis offset."""
    a = arm_length
    return {
        MotorId.FRONT_LEFT: MotorMount(a, a),
        MotorId.FRONT_RIGHT: MotorMount(a, -a),
        MotorId.REAR_LEFT: MotorMount(-a, a),
        MotorId.REAR_RIGHT: MotorMount(-a, -a),
    }


def roll_from_lateral_axis(lateral_axis: np.ndarray, world_up: np.ndarray) -> float:
    """Roll angle as the elevation of the lateral axis above the horizontal plane."""
    lateral_axis = lateral_axis / np.linalg.norm(lateral_axis)
    return float(np.arcsin(np.clip(np.dot(lateral_axis, world_up), -1.0, 1.0)))


class PlanarQuadrotor(StateSource, ActuatorSink):
    """Vertical + roll rigid-body dynamics with a ground plane at altitude 0."""

    WORLD_UP = np.array([0.0, 1.0])  # (Y, Z)

    def __init__(
        self,
        mass: float = 1.0,
        gravity: float = 9.81,
        arm_length: float = 0.25,
        roll_inertia: float = 0.02,
        initial_altitude: float = 0.0,
        initial_roll: float = 0.0,
        mounts: Optional[Dict[MotorId, MotorMount]] = None,
    ):
        """
        Args:
            mass: Vehicle mass (kg)
            gravity: Gravitational acceleration (m/s^2)
            arm_length: Mount offset along each body axis (m)
            roll_inertia: Moment of inertia about body x (kg*m^2)
            initial_altitude: Starting altitude (m)
            initial_roll: Starting roll angle (radians)
            mounts: Override the X-layout motor mounts
        """
        for name, value in (("mass", mass), ("gravity", gravity),
                            ("arm_length", arm_length), ("roll_inertia", roll_inertia)):
            if not value > 0:
                raise InvalidConfiguration(f"{name} must be positive, got {value!r}")

        self.mass = mass
        self.gravity = gravity
        self.roll_inertia = roll_inertia
        self.mounts = mounts or quad_x_mounts(arm_length)

        self._initial_altitude = initial_altitude
        self._initial_roll = initial_roll
        self.reset()

    @classmethod
    def from_config(cls, config: "StabilizerConfig", **kwargs) -> "PlanarQuadrotor":
        return cls(
            mass=config.vehicle_mass,
            gravity=config.gravity,
            arm_length=config.arm_length,
            roll_inertia=config.roll_inertia,
            **kwargs,
        )

    def reset(self):
        """Restore the initial pose at rest."""
        self.position = np.array([0.0, float(self._initial_altitude)])  # (Y, Z)
        self.velocity = np.zeros(2)
        self.roll = float(self._initial_roll)
        self.roll_velocity = 0.0
        self.time = 0.0
        self._pending: Dict[MotorId, float] = {}

    # =========================================================================
    # StateSource
    # =========================================================================

    def altitude(self) -> float:
        return float(self.position[1])

    def roll_angle(self) -> float:
        return roll_from_lateral_axis(self.lateral_axis, self.WORLD_UP)

    def roll_rate(self) -> float:
        return self.roll_velocity

    # =========================================================================
    # ActuatorSink
    # =========================================================================

    def apply_motor_force(self, motor: MotorId, force: float) -> None:
        self._pending[motor] = self._pending.get(motor, 0.0) + float(force)

    @property
    def pending_forces(self) -> MotorForces:
        return MotorForces(*(self._pending.get(m, 0.0) for m in MotorId))

    # =========================================================================
    # Dynamics
    # =========================================================================

    @property
    def lateral_axis(self) -> np.ndarray:
        """Body y axis in world (Y, Z)."""
        return np.array([np.cos(self.roll), np.sin(self.roll)])

    @property
    def up_axis(self) -> np.ndarray:
        """Body z axis in world (Y, Z)."""
        return np.array([-np.sin(self.roll), np.cos(self.roll)])

    def compute_forces_torques(self):
        """
        Net world force and roll torque from the pending motor forces.

        Returns:
            (force (Y, Z), roll torque about body x)
        """
        total = sum(self._pending.values())
        torque = sum(self.mounts[m].y * f for m, f in self._pending.items())

        force = total * self.up_axis + np.array([0.0, -self.mass * self.gravity])
        return force, torque

    def step(self, dt: float):
        """
        Advance by dt with semi-implicit Euler and clear pending forces.
        """
        dt = check_timestep(dt)
        force, torque = self.compute_forces_torques()

        self.velocity = self.velocity + force / self.mass * dt
        self.position = self.position + self.velocity * dt

        self.roll_velocity += torque / self.roll_inertia * dt
        self.roll += self.roll_velocity * dt

        # Ground plane
        if self.position[1] < 0.0:
            self.position[1] = 0.0
            self.velocity[1] = max(self.velocity[1], 0.0)

        self.time += dt
        self._pending = {}
