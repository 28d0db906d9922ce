"""
Motor Mixer

Distributes total thrust and the roll differential across the four motors
of an X-configuration quadrotor.

Motor layout (top view, nose up):

    FL   FR
      \\ /
      / \\
    RL   RR

Only the roll axis is mixed: positive roll force raises the left pair and
lowers the right pair by the same amount, so the sum always equals thrust.
"""

from enum import Enum
from typing import NamedTuple, Dict

import numpy as np


class MotorId(Enum):
    """Motor identities, in MotorForces order."""
    FRONT_LEFT = 0
    FRONT_RIGHT = 1
    REAR_LEFT = 2
    REAR_RIGHT = 3


class MotorForces(NamedTuple):
    """Per-motor force commands (force units)."""
    front_left: float
    front_right: float
    rear_left: float
    rear_right: float

    def __getitem__(self, key):
        if isinstance(key, MotorId):
            key = key.value
        return tuple.__getitem__(self, key)

    @property
    def total(self) -> float:
        return float(sum(self))

    def by_motor(self) -> Dict[MotorId, float]:
        return {motor: self[motor] for motor in MotorId}

    def to_array(self) -> np.ndarray:
        """Convert to numpy array for logging/analysis."""
        return np.array(self, dtype=float)


class MotorMixer:
    """Thrust + roll force -> four motor forces."""

    def mix(self, thrust: float, roll_force: float) -> MotorForces:
        base = thrust / 4.0
        return MotorForces(
            front_left=base + roll_force,
            front_right=base - roll_force,
            rear_left=base + roll_force,
            rear_right=base - roll_force,
        )
