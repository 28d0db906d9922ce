"""
Physics Module

Rigid-body plant used to fly the stabilizer in closed loop.
"""

from .planar_quadrotor import (
    MotorMount,
    PlanarQuadrotor,
    quad_x_mounts,
    roll_from_lateral_axis,
)

__all__ = [
    "MotorMount",
    "PlanarQuadrotor",
    "quad_x_mounts",
    "roll_from_lateral_axis",
]
