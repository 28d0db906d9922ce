"""
Fixed-Step Simulation Runner

Drives a ControlLoop against a PlanarQuadrotor at a fixed timestep:
each step ticks the controller, then advances the plant.
"""

from dataclasses import dataclass
from typing import Optional
import logging

import numpy as np

from stabilizer.control.control_loop import ControlLoop
from stabilizer.control.errors import check_timestep
from stabilizer.physics.planar_quadrotor import PlanarQuadrotor
from stabilizer.telemetry.reporter import TelemetryReporter

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Per-step traces of a run."""
    time: np.ndarray
    altitude: np.ndarray
    roll_angle: np.ndarray
    target_altitude: np.ndarray
    target_roll_angle: np.ndarray
    thrust: np.ndarray
    roll_force: np.ndarray
    motor_forces: np.ndarray  # (steps, 4)

    @property
    def num_steps(self) -> int:
        return len(self.time)

    def final_altitude_error(self) -> float:
        return float(self.target_altitude[-1] - self.altitude[-1])

    def final_roll_error(self) -> float:
        return float(self.target_roll_angle[-1] - self.roll_angle[-1])


def run_simulation(
    loop: ControlLoop,
    plant: PlanarQuadrotor,
    duration: float,
    dt: float = 0.02,
    reporter: Optional[TelemetryReporter] = None,
) -> SimulationResult:
    """
    Run the closed loop for `duration` seconds of simulated time.

    Args:
        loop: Control loop whose state source and actuator sink is `plant`
        plant: Vehicle dynamics
        duration: Simulated time (seconds)
        dt: Fixed physics timestep (seconds)
        reporter: Optional periodic telemetry reporter

    Returns:
        SimulationResult with one sample per step, taken after the plant step
    """
    dt = check_timestep(dt)
    if not (np.isfinite(duration) and duration >= 0):
        raise ValueError(f"duration must be a non-negative finite number, got {duration!r}")
    num_steps = int(round(duration / dt))

    logger.info(f"Running {num_steps} steps at dt={dt}s ({duration}s simulated)")

    time = np.zeros(num_steps)
    altitude = np.zeros(num_steps)
    roll_angle = np.zeros(num_steps)
    target_altitude = np.zeros(num_steps)
    target_roll = np.zeros(num_steps)
    thrust = np.zeros(num_steps)
    roll_force = np.zeros(num_steps)
    motor_forces = np.zeros((num_steps, 4))

    for i in range(num_steps):
        forces = loop.tick(dt)
        plant.step(dt)

        telemetry = loop.telemetry
        if reporter is not None:
            reporter.observe(telemetry)

        time[i] = telemetry.time
        altitude[i] = plant.altitude()
        roll_angle[i] = plant.roll_angle()
        target_altitude[i] = telemetry.target_altitude
        target_roll[i] = telemetry.target_roll_angle
        thrust[i] = telemetry.thrust
        roll_force[i] = telemetry.roll_force
        motor_forces[i] = forces.to_array()

    if num_steps:
        logger.info(
            f"Finished at t={time[-1]:.2f}s: altitude {altitude[-1]:.3f} "
            f"(target {target_altitude[-1]:.3f}), roll {np.degrees(roll_angle[-1]):.2f}deg "
            f"(target {np.degrees(target_roll[-1]):.2f}deg)"
        )

    return SimulationResult(
        time=time,
        altitude=altitude,
        roll_angle=roll_angle,
        target_altitude=target_altitude,
        target_roll_angle=target_roll,
        thrust=thrust,
        roll_force=roll_force,
        motor_forces=motor_forces,
    )
