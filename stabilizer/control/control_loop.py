"""
Stabilizer Control Loop

Orchestrates one fixed-timestep tick of the stabilizer:

    CommandSource + StateSource -> TargetTracker
        -> AltitudeController / RollController -> MotorMixer -> ActuatorSink

The loop has no discrete modes. The only state carried between ticks is the
two controllers' accumulators and the altitude setpoint.

Collaborators are injected through three narrow interfaces so the control
law does not depend on any particular simulator or input device.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import logging

from stabilizer.control.errors import (
    InvalidConfiguration,
    InvalidMeasurement,
    InvalidTimestep,
    check_finite,
    check_timestep,
)
from stabilizer.control.motor_mixer import MotorForces, MotorId, MotorMixer
from stabilizer.control.pid_controller import (
    AltitudeController,
    PIDGains,
    RollController,
)
from stabilizer.control.target_tracker import TargetTracker

if TYPE_CHECKING:
    from stabilizer.platforms.stabilizer_configs import StabilizerConfig

logger = logging.getLogger(__name__)


class CommandSource(ABC):
    """Pilot or autopilot stick input, sampled once per tick."""

    @abstractmethod
    def vertical_command(self) -> float:
        """Climb-rate stick in [-1, 1]."""
        pass

    @abstractmethod
    def roll_command(self) -> float:
        """Roll stick in [-1, 1]."""
        pass


class StateSource(ABC):
    """Measured vehicle state (perfect feedback)."""

    @abstractmethod
    def altitude(self) -> float:
        """Position along the world vertical axis."""
        pass

    @abstractmethod
    def roll_angle(self) -> float:
        """Tilt of the lateral body axis against world up (radians)."""
        pass

    @abstractmethod
    def roll_rate(self) -> float:
        """Angular velocity about the longitudinal body axis (rad/s)."""
        pass


class ActuatorSink(ABC):
    """Receives motor forces, applied along body up at each motor mount."""

    @abstractmethod
    def apply_motor_force(self, motor: MotorId, force: float) -> None:
        pass


@dataclass(frozen=True)
class ControlTelemetry:
    """Read-only snapshot of the most recent tick."""
    time: float
    thrust: float
    roll_force: float
    target_altitude: float
    target_roll_angle: float
    motor_forces: MotorForces


class ControlLoop:
    """
    Altitude + roll stabilizer for one vehicle.

    Each vehicle must own its own ControlLoop; controllers are never shared.
    """

    def __init__(
        self,
        command_source: CommandSource,
        state_source: StateSource,
        actuator_sink: ActuatorSink,
        altitude_controller: AltitudeController,
        roll_controller: RollController,
        target_tracker: TargetTracker,
        gravity_compensation: float,
        mixer: Optional[MotorMixer] = None,
    ):
        """
        Initialize control loop.

        Args:
            command_source: Stick input provider
            state_source: Vehicle state provider
            actuator_sink: Motor force consumer
            altitude_controller: Altitude PID (owned by this loop)
            roll_controller: Roll PID (owned by this loop)
            target_tracker: Setpoint generator (owned by this loop)
            gravity_compensation: Hover thrust added to the altitude output
            mixer: Force mixer (default MotorMixer)
        """
        if altitude_controller.pid is roll_controller.pid:
            raise InvalidConfiguration("Altitude and roll loops must not share a PID accumulator")

        self.command_source = command_source
        self.state_source = state_source
        self.actuator_sink = actuator_sink
        self.altitude_controller = altitude_controller
        self.roll_controller = roll_controller
        self.target_tracker = target_tracker
        self.gravity_compensation = float(gravity_compensation)
        self.mixer = mixer or MotorMixer()

        self._elapsed_time = 0.0
        self._telemetry: Optional[ControlTelemetry] = None

    @classmethod
    def from_config(
        cls,
        config: "StabilizerConfig",
        command_source: CommandSource,
        state_source: StateSource,
        actuator_sink: ActuatorSink,
    ) -> "ControlLoop":
        """Build a loop with fresh controllers from a StabilizerConfig."""
        config.validate()
        return cls(
            command_source=command_source,
            state_source=state_source,
            actuator_sink=actuator_sink,
            altitude_controller=AltitudeController(config.altitude_gains),
            roll_controller=RollController(config.roll_gains),
            target_tracker=TargetTracker(
                initial_altitude=config.initial_target_altitude,
                rise_rate=config.rise_rate,
                max_tilt_angle=config.max_tilt_angle,
            ),
            gravity_compensation=config.gravity_compensation,
        )

    @property
    def telemetry(self) -> Optional[ControlTelemetry]:
        """Last tick's snapshot, None before the first tick."""
        return self._telemetry

    @property
    def elapsed_time(self) -> float:
        return self._elapsed_time

    def set_altitude_gains(self, gains: PIDGains):
        logger.info(f"Altitude gains updated: kp={gains.kp} ki={gains.ki} kd={gains.kd}")
        self.altitude_controller.set_gains(gains)

    def set_roll_gains(self, gains: PIDGains):
        logger.info(f"Roll gains updated: kp={gains.kp} ki={gains.ki} kd={gains.kd}")
        self.roll_controller.set_gains(gains)

    def reset(self):
        """Reset controllers, setpoints and the loop clock."""
        self.altitude_controller.reset()
        self.roll_controller.reset()
        self.target_tracker.reset()
        self._elapsed_time = 0.0
        self._telemetry = None

    def tick(self, dt: float) -> MotorForces:
        """
        Run one control step.

        Args:
            dt: Fixed physics timestep (seconds)

        Returns:
            The motor forces emitted to the actuator sink

        Raises:
            InvalidTimestep: if dt <= 0; nothing is sampled, mutated or
                emitted for that tick
            InvalidMeasurement: if a sampled command or state value is
                NaN/inf; nothing is mutated or emitted for that tick
        """
        try:
            dt = check_timestep(dt)
        except InvalidTimestep:
            logger.warning(f"Rejected tick with timestep {dt!r}, no forces applied")
            raise

        # Sample inputs
        try:
            vertical_cmd = check_finite("vertical_command", self.command_source.vertical_command())
            roll_cmd = check_finite("roll_command", self.command_source.roll_command())

            altitude = check_finite("altitude", self.state_source.altitude())
            roll_angle = check_finite("roll_angle", self.state_source.roll_angle())
            roll_rate = check_finite("roll_rate", self.state_source.roll_rate())
        except InvalidMeasurement as e:
            logger.warning(f"Rejected tick: {e}, no forces applied")
            raise

        # Setpoints
        targets = self.target_tracker.advance(dt, vertical_cmd, roll_cmd)

        # Control laws
        thrust = self.altitude_controller.update(
            dt, altitude, targets.target_altitude, self.gravity_compensation
        )
        roll_force = self.roll_controller.update(
            dt, targets.target_roll_angle, roll_angle, roll_rate
        )

        # Mixing and actuation
        forces = self.mixer.mix(thrust, roll_force)
        for motor in MotorId:
            self.actuator_sink.apply_motor_force(motor, forces[motor])

        self._elapsed_time += dt
        self._telemetry = ControlTelemetry(
            time=self._elapsed_time,
            thrust=thrust,
            roll_force=roll_force,
            target_altitude=targets.target_altitude,
            target_roll_angle=targets.target_roll_angle,
            motor_forces=forces,
        )

        logger.debug(
            f"t={self._elapsed_time:.3f} alt={altitude:.3f}/{targets.target_altitude:.3f} "
            f"roll={roll_angle:.4f}/{targets.target_roll_angle:.4f} "
            f"thrust={thrust:.3f} roll_force={roll_force:.3f}"
        )

        return forces
