"""
PID Controllers for Quadrotor Stabilization

Implements the two feedback loops used by the stabilizer:
- Altitude: error-derivative PID plus gravity compensation -> total thrust
- Roll: PID whose damping term uses the measured angular rate -> roll force

Both loops share one accumulator type (PIDController). The only difference
between them is where the derivative term comes from, selected with
DerivativeSource rather than through subclassing.
"""

from dataclasses import dataclass, replace
from enum import Enum
import math

import numpy as np

from stabilizer.control.errors import InvalidConfiguration, check_finite, check_timestep


@dataclass(frozen=True)
class PIDGains:
    """PID controller gains."""
    kp: float  # Proportional gain
    ki: float  # Integral gain
    kd: float  # Derivative gain

    # Anti-windup clamp on the accumulated integral
    integral_min: float = -10.0
    integral_max: float = 10.0

    def validate(self) -> "PIDGains":
        """
        Check gains and clamp bounds.

        Returns:
            self, so construction sites can chain the call

        Raises:
            InvalidConfiguration: on negative/non-finite gains or a clamp
                that does not straddle zero
        """
        for name in ("kp", "ki", "kd", "integral_min", "integral_max"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidConfiguration(f"{name} must be finite, got {getattr(self, name)!r}")
        for name in ("kp", "ki", "kd"):
            if getattr(self, name) < 0:
                raise InvalidConfiguration(f"{name} must be non-negative, got {getattr(self, name)!r}")
        if not self.integral_min < 0 < self.integral_max:
            raise InvalidConfiguration(
                f"Integral clamp must satisfy integral_min < 0 < integral_max, "
                f"got [{self.integral_min}, {self.integral_max}]"
            )
        return self

    def with_gains(self, **changes) -> "PIDGains":
        """Copy with some fields replaced."""
        return replace(self, **changes).validate()


@dataclass
class PIDState:
    """Mutable accumulator owned by exactly one controller."""
    integral: float = 0.0
    last_error: float = 0.0


class DerivativeSource(Enum):
    """Where the D term of a PIDController comes from."""
    ERROR = "error"                  # Finite difference of successive errors
    MEASURED_RATE = "measured_rate"  # Directly measured rate of the controlled quantity


class PIDController:
    """
    PID accumulator with integral clamp.

    With DerivativeSource.ERROR the output is

        kp*e + ki*I + kd*(e - e_prev)/dt

    With DerivativeSource.MEASURED_RATE the output is

        kp*e + ki*I - kd*rate

    which damps motion without differentiating a noisy error signal.
    The output itself is never clamped.
    """

    def __init__(
        self,
        gains: PIDGains,
        derivative_source: DerivativeSource = DerivativeSource.ERROR,
    ):
        """
        Initialize PID controller.

        Args:
            gains: PID gains configuration
            derivative_source: How the derivative term is computed
        """
        self._gains = gains.validate()
        self.derivative_source = derivative_source
        self.state = PIDState()

    @property
    def gains(self) -> PIDGains:
        return self._gains

    def set_gains(self, gains: PIDGains):
        """
        Swap in new gains at runtime.

        The accumulated state is kept; it is clamped to the new bounds so the
        integral invariant holds immediately.
        """
        self._gains = gains.validate()
        self.state.integral = float(np.clip(
            self.state.integral, gains.integral_min, gains.integral_max
        ))

    def reset(self):
        """Reset controller state."""
        self.state = PIDState()

    def update(self, error: float, dt: float, measured_rate: float = 0.0) -> float:
        """
        Update PID controller.

        Args:
            error: Current error (setpoint - measured)
            dt: Time step (seconds), must be positive
            measured_rate: Rate of the measured quantity, only used with
                DerivativeSource.MEASURED_RATE

        Returns:
            Control output

        Raises:
            InvalidTimestep: if dt <= 0, before any state is touched
            InvalidMeasurement: if error or measured_rate is NaN/inf,
                before any state is touched
        """
        dt = check_timestep(dt)
        error = check_finite("error", error)
        measured_rate = check_finite("measured_rate", measured_rate)
        gains = self._gains

        # Proportional term
        p_term = gains.kp * error

        # Integral term with anti-windup
        self.state.integral = float(np.clip(
            self.state.integral + error * dt,
            gains.integral_min,
            gains.integral_max,
        ))
        i_term = gains.ki * self.state.integral

        if self.derivative_source is DerivativeSource.ERROR:
            derivative = (error - self.state.last_error) / dt
            d_term = gains.kd * derivative
        else:
            d_term = -gains.kd * measured_rate

        self.state.last_error = error

        return p_term + i_term + d_term


class AltitudeController:
    """
    Altitude hold loop.

    Turns an altitude error into a total vertical thrust demand. The gravity
    compensation term is the hover thrust and is added before the PID
    correction.
    """

    def __init__(self, gains: PIDGains):
        self.pid = PIDController(gains, DerivativeSource.ERROR)

    @property
    def gains(self) -> PIDGains:
        return self.pid.gains

    @property
    def state(self) -> PIDState:
        return self.pid.state

    def set_gains(self, gains: PIDGains):
        self.pid.set_gains(gains)

    def reset(self):
        self.pid.reset()

    def update(
        self,
        dt: float,
        current_altitude: float,
        target_altitude: float,
        gravity_compensation: float,
    ) -> float:
        """
        Compute total thrust.

        Args:
            dt: Time step (seconds)
            current_altitude: Measured altitude along world up
            target_altitude: Altitude setpoint
            gravity_compensation: Hover thrust (mass * g)

        Returns:
            Total thrust demand (force units, unclamped)
        """
        error = target_altitude - current_altitude
        return gravity_compensation + self.pid.update(error, dt)


class RollController:
    """
    Roll attitude loop.

    Produces the differential force applied between the left and right motor
    pairs. Damping uses the measured roll rate instead of the error history.
    """

    def __init__(self, gains: PIDGains):
        self.pid = PIDController(gains, DerivativeSource.MEASURED_RATE)

    @property
    def gains(self) -> PIDGains:
        return self.pid.gains

    @property
    def state(self) -> PIDState:
        return self.pid.state

    def set_gains(self, gains: PIDGains):
        self.pid.set_gains(gains)

    def reset(self):
        self.pid.reset()

    def update(
        self,
        dt: float,
        target_angle: float,
        current_angle: float,
        current_angular_rate: float,
    ) -> float:
        """
        Compute roll force.

        Args:
            dt: Time step (seconds)
            target_angle: Roll setpoint (radians)
            current_angle: Measured roll angle (radians)
            current_angular_rate: Measured roll rate (rad/s)

        Returns:
            Roll force added to the left motors and subtracted from the right
        """
        error = target_angle - current_angle
        return self.pid.update(error, dt, measured_rate=current_angular_rate)
