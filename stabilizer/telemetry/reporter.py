"""
Telemetry Reporter

Periodic debug reports of the control loop's last tick, emitted through
logging at a fixed cadence of simulated time.
"""

from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

import numpy as np

from stabilizer.control.control_loop import ControlTelemetry

logger = logging.getLogger(__name__)


class TelemetryReporter:
    """
    Logs a ControlTelemetry snapshot every `interval` seconds of simulated time.

    Reported snapshots are kept for summary/export.
    """

    def __init__(self, interval: float = 0.5, log_level: int = logging.INFO):
        if not interval > 0:
            raise ValueError(f"Telemetry interval must be positive, got {interval!r}")
        self.interval = interval
        self.log_level = log_level
        self.history: List[ControlTelemetry] = []
        self._next_report = interval

    def reset(self):
        self.history = []
        self._next_report = self.interval

    def observe(self, telemetry: Optional[ControlTelemetry]) -> bool:
        """
        Feed the latest snapshot; report it if the interval has elapsed.

        Returns:
            True if a report was emitted
        """
        if telemetry is None or telemetry.time + 1e-9 < self._next_report:
            return False

        # Skip whole intervals if the caller ticks slower than the cadence
        while self._next_report <= telemetry.time + 1e-9:
            self._next_report += self.interval

        self.history.append(telemetry)
        logger.log(self.log_level, self.format(telemetry))
        return True

    @staticmethod
    def format(telemetry: ControlTelemetry) -> str:
        fl, fr, rl, rr = telemetry.motor_forces
        return (
            f"[t={telemetry.time:7.2f}s] "
            f"thrust={telemetry.thrust:8.3f} "
            f"roll_force={telemetry.roll_force:7.3f} "
            f"target_alt={telemetry.target_altitude:7.3f} "
            f"target_roll={np.degrees(telemetry.target_roll_angle):6.2f}deg "
            f"motors=[FL {fl:.3f} FR {fr:.3f} RL {rl:.3f} RR {rr:.3f}]"
        )

    def summary(self) -> Dict[str, Any]:
        """Statistics over the reported snapshots."""
        if not self.history:
            return {"num_reports": 0}

        thrust = np.array([t.thrust for t in self.history])
        roll_force = np.array([t.roll_force for t in self.history])
        motors = np.array([t.motor_forces.to_array() for t in self.history])

        return {
            "num_reports": len(self.history),
            "duration": float(self.history[-1].time),
            "thrust_mean": float(np.mean(thrust)),
            "thrust_max": float(np.max(thrust)),
            "roll_force_abs_max": float(np.max(np.abs(roll_force))),
            "motor_force_min": float(np.min(motors)),
            "motor_force_max": float(np.max(motors)),
            "final_target_altitude": float(self.history[-1].target_altitude),
        }

    def to_dict(self) -> Dict[str, Any]:
        records = []
        for t in self.history:
            record = asdict(t)
            record["motor_forces"] = t.motor_forces._asdict()
            records.append(record)
        return {"summary": self.summary(), "reports": records}

    def save_json(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Telemetry written to {path}")
        return path
