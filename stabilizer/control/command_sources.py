"""
Command Sources

Stick input providers for the control loop. Both clip their axes to
[-1, 1], the range a physical stick reports.
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import numpy as np

from stabilizer.control.control_loop import CommandSource
from stabilizer.control.errors import InvalidConfiguration


class ConstantCommandSource(CommandSource):
    """Holds the same stick position until changed."""

    def __init__(self, vertical: float = 0.0, roll: float = 0.0):
        self.set(vertical, roll)

    def set(self, vertical: float, roll: float):
        self._vertical = float(np.clip(vertical, -1.0, 1.0))
        self._roll = float(np.clip(roll, -1.0, 1.0))

    def vertical_command(self) -> float:
        return self._vertical

    def roll_command(self) -> float:
        return self._roll


@dataclass(frozen=True)
class CommandSegment:
    """Stick position held from start_time until the next segment."""
    start_time: float
    vertical: float = 0.0
    roll: float = 0.0


class ScriptedCommandSource(CommandSource):
    """
    Replays a stick script against a clock.

    The clock is any callable returning the current simulated time, usually
    a ControlLoop's elapsed_time. Before the first segment the sticks are
    centred.
    """

    def __init__(self, segments: Sequence[CommandSegment], clock: Callable[[], float]):
        if not segments:
            raise InvalidConfiguration("Command script needs at least one segment")

        self.segments: List[CommandSegment] = sorted(segments, key=lambda s: s.start_time)
        self.clock = clock
        self._start_times = np.array([s.start_time for s in self.segments])

    @classmethod
    def from_list(cls, data: List[dict], clock: Callable[[], float]) -> "ScriptedCommandSource":
        """Create from a list of {'t': ..., 'vertical': ..., 'roll': ...} entries."""
        segments = []
        for entry in data:
            if 't' not in entry:
                raise InvalidConfiguration(f"Command segment is missing 't': {entry!r}")
            segments.append(CommandSegment(
                start_time=float(entry['t']),
                vertical=float(entry.get('vertical', 0.0)),
                roll=float(entry.get('roll', 0.0)),
            ))
        return cls(segments, clock)

    def _current(self) -> Tuple[float, float]:
        index = int(np.searchsorted(self._start_times, self.clock(), side='right')) - 1
        if index < 0:
            return 0.0, 0.0
        segment = self.segments[index]
        return segment.vertical, segment.roll

    def vertical_command(self) -> float:
        return float(np.clip(self._current()[0], -1.0, 1.0))

    def roll_command(self) -> float:
        return float(np.clip(self._current()[1], -1.0, 1.0))
