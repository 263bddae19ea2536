"""
Per-sensor moving-average buffer.

The sensor heuristics (fist, pinch, hands touching...) flip on and off from one
frame to the next. Averaging each sensor over the last few frames before
injection gives the engine a steadier input. Keeps the last `size` values per
sensor; the average of an unseen sensor is 0.0.

Only known sensor ids get a window: clients may send a wider vocabulary than
the graph models, and those extra keys must not grow the buffer.
"""

import math
import numbers
from collections import deque
from typing import Any, Deque, Dict, Iterable, Mapping, Optional


def _is_sensor_value(value: Any) -> bool:
    """True for finite real numbers (bool, NaN and inf are not sensor values)."""
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(float(value))
    )


class SensorBuffer:
    """
    Simple moving average per sensor id.

    Usage:
        buf = SensorBuffer(size=5, keys=["IN_FIST", "IN_VEL"])
        smoothed = buf.smooth({"IN_FIST": 1.0, "IN_VEL": 0.3})
    """

    def __init__(self, size: int = 5, keys: Optional[Iterable[str]] = None):
        """
        Args:
            size: Window length per sensor
            keys: Sensor ids to smooth (None = any key; the session passes the graph's sensors)
        """
        if size < 1:
            raise ValueError("size must be >= 1")
        self.size = int(size)
        self.keys = frozenset(keys) if keys is not None else None
        self._buffer: Dict[str, Deque[float]] = {}

    def accepts(self, key: Any) -> bool:
        if self.keys is None:
            return isinstance(key, str)
        return key in self.keys

    def add(self, key: str, value: float) -> None:
        window = self._buffer.get(key)
        if window is None:
            window = deque(maxlen=self.size)
            self._buffer[key] = window
        window.append(float(value))

    def get_average(self, key: str) -> float:
        window = self._buffer.get(key)
        if not window:
            return 0.0
        return sum(window) / len(window)

    def smooth(self, frame: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Add every usable sensor value of `frame` and return the frame with averaged values.
        Unknown keys and malformed values pass through untouched (the engine ignores them).
        """
        out: Dict[str, Any] = {}
        for key, value in frame.items():
            if not self.accepts(key) or not _is_sensor_value(value):
                out[key] = value
                continue
            self.add(key, value)
            out[key] = self.get_average(key)
        return out

    def __len__(self) -> int:
        """Number of sensors with a window."""
        return len(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()
