"""
Rolling activation history for charts.

Samples the engine snapshot at a reduced, randomized rate (each frame is kept
with probability `sample_rate`) into a bounded deque, so a time-series chart
covers a longer period than the last few frames without growing unbounded.
Entries: {"time": <unix ms>, "<node id>": activation, ...}. Thread-safe.
"""

import random
import threading
import time
from collections import deque
from typing import Any, Deque, Dict, List, Mapping, Optional


class ActivationHistory:
    """
    Bounded, randomly sub-sampled history of activation snapshots.

    Args:
        max_samples: Samples kept (oldest dropped first)
        sample_rate: Probability that a frame is recorded (0-1)
        rng: Optional random.Random (seeded in tests)
    """

    def __init__(self, max_samples: int = 50, sample_rate: float = 0.15, rng: Optional[random.Random] = None):
        if max_samples < 1:
            raise ValueError("max_samples must be >= 1")
        self.max_samples = int(max_samples)
        self.sample_rate = min(1.0, max(0.0, float(sample_rate)))
        self._rng = rng or random.Random()
        self._samples: Deque[Dict[str, Any]] = deque(maxlen=self.max_samples)
        self._lock = threading.Lock()

    def maybe_record(self, activations: Mapping[str, float], timestamp: Optional[float] = None) -> bool:
        """Record `activations` with probability sample_rate. Returns True if recorded."""
        if self.sample_rate <= 0.0 or self._rng.random() >= self.sample_rate:
            return False
        self.record(activations, timestamp)
        return True

    def record(self, activations: Mapping[str, float], timestamp: Optional[float] = None) -> None:
        """Always record (bypasses sampling)."""
        ts = time.time() if timestamp is None else timestamp
        entry: Dict[str, Any] = {"time": int(ts * 1000)}
        entry.update(activations)
        with self._lock:
            self._samples.append(entry)

    def samples(self) -> List[Dict[str, Any]]:
        """Copy of the stored samples, oldest first."""
        with self._lock:
            return [dict(s) for s in self._samples]

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()
