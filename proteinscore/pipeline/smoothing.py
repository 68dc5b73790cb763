"""
Temporal smoothing of readings across OCR passes.
"""

import threading
from collections import deque
from typing import Tuple

from ..config import SMOOTHING_MIN_SAMPLES, SMOOTHING_WINDOW
from .extraction import Reading


def lower_median(values) -> int:
    """Element at sorted position n // 2 (the lower middle for even n)."""
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


class ReadingSmoother:
    """
    Rolling median over the most recent readings.

    Calories and protein are smoothed independently, so the emitted reading
    may pair values that were never observed together.
    """

    def __init__(
        self,
        capacity: int = SMOOTHING_WINDOW,
        min_samples: int = SMOOTHING_MIN_SAMPLES,
    ):
        """
        Args:
            capacity: Number of readings kept; the oldest is dropped beyond it
            min_samples: Readings needed before medians replace the raw value
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.min_samples = min_samples
        self._history: deque = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def add(self, reading: Reading) -> Reading:
        """Record a reading and return the stabilized value."""
        with self._lock:
            self._history.append(reading)
            if len(self._history) < self.min_samples:
                return reading
            return Reading(
                calories=lower_median(r.calories for r in self._history),
                protein=lower_median(r.protein for r in self._history),
            )

    def reset(self):
        """Forget all readings (e.g. when the displayed reading expires)."""
        with self._lock:
            self._history.clear()

    @property
    def history(self) -> Tuple[Reading, ...]:
        with self._lock:
            return tuple(self._history)

    def __len__(self) -> int:
        return len(self._history)
