"""
Temporal smoothing of the lane deviation.

Averages the deviation over a short window using only accepted frames, and
holds the last stable value while nothing in the window was accepted.
"""

from collections import deque
from typing import Deque, Tuple


class TemporalSmoother:
    """Bounded history of (deviation, accepted) pairs."""

    def __init__(self, history_size: int = 5):
        self.history_size = history_size
        self.history: Deque[Tuple[float, bool]] = deque(maxlen=history_size)
        self.last_stable_deviation = 0.0

    def update(self, deviation: float, accepted: bool) -> Tuple[float, bool]:
        """
        Add one frame and recompute the smoothed deviation.

        Returns:
            (smoothed_deviation, valid) where valid is False when no entry in
            the window was accepted
        """
        self.history.append((deviation, accepted))

        accepted_values = [value for value, ok in self.history if ok]
        if accepted_values:
            smoothed = sum(accepted_values) / len(accepted_values)
            self.last_stable_deviation = smoothed
            return smoothed, True

        return self.last_stable_deviation, False

    def reset(self):
        self.history.clear()
        self.last_stable_deviation = 0.0

    def __len__(self) -> int:
        return len(self.history)
