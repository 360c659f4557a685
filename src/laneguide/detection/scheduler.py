"""
Frame scheduler and result cache.

Decides per tick whether the full pipeline runs or the previous result is
handed back, with a forced reprocess once the cached result gets too old.
"""

from enum import Enum
from typing import Callable, Optional
import time

from laneguide.detection.core.models import DetectionResult


class SchedulerAction(Enum):
    PROCESS = "process"
    REUSE = "reuse"


class FrameScheduler:
    """
    Skip-frame scheduler with a staleness bound.

    Usage:
        scheduler = FrameScheduler(skip_frames=4, force_interval_s=0.75)
        if scheduler.tick() is SchedulerAction.REUSE:
            return scheduler.last_result
        result = run_pipeline()
        scheduler.store(result)
    """

    def __init__(self,
                 skip_frames: int = 4,
                 force_interval_s: float = 0.75,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            skip_frames: Ticks skipped between two scheduled runs
            force_interval_s: Maximum age of the cached result before a run is forced
            clock: Monotonic time source in seconds
        """
        self.skip_frames = skip_frames
        self.force_interval_s = force_interval_s
        self.clock = clock

        self.frame_counter = 0
        self.last_process_time: Optional[float] = None
        self._last_result: Optional[DetectionResult] = None

    @property
    def last_result(self) -> Optional[DetectionResult]:
        return self._last_result

    def tick(self, now: Optional[float] = None) -> SchedulerAction:
        """
        Advance the counter and pick an action.

        On PROCESS the current time is recorded as the last process time
        before the caller runs the pipeline.
        """
        if now is None:
            now = self.clock()

        self.frame_counter = (self.frame_counter + 1) % (self.skip_frames + 1)

        stale = (self.last_process_time is None
                 or now - self.last_process_time >= self.force_interval_s)

        if self.frame_counter != 0 and not stale and self._last_result is not None:
            return SchedulerAction.REUSE

        self.last_process_time = now
        return SchedulerAction.PROCESS

    def store(self, result: DetectionResult):
        """Overwrite the cached result (successful or fail-soft)."""
        self._last_result = result

    def reset(self):
        """Forget the counter, timestamp and cached result."""
        self.frame_counter = 0
        self.last_process_time = None
        self._last_result = None
