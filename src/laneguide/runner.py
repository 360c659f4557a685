"""
Tick runner for the lane guidance pipeline.

A periodic timer drives the pipeline. A tick that arrives while the previous
run is still in flight is dropped, never queued, so a slow frame can not
build up a backlog.
"""

import threading
import time
from typing import Callable, List, Optional

from laneguide.detection.core.models import DetectionResult
from laneguide.detection.pipeline import LaneGuidePipeline


FrameSource = Callable[[], Optional[bytes]]
ResultListener = Callable[[DetectionResult], None]


class FrameTicker:
    """
    In-flight guard around a pipeline.

    Usage:
        ticker = FrameTicker(pipeline)
        result = ticker.tick(jpeg_bytes)   # None if a run was already active
    """

    def __init__(self, pipeline: LaneGuidePipeline):
        self.pipeline = pipeline
        self._in_flight = threading.Lock()

        self.tick_count = 0
        self.dropped_count = 0

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def tick(self, image_bytes: bytes) -> Optional[DetectionResult]:
        """
        Run the pipeline on one frame unless a run is already active.

        Returns:
            The pipeline result, or None if the tick was dropped
        """
        if not self._in_flight.acquire(blocking=False):
            self.dropped_count += 1
            return None

        try:
            self.tick_count += 1
            return self.pipeline.process_frame(image_bytes)
        finally:
            self._in_flight.release()

    def record_dropped(self, count: int):
        """Count ticks that fell due while a run was in flight and were never issued."""
        if count > 0:
            self.dropped_count += count


class PeriodicRunner:
    """
    Background thread that ticks a FrameTicker at a fixed period.

    Each tick pulls one encoded frame from the frame source. The source
    returns None when it has nothing new; the runner stops by itself once
    the source raises StopIteration.
    """

    def __init__(self,
                 ticker: FrameTicker,
                 frame_source: FrameSource,
                 interval_s: float = 0.1):
        """
        Args:
            ticker: Guarded pipeline
            frame_source: Callable returning the next encoded frame or None
            interval_s: Tick period in seconds
        """
        self.ticker = ticker
        self.frame_source = frame_source
        self.interval_s = interval_s

        self.listeners: List[ResultListener] = []
        self.running = False
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def add_listener(self, listener: ResultListener):
        """Register a callback invoked with every produced result."""
        self.listeners.append(listener)

    def start(self):
        if self.running:
            return
        self.running = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="lane-guide-runner", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 2.0):
        """Stop ticking and wait for the current run to finish."""
        self.running = False
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the runner stops. Returns True if it stopped."""
        return self._stop_event.wait(timeout)

    def run_once(self) -> Optional[DetectionResult]:
        """Pull one frame and tick. Raises StopIteration when the source is exhausted."""
        image_bytes = self.frame_source()
        if image_bytes is None:
            return None

        result = self.ticker.tick(image_bytes)
        if result is not None:
            self._notify(result)
        return result

    def _loop(self):
        next_tick = time.monotonic()
        try:
            while not self._stop_event.is_set():
                try:
                    self.run_once()
                except StopIteration:
                    break

                next_tick += self.interval_s
                delay = next_tick - time.monotonic()
                if delay < 0:
                    # Fell behind; missed periods are dropped, not caught up
                    if self.interval_s > 0:
                        self.ticker.record_dropped(int(-delay // self.interval_s))
                    next_tick = time.monotonic()
                    delay = 0
                self._stop_event.wait(delay)
        finally:
            self.running = False
            self._stop_event.set()

    def _notify(self, result: DetectionResult):
        for listener in self.listeners:
            try:
                listener(result)
            except Exception as e:
                print(f"⚠ Result listener failed: {type(e).__name__}: {e}")
