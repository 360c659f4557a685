import numpy as np
import pytest

from laneguide.detection.core.config import Config, ProcessingConfig
from laneguide.detection.core.errors import BackendError, DecodeError
from laneguide.detection.core.interfaces import VisionBackend
from laneguide.detection.core.models import LineSegment


FRAME_WIDTH = 400
FRAME_HEIGHT = 300

# Three overlapping near-vertical segments per side, mirrored around x=200.
# Left endpoints average to x=115, right endpoints to x=285.
LEFT_SEGMENTS = [
    LineSegment(100, 280, 120, 200),
    LineSegment(105, 275, 125, 195),
    LineSegment(110, 270, 130, 190),
]
RIGHT_SEGMENTS = [
    LineSegment(300, 280, 280, 200),
    LineSegment(295, 275, 275, 195),
    LineSegment(290, 270, 270, 190),
]


class FakeBackend(VisionBackend):
    """
    Deterministic backend: every frame decodes to a blank image and the
    line detector returns whatever segments the test queued.
    """

    def __init__(self, width=FRAME_WIDTH, height=FRAME_HEIGHT, segments=None, fail_on=None):
        self.width = width
        self.height = height
        self.segments = list(segments or [])
        self.segment_queue = []
        self.fail_on = fail_on
        self.calls = []
        self.drawn = []

    def _record(self, name):
        self.calls.append(name)
        if self.fail_on == name:
            raise BackendError(f"{name} exploded")

    def decode(self, data):
        self._record("decode")
        if data.startswith(b"garbage"):
            raise DecodeError("not an image")
        return np.zeros((self.height, self.width, 3), dtype=np.uint8)

    def resize(self, frame, width, height):
        self._record("resize")
        return np.zeros((height, width, 3), dtype=np.uint8)

    def to_grayscale(self, frame):
        self._record("to_grayscale")
        return np.zeros(frame.shape[:2], dtype=np.uint8)

    def to_hsv(self, frame):
        self._record("to_hsv")
        return frame.copy()

    def gaussian_blur(self, frame, kernel, sigma):
        self._record("gaussian_blur")
        return frame

    def canny_edges(self, frame, low, high):
        self._record("canny_edges")
        return np.zeros(frame.shape[:2], dtype=np.uint8)

    def color_threshold(self, hsv_frame, low, high):
        self._record("color_threshold")
        return np.zeros(hsv_frame.shape[:2], dtype=np.uint8)

    def bitwise_or(self, a, b):
        self._record("bitwise_or")
        return a | b

    def bitwise_and(self, a, b):
        self._record("bitwise_and")
        return a & b

    def detect_line_segments(self, mask, distance_res, angle_res, vote_threshold, min_length, max_gap):
        self._record("detect_line_segments")
        if self.segment_queue:
            return list(self.segment_queue.pop(0))
        return list(self.segments)

    def draw_line(self, frame, start, end, color, thickness):
        self._record("draw_line")
        self.drawn.append((start, end, tuple(color)))

    def encode(self, frame, quality):
        self._record("encode")
        return b"encoded"

    def brightness_stats(self, gray):
        self._record("brightness_stats")
        return 100.0, 40.0


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_config(**processing_overrides) -> Config:
    """Full-resolution config that processes every tick unless overridden."""
    params = dict(processing_scale=1.0, skip_frames=0, force_process_interval_s=10.0)
    params.update(processing_overrides)
    return Config(processing=ProcessingConfig(**params))


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def clock():
    return FakeClock()
