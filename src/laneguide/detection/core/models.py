"""
Data models for the lane guidance pipeline.
Uses dataclasses for type safety and clean data structures.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple
import math

from laneguide.constants import GuidanceConstants


Point = Tuple[int, int]


class GuidanceStatus(Enum):
    """Guidance status shown to the user."""
    NO_LANE = "No Lane Detected"
    CENTERED = "Centered"
    MOVE_LEFT = "Move Left"
    MOVE_RIGHT = "Move Right"

    @classmethod
    def from_result(cls, deviation: float, is_lane_detected: bool,
                    threshold: float = GuidanceConstants.CENTERED_THRESHOLD) -> 'GuidanceStatus':
        """
        Classify a deviation into a guidance status.

        Positive deviations map to MOVE_LEFT and negative ones to MOVE_RIGHT,
        matching the cue wording the guidance consumers expect.
        """
        if not is_lane_detected:
            return cls.NO_LANE
        if abs(deviation) < threshold:
            return cls.CENTERED
        return cls.MOVE_LEFT if deviation > 0 else cls.MOVE_RIGHT


@dataclass(frozen=True)
class LineSegment:
    """
    A detected line segment.

    Attributes:
        x1, y1: First endpoint
        x2, y2: Second endpoint
    """
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def dx(self) -> float:
        return self.x2 - self.x1

    @property
    def dy(self) -> float:
        return self.y2 - self.y1

    @property
    def angle(self) -> float:
        """|dx/dy|; infinite for horizontal segments."""
        if self.dy == 0:
            return float('inf')
        return abs(self.dx / self.dy)

    @property
    def length(self) -> float:
        return math.hypot(self.dx, self.dy)

    @property
    def midpoint(self) -> Tuple[float, float]:
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    def scaled(self, factor: float) -> 'LineSegment':
        """Return a copy with all coordinates multiplied by factor."""
        return LineSegment(self.x1 * factor, self.y1 * factor,
                           self.x2 * factor, self.y2 * factor)

    def endpoints(self) -> List[Point]:
        """Integer endpoints, truncated toward zero."""
        return [(int(self.x1), int(self.y1)), (int(self.x2), int(self.y2))]

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)

    @classmethod
    def from_tuple(cls, coords) -> 'LineSegment':
        """Create LineSegment from (x1, y1, x2, y2)."""
        return cls(x1=coords[0], y1=coords[1], x2=coords[2], y2=coords[3])


@dataclass
class SegmentCluster:
    """Points believed to trace one lane boundary."""
    points: List[Point] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.points)

    @property
    def mean_x(self) -> float:
        return sum(p[0] for p in self.points) / len(self.points)

    @property
    def mean_y(self) -> float:
        return sum(p[1] for p in self.points) / len(self.points)

    def extend(self, points: List[Point]):
        self.points.extend(points)

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class FrameAnalysis:
    """Accepted segments and surviving clusters for one frame."""
    left_segments: List[LineSegment] = field(default_factory=list)
    right_segments: List[LineSegment] = field(default_factory=list)
    left_clusters: List[SegmentCluster] = field(default_factory=list)
    right_clusters: List[SegmentCluster] = field(default_factory=list)


@dataclass
class LaneEstimate:
    """
    Lane center estimate for one frame.

    Attributes:
        center_x: Estimated lane center in original-frame pixels
        is_valid: Whether the evidence is strong enough to trust center_x
        lane_width: Measured lane width (only when both sides were seen)
        left_x, right_x: Mean x of the selected boundary clusters
        left_size, right_size: Point counts of the selected clusters
    """
    center_x: float
    is_valid: bool = False
    lane_width: Optional[float] = None
    left_x: Optional[float] = None
    right_x: Optional[float] = None
    left_size: int = 0
    right_size: int = 0


@dataclass
class DetectionResult:
    """
    Result of one pipeline invocation.

    deviation, is_lane_detected and processed_image are what consumers use.
    The rest is diagnostic.
    """
    deviation: float
    is_lane_detected: bool
    processed_image: bytes
    confidence: float = 0.0
    lane_center_x: Optional[float] = None
    processing_time_ms: float = 0.0

    @property
    def status(self) -> GuidanceStatus:
        return GuidanceStatus.from_result(self.deviation, self.is_lane_detected)

    @classmethod
    def neutral(cls, image_bytes: bytes) -> 'DetectionResult':
        """Fail-soft result: centered, not detected, input passed through."""
        return cls(deviation=0.0, is_lane_detected=False, processed_image=image_bytes)
