"""
ZMQ Message Types

Defines the structure of messages published to guidance and rendering consumers.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any
import time

from laneguide.detection.core.models import DetectionResult


@dataclass
class GuidanceMessage:
    """
    Guidance message.

    Broadcast after every tick. Consumers apply their own debouncing.
    """
    frame_id: int
    deviation: float
    is_lane_detected: bool
    status: str
    confidence: float = 0.0
    processing_time_ms: float = 0.0
    timestamp: Optional[float] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = time.time()

    @classmethod
    def from_result(cls, result: DetectionResult, frame_id: int) -> 'GuidanceMessage':
        return cls(
            frame_id=frame_id,
            deviation=result.deviation,
            is_lane_detected=result.is_lane_detected,
            status=result.status.value,
            confidence=result.confidence,
            processing_time_ms=result.processing_time_ms,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
