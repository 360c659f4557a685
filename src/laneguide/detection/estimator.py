"""
Lane center estimation and confidence scoring.
"""

from typing import List, Optional

from laneguide.detection.core.config import ProcessingConfig
from laneguide.detection.core.models import LaneEstimate, SegmentCluster


def compute_deviation(center_x: float, width: int) -> float:
    """Normalized offset of center_x from the frame center, clamped to [-1, 1]."""
    frame_center = width / 2
    deviation = (center_x - frame_center) / (width / 2)
    return max(-1.0, min(1.0, deviation))


class LaneCenterEstimator:
    """Derives a lane center x-coordinate and a validity flag from clusters."""

    def __init__(self, config: ProcessingConfig):
        self.config = config

    def select(self, clusters: List[SegmentCluster]) -> Optional[SegmentCluster]:
        """
        Pick the representative cluster of one side.

        'largest' takes the cluster with the most points (earliest wins ties),
        'first' takes the first surviving cluster.
        """
        if not clusters:
            return None
        if self.config.cluster_selection == "first":
            return clusters[0]
        return max(clusters, key=lambda c: c.size)

    def estimate(self, left_clusters: List[SegmentCluster],
                 right_clusters: List[SegmentCluster],
                 width: int) -> LaneEstimate:
        cfg = self.config
        frame_center = width / 2

        left = self.select(left_clusters)
        right = self.select(right_clusters)

        if left is not None and right is not None:
            left_x = left.mean_x
            right_x = right.mean_x
            lane_width = right_x - left_x

            estimate = LaneEstimate(
                center_x=frame_center,
                lane_width=lane_width,
                left_x=left_x,
                right_x=right_x,
                left_size=left.size,
                right_size=right.size,
            )
            if width * cfg.min_lane_width_ratio < lane_width < width * cfg.max_lane_width_ratio:
                estimate.center_x = (left_x + right_x) / 2
                estimate.is_valid = (left.size >= cfg.min_points_both
                                     and right.size >= cfg.min_points_both)
            return estimate

        if left is not None:
            left_x = left.mean_x
            return LaneEstimate(
                center_x=left_x + width * cfg.single_side_offset_ratio,
                is_valid=left.size >= cfg.min_points_single,
                left_x=left_x,
                left_size=left.size,
            )

        if right is not None:
            right_x = right.mean_x
            return LaneEstimate(
                center_x=right_x - width * cfg.single_side_offset_ratio,
                is_valid=right.size >= cfg.min_points_single,
                right_x=right_x,
                right_size=right.size,
            )

        return LaneEstimate(center_x=frame_center, is_valid=False)


class ConfidenceScorer:
    """Turns the size of the selected clusters into a confidence in [0, 1]."""

    def __init__(self, config: ProcessingConfig):
        self.config = config

    def score(self, estimate: LaneEstimate) -> float:
        cfg = self.config
        left, right = estimate.left_size, estimate.right_size

        if left and right:
            return min(1.0, (left + right) / cfg.confidence_normalizer)
        if left or right:
            return min(cfg.single_side_confidence_cap, (left or right) / cfg.single_side_normalizer)
        return 0.0

    def is_accepted(self, estimate: LaneEstimate, confidence: float) -> bool:
        """A frame counts as a detection only if valid and confident enough."""
        return estimate.is_valid and confidence > self.config.confidence_threshold
