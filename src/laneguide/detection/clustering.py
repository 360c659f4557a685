"""
Segment filtering and proximity clustering.

Raw Hough segments are scaled back to original-frame coordinates, filtered
for geometric plausibility, split by side and grouped into clusters of
endpoints that trace one lane boundary each.
"""

from typing import Iterable, List
import math

from laneguide.detection.core.config import ProcessingConfig
from laneguide.detection.core.models import FrameAnalysis, LineSegment, Point, SegmentCluster


def add_to_clusters(clusters: List[SegmentCluster], points: List[Point], threshold: float) -> SegmentCluster:
    """
    Merge points into the first cluster holding a point closer than threshold.

    Clusters are scanned in order and the first match wins. If nothing is
    close enough, a new cluster is appended.

    Returns:
        The cluster the points ended up in
    """
    for cluster in clusters:
        for new_point in points:
            for cluster_point in cluster.points:
                distance = math.hypot(new_point[0] - cluster_point[0],
                                      new_point[1] - cluster_point[1])
                if distance < threshold:
                    cluster.extend(points)
                    return cluster

    cluster = SegmentCluster(list(points))
    clusters.append(cluster)
    return cluster


def passes_filter(segment: LineSegment, height: int, config: ProcessingConfig) -> bool:
    """
    Side-independent part of the filter: angle, length and vertical band.

    Args:
        segment: Segment in original-frame coordinates
        height: Original frame height
        config: Processing configuration
    """
    if segment.angle >= config.max_angle:
        return False

    length = segment.length
    if length <= height * config.min_length_ratio:
        return False
    if config.max_length_ratio is not None and length >= height * config.max_length_ratio:
        return False

    _, mid_y = segment.midpoint
    return height * config.min_y_ratio < mid_y < height * config.max_y_ratio


class SegmentClusterer:
    """Filters segments and clusters them into left and right lane groups."""

    def __init__(self, config: ProcessingConfig):
        self.config = config

    def side_of(self, segment: LineSegment, width: int) -> str | None:
        """
        Return 'left', 'right' or None when the midpoint is outside both bands.
        """
        mid_x, _ = segment.midpoint
        center_x = width / 2

        if width * self.config.left_min_x_ratio < mid_x < center_x:
            return 'left'
        if center_x < mid_x < width * self.config.right_max_x_ratio:
            return 'right'
        return None

    def analyze(self, segments: Iterable[LineSegment], width: int, height: int,
                scale: float = 1.0) -> FrameAnalysis:
        """
        Filter and cluster one frame's segments.

        Args:
            segments: Segments in processing-resolution coordinates
            width, height: Original frame size
            scale: Processing scale the segments were detected at

        Returns:
            FrameAnalysis with accepted segments and clusters of at least
            min_cluster_size points per side
        """
        analysis = FrameAnalysis()
        threshold = self.config.cluster_distance

        for raw in segments:
            segment = raw.scaled(1.0 / scale) if scale != 1.0 else raw

            if not passes_filter(segment, height, self.config):
                continue

            side = self.side_of(segment, width)
            if side == 'left':
                analysis.left_segments.append(segment)
                add_to_clusters(analysis.left_clusters, segment.endpoints(), threshold)
            elif side == 'right':
                analysis.right_segments.append(segment)
                add_to_clusters(analysis.right_clusters, segment.endpoints(), threshold)

        min_size = self.config.min_cluster_size
        analysis.left_clusters = [c for c in analysis.left_clusters if c.size >= min_size]
        analysis.right_clusters = [c for c in analysis.right_clusters if c.size >= min_size]
        return analysis
