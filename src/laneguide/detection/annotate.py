"""
Annotated output frame.

Draws the accepted segments and the two guide lines (frame center and
estimated lane center) onto a copy of the decoded frame.
"""

import numpy as np

from laneguide.constants import VisualizationConstants
from laneguide.detection.core.config import VisualizationConfig
from laneguide.detection.core.interfaces import VisionBackend
from laneguide.detection.core.models import FrameAnalysis


def annotate_frame(backend: VisionBackend,
                   frame: np.ndarray,
                   analysis: FrameAnalysis,
                   lane_center_x: float,
                   config: VisualizationConfig | None = None) -> np.ndarray:
    """
    Create the guidance visualization.

    Args:
        backend: Vision backend used for drawing
        frame: Original decoded frame (left untouched)
        analysis: Accepted segments per side
        lane_center_x: Estimated lane center in frame pixels
        config: Colors to use

    Returns:
        Annotated copy of frame
    """
    config = config or VisualizationConfig()
    output = frame.copy()
    height, width = output.shape[:2]

    for segments, color in ((analysis.left_segments, config.color_left_segment),
                            (analysis.right_segments, config.color_right_segment)):
        for segment in segments:
            start, end = segment.endpoints()
            backend.draw_line(output, start, end, color,
                              VisualizationConstants.SEGMENT_THICKNESS)

    guide_top = int(height * VisualizationConstants.GUIDE_TOP_RATIO)
    center_x = int(width / 2)
    lane_x = int(lane_center_x)

    backend.draw_line(output, (center_x, height), (center_x, guide_top),
                      config.color_frame_center, VisualizationConstants.GUIDE_THICKNESS)
    backend.draw_line(output, (lane_x, height), (lane_x, guide_top),
                      config.color_lane_center, VisualizationConstants.GUIDE_THICKNESS)

    return output
