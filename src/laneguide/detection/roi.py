"""
Region of interest mask cache.

The mask only depends on the processing resolution, so it is built once and
reused until the resolution changes.
"""

from typing import Tuple

import cv2
import numpy as np

from laneguide.detection.core.config import VisionConfig


class RoiMaskCache:
    """
    Holds at most one trapezoidal ROI mask, keyed by (width, height).

    The trapezoid spans the full width at the bottom edge and narrows to
    [roi_top_left_x, roi_top_right_x] of the width at roi_top_y of the height.
    """

    def __init__(self, config: VisionConfig | None = None):
        config = config or VisionConfig()
        self.top_left_x = config.roi_top_left_x
        self.top_right_x = config.roi_top_right_x
        self.top_y = config.roi_top_y

        self._mask: np.ndarray | None = None
        self._size: Tuple[int, int] | None = None

    @property
    def size(self) -> Tuple[int, int] | None:
        """Key of the cached mask, or None if nothing is cached."""
        return self._size

    def get_mask(self, width: int, height: int) -> np.ndarray:
        """
        Get the ROI mask for a resolution.

        Returns the cached array itself when the size matches.
        """
        if self._mask is not None and self._size == (width, height):
            return self._mask

        mask = np.zeros((height, width), dtype=np.uint8)
        vertices = np.array([[
            (0, height),                                            # Bottom-left
            (width, height),                                        # Bottom-right
            (int(width * self.top_right_x), int(height * self.top_y)),  # Top-right
            (int(width * self.top_left_x), int(height * self.top_y)),   # Top-left
        ]], dtype=np.int32)
        cv2.fillPoly(mask, vertices, 255)

        self._mask = mask
        self._size = (width, height)
        return mask

    def clear(self):
        """Drop the cached mask."""
        self._mask = None
        self._size = None
