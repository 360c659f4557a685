"""
Abstract base classes and interfaces for the lane guidance system.

Defines the narrow contract the pipeline needs from a vision library.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple
import numpy as np

from .models import LineSegment


class VisionBackend(ABC):
    """
    Abstract vision primitive provider.

    Frames and masks are numpy arrays. Implementations raise DecodeError
    from decode() and BackendError from every other primitive.
    """

    @abstractmethod
    def decode(self, data: bytes) -> np.ndarray:
        """Decode encoded image bytes into a BGR frame."""
        pass

    @abstractmethod
    def resize(self, frame: np.ndarray, width: int, height: int) -> np.ndarray:
        pass

    @abstractmethod
    def to_grayscale(self, frame: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def to_hsv(self, frame: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def gaussian_blur(self, frame: np.ndarray, kernel: Tuple[int, int], sigma: float) -> np.ndarray:
        pass

    @abstractmethod
    def canny_edges(self, frame: np.ndarray, low: float, high: float) -> np.ndarray:
        pass

    @abstractmethod
    def color_threshold(self, hsv_frame: np.ndarray,
                        low: Sequence[int], high: Sequence[int]) -> np.ndarray:
        """Binary mask of pixels inside [low, high] (inclusive)."""
        pass

    @abstractmethod
    def bitwise_or(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def bitwise_and(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def detect_line_segments(self, mask: np.ndarray,
                             distance_res: float,
                             angle_res: float,
                             vote_threshold: int,
                             min_length: float,
                             max_gap: float) -> List[LineSegment]:
        """
        Probabilistic line-segment transform.

        Returns:
            Segments in the mask's own pixel coordinates (empty list if none)
        """
        pass

    @abstractmethod
    def draw_line(self, frame: np.ndarray,
                  start: Tuple[int, int], end: Tuple[int, int],
                  color: Tuple[int, int, int], thickness: int) -> None:
        """Draw a line onto frame in place."""
        pass

    @abstractmethod
    def encode(self, frame: np.ndarray, quality: int) -> bytes:
        """Encode a frame as JPEG bytes."""
        pass

    @abstractmethod
    def brightness_stats(self, gray: np.ndarray) -> Tuple[float, float]:
        """Return (mean, standard deviation) of a grayscale frame."""
        pass
