"""
OpenCV Vision Backend

Implements the VisionBackend interface on top of cv2.
Every cv2 failure is re-raised as BackendError so the pipeline only has to
deal with its own error types.
"""

from typing import List, Sequence, Tuple

import cv2
import numpy as np

from laneguide.detection.core.errors import BackendError, DecodeError
from laneguide.detection.core.interfaces import VisionBackend
from laneguide.detection.core.models import LineSegment


class OpenCVBackend(VisionBackend):
    """Vision primitives backed by OpenCV."""

    def decode(self, data: bytes) -> np.ndarray:
        if not data:
            raise DecodeError("empty input")
        try:
            buffer = np.frombuffer(data, dtype=np.uint8)
            frame = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
        except cv2.error as e:
            raise DecodeError(str(e)) from e
        if frame is None:
            raise DecodeError(f"could not decode {len(data)} bytes")
        return frame

    def resize(self, frame: np.ndarray, width: int, height: int) -> np.ndarray:
        if width < 1 or height < 1:
            raise BackendError(f"invalid resize target {width}x{height}")
        try:
            return cv2.resize(frame, (width, height))
        except cv2.error as e:
            raise BackendError(f"resize failed: {e}") from e

    def to_grayscale(self, frame: np.ndarray) -> np.ndarray:
        try:
            return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        except cv2.error as e:
            raise BackendError(f"grayscale conversion failed: {e}") from e

    def to_hsv(self, frame: np.ndarray) -> np.ndarray:
        try:
            return cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)
        except cv2.error as e:
            raise BackendError(f"HSV conversion failed: {e}") from e

    def gaussian_blur(self, frame: np.ndarray, kernel: Tuple[int, int], sigma: float) -> np.ndarray:
        try:
            return cv2.GaussianBlur(frame, tuple(kernel), sigma)
        except cv2.error as e:
            raise BackendError(f"blur failed: {e}") from e

    def canny_edges(self, frame: np.ndarray, low: float, high: float) -> np.ndarray:
        try:
            return cv2.Canny(frame, low, high)
        except cv2.error as e:
            raise BackendError(f"Canny failed: {e}") from e

    def color_threshold(self, hsv_frame: np.ndarray,
                        low: Sequence[int], high: Sequence[int]) -> np.ndarray:
        try:
            return cv2.inRange(hsv_frame,
                               np.array(low, dtype=np.uint8),
                               np.array(high, dtype=np.uint8))
        except cv2.error as e:
            raise BackendError(f"color threshold failed: {e}") from e

    def bitwise_or(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        try:
            return cv2.bitwise_or(a, b)
        except cv2.error as e:
            raise BackendError(f"bitwise OR failed: {e}") from e

    def bitwise_and(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        try:
            return cv2.bitwise_and(a, b)
        except cv2.error as e:
            raise BackendError(f"bitwise AND failed: {e}") from e

    def detect_line_segments(self, mask: np.ndarray,
                             distance_res: float,
                             angle_res: float,
                             vote_threshold: int,
                             min_length: float,
                             max_gap: float) -> List[LineSegment]:
        try:
            lines = cv2.HoughLinesP(
                mask,
                distance_res,
                angle_res,
                vote_threshold,
                np.array([]),
                minLineLength=min_length,
                maxLineGap=max_gap
            )
        except cv2.error as e:
            raise BackendError(f"line detection failed: {e}") from e

        if lines is None:
            return []
        return [LineSegment.from_tuple([float(v) for v in line[0]]) for line in lines]

    def draw_line(self, frame: np.ndarray,
                  start: Tuple[int, int], end: Tuple[int, int],
                  color: Tuple[int, int, int], thickness: int) -> None:
        try:
            cv2.line(frame, start, end, tuple(color), thickness)
        except cv2.error as e:
            raise BackendError(f"draw failed: {e}") from e

    def encode(self, frame: np.ndarray, quality: int) -> bytes:
        encode_param = [int(cv2.IMWRITE_JPEG_QUALITY), quality]
        try:
            success, buffer = cv2.imencode('.jpg', frame, encode_param)
        except cv2.error as e:
            raise BackendError(f"encode failed: {e}") from e
        if not success:
            raise BackendError("encode failed")
        return buffer.tobytes()

    def brightness_stats(self, gray: np.ndarray) -> Tuple[float, float]:
        try:
            mean, std = cv2.meanStdDev(gray)
        except cv2.error as e:
            raise BackendError(f"meanStdDev failed: {e}") from e
        return float(mean[0][0]), float(std[0][0])
