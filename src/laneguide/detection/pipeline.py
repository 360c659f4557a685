"""
Lane Guidance Pipeline

Stateful per-frame decision pipeline: encoded frame in, smoothed and
confidence-gated lane deviation out.

The pipeline owns every piece of state that survives between frames
(ROI mask, scheduler, smoothing history). It is meant to be driven from a
single thread; see laneguide.runner for the tick guard.
"""

import time
from typing import Callable, List, Tuple

import numpy as np

from laneguide.constants import VisionConstants
from laneguide.detection.annotate import annotate_frame
from laneguide.detection.clustering import SegmentClusterer
from laneguide.detection.core.config import Config
from laneguide.detection.core.interfaces import VisionBackend
from laneguide.detection.core.models import DetectionResult, LineSegment
from laneguide.detection.estimator import ConfidenceScorer, LaneCenterEstimator, compute_deviation
from laneguide.detection.roi import RoiMaskCache
from laneguide.detection.scheduler import FrameScheduler, SchedulerAction
from laneguide.detection.smoothing import TemporalSmoother


def adaptive_canny_thresholds(mean: float, std: float) -> Tuple[float, float]:
    """
    Derive Canny thresholds from frame brightness and contrast.

    Dark frames start from a lower base; low-contrast frames lower it further
    and high-contrast frames raise it. The low threshold is clamped to
    [ADAPTIVE_MIN, ADAPTIVE_MAX] and the high one is a fixed multiple of it.
    """
    c = VisionConstants
    low = c.ADAPTIVE_DARK_BASE if mean < c.ADAPTIVE_BRIGHTNESS_SPLIT else c.ADAPTIVE_BRIGHT_BASE

    if std < c.ADAPTIVE_LOW_CONTRAST_STD:
        low *= c.ADAPTIVE_LOW_CONTRAST_GAIN
    elif std > c.ADAPTIVE_HIGH_CONTRAST_STD:
        low *= c.ADAPTIVE_HIGH_CONTRAST_GAIN

    low = max(c.ADAPTIVE_MIN, min(c.ADAPTIVE_MAX, low))
    return low, low * c.ADAPTIVE_HIGH_RATIO


class LaneGuidePipeline:
    """
    Lane deviation estimator for a stream of encoded frames.

    Usage:
        pipeline = LaneGuidePipeline(ConfigManager.load())
        result = pipeline.process_frame(jpeg_bytes)
        guidance.update(result.deviation, result.is_lane_detected)
        ...
        pipeline.dispose()
    """

    def __init__(self,
                 config: Config | None = None,
                 backend: VisionBackend | None = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            config: System configuration (defaults if None)
            backend: Vision primitives (OpenCV if None)
            clock: Monotonic time source used by the scheduler
        """
        if backend is None:
            from laneguide.detection.method.computer_vision.opencv_backend import OpenCVBackend
            backend = OpenCVBackend()

        self.config = config or Config()
        self.backend = backend

        processing = self.config.processing
        self.roi_cache = RoiMaskCache(self.config.vision)
        self.scheduler = FrameScheduler(
            skip_frames=processing.skip_frames,
            force_interval_s=processing.force_process_interval_s,
            clock=clock,
        )
        self.clusterer = SegmentClusterer(processing)
        self.estimator = LaneCenterEstimator(processing)
        self.scorer = ConfidenceScorer(processing)
        self.smoother = TemporalSmoother(processing.history_size)

        self.last_action: SchedulerAction | None = None
        self.processed_count = 0
        self.failure_count = 0

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def process_frame(self, image_bytes: bytes) -> DetectionResult:
        """
        Run one scheduler tick.

        Never raises: any failure yields a neutral result that passes the
        input bytes through unchanged.

        Args:
            image_bytes: Encoded frame (JPEG, PNG, ...)

        Returns:
            DetectionResult (possibly the cached one from an earlier tick)
        """
        self.last_action = self.scheduler.tick()
        if self.last_action is SchedulerAction.REUSE:
            return self.scheduler.last_result

        start_time = time.time()
        try:
            result = self._run(image_bytes)
        except Exception as e:
            self.failure_count += 1
            print(f"⚠ Frame processing failed: {type(e).__name__}: {e}")
            result = DetectionResult.neutral(image_bytes)

        result.processing_time_ms = (time.time() - start_time) * 1000
        self.processed_count += 1
        self.scheduler.store(result)
        return result

    @property
    def last_result(self) -> DetectionResult | None:
        return self.scheduler.last_result

    def reset(self):
        """
        Clear scheduler state, smoothing history and the last stable deviation.

        The ROI mask is kept since it only depends on the resolution.
        """
        self.scheduler.reset()
        self.smoother.reset()
        self.last_action = None

    def dispose(self):
        """Release all cached state, including the ROI mask."""
        self.reset()
        self.roi_cache.clear()

    def get_name(self) -> str:
        return "Segment clustering (Canny + color masks + Hough)"

    def get_parameters(self) -> dict:
        p = self.config.processing
        v = self.config.vision
        return {
            'processing_scale': p.processing_scale,
            'skip_frames': p.skip_frames,
            'force_process_interval_s': p.force_process_interval_s,
            'cluster_distance': p.cluster_distance,
            'cluster_selection': p.cluster_selection,
            'confidence_threshold': p.confidence_threshold,
            'history_size': p.history_size,
            'canny': 'adaptive' if v.adaptive_canny else (v.canny_low, v.canny_high),
            'color_masks': list(v.color_masks) if v.use_color_masks else [],
        }

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()

    # =========================================================================
    # PRIVATE HELPER METHODS
    # =========================================================================

    def _run(self, image_bytes: bytes) -> DetectionResult:
        backend = self.backend
        scale = self.config.processing.processing_scale

        frame = backend.decode(image_bytes)
        height, width = frame.shape[:2]

        process_width = int(width * scale)
        process_height = int(height * scale)
        resized = backend.resize(frame, process_width, process_height)

        edges = self._edge_evidence(resized)
        mask = self.roi_cache.get_mask(process_width, process_height)
        masked_edges = backend.bitwise_and(edges, mask)

        segments = self._detect_segments(masked_edges)

        analysis = self.clusterer.analyze(segments, width, height, scale)
        estimate = self.estimator.estimate(analysis.left_clusters, analysis.right_clusters, width)
        raw_deviation = compute_deviation(estimate.center_x, width)

        confidence = self.scorer.score(estimate)
        accepted = self.scorer.is_accepted(estimate, confidence)

        smoothed, window_valid = self.smoother.update(raw_deviation, accepted)
        deviation = max(-1.0, min(1.0, smoothed))

        if self.config.visualization.annotate:
            output = annotate_frame(backend, frame, analysis, estimate.center_x,
                                    self.config.visualization)
            processed_image = backend.encode(output, self.config.visualization.jpeg_quality)
        else:
            processed_image = image_bytes

        return DetectionResult(
            deviation=deviation,
            is_lane_detected=accepted and window_valid,
            processed_image=processed_image,
            confidence=confidence,
            lane_center_x=estimate.center_x,
        )

    def _edge_evidence(self, resized: np.ndarray) -> np.ndarray:
        """Canny edges OR'ed with the lane color masks, at processing resolution."""
        backend = self.backend
        vision = self.config.vision

        gray = backend.to_grayscale(resized)
        blurred = backend.gaussian_blur(gray, VisionConstants.BLUR_KERNEL, VisionConstants.BLUR_SIGMA)

        if vision.adaptive_canny:
            low, high = adaptive_canny_thresholds(*backend.brightness_stats(gray))
        else:
            low, high = vision.canny_low, vision.canny_high
        edges = backend.canny_edges(blurred, low, high)

        if vision.use_color_masks and vision.color_masks:
            hsv = backend.to_hsv(resized)
            for name in vision.color_masks:
                color_low, color_high = VisionConstants.COLOR_BOUNDS[name]
                edges = backend.bitwise_or(edges, backend.color_threshold(hsv, color_low, color_high))

        return edges

    def _detect_segments(self, masked_edges: np.ndarray) -> List[LineSegment]:
        vision = self.config.vision
        return self.backend.detect_line_segments(
            masked_edges,
            vision.hough_rho,
            vision.hough_theta,
            vision.hough_threshold,
            vision.hough_min_line_len,
            vision.hough_max_line_gap,
        )
