"""
Lane Guidance Module

Estimates, from single camera frames, how far a walking or running path
deviates from the center of the detected lane, and emits a smoothed,
confidence-gated deviation for spoken/haptic guidance.

Architecture:
    laneguide/
    ├── detection/
    │   ├── pipeline.py    - LaneGuidePipeline (stateful per-frame pipeline)
    │   ├── roi.py         - ROI mask cache
    │   ├── scheduler.py   - Frame skip scheduler / result cache
    │   ├── clustering.py  - Segment filter and clusterer
    │   ├── estimator.py   - Lane center estimator and confidence scorer
    │   ├── smoothing.py   - Temporal smoother
    │   └── annotate.py    - Annotated output frame
    ├── runner.py          - Tick guard and periodic runner
    ├── integration/zmq/   - Result broadcaster
    └── run.py             - lane-guide CLI

Usage:
    from laneguide import LaneGuidePipeline, ConfigManager

    pipeline = LaneGuidePipeline(ConfigManager.load())
    result = pipeline.process_frame(jpeg_bytes)
    print(result.deviation, result.is_lane_detected)
"""

from .detection import (
    Config,
    ConfigManager,
    DetectionResult,
    GuidanceStatus,
    LaneGuidePipeline,
    ProcessingConfig,
)

__version__ = "0.1.0"

__all__ = [
    'LaneGuidePipeline',
    'DetectionResult',
    'GuidanceStatus',
    'Config',
    'ConfigManager',
    'ProcessingConfig',
]
