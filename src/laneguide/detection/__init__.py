"""
Lane Detection Subsystem

Public API:
- LaneGuidePipeline: Stateful per-frame pipeline (encoded frame -> DetectionResult)
- DetectionResult: Deviation, detection flag and annotated frame
- ConfigManager / Config / ProcessingConfig: Configuration
"""

from .core.config import Config, ConfigManager, ProcessingConfig, VisionConfig
from .core.errors import BackendError, DecodeError, LaneGuideError
from .core.models import DetectionResult, GuidanceStatus, LineSegment
from .pipeline import LaneGuidePipeline

__all__ = [
    'LaneGuidePipeline',
    'DetectionResult',
    'GuidanceStatus',
    'LineSegment',
    'Config',
    'ConfigManager',
    'ProcessingConfig',
    'VisionConfig',
    'LaneGuideError',
    'DecodeError',
    'BackendError',
]
