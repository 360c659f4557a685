"""
Error taxonomy for the lane guidance pipeline.

Every failure inside a processed frame is caught by the pipeline and turned
into a neutral result, so these mostly surface in backend and test code.
"""


class LaneGuideError(Exception):
    """Base class for all lane guidance errors."""


class DecodeError(LaneGuideError):
    """Input bytes could not be decoded into an image."""


class BackendError(LaneGuideError):
    """A vision primitive failed."""
