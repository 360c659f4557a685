"""OpenCV-based vision backend."""

from .opencv_backend import OpenCVBackend

__all__ = ['OpenCVBackend']
