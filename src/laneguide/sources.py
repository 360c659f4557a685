"""
Offline frame sources for replaying recorded footage.

Each source is a callable that returns the next encoded frame and raises
StopIteration when exhausted, which is what PeriodicRunner expects.
"""

from pathlib import Path
from typing import List

import cv2

from laneguide.constants import VisionConstants


IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp'}


class ImageDirectorySource:
    """Encoded image files from a directory, in file name order."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Not a directory: {directory}")

        self.files: List[Path] = sorted(
            p for p in self.directory.iterdir() if p.suffix.lower() in IMAGE_EXTENSIONS
        )
        self.index = 0

    def __len__(self) -> int:
        return len(self.files)

    def __call__(self) -> bytes:
        if self.index >= len(self.files):
            raise StopIteration
        path = self.files[self.index]
        self.index += 1
        return path.read_bytes()


class VideoFileSource:
    """Frames of a video file, re-encoded as JPEG."""

    def __init__(self, path: str | Path, jpeg_quality: int = VisionConstants.JPEG_QUALITY):
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Video not found: {path}")

        self.capture = cv2.VideoCapture(str(self.path))
        if not self.capture.isOpened():
            raise IOError(f"Could not open video: {path}")
        self.jpeg_quality = jpeg_quality

    def __len__(self) -> int:
        if self.capture is None:
            return 0
        return max(0, int(self.capture.get(cv2.CAP_PROP_FRAME_COUNT)))

    def __call__(self) -> bytes | None:
        if self.capture is None:
            raise StopIteration

        ok, frame = self.capture.read()
        if not ok:
            self.close()
            raise StopIteration

        ok, buffer = cv2.imencode('.jpg', frame, [int(cv2.IMWRITE_JPEG_QUALITY), self.jpeg_quality])
        if not ok:
            # Skip this frame; the next tick reads the following one
            return None
        return buffer.tobytes()

    def close(self):
        if self.capture is not None:
            self.capture.release()
            self.capture = None


def open_source(path: str | Path):
    """Pick a source for a directory of images or a video file."""
    path = Path(path)
    if path.is_dir():
        return ImageDirectorySource(path)
    return VideoFileSource(path)
