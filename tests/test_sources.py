import cv2
import numpy as np
import pytest

from laneguide.sources import ImageDirectorySource, VideoFileSource, open_source


def test_image_directory_in_name_order(tmp_path):
    (tmp_path / "b.jpg").write_bytes(b"second")
    (tmp_path / "a.jpg").write_bytes(b"first")
    (tmp_path / "notes.txt").write_text("ignored")

    source = open_source(tmp_path)

    assert isinstance(source, ImageDirectorySource)
    assert len(source) == 2
    assert source() == b"first"
    assert source() == b"second"
    with pytest.raises(StopIteration):
        source()


def test_missing_video(tmp_path):
    with pytest.raises(FileNotFoundError):
        VideoFileSource(tmp_path / "missing.mp4")


def test_video_frames_are_jpeg(tmp_path):
    path = tmp_path / "clip.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 10, (64, 48))
    if not writer.isOpened():
        pytest.skip("no MJPG encoder available")
    for value in (50, 150):
        writer.write(np.full((48, 64, 3), value, dtype=np.uint8))
    writer.release()

    source = VideoFileSource(path)
    frames = []
    with pytest.raises(StopIteration):
        while True:
            frames.append(source())

    assert len(frames) == 2
    assert all(frame[:2] == b"\xff\xd8" for frame in frames)
    assert len(source) == 0
