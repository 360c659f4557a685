import math

import pytest

from laneguide.detection.core.models import DetectionResult, GuidanceStatus, LineSegment, SegmentCluster


def test_horizontal_segment_has_infinite_angle():
    assert math.isinf(LineSegment(0, 10, 50, 10).angle)


def test_segment_geometry():
    segment = LineSegment(10, 40, 13, 0)

    assert segment.length == pytest.approx(math.hypot(3, 40))
    assert segment.angle == pytest.approx(3 / 40)
    assert segment.midpoint == (11.5, 20.0)
    assert segment.endpoints() == [(10, 40), (13, 0)]


def test_endpoints_truncate():
    assert LineSegment(10.9, 20.2, 30.5, 40.99).endpoints() == [(10, 20), (30, 40)]


def test_cluster_means():
    cluster = SegmentCluster([(10, 0), (20, 10)])
    assert cluster.mean_x == 15
    assert cluster.mean_y == 5
    assert len(cluster) == 2


@pytest.mark.parametrize("deviation,detected,expected", [
    (0.5, False, GuidanceStatus.NO_LANE),
    (0.05, True, GuidanceStatus.CENTERED),
    (-0.09, True, GuidanceStatus.CENTERED),
    (0.3, True, GuidanceStatus.MOVE_LEFT),
    (-0.3, True, GuidanceStatus.MOVE_RIGHT),
])
def test_guidance_status(deviation, detected, expected):
    assert GuidanceStatus.from_result(deviation, detected) is expected


def test_neutral_result_passes_bytes_through():
    data = b"\x00\x01"
    result = DetectionResult.neutral(data)

    assert result.deviation == 0.0
    assert not result.is_lane_detected
    assert result.processed_image is data
    assert result.status is GuidanceStatus.NO_LANE
