from laneguide.detection.clustering import SegmentClusterer, add_to_clusters, passes_filter
from laneguide.detection.core.config import ProcessingConfig
from laneguide.detection.core.models import LineSegment, SegmentCluster

from conftest import FRAME_HEIGHT, FRAME_WIDTH, LEFT_SEGMENTS, RIGHT_SEGMENTS


def _analyze(segments, scale=1.0, **overrides):
    config = ProcessingConfig(processing_scale=1.0, **overrides)
    return SegmentClusterer(config).analyze(segments, FRAME_WIDTH, FRAME_HEIGHT, scale)


def test_nearby_segments_merge_into_one_cluster():
    clusters = []
    add_to_clusters(clusters, [(100, 280), (120, 200)], 20.0)
    add_to_clusters(clusters, [(105, 275), (125, 195)], 20.0)

    assert len(clusters) == 1
    assert clusters[0].points == [(100, 280), (120, 200), (105, 275), (125, 195)]


def test_distant_segments_stay_separate():
    clusters = []
    add_to_clusters(clusters, [(100, 280), (120, 200)], 20.0)
    add_to_clusters(clusters, [(160, 280), (170, 200)], 20.0)

    assert len(clusters) == 2
    assert clusters[1].points == [(160, 280), (170, 200)]


def test_distance_threshold_is_strict():
    clusters = [SegmentCluster([(0, 0)])]
    add_to_clusters(clusters, [(20, 0), (100, 100)], 20.0)
    assert len(clusters) == 2


def test_first_match_wins_over_closer_cluster():
    clusters = [SegmentCluster([(0, 0)]), SegmentCluster([(30, 0)])]
    # (18, 0) is 18 px from the first cluster and 12 px from the second
    target = add_to_clusters(clusters, [(18, 0), (60, 60)], 20.0)

    assert target is clusters[0]
    assert clusters[0].points == [(0, 0), (18, 0), (60, 60)]
    assert clusters[1].points == [(30, 0)]


def test_duplicate_points_are_kept():
    clusters = [SegmentCluster([(10, 10)])]
    add_to_clusters(clusters, [(10, 10), (10, 10)], 20.0)
    assert clusters[0].size == 3


def test_filter_rejects_horizontal_segment():
    config = ProcessingConfig()
    horizontal = LineSegment(100, 240, 200, 240)
    assert horizontal.angle == float('inf')
    assert not passes_filter(horizontal, FRAME_HEIGHT, config)


def test_filter_rejects_shallow_short_and_out_of_band_segments():
    config = ProcessingConfig()
    shallow = LineSegment(100, 260, 200, 220)       # |dx/dy| = 2.5
    short = LineSegment(110, 245, 112, 235)         # length ~10
    too_high = LineSegment(110, 120, 120, 40)       # midpoint y = 80
    low_in_band = LineSegment(110, 299, 112, 230)   # midpoint y = 264.5
    bottom_edge = LineSegment(110, 320, 115, 260)   # midpoint y = 290

    assert not passes_filter(shallow, FRAME_HEIGHT, config)
    assert not passes_filter(short, FRAME_HEIGHT, config)
    assert not passes_filter(too_high, FRAME_HEIGHT, config)
    assert passes_filter(low_in_band, FRAME_HEIGHT, config)
    assert not passes_filter(bottom_edge, FRAME_HEIGHT, config)


def test_optional_max_length():
    long_segment = LineSegment(110, 290, 120, 190)
    assert passes_filter(long_segment, FRAME_HEIGHT, ProcessingConfig())
    assert not passes_filter(long_segment, FRAME_HEIGHT,
                             ProcessingConfig(max_length_ratio=0.3))


def test_side_assignment_and_edge_bands():
    clusterer = SegmentClusterer(ProcessingConfig())

    assert clusterer.side_of(LineSegment(100, 280, 120, 200), FRAME_WIDTH) == 'left'
    assert clusterer.side_of(LineSegment(300, 280, 280, 200), FRAME_WIDTH) == 'right'
    # Too close to the image edges
    assert clusterer.side_of(LineSegment(10, 280, 20, 200), FRAME_WIDTH) is None
    assert clusterer.side_of(LineSegment(390, 280, 380, 200), FRAME_WIDTH) is None
    # Exactly at the center belongs to neither side
    assert clusterer.side_of(LineSegment(190, 280, 210, 200), FRAME_WIDTH) is None


def test_analyze_groups_mirrored_segments():
    analysis = _analyze(LEFT_SEGMENTS + RIGHT_SEGMENTS)

    assert len(analysis.left_clusters) == 1
    assert len(analysis.right_clusters) == 1
    assert analysis.left_clusters[0].size == 6
    assert analysis.right_clusters[0].size == 6
    assert analysis.left_clusters[0].mean_x == 115
    assert analysis.right_clusters[0].mean_x == 285
    assert analysis.left_segments == LEFT_SEGMENTS
    assert analysis.right_segments == RIGHT_SEGMENTS


def test_analyze_scales_segments_back_to_frame_coordinates():
    small = [s.scaled(0.5) for s in LEFT_SEGMENTS]
    analysis = _analyze(small, scale=0.5)

    assert analysis.left_clusters[0].mean_x == 115
    assert analysis.left_segments[0].as_tuple() == (100, 280, 120, 200)


def test_clusters_below_min_size_are_dropped():
    analysis = _analyze(LEFT_SEGMENTS, min_cluster_size=8)
    assert analysis.left_clusters == []
    # Accepted segments are still reported for drawing
    assert len(analysis.left_segments) == 3


def test_rejected_segments_are_not_drawn_or_clustered():
    analysis = _analyze([LineSegment(100, 240, 200, 240)])
    assert analysis.left_segments == []
    assert analysis.left_clusters == []
    assert analysis.right_clusters == []
