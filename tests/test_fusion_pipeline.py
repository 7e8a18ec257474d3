import math

import pytest

from app import FusionPipeline
from cluster import CropConfig
from configs.settings import AppConfig, MatchingConfig, TTCConfig
from contracts import DetectionRegion, Frame, Keypoint, KeypointCorrespondence, PixelRect
from ttc import TTCStatus

OBJECT_BOX = (0, 0, 100, 100)
EMPTY_BOX = (200, 0, 100, 100)


@pytest.fixture
def pipeline(pinhole_calib) -> FusionPipeline:
    config = AppConfig(
        calibration=pinhole_calib,
        crop=CropConfig(enabled=False),
        matching=MatchingConfig(min_support=1),
        ttc=TTCConfig(frame_rate_hz=10.0),
    )
    return FusionPipeline(config)


def _frame(index, depth, point_at, keypoints):
    regions = [
        DetectionRegion(region_id=0, rect=PixelRect(*OBJECT_BOX)),
        DetectionRegion(region_id=1, rect=PixelRect(*EMPTY_BOX)),
    ]
    points = [point_at(u, v, depth=depth) for u in (40, 50, 60) for v in (40, 50, 60)]
    return Frame(
        frame_index=index,
        keypoints=[Keypoint(u, v) for u, v in keypoints],
        regions=regions,
        range_points=points,
    )


def _correspondences(n):
    return [KeypointCorrespondence(prev_index=i, curr_index=i) for i in range(n)]


def test_first_frame_only_clusters(pipeline, point_at) -> None:
    frame = _frame(0, 10.0, point_at, [])

    assert pipeline.process(frame, []) is None
    assert len(frame.regions[0].range_points) == 9
    assert frame.regions[1].range_points == []
    assert pipeline.current_frame is frame
    assert pipeline.previous_frame is None


def test_approaching_object_produces_ttc(pipeline, point_at) -> None:
    keypoints = [(20, 20), (30, 30), (70, 70), (250, 50), (260, 50)]
    pipeline.process(_frame(0, 10.0, point_at, keypoints), [])

    result = pipeline.process(_frame(1, 9.0, point_at, keypoints), _correspondences(len(keypoints)))

    assert result.prev_frame_index == 0
    assert result.curr_frame_index == 1
    assert result.matches.pairs == {0: 0, 1: 1}
    assert result.cluster_stats.assigned == 9
    ttc = result.ttc(0)
    assert ttc.status is TTCStatus.OK
    assert ttc.ttc_s == pytest.approx(0.9)
    assert ttc.closing_speed_mps == pytest.approx(10.0)
    # matched region without range points
    assert result.ttc(1).status is TTCStatus.INDETERMINATE
    assert math.isnan(result.ttc(1).ttc_s)


def test_receding_object_does_not_raise(pipeline, point_at) -> None:
    keypoints = [(20, 20), (30, 30)]
    pipeline.process(_frame(0, 9.0, point_at, keypoints), [])

    result = pipeline.process(_frame(1, 10.0, point_at, keypoints), _correspondences(2))

    assert result.ttc(0).status is TTCStatus.RECEDING
    assert math.isinf(result.ttc(0).ttc_s)


def test_unmatched_regions_have_no_ttc(pipeline, point_at) -> None:
    pipeline.process(_frame(0, 10.0, point_at, [(20, 20)]), [])

    result = pipeline.process(_frame(1, 9.0, point_at, [(20, 20)]), _correspondences(1))

    assert len(result.matches) == 0
    assert result.ttc_by_region == {}
    assert result.ttc(0) is None


def test_only_two_frames_are_retained(pipeline, point_at) -> None:
    frames = [_frame(i, 10.0 - i, point_at, []) for i in range(4)]
    for frame in frames:
        pipeline.process(frame, [])

    assert pipeline.previous_frame is frames[2]
    assert pipeline.current_frame is frames[3]

    pipeline.reset()
    assert pipeline.current_frame is None
    assert pipeline.process(frames[0], []) is None


def test_crop_is_applied_before_clustering(pinhole_calib, point_at) -> None:
    config = AppConfig(
        calibration=pinhole_calib,
        crop=CropConfig(min_x=2.0, max_x=20.0, max_y=2.0, min_z=-1.5, max_z=1.5, min_reflectivity=0.1),
    )
    pipeline = FusionPipeline(config)
    frame = _frame(0, 10.0, point_at, [])
    frame.range_points.append(point_at(50, 50, depth=30.0))

    pipeline.process(frame, [])

    assert len(frame.regions[0].range_points) == 9
    assert all(p.x == 10.0 for p in frame.regions[0].range_points)


def test_from_config_file_uses_default_config() -> None:
    pipeline = FusionPipeline.from_config_file()

    assert pipeline.config.ttc.frame_rate_hz == pytest.approx(10.0)
    assert pipeline.config.clustering.shrink_factor == pytest.approx(0.1)
