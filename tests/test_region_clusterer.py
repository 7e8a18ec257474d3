import pytest

from cluster import CropConfig, cluster_range_points, crop_range_points, shrink_rect
from contracts import DetectionRegion, PixelRect, RangePoint


def _regions(*rects):
    return [DetectionRegion(region_id=i, rect=PixelRect(*rect)) for i, rect in enumerate(rects)]


def test_shrink_rect_example() -> None:
    assert shrink_rect(PixelRect(0, 0, 100, 100), 0.1) == PixelRect(5.0, 5.0, 90.0, 90.0)


@pytest.mark.parametrize("rect", [PixelRect(0, 0, 100, 100), PixelRect(-20, 35, 64, 18)])
def test_shrunk_area_non_increasing_and_centered(rect) -> None:
    factors = [0.0, 0.05, 0.1, 0.25, 0.5, 0.9, 0.99]
    areas = [shrink_rect(rect, f).area for f in factors]

    assert areas[0] == pytest.approx(rect.area)
    assert all(a >= b for a, b in zip(areas, areas[1:]))
    for f in factors:
        assert shrink_rect(rect, f).center == pytest.approx(rect.center)


@pytest.mark.parametrize("factor", [-0.1, 1.0, 1.5])
def test_shrink_factor_out_of_range(factor) -> None:
    with pytest.raises(ValueError):
        shrink_rect(PixelRect(0, 0, 10, 10), factor)


def test_point_inside_single_region_is_assigned(pinhole_calib, point_at) -> None:
    regions = _regions((0, 0, 100, 100))
    point = point_at(50, 50)

    stats = cluster_range_points(regions, [point], 0.1, pinhole_calib)

    assert regions[0].range_points == [point]
    assert stats.assigned == 1
    assert stats.total == 1


def test_point_near_edge_is_dropped_after_shrinking(pinhole_calib, point_at) -> None:
    regions = _regions((0, 0, 100, 100))

    stats = cluster_range_points(regions, [point_at(2, 50)], 0.1, pinhole_calib)

    assert regions[0].range_points == []
    assert stats.outside == 1

    cluster_range_points(regions, [point_at(2, 50)], 0.0, pinhole_calib)
    assert len(regions[0].range_points) == 1


def test_point_in_overlapping_regions_is_assigned_to_neither(pinhole_calib, point_at) -> None:
    regions = _regions((0, 0, 100, 100), (40, 40, 100, 100))
    shared = point_at(60, 60)
    only_first = point_at(20, 20)
    only_second = point_at(120, 120)

    stats = cluster_range_points(regions, [shared, only_first, only_second], 0.1, pinhole_calib)

    assert regions[0].range_points == [only_first]
    assert regions[1].range_points == [only_second]
    assert stats.ambiguous == 1
    assert stats.assigned == 2


def test_points_behind_camera_are_skipped(pinhole_calib, point_at) -> None:
    regions = _regions((0, 0, 100, 100))
    behind = RangePoint(x=-10.0, y=0.0, z=0.0)

    stats = cluster_range_points(regions, [behind, point_at(50, 50)], 0.1, pinhole_calib)

    assert stats.behind_camera == 1
    assert stats.assigned == 1
    assert behind not in regions[0].range_points


def test_clustering_twice_does_not_duplicate(pinhole_calib, point_at) -> None:
    regions = _regions((0, 0, 100, 100), (200, 0, 100, 100))
    points = [point_at(30, 40), point_at(60, 70, depth=12.0), point_at(250, 50)]

    cluster_range_points(regions, points, 0.1, pinhole_calib)
    first = [list(region.range_points) for region in regions]
    cluster_range_points(regions, points, 0.1, pinhole_calib)

    assert [region.range_points for region in regions] == first
    assert len(first[0]) == 2
    assert len(first[1]) == 1


def test_empty_inputs(pinhole_calib, point_at) -> None:
    regions = _regions((0, 0, 100, 100))
    regions[0].range_points.append(point_at(50, 50))

    stats = cluster_range_points(regions, [], 0.1, pinhole_calib)

    assert regions[0].range_points == []
    assert stats.total == 0
    assert cluster_range_points([], [point_at(50, 50)], 0.1, pinhole_calib).outside == 1


def test_crop_keeps_forward_corridor() -> None:
    config = CropConfig(min_x=2.0, max_x=20.0, max_y=2.0, min_z=-1.5, max_z=-0.9, min_reflectivity=0.1)
    keep = RangePoint(x=8.0, y=0.5, z=-1.0, reflectivity=0.3)
    points = [
        keep,
        RangePoint(x=1.0, y=0.0, z=-1.0, reflectivity=0.3),
        RangePoint(x=25.0, y=0.0, z=-1.0, reflectivity=0.3),
        RangePoint(x=8.0, y=-2.5, z=-1.0, reflectivity=0.3),
        RangePoint(x=8.0, y=0.0, z=-0.5, reflectivity=0.3),
        RangePoint(x=8.0, y=0.0, z=-1.0, reflectivity=0.05),
    ]

    assert crop_range_points(points, config) == [keep]
    assert crop_range_points(points, CropConfig(enabled=False)) == points
