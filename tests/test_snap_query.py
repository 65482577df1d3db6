import math

import pytest

from vectorsnap import (
    Circle,
    Feature,
    FeatureCollection,
    LineString,
    MultiLineString,
    Point,
    SearchProjection,
    Snap,
    SnapOptions,
    Viewport,
)

SEGMENT = [(0, 0), (10, 0)]


def _viewport(**kwargs):
    # 1 map unit per pixel; coordinate (x, y) sits at pixel (50 + x, 50 - y).
    kwargs.setdefault("size", (100, 100))
    return Viewport(center=(0.0, 0.0), resolution=1.0, **kwargs)


def _snap(*geometries, viewport=None, **options):
    features = FeatureCollection([Feature(geometry) for geometry in geometries])
    snap = Snap(SnapOptions(features=features, **options))
    snap.attach(viewport or _viewport())
    return snap


def _query(snap, coordinate):
    pixel = snap.viewport.get_pixel_from_coordinate(coordinate)
    return snap.snap_to(pixel, coordinate)


def test_vertex_wins_over_closer_edge_point():
    snap = _snap(LineString(SEGMENT))

    result = _query(snap, (0.4, 0.01))

    assert result.vertex == (0.0, 0.0)
    assert result.vertex_pixel == (50, 50)
    assert result.kind == "vertex"


def test_edge_only_fallback():
    snap = _snap(LineString(SEGMENT), vertex=False)

    result = _query(snap, (5.0, 0.2))

    assert result.vertex == (5.0, 0.0)
    assert result.vertex_pixel == (55, 50)
    assert result.kind == "edge"


def test_edge_is_used_when_nearest_vertex_is_out_of_tolerance():
    snap = _snap(LineString([(0, 0), (100, 0)]))

    result = _query(snap, (50.0, 1.0))

    assert result.vertex == (50.0, 0.0)
    assert result.kind == "edge"


def test_out_of_tolerance_returns_none():
    snap = _snap(LineString(SEGMENT))
    assert _query(snap, (5.0, 50.0)) is None


def test_both_passes_disabled_returns_none():
    snap = _snap(LineString(SEGMENT), vertex=False, edge=False)
    assert _query(snap, (0.0, 0.0)) is None


def test_vertex_only_ignores_edges():
    snap = _snap(LineString([(0, 0), (100, 0)]), edge=False)
    assert _query(snap, (50.0, 1.0)) is None


@pytest.mark.parametrize(
    "coordinate, snapped",
    [
        ((10.0, 0.0), True),
        ((6.0, 8.0), True),
        ((11.0, 0.0), False),
        ((8.0, 7.0), False),
    ],
)
def test_tolerance_boundary_is_inclusive(coordinate, snapped):
    snap = _snap(Point((0, 0)))

    result = _query(snap, coordinate)

    assert (result is not None) is snapped
    if snapped:
        assert result.vertex == (0.0, 0.0)


def test_custom_tolerance():
    snap = _snap(Point((0, 0)), pixel_tolerance=3.0)
    assert _query(snap, (2.0, 2.0)) is not None
    assert _query(snap, (3.0, 3.0)) is None


def test_circle_snaps_to_true_boundary_not_polygon_outline():
    snap = _snap(Circle((0, 0), 10), pixel_tolerance=2.0)
    angle = math.pi / 32
    coordinate = (10.05 * math.cos(angle), 10.05 * math.sin(angle))

    result = _query(snap, coordinate)

    assert result.kind == "edge"
    x, y = result.vertex
    assert math.isclose(math.hypot(x, y), 10.0, rel_tol=1e-9)
    assert math.isclose(math.atan2(y, x), angle, rel_tol=1e-9)


def test_circle_outline_vertices_are_not_vertex_candidates():
    snap = _snap(Circle((0, 0), 10), edge=False)
    assert _query(snap, (10.0, 0.0)) is None


def test_circle_on_axis():
    snap = _snap(Circle((0, 0), 10), pixel_tolerance=1.0)

    result = _query(snap, (10.05, 0.0))

    assert result.vertex == pytest.approx((10.0, 0.0))
    assert result.vertex_pixel == (60, 50)


def test_multi_part_geometry_removal_clears_every_part():
    feature = Feature(MultiLineString([[(0, 0), (10, 0)], [(50, 50), (60, 50)]]))
    features = FeatureCollection([feature])
    snap = Snap(SnapOptions(features=features))
    snap.attach(_viewport(size=(200, 200)))

    assert len(snap.registry.entries_for(feature)) == 2
    assert _query(snap, (55.0, 50.5)) is not None

    features.remove(feature)

    assert snap.index.is_empty()
    assert _query(snap, (55.0, 50.5)) is None
    assert _query(snap, (0.0, 0.0)) is None


def test_update_without_geometry_change_keeps_entry_count():
    feature = Feature(LineString([(0, 0), (1, 0), (2, 0)]))
    snap = Snap(SnapOptions(features=FeatureCollection([feature])))
    snap.attach(_viewport())

    snap.registry.update_feature(feature)
    snap.registry.update_feature(feature)

    assert len(snap.index) == 2
    assert len(snap.registry.entries_for(feature)) == 2


def test_search_projection_is_used_for_edge_distance():
    viewport = _viewport(search_projection=SearchProjection.scaled(1000.0))
    snap = _snap(LineString(SEGMENT), viewport=viewport, vertex=False)

    result = _query(snap, (5.0, 0.2))

    assert result.vertex == pytest.approx((5.0, 0.0))
    assert result.vertex_pixel == (55, 50)


def test_search_projection_is_used_for_circles():
    viewport = _viewport(search_projection=SearchProjection.scaled(1000.0))
    snap = _snap(Circle((0, 0), 10), viewport=viewport, pixel_tolerance=2.0)

    result = _query(snap, (0.0, 10.5))

    assert result.vertex == pytest.approx((0.0, 10.0))


def test_rotated_view():
    viewport = _viewport(rotation=math.pi / 2)
    snap = _snap(Point((0, 0)), viewport=viewport)

    result = _query(snap, (3.0, 4.0))

    assert result.vertex == (0.0, 0.0)
    assert result.vertex_pixel == (50, 50)
    assert _query(snap, (8.0, 7.0)) is None


def test_closest_of_several_features_wins():
    snap = _snap(Point((0, 0)), Point((4, 0)), Point((-6, 0)))

    assert _query(snap, (3.0, 0.0)).vertex == (4.0, 0.0)
    assert _query(snap, (-4.0, 0.0)).vertex == (-6.0, 0.0)


@pytest.mark.parametrize(
    "vertex, expected_pixel",
    [
        ((0.5, 0.0), (51, 50)),
        ((2.5, -1.5), (53, 52)),
        ((-0.5, 0.5), (50, 50)),
    ],
)
def test_vertex_pixel_rounds_half_up(vertex, expected_pixel):
    snap = _snap(Point(vertex))

    result = snap.snap_to((50.0, 50.0), (0.0, 0.0))

    assert result.vertex == vertex
    assert result.vertex_pixel == expected_pixel
