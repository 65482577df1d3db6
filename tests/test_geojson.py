import json
import logging

import pytest

from vectorsnap.geojson import (
    GeoJSONError,
    load_features,
    read_feature,
    read_features,
    read_geometry,
    write_geometry,
)
from vectorsnap.geometry import Circle, GeometryCollection, LineString, MultiPolygon, Point, Polygon

DOCUMENT = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "id": "road",
            "properties": {"name": "Main St"},
            "geometry": {"type": "LineString", "coordinates": [[0, 0], [10, 0], [10, 10]]},
        },
        {
            "type": "Feature",
            "properties": None,
            "geometry": {"type": "Circle", "center": [5, 5], "radius": 2},
        },
        {"type": "Feature", "geometry": None},
    ],
}


def test_read_feature_collection():
    features = read_features(DOCUMENT)

    assert len(features) == 3
    road, roundabout, empty = features
    assert road.id == "road"
    assert road.properties == {"name": "Main St"}
    assert isinstance(road.geometry, LineString)
    assert road.geometry.coordinates[-1] == (10.0, 10.0)
    assert roundabout.geometry == Circle((5, 5), 2)
    assert roundabout.properties == {}
    assert empty.geometry is None


def test_bare_geometry_becomes_single_feature():
    (feature,) = read_features({"type": "Point", "coordinates": [1, 2, 3]})
    assert feature.geometry == Point((1, 2, 3))


def test_polygon_and_multipolygon():
    ring = [[0, 0], [4, 0], [4, 4], [0, 0]]
    polygon = read_geometry({"type": "Polygon", "coordinates": [ring]})
    multi = read_geometry({"type": "MultiPolygon", "coordinates": [[ring], [ring]]})

    assert isinstance(polygon, Polygon)
    assert polygon.extent() == (0.0, 0.0, 4.0, 4.0)
    assert isinstance(multi, MultiPolygon)
    assert multi.vertex_count() == 8


def test_geometry_collection_skips_bad_members(caplog):
    obj = {
        "type": "GeometryCollection",
        "geometries": [
            {"type": "Point", "coordinates": [0, 0]},
            {"type": "Curve", "coordinates": []},
            {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
        ],
    }

    with caplog.at_level(logging.WARNING, logger="vectorsnap.geojson"):
        geometry = read_geometry(obj)

    assert isinstance(geometry, GeometryCollection)
    assert len(geometry.geometries) == 2
    assert "Skipping GeometryCollection member 1" in caplog.text


@pytest.mark.parametrize(
    "obj, message",
    [
        ({"type": "Curve"}, "unsupported geometry type"),
        ({"coordinates": [0, 0]}, "must be an object"),
        ({"type": "Point"}, 'missing "coordinates"'),
        ({"type": "Point", "coordinates": [1]}, "invalid Point coordinates"),
        ({"type": "LineString", "coordinates": [[0, 0], [1]]}, "invalid LineString coordinates"),
        ({"type": "Circle", "center": [0, 0], "radius": "big"}, "invalid Circle coordinates"),
        ({"type": "Circle", "center": [0, 0], "radius": -2}, "invalid Circle coordinates"),
    ],
)
def test_invalid_geometries(obj, message):
    with pytest.raises(GeoJSONError, match=message):
        read_geometry(obj)


def test_read_feature_requires_feature_type():
    with pytest.raises(GeoJSONError):
        read_feature({"type": "Point", "coordinates": [0, 0]})


def test_load_features_from_file(tmp_path):
    path = tmp_path / "roads.geojson"
    path.write_text(json.dumps(DOCUMENT), encoding="utf-8")

    assert len(load_features(path)) == 3


def test_load_features_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.geojson"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(GeoJSONError, match="invalid JSON"):
        load_features(path)


def test_write_geometry():
    assert write_geometry(Point((1, 2))) == {"type": "Point", "coordinates": [1.0, 2.0]}
    assert write_geometry(Circle((0, 0), 3)) == {"type": "Circle", "center": [0.0, 0.0], "radius": 3.0}
    collection = write_geometry(GeometryCollection([LineString([(0, 0), (1, 0)])]))
    assert collection == {
        "type": "GeometryCollection",
        "geometries": [{"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 0.0]]}],
    }
