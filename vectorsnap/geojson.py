"""GeoJSON reading and writing for the geometry variants.

A non-standard ``{"type": "Circle", "center": [x, y], "radius": r}`` object
is accepted alongside the RFC 7946 types.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from .features import Feature
from .geometry import (
    Circle,
    Geometry,
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

logger = logging.getLogger(__name__)


class GeoJSONError(ValueError):
    pass


def _require(obj: Mapping[str, Any], key: str) -> Any:
    if key not in obj:
        raise GeoJSONError(f'{obj.get("type", "object")} is missing "{key}"')
    return obj[key]


def read_geometry(obj: Mapping[str, Any]) -> Geometry:
    """Decode one GeoJSON geometry object."""

    if not isinstance(obj, Mapping) or "type" not in obj:
        raise GeoJSONError('geometry must be an object with a "type"')
    kind = obj["type"]
    try:
        if kind == "Point":
            return Point(_require(obj, "coordinates"))
        if kind == "LineString":
            return LineString(_require(obj, "coordinates"))
        if kind == "LinearRing":
            return LinearRing(_require(obj, "coordinates"))
        if kind == "Polygon":
            return Polygon(_require(obj, "coordinates"))
        if kind == "MultiPoint":
            return MultiPoint(_require(obj, "coordinates"))
        if kind == "MultiLineString":
            return MultiLineString(_require(obj, "coordinates"))
        if kind == "MultiPolygon":
            return MultiPolygon(_require(obj, "coordinates"))
        if kind == "Circle":
            return Circle(_require(obj, "center"), float(_require(obj, "radius")))
    except GeoJSONError:
        raise
    except (TypeError, ValueError) as exc:
        raise GeoJSONError(f"invalid {kind} coordinates: {exc}") from exc
    if kind == "GeometryCollection":
        members: List[Geometry] = []
        for idx, member in enumerate(_require(obj, "geometries")):
            try:
                members.append(read_geometry(member))
            except GeoJSONError as exc:
                logger.warning("Skipping GeometryCollection member %d: %s", idx, exc)
        return GeometryCollection(members)
    raise GeoJSONError(f"unsupported geometry type {kind!r}")


def read_feature(obj: Mapping[str, Any]) -> Feature:
    if obj.get("type") != "Feature":
        raise GeoJSONError('feature must have "type": "Feature"')
    raw_geometry = obj.get("geometry")
    geometry = read_geometry(raw_geometry) if raw_geometry is not None else None
    return Feature(geometry, properties=obj.get("properties") or {}, id=obj.get("id"))


def read_features(obj: Mapping[str, Any]) -> List[Feature]:
    """Decode a FeatureCollection, a Feature or a bare geometry into features."""

    if not isinstance(obj, Mapping):
        raise GeoJSONError("GeoJSON document must be an object")
    kind = obj.get("type")
    if kind == "FeatureCollection":
        return [read_feature(item) for item in _require(obj, "features")]
    if kind == "Feature":
        return [read_feature(obj)]
    return [Feature(read_geometry(obj))]


def load_features(path: Union[str, Path]) -> List[Feature]:
    text = Path(path).read_text(encoding="utf-8")
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GeoJSONError(f"{path}: invalid JSON ({exc})") from exc
    features = read_features(document)
    logger.info("Loaded %d feature(s) from %s", len(features), path)
    return features


def write_geometry(geometry: Geometry) -> Dict[str, Any]:
    if isinstance(geometry, Point):
        return {"type": "Point", "coordinates": list(geometry.coordinate)}
    if isinstance(geometry, LineString):
        return {"type": geometry.get_type(), "coordinates": [list(c) for c in geometry.coordinates]}
    if isinstance(geometry, Polygon):
        return {"type": "Polygon", "coordinates": [[list(c) for c in ring] for ring in geometry.rings]}
    if isinstance(geometry, MultiPoint):
        return {"type": "MultiPoint", "coordinates": [list(c) for c in geometry.coordinates]}
    if isinstance(geometry, MultiLineString):
        return {"type": "MultiLineString", "coordinates": [[list(c) for c in line] for line in geometry.lines]}
    if isinstance(geometry, MultiPolygon):
        return {
            "type": "MultiPolygon",
            "coordinates": [[[list(c) for c in ring] for ring in rings] for rings in geometry.polygons],
        }
    if isinstance(geometry, GeometryCollection):
        return {"type": "GeometryCollection", "geometries": [write_geometry(g) for g in geometry.geometries]}
    if isinstance(geometry, Circle):
        return {"type": "Circle", "center": list(geometry.center), "radius": geometry.radius}
    raise GeoJSONError(f"cannot encode geometry {type(geometry).__name__}")


__all__ = [
    "GeoJSONError",
    "load_features",
    "read_feature",
    "read_features",
    "write_geometry",
    "read_geometry",
]
