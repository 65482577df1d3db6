"""Geometry variants understood by the snapping engine.

Every variant is a small mutable dataclass holding plain coordinate tuples.
Coordinates may carry extra ordinates (Z, M); only the first two take part
in extents and distance computations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Sequence, Tuple

import numpy as np

from .extent import EMPTY_EXTENT, Extent, bounding_extent, extend

Coord = Tuple[float, ...]
CoordTransform = Callable[[Sequence[float]], Sequence[float]]


class GeometryType(str, Enum):
    POINT = "Point"
    LINE_STRING = "LineString"
    LINEAR_RING = "LinearRing"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"
    CIRCLE = "Circle"


def _as_coord(value: Sequence[float]) -> Coord:
    arr = np.asarray(value, dtype=float)
    if arr.ndim != 1 or arr.shape[0] < 2:
        raise ValueError("coordinate must have at least two ordinates")
    return tuple(float(v) for v in arr)


def _as_coords(values: Sequence[Sequence[float]]) -> List[Coord]:
    if len(values) == 0:
        return []
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError("coordinates must be a sequence of points with at least two ordinates")
    return [tuple(float(v) for v in row) for row in arr]


def _apply(fn: CoordTransform, coord: Coord) -> Coord:
    out = fn(coord[:2])
    return (float(out[0]), float(out[1])) + tuple(coord[2:])


class Geometry:
    """Base class; subclasses set ``kind``."""

    kind: GeometryType

    def extent(self) -> Extent:
        raise NotImplementedError

    def transform(self, fn: CoordTransform) -> "Geometry":
        """Return a copy with ``fn`` applied to every coordinate."""
        raise NotImplementedError

    def vertex_count(self) -> int:
        raise NotImplementedError

    def get_type(self) -> str:
        return self.kind.value


@dataclass
class Point(Geometry):
    coordinate: Coord
    kind = GeometryType.POINT

    def __post_init__(self) -> None:
        self.coordinate = _as_coord(self.coordinate)

    def extent(self) -> Extent:
        return bounding_extent([self.coordinate])

    def transform(self, fn: CoordTransform) -> "Point":
        return Point(_apply(fn, self.coordinate))

    def vertex_count(self) -> int:
        return 1


@dataclass
class LineString(Geometry):
    coordinates: List[Coord] = field(default_factory=list)
    kind = GeometryType.LINE_STRING

    def __post_init__(self) -> None:
        self.coordinates = _as_coords(self.coordinates)

    def extent(self) -> Extent:
        return bounding_extent(self.coordinates)

    def transform(self, fn: CoordTransform) -> "LineString":
        return type(self)([_apply(fn, c) for c in self.coordinates])

    def vertex_count(self) -> int:
        return len(self.coordinates)


@dataclass
class LinearRing(LineString):
    kind = GeometryType.LINEAR_RING


@dataclass
class Polygon(Geometry):
    """Rings in order: exterior first, then holes."""

    rings: List[List[Coord]] = field(default_factory=list)
    kind = GeometryType.POLYGON

    def __post_init__(self) -> None:
        self.rings = [_as_coords(ring) for ring in self.rings]

    def extent(self) -> Extent:
        # The exterior ring bounds the holes.
        if not self.rings:
            return EMPTY_EXTENT
        return bounding_extent(self.rings[0])

    def transform(self, fn: CoordTransform) -> "Polygon":
        return Polygon([[_apply(fn, c) for c in ring] for ring in self.rings])

    def vertex_count(self) -> int:
        return sum(len(ring) for ring in self.rings)


@dataclass
class MultiPoint(Geometry):
    coordinates: List[Coord] = field(default_factory=list)
    kind = GeometryType.MULTI_POINT

    def __post_init__(self) -> None:
        self.coordinates = _as_coords(self.coordinates)

    def extent(self) -> Extent:
        return bounding_extent(self.coordinates)

    def transform(self, fn: CoordTransform) -> "MultiPoint":
        return MultiPoint([_apply(fn, c) for c in self.coordinates])

    def vertex_count(self) -> int:
        return len(self.coordinates)


@dataclass
class MultiLineString(Geometry):
    lines: List[List[Coord]] = field(default_factory=list)
    kind = GeometryType.MULTI_LINE_STRING

    def __post_init__(self) -> None:
        self.lines = [_as_coords(line) for line in self.lines]

    def extent(self) -> Extent:
        result = EMPTY_EXTENT
        for line in self.lines:
            result = extend(result, bounding_extent(line))
        return result

    def transform(self, fn: CoordTransform) -> "MultiLineString":
        return MultiLineString([[_apply(fn, c) for c in line] for line in self.lines])

    def vertex_count(self) -> int:
        return sum(len(line) for line in self.lines)


@dataclass
class MultiPolygon(Geometry):
    polygons: List[List[List[Coord]]] = field(default_factory=list)
    kind = GeometryType.MULTI_POLYGON

    def __post_init__(self) -> None:
        self.polygons = [[_as_coords(ring) for ring in rings] for rings in self.polygons]

    def extent(self) -> Extent:
        result = EMPTY_EXTENT
        for rings in self.polygons:
            if rings:
                result = extend(result, bounding_extent(rings[0]))
        return result

    def transform(self, fn: CoordTransform) -> "MultiPolygon":
        return MultiPolygon(
            [[[_apply(fn, c) for c in ring] for ring in rings] for rings in self.polygons]
        )

    def vertex_count(self) -> int:
        return sum(len(ring) for rings in self.polygons for ring in rings)


@dataclass
class GeometryCollection(Geometry):
    geometries: List[Geometry] = field(default_factory=list)
    kind = GeometryType.GEOMETRY_COLLECTION

    def extent(self) -> Extent:
        result = EMPTY_EXTENT
        for geometry in self.geometries:
            result = extend(result, geometry.extent())
        return result

    def transform(self, fn: CoordTransform) -> "GeometryCollection":
        return GeometryCollection([geometry.transform(fn) for geometry in self.geometries])

    def vertex_count(self) -> int:
        return sum(geometry.vertex_count() for geometry in self.geometries)


@dataclass
class Circle(Geometry):
    center: Coord
    radius: float
    kind = GeometryType.CIRCLE

    def __post_init__(self) -> None:
        self.center = _as_coord(self.center)
        self.radius = float(self.radius)
        if not self.radius >= 0.0:
            raise ValueError("circle radius must be a non-negative number")

    def extent(self) -> Extent:
        cx, cy = self.center[0], self.center[1]
        r = self.radius
        return (cx - r, cy - r, cx + r, cy + r)

    def transform(self, fn: CoordTransform) -> "Circle":
        # Transform the centre and one boundary point; the radius follows.
        center = _apply(fn, self.center)
        edge = _apply(fn, (self.center[0] + self.radius, self.center[1]))
        return Circle(center, math.hypot(edge[0] - center[0], edge[1] - center[1]))

    def vertex_count(self) -> int:
        return 1


def circle_to_polygon(circle: Circle, sides: int = 32, angle: float = 0.0) -> Polygon:
    """Approximate ``circle`` with a closed regular polygon of ``sides`` vertices."""

    if sides < 3:
        raise ValueError("circle polygon needs at least 3 sides")
    cx, cy = circle.center[0], circle.center[1]
    angles = np.mod(np.arange(sides, dtype=float) * (2.0 * math.pi / sides) + angle, 2.0 * math.pi)
    xs = cx + circle.radius * np.cos(angles)
    ys = cy + circle.radius * np.sin(angles)
    ring = [(float(x), float(y)) for x, y in zip(xs, ys)]
    ring.append(ring[0])
    return Polygon([ring])


__all__ = [
    "Circle",
    "Coord",
    "CoordTransform",
    "Geometry",
    "GeometryCollection",
    "GeometryType",
    "LineString",
    "LinearRing",
    "MultiLineString",
    "MultiPoint",
    "MultiPolygon",
    "Point",
    "Polygon",
    "circle_to_polygon",
]
