"""Decompose geometries into the 1- and 2-point segments the index stores."""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .extent import Extent, bounding_extent
from .geometry import (
    Circle,
    Coord,
    Geometry,
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    circle_to_polygon,
)
from .logging_utils import apply_debug_logging
from .proj import SearchProjection

logger = logging.getLogger(__name__)

DEFAULT_CIRCLE_SIDES = 32


class Segment(NamedTuple):
    """One or two coordinates; ``circle`` is set for pieces of a circle's outline."""

    coordinates: Tuple[Coord, ...]
    circle: Optional[Circle] = None

    @property
    def is_point(self) -> bool:
        return len(self.coordinates) == 1

    def extent(self) -> Extent:
        return bounding_extent(self.coordinates)


def _line_segments(coordinates: Sequence[Coord], circle: Optional[Circle] = None) -> List[Segment]:
    return [
        Segment((coordinates[i], coordinates[i + 1]), circle)
        for i in range(len(coordinates) - 1)
    ]


def _circle_segments(
    circle: Circle, projection: SearchProjection, sides: int
) -> List[Segment]:
    # Polygonise in the search projection so the outline is regular where
    # distances are measured, then bring it back for storage.
    searched = projection.transform_geometry(circle)
    polygon = circle_to_polygon(searched, sides)  # type: ignore[arg-type]
    polygon = projection.restore_geometry(polygon)  # type: ignore[assignment]
    return _line_segments(polygon.rings[0], circle)


def segment(
    geometry: Optional[Geometry],
    projection: Optional[SearchProjection] = None,
    circle_sides: int = DEFAULT_CIRCLE_SIDES,
) -> List[Segment]:
    """Return the ordered segments of ``geometry``.

    Unsupported geometries (and ``None``) produce no segments.
    """

    if geometry is None:
        return []
    if projection is None:
        projection = SearchProjection.identity()

    if isinstance(geometry, Point):
        return [Segment((geometry.coordinate,))]
    if isinstance(geometry, (LineString, LinearRing)):
        return _line_segments(geometry.coordinates)
    if isinstance(geometry, Polygon):
        return [piece for ring in geometry.rings for piece in _line_segments(ring)]
    if isinstance(geometry, MultiPoint):
        return [Segment((coord,)) for coord in geometry.coordinates]
    if isinstance(geometry, MultiLineString):
        return [piece for line in geometry.lines for piece in _line_segments(line)]
    if isinstance(geometry, MultiPolygon):
        return [
            piece
            for rings in geometry.polygons
            for ring in rings
            for piece in _line_segments(ring)
        ]
    if isinstance(geometry, GeometryCollection):
        pieces: List[Segment] = []
        for member in geometry.geometries:
            pieces.extend(segment(member, projection, circle_sides))
        return pieces
    if isinstance(geometry, Circle):
        return _circle_segments(geometry, projection, circle_sides)

    logger.debug("No segmenter for geometry type %s", type(geometry).__name__)
    return []


apply_debug_logging(globals(), logger=logger)


__all__ = ["DEFAULT_CIRCLE_SIDES", "Segment", "segment"]
