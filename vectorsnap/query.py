"""Nearest vertex / edge search against the segment index."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from .coordinate import closest_on_circle, closest_on_segment, squared_distance
from .extent import bounding_extent
from .proj import SearchProjection
from .rbush import SpatialIndex
from .registry import SegmentData

logger = logging.getLogger(__name__)

Pixel = Tuple[float, float]
Point2D = Tuple[float, float]


class ViewportLike(Protocol):
    search_projection: SearchProjection

    def get_pixel_from_coordinate(self, coordinate: Sequence[float]) -> Pixel: ...

    def get_coordinate_from_pixel(self, pixel: Sequence[float]) -> Point2D: ...


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class SnapResult:
    vertex: Point2D
    vertex_pixel: Tuple[int, int]
    kind: str = "vertex"  # "vertex" or "edge"


class SnapQueryEngine:
    def __init__(
        self,
        index: SpatialIndex[SegmentData],
        *,
        vertex: bool = True,
        edge: bool = True,
        pixel_tolerance: float = 10.0,
    ) -> None:
        self.index = index
        self.vertex = vertex
        self.edge = edge
        self.pixel_tolerance = float(pixel_tolerance)

    def candidates(self, pixel: Sequence[float], viewport: ViewportLike) -> List[SegmentData]:
        tol = self.pixel_tolerance
        # Convert box corners rather than a radius: the view may be rotated.
        corners = [
            viewport.get_coordinate_from_pixel((pixel[0] - tol, pixel[1] + tol)),
            viewport.get_coordinate_from_pixel((pixel[0] + tol, pixel[1] - tol)),
            viewport.get_coordinate_from_pixel((pixel[0] - tol, pixel[1] - tol)),
            viewport.get_coordinate_from_pixel((pixel[0] + tol, pixel[1] + tol)),
        ]
        return self.index.get_in_extent(bounding_extent(corners))

    def _accept(
        self,
        closest: Optional[Point2D],
        pixel: Sequence[float],
        viewport: ViewportLike,
        kind: str,
    ) -> Optional[SnapResult]:
        if closest is None:
            return None
        vertex_pixel = viewport.get_pixel_from_coordinate(closest)
        if squared_distance(pixel, vertex_pixel) <= self.pixel_tolerance * self.pixel_tolerance:
            return SnapResult(
                vertex=(float(closest[0]), float(closest[1])),
                vertex_pixel=(_round_half_up(vertex_pixel[0]), _round_half_up(vertex_pixel[1])),
                kind=kind,
            )
        return None

    def query(
        self,
        pixel: Sequence[float],
        coordinate: Sequence[float],
        viewport: ViewportLike,
    ) -> Optional[SnapResult]:
        """Return the snapped vertex and its pixel, or ``None``."""

        segments = self.candidates(pixel, viewport)
        if not segments:
            return None

        projection = getattr(viewport, "search_projection", None) or SearchProjection.identity()
        projected = projection.to_search(coordinate)

        closest: Optional[Point2D] = None
        min_squared = math.inf

        if self.vertex:
            for data in segments:
                if data.circle is not None:
                    continue
                for vertex in data.coordinates:
                    delta = squared_distance(projected, projection.to_search(vertex))
                    if delta < min_squared:
                        closest = (float(vertex[0]), float(vertex[1]))
                        min_squared = delta
            result = self._accept(closest, pixel, viewport, "vertex")
            if result is not None:
                logger.debug("Vertex snap among %d candidate(s): %s", len(segments), result.vertex)
                return result

        if self.edge:
            circles_seen = set()
            for data in segments:
                if data.circle is not None:
                    if id(data.circle) in circles_seen:
                        continue
                    circles_seen.add(id(data.circle))
                    circle = projection.transform_geometry(data.circle)
                    candidate = closest_on_circle(projected, circle.center, circle.radius)  # type: ignore[attr-defined]
                elif len(data.coordinates) == 2:
                    start, end = data.coordinates
                    candidate = closest_on_segment(
                        projected, (projection.to_search(start), projection.to_search(end))
                    )
                else:
                    continue
                delta = squared_distance(projected, candidate)
                if delta < min_squared:
                    closest = projection.from_search(candidate)
                    min_squared = delta
            result = self._accept(closest, pixel, viewport, "edge")
            if result is not None:
                logger.debug("Edge snap among %d candidate(s): %s", len(segments), result.vertex)
                return result

        return None


__all__ = ["SnapQueryEngine", "SnapResult", "ViewportLike"]
