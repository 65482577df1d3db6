"""Closest-point and distance helpers on plain 2D coordinates."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

Coordinate = Sequence[float]
Point2D = Tuple[float, float]


def squared_distance(a: Coordinate, b: Coordinate) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def closest_on_segment(coordinate: Coordinate, segment: Sequence[Coordinate]) -> Point2D:
    """Return the point of ``segment`` closest to ``coordinate``.

    A zero-length segment yields its start.
    """

    x0, y0 = float(coordinate[0]), float(coordinate[1])
    start, end = segment[0], segment[1]
    x1, y1 = float(start[0]), float(start[1])
    x2, y2 = float(end[0]), float(end[1])
    dx = x2 - x1
    dy = y2 - y1
    if dx == 0.0 and dy == 0.0:
        return (x1, y1)
    along = (dx * (x0 - x1) + dy * (y0 - y1)) / (dx * dx + dy * dy)
    if along < 0.0:
        return (x1, y1)
    if along > 1.0:
        return (x2, y2)
    return (x1 + dx * along, y1 + dy * along)


def closest_on_circle(coordinate: Coordinate, center: Coordinate, radius: float) -> Point2D:
    """Return the point on the circle boundary closest to ``coordinate``.

    The centre itself maps to the boundary point at angle zero.
    """

    cx, cy = float(center[0]), float(center[1])
    dx = float(coordinate[0]) - cx
    dy = float(coordinate[1]) - cy
    if dx == 0.0 and dy == 0.0:
        dx = 1.0
    d = math.sqrt(dx * dx + dy * dy)
    return (cx + radius * dx / d, cy + radius * dy / d)


__all__ = [
    "Coordinate",
    "Point2D",
    "closest_on_circle",
    "closest_on_segment",
    "squared_distance",
]
