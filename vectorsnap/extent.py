"""Axis-aligned extent helpers.

An extent is a ``(min_x, min_y, max_x, max_y)`` tuple in data coordinates.
The empty extent is inverted (``+inf`` minima, ``-inf`` maxima) so that
extending it with any coordinate yields that coordinate's point extent.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

Coordinate = Sequence[float]
Extent = Tuple[float, float, float, float]

EMPTY_EXTENT: Extent = (math.inf, math.inf, -math.inf, -math.inf)


def create_empty() -> Extent:
    return EMPTY_EXTENT


def is_empty(extent: Extent) -> bool:
    return extent[2] < extent[0] or extent[3] < extent[1]


def bounding_extent(coordinates: Iterable[Coordinate]) -> Extent:
    """Return the smallest extent containing every coordinate."""

    min_x, min_y, max_x, max_y = EMPTY_EXTENT
    for coord in coordinates:
        x = float(coord[0])
        y = float(coord[1])
        if x < min_x:
            min_x = x
        if y < min_y:
            min_y = y
        if x > max_x:
            max_x = x
        if y > max_y:
            max_y = y
    return (min_x, min_y, max_x, max_y)


def extend(a: Extent, b: Extent) -> Extent:
    return (min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3]))


def intersects(a: Extent, b: Extent) -> bool:
    # Touching edges count as intersecting.
    return a[0] <= b[2] and a[2] >= b[0] and a[1] <= b[3] and a[3] >= b[1]


__all__ = [
    "Coordinate",
    "Extent",
    "EMPTY_EXTENT",
    "bounding_extent",
    "create_empty",
    "extend",
    "intersects",
    "is_empty",
]
