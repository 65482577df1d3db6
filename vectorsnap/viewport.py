"""Minimal map viewport: pixel <-> coordinate conversion for a 2D view."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence, Tuple

from .proj import SearchProjection

Pixel = Tuple[float, float]
Point2D = Tuple[float, float]


@dataclass
class Viewport:
    """A view centred on ``center`` with ``resolution`` map units per pixel.

    Pixel y grows downward; ``rotation`` is in radians, counter-clockwise.
    Both conversions operate on display (user) coordinates.
    """

    center: Point2D = (0.0, 0.0)
    resolution: float = 1.0
    size: Tuple[int, int] = (256, 256)
    rotation: float = 0.0
    search_projection: SearchProjection = field(default_factory=SearchProjection.identity)

    def __post_init__(self) -> None:
        if not (math.isfinite(self.resolution) and self.resolution > 0.0):
            raise ValueError("viewport resolution must be a positive finite number")
        self.center = (float(self.center[0]), float(self.center[1]))

    def get_pixel_from_coordinate(self, coordinate: Sequence[float]) -> Pixel:
        dx = float(coordinate[0]) - self.center[0]
        dy = float(coordinate[1]) - self.center[1]
        if self.rotation:
            cos_r = math.cos(-self.rotation)
            sin_r = math.sin(-self.rotation)
            dx, dy = dx * cos_r - dy * sin_r, dx * sin_r + dy * cos_r
        return (
            dx / self.resolution + self.size[0] / 2.0,
            -dy / self.resolution + self.size[1] / 2.0,
        )

    def get_coordinate_from_pixel(self, pixel: Sequence[float]) -> Point2D:
        dx = (float(pixel[0]) - self.size[0] / 2.0) * self.resolution
        dy = -(float(pixel[1]) - self.size[1] / 2.0) * self.resolution
        if self.rotation:
            cos_r = math.cos(self.rotation)
            sin_r = math.sin(self.rotation)
            dx, dy = dx * cos_r - dy * sin_r, dx * sin_r + dy * cos_r
        return (dx + self.center[0], dy + self.center[1])


__all__ = ["Pixel", "Viewport"]
