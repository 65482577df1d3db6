"""The search projection shared by indexing and querying.

Features and pointer coordinates live in the display (user) projection. When
the view's own projection differs, distances are compared in the view
projection instead; ``SearchProjection`` bundles the two conversions so a
query resolves them once and uses the same pair for every pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, Tuple

from .geometry import Geometry

Point2D = Tuple[float, float]
Transform = Callable[[Sequence[float]], Sequence[float]]


def _identity(coord: Sequence[float]) -> Sequence[float]:
    return coord


@dataclass(frozen=True)
class SearchProjection:
    """``forward`` maps user coordinates to search coordinates, ``inverse`` maps back."""

    forward: Transform = _identity
    inverse: Transform = _identity
    name: str = "identity"

    @classmethod
    def identity(cls) -> "SearchProjection":
        return cls()

    @classmethod
    def scaled(cls, factor: float, name: str = "scaled") -> "SearchProjection":
        if factor == 0.0:
            raise ValueError("scale factor must be non-zero")
        return cls(
            forward=lambda c: (c[0] * factor, c[1] * factor),
            inverse=lambda c: (c[0] / factor, c[1] / factor),
            name=name,
        )

    @property
    def is_identity(self) -> bool:
        return self.forward is _identity and self.inverse is _identity

    def to_search(self, coord: Sequence[float]) -> Point2D:
        if self.is_identity:
            return (float(coord[0]), float(coord[1]))
        out = self.forward(coord[:2])
        return (float(out[0]), float(out[1]))

    def from_search(self, coord: Sequence[float]) -> Point2D:
        if self.is_identity:
            return (float(coord[0]), float(coord[1]))
        out = self.inverse(coord[:2])
        return (float(out[0]), float(out[1]))

    def transform_geometry(self, geometry: Geometry) -> Geometry:
        if self.is_identity:
            return geometry
        return geometry.transform(self.forward)

    def restore_geometry(self, geometry: Geometry) -> Geometry:
        if self.is_identity:
            return geometry
        return geometry.transform(self.inverse)


__all__ = ["SearchProjection", "Transform"]
