"""Snap configuration and process-wide defaults."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .features import Feature, FeatureCollection, VectorSource


class SnapConfigurationError(ValueError):
    pass


@dataclass
class SnapDefaults:
    vertex: bool = True
    edge: bool = True
    pixel_tolerance: float = 10.0
    circle_sides: int = 32


_SNAP_DEFAULTS = SnapDefaults()


def get_snap_defaults() -> SnapDefaults:
    return copy.deepcopy(_SNAP_DEFAULTS)


def set_snap_defaults(defaults: SnapDefaults) -> None:
    global _SNAP_DEFAULTS
    _SNAP_DEFAULTS = copy.deepcopy(defaults)


class TargetKind(str, Enum):
    COLLECTION = "collection"
    SOURCE = "source"


@dataclass(frozen=True)
class SnapTarget:
    """The single feature-bearing collaborator a snap watches."""

    kind: TargetKind
    collaborator: Union[FeatureCollection, VectorSource]

    def get_features(self) -> List[Feature]:
        if self.kind is TargetKind.COLLECTION:
            return self.collaborator.get_array()  # type: ignore[union-attr]
        return self.collaborator.get_features()  # type: ignore[union-attr]

    @property
    def add_event(self) -> str:
        return "add" if self.kind is TargetKind.COLLECTION else "addfeature"

    @property
    def remove_event(self) -> str:
        return "remove" if self.kind is TargetKind.COLLECTION else "removefeature"


def _default(attr: str):
    return field(default_factory=lambda: getattr(_SNAP_DEFAULTS, attr))


@dataclass
class SnapOptions:
    """Options for :class:`vectorsnap.snap.Snap`.

    Exactly one of ``features`` and ``source`` must be given.
    """

    features: Optional[FeatureCollection] = None
    source: Optional[VectorSource] = None
    vertex: bool = _default("vertex")
    edge: bool = _default("edge")
    pixel_tolerance: float = _default("pixel_tolerance")
    circle_sides: int = _default("circle_sides")

    def __post_init__(self) -> None:
        if self.features is not None and self.source is not None:
            raise SnapConfigurationError('options "features" and "source" are mutually exclusive')
        if self.features is None and self.source is None:
            raise SnapConfigurationError('one of options "features" or "source" is required')
        if self.features is not None and not isinstance(self.features, FeatureCollection):
            raise SnapConfigurationError('option "features" must be a FeatureCollection')
        if self.source is not None and not isinstance(self.source, VectorSource):
            raise SnapConfigurationError('option "source" must be a VectorSource')
        try:
            tolerance = float(self.pixel_tolerance)
        except (TypeError, ValueError) as exc:
            raise SnapConfigurationError('option "pixel_tolerance" must be a number') from exc
        if not math.isfinite(tolerance) or tolerance <= 0.0:
            raise SnapConfigurationError('option "pixel_tolerance" must be a positive finite number')
        self.pixel_tolerance = tolerance
        if not isinstance(self.circle_sides, int) or self.circle_sides < 3:
            raise SnapConfigurationError('option "circle_sides" must be an integer >= 3')

    @property
    def target(self) -> SnapTarget:
        if self.features is not None:
            return SnapTarget(TargetKind.COLLECTION, self.features)
        return SnapTarget(TargetKind.SOURCE, self.source)  # type: ignore[arg-type]


__all__ = [
    "SnapConfigurationError",
    "SnapDefaults",
    "SnapOptions",
    "SnapTarget",
    "TargetKind",
    "get_snap_defaults",
    "set_snap_defaults",
]
