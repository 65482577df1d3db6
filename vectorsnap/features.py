"""Features and the two feature-bearing collaborators a snap can watch."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from .events import Event, Observable
from .geometry import Geometry

_UID_COUNTER = itertools.count(1)

FeatureId = Union[str, int]


class CollectionEventType:
    ADD = "add"
    REMOVE = "remove"


class VectorEventType:
    ADDFEATURE = "addfeature"
    REMOVEFEATURE = "removefeature"
    CLEAR = "clear"


class Feature(Observable):
    """A geometry with a stable ``uid`` and free-form properties.

    Assigning ``geometry`` fires ``change``; call :meth:`changed` after
    mutating the current geometry in place.
    """

    def __init__(
        self,
        geometry: Optional[Geometry] = None,
        properties: Optional[Dict[str, Any]] = None,
        id: Optional[FeatureId] = None,
    ) -> None:
        super().__init__()
        self.uid: int = next(_UID_COUNTER)
        self.id = id
        self.properties: Dict[str, Any] = dict(properties or {})
        self._geometry = geometry

    @property
    def geometry(self) -> Optional[Geometry]:
        return self._geometry

    @geometry.setter
    def geometry(self, value: Optional[Geometry]) -> None:
        self._geometry = value
        self.changed()

    def get_geometry(self) -> Optional[Geometry]:
        return self._geometry

    def set_geometry(self, value: Optional[Geometry]) -> None:
        self.geometry = value

    def changed(self) -> None:
        self.dispatch_event(Event("change", self))

    def __repr__(self) -> str:
        kind = self._geometry.get_type() if self._geometry is not None else None
        return f"Feature(uid={self.uid}, id={self.id!r}, geometry={kind})"


@dataclass
class CollectionEvent(Event):
    element: Optional[Feature] = None
    index: int = -1


@dataclass
class VectorSourceEvent(Event):
    feature: Optional[Feature] = None


class FeatureCollection(Observable):
    """Ordered, list-like container of features firing ``add``/``remove``."""

    def __init__(self, features: Optional[Iterable[Feature]] = None) -> None:
        super().__init__()
        self._array: List[Feature] = []
        if features is not None:
            self.extend(features)

    def push(self, feature: Feature) -> int:
        self._array.append(feature)
        index = len(self._array) - 1
        self.dispatch_event(CollectionEvent(CollectionEventType.ADD, self, feature, index))
        return len(self._array)

    def extend(self, features: Iterable[Feature]) -> "FeatureCollection":
        for feature in features:
            self.push(feature)
        return self

    def remove(self, feature: Feature) -> Optional[Feature]:
        for index, existing in enumerate(self._array):
            if existing is feature:
                return self.remove_at(index)
        return None

    def remove_at(self, index: int) -> Feature:
        feature = self._array.pop(index)
        self.dispatch_event(CollectionEvent(CollectionEventType.REMOVE, self, feature, index))
        return feature

    def clear(self) -> None:
        while self._array:
            self.remove_at(len(self._array) - 1)

    def get_array(self) -> List[Feature]:
        return list(self._array)

    def __iter__(self) -> Iterator[Feature]:
        return iter(list(self._array))

    def __len__(self) -> int:
        return len(self._array)

    def __contains__(self, feature: object) -> bool:
        return any(existing is feature for existing in self._array)


class VectorSource(Observable):
    """Unordered feature store firing ``addfeature``/``removefeature``."""

    def __init__(self, features: Optional[Iterable[Feature]] = None) -> None:
        super().__init__()
        self._features: Dict[int, Feature] = {}
        if features is not None:
            self.add_features(features)

    def add_feature(self, feature: Feature) -> None:
        if feature.uid in self._features:
            return
        self._features[feature.uid] = feature
        self.dispatch_event(VectorSourceEvent(VectorEventType.ADDFEATURE, self, feature))

    def add_features(self, features: Iterable[Feature]) -> None:
        for feature in features:
            self.add_feature(feature)

    def remove_feature(self, feature: Feature) -> None:
        if self._features.pop(feature.uid, None) is None:
            return
        self.dispatch_event(VectorSourceEvent(VectorEventType.REMOVEFEATURE, self, feature))

    def clear(self) -> None:
        for feature in list(self._features.values()):
            self.remove_feature(feature)
        self.dispatch_event(VectorSourceEvent(VectorEventType.CLEAR, self))

    def get_features(self) -> List[Feature]:
        return list(self._features.values())

    def get_feature_by_id(self, feature_id: FeatureId) -> Optional[Feature]:
        for feature in self._features.values():
            if feature.id == feature_id:
                return feature
        return None

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.get_features())


def feature_from_event(event: Event) -> Optional[Feature]:
    """Return the feature carried by a collection or source event."""

    if isinstance(event, VectorSourceEvent):
        return event.feature
    if isinstance(event, CollectionEvent):
        return event.element
    return None


__all__ = [
    "CollectionEvent",
    "CollectionEventType",
    "Feature",
    "FeatureCollection",
    "FeatureId",
    "VectorEventType",
    "VectorSource",
    "VectorSourceEvent",
    "feature_from_event",
]
