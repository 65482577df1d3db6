"""Book-keeping between features and the spatial index.

``FeatureRegistry`` owns the extent ledger and the per-feature change
subscriptions and keeps the index entries of every feature in step with its
current geometry. ``DeferredUpdateQueue`` batches change notifications that
arrive during a pointer gesture and replays them when the gesture ends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .events import Event, EventsKey, unlisten_by_key
from .extent import EMPTY_EXTENT, Extent, extend
from .features import Feature
from .logging_utils import debug_log_call
from .proj import SearchProjection
from .rbush import SpatialIndex
from .segmenter import DEFAULT_CIRCLE_SIDES, Segment, segment

logger = logging.getLogger(__name__)

ProjectionProvider = Callable[[], SearchProjection]
ChangeHandler = Callable[[Feature], None]


@dataclass(eq=False)
class SegmentData:
    """Index payload: the owning feature and one of its segments."""

    feature: Feature
    segment: Segment

    @property
    def coordinates(self):
        return self.segment.coordinates

    @property
    def circle(self):
        return self.segment.circle


class FeatureRegistry:
    def __init__(
        self,
        index: Optional[SpatialIndex[SegmentData]] = None,
        *,
        on_change: Optional[ChangeHandler] = None,
        projection_provider: Optional[ProjectionProvider] = None,
        circle_sides: int = DEFAULT_CIRCLE_SIDES,
    ) -> None:
        self.index: SpatialIndex[SegmentData] = index if index is not None else SpatialIndex()
        self._on_change = on_change
        self._projection_provider = projection_provider or SearchProjection.identity
        self._circle_sides = circle_sides
        self._extents: Dict[int, Extent] = {}
        self._listener_keys: Dict[int, EventsKey] = {}
        self._features: Dict[int, Feature] = {}

    def set_change_handler(self, handler: Optional[ChangeHandler]) -> None:
        self._on_change = handler

    def _handle_change(self, event: Event) -> None:
        feature = event.target
        if self._on_change is not None:
            self._on_change(feature)
        else:
            self.update_feature(feature)

    @debug_log_call(logger, name="FeatureRegistry.add_feature", log_result=False, method=True)
    def add_feature(self, feature: Feature, listen: bool = True) -> None:
        """Index ``feature``'s segments and, if ``listen``, watch it for changes."""

        uid = feature.uid
        if uid in self._extents:
            self.remove_feature(feature, unlisten=False)
        geometry = feature.get_geometry()
        pieces = segment(geometry, self._projection_provider(), self._circle_sides)

        ledger = geometry.extent() if geometry is not None else EMPTY_EXTENT
        extents = [piece.extent() for piece in pieces]
        for piece_extent in extents:
            ledger = extend(ledger, piece_extent)

        payloads = [SegmentData(feature, piece) for piece in pieces]
        if len(payloads) == 1:
            self.index.insert(extents[0], payloads[0])
        elif payloads:
            self.index.load(extents, payloads)

        self._extents[uid] = ledger
        self._features[uid] = feature
        logger.debug("Indexed feature uid=%s with %d segment(s)", uid, len(payloads))

        if listen:
            previous = self._listener_keys.pop(uid, None)
            if previous is not None:
                unlisten_by_key(previous)
            self._listener_keys[uid] = feature.on("change", self._handle_change)

    @debug_log_call(logger, name="FeatureRegistry.remove_feature", log_result=False, method=True)
    def remove_feature(self, feature: Feature, unlisten: bool = True) -> List[SegmentData]:
        """Drop every index entry of ``feature``; unknown features are a no-op."""

        uid = feature.uid
        removed: List[SegmentData] = []
        extent = self._extents.pop(uid, None)
        if extent is not None:
            removed = self.index.remove_where(extent, lambda data: data.feature is feature)
            self._features.pop(uid, None)
            logger.debug("Removed %d segment(s) of feature uid=%s", len(removed), uid)

        if unlisten:
            key = self._listener_keys.pop(uid, None)
            if key is not None:
                unlisten_by_key(key)
        return removed

    def update_feature(self, feature: Feature) -> None:
        self.remove_feature(feature, False)
        self.add_feature(feature, False)

    def clear(self) -> None:
        """Remove every registered feature and release all subscriptions."""

        for feature in list(self._features.values()):
            self.remove_feature(feature)
        for key in list(self._listener_keys.values()):
            unlisten_by_key(key)
        self._listener_keys.clear()
        self._extents.clear()
        self._features.clear()
        self.index.clear()

    def is_indexed(self, feature: Feature) -> bool:
        return feature.uid in self._extents

    def get_extent(self, feature: Feature) -> Optional[Extent]:
        return self._extents.get(feature.uid)

    def entries_for(self, feature: Feature) -> List[SegmentData]:
        extent = self._extents.get(feature.uid)
        if extent is None:
            return []
        return [data for data in self.index.get_in_extent(extent) if data.feature is feature]

    @property
    def feature_count(self) -> int:
        return len(self._extents)

    @property
    def subscription_count(self) -> int:
        return len(self._listener_keys)


class DeferredUpdateQueue:
    """Hold feature changes while a gesture is active; apply them on flush."""

    def __init__(self, registry: FeatureRegistry) -> None:
        self._registry = registry
        self._pending: Dict[int, Feature] = {}
        self.active = False

    def handle_feature_change(self, feature: Feature) -> None:
        if self.active:
            self._pending.setdefault(feature.uid, feature)
        else:
            self._registry.update_feature(feature)

    def begin(self) -> None:
        self.active = True

    def flush(self) -> int:
        """Re-index pending features, end the gesture and return how many were updated."""

        pending = list(self._pending.values())
        self._pending = {}
        self.active = False
        for feature in pending:
            self._registry.update_feature(feature)
        if pending:
            logger.info("Flushed %d pending feature update(s)", len(pending))
        return len(pending)

    def discard(self, feature: Feature) -> None:
        self._pending.pop(feature.uid, None)

    def clear(self) -> None:
        self._pending = {}
        self.active = False

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, feature: object) -> bool:
        return isinstance(feature, Feature) and feature.uid in self._pending


__all__ = [
    "ChangeHandler",
    "DeferredUpdateQueue",
    "FeatureRegistry",
    "ProjectionProvider",
    "SegmentData",
]
