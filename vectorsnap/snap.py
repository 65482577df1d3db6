"""Snap interaction: keeps a segment index of watched features and snaps pointer events to it.

Add the snap ahead of any editing interaction that reads the event
coordinate; it rewrites ``coordinate`` and ``pixel`` of pointer events in
place when a vertex or edge lies within ``pixel_tolerance`` pixels.

Example::

    source = VectorSource([Feature(LineString([(0, 0), (10, 0)]))])
    snap = Snap(SnapOptions(source=source))
    snap.attach(viewport)
    result = snap.snap_to(pixel, coordinate, viewport)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .events import Event, EventsKey, unlisten_by_key
from .features import Feature, feature_from_event
from .options import SnapOptions
from .proj import SearchProjection
from .query import SnapQueryEngine, SnapResult, ViewportLike
from .rbush import SpatialIndex
from .registry import DeferredUpdateQueue, FeatureRegistry, SegmentData

logger = logging.getLogger(__name__)


class SnapStateError(RuntimeError):
    pass


class PointerEventType:
    POINTERDOWN = "pointerdown"
    POINTERDRAG = "pointerdrag"
    POINTERMOVE = "pointermove"
    POINTERUP = "pointerup"


@dataclass
class MapPointerEvent:
    type: str
    pixel: Tuple[float, float]
    coordinate: Tuple[float, float]
    viewport: Optional[ViewportLike] = None


class Snap:
    def __init__(self, options: SnapOptions) -> None:
        self.options = options
        self._target = options.target
        self._viewport: Optional[ViewportLike] = None
        self._target_keys: List[EventsKey] = []

        self.index: SpatialIndex[SegmentData] = SpatialIndex()
        self.registry = FeatureRegistry(
            self.index,
            projection_provider=self._search_projection,
            circle_sides=options.circle_sides,
        )
        self.pending = DeferredUpdateQueue(self.registry)
        self.registry.set_change_handler(self.pending.handle_feature_change)
        self.engine = SnapQueryEngine(
            self.index,
            vertex=options.vertex,
            edge=options.edge,
            pixel_tolerance=options.pixel_tolerance,
        )

    def _search_projection(self) -> SearchProjection:
        if self._viewport is None:
            return SearchProjection.identity()
        return getattr(self._viewport, "search_projection", None) or SearchProjection.identity()

    @property
    def viewport(self) -> Optional[ViewportLike]:
        return self._viewport

    @property
    def handling_down_up_sequence(self) -> bool:
        return self.pending.active

    # Feature registration

    def add_feature(self, feature: Feature, listen: bool = True) -> None:
        """Add ``feature`` to the set of features that may be snapped to."""
        self.registry.add_feature(feature, listen)

    def remove_feature(self, feature: Feature, unlisten: bool = True) -> None:
        """Stop snapping to ``feature``."""
        self.registry.remove_feature(feature, unlisten)
        self.pending.discard(feature)

    def _handle_feature_add(self, event: Event) -> None:
        feature = feature_from_event(event)
        if feature is not None:
            self.add_feature(feature)

    def _handle_feature_remove(self, event: Event) -> None:
        feature = feature_from_event(event)
        if feature is not None:
            self.remove_feature(feature)

    # Host lifecycle

    def attach(self, viewport: ViewportLike) -> None:
        """Start watching the configured collaborator and index its features."""

        if self._viewport is viewport:
            return
        if self._viewport is not None:
            raise SnapStateError("snap is already attached to another viewport; detach it first")

        self._viewport = viewport
        target = self._target
        self._target_keys = [
            target.collaborator.on(target.add_event, self._handle_feature_add),
            target.collaborator.on(target.remove_event, self._handle_feature_remove),
        ]
        features = target.get_features()
        for feature in features:
            self.add_feature(feature)
        logger.info("Snap attached (%s) with %d feature(s)", target.kind.value, len(features))

    def detach(self) -> None:
        """Release every subscription and clear all indexed state."""

        if self._viewport is None:
            return
        for key in self._target_keys:
            unlisten_by_key(key)
        self._target_keys = []
        self.registry.clear()
        self.pending.clear()
        self._viewport = None
        logger.info("Snap detached")

    def begin_gesture(self) -> None:
        self.pending.begin()

    def end_gesture(self) -> int:
        return self.pending.flush()

    # Pointer handling

    def snap_to(
        self,
        pixel: Sequence[float],
        coordinate: Sequence[float],
        viewport: Optional[ViewportLike] = None,
    ) -> Optional[SnapResult]:
        viewport = viewport if viewport is not None else self._viewport
        if viewport is None:
            return None
        return self.engine.query(pixel, coordinate, viewport)

    def handle_down_event(self, event: MapPointerEvent) -> bool:
        self.begin_gesture()
        return True

    def handle_up_event(self, event: MapPointerEvent) -> bool:
        self.end_gesture()
        return False

    def handle_event(self, event: MapPointerEvent) -> bool:
        """Snap ``event`` in place and track the gesture; always lets it propagate."""

        result = self.snap_to(event.pixel, event.coordinate, event.viewport)
        if result is not None:
            event.coordinate = result.vertex
            event.pixel = result.vertex_pixel

        if event.type == PointerEventType.POINTERDOWN:
            self.handle_down_event(event)
        elif event.type == PointerEventType.POINTERUP and self.handling_down_up_sequence:
            self.handle_up_event(event)
        return True

    # Diagnostics

    @property
    def indexed_feature_count(self) -> int:
        return self.registry.feature_count

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    @property
    def subscription_count(self) -> int:
        return self.registry.subscription_count + len(self._target_keys)


__all__ = ["MapPointerEvent", "PointerEventType", "Snap", "SnapStateError"]
