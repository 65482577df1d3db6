from .coordinate import closest_on_circle, closest_on_segment, squared_distance
from .events import Event, EventsKey, Observable, unlisten_by_key
from .extent import Extent, bounding_extent, create_empty, intersects, is_empty
from .features import (
    CollectionEvent,
    Feature,
    FeatureCollection,
    VectorSource,
    VectorSourceEvent,
)
from .geojson import GeoJSONError, load_features, read_features, read_geometry, write_geometry
from .geometry import (
    Circle,
    Geometry,
    GeometryCollection,
    GeometryType,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    circle_to_polygon,
)
from .options import (
    SnapConfigurationError,
    SnapDefaults,
    SnapOptions,
    SnapTarget,
    TargetKind,
    get_snap_defaults,
    set_snap_defaults,
)
from .proj import SearchProjection
from .query import SnapQueryEngine, SnapResult
from .rbush import RBush, SpatialIndex
from .registry import DeferredUpdateQueue, FeatureRegistry, SegmentData
from .segmenter import Segment, segment
from .snap import MapPointerEvent, PointerEventType, Snap, SnapStateError
from .viewport import Viewport

__all__ = [
    'Circle',
    'CollectionEvent',
    'DeferredUpdateQueue',
    'Event',
    'EventsKey',
    'Extent',
    'Feature',
    'FeatureCollection',
    'FeatureRegistry',
    'GeoJSONError',
    'Geometry',
    'GeometryCollection',
    'GeometryType',
    'LineString',
    'LinearRing',
    'MapPointerEvent',
    'MultiLineString',
    'MultiPoint',
    'MultiPolygon',
    'Observable',
    'Point',
    'PointerEventType',
    'Polygon',
    'RBush',
    'SearchProjection',
    'Segment',
    'SegmentData',
    'Snap',
    'SnapConfigurationError',
    'SnapDefaults',
    'SnapOptions',
    'SnapQueryEngine',
    'SnapResult',
    'SnapStateError',
    'SnapTarget',
    'SpatialIndex',
    'TargetKind',
    'VectorSource',
    'VectorSourceEvent',
    'Viewport',
    'bounding_extent',
    'circle_to_polygon',
    'closest_on_circle',
    'closest_on_segment',
    'create_empty',
    'get_snap_defaults',
    'intersects',
    'is_empty',
    'load_features',
    'read_features',
    'read_geometry',
    'segment',
    'set_snap_defaults',
    'squared_distance',
    'unlisten_by_key',
    'write_geometry',
]
