from vectorsnap.extent import EMPTY_EXTENT
from vectorsnap.features import Feature
from vectorsnap.geometry import Circle, LineString, Point
from vectorsnap.registry import DeferredUpdateQueue, FeatureRegistry

EVERYWHERE = (-1e9, -1e9, 1e9, 1e9)


def _line(*coords):
    return Feature(LineString(list(coords)))


def test_add_feature_indexes_every_segment_and_subscribes():
    registry = FeatureRegistry()
    feature = _line((0, 0), (10, 0), (10, 10))

    registry.add_feature(feature)

    assert registry.is_indexed(feature)
    assert len(registry.index) == 2
    assert registry.get_extent(feature) == (0.0, 0.0, 10.0, 10.0)
    assert feature.listener_count("change") == 1
    assert registry.subscription_count == 1


def test_add_feature_without_listening():
    registry = FeatureRegistry()
    feature = Feature(Point((1, 1)))

    registry.add_feature(feature, listen=False)

    assert len(registry.index) == 1
    assert feature.listener_count() == 0


def test_adding_twice_does_not_duplicate_entries_or_listeners():
    registry = FeatureRegistry()
    feature = _line((0, 0), (1, 1))

    registry.add_feature(feature)
    registry.add_feature(feature)

    assert len(registry.index) == 1
    assert feature.listener_count("change") == 1


def test_feature_without_geometry_gets_empty_ledger_entry():
    registry = FeatureRegistry()
    feature = Feature()

    registry.add_feature(feature)

    assert registry.get_extent(feature) == EMPTY_EXTENT
    assert len(registry.index) == 0
    assert registry.remove_feature(feature) == []
    assert not registry.is_indexed(feature)


def test_remove_feature_drops_entries_ledger_and_listener():
    registry = FeatureRegistry()
    kept = _line((0, 0), (5, 0))
    removed = _line((0, 0), (5, 0), (5, 5))
    registry.add_feature(kept)
    registry.add_feature(removed)

    entries = registry.remove_feature(removed)

    assert len(entries) == 2
    assert all(data.feature is removed for data in entries)
    assert registry.get_extent(removed) is None
    assert removed.listener_count() == 0
    assert [data.feature for data in registry.index.get_all()] == [kept]


def test_remove_unknown_feature_is_noop():
    registry = FeatureRegistry()
    registry.add_feature(_line((0, 0), (1, 0)))

    assert registry.remove_feature(_line((0, 0), (1, 0))) == []
    assert len(registry.index) == 1


def test_geometry_change_reindexes_using_previous_extent():
    registry = FeatureRegistry()
    feature = _line((0, 0), (1, 0))
    registry.add_feature(feature)

    feature.geometry = LineString([(100, 100), (101, 100), (102, 100)])

    assert registry.index.get_in_extent((0, 0, 1, 0)) == []
    assert len(registry.index) == 2
    assert registry.get_extent(feature) == (100.0, 100.0, 102.0, 100.0)
    assert feature.listener_count("change") == 1


def test_change_handler_replaces_immediate_update():
    seen = []
    registry = FeatureRegistry(on_change=seen.append)
    feature = _line((0, 0), (1, 0))
    registry.add_feature(feature)

    feature.geometry = Point((50, 50))

    assert seen == [feature]
    assert registry.get_extent(feature) == (0.0, 0.0, 1.0, 0.0)


def test_circle_ledger_covers_outline():
    registry = FeatureRegistry(circle_sides=8)
    feature = Feature(Circle((0, 0), 5))

    registry.add_feature(feature)

    assert len(registry.entries_for(feature)) == 8
    assert registry.get_extent(feature) == (-5.0, -5.0, 5.0, 5.0)


def test_clear_releases_everything():
    registry = FeatureRegistry()
    features = [_line((i, 0), (i, 1)) for i in range(5)]
    for feature in features:
        registry.add_feature(feature)

    registry.clear()

    assert registry.feature_count == 0
    assert registry.subscription_count == 0
    assert registry.index.is_empty()
    assert all(feature.listener_count() == 0 for feature in features)


def test_deferred_queue_batches_changes_until_flush():
    registry = FeatureRegistry()
    queue = DeferredUpdateQueue(registry)
    registry.set_change_handler(queue.handle_feature_change)
    feature = _line((0, 0), (1, 0))
    registry.add_feature(feature)

    queue.begin()
    feature.geometry = LineString([(20, 20), (21, 20)])
    feature.geometry = LineString([(30, 30), (31, 30)])

    assert len(queue) == 1
    assert feature in queue
    assert registry.get_extent(feature) == (0.0, 0.0, 1.0, 0.0)

    assert queue.flush() == 1
    assert not queue.active
    assert len(queue) == 0
    assert registry.get_extent(feature) == (30.0, 30.0, 31.0, 30.0)
    assert len(registry.index.get_in_extent(EVERYWHERE)) == 1


def test_deferred_queue_updates_immediately_when_inactive():
    registry = FeatureRegistry()
    queue = DeferredUpdateQueue(registry)
    registry.set_change_handler(queue.handle_feature_change)
    feature = _line((0, 0), (1, 0))
    registry.add_feature(feature)

    feature.geometry = Point((7, 7))

    assert len(queue) == 0
    assert registry.get_extent(feature) == (7.0, 7.0, 7.0, 7.0)


def test_discarded_feature_is_not_reindexed_on_flush():
    registry = FeatureRegistry()
    queue = DeferredUpdateQueue(registry)
    registry.set_change_handler(queue.handle_feature_change)
    feature = _line((0, 0), (1, 0))
    registry.add_feature(feature)

    queue.begin()
    feature.geometry = Point((3, 3))
    registry.remove_feature(feature)
    queue.discard(feature)

    assert queue.flush() == 0
    assert not registry.is_indexed(feature)
    assert registry.index.is_empty()
