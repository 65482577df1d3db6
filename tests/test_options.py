import math

import pytest

from vectorsnap import (
    FeatureCollection,
    SnapConfigurationError,
    SnapDefaults,
    SnapOptions,
    TargetKind,
    VectorSource,
    get_snap_defaults,
    set_snap_defaults,
)


def test_defaults():
    options = SnapOptions(source=VectorSource())
    assert options.vertex is True
    assert options.edge is True
    assert options.pixel_tolerance == 10.0
    assert options.circle_sides == 32


def test_target_reflects_configured_collaborator():
    features = FeatureCollection()
    source = VectorSource()

    assert SnapOptions(features=features).target.kind is TargetKind.COLLECTION
    assert SnapOptions(features=features).target.collaborator is features
    assert SnapOptions(source=source).target.kind is TargetKind.SOURCE
    assert SnapOptions(source=source).target.add_event == "addfeature"
    assert SnapOptions(features=features).target.remove_event == "remove"


def test_both_collaborators_are_rejected():
    with pytest.raises(SnapConfigurationError, match="mutually exclusive"):
        SnapOptions(features=FeatureCollection(), source=VectorSource())


def test_missing_collaborator_is_rejected():
    with pytest.raises(SnapConfigurationError, match="required"):
        SnapOptions()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"features": []},
        {"source": FeatureCollection()},
        {"source": VectorSource(), "pixel_tolerance": 0},
        {"source": VectorSource(), "pixel_tolerance": -1.5},
        {"source": VectorSource(), "pixel_tolerance": math.nan},
        {"source": VectorSource(), "pixel_tolerance": "wide"},
        {"source": VectorSource(), "circle_sides": 2},
        {"source": VectorSource(), "circle_sides": 12.5},
    ],
)
def test_invalid_options(kwargs):
    with pytest.raises(SnapConfigurationError):
        SnapOptions(**kwargs)


def test_configuration_error_is_a_value_error():
    assert issubclass(SnapConfigurationError, ValueError)


def test_integer_tolerance_is_coerced():
    assert SnapOptions(source=VectorSource(), pixel_tolerance=4).pixel_tolerance == 4.0


def test_snap_defaults_apply_to_new_options():
    original = get_snap_defaults()
    try:
        set_snap_defaults(SnapDefaults(edge=False, pixel_tolerance=5.0))
        options = SnapOptions(source=VectorSource())
        assert options.edge is False
        assert options.pixel_tolerance == 5.0
        assert SnapOptions(source=VectorSource(), edge=True).edge is True
    finally:
        set_snap_defaults(original)

    assert SnapOptions(source=VectorSource()).pixel_tolerance == 10.0


def test_get_snap_defaults_returns_copy():
    defaults = get_snap_defaults()
    defaults.pixel_tolerance = 99.0
    assert get_snap_defaults().pixel_tolerance == 10.0
