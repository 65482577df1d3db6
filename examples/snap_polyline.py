"""Example pipeline: index a few features and snap a pointer trace to them."""

from vectorsnap import (
    Circle,
    Feature,
    FeatureCollection,
    LineString,
    MapPointerEvent,
    Snap,
    SnapOptions,
    Viewport,
)

TRACE = [
    ("pointermove", (0.3, 0.2)),
    ("pointermove", (4.8, 0.6)),
    ("pointerdown", (10.2, 0.1)),
    ("pointerdrag", (21.9, 5.0)),
    ("pointerup", (30.0, 30.0)),
]


def main() -> None:
    features = FeatureCollection(
        [
            Feature(LineString([(0, 0), (10, 0), (10, 10)]), id="fence"),
            Feature(Circle((25, 5), 3), id="pond"),
        ]
    )
    viewport = Viewport(center=(10.0, 5.0), resolution=0.25, size=(400, 300))
    snap = Snap(SnapOptions(features=features, pixel_tolerance=6))
    snap.attach(viewport)

    for kind, coordinate in TRACE:
        event = MapPointerEvent(kind, viewport.get_pixel_from_coordinate(coordinate), coordinate)
        snap.handle_event(event)
        x, y = event.coordinate
        print(f"{kind:12s} {coordinate} -> ({x:.6f}, {y:.6f}) pixel={event.pixel}")

    snap.detach()


if __name__ == "__main__":
    main()
