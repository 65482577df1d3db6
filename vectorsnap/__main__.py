import argparse
import json
import logging
import math
import sys
from typing import Optional, Sequence

from vectorsnap import (
    GeoJSONError,
    Snap,
    SnapOptions,
    VectorSource,
    Viewport,
    load_features,
)

logger = logging.getLogger(__name__)


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from None
    if not math.isfinite(value) or value <= 0.0:
        raise argparse.ArgumentTypeError(f"must be a positive number, got {text!r}")
    return value


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Snap a coordinate to the nearest vertex or edge of GeoJSON features")
    parser.add_argument("path", help="Path to a GeoJSON FeatureCollection, Feature or geometry")
    parser.add_argument("--x", type=float, required=True, help="Query x coordinate")
    parser.add_argument("--y", type=float, required=True, help="Query y coordinate")
    parser.add_argument(
        "--tolerance",
        type=_positive_float,
        default=10.0,
        help="Pixel tolerance (default: 10)",
    )
    parser.add_argument(
        "--resolution",
        type=_positive_float,
        default=1.0,
        help="Map units per pixel of the simulated view (default: 1)",
    )
    parser.add_argument("--no-vertex", action="store_true", help="Disable vertex snapping")
    parser.add_argument("--no-edge", action="store_true", help="Disable edge snapping")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        features = load_features(args.path)
    except (OSError, GeoJSONError) as exc:
        logger.error("Cannot load features: %s", exc)
        return 1

    source = VectorSource(features)
    snap = Snap(
        SnapOptions(
            source=source,
            vertex=not args.no_vertex,
            edge=not args.no_edge,
            pixel_tolerance=args.tolerance,
        )
    )
    viewport = Viewport(center=(args.x, args.y), resolution=args.resolution)
    snap.attach(viewport)

    coordinate = (args.x, args.y)
    pixel = viewport.get_pixel_from_coordinate(coordinate)
    logger.info("Querying %d feature(s) at %s (pixel %s)", len(source), coordinate, pixel)
    result = snap.snap_to(pixel, coordinate)
    snap.detach()

    if args.json:
        payload = None
        if result is not None:
            payload = {
                "vertex": list(result.vertex),
                "vertex_pixel": list(result.vertex_pixel),
                "kind": result.kind,
            }
        print(json.dumps(payload))
    elif result is None:
        print("no snap")
    else:
        x, y = result.vertex
        print(f"{result.kind}: ({x:.6f}, {y:.6f}) pixel={result.vertex_pixel}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
