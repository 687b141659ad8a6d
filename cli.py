#!/usr/bin/env python
"""
Command-line interface for Church Orientation Explorer

Usage:
    python cli.py city --name Milano --csv out/milano.csv --geojson out/milano.geojson
    python cli.py bbox --south 45.45 --west 9.17 --north 45.48 --east 9.21 --summary
    python cli.py osm-file --input overpass.json --mode pca
    python cli.py import --input churches.geojson --summary
    python cli.py visualize --input churches.geojson --output churches.png
"""

import os
import sys
import json
import argparse
import dataclasses

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from church_orientation.config import get_config, validate_config
from church_orientation.pipeline import OrientationPipeline
from church_orientation.analysis import GeometryUtils, OrientationMode


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_pipeline(args) -> OrientationPipeline:
    """Apply CLI overrides to the global config and create the pipeline"""
    overrides = {}
    if getattr(args, "mode", None):
        overrides["orientation_mode"] = args.mode
    if getattr(args, "bin_width", None):
        overrides["histogram_bin_width_deg"] = args.bin_width
    config = dataclasses.replace(get_config(), **overrides)
    validate_config(config)
    return OrientationPipeline(config=config)


def finish(pipeline: OrientationPipeline, args) -> int:
    """Report status, write requested exports, optionally print a summary"""
    status = pipeline.session.status
    if status.level == "error":
        logger.error(status.message)
        return 1

    logger.info(f"✓ {status.message}")

    if pipeline.session.has_rows:
        if args.csv:
            pipeline.export_csv(args.csv)
        if args.geojson:
            pipeline.export_geojson(args.geojson)
    elif args.csv or args.geojson:
        logger.warning("No buildings found, nothing exported")

    if args.summary:
        rows = pipeline.session.rows
        summary = {
            "status": status.message,
            "count": len(rows),
            "mode": pipeline.reconciler.mode.value,
            "with_entrance": sum(1 for r in rows if r.entrance_deg is not None),
            "mean_deviation_deg": round(sum(r.deviation_deg for r in rows) / len(rows), 1) if rows else None,
            "histogram": [
                {"start_deg": b.start_deg, "end_deg": b.end_deg, "count": b.count}
                for b in pipeline.histogram() if b.count
            ],
        }
        print(json.dumps(summary, indent=2, ensure_ascii=False))

    return 0


def cmd_city(args):
    """Geocode a place name and analyse its churches"""
    setup_logging(args.verbose)
    pipeline = build_pipeline(args)
    pipeline.search_city(args.name)
    return finish(pipeline, args)


def cmd_bbox(args):
    """Analyse churches inside an explicit bounding box"""
    setup_logging(args.verbose)
    pipeline = build_pipeline(args)
    pipeline.search_bbox([args.south, args.west, args.north, args.east])
    return finish(pipeline, args)


def cmd_osm_file(args):
    """Analyse a saved Overpass JSON response"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    pipeline = build_pipeline(args)
    pipeline.load_osm_file(args.input)
    return finish(pipeline, args)


def cmd_import(args):
    """Re-analyse a GeoJSON FeatureCollection of building polygons"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    pipeline = build_pipeline(args)
    pipeline.import_geojson(args.input)
    return finish(pipeline, args)


def cmd_visualize(args):
    """Render footprints, orientation arrows and the rose diagram"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        import matplotlib.pyplot as plt
        from matplotlib.patches import Polygon as MplPolygon
        import numpy as np
    except ImportError:
        logger.error("matplotlib is required for visualization. Install with: pip install matplotlib")
        return 1

    pipeline = build_pipeline(args)
    with open(args.input, "r", encoding="utf-8") as f:
        data = json.load(f)

    # Overpass responses carry "elements"; anything else goes through the GeoJSON importer
    if isinstance(data, dict) and "elements" in data:
        pipeline.load_osm_file(args.input)
    else:
        pipeline.import_geojson(data)

    status = pipeline.session.status
    if status.level == "error":
        logger.error(status.message)
        return 1

    rows = pipeline.session.rows
    if not rows:
        logger.warning("No buildings to draw")
        return 1

    logger.info(f"Visualizing {len(rows)} buildings")
    config = pipeline.config

    fig = plt.figure(figsize=(16, 8))
    ax_map = fig.add_subplot(1, 2, 1)
    ax_rose = fig.add_subplot(1, 2, 2, projection="polar")

    # Footprints, arrows and centers
    for row in rows:
        geometry = row.geometry.model_dump()
        polygons = geometry["coordinates"] if geometry["type"] == "MultiPolygon" else [geometry["coordinates"]]
        for polygon in polygons:
            ax_map.add_patch(MplPolygon(
                polygon[0], closed=True, facecolor="#cc3333", edgecolor="#cc3333",
                alpha=0.2, linewidth=1
            ))

        arrow = GeometryUtils.orientation_arrow(row.lon, row.lat, row.orientation_deg, config.arrow_length_m)
        ax_map.plot([arrow[0][0], arrow[1][0]], [arrow[0][1], arrow[1][1]], color="#dd2222", linewidth=2)
        ax_map.plot(row.lon, row.lat, "o", markersize=3, markerfacecolor="white", markeredgecolor="#220044")
        if args.labels:
            ax_map.annotate(row.name, (row.lon, row.lat), fontsize=7, xytext=(3, 3), textcoords="offset points")

    ax_map.autoscale_view()
    mean_lat = sum(r.lat for r in rows) / len(rows)
    ax_map.set_aspect(1 / np.cos(np.radians(mean_lat)))
    ax_map.set_xlabel("Longitude")
    ax_map.set_ylabel("Latitude")
    ax_map.set_title(f"{len(rows)} buildings, orientation mode: {pipeline.reconciler.mode.value}")

    # Rose diagram (north up, clockwise)
    bins = pipeline.histogram(field=args.field)
    ax_rose.set_theta_zero_location("N")
    ax_rose.set_theta_direction(-1)
    ax_rose.bar(
        [np.radians(b.start_deg) for b in bins],
        [b.count for b in bins],
        width=[np.radians(b.end_deg - b.start_deg) for b in bins],
        align="edge",
        color="#cc3333",
        edgecolor="#660000",
        alpha=0.7
    )
    ax_rose.set_title(f"Rose diagram: {args.field}")

    plt.tight_layout()

    if args.output:
        plt.savefig(args.output, dpi=150, bbox_inches="tight")
        logger.info(f"✓ Saved visualization to {args.output}")
    else:
        plt.show()

    return 0


def add_output_arguments(parser):
    parser.add_argument("--mode", choices=[m.value for m in OrientationMode],
                        help="Orientation signal: altar (default), entrance or pca")
    parser.add_argument("--bin-width", type=float, help="Rose diagram sector width in degrees (default 10)")
    parser.add_argument("--csv", help="Write CSV export to this path")
    parser.add_argument("--geojson", help="Write GeoJSON export to this path")
    parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")


def main():
    parser = argparse.ArgumentParser(
        description="Church Orientation Explorer CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Search a city:
    python cli.py city --name Milano --csv milano.csv --summary

  Search a bounding box (south west north east):
    python cli.py bbox --south 45.45 --west 9.17 --north 45.48 --east 9.21

  Re-analyse an exported GeoJSON file:
    python cli.py import --input church_orientation.geojson --summary

  Visualize:
    python cli.py visualize --input church_orientation.geojson --output churches.png
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # City command
    city_parser = subparsers.add_parser("city", help="Geocode a place and analyse its churches")
    city_parser.add_argument("--name", "-n", required=True, help="Place name, e.g. 'Milano'")
    add_output_arguments(city_parser)
    city_parser.set_defaults(func=cmd_city)

    # Bounding box command
    bbox_parser = subparsers.add_parser("bbox", help="Analyse churches inside a bounding box")
    bbox_parser.add_argument("--south", type=float, required=True, help="South latitude")
    bbox_parser.add_argument("--west", type=float, required=True, help="West longitude")
    bbox_parser.add_argument("--north", type=float, required=True, help="North latitude")
    bbox_parser.add_argument("--east", type=float, required=True, help="East longitude")
    add_output_arguments(bbox_parser)
    bbox_parser.set_defaults(func=cmd_bbox)

    # Overpass file command
    osm_parser = subparsers.add_parser("osm-file", help="Analyse a saved Overpass JSON response")
    osm_parser.add_argument("--input", "-i", required=True, help="Overpass JSON file")
    add_output_arguments(osm_parser)
    osm_parser.set_defaults(func=cmd_osm_file)

    # Import command
    import_parser = subparsers.add_parser("import", help="Analyse a GeoJSON FeatureCollection")
    import_parser.add_argument("--input", "-i", required=True, help="GeoJSON file")
    add_output_arguments(import_parser)
    import_parser.set_defaults(func=cmd_import)

    # Visualize command
    viz_parser = subparsers.add_parser("visualize", help="Draw footprints, arrows and rose diagram")
    viz_parser.add_argument("--input", "-i", required=True, help="GeoJSON or Overpass JSON file")
    viz_parser.add_argument("--output", "-o", help="Output image file (shows window if not specified)")
    viz_parser.add_argument("--mode", choices=[m.value for m in OrientationMode], help="Orientation signal")
    viz_parser.add_argument("--bin-width", type=float, help="Rose diagram sector width in degrees")
    viz_parser.add_argument("--field", default="orientation_deg",
                            choices=["orientation_deg", "pca_deg", "altar_deg", "entrance_deg", "deviation_deg"],
                            help="Angle field for the rose diagram")
    viz_parser.add_argument("--labels", action="store_true", help="Label buildings by name")
    viz_parser.set_defaults(func=cmd_visualize)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except ValueError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
