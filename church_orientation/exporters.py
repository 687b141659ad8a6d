"""
CSV / GeoJSON export of orientation rows

Exports are pure projections of the rows; nothing here mutates a row.
"""

import csv
import io
import json
import os
from typing import Any, Dict, List, Sequence

from loguru import logger

from .models import GeoJSONFeature, GeoJSONFeatureCollection, OrientationRow

CSV_HEADER = ["name", "lat", "lon", "orientation_deg", "deviation_deg"]


def _coord(value: float) -> str:
    return f"{value:.6f}"


def _angle(value: float) -> str:
    return f"{value:.1f}"


def to_csv(rows: Sequence[OrientationRow]) -> str:
    """
    CSV text with every field double-quoted (internal quotes doubled)

    Coordinates use 6 decimals, angles 1 decimal.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow([
            row.name,
            _coord(row.lat),
            _coord(row.lon),
            _angle(row.orientation_deg),
            _angle(row.deviation_deg),
        ])
    return buffer.getvalue()


def to_geojson(rows: Sequence[OrientationRow]) -> Dict[str, Any]:
    """FeatureCollection with the original building geometry and computed properties"""
    collection = GeoJSONFeatureCollection(features=[
        GeoJSONFeature(
            id=row.id,
            geometry=row.geometry,
            properties={
                "name": row.name,
                "lat": row.lat,
                "lon": row.lon,
                "orientation_deg": row.orientation_deg,
                "deviation_deg": row.deviation_deg,
            }
        )
        for row in rows
    ])
    return collection.model_dump()


def rows_to_table(rows: Sequence[OrientationRow]) -> List[Dict[str, str]]:
    """Display-ready table rows; id is kept for selection callbacks"""
    table = []
    for row in rows:
        table.append({
            "id": row.id,
            "name": row.name,
            "lat": _coord(row.lat),
            "lon": _coord(row.lon),
            "pca_deg": _angle(row.pca_deg),
            "entrance_deg": _angle(row.entrance_deg) if row.entrance_deg is not None else "",
            "altar_deg": _angle(row.altar_deg) if row.altar_deg is not None else "",
            "orientation_deg": _angle(row.orientation_deg),
            "deviation_deg": _angle(row.deviation_deg),
        })
    return table


def write_csv(rows: Sequence[OrientationRow], output_path: str) -> str:
    """Save rows as CSV (UTF-8)"""
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(to_csv(rows))

    logger.info(f"Saved {len(rows)} rows to {output_path}")
    return output_path


def write_geojson(rows: Sequence[OrientationRow], output_path: str) -> str:
    """Save rows as a GeoJSON FeatureCollection"""
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(to_geojson(rows), f, ensure_ascii=False)

    logger.info(f"Saved {len(rows)} features to {output_path}")
    return output_path
