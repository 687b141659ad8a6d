"""
GeoJSON import

Reads a FeatureCollection of Polygon / MultiPolygon features (for example a
previous export) into the same building features the OSM converter produces.
Entrance tags cannot be recovered from plain GeoJSON, so no entrances are
returned.
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from loguru import logger

from ..config import get_config, PipelineConfig
from .osm.buildings import is_closed_ring
from .osm.models import BuildingFeature, ConversionResult, OSMTags


POLYGON_TYPES = ("Polygon", "MultiPolygon")


def load_geojson(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a GeoJSON file (UTF-8)"""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _close_ring(ring: Any) -> Optional[List[List[float]]]:
    """Coerce a ring to [[lon, lat], ...], closing it if needed; None if unusable"""
    if not isinstance(ring, list):
        return None
    try:
        coords = [[float(c[0]), float(c[1])] for c in ring]
    except (TypeError, ValueError, IndexError):
        return None
    if len(coords) >= 3 and coords[0] != coords[-1]:
        coords.append(list(coords[0]))
    return coords if is_closed_ring(coords) else None


def _clean_polygon(rings: Any) -> Optional[List[List[List[float]]]]:
    """Keep the exterior and any valid holes; None if the exterior is unusable"""
    if not isinstance(rings, list) or not rings:
        return None
    exterior = _close_ring(rings[0])
    if exterior is None:
        return None
    holes = [r for r in (_close_ring(ring) for ring in rings[1:]) if r is not None]
    return [exterior] + holes


def _clean_geometry(geometry: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(geometry, dict) or geometry.get("type") not in POLYGON_TYPES:
        return None

    if geometry["type"] == "Polygon":
        polygon = _clean_polygon(geometry.get("coordinates"))
        if polygon is None:
            return None
        return {"type": "Polygon", "coordinates": polygon}

    polygons = [p for p in (_clean_polygon(p) for p in geometry.get("coordinates") or []) if p is not None]
    if not polygons:
        return None
    return {"type": "MultiPolygon", "coordinates": polygons}


def _feature_id(feature: Dict[str, Any], properties: Dict[str, Any]) -> Optional[str]:
    for value in (feature.get("id"), properties.get("@id"), properties.get("id")):
        if value is not None and str(value).strip():
            return str(value)
    return None


def convert_feature_collection(
    data: Dict[str, Any],
    config: Optional[PipelineConfig] = None
) -> ConversionResult:
    """
    Convert a GeoJSON FeatureCollection into building features

    Args:
        data: Parsed GeoJSON object

    Returns:
        ConversionResult with buildings only

    Raises:
        ValueError: If data is not a FeatureCollection
    """
    config = config or get_config()

    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise ValueError("GeoJSON import requires a FeatureCollection")

    features = data.get("features") or []
    buildings = []
    skipped = 0

    for feature in features:
        if not isinstance(feature, dict):
            skipped += 1
            continue

        geometry = _clean_geometry(feature.get("geometry"))
        if geometry is None:
            skipped += 1
            continue

        properties = feature.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        tags = OSMTags(properties)
        buildings.append(BuildingFeature(
            id=_feature_id(feature, properties),
            name=tags.display_name(config.name_tags, config.unnamed_label),
            tags=tags,
            geometry=geometry
        ))

    if skipped:
        logger.debug(f"Skipped {skipped} non-polygon or malformed GeoJSON features")
    logger.info(f"Imported {len(buildings)} polygon features from GeoJSON")

    return ConversionResult(buildings=buildings, entrances=[])
