"""
Geometry utilities for centroids, bearings and distances on lon/lat data
"""

import math
from typing import List, Tuple, Dict, Any

from loguru import logger
from shapely.errors import GEOSException
from shapely.geometry import shape

EARTH_RADIUS_M = 6371000
WGS84_SEMI_MAJOR_M = 6378137.0


class GeometryUtils:
    """Utility functions for geometric operations"""

    @staticmethod
    def iter_rings(geometry: Dict[str, Any]) -> List[List[List[float]]]:
        """All rings of a Polygon or MultiPolygon (holes included)"""
        if not geometry:
            return []
        coords = geometry.get("coordinates") or []
        if geometry.get("type") == "Polygon":
            return list(coords)
        if geometry.get("type") == "MultiPolygon":
            return [ring for polygon in coords for ring in polygon]
        return []

    @staticmethod
    def collect_coords(geometry: Dict[str, Any]) -> List[List[float]]:
        """Every vertex of every ring, closing vertices included"""
        return [[c[0], c[1]] for ring in GeometryUtils.iter_rings(geometry) for c in ring]

    @staticmethod
    def distinct_ring_vertices(geometry: Dict[str, Any]) -> List[List[float]]:
        """Every vertex of every ring, counting each ring's closing vertex once"""
        out = []
        for ring in GeometryUtils.iter_rings(geometry):
            if len(ring) > 1 and ring[0][0] == ring[-1][0] and ring[0][1] == ring[-1][1]:
                ring = ring[:-1]
            out.extend([c[0], c[1]] for c in ring)
        return out

    @staticmethod
    def vertex_centroid(geometry: Dict[str, Any]) -> Tuple[float, float]:
        """Average of the vertices (closing vertices excluded)"""
        coords = GeometryUtils.distinct_ring_vertices(geometry)
        if not coords:
            return (0.0, 0.0)

        sum_x = sum(c[0] for c in coords)
        sum_y = sum(c[1] for c in coords)

        return (sum_x / len(coords), sum_y / len(coords))

    @staticmethod
    def polygon_centroid(geometry: Dict[str, Any]) -> Tuple[float, float]:
        """
        Area-weighted center of mass of a Polygon / MultiPolygon as (lon, lat)

        Falls back to the vertex average for zero-area or unreadable geometry.
        """
        try:
            geom = shape(geometry)
            if not geom.is_empty and geom.area > 0:
                centroid = geom.centroid
                if not centroid.is_empty and math.isfinite(centroid.x) and math.isfinite(centroid.y):
                    return (centroid.x, centroid.y)
        except (GEOSException, ValueError, TypeError, AttributeError) as e:
            logger.debug(f"Center of mass failed ({e}), using vertex average")

        return GeometryUtils.vertex_centroid(geometry)

    @staticmethod
    def bearing_deg(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
        """Initial great-circle bearing from point 1 to point 2, in [0, 360)"""
        phi1 = math.radians(lat1)
        phi2 = math.radians(lat2)
        delta_lambda = math.radians(lon2 - lon1)

        y = math.sin(delta_lambda) * math.cos(phi2)
        x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)

        return normalize_deg(math.degrees(math.atan2(y, x)))

    @staticmethod
    def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate distance between two points in meters"""
        phi1 = math.radians(lat1)
        phi2 = math.radians(lat2)
        delta_phi = math.radians(lat2 - lat1)
        delta_lambda = math.radians(lon2 - lon1)

        a = math.sin(delta_phi/2)**2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda/2)**2
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))

        return EARTH_RADIUS_M * c

    @staticmethod
    def orientation_arrow(
        lon: float,
        lat: float,
        bearing: float,
        scale_m: float = 70.0
    ) -> List[List[float]]:
        """
        Two-point line [[lon, lat], [lon2, lat2]] from a center towards a bearing

        Small-distance approximation, good for arrows of a few hundred meters.
        """
        rad = math.radians(90 - bearing)  # bearing -> angle from east
        d_lat = (scale_m * math.sin(rad)) / WGS84_SEMI_MAJOR_M
        d_lon = (scale_m * math.cos(rad)) / (WGS84_SEMI_MAJOR_M * math.cos(math.radians(lat)))
        return [[lon, lat], [lon + math.degrees(d_lon), lat + math.degrees(d_lat)]]


def normalize_deg(angle: float) -> float:
    """Wrap an angle into [0, 360)"""
    angle = angle % 360.0
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if angle >= 360.0 else angle
