"""
Orientation reconciliation

Combines the PCA axis, the entrance bearing and the altar bearing
(entrance + 180) into one orientation per building.

Selection modes:
  - altar (default): altar bearing when an entrance is known, else PCA axis
  - entrance: entrance bearing when known, else PCA axis
  - pca: always the PCA axis
"""

from enum import Enum
from typing import List, Optional, Tuple, Union

from loguru import logger
from shapely.errors import GEOSException
from shapely.geometry import Point, shape
from shapely.prepared import prep

from ..config import get_config, PipelineConfig
from ..collectors.osm.models import BuildingFeature, EntrancePoint
from ..models import OrientationRow
from .geometry_utils import GeometryUtils
from .orientation import pca_orientation_deg, east_west_deviation, axis_difference

# Buildings with fewer vertices than this keep pca_deg = 0
MIN_PCA_VERTICES = 4


class OrientationMode(str, Enum):
    ALTAR = "altar"
    ENTRANCE = "entrance"
    PCA = "pca"


def synthesize_row_id(name: str, lat: float, lon: float) -> str:
    """
    Fallback row id from name and centroid rounded to 6 decimals

    Not guaranteed unique: two unnamed buildings within ~0.1 m share an id.
    """
    return f"{name}@{lat:.6f},{lon:.6f}"


def select_orientation(
    pca_deg: float,
    entrance_deg: Optional[float],
    altar_deg: Optional[float],
    mode: Union[OrientationMode, str] = OrientationMode.ALTAR
) -> Tuple[float, str]:
    """
    Pick the canonical orientation for a building

    Returns:
        (orientation_deg, source) where source names the signal actually used
    """
    mode = OrientationMode(mode)
    if mode is OrientationMode.ALTAR and altar_deg is not None:
        return altar_deg, "altar"
    if mode is OrientationMode.ENTRANCE and entrance_deg is not None:
        return entrance_deg, "entrance"
    return pca_deg, "pca"


class OrientationReconciler:
    """Turns building features and entrance points into orientation rows"""

    def __init__(
        self,
        mode: Optional[Union[OrientationMode, str]] = None,
        config: Optional[PipelineConfig] = None
    ):
        self.config = config or get_config()
        self.mode = OrientationMode(mode or self.config.orientation_mode)

    def reconcile(
        self,
        buildings: List[BuildingFeature],
        entrances: Optional[List[EntrancePoint]] = None
    ) -> List[OrientationRow]:
        """
        One row per building, in input order

        Args:
            buildings: Converted church footprints
            entrances: Entrance points from the same data (may be empty)

        Returns:
            List of OrientationRow
        """
        entrances = entrances or []
        rows = [self.reconcile_building(b, entrances) for b in buildings]

        with_entrance = sum(1 for r in rows if r.entrance_deg is not None)
        logger.info(f"Reconciled {len(rows)} buildings ({with_entrance} with entrance), mode={self.mode.value}")
        return rows

    def reconcile_building(
        self,
        building: BuildingFeature,
        entrances: List[EntrancePoint]
    ) -> OrientationRow:
        """Compute centroid, PCA axis, entrance/altar bearings and the chosen orientation"""
        geometry = building.geometry
        center_lon, center_lat = GeometryUtils.polygon_centroid(geometry)

        # Counts closing vertices; the PCA below uses each ring's closing vertex once
        if len(GeometryUtils.collect_coords(geometry)) < MIN_PCA_VERTICES:
            pca_deg = 0.0
        else:
            pca_deg = pca_orientation_deg(GeometryUtils.distinct_ring_vertices(geometry))

        entrance_deg = None
        altar_deg = None
        entrance = self.find_best_entrance(building, (center_lon, center_lat), entrances)
        if entrance is not None:
            entrance_deg = GeometryUtils.bearing_deg(center_lon, center_lat, entrance.lon, entrance.lat)
            altar_deg = (entrance_deg + 180) % 360
            logger.debug(
                f"{building.name}: entrance ({entrance.kind}) at {entrance_deg:.1f}, "
                f"altar {altar_deg:.1f}, {axis_difference(entrance_deg, pca_deg):.1f} off the PCA axis"
            )

        orientation_deg, source = select_orientation(pca_deg, entrance_deg, altar_deg, self.mode)

        return OrientationRow(
            id=building.id or synthesize_row_id(building.name, center_lat, center_lon),
            name=building.name,
            center_lon=center_lon,
            center_lat=center_lat,
            pca_deg=pca_deg,
            entrance_deg=entrance_deg,
            altar_deg=altar_deg,
            orientation_deg=orientation_deg,
            deviation_deg=east_west_deviation(orientation_deg),
            mode=self.mode.value,
            source=source,
            geometry=geometry
        )

    def find_best_entrance(
        self,
        building: BuildingFeature,
        center: Tuple[float, float],
        entrances: List[EntrancePoint]
    ) -> Optional[EntrancePoint]:
        """
        Entrance inside (or on the outline of) the building

        Ranks main before yes, then by distance to the centroid.
        """
        if not entrances:
            return None

        try:
            geom = shape(building.geometry)
            minx, miny, maxx, maxy = geom.bounds
            prepared = prep(geom)
            candidates = [
                e for e in entrances
                if minx <= e.lon <= maxx and miny <= e.lat <= maxy
                and prepared.covers(Point(e.lon, e.lat))
            ]
        except (GEOSException, ValueError) as e:
            logger.debug(f"{building.name}: containment test failed ({e}), ignoring entrances")
            return None

        if not candidates:
            return None

        kinds = list(self.config.entrance_values)
        center_lon, center_lat = center

        def rank(entrance: EntrancePoint):
            kind_rank = kinds.index(entrance.kind) if entrance.kind in kinds else len(kinds)
            distance = GeometryUtils.haversine_distance(center_lat, center_lon, entrance.lat, entrance.lon)
            return (kind_rank, distance)

        return min(candidates, key=rank)


def reconcile(
    buildings: List[BuildingFeature],
    entrances: Optional[List[EntrancePoint]] = None,
    mode: Optional[Union[OrientationMode, str]] = None,
    config: Optional[PipelineConfig] = None
) -> List[OrientationRow]:
    """Pure entry point: buildings + entrances -> orientation rows"""
    return OrientationReconciler(mode=mode, config=config).reconcile(buildings, entrances)
