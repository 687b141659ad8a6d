"""
Pydantic models for church orientation results
GeoJSON output matches RFC 7946 (lon, lat order)
"""

from typing import List, Optional, Dict, Any, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float]  # [longitude, latitude]


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]  # [[lon, lat], ...]


class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]  # [[[lon, lat], ...]]


class GeoJSONMultiPolygon(BaseModel):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: List[List[List[List[float]]]]  # [[[[lon, lat], ...]]]


BuildingGeometry = Union[GeoJSONPolygon, GeoJSONMultiPolygon]


class GeoJSONFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    id: Optional[str] = None
    geometry: BuildingGeometry = Field(discriminator="type")
    properties: Dict[str, Any] = Field(default_factory=dict)


class GeoJSONFeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[GeoJSONFeature] = Field(default_factory=list)


# ============================================================
# Orientation Results
# ============================================================

OrientationSource = Literal["altar", "entrance", "pca"]


class OrientationRow(BaseModel):
    """Canonical per-building result; never mutated after creation"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    center_lon: float
    center_lat: float
    pca_deg: float
    entrance_deg: Optional[float] = None
    altar_deg: Optional[float] = None
    orientation_deg: float
    deviation_deg: float
    mode: OrientationSource = "altar"  # Requested selection mode
    source: OrientationSource = "pca"  # Signal actually used for orientation_deg
    geometry: BuildingGeometry = Field(discriminator="type")

    @property
    def lat(self) -> float:
        return self.center_lat

    @property
    def lon(self) -> float:
        return self.center_lon


class HistogramBin(BaseModel):
    """One rose diagram sector covering [start_deg, end_deg)"""
    model_config = ConfigDict(frozen=True)

    start_deg: float
    end_deg: float
    count: int = 0


# ============================================================
# External Service / Session Models
# ============================================================

class GeocodeResult(BaseModel):
    lat: float
    lon: float
    bounding_box: List[float]  # [south, west, north, east]
    display_name: Optional[str] = None


class FetchStatus(BaseModel):
    """Outcome of the last user action (search, import, export)"""
    level: Literal["info", "success", "error"] = "info"
    message: str
    count: int = 0
