"""
OSM data models

Data classes for representing OSM nodes, ways, relations and the
church features derived from them
"""

from collections.abc import Mapping
from typing import List, Dict, Optional, Any, Iterator, Iterable
from dataclasses import dataclass, field


class OSMTags(Mapping):
    """
    Read-only OSM tag mapping with typed accessors for the recognized keys

    Values are always strings; missing keys read as None (or the given default)
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        if not isinstance(data, Mapping):
            data = {}
        for key, value in data.items():
            if value is None:
                continue
            self._data[str(key)] = value if isinstance(value, str) else str(value)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"OSMTags({self._data!r})"

    @property
    def building(self) -> Optional[str]:
        return self._data.get("building")

    @property
    def entrance(self) -> Optional[str]:
        return self._data.get("entrance")

    def is_church(self, values: Iterable[str] = ("church", "cathedral")) -> bool:
        """Exact, case-insensitive match of building=* against the given values"""
        building = self.building
        if not building:
            return False
        return building.strip().lower() in {v.lower() for v in values}

    def entrance_kind(self, values: Iterable[str] = ("main", "yes")) -> Optional[str]:
        """Return the entrance=* value if it is one of the recognized kinds"""
        entrance = self.entrance
        if not entrance:
            return None
        entrance = entrance.strip().lower()
        return entrance if entrance in set(values) else None

    def display_name(
        self,
        name_tags: Iterable[str] = ("name", "name:en", "name:it", "name:ja", "addr:housename"),
        default: str = "(no name)"
    ) -> str:
        """First non-empty name-like tag, else the default label"""
        for key in name_tags:
            value = self._data.get(key)
            if value and value.strip():
                return value
        return default

    def to_dict(self) -> Dict[str, str]:
        return dict(self._data)


@dataclass(frozen=True)
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: OSMTags = field(default_factory=OSMTags)


@dataclass(frozen=True)
class OSMWay:
    """Represents an OSM way (line or polygon)"""
    id: int
    node_refs: List[int]
    tags: OSMTags = field(default_factory=OSMTags)
    geometry: Optional[List[List[float]]] = None  # Direct geometry from Overpass 'out geom'

    def get_coordinates(self, node_index: Dict[int, List[float]]) -> List[List[float]]:
        """
        Get coordinates as [lon, lat] list

        Node references missing from the index are dropped
        """
        # Prefer direct geometry if available (from 'out geom')
        if self.geometry:
            return [list(c) for c in self.geometry]
        return [list(node_index[ref]) for ref in self.node_refs if ref in node_index]


@dataclass(frozen=True)
class OSMRelationMember:
    """One member reference of an OSM relation"""
    type: str
    ref: int
    role: str = ""


@dataclass(frozen=True)
class OSMRelation:
    """Represents an OSM relation"""
    id: int
    members: List[OSMRelationMember]
    tags: OSMTags = field(default_factory=OSMTags)


@dataclass(frozen=True)
class BuildingFeature:
    """A church footprint as a closed GeoJSON Polygon or MultiPolygon"""
    id: Optional[str]
    name: str
    tags: OSMTags
    geometry: Dict[str, Any]


@dataclass(frozen=True)
class EntrancePoint:
    """A node tagged entrance=main|yes"""
    lon: float
    lat: float
    kind: str  # "main" or "yes"
    id: Optional[int] = None

    @property
    def is_main(self) -> bool:
        return self.kind == "main"


@dataclass
class ConversionResult:
    """Output of one conversion pass"""
    buildings: List[BuildingFeature] = field(default_factory=list)
    entrances: List[EntrancePoint] = field(default_factory=list)
