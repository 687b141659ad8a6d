"""
OpenStreetMap church data module

Modular OSM collector with separate components for:
- API client: Overpass API communication
- Models: Data structures (OSMNode, OSMWay, OSMRelation, OSMTags, BuildingFeature, EntrancePoint)
- Parser: Response parsing
- Buildings: Church polygon conversion
- Entrances: Entrance point extraction
- Collector: Main orchestrator class
"""

from .models import (
    OSMTags, OSMNode, OSMWay, OSMRelation, OSMRelationMember,
    BuildingFeature, EntrancePoint, ConversionResult
)
from .collector import OSMCollector, build_church_query, convert_elements

__all__ = [
    "OSMTags",
    "OSMNode",
    "OSMWay",
    "OSMRelation",
    "OSMRelationMember",
    "BuildingFeature",
    "EntrancePoint",
    "ConversionResult",
    "OSMCollector",
    "build_church_query",
    "convert_elements",
]
