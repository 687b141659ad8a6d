"""
Church building logic

Turns OSM ways and multipolygon relations tagged building=church|cathedral
into closed Polygon / MultiPolygon features
"""

from typing import List, Dict, Optional
from loguru import logger

from ...config import get_config, PipelineConfig
from .models import OSMNode, OSMWay, OSMRelation, BuildingFeature


def is_closed_ring(ring: Optional[List[List[float]]]) -> bool:
    """A ring is usable when it has at least 4 points and first == last exactly"""
    if not ring or len(ring) < 4:
        return False
    first, last = ring[0], ring[-1]
    return first[0] == last[0] and first[1] == last[1]


def build_node_index(nodes: Dict[int, OSMNode]) -> Dict[int, List[float]]:
    """Map node id -> [lon, lat]"""
    return {node_id: [node.lon, node.lat] for node_id, node in nodes.items()}


class BuildingProcessor:
    """Processes church and cathedral footprints from OSM data"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()

    def parse_buildings(
        self,
        nodes: Dict[int, OSMNode],
        ways: List[OSMWay],
        relations: List[OSMRelation]
    ) -> List[BuildingFeature]:
        """
        Parse church ways and relations into building features

        Args:
            nodes: Node id -> OSMNode, from the same response
            ways: All ways of the response (church or not; relation members are looked up here)
            relations: All relations of the response

        Returns:
            List of BuildingFeature, ways first then relations
        """
        node_index = build_node_index(nodes)
        way_rings = {way.id: way.get_coordinates(node_index) for way in ways}

        buildings = []
        buildings.extend(self._parse_ways(ways, way_rings))
        buildings.extend(self._parse_relations(relations, way_rings))

        logger.info(f"Converted {len(buildings)} church buildings "
                    f"from {len(ways)} ways and {len(relations)} relations")
        return buildings

    def _parse_ways(
        self,
        ways: List[OSMWay],
        way_rings: Dict[int, List[List[float]]]
    ) -> List[BuildingFeature]:
        """Single closed ways become Polygons; open ways are not churches"""
        buildings = []
        for way in ways:
            if not way.tags.is_church(self.config.church_building_values):
                continue

            ring = way_rings.get(way.id)
            if not is_closed_ring(ring):
                logger.debug(f"Way {way.id}: skipped, ring is open or has fewer than 4 points")
                continue

            buildings.append(BuildingFeature(
                id=f"way/{way.id}",
                name=self._name(way.tags),
                tags=way.tags,
                geometry={"type": "Polygon", "coordinates": [ring]}
            ))
        return buildings

    def _parse_relations(
        self,
        relations: List[OSMRelation],
        way_rings: Dict[int, List[List[float]]]
    ) -> List[BuildingFeature]:
        """
        Multipolygon relations become MultiPolygons of their closed outer rings

        Inner members (courtyards, holes) are not carried into the geometry.
        """
        buildings = []
        for relation in relations:
            tags = relation.tags
            if tags.get("type") != "multipolygon" or not tags.is_church(self.config.church_building_values):
                continue

            outers = []
            for member in relation.members:
                if member.type != "way" or member.role != "outer":
                    continue
                ring = way_rings.get(member.ref)
                if is_closed_ring(ring):
                    outers.append(ring)

            if not outers:
                logger.debug(f"Relation {relation.id}: skipped, no closed outer ring")
                continue

            buildings.append(BuildingFeature(
                id=f"relation/{relation.id}",
                name=self._name(tags),
                tags=tags,
                geometry={
                    "type": "MultiPolygon",
                    "coordinates": [[outer] for outer in outers]
                }
            ))
        return buildings

    def _name(self, tags) -> str:
        return tags.display_name(self.config.name_tags, self.config.unnamed_label)
