"""
OSM response parser

Parses Overpass API responses into OSMNode, OSMWay and OSMRelation objects
"""

from typing import Dict, Any, Tuple, List, Union
from loguru import logger

from .models import OSMNode, OSMWay, OSMRelation, OSMRelationMember, OSMTags


class OSMResponseParser:
    """Parses Overpass API responses"""

    @staticmethod
    def parse_elements(
        data: Union[Dict[str, Any], List[Dict[str, Any]]]
    ) -> Tuple[Dict[int, OSMNode], List[OSMWay], List[OSMRelation]]:
        """
        Parse Overpass response into nodes, ways and relations

        Handles both 'out body' (node references) and 'out geom' (direct geometry)
        formats. Malformed elements are skipped.

        Args:
            data: JSON response from Overpass API, or its bare elements list

        Returns:
            Tuple of (nodes dict, ways list, relations list)
        """
        if isinstance(data, dict):
            elements = data.get("elements", [])
        else:
            elements = data
        if not isinstance(elements, list):
            logger.warning("Overpass response has no elements list, treating as empty")
            elements = []

        nodes = {}
        ways = []
        relations = []
        skipped = 0

        for element in elements:
            if not isinstance(element, dict) or "id" not in element:
                skipped += 1
                continue

            element_type = element.get("type")
            tags = OSMTags(element.get("tags"))

            if element_type == "node":
                try:
                    lat = float(element["lat"])
                    lon = float(element["lon"])
                except (KeyError, TypeError, ValueError):
                    skipped += 1
                    continue
                nodes[element["id"]] = OSMNode(
                    id=element["id"],
                    lat=lat,
                    lon=lon,
                    tags=tags
                )
            elif element_type == "way":
                # Check if geometry is directly provided (from 'out geom')
                geometry = None
                if isinstance(element.get("geometry"), list):
                    # Overpass 'out geom' provides geometry as list of {lat, lon} objects
                    # Convert to [lon, lat] format for consistency
                    geometry = []
                    for point in element["geometry"]:
                        try:
                            if isinstance(point, dict):
                                geometry.append([float(point["lon"]), float(point["lat"])])
                            elif isinstance(point, list) and len(point) >= 2:
                                geometry.append([float(point[0]), float(point[1])])
                        except (KeyError, TypeError, ValueError):
                            # Dropped like an unresolved node reference
                            continue

                ways.append(OSMWay(
                    id=element["id"],
                    node_refs=list(element.get("nodes") or []),
                    tags=tags,
                    geometry=geometry or None
                ))
            elif element_type == "relation":
                members = []
                for member in element.get("members") or []:
                    if not isinstance(member, dict) or "ref" not in member:
                        continue
                    members.append(OSMRelationMember(
                        type=member.get("type", ""),
                        ref=member["ref"],
                        role=member.get("role") or ""
                    ))
                relations.append(OSMRelation(
                    id=element["id"],
                    members=members,
                    tags=tags
                ))
            else:
                skipped += 1

        if skipped:
            logger.debug(f"Skipped {skipped} malformed or unsupported OSM elements")

        logger.debug(f"Parsed {len(nodes)} nodes, {len(ways)} ways, {len(relations)} relations")
        return nodes, ways, relations
