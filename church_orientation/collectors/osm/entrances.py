"""
Entrance extraction

Nodes tagged entrance=main|yes, used to resolve a building's
entrance-to-altar axis
"""

from typing import Dict, List, Optional
from loguru import logger

from ...config import get_config, PipelineConfig
from .models import OSMNode, EntrancePoint


class EntranceProcessor:
    """Extracts entrance points from OSM nodes"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()

    def parse_entrances(self, nodes: Dict[int, OSMNode]) -> List[EntrancePoint]:
        """Every node whose entrance tag is a recognized kind"""
        entrances = []
        for node_id, node in nodes.items():
            kind = node.tags.entrance_kind(self.config.entrance_values)
            if kind is None:
                continue
            entrances.append(EntrancePoint(
                lon=node.lon,
                lat=node.lat,
                kind=kind,
                id=node_id
            ))

        main_count = sum(1 for e in entrances if e.is_main)
        logger.info(f"Found {len(entrances)} entrances ({main_count} main)")
        return entrances
