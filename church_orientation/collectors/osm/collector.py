"""
Main OSM Collector

Orchestrates Overpass fetching and the OSM-to-polygon conversion
"""

from typing import Dict, Any, List, Optional, Sequence, Union
from loguru import logger

from .api_client import OverpassAPIClient
from .parser import OSMResponseParser
from .buildings import BuildingProcessor
from .entrances import EntranceProcessor
from .models import ConversionResult
from ...config import get_config, PipelineConfig


def build_church_query(bbox: Sequence[float], timeout: int = 60, building_values: Sequence[str] = ("church", "cathedral")) -> str:
    """
    Overpass QL for church footprints inside a bounding box

    Args:
        bbox: (south, west, north, east)
        timeout: Server-side query timeout in seconds
        building_values: building=* values to match (case-insensitive, exact)

    Returns:
        Query string. Recursed nodes are output with tags so entrances survive.
    """
    south, west, north, east = bbox
    pattern = "|".join(building_values)
    area = f"({south},{west},{north},{east})"
    return f"""
[out:json][timeout:{timeout}];
(
  way["building"~"^({pattern})$",i]{area};
  relation["building"~"^({pattern})$",i]{area};
);
out body;
>;
out body qt;
"""


def validate_bbox(bbox: Sequence[float]) -> None:
    """Raise ValueError unless bbox is (south, west, north, east) with south <= north"""
    if len(bbox) != 4:
        raise ValueError(f"Bounding box needs 4 values (south, west, north, east), got {len(bbox)}")
    south, west, north, east = bbox
    if not (-90 <= south <= 90 and -90 <= north <= 90):
        raise ValueError(f"Latitudes out of range in bounding box {list(bbox)}")
    if not (-180 <= west <= 180 and -180 <= east <= 180):
        raise ValueError(f"Longitudes out of range in bounding box {list(bbox)}")
    if south > north:
        raise ValueError(f"South ({south}) is north of north ({north})")


class OSMCollector:
    """
    Collect church footprints and entrances from OpenStreetMap via Overpass API

    One request per bounding box; the response is converted in a single pass.
    """

    def __init__(self, config: Optional[PipelineConfig] = None, api_client: Optional[OverpassAPIClient] = None):
        self.config = config or get_config()
        self.api_client = api_client or OverpassAPIClient(self.config)
        self.parser = OSMResponseParser()
        self.building_processor = BuildingProcessor(self.config)
        self.entrance_processor = EntranceProcessor(self.config)

    def fetch_churches(self, bbox: Sequence[float]) -> Dict[str, Any]:
        """
        Fetch raw OSM elements for churches in a bounding box

        Args:
            bbox: (south, west, north, east)

        Returns:
            Raw Overpass JSON ({"elements": [...]})

        Raises:
            ValueError: Invalid bounding box
            RuntimeError: Overpass request failed
        """
        validate_bbox(bbox)
        logger.info(f"Fetching churches in bbox {list(bbox)}")

        query = build_church_query(
            bbox,
            timeout=self.config.api.overpass_timeout,
            building_values=self.config.church_building_values
        )
        data = self.api_client.query(query)
        if not isinstance(data, dict):
            raise RuntimeError(f"Overpass returned {type(data).__name__}, expected a JSON object")
        logger.info(f"Overpass returned {len(data.get('elements', []))} elements")
        return data

    def convert(self, data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> ConversionResult:
        """Convert raw Overpass JSON into church buildings and entrance points"""
        nodes, ways, relations = self.parser.parse_elements(data)
        return ConversionResult(
            buildings=self.building_processor.parse_buildings(nodes, ways, relations),
            entrances=self.entrance_processor.parse_entrances(nodes)
        )

    def fetch_and_convert(self, bbox: Sequence[float]) -> ConversionResult:
        return self.convert(self.fetch_churches(bbox))


def convert_elements(
    data: Union[Dict[str, Any], List[Dict[str, Any]]],
    config: Optional[PipelineConfig] = None
) -> ConversionResult:
    """Pure conversion entry point: raw OSM elements -> buildings + entrances"""
    config = config or get_config()
    nodes, ways, relations = OSMResponseParser.parse_elements(data)
    return ConversionResult(
        buildings=BuildingProcessor(config).parse_buildings(nodes, ways, relations),
        entrances=EntranceProcessor(config).parse_entrances(nodes)
    )
