"""Shared test fixtures and configuration."""
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from church_orientation.config import PipelineConfig


def rectangle(west, south, east, north):
    """Closed counter-clockwise ring [[lon, lat], ...]"""
    return [[west, south], [east, south], [east, north], [west, north], [west, south]]


@pytest.fixture
def config():
    """Fresh default configuration (the global instance is never touched)."""
    return PipelineConfig()


@pytest.fixture
def overpass_data():
    """
    Overpass 'out body; >; out body qt;' style response.

    - way 100: Santa Maria, long east-west, main entrance (node 5) on the west wall,
      secondary entrance (node 6) on the south wall
    - relation 200: cathedral multipolygon, long north-south, one closed outer,
      one inner, one open outer
    - way 300: open church way (dropped)
    - way 400: a house (not a church)
    - way 500: building=church_hall (not an exact match)
    """
    nodes = [
        (1, 9.1900, 45.4640), (6, 9.1905, 45.4640), (2, 9.1910, 45.4640),
        (3, 9.1910, 45.4642), (4, 9.1900, 45.4642), (5, 9.1900, 45.4641),
        (11, 9.2000, 45.4700), (12, 9.2002, 45.4700), (13, 9.2002, 45.4710), (14, 9.2000, 45.4710),
        (21, 9.20005, 45.4702), (22, 9.20015, 45.4702), (23, 9.20015, 45.4703), (24, 9.20005, 45.4703),
        (31, 9.2100, 45.4800), (32, 9.2101, 45.4800), (33, 9.2101, 45.4801),
    ]
    node_tags = {
        5: {"entrance": "main"},
        6: {"entrance": "yes"},
        31: {"entrance": "service"},
    }
    elements = [
        {"type": "way", "id": 100, "nodes": [1, 6, 2, 3, 4, 5, 1],
         "tags": {"building": "church", "name": "Santa Maria", "denomination": "catholic"}},
        {"type": "relation", "id": 200,
         "members": [
             {"type": "way", "ref": 201, "role": "outer"},
             {"type": "way", "ref": 202, "role": "inner"},
             {"type": "way", "ref": 203, "role": "outer"},
         ],
         "tags": {"type": "multipolygon", "building": "Cathedral", "name:en": "St Paul"}},
        {"type": "way", "id": 201, "nodes": [11, 12, 13, 14, 11]},
        {"type": "way", "id": 202, "nodes": [21, 22, 23, 24, 21]},
        {"type": "way", "id": 203, "nodes": [31, 32, 33]},
        {"type": "way", "id": 300, "nodes": [31, 32, 33], "tags": {"building": "church"}},
        {"type": "way", "id": 400, "nodes": [11, 12, 13, 14, 11], "tags": {"building": "house"}},
        {"type": "way", "id": 500, "nodes": [11, 12, 13, 14, 11], "tags": {"building": "church_hall"}},
    ]
    # Nodes come after ways, as in a real recursed Overpass response
    for node_id, lon, lat in nodes:
        element = {"type": "node", "id": node_id, "lon": lon, "lat": lat}
        if node_id in node_tags:
            element["tags"] = node_tags[node_id]
        elements.append(element)

    return {"version": 0.6, "elements": elements}
