"""Tests for the OSM-to-polygon converter."""
import pytest

from church_orientation.collectors.osm import OSMTags, convert_elements
from church_orientation.collectors.osm.buildings import BuildingProcessor, is_closed_ring
from church_orientation.collectors.osm.entrances import EntranceProcessor
from church_orientation.collectors.osm.parser import OSMResponseParser

from conftest import rectangle


def _by_id(buildings):
    return {b.id: b for b in buildings}


class TestOSMTags:
    def test_missing_keys_default_safely(self):
        tags = OSMTags()
        assert tags.building is None
        assert tags.entrance is None
        assert not tags.is_church()
        assert tags.entrance_kind() is None
        assert tags.display_name() == "(no name)"

    def test_values_are_stringified_and_none_dropped(self):
        tags = OSMTags({"building:levels": 3, "name": None, "building": "church"})
        assert tags["building:levels"] == "3"
        assert "name" not in tags
        assert len(tags) == 2

    def test_church_match_is_exact_and_case_insensitive(self):
        assert OSMTags({"building": "CATHEDRAL"}).is_church()
        assert OSMTags({"building": "Church"}).is_church()
        assert not OSMTags({"building": "church_hall"}).is_church()
        assert not OSMTags({"building": "yes"}).is_church()

    def test_display_name_fallback_order(self):
        assert OSMTags({"name:it": "Duomo", "addr:housename": "X"}).display_name() == "Duomo"
        assert OSMTags({"name": "  ", "name:en": "Cathedral"}).display_name() == "Cathedral"
        assert OSMTags({"addr:housename": "Casa"}).display_name() == "Casa"

    def test_entrance_kind(self):
        assert OSMTags({"entrance": "main"}).entrance_kind() == "main"
        assert OSMTags({"entrance": "yes"}).entrance_kind() == "yes"
        assert OSMTags({"entrance": "service"}).entrance_kind() is None


class TestParser:
    def test_parses_all_element_types(self, overpass_data):
        nodes, ways, relations = OSMResponseParser.parse_elements(overpass_data)
        assert len(nodes) == 17
        assert {w.id for w in ways} == {100, 201, 202, 203, 300, 400, 500}
        assert [r.id for r in relations] == [200]
        assert relations[0].members[1].role == "inner"

    def test_malformed_elements_are_skipped(self):
        data = {"elements": [
            {"type": "node", "id": 1},                 # no coordinates
            {"type": "node", "lon": 1.0, "lat": 2.0},  # no id
            "garbage",
            {"type": "area", "id": 9},
            {"type": "node", "id": 2, "lon": 1.0, "lat": 2.0},
        ]}
        nodes, ways, relations = OSMResponseParser.parse_elements(data)
        assert list(nodes) == [2]
        assert ways == [] and relations == []

    def test_non_numeric_coordinates_skip_only_that_node(self, overpass_data):
        overpass_data["elements"].append({"type": "node", "id": 999, "lat": "n/a", "lon": 9.0})
        overpass_data["elements"].append({"type": "node", "id": 998, "lat": [45.0], "lon": 9.0})
        nodes, _, _ = OSMResponseParser.parse_elements(overpass_data)
        assert 999 not in nodes and 998 not in nodes
        assert len(nodes) == 17
        assert {b.id for b in convert_elements(overpass_data).buildings} == {"way/100", "relation/200"}

    def test_non_object_tags_read_as_empty(self):
        nodes, _, _ = OSMResponseParser.parse_elements({"elements": [
            {"type": "node", "id": 1, "lon": 0.0, "lat": 0.0, "tags": ["entrance", "main"]},
        ]})
        assert len(nodes[1].tags) == 0

    def test_out_geom_bad_point_is_dropped(self):
        ring = [{"lat": 0.0, "lon": 0.0}, {"lat": "x", "lon": 0.5}, {"lat": 0.0, "lon": 1.0},
                {"lat": 1.0, "lon": 1.0}, {"lat": 0.0, "lon": 0.0}]
        _, ways, _ = OSMResponseParser.parse_elements({"elements": [
            {"type": "way", "id": 7, "geometry": ring, "tags": {"building": "church"}}
        ]})
        assert ways[0].get_coordinates({}) == [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 0.0]]

    def test_out_geom_inline_geometry(self):
        ring = [{"lat": 0.0, "lon": 0.0}, {"lat": 0.0, "lon": 1.0}, {"lat": 1.0, "lon": 1.0}, {"lat": 0.0, "lon": 0.0}]
        _, ways, _ = OSMResponseParser.parse_elements({"elements": [
            {"type": "way", "id": 7, "geometry": ring, "tags": {"building": "church"}}
        ]})
        assert ways[0].get_coordinates({}) == [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 0.0]]

    def test_accepts_bare_element_list(self, overpass_data):
        nodes, ways, relations = OSMResponseParser.parse_elements(overpass_data["elements"])
        assert len(ways) == 7


class TestBuildingConversion:
    def test_converts_ways_and_relations(self, overpass_data):
        result = convert_elements(overpass_data)
        buildings = _by_id(result.buildings)
        assert set(buildings) == {"way/100", "relation/200"}

        church = buildings["way/100"]
        assert church.name == "Santa Maria"
        assert church.geometry["type"] == "Polygon"
        ring = church.geometry["coordinates"][0]
        assert len(ring) == 7
        assert ring[0] == ring[-1]

    def test_relation_keeps_only_closed_outer_rings(self, overpass_data):
        cathedral = _by_id(convert_elements(overpass_data).buildings)["relation/200"]
        assert cathedral.name == "St Paul"
        assert cathedral.geometry["type"] == "MultiPolygon"
        # inner way 202 and open outer way 203 are not part of the geometry
        assert len(cathedral.geometry["coordinates"]) == 1
        assert len(cathedral.geometry["coordinates"][0]) == 1
        assert cathedral.geometry["coordinates"][0][0] == rectangle(9.2000, 45.4700, 9.2002, 45.4710)

    def test_unresolved_node_refs_are_dropped(self):
        data = {"elements": [
            {"type": "way", "id": 1, "nodes": [1, 2, 99, 3, 4, 1], "tags": {"building": "church"}},
            {"type": "node", "id": 1, "lon": 0.0, "lat": 0.0},
            {"type": "node", "id": 2, "lon": 1.0, "lat": 0.0},
            {"type": "node", "id": 3, "lon": 1.0, "lat": 1.0},
            {"type": "node", "id": 4, "lon": 0.0, "lat": 1.0},
        ]}
        buildings = convert_elements(data).buildings
        assert len(buildings) == 1
        assert buildings[0].geometry["coordinates"][0] == rectangle(0.0, 0.0, 1.0, 1.0)

    def test_ring_that_loses_its_closure_is_skipped(self):
        data = {"elements": [
            {"type": "way", "id": 1, "nodes": [1, 2, 3, 4, 99], "tags": {"building": "church"}},
            {"type": "node", "id": 1, "lon": 0.0, "lat": 0.0},
            {"type": "node", "id": 2, "lon": 1.0, "lat": 0.0},
            {"type": "node", "id": 3, "lon": 1.0, "lat": 1.0},
            {"type": "node", "id": 4, "lon": 0.0, "lat": 1.0},
        ]}
        assert convert_elements(data).buildings == []

    def test_relation_must_be_multipolygon(self, overpass_data):
        for element in overpass_data["elements"]:
            if element["type"] == "relation":
                element["tags"]["type"] = "building"
        assert "relation/200" not in _by_id(convert_elements(overpass_data).buildings)

    def test_configured_building_values(self, overpass_data, config):
        config.church_building_values = ["church_hall"]
        nodes, ways, relations = OSMResponseParser.parse_elements(overpass_data)
        buildings = BuildingProcessor(config).parse_buildings(nodes, ways, relations)
        assert [b.id for b in buildings] == ["way/500"]

    def test_empty_input(self):
        result = convert_elements({"elements": []})
        assert result.buildings == []
        assert result.entrances == []


class TestClosedRing:
    @pytest.mark.parametrize("ring,expected", [
        (None, False),
        ([], False),
        ([[0, 0], [1, 0], [0, 0]], False),
        ([[0, 0], [1, 0], [1, 1], [0, 0]], True),
        ([[0, 0], [1, 0], [1, 1], [0, 1]], False),
        ([[0, 0], [1, 0], [1, 1], [0, 1e-12]], False),
    ])
    def test_is_closed_ring(self, ring, expected):
        assert is_closed_ring(ring) is expected


class TestEntrances:
    def test_extracts_main_and_yes(self, overpass_data):
        entrances = convert_elements(overpass_data).entrances
        kinds = {e.id: e.kind for e in entrances}
        assert kinds == {5: "main", 6: "yes"}
        main = next(e for e in entrances if e.id == 5)
        assert (main.lon, main.lat) == (9.1900, 45.4641)
        assert main.is_main

    def test_only_recognized_values(self, config):
        nodes, _, _ = OSMResponseParser.parse_elements({"elements": [
            {"type": "node", "id": 1, "lon": 0, "lat": 0, "tags": {"entrance": "MAIN"}},
            {"type": "node", "id": 2, "lon": 0, "lat": 0, "tags": {"entrance": "emergency"}},
            {"type": "node", "id": 3, "lon": 0, "lat": 0},
        ]})
        entrances = EntranceProcessor(config).parse_entrances(nodes)
        assert [(e.id, e.kind) for e in entrances] == [(1, "main")]
