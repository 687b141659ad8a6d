"""
Data collectors for Church Orientation Explorer

- OSMCollector: Church footprints and entrances from OpenStreetMap
- NominatimGeocoder: Place name -> center and bounding box
- convert_feature_collection: GeoJSON import into the same building features
"""

from .osm import OSMCollector, convert_elements
from .geocoder import NominatimGeocoder
from .geojson_import import convert_feature_collection, load_geojson

__all__ = [
    "OSMCollector",
    "convert_elements",
    "NominatimGeocoder",
    "convert_feature_collection",
    "load_geojson",
]
