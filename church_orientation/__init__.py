"""
Church Orientation Explorer

Estimates the compass orientation of church buildings from OpenStreetMap
footprints: PCA long axis, entrance-to-altar bearing, rose diagrams and
CSV / GeoJSON export.
"""

__version__ = "1.0.0"
