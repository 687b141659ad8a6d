"""
Main Pipeline Orchestrator for Church Orientation analysis

One computation pass runs synchronously once input data is available:

  1. Input: place name, bounding box, Overpass JSON file or GeoJSON file
  2. Geocode the place name (Nominatim)
  3. Fetch church ways/relations and their nodes (Overpass API)
  4. Convert to closed polygons + entrance points
  5. Estimate centroid and PCA axis, resolve entrance/altar bearings
  6. Reconcile into one orientation row per building
  7. Replace the session's rows; histogram and export read from them

Request-level failures are reported once as an error status and leave the
previous rows untouched.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger

from .config import get_config, PipelineConfig
from .models import FetchStatus, GeocodeResult, HistogramBin, OrientationRow
from .session import OrientationSession
from .collectors import OSMCollector, NominatimGeocoder, convert_feature_collection, load_geojson
from .collectors.osm.models import ConversionResult
from .analysis import OrientationReconciler, OrientationMode, histogram_for_rows
from . import exporters


class OrientationPipeline:
    """
    Orchestrates fetch/import -> convert -> reconcile and owns the session

    Usage:
        pipeline = OrientationPipeline()
        status = pipeline.search_city("Milano")
        pipeline.export_csv("output/church_orientation.csv")
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        session: Optional[OrientationSession] = None,
        osm_collector: Optional[OSMCollector] = None,
        geocoder: Optional[NominatimGeocoder] = None,
        mode: Optional[Union[OrientationMode, str]] = None
    ):
        self.config = config or get_config()
        self.session = session or OrientationSession()
        self.osm_collector = osm_collector or OSMCollector(self.config)
        self.geocoder = geocoder or NominatimGeocoder(self.config)
        self.reconciler = OrientationReconciler(mode=mode, config=self.config)
        self.last_geocode: Optional[GeocodeResult] = None

    # ============================================================
    # Pure computation
    # ============================================================

    def compute(self, conversion: ConversionResult) -> List[OrientationRow]:
        """Reconcile converted buildings and entrances into rows (no session change)"""
        return self.reconciler.reconcile(conversion.buildings, conversion.entrances)

    def run_elements(self, data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> List[OrientationRow]:
        """Raw Overpass JSON -> rows"""
        return self.compute(self.osm_collector.convert(data))

    def run_geojson(self, data: Dict[str, Any]) -> List[OrientationRow]:
        """GeoJSON FeatureCollection -> rows (no entrance information)"""
        return self.compute(convert_feature_collection(data, self.config))

    # ============================================================
    # User actions (update the session)
    # ============================================================

    def search_city(self, query: str) -> FetchStatus:
        """Geocode a place, then search its bounding box"""
        logger.info(f"Searching for \"{query}\"")
        try:
            self.last_geocode = self.geocoder.geocode(query)
        except (RuntimeError, ValueError) as e:
            return self._fail("City search failed", e)

        return self.search_bbox(self.last_geocode.bounding_box)

    def search_bbox(self, bbox: Sequence[float]) -> FetchStatus:
        """Fetch and analyse churches inside (south, west, north, east)"""
        try:
            data = self.osm_collector.fetch_churches(bbox)
            rows = self.run_elements(data)
        except (RuntimeError, ValueError) as e:
            return self._fail("Overpass fetch failed", e)

        return self._apply(rows, f"Found {len(rows)} buildings")

    def load_osm_file(self, path: Union[str, Path]) -> FetchStatus:
        """Analyse a saved Overpass JSON response"""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            rows = self.run_elements(data)
        except (OSError, ValueError) as e:
            return self._fail("OSM file import failed", e)

        return self._apply(rows, f"Loaded {len(rows)} buildings from {Path(path).name}")

    def import_geojson(self, source: Union[str, Path, Dict[str, Any]]) -> FetchStatus:
        """Analyse a GeoJSON FeatureCollection (path or parsed object)"""
        try:
            data = source if isinstance(source, dict) else load_geojson(source)
            rows = self.run_geojson(data)
        except (OSError, ValueError) as e:
            return self._fail("Import failed", e)

        return self._apply(rows, f"Imported {len(rows)} buildings from GeoJSON")

    def select(self, row_id: Optional[str]) -> Optional[OrientationRow]:
        return self.session.select(row_id)

    # ============================================================
    # Read side: histogram and export
    # ============================================================

    def histogram(self, field: str = "orientation_deg", bin_width: Optional[float] = None) -> List[HistogramBin]:
        """Rose diagram bins of the current rows"""
        width = bin_width or self.config.histogram_bin_width_deg
        return histogram_for_rows(self.session.rows, field=field, bin_width=width)

    def export_csv(self, output_path: Optional[str] = None) -> str:
        rows = self._rows_for_export()
        path = output_path or str(Path(self.config.output_dir) / self.config.csv_filename)
        return exporters.write_csv(rows, path)

    def export_geojson(self, output_path: Optional[str] = None) -> str:
        rows = self._rows_for_export()
        path = output_path or str(Path(self.config.output_dir) / self.config.geojson_filename)
        return exporters.write_geojson(rows, path)

    # ============================================================
    # Helper Methods
    # ============================================================

    def _rows_for_export(self) -> List[OrientationRow]:
        if not self.session.has_rows:
            raise ValueError("No data to export. Run a search or import first.")
        return self.session.rows

    def _apply(self, rows: List[OrientationRow], message: str) -> FetchStatus:
        self.session.replace_rows(rows)
        logger.info(message)
        return self.session.set_status("success", message, count=len(rows))

    def _fail(self, prefix: str, error: Exception) -> FetchStatus:
        message = f"{prefix}: {error}"
        logger.error(message)
        return self.session.set_status("error", message, count=len(self.session.rows))
