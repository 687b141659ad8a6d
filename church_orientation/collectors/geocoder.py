"""
Place-name geocoder using the Nominatim search API
Resolves a city or place name to a center point and bounding box
"""

from typing import Optional
import requests
from loguru import logger

from ..config import get_config, PipelineConfig
from ..models import GeocodeResult


class NominatimGeocoder:
    """Geocode place names with OpenStreetMap Nominatim"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()
        self.search_url = self.config.api.nominatim_url.rstrip("/") + "/search"

    def geocode(self, query: str) -> GeocodeResult:
        """
        Look up a place name

        Args:
            query: Free-form place name, e.g. "Milano"

        Returns:
            GeocodeResult with bounding_box as [south, west, north, east]

        Raises:
            ValueError: Empty query
            RuntimeError: Request failed or the place was not found
        """
        query = (query or "").strip()
        if not query:
            raise ValueError("Geocoding query is empty")

        logger.info(f"Nominatim search: {query}")
        try:
            response = requests.get(
                self.search_url,
                params={
                    "q": query,
                    "format": "json",
                    "addressdetails": 0,
                    "limit": 1,
                    "polygon_geojson": 0,
                },
                headers={
                    "Accept-Language": self.config.api.accept_language,
                    "User-Agent": self.config.api.user_agent,
                },
                timeout=self.config.api.request_timeout
            )
            response.raise_for_status()
            results = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Nominatim request failed: {e}")
            raise RuntimeError(f"Geocoding request failed: {e}") from e

        if not results:
            logger.warning(f"Nominatim found nothing for '{query}'")
            raise RuntimeError(f"Place not found: {query}")

        return self._parse_result(results[0], query)

    @staticmethod
    def _parse_result(item: dict, query: str) -> GeocodeResult:
        """Nominatim boundingbox is [south, north, west, east] (strings)"""
        try:
            lat = float(item["lat"])
            lon = float(item["lon"])
            south, north, west, east = (float(v) for v in item["boundingbox"])
        except (KeyError, TypeError, ValueError) as e:
            raise RuntimeError(f"Unexpected Nominatim result for '{query}': {e}") from e

        result = GeocodeResult(
            lat=lat,
            lon=lon,
            bounding_box=[south, west, north, east],
            display_name=item.get("display_name")
        )
        logger.debug(f"Geocoded '{query}' -> ({lat}, {lon}), bbox {result.bounding_box}")
        return result
