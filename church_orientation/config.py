"""
Configuration settings for Church Orientation Explorer
"""

from dataclasses import dataclass, field
from typing import List, Tuple


ORIENTATION_MODES = ("altar", "entrance", "pca")


@dataclass
class APIConfig:
    """API endpoints and configuration"""
    # Overpass API (OSM)
    # Mirror: https://overpass.kumi.systems/api/interpreter
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout: int = 60  # Server-side [timeout:] of the QL query

    # Nominatim (geocoding)
    nominatim_url: str = "https://nominatim.openstreetmap.org"
    accept_language: str = "en"

    # Request settings
    request_timeout: int = 90
    max_retries: int = 1  # 1 = a single attempt, failures surface immediately
    retry_delay: float = 5.0

    # User agent for API requests
    user_agent: str = "church-orientation-explorer/1.0"


@dataclass
class PipelineConfig:
    """Pipeline configuration"""
    # Which signal becomes orientation_deg: "altar", "entrance" or "pca".
    # Falls back to the PCA axis when the chosen signal is unavailable.
    orientation_mode: str = "altar"

    # Rose diagram sector width (degrees)
    histogram_bin_width_deg: float = 10.0

    # Length of the orientation arrow drawn from each centroid (meters)
    arrow_length_m: float = 70.0

    # OSM building=* values treated as churches (case-insensitive)
    church_building_values: List[str] = field(default_factory=lambda: [
        "church",
        "cathedral",
    ])

    # OSM entrance=* values, strongest signal first
    entrance_values: List[str] = field(default_factory=lambda: [
        "main",
        "yes",
    ])

    # Tags tried in order when naming a building
    name_tags: List[str] = field(default_factory=lambda: [
        "name",
        "name:en",
        "name:it",
        "name:ja",
        "addr:housename",
    ])
    unnamed_label: str = "(no name)"

    # Output settings
    output_dir: str = "output"
    csv_filename: str = "church_orientation.csv"
    geojson_filename: str = "church_orientation.geojson"

    # Initial view (lat, lon) used when no data has been loaded yet
    default_center: Tuple[float, float] = (45.4642, 9.19)

    # API config
    api: APIConfig = field(default_factory=APIConfig)


# Global config instance
config = PipelineConfig()


def get_config() -> PipelineConfig:
    """Get global configuration"""
    return config


def validate_config(config: PipelineConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if config.orientation_mode not in ORIENTATION_MODES:
        errors.append(
            f"orientation_mode must be one of {', '.join(ORIENTATION_MODES)}, "
            f"got {config.orientation_mode!r}"
        )

    width = config.histogram_bin_width_deg
    if width is None or width <= 0 or width > 360:
        errors.append(f"histogram_bin_width_deg must be in (0, 360], got {width}")

    if config.arrow_length_m is None or config.arrow_length_m <= 0:
        errors.append(f"arrow_length_m must be positive, got {config.arrow_length_m}")

    if not config.church_building_values:
        errors.append("church_building_values must list at least one building value")

    if not config.name_tags:
        errors.append("name_tags must list at least one tag")

    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.overpass_url:
            errors.append("api.overpass_url is required but not set")
        if not config.api.nominatim_url:
            errors.append("api.nominatim_url is required but not set")
        if config.api.request_timeout <= 0:
            errors.append(f"api.request_timeout must be positive, got {config.api.request_timeout}")
        if config.api.overpass_timeout <= 0:
            errors.append(f"api.overpass_timeout must be positive, got {config.api.overpass_timeout}")
        if config.api.max_retries < 1:
            errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
