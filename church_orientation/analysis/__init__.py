"""
Analysis modules for Church Orientation Explorer
"""

from .geometry_utils import GeometryUtils, normalize_deg
from .orientation import pca_orientation_deg, east_west_deviation, axis_difference
from .reconciler import OrientationReconciler, OrientationMode, reconcile, select_orientation, synthesize_row_id
from .histogram import build_histogram, histogram_for_rows

__all__ = [
    "GeometryUtils",
    "normalize_deg",
    "pca_orientation_deg",
    "east_west_deviation",
    "axis_difference",
    "OrientationReconciler",
    "OrientationMode",
    "reconcile",
    "select_orientation",
    "synthesize_row_id",
    "build_histogram",
    "histogram_for_rows",
]
