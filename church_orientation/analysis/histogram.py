"""
Circular histograms (rose diagrams) of bearings
"""

import math
from typing import Iterable, List, Optional, Sequence

from ..models import HistogramBin, OrientationRow

ROW_ANGLE_FIELDS = ("orientation_deg", "pca_deg", "entrance_deg", "altar_deg", "deviation_deg")


def bin_index(angle: float, bin_width: float) -> int:
    """Sector index of an angle; any real angle maps into [0, 360)"""
    n_bins = math.ceil(360 / bin_width)
    index = int(math.floor((((angle % 360) + 360) % 360) / bin_width))
    return min(index, n_bins - 1)


def build_histogram(angles: Iterable[Optional[float]], bin_width: float = 10.0) -> List[HistogramBin]:
    """
    Bin angles into fixed-width sectors covering [0, 360)

    None, NaN and infinite entries are ignored. If bin_width does not divide 360 the
    last sector is narrower.

    Raises:
        ValueError: bin_width outside (0, 360]
    """
    if bin_width is None or not (0 < bin_width <= 360):
        raise ValueError(f"bin_width must be in (0, 360], got {bin_width}")

    n_bins = math.ceil(360 / bin_width)
    counts = [0] * n_bins
    for angle in angles:
        if angle is None or not math.isfinite(angle):
            continue
        counts[bin_index(angle, bin_width)] += 1

    return [
        HistogramBin(
            start_deg=i * bin_width,
            end_deg=min((i + 1) * bin_width, 360.0),
            count=count
        )
        for i, count in enumerate(counts)
    ]


def histogram_for_rows(
    rows: Sequence[OrientationRow],
    field: str = "orientation_deg",
    bin_width: float = 10.0
) -> List[HistogramBin]:
    """Rose diagram of one angle field across rows (missing values skipped)"""
    if field not in ROW_ANGLE_FIELDS:
        raise ValueError(f"Unknown angle field '{field}', expected one of {', '.join(ROW_ANGLE_FIELDS)}")
    return build_histogram((getattr(row, field) for row in rows), bin_width)
