"""
Principal-axis orientation of building footprints

The long axis of a footprint is estimated with a 2D PCA of its vertices and
reported as a compass bearing (0 = north, 90 = east, clockwise).
"""

import math
from typing import Sequence

import numpy as np

from .geometry_utils import normalize_deg

# Below this both eigenvector components count as zero (degree^2 units)
EIGENVECTOR_EPS = 1e-9


def pca_orientation_deg(coords: Sequence[Sequence[float]]) -> float:
    """
    Bearing of the dominant principal axis of a lon/lat point set

    Longitude is scaled by cos(mean latitude) so both axes are roughly equidistant
    before the covariance is taken. The 2x2 eigen-problem is solved in closed form.

    Args:
        coords: [[lon, lat], ...]

    Returns:
        Bearing in [0, 360); 0.0 for fewer than 2 points
    """
    if len(coords) < 2:
        return 0.0

    pts = np.asarray(coords, dtype=float)[:, :2]
    lat0 = float(pts[:, 1].mean())
    kx = math.cos(math.radians(lat0))

    x = pts[:, 0] * kx
    y = pts[:, 1]
    dx = x - x.mean()
    dy = y - y.mean()

    # Population covariance [[sxx, sxy], [sxy, syy]]
    sxx = float(np.mean(dx * dx))
    syy = float(np.mean(dy * dy))
    sxy = float(np.mean(dx * dy))

    tr = sxx + syy
    det = sxx * syy - sxy * sxy
    lambda1 = tr / 2 + math.sqrt(max(0.0, tr * tr / 4 - det))

    # (A - lambda1 I) v = 0
    vx = lambda1 - syy
    vy = sxy
    if abs(vx) < EIGENVECTOR_EPS and abs(vy) < EIGENVECTOR_EPS:
        vx = sxy
        vy = lambda1 - sxx

    angle_from_east = math.degrees(math.atan2(vy, vx))
    return normalize_deg(90 - angle_from_east)


def east_west_deviation(theta: float) -> float:
    """Angular distance of a bearing from the east-west axis, in [0, 90]"""
    theta = normalize_deg(theta)
    return min(abs(theta - 90), abs(theta - 270))


def axis_difference(a: float, b: float) -> float:
    """Smallest angle between two undirected axes, in [0, 90]"""
    diff = abs(normalize_deg(a) - normalize_deg(b)) % 180
    return min(diff, 180 - diff)
