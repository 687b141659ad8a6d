"""Tests for the geometric orientation estimator."""
import math

import pytest

from church_orientation.analysis import GeometryUtils, pca_orientation_deg, east_west_deviation, axis_difference
from church_orientation.analysis.geometry_utils import normalize_deg

from conftest import rectangle


def rotate(coords, angle_deg, origin):
    """Rotate [lon, lat] points around origin (plain planar rotation)."""
    ox, oy = origin
    a = math.radians(angle_deg)
    out = []
    for x, y in coords:
        dx, dy = x - ox, y - oy
        out.append([ox + dx * math.cos(a) - dy * math.sin(a), oy + dx * math.sin(a) + dy * math.cos(a)])
    return out


# A church-like cross footprint: long nave running roughly ENE, short transept
CROSS = [
    [9.18990, 45.46410], [9.19030, 45.46414], [9.19032, 45.46404], [9.19042, 45.46405],
    [9.19040, 45.46415], [9.19070, 45.46418], [9.19068, 45.46428], [9.19038, 45.46425],
    [9.19036, 45.46435], [9.19026, 45.46434], [9.19028, 45.46424], [9.18988, 45.46420],
]


class TestPCA:
    def test_fewer_than_two_points_is_zero(self):
        assert pca_orientation_deg([]) == 0.0
        assert pca_orientation_deg([[9.19, 45.46]]) == 0.0

    def test_east_west_rectangle(self):
        ring = rectangle(9.1900, 45.4640, 9.1920, 45.4642)[:-1]
        assert pca_orientation_deg(ring) == pytest.approx(90.0, abs=1e-6)

    def test_north_south_rectangle(self):
        ring = rectangle(9.1900, 45.4640, 9.1901, 45.4660)[:-1]
        assert axis_difference(pca_orientation_deg(ring), 0.0) == pytest.approx(0.0, abs=1e-6)

    def test_result_is_in_range(self):
        for angle in range(0, 360, 15):
            bearing = pca_orientation_deg(rotate(CROSS, angle, (9.1903, 45.4642)))
            assert 0.0 <= bearing < 360.0

    def test_longitude_is_scaled_by_latitude(self):
        # 0.001 deg of longitude at 60N is about as long as 0.0005 deg of latitude;
        # the diagonal of this box is then at 45 degrees on the ground
        lat0 = 60.0
        k = math.cos(math.radians(lat0))
        pts = [[10.0, lat0], [10.0 + 0.001, lat0 + 0.001 * k]]
        assert pca_orientation_deg(pts) == pytest.approx(45.0, abs=0.1)

    def test_invariant_under_180_degree_rotation(self):
        center = (sum(p[0] for p in CROSS) / len(CROSS), sum(p[1] for p in CROSS) / len(CROSS))
        original = pca_orientation_deg(CROSS)
        rotated = pca_orientation_deg(rotate(CROSS, 180, center))
        assert axis_difference(original, rotated) == pytest.approx(0.0, abs=1e-6)

    def test_invariant_under_longitude_translation(self):
        original = pca_orientation_deg(CROSS)
        shifted = pca_orientation_deg([[x + 0.5, y] for x, y in CROSS])
        assert axis_difference(original, shifted) == pytest.approx(0.0, abs=1e-6)

    def test_small_latitude_translation_barely_changes_axis(self):
        original = pca_orientation_deg(CROSS)
        shifted = pca_orientation_deg([[x + 0.01, y + 0.01] for x, y in CROSS])
        assert axis_difference(original, shifted) < 0.1

    def test_square_is_axis_aligned(self):
        """A perfect square is ambiguous: 0 or 90 are both acceptable."""
        square = [[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]
        vertices = GeometryUtils.distinct_ring_vertices({"type": "Polygon", "coordinates": [square]})
        bearing = pca_orientation_deg(vertices)
        assert min(axis_difference(bearing, 0.0), axis_difference(bearing, 90.0)) == pytest.approx(0.0, abs=1e-6)
        deviation = east_west_deviation(bearing)
        assert deviation == pytest.approx(0.0, abs=1e-6) or deviation == pytest.approx(90.0, abs=1e-6)

    def test_degenerate_points_fall_back_to_zero_vector_branch(self):
        # All points identical: zero covariance, no error
        assert 0.0 <= pca_orientation_deg([[1.0, 1.0]] * 5) < 360.0


class TestDeviation:
    @pytest.mark.parametrize("theta,expected", [
        (90, 0), (270, 0), (0, 90), (180, 90), (360, 90),
        (87.3, 2.7), (275, 5), (45, 45), (135, 45), (-90, 0), (450, 0),
    ])
    def test_known_values(self, theta, expected):
        assert east_west_deviation(theta) == pytest.approx(expected)

    def test_always_between_0_and_90(self):
        for tenth in range(-3600, 7200, 7):
            assert 0.0 <= east_west_deviation(tenth / 10) <= 90.0


class TestBearing:
    def test_cardinal_directions(self):
        assert GeometryUtils.bearing_deg(9.19, 45.46, 9.19, 45.47) == pytest.approx(0.0, abs=1e-9)
        assert GeometryUtils.bearing_deg(9.19, 45.46, 9.20, 45.46) == pytest.approx(90.0, abs=0.01)
        assert GeometryUtils.bearing_deg(9.19, 45.46, 9.19, 45.45) == pytest.approx(180.0, abs=1e-9)
        assert GeometryUtils.bearing_deg(9.19, 45.46, 9.18, 45.46) == pytest.approx(270.0, abs=0.01)

    def test_due_east_entrance(self):
        assert GeometryUtils.bearing_deg(9.19, 45.4642, 9.191, 45.4642) == pytest.approx(90.0, abs=0.01)

    def test_normalized(self):
        assert normalize_deg(-10) == 350.0
        assert normalize_deg(720) == 0.0
        assert 0.0 <= normalize_deg(-1e-15) < 360.0


class TestCentroid:
    def test_rectangle_center_of_mass(self):
        geometry = {"type": "Polygon", "coordinates": [rectangle(9.0, 45.0, 9.2, 45.1)]}
        lon, lat = GeometryUtils.polygon_centroid(geometry)
        assert lon == pytest.approx(9.1)
        assert lat == pytest.approx(45.05)

    def test_area_weighted_for_multipolygon(self):
        big = rectangle(0.0, 0.0, 2.0, 2.0)    # area 4, center (1, 1)
        small = rectangle(10.0, 0.0, 11.0, 1.0)  # area 1, center (10.5, 0.5)
        geometry = {"type": "MultiPolygon", "coordinates": [[big], [small]]}
        lon, lat = GeometryUtils.polygon_centroid(geometry)
        assert lon == pytest.approx((4 * 1 + 1 * 10.5) / 5)
        assert lat == pytest.approx((4 * 1 + 1 * 0.5) / 5)

    def test_zero_area_falls_back_to_vertex_average(self):
        flat = [[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [0.0, 0.0]]
        lon, lat = GeometryUtils.polygon_centroid({"type": "Polygon", "coordinates": [flat]})
        assert lon == pytest.approx(1.0)
        assert lat == pytest.approx(0.0)

    def test_collect_coords_includes_holes(self):
        geometry = {"type": "Polygon", "coordinates": [
            rectangle(0, 0, 10, 10),
            rectangle(4, 4, 6, 6),
        ]}
        assert len(GeometryUtils.collect_coords(geometry)) == 10
        assert len(GeometryUtils.distinct_ring_vertices(geometry)) == 8


class TestArrow:
    def test_points_along_bearing(self):
        start, end = GeometryUtils.orientation_arrow(9.19, 45.46, 90.0, 70.0)
        assert start == [9.19, 45.46]
        assert end[0] > 9.19
        assert end[1] == pytest.approx(45.46, abs=1e-9)
        length = GeometryUtils.haversine_distance(start[1], start[0], end[1], end[0])
        assert length == pytest.approx(70.0, rel=0.01)

    def test_north(self):
        start, end = GeometryUtils.orientation_arrow(9.19, 45.46, 0.0, 100.0)
        assert end[0] == pytest.approx(9.19, abs=1e-9)
        assert end[1] > 45.46
