"""Tests for the shortest-distance algorithms and their dispatch."""

import pytest

from common.config import DistanceConfig, EarthModel
from common.types import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from common.units import DistanceUnit
from geospatial.local_metric import LocalDistanceMetric
from geospatial.shortest_distance import (
    NOT_COMPUTABLE,
    calculate_distance,
    line_distance_to_geometry,
    line_to_line,
    point_distance_to_geometry,
    point_to_line,
    point_to_multi_line,
    point_to_multi_point,
)


SQUARE = Polygon((((0, 0), (1, 0), (1, 1), (0, 1), (0, 0)),))


@pytest.fixture
def equator_metric():
    return LocalDistanceMetric(0.0)


class TestPointAlgorithms:

    def test_point_to_line(self, equator_metric):
        line = [(0.0, 0.0), (2.0, 0.0)]
        assert point_to_line((1.0, 1.0), line, equator_metric) == pytest.approx(equator_metric.ky)

    def test_point_on_line_is_zero(self, equator_metric):
        assert point_to_line((0.0, 0.0), [(0.0, 0.0), (1.0, 1.0)], equator_metric) == 0.0

    def test_point_to_multi_point(self, equator_metric):
        points = [(0.0, 2.0), (0.0, 1.0), (3.0, 3.0)]
        assert point_to_multi_point((0.0, 0.0), points, equator_metric) == pytest.approx(equator_metric.ky)

    def test_point_to_multi_point_stops_at_zero(self, equator_metric):
        points = iter([(5.0, 5.0), (0.0, 0.0), "never read"])
        assert point_to_multi_point((0.0, 0.0), points, equator_metric) == 0.0

    def test_point_to_multi_line(self, equator_metric):
        lines = [
            [(0.0, 3.0), (1.0, 3.0)],
            [(0.0, -2.0), (1.0, -2.0)],
        ]
        assert point_to_multi_line((0.5, 0.0), lines, equator_metric) == pytest.approx(2 * equator_metric.ky)

    def test_empty_collections_are_infinitely_far(self, equator_metric):
        assert point_to_multi_point((0.0, 0.0), [], equator_metric) == float("inf")


class TestLineToLine:

    def test_crossing_lines_are_zero(self, equator_metric):
        assert line_to_line([(0, 0), (1, 1)], [(0, 1), (1, 0)], equator_metric) == 0.0

    def test_parallel_lines(self, equator_metric):
        assert line_to_line([(0, 0), (1, 0)], [(0, 1), (1, 1)], equator_metric) == pytest.approx(equator_metric.ky)

    def test_touching_lines_are_zero_through_point_distance(self, equator_metric):
        assert line_to_line([(0, 0), (2, 0)], [(1, 0), (1, 1)], equator_metric) == pytest.approx(0.0, abs=1e-6)

    def test_crossing_in_later_segments(self, equator_metric):
        line1 = [(-5, -5), (-4, -5), (0, 0), (1, 1)]
        line2 = [(10, 10), (0, 1), (1, 0)]
        assert line_to_line(line1, line2, equator_metric) == 0.0

    def test_equals_minimum_of_endpoint_distances(self, equator_metric):
        p1, p2 = (0.0, 0.0), (4.0, 1.0)
        q1, q2 = (1.0, 3.0), (5.0, 2.5)
        expected = min(
            point_to_line(p1, (q1, q2), equator_metric),
            point_to_line(p2, (q1, q2), equator_metric),
            point_to_line(q1, (p1, p2), equator_metric),
            point_to_line(q2, (p1, p2), equator_metric),
        )
        assert line_to_line([p1, p2], [q1, q2], equator_metric) == pytest.approx(expected)

    def test_second_endpoint_of_other_line_is_considered(self, equator_metric):
        # The closest approach is from q2 = (5, 0.5) down to (5, 0). Measuring
        # q1 twice and skipping q2 would report about 1.9 degrees instead.
        line1 = [(0.0, 0.0), (10.0, 0.0)]
        line2 = [(20.0, 5.0), (5.0, 0.5)]
        assert line_to_line(line1, line2, equator_metric) == pytest.approx(0.5 * equator_metric.ky)


class TestPointDispatch:

    def test_point_to_point(self):
        assert point_distance_to_geometry((0.0, 0.0), Point((0.0, 1.0))) == pytest.approx(111_195, rel=0.005)

    def test_anchored_at_point_latitude(self):
        distance = point_distance_to_geometry((0.0, 60.0), Point((1.0, 60.0)))
        assert distance == pytest.approx(111_195.08 / 2, rel=1e-6)

    def test_multi_point_reference(self):
        reference = MultiPoint(((0.0, 3.0), (0.0, 1.0)))
        assert point_distance_to_geometry((0.0, 0.0), reference) == pytest.approx(111_195.08, rel=1e-6)

    def test_multi_line_reference(self):
        reference = MultiLineString((
            LineString(((-1.0, 2.0), (1.0, 2.0))),
            LineString(((-1.0, 1.0), (1.0, 1.0))),
        ))
        assert point_distance_to_geometry((0.0, 0.0), reference) == pytest.approx(111_195.08, rel=1e-6)

    def test_polygon_reference_is_not_computable(self):
        assert point_distance_to_geometry((0.0, 0.0), SQUARE) == NOT_COMPUTABLE


class TestLineDispatch:

    def test_anchored_at_first_vertex(self):
        distance = line_distance_to_geometry([(0.0, 60.0), (0.0, 61.0)], Point((1.0, 60.0)))
        assert distance == pytest.approx(111_195.08 / 2, rel=1e-6)

    def test_multi_point_reference(self):
        reference = MultiPoint(((5.0, 5.0), (0.5, 1.0)))
        distance = line_distance_to_geometry([(0.0, 0.0), (1.0, 0.0)], reference)
        assert distance == pytest.approx(111_195.08, rel=1e-6)

    def test_multi_line_reference_stops_at_crossing(self):
        reference = MultiLineString((
            LineString(((10.0, 10.0), (11.0, 11.0))),
            LineString(((0.0, 1.0), (1.0, 0.0))),
        ))
        assert line_distance_to_geometry([(0.0, 0.0), (1.0, 1.0)], reference) == 0.0

    def test_polygon_reference_is_not_computable(self):
        assert line_distance_to_geometry([(0.0, 0.0), (1.0, 1.0)], SQUARE) == NOT_COMPUTABLE

    def test_empty_line_is_rejected(self):
        with pytest.raises(ValueError):
            line_distance_to_geometry([], Point((0.0, 0.0)))


class TestCalculateDistance:

    def test_one_degree_north(self):
        assert calculate_distance(Point((0, 0)), Point((0, 1))) == pytest.approx(111_195, rel=0.005)

    def test_crossing_diagonals(self):
        feature = LineString(((0, 0), (1, 1)))
        reference = LineString(((0, 1), (1, 0)))
        assert calculate_distance(feature, reference) == 0.0

    @pytest.mark.parametrize("geometry", [
        Point((3.0, 4.0)),
        LineString(((3.0, 4.0), (3.5, 4.5))),
    ])
    def test_distance_to_itself_is_zero(self, geometry):
        assert calculate_distance(geometry, geometry) == 0.0

    def test_multi_point_feature(self):
        feature = MultiPoint(((0.0, 5.0), (0.0, 2.0)))
        assert calculate_distance(feature, Point((0.0, 0.0))) == pytest.approx(2 * 111_195.08, rel=1e-6)

    def test_multi_line_feature(self):
        feature = MultiLineString((
            LineString(((0.0, 5.0), (1.0, 5.0))),
            LineString(((0.0, 1.0), (1.0, 1.0))),
        ))
        reference = LineString(((0.0, 0.0), (1.0, 0.0)))
        assert calculate_distance(feature, reference) == pytest.approx(111_195.08, rel=1e-6)

    @pytest.mark.parametrize("feature", [
        SQUARE,
        MultiPolygon((SQUARE,)),
        GeometryCollection((Point((0.0, 0.0)),)),
    ])
    def test_unsupported_feature_shapes_are_not_computable(self, feature):
        assert calculate_distance(feature, Point((0.0, 0.0))) == NOT_COMPUTABLE

    def test_kilometers_are_meters_over_a_thousand(self):
        feature, reference = Point((2.35, 48.85)), LineString(((2.0, 48.0), (2.1, 49.0)))
        meters = calculate_distance(feature, reference, DistanceUnit.METERS)
        kilometers = calculate_distance(feature, reference, DistanceUnit.KILOMETERS)
        assert kilometers == pytest.approx(meters / 1000)

    def test_earth_model_from_config(self, wgs84_geod):
        config = DistanceConfig(earth_model=EarthModel.WGS84)
        _, _, geodesic = wgs84_geod.inv(0.0, 0.0, 0.0, 1.0)
        distance = calculate_distance(Point((0, 0)), Point((0, 1)), config=config)
        assert distance == pytest.approx(geodesic, rel=1e-4)
