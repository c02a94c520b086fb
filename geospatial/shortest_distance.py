"""
Shortest Distances Between Point and Line Geometries.

This module computes the minimum distance between a feature geometry and a
reference geometry for every pairing of Point, MultiPoint, LineString and
MultiLineString.

Conventions
-----------
- Distances are non-negative and expressed in the metric's unit.
- 0.0 is absorbing: as soon as a candidate distance is zero the search
  stops, since nothing can be closer.
- ``NOT_COMPUTABLE`` (-1.0) is returned for shapes outside the four
  supported ones. It is never a valid distance, so callers must test for
  it before comparing against zero.
- A fresh ``LocalDistanceMetric`` is built per top-level query, anchored at
  the point being measured or at the first vertex of the line being
  measured.
"""

from typing import Iterable, Sequence
import numpy as np

from common.config import DistanceConfig
from common.types import (
    Geometry,
    LineString,
    MultiLineString,
    MultiPoint,
    Point,
    Position,
)
from common.units import DistanceUnit
from geospatial.intersection import segments_intersect
from geospatial.local_metric import LocalDistanceMetric, metric_for


NOT_COMPUTABLE = -1.0


def _minimum(distances: Iterable[float]) -> float:
    """Smallest of ``distances``, stopping early on zero."""
    best = np.inf
    for distance in distances:
        if distance == 0.0:
            return 0.0
        best = min(best, distance)
    return float(best)


def point_to_line(
    point: Position,
    line: Sequence[Position],
    metric: LocalDistanceMetric
) -> float:
    """Distance from a position to the nearest point of a polyline."""
    nearest = metric.point_on_line(line, point).point
    return metric.distance(point, nearest)


def point_to_multi_line(
    point: Position,
    lines: Iterable[Sequence[Position]],
    metric: LocalDistanceMetric
) -> float:
    """Distance from a position to the nearest of several polylines."""
    return _minimum(point_to_line(point, line, metric) for line in lines)


def point_to_multi_point(
    point: Position,
    points: Iterable[Position],
    metric: LocalDistanceMetric
) -> float:
    """Distance from a position to the nearest of several positions."""
    return _minimum(metric.distance(point, other) for other in points)


def line_to_line(
    line1: Sequence[Position],
    line2: Sequence[Position],
    metric: LocalDistanceMetric
) -> float:
    """Minimum distance between two polylines.

    Parameters
    ----------
    line1, line2 : Sequence[Position]
        Polyline vertices.
    metric : LocalDistanceMetric
        Metric used for every point-to-segment distance.

    Returns
    -------
    float
        0.0 if any pair of segments crosses, otherwise the smallest
        endpoint-to-opposite-segment distance over all segment pairs.

    Notes
    -----
    For two segments that do not cross, the closest pair of points always
    involves at least one endpoint, so four endpoint-to-segment distances
    per segment pair are sufficient.
    """
    dist = np.inf
    for i in range(len(line1) - 1):
        p1 = line1[i]
        p2 = line1[i + 1]
        for j in range(len(line2) - 1):
            q1 = line2[j]
            q2 = line2[j + 1]
            if segments_intersect(p1, p2, q1, q2):
                return 0.0
            dist = min(
                dist,
                point_to_line(p1, (q1, q2), metric),
                point_to_line(p2, (q1, q2), metric),
                point_to_line(q1, (p1, p2), metric),
                point_to_line(q2, (p1, p2), metric),
            )
    return float(dist)


def point_distance_to_geometry(
    point: Position,
    reference: Geometry,
    unit: DistanceUnit = DistanceUnit.METERS,
    config: DistanceConfig = DistanceConfig()
) -> float:
    """Distance from a feature position to a reference geometry.

    The metric is anchored at the position's latitude.
    """
    metric = metric_for(point[1], unit, config)

    if isinstance(reference, Point):
        return metric.distance(point, reference.coordinates)
    if isinstance(reference, MultiPoint):
        return point_to_multi_point(point, reference.coordinates, metric)
    if isinstance(reference, LineString):
        return point_to_line(point, reference.coordinates, metric)
    if isinstance(reference, MultiLineString):
        return point_to_multi_line(
            point, (line.coordinates for line in reference.lines), metric
        )
    return NOT_COMPUTABLE


def line_distance_to_geometry(
    line: Sequence[Position],
    reference: Geometry,
    unit: DistanceUnit = DistanceUnit.METERS,
    config: DistanceConfig = DistanceConfig()
) -> float:
    """Distance from a feature polyline to a reference geometry.

    The metric is anchored at the latitude of the polyline's first vertex.
    """
    if not line:
        raise ValueError("Cannot measure distance from an empty line")

    metric = metric_for(line[0][1], unit, config)

    if isinstance(reference, Point):
        return point_to_line(reference.coordinates, line, metric)
    if isinstance(reference, MultiPoint):
        return _minimum(point_to_line(p, line, metric) for p in reference.coordinates)
    if isinstance(reference, LineString):
        return line_to_line(line, reference.coordinates, metric)
    if isinstance(reference, MultiLineString):
        return _minimum(
            line_to_line(line, other.coordinates, metric) for other in reference.lines
        )
    return NOT_COMPUTABLE


def calculate_distance(
    feature: Geometry,
    reference: Geometry,
    unit: DistanceUnit = DistanceUnit.METERS,
    config: DistanceConfig = DistanceConfig()
) -> float:
    """Minimum distance between a feature geometry and a reference geometry.

    Parameters
    ----------
    feature : Geometry
        Feature geometry in longitude/latitude.
    reference : Geometry
        Reference geometry in longitude/latitude.
    unit : DistanceUnit
        Unit of the result.
    config : DistanceConfig
        Supplies the Earth model.

    Returns
    -------
    float
        Minimum distance, or ``NOT_COMPUTABLE`` when either geometry is not
        a point or line shape.

    Examples
    --------
    >>> round(calculate_distance(Point((0, 0)), Point((0, 1))))
    111195
    """
    if isinstance(feature, Point):
        return point_distance_to_geometry(feature.coordinates, reference, unit, config)
    if isinstance(feature, MultiPoint):
        return _minimum(
            point_distance_to_geometry(p, reference, unit, config)
            for p in feature.coordinates
        )
    if isinstance(feature, LineString):
        return line_distance_to_geometry(feature.coordinates, reference, unit, config)
    if isinstance(feature, MultiLineString):
        return _minimum(
            line_distance_to_geometry(line.coordinates, reference, unit, config)
            for line in feature.lines
        )
    return NOT_COMPUTABLE
