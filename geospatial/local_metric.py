"""
Local Flat-Earth Distance Metric.

This module approximates distances between longitude/latitude positions by
linearising the Earth's surface around an anchor latitude. Each query is a
handful of multiplications, which is what per-feature style evaluation
needs.

Scientific Context
------------------
Domain: Local surface geometry
Model: Equirectangular scaling, exact at the anchor latitude

Within a few hundred kilometres of the anchor latitude the relative error
stays well under 1%. Far from it the error grows, because the east-west
scale is frozen at cos(anchor). Build a new metric for each geometry being
measured rather than sharing one across latitudes.

Implementation
--------------
Deltas in degrees are multiplied by per-axis scale factors (``kx``, ``ky``)
to obtain planar offsets in the requested unit. Longitude deltas are
wrapped into [-180, 180] so that lines crossing the antimeridian measure
the short way round.
"""

from dataclasses import dataclass
from typing import Sequence
import numpy as np

from common.config import DistanceConfig, EarthModel
from common.types import Position
from common.units import DistanceUnit
from geospatial.coordinate_models import meters_per_degree


def wrap_longitude(delta_deg: float) -> float:
    """Wrap a longitude difference into [-180, 180]."""
    while delta_deg < -180.0:
        delta_deg += 360.0
    while delta_deg > 180.0:
        delta_deg -= 360.0
    return delta_deg


@dataclass(frozen=True)
class PointOnLine:
    """Result of projecting a position onto a polyline.

    Attributes
    ----------
    point : Position
        Nearest position on the line.
    index : int
        Index of the segment containing ``point``.
    t : float
        Parameter of ``point`` along that segment, clamped to [0, 1].
    """
    point: Position
    index: int
    t: float


class LocalDistanceMetric:
    """Flat-earth distance approximation anchored at one latitude.

    Parameters
    ----------
    anchor_latitude : float
        Latitude in degrees at which the approximation is exact.
    unit : DistanceUnit
        Unit of every distance returned.
    earth_model : EarthModel
        Earth figure supplying the per-degree scale.

    Examples
    --------
    >>> metric = LocalDistanceMetric(0.0)
    >>> round(metric.distance((0.0, 0.0), (0.0, 1.0)))
    111195
    """

    def __init__(
        self,
        anchor_latitude: float,
        unit: DistanceUnit = DistanceUnit.METERS,
        earth_model: EarthModel = EarthModel.SPHERE
    ):
        self.anchor_latitude = float(anchor_latitude)
        self.unit = unit
        self.earth_model = earth_model

        mx, my = meters_per_degree(self.anchor_latitude, earth_model)
        self.kx = mx * unit.per_meter
        self.ky = my * unit.per_meter

    def __repr__(self) -> str:
        return (
            f"LocalDistanceMetric(anchor_latitude={self.anchor_latitude}, "
            f"unit={self.unit.name}, earth_model={self.earth_model.name})"
        )

    def distance(self, a: Position, b: Position) -> float:
        """Distance between two positions in the metric's unit."""
        dx = wrap_longitude(a[0] - b[0]) * self.kx
        dy = (a[1] - b[1]) * self.ky
        return float(np.sqrt(dx * dx + dy * dy))

    def line_distance(self, line: Sequence[Position]) -> float:
        """Total length of a polyline."""
        total = 0.0
        for i in range(len(line) - 1):
            total += self.distance(line[i], line[i + 1])
        return total

    def point_on_line(self, line: Sequence[Position], p: Position) -> PointOnLine:
        """Find the position on a polyline closest to ``p``.

        Parameters
        ----------
        line : Sequence[Position]
            Polyline vertices; at least one.
        p : Position
            Query position.

        Returns
        -------
        PointOnLine
            Nearest position, its segment index and segment parameter.

        Notes
        -----
        The projection is computed in the scaled plane, so "nearest" is
        with respect to this metric, not the geodesic.
        """
        if len(line) == 1:
            return PointOnLine(point=(float(line[0][0]), float(line[0][1])), index=0, t=0.0)

        min_dist = np.inf
        min_x = min_y = 0.0
        min_i = 0
        min_t = 0.0

        for i in range(len(line) - 1):
            x, y = line[i]
            dx = wrap_longitude(line[i + 1][0] - x) * self.kx
            dy = (line[i + 1][1] - y) * self.ky
            t = 0.0

            if dx != 0.0 or dy != 0.0:
                t = (
                    wrap_longitude(p[0] - x) * self.kx * dx
                    + (p[1] - y) * self.ky * dy
                ) / (dx * dx + dy * dy)

                if t > 1.0:
                    x, y = line[i + 1]
                elif t > 0.0:
                    x += (dx / self.kx) * t
                    y += (dy / self.ky) * t

            dx = wrap_longitude(p[0] - x) * self.kx
            dy = (p[1] - y) * self.ky
            sq_dist = dx * dx + dy * dy

            if sq_dist < min_dist:
                min_dist = sq_dist
                min_x, min_y = x, y
                min_i = i
                min_t = t

        return PointOnLine(
            point=(float(min_x), float(min_y)),
            index=min_i,
            t=float(min(max(min_t, 0.0), 1.0)),
        )

    def nearest_point_on_segment(self, p: Position, a: Position, b: Position) -> Position:
        """Closest position to ``p`` on the segment ``a``-``b``."""
        return self.point_on_line((a, b), p).point


def metric_for(
    anchor_latitude: float,
    unit: DistanceUnit = DistanceUnit.METERS,
    config: DistanceConfig = DistanceConfig()
) -> LocalDistanceMetric:
    """Build a fresh metric for one top-level distance query.

    Metrics are cheap and never cached, so a metric can never be reused at
    the wrong latitude.
    """
    return LocalDistanceMetric(anchor_latitude, unit, config.earth_model)
