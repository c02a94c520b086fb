"""
Tile-Local to Geographic Coordinate Conversion.

Vector tile features store integer coordinates relative to the tile's
top-left corner, in units of 1/extent of the tile edge. This module turns
those coordinates into WGS84 longitude/latitude geometries.

Implementation
--------------
Tile-local coordinates are first placed on the Web Mercator plane
(EPSG:3857) using the tile's zoom level and column/row, then transformed to
EPSG:4326 with `pyproj`.

References
----------
- Mapbox Vector Tile Specification 2.1
- EPSG:3857, WGS 84 / Pseudo-Mercator
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Tuple
import numpy as np

from pyproj import Transformer

from common.constants import PhysicalConstants
from common.logging_config import get_logger
from common.types import (
    Geometry,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

logger = get_logger(__name__)

TilePoint = Tuple[int, int]  # (x, y) in tile-local units, y pointing down
TileRing = List[TilePoint]


class FeatureType(Enum):
    """Geometry type of a vector tile feature."""

    UNKNOWN = 0
    POINT = 1
    LINESTRING = 2
    POLYGON = 3


@dataclass(frozen=True)
class CanonicalTileID:
    """Identity of a tile in the z/x/y tiling scheme.

    Attributes
    ----------
    z : int
        Zoom level.
    x : int
        Column, 0 at the antimeridian going east.
    y : int
        Row, 0 at the northern edge going south.
    """
    z: int
    x: int
    y: int

    def __post_init__(self):
        """Validate tile coordinate ranges."""
        if not 0 <= self.z <= PhysicalConstants.MAX_ZOOM_LEVEL:
            raise ValueError(
                f"Zoom {self.z} out of range [0, {PhysicalConstants.MAX_ZOOM_LEVEL}]"
            )
        tiles = 1 << self.z
        if not (0 <= self.x < tiles and 0 <= self.y < tiles):
            raise ValueError(f"Tile {self.z}/{self.x}/{self.y} does not exist")

    def __str__(self) -> str:
        return f"{self.z}/{self.x}/{self.y}"


class TileFeature(ABC):
    """Interface of a feature read from a vector tile."""

    @property
    @abstractmethod
    def feature_type(self) -> FeatureType:
        """Geometry type of the feature."""
        pass

    @property
    @abstractmethod
    def geometries(self) -> Sequence[TileRing]:
        """Tile-local geometry as a list of rings (or lines, or point groups)."""
        pass


@dataclass
class VectorTileFeature(TileFeature):
    """In-memory tile feature.

    Attributes
    ----------
    type : FeatureType
        Geometry type of the feature.
    rings : list of list of (int, int)
        Tile-local geometry.
    properties : dict
        Feature properties.
    id : optional
        Feature identifier.
    """
    type: FeatureType
    rings: List[TileRing]
    properties: Dict[str, Any] = field(default_factory=dict)
    id: Optional[Any] = None

    @property
    def feature_type(self) -> FeatureType:
        return self.type

    @property
    def geometries(self) -> Sequence[TileRing]:
        return self.rings


@lru_cache(maxsize=1)
def _mercator_to_lonlat() -> Transformer:
    return Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


def tile_points_to_lonlat(
    points: Sequence[TilePoint],
    canonical: CanonicalTileID,
    extent: int = PhysicalConstants.DEFAULT_TILE_EXTENT
) -> List[Tuple[float, float]]:
    """Convert tile-local points to (longitude, latitude) pairs.

    Parameters
    ----------
    points : Sequence[TilePoint]
        Tile-local coordinates.
    canonical : CanonicalTileID
        The tile the points belong to.
    extent : int
        Tile-local units per tile edge.

    Returns
    -------
    List[Tuple[float, float]]
        Longitude/latitude in degrees.
    """
    if not points:
        return []

    half = PhysicalConstants.WEB_MERCATOR_HALF_EXTENT.value
    world_size = float(extent) * (1 << canonical.z)
    x0 = float(extent) * canonical.x
    y0 = float(extent) * canonical.y

    local = np.asarray(points, dtype=np.float64)
    xs = (x0 + local[:, 0]) / world_size * 2.0 * half - half
    ys = half - (y0 + local[:, 1]) / world_size * 2.0 * half

    lons, lats = _mercator_to_lonlat().transform(xs, ys)
    return [(float(lon), float(lat)) for lon, lat in zip(lons, lats)]


def _signed_area(ring: Sequence[TilePoint]) -> float:
    area = 0.0
    n = len(ring)
    for i in range(n):
        x1, y1 = ring[i]
        x2, y2 = ring[(i + 1) % n]
        area += (x2 - x1) * (y1 + y2)
    return area


def classify_rings(rings: Sequence[TileRing]) -> List[List[TileRing]]:
    """Group polygon rings into polygons.

    The winding of the first non-degenerate ring marks exterior rings;
    every following ring with the same winding starts a new polygon, and
    rings with the opposite winding are holes of the current polygon.
    Zero-area rings are dropped.
    """
    polygons: List[List[TileRing]] = []
    polygon: List[TileRing] = []
    exterior_ccw: Optional[bool] = None

    for ring in rings:
        area = _signed_area(ring)
        if area == 0:
            continue
        ccw = area < 0
        if exterior_ccw is None:
            exterior_ccw = ccw
        if ccw == exterior_ccw and polygon:
            polygons.append(polygon)
            polygon = []
        polygon.append(ring)

    if polygon:
        polygons.append(polygon)
    return polygons


def convert_geometry(
    feature: TileFeature,
    canonical: CanonicalTileID,
    extent: int = PhysicalConstants.DEFAULT_TILE_EXTENT
) -> Optional[Geometry]:
    """Convert a tile feature's geometry to longitude/latitude.

    Parameters
    ----------
    feature : TileFeature
        Feature read from the tile.
    canonical : CanonicalTileID
        The tile the feature belongs to.
    extent : int
        Tile-local units per tile edge.

    Returns
    -------
    Geometry or None
        Point/MultiPoint, LineString/MultiLineString or Polygon/MultiPolygon
        depending on the feature type and how many parts it has. ``None``
        for unknown feature types or empty geometries.
    """
    def convert(ring):
        return tile_points_to_lonlat(ring, canonical, extent)

    feature_type = feature.feature_type
    rings = feature.geometries

    if feature_type is FeatureType.POINT:
        points = [p for ring in rings for p in convert(ring)]
        if not points:
            return None
        return Point(points[0]) if len(points) == 1 else MultiPoint(tuple(points))

    if feature_type is FeatureType.LINESTRING:
        lines = [LineString(tuple(convert(ring))) for ring in rings if len(ring) >= 2]
        if not lines:
            return None
        return lines[0] if len(lines) == 1 else MultiLineString(tuple(lines))

    if feature_type is FeatureType.POLYGON:
        polygons = [
            Polygon(tuple(tuple(convert(ring)) for ring in polygon))
            for polygon in classify_rings(rings)
        ]
        if not polygons:
            return None
        return polygons[0] if len(polygons) == 1 else MultiPolygon(tuple(polygons))

    logger.debug(f"Feature of type {feature_type.name} in tile {canonical} has no geometry")
    return None
