"""
Geometry Type Definitions for Feature Distance Evaluation.

This module defines the geometry shapes exchanged between the GeoJSON
decoder, the tile coordinate conversion and the shortest-distance
algorithms. Every shape is an immutable dataclass so that expression nodes
holding them can be compared by value and shared between threads.

Design Rationale
----------------
``Geometry`` is a closed ``Union``: code that branches on shape checks each
member explicitly and ends with a fallback for the shapes it does not
support. Adding a shape means adding it to the union and to every branch.

Coordinates are ``(longitude, latitude)`` pairs in DEGREES, following the
GeoJSON axis order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


Position = Tuple[float, float]  # (longitude, latitude) in degrees


class GeometryType(Enum):
    """Geometry type tags, valued by their GeoJSON names."""

    POINT = "Point"
    MULTI_POINT = "MultiPoint"
    LINE_STRING = "LineString"
    MULTI_LINE_STRING = "MultiLineString"
    POLYGON = "Polygon"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"


def _position(value) -> Position:
    return (float(value[0]), float(value[1]))


@dataclass(frozen=True)
class Point:
    """A single position.

    Attributes
    ----------
    coordinates : Position
        ``(longitude, latitude)`` in degrees.
    """
    coordinates: Position

    geometry_type = GeometryType.POINT

    def __post_init__(self):
        object.__setattr__(self, "coordinates", _position(self.coordinates))

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


@dataclass(frozen=True)
class MultiPoint:
    """An unordered set of positions."""
    coordinates: Tuple[Position, ...]

    geometry_type = GeometryType.MULTI_POINT

    def __post_init__(self):
        object.__setattr__(
            self, "coordinates", tuple(_position(p) for p in self.coordinates)
        )


@dataclass(frozen=True)
class LineString:
    """A polyline through two or more positions.

    Notes
    -----
    Distances are measured along the segments joining consecutive
    vertices; the line is never implicitly closed.
    """
    coordinates: Tuple[Position, ...]

    geometry_type = GeometryType.LINE_STRING

    def __post_init__(self):
        coordinates = tuple(_position(p) for p in self.coordinates)
        if len(coordinates) < 2:
            raise ValueError(
                f"LineString requires at least two positions, got {len(coordinates)}"
            )
        object.__setattr__(self, "coordinates", coordinates)


@dataclass(frozen=True)
class MultiLineString:
    """A collection of polylines."""
    lines: Tuple[LineString, ...]

    geometry_type = GeometryType.MULTI_LINE_STRING

    def __post_init__(self):
        object.__setattr__(
            self,
            "lines",
            tuple(l if isinstance(l, LineString) else LineString(l) for l in self.lines),
        )


@dataclass(frozen=True)
class Polygon:
    """A polygon given as an exterior ring followed by holes.

    Polygons are decoded so they can be recognised and rejected; no
    distance is ever computed against them.
    """
    rings: Tuple[Tuple[Position, ...], ...]

    geometry_type = GeometryType.POLYGON

    def __post_init__(self):
        object.__setattr__(
            self,
            "rings",
            tuple(tuple(_position(p) for p in ring) for ring in self.rings),
        )


@dataclass(frozen=True)
class MultiPolygon:
    """A collection of polygons."""
    polygons: Tuple[Polygon, ...]

    geometry_type = GeometryType.MULTI_POLYGON

    def __post_init__(self):
        object.__setattr__(
            self,
            "polygons",
            tuple(p if isinstance(p, Polygon) else Polygon(p) for p in self.polygons),
        )


@dataclass(frozen=True)
class GeometryCollection:
    """A heterogeneous collection of geometries."""
    geometries: Tuple["Geometry", ...]

    geometry_type = GeometryType.GEOMETRY_COLLECTION

    def __post_init__(self):
        object.__setattr__(self, "geometries", tuple(self.geometries))


Geometry = Union[
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
]

# Shapes a distance expression may be measured against
REFERENCE_GEOMETRY_TYPES = (Point, LineString)
