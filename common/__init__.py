"""
Common utilities and infrastructure for the Feature Distance system.

This package provides foundational components used across all modules:
- Earth and tile constants with provenance
- Distance units backed by the pint registry
- Immutable geometry types
- Runtime configuration
- Logging infrastructure
"""

from common.constants import PhysicalConstants
from common.units import DistanceUnit
from common.types import (
    Geometry,
    GeometryType,
    Position,
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
)
from common.config import DistanceConfig, EarthModel
from common.logging_config import get_logger

__all__ = [
    "PhysicalConstants",
    "DistanceUnit",
    "Geometry",
    "GeometryType",
    "Position",
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
    "DistanceConfig",
    "EarthModel",
    "get_logger",
]
