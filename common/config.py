"""
Runtime Configuration for Feature Distance Evaluation.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping

from common.constants import PhysicalConstants
from common.units import DistanceUnit


class EarthModel(Enum):
    """Earth figure used to scale the local distance metric.

    SPHERE
        IUGG mean radius in both directions. One degree of latitude is
        about 111.195 km everywhere.
    WGS84
        Meridian and prime-vertical radii of curvature of the WGS84
        ellipsoid at the anchor latitude.
    """

    SPHERE = "sphere"
    WGS84 = "wgs84"


@dataclass(frozen=True)
class DistanceConfig:
    """Configuration for parsing and evaluating distance expressions.

    Attributes
    ----------
    earth_model : EarthModel
        Earth figure for the local distance metric.
    default_unit : DistanceUnit
        Unit used when the expression omits one.
    tile_extent : int
        Number of tile-local units along one tile edge.
    """
    earth_model: EarthModel = EarthModel.SPHERE
    default_unit: DistanceUnit = DistanceUnit.METERS
    tile_extent: int = PhysicalConstants.DEFAULT_TILE_EXTENT

    def __post_init__(self):
        """Validate configuration values."""
        if self.tile_extent <= 0:
            raise ValueError(f"tile_extent must be positive, got {self.tile_extent}")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "DistanceConfig":
        """Build a configuration from a plain mapping.

        Enum-valued settings accept either the enum member or its value
        (``{"earth_model": "wgs84", "default_unit": "kilometer"}``).
        Unknown keys raise.

        Parameters
        ----------
        values : Mapping[str, Any]
            Settings to override.

        Returns
        -------
        DistanceConfig
            The resulting configuration.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")

        kwargs: Dict[str, Any] = dict(values)
        if "earth_model" in kwargs:
            kwargs["earth_model"] = EarthModel(kwargs["earth_model"])
        if "default_unit" in kwargs:
            kwargs["default_unit"] = DistanceUnit(kwargs["default_unit"])
        if "tile_extent" in kwargs:
            kwargs["tile_extent"] = int(kwargs["tile_extent"])
        return cls(**kwargs)
