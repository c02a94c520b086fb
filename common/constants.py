"""
Physical and Cartographic Constants for Feature Distance Evaluation.

This module provides the constants used by the local distance metric and the
tile coordinate conversion, each with its uncertainty bound and source.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- Mean Earth radius: IUGG (Moritz, 2000)
- Web Mercator: EPSG:3857 / Mapbox Vector Tile specification 2.1
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class Constant:
    """A constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The SI unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class PhysicalConstants:
    """Registry of constants used throughout the system.

    Earth Geometry
    --------------
    The WGS84 ellipsoid drives the ellipsoidal local metric; the IUGG mean
    radius drives the spherical one.

    Tile Geometry
    -------------
    Web Mercator bounds and the default vector tile extent used when
    converting tile-local coordinates to longitude/latitude.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    EARTH_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    EARTH_FLATTENING: Final[Constant] = Constant(
        value=1.0 / 298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Flattening of WGS84 ellipsoid: f = (a - b) / a"
    )

    EARTH_MEAN_RADIUS: Final[Constant] = Constant(
        value=6_371_008.8,
        uncertainty=0.1,
        unit="m",
        source="IUGG mean radius",
        description="Mean radius of Earth, used by the spherical local metric"
    )

    # =========================================================================
    # Web Mercator and Vector Tiles
    # =========================================================================

    WEB_MERCATOR_HALF_EXTENT: Final[Constant] = Constant(
        value=np.pi * 6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="EPSG:3857",
        description="Half the width of the Web Mercator plane (π · a)"
    )

    DEFAULT_TILE_EXTENT: Final[int] = 8192

    MAX_ZOOM_LEVEL: Final[int] = 32

    @staticmethod
    def degree_length(radius_m: float) -> float:
        """Arc length of one degree on a circle of the given radius.

        Parameters
        ----------
        radius_m : float
            Radius in meters.

        Returns
        -------
        float
            Length of one degree of arc in meters.
        """
        return radius_m * np.pi / 180.0
