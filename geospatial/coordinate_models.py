"""
Earth Figure Models for Local Distance Scaling.

This module turns an anchor latitude into the two numbers a flat-earth
distance approximation needs: how many meters one degree of longitude and
one degree of latitude span at that latitude.

Scientific Context
------------------
Domain: Geodesy, Earth geometry
Model: Local tangent-plane linearisation around a single latitude

Two Earth figures are supported:

1. Sphere of IUGG mean radius. A degree of latitude is the same length
   everywhere; a degree of longitude shrinks with cos(φ).

2. WGS84 ellipsoid. North-south scale comes from the meridian radius of
   curvature M(φ), east-west scale from the prime-vertical radius N(φ)
   projected onto the parallel, N(φ)·cos(φ).

Both are exact at the anchor latitude and degrade away from it; callers
anchor at the geometry being measured.

References
----------
- NIMA TR8350.2: WGS84 parameters
- Torge, W. (2001). Geodesy (3rd ed.). de Gruyter.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np

from common.config import EarthModel
from common.constants import PhysicalConstants


@dataclass(frozen=True)
class EllipsoidParameters:
    """Parameters defining a reference ellipsoid.

    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius) in meters.
    f : float
        Flattening: f = (a - b) / a
    name : str
        Identifier for the ellipsoid.
    """
    a: float
    f: float
    name: str

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return self.f * (2 - self.f)


# WGS84 ellipsoid - the standard reference for this system
WGS84Ellipsoid = EllipsoidParameters(
    a=PhysicalConstants.EARTH_SEMI_MAJOR_AXIS.value,
    f=PhysicalConstants.EARTH_FLATTENING.value,
    name="WGS84"
)


def radius_of_curvature_meridian(
    latitude_deg: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Radius of curvature along a meridian (north-south motion).

    Parameters
    ----------
    latitude_deg : float
        Geodetic latitude in degrees.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float
        Radius of curvature M in meters.

    Notes
    -----
    M = a(1 - e²) / (1 - e² sin²φ)^(3/2)

    At the equator: M ≈ 6,335,439 m
    """
    sin_lat = np.sin(np.radians(latitude_deg))
    denominator = (1 - ellipsoid.e2 * sin_lat**2) ** 1.5
    return float(ellipsoid.a * (1 - ellipsoid.e2) / denominator)


def radius_of_curvature_prime_vertical(
    latitude_deg: float,
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
) -> float:
    """Radius of curvature in the prime vertical (east-west motion).

    Parameters
    ----------
    latitude_deg : float
        Geodetic latitude in degrees.
    ellipsoid : EllipsoidParameters
        Reference ellipsoid (default: WGS84).

    Returns
    -------
    float
        Radius of curvature N in meters.

    Notes
    -----
    N = a / (1 - e² sin²φ)^(1/2)
    """
    sin_lat = np.sin(np.radians(latitude_deg))
    return float(ellipsoid.a / np.sqrt(1 - ellipsoid.e2 * sin_lat**2))


def meters_per_degree(
    latitude_deg: float,
    earth_model: EarthModel = EarthModel.SPHERE
) -> Tuple[float, float]:
    """Length of one degree of longitude and latitude at a latitude.

    Parameters
    ----------
    latitude_deg : float
        Anchor latitude in degrees, within [-90, 90].
    earth_model : EarthModel
        Earth figure to use.

    Returns
    -------
    Tuple[float, float]
        (meters per degree of longitude, meters per degree of latitude).

    Examples
    --------
    >>> kx, ky = meters_per_degree(0.0)
    >>> round(ky)
    111195
    """
    if not -90.0 <= latitude_deg <= 90.0:
        raise ValueError(f"Latitude {latitude_deg} out of range [-90, 90]")

    cos_lat = np.cos(np.radians(latitude_deg))

    if earth_model is EarthModel.WGS84:
        east_radius = radius_of_curvature_prime_vertical(latitude_deg) * cos_lat
        north_radius = radius_of_curvature_meridian(latitude_deg)
    else:
        east_radius = PhysicalConstants.EARTH_MEAN_RADIUS.value * cos_lat
        north_radius = PhysicalConstants.EARTH_MEAN_RADIUS.value

    return (
        PhysicalConstants.degree_length(east_radius),
        PhysicalConstants.degree_length(north_radius),
    )
