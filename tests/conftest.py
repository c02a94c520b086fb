"""Shared fixtures for the feature distance test suite."""

import pytest
from pyproj import Geod

from geospatial.tile_conversion import CanonicalTileID, FeatureType, VectorTileFeature


EXTENT = 8192
CENTER = EXTENT // 2


@pytest.fixture(scope="session")
def wgs84_geod():
    """Geodesic ground truth."""
    return Geod(ellps="WGS84")


@pytest.fixture
def world_tile():
    """The single zoom-0 tile; its centre is (0°, 0°)."""
    return CanonicalTileID(0, 0, 0)


@pytest.fixture
def center_point_feature():
    """Point feature at the centre of its tile."""
    return VectorTileFeature(FeatureType.POINT, [[(CENTER, CENTER)]])


@pytest.fixture
def diagonal_line_feature():
    """Line feature from south-west to north-east through the tile centre."""
    return VectorTileFeature(
        FeatureType.LINESTRING,
        [[(CENTER - 100, CENTER + 100), (CENTER + 100, CENTER - 100)]],
    )


@pytest.fixture
def square_polygon_feature():
    return VectorTileFeature(
        FeatureType.POLYGON,
        [[(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]],
    )
