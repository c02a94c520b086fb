"""
Geospatial Module for the Feature Distance System.

All Earth-surface calculations system-wide originate from this module.
No downstream module may implement geometry calculations independently.

This module provides:
- Per-degree scale factors for spherical and WGS84 Earth figures
- A local flat-earth distance metric
- An exact segment crossing test
- Shortest-distance algorithms for point and line geometries
- GeoJSON decoding and encoding
- Tile-local to longitude/latitude conversion
"""

from geospatial.coordinate_models import (
    WGS84Ellipsoid,
    meters_per_degree,
    radius_of_curvature_meridian,
    radius_of_curvature_prime_vertical,
)

from geospatial.local_metric import (
    LocalDistanceMetric,
    PointOnLine,
    metric_for,
    wrap_longitude,
)

from geospatial.intersection import segments_intersect

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

from geospatial.geojson import (
    Feature,
    FeatureCollection,
    GeoJSONDocument,
    GeoJSONError,
    decode_geojson,
    document_geometries,
    encode_geojson,
)

from geospatial.tile_conversion import (
    CanonicalTileID,
    FeatureType,
    TileFeature,
    VectorTileFeature,
    convert_geometry,
)

__all__ = [
    # Earth figure
    "WGS84Ellipsoid",
    "meters_per_degree",
    "radius_of_curvature_meridian",
    "radius_of_curvature_prime_vertical",
    # Local metric
    "LocalDistanceMetric",
    "PointOnLine",
    "metric_for",
    "wrap_longitude",
    # Intersection
    "segments_intersect",
    # Shortest distances
    "NOT_COMPUTABLE",
    "calculate_distance",
    "line_distance_to_geometry",
    "line_to_line",
    "point_distance_to_geometry",
    "point_to_line",
    "point_to_multi_line",
    "point_to_multi_point",
    # GeoJSON
    "Feature",
    "FeatureCollection",
    "GeoJSONDocument",
    "GeoJSONError",
    "decode_geojson",
    "document_geometries",
    "encode_geojson",
    # Tiles
    "CanonicalTileID",
    "FeatureType",
    "TileFeature",
    "VectorTileFeature",
    "convert_geometry",
]
