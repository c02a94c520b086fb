"""
GeoJSON Decoding and Encoding.

This module converts GeoJSON objects (RFC 7946), given as plain mappings,
into the immutable geometry types of ``common.types`` and back.

Supported Documents
-------------------
1. Geometry: any of the seven geometry types
2. Feature: geometry (possibly null), properties and optional id
3. FeatureCollection: an ordered list of features

Decoding validates structure and raises ``GeoJSONError`` with a message
meant to be shown to whoever wrote the document.

Notes
-----
Decoding keeps only what distance evaluation and serialization need, so
encoding a decoded document is not a verbatim copy of the input:

- positions keep longitude and latitude; altitude is dropped
- ``bbox`` and foreign members are dropped
- ``"properties": null`` encodes as an empty object
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from common.types import (
    Geometry,
    GeometryCollection,
    GeometryType,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Position,
)


class GeoJSONError(ValueError):
    """Raised when a mapping is not a valid GeoJSON document."""


def freeze_value(value: Any) -> Any:
    """Deep read-only copy of a JSON-like value.

    Mappings become ``MappingProxyType`` views over fresh dicts and
    sequences become tuples, recursively. Strings and scalars are returned
    unchanged.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze_value(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(v) for v in value)
    return value


def thaw_value(value: Any) -> Any:
    """Inverse of ``freeze_value``: a fresh mutable dict/list copy."""
    if isinstance(value, Mapping):
        return {k: thaw_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_value(v) for v in value]
    return value


@dataclass(frozen=True)
class Feature:
    """A GeoJSON feature.

    Attributes
    ----------
    geometry : Geometry, optional
        The feature geometry; ``None`` for a null geometry.
    properties : Mapping
        Arbitrary feature properties, stored as a deep read-only copy.
    id : str or float, optional
        Feature identifier.
    """
    geometry: Optional[Geometry]
    properties: Mapping[str, Any] = field(default_factory=dict)
    id: Optional[Union[str, float]] = None

    def __post_init__(self):
        object.__setattr__(self, "properties", freeze_value(self.properties))


@dataclass(frozen=True)
class FeatureCollection:
    """An ordered collection of GeoJSON features."""
    features: Tuple[Feature, ...] = ()


GeoJSONDocument = Union[Geometry, Feature, FeatureCollection]

_GEOMETRY_TYPE_NAMES = {t.value for t in GeometryType}


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise GeoJSONError(f"{what} must be an object")
    return value


def _require_list(value: Any, what: str) -> list:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise GeoJSONError(f"{what} must be an array")
    return list(value)


def _decode_position(value: Any) -> Position:
    coords = _require_list(value, "position")
    if len(coords) < 2:
        raise GeoJSONError("position must have at least two elements")
    for c in coords:
        if isinstance(c, bool) or not isinstance(c, (int, float)):
            raise GeoJSONError("position elements must be numbers")
    return (float(coords[0]), float(coords[1]))


def _decode_positions(value: Any, what: str) -> Tuple[Position, ...]:
    return tuple(_decode_position(p) for p in _require_list(value, what))


def _decode_line(value: Any) -> LineString:
    positions = _decode_positions(value, "LineString coordinates")
    if len(positions) < 2:
        raise GeoJSONError("LineString must have at least two positions")
    return LineString(positions)


def _decode_polygon(value: Any) -> Polygon:
    rings = _require_list(value, "Polygon coordinates")
    return Polygon(tuple(_decode_positions(ring, "linear ring") for ring in rings))


def decode_geometry(value: Any) -> Geometry:
    """Decode a GeoJSON geometry object.

    Parameters
    ----------
    value : Any
        Candidate geometry mapping.

    Returns
    -------
    Geometry
        The decoded geometry.

    Raises
    ------
    GeoJSONError
        If the mapping is not a valid geometry.
    """
    obj = _require_mapping(value, "geometry")
    type_name = obj.get("type")
    if type_name not in _GEOMETRY_TYPE_NAMES:
        raise GeoJSONError(f"{type_name!r} is not a valid geometry type")

    if type_name == "GeometryCollection":
        if "geometries" not in obj:
            raise GeoJSONError("GeometryCollection must have a 'geometries' member")
        members = _require_list(obj["geometries"], "GeometryCollection geometries")
        return GeometryCollection(tuple(decode_geometry(g) for g in members))

    if "coordinates" not in obj:
        raise GeoJSONError(f"{type_name} must have a 'coordinates' member")
    coords = obj["coordinates"]

    if type_name == "Point":
        return Point(_decode_position(coords))
    if type_name == "MultiPoint":
        return MultiPoint(_decode_positions(coords, "MultiPoint coordinates"))
    if type_name == "LineString":
        return _decode_line(coords)
    if type_name == "MultiLineString":
        lines = _require_list(coords, "MultiLineString coordinates")
        return MultiLineString(tuple(_decode_line(line) for line in lines))
    if type_name == "Polygon":
        return _decode_polygon(coords)
    polygons = _require_list(coords, "MultiPolygon coordinates")
    return MultiPolygon(tuple(_decode_polygon(p) for p in polygons))


def _decode_feature(value: Any) -> Feature:
    obj = _require_mapping(value, "feature")
    if obj.get("type") != "Feature":
        raise GeoJSONError("feature must have type 'Feature'")
    if "geometry" not in obj:
        raise GeoJSONError("feature must have a 'geometry' member")

    geometry = obj["geometry"]
    properties = obj.get("properties")
    if properties is None:
        properties = {}
    feature_id = obj.get("id")
    if feature_id is not None and (
        isinstance(feature_id, bool) or not isinstance(feature_id, (str, int, float))
    ):
        raise GeoJSONError("feature id must be a string or number")

    return Feature(
        geometry=None if geometry is None else decode_geometry(geometry),
        properties=_require_mapping(properties, "feature properties"),
        id=feature_id,
    )


def decode_geojson(value: Any) -> GeoJSONDocument:
    """Decode a GeoJSON document.

    Parameters
    ----------
    value : Any
        Mapping holding a Geometry, Feature or FeatureCollection.

    Returns
    -------
    GeoJSONDocument
        The decoded document.

    Raises
    ------
    GeoJSONError
        If the value is not a valid GeoJSON document.

    Examples
    --------
    >>> decode_geojson({"type": "Point", "coordinates": [1, 2]})
    Point(coordinates=(1.0, 2.0))
    """
    obj = _require_mapping(value, "GeoJSON")
    if "type" not in obj:
        raise GeoJSONError("GeoJSON must have a 'type' member")

    type_name = obj["type"]
    if type_name == "Feature":
        return _decode_feature(obj)
    if type_name == "FeatureCollection":
        if "features" not in obj:
            raise GeoJSONError("FeatureCollection must have a 'features' member")
        members = _require_list(obj["features"], "FeatureCollection features")
        return FeatureCollection(tuple(_decode_feature(f) for f in members))
    return decode_geometry(obj)


def document_geometries(document: GeoJSONDocument) -> Iterator[Geometry]:
    """Yield the top-level geometries of a document in order.

    Null feature geometries are skipped. Geometry collections are yielded
    as a whole, not flattened.
    """
    if isinstance(document, FeatureCollection):
        for feature in document.features:
            if feature.geometry is not None:
                yield feature.geometry
    elif isinstance(document, Feature):
        if document.geometry is not None:
            yield document.geometry
    else:
        yield document


def _encode_positions(positions) -> list:
    return [[x, y] for x, y in positions]


def encode_geometry(geometry: Geometry) -> Dict[str, Any]:
    """Encode a geometry as a GeoJSON mapping."""
    type_name = geometry.geometry_type.value

    if isinstance(geometry, Point):
        coordinates: Any = list(geometry.coordinates)
    elif isinstance(geometry, (MultiPoint, LineString)):
        coordinates = _encode_positions(geometry.coordinates)
    elif isinstance(geometry, MultiLineString):
        coordinates = [_encode_positions(l.coordinates) for l in geometry.lines]
    elif isinstance(geometry, Polygon):
        coordinates = [_encode_positions(ring) for ring in geometry.rings]
    elif isinstance(geometry, MultiPolygon):
        coordinates = [
            [_encode_positions(ring) for ring in polygon.rings]
            for polygon in geometry.polygons
        ]
    elif isinstance(geometry, GeometryCollection):
        return {
            "type": type_name,
            "geometries": [encode_geometry(g) for g in geometry.geometries],
        }
    else:
        raise TypeError(f"Cannot encode {type(geometry).__name__} as GeoJSON")

    return {"type": type_name, "coordinates": coordinates}


def _encode_feature(feature: Feature) -> Dict[str, Any]:
    encoded: Dict[str, Any] = {
        "type": "Feature",
        "geometry": None if feature.geometry is None else encode_geometry(feature.geometry),
        "properties": thaw_value(feature.properties),
    }
    if feature.id is not None:
        encoded["id"] = feature.id
    return encoded


def encode_geojson(document: GeoJSONDocument) -> Dict[str, Any]:
    """Encode a decoded document back into its GeoJSON mapping form."""
    if isinstance(document, FeatureCollection):
        return {
            "type": "FeatureCollection",
            "features": [_encode_feature(f) for f in document.features],
        }
    if isinstance(document, Feature):
        return _encode_feature(document)
    return encode_geometry(document)
