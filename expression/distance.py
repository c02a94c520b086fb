"""
The ``distance`` Expression.

Source form::

    ["distance", <GeoJSON object>, <unit>?]

Evaluates to the minimum distance between the feature being styled and the
first Point or LineString geometry found in the GeoJSON object, in the
requested unit (``"Meters"``/``"Metres"``, ``"Kilometers"``, ``"Miles"``,
``"Inches"``; default meters).

Notes
-----
- Unrecognised unit names are accepted and measure in meters.
- ``serialize`` reproduces the GeoJSON object but not the unit argument.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from common.logging_config import get_logger
from common.types import Geometry, REFERENCE_GEOMETRY_TYPES
from common.units import DistanceUnit
from geospatial.geojson import (
    GeoJSONDocument,
    GeoJSONError,
    decode_geojson,
    document_geometries,
    encode_geojson,
)
from geospatial.shortest_distance import calculate_distance
from geospatial.tile_conversion import FeatureType, convert_geometry
from expression.base import (
    EvaluationContext,
    EvaluationResult,
    Expression,
    ExpressionKind,
    ParsingContext,
    ResultType,
)
from expression.values import Value, to_expression_value

logger = get_logger(__name__)

OPERATOR = "distance"

_SUPPORTED_FEATURE_TYPES = (FeatureType.POINT, FeatureType.LINESTRING)


@dataclass(frozen=True)
class DistanceArguments:
    """Validated arguments of a ``distance`` expression.

    Attributes
    ----------
    geojson : GeoJSONDocument
        The decoded reference document.
    unit : DistanceUnit
        Unit of the result.
    """
    geojson: GeoJSONDocument
    unit: DistanceUnit


def parse_distance_arguments(value: Any, ctx: ParsingContext) -> Optional[DistanceArguments]:
    """Validate the argument list of a ``distance`` expression.

    Parameters
    ----------
    value : Any
        The whole expression, operator included.
    ctx : ParsingContext
        Receives parse errors.

    Returns
    -------
    DistanceArguments or None
        The decoded document and unit, or None after reporting an error.
    """
    if isinstance(value, (list, tuple)):
        length = len(value)
        if length not in (2, 3):
            ctx.error(
                f"'{OPERATOR}' expression requires exactly one argument, "
                f"but found {length - 1} instead."
            )
            return None

        unit = ctx.config.default_unit
        if length == 3:
            unit = DistanceUnit.from_name(value[2])

        reference = value[1]
        if isinstance(reference, Mapping):
            try:
                return DistanceArguments(geojson=decode_geojson(reference), unit=unit)
            except GeoJSONError as e:
                ctx.error(str(e), "[1]")
                return None

    ctx.error(f"'{OPERATOR}' expression needs to be an array with one/two arguments.")
    return None


def find_reference_geometry(document: GeoJSONDocument) -> Optional[Geometry]:
    """First Point or LineString geometry of a document, if any."""
    for geometry in document_geometries(document):
        if isinstance(geometry, REFERENCE_GEOMETRY_TYPES):
            return geometry
    return None


class Distance(Expression):
    """Distance from the evaluated feature to a reference geometry.

    Parameters
    ----------
    geojson : GeoJSONDocument
        The reference document as written by the style author. Kept for
        serialization.
    geometry : Geometry
        The Point or LineString taken from ``geojson``. Used for evaluation.
    unit : DistanceUnit
        Unit of the result.

    Notes
    -----
    ``geometry`` is derived from ``geojson`` at parse time. Both are stored
    because serialization must reproduce the author's document while
    evaluation only needs the single geometry.
    """

    kind = ExpressionKind.DISTANCE
    result_type = ResultType.NUMBER

    def __init__(
        self,
        geojson: GeoJSONDocument,
        geometry: Geometry,
        unit: DistanceUnit = DistanceUnit.METERS
    ):
        if not isinstance(geometry, REFERENCE_GEOMETRY_TYPES):
            raise TypeError(
                f"Distance reference must be a Point or LineString, "
                f"got {type(geometry).__name__}"
            )
        self._geojson = geojson
        self._geometry = geometry
        self._unit = unit

    @property
    def geojson(self) -> GeoJSONDocument:
        return self._geojson

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    @property
    def unit(self) -> DistanceUnit:
        return self._unit

    @property
    def operator(self) -> str:
        return OPERATOR

    def __repr__(self) -> str:
        return (
            f"Distance(geometry={self._geometry!r}, unit={self._unit.expression_name})"
        )

    @classmethod
    def parse(cls, value: Sequence[Any], ctx: ParsingContext) -> Optional["Distance"]:
        """Parse a ``distance`` expression.

        Parameters
        ----------
        value : Sequence
            ``["distance", <GeoJSON object>, <unit>?]``.
        ctx : ParsingContext
            Receives parse errors.

        Returns
        -------
        Distance or None
            The parsed node, or None after reporting errors to ``ctx``.
        """
        arguments = parse_distance_arguments(value, ctx)
        if arguments is None:
            return None

        geometry = find_reference_geometry(arguments.geojson)
        if geometry is None:
            found = sorted({g.geometry_type.value for g in document_geometries(arguments.geojson)})
            ctx.error(
                f"'{OPERATOR}' expression requires valid geojson source that contains "
                f"Point/LineString geometry type, but found "
                f"{', '.join(found) if found else 'no geometry'}.",
                "[1]",
            )
            return None

        return cls(arguments.geojson, geometry, arguments.unit)

    def evaluate(self, context: EvaluationContext) -> EvaluationResult:
        """Distance from the context's feature to the reference geometry.

        Returns
        -------
        EvaluationResult
            The distance in this node's unit, or an error when the context
            lacks a feature or tile, or the feature is not a Point or
            LineString feature.
        """
        if context.feature is None or context.canonical is None:
            return EvaluationResult.failure(
                f"{OPERATOR} expression requires valid feature and canonical information."
            )

        if context.feature.feature_type not in _SUPPORTED_FEATURE_TYPES:
            return EvaluationResult.failure(
                f"{OPERATOR} expression currently only supports feature with "
                f"Point or LineString geometry."
            )

        feature_geometry = convert_geometry(
            context.feature, context.canonical, context.config.tile_extent
        )
        if feature_geometry is None:
            return EvaluationResult.failure(
                f"{OPERATOR} expression requires a feature with non-empty geometry."
            )

        return EvaluationResult(
            value=calculate_distance(
                feature_geometry, self._geometry, self._unit, context.config
            )
        )

    def serialize(self) -> Value:
        """Source form ``["distance", <GeoJSON object>]``.

        The GeoJSON object is re-encoded from the decoded document, so
        altitudes, ``bbox`` and foreign members of the original are not
        reproduced, and null properties come back as ``{}``.
        """
        encoded = to_expression_value(encode_geojson(self._geojson))
        if not isinstance(encoded, dict):
            logger.warning(
                f"Failed to serialize '{OPERATOR}' expression, "
                f"encoded GeoJSON is not an object"
            )
            encoded = {}
        return [OPERATOR, encoded]

    def possible_outputs(self) -> List[Optional[Value]]:
        return [None]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Distance):
            return False
        return (
            self._geojson == other._geojson
            and self._geometry == other._geometry
            and self._unit == other._unit
        )
