"""Tests for the ``distance`` expression node."""

from concurrent.futures import ThreadPoolExecutor
import logging

import pytest

import expression.distance as distance_module
from common.config import DistanceConfig, EarthModel
from common.types import LineString, Point, Polygon
from common.units import DistanceUnit
from expression import (
    Distance,
    EvaluationContext,
    ExpressionEvaluationError,
    ExpressionKind,
    ExpressionParseError,
    ParsingContext,
    ResultType,
    parse_distance_arguments,
    parse_expression,
)
from geospatial.geojson import decode_geojson
from geospatial.tile_conversion import CanonicalTileID, FeatureType, VectorTileFeature


POINT_NORTH = {"type": "Point", "coordinates": [0, 1]}
CROSSING_LINE = {"type": "LineString", "coordinates": [[-4, 4], [4, -4]]}
POLYGON = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]}


def parse_errors(value, ctx=None):
    with pytest.raises(ExpressionParseError) as info:
        parse_expression(value, ctx)
    return [e.message for e in info.value.errors]


class TestArgumentParsing:

    def test_default_unit_is_meters(self):
        node = parse_expression(["distance", POINT_NORTH])
        assert node.unit is DistanceUnit.METERS

    @pytest.mark.parametrize("token, unit", [
        ("Meters", DistanceUnit.METERS),
        ("Metres", DistanceUnit.METERS),
        ("Kilometers", DistanceUnit.KILOMETERS),
        ("Miles", DistanceUnit.MILES),
        ("Inches", DistanceUnit.INCHES),
        ("kilometers", DistanceUnit.METERS),
        ("Furlongs", DistanceUnit.METERS),
        (12, DistanceUnit.METERS),
    ])
    def test_unit_argument(self, token, unit):
        assert parse_expression(["distance", POINT_NORTH, token]).unit is unit

    def test_default_unit_from_config(self):
        ctx = ParsingContext(config=DistanceConfig(default_unit=DistanceUnit.KILOMETERS))
        assert parse_expression(["distance", POINT_NORTH], ctx).unit is DistanceUnit.KILOMETERS

    @pytest.mark.parametrize("value, found", [
        (["distance"], 0),
        (["distance", POINT_NORTH, "Miles", "extra"], 3),
    ])
    def test_wrong_argument_count(self, value, found):
        assert parse_errors(value) == [
            f"'distance' expression requires exactly one argument, but found {found} instead."
        ]

    @pytest.mark.parametrize("reference", ["Point", [0, 1], 5, None])
    def test_reference_must_be_an_object(self, reference):
        assert parse_errors(["distance", reference]) == [
            "'distance' expression needs to be an array with one/two arguments."
        ]

    def test_decoder_message_is_passed_through(self):
        ctx = ParsingContext()
        assert parse_distance_arguments(["distance", {"type": "Point"}], ctx) is None
        assert ctx.errors[0].message == "Point must have a 'coordinates' member"
        assert ctx.errors[0].key == "[1]"

    def test_non_array_value(self):
        ctx = ParsingContext()
        assert parse_distance_arguments("distance", ctx) is None
        assert ctx.has_errors


class TestReferenceGeometry:

    def test_polygon_is_rejected(self):
        [message] = parse_errors(["distance", POLYGON])
        assert "Point/LineString geometry type" in message
        assert "Polygon" in message

    def test_feature(self):
        node = parse_expression(["distance", {
            "type": "Feature", "geometry": CROSSING_LINE, "properties": {},
        }])
        assert node.geometry == LineString(((-4, 4), (4, -4)))

    def test_first_usable_feature_of_collection(self):
        node = parse_expression(["distance", {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "geometry": POLYGON, "properties": {}},
                {"type": "Feature", "geometry": None, "properties": {}},
                {"type": "Feature", "geometry": POINT_NORTH, "properties": {}},
                {"type": "Feature", "geometry": CROSSING_LINE, "properties": {}},
            ],
        }])
        assert node.geometry == Point((0, 1))

    def test_collection_without_usable_geometry(self):
        [message] = parse_errors(["distance", {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "geometry": POLYGON, "properties": {}}],
        }])
        assert message.endswith("but found Polygon.")

    def test_empty_collection(self):
        [message] = parse_errors(["distance", {"type": "FeatureCollection", "features": []}])
        assert message.endswith("but found no geometry.")

    def test_multi_point_reference_is_rejected(self):
        [message] = parse_errors(["distance", {"type": "MultiPoint", "coordinates": [[0, 0]]}])
        assert "MultiPoint" in message

    def test_constructor_rejects_other_shapes(self):
        polygon = decode_geojson(POLYGON)
        assert isinstance(polygon, Polygon)
        with pytest.raises(TypeError):
            Distance(polygon, polygon)

    def test_unknown_operator(self):
        assert parse_errors(["distanse", POINT_NORTH]) == ['Unknown expression "distanse".']

    def test_empty_expression(self):
        assert parse_errors([]) == ["Expected an array with at least one element."]


class TestEvaluate:

    def test_point_one_degree_north(self, world_tile, center_point_feature):
        node = parse_expression(["distance", POINT_NORTH])
        result = node.evaluate(EvaluationContext(center_point_feature, world_tile))
        assert result.ok
        assert result.value == pytest.approx(111_195, rel=0.005)

    def test_unit_applies(self, world_tile, center_point_feature):
        context = EvaluationContext(center_point_feature, world_tile)
        meters = parse_expression(["distance", POINT_NORTH]).evaluate(context).unwrap()
        kilometers = parse_expression(["distance", POINT_NORTH, "Kilometers"]).evaluate(context).unwrap()
        assert kilometers == pytest.approx(meters / 1000)

    def test_crossing_lines(self, world_tile, diagonal_line_feature):
        node = parse_expression(["distance", CROSSING_LINE])
        assert node.evaluate(EvaluationContext(diagonal_line_feature, world_tile)).unwrap() == 0.0

    def test_multi_point_feature(self, world_tile):
        feature = VectorTileFeature(FeatureType.POINT, [[(0, 4096)], [(4096, 4096)]])
        node = parse_expression(["distance", POINT_NORTH])
        value = node.evaluate(EvaluationContext(feature, world_tile)).unwrap()
        assert value == pytest.approx(111_195, rel=0.005)

    def test_missing_tile(self, center_point_feature):
        node = parse_expression(["distance", POINT_NORTH])
        result = node.evaluate(EvaluationContext(feature=center_point_feature))
        assert not result.ok
        assert "feature and canonical" in result.error
        with pytest.raises(ExpressionEvaluationError):
            result.unwrap()

    def test_missing_feature(self, world_tile):
        node = parse_expression(["distance", POINT_NORTH])
        assert not node.evaluate(EvaluationContext(canonical=world_tile)).ok

    @pytest.mark.parametrize("feature_type", [FeatureType.POLYGON, FeatureType.UNKNOWN])
    def test_unsupported_feature_type(self, world_tile, feature_type):
        feature = VectorTileFeature(feature_type, [[(0, 0), (10, 0), (10, 10), (0, 0)]])
        result = parse_expression(["distance", POINT_NORTH]).evaluate(EvaluationContext(feature, world_tile))
        assert not result.ok
        assert "Point or LineString" in result.error

    def test_empty_feature_geometry(self, world_tile):
        feature = VectorTileFeature(FeatureType.POINT, [])
        result = parse_expression(["distance", POINT_NORTH]).evaluate(EvaluationContext(feature, world_tile))
        assert not result.ok

    def test_earth_model_from_context(self, world_tile, center_point_feature, wgs84_geod):
        _, _, geodesic = wgs84_geod.inv(0.0, 0.0, 0.0, 1.0)
        context = EvaluationContext(
            center_point_feature, world_tile, DistanceConfig(earth_model=EarthModel.WGS84)
        )
        value = parse_expression(["distance", POINT_NORTH]).evaluate(context).unwrap()
        assert value == pytest.approx(geodesic, rel=1e-3)

    def test_concurrent_evaluation(self):
        node = parse_expression(["distance", CROSSING_LINE, "Kilometers"])
        tile = CanonicalTileID(4, 8, 7)
        features = [
            VectorTileFeature(FeatureType.POINT, [[(x * 300, 8192 - x * 250)]])
            for x in range(1, 28)
        ]
        expected = [node.evaluate(EvaluationContext(f, tile)).unwrap() for f in features]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(
                lambda f: node.evaluate(EvaluationContext(f, tile)).unwrap(), features
            ))

        assert results == expected


class TestSerialize:

    def test_reproduces_reference_document(self):
        assert parse_expression(["distance", POINT_NORTH]).serialize() == ["distance", POINT_NORTH]

    def test_unit_is_not_emitted(self):
        serialized = parse_expression(["distance", POINT_NORTH, "Miles"]).serialize()
        assert serialized == ["distance", POINT_NORTH]

    def test_feature_collection_round_trip(self):
        document = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "geometry": POLYGON, "properties": {"kind": "park"}},
                {"type": "Feature", "id": "shore", "geometry": CROSSING_LINE, "properties": {"rank": 2}},
            ],
        }
        serialized = parse_expression(["distance", document]).serialize()
        assert serialized == ["distance", document]
        assert serialized[1]["features"][1]["properties"]["rank"] == 2.0

    def test_non_json_values_become_null(self):
        document = {
            "type": "Feature",
            "geometry": POINT_NORTH,
            "properties": {"visible": True, "tags": ["a", 1]},
        }
        properties = parse_expression(["distance", document]).serialize()[1]["properties"]
        assert properties == {"visible": None, "tags": ["a", 1.0]}

    def test_serialized_form_parses_to_equal_node(self):
        node = parse_expression(["distance", CROSSING_LINE])
        assert parse_expression(node.serialize()) == node

    def test_non_object_encoding_is_logged(self, monkeypatch, caplog):
        node = parse_expression(["distance", POINT_NORTH])
        monkeypatch.setattr(distance_module, "encode_geojson", lambda document: ["not", "an", "object"])
        with caplog.at_level(logging.WARNING, logger="expression.distance"):
            assert node.serialize() == ["distance", {}]
        assert "Failed to serialize 'distance' expression" in caplog.text


class TestNodeProtocol:

    def test_equality(self):
        a = parse_expression(["distance", POINT_NORTH, "Miles"])
        b = parse_expression(["distance", {"type": "Point", "coordinates": [0.0, 1.0]}, "Miles"])
        assert a == b

    def test_unit_breaks_equality(self):
        assert parse_expression(["distance", POINT_NORTH]) != parse_expression(["distance", POINT_NORTH, "Miles"])

    def test_document_breaks_equality(self):
        feature = {"type": "Feature", "geometry": POINT_NORTH, "properties": {}}
        assert parse_expression(["distance", POINT_NORTH]) != parse_expression(["distance", feature])

    def test_not_equal_to_other_objects(self):
        assert parse_expression(["distance", POINT_NORTH]) != ["distance", POINT_NORTH]

    def test_metadata(self):
        node = parse_expression(["distance", POINT_NORTH])
        assert node.operator == "distance"
        assert node.kind is ExpressionKind.DISTANCE
        assert node.result_type is ResultType.NUMBER
        assert node.possible_outputs() == [None]

    def test_nodes_are_unhashable(self):
        with pytest.raises(TypeError):
            hash(parse_expression(["distance", POINT_NORTH]))

    def test_repr_names_the_unit_as_written(self):
        assert "unit=Miles" in repr(parse_expression(["distance", POINT_NORTH, "Miles"]))


class TestImmutability:

    @staticmethod
    def feature_with_tags(tags):
        return {"type": "Feature", "geometry": POINT_NORTH, "properties": {"tags": tags}}

    def test_changing_the_source_after_parsing(self):
        tags = ["a"]
        source = self.feature_with_tags(tags)
        node = parse_expression(["distance", source])
        twin = parse_expression(["distance", self.feature_with_tags(["a"])])
        before = node.serialize()

        tags.append("b")
        source["properties"]["extra"] = 1

        assert node.serialize() == before
        assert node.serialize()[1]["properties"] == {"tags": ["a"]}
        assert node == twin

    def test_stored_properties_cannot_be_written(self):
        node = parse_expression(["distance", self.feature_with_tags(["a"])])
        twin = parse_expression(["distance", self.feature_with_tags(["a"])])
        with pytest.raises(TypeError):
            node.geojson.properties["x"] = 1
        assert node == twin


class TestContextReuse:

    def test_valid_expression_after_failed_parse(self):
        ctx = ParsingContext()
        with pytest.raises(ExpressionParseError):
            parse_expression(["distance", POLYGON], ctx)

        node = parse_expression(["distance", POINT_NORTH], ctx)

        assert node.geometry == Point((0, 1))
        assert len(ctx.errors) == 1

    def test_error_carries_only_the_failing_parse(self):
        ctx = ParsingContext()
        with pytest.raises(ExpressionParseError):
            parse_expression(["distance", POLYGON], ctx)

        assert parse_errors(["distance"], ctx) == [
            "'distance' expression requires exactly one argument, but found 0 instead."
        ]