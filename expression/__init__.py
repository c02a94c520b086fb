"""
Expression Module for the Feature Distance System.

This module plugs the geospatial distance algorithms into a declarative
expression protocol: parse once, evaluate per feature, serialize back to
source form.
"""

from expression.base import (
    EvaluationContext,
    EvaluationResult,
    Expression,
    ExpressionError,
    ExpressionEvaluationError,
    ExpressionKind,
    ExpressionParseError,
    ParsingContext,
    ParsingError,
    ResultType,
)
from expression.values import Value, to_expression_value
from expression.distance import (
    Distance,
    DistanceArguments,
    find_reference_geometry,
    parse_distance_arguments,
)
from expression.registry import OPERATORS, parse_expression

__all__ = [
    "EvaluationContext",
    "EvaluationResult",
    "Expression",
    "ExpressionError",
    "ExpressionEvaluationError",
    "ExpressionKind",
    "ExpressionParseError",
    "ParsingContext",
    "ParsingError",
    "ResultType",
    "Value",
    "to_expression_value",
    "Distance",
    "DistanceArguments",
    "find_reference_geometry",
    "parse_distance_arguments",
    "OPERATORS",
    "parse_expression",
]
