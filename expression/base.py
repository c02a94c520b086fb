"""
Expression Node Protocol.

Expressions are parsed once from their JSON-like source form, evaluated
many times (once per feature) and serialized back to source form.

Errors
------
Parse errors are collected on a ``ParsingContext`` so that a style author
sees every problem at once; ``parse_expression`` turns them into an
``ExpressionParseError``. Evaluation problems are per feature and never
raise: ``evaluate`` returns an ``EvaluationResult`` carrying either a value
or an error message.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from common.config import DistanceConfig
from geospatial.tile_conversion import CanonicalTileID, TileFeature
from expression.values import Value


class ExpressionError(ValueError):
    """Base class for expression failures."""


class ExpressionParseError(ExpressionError):
    """Raised when an expression cannot be compiled.

    Attributes
    ----------
    errors : list of ParsingError
        Every error collected while parsing.
    """

    def __init__(self, errors: List["ParsingError"]):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors) or "invalid expression")


class ExpressionEvaluationError(ExpressionError):
    """Raised by ``EvaluationResult.unwrap`` on a failed evaluation."""


class ExpressionKind(Enum):
    """Kinds of expression node."""

    DISTANCE = "distance"


class ResultType(Enum):
    """Static result types of expressions."""

    NUMBER = "number"


@dataclass(frozen=True)
class ParsingError:
    """A single parse error.

    Attributes
    ----------
    message : str
        Human-readable description.
    key : str
        Location of the offending value inside the expression, e.g. ``"[1]"``.
    """
    message: str
    key: str = ""

    def __str__(self) -> str:
        return f"{self.key}: {self.message}" if self.key else self.message


@dataclass
class ParsingContext:
    """Mutable state threaded through expression parsing.

    Attributes
    ----------
    config : DistanceConfig
        Runtime configuration.
    key : str
        Location prefix applied to errors reported through this context.
    errors : list of ParsingError
        Errors collected so far.
    """
    config: DistanceConfig = field(default_factory=DistanceConfig)
    key: str = ""
    errors: List[ParsingError] = field(default_factory=list)

    def error(self, message: str, key: str = "") -> None:
        """Record a parse error."""
        self.errors.append(ParsingError(message=message, key=self.key + key))

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class EvaluationContext:
    """Per-feature inputs to expression evaluation.

    Attributes
    ----------
    feature : TileFeature, optional
        The feature being styled.
    canonical : CanonicalTileID, optional
        Identity of the tile holding the feature.
    config : DistanceConfig
        Runtime configuration.
    """
    feature: Optional[TileFeature] = None
    canonical: Optional[CanonicalTileID] = None
    config: DistanceConfig = field(default_factory=DistanceConfig)


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of evaluating an expression: a value or an error message."""
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> "EvaluationResult":
        return cls(error=message)

    def unwrap(self) -> Any:
        """Return the value, raising ``ExpressionEvaluationError`` on failure."""
        if self.error is not None:
            raise ExpressionEvaluationError(self.error)
        return self.value


class Expression(ABC):
    """Interface every expression node implements.

    Nodes are immutable once parsed, so a single node may be evaluated
    concurrently from several threads.
    """

    kind: ExpressionKind
    result_type: ResultType

    @property
    @abstractmethod
    def operator(self) -> str:
        """Operator name as written in source form."""
        pass

    @abstractmethod
    def evaluate(self, context: EvaluationContext) -> EvaluationResult:
        """Evaluate the expression for one feature."""
        pass

    @abstractmethod
    def serialize(self) -> Value:
        """Rebuild the JSON-like source form of the expression."""
        pass

    @abstractmethod
    def possible_outputs(self) -> List[Optional[Value]]:
        """Statically known outputs; ``None`` marks an unpredictable output."""
        pass

    @abstractmethod
    def __eq__(self, other: object) -> bool:
        pass

    __hash__ = None
