"""
Operator Registry and Expression Parsing Entry Point.
"""

from typing import Any, Callable, Dict, Optional

from common.logging_config import get_logger
from expression.base import Expression, ExpressionParseError, ParsingContext
from expression.distance import OPERATOR as DISTANCE_OPERATOR, Distance

logger = get_logger(__name__)

Parser = Callable[[Any, ParsingContext], Optional[Expression]]

OPERATORS: Dict[str, Parser] = {
    DISTANCE_OPERATOR: Distance.parse,
}


def parse_expression(value: Any, context: Optional[ParsingContext] = None) -> Expression:
    """Compile an expression from its source form.

    Parameters
    ----------
    value : Any
        Expression source, e.g. ``["distance", {...}, "Miles"]``.
    context : ParsingContext, optional
        Context receiving errors and supplying configuration. A fresh one
        is created when omitted. Errors left on a reused context by
        earlier parses do not affect this one.

    Returns
    -------
    Expression
        The compiled expression node.

    Raises
    ------
    ExpressionParseError
        If the operator is unknown or its arguments are invalid.
    """
    ctx = context if context is not None else ParsingContext()
    first_error = len(ctx.errors)

    if not isinstance(value, (list, tuple)) or not value:
        ctx.error("Expected an array with at least one element.")
        raise ExpressionParseError(ctx.errors[first_error:])

    operator = value[0]
    parser = OPERATORS.get(operator) if isinstance(operator, str) else None
    if parser is None:
        ctx.error(f"Unknown expression \"{operator}\".", "[0]")
        raise ExpressionParseError(ctx.errors[first_error:])

    expression = parser(value, ctx)
    errors = ctx.errors[first_error:]
    if expression is None or errors:
        for error in errors:
            logger.debug(f"Parse error in '{operator}' expression: {error}")
        raise ExpressionParseError(errors)
    return expression
