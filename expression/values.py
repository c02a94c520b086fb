"""
Expression Value Model.

Expression values are JSON-like: ``None``, ``bool``, ``float``, ``str``,
``list`` of values and ``dict`` from string keys to values.
"""

from typing import Any, Dict, List, Mapping, Union

Value = Union[None, bool, float, str, List[Any], Dict[str, Any]]


def to_expression_value(obj: Any) -> Value:
    """Convert a generic document value into the expression value model.

    Numbers become floats, strings stay strings, sequences become lists and
    mappings become dicts with string keys, recursively. Every other kind
    of value, booleans included, becomes ``None``.

    Examples
    --------
    >>> to_expression_value({"a": [1, "x", True]})
    {'a': [1.0, 'x', None]}
    """
    if isinstance(obj, bool):
        return None
    if isinstance(obj, (int, float)):
        return float(obj)
    if isinstance(obj, str):
        return obj
    if isinstance(obj, (list, tuple)):
        return [to_expression_value(item) for item in obj]
    if isinstance(obj, Mapping):
        return {str(key): to_expression_value(value) for key, value in obj.items()}
    return None
