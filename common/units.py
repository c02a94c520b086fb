"""
Distance Units for Feature Distance Evaluation.

This module provides the unit vocabulary of the ``distance`` expression and
derives every conversion factor from the `pint` unit registry, so no
hand-typed conversion constants exist anywhere in the system.

Example Usage
-------------
>>> from common.units import DistanceUnit
>>> DistanceUnit.from_name("Kilometers")
<DistanceUnit.KILOMETERS: 'kilometer'>
>>> round(DistanceUnit.MILES.per_meter * 1609.344, 6)
1.0
"""

from enum import Enum
from functools import lru_cache
from typing import Any

from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity


@lru_cache(maxsize=None)
def _factor_per_meter(unit_name: str) -> float:
    """Number of ``unit_name`` in one meter."""
    return float(Q_(1.0, "meter").to(unit_name).magnitude)


class DistanceUnit(Enum):
    """Units in which a distance expression reports its result.

    Each member's value is a pint unit name. The expression vocabulary
    is case-sensitive and deliberately lenient: unknown names fall back to
    meters instead of failing.

    Examples
    --------
    >>> DistanceUnit.from_name("Metres") is DistanceUnit.METERS
    True
    >>> DistanceUnit.from_name("meters") is DistanceUnit.METERS
    True
    """

    METERS = "meter"
    KILOMETERS = "kilometer"
    MILES = "mile"
    INCHES = "inch"

    @property
    def per_meter(self) -> float:
        """How many of this unit make up one meter."""
        return _factor_per_meter(self.value)

    @property
    def expression_name(self) -> str:
        """Canonical spelling of this unit in expression source form."""
        return _CANONICAL_NAMES[self]

    @classmethod
    def from_name(cls, name: Any) -> "DistanceUnit":
        """Resolve an expression unit token.

        Parameters
        ----------
        name : Any
            The token supplied as the third ``distance`` argument.

        Returns
        -------
        DistanceUnit
            The matching unit, or ``METERS`` for anything unrecognised
            (including non-string tokens).
        """
        if not isinstance(name, str):
            return cls.METERS
        return _UNIT_VOCABULARY.get(name, cls.METERS)


_UNIT_VOCABULARY = {
    "Meters": DistanceUnit.METERS,
    "Metres": DistanceUnit.METERS,
    "Kilometers": DistanceUnit.KILOMETERS,
    "Miles": DistanceUnit.MILES,
    "Inches": DistanceUnit.INCHES,
}

_CANONICAL_NAMES = {
    DistanceUnit.METERS: "Meters",
    DistanceUnit.KILOMETERS: "Kilometers",
    DistanceUnit.MILES: "Miles",
    DistanceUnit.INCHES: "Inches",
}
