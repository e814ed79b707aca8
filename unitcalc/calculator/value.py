#!/usr/bin/env python3
"""
Value: a number paired with an optional unit.
"""

from dataclasses import dataclass
from typing import Optional

from unitcalc.calculator.conversion_tables import AnyUnit
from unitcalc.calculator.number import Number, Integer, Float, format_number


@dataclass( frozen=True )
class Value:
    """
    Immutable quantity.

    A unitless value is dimensionless and combines freely; see
    value_operations.py for the rules on unit-carrying values.
    """
    num  : Number
    unit : Optional[AnyUnit] = None

    @classmethod
    def of_int( cls, value: int, unit: Optional[AnyUnit] = None ) -> "Value":
        return cls( Integer( value ), unit )

    @classmethod
    def of_float( cls, value: float, unit: Optional[AnyUnit] = None ) -> "Value":
        return cls( Float( value ), unit )

    @classmethod
    def of_unit( cls, unit: AnyUnit ) -> "Value":
        """A bare unit stands for one of it."""
        return cls( Integer( 1 ), unit )

    def __str__( self ) -> str:
        if self.unit is None:
            return format_number( self.num )
        return f"{format_number( self.num )}{self.unit.symbol}"
