#!/usr/bin/env python3
"""
Operators on Values, dispatched by the evaluator.

Numbers go through the numeric tower (number_operations.py); unit legality
and conversion go through the unit algebra (unit_operations.py).
"""

from typing import Callable, Optional

from unitcalc.calculator import number_operations as nops
from unitcalc.calculator import unit_operations as uops
from unitcalc.calculator.calc_exceptions import DifferentUnitTypesError, ExpByUnitError, MissingUnitError
from unitcalc.calculator.number import Number
from unitcalc.calculator.value import Value
from unitcalc.currency.rate_provider import RateProvider


def conversion( lhs: Value, rhs: Value, rates: Optional[RateProvider] = None ) -> Value:
    """
    Convert lhs into rhs's unit.

    Raises:
        - MissingUnitError if either side is unitless
        - DifferentUnitTypesError / ConversionError from the unit algebra
    """
    if lhs.unit is None or rhs.unit is None:
        raise MissingUnitError()
    return Value( uops.convert( lhs.num, lhs.unit, rhs.unit, rates ), rhs.unit )


def power( lhs: Value, rhs: Value, rates: Optional[RateProvider] = None ) -> Value:
    if rhs.unit is not None:
        raise ExpByUnitError()
    return Value( nops.power( lhs.num, rhs.num ), lhs.unit )


def mul( lhs: Value, rhs: Value, rates: Optional[RateProvider] = None ) -> Value:
    return Value( nops.mul( lhs.num, rhs.num ), uops.single( lhs.unit, rhs.unit ) )


def div( lhs: Value, rhs: Value, rates: Optional[RateProvider] = None ) -> Value:
    num  = nops.div( lhs.num, rhs.num )
    unit = uops.single( lhs.unit, rhs.unit )
    return Value( num, unit )


def _add_or_sub( lhs: Value, rhs: Value, op: Callable[[Number, Number], Number], rates: Optional[RateProvider] ) -> Value:
    if lhs.unit == rhs.unit:
        return Value( op( lhs.num, rhs.num ), lhs.unit )

    if lhs.unit is not None and rhs.unit is not None:
        converted = uops.convert( rhs.num, rhs.unit, lhs.unit, rates )
        return Value( op( lhs.num, converted ), lhs.unit )

    raise DifferentUnitTypesError()


def add( lhs: Value, rhs: Value, rates: Optional[RateProvider] = None ) -> Value:
    """
    Add two values, converting rhs into lhs's unit when they differ.

    Raises:
        - DifferentUnitTypesError if only one side has a unit, or the
          categories differ
        - ConversionError if no conversion path exists
    """
    return _add_or_sub( lhs, rhs, nops.add, rates )


def sub( lhs: Value, rhs: Value, rates: Optional[RateProvider] = None ) -> Value:
    return _add_or_sub( lhs, rhs, nops.sub, rates )


def negate( value: Value, rates: Optional[RateProvider] = None ) -> Value:
    return Value( nops.negate( value.num ), value.unit )
