#!/usr/bin/env python3
"""
Unit algebra: compatibility checks and conversions.

    - common_type()        - shared category of two units, or None
    - get_default_factor() - exact factor to the category base unit
    - convert()            - factor, temperature, or currency conversion
    - single()             - the "at most one unit" rule for * and /

Errors are raised, not returned (see calc_exceptions.py).
"""

from typing import Optional

from unitcalc.calculator import number_operations as nops
from unitcalc.calculator.calc_exceptions import ConversionError, DifferentUnitTypesError, OperateWithUnitsError
from unitcalc.calculator.conversion_tables import AnyUnit, BASE_FACTORS, Currency, Unit, UnitType, find_category
from unitcalc.calculator.number import Number, Integer, collapse
from unitcalc.calculator.rational import Rational
from unitcalc.currency.rate_provider import RateProvider

_TEMP_FACTOR = Rational( 18, 10 )
_TEMP_BIAS   = Integer( 32 )


def get_unit_type( unit: AnyUnit ) -> UnitType:
    return find_category( unit )


def common_type( a: AnyUnit, b: AnyUnit ) -> Optional[UnitType]:
    """
    Return the category shared by both units.

    Ensures:
        - Returns the UnitType when a and b are in the same category
        - Returns None otherwise
    """
    unit_type = get_unit_type( a )
    if unit_type == get_unit_type( b ):
        return unit_type
    return None


def get_default_factor( unit: AnyUnit ) -> Number:
    """
    Exact factor from unit to its category's base unit.

    Raises:
        - ConversionError for temperature and currency units, which have none
    """
    factor = BASE_FACTORS.get( unit ) if isinstance( unit, Unit ) else None
    if factor is None:
        raise ConversionError()
    return collapse( factor )


def _convert_temperature( value: Number, from_unit: AnyUnit, to_unit: AnyUnit ) -> Number:
    # only the C <-> F pair is defined
    if from_unit == Unit.TEMP_C and to_unit == Unit.TEMP_F:
        return nops.add( nops.mul( value, _TEMP_FACTOR ), _TEMP_BIAS )
    if from_unit == Unit.TEMP_F and to_unit == Unit.TEMP_C:
        return nops.div( nops.sub( value, _TEMP_BIAS ), _TEMP_FACTOR )
    raise ConversionError()


def _convert_currency( value: Number, from_unit: Currency, to_unit: Currency, rates: Optional[RateProvider] ) -> Number:
    if rates is None:
        raise ConversionError( "Conversion error: no currency rates available" )
    rate = rates.convert( from_unit.code, to_unit.code )
    return nops.mul( value, collapse( rate ) )


def convert( value: Number, from_unit: AnyUnit, to_unit: AnyUnit, rates: Optional[RateProvider] = None ) -> Number:
    """
    Convert a number between two units of the same category.

    Requires:
        - from_unit and to_unit are Unit members or Currency instances
        - rates is a RateProvider when converting currencies

    Ensures:
        - Factor categories: value * factor( from ) / factor( to ), exact
        - Temperature: affine C <-> F
        - Currency: value * rate from the provider

    Raises:
        - DifferentUnitTypesError if the categories differ
        - ConversionError if no conversion path exists
    """
    unit_type = common_type( from_unit, to_unit )
    if unit_type is None:
        raise DifferentUnitTypesError()

    if unit_type == UnitType.TEMPERATURE:
        return _convert_temperature( value, from_unit, to_unit )

    if unit_type == UnitType.CURRENCY:
        return _convert_currency( value, from_unit, to_unit, rates )

    rate = nops.div( get_default_factor( from_unit ), get_default_factor( to_unit ) )
    return nops.mul( rate, value )


def single( a: Optional[AnyUnit], b: Optional[AnyUnit] ) -> Optional[AnyUnit]:
    """
    Pick the only unit present among a and b.

    Raises:
        - OperateWithUnitsError when both carry a unit
    """
    if a is None:
        return b
    if b is None:
        return a
    raise OperateWithUnitsError()
