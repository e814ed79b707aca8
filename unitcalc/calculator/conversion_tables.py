#!/usr/bin/env python3
"""
Unit taxonomy and conversion factor tables.

Hub-and-spoke model where each factor-based category normalizes to a base
unit with an exact rational factor:

    Length  → meter          Area → square meter     Volume → liter
    Mass    → kilogram       Time → second

Temperature is affine (see unit_operations.py) and currency rates come from
an injected rate provider, so neither has a factor here.
"""

from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from unitcalc.calculator.rational import Rational


class UnitType( Enum ):
    """Unit categories; every unit belongs to exactly one."""
    LENGTH      = "length"
    AREA        = "area"
    VOLUME      = "volume"
    MASS        = "mass"
    TEMPERATURE = "temperature"
    TIME        = "time"
    CURRENCY    = "currency"


class Unit( Enum ):
    """Fixed units. The value is the short symbol used when rendering."""
    LEN_M           = "m"
    LEN_KM          = "km"
    LEN_CM          = "cm"
    LEN_MM          = "mm"
    LEN_INCH        = '"'
    LEN_FEET        = "'"
    LEN_YARD        = "yd"
    LEN_MILE        = "mi"

    AREA_M          = "m2"
    AREA_KM         = "km2"
    AREA_CM         = "cm2"
    AREA_MM         = "mm2"
    AREA_INCH       = "in2"
    AREA_FEET       = "ft2"
    AREA_YARD       = "yd2"
    AREA_MILE       = "mi2"

    VOL_LITER       = "l"
    VOL_MILLI_LITER = "ml"
    VOL_M           = "m3"
    VOL_CM          = "cm3"
    VOL_MM          = "mm3"
    VOL_INCH        = "in3"
    VOL_FEET        = "ft3"
    VOL_YARD        = "yd3"
    VOL_PINT        = "pint"
    VOL_GALLON      = "gallon"

    MASS_G          = "g"
    MASS_KG         = "kg"
    MASS_OUNCE      = "oz"
    MASS_POUND      = "lb"

    TEMP_C          = "C"
    TEMP_F          = "F"

    TIME_SEC        = "s"
    TIME_MIN        = "min"
    TIME_HOUR       = "h"

    @property
    def symbol( self ) -> str:
        return self.value

    def __str__( self ) -> str:
        return self.value


# ─────────────────────────────────────────────────────────────────────
# Currencies: sorted, upper case, looked up by binary search
# ─────────────────────────────────────────────────────────────────────
CURRENCIES = (
    "AUD", "BGN", "BRL", "CAD", "CHF", "CNY", "CZK", "DKK", "EUR", "GBP", "HKD", "HUF", "IDR",
    "ILS", "INR", "ISK", "JPY", "KRW", "MXN", "MYR", "NOK", "NZD", "PHP", "PLN", "RON", "RSD",
    "RUB", "SEK", "SGD", "THB", "TRY", "UAH", "USD", "ZAR",
)


def find_currency( code: str ) -> Optional[str]:
    """
    Look a currency code up in CURRENCIES, case-insensitively.

    Ensures:
        - Returns the canonical upper-case code if supported
        - Returns None otherwise
    """
    code = code.strip().upper()
    idx  = bisect_left( CURRENCIES, code )
    if idx < len( CURRENCIES ) and CURRENCIES[ idx ] == code:
        return CURRENCIES[ idx ]
    return None


@dataclass( frozen=True )
class Currency:
    """A currency unit carrying its ISO code."""
    code: str

    @property
    def symbol( self ) -> str:
        return self.code

    def __str__( self ) -> str:
        return self.code


AnyUnit = Union[ Unit, Currency ]


# ─────────────────────────────────────────────────────────────────────
# Primitive constants, all exact
# ─────────────────────────────────────────────────────────────────────
_1         = Rational( 1 )
_1000      = Rational( 1000 )
_1_100     = Rational( 1, 100 )
_1_1000    = Rational( 1, 1000 )
INCH2M     = Rational( 254, 10000 )
FEET2INCH  = Rational( 12 )
YARD2INCH  = Rational( 36 )
MILE2INCH  = Rational( 63360 )
PINT2L     = Rational( 454609, 800000 )
GALLON2L   = Rational( 454609, 100000 )
POUND2KG   = Rational( 45359237, 100000000 )
OUNCE2KG   = POUND2KG * Rational( 1, 16 )

FEET2M     = FEET2INCH * INCH2M
YARD2M     = YARD2INCH * INCH2M
MILE2M     = MILE2INCH * INCH2M

# ─────────────────────────────────────────────────────────────────────
# Factors to the category base unit
# ─────────────────────────────────────────────────────────────────────
BASE_FACTORS = {
    Unit.LEN_M           : _1,
    Unit.LEN_KM          : _1000,
    Unit.LEN_CM          : _1_100,
    Unit.LEN_MM          : _1_1000,
    Unit.LEN_INCH        : INCH2M,
    Unit.LEN_FEET        : FEET2M,
    Unit.LEN_YARD        : YARD2M,
    Unit.LEN_MILE        : MILE2M,

    Unit.AREA_M          : _1,
    Unit.AREA_KM         : _1000.pow( 2 ),
    Unit.AREA_CM         : _1_100.pow( 2 ),
    Unit.AREA_MM         : _1_1000.pow( 2 ),
    Unit.AREA_INCH       : INCH2M.pow( 2 ),
    Unit.AREA_FEET       : FEET2M.pow( 2 ),
    Unit.AREA_YARD       : YARD2M.pow( 2 ),
    Unit.AREA_MILE       : MILE2M.pow( 2 ),

    Unit.VOL_LITER       : _1,
    Unit.VOL_MILLI_LITER : _1_1000,
    Unit.VOL_M           : _1000,
    Unit.VOL_CM          : _1_100.pow( 3 ) * _1000,
    Unit.VOL_MM          : _1_1000.pow( 3 ) * _1000,
    Unit.VOL_INCH        : INCH2M.pow( 3 ) * _1000,
    Unit.VOL_FEET        : FEET2M.pow( 3 ) * _1000,
    Unit.VOL_YARD        : YARD2M.pow( 3 ) * _1000,
    Unit.VOL_PINT        : PINT2L,
    Unit.VOL_GALLON      : GALLON2L,

    Unit.MASS_G          : _1_1000,
    Unit.MASS_KG         : _1,
    Unit.MASS_OUNCE      : OUNCE2KG,
    Unit.MASS_POUND      : POUND2KG,

    Unit.TIME_SEC        : _1,
    Unit.TIME_MIN        : Rational( 60 ),
    Unit.TIME_HOUR       : Rational( 3600 ),
}

# ─────────────────────────────────────────────────────────────────────
# Category registry: unit → category
# ─────────────────────────────────────────────────────────────────────
_PREFIX_CATEGORIES = (
    ( "LEN_",  UnitType.LENGTH ),
    ( "AREA_", UnitType.AREA ),
    ( "VOL_",  UnitType.VOLUME ),
    ( "MASS_", UnitType.MASS ),
    ( "TEMP_", UnitType.TEMPERATURE ),
    ( "TIME_", UnitType.TIME ),
)

UNIT_CATEGORIES = {
    unit: category
    for unit in Unit
    for prefix, category in _PREFIX_CATEGORIES
    if unit.name.startswith( prefix )
}

# ─────────────────────────────────────────────────────────────────────
# Spellings accepted by the lexer, longest/most specific first
# ─────────────────────────────────────────────────────────────────────
UNIT_SPELLINGS = (
    # 3 char
    ( "cm3",            Unit.VOL_CM ),
    ( "mm3",            Unit.VOL_MM ),
    ( "in3",            Unit.VOL_INCH ),
    ( "ft3",            Unit.VOL_FEET ),
    ( "yd3",            Unit.VOL_YARD ),
    ( "gallon|gal",     Unit.VOL_GALLON ),
    ( "km2",            Unit.AREA_KM ),
    ( "cm2",            Unit.AREA_CM ),
    ( "mm2",            Unit.AREA_MM ),
    ( "in2",            Unit.AREA_INCH ),
    ( "ft2",            Unit.AREA_FEET ),
    ( "yd2",            Unit.AREA_YARD ),
    ( "mi2",            Unit.AREA_MILE ),
    ( "min",            Unit.TIME_MIN ),
    # 2 char
    ( "pint|pt",        Unit.VOL_PINT ),
    ( "ml",             Unit.VOL_MILLI_LITER ),
    ( "km",             Unit.LEN_KM ),
    ( "cm",             Unit.LEN_CM ),
    ( "mm",             Unit.LEN_MM ),
    ( "inch|in",        Unit.LEN_INCH ),
    ( "feet|ft",        Unit.LEN_FEET ),
    ( "yard|yd",        Unit.LEN_YARD ),
    ( "mi",             Unit.LEN_MILE ),
    ( "m2",             Unit.AREA_M ),
    ( "m3",             Unit.VOL_M ),
    ( "kg",             Unit.MASS_KG ),
    ( "ounce|oz",       Unit.MASS_OUNCE ),
    ( "pound|lb",       Unit.MASS_POUND ),
    # 1 char
    ( "sec|s",          Unit.TIME_SEC ),
    ( "hour|hr|h",      Unit.TIME_HOUR ),
    ( "m",              Unit.LEN_M ),
    ( "C|c",            Unit.TEMP_C ),
    ( "F|f",            Unit.TEMP_F ),
    ( "g",              Unit.MASS_G ),
    ( "liter|l",        Unit.VOL_LITER ),
)

# Quote marks stand for inch and foot; they are not words, so they skip the word-boundary check
UNIT_SYMBOLS = (
    ( '"', Unit.LEN_INCH ),
    ( "'", Unit.LEN_FEET ),
)


def find_category( unit: AnyUnit ) -> UnitType:
    """
    Find which category a unit belongs to.

    Requires:
        - unit is a Unit member or a Currency

    Ensures:
        - Returns the unit's category
    """
    if isinstance( unit, Currency ):
        return UnitType.CURRENCY
    return UNIT_CATEGORIES[ unit ]


def quick_smoke_test():
    """Module-level smoke test following the package convention."""

    print( "Testing conversion_tables module..." )
    passed = True

    try:
        assert len( UNIT_CATEGORIES ) == len( Unit )
        print( "  ✓ Every unit has a category" )

        assert find_category( Unit.LEN_KM ) == UnitType.LENGTH
        assert find_category( Unit.VOL_PINT ) == UnitType.VOLUME
        assert find_category( Currency( "EUR" ) ) == UnitType.CURRENCY
        print( "  ✓ Category lookup" )

        assert FEET2M == Rational( 3048, 10000 )
        assert BASE_FACTORS[ Unit.VOL_PINT ] / BASE_FACTORS[ Unit.VOL_GALLON ] == Rational( 1, 8 )
        print( "  ✓ Exact factors" )

        assert find_currency( "usd" ) == "USD"
        assert find_currency( "xyz" ) is None
        print( "  ✓ Currency lookup" )

        print( "✓ conversion_tables module smoke test PASSED" )

    except Exception as e:
        print( f"✗ conversion_tables module smoke test FAILED: {e}" )
        import traceback
        traceback.print_exc()
        passed = False

    return passed


if __name__ == "__main__":
    success = quick_smoke_test()
    exit( 0 if success else 1 )
