#!/usr/bin/env python3
"""
Currency rate lookup interface.

The calculator never fetches rates itself; it is handed a RateProvider and
calls convert() as a pure lookup. Providers hold rates quoted against one
base (pivot) currency and derive cross rates through it.
"""

from typing import Mapping, Protocol, runtime_checkable

from unitcalc.calculator.calc_exceptions import ConversionError, DivByZeroError
from unitcalc.calculator.rational import Rational


@runtime_checkable
class RateProvider( Protocol ):
    """
    Exchange rate source.

    Requires:
        - codes are ISO currency codes, any case

    Ensures:
        - convert( a, b ) returns how many b one unit of a is worth, exactly

    Raises:
        - ConversionError on an unknown code or when rates are unavailable
    """

    def convert( self, from_code: str, to_code: str ) -> Rational:
        ...


def pivot_convert( rates: Mapping[str, Rational], from_code: str, to_code: str, base_currency: str ) -> Rational:
    """
    Cross rate through the base currency.

    Requires:
        - rates maps upper-case codes to the base-currency price of one unit

    Ensures:
        - same code          -> 1
        - from base          -> 1 / rates[ to ]
        - to base            -> rates[ from ]
        - otherwise          -> rates[ from ] / rates[ to ]

    Raises:
        - ConversionError if a needed code has no rate, or a rate is zero
    """
    from_code     = from_code.upper()
    to_code       = to_code.upper()
    base_currency = base_currency.upper()

    if from_code == to_code:
        return Rational( 1 )

    def rate_of( code: str ) -> Rational:
        if code not in rates:
            raise ConversionError( f"Conversion error: no exchange rate for [{code}]" )
        return rates[ code ]

    try:
        if from_code == base_currency:
            return rate_of( to_code ).invert()
        if to_code == base_currency:
            return rate_of( from_code )
        return rate_of( to_code ).invert() * rate_of( from_code )
    except ( DivByZeroError, OverflowError ) as e:
        raise ConversionError( cause=e ) from e


class StaticRateProvider:
    """
    In-memory provider over a fixed rate table.

    Useful offline and in tests; same pivot rules as the network provider.
    """

    def __init__( self, rates: Mapping[str, Rational], base_currency: str = "HUF" ):
        self.rates         = { code.upper(): rate for code, rate in rates.items() }
        self.base_currency = base_currency.upper()

    def convert( self, from_code: str, to_code: str ) -> Rational:
        return pivot_convert( self.rates, from_code, to_code, self.base_currency )
