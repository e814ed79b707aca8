#!/usr/bin/env python3
"""
Number variants of the numeric tower and their text rendering.

    Integer   - signed 64-bit integer
    Rational  - exact reduced fraction (see rational.py)
    Float     - IEEE double

Arithmetic and promotion rules live in number_operations.py.
"""

import math
from dataclasses import dataclass
from typing import Union

from unitcalc.calculator.rational import Rational


@dataclass( frozen=True )
class Integer:
    value: int

    def __str__( self ) -> str:
        return format_number( self )


@dataclass( frozen=True )
class Float:
    value: float

    def __str__( self ) -> str:
        return format_number( self )


Number = Union[ Integer, Rational, Float ]


def to_float( number: Number ) -> float:
    if isinstance( number, Integer ):
        return float( number.value )
    if isinstance( number, Rational ):
        return float( number )
    return number.value


def to_rational( number: Number ) -> Rational:
    """
    Widen an exact number to a Rational.

    Requires:
        - number is an Integer or a Rational

    Raises:
        - TypeError for a Float, which has no exact rational form here
    """
    if isinstance( number, Integer ):
        return Rational( number.value, 1 )
    if isinstance( number, Rational ):
        return number
    raise TypeError( f"Cannot cast float {number.value} to rational" )


def collapse( rational: Rational ) -> Number:
    """Return an Integer when the denominator is 1, else the Rational itself."""
    if rational.den == 1:
        return Integer( rational.num )
    return rational


def is_zero( number: Number ) -> bool:
    if isinstance( number, Rational ):
        return number.num == 0
    return number.value == 0


# ─────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────
def _plain_float( value: float ) -> str:
    # shortest round-trip text, integral values without a trailing ".0"
    if value.is_integer():
        return str( int( value ) )
    return repr( value )


def _scientific( value: float ) -> str:
    mantissa, exponent = f"{value:.3e}".split( "e" )
    return f"{mantissa}e{int( exponent )}"


def format_float( value: float ) -> str:
    """
    Render a float with magnitude bands.

    Ensures:
        - |x| >= 1e9 or |x| < 1e-3  -> "1.235e9" style, three decimals
        - |x| >= 1e6                -> truncated to thousandths of a million, "m" suffix
        - |x| >= 1e3                -> truncated to thousandths of a thousand, "k" suffix
        - |x| >= 1                  -> truncated to three decimals
        - otherwise                 -> truncated to six decimals
    """
    magnitude = abs( value )

    if math.isnan( value ) or math.isinf( value ):
        return repr( value )
    if magnitude >= 1e9 or magnitude < 1e-3:
        return _scientific( value )
    if magnitude >= 1e6:
        return f"{_plain_float( math.trunc( value / 1e3 ) / 1e3 )}m"
    if magnitude >= 1e3:
        return f"{_plain_float( math.trunc( value ) / 1e3 )}k"
    if magnitude >= 1.0:
        return _plain_float( math.trunc( value * 1e3 ) / 1e3 )
    return _plain_float( math.trunc( value * 1e6 ) / 1e6 )


def format_number( number: Number ) -> str:
    """
    Render any number variant.

    Integers divisible by a million or a thousand get an "m" or "k" suffix;
    rationals and floats go through format_float.
    """
    if isinstance( number, Integer ):
        value     = number.value
        magnitude = abs( value )
        if magnitude >= 1_000_000 and magnitude % 1_000_000 == 0:
            return f"{value // 1_000_000}m"
        if magnitude >= 1_000 and magnitude % 1_000 == 0:
            return f"{value // 1_000}k"
        return str( value )

    if isinstance( number, Rational ):
        return format_float( float( number ) )

    return format_float( number.value )
