#!/usr/bin/env python3
"""
Arithmetic over the numeric tower.

Promotion rules, applied to every binary operation:
    - A Float on either side makes both sides floats
    - Otherwise Integer and Rational mix exactly, an Integer acting as n/1
    - Exact results with denominator 1 collapse back to Integer
    - Exact results leaving the 64-bit ranges fall back to Float

All functions return new Number objects; none mutate their inputs.
"""

import math
import operator
from typing import Callable, Optional

from unitcalc.calculator.calc_exceptions import DivByZeroError
from unitcalc.calculator.number import Number, Integer, Float, to_float, to_rational, collapse, is_zero
from unitcalc.calculator.rational import Rational, fits_i64, fits_i32, U32_MAX


def _combine( lhs: Number, rhs: Number, op: Callable ) -> Number:
    if isinstance( lhs, Float ) or isinstance( rhs, Float ):
        return Float( op( to_float( lhs ), to_float( rhs ) ) )

    if isinstance( lhs, Integer ) and isinstance( rhs, Integer ) and op is not operator.truediv:
        result = op( lhs.value, rhs.value )
        if fits_i64( result ):
            return Integer( result )
        return Float( float( result ) )

    try:
        return collapse( op( to_rational( lhs ), to_rational( rhs ) ) )
    except OverflowError:
        return Float( op( to_float( lhs ), to_float( rhs ) ) )


def add( lhs: Number, rhs: Number ) -> Number:
    return _combine( lhs, rhs, operator.add )


def sub( lhs: Number, rhs: Number ) -> Number:
    return _combine( lhs, rhs, operator.sub )


def mul( lhs: Number, rhs: Number ) -> Number:
    return _combine( lhs, rhs, operator.mul )


def div( lhs: Number, rhs: Number ) -> Number:
    """
    Divide two numbers.

    Requires:
        - rhs is not zero in any representation

    Ensures:
        - Float division when either side is a Float
        - Exact rational division otherwise, collapsed to Integer when whole

    Raises:
        - DivByZeroError if rhs is zero
    """
    if is_zero( rhs ):
        raise DivByZeroError()
    return _combine( lhs, rhs, operator.truediv )


def negate( number: Number ) -> Number:
    if isinstance( number, Integer ):
        if fits_i64( -number.value ):
            return Integer( -number.value )
        return Float( -float( number.value ) )
    if isinstance( number, Rational ):
        try:
            return -number
        except OverflowError:
            return Float( -float( number ) )
    return Float( -number.value )


# ─────────────────────────────────────────────────────────────────────
# Powers
# ─────────────────────────────────────────────────────────────────────
def _is_odd_integer( value: float ) -> bool:
    return float( value ).is_integer() and int( value ) % 2 == 1


def _float_pow( base: float, exponent: float ) -> float:
    if base == 0.0 and exponent < 0:
        # IEEE pole: -0.0 to an odd negative power is -inf
        return math.copysign( math.inf, base ) if _is_odd_integer( exponent ) else math.inf
    try:
        return math.pow( base, exponent )
    except OverflowError:
        return -math.inf if base < 0 and _is_odd_integer( exponent ) else math.inf
    except ValueError:
        # negative base with a fractional exponent
        return math.nan


def _checked_int_pow( base: int, exponent: int ) -> Optional[int]:
    # |base| >= 2 overflows 64 bits long before the exponent reaches 64
    if abs( base ) > 1 and exponent > 63:
        return None
    result = base ** exponent
    return result if fits_i64( result ) else None


def power( lhs: Number, rhs: Number ) -> Number:
    """
    Raise lhs to the power rhs.

    Requires:
        - Nothing beyond valid Number variants

    Ensures:
        - Integer ^ Integer is exact when the result fits 64 bits; a negative
          exponent gives the exact reciprocal
        - Rational ^ Integer is exact when both parts fit 64 bits
        - Every other case, and every overflow, uses floating-point pow
        - Any Float operand forces floating-point pow, where zero to a
          negative power is a signed infinity

    Raises:
        - DivByZeroError for an exact zero raised to a negative power
    """
    if isinstance( rhs, Float ):
        return Float( _float_pow( to_float( lhs ), rhs.value ) )

    if isinstance( lhs, Integer ) and isinstance( rhs, Integer ):
        exponent = rhs.value
        if lhs.value == 0 and exponent < 0:
            raise DivByZeroError()
        if abs( exponent ) <= U32_MAX:
            result = _checked_int_pow( lhs.value, abs( exponent ) )
            if result is not None:
                if exponent >= 0:
                    return Integer( result )
                return collapse( Rational.inverse( result ) )
        return Float( _float_pow( float( lhs.value ), float( exponent ) ) )

    if isinstance( lhs, Float ) and isinstance( rhs, Integer ):
        return Float( _float_pow( lhs.value, float( rhs.value ) ) )

    if isinstance( lhs, Rational ) and isinstance( rhs, Integer ):
        if lhs.num == 0 and rhs.value < 0:
            raise DivByZeroError()
        if fits_i32( rhs.value ):
            result = lhs.checked_pow( rhs.value )
            if result is not None:
                return collapse( result )
        return Float( _float_pow( float( lhs ), float( rhs.value ) ) )

    return Float( _float_pow( to_float( lhs ), to_float( rhs ) ) )


def quick_smoke_test():
    """Module-level smoke test following the package convention."""

    print( "Testing number_operations module..." )
    passed = True

    try:
        assert add( Integer( 2 ), Integer( 3 ) ) == Integer( 5 )
        assert add( Rational( 1, 2 ), Rational( 1, 2 ) ) == Integer( 1 )
        print( "  ✓ Addition collapses whole rationals" )

        assert div( Integer( 1 ), Integer( 4 ) ) == Rational( 1, 4 )
        assert div( Integer( 8 ), Integer( 4 ) ) == Integer( 2 )
        print( "  ✓ Exact division" )

        assert power( Integer( 2 ), Integer( -2 ) ) == Rational( 1, 4 )
        assert power( Integer( 2 ), Integer( 64 ) ) == Float( 2.0 ** 64 )
        print( "  ✓ Power with exact and float fallbacks" )

        try:
            div( Float( 1.0 ), Integer( 0 ) )
            raise AssertionError( "Division by zero succeeded" )
        except DivByZeroError:
            print( "  ✓ Division by zero raises" )

        print( "✓ number_operations module smoke test PASSED" )

    except Exception as e:
        print( f"✗ number_operations module smoke test FAILED: {e}" )
        import traceback
        traceback.print_exc()
        passed = False

    return passed


if __name__ == "__main__":
    success = quick_smoke_test()
    exit( 0 if success else 1 )
