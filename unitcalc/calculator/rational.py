#!/usr/bin/env python3
"""
Exact rational numbers bounded to 64-bit machine ranges.

A Rational is always stored in lowest terms with a positive denominator and
the sign carried by the numerator. The numerator must fit a signed 64-bit
integer and the denominator an unsigned one; results that leave those ranges
raise OverflowError, which the number tower turns into a float fallback.
"""

from math import gcd
from typing import Optional

from unitcalc.calculator.calc_exceptions import DivByZeroError

I64_MIN = -( 2 ** 63 )
I64_MAX = 2 ** 63 - 1
U64_MAX = 2 ** 64 - 1
I32_MIN = -( 2 ** 31 )
I32_MAX = 2 ** 31 - 1
U32_MAX = 2 ** 32 - 1


def fits_i64( value: int ) -> bool:
    return I64_MIN <= value <= I64_MAX


def fits_i32( value: int ) -> bool:
    return I32_MIN <= value <= I32_MAX


def lcm( a: int, b: int ) -> int:
    return a * b // gcd( a, b )


class Rational:
    """
    Reduced fraction num/den.

    Requires:
        - den != 0

    Ensures:
        - gcd( |num|, den ) == 1 and den > 0
        - num fits signed 64 bits, den fits unsigned 64 bits

    Raises:
        - DivByZeroError if den == 0
        - OverflowError if the reduced parts do not fit their ranges
    """

    __slots__ = ( "num", "den" )

    def __init__( self, num: int, den: int = 1 ):
        if den == 0:
            raise DivByZeroError()
        if den < 0:
            num, den = -num, -den

        divisor = gcd( num, den )
        num     = num // divisor
        den     = den // divisor

        if not fits_i64( num ) or den > U64_MAX:
            raise OverflowError( f"Rational {num}/{den} exceeds 64-bit range" )

        self.num = num
        self.den = den

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def inverse( cls, value: int ) -> "Rational":
        """
        Build 1/value.

        Raises:
            - DivByZeroError if value is zero
        """
        if value == 0:
            raise DivByZeroError()
        return cls( 1, value )

    def invert( self ) -> "Rational":
        """
        Swap numerator and denominator, keeping the sign on the numerator.

        Raises:
            - DivByZeroError if this rational is zero
        """
        if self.num == 0:
            raise DivByZeroError()
        return Rational( self.den, self.num )

    def is_zero( self ) -> bool:
        return self.num == 0

    def is_integer( self ) -> bool:
        return self.den == 1

    # ------------------------------------------------------------------
    # Powers
    # ------------------------------------------------------------------
    def checked_pow( self, exponent: int ) -> Optional["Rational"]:
        """
        Raise to an integer power without leaving the 64-bit ranges.

        Requires:
            - exponent fits a signed 32-bit integer

        Ensures:
            - Returns the exact power, inverted for negative exponents
            - Returns None on overflow or when inverting zero
        """
        magnitude = abs( exponent )
        if magnitude > 64 and ( self.den > 1 or abs( self.num ) > 1 ):
            return None

        num       = self.num ** magnitude
        den       = self.den ** magnitude

        if not fits_i64( num ) or den > U64_MAX:
            return None
        if exponent >= 0:
            return Rational( num, den )
        if num == 0 or not fits_i64( den ):
            return None
        return Rational( den, num )

    def pow( self, exponent: int ) -> "Rational":
        result = self.checked_pow( exponent )
        if result is None:
            raise OverflowError( f"{self} ^ {exponent} exceeds 64-bit range" )
        return result

    # ------------------------------------------------------------------
    # Arithmetic, all results reduced on construction
    # ------------------------------------------------------------------
    def __add__( self, other: "Rational" ) -> "Rational":
        den = lcm( self.den, other.den )
        num = self.num * ( den // self.den ) + other.num * ( den // other.den )
        return Rational( num, den )

    def __sub__( self, other: "Rational" ) -> "Rational":
        den = lcm( self.den, other.den )
        num = self.num * ( den // self.den ) - other.num * ( den // other.den )
        return Rational( num, den )

    def __mul__( self, other: "Rational" ) -> "Rational":
        return Rational( self.num * other.num, self.den * other.den )

    def __truediv__( self, other: "Rational" ) -> "Rational":
        if other.num == 0:
            raise DivByZeroError()
        return Rational( self.num * other.den, self.den * other.num )

    def __neg__( self ) -> "Rational":
        return Rational( -self.num, self.den )

    # ------------------------------------------------------------------
    # Comparison and conversion
    # ------------------------------------------------------------------
    def __eq__( self, other: object ) -> bool:
        if isinstance( other, Rational ):
            return self.num == other.num and self.den == other.den
        if isinstance( other, int ) and not isinstance( other, bool ):
            return self.den == 1 and self.num == other
        return NotImplemented

    def __hash__( self ) -> int:
        return hash( ( self.num, self.den ) )

    def __float__( self ) -> float:
        return self.num / self.den

    def __str__( self ) -> str:
        return f"{self.num}/{self.den}"

    def __repr__( self ) -> str:
        return f"Rational({self.num}, {self.den})"


def quick_smoke_test():
    """Module-level smoke test following the package convention."""

    print( "Testing rational module..." )
    passed = True

    try:
        assert Rational( 1, 2 ) + Rational( 1, 3 ) == Rational( 5, 6 )
        print( "  ✓ 1/2 + 1/3 = 5/6" )

        assert Rational( 1, 2 ) - Rational( 1, 2 ) == Rational( 0, 1 )
        print( "  ✓ 1/2 - 1/2 = 0/1" )

        assert Rational( -4, 8 ) == Rational( -1, 2 )
        assert Rational( 3, -6 ) == Rational( -1, 2 )
        print( "  ✓ Reduction carries the sign on the numerator" )

        assert Rational( 2, 3 ).checked_pow( -2 ) == Rational( 9, 4 )
        assert Rational( 2 ** 40, 1 ).checked_pow( 2 ) is None
        print( "  ✓ Checked powers" )

        print( "✓ rational module smoke test PASSED" )

    except Exception as e:
        print( f"✗ rational module smoke test FAILED: {e}" )
        import traceback
        traceback.print_exc()
        passed = False

    return passed


if __name__ == "__main__":
    success = quick_smoke_test()
    exit( 0 if success else 1 )
