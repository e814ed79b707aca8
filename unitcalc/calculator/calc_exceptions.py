#!/usr/bin/env python3
"""
Exception taxonomy for unit-aware calculations.

Every error a calculation can raise is a direct subclass of CalcError;
callers catch that one type and print its message.
"""

from typing import Optional


class CalcError( Exception ):
    """
    Base exception for all calculation errors.

    Requires:
        - message is a short, human readable description

    Ensures:
        - str( error ) is the message
        - cause, if given, is kept for diagnostics
    """

    default_message = "Calculation error"

    def __init__( self, message: Optional[str] = None, cause: Optional[Exception] = None ):
        super().__init__( message or self.default_message )
        self.cause = cause


class DivByZeroError( CalcError ):
    """Division (or inversion) by zero in any number representation."""
    default_message = "Division by zero"


class ExpByUnitError( CalcError ):
    """The exponent of a power carries a unit."""
    default_message = "Exponent cannot have a unit"


class DifferentUnitTypesError( CalcError ):
    """Operands belong to different unit categories, or only one has a unit."""
    default_message = "Different unit types"


class OperateWithUnitsError( CalcError ):
    """Both operands of a multiplication or division carry a unit."""
    default_message = "Cannot operate with units"


class ConversionError( CalcError ):
    """
    No conversion path exists.

    Used for:
        - unsupported temperature pairs
        - units without a base factor
        - unknown currency codes or a failing rate provider
    """
    default_message = "Conversion error"


class MissingUnitError( CalcError ):
    """The conversion operator was applied to a unitless operand."""
    default_message = "Missing unit"
