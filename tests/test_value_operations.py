#!/usr/bin/env python3
"""
Unit tests for Value, its operators, and the expression tree evaluator.

Run with: pytest -v tests/test_value_operations.py
"""

import pytest

from unitcalc.calculator import value_operations as vops
from unitcalc.calculator.calc_exceptions import (
    CalcError,
    ConversionError,
    DifferentUnitTypesError,
    DivByZeroError,
    ExpByUnitError,
    MissingUnitError,
    OperateWithUnitsError,
)
from unitcalc.calculator.conversion_tables import Currency, Unit
from unitcalc.calculator.node import Binary, Evaluator, Leaf, OpCode, Unary, evaluate
from unitcalc.calculator.number import Float, Integer
from unitcalc.calculator.rational import Rational
from unitcalc.calculator.value import Value
from unitcalc.currency.rate_provider import StaticRateProvider


def leaf( num, unit=None ):
    return Leaf( Value.of_int( num, unit ) )


class TestValue:
    """Tests for Value construction and rendering."""

    def test_rendering( self ):
        assert str( Value.of_int( 35, Unit.TEMP_C ) ) == "35C"
        assert str( Value.of_float( 1500.0, Unit.LEN_FEET ) ) == "1.5k'"
        assert str( Value.of_int( 100, Currency( "USD" ) ) ) == "100USD"
        assert str( Value.of_int( 7 ) ) == "7"

    def test_bare_unit_is_one( self ):
        assert Value.of_unit( Unit.LEN_M ) == Value( Integer( 1 ), Unit.LEN_M )

    def test_values_are_immutable( self ):
        value = Value.of_int( 1 )
        with pytest.raises( AttributeError ):
            value.num = Integer( 2 )


class TestAddSub:
    """Tests for ADD and SUBTRACT rules."""

    def test_unitless( self ):
        assert vops.add( Value.of_int( 1 ), Value.of_int( 2 ) ) == Value.of_int( 3 )
        assert vops.sub( Value.of_int( 1 ), Value.of_int( 2 ) ) == Value.of_int( -1 )

    def test_same_unit_keeps_unit( self ):
        assert vops.add( Value.of_int( 1, Unit.LEN_M ), Value.of_int( 2, Unit.LEN_M ) ) == Value.of_int( 3, Unit.LEN_M )

    def test_rhs_converted_into_lhs_unit( self ):
        result = vops.add( Value.of_int( 1, Unit.LEN_FEET ), Value.of_int( 6, Unit.LEN_INCH ) )
        assert result == Value( Rational( 3, 2 ), Unit.LEN_FEET )

        result = vops.sub( Value.of_int( 1, Unit.LEN_M ), Value.of_int( 50, Unit.LEN_CM ) )
        assert result == Value( Rational( 1, 2 ), Unit.LEN_M )

    def test_one_side_unitless_raises( self ):
        with pytest.raises( DifferentUnitTypesError ):
            vops.add( Value.of_int( 1 ), Value.of_int( 1, Unit.LEN_M ) )
        with pytest.raises( DifferentUnitTypesError ):
            vops.sub( Value.of_int( 1, Unit.LEN_M ), Value.of_int( 1 ) )

    def test_different_categories_raise( self ):
        with pytest.raises( DifferentUnitTypesError ):
            vops.add( Value.of_int( 1, Unit.LEN_M ), Value.of_int( 1, Unit.MASS_KG ) )

    def test_temperature_sum_converts( self ):
        result = vops.add( Value.of_int( 0, Unit.TEMP_C ), Value.of_int( 212, Unit.TEMP_F ) )
        assert result == Value.of_int( 100, Unit.TEMP_C )


class TestMulDiv:
    """Tests for MULTIPLY and DIVIDE rules."""

    def test_unit_on_one_side( self ):
        assert vops.mul( Value.of_int( 2, Unit.LEN_M ), Value.of_int( 3 ) ) == Value.of_int( 6, Unit.LEN_M )
        assert vops.mul( Value.of_int( 2 ), Value.of_int( 3, Unit.LEN_M ) ) == Value.of_int( 6, Unit.LEN_M )
        assert vops.div( Value.of_int( 3, Unit.LEN_M ), Value.of_int( 4 ) ) == Value( Rational( 3, 4 ), Unit.LEN_M )

    def test_units_on_both_sides_raise( self ):
        with pytest.raises( OperateWithUnitsError ):
            vops.mul( Value.of_int( 2, Unit.LEN_M ), Value.of_int( 3, Unit.LEN_M ) )
        with pytest.raises( OperateWithUnitsError ):
            vops.div( Value.of_int( 2, Unit.LEN_M ), Value.of_int( 3, Unit.MASS_KG ) )

    def test_division_by_zero( self ):
        with pytest.raises( DivByZeroError ):
            vops.div( Value.of_int( 6, Unit.LEN_M ), Value.of_int( 0 ) )


class TestPowerConversionNegate:
    """Tests for POWER, CONVERT_TO and NEGATE rules."""

    def test_power_keeps_base_unit( self ):
        assert vops.power( Value.of_int( 2, Unit.LEN_M ), Value.of_int( 2 ) ) == Value.of_int( 4, Unit.LEN_M )

    def test_exponent_with_unit_raises( self ):
        with pytest.raises( ExpByUnitError ):
            vops.power( Value.of_int( 2 ), Value.of_int( 2, Unit.LEN_M ) )

    def test_conversion_carries_target_unit( self ):
        result = vops.conversion( Value.of_int( 1, Unit.VOL_PINT ), Value.of_unit( Unit.VOL_GALLON ) )
        assert result == Value( Rational( 1, 8 ), Unit.VOL_GALLON )

    def test_conversion_needs_units( self ):
        with pytest.raises( MissingUnitError ):
            vops.conversion( Value.of_int( 1 ), Value.of_unit( Unit.LEN_M ) )
        with pytest.raises( MissingUnitError ):
            vops.conversion( Value.of_int( 1, Unit.LEN_M ), Value.of_int( 1 ) )

    def test_currency_conversion( self ):
        rates  = StaticRateProvider( { "EUR": Rational( 400 ), "USD": Rational( 360 ) } )
        result = vops.conversion( Value.of_int( 9, Currency( "EUR" ) ), Value.of_unit( Currency( "USD" ) ), rates )
        assert result == Value.of_int( 10, Currency( "USD" ) )

    def test_negate_keeps_unit( self ):
        assert vops.negate( Value.of_int( 5, Unit.TEMP_C ) ) == Value.of_int( -5, Unit.TEMP_C )
        assert vops.negate( Value.of_float( 1.5 ) ) == Value.of_float( -1.5 )


class TestNode:
    """Tests for tree construction and debug rendering."""

    def test_opcode_symbols( self ):
        assert OpCode.NEGATE.symbol == "-"
        assert OpCode.SUBTRACT.symbol == "-"
        assert OpCode.POWER.symbol == "^"
        assert OpCode.CONVERT_TO.symbol == " to "

    def test_rendering( self ):
        tree = Binary( OpCode.ADD, Binary( OpCode.ADD, leaf( 1 ), leaf( 2 ) ), leaf( 3 ) )
        assert str( tree ) == "((1+2)+3)"
        assert str( Unary( OpCode.NEGATE, leaf( 3 ) ) ) == "(-3)"
        assert str( Binary( OpCode.CONVERT_TO, leaf( 15, Unit.TEMP_C ), Leaf( Value.of_unit( Unit.TEMP_F ) ) ) ) == "(15C to 1F)"

    def test_operator_arity_is_checked( self ):
        with pytest.raises( ValueError ):
            Unary( OpCode.ADD, leaf( 1 ) )
        with pytest.raises( ValueError ):
            Binary( OpCode.NEGATE, leaf( 1 ), leaf( 2 ) )

    def test_nodes_compare_structurally( self ):
        assert Binary( OpCode.MULTIPLY, leaf( 2 ), leaf( 3 ) ) == Binary( OpCode.MULTIPLY, leaf( 2 ), leaf( 3 ) )


class TestEvaluator:
    """Tests for post-order evaluation."""

    def test_evaluates_nested_tree( self ):
        # (-(2*3)) + 10
        tree = Binary( OpCode.ADD, Unary( OpCode.NEGATE, Binary( OpCode.MULTIPLY, leaf( 2 ), leaf( 3 ) ) ), leaf( 10 ) )
        assert evaluate( tree ) == Value.of_int( 4 )

    def test_leaf_returns_its_value( self ):
        assert Evaluator().evaluate( leaf( 5, Unit.LEN_M ) ) == Value.of_int( 5, Unit.LEN_M )

    def test_first_error_propagates( self ):
        tree = Binary( OpCode.ADD, leaf( 1 ), Binary( OpCode.DIVIDE, leaf( 1 ), leaf( 0 ) ) )
        with pytest.raises( DivByZeroError ):
            evaluate( tree )

    def test_rates_are_passed_down( self ):
        tree  = Binary( OpCode.CONVERT_TO, leaf( 2, Currency( "EUR" ) ), Leaf( Value.of_unit( Currency( "HUF" ) ) ) )
        rates = StaticRateProvider( { "EUR": Rational( 400 ) } )
        assert Evaluator( rates ).evaluate( tree ) == Value.of_int( 800, Currency( "HUF" ) )
        with pytest.raises( ConversionError ):
            evaluate( tree )

    def test_all_errors_share_the_base_class( self ):
        tree = Binary( OpCode.MULTIPLY, leaf( 1, Unit.LEN_M ), leaf( 1, Unit.LEN_M ) )
        with pytest.raises( CalcError ) as excinfo:
            evaluate( tree )
        assert str( excinfo.value ) == "Cannot operate with units"

    def test_operands_evaluate_left_to_right( self ):
        # 10 - 4 - 3, left deep
        tree = Binary( OpCode.SUBTRACT, Binary( OpCode.SUBTRACT, leaf( 10 ), leaf( 4 ) ), leaf( 3 ) )
        assert evaluate( tree ) == Value.of_int( 3 )


class TestDeepTrees:
    """Tests for trees deeper than the interpreter's recursion limit."""

    DEPTH = 2000

    def left_chain( self ):
        tree = leaf( 1 )
        for _ in range( self.DEPTH ):
            tree = Binary( OpCode.ADD, tree, leaf( 1 ) )
        return tree

    def test_evaluate_left_chain( self ):
        assert evaluate( self.left_chain() ) == Value.of_int( self.DEPTH + 1 )

    def test_evaluate_right_chain_of_negations( self ):
        tree = leaf( 7 )
        for _ in range( self.DEPTH ):
            tree = Unary( OpCode.NEGATE, tree )
        assert evaluate( tree ) == Value.of_int( 7 )

    def test_render_left_chain( self ):
        text = str( self.left_chain() )
        assert text.startswith( "(" * self.DEPTH + "1+1)" )
        assert text.count( "+" ) == self.DEPTH
