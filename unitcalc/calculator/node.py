#!/usr/bin/env python3
"""
Expression tree and its evaluator.

Nodes are immutable and own their children. Operators are identified by an
OpCode tag, used both for dispatch and for rendering.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple, Union

from unitcalc.calculator import value_operations as vops
from unitcalc.calculator.value import Value
from unitcalc.currency.rate_provider import RateProvider


class OpCode( Enum ):
    """Operators of the expression tree."""
    NEGATE     = auto()
    POWER      = auto()
    MULTIPLY   = auto()
    DIVIDE     = auto()
    ADD        = auto()
    SUBTRACT   = auto()
    CONVERT_TO = auto()

    @property
    def symbol( self ) -> str:
        return OP_SYMBOLS[ self ]


OP_SYMBOLS = {
    OpCode.NEGATE     : "-",
    OpCode.POWER      : "^",
    OpCode.MULTIPLY   : "*",
    OpCode.DIVIDE     : "/",
    OpCode.ADD        : "+",
    OpCode.SUBTRACT   : "-",
    OpCode.CONVERT_TO : " to ",
}

UNARY_OPERATIONS = {
    OpCode.NEGATE : vops.negate,
}

BINARY_OPERATIONS = {
    OpCode.POWER      : vops.power,
    OpCode.MULTIPLY   : vops.mul,
    OpCode.DIVIDE     : vops.div,
    OpCode.ADD        : vops.add,
    OpCode.SUBTRACT   : vops.sub,
    OpCode.CONVERT_TO : vops.conversion,
}


@dataclass( frozen=True )
class Leaf:
    value: Value

    def __str__( self ) -> str:
        return str( self.value )


@dataclass( frozen=True )
class Unary:
    op    : OpCode
    child : "Node"

    def __post_init__( self ):
        if self.op not in UNARY_OPERATIONS:
            raise ValueError( f"[{self.op}] is not a unary operator" )

    def __str__( self ) -> str:
        return render( self )


@dataclass( frozen=True )
class Binary:
    op    : OpCode
    left  : "Node"
    right : "Node"

    def __post_init__( self ):
        if self.op not in BINARY_OPERATIONS:
            raise ValueError( f"[{self.op}] is not a binary operator" )

    def __str__( self ) -> str:
        return render( self )


Node = Union[ Leaf, Unary, Binary ]


def render( node: Node ) -> str:
    """
    Fully parenthesized text of a tree, e.g. "((1+2)+3)".

    Ensures:
        - Walks with an explicit stack; tree depth is not bounded by the
          interpreter's recursion limit
    """
    parts = []
    stack = [ node ]

    while stack:
        item = stack.pop()

        if isinstance( item, str ):
            parts.append( item )
        elif isinstance( item, Leaf ):
            parts.append( str( item.value ) )
        elif isinstance( item, Unary ):
            stack.extend( [ ")", item.child, f"({item.op.symbol}" ] )
        elif isinstance( item, Binary ):
            stack.extend( [ ")", item.right, item.op.symbol, item.left, "(" ] )
        else:
            raise TypeError( f"Unknown node type [{type( item ).__name__}]" )

    return "".join( parts )


class Evaluator:
    """
    Post-order evaluation of an expression tree.

    Requires:
        - rates is a RateProvider when the tree converts currencies

    Ensures:
        - evaluate() returns the single Value the tree denotes
        - Children are evaluated left to right before their operator
        - The first CalcError raised anywhere in the tree propagates unchanged
        - Tree depth is not bounded by the interpreter's recursion limit
    """

    def __init__( self, rates: Optional[RateProvider] = None ):
        self.rates = rates

    def evaluate( self, node: Node ) -> Value:

        values : List[Value]              = []
        # ( node, children already evaluated? )
        stack  : List[Tuple[Node, bool]]  = [ ( node, False ) ]

        while stack:
            current, ready = stack.pop()

            if isinstance( current, Leaf ):
                values.append( current.value )

            elif isinstance( current, Unary ):
                if ready:
                    operand = values.pop()
                    values.append( UNARY_OPERATIONS[ current.op ]( operand, self.rates ) )
                else:
                    stack.append( ( current, True ) )
                    stack.append( ( current.child, False ) )

            elif isinstance( current, Binary ):
                if ready:
                    rhs = values.pop()
                    lhs = values.pop()
                    values.append( BINARY_OPERATIONS[ current.op ]( lhs, rhs, self.rates ) )
                else:
                    stack.append( ( current, True ) )
                    stack.append( ( current.right, False ) )
                    stack.append( ( current.left, False ) )

            else:
                raise TypeError( f"Unknown node type [{type( current ).__name__}]" )

        return values.pop()


def evaluate( node: Node, rates: Optional[RateProvider] = None ) -> Value:
    return Evaluator( rates ).evaluate( node )
