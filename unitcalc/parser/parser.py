#!/usr/bin/env python3
"""
Packrat parser for calculator expressions.

Grammar, ordered choice, loosest binding first:

    Expression    := Expression ('+'|'-') Term | '-' Term | Term
    Term          := Term ('*'|'/') Exponent | Term 'to' Unit | Exponent
    Exponent      := Atom '^' Exponent | Atom
    Atom          := '(' Expression ')' | QuantityMerge | Number Unit | Number | Unit
    QuantityMerge := QuantityMerge Number Unit | Number Unit

Every rule result is memoized by (position, rule). The left-recursive rules
use Warth-style seed growing: the memo slot is primed with a failure, the
body runs once to plant a seed (only the non-recursive alternative can
match), then reruns with the seed visible to the recursive call until the
match stops getting longer.

The parser only answers "parsed or not"; there are no syntax error messages.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

from unitcalc.calculator.conversion_tables import AnyUnit, Currency, find_currency
from unitcalc.calculator.node import Binary, Leaf, Node, OpCode, Unary
from unitcalc.calculator.number import Float, Integer, Number
from unitcalc.calculator.unit_operations import common_type
from unitcalc.calculator.value import Value
from unitcalc.parser.token import Token, TokenKind

logger = logging.getLogger( __name__ )


class Rule( Enum ):
    ATOM           = "atom"
    EXPONENT       = "exponent"
    TERM           = "term"
    EXPRESSION     = "expression"
    QUANTITY_MERGE = "quantity_merge"


class Match( NamedTuple ):
    node : Node
    end  : int


# None in a memo slot means "failed here", or "in progress" while a seed grows
MemoEntry = Optional[Match]

_ADDITIVE = {
    TokenKind.ADD : OpCode.ADD,
    TokenKind.SUB : OpCode.SUBTRACT,
}
_MULTIPLICATIVE = {
    TokenKind.MUL : OpCode.MULTIPLY,
    TokenKind.DIV : OpCode.DIVIDE,
}


def _leading_unit( node: Node ) -> Optional[AnyUnit]:
    # unit of the leftmost quantity in a merged chain
    while isinstance( node, Binary ):
        node = node.left
    return node.value.unit if isinstance( node, Leaf ) else None


class Parser:
    """
    Memoizing parser over a growable token buffer.

    Requires:
        - tokens come from Lexer.tokenize()

    Ensures:
        - parse() returns a tree only when the whole buffer is one Expression
        - The memo table is rebuilt from scratch on every parse()
    """

    def __init__( self, tokens: Optional[Iterable[Token]] = None, debug: bool = False ):
        self.tokens : List[Token]                       = list( tokens ) if tokens is not None else []
        self.memos  : Dict[Tuple[int, Rule], MemoEntry] = { }
        self.debug  = debug

    def is_empty( self ) -> bool:
        return not self.tokens

    def extend( self, tokens: Iterable[Token] ) -> None:
        self.tokens.extend( tokens )

    def reset( self ) -> None:
        self.tokens.clear()
        self.memos.clear()

    def parse( self ) -> Optional[Node]:
        """
        Parse the whole token buffer as one Expression.

        Ensures:
            - Returns the tree iff Expression at 0 ends exactly at len( tokens )
            - Returns None otherwise, including for an empty buffer
            - Returns None when parentheses or right-associative powers nest
              deeper than the interpreter's recursion limit allows (roughly 80
              levels at the default limit); flat left-associative chains such
              as 1+1+...+1 are not limited
        """
        self.memos.clear()

        try:
            result = self._expression( 0 )
        except RecursionError:
            logger.warning( "parse: expression nested too deeply, %d tokens", len( self.tokens ) )
            self.memos.clear()
            return None

        node = result.node if result is not None and result.end == len( self.tokens ) else None

        if self.debug: print( f"Parsed {len( self.tokens )} tokens, {'ok' if node is not None else 'no parse'}" )
        logger.debug( "parse: %d tokens, %d memo entries", len( self.tokens ), len( self.memos ) )

        return node

    # ─────────────────────────────────────────────────────────────────
    # Memoization
    # ─────────────────────────────────────────────────────────────────
    def _memoize( self, pos: int, rule: Rule, body: Callable[[int], MemoEntry] ) -> MemoEntry:
        if pos >= len( self.tokens ):
            return None

        key = ( pos, rule )
        if key in self.memos:
            return self.memos[ key ]

        result = body( pos )
        self.memos[ key ] = result
        return result

    def _memoize_left_rec( self, pos: int, rule: Rule, body: Callable[[int], MemoEntry] ) -> MemoEntry:
        """
        Seed-growing memoization for a directly left-recursive rule.

        Ensures:
            - The slot holds a failure before the body first runs, so the
              recursive self-call fails and only the seed alternative matches
            - Each stored result ends strictly further than the one before
            - Returns the longest match found, or None
        """
        if pos >= len( self.tokens ):
            return None

        key = ( pos, rule )
        if key in self.memos:
            return self.memos[ key ]

        self.memos[ key ] = None
        last_result       = None

        while True:
            result = body( pos )
            if result is None:
                break
            if last_result is not None and result.end <= last_result.end:
                break
            last_result       = result
            self.memos[ key ] = last_result

        return last_result

    # ─────────────────────────────────────────────────────────────────
    # Terminals
    # ─────────────────────────────────────────────────────────────────
    def _expect( self, pos: int, kind: TokenKind ) -> Optional[int]:
        if pos < len( self.tokens ) and self.tokens[ pos ].kind == kind:
            return pos + 1
        return None

    def _expect_number( self, pos: int ) -> Optional[Tuple[Number, int]]:
        if pos >= len( self.tokens ):
            return None

        token = self.tokens[ pos ]
        if token.kind == TokenKind.LIT_INT:
            return Integer( token.value ), pos + 1
        if token.kind == TokenKind.LIT_FLOAT:
            return Float( token.value ), pos + 1
        return None

    def _expect_unit( self, pos: int ) -> Optional[Tuple[AnyUnit, int]]:
        if pos >= len( self.tokens ):
            return None

        token = self.tokens[ pos ]
        if token.kind == TokenKind.UNIT:
            return token.value, pos + 1
        if token.kind == TokenKind.CURR:
            code = find_currency( token.value )
            if code is not None:
                return Currency( code ), pos + 1
        return None

    def _expect_quantity( self, pos: int ) -> Optional[Tuple[Value, int]]:
        number = self._expect_number( pos )
        if number is None:
            return None

        num, pos = number
        unit     = self._expect_unit( pos )
        if unit is None:
            return None

        unit, pos = unit
        return Value( num, unit ), pos

    # ─────────────────────────────────────────────────────────────────
    # Rules
    # ─────────────────────────────────────────────────────────────────
    def _expression( self, pos: int ) -> MemoEntry:
        return self._memoize_left_rec( pos, Rule.EXPRESSION, self._expression_body )

    def _expression_body( self, pos: int ) -> MemoEntry:
        lhs = self._expression( pos )
        if lhs is not None and lhs.end < len( self.tokens ):
            op = _ADDITIVE.get( self.tokens[ lhs.end ].kind )
            if op is not None:
                rhs = self._term( lhs.end + 1 )
                if rhs is not None:
                    return Match( Binary( op, lhs.node, rhs.node ), rhs.end )

        after_minus = self._expect( pos, TokenKind.SUB )
        if after_minus is not None:
            operand = self._term( after_minus )
            if operand is not None:
                return Match( Unary( OpCode.NEGATE, operand.node ), operand.end )

        return self._term( pos )

    def _term( self, pos: int ) -> MemoEntry:
        return self._memoize_left_rec( pos, Rule.TERM, self._term_body )

    def _term_body( self, pos: int ) -> MemoEntry:
        lhs = self._term( pos )
        if lhs is not None and lhs.end < len( self.tokens ):
            kind = self.tokens[ lhs.end ].kind

            if kind in _MULTIPLICATIVE:
                rhs = self._exponent( lhs.end + 1 )
                if rhs is not None:
                    return Match( Binary( _MULTIPLICATIVE[ kind ], lhs.node, rhs.node ), rhs.end )

            elif kind == TokenKind.KW_TO:
                target = self._expect_unit( lhs.end + 1 )
                if target is not None:
                    unit, end = target
                    return Match( Binary( OpCode.CONVERT_TO, lhs.node, Leaf( Value.of_unit( unit ) ) ), end )

        return self._exponent( pos )

    def _exponent( self, pos: int ) -> MemoEntry:
        return self._memoize( pos, Rule.EXPONENT, self._exponent_body )

    def _exponent_body( self, pos: int ) -> MemoEntry:
        base = self._atom( pos )
        if base is None:
            return None

        after_caret = self._expect( base.end, TokenKind.EXP )
        if after_caret is not None:
            # right associative: 2^3^2 is 2^(3^2)
            power = self._exponent( after_caret )
            if power is not None:
                return Match( Binary( OpCode.POWER, base.node, power.node ), power.end )

        return base

    def _atom( self, pos: int ) -> MemoEntry:
        return self._memoize( pos, Rule.ATOM, self._atom_body )

    def _atom_body( self, pos: int ) -> MemoEntry:
        after_paren = self._expect( pos, TokenKind.PAR_BEGIN )
        if after_paren is not None:
            inner = self._expression( after_paren )
            if inner is not None:
                end = self._expect( inner.end, TokenKind.PAR_END )
                if end is not None:
                    return Match( inner.node, end )

        merged = self._quantity_merge( pos )
        if merged is not None:
            return merged

        quantity = self._expect_quantity( pos )
        if quantity is not None:
            value, end = quantity
            return Match( Leaf( value ), end )

        number = self._expect_number( pos )
        if number is not None:
            num, end = number
            return Match( Leaf( Value( num ) ), end )

        unit = self._expect_unit( pos )
        if unit is not None:
            unit, end = unit
            return Match( Leaf( Value.of_unit( unit ) ), end )

        return None

    def _quantity_merge( self, pos: int ) -> MemoEntry:
        return self._memoize_left_rec( pos, Rule.QUANTITY_MERGE, self._quantity_merge_body )

    def _quantity_merge_body( self, pos: int ) -> MemoEntry:
        """
        Fold "5 ft 3 in 2 in" into ((5' + 3") + 2").

        Ensures:
            - Every quantity in the chain shares the category of the first
            - Units are left as written; ADD converts at evaluation time
        """
        chain = self._quantity_merge( pos )
        if chain is not None:
            quantity = self._expect_quantity( chain.end )
            if quantity is not None:
                value, end = quantity
                if common_type( _leading_unit( chain.node ), value.unit ) is not None:
                    return Match( Binary( OpCode.ADD, chain.node, Leaf( value ) ), end )

        quantity = self._expect_quantity( pos )
        if quantity is not None:
            value, end = quantity
            return Match( Leaf( value ), end )

        return None


def parse( tokens: Iterable[Token] ) -> Optional[Node]:
    """Parse a complete token list; None when it is not one expression."""
    return Parser( tokens ).parse()


def quick_smoke_test():
    """Quick smoke test: parse a few lines and print their trees."""
    from unitcalc.parser.lexer import Lexer

    print( "Testing Parser..." )

    lexer = Lexer()
    for text in [ "1+2+3+4", "2^3^2", "-2*3", "5 ft 3 in 2 in", "1 pint to gallon", "(1+2", "3 % 2" ]:
        print( f"  {text!r:20} -> {parse( lexer.tokenize( text ) )}" )

    print( "✓ Parser smoke test complete" )


if __name__ == "__main__":
    quick_smoke_test()
