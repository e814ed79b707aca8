#!/usr/bin/env python3
"""
Regex tokenizer for calculator input.

All token patterns are joined into one alternation, one capturing group
per pattern, and tried left to right, so earlier patterns win. Whitespace
between matches is skipped by finditer; anything no pattern recognizes
becomes an INVALID token, which the parser rejects.
"""

from typing import Callable, List, Tuple

import regex

from unitcalc.calculator.conversion_tables import CURRENCIES, UNIT_SPELLINGS, UNIT_SYMBOLS
from unitcalc.calculator.rational import fits_i64
from unitcalc.parser.token import Token, TokenKind

# alphabetic keywords must not run into a longer word ("meter" is not "m" + "eter")
_WORD_END = r"(?![A-Za-z0-9_])"

# exponents past this cannot fit 64 bits with any non-zero mantissa
_MAX_INT_EXPONENT = 19


def _word( pattern: str ) -> str:
    return f"(?:{pattern}){_WORD_END}"


def _integer_token( text: str ) -> Token:
    """
    Integer literal, optionally with a decimal exponent ("1e3").

    Ensures:
        - LIT_INT when the value is integral and fits 64 bits
        - LIT_FLOAT otherwise (negative exponent, or out of range)
    """
    mantissa, _, exponent = text.lower().partition( "e" )

    if not exponent:
        value = int( mantissa )
    else:
        exp = int( exponent )
        if exp < 0 or ( exp > _MAX_INT_EXPONENT and int( mantissa ) != 0 ):
            return Token( TokenKind.LIT_FLOAT, float( text ) )
        value = int( mantissa ) * 10 ** min( exp, _MAX_INT_EXPONENT )

    if fits_i64( value ):
        return Token( TokenKind.LIT_INT, value )
    return Token( TokenKind.LIT_FLOAT, float( text ) )


def _fixed( kind: TokenKind ) -> Callable[[str], Token]:
    return lambda _text: Token( kind )


def _unit( unit ) -> Callable[[str], Token]:
    return lambda _text: Token( TokenKind.UNIT, unit )


def _currency_pattern() -> str:
    return "|".join( f"{code}|{code.lower()}" for code in CURRENCIES )


def _build_patterns() -> List[Tuple[str, Callable[[str], Token]]]:

    patterns = [
        ( r"(?:[0-9]*\.[0-9]+|[0-9]+\.)(?:[eE][-+]?[0-9]+)?", lambda text: Token( TokenKind.LIT_FLOAT, float( text ) ) ),
        ( r"[0-9]+(?:[eE][-+]?[0-9]+)?",                     _integer_token ),
        ( r"\(",                                             _fixed( TokenKind.PAR_BEGIN ) ),
        ( r"\)",                                             _fixed( TokenKind.PAR_END ) ),
        ( r"\^|\*\*",                                        _fixed( TokenKind.EXP ) ),
        ( r"-",                                              _fixed( TokenKind.SUB ) ),
        ( r"\+",                                             _fixed( TokenKind.ADD ) ),
        ( r"\*",                                             _fixed( TokenKind.MUL ) ),
        ( r"/",                                              _fixed( TokenKind.DIV ) ),
        ( r"%",                                              _fixed( TokenKind.MOD ) ),
        ( _word( "to" ),                                     _fixed( TokenKind.KW_TO ) ),
        ( _word( _currency_pattern() ),                      lambda text: Token( TokenKind.CURR, text.upper() ) ),
    ]

    for spelling, unit in UNIT_SPELLINGS:
        patterns.append( ( _word( spelling ), _unit( unit ) ) )

    for symbol, unit in UNIT_SYMBOLS:
        patterns.append( ( regex.escape( symbol ), _unit( unit ) ) )

    patterns += [
        ( r"[A-Za-z_][A-Za-z0-9_]*", lambda text: Token( TokenKind.IDENT, text ) ),
        ( r"\S+",                    lambda text: Token( TokenKind.INVALID, text ) ),
    ]

    return patterns


class Lexer:
    """
    Turns a line of text into a list of tokens.

    Usage:
        tokens = Lexer().tokenize( "5 ft + 2m" )
    """

    def __init__( self ):
        self.patterns = _build_patterns()
        self.regex    = regex.compile( "|".join( f"({pattern})" for pattern, _ in self.patterns ) )

    def tokenize( self, text: str ) -> List[Token]:
        """
        Tokenize text.

        Ensures:
            - Every non-whitespace character ends up in exactly one token
            - Never raises; unrecognized text becomes INVALID tokens
        """
        tokens = []
        for match in self.regex.finditer( text ):
            # no pattern has capturing groups of its own, so lastindex names the alternative
            _, make_token = self.patterns[ match.lastindex - 1 ]
            tokens.append( make_token( match.group() ) )
        return tokens


def quick_smoke_test():
    """Quick smoke test for the lexer."""
    print( "Testing Lexer..." )

    lexer = Lexer()
    for text in [ "5ft+2m", "1 pint to gallon", "15 C to F", "2**3", "1e3 meter", "100 usd to EUR", "3 % 2" ]:
        print( f"  {text!r:22} -> {' '.join( str( token ) for token in lexer.tokenize( text ) )}" )

    print( "✓ Lexer smoke test complete" )


if __name__ == "__main__":
    quick_smoke_test()
