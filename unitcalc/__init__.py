"""
unitcalc: unit-aware calculator.

    >>> import unitcalc
    >>> str( unitcalc.calculate( "5 ft + 2m" ) )
    "11.561'"

calculate() returns None when the text is not a complete expression and
raises a CalcError subclass when the expression cannot be evaluated.
"""

from typing import Optional

from unitcalc.calculator.node import evaluate
from unitcalc.calculator.value import Value
from unitcalc.currency.rate_provider import RateProvider
from unitcalc.parser.lexer import Lexer
from unitcalc.parser.parser import parse

__version__ = "0.1.0"

_lexer = Lexer()


def calculate( text: str, rates: Optional[RateProvider] = None ) -> Optional[Value]:
    """
    Lex, parse and evaluate one expression.

    Requires:
        - rates is a RateProvider when the expression converts currencies

    Ensures:
        - Returns None if text does not parse
        - Returns the resulting Value otherwise

    Raises:
        - CalcError subclasses from evaluation
    """
    node = parse( _lexer.tokenize( text ) )
    if node is None:
        return None
    return evaluate( node, rates )
