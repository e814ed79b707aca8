#!/usr/bin/env python3
"""
Tokens produced by the lexer and consumed by the parser.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TokenKind( Enum ):
    LIT_INT   = "integer"
    LIT_FLOAT = "float"
    PAR_BEGIN = "("
    PAR_END   = ")"
    EXP       = "^"
    SUB       = "-"
    ADD       = "+"
    MUL       = "*"
    DIV       = "/"
    MOD       = "%"
    KW_TO     = "to"
    CURR      = "currency"
    UNIT      = "unit"
    IDENT     = "identifier"
    INVALID   = "invalid"


@dataclass( frozen=True )
class Token:
    """
    Immutable tagged token.

    The payload depends on the kind:

        LIT_INT        int
        LIT_FLOAT      float
        CURR           upper-case currency code
        UNIT           Unit member
        IDENT/INVALID  the matched text
        otherwise      None
    """
    kind  : TokenKind
    value : Any = None

    def __str__( self ) -> str:
        if self.value is None:
            return self.kind.value
        return f"{self.kind.name}({self.value})"
