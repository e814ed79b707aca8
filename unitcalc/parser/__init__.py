"""
Text to expression tree: regex lexer and packrat parser.
"""
