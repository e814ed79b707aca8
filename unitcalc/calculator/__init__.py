"""
Calculation core: numbers, units, values and the expression tree.

Modules:
    calc_exceptions.py   - CalcError and its flat set of subclasses
    rational.py          - Rational, exact 64-bit bounded fractions
    number.py            - Integer / Float variants and number rendering
    number_operations.py - numeric tower: promotion, arithmetic, powers
    conversion_tables.py - unit taxonomy, exact factors, lexer spellings
    unit_operations.py   - unit compatibility and conversion
    value.py             - Value, a number with an optional unit
    value_operations.py  - operators on Values
    node.py              - Leaf / Unary / Binary tree and the Evaluator
"""
