"""
PLY-based parser for the version spec syntax.

    spec    :  item ( ',' item )* [ ',' ]
    item    :  [ '^' | '~' | '=' | '<=' | '>=' | '<' | '>' ] VERSION
            |  VERSION '-' VERSION

A bare version number is an implicit caret. The hyphen needs spaces around.
"""

__all__ = [
    "parse",
]


import ply.yacc

from depsolve.versions import lex
from depsolve.versions import xast
from depsolve.versions.errors import ParseError


def to_rlist(reversed_list):
    return reversed_list[::-1]


_unary_ops = {
    '^': '^',
    '~': '~',
    '=': '=',
    '<=': '<=', '≤': '<=',
    '>=': '>=', '≥': '>=',
    '<': '<',
    '>': '>',
}


# Grammar definitions for PLY.

tokens = lex.tokens
start = 'items'


def p_items_0(p):
    """items : item
       items : item COMMA"""
    p[0] = [p[1]]

def p_items_1(p):
    """items : item COMMA items"""
    l = p[0] = p[3]
    l.append(p[1])


def p_item_implicit(p):
    """item : VERSION"""
    p[0] = xast.Unary('^', p[1])

def p_item_unary(p):
    """item : CARET VERSION
       item : TILDE VERSION
       item : EQUALS VERSION
       item : LE VERSION
       item : GE VERSION
       item : LT VERSION
       item : GT VERSION"""
    p[0] = xast.Unary(_unary_ops[p[1]], p[2])

def p_item_hyphen(p):
    """item : VERSION HYPHEN VERSION"""
    p[0] = xast.Hyphen(p[1], p[3])


def p_error(t):
    if t is None:
        raise ParseError('incomplete version specification',
                         lex.lexer.lexdata)

    value = getattr(t.value, 'text', t.value)
    raise ParseError('unexpected {0!r}'.format(value),
                     t.lexer.lexdata, t.lexpos)


parser = ply.yacc.yacc(method='LALR', write_tables=False, debug=False)

# The main entry point.

def parse(text, **kwargs):
    """
    Parses the given text and returns a list of AST items.

    Args:
        text (str) - version specification, e.g. '^1.2, 2.0 - 2.3'
        **kwargs are passed directly to the underlying PLY parser

    Note:
        This function is NOT reentrant.
    """
    if not text.strip():
        raise ParseError('found no version specification', text)

    return to_rlist(parser.parse(text, lexer=lex.lexer, **kwargs))
