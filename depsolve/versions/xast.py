"""
AST nodes produced by the version spec parser.

A spec is a list of items, each item being either a unary specifier applied
to a version number (implicit carets included), or a hyphen range.
"""

__all__ = [
    "VersionLiteral",
    "Unary",
    "Hyphen",
]


from collections import namedtuple


# 'ndigits' tells how many components have been written out, the missing ones
# are zero.
VersionLiteral = namedtuple('VersionLiteral',
                            'text ndigits major minor patch')

# 'op' is one of: ^ ~ = <= < >= >
Unary = namedtuple('Unary', 'op version')

Hyphen = namedtuple('Hyphen', 'lower upper')
