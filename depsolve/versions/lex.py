"""
Lexer definitions for the version spec syntax.
"""

import ply.lex

from depsolve.versions.errors import ParseError
from depsolve.versions.xast import VersionLiteral


tokens = (
    # Version number, optionally prefixed with 'v'
    'VERSION',

    # Specifiers ^ ~ = <= >= < > -
    'CARET', 'TILDE', 'EQUALS',
    'LE', 'GE', 'LT', 'GT',
    'HYPHEN',

    # Delimeters
    'COMMA',
)

# Completely ignored characters
t_ignore           = ' \t\r\n'

# Hyphen must be surrounded by spaces, so that it could not be mistaken
# for a prerelease separator.
def t_HYPHEN(t):
    r'-'
    data = t.lexer.lexdata
    if not data[t.lexpos-1:t.lexpos].isspace():
        raise ParseError('no space before hyphen specifier', data, t.lexpos)
    if not data[t.lexpos+1:t.lexpos+2].isspace():
        raise ParseError('no space after hyphen specifier', data, t.lexpos)
    return t

def t_VERSION(t):
    r'v?\d+(?:\.\d+){0,2}'
    text = t.value
    parts = [int(c) for c in text.lstrip('v').split('.')]
    t.value = VersionLiteral(text, len(parts), *(parts + [0] * (3-len(parts))))
    return t

# Specifiers
t_CARET            = r'\^'
t_TILDE            = r'~'
t_EQUALS           = r'='
t_LE               = r'<=|≤'
t_GE               = r'>=|≥'
t_LT               = r'<'
t_GT               = r'>'

# Delimeters
t_COMMA            = r','

def t_error(t):
    raise ParseError('illegal character {0!r}'.format(t.value[0]),
                     t.lexer.lexdata, t.lexpos)


lexer = ply.lex.lex()

if __name__ == "__main__":
    ply.lex.runmain(lexer)
