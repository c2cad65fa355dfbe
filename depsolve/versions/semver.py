"""
Semver-style version specifications.

The text is parsed into a list of AST items (see `depsolve.versions.parse`),
each item is interpreted as a VersionRange, and the spec is the union of them.
For versions starting with zero the caret freezes the leftmost non-zero
component: '^0.2.3' allows 0.2.x only and '^0.0.3' nothing but 0.0.3.
"""

__all__ = [
    "parse_spec",
    "to_semver",
    "interpret",
]


from depsolve.versions import parse
from depsolve.versions import xast
from depsolve.versions.errors import ParseError
from depsolve.versions.types import VersionBound
from depsolve.versions.types import VersionRange
from depsolve.versions.types import VersionSpec


def parse_spec(text):
    """Parses a semver specification into a VersionSpec."""
    return VersionSpec(interpret(item) for item in parse.parse(text))


def check_version(literal):
    if (literal.ndigits == 3 and
            literal.major == literal.minor == literal.patch == 0):
        raise ParseError('invalid version: 0.0.0', literal.text)


def _written_bound(literal):
    return VersionBound(*(literal.major, literal.minor,
                          literal.patch)[:literal.ndigits])


def _interpret_unary(node):
    literal = node.version
    check_version(literal)

    n = literal.ndigits
    major, minor, patch = literal.major, literal.minor, literal.patch
    b = VersionBound(major, minor, patch)
    lower = VersionBound(0, 0, 0)
    upper = VersionBound()

    op = node.op
    if op == '^':
        lower = b
        if n == 1 or major != 0:
            upper = VersionBound(major)
        elif n == 2 or minor != 0:
            upper = VersionBound(0, minor)
        else:
            upper = VersionBound(0, 0, patch)

    elif op == '~':
        lower = b
        upper = VersionBound(major) if n == 1 else VersionBound(major, minor)

    elif op == '=':
        lower = upper = b

    elif op == '<=':
        upper = b

    elif op == '<':
        if patch == minor == 0:
            if major == 0:
                raise ParseError('no version is below', literal.text)
            upper = VersionBound(major - 1)
        elif patch == 0:
            upper = VersionBound(major, minor - 1)
        else:
            upper = VersionBound(major, minor, patch - 1)

    elif op == '>=':
        lower = b

    elif op == '>':
        if patch == minor == 0:
            lower = VersionBound(major + 1)
        elif patch == 0:
            lower = VersionBound(major, minor + 1)
        else:
            lower = VersionBound(major, minor, patch + 1)

    else:
        raise ValueError('Unknown specifier {0!r}'.format(op))

    return VersionRange(lower, upper)


def _interpret_hyphen(node):
    check_version(node.lower)
    check_version(node.upper)
    return VersionRange(_written_bound(node.lower), _written_bound(node.upper))


_interpreters = {
    xast.Unary: _interpret_unary,
    xast.Hyphen: _interpret_hyphen,
}

def interpret(node):
    """Evaluates a single AST item into a VersionRange."""
    return _interpreters[type(node)](node)


def _trimmed(bound):
    components = list(bound.components)
    while len(components) > 1 and components[-1] == 0:
        components.pop()
    return '.'.join(map(str, components))


def _range_to_semver(r):
    lower, upper = r.lower, r.upper

    if lower.t == (0, 0, 0):
        if upper.n == 0:
            return '>= 0'
        if upper.n == 3:
            return '<= ' + _trimmed(upper)
        # '<' yields a bound of the same length as the one written
        successor = list(upper.components)
        successor[-1] += 1
        return '< ' + '.'.join(map(str, successor))

    if upper.n == 0:
        return '>= ' + _trimmed(lower)

    return '{0} - {1}'.format(lower, upper)


def to_semver(spec):
    """
    Formats a spec in the semver syntax, so that `parse_spec` gives back an
    equal spec. Any spec can be written this way, the empty one as an empty
    hyphen range.
    """
    if spec.is_empty():
        return '1 - 0'
    return ', '.join(map(_range_to_semver, spec.ranges))
