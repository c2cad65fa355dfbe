"""
Version bounds, ranges and specs.

A bound is a version with up to three numeric components. Bounds widen to the
whole series they name: as an upper bound, `1.2` covers every 1.2.x release,
and `1` covers every 1.x.y one. A bound with no components is no bound at all.

As a lower bound, on the other hand, `1.2` is just `1.2.0`, so only the
zero-padded components of a lower bound matter when comparing ranges.

A range is a pair of such bounds, and a spec is a union of ranges which is
kept sorted and disjoint, so that two specs matching the same set of versions
compare equal.
"""

__all__ = [
    "VersionBound",
    "VersionRange",
    "VersionSpec",

    "lower_less",
    "upper_less",
    "stricter_lower",
    "stricter_upper",
    "joinable",

    "union_ranges",
    "intersect",
    "contains",
    "compressed_spec",
    "as_spec",
    "version",
]


import functools
import re

import semantic_version

from depsolve.versions.errors import ParseError


EMPTY_SYMBOL = '∅'


def version(text):
    """Builds a Version out of '1', 'v1.2', '1.2.3-rc.1' and alike."""
    if isinstance(text, semantic_version.Version):
        return text

    text = text.strip()
    if text.startswith('v'):
        text = text[1:]
    try:
        return semantic_version.Version.coerce(text)
    except ValueError:
        raise ParseError('invalid version number', text)


def _triple(v):
    return (v.major, v.minor, v.patch)


class VersionBound(object):
    """Partially specified version used as an endpoint of a range."""

    __slots__ = ('t', 'n')

    def __init__(self, *components):
        super(VersionBound, self).__init__()

        n = len(components)
        if n > 3:
            raise ValueError('Bound can only specify major, minor and patch '
                             'components, got {0}'.format(components))
        if any(c < 0 for c in components):
            raise ValueError('Negative bound component in {0}'
                             .format(components))

        self.t = tuple(int(c) for c in components) + (0,) * (3 - n)
        self.n = n

    @classmethod
    def of(cls, v):
        """Exact bound of a Version. Prerelease and build are ignored."""
        return cls(*_triple(v))

    @classmethod
    def parse(cls, text):
        if text == '*':
            return cls()
        return cls(*[int(c) for c in text.split('.')])

    @property
    def components(self):
        return self.t[:self.n]

    def __getitem__(self, index):
        return self.t[index]

    def admits_above(self, v):
        """Lower bound check: whether the version is not below this bound."""
        n = self.n
        return _triple(v)[:n] >= self.t[:n]

    def admits_below(self, v):
        """Upper bound check: whether the version is not above this bound."""
        n = self.n
        return _triple(v)[:n] <= self.t[:n]

    def __eq__(self, other):
        if not isinstance(other, VersionBound):
            return NotImplemented
        return self.t == other.t and self.n == other.n

    def __ne__(self, other):
        if not isinstance(other, VersionBound):
            return NotImplemented
        return not self == other

    def __hash__(self):
        return hash((self.t, self.n))

    def __str__(self):
        return '.'.join(map(str, self.components)) or '*'

    def __repr__(self):
        return ('{cls.__name__}({args})'
                .format(cls=type(self),
                        args=', '.join(map(str, self.components))))


def lower_less(a, b):
    """Whether the lower bound `a` lets in strictly more than `b` does."""
    return a.t < b.t

def upper_less(a, b):
    """Whether the upper bound `a` lets in strictly less than `b` does."""
    k = min(a.n, b.n)
    if a.t[:k] != b.t[:k]:
        return a.t[:k] < b.t[:k]
    return a.n > b.n

def stricter_lower(a, b):
    return b if lower_less(a, b) else a

def stricter_upper(a, b):
    return a if upper_less(a, b) else b


def joinable(upper, lower):
    """
    Whether a range ending at `upper` can be merged with a range starting at
    `lower` without covering any version that neither of them covers, like in
    [1.5-2.8, 2.5-3] -> [1.5-3], or [1.2-1.5, 1.6-2] -> [1.2-2].
    """
    n = upper.n
    if n == 0:
        return True

    # the first version above the upper bound
    successor = upper.t[:n-1] + (upper.t[n-1] + 1,) + (0,) * (3 - n)
    return lower.t <= successor


_range_re = re.compile(r'^\s*v?((?:\d+(?:\.\d+)?(?:\.\d+)?)|\*)'
                       r'(?:\s*-\s*v?((?:\d+(?:\.\d+)?(?:\.\d+)?)|\*))?\s*$')


class VersionRange(object):
    """
    Range of versions between two bounds, both inclusive in the widening
    sense, e.g. '1.2-3' means [1.2.0, 4.0.0).
    """

    __slots__ = ('lower', 'upper')

    def __init__(self, lower=None, upper=None):
        super(VersionRange, self).__init__()

        if lower is None:
            lower = VersionBound()
        if upper is None:
            upper = lower

        # Same components imply the trailing ones are zero in both bounds:
        # 1.2-1.2.0 is 1.2.0, and 1.2.0-1.2 is 1.2.
        if lower.t == upper.t:
            lower = upper

        self.lower = lower
        self.upper = upper

    @classmethod
    def parse(cls, text):
        """Parses the registry syntax: '1.2-3', '1.2.3', '2-*', '*'."""
        m = _range_re.match(text)
        if m is None:
            raise ParseError('invalid version range', text)

        lower = VersionBound.parse(m.group(1))
        upper = (VersionBound.parse(m.group(2))
                 if m.group(2) is not None else lower)
        return cls(lower, upper)

    @classmethod
    def exact(cls, v):
        bound = VersionBound.of(v)
        return cls(bound, bound)

    def is_empty(self):
        n = self.upper.n
        return self.lower.t[:n] > self.upper.t[:n]

    def __contains__(self, v):
        return self.lower.admits_above(v) and self.upper.admits_below(v)

    def intersect(self, other):
        return VersionRange(stricter_lower(self.lower, other.lower),
                            stricter_upper(self.upper, other.upper))

    __and__ = intersect

    def __eq__(self, other):
        if not isinstance(other, VersionRange):
            return NotImplemented
        return self.lower.t == other.lower.t and self.upper == other.upper

    def __ne__(self, other):
        if not isinstance(other, VersionRange):
            return NotImplemented
        return not self == other

    def __hash__(self):
        return hash((self.lower.t, self.upper))

    def __str__(self):
        m, n = self.lower.n, self.upper.n
        if m == n == 0:
            return '*'
        if m == 0:
            return '0-{0}'.format(self.upper)
        if n == 0:
            return '{0}-*'.format(self.lower)
        if self.lower == self.upper:
            return str(self.lower)
        return '{0}-{1}'.format(self.lower, self.upper)

    def __repr__(self):
        return "{cls.__name__}('{self}')".format(cls=type(self), self=self)


def _range_cmp(a, b):
    if lower_less(a.lower, b.lower):
        return -1
    if lower_less(b.lower, a.lower):
        return 1
    if upper_less(a.upper, b.upper):
        return -1
    if upper_less(b.upper, a.upper):
        return 1
    return 0

_range_key = functools.cmp_to_key(_range_cmp)


def union_ranges(ranges):
    """
    Merges the given ranges into a sorted list of disjoint non-empty ones.
    The result does not depend on the order of the input.
    """
    ranges = sorted((r for r in ranges if not r.is_empty()), key=_range_key)
    if not ranges:
        return []

    ret = []
    lower, upper = ranges[0].lower, ranges[0].upper
    for r in ranges[1:]:
        if joinable(upper, r.lower):
            if upper_less(upper, r.upper):
                upper = r.upper
            continue
        ret.append(VersionRange(lower, upper))
        lower, upper = r.lower, r.upper
    ret.append(VersionRange(lower, upper))

    return ret


def _as_range(obj):
    if isinstance(obj, VersionRange):
        return obj
    if isinstance(obj, str):
        return VersionRange.parse(obj)
    if isinstance(obj, semantic_version.Version):
        return VersionRange.exact(obj)
    raise TypeError('Expected a range, got {0!r}'.format(obj))


class VersionSpec(object):
    """
    Set of versions: a union of disjoint ranges sorted by their bounds.
    An empty sequence of ranges is an empty spec, use `VersionSpec.any()`
    for the spec that matches everything.
    """

    __slots__ = ('ranges',)

    def __init__(self, ranges=()):
        super(VersionSpec, self).__init__()
        self.ranges = tuple(union_ranges(map(_as_range, ranges)))

    @classmethod
    def any(cls):
        return cls([VersionRange()])

    @classmethod
    def exact(cls, v):
        return cls([VersionRange.exact(v)])

    def is_empty(self):
        return not self.ranges

    def __len__(self):
        return len(self.ranges)

    def __iter__(self):
        return iter(self.ranges)

    def __contains__(self, v):
        for r in self.ranges:
            if v in r:
                return True
        return False

    def intersect(self, other):
        if self.is_empty() or other.is_empty():
            return VersionSpec()
        return VersionSpec(a & b for a in self.ranges for b in other.ranges)

    def union(self, other):
        if self == other:
            return self
        return VersionSpec(self.ranges + other.ranges)

    __and__ = intersect
    __or__ = union

    def __eq__(self, other):
        if not isinstance(other, VersionSpec):
            return NotImplemented
        return self.ranges == other.ranges

    def __ne__(self, other):
        if not isinstance(other, VersionSpec):
            return NotImplemented
        return not self == other

    def __hash__(self):
        return hash(self.ranges)

    def __str__(self):
        if self.is_empty():
            return EMPTY_SYMBOL
        if len(self.ranges) == 1:
            return str(self.ranges[0])
        return '[{0}]'.format(', '.join(map(str, self.ranges)))

    def __repr__(self):
        return "{cls.__name__}('{self}')".format(cls=type(self), self=self)


def as_spec(obj):
    """
    Coerces a spec, a range, a Version, a registry-syntax string, or an
    iterable of ranges and strings into a VersionSpec.
    """
    if isinstance(obj, VersionSpec):
        return obj
    if isinstance(obj, (VersionRange, str, semantic_version.Version)):
        return VersionSpec([_as_range(obj)])
    return VersionSpec(obj)


def contains(spec, v):
    return version(v) in as_spec(spec)

def intersect(a, b):
    return as_spec(a) & as_spec(b)


def compressed_spec(pool, subset=None):
    """
    Covers the versions of `subset` with as few exact ranges as possible
    without taking in any other version of `pool`. Consecutive pool members
    collapse into one range.
    """
    pool = sorted(pool)
    wanted = set(pool if subset is None else subset)

    ranges = []
    start = last = None
    for v in pool:
        if v in wanted:
            if start is None:
                start = v
            last = v
        elif start is not None:
            ranges.append(VersionRange(VersionBound.of(start),
                                       VersionBound.of(last)))
            start = None
    if start is not None:
        ranges.append(VersionRange(VersionBound.of(start),
                                   VersionBound.of(last)))

    return VersionSpec(ranges)
