"""
Version weights.

The resolver ranks candidate solutions by summing weights of chosen versions,
so a weight has to be both ordered the same way versions are and additive.
"""

__all__ = [
    "VersionWeight",
]


import sys


_MIN = -sys.maxsize - 1


def _prerelease_key(prerelease):
    return tuple((0, int(part)) if part.isdigit() else (1, part)
                 for part in prerelease)


class VersionWeight(object):
    """
    Weight of a version: major, minor and patch numbers, followed by `pre`
    which is 0 for releases and -1 for prereleases, and `tag`, the precedence
    key of the prerelease identifiers.

    Arithmetic is component-wise. The tag only serves to order prereleases of
    the same version among themselves and is dropped by arithmetic.
    """

    __slots__ = ('major', 'minor', 'patch', 'pre', 'tag')

    def __init__(self, major=0, minor=0, patch=0, pre=0, tag=()):
        super(VersionWeight, self).__init__()
        self.major = major
        self.minor = minor
        self.patch = patch
        self.pre = pre
        self.tag = tag

    @classmethod
    def of(cls, v):
        if v.prerelease:
            return cls(v.major, v.minor, v.patch, -1,
                       _prerelease_key(v.prerelease))
        return cls(v.major, v.minor, v.patch)

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def min(cls):
        """Sentinel below the weight of any version, for "absent"."""
        return cls(_MIN, _MIN, _MIN, _MIN)

    def _key(self):
        return (self.major, self.minor, self.patch, self.pre, self.tag)

    @property
    def components(self):
        return (self.major, self.minor, self.patch, self.pre)

    def __add__(self, other):
        if not isinstance(other, VersionWeight):
            return NotImplemented
        return VersionWeight(*[a + b for a, b in zip(self.components,
                                                     other.components)])

    def __sub__(self, other):
        if not isinstance(other, VersionWeight):
            return NotImplemented
        return VersionWeight(*[a - b for a, b in zip(self.components,
                                                     other.components)])

    def __neg__(self):
        return VersionWeight(*[-a for a in self.components])

    def __eq__(self, other):
        if not isinstance(other, VersionWeight):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        if not isinstance(other, VersionWeight):
            return NotImplemented
        return self._key() != other._key()

    def __lt__(self, other):
        if not isinstance(other, VersionWeight):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other):
        if not isinstance(other, VersionWeight):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other):
        if not isinstance(other, VersionWeight):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other):
        if not isinstance(other, VersionWeight):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return ('{cls.__name__}({args})'
                .format(cls=type(self),
                        args=', '.join(map(repr, self._key()))))
