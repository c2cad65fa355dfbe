"""Version algebra: bounds, ranges, specs and weights.

Sub-modules of the `depsolve.versions` package:

    * `depsolve.versions.types`: VersionBound, VersionRange and VersionSpec
      together with the union and intersection operations on them.

    * `depsolve.versions.semver`: Semver-style specifications ('^1.2',
      '~0.3', '>= 1, < 3', '1.2 - 2'), both ways.

    * `depsolve.versions.lex`, `depsolve.versions.parse`,
      `depsolve.versions.xast`: PLY grammar of the specification syntax.

    * `depsolve.versions.weight`: VersionWeight, an additive ordering key
      used to rank solutions.
"""

from depsolve.versions.errors import ParseError

from depsolve.versions.types import VersionBound
from depsolve.versions.types import VersionRange
from depsolve.versions.types import VersionSpec
from depsolve.versions.types import as_spec
from depsolve.versions.types import compressed_spec
from depsolve.versions.types import contains
from depsolve.versions.types import intersect
from depsolve.versions.types import union_ranges
from depsolve.versions.types import version

from depsolve.versions.semver import parse_spec
from depsolve.versions.semver import to_semver

from depsolve.versions.weight import VersionWeight
