"""Version resolution engine for a language package manager.

Given a universe of packages, each having several versions with per-version
compatibility constraints on other packages, the resolver picks exactly one
version of every package that has to be installed. Already installed (fixed)
packages are kept as they are, and optional (weak) dependencies only matter
when their target gets installed anyway.

If there is no way to satisfy the requirements, an error is reported,
explaining which packages ask for incompatible versions of what.

Here is a high-level overview of sub-packages of the `depsolve` package:

  * `depsolve.versions`: Version bounds, ranges and specs, a parser for the
    semver-style specification syntax, and version weights used to rank
    candidate solutions.

  * `depsolve.req`: The dependency graph, local constraint propagation that
    prunes versions which can never be installed, the resolver itself, and a
    sanity checker reporting inherently broken versions.

  * `depsolve.util`: Logging helpers shared by the rest of the package.
"""

__license__ = "MIT"
__version__ = "0.1"
