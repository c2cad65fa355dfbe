"""Version requirements resolver with support for rich error reporting.

A problem is defined as a dependency graph whose nodes are packages, each
having a set of versions. An edge goes from a particular version of a package
to another package and restricts the versions of the latter that the former
can live with. Weak edges only hold if the target package gets installed for
some other reason.

For example:

    A 1.0.0  =>  B 1-2
    A 2.0.0  =>  B 2
    B 1.0.0  =>  C *        (weak)

Requiring A alone resolves to A 2.0.0 and B 2.0.0 (if there is one), while C
stays uninstalled.

Another responsibility of this package is to provide a human-readable error
message in case of a conflict, telling how the versions of the offending
package got restricted by whom:

    Unsatisfiable requirements detected for package B [1b2c3d4e]:
    B [1b2c3d4e] log:
    ├─possible versions are: 1.0.0-3.0.0 or uninstalled
    ├─restricted by compatibility requirements with A [0f1e2d3c] ...
    └─restricted by compatibility requirements with C [5a6b7c8d] ...

Sub-modules of the `depsolve.req` package:

    * `depsolve.req.graph`: Defines Graph and RegistryEntry.

    * `depsolve.req.propagate`: Arc consistency: narrows down the possible
      versions of packages.

    * `depsolve.req.simplify`: Prunes and compresses a graph before
      resolving.

    * `depsolve.req.decide`, `depsolve.req.solver`: The algorithm itself;
      given a graph finds the best version of every package to install.

    * `depsolve.req.sanity`: Finds versions which can never be installed.

    * `depsolve.req.rlog`: Keeps the history of restrictions and formats an
      error message for the user.
"""

from depsolve.req.errors import GraphValidationError
from depsolve.req.errors import ResolverError

from depsolve.req.graph import Graph
from depsolve.req.graph import RegistryEntry

from depsolve.req.simplify import simplify_graph
from depsolve.req.solver import resolve
from depsolve.req.solver import verify_solution
from depsolve.req.sanity import sanity_check
