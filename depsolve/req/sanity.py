"""
Registry sanity check: finds versions that can never be installed, whatever
else is required.
"""

__all__ = [
    "sanity_check",
]


from depsolve.req.decide import Objective
from depsolve.req.propagate import State
from depsolve.req.propagate import propagate
from depsolve.req.simplify import reachable
from depsolve.req.solver import branch_and_bound
from depsolve.req.solver import find_components
from depsolve.req.solver import greedy

from depsolve import util
logger = util.get_extended_logger(__name__)


@logger.wrap
def sanity_check(graph, subset=None, log=None):
    """
    Returns a sorted list of (pkg, version) pairs of versions that no
    solution can contain, even when nothing else is required. Only packages
    reachable from the `subset` are checked, if given.

    Requirements and fixed packages of the graph are ignored.
    """
    if log is None:
        log = logger

    if graph.requirements:
        log.warning('sanity check ignores %d explicit requirement(s)',
                    len(graph.requirements))

    graph = graph.copy()
    graph.requirements.clear()
    graph.fixed.clear()
    graph.eq_classes.clear()

    base = State(dict((pkg, vs - set(graph.broken.get(pkg, ())))
                      for pkg, vs in graph.versions.items()))

    if subset is None:
        pkgs = set(graph.versions)
    else:
        pkgs = reachable(graph, subset)

    log.info('checking %d package(s)', len(pkgs))

    problematic = []
    checked = set()
    for pkg in _check_order(graph, pkgs):
        for v in sorted(graph.versions[pkg], reverse=True):
            if (pkg, v) in checked:
                continue

            if v in graph.broken.get(pkg, {}):
                log.debug('\t%s@%s is broken', graph.pkg_id(pkg), v)
                problematic.append((pkg, v))
                continue

            solution = _find_solution(graph, base, pkg, v)
            if solution is None:
                log.debug('\t%s@%s can not be installed',
                          graph.pkg_id(pkg), v)
                problematic.append((pkg, v))
                continue

            checked.update((p, u) for p, u in solution.items()
                           if u is not None)

    log.info('found %d problematic version(s)', len(problematic))
    return sorted(problematic)


def _check_order(graph, pkgs):
    """Packages with the most neighbours come first."""
    def nr_neighbors(pkg):
        deps = set(dep for v in graph.versions[pkg]
                   for dep in graph.compat[pkg][v])
        return len(deps | graph.dependents[pkg])

    return sorted(pkgs, key=lambda pkg: (-nr_neighbors(pkg), pkg))


def _find_solution(graph, base, pkg, v):
    state = base.copy()
    state.domains[pkg] &= set([v])
    state.implied.add(pkg)

    if propagate(graph, state, [pkg]) is not None:
        return None

    scope = reachable(graph, state.implied, state.domains)
    for p, domain in state.domains.items():
        if p not in scope:
            domain.clear()

    solution = {}
    for variables in find_components(graph, state, scope):
        objective = Objective(graph, state, variables)
        found = greedy(graph, state, variables, objective)
        if found is None:
            found = branch_and_bound(graph, state, variables, objective,
                                     first=True)
        if found is None:
            return None
        solution.update(found[2])
    return solution
