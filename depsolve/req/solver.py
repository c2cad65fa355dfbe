"""
Resolver: picks one version of every package that has to be installed.

Packages reachable from the must-install ones form the variables, which are
split into independently solved connected components. For each component a
greedy pass, or failing that a dive guided by the deciders, gives a first
solution. Then branch-and-bound search over binary choices (`pkg = value` or
`pkg != value`) either proves it optimal or finds a better one.
"""

__all__ = [
    "resolve",
    "greedy",
    "branch_and_bound",
    "find_components",
    "verify_solution",
]


from depsolve.req.decide import BranchDecider
from depsolve.req.decide import MaxSumDecider
from depsolve.req.decide import Objective
from depsolve.req.errors import ResolverError
from depsolve.req.propagate import propagate
from depsolve.req.propagate import restrict
from depsolve.req.simplify import reachable
from depsolve.req.simplify import simplify_graph

from depsolve import util
logger = util.get_extended_logger(__name__)


@logger.wrap
def resolve(graph, log=None, decimate=True):
    """
    Returns a mapping from package UUIDs to versions to install, fixed
    packages excluded. Raises ResolverError if there is no solution.

    The graph is simplified first unless it already is. Without `decimate`
    the search starts with no solution at hand.
    """
    if log is None:
        log = logger

    if not graph.simplified:
        simplify_graph(graph, log=log)
    if graph.conflict is not None:
        raise conflict_error(graph, graph.conflict, graph.log)

    state = graph.state.copy()
    scope = reachable(graph, graph.implied, state.domains)
    for pkg, domain in state.domains.items():
        if pkg not in scope:
            domain.clear()

    solution = {}
    for variables in find_components(graph, state, scope):
        log.info('solving a component of %d package(s)', len(variables))
        objective = Objective(graph, state, variables)

        incumbent = None
        if decimate:
            incumbent = greedy(graph, state, variables, objective)
            if incumbent is None:
                log.debug('\tgreedy pass failed')
                incumbent = _decimate(graph, state, variables, objective,
                                      log)
            if incumbent is not None:
                log.debug('\tfirst solution %r', incumbent[0])

        best = branch_and_bound(graph, state, variables, objective,
                                incumbent=incumbent, log=log)
        if best is None:
            raise failure_error(graph, state, variables, objective)
        solution.update(best[2])

    assert verify_solution(graph, solution), "found an invalid solution"

    ret = dict((pkg, v) for pkg, v in solution.items()
               if v is not None and pkg not in graph.fixed)
    log.info('resolved %d package(s)', len(ret))
    return ret


def find_components(graph, state, scope):
    """Splits packages of the scope into sorted lists of linked packages."""
    links = dict((pkg, set()) for pkg in scope)
    for pkg in scope:
        for v in state.domains[pkg]:
            for dep in graph.compat[pkg][v]:
                if dep in links and dep != pkg:
                    links[pkg].add(dep)
                    links[dep].add(pkg)

    ret = []
    seen = set()
    for pkg in sorted(scope):
        if pkg in seen:
            continue
        seen.add(pkg)
        component = [pkg]
        todo = [pkg]
        for p in util.pop_iter(todo):
            for q in links[p] - seen:
                seen.add(q)
                component.append(q)
                todo.append(q)
        ret.append(sorted(component))
    return ret


def assign(graph, state, pkg, value, rlog=None):
    """
    Narrows the state down to pkg taking the value, then propagates.
    Returns a conflicting package or None.
    """
    if value is None:
        keep = set()
        why = 'left uninstalled by the search'
    else:
        state.implied.add(pkg)
        keep = set(graph.equivalents(pkg, value))
        why = 'fixed by the search to version {0}'.format(value)

    restrict(graph, state, pkg, keep, rlog, why, force_log=True)
    return propagate(graph, state, [pkg] + sorted(graph.dependents[pkg]),
                     rlog)


def exclude(graph, state, pkg, value):
    """Same as `assign`, but for pkg not taking the value."""
    if value is None:
        state.implied.add(pkg)
    else:
        restrict(graph, state, pkg,
                 state.domains[pkg] - set(graph.equivalents(pkg, value)))
    return propagate(graph, state, [pkg] + sorted(graph.dependents[pkg]))


def greedy(graph, state, variables, objective):
    """
    Installs the newest allowed version of every must-install package, then
    the newest allowed version of each of their dependencies, and so on,
    leaving the rest uninstalled. Returns a (value, tiebreak, assignment)
    triple, or None as soon as some choice leads to a conflict.
    """
    state = state.copy()
    staged = [pkg for pkg in variables if pkg in state.implied]
    chosen = dict((pkg, max(state.domains[pkg])) for pkg in staged)

    for pkg in staged:
        if _greedy_assign(graph, state, pkg, chosen[pkg]):
            return None

    for pkg in util.pop_iter(staged):
        v = chosen[pkg]
        for dep in sorted(graph.compat[pkg][v]):
            if dep == pkg or dep in chosen or dep in graph.weak[pkg][v]:
                continue
            chosen[dep] = max(state.domains[dep])
            if _greedy_assign(graph, state, dep, chosen[dep]):
                return None
            staged.append(dep)

    for pkg in variables:
        if pkg not in chosen and _greedy_assign(graph, state, pkg, None):
            return None

    assignment = objective.assignment(state)
    assert verify_solution(graph, assignment, variables)
    return objective.score(assignment) + (assignment,)


def _greedy_assign(graph, state, pkg, value):
    if value is not None and value not in state.domains[pkg]:
        return True
    if value is None and pkg in state.implied:
        return True
    return assign(graph, state, pkg, value) is not None


def _decimate(graph, state, variables, objective, log):
    deciders = [MaxSumDecider(graph, variables, objective),
                BranchDecider(graph, variables, objective)]

    state = state.copy()
    while True:
        for decider in deciders:
            choice = decider.decide_next(state)
            if choice is not None:
                break
        else:
            break

        pkg, value = choice
        log.debug('\tdecimation: %s = %s', graph.pkg_id(pkg), value)
        conflict = assign(graph, state, pkg, value)
        if conflict is not None:
            log.debug('\tdecimation failed at %s', graph.pkg_id(conflict))
            return None

    assignment = objective.assignment(state)
    assert verify_solution(graph, assignment, variables)
    return objective.score(assignment) + (assignment,)


def branch_and_bound(graph, state, variables, objective, incumbent=None,
                     first=False, log=None):
    """
    Searches for the best assignment of the variables, or for any
    assignment if `first` is set. The `incumbent` is a (value, tiebreak,
    assignment) triple, and so is the result, unless there is no solution
    at all, in which case None is returned.

    Implementation of non-recursive DFS.
    """
    if log is None:
        log = logger

    decider = BranchDecider(graph, variables, objective)
    best = incumbent

    stack = [state.copy()]
    nr_nodes = 0
    for state in util.pop_iter(stack):
        nr_nodes += 1

        if best is not None and objective.bound(state) <= best[:2]:
            continue

        choice = decider.decide_next(state)
        if choice is None:
            assignment = objective.assignment(state)
            assert verify_solution(graph, assignment, variables)

            score = objective.score(assignment)
            if best is None or score > best[:2]:
                best = score + (assignment,)
            if first:
                break
            continue

        pkg, value = choice

        other = state.copy()
        if exclude(graph, other, pkg, value) is None:
            stack.append(other)
        if assign(graph, state, pkg, value) is None:
            stack.append(state)

    log.debug('\tsearched %d node(s)', nr_nodes)
    return best


def verify_solution(graph, solution, pkgs=None):
    """
    Checks the solution (package -> version or None) against requirements,
    fixed packages and edges of installed packages from `pkgs` (everything
    mentioned by default).
    """
    if pkgs is None:
        pkgs = set(solution) | set(graph.requirements) | set(graph.fixed)

    ok = True
    for pkg in sorted(pkgs):
        v = solution.get(pkg)

        if pkg in graph.requirements or pkg in graph.fixed:
            if v is None:
                logger.error('required package %s is not installed',
                             graph.pkg_id(pkg))
                ok = False
                continue
            if v not in graph.requirements.get(pkg, (v,)):
                logger.error('version %s of %s does not meet the requirement',
                             v, graph.pkg_id(pkg))
                ok = False
            if pkg in graph.fixed and v != graph.fixed[pkg]:
                logger.error('fixed package %s changed to version %s',
                             graph.pkg_id(pkg), v)
                ok = False

        if v is None:
            continue

        if v not in graph.versions[pkg] or v in graph.broken.get(pkg, {}):
            logger.error('%s@%s can not be installed', graph.pkg_id(pkg), v)
            ok = False
            continue

        for dep, spec in graph.compat[pkg][v].items():
            u = solution.get(dep)
            if u is None and dep in graph.weak[pkg][v]:
                continue
            if u is None or u not in spec:
                logger.error('%s@%s requires %s to be in %s, got %s',
                             graph.pkg_id(pkg), v, graph.pkg_id(dep), spec, u)
                ok = False

    return ok


def conflict_error(graph, pkg, rlog):
    msg = ('Unsatisfiable requirements detected for package {0}:\n{1}'
           .format(graph.pkg_id(pkg), rlog.show(pkg)))
    return ResolverError(msg, pkg, rlog.requirers(pkg))


def failure_error(graph, state, variables, objective):
    """
    Replays the search along its first branch, logging every decision,
    until a conflict shows up, and reports that conflict.
    """
    rlog = graph.log.copy()
    state = state.copy()
    decider = BranchDecider(graph, variables, objective)

    for choice in iter(lambda: decider.decide_next(state), None):
        pkg, value = choice
        conflict = assign(graph, state, pkg, value, rlog)
        if conflict is not None:
            msg = ('Resolve failed to satisfy requirements for package {0}:\n'
                   '{1}'.format(graph.pkg_id(conflict), rlog.show(conflict)))
            return ResolverError(msg, conflict, rlog.requirers(conflict))

    return ResolverError('Resolve failed to satisfy requirements for '
                         'packages: {0}'
                         .format(', '.join(map(graph.pkg_id, variables))))
