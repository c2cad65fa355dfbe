"""
Constraint propagation over a dependency graph.

A State tells which versions of each package are still possible, and which
packages have to be installed. Propagation narrows it down until nothing
changes, using these rules:

  * A version survives only if each of its dependencies has a surviving
    version inside the spec. Weak edges only count when their target has to
    be installed.

  * If every surviving version of a package that has to be installed depends
    on some other package, that package has to be installed too, and only
    versions accepted by at least one of those dependents survive. If the
    edges are weak in some of the versions, the restriction still holds but
    installation is not forced.

  * A package that has to be installed but has no versions left means a
    conflict.

An empty set of versions of a package that does not have to be installed
means it stays uninstalled.
"""

__all__ = [
    "State",
    "propagate",
    "restrict",
    "left_msg",
]


from collections import deque
import functools
import operator

from depsolve import util
logger = util.get_extended_logger(__name__)


class State(object):
    """
    Possible versions of every package (`domains`) plus the set of packages
    which must be installed (`implied`).
    """

    _dump_attrs = 'domains implied'.split()

    def __init__(self, domains=None, implied=None):
        super(State, self).__init__()
        self.domains = domains if domains is not None else {}
        self.implied = implied if implied is not None else set()

    def copy(self):
        return State(dict((pkg, set(domain))
                          for pkg, domain in self.domains.items()),
                     set(self.implied))

    def is_uninstalled(self, pkg):
        return pkg not in self.implied and not self.domains[pkg]

    def __repr__(self):
        return ("<{cls.__name__}: {n} packages, {m} implied>"
                .format(cls=type(self), n=len(self.domains),
                        m=len(self.implied)))


def left_msg(graph, state, pkg, why):
    """Appends what is left of pkg to the `why` message."""
    versions = state.domains[pkg]
    if versions:
        left = 'leaving only versions: {0}'.format(graph.describe(pkg, versions))
        if pkg not in state.implied:
            left += ' or uninstalled'
    elif pkg in state.implied:
        left = 'leaving no versions'
    else:
        left = 'leaving it uninstalled'
    return '{0}, {1}'.format(why, left)


def restrict(graph, state, pkg, keep, rlog=None, why=None, cause=None,
             spec=None, force_log=False):
    """
    Narrows possible versions of pkg down to those in `keep`.
    Returns whether anything has been removed.

    The event is logged if something has been removed, or if `force_log` is
    set.
    """
    domain = state.domains[pkg]
    changed = not domain <= keep
    if changed:
        domain &= keep

    if rlog is not None and (changed or force_log):
        rlog.event(pkg, left_msg(graph, state, pkg, why), cause, spec)
    return changed


def _is_supported(state, dep, spec):
    for v in state.domains[dep]:
        if v in spec:
            return True
    return False


def _is_active(graph, state, pkg, v, dep):
    return dep not in graph.weak[pkg][v] or dep in state.implied


def propagate(graph, state, seeds, rlog=None):
    """
    Propagates constraints starting from the `seeds` packages until a fixed
    point is reached. Packages referred to by surviving versions are visited
    too.

    Returns a package that has to be installed but has no versions left, or
    None if there is no conflict.
    """
    domains = state.domains
    implied = state.implied

    queue = deque()
    queued = set()
    seen = set()

    def enqueue(pkgs):
        for pkg in pkgs:
            seen.add(pkg)
            if pkg not in queued:
                queued.add(pkg)
                queue.append(pkg)

    enqueue(seeds)
    for pkg in seeds:
        if pkg in implied and not domains[pkg]:
            return pkg

    for pkg in util.pop_iter(queue, pop_meth='popleft'):
        queued.discard(pkg)

        # Drop versions with an unsatisfiable dependency.
        culprits = {}
        for v in domains[pkg]:
            for dep, spec in graph.compat[pkg][v].items():
                if not _is_active(graph, state, pkg, v, dep):
                    continue
                if not _is_supported(state, dep, spec):
                    culprits.setdefault(dep, set()).add(v)
                    break

        if culprits:
            for dep in sorted(culprits):
                why = ('restricted by compatibility requirements with {0}'
                       .format(graph.pkg_id(dep)))
                restrict(graph, state, pkg, domains[pkg] - culprits[dep],
                         rlog, why, cause=dep)

            if pkg in implied and not domains[pkg]:
                return pkg
            enqueue(sorted(graph.dependents[pkg]))

        enqueue(sorted(dep for v in domains[pkg]
                       for dep in graph.compat[pkg][v] if dep not in seen))

        if pkg not in implied or not domains[pkg]:
            continue

        # Push restrictions forward to dependencies shared by all versions.
        versions = domains[pkg]
        common = functools.reduce(operator.and_,
                                  (set(graph.compat[pkg][v]) for v in versions))
        for dep in sorted(common):
            union = functools.reduce(operator.or_,
                                     (graph.compat[pkg][v][dep]
                                      for v in versions))
            why = ('restricted by compatibility requirements with {0} '
                   'to versions: {1}'.format(graph.pkg_id(pkg), union))

            forced = (dep not in implied and
                      all(_is_active(graph, state, pkg, v, dep)
                          for v in versions))
            if forced:
                implied.add(dep)

            keep = set(u for u in domains[dep] if u in union)
            changed = restrict(graph, state, dep, keep, rlog, why,
                               cause=pkg, spec=union, force_log=forced)

            if forced or changed:
                if dep in implied and not domains[dep]:
                    return dep
                enqueue([dep])
                enqueue(sorted(graph.dependents[dep]))

    return None
