"""
Graph simplification: pruning, validation and compression.
"""

__all__ = [
    "simplify_graph",
    "compress_graph",
    "reachable",
]


from depsolve.req.errors import GraphValidationError
from depsolve.req.propagate import propagate
from depsolve.versions import compressed_spec

from depsolve import util
logger = util.get_extended_logger(__name__)


def reachable(graph, seeds, domains=None):
    """
    Packages reachable from the seeds through edges of versions in
    `domains` (all known versions by default), seeds included.
    """
    if domains is None:
        domains = graph.versions

    seen = set(seeds)
    todo = list(seen)
    for pkg in util.pop_iter(todo):
        for v in domains[pkg]:
            for dep in graph.compat[pkg][v]:
                if dep not in seen:
                    seen.add(dep)
                    todo.append(dep)
    return seen


@logger.wrap
def simplify_graph(graph, validate_versions=False, log=None):
    """
    Prunes versions which can not take part in any solution, starting from
    the packages that must be installed, then compresses the graph.

    A conflict is remembered in `graph.conflict` rather than raised. With
    `validate_versions` set, edges of reachable packages pointing to a
    package without any known versions raise GraphValidationError.
    """
    if log is None:
        log = logger

    seeds = sorted(graph.implied)
    log.info('simplifying graph of %d package(s) from %d seed(s)',
             len(graph.versions), len(seeds))

    graph.conflict = propagate(graph, graph.state, seeds, graph.log)
    graph.pruned = True
    if graph.conflict is not None:
        log.info('conflict detected for %s', graph.pkg_id(graph.conflict))

    if validate_versions:
        dangling = _dangling_edges(graph, seeds)
        if dangling:
            for pkg, v, dep in dangling:
                log.error('\t%s@%s depends on %s which has no known versions',
                          graph.pkg_id(pkg), v, graph.pkg_id(dep))
            raise GraphValidationError(
                'Graph refers to {0} package(s) with no known versions'
                .format(len(set(dep for _, _, dep in dangling))), dangling)

    compress_graph(graph, log)

    graph.simplified = True
    logger.dump(graph)
    return graph


def _dangling_edges(graph, seeds):
    ret = []
    for pkg in sorted(reachable(graph, seeds)):
        for v in sorted(graph.versions[pkg]):
            for dep in sorted(graph.compat[pkg][v]):
                if not graph.versions[dep]:
                    ret.append((pkg, v, dep))
    return ret


def compress_graph(graph, log=None):
    """
    Rewrites edge specs to the shortest spec selecting the same versions of
    the dependency, keeping the original ones in `graph.uncompressed`.
    Then groups versions of each package into classes of versions that no
    edge, requirement or restriction tells apart.
    """
    if log is None:
        log = logger

    nr_rewritten = 0
    for pkg, by_version in graph.compat.items():
        for v, deps in by_version.items():
            for dep, spec in deps.items():
                pool = graph.versions[dep]
                matching = set(u for u in pool if u in spec)
                if not matching:
                    continue
                compressed = compressed_spec(pool, matching)
                if compressed == spec:
                    continue
                if set(u for u in pool if u in compressed) != matching:
                    continue
                graph.uncompressed.setdefault((pkg, v, dep), spec)
                deps[dep] = compressed
                nr_rewritten += 1

    graph.eq_classes = dict((pkg, _eq_classes(graph, pkg))
                            for pkg in graph.versions)

    nr_versions = sum(len(vs) for vs in graph.versions.values())
    nr_classes = sum(len(set(classes.values()))
                     for classes in graph.eq_classes.values())
    log.info('compressed graph: %d edge spec(s) rewritten, '
             '%d version(s) in %d class(es)',
             nr_rewritten, nr_versions, nr_classes)


def _eq_classes(graph, pkg):
    incoming = []
    for dependent in sorted(graph.dependents[pkg]):
        for w in sorted(graph.compat[dependent]):
            deps = graph.compat[dependent][w]
            if pkg in deps:
                incoming.append(deps[pkg])

    requirement = graph.requirements.get(pkg)
    domain = graph.domains[pkg]
    fixed = graph.fixed.get(pkg)

    groups = {}
    for v in graph.versions[pkg]:
        outgoing = frozenset((dep, spec, dep in graph.weak[pkg][v])
                             for dep, spec in graph.compat[pkg][v].items())
        signature = (outgoing,
                     tuple(v in spec for spec in incoming),
                     requirement is None or v in requirement,
                     v in domain,
                     v == fixed)
        groups.setdefault(signature, []).append(v)

    ret = {}
    for members in groups.values():
        members = tuple(sorted(members, reverse=True))
        for v in members:
            ret[v] = members
    return ret
