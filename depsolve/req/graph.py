"""
Dependency graph.

Packages are never linked to each other by reference. Everything is kept in
flat tables keyed by package UUIDs, and edges are looked up by UUID, so that
dependency cycles are just data:

    versions      uuid -> set of known versions
    compat        uuid -> version -> dep uuid -> VersionSpec
    weak          uuid -> version -> set of dep uuids with a weak edge
    fixed         uuid -> pinned version
    requirements  uuid -> VersionSpec
    names         uuid -> display name, for messages only

The graph also owns a State with the versions still possible for each
package, which is narrowed down by requirements and by the simplifier, and a
ResolveLog explaining every restriction.

Simplification only ever narrows the state down and rewrites edge specs in
terms of the versions known at the time. Adding versions or edges to a
simplified graph therefore throws all of that away: the original specs are
put back, and the state and the log are rebuilt from requirements, fixed
packages and broken versions.
"""

__all__ = [
    "Graph",
    "RegistryEntry",
]


from collections import namedtuple

from depsolve.req.propagate import State
from depsolve.req.propagate import restrict
from depsolve.req.rlog import ResolveLog
from depsolve.req.rlog import pkg_id
from depsolve.versions import VersionSpec
from depsolve.versions import as_spec
from depsolve.versions import compressed_spec
from depsolve.versions import version

from depsolve import util
logger = util.get_extended_logger(__name__)


# A single version record of a registry. Unavailable ones are skipped.
# 'deps' and 'weakdeps' map dependency UUIDs to specs.
RegistryEntry = namedtuple('RegistryEntry',
                           'uuid version available deps weakdeps')


class Graph(object):
    """
    Dependency graph of packages, with requirements and fixed packages.
    """

    _dump_attrs = ('versions fixed requirements domains implied broken '
                   'conflict'.split())

    @property
    def domains(self):
        return self.state.domains

    @property
    def implied(self):
        return self.state.implied

    def __init__(self):
        super(Graph, self).__init__()

        self.versions = {}
        self.names = {}
        self.compat = {}
        self.weak = {}
        self.fixed = {}
        self.requirements = {}

        self.dependents = {}  # reverse edges: dep -> set of dependents
        self.broken = {}      # pkg -> version -> why it can't be installed
        self.eq_classes = {}  # pkg -> version -> versions equivalent to it
        self.uncompressed = {}  # (pkg, version, dep) -> spec as added

        self.state = State()
        self.log = ResolveLog(self.names, self.versions)

        self.conflict = None
        self.pruned = False
        self.simplified = False

    @classmethod
    def from_compat(cls, compat, weak=None, names=None):
        """
        Builds a graph from nested mappings: uuid -> version -> dep -> spec.
        The `weak` mapping has the same shape and holds weak edges.
        """
        graph = cls()

        for edges in (compat, weak or {}):
            for pkg, by_version in edges.items():
                graph.add_package(pkg, by_version)

        for pkg, by_version in compat.items():
            for v, deps in by_version.items():
                for dep, spec in deps.items():
                    graph.add_edge(pkg, v, dep, spec)

        for pkg, by_version in (weak or {}).items():
            for v, deps in by_version.items():
                for dep, spec in deps.items():
                    graph.add_edge(pkg, v, dep, spec, weak=True)

        graph.names.update(names or {})
        return graph

    @classmethod
    def from_registry(cls, entries, names=None):
        """Builds a graph from an iterable of RegistryEntry records."""
        graph = cls()

        for entry in entries:
            if not entry.available:
                logger.debug('%s@%s is not available, skipped',
                             entry.uuid, entry.version)
                continue

            graph.add_package(entry.uuid, [entry.version])
            for dep, spec in (entry.deps or {}).items():
                graph.add_edge(entry.uuid, entry.version, dep, spec)
            for dep, spec in (entry.weakdeps or {}).items():
                graph.add_edge(entry.uuid, entry.version, dep, spec, weak=True)

        graph.names.update(names or {})
        return graph

    def copy(self):
        """An independent copy, suitable for a what-if resolution."""
        ret = Graph()

        ret.names.update(self.names)
        ret.versions.update((pkg, set(vs))
                            for pkg, vs in self.versions.items())
        ret.compat = dict((pkg, dict((v, dict(deps))
                                     for v, deps in by_version.items()))
                          for pkg, by_version in self.compat.items())
        ret.weak = dict((pkg, dict((v, set(deps))
                                   for v, deps in by_version.items()))
                        for pkg, by_version in self.weak.items())
        ret.fixed = dict(self.fixed)
        ret.requirements = dict(self.requirements)

        ret.dependents = dict((pkg, set(deps))
                              for pkg, deps in self.dependents.items())
        ret.broken = dict((pkg, dict(vs)) for pkg, vs in self.broken.items())
        ret.eq_classes = dict((pkg, dict(classes))
                              for pkg, classes in self.eq_classes.items())
        ret.uncompressed = dict(self.uncompressed)

        ret.state = self.state.copy()
        ret.log = self.log.copy(ret.names, ret.versions)

        ret.conflict = self.conflict
        ret.pruned = self.pruned
        ret.simplified = self.simplified
        return ret

    def pkg_id(self, pkg):
        return pkg_id(self.names, pkg)

    def describe(self, pkg, versions):
        """Compact spec covering the given versions of pkg."""
        return str(compressed_spec(self.versions[pkg], versions))

    def add_package(self, pkg, versions=(), name=None):
        """Registers a package and (more of) its versions."""
        if pkg not in self.versions:
            self.versions[pkg] = set()
            self.compat[pkg] = {}
            self.weak[pkg] = {}
            self.dependents[pkg] = set()
            self.state.domains[pkg] = set()
        if name is not None:
            self.names[pkg] = name

        new = set(map(version, versions)) - self.versions[pkg]
        if not new:
            return

        self._forget_simplification()
        for v in new:
            self.compat[pkg][v] = {}
            self.weak[pkg][v] = set()
        self.versions[pkg] |= new

        if pkg in self.fixed:
            return
        if pkg in self.requirements:
            spec = self.requirements[pkg]
            new = set(v for v in new if v in spec)
        self.domains[pkg] |= new

    def add_edge(self, pkg, v, dep, spec, weak=False):
        """
        Makes version v of pkg depend on dep, restricted to the spec.
        Edges to the same dep are intersected; an edge that no version can
        satisfy marks v as broken instead of being stored.
        """
        v = version(v)
        spec = as_spec(spec)

        if pkg not in self.versions or v not in self.versions[pkg]:
            self.add_package(pkg, [v])
        if dep not in self.versions:
            self.add_package(dep)
        self._forget_simplification()

        deps = self.compat[pkg][v]
        weak_deps = self.weak[pkg][v]
        if dep in deps:
            spec = deps[dep] & spec
            weak = weak and dep in weak_deps

        if spec.is_empty():
            deps.pop(dep, None)
            weak_deps.discard(dep)
            self._mark_broken(pkg, v, 'its requirement on {0} matches no '
                              'versions'.format(self.pkg_id(dep)))
            return

        deps[dep] = spec
        if weak:
            weak_deps.add(dep)
        else:
            weak_deps.discard(dep)
        self.dependents[dep].add(pkg)

    def _mark_broken(self, pkg, v, why):
        logger.warning('%s@%s is broken: %s', self.pkg_id(pkg), v, why)
        self.broken.setdefault(pkg, {})[v] = why
        self._restrict_broken(pkg, v)

    def _restrict_broken(self, pkg, v):
        why = self.broken[pkg][v]
        restrict(self, self.state, pkg, self.domains[pkg] - set([v]),
                 self.log, 'version {0} is broken: {1}'.format(v, why))

    def _restrict_fixed(self, pkg):
        v = self.fixed[pkg]
        self.implied.add(pkg)
        restrict(self, self.state, pkg, set([v]), self.log,
                 'fixed to version {0}'.format(v), spec=VersionSpec.exact(v),
                 force_log=True)

    def _restrict_required(self, pkg):
        spec = self.requirements[pkg]
        self.implied.add(pkg)
        restrict(self, self.state, pkg,
                 set(v for v in self.domains[pkg] if v in spec), self.log,
                 'restricted to versions {0} by an explicit requirement'
                 .format(spec), spec=spec, force_log=True)

    def _forget_simplification(self):
        self.simplified = False
        if not (self.pruned or self.uncompressed):
            return

        logger.debug('graph has grown since simplification, starting over')
        for (pkg, v, dep), spec in self.uncompressed.items():
            self.compat[pkg][v][dep] = spec
        self.uncompressed.clear()
        self.eq_classes.clear()

        self.state = State(dict((pkg, set(vs))
                                for pkg, vs in self.versions.items()))
        self.log = ResolveLog(self.names, self.versions)
        self.conflict = None
        self.pruned = False

        for pkg in sorted(self.broken):
            for v in sorted(self.broken[pkg]):
                self._restrict_broken(pkg, v)
        for pkg in sorted(self.fixed):
            self._restrict_fixed(pkg)
        for pkg in sorted(self.requirements):
            self._restrict_required(pkg)

    def neighbors(self, pkg, v):
        """Dependencies of version v of pkg with their specs."""
        return dict(self.compat[pkg][version(v)])

    def is_weak(self, pkg, v, dep):
        return dep in self.weak[pkg][version(v)]

    def fix(self, pkg, v, requires=None):
        """
        Pins pkg at version v. `requires` maps dependencies of the pinned
        version to their specs.
        """
        v = version(v)
        if pkg not in self.versions or v not in self.versions[pkg]:
            self.add_package(pkg, [v])
        for dep, spec in (requires or {}).items():
            self.add_edge(pkg, v, dep, spec)
        self.simplified = False

        self.fixed[pkg] = v
        if pkg in self.requirements:
            self.requirements[pkg] &= VersionSpec.exact(v)
        self._restrict_fixed(pkg)

    def require(self, pkg, spec):
        """
        Demands some version of pkg matching the spec to be installed.
        Repeated requirements are intersected.
        """
        if pkg not in self.versions:
            raise ValueError('Unknown package {0}'.format(self.pkg_id(pkg)))
        self.simplified = False

        spec = as_spec(spec)
        if pkg in self.requirements:
            spec = self.requirements[pkg] & spec
        if pkg in self.fixed:
            spec = spec & VersionSpec.exact(self.fixed[pkg])
        self.requirements[pkg] = spec
        self._restrict_required(pkg)

    def representatives(self, pkg, versions):
        """
        Highest version of each equivalence class present in `versions`.
        Without equivalence classes every version stands for itself.
        """
        classes = self.eq_classes.get(pkg)
        if not classes:
            return set(versions)

        ret = set()
        for v in versions:
            for u in classes.get(v, (v,)):
                if u in versions:
                    ret.add(u)
                    break
        return ret

    def equivalents(self, pkg, v):
        classes = self.eq_classes.get(pkg)
        if not classes:
            return (v,)
        return classes.get(v, (v,))

    def __repr__(self):
        return ("<{cls.__name__}: {n} packages, {m} required, {k} fixed>"
                .format(cls=type(self), n=len(self.versions),
                        m=len(self.requirements), k=len(self.fixed)))
