"""
Objective of the resolver and the deciders choosing what to try next.

A decider looks at a search state and proposes a (package, value) pair, the
value being a version or None for "uninstalled", or returns None when it has
nothing to propose. Two deciders are provided:

  * MaxSumDecider runs max-sum message passing over the packages and
    proposes the package whose best value is the most confidently
    determined one. It abstains when beliefs are tied, and for good once
    it has spent its share of work.

  * BranchDecider takes the first undetermined package in a fixed order
    (required packages first, then by UUID) with its most preferred value.
    It only returns None when every package is determined.
"""

__all__ = [
    "FieldValue",
    "Objective",
    "Decider",
    "MaxSumDecider",
    "BranchDecider",
    "candidates",
    "is_determined",
]


import operator

from depsolve.versions import VersionWeight

from depsolve import util
logger = util.get_extended_logger(__name__)


def candidates(graph, state, pkg):
    """
    Values the package can still take, most recent versions first: one
    representative per class of equivalent versions, then None unless the
    package must be installed.
    """
    ret = sorted(graph.representatives(pkg, state.domains[pkg]), reverse=True)
    if pkg not in state.implied:
        ret.append(None)
    return ret


def is_determined(graph, state, pkg):
    return len(candidates(graph, state, pkg)) == 1


class FieldValue(object):
    """
    Lexicographically ordered and additive value of a (partial) solution:

        l0: minus the number of violated constraints,
        l1: sum of weights of explicitly required packages,
        l2: sum of weight differences from the best version of the other
            installed packages,
        l3: minus the number of installed packages.
    """

    __slots__ = ('l0', 'l1', 'l2', 'l3')

    def __init__(self, l0=0, l1=None, l2=None, l3=0):
        super(FieldValue, self).__init__()
        self.l0 = l0
        self.l1 = l1 if l1 is not None else VersionWeight.zero()
        self.l2 = l2 if l2 is not None else VersionWeight.zero()
        self.l3 = l3

    @classmethod
    def zero(cls):
        return cls()

    def _key(self):
        return (self.l0, self.l1, self.l2, self.l3)

    def vector(self):
        """Flat tuple of integers, ordered as FieldValues are up to
        prerelease tags."""
        return ((self.l0,) + self.l1.components + self.l2.components +
                (self.l3,))

    def __add__(self, other):
        return FieldValue(self.l0 + other.l0, self.l1 + other.l1,
                          self.l2 + other.l2, self.l3 + other.l3)

    def __sub__(self, other):
        return FieldValue(self.l0 - other.l0, self.l1 - other.l1,
                          self.l2 - other.l2, self.l3 - other.l3)

    def __eq__(self, other):
        if not isinstance(other, FieldValue):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        if not isinstance(other, FieldValue):
            return NotImplemented
        return self._key() != other._key()

    def __lt__(self, other):
        return self._key() < other._key()

    def __le__(self, other):
        return self._key() <= other._key()

    def __gt__(self, other):
        return self._key() > other._key()

    def __ge__(self, other):
        return self._key() >= other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return ('{cls.__name__}({self.l0}, {self.l1!r}, {self.l2!r}, '
                '{self.l3})'.format(cls=type(self), self=self))


class Objective(object):
    """
    Scores assignments of a set of packages. Versions are compared to the
    best version each package had in the root `state`.

    Ties are broken by the tuple of weights of chosen versions in order of
    package UUIDs, uninstalled packages weighting less than any version.
    """

    def __init__(self, graph, state, variables):
        super(Objective, self).__init__()
        self.graph = graph
        self.variables = sorted(variables)
        self.best = {}
        for pkg in self.variables:
            domain = state.domains[pkg]
            if domain:
                self.best[pkg] = VersionWeight.of(max(domain))

    def is_required(self, pkg):
        return pkg in self.graph.requirements or pkg in self.graph.fixed

    def field(self, pkg, value):
        if value is None:
            return FieldValue()
        weight = VersionWeight.of(value)
        if self.is_required(pkg):
            return FieldValue(l1=weight, l3=-1)
        return FieldValue(l2=weight - self.best[pkg], l3=-1)

    @staticmethod
    def weight(value):
        if value is None:
            return VersionWeight.min()
        return VersionWeight.of(value)

    def assignment(self, state):
        """Values of determined packages of the state."""
        return dict((pkg, candidates(self.graph, state, pkg)[0])
                    for pkg in self.variables)

    def value(self, assignment):
        total = FieldValue.zero()
        for pkg in self.variables:
            total = total + self.field(pkg, assignment.get(pkg))
        return total

    def tiebreak(self, assignment):
        return tuple(self.weight(assignment.get(pkg))
                     for pkg in self.variables)

    def score(self, assignment):
        return (self.value(assignment), self.tiebreak(assignment))

    def bound(self, state):
        """Score no completion of the state can exceed."""
        total = FieldValue.zero()
        tiebreak = []
        for pkg in self.variables:
            values = candidates(self.graph, state, pkg)
            total = total + max(self.field(pkg, x) for x in values)
            tiebreak.append(max(self.weight(x) for x in values))
        return (total, tuple(tiebreak))

    def preferred(self, pkg, values):
        return max(values, key=lambda x: (self.field(pkg, x), self.weight(x)))


class Decider(object):
    """Proposes the next (package, value) choice for a search state."""

    def __init__(self, graph, variables, objective):
        super(Decider, self).__init__()
        self.graph = graph
        self.variables = sorted(variables)
        self.objective = objective

    def undetermined(self, state):
        return [pkg for pkg in self.variables
                if not is_determined(self.graph, state, pkg)]

    def decide_next(self, state):
        raise NotImplementedError


class BranchDecider(Decider):

    def __init__(self, graph, variables, objective):
        super(BranchDecider, self).__init__(graph, variables, objective)
        self.variables.sort(key=lambda pkg: (not objective.is_required(pkg),
                                             pkg))

    def decide_next(self, state):
        for pkg in self.variables:
            values = candidates(self.graph, state, pkg)
            if len(values) > 1:
                return pkg, self.objective.preferred(pkg, values)
        return None


class MaxSumDecider(Decider):
    """
    Beliefs are FieldValues flattened into tuples of integers: the unary part
    comes from the objective, and every pair of incompatible values of two
    linked packages costs one violation.

    Messages survive between calls, so each decision starts from where the
    previous one has converged. Once `max_work` pairs of values have been
    visited the decider stops proposing anything at all.
    """

    max_iter = 20
    max_work = 200000

    def __init__(self, graph, variables, objective):
        super(MaxSumDecider, self).__init__(graph, variables, objective)
        self.msgs = {}
        self.work = 0

    def decide_next(self, state):
        undetermined = self.undetermined(state)
        if not undetermined or self.work > self.max_work:
            return None

        graph = self.graph
        values = dict((pkg, candidates(graph, state, pkg))
                      for pkg in self.variables)
        unary = dict((pkg, dict((x, self.objective.field(pkg, x).vector())
                                for x in values[pkg]))
                     for pkg in self.variables)
        allowed = self._allowed(values)

        neighbors = dict((pkg, []) for pkg in self.variables)
        for p, q in sorted(allowed):
            neighbors[q].append(p)

        zero = FieldValue.zero().vector()

        # msgs[p, q][y]: what p tells q about q taking the value y
        msgs = {}
        for p, q in allowed:
            old = self.msgs.get((p, q), {})
            msgs[p, q] = dict((y, old.get(y, zero)) for y in values[q])

        for i in range(self.max_iter):
            beliefs = self._beliefs(unary, msgs, neighbors)
            new_msgs = {}
            for (p, q), compatible in allowed.items():
                incoming = msgs[q, p]
                partial = dict((x, _sub(beliefs[p][x], incoming[x]))
                               for x in values[p])
                ranked = sorted(values[p], key=partial.get, reverse=True)

                outgoing = {}
                for y in values[q]:
                    outgoing[y] = _best_message(partial, ranked, compatible[y])
                top = max(outgoing.values())
                new_msgs[p, q] = dict((y, _sub(m, top))
                                      for y, m in outgoing.items())
                self.work += len(values[p]) * len(values[q])

            converged = (new_msgs == msgs)
            msgs = new_msgs
            if converged:
                logger.debug('max-sum converged after %d iteration(s)', i + 1)
                break
            if self.work > self.max_work:
                logger.debug('max-sum gave up after %d value pairs',
                             self.work)
                return None

        self.msgs = msgs
        beliefs = self._beliefs(unary, msgs, neighbors)

        best_gap = zero
        choice = None
        for pkg in undetermined:
            belief = beliefs[pkg]
            ranked = sorted(values[pkg],
                            key=lambda x: (belief[x], self.objective.weight(x)),
                            reverse=True)
            gap = _sub(belief[ranked[0]], belief[ranked[1]])
            if gap > best_gap:
                best_gap = gap
                choice = (pkg, ranked[0])

        if choice is not None:
            logger.debug('max-sum decided %s = %s with gap %r',
                         graph.pkg_id(choice[0]), choice[1], best_gap)
        return choice

    def _beliefs(self, unary, msgs, neighbors):
        ret = {}
        for pkg, table in unary.items():
            ret[pkg] = belief = {}
            for x, b in table.items():
                for r in neighbors[pkg]:
                    b = _add(b, msgs[r, pkg][x])
                belief[x] = b
        return ret

    def _allowed(self, values):
        """allowed[p, q][y]: values of p compatible with q taking the value y"""
        links = set()
        for p in self.variables:
            for x in values[p]:
                if x is None:
                    continue
                for q in self.graph.compat[p][x]:
                    if q != p and q in values:
                        links.add((p, q))
                        links.add((q, p))

        ret = {}
        for p, q in links:
            ret[p, q] = dict((y, set(x for x in values[p]
                                     if self._compatible(p, x, q, y) and
                                     self._compatible(q, y, p, x)))
                             for y in values[q])
        return ret

    def _compatible(self, p, x, q, y):
        if x is None:
            return True
        spec = self.graph.compat[p][x].get(q)
        if spec is None:
            return True
        if y is None:
            return q in self.graph.weak[p][x]
        return y in spec


def _add(a, b):
    return tuple(map(operator.add, a, b))


def _sub(a, b):
    return tuple(map(operator.sub, a, b))


def _best_message(partial, ranked, compatible):
    top = ranked[0]
    if top in compatible:
        return partial[top]

    # the best value of all, but at the cost of a violation
    ret = (partial[top][0] - 1,) + partial[top][1:]
    for x in ranked:
        if x in compatible:
            return max(ret, partial[x])
    return ret
