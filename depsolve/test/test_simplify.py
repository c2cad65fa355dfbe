"""
Tests for graph pruning, validation and compression.
"""

import itertools
import logging
import unittest

from depsolve.req import GraphValidationError
from depsolve.req import ResolverError
from depsolve.req import resolve
from depsolve.req import simplify_graph
from depsolve.req import verify_solution
from depsolve.versions import as_spec
from depsolve.versions import version

from depsolve.test.schemes import SCHEME_5
from depsolve.test.schemes import SCHEME_9
from depsolve.test.schemes import add_reqs
from depsolve.test.schemes import graph_from_data
from depsolve.test.schemes import pkg_uuid
from depsolve.test.schemes import want


A, B, C, X = map(pkg_uuid, 'ABCX')


def versions(*texts):
    return set(map(version, texts))


class PruningTestCase(unittest.TestCase):

    def test_implicit_inconsistency(self):
        graph = graph_from_data(SCHEME_5)
        add_reqs(graph, [('A', '*')])
        simplify_graph(graph)

        self.assertIsNone(graph.conflict)
        self.assertTrue(graph.simplified)
        self.assertEqual(versions('1'), graph.domains[A])
        self.assertEqual(versions('2'), graph.domains[B])
        self.assertEqual(versions('2'), graph.domains[C])
        self.assertEqual(set([A, B, C]), graph.implied)

    def test_nothing_required(self):
        graph = graph_from_data(SCHEME_5)
        simplify_graph(graph)

        self.assertIsNone(graph.conflict)
        self.assertEqual(set(), graph.implied)
        self.assertEqual(graph.versions, graph.domains)

    def test_conflict_is_deferred(self):
        graph = graph_from_data(SCHEME_5)
        add_reqs(graph, [('A', '2-*')])
        simplify_graph(graph)

        self.assertIsNotNone(graph.conflict)
        with self.assertRaises(ResolverError) as cm:
            resolve(graph)
        self.assertTrue(str(cm.exception).startswith(
            'Unsatisfiable requirements detected for package'))
        self.assertIn(graph.pkg_id(graph.conflict), str(cm.exception))


class ValidationTestCase(unittest.TestCase):

    def setUp(self):
        self.graph = graph_from_data([
            ['A', '1', 'X', '*'],
            ['A', '2'],
        ])
        add_reqs(self.graph, [('A', '*')])

    def test_dangling_edge(self):
        with self.assertRaises(GraphValidationError) as cm:
            simplify_graph(self.graph, validate_versions=True)
        self.assertEqual([(A, version('1'), X)], cm.exception.dangling)

    def test_no_validation(self):
        simplify_graph(self.graph)

        self.assertIsNone(self.graph.conflict)
        self.assertEqual(versions('2'), self.graph.domains[A])
        self.assertEqual({A: version('2')}, resolve(self.graph))


class CompressionTestCase(unittest.TestCase):

    def setUp(self):
        self.graph = graph_from_data([
            ['A', '1', 'B', '1'],
            ['B', '1.0.0'],
            ['B', '1.1.0'],
            ['B', '1.2.0'],
            ['B', '2.0.0'],
        ])
        add_reqs(self.graph, [('A', '*')])

    def test_spec_rewritten(self):
        simplify_graph(self.graph)
        spec = self.graph.compat[A][version('1')][B]

        self.assertEqual('1.0.0-1.2.0', str(spec))
        self.assertIn(version('1.1.0'), spec)
        self.assertNotIn(version('2.0.0'), spec)

    def test_eq_classes(self):
        simplify_graph(self.graph)
        classes = self.graph.eq_classes[B]

        members = (version('1.2.0'), version('1.1.0'), version('1.0.0'))
        for v in members:
            self.assertEqual(members, classes[v])
        self.assertEqual((version('2.0.0'),), classes[version('2.0.0')])
        self.assertEqual(versions('1.2.0'),
                         self.graph.representatives(B, self.graph.domains[B]))

    def test_representative_resolved(self):
        self.assertEqual({A: version('1'), B: version('1.2.0')},
                         resolve(self.graph))

    def test_requirement_splits_classes(self):
        add_reqs(self.graph, [('B', '1.0-1.1')])
        simplify_graph(self.graph)
        classes = self.graph.eq_classes[B]

        self.assertEqual((version('1.1.0'), version('1.0.0')),
                         classes[version('1.0.0')])
        self.assertEqual((version('1.2.0'),), classes[version('1.2.0')])
        self.assertEqual({A: version('1'), B: version('1.1.0')},
                         resolve(self.graph))


class GrowthTestCase(unittest.TestCase):

    def test_new_version_resolves_conflict(self):
        graph = graph_from_data([
            ['A', '1', 'B', '2'],
            ['B', '1'],
        ])
        add_reqs(graph, [('A', '*')])
        with self.assertRaises(ResolverError):
            resolve(graph)

        graph.add_package(B, ['2'])
        self.assertFalse(graph.simplified)
        self.assertIsNone(graph.conflict)
        self.assertEqual(versions('1'), graph.domains[A])
        self.assertEqual(want({'A': '1', 'B': '2'}), resolve(graph))

    def test_new_version_within_compressed_spec(self):
        graph = graph_from_data([
            ['A', '1', 'B', '1-*'],
            ['B', '1'],
        ])
        add_reqs(graph, [('A', '*')])
        self.assertEqual(want({'A': '1', 'B': '1'}), resolve(graph))
        self.assertNotEqual(as_spec('1-*'), graph.compat[A][version('1')][B])

        graph.add_package(B, ['2'])
        self.assertEqual(as_spec('1-*'), graph.compat[A][version('1')][B])
        self.assertEqual(want({'A': '1', 'B': '2'}), resolve(graph))

    def test_new_edge_keeps_requirements(self):
        graph = graph_from_data(SCHEME_5)
        add_reqs(graph, [('A', '*')])
        simplify_graph(graph)

        graph.add_edge(C, '2', X, '*')
        self.assertEqual(set([A]), graph.implied)
        self.assertEqual(graph.versions[B], graph.domains[B])
        self.assertIn('by an explicit requirement', graph.log.show(A))

        simplify_graph(graph)
        self.assertIsNotNone(graph.conflict)


class SoundnessTestCase(unittest.TestCase):
    """Pruning must keep every version used by some valid solution."""

    def setUp(self):
        logging.disable(logging.ERROR)

    def tearDown(self):
        logging.disable(logging.NOTSET)

    def check_scheme(self, deps_data, reqs_data):
        graph = graph_from_data(deps_data)
        add_reqs(graph, reqs_data)
        simplify_graph(graph)
        self.assertIsNone(graph.conflict)

        pkgs = sorted(graph.versions)
        choices = [sorted(graph.versions[pkg]) + [None] for pkg in pkgs]

        nr_valid = 0
        for values in itertools.product(*choices):
            solution = dict(zip(pkgs, values))
            if not verify_solution(graph, solution):
                continue
            nr_valid += 1
            for pkg, v in solution.items():
                if v is not None:
                    self.assertIn(v, graph.domains[pkg])
                if pkg in graph.implied:
                    self.assertIsNotNone(v)
        self.assertGreater(nr_valid, 0)

    def test_scheme_5(self):
        self.check_scheme(SCHEME_5, [('A', '*')])

    def test_scheme_9(self):
        self.check_scheme(SCHEME_9, [('F', '*')])
        self.check_scheme(SCHEME_9, [('F', '*'), ('B', '1')])


if __name__ == '__main__':
    import logging, sys
    from depsolve import util
    # util.init_logging(filename='%s.log' % __name__)
    util.init_logging(sys.stderr,
                      level=logging.INFO)

    unittest.main(verbosity=2)
