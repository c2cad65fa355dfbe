"""
Reference dependency schemes shared by the resolver tests.

Each entry of a scheme is a list of the form:

    [name, version, dep_name, dep_spec, dep_name, dep_spec, ...]

and states that version of the package named `name` depends on each
`dep_name` with the given registry-syntax spec.
"""

import uuid

from depsolve.req import Graph
from depsolve.req import resolve
from depsolve.req import sanity_check
from depsolve.req import simplify_graph
from depsolve.versions import version


_namespace = uuid.UUID('cfb74b52-ec16-5bb7-a574-95d9e393895e')

def pkg_uuid(name):
    return uuid.uuid5(_namespace, name)


def graph_from_data(deps_data, weak_data=()):
    graph = Graph()
    for data, weak in ((deps_data, False), (weak_data, True)):
        for entry in data:
            name, v, rest = entry[0], entry[1], entry[2:]
            pkg = pkg_uuid(name)
            graph.add_package(pkg, [v], name=name)
            for dep_name, spec in zip(rest[::2], rest[1::2]):
                dep = pkg_uuid(dep_name)
                graph.add_package(dep, name=dep_name)
                graph.add_edge(pkg, v, dep, spec, weak=weak)
    return graph


def add_reqs(graph, reqs_data):
    for name, spec in reqs_data:
        graph.require(pkg_uuid(name), spec)


def resolve_data(deps_data, reqs_data, weak_data=(), **kwargs):
    graph = graph_from_data(deps_data, weak_data)
    add_reqs(graph, reqs_data)
    simplify_graph(graph)
    return resolve(graph, **kwargs)


def sanity_data(deps_data, pkgs=None):
    graph = graph_from_data(deps_data)
    subset = None if pkgs is None else [pkg_uuid(p) for p in pkgs]
    return sanity_check(graph, subset)


def want(want_data):
    return dict((pkg_uuid(name), version(v)) for name, v in want_data.items())


def want_list(want_data):
    return sorted((pkg_uuid(name), version(v)) for name, v in want_data)


# Two packages, DAG
SCHEME_1 = [
    ['A', '1', 'B', '1-*'],
    ['A', '2', 'B', '2-*'],
    ['B', '1'],
    ['B', '2'],
]

# Two packages, cyclic
SCHEME_2 = [
    ['A', '1', 'B', '2-*'],
    ['A', '2', 'B', '1-*'],
    ['B', '1', 'A', '2-*'],
    ['B', '2', 'A', '1-*'],
]

# Three packages, cyclic, two mutually exclusive solutions
SCHEME_3 = [
    ['A', '1', 'B', '2-*'],
    ['A', '2', 'B', '1'],
    ['B', '1', 'C', '2-*'],
    ['B', '2', 'C', '1'],
    ['C', '1', 'A', '1'],
    ['C', '2', 'A', '2-*'],
]

# Two packages, DAG, with a trivial inconsistency
SCHEME_4 = [
    ['A', '1', 'B', '2-*'],
    ['B', '1'],
]

# Three packages, DAG, with an implicit inconsistency
SCHEME_5 = [
    ['A', '1', 'B', '2-*', 'C', '2-*'],
    ['A', '2', 'B', '1', 'C', '1'],
    ['B', '1', 'C', '2-*'],
    ['B', '2', 'C', '2-*'],
    ['C', '1'],
    ['C', '2'],
]

# Two packages, cyclic, totally inconsistent
SCHEME_6 = [
    ['A', '1', 'B', '2-*'],
    ['A', '2', 'B', '1'],
    ['B', '1', 'A', '1'],
    ['B', '2', 'A', '2-*'],
]

# Three packages, cyclic, with an inconsistency
SCHEME_7 = [
    ['A', '1', 'B', '1'],
    ['A', '2', 'B', '2-*'],
    ['B', '1', 'C', '1'],
    ['B', '2', 'C', '2-*'],
    ['C', '1', 'A', '2-*'],
    ['C', '2', 'A', '2-*'],
]

# Three packages, cyclic, totally inconsistent
SCHEME_8 = [
    ['A', '1', 'B', '1'],
    ['A', '2', 'B', '2-*'],
    ['B', '1', 'C', '1'],
    ['B', '2', 'C', '2-*'],
    ['C', '1', 'A', '2-*'],
    ['C', '2', 'A', '1'],
]

# Six packages, DAG
SCHEME_9 = [
    ['A', '1'],
    ['A', '2'],
    ['A', '3'],
    ['B', '1', 'A', '1'],
    ['B', '2', 'A', '*'],
    ['C', '1', 'A', '2'],
    ['C', '2', 'A', '2-*'],
    ['D', '1', 'B', '1-*'],
    ['D', '2', 'B', '2-*'],
    ['E', '1', 'D', '*'],
    ['F', '1', 'A', '1-2', 'E', '*'],
    ['F', '2', 'C', '2-*', 'E', '*'],
]

# Five packages, same as schemes 5 and 1, unconnected
SCHEME_10 = [
    ['A', '1', 'B', '2-*', 'C', '2-*'],
    ['A', '2', 'B', '1', 'C', '1'],
    ['B', '1', 'C', '2-*'],
    ['B', '2', 'C', '2-*'],
    ['C', '1'],
    ['C', '2'],
    ['D', '1', 'E', '1-*'],
    ['D', '2', 'E', '2-*'],
    ['E', '1'],
    ['E', '2'],
]
