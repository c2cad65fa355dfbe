"""
Errors reported by the graph simplifier and the resolver.
"""

__all__ = [
    "GraphValidationError",
    "ResolverError",
]


class GraphValidationError(Exception):
    """
    Graph data refers to packages which have no known versions.

    `dangling` lists (pkg, version, dep) triples of the offending edges.
    """

    def __init__(self, msg, dangling=()):
        super(GraphValidationError, self).__init__(msg)
        self.dangling = list(dangling)


class ResolverError(Exception):
    """
    No version assignment satisfies the requirements.

    `pkg` is the package which has run out of versions, and `requirers` is a
    list of (requirer, spec) pairs that restricted it, where the requirer is
    None for an explicit requirement.
    """

    def __init__(self, msg, pkg=None, requirers=()):
        super(ResolverError, self).__init__(msg)
        self.msg = msg
        self.pkg = pkg
        self.requirers = list(requirers)

    def __str__(self):
        return self.msg
