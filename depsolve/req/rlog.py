"""
Resolve log: the history of how versions of each package were restricted.

When resolution fails, the log of the package that has run out of versions is
rendered as a tree, each restriction caused by another package being followed
by the log of that package:

    B [1b2c3d4e] log:
    ├─possible versions are: 1.0.0-3.0.0 or uninstalled
    ├─restricted by compatibility requirements with A [0f1e2d3c] to versions: 1, leaving only versions: 1.0.0-1.2.0
    │ └─A [0f1e2d3c] log:
    │   ├─possible versions are: 1.0.0 or uninstalled
    │   └─restricted to versions * by an explicit requirement, leaving only versions: 1.0.0
    └─restricted by compatibility requirements with C [5a6b7c8d] to versions: 2-*, leaving no versions
      └─...
"""

__all__ = [
    "ResolveLog",
    "ResolveLogEntry",
    "pkg_id",
]


from collections import namedtuple

from depsolve import util
from depsolve.versions import compressed_spec


def pkg_id(names, pkg):
    """Display string of a package: its name followed by a short UUID."""
    name = names.get(pkg)
    if name is None:
        return '[{0}]'.format(util.short_uuid(pkg))
    return '{0} [{1}]'.format(name, util.short_uuid(pkg))


# 'cause' is the package responsible for the event (None if there is no such),
# 'spec' is the spec that package asked for.
LogEvent = namedtuple('LogEvent', 'msg cause spec')


class ResolveLogEntry(object):
    """Events of a single package in order of occurrence."""

    _dump_attrs = 'pkg header events'.split()

    def __init__(self, pkg, header):
        super(ResolveLogEntry, self).__init__()
        self.pkg = pkg
        self.header = header
        self.events = []

    def __repr__(self):
        return ("<{cls.__name__}: {self.header} ({n} events)>"
                .format(cls=type(self), self=self, n=len(self.events)))


class ResolveLog(object):
    """docstring for ResolveLog"""

    def __init__(self, names, versions):
        super(ResolveLog, self).__init__()
        self.names = names
        self.versions = versions
        self.globals = ResolveLogEntry(None, 'Global events:')
        self.pool = {}

    def copy(self, names=None, versions=None):
        ret = ResolveLog(self.names if names is None else names,
                         self.versions if versions is None else versions)
        ret.globals.events[:] = self.globals.events
        for pkg, entry in self.pool.items():
            ret.entry(pkg).events[:] = entry.events
        return ret

    def entry(self, pkg):
        try:
            return self.pool[pkg]
        except KeyError:
            header = '{0} log:'.format(pkg_id(self.names, pkg))
            ret = self.pool[pkg] = ResolveLogEntry(pkg, header)
            ret.events.append(LogEvent(self._initial_msg(pkg), None, None))
            return ret

    def _initial_msg(self, pkg):
        versions = self.versions.get(pkg)
        if not versions:
            return '{0} has no known versions!'.format(pkg_id(self.names, pkg))
        return ('possible versions are: {0} or uninstalled'
                .format(compressed_spec(versions)))

    def event(self, pkg, msg, cause=None, spec=None):
        self.entry(pkg).events.append(LogEvent(msg, cause, spec))

    def global_event(self, msg):
        self.globals.events.append(LogEvent(msg, None, None))

    def requirers(self, pkg):
        """(requirer, spec) pairs of every recorded restriction of pkg."""
        if pkg not in self.pool:
            return []
        return [(event.cause, event.spec) for event in self.pool[pkg].events
                if event.spec is not None]

    def show(self, pkg):
        entry = self.entry(pkg)
        lines = [entry.header]
        self._show_events(entry, '', lines, set([pkg]))
        return '\n'.join(lines)

    def _show_events(self, entry, indent, lines, seen):
        last_index = len(entry.events) - 1
        for i, event in enumerate(entry.events):
            last = (i == last_index)
            lines.append(indent + ('└─' if last else '├─') + event.msg)

            cause = event.cause
            if cause is None or cause == entry.pkg or cause not in self.pool:
                continue

            sub_indent = indent + ('  ' if last else '│ ')
            if cause in seen:
                lines.append(sub_indent + '└─see above for {0} log'
                             .format(pkg_id(self.names, cause)))
                continue

            seen.add(cause)
            sub_entry = self.pool[cause]
            lines.append(sub_indent + '└─' + sub_entry.header)
            self._show_events(sub_entry, sub_indent + '  ', lines, seen)
