# Copyright 2021, the lddgraph authors
#
# This file is part of lddgraph.
#
# lddgraph is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# lddgraph is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with lddgraph.  If not, see <http://www.gnu.org/licenses/>.

"""Reconstruct a dependency graph from the output of ``ldd -v``.

The report consists of a header listing the direct loader dependencies::

    libc.so.6 => /lib/x86_64-linux-gnu/libc.so.6 (0x00007f2a1c000000)
    /lib64/ld-linux-x86-64.so.2 (0x00007f2a1c400000)

optionally followed by a ``Version information:`` section in which every
file is announced by a ``<path>:`` line and its versioned symbol
requirements are listed below it::

    ./prog:
            libc.so.6 (GLIBC_2.2.5) => /lib/x86_64-linux-gnu/libc.so.6

Lines are classified by their number of fields and their content, see
classify().
"""

import enum
import logging

from lddgraph.common.datatypes import Graph
from lddgraph.errors import Diagnostic, DiagnosticKind, IoAborted, NotDynamic

NOT_FOUND = 'not found'


def tokenize(line):
    return line.split()


def trim_dot_slash(s):
    return s[2:] if len(s) > 2 and s.startswith('./') else s


def trim_trailing_colon(s):
    return s[:-1] if len(s) > 1 and s.endswith(':') else s


def trim_outer_parens(s):
    return s[1:-1] if len(s) > 2 and s[0] == '(' and s[-1] == ')' else s


def _is_parenthesized(s):
    return len(s) > 1 and s[0] == '(' and s[-1] == ')'


class Phase(enum.Enum):
    HEADER = 1
    VERSIONED = 2


class LineKind(enum.Enum):
    EMPTY = 1
    NOT_DYNAMIC = 2
    UNRESOLVED_VERSION = 3
    VERSION_SECTION = 4
    HEADER_DEPENDENCY = 5
    HEADER_NOT_FOUND = 6
    HEADER_UNRECOGNIZED = 7
    SECTION_PATH = 8
    VERSIONED_REQUIREMENT = 9
    UNRECOGNIZED = 10


class ParserState:

    def __init__(self, awaiting_root_path=False):
        self.phase = Phase.HEADER
        self.awaiting_root_path = awaiting_root_path
        # index of the node the current lines are requirements of
        self.current = 0
        self.not_found = None


def classify(fields, phase):
    """Map the fields of one line to a LineKind, first match wins."""
    count = len(fields)

    if count == 0:
        return LineKind.EMPTY
    # not a dynamic executable
    if count == 4 and fields[0] == 'not' and fields[1] == 'a':
        return LineKind.NOT_DYNAMIC
    if count == 5 and fields[0].endswith(':') and \
            fields[1].endswith(':') and fields[2] == 'version' and \
            fields[4] == 'not':
        return LineKind.UNRESOLVED_VERSION
    if count == 2 and fields[0] == 'Version' and fields[1] == 'information:':
        return LineKind.VERSION_SECTION

    if phase == Phase.HEADER:
        # <lib> (<loadaddr>)
        if count == 2 and _is_parenthesized(fields[1]):
            return LineKind.HEADER_DEPENDENCY
        # <lib> => (<loadaddr>)
        if count == 3 and fields[1] == '=>' and _is_parenthesized(fields[2]):
            return LineKind.HEADER_DEPENDENCY
        if count == 4 and fields[1] == '=>':
            # <lib> => <path> (<loadaddr>)
            if _is_parenthesized(fields[3]):
                return LineKind.HEADER_DEPENDENCY
            # <lib> => not found
            if fields[2] == 'not' and fields[3] == 'found':
                return LineKind.HEADER_NOT_FOUND
        return LineKind.HEADER_UNRECOGNIZED

    # <path>:
    if count == 1 and fields[0].endswith(':'):
        return LineKind.SECTION_PATH
    # <lib> (<version>) => <path>
    if count == 4 and _is_parenthesized(fields[1]) and fields[2] == '=>':
        return LineKind.VERSIONED_REQUIREMENT
    return LineKind.UNRECOGNIZED


class ReportParser:

    def __init__(self, path, awaiting_root_path=False):
        self.path = path
        self.graph = Graph(trim_dot_slash(path))
        self.graph.add_node(trim_dot_slash(path))
        self.state = ParserState(awaiting_root_path)
        self.diagnostics = []
        self.lineno = 0

    def _report(self, kind, line, detail=None):
        self.diagnostics.append(Diagnostic(kind, self.lineno, line))
        if detail:
            logging.warning('%s: %s: %s, input: %s', self.path, detail,
                            kind.value, line.strip())
        else:
            logging.warning('%s: %s, input: %s', self.path, kind.value,
                            line.strip())

    def _add_dependency(self, path):
        sub = self.graph.add_node(trim_dot_slash(path))
        self.graph.add_edge(self.state.current, sub)
        return sub

    def _add_not_found(self, library):
        sub = self._add_dependency(library)
        if self.state.not_found is None:
            self.state.not_found = self.graph.add_node(NOT_FOUND)
        self.graph.add_edge(sub, self.state.not_found)

    def _enter_section(self, field):
        path = trim_dot_slash(trim_trailing_colon(field))
        if self.state.awaiting_root_path:
            logging.debug('%s: root path is %s', self.path, path)
            self.graph.root.path = path
            self.graph.input_path = path
            self.path = path
            self.state.awaiting_root_path = False
        self.state.current = self.graph.find_or_fail(path)

    def _add_requirement(self, fields):
        version = trim_outer_parens(fields[1])
        sub = self.graph.find_or_fail(trim_dot_slash(fields[3]))
        edge = self.graph.find_edge(self.state.current, sub, labeled=True)
        if edge:
            edge.labels.append(version)
        else:
            self.graph.add_edge(self.state.current, sub, version)

    def process_line(self, line):
        self.lineno += 1
        fields = tokenize(line)
        kind = classify(fields, self.state.phase)

        if kind == LineKind.EMPTY:
            pass
        elif kind == LineKind.NOT_DYNAMIC:
            raise NotDynamic(self.path)
        elif kind == LineKind.UNRESOLVED_VERSION:
            self._report(DiagnosticKind.UNRESOLVED_SYMBOL_VERSION, line)
        elif kind == LineKind.VERSION_SECTION:
            self.state.phase = Phase.VERSIONED
        elif kind == LineKind.HEADER_DEPENDENCY:
            self._add_dependency(fields[2] if len(fields) == 4 else fields[0])
        elif kind == LineKind.HEADER_NOT_FOUND:
            self._report(DiagnosticKind.LIBRARY_NOT_FOUND, line, fields[0])
            self._add_not_found(fields[0])
        elif kind == LineKind.SECTION_PATH:
            self._enter_section(fields[0])
        elif kind == LineKind.VERSIONED_REQUIREMENT:
            self._add_requirement(fields)
        else:
            self._report(DiagnosticKind.UNRECOGNIZED_LINE, line)
        return kind

    def parse(self, lines):
        """Feed all lines to the state machine and consolidate the edges.

        Read errors of the underlying stream end up as IoAborted.
        """
        try:
            for line in lines:
                self.process_line(line)
        except (OSError, UnicodeDecodeError) as err:
            raise IoAborted(self.path, 'aborted: {}'.format(err))

        logging.debug('%s: %d nodes, %d edges before consolidation',
                      self.path, len(self.graph.nodes), len(self.graph.edges))
        self.graph.consolidate()
        self.graph.dump()
        return self.graph


def parse_report(lines, path='-', awaiting_root_path=True):
    parser = ReportParser(path, awaiting_root_path)
    return parser.parse(lines)
