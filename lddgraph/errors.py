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

import collections
import enum


class LddGraphError(Exception):
    """Base class for conditions that abort processing of an input."""

    def __init__(self, path, message):
        super(LddGraphError, self).__init__('{}: {}'.format(path, message))
        self.path = path


class NotDynamic(LddGraphError):

    def __init__(self, path):
        super(NotDynamic, self).__init__(path,
                                         'not a dynamically loaded file')


class BrokenReference(LddGraphError):

    def __init__(self, path, reference):
        super(BrokenReference, self).__init__(
            path, '{}: cannot find prior reference'.format(reference))
        self.reference = reference


class IoAborted(LddGraphError):
    pass


class DiagnosticKind(enum.Enum):
    UNRESOLVED_SYMBOL_VERSION = 'some symbol versions are unresolvable'
    LIBRARY_NOT_FOUND = 'library not found'
    UNRECOGNIZED_LINE = 'unrecognized line'


# A recoverable condition seen at line number lineno (1-based)
Diagnostic = collections.namedtuple('Diagnostic', ['kind', 'lineno', 'line'])
