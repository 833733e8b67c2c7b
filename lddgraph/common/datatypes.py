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

import logging

from lddgraph.errors import BrokenReference


def escape(text):
    return text.replace('\\', '\\\\').replace('"', '\\"')


def quote(text):
    return '"{}"'.format(escape(text))


class Node:
    """A dynamically loadable file, an executable or a shared library.

    The path is the identity of the node for lookups. It can be rewritten
    once the real path of the root node shows up in the report.
    """

    def __init__(self, path):
        self.path = path

    def quoted(self):
        return quote(self.path)

    def __repr__(self):
        return 'Node({!r})'.format(self.path)


class Edge:
    """A requirement between two nodes of a Graph.

    src and dst are indices into Graph.nodes. An edge with labels is a
    versioned symbol requirement, one without is a direct loader dependency.
    """

    def __init__(self, src, dst, labels=None):
        self.src = src
        self.dst = dst
        self.labels = list(labels) if labels else []

    def is_labeled(self):
        return len(self.labels) > 0

    def __repr__(self):
        return 'Edge({}, {}, {!r})'.format(self.src, self.dst, self.labels)


class Graph:

    def __init__(self, input_path):
        self.input_path = input_path
        self.nodes = []
        self.edges = []

    @property
    def root(self):
        return self.nodes[0]

    def add_node(self, path):
        self.nodes.append(Node(path))
        return len(self.nodes) - 1

    def add_edge(self, src, dst, label=None):
        edge = Edge(src, dst, [label] if label is not None else None)
        self.edges.append(edge)
        return edge

    def find(self, path):
        for idx, node in enumerate(self.nodes):
            if node.path == path:
                return idx
        return None

    def find_or_fail(self, path):
        idx = self.find(path)
        if idx is None:
            raise BrokenReference(self.input_path, path)
        return idx

    def find_edge(self, src, dst, labeled=None):
        for edge in self.edges:
            if edge.src != src or edge.dst != dst:
                continue
            if labeled is not None and edge.is_labeled() != labeled:
                continue
            return edge
        return None

    def consolidate(self):
        """Drop unlabeled edges whose destination is also the destination
        of some labeled edge. Surviving edges keep their order.

        Returns the number of dropped edges.
        """
        labeled_dsts = set(edge.dst for edge in self.edges
                           if edge.is_labeled())
        before = len(self.edges)
        self.edges[:] = [edge for edge in self.edges
                         if edge.is_labeled() or edge.dst not in labeled_dsts]
        dropped = before - len(self.edges)
        logging.debug('consolidation dropped %d of %d edges', dropped, before)
        return dropped

    def dump(self):
        for idx, node in enumerate(self.nodes):
            logging.debug('node %d: path %s', idx, node.path)
        for edge in self.edges:
            logging.debug('edge: from %s to %s labels %s',
                          self.nodes[edge.src].path, self.nodes[edge.dst].path,
                          edge.labels)
