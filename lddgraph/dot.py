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

import io

from lddgraph.common.datatypes import escape

INFO_NODE = '"lddgraph-info"'
# the DOT escape sequence for a centered line break inside a label
LINE_BREAK = '\\n'


def format_label(lines):
    return '"{}"'.format(LINE_BREAK.join(escape(line) for line in lines))


def format_info(graph):
    label = format_label([graph.input_path,
                          '{} nodes'.format(len(graph.nodes)),
                          '{} edges'.format(len(graph.edges))])
    return '{} [shape=note, label={}];\n'.format(INFO_NODE, label)


def format_edge(graph, edge):
    retval = '{} -> {}'.format(graph.nodes[edge.src].quoted(),
                               graph.nodes[edge.dst].quoted())
    if edge.is_labeled():
        retval += ' [label={}]'.format(format_label(edge.labels))
    else:
        retval += ' [style=dotted]'
    return retval + ';\n'


def write_dot(graph, outfd):
    outfd.write('digraph G {\n')
    outfd.write(format_info(graph))

    for node in graph.nodes:
        outfd.write(node.quoted() + ';\n')

    for edge in graph.edges:
        outfd.write(format_edge(graph, edge))

    # only there to place the info node next to the graph
    if graph.edges:
        first = graph.nodes[graph.edges[0].dst]
        outfd.write('{} -> {} [style=invis];\n'.format(first.quoted(),
                                                       INFO_NODE))

    outfd.write('}\n')


def format_dot(graph):
    outfd = io.StringIO()
    write_dot(graph, outfd)
    return outfd.getvalue()
