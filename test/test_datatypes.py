import glob
import unittest

from lddgraph.common.datatypes import Edge, Graph, quote
from lddgraph.errors import BrokenReference


def create_graph(*paths):
    graph = Graph(paths[0])
    for path in paths:
        graph.add_node(path)
    return graph


class TestGraph(unittest.TestCase):

    def test_0_find_or_fail(self):
        graph = create_graph('prog', 'libc.so.6', '/lib/libc.so.6')
        self.assertEqual(graph.find_or_fail('/lib/libc.so.6'), 2)
        # exact string equality only
        self.assertRaises(BrokenReference, graph.find_or_fail, 'lib/libc.so.6')

    def test_0_find_edge_by_endpoints(self):
        # two nodes with equal paths are still different endpoints
        graph = create_graph('prog', 'libc.so.6', 'libc.so.6')
        graph.add_edge(0, 1)
        labeled = graph.add_edge(0, 2, 'GLIBC_2.2.5')

        self.assertIs(graph.find_edge(0, 2), labeled)
        self.assertIsNone(graph.find_edge(1, 0))
        self.assertIsNone(graph.find_edge(0, 1, labeled=True))
        self.assertIs(graph.find_edge(0, 1, labeled=False), graph.edges[0])

    def test_0_edge_labels(self):
        self.assertFalse(Edge(0, 1).is_labeled())
        self.assertTrue(Edge(0, 1, ['GLIBC_2.2.5']).is_labeled())

    def test_1_consolidate_keeps_unlabeled_without_labeled_target(self):
        graph = create_graph('prog', 'liba.so', 'libb.so')
        graph.add_edge(0, 1)
        graph.add_edge(0, 1)
        graph.add_edge(0, 2)

        self.assertEqual(graph.consolidate(), 0)
        self.assertEqual(len(graph.edges), 3)

    def test_1_consolidate_by_destination_only(self):
        graph = create_graph('prog', 'liba.so', 'libb.so', 'libc.so')
        first = graph.add_edge(0, 1)
        graph.add_edge(0, 2)
        second = graph.add_edge(0, 3)
        # a labeled edge from a different source still makes 0 -> 2 redundant
        labeled = graph.add_edge(1, 2, 'V1')
        graph.add_edge(3, 2)

        self.assertEqual(graph.consolidate(), 2)
        self.assertEqual(graph.edges, [first, second, labeled])

    def test_1_consolidate_monotonic(self):
        graph = create_graph('prog', 'liba.so', 'libb.so')
        graph.add_edge(0, 1, 'V1')
        graph.add_edge(0, 1)
        graph.add_edge(1, 2, 'V2')
        graph.add_edge(0, 2)
        labeled_before = [e for e in graph.edges if e.is_labeled()]
        count_before = len(graph.edges)

        graph.consolidate()

        self.assertLessEqual(len(graph.edges), count_before)
        self.assertEqual([e for e in graph.edges if e.is_labeled()],
                         labeled_before)
        self.assertEqual(graph.edges, labeled_before)

    def test_2_quote(self):
        self.assertEqual(quote('/lib/libc.so.6'), '"/lib/libc.so.6"')
        self.assertEqual(quote('a"b\\c'), '"a\\"b\\\\c"')
        self.assertEqual(create_graph('prog').root.quoted(), '"prog"')

    def test_3_license_header(self):
        # GPL notice under the project copyright line, no personal holder
        for path in glob.glob('lddgraph/**/*.py', recursive=True):
            with open(path, 'r') as fd:
                text = fd.read()
            if not text:
                continue
            self.assertTrue(text.startswith('# Copyright 2021, the lddgraph authors\n'),
                            path)
            self.assertIn('GNU General Public License', text)


if __name__ == '__main__':
    unittest.main()
