import unittest

from lddgraph.common.datatypes import Graph
from lddgraph.dot import INFO_NODE, format_dot
from lddgraph.report import ReportParser

FILE_PATH = 'test/test_files/'
TEST_REPORT = FILE_PATH + 'prog_ldd'


class TestDot(unittest.TestCase):

    def test_0_single_node(self):
        graph = Graph('prog')
        graph.add_node('prog')

        self.assertEqual(format_dot(graph),
                         'digraph G {\n'
                         '"lddgraph-info" [shape=note, label="prog\\n1 nodes\\n0 edges"];\n'
                         '"prog";\n'
                         '}\n')

    def test_1_edges(self):
        graph = Graph('prog')
        graph.add_node('prog')
        graph.add_node('libfoo.so')
        graph.add_node('/lib/libc.so.6')
        graph.add_edge(0, 1)
        edge = graph.add_edge(0, 2, 'GLIBC_2.34')
        edge.labels.append('GLIBC_2.2.5')

        lines = format_dot(graph).splitlines()
        self.assertEqual(lines[0], 'digraph G {')
        self.assertEqual(lines[1],
                         '"lddgraph-info" [shape=note, label="prog\\n3 nodes\\n2 edges"];')
        self.assertEqual(lines[2:5],
                         ['"prog";', '"libfoo.so";', '"/lib/libc.so.6";'])
        self.assertEqual(lines[5], '"prog" -> "libfoo.so" [style=dotted];')
        self.assertEqual(lines[6],
                         '"prog" -> "/lib/libc.so.6" [label="GLIBC_2.34\\nGLIBC_2.2.5"];')
        # layout hint from the destination of the first edge
        self.assertEqual(lines[7],
                         '"libfoo.so" -> {} [style=invis];'.format(INFO_NODE))
        self.assertEqual(lines[8], '}')
        self.assertEqual(len(lines), 9)

    def test_2_counts_after_consolidation(self):
        with open(TEST_REPORT, 'r') as fd:
            graph = ReportParser(TEST_REPORT, awaiting_root_path=True).parse(fd)
        text = format_dot(graph)

        self.assertIn('label="prog\\n6 nodes\\n5 edges"', text)
        self.assertEqual(text.count(' -> '), 6)
        self.assertEqual(text.count('[style=dotted]'), 3)
        self.assertIn('"libfoo.so" -> "not found" [style=dotted];', text)

    def test_3_escaping(self):
        graph = Graph('we"ird')
        graph.add_node('we"ird')
        self.assertIn('"we\\"ird";\n', format_dot(graph))


if __name__ == '__main__':
    unittest.main()
