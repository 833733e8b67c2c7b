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

import argparse
import logging
import os
import sys

from lddgraph.dot import write_dot
from lddgraph.errors import LddGraphError
from lddgraph.report import ReportParser
from lddgraph.source import ReportSource, STDIN

VERBOSE = os.environ.get('LDDGRAPH_VERBOSE')
DEBUG = os.environ.get('LDDGRAPH_DEBUG')

EPILOG = '''Dotted lines are direct loader dependencies, solid lines are
versioned symbol requirements. Example:
lddgraph /bin/bash | dot -Tpng > g.png'''


class Runner():

    def __init__(self, argv=None, outfd=None):
        self.outfd = outfd or sys.stdout
        self.parse_arguments(argv)

    def parse_arguments(self, argv):
        self.raw_args = list(argv) if argv is not None else sys.argv[1:]
        # no -h: every option-like argument is a request for usage help
        self.parser = argparse.ArgumentParser(
            prog='lddgraph', add_help=False,
            usage='%(prog)s { - | ldd-output-file | '
                  'dynamically-loadable-file } ...',
            description='Convert shared object dependencies into a '
                        'Graphviz directed graph.',
            epilog=EPILOG)
        self.parser.add_argument('paths', type=str, nargs='*',
                                 help='the paths to process')
        self.args, self.unknown = self.parser.parse_known_args(argv)

        loglevel = logging.WARNING
        if VERBOSE:
            loglevel = logging.INFO
        if DEBUG:
            loglevel = logging.DEBUG

        logging.basicConfig(level=loglevel)

    def usage_requested(self):
        if self.unknown or not self.args.paths:
            return True
        # argparse drops a bare --, so look at what was given
        return any(arg.startswith('-') and arg != STDIN
                   for arg in self.raw_args)

    def process_one(self, path):
        logging.info('Processing %s', path)
        with ReportSource(path) as source:
            parser = ReportParser(path, source.awaiting_root_path)
            graph = parser.parse(source)
        logging.info('%s: %d nodes, %d edges', graph.input_path,
                     len(graph.nodes), len(graph.edges))
        write_dot(graph, self.outfd)
        self.outfd.flush()
        return graph

    def process(self):
        if self.usage_requested():
            self.parser.print_help(sys.stderr)
            return 1

        for path in self.args.paths:
            try:
                self.process_one(path)
            except LddGraphError as err:
                logging.error('%s', err)
                return 1
        return 0


def main(argv=None):
    runner = Runner(argv)
    sys.exit(runner.process())
