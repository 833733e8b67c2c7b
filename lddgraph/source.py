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
import os
import shutil
import subprocess
import sys

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile

from lddgraph.errors import IoAborted

LDD = os.environ.get('LDDGRAPH_LDD', 'ldd')

STDIN = '-'


def is_loadable_object(path):
    """Check for an ELF header describing an executable or shared object."""
    try:
        with open(path, 'rb') as fd:
            header = ELFFile(fd).header
            return header['e_type'] in ('ET_EXEC', 'ET_DYN')
    except (ELFError, OSError) as err:
        logging.debug('\'%s\' is no ELF file => %s', path, err)
        return False


class ReportSource:
    """The ldd -v report for one command line argument.

    '-' reads standard input, ELF files are run through ldd -v and
    everything else is read as a file already containing a report. Use as
    a context manager, the file is closed or the ldd process reaped on exit.
    """

    def __init__(self, path, ldd=None):
        self.path = path
        self.ldd = ldd or LDD
        self.proc = None
        self.fd = None
        # the real path of the root node is only known from the report
        self.awaiting_root_path = True

    def _spawn(self):
        ldd = shutil.which(self.ldd)
        if ldd is None:
            raise IoAborted(self.path, '{}: command not found'.format(self.ldd))
        cmdline = [ldd, '-v', self.path]
        logging.info('Running %s', ' '.join(cmdline))
        try:
            self.proc = subprocess.Popen(cmdline, stdout=subprocess.PIPE,
                                         stderr=subprocess.STDOUT,
                                         universal_newlines=True)
        except OSError as err:
            raise IoAborted(self.path, 'popen failed: {}'.format(err))
        self.fd = self.proc.stdout
        self.awaiting_root_path = False

    def open(self):
        if self.path == STDIN:
            logging.info('Reading report from standard input')
            self.fd = sys.stdin
        elif is_loadable_object(self.path):
            self._spawn()
        else:
            logging.info('Reading report from %s', self.path)
            try:
                self.fd = open(self.path, 'r')
            except OSError as err:
                raise IoAborted(self.path, 'fopen failed: {}'.format(err))
        return self

    def close(self, check=True):
        if self.proc:
            self.proc.stdout.close()
            status = self.proc.wait()
            self.proc = None
            if check and status != 0:
                raise IoAborted(self.path,
                                '{} exited with status {}'.format(self.ldd,
                                                                  status))
        elif self.fd is not None and self.fd is not sys.stdin:
            try:
                self.fd.close()
            except OSError as err:
                if check:
                    raise IoAborted(self.path,
                                    'fclose failed: {}'.format(err))
        self.fd = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback):
        # do not mask the error which aborted the input
        self.close(check=exc_type is None)

    def __iter__(self):
        return iter(self.fd)
