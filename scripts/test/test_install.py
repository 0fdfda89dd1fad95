#
# Copyright (C) 2026  The fastlibtool authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
#
#

import os
import unittest

from faketoolchain import *

from commandwrapper import Mode
from installwrapper import InstallWrapper
from lafile import LibraryDescriptor, SharedLibraryNames, VersionInfo


def install(command, **kwargs):
    wrapper = InstallWrapper(getInvocation(command, Mode.install, **kwargs))
    wrapper.run()
    return wrapper


class TestInstallWrapper(TempDirMixin, unittest.TestCase):

    def setUp(self):
        super().setUp()
        names = SharedLibraryNames.compute('libfoo', VersionInfo())
        LibraryDescriptor(dlname=names.soname, libraryNames=names.libraryNames(),
                          oldLibrary='libfoo.a').write('libfoo.la')

    def testLibraryIsExpanded(self):
        with fakeToolchain() as toolchain:
            install('/usr/bin/install -c libfoo.la /dest')
        self.assertEqual(toolchain.commands, [
            ['cp', '-P', '-R', './.libs/libfoo.so.0.0.0', '/dest'],
            ['cp', '-P', '-R', './.libs/libfoo.so.0', '/dest'],
            ['cp', '-P', '-R', './.libs/libfoo.so', '/dest'],
            ['cp', '-P', '-R', './.libs/libfoo.a', '/dest'],
        ])

    def testFlagValuesAreSkipped(self):
        with fakeToolchain() as toolchain:
            install('install -m 644 libfoo.la /dest/lib/libfoo.la')
        self.assertEqual(len(toolchain.commands), 4)
        self.assertEqual(toolchain.commands[-1], ['cp', '-P', '-R', './.libs/libfoo.a', '/dest/lib/libfoo.la'])

    def testTargetDirectoryIsCarried(self):
        with fakeToolchain() as toolchain:
            install('install -t /dest libfoo.la')
        self.assertEqual(toolchain.commands, [
            ['cp', '-P', '-R', '-t', '/dest', './.libs/libfoo.so.0.0.0'],
            ['cp', '-P', '-R', '-t', '/dest', './.libs/libfoo.so.0'],
            ['cp', '-P', '-R', '-t', '/dest', './.libs/libfoo.so'],
            ['cp', '-P', '-R', '-t', '/dest', './.libs/libfoo.a'],
        ])
        with fakeToolchain() as toolchain:
            install('install --target-directory=/dest -S .bak libfoo.la')
        self.assertEqual(toolchain.commands[-1], ['cp', '-P', '-R', '-t', '/dest', './.libs/libfoo.a'])

    def testLibraryInSubdirectory(self):
        os.mkdir('sub')
        LibraryDescriptor(oldLibrary='libbar.a').write('sub/libbar.la')
        with fakeToolchain() as toolchain:
            install('install sub/libbar.la /dest')
        self.assertEqual(toolchain.commands, [['cp', '-P', '-R', 'sub/.libs/libbar.a', '/dest']])

    def testProgramFromLibsDir(self):
        os.mkdir('.libs')
        touch('.libs/prog')
        touch('prog')
        with fakeToolchain() as toolchain:
            install('install -c prog /dest/bin/prog')
        self.assertEqual(toolchain.commands, [['install', '-c', './.libs/prog', '/dest/bin/prog']])

    def testPlainFile(self):
        touch('data.txt')
        with fakeToolchain() as toolchain:
            install('install -c data.txt /dest/share')
        self.assertEqual(toolchain.commands, [['install', '-c', 'data.txt', '/dest/share']])

    def testNoSource(self):
        with fakeToolchain() as toolchain:
            install('install -d')
        self.assertEqual(toolchain.commands, [['install', '-d']])

    def testDryRun(self):
        with fakeToolchain() as toolchain, capturedStderr() as stderr:
            install('install libfoo.la /dest', dryRun=True, quiet=False)
        self.assertEqual(toolchain.commands, [])
        self.assertEqual(stderr.getvalue().splitlines()[0], 'fastlibtool: cp -P -R ./.libs/libfoo.so.0.0.0 /dest')


if __name__ == '__main__':
    unittest.main()
