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

import subprocess
import unittest
from unittest import mock

from faketoolchain import *

import sanitycheck
from lafile import writeObjectDescriptor
from sanitycheck import isArtifactSane, isDescriptorSane, isPlatformSane


def preprocessorResult(stdout, returncode=0):
    return subprocess.CompletedProcess(['cc', '-E', '-'], returncode, stdout=stdout)


class TestPlatformSanity(unittest.TestCase):

    def testSnippet(self):
        self.assertTrue(sanitycheck.SANITY_CHECK.startswith('#if __linux__ || '))
        self.assertIn('\nSYSTEM_IS_SANE\n#endif', sanitycheck.SANITY_CHECK)

    def testSane(self):
        output = '# 1 "<stdin>"\n\nSYSTEM_IS_SANE\n'
        with mock.patch('subprocess.run', return_value=preprocessorResult(output)) as run:
            self.assertTrue(isPlatformSane('cc'))
        self.assertEqual(run.call_args[0][0], ['cc', '-E', '-'])
        self.assertEqual(run.call_args[1]['input'], sanitycheck.SANITY_CHECK)

    def testInsane(self):
        with mock.patch('subprocess.run', return_value=preprocessorResult('# 1 "<stdin>"\n\n')):
            self.assertFalse(isPlatformSane('cc'))
        # the token alone is not enough if the preprocessor failed
        with mock.patch('subprocess.run', return_value=preprocessorResult('SYSTEM_IS_SANE\n', 1)):
            self.assertFalse(isPlatformSane('cc'))

    def testMissingCompiler(self):
        self.assertFalse(isPlatformSane('/nonexistent/fastlibtool-test-cc'))


class TestArtifactSanity(TempDirMixin, unittest.TestCase):

    def testDescriptor(self):
        writeObjectDescriptor('foo.lo', 'foo')
        touch('bar.lo', "# bar.lo - a libtool object file\npic_object='.libs/bar.o'\n")
        self.assertTrue(isDescriptorSane('foo.lo'))
        self.assertFalse(isDescriptorSane('bar.lo'))
        self.assertIsNone(isDescriptorSane('missing.lo'))

    def testMarkerLineEndingsMustMatch(self):
        with open('crlf.lo', 'wb') as f:
            f.write(b"# SYSTEM_IS_SANE\r\npic_object='.libs/crlf.sh.o'\r\n")
        with open('cr.lo', 'wb') as f:
            f.write(b"# SYSTEM_IS_SANE\rpic_object='.libs/cr.sh.o'\r")
        self.assertFalse(isDescriptorSane('crlf.lo'))
        self.assertFalse(isDescriptorSane('cr.lo'))
        self.assertFalse(isArtifactSane('cc -o prog crlf.lo'.split()))

    def testFirstReadableDescriptorDecides(self):
        writeObjectDescriptor('foo.lo', 'foo')
        touch('bar.lo', '# SYSTEM_IS_SANE but not quite\n')
        self.assertTrue(isArtifactSane('cc -o libfoo.la missing.lo foo.lo bar.lo'.split()))
        self.assertFalse(isArtifactSane('cc -o libfoo.la bar.lo foo.lo'.split()))

    def testUnreadableDescriptorsAreInsane(self):
        with mock.patch('sanitycheck.isPlatformSane', return_value=True) as probe:
            self.assertFalse(isArtifactSane('cc -o prog missing.lo'.split(), 'cc'))
        probe.assert_not_called()

    def testFallbackToCompiler(self):
        with mock.patch('sanitycheck.isPlatformSane', return_value=True) as probe:
            self.assertTrue(isArtifactSane('cc -o prog main.o -lm'.split(), 'cc'))
        probe.assert_called_once_with('cc')
        self.assertFalse(isArtifactSane('cc -o prog main.o'.split()))


if __name__ == '__main__':
    unittest.main()
