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

import re

from ltsetup import *

# sscanf("%d:%d:%d") compatible: whatever parses before the first bad character is kept
_VERSION_INFO_RE = re.compile(r'\s*([+-]?\d+)(?::\s*([+-]?\d+)(?::\s*([+-]?\d+))?)?')


class VersionInfo:
    """
    libtool's current:revision:age triple.

    Consumers resolve a library by its soname, which only carries
    major = current - age. The file itself is named
    <lib>.so.<major>.<age>.<revision>.
    """

    def __init__(self, current=0, revision=0, age=0):
        if age > current:
            age = current
        self.current = current
        self.revision = revision
        self.age = age

    @classmethod
    def parse(cls, text: str):
        match = _VERSION_INFO_RE.match(text)
        if not match:
            return cls()
        current, revision, age = (int(x) if x is not None else 0 for x in match.groups())
        return cls(current, revision, age)

    @property
    def major(self):
        return self.current - self.age

    def __eq__(self, other):
        if not isinstance(other, VersionInfo):
            return NotImplemented
        return (self.current, self.revision, self.age) == (other.current, other.revision, other.age)

    def __repr__(self):
        return 'VersionInfo(%d:%d:%d)' % (self.current, self.revision, self.age)


class SharedLibraryNames:
    def __init__(self, soname, longname=None, linkname=None):
        self.soname = soname
        self.longname = longname
        self.linkname = linkname

    @classmethod
    def compute(cls, base, version, avoidVersion=False):
        if avoidVersion:
            return cls(base + '.so')
        return cls(soname='%s.so.%d' % (base, version.major),
                   longname='%s.so.%d.%d.%d' % (base, version.major, version.age, version.revision),
                   linkname=base + '.so')

    @property
    def versioned(self):
        return self.longname is not None

    def libraryNames(self):
        # order matters: libtool installs and links against them in this order
        if self.versioned:
            return [self.longname, self.soname, self.linkname]
        return [self.soname]


def _quoted(value):
    return "'" + value + "'"


def readDescriptorFields(path):
    """Parse the key=value lines of a .lo/.la file. Raises OSError."""
    fields = {}
    with open(path, 'r', errors='replace') as f:
        for line in f:
            line = line.rstrip('\n')
            if not line or line.startswith('#'):
                continue
            key, sep, value = line.partition('=')
            if not sep:
                continue
            if value.startswith("'"):
                value = value[1:]
                end = value.rfind("'")
                if end >= 0:
                    value = value[:end]
            fields[key.strip()] = value
    return fields


def writeObjectDescriptor(path, base):
    with open(path, 'w') as f:
        f.write(SANE_HEADER)
        f.write(PACKAGE_HEADER)
        f.write('pic_object=' + _quoted(LIBS_DIR + '/' + base + PIC_SUFFIX) + '\n')
        f.write('non_pic_object=' + _quoted(LIBS_DIR + '/' + base + NON_PIC_SUFFIX) + '\n')


def _toInt(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class LibraryDescriptor:
    def __init__(self, dlname='', libraryNames=None, oldLibrary='', dependencyLibs=None,
                 version=None, shouldNotLink=False, libdir=''):
        self.dlname = dlname
        self.libraryNames = list(libraryNames or [])
        self.oldLibrary = oldLibrary
        self.dependencyLibs = list(dependencyLibs or [])
        self.version = version or VersionInfo()
        self.shouldNotLink = shouldNotLink
        self.libdir = libdir

    @classmethod
    def read(cls, path):
        fields = readDescriptorFields(path)
        version = VersionInfo(_toInt(fields.get('current')),
                              _toInt(fields.get('revision')),
                              _toInt(fields.get('age')))
        return cls(dlname=fields.get('dlname', ''),
                   libraryNames=fields.get('library_names', '').split(),
                   oldLibrary=fields.get('old_library', ''),
                   dependencyLibs=fields.get('dependency_libs', '').split(),
                   version=version,
                   shouldNotLink=fields.get('shouldnotlink') == 'yes',
                   libdir=fields.get('libdir', ''))

    def artifactNames(self):
        """Every file below .libs/ that installing this library has to copy."""
        names = list(self.libraryNames)
        names.extend(self.oldLibrary.split())
        return names

    def format(self):
        lines = [
            SANE_HEADER + PACKAGE_HEADER.rstrip('\n'),
            'dlname=' + _quoted(self.dlname),
            'library_names=' + _quoted(' '.join(self.libraryNames)),
            'old_library=' + _quoted(self.oldLibrary),
            "inherited_linker_flags=''",
            'dependency_libs=' + _quoted(' '.join(self.dependencyLibs)),
            # major + age rather than the raw value so a clamped age round-trips
            'current=%d' % (self.version.major + self.version.age),
            'age=%d' % self.version.age,
            'revision=%d' % self.version.revision,
            'installed=no',
            'shouldnotlink=' + ('yes' if self.shouldNotLink else 'no'),
            "dlopen=''",
            "dlpreopen=''",
            'libdir=' + _quoted(self.libdir),
        ]
        return '\n'.join(lines) + '\n'

    def write(self, path):
        with open(path, 'w') as f:
            f.write(self.format())
