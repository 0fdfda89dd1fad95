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

from commandwrapper import DependencyCycleError
from lafile import LibraryDescriptor
from ltsetup import *

WHOLE_ARCHIVE = '-Wl,--whole-archive'
NO_WHOLE_ARCHIVE = '-Wl,--no-whole-archive'


class LinkAccumulator:
    """What expanding the .la inputs of one link contributes to it."""

    def __init__(self):
        # linker arguments, in the order the linker has to see them
        self.command = []
        # direct dependencies, written to dependency_libs of the library being built
        self.dependencyLibs = []
        # set once a --whole-archive bracket was emitted (GNU ld only)
        self.wholeArchive = False


def libraryLinkName(base):
    # libfoo -> foo for -lfoo
    if base.startswith('lib'):
        return base[len('lib'):]
    return base


def resolveLibrary(laPath, buildingLibrary, accumulator, recordDependency=True):
    """
    Turn a .la file named on the link command line into linker flags.

    Libraries that have no shared object (yet) are pulled in completely when
    we are building a library ourselves. Whether the .so exists is decided
    now, so a dependency that only gets its .so later in the build is still
    treated as archive-only.

    Dependencies listed in the .la are expanded into flags as well but only
    the top-level call records anything in accumulator.dependencyLibs.
    """
    _resolve(laPath, buildingLibrary, accumulator, recordDependency, [])


def _resolve(laPath, buildingLibrary, accumulator, recordDependency, expanding):
    key = os.path.realpath(laPath)
    if key in expanding:
        chain = expanding[expanding.index(key):] + [key]
        raise DependencyCycleError('libtool libraries depend on each other: ' + ' -> '.join(chain))

    directory, base = splitDescriptorName(laPath)
    accumulator.command.append('-L' + directory + '/' + LIBS_DIR)

    wholeArchive = buildingLibrary and not os.path.exists(libsPath(directory, base + '.so'))
    if wholeArchive:
        accumulator.wholeArchive = True
        accumulator.command.append(WHOLE_ARCHIVE)
    elif recordDependency:
        if os.path.exists(laPath):
            accumulator.dependencyLibs.append(os.path.realpath(laPath))
        else:
            accumulator.dependencyLibs.append(laPath)

    accumulator.command.append('-l' + libraryLinkName(base))
    if wholeArchive:
        accumulator.command.append(NO_WHOLE_ARCHIVE)

    try:
        descriptor = LibraryDescriptor.read(laPath)
    except OSError:
        return  # nothing more we can learn about it, the linker will complain if needed

    expanding.append(key)
    try:
        for token in descriptor.dependencyLibs:
            if hasExtension(token, LIBRARY_EXT):
                _resolve(token, buildingLibrary, accumulator, False, expanding)
            else:
                accumulator.command.append(token)
    finally:
        expanding.pop()
