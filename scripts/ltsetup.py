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
import shlex

FASTLIBTOOL_VERSION = '0.2'
PACKAGE = 'libtool (fastlibtool) ' + FASTLIBTOOL_VERSION

ENVVAR_DELEGATE = 'FASTLIBTOOL_DELEGATE'
ENVVAR_AR = 'FASTLIBTOOL_AR'
ENVVAR_RANLIB = 'FASTLIBTOOL_RANLIB'
ENVVAR_CP = 'FASTLIBTOOL_CP'

# libtool keeps the real build products here, next to the descriptor files
LIBS_DIR = '.libs'
OBJECT_EXT = '.lo'
LIBRARY_EXT = '.la'
PIC_SUFFIX = '.sh.o'
NON_PIC_SUFFIX = '.st.o'

# every .lo/.la we write starts with this line, anything else is foreign
SANE_HEADER = '# SYSTEM_IS_SANE\n'
PACKAGE_HEADER = '# Generated by ' + PACKAGE + '\n'
SANE_TOKEN = 'SYSTEM_IS_SANE'

# target platforms (not build platforms) we know how to handle
SANE_PLATFORM_MACROS = (
    '__linux__',
    '__FreeBSD_kernel__', '__FreeBSD__', '__NetBSD__', '__OpenBSD__', '__DragonFly__',
    '__GNU__',  # Hurd
)


def archiverCommand():
    return os.getenv(ENVVAR_AR, 'ar')


def ranlibCommand():
    return os.getenv(ENVVAR_RANLIB, 'ranlib')


def copyCommand():
    return os.getenv(ENVVAR_CP, 'cp')


def delegationForced():
    return bool(os.getenv(ENVVAR_DELEGATE))


def quoteCommand(command: list):
    newList = [shlex.quote(s) for s in command]
    return " ".join(newList)


def libsPath(directory, name):
    # os.path.join would drop the '.' of dirname('foo.lo'), libtool keeps it
    return directory + '/' + LIBS_DIR + '/' + name


def splitDescriptorName(path):
    # 'sub/libfoo.la' -> ('sub', 'libfoo')
    directory = os.path.dirname(path) or '.'
    base = os.path.basename(path)
    root, ext = os.path.splitext(base)
    if ext:
        base = root
    return directory, base


def hasExtension(path, ext):
    return os.path.splitext(path)[1] == ext
