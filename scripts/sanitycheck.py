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
import sys

from commandwrapper import *

# expands to SANE_TOKEN only when the *target* is one of the platforms we handle
SANITY_CHECK = ('#if ' + ' || '.join(SANE_PLATFORM_MACROS) + '\n' +
                SANE_TOKEN + '\n' +
                '#endif\n')


def isPlatformSane(compiler):
    """Ask the target preprocessor whether we know how to build for it."""
    try:
        proc = subprocess.run([compiler, '-E', '-'], input=SANITY_CHECK, stdout=subprocess.PIPE,
                              universal_newlines=True)
    except (FileNotFoundError, PermissionError):
        # the compiler could not be started at all, let libtool deal with it
        return False
    except OSError as e:
        # fork/pipe failures mean we cannot run anything ourselves
        sys.exit(errorMsg('fastlibtool: ' + str(e)))
    if proc.returncode != 0:
        return False
    return any(line.startswith(SANE_TOKEN) for line in proc.stdout.splitlines())


def isDescriptorSane(path):
    """
    Return True/False for a readable .lo/.la file depending on its first
    line, None if the file cannot be opened.
    """
    try:
        # no newline translation, the marker must match byte for byte
        with open(path, 'r', errors='replace', newline='') as f:
            firstLine = f.readline()
    except OSError:
        return None
    return firstLine == SANE_HEADER


def isArtifactSane(command, compiler=None):
    """
    Link mode check: trust the first readable .lo/.la on the command line.
    Without any, fall back to probing the compiler.
    """
    foundDescriptor = False
    for arg in command[1:]:
        if arg.startswith('-'):
            continue
        if not (hasExtension(arg, OBJECT_EXT) or hasExtension(arg, LIBRARY_EXT)):
            continue
        foundDescriptor = True
        sane = isDescriptorSane(arg)
        if sane is not None:
            return sane

    if not foundDescriptor and compiler:
        return isPlatformSane(compiler)
    return False
