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

from commandwrapper import *
from lafile import LibraryDescriptor

# install(1) options whose value must not be mistaken for the source file
INSTALL_PARAMS_WITH_ARGUMENT = frozenset(['-m', '-o', '-g', '-t', '-S'])


class InstallWrapper(CommandWrapper):
    def __init__(self, invocation):
        super().__init__(invocation)
        self.sourcePos = None
        self.targetDirectory = None

    def findSource(self):
        command = self.invocation.command
        index = 1
        while index < len(command) and command[index].startswith('-'):
            param = command[index]
            if param in INSTALL_PARAMS_WITH_ARGUMENT:
                if param == '-t' and index + 1 < len(command):
                    self.targetDirectory = command[index + 1]
                index += 1
            elif param.startswith('--target-directory='):
                self.targetDirectory = param[len('--target-directory='):]
            elif param.startswith('-t') and not param.startswith('--'):
                self.targetDirectory = param[2:]
            index += 1
        if index < len(command):
            return index
        return None

    def run(self):
        command = list(self.invocation.command)
        self.sourcePos = self.findSource()
        if self.sourcePos is None:
            # doesn't look like anything we understand, just run it
            self.runCommand(command)
            return

        source = command[self.sourcePos]
        if hasExtension(source, LIBRARY_EXT):
            self.installLibrary(source, command)
            return

        # installing a program or object that libtool keeps below .libs/
        directory = os.path.dirname(source) or '.'
        built = libsPath(directory, os.path.basename(source))
        if os.path.exists(built):
            command[self.sourcePos] = built
        self.runCommand(command)

    def copyCommands(self, laFile, command):
        """One copy per file the .la stands for; the .la itself is not installed."""
        directory = os.path.dirname(laFile) or '.'
        descriptor = LibraryDescriptor.read(laFile)
        # install(1) would dereference the .so symlinks
        template = [copyCommand(), '-P', '-R']
        if self.targetDirectory is not None:
            template += ['-t', self.targetDirectory]
        placeholder = len(template)
        template += [None] + command[self.sourcePos + 1:]
        commands = []
        for name in descriptor.artifactNames():
            copy = list(template)
            copy[placeholder] = libsPath(directory, name)
            commands.append(copy)
        return commands

    def installLibrary(self, laFile, command):
        for copy in self.copyCommands(laFile, command):
            self.runCommand(copy)
