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
from lafile import writeObjectDescriptor


class CompilerWrapper(CommandWrapper):
    def __init__(self, invocation):
        super().__init__(invocation)
        self.compileCommand = []
        self.outputPos = None
        self.output = None
        self.input = None
        self.buildPic = True
        self.buildNonPic = True

    def parseCommandLine(self):
        command = self.invocation.command
        self.compileCommand = [command[0]]
        preferPic = False
        preferNonPic = False
        skipNext = False
        for index, param in enumerate(command):
            if index == 0 or skipNext:
                skipNext = False
                continue
            if param.startswith('-'):
                if param == '-o' and index + 1 < len(command):
                    skipNext = True
                    self.output = command[index + 1]
                    self.compileCommand.append(param)
                    self.outputPos = len(self.compileCommand)
                    self.compileCommand.append(self.output)
                elif param in ('-prefer-pic', '-shared'):
                    preferPic = True
                elif param in ('-prefer-non-pic', '-static'):
                    preferNonPic = True
                elif param.startswith('-Wc,'):
                    self.compileCommand.append(param[len('-Wc,'):])
                elif param == '-no-suppress':
                    continue  # accepted for libtool compatibility
                else:
                    self.compileCommand.append(param)
            else:
                # the last one is what we name the object after
                self.input = param
                self.compileCommand.append(param)

        if not self.input:
            raise UsageError('--mode=compile with no input file', command)

        # asking for both is the same as asking for neither
        if preferPic and preferNonPic:
            preferPic = preferNonPic = False
        self.buildPic = preferPic or not preferNonPic
        self.buildNonPic = preferNonPic or not preferPic

        if self.output is None:
            root, ext = os.path.splitext(self.input)  # src/foo.c -> ('src/foo', '.c')
            self.output = root + OBJECT_EXT
            self.compileCommand.append('-o')
            self.outputPos = len(self.compileCommand)
            self.compileCommand.append(self.output)
        else:
            ext = os.path.splitext(self.output)[1]
            if not ext:
                raise UsageError('--mode=compile used to compile an executable', command)
            if ext != OBJECT_EXT:
                raise UsageError('--mode=compile used to compile something other than a ' + OBJECT_EXT + ' file',
                                 command)

        self.outputDir, self.outputBase = splitDescriptorName(self.output)
        self.picFile = libsPath(self.outputDir, self.outputBase + PIC_SUFFIX)
        self.nonPicFile = libsPath(self.outputDir, self.outputBase + NON_PIC_SUFFIX)

    def flavorCommand(self, objectFile, extraFlags=()):
        command = list(self.compileCommand)
        command.extend(extraFlags)
        command[self.outputPos] = objectFile
        return command

    def linkFlavor(self, builtFile, otherFile):
        # whoever consumes the .lo later may ask for either flavor
        if self.dryRun:
            return
        try:
            os.unlink(otherFile)
        except FileNotFoundError:
            pass
        os.link(builtFile, otherFile)

    def run(self):
        self.parseCommandLine()
        self.makeLibsDir(self.outputDir)

        if self.buildNonPic:
            self.runCommand(self.flavorCommand(self.nonPicFile))
            if not self.buildPic:
                self.linkFlavor(self.nonPicFile, self.picFile)

        if self.buildPic:
            self.runCommand(self.flavorCommand(self.picFile, ('-fPIC', '-DPIC')))
            if not self.buildNonPic:
                self.linkFlavor(self.picFile, self.nonPicFile)

        if not self.dryRun:
            writeObjectDescriptor(self.output, self.outputBase)
