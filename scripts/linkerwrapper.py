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
from lafile import LibraryDescriptor, SharedLibraryNames, VersionInfo
from laresolver import LinkAccumulator, resolveLibrary

# libtool features we leave to the real thing
UNSUPPORTED_LINK_FLAGS = frozenset([
    '-dlopen',
    '-dlpreopen',
    '-export-symbols',
    '-export-symbols-regex',
    '-objectlist',
    '-precious-files-regex',
    '-release',
    '-shared',
    '-shrext',
    '-static',
    '-static-libtool-libs',
    '-weak',
])

# accepted (and dropped) for libtool compatibility
IGNORED_LINK_FLAGS = frozenset([
    '-no-fast-install',
    '-no-install',
    '-no-undefined',
])

# link flags whose value is a separate argument
LINK_PARAMS_WITH_ARGUMENT = frozenset(['-o', '-rpath', '-version-info', '-Xcompiler', '-XCClinker', '-bindir'])


def findOutput(command):
    for index, param in enumerate(command[1:], start=1):
        if param == '-o' and index + 1 < len(command):
            return command[index + 1]
    return None


def findUnsupportedFlag(command):
    skipNextParam = False
    for param in command[1:]:
        if skipNextParam:
            skipNextParam = False
        elif param in UNSUPPORTED_LINK_FLAGS:
            return param
        elif param in LINK_PARAMS_WITH_ARGUMENT:
            skipNextParam = True
    return None


class LinkerWrapper(CommandWrapper):

    def __init__(self, invocation):
        super().__init__(invocation)
        self.link = LinkAccumulator()
        self.archiveMembers = []
        self.output = None
        self.outputPos = None
        self.rpath = None
        self.version = VersionInfo()
        self.avoidVersion = False
        self.module = False
        self.buildBinary = False
        self.buildLib = False

    @property
    def linkCommand(self):
        return self.link.command

    @property
    def buildShared(self):
        # -rpath is what tells us the library is going to be installed as a .so
        return self.buildLib and self.rpath is not None

    def parseCommandLine(self):
        command = self.invocation.command
        # before any .la is resolved
        unsupported = findUnsupportedFlag(command)
        if unsupported is not None:
            raise UnsupportedInvocation('unsupported link flag ' + unsupported)
        # we need to know this up front to pick .sh.o or .st.o for every .lo
        self.output = findOutput(command)
        self.buildLib = self.output is not None and hasExtension(self.output, LIBRARY_EXT)
        self.buildBinary = not self.buildLib

        self.linkCommand.extend([command[0], '-L' + LIBS_DIR])
        skipNextParam = False
        for index, param in enumerate(command):
            if index == 0 or skipNextParam:
                skipNextParam = False
                continue
            hasNext = index + 1 < len(command)
            nextParam = command[index + 1] if hasNext else None

            if not param.startswith('-'):
                self.addInput(param)
            elif param == '-all-static':
                self.linkCommand.append('-static')
            elif param == '-avoid-version':
                self.avoidVersion = True
            elif param == '-export-dynamic':
                self.linkCommand.append('-rdynamic')
            elif param.startswith('-L'):
                # search both the directory itself and the uninstalled libraries in it
                for flag in (param, param + '/' + LIBS_DIR):
                    self.linkCommand.append(flag)
                    self.link.dependencyLibs.append(flag)
            elif param.startswith('-l'):
                self.linkCommand.append(param)
                self.link.dependencyLibs.append(param)
            elif param == '-module':
                self.module = True
            elif param == '-o' and hasNext:
                skipNextParam = True
                self.linkCommand.append(param)
                self.outputPos = len(self.linkCommand)
                self.linkCommand.append(nextParam)
            elif param == '-rpath' and hasNext:
                skipNextParam = True
                self.rpath = nextParam
            elif param == '-version-info' and hasNext:
                skipNextParam = True
                self.version = VersionInfo.parse(nextParam)
            elif param.startswith('-Wc,'):
                self.linkCommand.append(param[len('-Wc,'):])
            elif param in ('-Xcompiler', '-XCClinker') and hasNext:
                skipNextParam = True
                self.linkCommand.append(nextParam)
            elif param == '-bindir' and hasNext:
                skipNextParam = True
            elif param in IGNORED_LINK_FLAGS:
                continue
            else:
                self.linkCommand.append(param)

        if self.link.wholeArchive:
            # --whole-archive is GNU ld specific, let libtool try if the link fails
            self.invocation.retryIfFail = True

        if self.output is None:
            self.output = 'a.out'
            self.linkCommand.append('-o')
            self.outputPos = len(self.linkCommand)
            self.linkCommand.append(self.output)

        self.outputDir, self.outputBase = splitDescriptorName(self.output)

    def addInput(self, param):
        if hasExtension(param, OBJECT_EXT):
            # use the flavor that was built for what we are producing
            directory, base = splitDescriptorName(param)
            suffix = NON_PIC_SUFFIX if self.buildBinary else PIC_SUFFIX
            objectFile = libsPath(directory, base + suffix)
            self.archiveMembers.append(objectFile)
            self.linkCommand.append(objectFile)
        elif hasExtension(param, LIBRARY_EXT):
            resolveLibrary(param, self.buildLib, self.link)
        else:
            self.archiveMembers.append(param)
            self.linkCommand.append(param)

    def run(self):
        self.parseCommandLine()
        self.makeLibsDir(self.outputDir)

        if self.buildBinary:
            self.runCommand(self.linkCommand)
            return

        archiveName = self.outputBase + '.a'
        self.buildArchive(libsPath(self.outputDir, archiveName))

        names = None
        if self.buildShared:
            names = SharedLibraryNames.compute(self.outputBase, self.version, self.avoidVersion)
            self.buildSharedLibrary(names)

        if not self.dryRun:
            self.libraryDescriptor(archiveName, names).write(self.output)

    def buildArchive(self, archivePath):
        self.runCommand([archiverCommand(), 'rc', archivePath] + self.archiveMembers)
        self.runCommand([ranlibCommand(), archivePath])

    def buildSharedLibrary(self, names):
        soPath = libsPath(self.outputDir, names.soname)
        longPath = libsPath(self.outputDir, names.longname) if names.versioned else None
        linkPath = libsPath(self.outputDir, names.linkname) if names.versioned else None

        if not self.dryRun:
            for stale in (soPath, longPath, linkPath):
                if stale is None:
                    continue
                try:
                    os.unlink(stale)
                except FileNotFoundError:
                    pass

        # linking straight to the soname saves us -Wl,-soname
        command = list(self.linkCommand)
        command.append('-shared')
        command[self.outputPos] = soPath
        self.runCommand(command)

        if names.versioned and not self.dryRun:
            os.rename(soPath, longPath)
            os.symlink(names.longname, soPath)
            os.symlink(names.longname, linkPath)

    def libraryDescriptor(self, archiveName, names=None):
        descriptor = LibraryDescriptor(oldLibrary=archiveName,
                                       dependencyLibs=self.link.dependencyLibs,
                                       version=self.version,
                                       shouldNotLink=self.module,
                                       libdir=self.rpath or '')
        if names is not None:
            descriptor.dlname = names.soname
            descriptor.libraryNames = names.libraryNames()
        return descriptor
