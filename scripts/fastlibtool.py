#!/usr/bin/env python3

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

import sys

from commandwrapper import *
from compilerwrapper import CompilerWrapper
from installwrapper import InstallWrapper
from linkerwrapper import LinkerWrapper, IGNORED_LINK_FLAGS, UNSUPPORTED_LINK_FLAGS
from sanitycheck import isArtifactSane, isPlatformSane

WRAPPERS = {
    Mode.compile: CompilerWrapper,
    Mode.link: LinkerWrapper,
    Mode.install: InstallWrapper,
}

USAGE = """\
Use: fastlibtool <target-libtool> [options] --mode=<mode> <command>
Options:
\t-n|--dry-run: display commands without modifying any files
\t--quiet|--silent: don't print the commands being run
\t--mode=<mode>: user operation mode <mode>

<mode> must be one of the following:
\tcompile: compile a source file into a libtool object
\tinstall: install libraries or executables
\tlink: create a library or an executable
"""

MODE_USAGE = {
    Mode.compile: """\
\t-o <name>: set the output file name to <name>
\t-prefer-pic|-shared: build only a PIC file
\t-prefer-non-pic|-static: build only a non-PIC file
\t-Wc,<flag>: pass flag directly to cc
""",
    Mode.link: """\
\t-o <name>: set the output file name to <name>
\t-all-static: create a static binary/library
\t-avoid-version: avoid adding version info to library names
\t-export-dynamic: cc -rdynamic
\t-L<dir>: search both <dir> and <dir>/.libs
\t-module: build a module suitable for dlopen
\t-rpath <dir>: build a shared library to be installed to <dir>
\t              (note: this flag is REQUIRED to build a shared
\t               library, but does NOT set an RPATH in the
\t               resultant library)
\t-version-info <current>:<rev>:<age>: set version info
\t-Wc,<flag>|-Xcompiler <flag>|-XCClinker <flag>: pass <flag> to cc

Mode options ignored for GNU libtool compatibility:
\t-bindir <dir>, """ + ', '.join(sorted(IGNORED_LINK_FLAGS)) + """

Unsupported mode options (handed to <target-libtool>):
\t""" + ', '.join(sorted(UNSUPPORTED_LINK_FLAGS)) + '\n',
    Mode.install: '\t(none)\n',
}

USAGE_FOOTER = """
fastlibtool is a mini version of libtool for sensible systems. If you're
compiling for Linux or BSD with supported invocation commands,
<target-libtool> will never be called.

Unrecognized invocations will be redirected to <target-libtool>."""


def usage(mode=Mode.unknown, file=None):
    if file is None:
        file = sys.stdout
    print(USAGE, file=file)
    if mode in MODE_USAGE:
        print('Recognized mode options:', file=file)
        print(MODE_USAGE[mode], file=file)
    print(USAGE_FOOTER, file=file)


def parseInvocation(argv):
    """
    Parse the global libtool options in argv (our own name already removed).

    Returns the invocation and whether an option we don't know was seen, in
    which case only the real libtool can be trusted with it.
    """
    if not argv or argv[0].startswith('-'):
        raise UsageError('the first argument has to be the real libtool')

    # the real libtool may come with arguments of its own
    index = 0
    while index < len(argv) and not argv[index].startswith('-'):
        index += 1

    dryRun = False
    quiet = False
    insane = False
    modeName = None
    while index < len(argv):
        arg = argv[index]
        index += 1
        if arg in ('-n', '--dry-run'):
            dryRun = True
        elif arg in ('--quiet', '--silent'):
            quiet = True
        elif arg in ('--no-quiet', '--no-silent'):
            quiet = False
        elif arg == '--version':
            print(PACKAGE)
            sys.exit(0)
        elif arg in ('-h', '--help'):
            usage()
            sys.exit(0)
        elif arg.startswith('--mode=') and index < len(argv):
            modeName = arg[len('--mode='):]
            break
        elif arg.startswith('--tag=') or arg in ('-v', '--verbose', '--no-verbose'):
            continue  # ignored for compatibility
        else:
            insane = True

    if modeName is None:
        raise UsageError('no --mode given')

    invocation = Invocation(argv, Mode.fromName(modeName), argv[index:], dryRun=dryRun, quiet=quiet)
    if invocation.command[0] in ('-h', '--help'):
        usage(invocation.mode)
        sys.exit(0)
    return invocation, insane


def isSane(invocation):
    if invocation.mode == Mode.compile:
        return isPlatformSane(invocation.command[0])
    elif invocation.mode == Mode.link:
        return isArtifactSane(invocation.command, invocation.command[0])
    elif invocation.mode == Mode.install:
        return True  # copying files works the same everywhere
    return False


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    try:
        invocation, insane = parseInvocation(argv)
    except UsageError as e:
        usage(file=sys.stderr)
        sys.exit(errorMsg('fastlibtool: error: ' + e.msg))

    if insane or delegationForced() or not isSane(invocation):
        execLibtool(invocation)

    wrapper = WRAPPERS[invocation.mode](invocation)
    try:
        wrapper.run()
    except UnsupportedInvocation as e:
        execLibtool(invocation, str(e))
    except UsageError as e:
        sys.exit(errorMsg('fastlibtool: error: ' + e.msg))
    except FastLibtoolError as e:
        sys.exit(errorMsg('fastlibtool: error: ' + str(e)))
    except OSError as e:
        sys.exit(errorMsg('fastlibtool: ' + str(e)))
    return 0


if __name__ == '__main__':
    sys.exit(main())
