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
import sys
import subprocess
from enum import Enum

from termcolor import colored

from ltsetup import *


def _stderrIsTty():
    try:
        return sys.stderr.isatty()
    except ValueError:  # closed stream
        return False


def errorMsg(msg):
    if not _stderrIsTty():
        return msg
    return colored(msg, 'red', attrs=['bold'])


def infoMsg(msg):
    if not _stderrIsTty():
        return msg
    return colored(msg, 'magenta', attrs=[])


def warningMsg(msg):
    if not _stderrIsTty():
        return msg
    return colored(msg, 'yellow', attrs=['bold'])


def highlightForMode(mode, msg):
    if not _stderrIsTty():
        return msg
    if mode == Mode.compile:
        return colored(msg, 'blue', attrs=['bold'])
    elif mode == Mode.link:
        return colored(msg, 'green', attrs=['bold'])
    elif mode == Mode.install:
        return colored(msg, 'cyan', attrs=['bold'])
    else:
        return infoMsg(msg)


def diagnostic(msg):
    print(msg, file=sys.stderr)


class Mode(Enum):
    unknown = 0  # always handed to the real libtool
    compile = 1
    link = 2
    install = 3

    @classmethod
    def fromName(cls, name):
        return cls.__members__.get(name, cls.unknown)


class FastLibtoolError(RuntimeError):
    def __init__(self, msg, args=None):
        super().__init__(msg)
        self.msg = msg
        self.command = list(args or [])

    def __str__(self):
        if self.command:
            return self.msg + ". Caused by: " + quoteCommand(self.command)
        return self.msg


class UsageError(FastLibtoolError):
    pass


class DependencyCycleError(FastLibtoolError):
    pass


class UnsupportedInvocation(Exception):
    """The fast path cannot handle this invocation, the real libtool has to."""


class Invocation:
    """
    One fastlibtool call.

    argv is everything after our own name, so argv[0] is the real libtool and
    running argv unchanged is always a valid fallback. command is the part
    after --mode=..., command[0] being the compiler or install program.
    """

    def __init__(self, argv, mode=Mode.unknown, command=(), dryRun=False, quiet=False):
        self.argv = tuple(argv)
        self.mode = mode
        self.command = tuple(command)
        self.dryRun = dryRun
        self.quiet = quiet
        # armed when we emit something that only some toolchains understand
        self.retryIfFail = False

    @property
    def libtool(self):
        return self.argv[0]


def execLibtool(invocation, reason=None):
    """Replace this process with the real libtool. Never returns."""
    if not invocation.quiet:
        msg = 'fastlibtool: unsupported configuration, trying libtool (' + invocation.libtool + ')'
        if reason:
            msg += ': ' + reason
        diagnostic(warningMsg(msg))
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        os.execvp(invocation.libtool, list(invocation.argv))
    except OSError as e:
        sys.exit(errorMsg(invocation.libtool + ': ' + (e.strerror or str(e))))
    sys.exit(1)  # not reached


def spawn(invocation, command):
    """
    Run command to completion. A failing command either hands the whole
    invocation to the real libtool (if retryIfFail is armed) or ends the
    program with exit status 1.
    """
    command = list(command)
    if not invocation.quiet:
        diagnostic(highlightForMode(invocation.mode, 'fastlibtool: ' + quoteCommand(command)))
    if invocation.dryRun:
        return

    try:
        subprocess.check_call(command)
    except (OSError, subprocess.SubprocessError) as e:
        if isinstance(e, subprocess.CalledProcessError):
            reason = command[0] + ' exited with status ' + str(e.returncode)
        else:
            reason = command[0] + ': ' + str(e)
        if invocation.retryIfFail:
            execLibtool(invocation, reason)
        sys.exit(errorMsg('fastlibtool: ' + reason))


class CommandWrapper:
    def __init__(self, invocation):
        self.invocation = invocation
        self.mode = invocation.mode

    @property
    def dryRun(self):
        return self.invocation.dryRun

    def run(self):
        raise NotImplementedError

    def runCommand(self, command):
        spawn(self.invocation, command)

    def makeLibsDir(self, directory):
        if self.dryRun:
            return
        try:
            os.mkdir(directory + '/' + LIBS_DIR)
        except OSError:
            pass  # best effort, usually it exists already
