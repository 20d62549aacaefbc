# encoding: utf-8
#
# Copyright 2024 The installgimp Authors.
#
# Licensed under the Apache License, Version 2.0 (the 'License');
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an 'AS IS' BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
processes.py

Functions for finding, listing, etc processes
"""

import os
import subprocess

from . import display
from .constants import PKILL, PS


def get_process_commands():
    """Returns a list of (pid, full command line) for running processes"""
    proc = subprocess.Popen([PS, '-axww', '-o', 'pid=,args='],
                            shell=False, stdin=subprocess.PIPE,
                            stdout=subprocess.PIPE,
                            stderr=subprocess.PIPE)
    output = proc.communicate()[0].decode('UTF-8', 'replace')
    commands = []
    if proc.returncode != 0:
        return commands
    for line in output.splitlines():
        try:
            (pid, command) = line.strip().split(None, 1)
            commands.append((int(pid), command))
        except ValueError:
            # funky process line, so we'll skip it
            pass
    return commands


def is_process_running(pattern):
    """Returns True if any process other than ourselves has pattern
    somewhere in its command line. Matching is case-insensitive."""
    mypid = os.getpid()
    pattern = pattern.lower()
    matches = [command for (pid, command) in get_process_commands()
               if pattern in command.lower() and pid != mypid]
    if matches:
        display.display_debug1('Processes matching %s: %s', pattern, matches)
        return True
    return False


def kill_process(pattern):
    """Sends SIGTERM to every process whose command line matches pattern.
    Returns pkill's exit code (1 means nothing matched)."""
    return subprocess.call([PKILL, '-f', pattern])


def script_already_running(scriptname):
    """Returns the pid of another Python process running scriptname,
    or 0 if there is none"""
    mypid = os.getpid()
    for (pid, command) in get_process_commands():
        args = command.split()
        try:
            if (args[0].find('MacOS/Python') != -1 or
                    args[0].find('python') != -1):
                # look for first argument being scriptname
                if args[1].find(scriptname) != -1 and pid != mypid:
                    return pid
            elif (os.path.basename(args[0]) == scriptname
                  and pid != mypid):
                # console-script entry points run without python in argv[0]
                return pid
        except IndexError:
            pass
    return 0


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
