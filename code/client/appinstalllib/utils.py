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
utils

Common utility functions used throughout appinstalllib.

Note: this module should be 100% free of ObjC-dependent Python imports.
"""

import os
import subprocess


def run_command(cmd, stdin=None):
    """Runs cmd (a list) and returns (returncode, stdout, stderr) with
    the output decoded as UTF-8. A missing executable is reported like
    the shell would: returncode 127."""
    try:
        proc = subprocess.Popen(cmd, shell=False, bufsize=-1,
                                stdin=subprocess.PIPE,
                                stdout=subprocess.PIPE,
                                stderr=subprocess.PIPE)
    except (OSError, IOError) as err:
        return (127, u'', u'%s' % err)
    (stdout, stderr) = proc.communicate(stdin)
    return (proc.returncode, stdout.decode('UTF-8', 'replace'),
            stderr.decode('UTF-8', 'replace'))


def getFirstPlist(byteString):
    """Gets the next plist from a byte string that may contain one or
    more text-style plists.
    Returns a tuple - the first plist (if any) and the remaining
    string after the plist"""
    # pylint: disable=C0103
    plist_header = b'<?xml version'
    plist_footer = b'</plist>'
    plist_start_index = byteString.find(plist_header)
    if plist_start_index == -1:
        # not found
        return (b"", byteString)
    plist_end_index = byteString.find(
        plist_footer, plist_start_index + len(plist_header))
    if plist_end_index == -1:
        # not found
        return (b"", byteString)
    # adjust end value
    plist_end_index = plist_end_index + len(plist_footer)
    return (byteString[plist_start_index:plist_end_index],
            byteString[plist_end_index:])


def human_readable_size(size_in_bytes):
    """Returns a size like '12.3 MB' for logging"""
    if size_in_bytes < 1024:
        return '%d bytes' % size_in_bytes
    size = size_in_bytes / 1024.0
    units = ['KB', 'MB', 'GB']
    while size >= 1024.0 and len(units) > 1:
        size = size / 1024.0
        units.pop(0)
    return '%.1f %s' % (size, units[0])


def remove_file(path):
    """Deletes path if it exists. Returns True if something was removed."""
    if os.path.lexists(path):
        os.unlink(path)
        return True
    return False


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
