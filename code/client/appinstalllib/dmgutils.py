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
dmgutils.py

Attaching and detaching the downloaded disk image with hdiutil.
"""

import os
import subprocess

from . import display
from . import utils
from .constants import HDIUTIL
from .wrappers import readPlistFromString, PlistReadError


def _hdiutil(*args):
    '''Runs hdiutil with args. Returns (returncode, stdout bytes,
    stderr text)'''
    proc = subprocess.Popen([HDIUTIL] + list(args), bufsize=-1,
                            stdin=subprocess.PIPE, stdout=subprocess.PIPE,
                            stderr=subprocess.PIPE)
    (out, err) = proc.communicate()
    return (proc.returncode, out, err.decode('UTF-8', 'replace').rstrip())


def _plist_in_output(out):
    '''hdiutil sometimes prints chatter ahead of the plist we asked for.
    Returns the parsed plist, or None.'''
    pliststr = utils.getFirstPlist(out)[0]
    if not pliststr:
        return None
    try:
        return readPlistFromString(pliststr)
    except PlistReadError as err:
        display.display_error('Bad plist from hdiutil: %s', err)
        return None


def _mountpoints_of(entities):
    return [entity['mount-point'] for entity in entities
            if 'mount-point' in entity]


def path_is_volume_mount_point(path):
    """True if a disk image is currently attached at path, which happens
    when an earlier run died before detaching"""
    (dummy_rc, out, err) = _hdiutil('info', '-plist')
    if err:
        display.display_warning('hdiutil info error: %s', err)
    info = _plist_in_output(out) or {}
    for image in info.get('images', []):
        if path in _mountpoints_of(image.get('system-entities', [])):
            return True
    return False


def mountdmg(dmgpath, mountpoint):
    """Attaches dmgpath at mountpoint, hidden from the Finder.
    Returns the list of mounted volumes; empty if nothing was mounted."""
    (returncode, out, err) = _hdiutil(
        'attach', dmgpath, '-nobrowse', '-plist', '-mountpoint', mountpoint)
    if returncode:
        display.display_error(
            'Error: "%s" while mounting %s.', err, os.path.basename(dmgpath))
    attached = _plist_in_output(out) or {}
    return _mountpoints_of(attached.get('system-entities', []))


def unmountdmg(mountpoint):
    """Detaches the volume at mountpoint, forcing it if a polite detach
    fails. Returns hdiutil's exit code from the last attempt."""
    (returncode, dummy_out, err) = _hdiutil('detach', mountpoint)
    if not returncode:
        return 0
    display.display_warning('Polite unmount failed: %s', err)
    display.display_warning('Attempting to force unmount %s', mountpoint)
    (returncode, dummy_out, err) = _hdiutil('detach', mountpoint, '-force')
    if returncode:
        display.display_warning(
            'Failed to unmount %s: %s', mountpoint, err)
    return returncode


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
