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
updatecheck.py

Decides whether the application needs to be installed, updated, or left
alone.

We have no version information for the disk image, only the web server's
Last-Modified header. The value seen at the last successful install is kept
in <LogAndMetaDir>/<AppName>.meta; a different value now means the image was
replaced on the server.
"""

import os

from . import display
from . import fetch
from . import prefs
from . import reports
from .constants import FRESH_INSTALL, UPDATE_NEEDED, NO_UPDATE


def read_stored_timestamp(config):
    """Returns the Last-Modified value stored at the last install, or None
    if we never recorded one"""
    metafile = prefs.meta_path(config)
    if not os.path.isfile(metafile):
        return None
    with open(metafile, 'r', encoding='UTF-8') as fileobj:
        return fileobj.read().rstrip('\r\n')


def write_stored_timestamp(config, last_modified):
    """Records last_modified as the value of the installed copy"""
    if not os.path.isdir(config.log_and_meta_dir):
        display.display_info(
            'Creating [%s] to store metadata', config.log_and_meta_dir)
        os.makedirs(config.log_and_meta_dir)
    metafile = prefs.meta_path(config)
    display.display_info(
        'Writing last modified date [%s] to [%s]', last_modified, metafile)
    with open(metafile, 'w', encoding='UTF-8') as fileobj:
        fileobj.write(last_modified + '\n')


def check_for_update(config, get_last_modified=None):
    """Works out what needs doing.

    Args:
      config: InstallerConfig
      get_last_modified: function taking a URL and returning its
          Last-Modified value; defaults to fetch.get_last_modified
    Returns:
      tuple of (decision, last_modified), where decision is one of
      FRESH_INSTALL, UPDATE_NEEDED or NO_UPDATE and last_modified is the
      value fetched from the server, or None if we didn't need to ask.
    """
    get_last_modified = get_last_modified or fetch.get_last_modified
    display.display_status_major(
        'Checking if we need to install or update [%s]', config.app_name)

    if not os.path.isdir(prefs.app_path(config)):
        display.display_status_minor(
            '[%s] not installed, need to download and install',
            config.app_name)
        return (FRESH_INSTALL, None)

    display.display_status_minor(
        "[%s] already installed, let's see if we need to update",
        config.app_name)
    last_modified = get_last_modified(config.download_url)
    if not last_modified:
        # an unreachable server and one that doesn't send the header look
        # the same here; the empty string is still compared below
        display.display_warning(
            'No Last-Modified date found for [%s]', config.download_url)

    previous = read_stored_timestamp(config)
    if previous is None:
        display.display_status_minor(
            'Meta file [%s] not found', prefs.meta_path(config))
        display.display_status_minor(
            'Unable to determine if update required, updating [%s] anyway',
            config.app_name)
        return (UPDATE_NEEDED, last_modified)

    reports.report['PreviousLastModified'] = previous
    if previous != last_modified:
        display.display_status_minor(
            'Update found, previous [%s] and current [%s]',
            previous, last_modified)
        return (UPDATE_NEEDED, last_modified)

    display.display_status_minor(
        'No update between previous [%s] and current [%s]',
        previous, last_modified)
    return (NO_UPDATE, last_modified)


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
