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
constants.py

Commonly used constants
"""

# NOTE: the device management agent looks only at these two values.
EXIT_STATUS_SUCCESS = 0
EXIT_STATUS_FAILURE = 1

BUNDLE_ID = 'InstallGimp'
PREFS_PLIST_PATH = '/Library/Preferences/' + BUNDLE_ID + '.plist'

# update decisions
FRESH_INSTALL = 'fresh-install'
UPDATE_NEEDED = 'update-needed'
NO_UPDATE = 'no-update'

# states understood by the Octory notifier
STATE_NOT_INSTALLED = 'notInstalled'
STATE_INSTALLING = 'installing'
STATE_INSTALLED = 'installed'
STATE_FAILED = 'failed'
REPORTABLE_STATES = (
    STATE_NOT_INSTALLED, STATE_INSTALLING, STATE_INSTALLED, STATE_FAILED)

CURL = '/usr/bin/curl'
HDIUTIL = '/usr/bin/hdiutil'
DITTO = '/usr/bin/ditto'
CHOWN = '/usr/sbin/chown'
PKILL = '/usr/bin/pkill'
PS = '/bin/ps'
SYSCTL = '/usr/sbin/sysctl'
SOFTWAREUPDATE = '/usr/sbin/softwareupdate'


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
