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
rosetta.py

Makes sure Rosetta 2 is installed on Apple silicon before we install an
application that may still ship Intel-only binaries.
"""

import os
import subprocess

from . import display
from . import info
from . import processes
from . import waits
from .constants import SOFTWAREUPDATE


class RosettaInstallError(Exception):
    """softwareupdate could not install Rosetta"""
    pass


def wait_for_softwareupdate(config, sleep=None):
    '''softwareupdate may be installing Rosetta already, so let it finish'''
    waiter = waits.waiter_for(
        config, config.software_update_wait_interval, sleep=sleep)
    waiter.wait_while(
        lambda: processes.is_process_running(SOFTWAREUPDATE),
        '[%s] running' % SOFTWAREUPDATE)


def install_rosetta():
    """Runs a non-interactive install of Rosetta 2. Returns the exit code
    of softwareupdate."""
    try:
        return subprocess.call(
            [SOFTWAREUPDATE, '--install-rosetta', '--agree-to-license'])
    except OSError as err:
        display.display_error('Could not run %s: %s', SOFTWAREUPDATE, err)
        return 127


def check_for_rosetta(config, sleep=None):
    """Installs Rosetta 2 if this Mac needs it and doesn't have it.

    Returns True if Rosetta was installed during this call.
    Raises RosettaInstallError if the install failed."""
    display.display_status_major('Checking if we need Rosetta 2 or not')

    wait_for_softwareupdate(config, sleep=sleep)

    processor = info.cpu_brand_string()
    if info.is_intel(processor):
        display.display_info('[%s] found, Rosetta not needed', processor)
        return False

    display.display_info(
        '[%s] found, is Rosetta already installed?', processor)
    # the oahd LaunchDaemon only exists once Rosetta is installed
    if os.path.isfile(config.rosetta_marker_path):
        display.display_info('Rosetta is already installed. Nothing to do.')
        return False

    retcode = install_rosetta()
    if retcode:
        raise RosettaInstallError(
            'Rosetta installation failed with exit code %s' % retcode)
    display.display_info('Rosetta has been successfully installed.')
    return True


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
