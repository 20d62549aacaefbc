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
octory.py

Status reporting to Octory, an onboarding app some organizations run during
device enrollment. Octory shows a per-application monitor whose state we
update as the install progresses.

Reporting is best effort: if Octory isn't installed or isn't running,
nothing happens, and a failing notifier never fails the install.
"""

import os
import subprocess

from . import display
from . import processes
from .constants import REPORTABLE_STATES


class NullReporter(object):
    """Reporter that discards every phase"""

    def report_phase(self, state):
        '''Does nothing'''
        pass


class RecordingReporter(object):
    """Reporter that remembers the phases it was given, in order"""

    def __init__(self):
        self.states = []

    def report_phase(self, state):
        '''Records state'''
        self.states.append(state)


class OctoryReporter(object):
    """Pushes phase changes to Octory with its octo-notifier tool"""

    def __init__(self, config):
        self.octory_dir = config.octory_dir
        self.app_name = config.app_name

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.octory_dir)

    @property
    def notifier(self):
        '''Path to the octo-notifier command line tool'''
        return os.path.join(self.octory_dir, 'octo-notifier')

    def is_available(self):
        '''Octory must be both installed and running'''
        if not os.path.exists(self.octory_dir):
            return False
        return processes.is_process_running('Octory')

    def report_phase(self, state):
        """Sets the Octory monitor for our app to state"""
        if state not in REPORTABLE_STATES:
            display.display_warning('Unknown Octory state %s', state)
            return
        if not self.is_available():
            display.display_debug1(
                'Octory not available, not reporting [%s]', state)
            return
        display.display_status_minor(
            'Updating Octory monitor for [%s] to [%s]', self.app_name, state)
        cmd = [self.notifier, 'monitor', self.app_name, '--state', state]
        try:
            retcode = subprocess.call(
                cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as err:
            display.display_warning('Could not run %s: %s', self.notifier, err)
            return
        if retcode:
            display.display_warning(
                '%s exited with code %s', self.notifier, retcode)


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
