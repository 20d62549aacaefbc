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
waits.py

Polling waits used while another process holds something we need (another
download, softwareupdate, the application itself).

A Waiter with no timeout waits forever, which is what a device management
agent running us in the background expects; the agent kills us if it gives
up. Tests hand in a fake sleep function so nothing actually sleeps.
"""

import time

from . import display


class WaitTimeoutError(Exception):
    """The condition was still true when the timeout expired"""
    pass


class Waiter(object):
    """Re-checks a condition at a fixed interval until it becomes false."""

    def __init__(self, interval, timeout=None, sleep=None, clock=None):
        """
        Args:
          interval: seconds to sleep between checks
          timeout: seconds after which to give up, or None to wait forever
          sleep: function used to sleep; defaults to time.sleep
          clock: function returning the current time; defaults to time.time
        """
        self.interval = interval
        self.timeout = timeout or None
        self.sleep = sleep or time.sleep
        self.clock = clock or time.time

    def __repr__(self):
        return '<%s interval=%s timeout=%s>' % (
            self.__class__.__name__, self.interval, self.timeout)

    def wait_while(self, condition, message=None):
        """Sleeps while condition() returns True.

        Returns the number of times we slept.
        Raises WaitTimeoutError if the timeout is reached first."""
        started = self.clock()
        naps = 0
        while condition():
            if (self.timeout is not None
                    and self.clock() - started >= self.timeout):
                raise WaitTimeoutError(
                    'Gave up after waiting %s seconds' % self.timeout)
            if message:
                display.display_status_minor(
                    '%s, waiting %ss', message, self.interval)
            self.sleep(self.interval)
            naps += 1
        return naps


def waiter_for(config, interval, sleep=None):
    '''Returns a Waiter for interval honoring the configured WaitTimeout'''
    return Waiter(interval, timeout=config.wait_timeout, sleep=sleep)


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
