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
reports.py

Keeps a summary of the current run and saves it as a plist next to the log,
so an admin (or an inventory script) can see what the last run did without
reading the whole log.
"""

import time

from . import applog
from .wrappers import writePlist, PlistWriteError

# pylint: disable=invalid-name
report = {}
# pylint: enable=invalid-name


def format_time(timestamp=None):
    """Return timestamp as an ISO 8601 formatted string, in the current
    timezone.
    If timestamp isn't given the current time is used."""
    if timestamp is None:
        timestamp = time.time()
    return time.strftime('%Y-%m-%d %H:%M:%S %z', time.localtime(timestamp))


def reset():
    '''Starts a fresh report'''
    report.clear()
    report['StartTime'] = format_time()


def savereport(reportpath):
    """Save our report"""
    report['EndTime'] = format_time()
    try:
        writePlist(report, reportpath)
    except PlistWriteError as err:
        applog.log('WARNING: Could not save report to %s: %s'
                   % (reportpath, err))


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
