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
display.py

Output functions for installgimp.

Every message is written to the log through applog whatever the verbosity,
so the log holds the same narrative the device management agent captures
from stdout. How much reaches stdout/stderr depends on the module-level
`verbose` setting:

    0  quiet: nothing printed
    1  normal: status, info, warnings and errors
    2  adds detail messages
    3  adds debug messages
"""

import sys
import time
import warnings

from . import applog
from . import reports
from .wrappers import unicode_or_str

INDENT = u'    '


def _to_unicode(obj, encoding='UTF-8'):
    """Coerces obj to unicode"""
    if isinstance(obj, bytes):
        obj = obj.decode(encoding)
    return obj


def _concat_message(msg, *args):
    """Interpolates args into msg, making sure everything is unicode"""
    msg = _to_unicode(msg)
    if args:
        try:
            msg = msg % tuple(_to_unicode(arg) for arg in args)
        except TypeError:
            warnings.warn(
                'String format does not match concat args: %s'
                % (str(sys.exc_info())))
    return msg.rstrip()


def _stamp(msg):
    '''Prefixes msg with the current date, matching the log file'''
    return '%s | %s' % (time.strftime(applog.DATE_FORMAT), msg)


def _show(line, min_verbosity, stream=None):
    '''Prints a dated line if verbose is at least min_verbosity'''
    if verbose >= min_verbosity:
        print(_stamp(line), file=stream or sys.stdout)
        (stream or sys.stdout).flush()


def _problem(label, logname, report_key, msg, *args):
    '''Shared handling for warnings and errors: stderr, the main log,
    a dedicated log, and the run report'''
    msg = _concat_message(msg, *args)
    line = u'%s: %s' % (label, msg)
    _show(line, 1, sys.stderr)
    applog.log(line)
    applog.log(line, logname)
    reports.report.setdefault(report_key, []).append(unicode_or_str(msg))


def display_banner(msg, *args):
    """Displays a block that makes the start of a run easy to find"""
    msg = _concat_message(msg, *args)
    for line in ('', '#' * 62, '# %s' % msg, '#' * 62, ''):
        applog.log(line)
        if verbose:
            print(line)
    sys.stdout.flush()


def display_status_major(msg, *args):
    """Displays the start of a new phase of the run"""
    msg = _concat_message(msg, *args)
    applog.log(msg)
    _show(msg, 1)


def display_status_minor(msg, *args):
    """Displays progress within the current phase"""
    msg = u' + ' + _concat_message(msg, *args)
    applog.log(msg)
    _show(msg, 1)


def display_info(msg, *args):
    """Displays info messages"""
    msg = INDENT + _concat_message(msg, *args)
    applog.log(msg)
    _show(msg, 1)


def display_detail(msg, *args):
    """
    Displays minor info messages.
    These are logged when LoggingLevel is at least 1 and printed when
    verbose is greater than 1
    """
    msg = INDENT + _concat_message(msg, *args)
    _show(msg, 2)
    if applog.logging_level() > 0:
        applog.log(msg)


def display_debug1(msg, *args):
    """Displays debug messages; logged only when LoggingLevel > 1"""
    msg = _concat_message(msg, *args)
    _show(INDENT + msg, 3)
    if applog.logging_level() > 1:
        applog.log('DEBUG1: %s' % msg)


def display_warning(msg, *args):
    """Prints a warning to stderr and records it in the logs and report"""
    _problem('WARNING', 'warnings.log', 'Warnings', msg, *args)


def display_error(msg, *args):
    """Prints an error to stderr and records it in the logs and report"""
    _problem('ERROR', 'errors.log', 'Errors', msg, *args)


# module globals
# pylint: disable=invalid-name
verbose = 1
# pylint: enable=invalid-name


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
