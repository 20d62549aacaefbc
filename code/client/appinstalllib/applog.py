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
applog.py

Logging functions for installgimp.

Messages are appended to <LogAndMetaDir>/<AppName>.log; warnings and errors
are additionally appended to warnings.log and errors.log in the same
directory. Nothing is written until configure() has been called.
"""

import codecs
import logging
import logging.handlers
import os
import time

# date/time format string
DATE_FORMAT = '%b %d %Y %H:%M:%S %z'
MAX_LOG_SIZE = 1000000
SYSLOG_SOCKET = '/var/run/syslog'
LOGGER_NAME = 'installgimp'

# module globals
# pylint: disable=invalid-name
_logfile = None
_logging_level = 1
# pylint: enable=invalid-name


class LogSetupError(Exception):
    """The log directory could not be created"""
    pass


def configure(logfile, level=1):
    """Points logging at logfile, creating its directory if needed, and
    rotates the log if it has grown too big"""
    # pylint: disable=global-statement
    global _logfile, _logging_level
    logdir = os.path.dirname(logfile)
    if logdir and not os.path.isdir(logdir):
        print('%s | Creating [%s] to store logs'
              % (time.strftime(DATE_FORMAT), logdir))
        try:
            os.makedirs(logdir)
        except (OSError, IOError) as err:
            raise LogSetupError('Could not create %s: %s' % (logdir, err))
    _logfile = logfile
    _logging_level = level
    rotate_main_log()


def unconfigure():
    """Stops writing to files"""
    # pylint: disable=global-statement
    global _logfile, _logging_level
    _logfile = None
    _logging_level = 1


def logfile():
    '''Returns the path of the main log, or None if not configured'''
    return _logfile


def logging_level():
    '''Returns the configured logging level'''
    return _logging_level


def _logpath(logname):
    if not logname:
        return _logfile
    return os.path.join(os.path.dirname(_logfile), logname)


def log(msg, logname=''):
    """Generic logging function."""
    # noop unless configure_syslog() is called first
    logging.getLogger(LOGGER_NAME).info(msg)
    if not _logfile:
        return
    try:
        fileobj = codecs.open(_logpath(logname), mode='a', encoding='UTF-8')
        try:
            fileobj.write("%s | %s\n" % (time.strftime(DATE_FORMAT), msg))
        except (OSError, IOError):
            pass
        fileobj.close()
    except (OSError, IOError):
        pass


def configure_syslog(address=SYSLOG_SOCKET):
    """Sends everything we log to syslog as well, when the LogToSyslog
    preference is set. Returns True if the handler was attached."""
    logger = logging.getLogger(LOGGER_NAME)
    # drop handlers from an earlier call so messages aren't doubled
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    try:
        syslog = logging.handlers.SysLogHandler(address)
    except (OSError, IOError):
        log('LogToSyslog is enabled but socket connection failed.')
        return False

    syslog.setFormatter(logging.Formatter('installgimp: %(message)s'))
    syslog.setLevel(logging.INFO)
    logger.addHandler(syslog)
    return True


def rotatelog(logname=''):
    """Rotate a log"""
    if not _logfile:
        return
    logpath = _logpath(logname)
    if os.path.exists(logpath):
        for i in range(3, -1, -1):
            try:
                os.unlink(logpath + '.' + str(i + 1))
            except (OSError, IOError):
                pass
            try:
                os.rename(logpath + '.' + str(i), logpath + '.' + str(i + 1))
            except (OSError, IOError):
                pass
        try:
            os.rename(logpath, logpath + '.0')
        except (OSError, IOError):
            pass


def rotate_main_log():
    """Rotate our main log"""
    if _logfile and os.path.exists(_logfile):
        if os.path.getsize(_logfile) > MAX_LOG_SIZE:
            rotatelog()


def reset_warnings():
    """Rotate our warnings log."""
    rotatelog('warnings.log')


def reset_errors():
    """Rotate our errors.log"""
    rotatelog('errors.log')


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
