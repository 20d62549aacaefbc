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
installgimp

Installs or updates the GNU Image Manipulation Program from a disk image on
a web server. Meant to be deployed as a shell script replacement through a
device management agent and run as root; with no options it does a full
check-and-install run.

Exit status is 0 on success (including "already up to date"), 1 on failure.
"""

import optparse
import os
import signal
import sys

from appinstalllib import __version__
from appinstalllib import applog
from appinstalllib import constants
from appinstalllib import core
from appinstalllib import display
from appinstalllib import prefs
from appinstalllib import processes
from appinstalllib import reports


def signal_handler(signum, _frame):
    """Exit cleanly on SIGTERM so our finally blocks run"""
    if signum == signal.SIGTERM:
        sys.exit(constants.EXIT_STATUS_FAILURE)


def main():
    """Main"""
    progname = 'installgimp'

    # install handler for SIGTERM
    signal.signal(signal.SIGTERM, signal_handler)

    parser = optparse.OptionParser()
    parser.set_usage('Usage: %s [options]' % progname)
    parser.add_option('--version', '-V', action='store_true',
                      help='Print the version and exit.')
    parser.add_option(
        '--verbose', '-v', action='count', default=1,
        help='More verbose output. May be specified multiple times.')
    parser.add_option(
        '--quiet', '-q', action='store_true',
        help='Quiet mode. Logs messages, but nothing to stdout. --verbose is '
        'ignored if --quiet is used.')
    parser.add_option(
        '--show-config', action='store_true',
        help='Print the current configuration and exit.')
    parser.add_option(
        '--checkonly', action='store_true',
        help='Check whether an install or update is needed, but don\'t '
        'download or install anything.')
    parser.add_option(
        '--terminate', action='store_true',
        help='Quit the application if it is running instead of waiting for '
        'the user to quit it. Overrides the TerminateProcess preference.')

    options, dummy_arguments = parser.parse_args()

    if options.version:
        print(__version__)
        return constants.EXIT_STATUS_SUCCESS

    overrides = {}
    if options.terminate:
        overrides['TerminateProcess'] = True
    try:
        config = prefs.load_config(overrides)
    except prefs.ConfigError as err:
        print('ERROR: %s' % err, file=sys.stderr)
        return constants.EXIT_STATUS_FAILURE

    if options.show_config:
        prefs.print_config(config)
        return constants.EXIT_STATUS_SUCCESS

    if options.quiet:
        display.verbose = 0
    else:
        display.verbose = options.verbose

    try:
        applog.configure(prefs.log_path(config), config.logging_level)
    except applog.LogSetupError as err:
        print('ERROR: %s' % err, file=sys.stderr)
        return constants.EXIT_STATUS_FAILURE
    if config.log_to_syslog:
        applog.configure_syslog()

    # check to see if another instance of this script is running
    myname = os.path.basename(sys.argv[0])
    other_pid = processes.script_already_running(myname)
    if other_pid:
        applog.log('*' * 60)
        applog.log('%s launched as pid %s' % (progname, os.getpid()))
        applog.log('Another instance of %s is running as pid %s.'
                   % (progname, other_pid))
        applog.log('pid %s exiting.' % os.getpid())
        applog.log('*' * 60)
        print('Another instance of %s is running. Exiting.' % progname,
              file=sys.stderr)
        return constants.EXIT_STATUS_SUCCESS

    reports.reset()
    display.display_banner('Logging install of [%s] to [%s]',
                           config.app_name, prefs.log_path(config))

    exit_status = core.run(config, checkonly=options.checkonly)

    reports.report['ExitCode'] = exit_status
    if reports.report.get('Decision') != constants.NO_UPDATE:
        # an up to date run only appends to the main log
        reports.savereport(prefs.report_path(config))
    return exit_status


if __name__ == '__main__':
    sys.exit(main())
