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
core.py

One complete installgimp run: Rosetta check, update check, download,
install.
"""

from . import applog
from . import display
from . import fetch
from . import installer
from . import octory
from . import reports
from . import rosetta
from . import updatecheck
from . import waits
from .constants import EXIT_STATUS_FAILURE, EXIT_STATUS_SUCCESS
from .constants import NO_UPDATE, STATE_FAILED


def run(config, reporter=None, sleep=None, checkonly=False,
        get_last_modified=None):
    """Installs or updates the application described by config.

    Args:
      config: InstallerConfig
      reporter: status reporter; defaults to an OctoryReporter
      sleep: sleep function for the polling waits; defaults to time.sleep
      checkonly: if True, stop after deciding whether an update is needed
      get_last_modified: override for fetch.get_last_modified
    Returns:
      exit status for the process: 0 on success or nothing to do,
      1 on any failure
    """
    if reporter is None:
        reporter = octory.OctoryReporter(config)
    get_last_modified = get_last_modified or fetch.get_last_modified
    reports.report['AppName'] = config.app_name
    reports.report['DownloadURL'] = config.download_url

    download_started = False
    try:
        rosetta.check_for_rosetta(config, sleep=sleep)

        decision, last_modified = updatecheck.check_for_update(
            config, get_last_modified=get_last_modified)
        reports.report['Decision'] = decision
        if last_modified is not None:
            reports.report['LastModified'] = last_modified

        if decision == NO_UPDATE:
            display.display_status_major('Exiting, nothing to do')
            reports.report['Outcome'] = 'up to date'
            return EXIT_STATUS_SUCCESS
        if checkonly:
            display.display_status_major(
                'Update available for [%s], not installing', config.app_name)
            reports.report['Outcome'] = 'update available'
            return EXIT_STATUS_SUCCESS

        # a run with nothing to update leaves these logs untouched
        applog.reset_errors()
        applog.reset_warnings()

        download_started = True
        fetch.download(config, reporter, sleep=sleep)

        if last_modified is None:
            last_modified = get_last_modified(config.download_url)
            reports.report['LastModified'] = last_modified
        installer.install_app_from_dmg(
            config, reporter, last_modified=last_modified, sleep=sleep)

    except rosetta.RosettaInstallError as err:
        display.display_error('%s', err)
        reports.report['Outcome'] = 'failed'
        return EXIT_STATUS_FAILURE
    except (fetch.DownloadError, installer.InstallError,
            waits.WaitTimeoutError, OSError, IOError) as err:
        display.display_error('%s', err)
        display.display_error('Failed to install [%s]', config.app_name)
        if download_started:
            reporter.report_phase(STATE_FAILED)
        reports.report['Outcome'] = 'failed'
        return EXIT_STATUS_FAILURE

    reports.report['Outcome'] = 'installed'
    return EXIT_STATUS_SUCCESS


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
