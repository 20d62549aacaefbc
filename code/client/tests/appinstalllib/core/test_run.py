# encoding: utf-8
"""
test_run.py

End to end tests for core.run with every external tool faked: the
update decision, download failures and install verification.

"""
# Copyright 2024 The installgimp Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
import shutil
import unittest

from mock import patch, MagicMock

from ..data_scaffolds import TempDirMixin, make_app_bundle, make_config
from appinstalllib import constants
from appinstalllib import core
from appinstalllib import display
from appinstalllib import octory
from appinstalllib import prefs
from appinstalllib import reports
from appinstalllib import rosetta
from appinstalllib import updatecheck


JAN_1 = 'Mon, 01 Jan 2024'
FEB_1 = 'Thu, 01 Feb 2024'


def snapshot(top):
    """Returns the set of paths below top"""
    found = set()
    for (dirpath, dirnames, filenames) in os.walk(top):
        for name in dirnames + filenames:
            found.add(os.path.join(dirpath, name))
    return found


class RunTestCase(TempDirMixin, unittest.TestCase):
    """Fakes curl, hdiutil, ditto, chown and the process table"""

    def setUp(self):
        display.verbose = 0
        self.tempdir = self.make_tempdir()
        self.config = make_config(self.tempdir)
        self.reporter = octory.RecordingReporter()
        self.curl_exit_code = 0
        self.copy_works = True

        self.curl_mock = self.start_patch(
            'appinstalllib.fetch.subprocess.call', side_effect=self.fake_curl)
        self.running_mock = self.start_patch(
            'appinstalllib.processes.is_process_running', return_value=False)
        self.rosetta_mock = self.start_patch(
            'appinstalllib.rosetta.check_for_rosetta', return_value=False)
        self.start_patch('appinstalllib.dmgutils.path_is_volume_mount_point',
                         return_value=False)
        self.mount_mock = self.start_patch(
            'appinstalllib.dmgutils.mountdmg', side_effect=self.fake_mount)
        self.start_patch('appinstalllib.dmgutils.unmountdmg', return_value=0)
        self.start_patch('appinstalllib.installer.copy_app',
                         side_effect=self.fake_ditto)
        self.start_patch('appinstalllib.installer.set_ownership',
                         return_value=0)
        self.start_patch('appinstalllib.installer.remove_quarantine')

    def start_patch(self, target, **kwargs):
        patcher = patch(target, **kwargs)
        mocked = patcher.start()
        self.addCleanup(patcher.stop)
        return mocked

    def fake_curl(self, cmd):
        with open(self.config.temp_file, 'wb') as fileobj:
            fileobj.write(b'partial' if self.curl_exit_code else b'dmg')
        return self.curl_exit_code

    def fake_mount(self, dmgpath, mountpoint):
        make_app_bundle(mountpoint)
        return [mountpoint]

    def fake_ditto(self, source_path, destination_path):
        if self.copy_works:
            shutil.copytree(source_path, destination_path)
        return 0

    def install_app(self):
        make_app_bundle(self.config.applications_dir)

    def store(self, last_modified):
        updatecheck.write_stored_timestamp(self.config, last_modified)

    def run_with_remote(self, last_modified):
        self.fetcher = MagicMock(return_value=last_modified)
        return core.run(self.config, reporter=self.reporter,
                        sleep=lambda seconds: None,
                        get_last_modified=self.fetcher)

    def stored(self):
        return updatecheck.read_stored_timestamp(self.config)


class TestUpdateDecision(RunTestCase):
    """Which runs install and which don't"""

    def test_same_timestamp_exits_0_without_side_effects(self):
        self.install_app()
        self.store(JAN_1)
        before = snapshot(self.tempdir)
        self.assertEqual(self.run_with_remote(JAN_1), 0)
        self.assertEqual(snapshot(self.tempdir), before)
        self.curl_mock.assert_not_called()
        self.mount_mock.assert_not_called()
        self.assertEqual(self.reporter.states, [])
        self.assertEqual(self.stored(), JAN_1)

    def test_different_timestamp_installs(self):
        self.install_app()
        self.store(JAN_1)
        self.assertEqual(self.run_with_remote(FEB_1), 0)
        self.curl_mock.assert_called_once_with(
            [constants.CURL, '-f', '-s', '--connect-timeout', '30',
             '--retry', '5', '--retry-delay', '60', '-L',
             '-o', self.config.temp_file, self.config.download_url])
        self.assertEqual(self.stored(), FEB_1)

    def test_missing_meta_file_installs(self):
        self.install_app()
        self.assertEqual(self.run_with_remote(JAN_1), 0)
        self.mount_mock.assert_called_once_with(
            self.config.temp_file, self.config.mount_point)
        self.assertEqual(self.stored(), JAN_1)

    def test_missing_app_installs_regardless_of_meta_file(self):
        self.store(JAN_1)
        self.assertEqual(self.run_with_remote(JAN_1), 0)
        self.curl_mock.assert_called_once_with(
            [constants.CURL, '-f', '-s', '--connect-timeout', '30',
             '--retry', '5', '--retry-delay', '60', '-L',
             '-o', self.config.temp_file, self.config.download_url])
        self.assertTrue(os.path.isdir(prefs.app_path(self.config)))

    def test_fresh_install_creates_meta_file(self):
        self.assertEqual(self.run_with_remote(JAN_1), 0)
        self.assertEqual(self.stored(), JAN_1)
        self.assertFalse(os.path.exists(self.config.temp_file))
        self.assertEqual(self.reporter.states,
                         [constants.STATE_INSTALLING,
                          constants.STATE_INSTALLING,
                          constants.STATE_INSTALLED])

    def test_rerun_after_install_is_a_noop(self):
        self.assertEqual(self.run_with_remote(JAN_1), 0)
        self.curl_mock.reset_mock()
        self.reporter.states = []
        self.assertEqual(self.run_with_remote(JAN_1), 0)
        self.curl_mock.assert_not_called()
        self.assertEqual(self.reporter.states, [])

    def test_checkonly_does_not_install(self):
        self.install_app()
        self.store(JAN_1)
        self.fetcher = MagicMock(return_value=FEB_1)
        self.assertEqual(
            core.run(self.config, reporter=self.reporter, checkonly=True,
                     get_last_modified=self.fetcher), 0)
        self.curl_mock.assert_not_called()
        self.assertEqual(self.stored(), JAN_1)


class TestFailures(RunTestCase):
    """Fatal errors exit 1 and never touch the meta file"""

    def test_download_failure(self):
        self.install_app()
        self.store(JAN_1)
        self.curl_exit_code = 6
        self.assertEqual(self.run_with_remote(FEB_1), 1)
        self.assertFalse(os.path.exists(self.config.temp_file))
        self.assertEqual(self.stored(), JAN_1)
        self.mount_mock.assert_not_called()
        self.assertEqual(self.reporter.states[-1], constants.STATE_FAILED)

    def test_download_failure_on_fresh_install(self):
        self.curl_exit_code = 6
        self.assertEqual(self.run_with_remote(JAN_1), 1)
        self.assertIsNone(self.stored())
        self.assertFalse(os.path.exists(self.config.temp_file))

    def test_verification_failure(self):
        self.install_app()
        self.store(JAN_1)
        self.copy_works = False
        self.assertEqual(self.run_with_remote(FEB_1), 1)
        self.assertEqual(self.stored(), JAN_1)
        self.assertFalse(os.path.exists(prefs.app_path(self.config)))
        self.assertEqual(self.reporter.states[-1], constants.STATE_FAILED)

    def test_mount_failure(self):
        self.mount_mock.side_effect = None
        self.mount_mock.return_value = []
        self.assertEqual(self.run_with_remote(JAN_1), 1)
        self.assertIsNone(self.stored())

    def test_rosetta_failure_stops_before_download(self):
        self.rosetta_mock.side_effect = rosetta.RosettaInstallError('nope')
        self.assertEqual(self.run_with_remote(JAN_1), 1)
        self.curl_mock.assert_not_called()
        self.assertEqual(self.reporter.states, [])

    def test_unwritable_meta_file_fails_the_run(self):
        os.makedirs(prefs.meta_path(self.config))
        self.assertEqual(self.run_with_remote(JAN_1), 1)
        self.assertEqual(self.reporter.states[-1], constants.STATE_FAILED)
        self.assertIn('Failed to install [Gimp]', reports.report['Errors'])

    def test_app_that_never_quits_times_out(self):
        self.install_app()
        self.store(JAN_1)
        config = self.config._replace(wait_timeout=30)
        self.running_mock.side_effect = (
            lambda pattern: pattern == config.process_path)
        now = [0]

        def fake_sleep(seconds):
            now[0] += seconds

        with patch('appinstalllib.waits.time.time',
                   side_effect=lambda: now[0]):
            exit_code = core.run(
                config, reporter=self.reporter, sleep=fake_sleep,
                get_last_modified=MagicMock(return_value=FEB_1))
        self.assertEqual(exit_code, 1)
        self.assertEqual(now[0], config.app_running_wait_interval)
        self.mount_mock.assert_not_called()
        self.assertEqual(self.stored(), JAN_1)
        self.assertEqual(self.reporter.states[-1], constants.STATE_FAILED)


def main():
    unittest.main(buffer=True)


if __name__ == '__main__':
    main()
