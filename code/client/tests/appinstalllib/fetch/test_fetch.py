# encoding: utf-8
"""
test_fetch.py

Unit tests for fetch: Last-Modified parsing and the curl download.

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
import unittest

from mock import patch

from ..data_scaffolds import TempDirMixin, make_config
from appinstalllib import constants
from appinstalllib import display
from appinstalllib import fetch
from appinstalllib import octory


REDIRECT_HEADERS = (
    'HTTP/1.1 302 Found\r\n'
    'Location: https://cdn.example.com/gimp.dmg\r\n'
    'Last-Modified: Sat, 01 Jul 2023 00:00:00 GMT\r\n'
    '\r\n'
    'HTTP/1.1 200 OK\r\n'
    'Content-Type: application/x-apple-diskimage\r\n'
    'last-modified:   Mon, 01 Jan 2024 10:00:00 GMT  \r\n'
    'ETag: "0x8DC0A"\r\n'
    '\r\n'
)


class TestLastModified(unittest.TestCase):
    """Header parsing"""

    def setUp(self):
        display.verbose = 0

    def test_final_response_wins_and_whitespace_is_stripped(self):
        self.assertEqual(fetch.parse_last_modified(REDIRECT_HEADERS),
                         'Mon, 01 Jan 2024 10:00:00 GMT')

    def test_missing_header(self):
        self.assertEqual(
            fetch.parse_last_modified('HTTP/1.1 200 OK\r\nETag: "x"\r\n'), '')

    def test_header_dict_lowercases_names(self):
        self.assertEqual(
            fetch.header_dict_from_list(['ETag: "abc"', 'no colon here']),
            {'etag': '"abc"'})

    @patch('appinstalllib.fetch.utils.run_command',
           return_value=(0, REDIRECT_HEADERS, ''))
    def test_get_last_modified_runs_curl_head(self, run_mock):
        self.assertEqual(fetch.get_last_modified('https://example.com/gimp.dmg'),
                         'Mon, 01 Jan 2024 10:00:00 GMT')
        run_mock.assert_called_once_with(
            ['/usr/bin/curl', '-sIL', 'https://example.com/gimp.dmg'])

    @patch('appinstalllib.fetch.utils.run_command',
           return_value=(6, '', 'Could not resolve host'))
    def test_get_last_modified_unreachable_server(self, run_mock):
        self.assertEqual(fetch.get_last_modified('https://nowhere.invalid/'), '')


class TestDownload(TempDirMixin, unittest.TestCase):
    """Downloading the disk image"""

    def setUp(self):
        display.verbose = 0
        self.config = make_config(self.make_tempdir())
        self.reporter = octory.RecordingReporter()
        patcher = patch('appinstalllib.fetch.curl_is_running',
                        return_value=False)
        patcher.start()
        self.addCleanup(patcher.stop)

    def fake_curl(self, contents=b'dmg', retcode=0):
        def call(cmd):
            with open(self.config.temp_file, 'wb') as fileobj:
                fileobj.write(contents)
            return retcode
        return call

    def test_download_command(self):
        self.assertEqual(
            fetch.download_command(self.config),
            ['/usr/bin/curl', '-f', '-s', '--connect-timeout', '30',
             '--retry', '5', '--retry-delay', '60', '-L',
             '-o', self.config.temp_file, self.config.download_url])

    def test_successful_download(self):
        with patch('appinstalllib.fetch.subprocess.call',
                   side_effect=self.fake_curl()) as call_mock:
            fetch.download(self.config, self.reporter)
        call_mock.assert_called_once_with(fetch.download_command(self.config))
        self.assertTrue(os.path.exists(self.config.temp_file))
        self.assertEqual(self.reporter.states, [constants.STATE_INSTALLING])

    def test_failed_download_raises_and_removes_partial_file(self):
        with patch('appinstalllib.fetch.subprocess.call',
                   side_effect=self.fake_curl(b'partial', retcode=6)):
            with self.assertRaises(fetch.DownloadError) as context:
                fetch.download(self.config, self.reporter)
        self.assertEqual(context.exception.code, 6)
        self.assertFalse(os.path.exists(self.config.temp_file))

    def test_missing_curl_is_a_download_error(self):
        with patch('appinstalllib.fetch.subprocess.call',
                   side_effect=OSError(2, 'No such file or directory')):
            with self.assertRaises(fetch.DownloadError) as context:
                fetch.download(self.config, self.reporter)
        self.assertEqual(context.exception.code, 127)

    def test_waits_for_other_curl_processes(self):
        naps = []
        with patch('appinstalllib.fetch.curl_is_running',
                   side_effect=[True, True, False]):
            with patch('appinstalllib.fetch.subprocess.call',
                       side_effect=self.fake_curl()):
                fetch.download(self.config, self.reporter, sleep=naps.append)
        self.assertEqual(naps, [10, 10])


def main():
    unittest.main(buffer=True)


if __name__ == '__main__':
    main()
