# encoding: utf-8
"""
test_display_unicode.py

Non-ASCII application names and server messages, passed to the display
functions as text or as UTF-8 bytes, end up decoded in the logs and the
run report.

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

import codecs
import os
import unittest

from ..data_scaffolds import TempDirMixin
from appinstalllib import applog
from appinstalllib import display
from appinstalllib import reports


APP_TEXT = u'GIMP – Éditeur d’images'
APP_BYTES = APP_TEXT.encode('UTF-8')
FORMAT_TEXT = u'Could not remove quarantine from [%s]'
FORMAT_BYTES = FORMAT_TEXT.encode('UTF-8')
EXPECTED = u'Could not remove quarantine from [GIMP – Éditeur d’images]'


class DisplayTestCase(TempDirMixin, unittest.TestCase):
    """Logs into a scratch directory with a fresh report"""

    def setUp(self):
        display.verbose = 0
        self.logdir = self.make_tempdir()
        applog.configure(os.path.join(self.logdir, 'Gimp.log'))
        self.addCleanup(applog.unconfigure)
        reports.reset()

    def read(self, name):
        with codecs.open(os.path.join(self.logdir, name),
                         encoding='UTF-8') as fileobj:
            return fileobj.read()


class TestDisplayInfoUnicode(DisplayTestCase):
    """display_info indents and decodes"""

    def test_text_format_bytes_arg(self):
        display.display_info(FORMAT_TEXT, APP_BYTES)
        self.assertIn(u' |     ' + EXPECTED, self.read('Gimp.log'))

    def test_bytes_format_text_arg(self):
        display.display_info(FORMAT_BYTES, APP_TEXT)
        self.assertIn(u' |     ' + EXPECTED, self.read('Gimp.log'))

    def test_bytes_without_args(self):
        display.display_info(APP_BYTES)
        self.assertIn(APP_TEXT, self.read('Gimp.log'))

    def test_percent_sign_without_args_is_left_alone(self):
        display.display_info(u'100% done with [%s]')
        self.assertIn(u'100% done with [%s]', self.read('Gimp.log'))


class TestDisplayWarningUnicode(DisplayTestCase):
    """Warnings go to the main log, warnings.log and the report"""

    def test_bytes_warning(self):
        display.display_warning(FORMAT_BYTES, APP_BYTES)
        self.assertIn(u'WARNING: ' + EXPECTED, self.read('Gimp.log'))
        self.assertIn(u'WARNING: ' + EXPECTED, self.read('warnings.log'))
        self.assertEqual(reports.report['Warnings'], [EXPECTED])
        self.assertFalse(os.path.exists(os.path.join(self.logdir, 'errors.log')))


class TestDisplayErrorUnicode(DisplayTestCase):
    """Errors go to the main log, errors.log and the report"""

    def test_text_error(self):
        display.display_error(FORMAT_TEXT, APP_TEXT)
        self.assertIn(u'ERROR: ' + EXPECTED, self.read('errors.log'))
        self.assertEqual(reports.report['Errors'], [EXPECTED])

    def test_trailing_whitespace_is_dropped(self):
        display.display_error(APP_BYTES + b'\r\n')
        self.assertEqual(reports.report['Errors'], [APP_TEXT])


def main():
    unittest.main(buffer=True)


if __name__ == '__main__':
    main()
