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
fetch.py

Downloading the disk image with curl, and asking the web server when it
last changed.
"""

import os
import subprocess

from . import display
from . import processes
from . import utils
from . import waits
from .constants import CURL, STATE_INSTALLING


class Error(Exception):
    """Base exception for fetch errors"""
    pass


class DownloadError(Error):
    """curl failed to download the item. args are (curl exit code,
    description)"""

    def __init__(self, code, description):
        super(DownloadError, self).__init__(code, description)
        self.code = code
        self.description = description

    def __str__(self):
        return '%s (curl exit code %s)' % (self.description, self.code)


def header_dict_from_list(array):
    """Given a list of strings in http header format, return a dict.
    Header names are lowercased. Later headers with the same name win,
    so after a redirect chain we keep the final response's values."""
    header_dict = {}
    for item in array:
        (key, sep, value) = item.partition(':')
        if sep and value.strip():
            header_dict[key.strip().lower()] = value.strip()
    return header_dict


def parse_last_modified(header_text):
    '''Returns the Last-Modified value found in curl -I output, or ""'''
    headers = header_dict_from_list(header_text.replace('\r', '').splitlines())
    return headers.get('last-modified', '')


def get_last_modified(url):
    """Returns the Last-Modified header for url as a string; an empty
    string if the server didn't send one or couldn't be reached."""
    retcode, stdout, stderr = utils.run_command([CURL, '-sIL', url])
    if retcode:
        display.display_warning(
            'curl exited with %s while checking %s: %s',
            retcode, url, stderr.strip())
    last_modified = parse_last_modified(stdout)
    display.display_detail('Last-Modified for %s is [%s]', url, last_modified)
    return last_modified


def curl_is_running():
    '''True if any curl process is running'''
    return processes.is_process_running('curl')


def wait_for_other_downloads(config, sleep=None):
    """Pause while other curl processes are running to avoid swamping the
    network connection"""
    display.display_status_minor('Waiting for other Curl processes to end')
    waiter = waits.waiter_for(
        config, config.download_wait_interval, sleep=sleep)
    waiter.wait_while(curl_is_running, 'Another instance of Curl is running')
    display.display_status_minor('No instances of Curl found, safe to proceed')


def download_command(config):
    '''Returns the curl command line used to download the disk image'''
    return [CURL, '-f', '-s',
            '--connect-timeout', str(config.curl_connect_timeout),
            '--retry', str(config.curl_retries),
            '--retry-delay', str(config.curl_retry_delay),
            '-L', '-o', config.temp_file, config.download_url]


def download(config, reporter, sleep=None):
    """Downloads config.download_url to config.temp_file.

    Raises DownloadError if curl fails; no partial download is left
    behind in that case."""
    display.display_status_major('Starting downloading of [%s]', config.app_name)

    wait_for_other_downloads(config, sleep=sleep)

    reporter.report_phase(STATE_INSTALLING)
    display.display_status_major('Downloading %s', config.app_name)
    try:
        retcode = subprocess.call(download_command(config))
    except OSError as err:
        display.display_error('Could not run %s: %s', CURL, err)
        retcode = 127
    if retcode:
        try:
            utils.remove_file(config.temp_file)
        except OSError as err:
            display.display_warning(
                'Could not remove partial download %s: %s',
                config.temp_file, err)
        raise DownloadError(
            retcode, 'Failure to download [%s] to [%s]'
            % (config.download_url, config.temp_file))

    try:
        size = os.path.getsize(config.temp_file)
        display.display_info(
            'Downloaded %s', utils.human_readable_size(size))
    except OSError:
        pass
    display.display_status_major('Downloaded [%s]', config.app_bundle_name)


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
