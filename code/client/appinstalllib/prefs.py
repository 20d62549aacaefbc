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
prefs.py

Preferences for installgimp.

Values are looked up the way other macOS management tools do it, so an admin
can ship a configuration profile for the InstallGimp domain:
    - MCX/configuration profile
    - /var/root/Library/Preferences/InstallGimp.plist
    - /Library/Preferences/InstallGimp.plist
    - DEFAULT_PREFS defined here.

Everything the rest of the code needs is gathered once into an immutable
InstallerConfig by load_config() and handed to each component.
"""

import collections
import os
from xml.parsers.expat import ExpatError

from .constants import BUNDLE_ID, PREFS_PLIST_PATH
from .wrappers import readPlist, PlistReadError

FOUNDATION_SUPPORT = True
try:
    # PyLint cannot properly find names inside Cocoa libraries, so issues bogus
    # No name 'Foo' in module 'Bar' warnings. Disable them.
    # pylint: disable=E0611
    from Foundation import CFPreferencesCopyAppValue
    # pylint: enable=E0611
except ImportError:
    # CoreFoundation/Foundation isn't available
    FOUNDATION_SUPPORT = False


DEFAULT_PREFS = {
    'AppBundleName': 'Gimp.app',
    'AppName': 'Gimp',
    'ApplicationsDir': '/Applications',
    'AppRunningWaitInterval': 300,
    'CurlConnectTimeout': 30,
    'CurlRetries': 5,
    'CurlRetryDelay': 60,
    'DownloadURL': 'https://neiljohn.blob.core.windows.net/macapps/gimp.dmg',
    'DownloadWaitInterval': 10,
    'Group': 'wheel',
    'LogAndMetaDir': '/Library/Logs/Microsoft/IntuneScripts/installGimp',
    'LoggingLevel': 1,
    'LogToSyslog': False,
    'MountPoint': '/tmp/Gimp',
    'OctoryDir': '/Library/Application Support/Octory',
    'Owner': 'root',
    'ProcessPath': '/Applications/Gimp.app/Contents/MacOS/gimp',
    'RosettaMarkerPath': ('/Library/Apple/System/Library/LaunchDaemons/'
                          'com.apple.oahd.plist'),
    'SoftwareUpdateWaitInterval': 10,
    'TempFile': '/tmp/gimp.dmg',
    'TerminateProcess': False,
    'WaitTimeout': 0,
}

_INT_PREFS = ('AppRunningWaitInterval', 'CurlConnectTimeout', 'CurlRetries',
              'CurlRetryDelay', 'DownloadWaitInterval', 'LoggingLevel',
              'SoftwareUpdateWaitInterval', 'WaitTimeout')


InstallerConfig = collections.namedtuple('InstallerConfig', [
    'download_url',
    'app_name',
    'app_bundle_name',
    'applications_dir',
    'process_path',
    'terminate_process',
    'log_and_meta_dir',
    'temp_file',
    'mount_point',
    'owner',
    'group',
    'curl_connect_timeout',
    'curl_retries',
    'curl_retry_delay',
    'download_wait_interval',
    'software_update_wait_interval',
    'app_running_wait_interval',
    'wait_timeout',
    'rosetta_marker_path',
    'octory_dir',
    'logging_level',
    'log_to_syslog',
])


class ConfigError(Exception):
    """A preference has a value we can't use"""
    pass


if FOUNDATION_SUPPORT:
    def pref(pref_name):
        """Return a preference. Since this uses CFPreferencesCopyAppValue,
        preferences can be defined several places; see the module
        docstring for the precedence."""
        pref_value = CFPreferencesCopyAppValue(pref_name, BUNDLE_ID)
        if pref_value is None:
            pref_value = DEFAULT_PREFS.get(pref_name)
        return pref_value

else:
    def pref(pref_name):
        """Returns a preference for pref_name. This is a fallback mechanism
        if CoreFoundation functions are not available -- reads
        /Library/Preferences/InstallGimp.plist directly"""
        if not hasattr(pref, 'cache'):
            pref.cache = None
        if pref.cache is None:
            try:
                pref.cache = readPlist(PREFS_PLIST_PATH)
            except (IOError, OSError, ExpatError, PlistReadError):
                pref.cache = {}
        if pref_name in pref.cache:
            return pref.cache[pref_name]
        return DEFAULT_PREFS.get(pref_name)


def _as_bool(value):
    '''Accepts the string forms admins tend to put in plists and scripts'''
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes')
    return bool(value)


def _as_int(pref_name, value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError('%s must be an integer, not %r' % (pref_name, value))


def load_config(overrides=None, pref_func=None):
    """Builds an InstallerConfig from preferences.

    Args:
      overrides: optional dict of preference names to values that take
          precedence over anything stored (used for command-line options
          and by the tests)
      pref_func: function used to look up a preference; defaults to pref()
    Returns:
      InstallerConfig
    Raises:
      ConfigError if a numeric preference isn't numeric
    """
    overrides = overrides or {}
    pref_func = pref_func or pref

    def value(pref_name):
        if pref_name in overrides:
            val = overrides[pref_name]
        else:
            val = pref_func(pref_name)
            if val is None:
                val = DEFAULT_PREFS.get(pref_name)
        if pref_name in _INT_PREFS:
            return _as_int(pref_name, val)
        return val

    app_bundle_name = value('AppBundleName')
    if not app_bundle_name.endswith('.app'):
        app_bundle_name += '.app'

    return InstallerConfig(
        download_url=value('DownloadURL'),
        app_name=value('AppName'),
        app_bundle_name=app_bundle_name,
        applications_dir=value('ApplicationsDir'),
        process_path=value('ProcessPath'),
        terminate_process=_as_bool(value('TerminateProcess')),
        log_and_meta_dir=value('LogAndMetaDir'),
        temp_file=value('TempFile'),
        mount_point=value('MountPoint'),
        owner=value('Owner'),
        group=value('Group'),
        curl_connect_timeout=value('CurlConnectTimeout'),
        curl_retries=value('CurlRetries'),
        curl_retry_delay=value('CurlRetryDelay'),
        download_wait_interval=value('DownloadWaitInterval'),
        software_update_wait_interval=value('SoftwareUpdateWaitInterval'),
        app_running_wait_interval=value('AppRunningWaitInterval'),
        wait_timeout=value('WaitTimeout') or None,
        rosetta_marker_path=value('RosettaMarkerPath'),
        octory_dir=value('OctoryDir'),
        logging_level=value('LoggingLevel'),
        log_to_syslog=_as_bool(value('LogToSyslog')),
    )


def app_path(config):
    '''Where the application bundle lives once installed'''
    return os.path.join(config.applications_dir, config.app_bundle_name)


def log_path(config):
    '''Path of our main log file'''
    return os.path.join(config.log_and_meta_dir, config.app_name + '.log')


def meta_path(config):
    '''Path of the file holding the Last-Modified value of the last install'''
    return os.path.join(config.log_and_meta_dir, config.app_name + '.meta')


def report_path(config):
    '''Path of the plist summarizing the last run'''
    return os.path.join(
        config.log_and_meta_dir, config.app_name + 'Report.plist')


def print_config(config):
    '''Prints the current configuration'''
    print('Current installgimp configuration:')
    max_name_len = max([len(name) for name in config._fields])
    for name, val in zip(config._fields, config):
        if isinstance(val, str):
            val = repr(val)
        print(('%' + str(max_name_len) + 's: %s') % (name, val))
    print(('%' + str(max_name_len) + 's: %s') % (
        'preferences source',
        'CFPreferences (%s)' % BUNDLE_ID if FOUNDATION_SUPPORT
        else PREFS_PLIST_PATH))


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
