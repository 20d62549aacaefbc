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
installer.py

Routines for installing the application from the downloaded disk image.

The existing bundle is removed before the new one is copied in, so a failure
part way through leaves the application missing or incomplete; the next run
sees no bundle and installs from scratch.
"""

import os
import shutil
import subprocess

import xattr

from . import display
from . import dmgutils
from . import fetch
from . import prefs
from . import processes
from . import updatecheck
from . import utils
from . import waits
from .constants import CHOWN, DITTO, STATE_INSTALLED, STATE_INSTALLING

# seconds between pkill attempts when we're allowed to quit the app
TERMINATE_RETRY_INTERVAL = 1


class InstallError(Exception):
    """The application could not be installed"""
    pass


def wait_for_app_to_close(config, sleep=None):
    """Either terminates the running application or waits until the user
    closes it, depending on config.terminate_process"""
    display.display_status_major('Checking if the application is running')

    def app_running():
        running = processes.is_process_running(config.process_path)
        if running and config.terminate_process:
            display.display_status_minor(
                '[%s] running, terminating [%s]...',
                config.app_name, config.process_path)
            processes.kill_process(config.process_path)
        return running

    if config.terminate_process:
        waiter = waits.Waiter(TERMINATE_RETRY_INTERVAL,
                              timeout=config.wait_timeout, sleep=sleep)
        waiter.wait_while(app_running)
    else:
        waiter = waits.waiter_for(
            config, config.app_running_wait_interval, sleep=sleep)
        waiter.wait_while(app_running, '[%s] running' % config.app_name)
    display.display_status_minor(
        "[%s] isn't running, lets carry on", config.app_name)


def is_application(pathname):
    '''Returns True if pathname looks like an application bundle'''
    return pathname.endswith('.app') and os.path.isdir(pathname)


def find_app(mountpoint):
    """Returns the name of the first application bundle at the root of
    mountpoint, or None"""
    for item in sorted(os.listdir(mountpoint)):
        if is_application(os.path.join(mountpoint, item)):
            return item
    return None


def remove_quarantine_from_item(some_path):
    '''Removes com.apple.quarantine from some_path'''
    try:
        if ("com.apple.quarantine" in
                xattr.xattr(some_path).list(options=xattr.XATTR_NOFOLLOW)):
            xattr.xattr(some_path).remove("com.apple.quarantine",
                                          options=xattr.XATTR_NOFOLLOW)
    except (IOError, OSError) as err:
        display.display_warning(
            "Error removing com.apple.quarantine from %s: %s", some_path, err)


def remove_quarantine(some_path):
    '''Removes com.apple.quarantine from some_path, recursively'''
    remove_quarantine_from_item(some_path)
    if os.path.isdir(some_path):
        for (dirpath, dirnames, filenames) in os.walk(some_path, topdown=True):
            for filename in filenames:
                remove_quarantine_from_item(os.path.join(dirpath, filename))
            for dirname in dirnames:
                remove_quarantine_from_item(os.path.join(dirpath, dirname))


def remove_existing_app(destination_path):
    '''Deletes the currently installed bundle, if any'''
    if os.path.islink(destination_path) or os.path.isfile(destination_path):
        os.unlink(destination_path)
    elif os.path.isdir(destination_path):
        shutil.rmtree(destination_path)


def copy_app(source_path, destination_path):
    '''Copies the bundle with ditto, preserving HFS+ compression and
    skipping quarantine. Returns ditto's exit code.'''
    try:
        return subprocess.call(
            [DITTO, '--noqtn', source_path, destination_path])
    except OSError as err:
        display.display_error('Could not run %s: %s', DITTO, err)
        return 127


def set_ownership(full_destpath, owner, group):
    '''Sets owner and group recursively. Returns 0 on success, non-zero
    otherwise'''
    display.display_status_minor(
        "Setting owner and group for '%s' to '%s:%s'",
        full_destpath, owner, group)
    try:
        retcode = subprocess.call(
            [CHOWN, '-R', owner + ':' + group, full_destpath])
    except OSError as err:
        display.display_error('Could not run %s: %s', CHOWN, err)
        return 127
    if retcode:
        display.display_warning(
            "Error setting owner and group for %s", full_destpath)
    return retcode


def copy_app_from_mountpoint(mountpoint, destination_path):
    """Replaces destination_path with the first application found at the
    root of mountpoint.

    Raises InstallError if there's no application or the copy fails."""
    appname = find_app(mountpoint)
    if not appname:
        raise InstallError('No application found on %s' % mountpoint)
    source_path = os.path.join(mountpoint, appname)

    try:
        remove_existing_app(destination_path)
    except (OSError, IOError) as err:
        raise InstallError(
            'Error removing existing item at destination: %s' % err)

    display.display_status_minor(
        'Copying %s to %s', source_path, destination_path)
    retcode = copy_app(source_path, destination_path)
    if retcode:
        raise InstallError('Error copying %s to %s (ditto exit code %s)'
                           % (source_path, destination_path, retcode))
    # `man ditto` says --noqtn handles this, but it doesn't always
    remove_quarantine(destination_path)


def install_app_from_dmg(config, reporter, last_modified=None, sleep=None):
    """Installs the application from config.temp_file.

    Args:
      config: InstallerConfig
      reporter: object with a report_phase(state) method
      last_modified: the Last-Modified value fetched during the update
          check; fetched now if None (fresh installs don't fetch it earlier)
      sleep: optional sleep function for the waits
    Raises:
      InstallError on any failure; the metadata file is not updated then.
    """
    destination_path = prefs.app_path(config)

    wait_for_app_to_close(config, sleep=sleep)

    display.display_status_major('Installing [%s]', config.app_name)
    reporter.report_phase(STATE_INSTALLING)

    display.display_status_minor(
        'Mounting [%s] to [%s]', config.temp_file, config.mount_point)
    if dmgutils.path_is_volume_mount_point(config.mount_point):
        # left over from an earlier run that died before unmounting
        display.display_warning(
            '%s is already in use, unmounting it first', config.mount_point)
        dmgutils.unmountdmg(config.mount_point)
    mountpoints = dmgutils.mountdmg(config.temp_file, config.mount_point)
    if not mountpoints:
        raise InstallError(
            'No mountable filesystems on %s' % config.temp_file)
    mountpoint = mountpoints[0]

    try:
        copy_app_from_mountpoint(mountpoint, destination_path)
    finally:
        display.display_status_minor('Un-mounting [%s]', mountpoint)
        detach_result = dmgutils.unmountdmg(mountpoint)

    if detach_result:
        raise InstallError('Failed to unmount %s' % mountpoint)
    if not os.path.exists(destination_path):
        raise InstallError('Failed to install [%s]' % config.app_name)

    display.display_status_minor('[%s] Installed', config.app_name)
    display.display_status_minor('Cleaning Up')
    try:
        utils.remove_file(config.temp_file)
    except OSError as err:
        display.display_warning(
            'Could not remove %s: %s', config.temp_file, err)

    display.display_status_minor('Fixing up permissions')
    set_ownership(destination_path, config.owner, config.group)
    display.display_status_major(
        'Application [%s] successfully installed', config.app_name)

    if last_modified is None:
        last_modified = fetch.get_last_modified(config.download_url)
    updatecheck.write_stored_timestamp(config, last_modified)
    reporter.report_phase(STATE_INSTALLED)


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
