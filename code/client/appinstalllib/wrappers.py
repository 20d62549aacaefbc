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
wrappers.py

Thin wrappers around plistlib that raise our own exception types
"""

import plistlib


class PlistError(Exception):
    """Base error for plists"""
    pass


class PlistReadError(PlistError):
    """Error when reading plists"""
    pass


class PlistWriteError(PlistError):
    """Error when writing plists"""
    pass


# Disable PyLint complaining about 'invalid' camelCase names
# pylint: disable=C0103

def readPlist(filepath):
    '''Reads a plist file, raising PlistReadError on failure'''
    try:
        with open(filepath, "rb") as fileobj:
            return plistlib.load(fileobj)
    except Exception as err:
        raise PlistReadError(err)


def readPlistFromString(bytestring):
    '''Parses a plist from bytes, raising PlistReadError on failure'''
    try:
        return plistlib.loads(bytestring)
    except Exception as err:
        raise PlistReadError(err)


def writePlist(data, filepath):
    '''Writes data as an XML plist, raising PlistWriteError on failure'''
    try:
        with open(filepath, "wb") as fileobj:
            plistlib.dump(data, fileobj)
    except Exception as err:
        raise PlistWriteError(err)

# pylint: enable=C0103


def unicode_or_str(something, encoding="UTF-8"):
    '''Returns something as a str, decoding bytes if needed'''
    if isinstance(something, bytes):
        return str(something, encoding)
    return str(something)
