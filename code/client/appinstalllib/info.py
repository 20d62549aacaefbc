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
info.py

Facts about the machine we're running on
"""

import os
import subprocess

from . import display
from .constants import SYSCTL


def cpu_brand_string():
    """Returns the processor description reported by the kernel, like
    'Intel(R) Core(TM) i7-8700B CPU @ 3.20GHz' or 'Apple M1'"""
    try:
        return subprocess.check_output(
            [SYSCTL, '-n', 'machdep.cpu.brand_string']
        ).decode('UTF-8').strip()
    except (OSError, subprocess.CalledProcessError) as err:
        display.display_warning('Could not read processor type: %s', err)
        return ''


def is_apple_silicon():
    """Returns True if we're running on Apple Silicon"""
    arch = os.uname()[4]
    if arch == 'x86_64':
        # we might be natively Intel64, or running under Rosetta.
        # os.uname()[4] returns the current execution arch, which under Rosetta
        # will be x86_64. Since what we want here is the _native_ arch, we
        # check the kernel version string for ARM64
        uname_version = os.uname()[3]
        if 'ARM64' in uname_version:
            arch = 'arm64'
    return arch == 'arm64'


def is_intel(brand_string=None):
    """Returns True on an Intel Mac. The processor brand string is what we
    trust; an empty one falls back to the kernel architecture."""
    if brand_string is None:
        brand_string = cpu_brand_string()
    if brand_string:
        return 'Intel' in brand_string
    return not is_apple_silicon()


if __name__ == '__main__':
    print('This is a library of support tools for installgimp.')
