#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart - host side of the STM32 USART bootloader protocol.

Wakes a microcontroller's built-in bootloader over a serial line, queries its
protocol version and product identity and reads its memory.

MULTIPLE INTERFACES:
    - Pure Python library (:class:`stmuart.stmboot.StmDevice`)
    - ``stmuart`` command-line tool
"""

import os
from typing import Optional, Union

from packaging.version import Version, parse
from platformdirs import PlatformDirs

from .__version__ import __version__ as _raw_version


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


version: Version = parse(_raw_version)

__author__ = "NXP"
__license__ = "BSD-3-Clause"
__version__ = str(version)

STMUART_VERSION_BASE = version.base_version
STMUART_PLATFORM_DIRS = PlatformDirs(
    appauthor="nxp",
    appname="stmuart",
    version=STMUART_VERSION_BASE,
)

STMUART_DEBUG_LOGGING_DISABLED = value_to_bool(os.environ.get("STMUART_DEBUG_LOGGING_DISABLED"))
STMUART_DEBUG_LOG_FILE = os.environ.get(
    "STMUART_DEBUG_LOG_FILE", os.path.join(STMUART_PLATFORM_DIRS.user_log_dir, "debug.log")
)
