#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart logging utilities with colored console output support."""

import logging
import logging.handlers
import os
import platform
import re
import sys
from datetime import datetime
from typing import Optional, TextIO

import colorama

from stmuart import STMUART_DEBUG_LOG_FILE, STMUART_DEBUG_LOGGING_DISABLED, __version__

colorama.just_fix_windows_console()


class ColoredFormatter(logging.Formatter):
    """stmuart Colored Logging Formatter.

    Prints every level in its own color; debug and problem levels also show
    the source location.
    """

    FORMAT = logging.BASIC_FORMAT
    FORMAT_DEBUG = FORMAT + " (%(relativeCreated)dms since start, %(filename)s:%(lineno)d)"

    COLORED_FORMATS = {
        logging.DEBUG: colorama.Fore.BLUE + FORMAT_DEBUG + colorama.Fore.RESET,
        logging.INFO: colorama.Fore.WHITE
        + colorama.Style.BRIGHT
        + FORMAT
        + colorama.Fore.RESET
        + colorama.Style.RESET_ALL,
        logging.WARNING: colorama.Fore.YELLOW + FORMAT_DEBUG + colorama.Fore.RESET,
        logging.ERROR: colorama.Fore.RED + FORMAT_DEBUG + colorama.Fore.RESET,
        logging.CRITICAL: colorama.Fore.RED
        + colorama.Style.BRIGHT
        + FORMAT_DEBUG
        + colorama.Fore.RESET
        + colorama.Style.RESET_ALL,
    }
    FORMATS = {
        logging.DEBUG: FORMAT_DEBUG,
        logging.INFO: FORMAT,
        logging.WARNING: FORMAT_DEBUG,
        logging.ERROR: FORMAT_DEBUG,
        logging.CRITICAL: FORMAT_DEBUG,
    }

    def __init__(self, colored: bool = True) -> None:
        """Overloaded init method to add colored parameter."""
        super().__init__()
        self.colored = colored
        self.formats = self.COLORED_FORMATS if colored else self.FORMATS

    def format(self, record: logging.LogRecord) -> str:
        """Modified format method.

        :param record: Input logging record to print.
        :return: Formatted logging string.
        """
        formatter = logging.Formatter(self.formats.get(record.levelno))
        if not self.colored and isinstance(record.msg, str):
            record.msg = re.sub(r"\x1b\[\d{1,3}m", "", record.msg)
        return formatter.format(record)


def install(
    level: Optional[int] = None,
    stream: TextIO = sys.stderr,
    colored: Optional[bool] = None,
    create_debug_logger: bool = True,
) -> None:
    """Install stmuart log handler for colored output.

    :param level: logging level, defaults to logging.WARNING
    :param stream: stream to output logging, defaults to sys.stderr
    :param colored: colored output, detected from the stream if not given
    :param create_debug_logger: also log everything into the rotating debug log file
    """
    level = level or logging.WARNING
    target_logger = logging.getLogger("stmuart")
    target_logger.setLevel(logging.DEBUG)

    color = "NO_COLOR" not in os.environ and hasattr(stream, "isatty") and stream.isatty()
    if colored is not None:
        color = colored

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(color))
    target_logger.addHandler(handler)

    if not create_debug_logger or STMUART_DEBUG_LOGGING_DISABLED:
        return
    try:
        for h in target_logger.handlers:
            if (
                isinstance(h, logging.handlers.RotatingFileHandler)
                and h.baseFilename == STMUART_DEBUG_LOG_FILE
            ):
                return
        os.makedirs(os.path.dirname(STMUART_DEBUG_LOG_FILE), exist_ok=True)
        debug_handler = logging.handlers.RotatingFileHandler(
            STMUART_DEBUG_LOG_FILE, mode="a", maxBytes=1_000_000, backupCount=5, encoding="utf-8"
        )
        debug_handler.setFormatter(ColoredFormatter(colored=False))
        debug_handler.setLevel(logging.DEBUG)
        target_logger.addHandler(debug_handler)

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        starter = f"* STMUART DEBUG LOGGING STARTED {timestamp} *"
        padding = len(starter) - 2
        target_logger.debug("*" * len(starter))
        target_logger.debug(starter)
        target_logger.debug(f"* stmuart version: {__version__}".ljust(padding) + " *")
        target_logger.debug(f"* Python version: {sys.version.split()[0]}".ljust(padding) + " *")
        target_logger.debug(f"* OS version: {platform.platform()}".ljust(padding) + " *")
        target_logger.debug(f"* Last command: {sys.argv}".ljust(padding) + " *")
        target_logger.debug("*" * len(starter))
    except Exception as e:  # pylint: disable=broad-except
        target_logger.warning(f"Failed to initialize debug logging: {str(e)}")
