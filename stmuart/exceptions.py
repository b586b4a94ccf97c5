#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart exception classes.

This module defines the base of the exception hierarchy used throughout the
stmuart library for consistent error handling and reporting.
"""

from typing import Optional

#######################################################################
# # stmuart Exceptions
#######################################################################


class StmUartError(Exception):
    """stmuart Base Exception.

    All stmuart-specific exceptions inherit from this class. The message is
    rendered from the ``fmt`` template and the stored description.

    :cvar fmt: Default error message format template.
    """

    fmt = "stmuart: {description}"

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base stmuart Exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        If no description is provided, defaults to "Unknown Error".

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class StmUartValueError(StmUartError, ValueError):
    """stmuart standard value error exception."""


class StmUartConnectionError(StmUartError, ConnectionError):
    """stmuart Connection Error exception class.

    Raised when the serial line cannot be opened or an I/O operation on it fails.
    """


class StmUartPermissionError(StmUartError, PermissionError):
    """stmuart permission error exception.

    Raised when the operating system denies access to the serial port.
    """
