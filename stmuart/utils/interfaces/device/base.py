#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart device interface base class.

This module provides the abstract base class for the byte transport consumed by
the bootloader session.
"""

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from typing_extensions import Self

logger = logging.getLogger(__name__)


class DeviceBase(ABC):
    """Abstract base class for device communication interfaces.

    A device is a duplex byte channel with a fixed read timeout. ``read`` returns
    exactly the requested number of bytes or raises; ``write`` sends all bytes or
    raises.
    """

    def __enter__(self) -> Self:
        """Open the device and return it for use in a ``with`` block.

        :return: The device instance itself.
        """
        self.open()
        return self

    def __exit__(
        self,
        exception_type: Optional[Type[Exception]] = None,
        exception_value: Optional[Exception] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        """Close the device when leaving a ``with`` block.

        :param exception_type: Type of exception that caused the context to exit, if any.
        :param exception_value: Exception instance that caused the context to exit, if any.
        :param traceback: Traceback object associated with the exception, if any.
        """
        self.close()

    @property
    @abstractmethod
    def is_opened(self) -> bool:
        """Indicates whether interface is open.

        :return: True if interface is open, False otherwise.
        """

    @abstractmethod
    def open(self) -> None:
        """Open the interface.

        :raises StmUartConnectionError: If the interface cannot be opened.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the interface and release its resources."""

    @abstractmethod
    def read(self, length: int) -> bytes:
        """Read exactly ``length`` bytes from the device.

        :param length: Length of data to be read in bytes.
        :return: Data read from the device.
        :raises StmUartTimeoutError: Fewer bytes arrived within the configured timeout.
        :raises StmUartConnectionError: The read failed.
        """

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write all of ``data`` to the device.

        :param data: Data to be written to the device.
        :raises StmUartTimeoutError: The write did not complete in time.
        :raises StmUartConnectionError: The write failed.
        """

    @property
    @abstractmethod
    def timeout(self) -> int:
        """Get the read timeout value.

        :return: Timeout value in milliseconds.
        """

    @abstractmethod
    def __str__(self) -> str:
        """Return string containing information about the interface."""
