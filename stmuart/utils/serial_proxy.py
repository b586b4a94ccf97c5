#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Serial communication proxy.

This module provides a replacement for :class:`serial.Serial` which answers
writes with pre-recorded responses, so the applications can be exercised
without a bootloader attached.
"""

import logging
from typing import Optional, Type

logger = logging.getLogger(__name__)


class SerialProxy:
    """Serial communication proxy for testing and simulation.

    Every write looks up the written bytes in ``responses`` and appends the
    matching response to the read buffer. Reads consume the buffer; a read past
    its end returns fewer bytes, like a real port hitting its timeout.

    :cvar responses: Dictionary mapping write data to corresponding read responses.
    """

    responses: dict[bytes, bytes] = {}

    @classmethod
    def init_proxy(cls, data: dict[bytes, bytes]) -> "Type[SerialProxy]":
        """Initialize response dictionary of write and read bytes.

        :param data: Dictionary mapping write bytes to corresponding read response bytes.
        :return: SerialProxy class with configured response data.
        """
        cls.responses = data
        return cls

    def __init__(
        self,
        port: str,
        baudrate: int,
        bytesize: int,
        parity: str,
        stopbits: int,
        timeout: float,
        write_timeout: Optional[float] = None,
    ) -> None:
        """Initialize serial proxy with the :class:`serial.Serial` keyword arguments.

        :param port: Serial port name or identifier.
        :param baudrate: Serial communication speed (stored only).
        :param bytesize: Number of data bits (stored only).
        :param parity: Parity (stored only).
        :param stopbits: Number of stop bits (stored only).
        :param timeout: Read timeout value in seconds (stored only).
        :param write_timeout: Write timeout value in seconds (stored only).
        """
        self.port = port
        self.baudrate = baudrate
        self.bytesize = bytesize
        self.parity = parity
        self.stopbits = stopbits
        self.timeout = timeout
        self.write_timeout = write_timeout
        self.is_open = True
        self.buffer = bytes()
        self.written: list[bytes] = []

    def open(self) -> None:
        """Simulate opening a serial port."""
        self.is_open = True

    def close(self) -> None:
        """Simulate closing a serial port."""
        self.is_open = False

    def write(self, data: bytes) -> int:
        """Record the write and queue the response registered for it.

        :param data: Bytes to write, used as key to lookup response in responses dict
        :raises KeyError: If data key is not found in responses dictionary
        :return: Number of bytes written.
        """
        logger.debug(f"I got: {data!r}")
        self.written.append(bytes(data))
        self.buffer += self.responses[bytes(data)]
        return len(data)

    def read(self, length: int) -> bytes:
        """Read portion of the queued data.

        :param length: Amount of data to read from buffer in bytes.
        :return: Data segment read from buffer.
        """
        segment = self.buffer[:length]
        self.buffer = self.buffer[length:]
        logger.debug(f"I responded with: '{segment!r}'")
        return segment

    def __str__(self) -> str:
        """Get string representation of the interface."""
        return self.__class__.__name__

    def reset_input_buffer(self) -> None:
        """Simulate resetting input buffer."""
        self.buffer = bytes()

    def reset_output_buffer(self) -> None:
        """Simulate resetting output buffer."""

    def flush(self) -> None:
        """Simulate flushing the output."""
