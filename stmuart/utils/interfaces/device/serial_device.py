#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart serial device interface implementation.

This module provides the SerialDevice class for exact-length communication
over a UART line, its line configuration and serial port enumeration.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import serial
from serial import Serial, SerialTimeoutException
from serial.tools.list_ports import comports

from stmuart.exceptions import StmUartConnectionError, StmUartPermissionError, StmUartValueError
from stmuart.utils.exceptions import StmUartTimeoutError
from stmuart.utils.interfaces.device.base import DeviceBase
from stmuart.utils.misc import hexlify

logger = logging.getLogger(__name__)

PARITIES = {
    "even": serial.PARITY_EVEN,
    "odd": serial.PARITY_ODD,
    "none": serial.PARITY_NONE,
}
DATA_BITS = (serial.FIVEBITS, serial.SIXBITS, serial.SEVENBITS, serial.EIGHTBITS)
STOP_BITS = (serial.STOPBITS_ONE, serial.STOPBITS_TWO)


@dataclass(frozen=True)
class SerialConfig:
    """Line settings of a serial connection.

    The defaults match the STM32 bootloader: 8 data bits, even parity, one stop bit.

    :cvar DEFAULT_BAUDRATE: Default serial communication speed.
    :cvar DEFAULT_TIMEOUT: Default per-read timeout in milliseconds.
    """

    DEFAULT_BAUDRATE = 9600
    DEFAULT_TIMEOUT = 200

    port: Optional[str] = None
    baudrate: int = DEFAULT_BAUDRATE
    bytesize: int = serial.EIGHTBITS
    parity: str = "even"
    stopbits: int = serial.STOPBITS_ONE
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Validate the line settings.

        :raises StmUartValueError: When any of the settings is out of range.
        """
        if self.baudrate <= 0:
            raise StmUartValueError(f"Invalid baud rate: {self.baudrate}")
        if self.bytesize not in DATA_BITS:
            raise StmUartValueError(f"Invalid number of data bits: {self.bytesize}")
        if self.parity not in PARITIES:
            raise StmUartValueError(
                f"Invalid parity '{self.parity}', expected one of {', '.join(PARITIES)}"
            )
        if self.stopbits not in STOP_BITS:
            raise StmUartValueError(f"Invalid number of stop bits: {self.stopbits}")
        if self.timeout <= 0:
            raise StmUartValueError(f"Invalid timeout: {self.timeout} ms")

    def __str__(self) -> str:
        """Return the settings in the usual ``9600 8E1`` notation."""
        return (
            f"{self.port}: {self.baudrate} "
            f"{self.bytesize}{PARITIES[self.parity]}{self.stopbits}, timeout {self.timeout} ms"
        )


@dataclass(frozen=True)
class SerialPortInfo:
    """Description of a serial port available in the system."""

    name: str
    port_type: str
    product: Optional[str] = None
    manufacturer: Optional[str] = None
    serial_number: Optional[str] = None

    @property
    def usb_details(self) -> str:
        """Get USB product, manufacturer and serial number joined in one line.

        :return: Details string, empty for non-USB ports.
        """
        details = ", ".join(filter(None, [self.product, self.manufacturer]))
        if self.serial_number:
            details = f"{details} ({self.serial_number})".strip()
        return details

    def __str__(self) -> str:
        """Return formatted port description string."""
        text = f"{self.name}: {self.port_type}"
        if self.usb_details:
            text += f"\n    {self.usb_details}"
        return text


def list_serial_ports() -> list[SerialPortInfo]:
    """List serial ports present in the system.

    :return: List of port descriptions sorted by port name.
    """
    ports = []
    for port in sorted(comports(include_links=True), key=lambda p: p.device):
        if port.vid is not None:
            ports.append(
                SerialPortInfo(
                    name=port.device,
                    port_type="USB Port",
                    product=port.product,
                    manufacturer=port.manufacturer,
                    serial_number=port.serial_number,
                )
            )
        else:
            ports.append(SerialPortInfo(name=port.device, port_type="Unknown Port"))
    logger.debug(f"Found {len(ports)} serial ports")
    return ports


class SerialDevice(DeviceBase):
    """stmuart Serial Device Interface.

    Wraps a :class:`serial.Serial` port configured from :class:`SerialConfig`.
    The read timeout is fixed at construction time.
    """

    def __init__(self, config: SerialConfig) -> None:
        """Initialize the UART interface.

        :param config: Line settings of the port.
        :raises StmUartConnectionError: When there is no port available
        :raises StmUartPermissionError: When the permission is denied
        """
        super().__init__()
        self.config = config
        timeout_s = config.timeout / 1000
        try:
            self._device = Serial(
                port=config.port,
                baudrate=config.baudrate,
                bytesize=config.bytesize,
                parity=PARITIES[config.parity],
                stopbits=config.stopbits,
                timeout=timeout_s,
                write_timeout=timeout_s,
            )
        except Exception as e:
            if "PermissionError" in str(e):
                raise StmUartPermissionError(
                    f"Could not open port '{config.port}'. Access denied."
                ) from e
            raise StmUartConnectionError(str(e)) from e

    @property
    def timeout(self) -> int:
        """Get the read timeout.

        :return: Timeout value in milliseconds.
        """
        return self.config.timeout

    @property
    def is_opened(self) -> bool:
        """Check if the serial device is currently open.

        :return: True if device is open, False otherwise.
        """
        return self._device.is_open

    def open(self) -> None:
        """Open the UART interface.

        :raises StmUartPermissionError: When the permission is denied
        :raises StmUartConnectionError: When opening device fails
        """
        if not self.is_opened:
            try:
                self._device.open()
            except Exception as e:
                self.close()
                if "PermissionError" in str(e):
                    raise StmUartPermissionError(str(e)) from e
                raise StmUartConnectionError(str(e)) from e

    def close(self) -> None:
        """Close the UART interface.

        :raises StmUartConnectionError: When closing device fails.
        """
        if self.is_opened:
            try:
                self._device.reset_input_buffer()
                self._device.reset_output_buffer()
                self._device.close()
            except Exception as e:
                raise StmUartConnectionError(str(e)) from e

    def read(self, length: int) -> bytes:
        """Read exactly ``length`` bytes from the serial device.

        :param length: Number of bytes to read from the device.
        :return: Data read from the device.
        :raises StmUartConnectionError: When device is not opened or reading fails.
        :raises StmUartTimeoutError: When not all data arrived before the timeout.
        """
        if not self.is_opened:
            raise StmUartConnectionError("Device is not opened for reading")
        try:
            data = self._device.read(length)
        except Exception as e:
            raise StmUartConnectionError(str(e)) from e
        if len(data) < length:
            raise StmUartTimeoutError(
                f"Received {len(data)} of {length} bytes within {self.timeout} ms"
            )
        logger.debug(f"<{hexlify(data)}>")
        return data

    def write(self, data: bytes) -> None:
        """Send data to device and flush the output.

        :param data: Data bytes to send to the device.
        :raises StmUartTimeoutError: When sending of data times out.
        :raises StmUartConnectionError: When device is not opened or send operation fails.
        """
        if not self.is_opened:
            raise StmUartConnectionError("Device is not opened for writing")
        logger.debug(f"[{hexlify(data)}]")
        try:
            self._device.write(data)
            self._device.flush()
        except SerialTimeoutException as e:
            raise StmUartTimeoutError(
                f"Write timeout error. The timeout is set to {self._device.write_timeout} s."
            ) from e
        except Exception as e:
            raise StmUartConnectionError(str(e)) from e

    def __str__(self) -> str:
        """Return string representation of the UART interface.

        :return: Port name and line settings.
        """
        return str(self.config)
