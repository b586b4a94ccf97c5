#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STM32 USART bootloader session.

This module provides the StmDevice class which owns one transport, wakes the
bootloader and runs its commands with a bounded retry policy.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from typing_extensions import Self

from stmuart.exceptions import StmUartValueError
from stmuart.stmboot.commands import (
    WAKE_BYTE,
    CmdPacket,
    Command,
    CommonCommand,
    ResponseValue,
    encode_multi,
    encode_single,
    parse_response,
)
from stmuart.stmboot.exceptions import (
    TRANSPORT_ERRORS,
    StmBootAlreadyInitialisedError,
    StmBootCommandError,
    StmBootRetryExceededError,
    StmBootUninitialisedError,
)
from stmuart.stmboot.protocol import BootloaderVersion, ProtocolInfo, ProtocolVersion
from stmuart.utils.exceptions import StmUartTimeoutError
from stmuart.utils.interfaces.device.base import DeviceBase
from stmuart.utils.misc import hexlify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductId:
    """Product identifier reported by the GetId command.

    STM32 devices report a two byte, big-endian identifier. Payloads of any other
    length are kept as they are.
    """

    raw: bytes

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Create the product ID from the GetId payload.

        :param data: Payload without the leading length byte.
        :return: Product identifier.
        """
        return cls(raw=bytes(data))

    @property
    def is_stm32(self) -> bool:
        """Whether this is a standard 16-bit STM32 identifier."""
        return len(self.raw) == 2

    @property
    def pid(self) -> Optional[int]:
        """Get the 16-bit STM32 identifier.

        :return: Identifier, or None for non-standard payloads.
        """
        if not self.is_stm32:
            return None
        return int.from_bytes(self.raw, byteorder="big")

    def __str__(self) -> str:
        if self.pid is not None:
            return f"{self.pid:#06x}"
        return f"unknown ({hexlify(self.raw)})"


########################################################################################################################
# STM32 Bootloader Session Class
########################################################################################################################
class StmDevice:
    """Session with an STM32 USART bootloader.

    The session must be woken up with :meth:`initialise` before any command is
    issued. Commands which fail on the transport are retried up to
    ``retry_count`` times; an explicit NACK ends the command at once.

    :cvar DEFAULT_RETRY_COUNT: Number of attempts made for one command.
    :cvar MAX_READ_SIZE: Maximum number of bytes one ReadMemory command returns.
    """

    DEFAULT_RETRY_COUNT = 5
    MAX_READ_SIZE = 256

    def __init__(self, device: DeviceBase, retry_count: int = DEFAULT_RETRY_COUNT) -> None:
        """Initialize the session.

        :param device: Transport to the bootloader, owned by this session from now on.
        :param retry_count: Attempts made for each command, defaults to 5.
        """
        if retry_count < 1:
            raise StmUartValueError(f"Retry count must be positive, got {retry_count}")
        self._device = device
        self.retry_count = retry_count
        self._initialised = False
        self._protocol_version: Optional[ProtocolVersion] = None
        self.available_commands: list[Command] = []

    @property
    def initialised(self) -> bool:
        """Whether the wake-up sequence succeeded."""
        return self._initialised

    @property
    def protocol_version(self) -> Optional[ProtocolVersion]:
        """Get the protocol version, None until queried from the device."""
        return self._protocol_version

    @property
    def is_opened(self) -> bool:
        """Check if the transport is open."""
        return self._device.is_opened

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(self, *args: Any, **kwargs: Any) -> None:
        self.close()

    def open(self) -> None:
        """Open the transport.

        :raises StmUartConnectionError: If the connection to the device fails.
        """
        logger.info(f"Connect: {str(self._device)}")
        self._device.open()

    def close(self) -> None:
        """Close the transport."""
        logger.info(f"Closing: {str(self._device)}")
        self._device.close()

    # ------------------------------------------------------------------------------------------------------------------
    # Bootloader operations
    # ------------------------------------------------------------------------------------------------------------------
    def initialise(self) -> None:
        """Wake up the bootloader.

        Sends the wake byte and waits for ACK. NACKs received meanwhile are line
        noise of the baud rate detection and are skipped.

        :raises StmBootAlreadyInitialisedError: The session is already initialised.
        :raises StmBootUnexpectedResponseError: The device answered neither ACK nor NACK.
        :raises StmUartTimeoutError: The device did not answer.
        """
        if self._initialised:
            raise StmBootAlreadyInitialisedError()
        logger.info("CMD: Wake up")
        self._device.write(bytes([WAKE_BYTE]))
        while self._read_response() is ResponseValue.NACK:
            logger.debug("CMD: NACK during wake up, waiting for ACK")
        self._initialised = True
        logger.info("CMD: Device awoken successfully")

    def get_protocol(self) -> ProtocolVersion:
        """Get the protocol version and the list of supported commands.

        The supported commands are stored in :attr:`available_commands`.

        :return: Protocol version as ``(major, minor)``.
        :raises StmBootUnknownCommandsError: The device lists opcodes unknown to its version.
        """
        logger.info("CMD: Get")
        self.retry_command(CommonCommand.GET)
        payload = self._read_sized_payload()
        self._read_trailing_ack(CommonCommand.GET)
        info = ProtocolInfo.parse(payload)
        self._set_protocol_version(info.version)
        self.available_commands = info.commands
        return info.version

    def get_version(self) -> BootloaderVersion:
        """Get the protocol version and the read protection option bytes.

        :return: Version and the two option bytes.
        """
        logger.info("CMD: GetVersion")
        self.retry_command(CommonCommand.GET_VERSION)
        payload = self._device.read(3)
        self._read_trailing_ack(CommonCommand.GET_VERSION)
        version = BootloaderVersion.parse(payload)
        self._set_protocol_version(version.version)
        return version

    def get_id(self) -> ProductId:
        """Get the product identifier.

        :return: Product ID.
        """
        logger.info("CMD: GetId")
        self.retry_command(CommonCommand.GET_ID)
        payload = self._read_sized_payload()
        self._read_trailing_ack(CommonCommand.GET_ID)
        product_id = ProductId.parse(payload)
        logger.info(f"CMD: Product ID {product_id}")
        return product_id

    def read_memory(self, address: int, count: int) -> bytes:
        """Read ``count + 1`` bytes of memory.

        :param address: Start address (32 bits).
        :param count: Number of bytes to read minus one (0-255).
        :return: Data read.
        :raises StmUartValueError: Address or count out of range.
        :raises StmBootCommandError: The device rejected the command, address or count.
        """
        if not 0 <= address <= 0xFFFFFFFF:
            raise StmUartValueError(f"Address {address:#x} does not fit into 32 bits")
        if not 0 <= count <= 0xFF:
            raise StmUartValueError(f"Count {count} does not fit into one byte")
        logger.info(f"CMD: ReadMemory(address={address:#010x}, length={count + 1})")
        self.retry_command(CommonCommand.READ_MEMORY)
        self._device.write(encode_multi(address.to_bytes(4, byteorder="big")))
        self._expect_ack(CommonCommand.READ_MEMORY, f"address {address:#010x} rejected")
        self._device.write(encode_single(count))
        self._expect_ack(CommonCommand.READ_MEMORY, f"byte count {count + 1} rejected")
        return self._device.read(count + 1)

    def read_memory_range(self, address: int, length: int) -> bytes:
        """Read a memory region of any length, in chunks of at most 256 bytes.

        :param address: Start address.
        :param length: Number of bytes to read.
        :return: Data read.
        :raises StmUartValueError: The region is empty or does not fit into 32-bit address space.
        """
        if length <= 0:
            raise StmUartValueError(f"Length must be positive, got {length}")
        if address < 0 or address + length > 0x1_0000_0000:
            raise StmUartValueError(
                f"Region {address:#x}+{length:#x} does not fit into 32-bit address space"
            )
        data = bytearray()
        while len(data) < length:
            chunk = min(self.MAX_READ_SIZE, length - len(data))
            data += self.read_memory(address + len(data), chunk - 1)
        logger.info(f"CMD: Successfully Received {len(data)} Bytes")
        return bytes(data)

    # ------------------------------------------------------------------------------------------------------------------
    # Command issuing
    # ------------------------------------------------------------------------------------------------------------------
    def issue_command(self, command: Command) -> None:
        """Send one command and wait for its acknowledgement.

        :param command: Command to send.
        :raises StmBootUninitialisedError: The session has not been initialised.
        :raises StmBootCommandError: The device answered NACK.
        :raises StmUartTimeoutError: No answer within the transport timeout.
        """
        if not self._initialised:
            raise StmBootUninitialisedError()
        packet = CmdPacket(command)
        logger.debug(f"TX-CMD: {packet}")
        self._device.write(packet.export())
        self._expect_ack(command)

    def retry_command(self, command: Command) -> None:
        """Issue a command, retrying transport failures.

        NACK is a definitive answer of the device and ends the command immediately.
        Only transport errors consume further attempts.

        :param command: Command to send.
        :raises StmBootCommandError: The device answered NACK.
        :raises StmBootRetryExceededError: All attempts failed on the transport.
        """
        last_error: Optional[Exception] = None
        for attempt in range(1, self.retry_count + 1):
            try:
                self.issue_command(command)
                return
            except TRANSPORT_ERRORS as exc:
                last_error = exc
                logger.warning(f"CMD: {command} attempt {attempt}/{self.retry_count} failed: {exc}")
        raise StmBootRetryExceededError(command, self.retry_count) from last_error

    # ------------------------------------------------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------------------------------------------------
    def _set_protocol_version(self, version: ProtocolVersion) -> None:
        if self._protocol_version is None:
            self._protocol_version = version
            logger.info(f"CMD: Protocol version {version}")
        elif self._protocol_version != version:
            logger.warning(
                f"Device reported protocol version {version}, keeping {self._protocol_version}"
            )

    def _read_byte(self) -> int:
        return self._device.read(1)[0]

    def _read_response(self) -> ResponseValue:
        response = parse_response(self._read_byte())
        logger.debug(f"RX-RESPONSE: {response.label}")
        return response

    def _expect_ack(self, command: Command, desc: str = "received NACK") -> None:
        if self._read_response() is ResponseValue.NACK:
            raise StmBootCommandError(command, desc)

    def _read_sized_payload(self) -> bytes:
        """Read a payload preceded by its length minus one."""
        length = self._read_byte() + 1
        return self._device.read(length)

    def _read_trailing_ack(self, command: Command) -> None:
        """Read the acknowledgement closing a response payload.

        A missing acknowledgement is tolerated; one that arrives must be ACK.
        """
        try:
            value = self._read_byte()
        except StmUartTimeoutError:
            logger.warning(f"CMD: No acknowledgement after {command} payload")
            return
        if parse_response(value) is ResponseValue.NACK:
            raise StmBootCommandError(command, "received NACK after response payload")
