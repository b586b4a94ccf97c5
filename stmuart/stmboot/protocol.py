#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STM32 bootloader protocol version handling.

The version byte reported by the device selects which extended command set is
active, and therefore what an ambiguous opcode byte means.
"""

import logging
from typing import NamedTuple, Optional

from typing_extensions import Self

from stmuart.stmboot.commands import (
    COMMAND_SETS,
    Command,
    CommandSet,
    CommonCommand,
)
from stmuart.stmboot.exceptions import StmBootProtocolError, StmBootUnknownCommandsError

logger = logging.getLogger(__name__)


class ProtocolVersion(NamedTuple):
    """Bootloader protocol version as a ``(major, minor)`` pair."""

    major: int
    minor: int

    @classmethod
    def parse(cls, value: int) -> Self:
        """Split a version byte into its nibbles.

        :param value: Version byte, e.g. ``0x31`` for version 3.1.
        :return: Parsed protocol version.
        """
        return cls(major=(value >> 4) & 0x0F, minor=value & 0x0F)

    @property
    def command_set(self) -> CommandSet:
        """Get the extended command set selected by this version.

        :return: PRE_V4 for major versions below 4, POST_V4 otherwise.
        """
        return CommandSet.PRE_V4 if self.major < 4 else CommandSet.POST_V4

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


def resolve_command(value: int, version: Optional[ProtocolVersion]) -> Optional[Command]:
    """Find the command an opcode byte stands for.

    Common commands match first. Without a known version nothing else can match;
    with a version only the extended set of that version is searched.

    :param value: Opcode byte.
    :param version: Protocol version of the device, None if not known yet.
    :return: The command, or None if the byte is not an opcode under this version.
    """
    if CommonCommand.contains(value):
        return CommonCommand.from_tag(value)
    if version is None:
        return None
    extended = COMMAND_SETS[version.command_set]
    if extended.contains(value):
        return extended.from_tag(value)
    return None


class ProtocolInfo(NamedTuple):
    """Payload of the Get command: version and supported commands."""

    version: ProtocolVersion
    commands: list[Command]

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse the Get command payload.

        The first byte is the version, each following byte must be an opcode
        valid under that version.

        :param data: Payload without the leading length byte.
        :return: Parsed protocol information.
        :raises StmBootProtocolError: The payload is empty.
        :raises StmBootUnknownCommandsError: Some bytes are no commands, all of them are reported.
        """
        if not data:
            raise StmBootProtocolError("missing byte for protocol version")
        version = ProtocolVersion.parse(data[0])
        commands: list[Command] = []
        unknown: list[int] = []
        for value in data[1:]:
            command = resolve_command(value, version)
            if command is None:
                unknown.append(value)
            else:
                commands.append(command)
        if unknown:
            raise StmBootUnknownCommandsError(version, unknown)
        logger.debug(f"Protocol {version}: {', '.join(str(c) for c in commands)}")
        return cls(version=version, commands=commands)


class BootloaderVersion(NamedTuple):
    """Payload of the GetVersion command."""

    version: ProtocolVersion
    option_bytes: bytes

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse the GetVersion payload.

        :param data: Version byte followed by two option bytes.
        :return: Parsed bootloader version.
        :raises StmBootProtocolError: The payload does not have three bytes.
        """
        if len(data) != 3:
            raise StmBootProtocolError(f"invalid GetVersion payload length {len(data)}")
        return cls(version=ProtocolVersion.parse(data[0]), option_bytes=bytes(data[1:]))
