#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STM32 bootloader commands, frames and responses.

The bootloader knows three command sets. Opcodes are only unique within one set:
``0x73`` is WriteUnprotect before protocol version 4 and Write from version 4
on. Which one a byte means is decided by :func:`stmuart.stmboot.protocol.resolve_command`.

Frames::

    single byte  [b, b ^ 0xFF]
    multi byte   [b0, b1, ..., bn, b0 ^ b1 ^ ... ^ bn]
"""

from functools import reduce
from typing import Union

from stmuart.stmboot.exceptions import StmBootUnexpectedResponseError
from stmuart.utils.stm_enum import StmEnum

WAKE_BYTE = 0x7F


########################################################################################################################
# Command Sets
########################################################################################################################
class CommandSet(StmEnum):
    """Namespaces of bootloader opcodes."""

    COMMON = (0, "Common", "Commands valid in every protocol version")
    PRE_V4 = (1, "PreV4", "Extended commands of protocol versions below 4.0")
    POST_V4 = (2, "PostV4", "Extended commands of protocol versions 4.0 and above")


class CommonCommand(StmEnum):
    """Commands valid in every protocol version."""

    GET = (0x00, "Get", "Get the protocol version and the supported commands")
    GET_VERSION = (0x01, "GetVersion", "Get the protocol version and option bytes")
    GET_ID = (0x02, "GetId", "Get the product ID")
    READ_MEMORY = (0x11, "ReadMemory", "Read up to 256 bytes of memory")
    GO = (0x21, "Go", "Jump to user application code")
    WRITE_MEMORY = (0x31, "WriteMemory", "Write up to 256 bytes of memory")
    EXTENDED_ERASE = (0x44, "ExtendedErase", "Erase flash pages using two byte addressing")
    WRITE_PROTECT = (0x63, "WriteProtect", "Enable write protection for some sectors")


class PreV4Command(StmEnum):
    """Extended commands of protocol versions below 4.0."""

    ERASE = (0x43, "Erase", "Erase flash pages")
    WRITE_UNPROTECT = (0x73, "WriteUnprotect", "Disable write protection for all sectors")
    READOUT_PROTECT = (0x82, "ReadoutProtect", "Enable read protection")
    READOUT_UNPROTECT = (0x92, "ReadoutUnprotect", "Disable read protection")


class PostV4Command(StmEnum):
    """Extended commands of protocol versions 4.0 and above."""

    SPECIAL = (0x50, "Special", "Generic command for device specific features")
    WRITE = (0x73, "Write", "Write data")


Command = Union[CommonCommand, PreV4Command, PostV4Command]

COMMAND_SETS: dict[CommandSet, type] = {
    CommandSet.COMMON: CommonCommand,
    CommandSet.PRE_V4: PreV4Command,
    CommandSet.POST_V4: PostV4Command,
}


def command_set_of(command: Command) -> CommandSet:
    """Get the namespace a command belongs to.

    :param command: Member of one of the command enumerations.
    :return: Its command set.
    """
    for command_set, enum_cls in COMMAND_SETS.items():
        if isinstance(command, enum_cls):
            return command_set
    raise TypeError(f"{command!r} is not a bootloader command")


########################################################################################################################
# Responses
########################################################################################################################
class ResponseValue(StmEnum):
    """Single byte answers of the bootloader."""

    ACK = (0x79, "ACK", "Command accepted")
    NACK = (0x1F, "NACK", "Command rejected")


def parse_response(value: int) -> ResponseValue:
    """Decode one response byte.

    :param value: Byte received from the device.
    :return: ACK or NACK.
    :raises StmBootUnexpectedResponseError: The byte is neither ACK nor NACK.
    """
    if value == ResponseValue.ACK.tag:
        return ResponseValue.ACK
    if value == ResponseValue.NACK.tag:
        return ResponseValue.NACK
    raise StmBootUnexpectedResponseError(value)


########################################################################################################################
# Frames
########################################################################################################################
def xor_fold(data: bytes) -> int:
    """XOR all bytes together, starting from zero.

    :param data: Bytes to fold.
    :return: Checksum byte.
    """
    return reduce(lambda checksum, b: checksum ^ b, data, 0)


def encode_single(value: int) -> bytes:
    """Frame one byte with its complement.

    :param value: Byte to send (0-255).
    :return: Two byte frame.
    """
    return bytes([value, value ^ 0xFF])


def encode_multi(data: bytes) -> bytes:
    """Frame a payload with its XOR checksum.

    :param data: Payload bytes.
    :return: Payload followed by one checksum byte.
    """
    return bytes(data) + bytes([xor_fold(data)])


class CmdPacket:
    """Command frame sent to the bootloader."""

    def __init__(self, command: Command) -> None:
        """Initialize the command packet.

        :param command: Command to send.
        """
        self.command = command

    def __str__(self) -> str:
        """Return command set, label and opcode of the packet."""
        return f"{command_set_of(self.command).label}::{self.command}"

    def export(self) -> bytes:
        """Return the command as its wire frame.

        :return: Opcode followed by its complement.
        """
        return encode_single(self.command.tag)
