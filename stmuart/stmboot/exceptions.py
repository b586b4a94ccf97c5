#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STM32 bootloader exception classes.

State errors are caller mistakes, protocol errors mean the device or firmware
does not behave as expected, command errors carry an explicit NACK and retry
errors report that every attempt failed on the transport.
"""

from typing import TYPE_CHECKING, Sequence

from stmuart.exceptions import StmUartConnectionError, StmUartError
from stmuart.utils.exceptions import StmUartTimeoutError

if TYPE_CHECKING:
    from stmuart.stmboot.commands import Command
    from stmuart.stmboot.protocol import ProtocolVersion

# Errors raised by the transport; the only ones a command retry consumes
TRANSPORT_ERRORS = (StmUartConnectionError, StmUartTimeoutError)


########################################################################################################################
# StmBoot Exceptions
########################################################################################################################


class StmBootError(StmUartError):
    """Base exception class for STM32 bootloader operations.

    :cvar fmt: Default error message format template.
    """

    fmt = "StmBoot: {description}"


class StmBootStateError(StmBootError):
    """Session used in the wrong state."""


class StmBootAlreadyInitialisedError(StmBootStateError):
    """The wake-up sequence was requested on an initialised session."""

    def __init__(self) -> None:
        """Initialize the error with its fixed description."""
        super().__init__("device has already been initialised")


class StmBootUninitialisedError(StmBootStateError):
    """A command was issued before the wake-up sequence succeeded."""

    def __init__(self) -> None:
        """Initialize the error with its fixed description."""
        super().__init__("device is not initialised")


class StmBootProtocolError(StmBootError):
    """The device answered something the protocol does not allow."""


class StmBootUnexpectedResponseError(StmBootProtocolError):
    """A byte other than ACK or NACK arrived where a response was expected."""

    def __init__(self, value: int) -> None:
        """Initialize the error.

        :param value: The offending byte.
        """
        super().__init__(f"expected response, received {value:#04x}")
        self.value = value


class StmBootUnknownCommandsError(StmBootProtocolError):
    """The protocol information lists opcodes unknown to the reported version.

    Every offending byte is kept in ``unknown_commands``, in order of appearance.
    """

    def __init__(self, version: "ProtocolVersion", unknown_commands: Sequence[int]) -> None:
        """Initialize the error.

        :param version: Protocol version reported by the device.
        :param unknown_commands: All bytes that did not resolve to a command.
        """
        self.version = version
        self.unknown_commands = list(unknown_commands)
        listing = ", ".join(f"{b:#04x}" for b in self.unknown_commands)
        super().__init__(f"unknown commands for protocol version {version}: [{listing}]")


class StmBootCommandError(StmBootError):
    """The device rejected a command with NACK.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "StmBoot: {cmd_name} failed -> {description}"

    def __init__(self, command: "Command", desc: str = "received NACK") -> None:
        """Initialize the Command Error exception.

        :param command: The command the device rejected.
        :param desc: What exactly was rejected.
        """
        super().__init__(desc)
        self.command = command
        self.cmd_name = str(command)

    def __str__(self) -> str:
        """Return the message naming the rejected command."""
        return self.fmt.format(cmd_name=self.cmd_name, description=self.description)


class StmBootRetryExceededError(StmBootError):
    """Every attempt to issue a command failed on the transport.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "StmBoot: retries exceeded to run command {cmd_name} -> {description}"

    def __init__(self, command: "Command", attempts: int) -> None:
        """Initialize the retry error.

        :param command: The command that could not be issued.
        :param attempts: Number of attempts made.
        """
        super().__init__(f"{attempts} attempts failed")
        self.command = command
        self.cmd_name = str(command)
        self.attempts = attempts

    def __str__(self) -> str:
        """Return the message naming the command."""
        return self.fmt.format(cmd_name=self.cmd_name, description=self.description)
