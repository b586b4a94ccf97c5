#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STM32 USART bootloader communication module.

This module provides the protocol engine for the built-in bootloader of STM32
microcontrollers: command framing, ACK/NACK handling, retries and protocol
version dependent command resolution.
"""

from stmuart.stmboot.commands import (
    Command,
    CommandSet,
    CommonCommand,
    PostV4Command,
    PreV4Command,
    ResponseValue,
)
from stmuart.stmboot.device import ProductId, StmDevice
from stmuart.stmboot.protocol import BootloaderVersion, ProtocolVersion, resolve_command

__all__ = [
    "BootloaderVersion",
    "Command",
    "CommandSet",
    "CommonCommand",
    "PostV4Command",
    "PreV4Command",
    "ProductId",
    "ProtocolVersion",
    "ResponseValue",
    "StmDevice",
    "resolve_command",
]
