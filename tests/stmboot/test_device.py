#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of the STM32 bootloader session."""

import logging

import pytest

from stmuart.exceptions import StmUartConnectionError, StmUartValueError
from stmuart.stmboot import CommonCommand, PostV4Command, PreV4Command, ProtocolVersion, StmDevice
from stmuart.stmboot.exceptions import (
    StmBootAlreadyInitialisedError,
    StmBootCommandError,
    StmBootRetryExceededError,
    StmBootUnexpectedResponseError,
    StmBootUninitialisedError,
    StmBootUnknownCommandsError,
)
from stmuart.utils.exceptions import StmUartTimeoutError
from tests.stmboot.virtual_device import ACK, NACK, VirtualDevice

WAKE = b"\x7f"
GET = b"\x00\xff"
GET_VERSION = b"\x01\xfe"
GET_ID = b"\x02\xfd"
READ_MEMORY = b"\x11\xee"

V3_PAYLOAD = bytes([0x31, 0x00, 0x01, 0x02, 0x11, 0x21, 0x31, 0x44, 0x63, 0x43, 0x73, 0x82, 0x92])
V4_PAYLOAD = bytes([0x40, 0x00, 0x01, 0x02, 0x11, 0x21, 0x31, 0x44, 0x63, 0x50, 0x73])


def sized(payload: bytes) -> bytes:
    """Prefix payload with its length minus one."""
    return bytes([len(payload) - 1]) + payload


def awake_device(responses: list, retry_count: int = StmDevice.DEFAULT_RETRY_COUNT) -> tuple:
    device = VirtualDevice([ACK] + responses)
    stm = StmDevice(device, retry_count=retry_count)
    stm.initialise()
    return stm, device


def test_initialise():
    device = VirtualDevice([ACK])
    stm = StmDevice(device)
    assert not stm.initialised
    stm.initialise()
    assert stm.initialised
    assert device.written == [WAKE]


def test_initialise_skips_nack_noise():
    device = VirtualDevice([NACK, NACK, ACK])
    stm = StmDevice(device)
    stm.initialise()
    assert stm.initialised
    assert device.written == [WAKE]
    assert device.responses == []


def test_initialise_does_not_consume_bytes_after_ack():
    device = VirtualDevice([NACK, ACK, b"\x42"])
    stm = StmDevice(device)
    stm.initialise()
    assert device.responses == [b"\x42"]


def test_initialise_twice():
    stm, device = awake_device([])
    with pytest.raises(StmBootAlreadyInitialisedError):
        stm.initialise()
    assert device.written == [WAKE]


def test_initialise_unexpected_byte():
    stm = StmDevice(VirtualDevice([b"\x55"]))
    with pytest.raises(StmBootUnexpectedResponseError) as exc:
        stm.initialise()
    assert exc.value.value == 0x55
    assert not stm.initialised


def test_initialise_no_response():
    stm = StmDevice(VirtualDevice([]))
    with pytest.raises(StmUartTimeoutError):
        stm.initialise()
    assert not stm.initialised


def test_invalid_retry_count():
    with pytest.raises(StmUartValueError):
        StmDevice(VirtualDevice([]), retry_count=0)


def test_command_before_initialise():
    device = VirtualDevice([ACK])
    stm = StmDevice(device)
    with pytest.raises(StmBootUninitialisedError):
        stm.get_id()
    assert device.written == []


def test_get_protocol_v3():
    stm, device = awake_device([ACK, sized(V3_PAYLOAD), ACK])
    assert stm.protocol_version is None
    version = stm.get_protocol()
    assert version == ProtocolVersion(3, 1)
    assert stm.protocol_version == ProtocolVersion(3, 1)
    assert device.written == [WAKE, GET]
    assert len(stm.available_commands) == 12
    assert CommonCommand.GET in stm.available_commands
    assert PreV4Command.WRITE_UNPROTECT in stm.available_commands
    assert PostV4Command.WRITE not in stm.available_commands
    assert device.responses == []


def test_get_protocol_v4():
    stm, _ = awake_device([ACK, sized(V4_PAYLOAD), ACK])
    assert stm.get_protocol() == ProtocolVersion(4, 0)
    assert PostV4Command.WRITE in stm.available_commands
    assert PostV4Command.SPECIAL in stm.available_commands
    assert PreV4Command.WRITE_UNPROTECT not in stm.available_commands


def test_get_protocol_unknown_commands():
    stm, _ = awake_device([ACK, sized(bytes([0x31, 0x00, 0x99, 0x50])), ACK])
    with pytest.raises(StmBootUnknownCommandsError) as exc:
        stm.get_protocol()
    assert exc.value.unknown_commands == [0x99, 0x50]
    assert exc.value.version == ProtocolVersion(3, 1)


def test_get_protocol_nack_is_not_retried():
    stm, device = awake_device([NACK])
    with pytest.raises(StmBootCommandError) as exc:
        stm.get_protocol()
    assert exc.value.command is CommonCommand.GET
    assert device.written == [WAKE, GET]


def test_unexpected_response_is_not_retried():
    stm, device = awake_device([b"\x00"])
    with pytest.raises(StmBootUnexpectedResponseError):
        stm.get_id()
    assert device.written == [WAKE, GET_ID]


def test_retry_after_timeouts():
    stm, device = awake_device(
        [StmUartTimeoutError(), StmUartConnectionError(), ACK, sized(V3_PAYLOAD), ACK]
    )
    assert stm.get_protocol() == ProtocolVersion(3, 1)
    assert device.written == [WAKE, GET, GET, GET]


def test_retries_exceeded():
    stm, device = awake_device([])
    with pytest.raises(StmBootRetryExceededError) as exc:
        stm.get_id()
    assert exc.value.attempts == 5
    assert exc.value.command is CommonCommand.GET_ID
    assert isinstance(exc.value.__cause__, StmUartTimeoutError)
    assert device.written == [WAKE] + [GET_ID] * 5


def test_retries_exceeded_custom_count():
    stm, device = awake_device([], retry_count=2)
    with pytest.raises(StmBootRetryExceededError):
        stm.get_id()
    assert device.written == [WAKE, GET_ID, GET_ID]


def test_nack_after_timeout_aborts():
    stm, device = awake_device([StmUartTimeoutError(), NACK, ACK])
    with pytest.raises(StmBootCommandError):
        stm.get_id()
    assert device.written == [WAKE, GET_ID, GET_ID]


def test_get_id():
    stm, device = awake_device([ACK, b"\x01\x04\x16", ACK])
    product_id = stm.get_id()
    assert product_id.is_stm32
    assert product_id.pid == 0x0416
    assert str(product_id) == "0x0416"
    assert device.written == [WAKE, GET_ID]


def test_get_id_non_standard():
    stm, _ = awake_device([ACK, b"\x02\x01\x02\x03", ACK])
    product_id = stm.get_id()
    assert not product_id.is_stm32
    assert product_id.pid is None
    assert product_id.raw == b"\x01\x02\x03"
    assert str(product_id) == "unknown (01 02 03)"


def test_missing_trailing_ack_is_tolerated(caplog):
    caplog.set_level(logging.WARNING)
    stm, _ = awake_device([ACK, b"\x01\x04\x16"])
    assert stm.get_id().pid == 0x0416
    assert "No acknowledgement" in caplog.text


def test_trailing_nack():
    stm, _ = awake_device([ACK, b"\x01\x04\x16", NACK])
    with pytest.raises(StmBootCommandError):
        stm.get_id()


def test_get_version():
    stm, device = awake_device([ACK, b"\x31\x00\x00", ACK])
    version = stm.get_version()
    assert version.version == ProtocolVersion(3, 1)
    assert version.option_bytes == b"\x00\x00"
    assert stm.protocol_version == ProtocolVersion(3, 1)
    assert device.written == [WAKE, GET_VERSION]


def test_protocol_version_is_kept(caplog):
    caplog.set_level(logging.WARNING)
    stm, _ = awake_device([ACK, b"\x31\x00\x00", ACK, ACK, sized(V4_PAYLOAD), ACK])
    stm.get_version()
    assert stm.get_protocol() == ProtocolVersion(4, 0)
    assert stm.protocol_version == ProtocolVersion(3, 1)
    assert "keeping 3.1" in caplog.text


def test_read_memory():
    data = bytes(range(4))
    stm, device = awake_device([ACK, ACK, ACK, data])
    assert stm.read_memory(0x0800_0000, 3) == data
    assert device.written == [WAKE, READ_MEMORY, b"\x08\x00\x00\x00\x08", b"\x03\xfc"]


def test_read_memory_single_byte():
    stm, device = awake_device([ACK, ACK, ACK, b"\xaa"])
    assert stm.read_memory(0x2000_0001, 0) == b"\xaa"
    assert device.written[-2:] == [b"\x20\x00\x00\x01\x21", b"\x00\xff"]


def test_read_memory_address_rejected():
    stm, device = awake_device([ACK, NACK])
    with pytest.raises(StmBootCommandError) as exc:
        stm.read_memory(0x1FFF_0000, 15)
    assert "address" in str(exc.value)
    assert len(device.written) == 3


def test_read_memory_count_rejected():
    stm, _ = awake_device([ACK, ACK, NACK])
    with pytest.raises(StmBootCommandError) as exc:
        stm.read_memory(0x0800_0000, 255)
    assert "byte count" in str(exc.value)


def test_read_memory_short_data():
    stm, _ = awake_device([ACK, ACK, ACK, b"\x01\x02"])
    with pytest.raises(StmUartTimeoutError):
        stm.read_memory(0x0800_0000, 3)


@pytest.mark.parametrize(
    "address, count",
    [(-1, 0), (0x1_0000_0000, 0), (0, -1), (0, 256)],
)
def test_read_memory_invalid_arguments(address, count):
    stm, device = awake_device([])
    with pytest.raises(StmUartValueError):
        stm.read_memory(address, count)
    assert device.written == [WAKE]


def test_read_memory_range():
    first = bytes(256)
    second = b"\x11" * 44
    stm, device = awake_device([ACK, ACK, ACK, first, ACK, ACK, ACK, second])
    assert stm.read_memory_range(0x0800_0000, 300) == first + second
    assert device.written[1:4] == [READ_MEMORY, b"\x08\x00\x00\x00\x08", b"\xff\x00"]
    assert device.written[4:] == [READ_MEMORY, b"\x08\x00\x01\x00\x09", b"\x2b\xd4"]


@pytest.mark.parametrize("address, length", [(0, 0), (0xFFFF_FFFF, 2)])
def test_read_memory_range_invalid(address, length):
    stm, _ = awake_device([])
    with pytest.raises(StmUartValueError):
        stm.read_memory_range(address, length)


def test_context_manager():
    device = VirtualDevice([])
    with StmDevice(device) as stm:
        assert stm.is_opened
    assert not device.is_opened


def test_get_protocol_single_unknown_command():
    stm, _ = awake_device([ACK, b"\x01\x31\x99", ACK])
    with pytest.raises(StmBootUnknownCommandsError) as exc:
        stm.get_protocol()
    assert exc.value.unknown_commands == [0x99]
    assert stm.protocol_version is None
    assert stm.available_commands == []


def test_trailing_garbage():
    stm, _ = awake_device([ACK, b"\x01\x04\x16", b"\x55"])
    with pytest.raises(StmBootUnexpectedResponseError):
        stm.get_id()


def test_read_memory_frame_sizes():
    stm, device = awake_device([ACK, ACK, ACK, b"\x00" * 5])
    assert len(stm.read_memory(0x0800_0000, 4)) == 5
    assert [len(frame) for frame in device.written[1:]] == [2, 5, 2]
    assert device.responses == []
