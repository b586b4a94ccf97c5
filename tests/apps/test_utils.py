#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart application utilities tests."""

import io
import logging

import click
import pytest

from stmuart.apps.utils import stm_logger, utils
from stmuart.apps.utils.utils import INT, StmUartAppError, catch_error
from stmuart.exceptions import StmUartError
from stmuart.stmboot.commands import CommonCommand
from stmuart.stmboot.exceptions import StmBootCommandError


def test_split_string() -> None:
    assert ["12", "34", "5"] == utils._split_string("12345", length=2)
    assert ["123", "123"] == utils._split_string("123123", length=3)


def test_format_data() -> None:
    data = bytes(range(20))
    expect_8 = "00 01 02 03 04 05 06 07\n08 09 0a 0b 0c 0d 0e 0f\n10 11 12 13"
    assert expect_8 == utils.format_raw_data(data, use_hexdump=False, line_length=8)
    expect_16 = "00 01 02 03 04 05 06 07 08 09 0a 0b 0c 0d 0e 0f\n10 11 12 13"
    assert expect_16 == utils.format_raw_data(data, use_hexdump=False, line_length=16)


def test_format_data_hexdump() -> None:
    result = utils.format_raw_data(b"STM32", use_hexdump=True)
    assert result.startswith("00000000: 53 54 4D 33 32")
    assert "STM32" in result


@pytest.mark.parametrize(
    "value, expected",
    [("10", 10), ("0x10", 16), ("0b101", 5), ("0o17", 15), (7, 7)],
)
def test_int_param(value, expected) -> None:
    assert INT().convert(value) == expected


def test_int_param_invalid() -> None:
    with pytest.raises(click.BadParameter):
        INT().convert("0xZZ")


@pytest.mark.parametrize(
    "exc, code",
    [
        (StmUartAppError("bad input", error_code=4), 4),
        (StmUartAppError(), 1),
        (StmUartError("failed"), 2),
        (StmBootCommandError(CommonCommand.GET), 2),
        (ValueError("general"), 3),
    ],
)
def test_catch_error(exc: Exception, code: int) -> None:
    @catch_error
    def failing() -> None:
        raise exc

    with pytest.raises(SystemExit) as sys_exit:
        failing()
    assert sys_exit.value.code == code


def test_catch_error_passes_result() -> None:
    @catch_error
    def passing() -> int:
        return 42

    assert passing() == 42


def test_colored_formatter_strips_colors() -> None:
    formatter = stm_logger.ColoredFormatter(colored=False)
    record = logging.LogRecord(
        "stmuart", logging.INFO, __file__, 1, "\x1b[31mred\x1b[39m text", None, None
    )
    assert formatter.format(record) == "INFO:stmuart:red text"


def test_install_logger() -> None:
    stream = io.StringIO()
    stm_logger.install(level=logging.INFO, stream=stream, colored=False, create_debug_logger=False)
    logger = logging.getLogger("stmuart.test")
    logger.info("installed")
    logger.debug("hidden")
    assert "INFO:stmuart.test:installed" in stream.getvalue()
    assert "hidden" not in stream.getvalue()
