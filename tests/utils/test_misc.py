#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of miscellaneous helper functions."""

import os

from stmuart.utils.misc import hexlify, write_file


def test_hexlify() -> None:
    assert hexlify(b"") == ""
    assert hexlify(b"\x79\x1f") == "79 1f"


def test_write_file(tmpdir) -> None:
    path = os.path.join(tmpdir, "sub", "data.bin")
    assert write_file(b"\x01\x02", path, mode="wb") == 2
    with open(path, "rb") as f:
        assert f.read() == b"\x01\x02"


def test_write_file_no_overwrite(tmpdir) -> None:
    path = os.path.join(tmpdir, "data.txt")
    write_file("first", path)
    write_file("second", path, overwrite=False)
    with open(path) as f:
        assert f.read() == "first"
    with open(os.path.join(tmpdir, "data_1.txt")) as f:
        assert f.read() == "second"
