#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Miscellaneous helper functions."""

import logging
import os
from typing import Union

logger = logging.getLogger(__name__)


def write_file(
    data: Union[str, bytes],
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
    overwrite: bool = True,
) -> int:
    """Write data to a file with automatic directory creation and overwrite protection.

    When overwrite is disabled and the file exists, a unique filename is generated
    by appending a counter.

    :param data: Data to write to the file.
    :param path: Path to the target file.
    :param mode: File writing mode ('w' for text, 'wb' for binary), defaults to 'w'.
    :param encoding: Text encoding, defaults to 'utf-8'.
    :param overwrite: Whether to overwrite existing files, defaults to True.
    :return: Number of characters or bytes written to the file.
    """
    path = path.replace("\\", "/")
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)

    if not overwrite and os.path.exists(path):
        base_path, ext = os.path.splitext(path)
        counter = 1
        new_path = f"{base_path}_{counter}{ext}"
        while os.path.exists(new_path):
            counter += 1
            new_path = f"{base_path}_{counter}{ext}"
        path = new_path
        logger.debug(f"File already exists. Saving to {path} instead")

    logger.debug(f"Storing {'binary' if 'b' in mode else 'text'} file at {path}")
    with open(path, mode, encoding=None if "b" in mode else encoding) as f:
        return f.write(data)


def hexlify(data: bytes) -> str:
    """Render bytes as space separated two digit hex values.

    :param data: Bytes to render.
    :return: String like ``"79 1f"``.
    """
    return " ".join(f"{b:02x}" for b in data)
