#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart utilities exception classes."""

from stmuart.exceptions import StmUartError


class StmUartTimeoutError(StmUartError, TimeoutError):
    """stmuart timeout exception for operations that exceed time limits.

    Raised by the transport when the expected amount of data does not arrive
    within the configured read timeout, or a write does not complete in time.
    """
