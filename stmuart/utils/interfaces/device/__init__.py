#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart low-level device interface abstractions.

This module provides the abstract transport contract and its serial port
implementation.
"""
