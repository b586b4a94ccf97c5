#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart device communication interfaces.

This module provides the interface layer for talking to a bootloader over
a serial connection.
"""
