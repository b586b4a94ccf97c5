#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart utilities package.

Common helpers shared by the bootloader protocol engine and the applications.
"""
