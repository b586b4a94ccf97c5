#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart applications package.

This package contains the command-line application delivered with stmuart.
"""
