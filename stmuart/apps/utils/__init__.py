#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""stmuart application utilities and helper functions.

This module provides common helpers used by the stmuart command-line application.
"""
