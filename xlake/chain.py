#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

import enum


@enum.unique
class Chain(enum.IntEnum):
    UNKNOWN = 0
    ETH = 1
    ETH_GOERLI = 5
    ETH_SEPOLIA = 11155111
