#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from .base import (
    TABLE_STATE,
    Store,
)
from .memory import Store_Memory
from .redis import Store_Redis
from .sql import Store_SQL
