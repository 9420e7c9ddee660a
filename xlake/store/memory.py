#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    Any,
    Iterable,
    Iterator,
    Optional,
    Tuple,
)

import copy

from xlake.types import TRecord

from .base import Store


class Store_Memory(Store):
    """
    Simple in-memory store

    Note: Records are copied on the way in and out, a caller never holds a reference to stored data.
    """

    def __init__(self, tables: Iterable[str]) -> None:
        super().__init__(tables)
        self._data = {table: {} for table in self.tables}

    def get(self, table: str, key: str) -> Optional[TRecord]:
        self._check_table(table)
        try:
            return copy.deepcopy(self._data[table][key])
        except KeyError:
            return None

    def set(self, table: str, key: str, value: TRecord) -> Any:
        self._check_table(table)
        self._data[table][key] = copy.deepcopy(value)

    def items(self, table: str) -> Iterator[Tuple[str, TRecord]]:
        self._check_table(table)
        for key, value in list(self._data[table].items()):
            yield key, copy.deepcopy(value)

    def ping(self) -> Any:
        return True

    def flush(self) -> Any:
        self._data = {table: {} for table in self.tables}
